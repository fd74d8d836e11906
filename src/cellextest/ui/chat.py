"""Chat window shared by the vendor, customer and admin layouts."""
from __future__ import annotations

import logging
from typing import Optional, Sequence

from selenium.webdriver.common.by import By

from cellextest.core.polling import PollResult

from .base import BasePage

logger = logging.getLogger(__name__)

VENDOR_CHAT_PATHS = ("/vendor/chat", "/vendor/messages", "/vendor/conversations", "/messages", "/chats", "/chat")
ACCOUNT_CHAT_PATHS = ("/account?tab=messages", "/account/messages", "/messages")
ADMIN_CHAT_PATHS = ("/admin/chat", "/admin/messages", "/admin/conversations", "/messages", "/chats")

LANDING_TIMEOUT_MS = 3000


class ChatPage(BasePage):
    chat_window = (By.CSS_SELECTOR, r".flex-1.flex.flex-col.h-full.bg-\[\#f0f2f5\]")
    empty_chat = (By.XPATH, '//span[contains(text(), "Chọn một cuộc hội thoại")]')
    partner_name = (By.CSS_SELECTOR, "h3.font-bold.text-gray-800")
    message_input = (By.CSS_SELECTOR, 'textarea[placeholder="Nhập tin nhắn..."]')
    send_button = (
        By.XPATH,
        '//button[contains(@class, "ant-btn-primary") and .//*[contains(@class, "anticon-send")]]',
    )
    message_bubbles = (By.CSS_SELECTOR, '[class*="message-bubble"], .flex.items-end, .flex.items-start')

    def open_vendor_chat(self) -> str:
        return self._open_first(VENDOR_CHAT_PATHS)

    def open_account_messages(self) -> str:
        return self._open_first(ACCOUNT_CHAT_PATHS)

    def open_admin_chat(self) -> str:
        return self._open_first(ADMIN_CHAT_PATHS)

    def _open_first(self, paths: Sequence[str]) -> str:
        """Navigate through ``paths`` until one renders the chat layout.

        Returns the path that worked; raises ``ElementNotFoundError`` via
        ``wait_for_element`` when none does.
        """

        for path in paths:
            self.navigate(path)
            if self.is_chat_ready(LANDING_TIMEOUT_MS):
                logger.info("chat opened at %s", path)
                return path
            logger.debug("no chat layout at %s", path)
        self.wait_for_element(self.chat_window, LANDING_TIMEOUT_MS)
        return paths[-1]

    def is_chat_ready(self, timeout_ms: Optional[int] = None) -> bool:
        probe = lambda: self.is_displayed(self.chat_window) or self.is_displayed(self.empty_chat)  # noqa: E731
        return self.poller.until(probe, timeout_ms=timeout_ms, description="chat layout").ok

    def is_conversation_open(self) -> bool:
        return self.is_displayed(self.message_input)

    def type_message(self, text: str) -> None:
        self.type(self.message_input, text)

    def click_send(self) -> None:
        self.click(self.send_button)

    def send_message(self, text: str) -> None:
        self.type_message(text)
        self.click_send()

    def message_count(self) -> int:
        return self.count(self.message_bubbles)

    def wait_for_message_count(self, expected: int, timeout_ms: Optional[int] = None) -> PollResult:
        return self.poller.until(
            self.message_count,
            lambda count: count == expected,
            timeout_ms=timeout_ms,
            description=f"exactly {expected} message(s)",
        )

    def wait_for_message(self, text: str, timeout_ms: Optional[int] = None) -> PollResult:
        locator = (By.XPATH, f'//*[contains(text(), "{text}")]')
        return self.poller.until(lambda: self.is_displayed(locator), timeout_ms=timeout_ms, description=f"message {text}")

    def input_value(self) -> str:
        return self.attribute(self.message_input, "value") or ""
