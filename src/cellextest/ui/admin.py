"""Admin user management table and the ban-reason modal."""
from __future__ import annotations

import logging
import re
from typing import Optional

from selenium.common.exceptions import WebDriverException
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webelement import WebElement

from cellextest.core.polling import PollResult
from cellextest.errors import ElementNotFoundError

from .base import BasePage

logger = logging.getLogger(__name__)

BANNED_LABEL = "Bị khóa"
ACTIVE_LABEL = "Hoạt động"

_CONFIRM_TEXT = re.compile(r"khóa|xác nhận|confirm|ok", re.IGNORECASE)


class AdminUserManagementPage(BasePage):
    url = "/admin/users"

    user_table = (By.CSS_SELECTOR, ".ant-table")
    user_rows = (By.CSS_SELECTOR, ".ant-table-row")
    ban_modal = (By.CSS_SELECTOR, ".ant-modal")
    ban_reason_input = (By.CSS_SELECTOR, 'textarea[placeholder*="Nhập lý do khóa"]')
    modal_footer = (By.CSS_SELECTOR, ".ant-modal-footer")
    success_message = (By.CSS_SELECTOR, ".ant-message-success")

    ready_locator = user_table

    def find_user_row(self, email: str) -> Optional[WebElement]:
        """Row whose text contains ``email``, or None."""

        for row in self.find_all(self.user_rows):
            try:
                if email in row.text:
                    return row
            except WebDriverException:
                continue
        return None

    def wait_for_user_row(self, email: str, timeout_ms: Optional[int] = None) -> WebElement:
        result = self.poller.until(lambda: self.find_user_row(email), timeout_ms=timeout_ms, description=f"row {email}")
        if not result.ok:
            raise ElementNotFoundError(self.user_rows, timeout_ms if timeout_ms is not None else self.timeout_ms)
        return result.value

    def click_lock(self, email: str) -> None:
        self._click_row_action(email, "anticon-lock")

    def click_unlock(self, email: str) -> None:
        self._click_row_action(email, "anticon-unlock")

    def _click_row_action(self, email: str, icon: str) -> None:
        buttons = self.wait_for_user_row(email).find_elements(By.CSS_SELECTOR, "button")
        if not buttons:
            raise ElementNotFoundError((By.CSS_SELECTOR, "button"), 0)
        for button in buttons:
            if button.find_elements(By.CSS_SELECTOR, f".{icon}"):
                button.click()
                return
        logger.warning("no %s button for %s; clicking the first action", icon, email)
        buttons[0].click()

    def enter_ban_reason(self, reason: str) -> None:
        self.type(self.ban_reason_input, reason)
        self.driver.execute_script("arguments[0].blur();", self.find(self.ban_reason_input))

    def confirm(self) -> None:
        """Click the primary (or confirm-labelled) button in the modal footer."""

        footer = self.wait_for_visible(self.modal_footer)
        buttons = footer.find_elements(By.CSS_SELECTOR, "button")
        for button in buttons:
            classes = button.get_attribute("class") or ""
            if "ant-btn-primary" in classes or _CONFIRM_TEXT.search(button.text or ""):
                button.click()
                return
        if not buttons:
            raise ElementNotFoundError(self.modal_footer, 0)
        buttons[-1].click()

    def ban_user(self, email: str, reason: str) -> None:
        self.click_lock(email)
        self.wait_for_visible(self.ban_modal)
        self.enter_ban_reason(reason)
        self.confirm()

    def unban_user(self, email: str) -> None:
        self.click_unlock(email)
        if self.poller.until(lambda: self.is_displayed(self.modal_footer), timeout_ms=2000).ok:
            self.confirm()

    def user_status(self, email: str) -> str:
        row = self.wait_for_user_row(email)
        tags = row.find_elements(By.CSS_SELECTOR, ".ant-tag")
        if tags and tags[0].text:
            return tags[0].text
        text = (row.text or "").lower()
        if "khóa" in text or "banned" in text:
            return BANNED_LABEL
        if "hoạt động" in text or "active" in text:
            return ACTIVE_LABEL
        return row.text

    def is_user_banned(self, email: str) -> bool:
        status = self.user_status(email).lower()
        return "khóa" in status or "banned" in status

    def has_red_status_tag(self, email: str) -> bool:
        row = self.find_user_row(email)
        if row is None:
            return False
        return any("ant-tag-red" in (tag.get_attribute("class") or "") for tag in row.find_elements(By.CSS_SELECTOR, ".ant-tag"))

    def wait_for_user_status(self, email: str, banned: bool, timeout_ms: Optional[int] = None) -> PollResult:
        return self.poller.until(
            lambda: self.is_user_banned(email),
            lambda value: value is banned,
            timeout_ms=timeout_ms,
            description=f"{email} banned={banned}",
        )

    def wait_for_success_message(self, timeout_ms: Optional[int] = None) -> bool:
        return self.poller.until(lambda: self.is_displayed(self.success_message), timeout_ms=timeout_ms).ok

    def wait_for_modal_close(self, timeout_ms: Optional[int] = None) -> bool:
        return self.wait_for_element_not_visible(self.ban_modal, timeout_ms)
