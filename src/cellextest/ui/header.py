"""Site header: cart badge and account links."""
from __future__ import annotations

from typing import Optional

from selenium.common.exceptions import WebDriverException
from selenium.webdriver.common.by import By

from cellextest.core.polling import PollResult

from .base import BasePage


class HeaderComponent(BasePage):
    """Not a page of its own; shares the driver of whatever page is open."""

    cart_badge = (By.CSS_SELECTOR, ".ant-badge .ant-badge-count, sup.ant-badge-count")
    cart_link = (By.CSS_SELECTOR, 'a[href="/cart"]')
    account_link = (By.CSS_SELECTOR, 'a[href="/account"]')
    login_link = (By.CSS_SELECTOR, 'a[href="/login"]')

    def cart_badge_count(self) -> int:
        """Number shown on the cart badge; 0 when the badge is absent."""

        try:
            text = self.find(self.cart_badge).text.strip()
        except WebDriverException:
            return 0
        digits = "".join(ch for ch in text if ch.isdigit())
        return int(digits) if digits else 0

    def wait_for_cart_badge_count(self, expected: int, timeout_ms: Optional[int] = None) -> PollResult:
        return self.poller.until(
            self.cart_badge_count,
            lambda count: count == expected,
            timeout_ms=timeout_ms,
            description=f"cart badge == {expected}",
        )

    def open_cart(self) -> None:
        self.click(self.cart_link)

    def is_user_authenticated(self) -> bool:
        return self.is_displayed(self.account_link)
