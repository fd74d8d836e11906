"""Login and signup forms."""
from __future__ import annotations

from typing import Dict, Optional

from selenium.webdriver.common.by import By

from cellextest.core.polling import PollResult

from .base import BasePage

ERROR_TOAST_TIMEOUT_MS = 3000


class LoginPage(BasePage):
    url = "/login"

    login_form = (By.CSS_SELECTOR, "form.w-full.max-w-sm")
    email_input = (By.CSS_SELECTOR, 'input[placeholder="Nhập email hoặc số điện thoại"]')
    password_input = (By.CSS_SELECTOR, 'input[placeholder="Nhập mật khẩu"]')
    toggle_password_button = (By.CSS_SELECTOR, 'button[aria-label*="mật khẩu"]')
    login_button = (By.CSS_SELECTOR, 'button[type="submit"]')
    forgot_password_link = (By.XPATH, '//button[contains(text(), "Quên mật khẩu")]')
    signup_link = (By.XPATH, '//button[contains(text(), "Đăng ký")]')
    page_title = (By.XPATH, '//h2[contains(text(), "Đăng nhập")]')
    error_message = (By.CSS_SELECTOR, ".ant-message-error")
    loading_spinner = (By.CSS_SELECTOR, 'button[type="submit"] svg.animate-spin')

    ready_locator = login_form

    def enter_email(self, email: str) -> None:
        self.type(self.email_input, email)

    def enter_password(self, password: str) -> None:
        self.type(self.password_input, password)

    def click_login(self) -> None:
        self.click(self.login_button)

    def login(self, email: str, password: str) -> None:
        self.enter_email(email)
        self.enter_password(password)
        self.click_login()

    def click_signup(self) -> None:
        self.click(self.signup_link)

    def click_forgot_password(self) -> None:
        self.click(self.forgot_password_link)

    def is_login_form_displayed(self) -> bool:
        return self.is_displayed(self.login_form)

    def is_error_displayed(self, timeout_ms: int = ERROR_TOAST_TIMEOUT_MS) -> bool:
        return self.poller.until(lambda: self.is_displayed(self.error_message), timeout_ms=timeout_ms).ok

    def error_text(self, timeout_ms: int = ERROR_TOAST_TIMEOUT_MS) -> str:
        return self.get_text(self.error_message, timeout_ms)

    def wait_for_login_success(self, timeout_ms: Optional[int] = None) -> PollResult:
        """Succeeds once the browser has left ``/login``."""

        return self.wait_for_url_not_contains("/login", timeout_ms)

    def required_fields(self) -> Dict[str, bool]:
        return {
            "email": self.is_required(self.email_input),
            "password": self.is_required(self.password_input),
        }


class SignupPage(BasePage):
    url = "/signup"

    signup_form = (By.CSS_SELECTOR, "form.w-full.max-w-sm")
    full_name_input = (By.CSS_SELECTOR, 'input[placeholder="Nhập họ và tên"]')
    email_input = (By.CSS_SELECTOR, 'input[placeholder="Nhập email"]')
    phone_input = (By.CSS_SELECTOR, 'input[placeholder="Nhập số điện thoại"]')
    password_input = (By.CSS_SELECTOR, 'input[placeholder="Tạo mật khẩu"]')
    confirm_password_input = (By.CSS_SELECTOR, 'input[placeholder="Xác nhận mật khẩu"]')
    signup_button = (By.CSS_SELECTOR, 'button[type="submit"]')
    login_link = (By.XPATH, '//button[contains(text(), "Đăng nhập")]')
    page_title = (By.XPATH, '//h2[contains(text(), "Tạo tài khoản")]')
    inline_error = (By.CSS_SELECTOR, ".text-red-500")
    toast_error = (By.CSS_SELECTOR, ".ant-message-error")

    ready_locator = signup_form

    def fill(
        self,
        *,
        full_name: str,
        email: str,
        phone: str,
        password: str,
        confirm_password: Optional[str] = None,
    ) -> None:
        self.type(self.full_name_input, full_name)
        self.type(self.email_input, email)
        self.type(self.phone_input, phone)
        self.type(self.password_input, password)
        self.type(self.confirm_password_input, confirm_password if confirm_password is not None else password)

    def submit(self) -> None:
        self.click(self.signup_button)

    def is_error_displayed(self, timeout_ms: int = ERROR_TOAST_TIMEOUT_MS) -> bool:
        probe = lambda: self.is_displayed(self.inline_error) or self.is_displayed(self.toast_error)  # noqa: E731
        return self.poller.until(probe, timeout_ms=timeout_ms).ok

    def wait_for_otp_redirect(self, timeout_ms: Optional[int] = None) -> PollResult:
        return self.wait_for_url_contains("/otp", timeout_ms)

    def required_fields(self) -> Dict[str, bool]:
        return {
            "full_name": self.is_required(self.full_name_input),
            "email": self.is_required(self.email_input),
            "phone": self.is_required(self.phone_input),
            "password": self.is_required(self.password_input),
            "confirm_password": self.is_required(self.confirm_password_input),
        }
