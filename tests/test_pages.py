from __future__ import annotations

from typing import Dict, List, Tuple
from unittest import mock

import pytest
from selenium.common.exceptions import NoSuchElementException
from selenium.webdriver.common.by import By

from cellextest.config import Settings
from cellextest.core.dispatch import NamedOperationDispatcher, OperationRegistry
from cellextest.core.models import Operation
from cellextest.core.polling import Poller
from cellextest.errors import DispatchError, ElementNotFoundError
from cellextest.ui import (
    AdminUserManagementPage,
    CartPage,
    ChatPage,
    HeaderComponent,
    HomePage,
    LoginPage,
    ProductForm,
    VendorProductPage,
    register_ui_operations,
)

SETTINGS = Settings(base_url="http://shop.test/")


def _element(text: str = "", displayed: bool = True, **attributes) -> mock.MagicMock:
    element = mock.MagicMock()
    element.text = text
    element.is_displayed.return_value = displayed
    element.get_attribute.side_effect = lambda name: attributes.get(name)
    return element


class FakeDriver:
    """Serves elements from a locator table; missing locators raise like Selenium."""

    def __init__(self, elements: Dict[Tuple[str, str], object] | None = None, url: str = "http://shop.test/") -> None:
        self.elements = dict(elements or {})
        self.current_url = url
        self.visited: List[str] = []
        self.scripts: List[str] = []

    def get(self, url: str) -> None:
        self.visited.append(url)
        self.current_url = url

    def find_element(self, by: str, value: str):
        found = self.elements.get((by, value))
        if found is None or found == []:
            raise NoSuchElementException(value)
        return found[0] if isinstance(found, list) else found

    def find_elements(self, by: str, value: str):
        found = self.elements.get((by, value), [])
        return list(found) if isinstance(found, list) else [found]

    def execute_script(self, script: str, *args) -> None:
        self.scripts.append(script)

    def save_screenshot(self, path: str) -> bool:
        return True

    def quit(self) -> None:
        pass


def test_navigate_and_open_wait_for_ready_locator(poller: Poller) -> None:
    driver = FakeDriver({LoginPage.login_form: _element()})
    page = LoginPage(driver, SETTINGS, poller=poller)
    page.open()
    assert driver.visited == ["http://shop.test/login"]


def test_wait_for_element_times_out(poller: Poller) -> None:
    page = LoginPage(FakeDriver(), SETTINGS, poller=poller)
    with pytest.raises(ElementNotFoundError):
        page.wait_for_element(LoginPage.login_form, timeout_ms=300)
    assert not page.is_displayed(LoginPage.login_form)
    assert page.wait_for_element_not_visible(LoginPage.login_form)


def test_login_types_credentials_and_submits(poller: Poller) -> None:
    email, password, button = _element(), _element(), _element()
    driver = FakeDriver(
        {LoginPage.email_input: email, LoginPage.password_input: password, LoginPage.login_button: button}
    )
    LoginPage(driver, SETTINGS, poller=poller).login("user@gmail.com", "password123")
    email.send_keys.assert_called_once_with("user@gmail.com")
    password.send_keys.assert_called_once_with("password123")
    button.click.assert_called_once()


def test_login_redirect_wait(poller: Poller) -> None:
    driver = FakeDriver(url="http://shop.test/login")
    page = LoginPage(driver, SETTINGS, poller=poller)
    stuck = page.wait_for_login_success(timeout_ms=500)
    assert not stuck.ok
    assert stuck.last_value == "http://shop.test/login"
    driver.current_url = "http://shop.test/"
    assert page.wait_for_login_success().ok


def test_required_fields(poller: Poller) -> None:
    driver = FakeDriver(
        {
            LoginPage.email_input: _element(required="true"),
            LoginPage.password_input: _element(**{"aria-required": "true"}),
        }
    )
    assert LoginPage(driver, SETTINGS, poller=poller).required_fields() == {"email": True, "password": True}


def test_cart_badge_count(poller: Poller) -> None:
    header = HeaderComponent(FakeDriver(), SETTINGS, poller=poller)
    assert header.cart_badge_count() == 0
    header.driver.elements[HeaderComponent.cart_badge] = _element("12")
    assert header.cart_badge_count() == 12
    assert header.wait_for_cart_badge_count(12).ok
    assert not header.wait_for_cart_badge_count(13, timeout_ms=200).ok


def test_home_falls_back_to_cards(poller: Poller) -> None:
    card = _element()
    page = HomePage(FakeDriver({HomePage.product_cards: [card]}), SETTINGS, poller=poller)
    assert page.product_count() == 1
    page.click_first_product()
    card.click.assert_called_once()


def test_chat_tries_candidate_paths(poller: Poller) -> None:
    driver = FakeDriver()
    original_get = driver.get

    def get(url: str) -> None:
        original_get(url)
        if url.endswith("/vendor/messages"):
            driver.elements[ChatPage.empty_chat] = _element("Chọn một cuộc hội thoại")

    driver.get = get
    page = ChatPage(driver, SETTINGS, poller=poller)
    assert page.open_vendor_chat() == "/vendor/messages"
    assert driver.visited == ["http://shop.test/vendor/chat", "http://shop.test/vendor/messages"]


def test_chat_message_count(poller: Poller) -> None:
    driver = FakeDriver({ChatPage.message_bubbles: [_element("hi"), _element("there")]})
    page = ChatPage(driver, SETTINGS, poller=poller)
    assert page.message_count() == 2
    assert page.wait_for_message_count(2).ok
    assert not page.wait_for_message_count(3, timeout_ms=200).ok
    assert not page.wait_for_message_count(1, timeout_ms=200).ok


def test_cart_item_count_wait_is_exact(poller: Poller) -> None:
    driver = FakeDriver({CartPage.cart_items: [_element("A"), _element("B")]})
    page = CartPage(driver, SETTINGS, poller=poller)
    assert page.item_count() == 2
    assert page.wait_for_item_count(2).ok
    assert not page.wait_for_item_count(1, timeout_ms=200).ok


def _row(text: str, tag_text: str, tag_class: str, buttons: List[mock.MagicMock]) -> mock.MagicMock:
    row = _element(text)
    tag = _element(tag_text, **{"class": tag_class})

    def find_elements(by: str, value: str):
        if value == ".ant-tag":
            return [tag]
        if value == "button":
            return buttons
        return []

    row.find_elements.side_effect = find_elements
    return row


def _icon_button(icon: str) -> mock.MagicMock:
    button = _element()
    button.find_elements.side_effect = lambda by, value: [mock.MagicMock()] if value == f".{icon}" else []
    return button


def test_admin_row_lookup_and_status(poller: Poller) -> None:
    unlock, lock = _icon_button("anticon-unlock"), _icon_button("anticon-lock")
    banned = _row("Target User target@gmail.com", "Bị khóa", "ant-tag ant-tag-red", [unlock])
    active = _row("Other other@gmail.com", "Hoạt động", "ant-tag ant-tag-green", [_icon_button("anticon-message"), lock])
    page = AdminUserManagementPage(FakeDriver({AdminUserManagementPage.user_rows: [active, banned]}), SETTINGS, poller=poller)
    assert page.find_user_row("target@gmail.com") is banned
    assert page.find_user_row("nobody@gmail.com") is None
    assert page.user_status("target@gmail.com") == "Bị khóa"
    assert page.is_user_banned("target@gmail.com")
    assert page.has_red_status_tag("target@gmail.com")
    assert not page.has_red_status_tag("other@gmail.com")
    page.click_lock("other@gmail.com")
    lock.click.assert_called_once()
    page.click_unlock("target@gmail.com")
    unlock.click.assert_called_once()


def test_admin_status_falls_back_to_row_text(poller: Poller) -> None:
    row = _row("Someone a@b.c Hoạt động", "", "ant-tag", [])
    page = AdminUserManagementPage(FakeDriver({AdminUserManagementPage.user_rows: [row]}), SETTINGS, poller=poller)
    assert page.user_status("a@b.c") == "Hoạt động"
    assert not page.is_user_banned("a@b.c")


def test_admin_confirm_prefers_primary_button(poller: Poller) -> None:
    cancel = _element("Hủy", **{"class": "ant-btn"})
    confirm = _element("Khóa", **{"class": "ant-btn ant-btn-primary"})
    footer = _element()
    footer.find_elements.return_value = [cancel, confirm]
    page = AdminUserManagementPage(FakeDriver({AdminUserManagementPage.modal_footer: footer}), SETTINGS, poller=poller)
    page.confirm()
    confirm.click.assert_called_once()
    cancel.click.assert_not_called()


def test_vendor_category_falls_back_to_first_option(poller: Poller) -> None:
    phones, laptops = _element("Điện thoại"), _element("Laptop")
    driver = FakeDriver(
        {
            VendorProductPage.category_select: _element(),
            VendorProductPage.category_options: [phones, laptops],
        }
    )
    page = VendorProductPage(driver, SETTINGS, poller=poller)
    assert page.select_category("Laptop") == "Laptop"
    laptops.click.assert_called_once()
    assert page.select_category("Máy ảnh") == "Điện thoại"
    phones.click.assert_called_once()


def test_vendor_product_listed(poller: Poller) -> None:
    driver = FakeDriver({VendorProductPage.product_rows: [_element("Cellex Phone 1 100.000đ")]})
    page = VendorProductPage(driver, SETTINGS, poller=poller)
    assert page.is_product_in_list("Cellex Phone 1")
    assert not page.wait_for_product_in_list("Cellex Phone 2", timeout_ms=200).ok
    assert ProductForm(name="x").price is None


def test_ui_login_operation() -> None:
    page = mock.Mock(spec=LoginPage)
    page.url = "/login"
    page.current_url.return_value = "http://shop.test/"
    page.wait_for_login_success.return_value = mock.Mock(ok=True)
    registry = OperationRegistry()
    register_ui_operations(registry, page)
    dispatcher = NamedOperationDispatcher(registry)

    response = dispatcher.dispatch(Operation(name="ui.login"), {"email": "user@gmail.com", "password": "pw"})
    assert response.status == 200
    page.login.assert_called_once_with("user@gmail.com", "pw")

    page.wait_for_login_success.return_value = mock.Mock(ok=False)
    page.is_error_displayed.return_value = True
    page.error_text.return_value = "Tài khoản đã bị khóa"
    with pytest.raises(DispatchError) as exc:
        dispatcher.dispatch(Operation(name="ui.login"), {"email": "banned@gmail.com", "password": "pw"})
    assert exc.value.status == 401
    assert exc.value.message == "Tài khoản đã bị khóa"


def test_screenshot_goes_to_configured_dir(tmp_path, poller: Poller) -> None:
    settings = Settings(screenshot_dir=tmp_path / "shots")
    page = LoginPage(FakeDriver(), settings, poller=poller)
    path = page.take_screenshot("login_failure")
    assert path == tmp_path / "shots" / "login_failure.png"
    assert path.parent.is_dir()


def test_locators_are_by_tuples() -> None:
    assert LoginPage.email_input == (By.CSS_SELECTOR, 'input[placeholder="Nhập email hoặc số điện thoại"]')
    assert ChatPage.send_button[0] == By.XPATH
