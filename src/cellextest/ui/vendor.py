"""Vendor product list and the product form modal."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from selenium.webdriver.common.by import By

from cellextest.core.polling import PollResult
from cellextest.errors import ElementNotFoundError

from .base import BasePage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProductForm:
    name: str
    price: Optional[int] = None
    stock: Optional[int] = None
    category: Optional[str] = None
    description: Optional[str] = None


class VendorProductPage(BasePage):
    url = "/vendor/products"

    add_product_button = (By.XPATH, '//button[contains(., "Tạo sản phẩm") or contains(., "Thêm sản phẩm")]')
    product_modal = (By.CSS_SELECTOR, ".ant-modal")
    name_input = (By.CSS_SELECTOR, 'input[placeholder="Nhập tên sản phẩm"]')
    description_input = (
        By.CSS_SELECTOR,
        'textarea[id*="description"], textarea[name="description"], textarea[placeholder*="Mô tả"]',
    )
    price_input = (By.CSS_SELECTOR, ".ant-input-number-input")
    stock_input = (By.XPATH, '//label[contains(text(), "Tồn kho")]/..//input[@class="ant-input-number-input"]')
    category_select = (By.CSS_SELECTOR, ".ant-select-selector")
    category_options = (By.CSS_SELECTOR, ".ant-select-item-option")
    save_button = (By.XPATH, '//button[contains(., "Lưu sản phẩm") or contains(., "Lưu") or contains(., "Save")]')
    cancel_button = (By.XPATH, '//button[contains(., "Hủy") or contains(., "Cancel")]')
    success_message = (By.CSS_SELECTOR, ".ant-message-success")
    product_rows = (By.CSS_SELECTOR, ".ant-table-row")

    ready_locator = add_product_button

    def click_add_product(self) -> None:
        self.click(self.add_product_button)
        self.wait_for_visible(self.product_modal)

    def select_category(self, name: Optional[str] = None) -> str:
        """Pick the option labelled ``name``; the first option when absent or unmatched."""

        self.click(self.category_select)
        options = self.poller.until(
            lambda: self.find_all(self.category_options),
            description="category options",
        )
        if not options.ok:
            raise ElementNotFoundError(self.category_options, self.timeout_ms)
        choices = options.value
        chosen = next((option for option in choices if name and name in option.text), None)
        if chosen is None:
            if name:
                logger.warning("category '%s' not offered; using the first option", name)
            chosen = choices[0]
        label = chosen.text
        chosen.click()
        return label

    def fill(self, form: ProductForm) -> None:
        self.type(self.name_input, form.name)
        self.select_category(form.category)
        if form.price is not None:
            self.type(self.price_input, str(form.price))
        if form.stock is not None:
            self.type(self.stock_input, str(form.stock))
        if form.description:
            self.type(self.description_input, form.description)

    def save(self) -> None:
        self.click(self.save_button)

    def create_product(self, form: ProductForm) -> None:
        self.click_add_product()
        self.fill(form)
        self.save()

    def wait_for_success_message(self, timeout_ms: Optional[int] = None) -> bool:
        return self.poller.until(lambda: self.is_displayed(self.success_message), timeout_ms=timeout_ms).ok

    def wait_for_modal_close(self, timeout_ms: Optional[int] = None) -> bool:
        return self.wait_for_element_not_visible(self.product_modal, timeout_ms)

    def is_product_in_list(self, name: str) -> bool:
        return any(name in row.text for row in self.find_all(self.product_rows))

    def wait_for_product_in_list(self, name: str, timeout_ms: Optional[int] = None) -> PollResult:
        return self.poller.until(lambda: self.is_product_in_list(name), timeout_ms=timeout_ms, description=f"product {name}")
