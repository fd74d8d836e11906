"""Storefront pages: home listing, product detail and cart."""
from __future__ import annotations

from typing import Optional

from selenium.webdriver.common.by import By

from cellextest.core.polling import PollResult

from .base import BasePage


class HomePage(BasePage):
    url = "/"

    main_container = (By.CSS_SELECTOR, ".bg-gray-50.min-h-screen")
    product_cards = (By.CSS_SELECTOR, ".ant-card-hoverable")
    product_links = (By.CSS_SELECTOR, 'a[href*="/products/"]')
    loading_spinner = (By.CSS_SELECTOR, ".ant-spin")

    ready_locator = main_container

    def product_count(self) -> int:
        return self.count(self.product_links) or self.count(self.product_cards)

    def wait_for_products_loaded(self, timeout_ms: Optional[int] = None) -> PollResult:
        return self.poller.until(
            self.product_count,
            lambda count: count > 0,
            timeout_ms=timeout_ms,
            description="products listed",
        )

    def click_first_product(self) -> None:
        """Open the first product; falls back to the card when no link is rendered."""

        self.wait_for_products_loaded().unwrap("products listed")
        links = self.find_all(self.product_links)
        if links:
            links[0].click()
            return
        self.find_all(self.product_cards)[0].click()


class ProductDetailPage(BasePage):
    add_to_cart_button = (By.CSS_SELECTOR, 'button[aria-label="Thêm vào giỏ"]')
    product_title = (By.CSS_SELECTOR, "h1")

    ready_locator = add_to_cart_button

    def open_product(self, product_id: str) -> None:
        self.navigate(f"/products/{product_id}")
        self.wait_for_element(self.add_to_cart_button)

    def wait_until_loaded(self, timeout_ms: Optional[int] = None) -> PollResult:
        return self.wait_for_url_contains("/products/", timeout_ms)

    def add_to_cart(self) -> None:
        self.click(self.add_to_cart_button)

    def title(self) -> str:
        return self.get_text(self.product_title)


class CartPage(BasePage):
    url = "/cart"

    cart_items = (By.CSS_SELECTOR, ".ant-list-item")

    def item_count(self) -> int:
        return self.count(self.cart_items)

    def wait_for_item_count(self, expected: int, timeout_ms: Optional[int] = None) -> PollResult:
        return self.poller.until(
            self.item_count,
            lambda count: count == expected,
            timeout_ms=timeout_ms,
            description=f"cart has exactly {expected} item(s)",
        )
