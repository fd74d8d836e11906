from __future__ import annotations

import time

from cellextest.ui import ProductForm, VendorProductPage


def test_vendor_creates_product(driver, settings, poller, login_as) -> None:
    login_as("vendor")
    page = VendorProductPage(driver, settings, poller=poller)
    page.open()

    form = ProductForm(
        name=f"Test Product {int(time.time() * 1000)}",
        price=15000000,
        stock=50,
        category=settings.category_name,
        description="Sản phẩm tạo bởi kiểm thử tự động",
    )
    page.create_product(form)
    assert page.wait_for_success_message() or page.wait_for_modal_close()
    assert page.wait_for_product_in_list(form.name).ok
