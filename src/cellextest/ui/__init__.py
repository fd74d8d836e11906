"""Selenium page objects for the storefront, vendor and admin UIs."""
from __future__ import annotations

from .admin import AdminUserManagementPage
from .base import BasePage, Locator
from .chat import ChatPage
from .driver import create_driver
from .header import HeaderComponent
from .login import LoginPage, SignupPage
from .operations import UI_LOGIN, register_ui_operations
from .shop import CartPage, HomePage, ProductDetailPage
from .vendor import ProductForm, VendorProductPage

__all__ = [
    "AdminUserManagementPage",
    "BasePage",
    "CartPage",
    "ChatPage",
    "HeaderComponent",
    "HomePage",
    "Locator",
    "LoginPage",
    "ProductDetailPage",
    "ProductForm",
    "SignupPage",
    "UI_LOGIN",
    "VendorProductPage",
    "create_driver",
    "register_ui_operations",
]
