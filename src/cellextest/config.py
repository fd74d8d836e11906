"""Runtime settings resolved from the environment and optional ``.env`` files."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional

from dotenv import dotenv_values

DEFAULT_API_URL = "http://localhost:8080/api"
DEFAULT_BASE_URL = "http://localhost:5173"

ROLES = ("admin", "user", "vendor", "banned", "target", "chat")

_DEFAULT_ACCOUNTS = {
    "admin": ("admin@gmail.com", "password123"),
    "user": ("user@gmail.com", "password123"),
    "vendor": ("vendor@gmail.com", "password123"),
    "banned": ("banned@gmail.com", "Password123"),
    "target": ("user@gmail.com", ""),
    "chat": ("admin@gmail.com", "password123"),
}

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Credentials:
    email: str
    password: str


@dataclass(frozen=True)
class Settings:
    """Already-resolved parameters handed to the harness components."""

    api_url: str = DEFAULT_API_URL
    base_url: str = DEFAULT_BASE_URL
    request_timeout_ms: int = 30000
    implicit_wait_ms: int = 10000
    page_load_timeout_ms: int = 30000
    poll_interval_ms: int = 500
    browser: str = "chrome"
    headless: bool = False
    debug: bool = False
    screenshot_dir: Path = Path("reports")
    chrome_binary: Optional[str] = None
    chromedriver: Optional[str] = None
    accounts: Mapping[str, Credentials] = field(
        default_factory=lambda: {role: Credentials(*pair) for role, pair in _DEFAULT_ACCOUNTS.items()}
    )
    category_id: Optional[str] = None
    category_name: str = "Điện thoại"
    product_id: Optional[str] = None
    email_domain: str = "gmail.com"

    def account(self, role: str) -> Credentials:
        try:
            return self.accounts[role]
        except KeyError as exc:
            known = ", ".join(sorted(self.accounts))
            raise KeyError(f"Unknown account role '{role}'. Known roles: {known}") from exc


def load_settings(env_file: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings from a ``.env`` file overlaid by the process environment."""

    values: Dict[str, str] = {}
    dotenv_path = Path(env_file) if env_file else Path(".env")
    if dotenv_path.is_file():
        values.update({k: v for k, v in dotenv_values(dotenv_path).items() if v is not None})
    elif env_file:
        raise FileNotFoundError(f"env file not found: {env_file}")
    values.update(environ if environ is not None else os.environ)

    return Settings(
        api_url=values.get("API_URL", DEFAULT_API_URL),
        base_url=values.get("BASE_URL", DEFAULT_BASE_URL),
        request_timeout_ms=_int(values, "API_TIMEOUT", 30000),
        implicit_wait_ms=_int(values, "IMPLICIT_WAIT", 10000),
        page_load_timeout_ms=_int(values, "PAGE_LOAD_TIMEOUT", 30000),
        poll_interval_ms=_int(values, "POLL_INTERVAL", 500),
        browser=values.get("BROWSER", "chrome").strip().lower(),
        headless=_bool(values, "HEADLESS"),
        debug=_bool(values, "DEBUG"),
        screenshot_dir=Path(values.get("SCREENSHOT_DIR", "reports")),
        chrome_binary=values.get("CHROME_BINARY") or None,
        chromedriver=values.get("CHROMEDRIVER") or None,
        accounts=_accounts(values),
        category_id=values.get("CATEGORY_ID") or None,
        category_name=values.get("CATEGORY_NAME", "Điện thoại"),
        product_id=values.get("PRODUCT_ID") or None,
        email_domain=values.get("TEST_EMAIL_DOMAIN", "gmail.com"),
    )


def _accounts(values: Mapping[str, str]) -> Dict[str, Credentials]:
    accounts: Dict[str, Credentials] = {}
    for role in ROLES:
        default_email, default_password = _DEFAULT_ACCOUNTS[role]
        prefix = f"TEST_{role.upper()}"
        email = values.get(f"{prefix}_EMAIL")
        password = values.get(f"{prefix}_PASSWORD")
        if role == "vendor":
            email = email or values.get("VENDOR_EMAIL")
            password = password or values.get("VENDOR_PASSWORD")
        if role == "target" and not email:
            email = values.get("TEST_USER_EMAIL")
        accounts[role] = Credentials(email=email or default_email, password=password or default_password)
    return accounts


def _int(values: Mapping[str, str], key: str, default: int) -> int:
    raw = values.get(key)
    if raw is None or not str(raw).strip():
        return default
    try:
        return int(str(raw).strip())
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer (got {raw!r})") from exc


def _bool(values: Mapping[str, str], key: str) -> bool:
    return str(values.get(key, "")).strip().lower() in _TRUE_VALUES
