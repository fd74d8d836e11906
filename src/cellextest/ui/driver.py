"""WebDriver construction for Chrome and Edge."""
from __future__ import annotations

import logging
import os
from typing import Optional

from selenium import webdriver
from selenium.common.exceptions import WebDriverException
from selenium.webdriver.chrome.options import Options as ChromeOptions
from selenium.webdriver.chrome.service import Service as ChromeService
from selenium.webdriver.edge.options import Options as EdgeOptions
from selenium.webdriver.edge.service import Service as EdgeService
from webdriver_manager.chrome import ChromeDriverManager
from webdriver_manager.microsoft import EdgeChromiumDriverManager

from cellextest.config import Settings
from cellextest.errors import BrowserSetupError

logger = logging.getLogger(__name__)

BROWSERS = ("chrome", "edge")

_COMMON_ARGUMENTS = (
    "--no-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--window-size=1920,1080",
    "--disable-extensions",
)


def create_driver(settings: Settings) -> webdriver.Remote:
    """Start a browser session configured from ``settings``.

    The implicit wait stays at 0: element waits go through the condition
    poller so every wait has an explicit deadline.
    """

    browser = settings.browser
    if browser not in BROWSERS:
        raise BrowserSetupError(f"Unsupported browser '{browser}'. Expected one of {BROWSERS}")
    logger.info("starting %s (headless=%s) for %s", browser, settings.headless, settings.base_url)
    try:
        if browser == "edge":
            driver = _edge(settings)
        else:
            driver = _chrome(settings)
        driver.implicitly_wait(0)
        driver.set_page_load_timeout(settings.page_load_timeout_ms / 1000.0)
    except WebDriverException as exc:
        raise BrowserSetupError(f"Could not start {browser}: {exc.msg or exc}") from exc
    except (OSError, ValueError) as exc:
        raise BrowserSetupError(f"Could not start {browser}: {exc}") from exc
    return driver


def _chrome(settings: Settings) -> webdriver.Chrome:
    options = ChromeOptions()
    binary = settings.chrome_binary or _first_existing(
        "/usr/bin/chromium",
        "/usr/bin/chromium-browser",
        "/usr/bin/google-chrome",
        "/usr/bin/google-chrome-stable",
    )
    if binary:
        options.binary_location = binary
    _apply_arguments(options, settings.headless)
    options.add_argument("--disable-infobars")
    options.add_experimental_option("excludeSwitches", ["enable-logging"])
    driver_path = (
        settings.chromedriver
        or _first_existing("/usr/bin/chromedriver", "/usr/lib/chromium/chromedriver")
        or ChromeDriverManager().install()
    )
    return webdriver.Chrome(service=ChromeService(driver_path), options=options)


def _edge(settings: Settings) -> webdriver.Edge:
    options = EdgeOptions()
    _apply_arguments(options, settings.headless)
    driver_path = _first_existing("/usr/bin/msedgedriver") or EdgeChromiumDriverManager().install()
    return webdriver.Edge(service=EdgeService(driver_path), options=options)


def _apply_arguments(options, headless: bool) -> None:
    if headless:
        options.add_argument("--headless=new")
    for argument in _COMMON_ARGUMENTS:
        options.add_argument(argument)


def _first_existing(*paths: str) -> Optional[str]:
    for path in paths:
        if path and os.path.exists(path):
            return path
    return None
