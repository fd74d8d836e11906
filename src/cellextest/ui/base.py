"""Base page object; every wait goes through the condition poller."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from selenium.common.exceptions import WebDriverException
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement

from cellextest.config import Settings
from cellextest.core.polling import Poller, PollResult
from cellextest.errors import ElementNotFoundError

logger = logging.getLogger(__name__)

Locator = Tuple[str, str]


class BasePage:
    """Common navigation, lookup and wait helpers for page objects."""

    url = ""
    ready_locator: Optional[Locator] = None

    def __init__(
        self,
        driver: WebDriver,
        settings: Optional[Settings] = None,
        *,
        poller: Optional[Poller] = None,
    ) -> None:
        settings = settings or Settings()
        self.driver = driver
        self.settings = settings
        self.base_url = settings.base_url.rstrip("/")
        self.timeout_ms = settings.implicit_wait_ms
        self.poller = poller or Poller(interval_ms=settings.poll_interval_ms, timeout_ms=settings.implicit_wait_ms)

    def navigate(self, path: str = "") -> None:
        self.driver.get(f"{self.base_url}{path}")

    def open(self) -> None:
        self.navigate(self.url)
        if self.ready_locator is not None:
            self.wait_for_element(self.ready_locator)

    def find(self, locator: Locator) -> WebElement:
        return self.driver.find_element(*locator)

    def find_all(self, locator: Locator) -> List[WebElement]:
        return self.driver.find_elements(*locator)

    def count(self, locator: Locator) -> int:
        return len(self.find_all(locator))

    def wait_for_element(self, locator: Locator, timeout_ms: Optional[int] = None) -> WebElement:
        """Wait until ``locator`` is present in the DOM."""

        result = self.poller.until(lambda: self.find(locator), timeout_ms=timeout_ms, description=f"element {locator[1]}")
        if not result.ok:
            raise ElementNotFoundError(locator, timeout_ms if timeout_ms is not None else self.timeout_ms)
        return result.value

    def wait_for_visible(self, locator: Locator, timeout_ms: Optional[int] = None) -> WebElement:
        def visible() -> Optional[WebElement]:
            element = self.find(locator)
            return element if element.is_displayed() else None

        result = self.poller.until(visible, timeout_ms=timeout_ms, description=f"visible {locator[1]}")
        if not result.ok:
            raise ElementNotFoundError(locator, timeout_ms if timeout_ms is not None else self.timeout_ms)
        return result.value

    def wait_for_element_not_visible(self, locator: Locator, timeout_ms: Optional[int] = None) -> bool:
        def hidden() -> bool:
            try:
                return not self.find(locator).is_displayed()
            except WebDriverException:
                return True

        return self.poller.until(hidden, timeout_ms=timeout_ms, description=f"hidden {locator[1]}").ok

    def click(self, locator: Locator) -> None:
        self.wait_for_visible(locator).click()

    def type(self, locator: Locator, text: str) -> None:
        element = self.wait_for_element(locator)
        element.clear()
        element.send_keys(text)

    def get_text(self, locator: Locator, timeout_ms: Optional[int] = None) -> str:
        return self.wait_for_element(locator, timeout_ms).text

    def is_displayed(self, locator: Locator) -> bool:
        try:
            return self.find(locator).is_displayed()
        except WebDriverException:
            return False

    def attribute(self, locator: Locator, name: str) -> Optional[str]:
        return self.wait_for_element(locator).get_attribute(name)

    def is_required(self, locator: Locator) -> bool:
        element = self.wait_for_element(locator)
        return element.get_attribute("required") is not None or element.get_attribute("aria-required") == "true"

    def current_url(self) -> str:
        return self.driver.current_url

    def wait_for_url_contains(self, fragment: str, timeout_ms: Optional[int] = None) -> PollResult:
        return self.poller.until(
            self.current_url,
            lambda url: fragment in url,
            timeout_ms=timeout_ms,
            description=f"url contains {fragment}",
        )

    def wait_for_url_not_contains(self, fragment: str, timeout_ms: Optional[int] = None) -> PollResult:
        return self.poller.until(
            self.current_url,
            lambda url: fragment not in url,
            timeout_ms=timeout_ms,
            description=f"url leaves {fragment}",
        )

    def take_screenshot(self, name: str) -> Path:
        directory = Path(self.settings.screenshot_dir)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{name}.png"
        self.driver.save_screenshot(str(path))
        logger.info("screenshot saved to %s", path)
        return path

    def close(self) -> None:
        self.driver.quit()
