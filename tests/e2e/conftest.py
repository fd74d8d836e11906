"""Fixtures for scenarios that drive a real browser and backend."""
import os
from typing import Iterator

import pytest

from cellextest.api.client import ApiClient
from cellextest.config import Settings, load_settings
from cellextest.core.polling import Poller
from cellextest.ui import LoginPage, create_driver

E2E_ENV = "CELLEX_E2E"


def pytest_collection_modifyitems(config, items) -> None:
    enabled = os.environ.get(E2E_ENV) == "1"
    skip = pytest.mark.skip(reason=f"set {E2E_ENV}=1 to run browser and live-backend scenarios")
    here = os.path.dirname(__file__)
    for item in items:
        if not str(item.path).startswith(here):
            continue
        item.add_marker(pytest.mark.e2e)
        if not enabled:
            item.add_marker(skip)


@pytest.fixture(scope="session")
def settings() -> Settings:
    return load_settings(os.environ.get("CELLEX_ENV_FILE"))


@pytest.fixture
def poller(settings: Settings) -> Poller:
    return Poller(interval_ms=settings.poll_interval_ms, timeout_ms=settings.implicit_wait_ms)


@pytest.fixture
def driver(settings: Settings, request) -> Iterator[object]:
    browser = create_driver(settings)
    yield browser
    report = getattr(request.node, "rep_call", None)
    if report is not None and report.failed:
        LoginPage(browser, settings).take_screenshot(request.node.name)
    browser.quit()


@pytest.fixture
def api(settings: Settings) -> Iterator[ApiClient]:
    client = ApiClient.from_settings(settings)
    yield client
    client.auth.clear()
    client.close()


@pytest.fixture
def login_as(driver, settings: Settings, poller: Poller):
    """Log the browser in as a configured role and wait for the redirect."""

    def _login(role: str) -> LoginPage:
        creds = settings.account(role)
        page = LoginPage(driver, settings, poller=poller)
        page.open()
        page.login(creds.email, creds.password)
        page.wait_for_login_success().unwrap(f"redirect after {role} login")
        return page

    return _login


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)
