import pytest

from cellextest import bootstrap
from cellextest.core.polling import Poller

from helpers import FakeClock


@pytest.fixture(scope="session", autouse=True)
def setup_cellextest() -> None:
    """Bootstrap plugin operations once for the entire test session."""

    bootstrap()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def poller(clock: FakeClock) -> Poller:
    return Poller(interval_ms=100, timeout_ms=1000, clock=clock, sleep=clock.sleep)
