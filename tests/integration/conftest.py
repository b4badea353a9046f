"""Fixtures for integration tests."""

from collections.abc import Generator

import pytest
from aioresponses import aioresponses as aioresponses_cls

from signalhound.config import SignalHoundConfig

TESTGRID_URL = "http://testgrid.test"
PROW_URL = "http://prow.test"


@pytest.fixture
def aioresponses() -> Generator[aioresponses_cls, None, None]:
    """Mock every aiohttp request made during the test."""
    with aioresponses_cls() as mocked:
        yield mocked


@pytest.fixture
def config() -> SignalHoundConfig:
    """Create configuration pointing at mocked services."""
    return SignalHoundConfig(
        testgrid_url=TESTGRID_URL,
        prow_url=PROW_URL,
        dashboards=["sig-release-master-blocking"],
        min_failure=2,
        min_flake=1,
    )
