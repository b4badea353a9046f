"""Fixtures for module tests using WireMock testcontainers."""

from collections.abc import Generator

import docker
import pytest
from docker.errors import DockerException
from testcontainers.core import testcontainers_config
from wiremock.client import Mappings
from wiremock.constants import Config
from wiremock.testing.testcontainer import WireMockContainer

from signalhound.config import SignalHoundConfig


@pytest.fixture(scope="session", autouse=True)
def _disable_ryuk() -> None:
    """Disable the extra cleanup instance, we use contexts to clean containers."""
    testcontainers_config.ryuk_disabled = True


@pytest.fixture(scope="session")
def _require_docker() -> None:
    """Skip module tests when no Docker daemon is reachable."""
    try:
        docker.from_env().ping()
    except DockerException as err:
        pytest.skip(f"Docker is not available: {err}")


@pytest.fixture(scope="session")
def wiremock_server(
    _require_docker: None,
) -> Generator[WireMockContainer, None, None]:
    """Start WireMock container using wiremock's testcontainer support."""
    container = WireMockContainer(secure=False)

    with container as wm:
        Config.base_url = wm.get_url("__admin")
        yield wm
        print(wm.get_logs())


@pytest.fixture(scope="session")
def wiremock_url(wiremock_server: WireMockContainer) -> str:
    """URL for WireMock as seen from the test process."""
    return wiremock_server.get_base_url()


@pytest.fixture
def config(wiremock_url: str) -> SignalHoundConfig:
    """Create configuration pointing both services at WireMock."""
    Mappings.delete_all_mappings()
    return SignalHoundConfig(
        testgrid_url=wiremock_url,
        prow_url=wiremock_url,
        dashboards=["sig-release-master-blocking"],
        min_failure=1,
        min_flake=1,
    )
