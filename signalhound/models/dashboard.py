"""Models for TestGrid dashboard summaries and filtered tabs."""

from collections.abc import Sequence
from typing import Final

from pydantic import Field, RootModel

from signalhound.models.base import Model, MutableModel

PASSING_STATUS: Final = "PASSING"
FAILING_STATUS: Final = "FAILING"
FLAKY_STATUS: Final = "FLAKY"

ERROR_STATUSES: Final[Sequence[str]] = (FAILING_STATUS, FLAKY_STATUS)


class TestResult(Model):
    """One test that passed the failure or flake threshold of its tab."""

    __test__ = False

    test_name: str
    latest_timestamp: int = Field(..., description="Epoch milliseconds")
    first_timestamp: int = Field(..., description="Epoch milliseconds")
    triage_url: str
    prow_url: str = Field(..., description="Prow job view of the first failure")
    error_message: str = ""


class DashboardTab(Model):
    """Display-ready aggregate of one dashboard tab."""

    tab_name: str = ""
    tab_url: str = ""
    board_hash: str = ""
    state_icon: str = Field(default="", alias="icon")
    tab_state: str = Field(default="", alias="state")
    test_runs: Sequence[TestResult] = Field(default_factory=tuple, alias="tab_tests")


class DashboardSummary(MutableModel):
    """High-level health of one tab, as served by the summary endpoint."""

    last_run_timestamp: int = 0
    last_update_timestamp: int = 0
    latest_green: str = ""
    overall_status: str = ""
    status: str = ""
    dashboard_name: str = ""
    dashboard_url: str = Field(default="", alias="url")
    dashboard_tab: DashboardTab | None = None


class DashboardSummaryMap(RootModel[dict[str, DashboardSummary]]):
    """Response of the summary endpoint, keyed by tab name."""
