"""TestGrid client fetching dashboard summaries and tab tables."""

import logging
from collections.abc import AsyncGenerator, Collection, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

import aiohttp
from pydantic import ValidationError

from signalhound.config import SignalHoundConfig
from signalhound.errors import DecodeError
from signalhound.fetch import fetch_json
from signalhound.models.dashboard import (
    DashboardSummary,
    DashboardSummaryMap,
    DashboardTab,
)
from signalhound.models.testgroup import TestGroup
from signalhound.testgrid.filters import (
    board_url,
    filter_dashboards,
    filter_tab_tests,
    state_icon,
    summary_url,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class TestGridClient:
    """Reads dashboard health and failing tests from TestGrid."""

    __test__ = False

    config: SignalHoundConfig
    session: aiohttp.ClientSession = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: SignalHoundConfig
    ) -> AsyncGenerator["TestGridClient", None]:
        """Create client with managed session lifecycle."""
        async with aiohttp.ClientSession() as session:
            yield cls(config=config, session=session)

    async def fetch_summary(
        self, dashboard: str, statuses: Collection[str]
    ) -> Sequence[DashboardSummary]:
        """Return the tabs of a dashboard whose overall status is in ``statuses``.

        Args:
            dashboard: Dashboard name (e.g., "sig-release-master-blocking")
            statuses: Accepted overall statuses (e.g., {"FAILING", "FLAKY"})

        Returns:
            Matching summaries, each with a populated dashboard tab. The
            order is unspecified.

        Raises:
            TransportError: If the summary cannot be fetched
            DecodeError: If the body is not a tab name to summary mapping

        """
        url = summary_url(self.config.testgrid_url, dashboard)
        log.info("Fetching dashboard summary: dashboard=%s, url=%s", dashboard, url)

        data = await fetch_json(self.session, url, "dashboard summary")
        try:
            dashboards = DashboardSummaryMap.model_validate(data).root
        except ValidationError as err:
            raise DecodeError(f"Unexpected dashboard summary shape: {err}") from err

        summaries = filter_dashboards(dashboards, self.config.testgrid_url, statuses)
        log.info(
            "Dashboard %s: %d of %d tab(s) match %s",
            dashboard,
            len(summaries),
            len(dashboards),
            ", ".join(statuses),
        )
        return summaries

    async def fetch_tab_tests(
        self, summary: DashboardSummary, min_failure: int, min_flake: int
    ) -> DashboardTab:
        """Fetch a tab table and attach its threshold-filtered tests.

        The summary's tab is replaced by the completed tab only after every
        stage succeeded, so a failure leaves the summary untouched.

        Raises:
            TransportError: If the tab table cannot be fetched
            DecodeError: If the body is not a valid test group

        """
        tab = summary.dashboard_tab
        if tab is None:
            raise ValueError(
                f"Summary of dashboard {summary.dashboard_name!r} has no tab"
            )

        data = await fetch_json(self.session, tab.tab_url, "tab table")
        try:
            group = TestGroup.model_validate(data)
        except ValidationError as err:
            raise DecodeError(
                f"Unexpected tab table shape for {tab.tab_name}: {err}"
            ) from err

        board_hash = f"{summary.dashboard_name}#{tab.tab_name}"
        test_runs = filter_tab_tests(
            group, summary.overall_status, min_failure, min_flake, self.config
        )
        log.info(
            "Tab %s: %d of %d test(s) over threshold",
            board_hash,
            len(test_runs),
            len(group.tests),
        )

        summary.dashboard_tab = tab.model_copy(
            update={
                "board_hash": board_hash,
                "tab_url": board_url(self.config.testgrid_url, board_hash),
                "test_runs": test_runs,
                "tab_state": summary.overall_status,
                "state_icon": state_icon(summary.overall_status),
            }
        )
        return summary.dashboard_tab
