"""Aggregation of failing and flaky tabs across dashboards."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from signalhound.config import SignalHoundConfig
from signalhound.errors import SignalHoundError
from signalhound.models.dashboard import DashboardTab
from signalhound.testgrid.client import TestGridClient

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class SignalAggregator:
    """Collects the tabs with tests over threshold on the configured dashboards."""

    client: TestGridClient
    config: SignalHoundConfig

    async def collect(self) -> Sequence[DashboardTab]:
        """Fetch every configured dashboard and filter each matching tab.

        Tabs are fetched one after the other. A tab whose table cannot be
        fetched is logged and skipped, while a dashboard summary failure
        aborts the whole aggregation.

        Returns:
            Tabs that have at least one test over threshold

        Raises:
            SignalHoundError: If a dashboard summary cannot be fetched

        """
        tabs: list[DashboardTab] = []
        for dashboard in self.config.dashboards:
            summaries = await self.client.fetch_summary(
                dashboard, self.config.statuses
            )
            for summary in summaries:
                try:
                    tab = await self.client.fetch_tab_tests(
                        summary, self.config.min_failure, self.config.min_flake
                    )
                except SignalHoundError as err:
                    log.error(
                        "Error fetching table of dashboard %s: %s",
                        dashboard,
                        err,
                        exc_info=err,
                    )
                    continue
                if tab.test_runs:
                    tabs.append(tab)

        log.info("Collected %d tab(s) with tests over threshold", len(tabs))
        return tabs
