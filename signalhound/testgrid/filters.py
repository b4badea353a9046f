"""Pure filtering of TestGrid summaries and tab tables."""

import logging
from collections.abc import Collection, Mapping, Sequence

from signalhound.config import SignalHoundConfig
from signalhound.models.dashboard import (
    FAILING_STATUS,
    FLAKY_STATUS,
    DashboardSummary,
    DashboardTab,
    TestResult,
)
from signalhound.models.testgroup import TestGroup
from signalhound.normalize import escape_spaces, job_name, normalize_test_name
from signalhound.testgrid.render import render_statuses

log = logging.getLogger(__name__)

FAILING_ICON = ":large_red_square:"
FLAKY_ICON = ":large_purple_square:"


def state_icon(state: str) -> str:
    """Return the red icon for failing tabs and the purple one otherwise."""
    return FAILING_ICON if state == FAILING_STATUS else FLAKY_ICON


def summary_url(testgrid_url: str, dashboard: str) -> str:
    """URL of the summary endpoint of a dashboard."""
    return f"{testgrid_url}/{escape_spaces(dashboard)}/summary"


def table_url(testgrid_url: str, dashboard: str, tab: str) -> str:
    """URL of the failed-tests table of a dashboard tab."""
    return escape_spaces(
        f"{testgrid_url}/{dashboard}/table?tab={tab}"
        f"&exclude-non-failed-tests=&dashboard={dashboard}"
    )


def board_url(testgrid_url: str, board_hash: str) -> str:
    """Browser URL of a tab showing only failed tests."""
    return escape_spaces(f"{testgrid_url}/{board_hash}&exclude-non-failed-tests=")


def filter_dashboards(
    dashboards: Mapping[str, DashboardSummary],
    testgrid_url: str,
    statuses: Collection[str],
) -> Sequence[DashboardSummary]:
    """Keep the summaries whose overall status is one of ``statuses``.

    Matching summaries get the dashboard URL attached and, when the
    endpoint did not provide one, a synthesized tab pointing at the tab
    table. The result has no defined order.
    """
    matches: list[DashboardSummary] = []
    for tab_name, summary in dashboards.items():
        if summary.overall_status not in statuses:
            continue
        summary.dashboard_url = testgrid_url
        if summary.dashboard_tab is None:
            summary.dashboard_tab = DashboardTab(
                tab_name=tab_name,
                tab_url=table_url(testgrid_url, summary.dashboard_name, tab_name),
            )
        matches.append(summary)
    return matches


def _column_at(group: TestGroup, index: int) -> tuple[int, int, str]:
    """Return latest timestamp, first timestamp and changelist at ``index``.

    Tests without failures fall back to the latest column, and a group
    without columns yields zero timestamps and an empty changelist.
    """
    if not group.timestamps:
        return 0, 0, ""
    changelist = group.changelists[max(index, 0)]
    return group.timestamps[0], group.timestamps[-1], changelist


def filter_tab_tests(
    group: TestGroup,
    state: str,
    min_failure: int,
    min_flake: int,
    config: SignalHoundConfig,
) -> Sequence[TestResult]:
    """Reduce a tab table to the tests over the threshold for ``state``."""
    job = job_name(group.query)
    results: list[TestResult] = []

    for test in group.tests:
        rendered = render_statuses(test, group.timestamps)
        failing = state == FAILING_STATUS and rendered.failure_count >= min_failure
        flaky = state == FLAKY_STATUS and rendered.failure_count >= min_flake
        if not (failing or flaky):
            log.debug(
                "Skipping test %s: %d failure(s) under %s",
                test.name,
                rendered.failure_count,
                state,
            )
            continue

        test_name = normalize_test_name(test.name)
        latest, first, changelist = _column_at(group, rendered.first_failure_index)
        results.append(
            TestResult(
                test_name=test_name,
                latest_timestamp=latest,
                first_timestamp=first,
                prow_url=escape_spaces(
                    f"{config.prow_url}/view/gs/{group.query}/{changelist}"
                ),
                triage_url=escape_spaces(
                    f"{config.triage_url}?job={job}$&test={test_name}"
                ),
                error_message=rendered.output,
            )
        )

    return results
