"""Tests for summary and tab table filtering."""

from collections.abc import Mapping, Sequence
from typing import Any

import pytest

from signalhound.config import SignalHoundConfig
from signalhound.models.dashboard import DashboardSummary, DashboardSummaryMap
from signalhound.models.testgroup import TestGroup
from signalhound.testgrid.filters import (
    FAILING_ICON,
    FLAKY_ICON,
    board_url,
    filter_dashboards,
    filter_tab_tests,
    state_icon,
    summary_url,
    table_url,
)
from signalhound.testing.testgrid.payloads import summary, tab_table, table_row

TESTGRID_URL = "https://testgrid.k8s.io"
QUERY = "kubernetes-ci-logs/logs/ci-kubernetes-e2e-capz-master-windows"
TIMESTAMPS = [1735732800000, 1735729200000, 1735725600000]
CHANGELISTS = ["1880000000000000003", "1880000000000000002", "1880000000000000001"]


@pytest.fixture
def config() -> SignalHoundConfig:
    """Create default configuration."""
    return SignalHoundConfig()


def make_group(
    *tests: Mapping[str, Any], timestamps: Sequence[int] = TIMESTAMPS
) -> TestGroup:
    """Build a tab table with the given rows."""
    return TestGroup.model_validate(
        tab_table(
            query=QUERY,
            timestamps=timestamps,
            changelists=CHANGELISTS[: len(timestamps)],
            tests=tests,
        )
    )


def make_dashboards(states: Mapping[str, str]) -> dict[str, DashboardSummary]:
    """Build parsed summaries keyed by tab name."""
    return DashboardSummaryMap.model_validate(
        {
            tab: summary(overall_status=state, dashboard_name="sig-release-blocking")
            for tab, state in states.items()
        }
    ).root


class TestStateIcon:
    """Tests for state_icon."""

    def test_failing_is_red(self) -> None:
        """Failing tabs get the red square."""
        assert state_icon("FAILING") == FAILING_ICON == ":large_red_square:"

    @pytest.mark.parametrize("state", ["FLAKY", "PASSING", "ACCEPTABLE", ""])
    def test_other_states_are_purple(self, state: str) -> None:
        """Every other state gets the purple square."""
        assert state_icon(state) == FLAKY_ICON == ":large_purple_square:"


class TestUrls:
    """Tests for TestGrid URL builders."""

    def test_summary_url_escapes_dashboard(self) -> None:
        """Escapes spaces in the dashboard segment."""
        assert (
            summary_url(TESTGRID_URL, "sig release")
            == "https://testgrid.k8s.io/sig%20release/summary"
        )

    def test_table_url_uses_dashboard_twice(self) -> None:
        """Names the dashboard in the path and in the query."""
        assert table_url(TESTGRID_URL, "sig-release-blocking", "gce cos master") == (
            "https://testgrid.k8s.io/sig-release-blocking/table?tab=gce%20cos%20master"
            "&exclude-non-failed-tests=&dashboard=sig-release-blocking"
        )

    def test_board_url_keeps_hash(self) -> None:
        """Points the browser at the tab with failed tests only."""
        assert board_url(TESTGRID_URL, "sig-release-blocking#gce cos") == (
            "https://testgrid.k8s.io/sig-release-blocking#gce%20cos"
            "&exclude-non-failed-tests="
        )


class TestFilterDashboards:
    """Tests for filter_dashboards."""

    def test_keeps_matching_tab(self) -> None:
        """Returns the flaky tab with a synthesized tab URL."""
        dashboards = make_dashboards({"kubernetes-ci": "FLAKY"})

        summaries = filter_dashboards(dashboards, TESTGRID_URL, ["FLAKY"])

        assert len(summaries) == 1
        tab = summaries[0].dashboard_tab
        assert tab is not None
        assert tab.tab_name == "kubernetes-ci"
        assert "kubernetes-ci" in tab.tab_url
        assert summaries[0].dashboard_url == TESTGRID_URL

    def test_drops_tabs_outside_filter(self) -> None:
        """Never returns a summary whose state is not requested."""
        dashboards = make_dashboards(
            {"a": "FLAKY", "b": "FAILING", "c": "PASSING", "d": "FAILING"}
        )

        summaries = filter_dashboards(dashboards, TESTGRID_URL, ["FAILING"])

        assert {s.dashboard_tab.tab_name for s in summaries if s.dashboard_tab} == {
            "b",
            "d",
        }
        assert all(s.overall_status == "FAILING" for s in summaries)

    def test_empty_filter_matches_nothing(self) -> None:
        """Returns no summaries when no state is requested."""
        dashboards = make_dashboards({"a": "FLAKY"})

        assert filter_dashboards(dashboards, TESTGRID_URL, []) == []

    def test_synthesized_url_has_no_spaces(self) -> None:
        """Percent-encodes spaces of tab names in synthesized URLs."""
        dashboards = make_dashboards({"gce cos master default": "FAILING"})

        (match,) = filter_dashboards(dashboards, TESTGRID_URL, ["FAILING"])

        assert match.dashboard_tab is not None
        assert " " not in match.dashboard_tab.tab_url
        assert "tab=gce%20cos%20master%20default" in match.dashboard_tab.tab_url

    def test_keeps_existing_tab(self) -> None:
        """Does not replace a tab that is already present."""
        dashboards = make_dashboards({"a": "FAILING"})
        existing = filter_dashboards(dashboards, TESTGRID_URL, ["FAILING"])[0]
        tab = existing.dashboard_tab

        (again,) = filter_dashboards({"a": existing}, TESTGRID_URL, ["FAILING"])

        assert again.dashboard_tab is tab


class TestFilterTabTests:
    """Tests for filter_tab_tests."""

    def test_flaky_build_overall(self, config: SignalHoundConfig) -> None:
        """Keeps a single flaky build failure with its error text."""
        group = make_group(
            table_row("ci-kubernetes-build.Overall", ["F"], ["build failed"]),
            timestamps=TIMESTAMPS[:1],
        )

        results = filter_tab_tests(group, "FLAKY", 1, 1, config)

        assert len(results) == 1
        assert "Overall" in results[0].test_name
        assert "F" in results[0].error_message

    @pytest.mark.parametrize(
        ("state", "short_texts", "included"),
        [
            ("FAILING", ["F", "F", ""], True),
            ("FAILING", ["F", "", ""], False),
            ("FLAKY", ["F", "", "F"], True),
            ("FLAKY", ["", "", "F"], False),
            ("PASSING", ["F", "F", "F"], False),
        ],
    )
    def test_threshold_boundary(
        self,
        config: SignalHoundConfig,
        state: str,
        short_texts: list[str],
        included: bool,
    ) -> None:
        """Includes tests reaching the threshold of the tab state only."""
        group = make_group(table_row("test", short_texts))

        results = filter_tab_tests(group, state, 2, 2, config)

        assert bool(results) is included

    def test_thresholds_follow_tab_state(self, config: SignalHoundConfig) -> None:
        """Applies the flake threshold to flaky tabs only."""
        group = make_group(table_row("test", ["F", "", ""]))

        assert filter_tab_tests(group, "FLAKY", 5, 1, config)
        assert not filter_tab_tests(group, "FAILING", 5, 1, config)

    def test_builds_urls_from_first_failure(self, config: SignalHoundConfig) -> None:
        """Links the changelist of the first failure and the job triage page."""
        group = make_group(
            table_row(
                "Kubernetes e2e suite.[It] [sig-node] Pods should run",
                ["", "F", "F"],
                ["", "newer", "older"],
            )
        )

        (result,) = filter_tab_tests(group, "FAILING", 2, 2, config)

        assert result.test_name == "Pods should run"
        assert result.latest_timestamp == TIMESTAMPS[0]
        assert result.first_timestamp == TIMESTAMPS[-1]
        assert result.prow_url == (
            "https://prow.k8s.io/view/gs/kubernetes-ci-logs/logs/"
            "ci-kubernetes-e2e-capz-master-windows/1880000000000000002"
        )
        assert result.triage_url == (
            "https://storage.googleapis.com/k8s-triage/index.html"
            "?job=ci-kubernetes-e2e-capz-master-windows$&test=Pods%20should%20run"
        )
        assert result.error_message.count("\n") == 2

    def test_zero_threshold_without_failures_uses_latest_column(
        self, config: SignalHoundConfig
    ) -> None:
        """Links the latest changelist when a test has no failure at all."""
        group = make_group(table_row("clean", ["", "", ""]))

        (result,) = filter_tab_tests(group, "FAILING", 0, 0, config)

        assert result.prow_url.endswith("/1880000000000000003")
        assert result.error_message == ""

    def test_table_without_columns(self, config: SignalHoundConfig) -> None:
        """Uses zero timestamps and an empty changelist without columns."""
        group = make_group(table_row("empty", []), timestamps=[])

        (result,) = filter_tab_tests(group, "FAILING", 0, 0, config)

        assert result.latest_timestamp == 0
        assert result.first_timestamp == 0
        assert result.prow_url.endswith("ci-kubernetes-e2e-capz-master-windows/")

    def test_uses_configured_urls(self) -> None:
        """Builds links from the configured Prow and triage URLs."""
        config = SignalHoundConfig(
            prow_url="http://prow.test", triage_url="http://triage.test/index.html"
        )
        group = make_group(table_row("kubetest2.Up", ["F", "F", "F"]))

        (result,) = filter_tab_tests(group, "FAILING", 1, 1, config)

        assert result.test_name == "Up"
        assert result.prow_url.startswith("http://prow.test/view/gs/")
        assert result.triage_url.startswith("http://triage.test/index.html?job=")
