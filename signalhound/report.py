"""Plain text reports of failing and flaky tests."""

from datetime import UTC, datetime

from signalhound.models.dashboard import FAILING_STATUS, DashboardTab, TestResult


def time_clean(timestamp: int) -> str:
    """Format epoch milliseconds as an RFC 1123 date in UTC."""
    when = datetime.fromtimestamp(timestamp // 1000, tz=UTC)
    return when.strftime("%a, %d %b %Y %H:%M:%S UTC")


def format_slack_message(tab: DashboardTab, test: TestResult) -> str:
    """One line announcement of a test, formatted for Slack."""
    return (
        f"{tab.state_icon} {tab.tab_state.title()} on [{tab.board_hash}]"
        f"({tab.tab_url}): `{test.test_name}` [Prow]({test.prow_url}), "
        f"[Triage]({test.triage_url}), last failure on "
        f"{time_clean(test.latest_timestamp)}\n"
    )


def issue_title(tab: DashboardTab, test: TestResult) -> str:
    """Title of the issue tracking a failing or flaking test."""
    prefix = "Failing Test" if tab.tab_state == FAILING_STATUS else "Flaking Test"
    return f"[{prefix}] {test.test_name}"


def format_issue_body(tab: DashboardTab, test: TestResult) -> str:
    """Markdown body of the issue tracking a failing or flaking test."""
    board, _, tab_name = tab.board_hash.partition("#")
    if tab.tab_state == FAILING_STATUS:
        heading = "### Which jobs are failing?"
        summary = "### Which tests are failing?"
        since = "### Since when has it been failing?"
    else:
        heading = "### Which jobs are flaking?"
        summary = "### Which tests are flaking?"
        since = "### Since when has it been flaking?"

    return (
        f"{heading}\n\n"
        f"- {board}\n"
        f"  - {tab_name}\n\n"
        f"{summary}\n\n"
        f"{test.test_name}\n\n"
        f"{since}\n\n"
        f"[First failure]({test.prow_url}) on {time_clean(test.first_timestamp)}\n"
        f"Latest failure on {time_clean(test.latest_timestamp)}\n\n"
        "### Testgrid link\n\n"
        f"{tab.tab_url}\n\n"
        "### Reason for failure (if possible)\n\n"
        f"```\n{test.error_message}```\n\n"
        "### Anything else we need to know?\n\n"
        f"- [Triage]({test.triage_url})\n"
        f"- [Prow]({test.prow_url})\n"
    )
