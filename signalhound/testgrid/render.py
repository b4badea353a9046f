"""Rendering of a test's run history into failure text and statistics."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from signalhound.models.testgroup import Test


@dataclass(frozen=True, kw_only=True)
class RenderedStatuses:
    """Failure log and statistics for one test row."""

    output: str
    failure_count: int
    first_failure_index: int


def format_test_status(short_text: str, timestamp: int, message: str) -> str:
    """Format one failed cell as a tab-indented line in local time."""
    when = datetime.fromtimestamp(timestamp // 1000).astimezone()
    return f"\t{short_text} {when:%Y-%m-%d %H:%M:%S %z %Z} {message}\n"


def render_statuses(test: Test, timestamps: Sequence[int]) -> RenderedStatuses:
    """Render every non-empty cell of a test in column order.

    The first failure index is the position of the first non-empty short
    text, or -1 when the test has no failures.
    """
    lines: list[str] = []
    first_failure_index = -1

    for index, short_text in enumerate(test.short_texts):
        if not short_text:
            continue
        if first_failure_index < 0:
            first_failure_index = index
        lines.append(
            format_test_status(short_text, timestamps[index], test.messages[index])
        )

    return RenderedStatuses(
        output="".join(lines),
        failure_count=len(lines),
        first_failure_index=first_failure_index,
    )
