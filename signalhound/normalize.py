"""Helpers for building TestGrid/Prow URLs and cleaning test names."""

import re

E2E_SUITE_PREFIX = "Kubernetes e2e suite."
KUBETEST_PREFIX = "kubetest"

TEST_NAME_PATTERN = re.compile(
    r"Kubernetes e2e suite.\[It\] \[(\w.*)\] (?P<test>\w.*)"
)


def escape_spaces(value: str) -> str:
    """Percent-encode literal spaces so the value is usable inside a URL."""
    return value.replace(" ", "%20")


def normalize_test_name(name: str) -> str:
    """Strip known framework and tool prefixes from a raw test name.

    Names from the e2e suite keep only the bracket-delimited test
    description; names that fail to match are returned unchanged.
    """
    if E2E_SUITE_PREFIX in name:
        if match := TEST_NAME_PATTERN.search(name):
            name = match.group("test")
    if KUBETEST_PREFIX in name:
        name = name.removeprefix("kubetest2.").removeprefix("kubetest.")
    return name


def job_name(query: str) -> str:
    """Return the last path segment of a test group query."""
    return query.rsplit("/", 1)[-1]
