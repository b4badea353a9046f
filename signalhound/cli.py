"""CLI entry point for CI signal aggregation."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from typing import Any

from signalhound.config import SignalHoundConfig
from signalhound.errors import SignalHoundError
from signalhound.models.dashboard import DashboardTab
from signalhound.orchestrator import SignalAggregator
from signalhound.prow.client import ProwClient
from signalhound.testgrid.client import TestGridClient


def log_tabs_summary(log: logging.Logger, tabs: Sequence[DashboardTab]) -> None:
    """Log one line per tab and per test over threshold."""
    log.info("=" * 80)
    log.info("Signal Summary:")
    log.info("=" * 80)

    for tab in tabs:
        log.info(
            "%s %s (%s): %d test(s)",
            tab.state_icon,
            tab.board_hash.replace("#", " - "),
            tab.tab_state,
            len(tab.test_runs),
        )
        for test in tab.test_runs:
            log.info("  %s", test.test_name)
            log.info("    Prow: %s", test.prow_url)


def format_output(tabs: Sequence[DashboardTab]) -> dict[str, Any]:
    """Format collected tabs for JSON output."""
    return {
        "total": len(tabs),
        "tests": sum(len(tab.test_runs) for tab in tabs),
        "tabs": [tab.model_dump(mode="json", by_alias=True) for tab in tabs],
    }


def load_config(
    config_json: str | None,
    dashboards: Sequence[str] | None = None,
    min_failure: int | None = None,
    min_flake: int | None = None,
) -> SignalHoundConfig:
    """Build the configuration from a JSON document and flag overrides."""
    config = SignalHoundConfig.model_validate(json.loads(config_json or "{}"))
    overrides: dict[str, Any] = {}
    if dashboards:
        overrides["dashboards"] = tuple(dashboards)
    if min_failure is not None:
        overrides["min_failure"] = min_failure
    if min_flake is not None:
        overrides["min_flake"] = min_flake
    if not overrides:
        return config
    return SignalHoundConfig.model_validate(config.model_dump() | overrides)


async def run_abstract(config: SignalHoundConfig) -> int:
    """Collect tabs over threshold and return exit code."""
    log = logging.getLogger("signalhound")

    log.info("Scraping dashboards: %s", ", ".join(config.dashboards))
    async with TestGridClient.from_config(config) as client:
        aggregator = SignalAggregator(client=client, config=config)
        try:
            tabs = await aggregator.collect()
        except SignalHoundError as err:
            log.error("Aggregation aborted: %s", err)
            return 1

    log_tabs_summary(log, tabs)
    print(json.dumps(format_output(tabs), indent=2))
    return 0


async def run_buildlog(config: SignalHoundConfig, job_url: str) -> int:
    """Scrape the build log of a job and return exit code."""
    log = logging.getLogger("signalhound")

    async with ProwClient.from_config(config) as client:
        try:
            build_log = await client.get_build_log(job_url)
        except SignalHoundError as err:
            log.error("Build log extraction failed: %s", err)
            return 1

    print(
        json.dumps({"lens_url": build_log.lens_url, "error": build_log.error}, indent=2)
    )
    return 0


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Summarize failing and flaky tests of TestGrid dashboards"
    )
    parser.add_argument(
        "--config",
        default=None,
        help="JSON configuration (URLs, dashboards, statuses, thresholds)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    abstract = subparsers.add_parser(
        "abstract",
        help="Summarize the board status and present the flaky or failing tabs",
    )
    abstract.add_argument(
        "--dashboard",
        action="append",
        dest="dashboards",
        help="Dashboard to scrape, may be repeated",
    )
    abstract.add_argument(
        "-f",
        "--min-failure",
        type=int,
        default=None,
        help="Minimum threshold for test failures",
    )
    abstract.add_argument(
        "-m",
        "--min-flake",
        type=int,
        default=None,
        help="Minimum threshold for test flakiness",
    )

    buildlog = subparsers.add_parser(
        "buildlog", help="Extract the error text of a Prow job build log"
    )
    buildlog.add_argument("job_url", help="Prow job view URL")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        if args.command == "abstract":
            config = load_config(
                args.config, args.dashboards, args.min_failure, args.min_flake
            )
        else:
            config = load_config(args.config)
    except ValueError as err:
        parser.error(f"invalid configuration: {err}")

    if args.command == "abstract":
        exit_code = asyncio.run(run_abstract(config))
    else:
        exit_code = asyncio.run(run_buildlog(config, args.job_url))
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
