"""Prow client scraping build logs out of Spyglass."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

import aiohttp

from signalhound.config import SignalHoundConfig
from signalhound.fetch import fetch_text
from signalhound.models.buildlog import BuildLog
from signalhound.prow.extract import extract_build_log, extract_lens_url
from signalhound.prow.lens import LensScriptExtractor, RegexLensScriptExtractor

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class ProwClient:
    """Recovers the error text of a failed job from its build log lens.

    The job page only embeds the lens frames, so scraping takes two
    requests: the overview page yields the frame URL, and the frame holds
    the rendered log.
    """

    config: SignalHoundConfig
    session: aiohttp.ClientSession = field(repr=False)
    extractor: LensScriptExtractor = field(default_factory=RegexLensScriptExtractor)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: SignalHoundConfig
    ) -> AsyncGenerator["ProwClient", None]:
        """Create client with managed session lifecycle."""
        async with aiohttp.ClientSession() as session:
            yield cls(config=config, session=session)

    async def resolve_lens_url(self, job_url: str) -> str:
        """Return the build log lens frame URL of a job view page.

        Raises:
            TransportError: If the job page cannot be fetched
            ScrapeError: If the page lacks the lens script or frame
            DecodeError: If the embedded artifacts are not valid JSON

        """
        log.info("Fetching Spyglass page: url=%s", job_url)
        body = await fetch_text(self.session, job_url, "spyglass page")
        lens_url = extract_lens_url(body, self.config.prow_url, self.extractor)
        log.info("Resolved build log lens: url=%s", lens_url)
        return lens_url

    async def get_build_log(self, job_url: str) -> BuildLog:
        """Scrape the error text of the first failure panel of a job.

        Args:
            job_url: Prow job view URL (e.g., a test result's prow_url)

        Returns:
            The collected error lines and the lens URL they came from

        """
        lens_url = await self.resolve_lens_url(job_url)
        body = await fetch_text(self.session, lens_url, "build log lens")
        error = extract_build_log(body)
        log.info("Extracted %d error line(s) from %s", error.count("\n"), lens_url)
        return BuildLog(error=error, lens_url=lens_url)
