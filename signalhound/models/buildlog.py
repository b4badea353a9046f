"""Models for build log scraping results."""

from dataclasses import dataclass


@dataclass(frozen=True, kw_only=True)
class BuildLog:
    """Error text recovered from a job's build log lens."""

    error: str
    lens_url: str
