"""Configuration for the TestGrid and Prow clients."""

from collections.abc import Sequence

from pydantic import BaseModel, Field

from signalhound.models.dashboard import ERROR_STATUSES


class SignalHoundConfig(BaseModel):
    """Configuration shared by the signal aggregation pipeline.

    URLs are used as plain prefixes and must not end with a slash.
    """

    testgrid_url: str = "https://testgrid.k8s.io"
    prow_url: str = "https://prow.k8s.io"
    triage_url: str = "https://storage.googleapis.com/k8s-triage/index.html"
    dashboards: Sequence[str] = (
        "sig-release-master-blocking",
        "sig-release-master-informing",
    )
    statuses: Sequence[str] = ERROR_STATUSES
    min_failure: int = Field(default=2, ge=0)
    min_flake: int = Field(default=3, ge=0)
