"""TestGrid summary and tab table access."""

from signalhound.testgrid.client import TestGridClient
from signalhound.testgrid.render import RenderedStatuses, render_statuses

__all__ = ["RenderedStatuses", "TestGridClient", "render_statuses"]
