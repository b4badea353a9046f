"""Prow Spyglass build log scraping."""

from signalhound.prow.client import ProwClient
from signalhound.prow.lens import LensScriptExtractor, RegexLensScriptExtractor

__all__ = ["LensScriptExtractor", "ProwClient", "RegexLensScriptExtractor"]
