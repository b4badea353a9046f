"""Extraction of lens data embedded in the Spyglass page script."""

import json
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from signalhound.errors import DecodeError, ScrapeError

LENS_ARTIFACTS_MARKER = "lensArtifacts"

LENS_ARTIFACTS_PATTERN = re.compile(
    r'var lensArtifacts = (?P<json>\{"\d+":\[(?:"[^"]+",?)*\]'
    r'(?:,\s*"\d+":\[(?:"[^"]+",?)*\])*\});'
)
SOURCE_URL_PATTERN = re.compile(r'var src = "(?P<url>[^"]+)"')


@dataclass(frozen=True, kw_only=True)
class LensScript:
    """Data the Spyglass overview page hands to its lens frames."""

    artifacts: Mapping[str, Sequence[str]]
    src: str


class LensScriptExtractor(ABC):
    """Turns the text of the lens bootstrap script into a LensScript."""

    @abstractmethod
    def extract(self, script: str) -> LensScript:
        """Extract lens artifacts and the job source URL.

        Raises:
            ScrapeError: If the script lacks the expected variables
            DecodeError: If the embedded artifacts are not valid JSON

        """


class RegexLensScriptExtractor(LensScriptExtractor):
    """Reads the ``lensArtifacts`` and ``src`` variables with regexes."""

    def extract(self, script: str) -> LensScript:
        """Extract lens data from the variable assignments in the script."""
        if (artifacts_match := LENS_ARTIFACTS_PATTERN.search(script)) is None:
            raise ScrapeError("lensArtifacts variable not found in lens script")
        if (src_match := SOURCE_URL_PATTERN.search(script)) is None:
            raise ScrapeError("src variable not found in lens script")

        try:
            artifacts = json.loads(artifacts_match.group("json"))
        except ValueError as err:
            raise DecodeError(f"Invalid lensArtifacts JSON: {err}") from err

        return LensScript(artifacts=artifacts, src=src_match.group("url"))
