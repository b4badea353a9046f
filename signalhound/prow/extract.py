"""Traversal of Spyglass HTML pages.

Both pages are walked depth first in document order. Scan state is an
immutable value folded over the nodes, each step returning the next
state, so a page can be scanned without recursion or shared counters.
"""

import json
from collections.abc import Iterator
from dataclasses import dataclass, replace
from functools import reduce
from typing import Self, TypeAlias
from urllib.parse import quote_plus

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PageElement, PreformattedString, Tag

from signalhound.errors import ScrapeError
from signalhound.prow.lens import LENS_ARTIFACTS_MARKER, LensScriptExtractor

BUILDLOG_LENS = "buildlog"
LENS_FRAME_TAGS = frozenset(["iframe"])
PANEL_SENTINEL = "expand_less"
MIN_ERROR_LINE_LENGTH = 10
LENS_IFRAME_PATH = "/spyglass/lens/buildlog/iframe"

LineChain: TypeAlias = tuple[str, "LineChain"] | None


def iter_nodes(root: PageElement) -> Iterator[PageElement]:
    """Yield ``root`` and all of its descendants in document order."""
    stack: list[PageElement] = [root]
    while stack:
        node = stack.pop()
        yield node
        if isinstance(node, Tag):
            stack.extend(reversed(node.contents))


def _is_text(node: PageElement) -> bool:
    return isinstance(node, NavigableString) and not isinstance(
        node, PreformattedString
    )


@dataclass(frozen=True)
class LensScan:
    """Facts collected from the Spyglass overview page."""

    script: str | None = None
    lens_index: str | None = None

    def visit(self, node: PageElement) -> Self:
        """Record the lens script and the build log lens index."""
        if not isinstance(node, Tag):
            return self
        if self.script is None and node.name == "script":
            text = node.get_text()
            if LENS_ARTIFACTS_MARKER in text:
                return replace(self, script=text)
        if (
            self.lens_index is None
            and node.name in LENS_FRAME_TAGS
            and node.get("data-lens-name") == BUILDLOG_LENS
        ):
            return replace(self, lens_index=node.get("data-lens-index"))
        return self


@dataclass(frozen=True)
class ErrorScan:
    """Error lines collected from the build log lens frame.

    Only text inside the first expandable panel is kept: lines count
    while exactly one ``expand_less`` sentinel has been seen. Lines are
    chained newest first so each step shares the previous chain.
    """

    panels: int = 0
    last_line: LineChain = None

    def visit(self, node: PageElement) -> Self:
        """Count panel sentinels and collect error lines of the first panel."""
        if not _is_text(node):
            return self
        text = str(node)
        if text == PANEL_SENTINEL:
            return replace(self, panels=self.panels + 1)
        if (
            self.panels == 1
            and "\n" not in text
            and len(text) > MIN_ERROR_LINE_LENGTH
            and isinstance(node.parent, Tag)
            and node.parent.name == "span"
        ):
            return replace(self, last_line=(text, self.last_line))
        return self

    @property
    def lines(self) -> tuple[str, ...]:
        """Collected lines in document order."""
        collected: list[str] = []
        chain = self.last_line
        while chain is not None:
            line, chain = chain
            collected.append(line)
        return tuple(reversed(collected))

    @property
    def error(self) -> str:
        """Collected lines, each terminated by a newline."""
        return "".join(f"{line}\n" for line in self.lines)


def parse_html(body: str) -> BeautifulSoup:
    """Parse an HTML document with the standard library backend."""
    return BeautifulSoup(body, "html.parser")


def extract_lens_url(
    body: str, prow_url: str, extractor: LensScriptExtractor
) -> str:
    """Build the build log lens frame URL from a Spyglass overview page.

    Raises:
        ScrapeError: If the lens script, the build log lens or its
            artifacts cannot be found
        DecodeError: If the embedded artifacts are not valid JSON

    """
    scan = reduce(LensScan.visit, iter_nodes(parse_html(body)), LensScan())
    if scan.script is None:
        raise ScrapeError("No script defining lensArtifacts found in page")
    if scan.lens_index is None:
        raise ScrapeError("No buildlog lens frame found in page")
    if not scan.lens_index.isdigit():
        raise ScrapeError(f"Invalid buildlog lens index {scan.lens_index!r}")

    lens = extractor.extract(scan.script)
    if scan.lens_index not in lens.artifacts:
        raise ScrapeError(f"No artifacts listed for lens index {scan.lens_index}")

    request = json.dumps(
        {
            "artifacts": list(lens.artifacts[scan.lens_index]),
            "index": int(scan.lens_index),
            "src": lens.src,
        }
    )
    return f"{prow_url}{LENS_IFRAME_PATH}?req={quote_plus(request)}"


def extract_build_log(body: str) -> str:
    """Return the error lines of the first panel of a build log lens frame."""
    return reduce(ErrorScan.visit, iter_nodes(parse_html(body)), ErrorScan()).error
