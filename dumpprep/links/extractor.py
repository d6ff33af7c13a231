"""Link extraction: turns a :class:`Page` into a :class:`LinkRecord`."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

from dumpprep.config import Settings
from dumpprep.dump.models import Page
from dumpprep.links.canonical import canonicalize

logger = logging.getLogger(__name__)

# [[target]], [[target#fragment]], [[target|alias]]; the reverse pipe trick
# ([[target|]]) is not expanded.
_LINK_RE = re.compile(r"\[\[([^#|]+?)(#.*?)?(\|.*?)?\]\]")
_TEMPLATE_RE = re.compile(r"\{\{[^{}]+\}\}")
_PARENTHESIS_RE = re.compile(r"\([^()]+?\)")


@dataclass(frozen=True)
class LinkRecord:
    """Links found on a single page."""

    page_id: int
    first_link: str
    links: Tuple[str, ...]


# ---------------------------------------------------------------------------
# Extractor
# ---------------------------------------------------------------------------

class LinkExtractor:
    """Computes the first link and the full link set of main-namespace pages.

    Args:
        main_namespace: Only pages in this namespace are processed.
        ignored_prefixes: Canonical link targets starting with any of these
            are never chosen as the first link (image/file links).
        max_link_length: Canonical targets this long or longer are dropped.
        max_strip_passes: Upper bound on template/parenthesis stripping
            passes.  ``0`` strips until the text stops shrinking.
    """

    def __init__(
        self,
        main_namespace: int = 0,
        ignored_prefixes: Iterable[str] = ("Bild:",),
        max_link_length: int = 300,
        max_strip_passes: int = 100,
    ) -> None:
        self.main_namespace = main_namespace
        self.ignored_prefixes: Tuple[str, ...] = tuple(sorted(set(ignored_prefixes)))
        self.max_link_length = max_link_length
        self.max_strip_passes = max_strip_passes

    @classmethod
    def from_settings(cls, settings: Settings) -> "LinkExtractor":
        return cls(
            main_namespace=settings.main_namespace,
            ignored_prefixes=settings.ignored_link_prefixes,
            max_link_length=settings.max_link_length,
            max_strip_passes=settings.max_strip_passes,
        )

    def accepts(self, page: Page) -> bool:
        return page.namespace == self.main_namespace

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def _targets(self, text: str) -> Iterator[str]:
        """Yield canonical link targets of *text* in document order."""
        for match in _LINK_RE.finditer(text):
            target = canonicalize(match.group(1))
            # Empty links exist in real articles; overlong ones are broken markup.
            if 0 < len(target) < self.max_link_length:
                yield target

    def strip_asides(self, text: str) -> str:
        """Remove ``{{...}}`` and ``(...)`` blocks, innermost first, until stable."""
        passes = 0
        while True:
            before = len(text)
            text = _TEMPLATE_RE.sub("", text)
            text = _PARENTHESIS_RE.sub("", text)
            if len(text) == before:
                return text
            passes += 1
            if self.max_strip_passes and passes >= self.max_strip_passes:
                logger.warning(
                    "Stopped stripping templates after %d passes (%d chars left)",
                    passes,
                    len(text),
                )
                return text

    def first_link(self, text: str) -> str:
        """Return the first link outside templates and parentheses, or ``""``."""
        for target in self._targets(self.strip_asides(text)):
            if self.ignored_prefixes and target.startswith(self.ignored_prefixes):
                continue
            return target
        return ""

    def all_links(self, text: str) -> List[str]:
        """Return every distinct link target of *text*, first occurrence first."""
        return list(dict.fromkeys(self._targets(text)))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def extract(self, page: Page) -> Optional[LinkRecord]:
        """Return the :class:`LinkRecord` for *page*, or ``None`` if it is skipped."""
        if not self.accepts(page):
            return None

        first = self.first_link(page.text)
        links = self.all_links(page.text)

        for link in links:
            if "|" in link:
                logger.warning(
                    "Link %r on page %d (%r) contains '|'", link, page.id, page.title
                )

        return LinkRecord(page_id=page.id, first_link=first, links=tuple(links))
