"""Streaming reader for MediaWiki XML export documents.

The reader walks ``start``/``end`` events from
:func:`xml.etree.ElementTree.iterparse` and tracks where it is with an
explicit :class:`ParserState`.  Tracking the revision state matters because
``<revision>`` (and the ``<contributor>`` inside it) carry their own
``<id>`` elements, which must not overwrite the page identifier.

Elements are cleared from the tree once a ``<page>`` or ``<siteinfo>`` has
been emitted, so memory stays flat regardless of dump size.
"""

from __future__ import annotations

import enum
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import BinaryIO, Dict, Iterator, Optional, Union

from dumpprep.dump.models import Page, SiteInfo
from dumpprep.errors import DumpFormatError

logger = logging.getLogger(__name__)

Record = Union[Page, SiteInfo]

_FLATTEN = str.maketrans({"\n": " ", "\r": " ", "\t": " "})


class ParserState(enum.Enum):
    IDLE = "idle"
    IN_SITEINFO = "in_siteinfo"
    IN_PAGE = "in_page"
    IN_REVISION = "in_revision"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

@dataclass
class _PageBuilder:
    id: Optional[int] = None
    title: Optional[str] = None
    namespace: Optional[int] = None
    text: str = ""

    def build(self) -> Page:
        missing = [
            name
            for name, value in (("id", self.id), ("title", self.title), ("ns", self.namespace))
            if value is None
        ]
        if missing:
            raise DumpFormatError(
                "Page is missing required elements",
                {"missing": missing, "id": self.id, "title": self.title},
            )
        return Page(
            id=self.id,
            title=self.title,
            namespace=self.namespace,
            text=self.text.translate(_FLATTEN),
        )


@dataclass
class _SiteInfoBuilder:
    dbname: str = ""
    generator: str = ""
    namespaces: Dict[int, str] = field(default_factory=dict)

    def build(self) -> SiteInfo:
        return SiteInfo(
            dbname=self.dbname,
            generator=self.generator,
            namespaces=dict(self.namespaces),
        )


def _local_name(tag: str) -> str:
    """Strip the ``{namespace}`` prefix ElementTree puts on every tag."""
    return tag.rpartition("}")[2]


def _to_int(value: Optional[str], what: str) -> int:
    try:
        return int((value or "").strip())
    except ValueError as exc:
        raise DumpFormatError(f"Expected an integer {what}", {"value": value}) from exc


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

class DumpParser:
    """Single-use, forward-only reader of one dump stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self.state = ParserState.IDLE
        self._page: Optional[_PageBuilder] = None
        self._site: Optional[_SiteInfoBuilder] = None
        self._root: Optional[ET.Element] = None

    def __iter__(self) -> Iterator[Record]:
        try:
            for event, elem in ET.iterparse(self._stream, events=("start", "end")):
                if self._root is None:
                    self._root = elem
                name = _local_name(elem.tag)
                if event == "start":
                    self._on_start(name)
                else:
                    record = self._on_end(name, elem)
                    if record is not None:
                        yield record
        except ET.ParseError as exc:
            raise DumpFormatError(
                "Malformed dump document",
                {"position": getattr(exc, "position", None), "error": str(exc)},
            ) from exc

        if self.state is not ParserState.IDLE:
            raise DumpFormatError("Dump ended inside an element", {"state": self.state.value})

    def _on_start(self, name: str) -> None:
        if name == "page":
            if self.state is not ParserState.IDLE:
                raise DumpFormatError("Nested <page> element", {"state": self.state.value})
            self._page = _PageBuilder()
            self.state = ParserState.IN_PAGE
        elif name == "revision" and self.state is ParserState.IN_PAGE:
            self.state = ParserState.IN_REVISION
        elif name == "siteinfo" and self.state is ParserState.IDLE:
            self._site = _SiteInfoBuilder()
            self.state = ParserState.IN_SITEINFO

    def _on_end(self, name: str, elem: ET.Element) -> Optional[Record]:
        state = self.state

        if state is ParserState.IN_PAGE:
            page = self._page
            if name == "title":
                page.title = elem.text or ""
            elif name == "ns":
                page.namespace = _to_int(elem.text, "namespace id")
            elif name == "id":
                page.id = _to_int(elem.text, "page id")
            elif name == "text":
                page.text = elem.text or ""
            elif name == "page":
                record = page.build()
                self._page = None
                self.state = ParserState.IDLE
                self._release()
                return record

        elif state is ParserState.IN_REVISION:
            if name == "text":
                self._page.text = elem.text or ""
            elif name == "revision":
                self.state = ParserState.IN_PAGE

        elif state is ParserState.IN_SITEINFO:
            site = self._site
            if name == "dbname":
                site.dbname = elem.text or ""
            elif name == "generator":
                site.generator = elem.text or ""
            elif name == "namespace":
                key = _to_int(elem.get("key"), "namespace key")
                site.namespaces[key] = elem.text or ""
            elif name == "siteinfo":
                record = site.build()
                self._site = None
                self.state = ParserState.IDLE
                self._release()
                logger.debug(
                    "Site info: %s (%d namespaces)", record.dbname, len(record.namespaces)
                )
                return record

        return None

    def _release(self) -> None:
        # Children of the document root are the only things iterparse keeps.
        if self._root is not None:
            self._root.clear()


def iter_records(stream: BinaryIO) -> Iterator[Record]:
    """Yield :class:`SiteInfo` and :class:`Page` records from *stream* in order.

    Raises:
        DumpFormatError: On malformed or truncated input.  Records yielded
            before the error are not retracted; the run must be discarded.
    """
    return iter(DumpParser(stream))
