"""Line-oriented serialization of the three output files.

Each record is assembled in memory and handed to the stream in a single
``write`` call, so a record is never split by another writer's output.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, TextIO

from dumpprep.dump.models import Page, SiteInfo
from dumpprep.links.canonical import canonicalize
from dumpprep.links.extractor import LinkRecord


def _write_lines(out: TextIO, *lines: object) -> None:
    out.write("".join(f"{line}\n" for line in lines))


def write_title_record(out: TextIO, page: Page, preview_chars: int = 100) -> None:
    """Write id, raw title, canonical title, text length and a text preview."""
    _write_lines(
        out,
        page.id,
        page.title,
        canonicalize(page.title),
        len(page.text),
        page.text[:preview_chars],
    )


def write_link_record(out: TextIO, record: LinkRecord) -> None:
    """Write id, first link and the ``|``-joined link list."""
    _write_lines(out, record.page_id, record.first_link, "|".join(record.links))


def write_meta_header(
    out: TextIO, site: SiteInfo, created: Optional[datetime] = None
) -> None:
    created = created or datetime.now()
    _write_lines(
        out,
        f"File created: {created.isoformat(sep=' ', timespec='seconds')}",
        f"Database: {site.dbname}",
        f"Generator: {site.generator}",
    )


def write_meta_footer(out: TextIO, totals) -> None:
    """Write the run totals; only valid once every link task has finished."""
    _write_lines(
        out,
        f"TotalTitles: {totals.titles}",
        f"TotalLinks: {totals.links}",
        f"Finished after: {totals.elapsed}",
    )
