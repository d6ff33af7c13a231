"""End-to-end run: dump in, titles/links/meta files out."""

from __future__ import annotations

import logging
import time
from datetime import timedelta
from typing import Optional

from dumpprep.config import Settings, settings
from dumpprep.dump.models import SiteInfo
from dumpprep.dump.parser import iter_records
from dumpprep.links.extractor import LinkExtractor
from dumpprep.pipeline.coordinator import LinkWriteCoordinator, RunTotals
from dumpprep.pipeline.paths import DumpPaths, open_dump, open_output
from dumpprep.pipeline.writers import (
    write_meta_footer,
    write_meta_header,
    write_title_record,
)

logger = logging.getLogger(__name__)


def run_pipeline(
    paths: DumpPaths,
    config: Optional[Settings] = None,
    extractor: Optional[LinkExtractor] = None,
) -> RunTotals:
    """Process the dump at ``paths.dump`` and write the three output files.

    Title records are written on the calling thread in dump order.  Link
    extraction runs on ``config.workers`` threads; the run totals are written
    to the meta file only after every link task has completed.

    Raises:
        DumpFormatError: If the dump is malformed.
        ExtractionError: If a link task fails.  Output files are then
            incomplete and must be discarded.
    """
    cfg = config or settings
    extractor = extractor or LinkExtractor.from_settings(cfg)
    started = time.perf_counter()

    logger.info("Reading %s with %d link worker(s)", paths.dump, cfg.workers)

    with open_dump(paths.dump, show_progress=cfg.show_progress) as stream, \
            open_output(paths.titles) as titles_out, \
            open_output(paths.links) as links_out, \
            open_output(paths.meta) as meta_out, \
            LinkWriteCoordinator(links_out, extractor, cfg.workers) as coordinator:

        for record in iter_records(stream):
            if isinstance(record, SiteInfo):
                write_meta_header(meta_out, record)
                logger.info(
                    "Site %r (%s), %d namespaces",
                    record.dbname,
                    record.generator,
                    len(record.namespaces),
                )
                continue

            coordinator.counters.add_title()
            write_title_record(titles_out, record, cfg.preview_chars)
            coordinator.dispatch(record)

        counters = coordinator.drain()
        totals = RunTotals(
            titles=counters.titles,
            links=counters.links,
            elapsed=timedelta(seconds=time.perf_counter() - started),
        )
        write_meta_footer(meta_out, totals)

    logger.info(
        "Finished after %s: %d titles, %d links", totals.elapsed, totals.titles, totals.links
    )
    return totals
