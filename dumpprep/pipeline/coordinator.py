"""Bounded-parallel link extraction with a single serialized writer.

The coordinator sits between the single producer (the dump reader) and a
``ThreadPoolExecutor``:

* **Admission**: a semaphore with one permit per worker.  The producer takes
  a permit before submitting a page and blocks when none is free, so at most
  ``workers`` page bodies are in flight at any time.
* **Writing**: each task computes its :class:`LinkRecord` first and only
  then takes the writer lock, so the three lines of a record are always
  contiguous in the links file.  Records of different pages appear in
  completion order, not input order.
* **Drain**: :meth:`LinkWriteCoordinator.drain` takes every permit back.
  Once it returns, every submitted task has finished and the counters are
  final.

A failing task logs the page it was working on and poisons the coordinator:
the next :meth:`dispatch` or :meth:`drain` raises :class:`ExtractionError`.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, TextIO

from dumpprep.dump.models import Page
from dumpprep.errors import ExtractionError
from dumpprep.links.extractor import LinkExtractor
from dumpprep.pipeline.writers import write_link_record

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunTotals:
    titles: int
    links: int
    elapsed: timedelta


class Counters:
    """Thread-safe run totals, readable only once sealed by a drain."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._titles = 0
        self._links = 0
        self._sealed = False

    def add_title(self) -> None:
        with self._lock:
            self._titles += 1

    def add_links(self, count: int) -> None:
        with self._lock:
            self._links += count

    def seal(self) -> None:
        with self._lock:
            self._sealed = True

    def _read(self, value: int) -> int:
        if not self._sealed:
            raise RuntimeError("Counters are not final until the coordinator is drained")
        return value

    @property
    def titles(self) -> int:
        return self._read(self._titles)

    @property
    def links(self) -> int:
        return self._read(self._links)


class LinkWriteCoordinator:
    """Runs :meth:`LinkExtractor.extract` on a bounded pool and writes the results.

    Use as a context manager so the pool is shut down even when the
    producer fails half-way through the dump.
    """

    def __init__(self, out: TextIO, extractor: LinkExtractor, workers: int) -> None:
        self.workers = max(1, workers)
        self.counters = Counters()
        self._out = out
        self._extractor = extractor
        self._gate = threading.BoundedSemaphore(self.workers)
        self._write_lock = threading.Lock()
        self._pool = ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="links")
        self._failure: Optional[ExtractionError] = None

    def __enter__(self) -> "LinkWriteCoordinator":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._pool.shutdown(wait=True)

    # ------------------------------------------------------------------
    # Producer side
    # ------------------------------------------------------------------

    def dispatch(self, page: Page) -> bool:
        """Queue link extraction for *page*.

        Returns ``False`` without blocking when the page is outside the main
        namespace.  Otherwise waits for a free permit and returns ``True``.

        Raises:
            ExtractionError: If an earlier task has failed.
        """
        self._raise_failure()
        if not self._extractor.accepts(page):
            return False

        self._gate.acquire()
        try:
            self._pool.submit(self._run, page)
        except BaseException:
            self._gate.release()
            raise
        return True

    def drain(self) -> Counters:
        """Block until every dispatched task has finished, then seal the counters.

        Raises:
            ExtractionError: If any task failed.
        """
        for _ in range(self.workers):
            self._gate.acquire()
        for _ in range(self.workers):
            self._gate.release()

        self._raise_failure()
        self.counters.seal()
        return self.counters

    def _raise_failure(self) -> None:
        failure = self._failure
        if failure is not None:
            raise failure from failure.cause

    # ------------------------------------------------------------------
    # Worker side
    # ------------------------------------------------------------------

    def _run(self, page: Page) -> None:
        try:
            record = self._extractor.extract(page)
            self.counters.add_links(len(record.links))
            with self._write_lock:
                write_link_record(self._out, record)
        except Exception as exc:
            logger.exception("Link task failed for page %d (%r)", page.id, page.title)
            with self._write_lock:
                if self._failure is None:
                    self._failure = ExtractionError(page.id, page.title, exc)
        finally:
            self._gate.release()
