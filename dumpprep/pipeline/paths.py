"""Input/output locations derived from a dump stem."""

from __future__ import annotations

import bz2
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, TextIO, Union

from dumpprep.pipeline.progress import track_progress


@dataclass(frozen=True)
class DumpPaths:
    dump: Path
    titles: Path
    links: Path
    meta: Path

    @property
    def compressed(self) -> bool:
        return self.dump.suffix == ".bz2"


def resolve_paths(stem: Union[str, Path]) -> DumpPaths:
    """Map ``<stem>`` to ``<stem>.xml`` and its three ``.txt`` outputs.

    Falls back to ``<stem>.xml.bz2`` when the plain dump does not exist.

    Raises:
        FileNotFoundError: If neither dump file exists.
    """
    stem = str(stem)
    dump = Path(stem + ".xml")
    if not dump.exists():
        compressed = Path(stem + ".xml.bz2")
        if not compressed.exists():
            raise FileNotFoundError(f"No dump found at {dump} or {compressed}")
        dump = compressed

    return DumpPaths(
        dump=dump,
        titles=Path(stem + ".titles.txt"),
        links=Path(stem + ".links.txt"),
        meta=Path(stem + ".meta.txt"),
    )


@contextmanager
def open_dump(path: Path, show_progress: bool = False) -> Iterator[BinaryIO]:
    """Open a dump for binary reading, decompressing ``.bz2`` transparently.

    Progress is reported against the bytes read from disk, so for compressed
    dumps it tracks the compressed size.
    """
    path = Path(path)
    with open(path, "rb") as raw, track_progress(
        raw, path.stat().st_size, enabled=show_progress, desc=path.name
    ) as tracked:
        if path.suffix == ".bz2":
            with bz2.open(tracked, "rb") as stream:
                yield stream
        else:
            yield tracked


def open_output(path: Path) -> TextIO:
    return open(path, "w", encoding="utf-8", newline="\n")
