"""Byte-position progress bar over the dump stream."""

from __future__ import annotations

from contextlib import contextmanager
from typing import BinaryIO, Iterator, Optional

from tqdm import tqdm


@contextmanager
def track_progress(
    stream: BinaryIO,
    total: Optional[int],
    enabled: bool = True,
    desc: str = "Parsing",
) -> Iterator[BinaryIO]:
    """Yield *stream*, wrapped so every ``read`` advances a progress bar.

    Purely cosmetic: when *enabled* is false the stream is yielded untouched.
    """
    if not enabled:
        yield stream
        return

    with tqdm.wrapattr(stream, "read", total=total, desc=desc, leave=True) as wrapped:
        yield wrapped
