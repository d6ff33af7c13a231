"""Exceptions raised by the dump preprocessor.

Every error here is fatal for a run: the pipeline never retries and never
skips a page, so callers are expected to let these propagate to the CLI.
"""

from __future__ import annotations

from typing import Any, Optional


class DumpPrepError(Exception):
    """Base exception for all preprocessor errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class DumpFormatError(DumpPrepError):
    """The dump document is malformed, truncated or structurally invalid."""


class ExtractionError(DumpPrepError):
    """A link extraction task failed; the links file is incomplete."""

    def __init__(self, page_id: int, title: str, cause: BaseException) -> None:
        super().__init__(
            f"Link extraction failed: {cause!r}",
            {"page_id": page_id, "title": title},
        )
        self.page_id = page_id
        self.title = title
        self.cause = cause
