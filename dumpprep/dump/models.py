"""Data models for records read from a dump."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass(frozen=True)
class Page:
    """One ``<page>`` element, flattened to single-line text."""

    id: int
    title: str
    namespace: int
    text: str


@dataclass(frozen=True)
class SiteInfo:
    """The ``<siteinfo>`` header of a dump."""

    dbname: str
    generator: str
    namespaces: Dict[int, str] = field(default_factory=dict)
