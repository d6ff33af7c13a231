"""Dump package: streaming XML reader and its record types."""

from dumpprep.dump.models import Page, SiteInfo
from dumpprep.dump.parser import DumpParser, ParserState, iter_records

__all__ = ["DumpParser", "ParserState", "iter_records", "Page", "SiteInfo"]
