"""Links package: page-name canonicalization and wikitext link extraction."""

from dumpprep.links.canonical import canonicalize
from dumpprep.links.extractor import LinkExtractor, LinkRecord

__all__ = ["canonicalize", "LinkExtractor", "LinkRecord"]
