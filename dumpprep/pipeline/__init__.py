"""Pipeline package: dump-to-corpus run with concurrent link extraction.

Public API::

    from dumpprep.pipeline import resolve_paths, run_pipeline
    totals = run_pipeline(resolve_paths("dewiki-latest-pages-articles"))
"""

from dumpprep.pipeline.coordinator import LinkWriteCoordinator, RunTotals
from dumpprep.pipeline.driver import run_pipeline
from dumpprep.pipeline.paths import DumpPaths, open_dump, resolve_paths

__all__ = [
    "run_pipeline",
    "resolve_paths",
    "open_dump",
    "DumpPaths",
    "LinkWriteCoordinator",
    "RunTotals",
]
