"""Dump preprocessor CLI: entry-point for all operations.

Usage:
    python cli/main.py --help

Commands:
    run        → process a dump into titles/links/meta files
    canonical  → print canonical page names
    inspect    → look at a dump's site info or one article's links
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from dumpprep.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import dataclasses
from typing import List, Optional

import typer

from cli.commands.inspect import inspect_app
from dumpprep.config import settings
from dumpprep.errors import DumpPrepError
from dumpprep.links import canonicalize
from dumpprep.log import setup_logging

app = typer.Typer(
    name="dumpprep",
    help="Wiki dump preprocessor CLI.",
    no_args_is_help=True,
)
app.add_typer(inspect_app, name="inspect")


@app.command("run")
def run(
    stem: str = typer.Argument(..., help="Dump stem: reads <stem>.xml, writes <stem>.*.txt."),
    workers: Optional[int] = typer.Option(
        None, "--workers", "-w", min=1, help="Parallel link workers (default: CPU count)."
    ),
    ignore_prefix: Optional[List[str]] = typer.Option(
        None,
        "--ignore-prefix",
        help="Link prefix never chosen as first link (repeatable). Replaces the default set.",
    ),
    progress: bool = typer.Option(
        settings.show_progress, "--progress/--no-progress", help="Show a progress bar."
    ),
    log_level: str = typer.Option(settings.log_level, "--log-level", help="Logging level."),
) -> None:
    """Extract titles, links and metadata from a wiki XML dump."""
    from dumpprep.pipeline import resolve_paths, run_pipeline

    setup_logging(log_level)

    overrides = {"show_progress": progress}
    if workers:
        overrides["workers"] = workers
    if ignore_prefix:
        overrides["ignored_link_prefixes"] = frozenset(ignore_prefix)
    config = dataclasses.replace(settings, **overrides)

    try:
        paths = resolve_paths(stem)
        typer.echo(f"[run] Processing {paths.dump} with {config.workers} worker(s) …")
        totals = run_pipeline(paths, config)
    except (FileNotFoundError, DumpPrepError) as e:
        typer.echo(f"[run] Error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"[run] Titles : {totals.titles}")
    typer.echo(f"[run] Links  : {totals.links}")
    typer.echo(f"[run] Elapsed: {totals.elapsed}")
    typer.echo(f"[run] Wrote {paths.titles}, {paths.links}, {paths.meta}")


@app.command("canonical")
def canonical(
    texts: List[str] = typer.Argument(..., help="Titles or link targets."),
) -> None:
    """Print the canonical page name of each argument, one per line."""
    for text in texts:
        typer.echo(canonicalize(text))


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
