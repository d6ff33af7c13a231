"""Inspect commands for looking at a dump or a single article without a full run."""

from pathlib import Path

import typer

from dumpprep.config import settings
from dumpprep.dump import Page, SiteInfo, iter_records
from dumpprep.errors import DumpFormatError
from dumpprep.links import LinkExtractor
from dumpprep.pipeline import open_dump, resolve_paths

inspect_app = typer.Typer(help="Look at dump metadata and link extraction results.")


@inspect_app.command("siteinfo")
def inspect_siteinfo(
    stem: str = typer.Argument(..., help="Dump stem (reads <stem>.xml or <stem>.xml.bz2)."),
) -> None:
    """Print the database name, generator and namespace table of a dump."""
    try:
        paths = resolve_paths(stem)
        with open_dump(paths.dump) as stream:
            site = next((r for r in iter_records(stream) if isinstance(r, SiteInfo)), None)
    except (FileNotFoundError, DumpFormatError) as e:
        typer.echo(f"[inspect] Error: {e}", err=True)
        raise typer.Exit(code=1)

    if site is None:
        typer.echo("[inspect] No <siteinfo> section found.")
        raise typer.Exit(code=1)

    typer.echo(f"Database : {site.dbname}")
    typer.echo(f"Generator: {site.generator}")
    typer.echo(f"Namespaces ({len(site.namespaces)}):")
    for key in sorted(site.namespaces):
        typer.echo(f"  {key:>5}  {site.namespaces[key] or '(main)'}")


@inspect_app.command("links")
def inspect_links(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Wikitext file."),
    namespace: int = typer.Option(0, "--namespace", help="Namespace id to treat the text as."),
) -> None:
    """Run link extraction over a wikitext file and print the result."""
    text = path.read_text(encoding="utf-8")
    page = Page(
        id=0,
        title=path.stem,
        namespace=namespace,
        text=text.replace("\r", " ").replace("\n", " ").replace("\t", " "),
    )
    record = LinkExtractor.from_settings(settings).extract(page)
    if record is None:
        typer.echo(
            f"[inspect] Namespace {namespace} is not the main namespace "
            f"({settings.main_namespace}); no links extracted."
        )
        return

    typer.echo(f"First link: {record.first_link or '(none)'}")
    typer.echo(f"Links ({len(record.links)}):")
    for link in record.links:
        typer.echo(f"  {link}")
