"""Command-line interface for transcat.

Commands:
    - stats: Per-catalog message counts
    - check: Consistency checks (placeholders, empty bodies, duplicates)
    - lookup: Resolve one message the way an application would
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from transcat.checks import IssueSeverity, catalog_stats, check_catalog
from transcat.config import CatalogConfig
from transcat.exceptions import ConfigError, ParseError
from transcat.parser import parse_file
from transcat.store import CatalogStore

app = typer.Typer(
    name="transcat",
    help="Inspect and query translation catalogs",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Inspect and query translation catalogs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _format_severity(severity: IssueSeverity) -> str:
    color = "red" if severity is IssueSeverity.ERROR else "yellow"
    return f"[{color}]{severity.value}[/{color}]"


@app.command("stats")
def stats_cmd(
    files: Annotated[list[Path], typer.Argument(help="Catalog files")],
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Show message counts per catalog."""
    rows = []
    failed = False
    for file in files:
        try:
            rows.append(catalog_stats(parse_file(file)))
        except ParseError as e:
            failed = True
            typer.echo(f"Error: {e}", err=True)

    if json_output:
        typer.echo(json.dumps(rows, indent=2, ensure_ascii=False))
    else:
        table = Table(title="Catalog statistics")
        for column in ("Catalog", "Locale", "Version", "Contexts", "Translated", "Unfinished", "Obsolete", "Ambiguous"):
            table.add_column(column)
        for row in rows:
            table.add_row(
                str(row["source"]),
                str(row["locale"] or "-"),
                str(row["version"] or "-"),
                str(row["contexts"]),
                f"[green]{row['translated']}[/green]",
                f"[yellow]{row['unfinished']}[/yellow]",
                f"[dim]{row['obsolete']}[/dim]",
                str(row["ambiguities"]),
            )
        console.print(table)

    if failed:
        raise typer.Exit(1)


@app.command("check")
def check_cmd(
    files: Annotated[list[Path], typer.Argument(help="Catalog files")],
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Check catalogs for placeholder, body and duplicate-key problems."""
    failed = False
    report = {}
    for file in files:
        try:
            issues = check_catalog(parse_file(file))
        except ParseError as e:
            failed = True
            typer.echo(f"Error: {e}", err=True)
            continue
        report[str(file)] = issues
        if any(issue.severity is IssueSeverity.ERROR for issue in issues):
            failed = True

    if json_output:
        payload = {name: [i.to_dict() for i in issues] for name, issues in report.items()}
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        for name, issues in report.items():
            if not issues:
                console.print(f"[green]✓[/green] {name}: no issues")
                continue
            table = Table(title=name)
            table.add_column("Severity")
            table.add_column("Code")
            table.add_column("Context")
            table.add_column("Source")
            table.add_column("Message")
            for issue in issues:
                table.add_row(
                    _format_severity(issue.severity),
                    issue.code,
                    issue.context,
                    issue.source_text,
                    issue.message,
                )
            console.print(table)

    if failed:
        raise typer.Exit(1)


@app.command("lookup")
def lookup_cmd(
    context: Annotated[str, typer.Argument(help="Context name")],
    source: Annotated[str, typer.Argument(help="Source text")],
    directory: Annotated[
        Optional[list[Path]],
        typer.Option("--dir", "-d", help="Catalog directory (repeatable)"),
    ] = None,
    locale: Annotated[
        Optional[str],
        typer.Option("--locale", "-l", help="Locale tag, e.g. vi_VN"),
    ] = None,
    comment: Annotated[
        Optional[str],
        typer.Option("--comment", "-c", help="Disambiguation comment"),
    ] = None,
    args: Annotated[
        Optional[list[str]],
        typer.Option("--arg", "-a", help="Placeholder argument (repeatable)"),
    ] = None,
    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", help="Configuration file (YAML or JSON)"),
    ] = None,
    explain: Annotated[
        bool,
        typer.Option("--explain", help="Show which locale supplied the text"),
    ] = False,
) -> None:
    """Resolve a message through the fallback chain."""
    try:
        config = CatalogConfig.from_file(config_file) if config_file else CatalogConfig.from_environment()
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if directory:
        config.catalog_dirs = list(directory)
    locale = locale or config.default_locale
    if not locale:
        typer.echo("Error: no locale given (use --locale or TRANSCAT_LOCALE)", err=True)
        raise typer.Exit(1)

    store = CatalogStore(config)
    try:
        manager = store.set_active_locale(locale)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    resolved = store.translator().resolve(context, source, comment, args or [])
    typer.echo(resolved.text)
    if explain:
        origin = resolved.locale or "source text (fallback)"
        typer.echo(f"chain: {' -> '.join(manager.chain) or '(empty)'}", err=True)
        typer.echo(f"from: {origin}{' (ambiguous)' if resolved.ambiguous else ''}", err=True)


if __name__ == "__main__":
    app()
