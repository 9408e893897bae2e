"""Command line interface for sqlmig."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from sqlalchemy.exc import ArgumentError

from .config import get_settings
from .errors import MigrationError
from .ledger import Ledger
from .runner import migrate
from .source import Source, sort_names
from .util.db import Database

app = typer.Typer(help="Apply ordered SQL migration scripts exactly once.")
console = Console()

DsnOption = typer.Option(None, "--dsn", help="Database URL or SQLite file path. Defaults to DB_DSN.")
RootOption = typer.Option(None, "--root", help="Directory holding migrations. Defaults to MIGRATIONS_ROOT.")
PatternOption = typer.Option(None, "--pattern", help="Glob selecting migration files. Defaults to MIGRATIONS_GLOB.")


def _configure_logging() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _resolve(dsn: Optional[str], root: Optional[Path], pattern: Optional[str]) -> tuple[Database, Source]:
    settings = get_settings()
    try:
        database = Database(dsn or settings.db_dsn)
    except ArgumentError as exc:
        console.print(f"[bold red]INVALID_DSN[/bold red]: {exc}")
        raise typer.Exit(code=1) from exc
    source = Source(root or settings.migrations_root, pattern or settings.migrations_glob)
    return database, source


@app.command()
def up(
    dsn: Optional[str] = DsnOption,
    root: Optional[Path] = RootOption,
    pattern: Optional[str] = PatternOption,
    json_output: Optional[Path] = typer.Option(None, "--json", help="Write the run report to JSON."),
) -> None:
    """Apply every pending migration in name order."""

    _configure_logging()
    database, source = _resolve(dsn, root, pattern)
    try:
        report = migrate(source, database)
    except MigrationError as exc:
        console.print(f"[bold red]MIGRATION_FAILED[/bold red]: {exc}")
        raise typer.Exit(code=1) from exc
    finally:
        database.close()

    for name in report.applied:
        console.print(f"[bold green]Applied[/bold green] {name}")
    console.print(
        f"{len(report.applied)} applied, {len(report.skipped)} already up to date"
        f" [dim]({source.root_path}/{source.pattern})[/dim]"
    )

    if json_output:
        payload = {
            "root": str(source.root_path),
            "pattern": source.pattern,
            "results": [result.to_dict() for result in report.results],
        }
        json_output.write_text(json.dumps(payload, indent=2))
        console.print(f"Report exported to [italic]{json_output}[/italic]")


@app.command()
def status(
    dsn: Optional[str] = DsnOption,
    root: Optional[Path] = RootOption,
    pattern: Optional[str] = PatternOption,
) -> None:
    """Show which discovered migrations are applied and which are pending."""

    _configure_logging()
    database, source = _resolve(dsn, root, pattern)
    ledger = Ledger()
    applied: set[str] = set()
    try:
        names = source.discover()
        with database.begin() as conn:
            # read-only: a database that was never migrated has nothing applied
            if ledger.exists(conn):
                applied = set(ledger.applied_names(conn))
    except MigrationError as exc:
        console.print(f"[bold red]STATUS_FAILED[/bold red]: {exc}")
        raise typer.Exit(code=1) from exc
    finally:
        database.close()

    for name in names:
        if name in applied:
            console.print(f"[green]applied[/green]  {name}")
        else:
            console.print(f"[yellow]pending[/yellow]  {name}")
    for name in sort_names(list(applied - set(names))):
        console.print(f"[dim]missing[/dim]  {name} [dim](recorded but no longer in source)[/dim]")


if __name__ == "__main__":  # pragma: no cover
    app()
