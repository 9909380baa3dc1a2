from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from transcript_desk.config import get_settings
from transcript_desk.domain.models import PAGE_SIZES, SortDirection
from transcript_desk.errors import LoadFailure, TranscriptDeskError
from transcript_desk.infrastructure.storage import MemoryStorage
from transcript_desk.loader import list_tables, load_database_file, open_upload
from transcript_desk.providers.abstract import Upload
from transcript_desk.reporter import print_attempts, print_filter_options, print_page, print_stats
from transcript_desk.session import Session
from transcript_desk.utils.logging import configure_logging

app = typer.Typer(help="Podcast transcript desk CLI.")
console = Console()


@app.callback()
def _setup() -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)


def _fail(message: str) -> typer.Exit:
    console.print(f"[bold red]⚠️  {escape(message)}[/bold red]")
    return typer.Exit(code=1)


def _open_session() -> Session:
    """Load the configured database; a load failure blocks everything else."""
    try:
        return Session.from_settings()
    except LoadFailure as exc:
        console.print(
            Panel(
                f"Error loading podcast database: {escape(str(exc))}\n\nFix the problem and re-run the command to retry.",
                title="Load failed",
                border_style="red",
            )
        )
        raise typer.Exit(code=1)


def _write_artifact(output_dir: Optional[Path], filename: str, data: bytes) -> Path:
    directory = output_dir or Path(get_settings().export_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    path.write_bytes(data)
    return path


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.database_path} table={settings.focal_table} | "
        f"overlay={settings.storage_path}#{settings.overlay_key} | "
        f"exports={settings.export_dir} page_size={settings.default_page_size}"
    )


@app.command()
def tables() -> None:
    """
    List the tables of the configured database.
    """
    settings = get_settings()
    try:
        loaded = load_database_file(
            settings.database_path,
            focal_table=settings.focal_table,
            attempts=settings.load_retry_attempts,
        )
    except LoadFailure as exc:
        raise _fail(str(exc))
    for name in loaded.all_tables:
        marker = " (focal)" if name == settings.focal_table else ""
        typer.echo(f"{name}{marker}")
    if not loaded.has_focal_table:
        typer.echo(f"Table '{settings.focal_table}' not found.", err=True)


@app.command()
def show(
    search: str = typer.Option("", "--search", "-q", help="Case-insensitive text to look for in any column."),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Only this category."),
    status: Optional[str] = typer.Option(None, "--status", help="Only this exact status."),
    year: Optional[str] = typer.Option(None, "--year", "-y", help="Only this year."),
    filters: Optional[List[str]] = typer.Option(
        None, "--filter", "-f", help="Extra column filter as COLUMN=VALUE (repeatable)."
    ),
    sort: Optional[str] = typer.Option(None, "--sort", "-s", help="Column to sort by."),
    desc: bool = typer.Option(False, "--desc", help="Sort descending."),
    page: int = typer.Option(1, "--page", "-p", help="Page number (1-based)."),
    page_size: Optional[int] = typer.Option(
        None, "--page-size", "-n", help=f"Rows per page, one of {', '.join(map(str, PAGE_SIZES))}."
    ),
    stats: bool = typer.Option(True, "--stats/--no-stats", help="Print the overview panel."),
) -> None:
    """
    Show one page of records after search, filters and sort.
    """
    session = _open_session()
    try:
        if page_size is not None:
            session.set_page_size(page_size)
        session.search(search)
        for column, value in (("category", category), ("status", status), ("year", year)):
            if value:
                session.filter(column, value)
        for item in filters or []:
            column, sep, value = item.partition("=")
            if not sep:
                raise _fail(f"Invalid filter '{item}', expected COLUMN=VALUE")
            session.filter(column.strip(), value.strip())
        if sort:
            session.set_sort(sort, SortDirection.DESC if desc else SortDirection.ASC)
        current = session.set_page(page)
    except TranscriptDeskError as exc:
        raise _fail(str(exc))

    if stats:
        print_stats(session.stats(), console=console)
    title = session.table or "Records"
    if session.table and not session.has_focal_table:
        title = f"{title} ({session.focal_table} table not found)"
    print_page(current, session.columns, title=title, console=console)


@app.command(name="stats")
def stats_command() -> None:
    """
    Print overview statistics and the available filter values.
    """
    session = _open_session()
    print_stats(session.stats(), console=console)
    print_filter_options(session.filter_options(), console=console)


@app.command()
def edit(
    record_id: int = typer.Argument(..., help="Id of the record to edit."),
    transcript: Optional[str] = typer.Option(None, "--transcript", "-t", help="New transcript text."),
    from_file: Optional[Path] = typer.Option(None, "--from-file", help="Read the new transcript from a file."),
) -> None:
    """
    Save a new transcript for one record. An empty transcript sets the status to "To do".
    """
    if transcript is None and from_file is None:
        raise _fail("Provide --transcript or --from-file")
    text = from_file.read_text(encoding="utf-8") if from_file else transcript or ""
    session = _open_session()
    try:
        row = session.edit(record_id, text)
    except TranscriptDeskError as exc:
        raise _fail(f"Error saving transcript: {exc}")
    typer.echo(f"Saved transcript for id={row['id']} (status: {row.get('status')})")


@app.command(name="clear-changes")
def clear_changes(
    yes: bool = typer.Option(False, "--yes", help="Do not ask for confirmation."),
) -> None:
    """
    Forget every saved transcript change and revert to the database contents.
    """
    if not yes:
        typer.confirm(
            "Are you sure you want to clear all saved transcript changes? "
            "This will revert all transcripts to their original state.",
            abort=True,
        )
    session = _open_session()
    try:
        session.clear_changes()
    except TranscriptDeskError as exc:
        raise _fail(f"Error clearing changes: {exc}")
    typer.echo("Persisted changes cleared.")


@app.command(name="export-csv")
def export_csv(
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Destination directory."),
) -> None:
    """
    Export every record (ignoring search and filters) to CSV.
    """
    session = _open_session()
    if not session.records:
        raise _fail("No data to export")
    filename, data = session.export_csv()
    path = _write_artifact(output_dir, filename, data)
    typer.echo(f"Wrote {len(session.records):,} rows to {path}")


@app.command()
def snapshot(
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Destination directory."),
) -> None:
    """
    Write a database backup with every saved transcript change applied.
    """
    session = _open_session()
    try:
        filename, data, exporter = session.snapshot()
    except TranscriptDeskError as exc:
        raise _fail(f"Error creating database backup: {exc}")
    path = _write_artifact(output_dir, filename, data)
    typer.echo(f"Database backup written to {path} ({len(data):,} bytes)")
    for failure in exporter.last_replay_failures:
        typer.echo(f"Skipped: {failure}", err=True)


@app.command()
def inspect(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="File to open (.db, .csv, .json, ...)."),
    page_size: int = typer.Option(10, "--page-size", "-n", help="Rows to preview."),
) -> None:
    """
    Open any file through the provider chain and preview what it contains.
    """
    upload = Upload(filename=path.name, data=path.read_bytes())
    outcome = open_upload(upload)
    print_attempts(outcome.attempts, console=console)
    typer.echo("Tables: " + ", ".join(list_tables(outcome.executor)))

    settings = get_settings()
    session = Session(
        outcome.executor,
        storage=MemoryStorage(),
        focal_table=settings.focal_table,
        overlay_key=settings.overlay_key,
    )
    try:
        session.reload()
        current = session.set_page_size(page_size)
    except TranscriptDeskError as exc:
        raise _fail(str(exc))
    print_page(current, session.columns, title=session.table, console=console)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
