from __future__ import annotations

from typing import Any, List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from transcript_desk.core.values import month_name, stringify
from transcript_desk.core.view import classify_status, status_badge
from transcript_desk.domain.models import CurrentPage, FilterOptions, OverviewStats, StatusBucket
from transcript_desk.providers.abstract import ProviderAttempt

_BADGE_STYLES = {
    StatusBucket.ERROR: "bold red",
    StatusBucket.COMPLETED: "green",
    StatusBucket.PENDING: "yellow",
    StatusBucket.TODO: "blue",
    StatusBucket.OTHER: "cyan",
    StatusBucket.UNKNOWN: "dim",
}

TRANSCRIPT_PREVIEW_CHARS = 40


def _cell(column: str, value: Any) -> str:
    if column == "status":
        style = _BADGE_STYLES[classify_status(value)]
        return f"[{style}]{escape(status_badge(value))}[/{style}]"
    if column == "month":
        return escape(stringify(month_name(value)))
    if column == "transcript":
        text = stringify(value).strip()
        if not text:
            return "[dim]No transcript[/dim]"
        flat = " ".join(text.split())
        if len(flat) > TRANSCRIPT_PREVIEW_CHARS:
            flat = flat[: TRANSCRIPT_PREVIEW_CHARS - 1] + "…"
        return escape(flat)
    return escape(stringify(value))


def print_page(
    page: CurrentPage,
    columns: Sequence[str],
    title: Optional[str] = None,
    console: Optional[Console] = None,
) -> None:
    """
    Render one page of records as a rich table. The id column is shown dimmed
    because edits are addressed by id.
    """
    console = console or Console()

    if not page.rows:
        console.print("[yellow]No records match the current view.[/yellow]")
        if page.total_pages and page.page > page.total_pages:
            console.print(f"[yellow]Page {page.page} is past the last page ({page.total_pages}).[/yellow]")
        return

    table = Table(
        title=title or "Podcasts",
        box=box.ROUNDED,
        caption=(
            f"Page {page.page} of {page.total_pages} │ "
            f"{page.total_matches:,} matching │ {page.page_size} per page"
        ),
    )
    for col in columns:
        if col == "id":
            table.add_column("ID", justify="right", style="dim", no_wrap=True)
        elif col in ("month", "year", "status"):
            table.add_column(col.replace("_", " ").title(), justify="center", no_wrap=True)
        else:
            table.add_column(col.replace("_", " ").title(), overflow="fold")

    for row in page.rows:
        table.add_row(*[_cell(col, row.get(col)) for col in columns])

    console.print(table)


def print_stats(stats: OverviewStats, console: Optional[Console] = None) -> None:
    console = console or Console()
    counts = stats.status_counts
    lines: List[str] = [
        f"[bold]Total podcasts:[/bold] {stats.total:,}",
        f"[bold]Categories:[/bold] {stats.category_count}",
        f"[bold]Years:[/bold] {stats.years_range}",
        f"[bold]With transcripts:[/bold] {stats.with_transcripts:,}   "
        f"[bold]Without:[/bold] {stats.without_transcripts:,}",
        f"[bold]Completion rate:[/bold] {stats.completion_rate}%",
    ]
    breakdown = [
        ("completed", "Completed", "green"),
        ("pending", "Pending", "yellow"),
        ("todo", "To Do", "blue"),
        ("error", "Errors", "red"),
        ("other", "Other", "cyan"),
    ]
    parts = [f"[{style}]{label}: {counts[key]}[/{style}]" for key, label, style in breakdown if counts.get(key)]
    if parts:
        lines.append(" │ ".join(parts))
    console.print(Panel("\n".join(lines), title="Overview", box=box.ROUNDED, expand=False))


def print_filter_options(options: FilterOptions, console: Optional[Console] = None) -> None:
    console = console or Console()
    table = Table(title="Filter options", box=box.SIMPLE)
    table.add_column("Filter", style="cyan")
    table.add_column("Values")
    table.add_row("category", escape(", ".join(stringify(v) for v in options.categories)) or "-")
    table.add_row("status", escape(", ".join(stringify(v) for v in options.statuses)) or "-")
    table.add_row("year", escape(", ".join(stringify(v) for v in options.years)) or "-")
    console.print(table)


def print_attempts(attempts: Sequence[ProviderAttempt], console: Optional[Console] = None) -> None:
    console = console or Console()
    table = Table(title="Load providers", box=box.ROUNDED)
    table.add_column("Provider", style="cyan", no_wrap=True)
    table.add_column("Result", justify="center")
    table.add_column("Reason", overflow="fold")
    for attempt in attempts:
        if attempt.get("succeeded"):
            table.add_row(attempt["provider"], "[green]selected[/green]", "")
        else:
            reason = f"{attempt.get('error_type')}: {attempt.get('error')}"
            table.add_row(attempt["provider"], "[yellow]declined[/yellow]", escape(reason))
    console.print(table)
