"""
Rich rendering helpers for the insight CLI.

Tables show ``undefined`` and ``no_review_data`` markers dimmed so they are
never mistaken for zeros.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from insight_engine.metrics import ReportResult, is_undefined

console = Console()

Column = Tuple[str, str]


def show_error_message(message: str) -> None:
    console.print(f"❌ [bold red]Error:[/bold red] {message}")


def show_warning_message(message: str) -> None:
    console.print(f"⚠️  [yellow]{message}[/yellow]")


def show_success_message(message: str) -> None:
    console.print(f"✅ [green]{message}[/green]")


def format_value(value: Any) -> str:
    """Render one cell."""
    if value is None:
        return "[dim]-[/dim]"
    if is_undefined(value):
        return f"[dim italic]{value.value}[/dim italic]"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, Decimal):
        return f"{value:,.2f}"
    if isinstance(value, bool):
        return "[red]yes[/red]" if value else "no"
    if isinstance(value, float):
        return f"{value:,.2f}"
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    return str(value)


def build_table(title: str, rows: Sequence[Any], columns: Sequence[Column]) -> Table:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    for _, header in columns:
        table.add_column(header, overflow="fold")
    for row in rows:
        table.add_row(*(format_value(getattr(row, field)) for field, _ in columns))
    return table


def render_report(result: ReportResult, columns: Sequence[Column], title: Optional[str] = None) -> None:
    """Print the rows of a report and a summary of its exclusions."""
    heading = title or result.report.replace("_", " ").title()
    heading = f"{heading} (as of {result.as_of.isoformat()})"
    if result.is_empty:
        show_warning_message(f"{heading}: no rows")
    else:
        console.print(build_table(heading, result.rows, columns))
    render_exclusions(result)


def render_exclusions(result: ReportResult, limit: int = 10) -> None:
    if not result.exclusions:
        return
    counts: Dict[str, int] = {}
    for exclusion in result.exclusions:
        counts[exclusion.reason.value] = counts.get(exclusion.reason.value, 0) + 1
    summary = ", ".join(f"{reason}: {count}" for reason, count in sorted(counts.items()))
    show_warning_message(f"{len(result.exclusions)} records excluded ({summary})")
    for exclusion in result.exclusions[:limit]:
        console.print(
            f"   [dim]{exclusion.entity_type} {exclusion.entity_id} "
            f"[{exclusion.scope}]: {exclusion.detail}[/dim]"
        )


def render_key_values(title: str, items: Iterable[Tuple[str, Any]]) -> None:
    table = Table(show_header=False, box=None)
    table.add_column("Metric", style="cyan")
    table.add_column("Value")
    for label, value in items:
        table.add_row(label, format_value(value))
    console.print(Panel(table, title=title, border_style="blue"))


def render_counts(title: str, counts: Dict[str, int]) -> None:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Table")
    table.add_column("Rows", justify="right")
    for name, count in counts.items():
        table.add_row(name, str(count))
    console.print(table)


def render_issues(issues: List[Any], limit: int = 20) -> None:
    for issue in issues[:limit]:
        console.print(f"   [yellow]•[/yellow] {issue.describe()}")
    if len(issues) > limit:
        console.print(f"   [dim]... and {len(issues) - limit} more[/dim]")
