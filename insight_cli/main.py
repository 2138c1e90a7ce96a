#!/usr/bin/env python3
"""
Workforce Insight Engine CLI

Rich-based CLI over the insight_engine metric families: initialize or check
the DuckDB snapshot store and print any report at an as-of date.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from .commands.reports import (
    COMPENSATION_REPORTS,
    PROJECT_REPORTS,
    attendance_report,
    collaboration_report,
    compensation_report,
    departments_report,
    employees_report,
    leave_report,
    managers_report,
    projects_report,
    show_employee,
    training_roi_report,
)
from .commands.store import init_database, validate_database

# Initialize Rich console
console = Console()

# Main app
app = typer.Typer(
    name="insight",
    help="Workforce Insight Engine CLI - metrics over an employee-management snapshot",
    rich_markup_mode="rich",
    no_args_is_help=True,
    add_completion=True,
)

DATABASE_HELP = "Path to the DuckDB snapshot store"
CONFIG_HELP = "Path to the metrics config YAML"
AS_OF_HELP = "As-of date (YYYY-MM-DD); today when omitted"
EXPORT_HELP = "Write the report to a .csv, .parquet or .json file"


# Add version callback
def version_callback(value: bool):
    if value:
        from insight_cli import __version__
        console.print(f"Workforce Insight Engine v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version information"
    ),
):
    """
    [bold blue]Workforce Insight Engine CLI[/bold blue]

    Read-only employee, department, manager, training, collaboration,
    compensation, project and attendance metrics at any as-of date.

    [dim]Examples:[/dim]
        insight init-db --sample                    # Create the demo store
        insight departments --as-of 2026-03-31      # Department aggregates
        insight employee 7 --as-of 2026-03-31       # One employee in detail
        insight compensation out-earning --export gaps.csv
    """
    pass


# Store commands
@app.command("init-db")
def init_db(
    database: Optional[Path] = typer.Option(None, "--database", help=DATABASE_HELP),
    sample: bool = typer.Option(False, "--sample", help="Seed the store with the demo dataset"),
    fresh: bool = typer.Option(False, "--fresh", help="Drop existing snapshot tables first"),
):
    """🗄️  Create the snapshot store tables."""
    init_database(database=database, sample=sample, fresh=fresh)


@app.command("validate")
def validate(
    database: Optional[Path] = typer.Option(None, "--database", help=DATABASE_HELP),
    strict: bool = typer.Option(False, "--strict", help="Fail on any dangling reference"),
):
    """✅ Check the snapshot store for missing tables and dangling references."""
    validate_database(database=database, strict=strict)


# Per-employee commands
@app.command("employee")
def employee(
    employee_id: int = typer.Argument(..., help="Employee id"),
    database: Optional[Path] = typer.Option(None, "--database", help=DATABASE_HELP),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
    as_of: Optional[str] = typer.Option(None, "--as-of", help=AS_OF_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
):
    """👤 Show every metric of one employee."""
    show_employee(employee_id, database, config, as_of, verbose)


@app.command("employees")
def employees(
    department: Optional[int] = typer.Option(None, "--department", "-d", help="Only this department"),
    include_former: bool = typer.Option(False, "--include-former", help="Include employees terminated by the as-of date"),
    database: Optional[Path] = typer.Option(None, "--database", help=DATABASE_HELP),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
    as_of: Optional[str] = typer.Option(None, "--as-of", help=AS_OF_HELP),
    export: Optional[Path] = typer.Option(None, "--export", help=EXPORT_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
):
    """👥 Per-employee metrics with scores and classifications."""
    employees_report(department, include_former, database, config, as_of, export, verbose)


# Aggregate commands
@app.command("departments")
def departments(
    include_empty: bool = typer.Option(False, "--include-empty", help="Include departments without employees"),
    database: Optional[Path] = typer.Option(None, "--database", help=DATABASE_HELP),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
    as_of: Optional[str] = typer.Option(None, "--as-of", help=AS_OF_HELP),
    export: Optional[Path] = typer.Option(None, "--export", help=EXPORT_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
):
    """🏢 Department headcount, salary, performance and project aggregates."""
    departments_report(include_empty, database, config, as_of, export, verbose)


@app.command("managers")
def managers(
    department: Optional[int] = typer.Option(None, "--department", "-d", help="Only managers in this department"),
    database: Optional[Path] = typer.Option(None, "--database", help=DATABASE_HELP),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
    as_of: Optional[str] = typer.Option(None, "--as-of", help=AS_OF_HELP),
    export: Optional[Path] = typer.Option(None, "--export", help=EXPORT_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
):
    """🧭 Manager team aggregates and effectiveness scores."""
    managers_report(department, database, config, as_of, export, verbose)


# Correlation commands
@app.command("training-roi")
def training_roi(
    completed_only: bool = typer.Option(False, "--completed-only", help="Only count completed participants"),
    database: Optional[Path] = typer.Option(None, "--database", help=DATABASE_HELP),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
    as_of: Optional[str] = typer.Option(None, "--as-of", help=AS_OF_HELP),
    export: Optional[Path] = typer.Option(None, "--export", help=EXPORT_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
):
    """🎓 Training programs against participants' rating changes."""
    training_roi_report(completed_only, database, config, as_of, export, verbose)


@app.command("collaboration")
def collaboration(
    database: Optional[Path] = typer.Option(None, "--database", help=DATABASE_HELP),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
    as_of: Optional[str] = typer.Option(None, "--as-of", help=AS_OF_HELP),
    export: Optional[Path] = typer.Option(None, "--export", help=EXPORT_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
):
    """🤝 Department pairs sharing projects."""
    collaboration_report(database, config, as_of, export, verbose)


# Report library
@app.command("compensation")
def compensation(
    report: str = typer.Argument("expense", help=f"Report ({', '.join(COMPENSATION_REPORTS)})"),
    database: Optional[Path] = typer.Option(None, "--database", help=DATABASE_HELP),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
    as_of: Optional[str] = typer.Option(None, "--as-of", help=AS_OF_HELP),
    export: Optional[Path] = typer.Option(None, "--export", help=EXPORT_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
):
    """💰 Salary rankings, department expense and manager pay gaps."""
    compensation_report(report, database, config, as_of, export, verbose)


@app.command("projects")
def projects(
    report: str = typer.Argument("cost", help=f"Report ({', '.join(PROJECT_REPORTS)})"),
    min_projects: Optional[int] = typer.Option(None, "--min-projects", help="Threshold for the 'multi' report"),
    database: Optional[Path] = typer.Option(None, "--database", help=DATABASE_HELP),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
    as_of: Optional[str] = typer.Option(None, "--as-of", help=AS_OF_HELP),
    export: Optional[Path] = typer.Option(None, "--export", help=EXPORT_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
):
    """📁 Project cost against budget and employee project load."""
    projects_report(report, min_projects, database, config, as_of, export, verbose)


@app.command("attendance")
def attendance(
    since: Optional[str] = typer.Option(None, "--since", help="Only records on or after this date"),
    database: Optional[Path] = typer.Option(None, "--database", help=DATABASE_HELP),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
    as_of: Optional[str] = typer.Option(None, "--as-of", help=AS_OF_HELP),
    export: Optional[Path] = typer.Option(None, "--export", help=EXPORT_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
):
    """🕘 Attendance percentage per employee."""
    attendance_report(since, database, config, as_of, export, verbose)


@app.command("leave")
def leave(
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Top N employees by approved leave days"),
    show_all: bool = typer.Option(False, "--all", help="Every employee with approved leave"),
    database: Optional[Path] = typer.Option(None, "--database", help=DATABASE_HELP),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
    as_of: Optional[str] = typer.Option(None, "--as-of", help=AS_OF_HELP),
    export: Optional[Path] = typer.Option(None, "--export", help=EXPORT_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
):
    """🌴 Approved leave usage."""
    leave_report(limit, show_all, database, config, as_of, export, verbose)


def cli_main():
    """Entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n🛑 [yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"\n❌ [bold red]Error:[/bold red] {e}")
        sys.exit(1)


if __name__ == "__main__":
    cli_main()
