"""
Report commands for the insight CLI

Each command loads the metrics config and the snapshot, computes one report
through MetricsEngine, renders it with Rich and optionally exports it.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Callable, Iterator, List, Optional

import typer

from insight_engine.config import MetricsConfig, load_metrics_config
from insight_engine.engine import MetricsEngine
from insight_engine.exceptions import InsightError
from insight_engine.logger import ProductionLogger
from insight_engine.metrics import ReportResult
from insight_engine.reports import rows_to_frame, summarize_frame, write_report
from insight_engine.store import SnapshotLoader

from ..ui import (
    Column,
    console,
    render_key_values,
    render_report,
    show_error_message,
    show_success_message,
)
from ..utils.config_helpers import (
    default_log_dir,
    find_default_config,
    find_default_database,
    parse_as_of,
)

EMPLOYEE_COLUMNS: List[Column] = [
    ("employee_id", "ID"),
    ("full_name", "Name"),
    ("department_name", "Department"),
    ("tenure_years", "Years"),
    ("current_salary", "Salary"),
    ("salary_growth_pct", "Growth %"),
    ("average_rating", "Avg Rating"),
    ("completed_trainings", "Trainings"),
    ("project_completion_rate", "Projects %"),
    ("overall_score", "Score"),
    ("classification", "Class"),
]

DEPARTMENT_COLUMNS: List[Column] = [
    ("department_id", "ID"),
    ("department_name", "Department"),
    ("headcount", "Headcount"),
    ("total_salary_cost", "Salary Cost"),
    ("average_salary", "Avg Salary"),
    ("average_performance", "Avg Perf"),
    ("project_completion_rate", "Projects %"),
    ("training_completions", "Trainings"),
    ("budget_utilization_pct", "Budget %"),
]

MANAGER_COLUMNS: List[Column] = [
    ("manager_id", "ID"),
    ("manager_name", "Manager"),
    ("direct_report_ids", "Direct Reports"),
    ("total_span", "Span"),
    ("average_performance", "Team Perf"),
    ("project_completion_rate", "Projects %"),
    ("effectiveness_score", "Effectiveness"),
]

ROI_COLUMNS: List[Column] = [
    ("program_id", "ID"),
    ("program_name", "Program"),
    ("participants", "Participants"),
    ("completion_rate", "Completion %"),
    ("average_score", "Avg Score"),
    ("total_cost", "Cost"),
    ("average_rating_delta", "Rating Delta"),
    ("roi_category", "ROI"),
]

COLLABORATION_COLUMNS: List[Column] = [
    ("department_a_name", "Department A"),
    ("department_b_name", "Department B"),
    ("project_ids", "Projects"),
    ("participants", "Participants"),
    ("combined_budget", "Budget"),
    ("average_performance", "Avg Perf"),
    ("completion_rate", "Completion %"),
]

SALARY_HOLDER_COLUMNS: List[Column] = [
    ("employee_id", "ID"),
    ("full_name", "Name"),
    ("department_name", "Department"),
    ("salary", "Salary"),
]

EXPENSE_COLUMNS: List[Column] = [
    ("department_id", "ID"),
    ("department_name", "Department"),
    ("salaried_headcount", "Salaried"),
    ("total_salary", "Total"),
    ("average_salary", "Average"),
]

PAY_GAP_COLUMNS: List[Column] = [
    ("employee_name", "Employee"),
    ("employee_salary", "Salary"),
    ("manager_name", "Manager"),
    ("manager_salary", "Manager Salary"),
    ("difference", "Difference"),
]

PROJECT_COST_COLUMNS: List[Column] = [
    ("project_id", "ID"),
    ("project_name", "Project"),
    ("status", "Status"),
    ("budget", "Budget"),
    ("active_assignments", "Assigned"),
    ("estimated_cost", "Est. Cost"),
    ("utilization_pct", "Utilization %"),
    ("over_budget", "Over"),
]

PROJECT_LOAD_COLUMNS: List[Column] = [
    ("employee_id", "ID"),
    ("full_name", "Name"),
    ("project_count", "Projects"),
    ("project_ids", "Project IDs"),
]

EMPLOYEE_REF_COLUMNS: List[Column] = [
    ("employee_id", "ID"),
    ("full_name", "Name"),
    ("department_name", "Department"),
]

ATTENDANCE_COLUMNS: List[Column] = [
    ("employee_id", "ID"),
    ("full_name", "Name"),
    ("recorded_days", "Recorded"),
    ("present_days", "Present"),
    ("attendance_pct", "Attendance %"),
]

LEAVE_COLUMNS: List[Column] = [
    ("employee_id", "ID"),
    ("full_name", "Name"),
    ("approved_requests", "Approved"),
    ("approved_days", "Days"),
]

COMPENSATION_REPORTS = ("second-highest", "top-paid", "expense", "top-department", "out-earning")
PROJECT_REPORTS = ("cost", "over-budget", "multi", "idle")


class ReportSession:
    """One CLI run: logger, configuration, snapshot and engine."""

    def __init__(
        self,
        database: Optional[Path],
        config_path: Optional[Path],
        as_of: Optional[str],
        verbose: bool = False,
        strict: bool = False,
    ):
        self.as_of: date = parse_as_of(as_of)
        self.database = database or find_default_database()
        self.config_path = config_path or find_default_config()
        self.logger = ProductionLogger(
            log_level="DEBUG" if verbose else "INFO",
            log_dir=default_log_dir(),
            console=verbose,
        )
        self.config: MetricsConfig = load_metrics_config(self.config_path)
        self.snapshot = SnapshotLoader(self.database).load(
            strict=strict, snapshot_id=self.logger.run_id
        )
        self.engine = MetricsEngine(self.snapshot, self.config)
        self.logger.info(
            "Report session opened",
            database=str(self.database),
            config=str(self.config_path) if self.config_path else None,
            as_of=self.as_of,
        )

    def emit(
        self,
        result: ReportResult,
        columns: List[Column],
        export: Optional[Path] = None,
        title: Optional[str] = None,
        summary_columns: Optional[List[str]] = None,
    ) -> None:
        self.logger.log_report(result)
        render_report(result, columns, title)
        if summary_columns and not result.is_empty:
            means = summarize_frame(rows_to_frame(result.rows), summary_columns)
            render_key_values(
                "Averages", [(name.replace("_", " "), value) for name, value in means.items()]
            )
        if export is not None:
            path = write_report(result, export)
            show_success_message(f"Exported {len(result.rows)} rows to {path}")

    def close(self) -> None:
        self.logger.close()


@contextmanager
def report_session(
    database: Optional[Path],
    config_path: Optional[Path],
    as_of: Optional[str],
    verbose: bool = False,
    strict: bool = False,
) -> Iterator[ReportSession]:
    """Open a ReportSession and turn engine errors into a non-zero exit."""
    session: Optional[ReportSession] = None
    try:
        session = ReportSession(database, config_path, as_of, verbose, strict)
        yield session
    except InsightError as e:
        if session is not None:
            session.logger.exception("Report failed", error_type=type(e).__name__)
        show_error_message(e.message)
        if verbose:
            console.print(e.format_diagnostic_message())
        raise typer.Exit(1)
    except (FileNotFoundError, ValueError) as e:
        show_error_message(str(e))
        raise typer.Exit(1)
    finally:
        if session is not None:
            session.close()


def _run(
    compute: Callable[[ReportSession], ReportResult],
    columns: List[Column],
    database: Optional[Path],
    config_path: Optional[Path],
    as_of: Optional[str],
    export: Optional[Path],
    verbose: bool,
    title: Optional[str] = None,
    summary_columns: Optional[List[str]] = None,
) -> None:
    with report_session(database, config_path, as_of, verbose) as session:
        session.emit(compute(session), columns, export, title, summary_columns)


def show_employee(
    employee_id: int,
    database: Optional[Path],
    config_path: Optional[Path],
    as_of: Optional[str],
    verbose: bool,
) -> None:
    """Print the full metric row of one employee."""
    with report_session(database, config_path, as_of, verbose) as session:
        row = session.engine.employee_metrics(session.as_of, employee_id)
        session.logger.info("Employee metrics computed", employee_id=employee_id)
        render_key_values(
            f"{row.full_name} (as of {session.as_of.isoformat()})",
            [(name.replace("_", " "), value) for name, value in row]
        )


def employees_report(
    department_id: Optional[int],
    include_former: bool,
    database: Optional[Path],
    config_path: Optional[Path],
    as_of: Optional[str],
    export: Optional[Path],
    verbose: bool,
) -> None:
    _run(
        lambda s: s.engine.employee_metrics_report(
            s.as_of, department_id, include_former or None
        ),
        EMPLOYEE_COLUMNS,
        database, config_path, as_of, export, verbose,
        summary_columns=["current_salary", "average_rating", "overall_score"],
    )


def departments_report(
    include_empty: bool,
    database: Optional[Path],
    config_path: Optional[Path],
    as_of: Optional[str],
    export: Optional[Path],
    verbose: bool,
) -> None:
    _run(
        lambda s: s.engine.department_report(s.as_of, include_empty or None),
        DEPARTMENT_COLUMNS,
        database, config_path, as_of, export, verbose,
    )


def managers_report(
    department_id: Optional[int],
    database: Optional[Path],
    config_path: Optional[Path],
    as_of: Optional[str],
    export: Optional[Path],
    verbose: bool,
) -> None:
    _run(
        lambda s: s.engine.manager_report(s.as_of, department_id),
        MANAGER_COLUMNS,
        database, config_path, as_of, export, verbose,
    )


def training_roi_report(
    completed_only: bool,
    database: Optional[Path],
    config_path: Optional[Path],
    as_of: Optional[str],
    export: Optional[Path],
    verbose: bool,
) -> None:
    _run(
        lambda s: s.engine.training_roi_report(s.as_of, completed_only or None),
        ROI_COLUMNS,
        database, config_path, as_of, export, verbose,
    )


def collaboration_report(
    database: Optional[Path],
    config_path: Optional[Path],
    as_of: Optional[str],
    export: Optional[Path],
    verbose: bool,
) -> None:
    _run(
        lambda s: s.engine.collaboration_report(s.as_of),
        COLLABORATION_COLUMNS,
        database, config_path, as_of, export, verbose,
    )


def _top_department(session: ReportSession) -> ReportResult:
    row = session.engine.top_department_by_average_salary(session.as_of)
    return ReportResult(
        report="top_department_by_average_salary",
        as_of=session.as_of,
        rows=[row] if row is not None else [],
    )


def compensation_report(
    report: str,
    database: Optional[Path],
    config_path: Optional[Path],
    as_of: Optional[str],
    export: Optional[Path],
    verbose: bool,
) -> None:
    """Run one of the compensation reports by name."""
    choices = {
        "second-highest": (lambda s: s.engine.second_highest_salary(s.as_of), SALARY_HOLDER_COLUMNS),
        "top-paid": (lambda s: s.engine.highest_paid_by_department(s.as_of), SALARY_HOLDER_COLUMNS),
        "expense": (lambda s: s.engine.department_salary_expense(s.as_of), EXPENSE_COLUMNS),
        "top-department": (_top_department, EXPENSE_COLUMNS),
        "out-earning": (lambda s: s.engine.employees_out_earning_manager(s.as_of), PAY_GAP_COLUMNS),
    }
    if report not in choices:
        show_error_message(
            f"Unknown compensation report '{report}'. Choose from: {', '.join(COMPENSATION_REPORTS)}"
        )
        raise typer.Exit(1)
    compute, columns = choices[report]
    _run(compute, columns, database, config_path, as_of, export, verbose)


def projects_report(
    report: str,
    min_projects: Optional[int],
    database: Optional[Path],
    config_path: Optional[Path],
    as_of: Optional[str],
    export: Optional[Path],
    verbose: bool,
) -> None:
    """Run one of the project reports by name."""
    choices = {
        "cost": (lambda s: s.engine.project_cost_report(s.as_of), PROJECT_COST_COLUMNS),
        "over-budget": (lambda s: s.engine.projects_over_budget(s.as_of), PROJECT_COST_COLUMNS),
        "multi": (
            lambda s: s.engine.employees_on_multiple_projects(s.as_of, min_projects),
            PROJECT_LOAD_COLUMNS,
        ),
        "idle": (lambda s: s.engine.employees_without_projects(s.as_of), EMPLOYEE_REF_COLUMNS),
    }
    if report not in choices:
        show_error_message(
            f"Unknown project report '{report}'. Choose from: {', '.join(PROJECT_REPORTS)}"
        )
        raise typer.Exit(1)
    compute, columns = choices[report]
    _run(compute, columns, database, config_path, as_of, export, verbose)


def attendance_report(
    since: Optional[str],
    database: Optional[Path],
    config_path: Optional[Path],
    as_of: Optional[str],
    export: Optional[Path],
    verbose: bool,
) -> None:
    since_date = parse_as_of(since) if since else None
    _run(
        lambda s: s.engine.attendance_report(s.as_of, since_date),
        ATTENDANCE_COLUMNS,
        database, config_path, as_of, export, verbose,
        summary_columns=["attendance_pct"],
    )


def leave_report(
    limit: Optional[int],
    show_all: bool,
    database: Optional[Path],
    config_path: Optional[Path],
    as_of: Optional[str],
    export: Optional[Path],
    verbose: bool,
) -> None:
    if show_all:
        compute = lambda s: s.engine.leave_usage_report(s.as_of)  # noqa: E731
    else:
        compute = lambda s: s.engine.most_leave_days(s.as_of, limit)  # noqa: E731
    _run(compute, LEAVE_COLUMNS, database, config_path, as_of, export, verbose)
