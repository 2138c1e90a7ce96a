"""
Department and manager aggregates.

Both reports share one team aggregation over a member list:

- members without a current salary stay in the headcount but are left out
  of the salary figures (``no_salary_record`` exclusion, scope ``salary``)
- members whose review, training or project lookups hit a missing row
  are left out of those figures (``missing_entity`` exclusion, scope
  ``aggregate``); their salary still counts, so the salary figures always
  match ``department_total_salary_cost``
- training completions count distinct programs per member
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from ..config import MetricsConfig
from ..exceptions import MissingEntityError, NoSalaryRecordError
from ..snapshot import Employee, Snapshot
from .employee import performance_summary
from .models import (
    DepartmentMetrics,
    Exclusion,
    ManagerMetrics,
    ReportResult,
)
from .values import (
    UNDEFINED,
    MoneyValue,
    RatioValue,
    capped_share,
    is_undefined,
    mean,
    money_mean,
    percentage,
    round_money,
    weighted_score,
)

logger = logging.getLogger(__name__)


@dataclass
class _SalaryFigures:
    total: Decimal = Decimal("0")
    salaried: int = 0
    exclusions: List[Exclusion] = field(default_factory=list)
    amounts: List[Decimal] = field(default_factory=list)

    @property
    def average(self) -> MoneyValue:
        return money_mean(self.amounts)


def _salary_figures(snapshot: Snapshot, as_of: date, members: Sequence[Employee]) -> _SalaryFigures:
    figures = _SalaryFigures()
    for member in members:
        try:
            amount = snapshot.current_salary(member.employee_id, as_of)
        except NoSalaryRecordError as e:
            figures.exclusions.append(
                Exclusion.from_error("employee", member.employee_id, e, scope="salary")
            )
            continue
        figures.amounts.append(amount)
        figures.total += amount
        figures.salaried += 1
    figures.total = round_money(figures.total)
    return figures


def _team_aggregate(
    snapshot: Snapshot,
    as_of: date,
    members: Sequence[Employee],
    places: int,
) -> Tuple[Dict[str, Any], List[Exclusion]]:
    """Aggregate fields shared by ``DepartmentMetrics`` and ``ManagerMetrics``."""
    exclusions: List[Exclusion] = []
    ratings: List[float] = []
    scores: List[float] = []
    project_ids: Set[int] = set()
    training_completions = 0

    for member in members:
        try:
            summary = performance_summary(snapshot, as_of, member.employee_id, places)
            completed = snapshot.completed_training_for(member.employee_id, as_of)
            for record in completed:
                snapshot.training_program(record.program_id)
            member_projects = {
                a.project_id
                for a in snapshot.assignments_for_employee(member.employee_id, as_of)
            }
            for project_id in member_projects:
                snapshot.project(project_id)
        except MissingEntityError as e:
            exclusions.append(
                Exclusion.from_error("employee", member.employee_id, e, scope="aggregate")
            )
            continue

        if not is_undefined(summary.average_rating):
            ratings.append(summary.average_rating)
        training_completions += len({record.program_id for record in completed})
        scores.extend(r.score for r in completed if r.score is not None)
        project_ids |= member_projects

    salary = _salary_figures(snapshot, as_of, members)
    exclusions.extend(salary.exclusions)

    completed_projects = sum(
        1 for project_id in project_ids if snapshot.project(project_id).is_completed_at(as_of)
    )

    fields = {
        "headcount": len(members),
        "salaried_headcount": salary.salaried,
        "total_salary_cost": salary.total,
        "average_salary": salary.average,
        "average_performance": mean(ratings, places),
        "rated_headcount": len(ratings),
        "total_projects": len(project_ids),
        "completed_projects": completed_projects,
        "project_completion_rate": percentage(completed_projects, len(project_ids), places),
        "training_completions": training_completions,
        "average_training_score": mean(scores, places),
    }
    return fields, exclusions


# ------------------------------------------------------------- departments


def department_total_salary_cost(snapshot: Snapshot, as_of: date, department_id: int) -> Decimal:
    """Sum of current salaries of the department's employees at ``as_of``."""
    snapshot.department(department_id)
    return _salary_figures(snapshot, as_of, snapshot.employees_at(as_of, department_id)).total


def department_average_salary(snapshot: Snapshot, as_of: date, department_id: int) -> MoneyValue:
    """Mean current salary, ``UNDEFINED`` when no member has a salary."""
    snapshot.department(department_id)
    return _salary_figures(snapshot, as_of, snapshot.employees_at(as_of, department_id)).average


def _department_row(
    snapshot: Snapshot, as_of: date, department_id: int, config: MetricsConfig
) -> Tuple[DepartmentMetrics, List[Exclusion]]:
    department = snapshot.department(department_id)
    manager = (
        snapshot.employee(department.manager_id)
        if department.manager_id is not None else None
    )
    members = snapshot.employees_at(as_of, department_id)
    fields, exclusions = _team_aggregate(snapshot, as_of, members, config.places)

    row = DepartmentMetrics(
        department_id=department.department_id,
        department_name=department.name,
        location=department.location,
        manager_id=department.manager_id,
        manager_name=manager.full_name if manager else None,
        budget=department.budget,
        budget_utilization_pct=percentage(
            fields["total_salary_cost"], department.budget, config.places
        ),
        **fields,
    )
    return row, exclusions


def department_metrics(
    snapshot: Snapshot,
    as_of: date,
    department_id: int,
    config: Optional[MetricsConfig] = None,
) -> DepartmentMetrics:
    row, _ = _department_row(snapshot, as_of, department_id, config or MetricsConfig())
    return row


def department_report(
    snapshot: Snapshot,
    as_of: date,
    include_empty: Optional[bool] = None,
    config: Optional[MetricsConfig] = None,
) -> ReportResult[DepartmentMetrics]:
    """One row per department, in id order.

    Departments without employees at ``as_of`` are skipped unless
    ``include_empty`` is set.
    """
    config = config or MetricsConfig()
    if include_empty is None:
        include_empty = config.reporting.include_empty_departments

    rows: List[DepartmentMetrics] = []
    exclusions: List[Exclusion] = []
    for department_id in snapshot.departments:
        if not include_empty and not snapshot.employees_at(as_of, department_id):
            continue
        try:
            row, row_exclusions = _department_row(snapshot, as_of, department_id, config)
        except MissingEntityError as e:
            exclusions.append(Exclusion.from_error("department", department_id, e))
            continue
        rows.append(row)
        exclusions.extend(row_exclusions)

    logger.info(
        f"Department report as of {as_of}: {len(rows)} rows, {len(exclusions)} exclusions"
    )
    return ReportResult[DepartmentMetrics](
        report="department_metrics", as_of=as_of, rows=rows, exclusions=exclusions
    )


# ---------------------------------------------------------------- managers


def _effectiveness_score(
    fields: Dict[str, Any], direct_reports: int, config: MetricsConfig
) -> RatioValue:
    norm = config.scoring.normalization
    performance = fields["average_performance"]
    components = {
        "performance": (
            UNDEFINED if is_undefined(performance)
            else capped_share(performance, norm.rating_scale_max)
        ),
        "project_completion": fields["project_completion_rate"],
        "training": fields["average_training_score"],
        "team_size": capped_share(direct_reports, norm.team_size_target),
    }
    return weighted_score(
        components,
        config.scoring.manager_weights.as_dict(),
        policy=config.scoring.undefined_component_policy,
        places=config.places,
    )


def _manager_row(
    snapshot: Snapshot, as_of: date, manager_id: int, config: MetricsConfig
) -> Tuple[ManagerMetrics, List[Exclusion]]:
    manager = snapshot.employee(manager_id)
    reports = snapshot.direct_reports_at(manager_id, as_of)
    span = sum(
        1 for emp_id in snapshot.hierarchy.all_reports(manager_id)
        if snapshot.employee(emp_id).is_employed_at(as_of)
    )
    fields, exclusions = _team_aggregate(snapshot, as_of, reports, config.places)

    row = ManagerMetrics(
        manager_id=manager.employee_id,
        manager_name=manager.full_name,
        department_id=manager.department_id,
        direct_report_ids=[emp.employee_id for emp in reports],
        total_span=span,
        effectiveness_score=_effectiveness_score(fields, len(reports), config),
        **fields,
    )
    return row, exclusions


def manager_metrics(
    snapshot: Snapshot,
    as_of: date,
    manager_id: int,
    config: Optional[MetricsConfig] = None,
) -> ManagerMetrics:
    """Aggregate over the manager's direct reports employed at ``as_of``."""
    row, _ = _manager_row(snapshot, as_of, manager_id, config or MetricsConfig())
    return row


def manager_report(
    snapshot: Snapshot,
    as_of: date,
    department_id: Optional[int] = None,
    config: Optional[MetricsConfig] = None,
) -> ReportResult[ManagerMetrics]:
    """Every employed manager with at least one employed direct report."""
    config = config or MetricsConfig()

    rows: List[ManagerMetrics] = []
    exclusions: List[Exclusion] = []
    for manager_id in snapshot.hierarchy.managers():
        manager = snapshot.employee(manager_id)
        if not manager.is_employed_at(as_of):
            continue
        if department_id is not None and manager.department_id != department_id:
            continue
        if not snapshot.direct_reports_at(manager_id, as_of):
            continue
        try:
            row, row_exclusions = _manager_row(snapshot, as_of, manager_id, config)
        except MissingEntityError as e:
            exclusions.append(Exclusion.from_error("employee", manager_id, e))
            continue
        rows.append(row)
        exclusions.extend(row_exclusions)

    logger.info(f"Manager report as of {as_of}: {len(rows)} rows")
    return ReportResult[ManagerMetrics](
        report="manager_metrics", as_of=as_of, rows=rows, exclusions=exclusions
    )
