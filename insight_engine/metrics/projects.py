"""Project cost and project load reports."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Set

from ..config import MetricsConfig
from ..exceptions import MissingEntityError
from ..snapshot import Project, Snapshot
from .models import (
    EmployeeRef,
    Exclusion,
    ProjectCost,
    ProjectLoad,
    ReportResult,
)
from .values import percentage, round_money

logger = logging.getLogger(__name__)

_HUNDRED = Decimal("100")


def _cost_row(
    snapshot: Snapshot,
    as_of: date,
    project: Project,
    places: int,
    exclusions: Optional[List[Exclusion]] = None,
) -> ProjectCost:
    """Estimated cost from active assignments.

    An assignee without a salary raises unless ``exclusions`` is given; then
    the assignment is left out of the estimate and recorded there.
    """
    cost = Decimal("0")
    active = 0
    for assignment in snapshot.assignments_for_project(project.project_id, as_of):
        if not assignment.is_active_at(as_of):
            continue
        try:
            salary = snapshot.current_salary(assignment.employee_id, as_of)
        except MissingEntityError as e:
            if exclusions is None:
                raise
            exclusions.append(
                Exclusion.from_error("employee", assignment.employee_id, e, scope="estimated_cost")
            )
            continue
        cost += salary * Decimal(str(assignment.allocation_percent)) / _HUNDRED
        active += 1

    cost = round_money(cost)
    return ProjectCost(
        project_id=project.project_id,
        project_name=project.name,
        status=project.status.value,
        budget=project.budget,
        active_assignments=active,
        estimated_cost=cost,
        variance=round_money(project.budget - cost),
        utilization_pct=percentage(cost, project.budget, places),
        over_budget=cost > project.budget,
    )


def project_cost(
    snapshot: Snapshot,
    as_of: date,
    project_id: int,
    config: Optional[MetricsConfig] = None,
) -> ProjectCost:
    config = config or MetricsConfig()
    return _cost_row(snapshot, as_of, snapshot.project(project_id), config.places)


def project_cost_report(
    snapshot: Snapshot,
    as_of: date,
    over_budget_only: bool = False,
    config: Optional[MetricsConfig] = None,
) -> ReportResult[ProjectCost]:
    """Cost against budget for every project started by ``as_of``."""
    config = config or MetricsConfig()
    rows: List[ProjectCost] = []
    exclusions: List[Exclusion] = []
    for project in snapshot.projects.values():
        if project.start_date is not None and project.start_date > as_of:
            continue
        row = _cost_row(snapshot, as_of, project, config.places, exclusions)
        if over_budget_only and not row.over_budget:
            continue
        rows.append(row)

    report = "projects_over_budget" if over_budget_only else "project_cost"
    logger.info(f"Project cost report as of {as_of}: {len(rows)} rows")
    return ReportResult[ProjectCost](report=report, as_of=as_of, rows=rows, exclusions=exclusions)


def projects_over_budget(
    snapshot: Snapshot,
    as_of: date,
    config: Optional[MetricsConfig] = None,
) -> ReportResult[ProjectCost]:
    return project_cost_report(snapshot, as_of, over_budget_only=True, config=config)


def _active_projects(snapshot: Snapshot, as_of: date) -> Dict[int, Set[int]]:
    by_employee: Dict[int, Set[int]] = {}
    for employee in snapshot.employees_at(as_of):
        by_employee[employee.employee_id] = {
            a.project_id
            for a in snapshot.assignments_for_employee(employee.employee_id, as_of)
            if a.is_active_at(as_of)
        }
    return by_employee


def employees_on_multiple_projects(
    snapshot: Snapshot,
    as_of: date,
    min_projects: Optional[int] = None,
    config: Optional[MetricsConfig] = None,
) -> ReportResult[ProjectLoad]:
    """Employees with at least ``min_projects`` active projects."""
    config = config or MetricsConfig()
    if min_projects is None:
        min_projects = config.reporting.min_projects_for_multi_assignment

    rows: List[ProjectLoad] = []
    exclusions: List[Exclusion] = []
    for employee_id, project_ids in _active_projects(snapshot, as_of).items():
        if len(project_ids) < min_projects:
            continue
        try:
            for project_id in project_ids:
                snapshot.project(project_id)
        except MissingEntityError as e:
            exclusions.append(Exclusion.from_error("employee", employee_id, e))
            continue
        employee = snapshot.employee(employee_id)
        rows.append(
            ProjectLoad(
                employee_id=employee_id,
                full_name=employee.full_name,
                department_id=employee.department_id,
                project_count=len(project_ids),
                project_ids=sorted(project_ids),
            )
        )
    rows.sort(key=lambda row: (-row.project_count, row.employee_id))
    return ReportResult[ProjectLoad](
        report="employees_on_multiple_projects", as_of=as_of, rows=rows, exclusions=exclusions
    )


def employees_without_projects(snapshot: Snapshot, as_of: date) -> ReportResult[EmployeeRef]:
    """Employees employed at ``as_of`` with no active assignment."""
    rows: List[EmployeeRef] = []
    exclusions: List[Exclusion] = []
    for employee_id, project_ids in _active_projects(snapshot, as_of).items():
        if project_ids:
            continue
        employee = snapshot.employee(employee_id)
        try:
            department = (
                snapshot.department(employee.department_id)
                if employee.department_id is not None else None
            )
        except MissingEntityError as e:
            exclusions.append(Exclusion.from_error("employee", employee_id, e))
            continue
        rows.append(
            EmployeeRef(
                employee_id=employee_id,
                full_name=employee.full_name,
                department_id=employee.department_id,
                department_name=department.name if department else None,
            )
        )
    return ReportResult[EmployeeRef](
        report="employees_without_projects", as_of=as_of, rows=rows, exclusions=exclusions
    )
