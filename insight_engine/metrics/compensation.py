"""Compensation reports over the salary current at the as-of date."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from ..exceptions import MissingEntityError, NoSalaryRecordError
from ..snapshot import Employee, Snapshot
from .models import (
    DepartmentSalaryExpense,
    Exclusion,
    ManagerPayGap,
    ReportResult,
    SalaryHolder,
)
from .values import is_undefined, money_mean, round_money

logger = logging.getLogger(__name__)


def current_salaries(
    snapshot: Snapshot, as_of: date
) -> Tuple[Dict[int, Decimal], List[Exclusion]]:
    """Current salary of every employee employed at ``as_of``."""
    salaries: Dict[int, Decimal] = {}
    exclusions: List[Exclusion] = []
    for employee in snapshot.employees_at(as_of):
        try:
            salaries[employee.employee_id] = snapshot.current_salary(employee.employee_id, as_of)
        except NoSalaryRecordError as e:
            exclusions.append(Exclusion.from_error("employee", employee.employee_id, e))
    return salaries, exclusions


def _holder(snapshot: Snapshot, employee: Employee, salary: Decimal) -> SalaryHolder:
    department = (
        snapshot.department(employee.department_id)
        if employee.department_id is not None else None
    )
    return SalaryHolder(
        employee_id=employee.employee_id,
        full_name=employee.full_name,
        department_id=employee.department_id,
        department_name=department.name if department else None,
        salary=salary,
    )


def _holders(
    snapshot: Snapshot,
    employee_ids: List[int],
    salaries: Dict[int, Decimal],
    exclusions: List[Exclusion],
) -> List[SalaryHolder]:
    rows = []
    for employee_id in sorted(employee_ids):
        try:
            rows.append(_holder(snapshot, snapshot.employee(employee_id), salaries[employee_id]))
        except MissingEntityError as e:
            exclusions.append(Exclusion.from_error("employee", employee_id, e))
    return rows


def second_highest_salary(snapshot: Snapshot, as_of: date) -> ReportResult[SalaryHolder]:
    """Employees paid the second highest distinct current salary (ties included)."""
    salaries, exclusions = current_salaries(snapshot, as_of)
    distinct = sorted(set(salaries.values()), reverse=True)
    rows: List[SalaryHolder] = []
    if len(distinct) >= 2:
        target = distinct[1]
        matching = [emp_id for emp_id, amount in salaries.items() if amount == target]
        rows = _holders(snapshot, matching, salaries, exclusions)
    return ReportResult[SalaryHolder](
        report="second_highest_salary", as_of=as_of, rows=rows, exclusions=exclusions
    )


def _salaries_by_department(
    snapshot: Snapshot, as_of: date
) -> Tuple[Dict[int, Dict[int, Decimal]], List[Exclusion]]:
    salaries, exclusions = current_salaries(snapshot, as_of)
    grouped: Dict[int, Dict[int, Decimal]] = defaultdict(dict)
    for employee_id, amount in salaries.items():
        department_id = snapshot.employee(employee_id).department_id
        if department_id is None:
            continue
        try:
            snapshot.department(department_id)
        except MissingEntityError as e:
            exclusions.append(Exclusion.from_error("employee", employee_id, e))
            continue
        grouped[department_id][employee_id] = amount
    return dict(sorted(grouped.items())), exclusions


def highest_paid_by_department(snapshot: Snapshot, as_of: date) -> ReportResult[SalaryHolder]:
    """Per department, every employee paid the department maximum."""
    grouped, exclusions = _salaries_by_department(snapshot, as_of)
    rows: List[SalaryHolder] = []
    for members in grouped.values():
        top = max(members.values())
        for employee_id in sorted(members):
            if members[employee_id] == top:
                rows.append(_holder(snapshot, snapshot.employee(employee_id), top))
    return ReportResult[SalaryHolder](
        report="highest_paid_by_department", as_of=as_of, rows=rows, exclusions=exclusions
    )


def department_salary_expense(
    snapshot: Snapshot, as_of: date
) -> ReportResult[DepartmentSalaryExpense]:
    """Total current salary per department, largest first."""
    grouped, exclusions = _salaries_by_department(snapshot, as_of)
    rows = [
        DepartmentSalaryExpense(
            department_id=department_id,
            department_name=snapshot.department(department_id).name,
            salaried_headcount=len(members),
            total_salary=round_money(sum(members.values(), Decimal("0"))),
            average_salary=money_mean(members.values()),
        )
        for department_id, members in grouped.items()
    ]
    rows.sort(key=lambda row: (-row.total_salary, row.department_id))
    return ReportResult[DepartmentSalaryExpense](
        report="department_salary_expense", as_of=as_of, rows=rows, exclusions=exclusions
    )


def top_department_by_average_salary(
    snapshot: Snapshot, as_of: date
) -> Optional[DepartmentSalaryExpense]:
    """Department with the highest average salary; lowest id wins ties."""
    candidates = [
        row for row in department_salary_expense(snapshot, as_of).rows
        if not is_undefined(row.average_salary)
    ]
    if not candidates:
        return None
    return min(candidates, key=lambda row: (-row.average_salary, row.department_id))


def employees_out_earning_manager(snapshot: Snapshot, as_of: date) -> ReportResult[ManagerPayGap]:
    """Employees whose current salary exceeds their manager's."""
    salaries, exclusions = current_salaries(snapshot, as_of)
    rows: List[ManagerPayGap] = []
    for employee_id in sorted(salaries):
        employee = snapshot.employee(employee_id)
        if employee.manager_id is None:
            continue
        try:
            manager = snapshot.employee(employee.manager_id)
            manager_salary = salaries.get(manager.employee_id)
            if manager_salary is None:
                manager_salary = snapshot.current_salary(manager.employee_id, as_of)
        except MissingEntityError as e:
            exclusions.append(Exclusion.from_error("employee", employee_id, e))
            continue
        if salaries[employee_id] > manager_salary:
            rows.append(
                ManagerPayGap(
                    employee_id=employee_id,
                    employee_name=employee.full_name,
                    employee_salary=salaries[employee_id],
                    manager_id=manager.employee_id,
                    manager_name=manager.full_name,
                    manager_salary=manager_salary,
                    difference=round_money(salaries[employee_id] - manager_salary),
                )
            )
    logger.debug(f"{len(rows)} employees out-earn their manager as of {as_of}")
    return ReportResult[ManagerPayGap](
        report="employees_out_earning_manager", as_of=as_of, rows=rows, exclusions=exclusions
    )
