"""
Snapshot builders and fixtures.

The ``make_*`` helpers build single entities with sensible defaults so a
test only spells out the fields it cares about.
"""

from datetime import date
from decimal import Decimal
from typing import Any

import pytest

from insight_engine.snapshot import (
    AttendanceRecord,
    Department,
    Employee,
    LeaveRequest,
    PerformanceReview,
    Project,
    ProjectAssignment,
    SalaryRecord,
    Snapshot,
    TrainingProgram,
    TrainingRecord,
)
from insight_engine.store import SAMPLE_AS_OF, sample_records

AS_OF = date(2025, 12, 31)


def make_department(department_id: int, **fields: Any) -> Department:
    fields.setdefault("name", f"Department {department_id}")
    fields.setdefault("budget", Decimal("100000"))
    return Department(department_id=department_id, **fields)


def make_employee(employee_id: int, **fields: Any) -> Employee:
    fields.setdefault("first_name", "Emp")
    fields.setdefault("last_name", str(employee_id))
    fields.setdefault("hire_date", date(2020, 1, 1))
    return Employee(employee_id=employee_id, **fields)


def make_salary(employee_id: int, amount: Any, effective_from: date, **fields: Any) -> SalaryRecord:
    return SalaryRecord(
        employee_id=employee_id,
        amount=Decimal(str(amount)),
        effective_from=effective_from,
        **fields,
    )


def make_review(employee_id: int, rating: float, review_date: date, **fields: Any) -> PerformanceReview:
    return PerformanceReview(
        employee_id=employee_id, rating=rating, review_date=review_date, **fields
    )


def make_project(project_id: int, **fields: Any) -> Project:
    fields.setdefault("name", f"Project {project_id}")
    fields.setdefault("budget", Decimal("50000"))
    fields.setdefault("start_date", date(2024, 1, 1))
    return Project(project_id=project_id, **fields)


def make_assignment(employee_id: int, project_id: int, **fields: Any) -> ProjectAssignment:
    fields.setdefault("assigned_on", date(2024, 1, 1))
    return ProjectAssignment(employee_id=employee_id, project_id=project_id, **fields)


def make_program(program_id: int, **fields: Any) -> TrainingProgram:
    fields.setdefault("name", f"Program {program_id}")
    fields.setdefault("cost", Decimal("1000"))
    return TrainingProgram(program_id=program_id, **fields)


def make_training(employee_id: int, program_id: int, **fields: Any) -> TrainingRecord:
    fields.setdefault("status", "Completed")
    fields.setdefault("completion_date", date(2024, 6, 1))
    return TrainingRecord(employee_id=employee_id, program_id=program_id, **fields)


def make_leave(employee_id: int, start: date, end: date, **fields: Any) -> LeaveRequest:
    fields.setdefault("leave_type", "Casual")
    fields.setdefault("approval_status", "Approved")
    return LeaveRequest(employee_id=employee_id, start_date=start, end_date=end, **fields)


def make_attendance(employee_id: int, day: date, status: str = "Present", **fields: Any) -> AttendanceRecord:
    return AttendanceRecord(employee_id=employee_id, attendance_date=day, status=status, **fields)


@pytest.fixture
def sample_as_of() -> date:
    return SAMPLE_AS_OF


@pytest.fixture
def sample_snapshot() -> Snapshot:
    """The demo dataset as a Snapshot (same rows ``insight init-db --sample`` writes)."""
    return Snapshot.from_records(sample_records(), snapshot_id="sample")


@pytest.fixture
def small_snapshot() -> Snapshot:
    """
    Two departments and four employees; department 2 has nobody.

    - 1: manager, salary 90000 -> 99000, ratings 3 then 5
    - 2: reports to 1, salary 60000, single review 4.0
    - 3: reports to 1, no salary record, no reviews
    - 4: reports to 1, hired after AS_OF
    """
    return Snapshot(
        departments=[make_department(1, manager_id=1), make_department(2)],
        employees=[
            make_employee(1, department_id=1),
            make_employee(2, department_id=1, manager_id=1, hire_date=date(2022, 3, 15)),
            make_employee(3, department_id=1, manager_id=1),
            make_employee(4, department_id=1, manager_id=1, hire_date=date(2026, 2, 1)),
        ],
        salary_records=[
            make_salary(1, 90000, date(2020, 1, 1), effective_to=date(2023, 12, 31), salary_id=1),
            make_salary(1, 99000, date(2024, 1, 1), salary_id=2),
            make_salary(2, 60000, date(2022, 3, 15), salary_id=3),
            make_salary(4, 70000, date(2026, 2, 1), salary_id=4),
        ],
        reviews=[
            make_review(1, 3.0, date(2023, 12, 15), review_id=1),
            make_review(1, 5.0, date(2024, 12, 15), review_id=2),
            make_review(2, 4.0, date(2024, 12, 15), review_id=3),
        ],
        projects=[make_project(1, status="Completed", end_date=date(2024, 12, 1))],
        assignments=[make_assignment(1, 1, assignment_id=1), make_assignment(2, 1, assignment_id=2)],
        training_programs=[make_program(1)],
        training_records=[make_training(1, 1, score=80.0, record_id=1)],
        snapshot_id="small",
    )
