"""
Snapshot - immutable, indexed view over the eleven entity collections.

Primary indices are keyed by natural id; secondary indices group dependent
rows per employee (and per project / program) and keep them sorted by their
temporal key, so "latest on or before T" lookups are a bisect instead of a
correlated scan.

Example:
    snapshot = Snapshot.from_records({
        "employees": [...],
        "salary_records": [...],
    })
    snapshot.current_salary(7, date(2025, 6, 30))
"""

from __future__ import annotations

import logging
import uuid
from bisect import bisect_right
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from types import MappingProxyType
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Type,
    TypeVar,
)

from pydantic import BaseModel

from ..exceptions import (
    DuplicateEntityError,
    MissingEntityError,
    NoReviewError,
    NoSalaryRecordError,
    SnapshotIntegrityError,
)
from .hierarchy import ManagerForest
from .models import (
    AttendanceRecord,
    Department,
    Employee,
    LeaveRequest,
    PerformanceReview,
    Position,
    Project,
    ProjectAssignment,
    SalaryRecord,
    TrainingProgram,
    TrainingRecord,
)

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=BaseModel)

_MIN_ID = -1

# Collection name -> model, in the order tables are loaded
COLLECTIONS: Dict[str, Type[BaseModel]] = {
    "departments": Department,
    "positions": Position,
    "employees": Employee,
    "salary_records": SalaryRecord,
    "reviews": PerformanceReview,
    "projects": Project,
    "assignments": ProjectAssignment,
    "training_programs": TrainingProgram,
    "training_records": TrainingRecord,
    "leave_requests": LeaveRequest,
    "attendance": AttendanceRecord,
}


@dataclass(frozen=True)
class IntegrityIssue:
    """A dependent row whose reference has no target in the snapshot."""

    collection: str
    row_id: Optional[int]
    field: str
    missing_entity: str
    missing_id: int

    def describe(self) -> str:
        row = f"{self.collection}#{self.row_id}" if self.row_id is not None else self.collection
        return f"{row}.{self.field} -> {self.missing_entity} {self.missing_id}"


class _SortedIndex:
    """Rows of one owner sorted by a date key, with a parallel key tuple for bisect."""

    __slots__ = ("rows", "keys")

    def __init__(self, rows: Sequence[Any], key: Callable[[Any], Tuple[date, int]]):
        ordered = sorted(rows, key=key)
        self.rows: Tuple[Any, ...] = tuple(ordered)
        self.keys: Tuple[date, ...] = tuple(key(row)[0] for row in ordered)

    def up_to(self, as_of: Optional[date]) -> Tuple[Any, ...]:
        """Rows whose key is on or before ``as_of`` (all rows when None)."""
        if as_of is None:
            return self.rows
        return self.rows[: bisect_right(self.keys, as_of)]


_EMPTY_INDEX = _SortedIndex((), key=lambda row: (date.min, 0))


def _index_by_id(rows: Iterable[EntityT], id_field: str, entity_type: str) -> Mapping[int, EntityT]:
    indexed: Dict[int, EntityT] = {}
    for row in rows:
        key = getattr(row, id_field)
        if key in indexed:
            raise DuplicateEntityError(entity_type, key)
        indexed[key] = row
    return MappingProxyType(dict(sorted(indexed.items())))


def _group_sorted(
    rows: Iterable[Any],
    owner: Callable[[Any], int],
    key: Callable[[Any], Tuple[date, int]],
) -> Mapping[int, _SortedIndex]:
    grouped: Dict[int, List[Any]] = {}
    for row in rows:
        grouped.setdefault(owner(row), []).append(row)
    return MappingProxyType({k: _SortedIndex(v, key) for k, v in grouped.items()})


def _tiebreak(value: Optional[int]) -> int:
    return _MIN_ID if value is None else value


class Snapshot:
    """Consistent, read-only set of entity collections.

    Args:
        strict: Raise ``SnapshotIntegrityError`` when any dependent row
            references a missing entity. When False (default) the issues are
            kept in ``integrity_issues`` and surface as ``MissingEntityError``
            when a metric touches them.
        snapshot_id: Identifier used in logs; generated when omitted.

    Raises:
        DuplicateEntityError: Two rows of one collection share an id.
        ManagerCycleError: The manager relation is not a forest.
    """

    def __init__(
        self,
        *,
        employees: Iterable[Employee] = (),
        departments: Iterable[Department] = (),
        positions: Iterable[Position] = (),
        salary_records: Iterable[SalaryRecord] = (),
        reviews: Iterable[PerformanceReview] = (),
        projects: Iterable[Project] = (),
        assignments: Iterable[ProjectAssignment] = (),
        training_programs: Iterable[TrainingProgram] = (),
        training_records: Iterable[TrainingRecord] = (),
        leave_requests: Iterable[LeaveRequest] = (),
        attendance: Iterable[AttendanceRecord] = (),
        strict: bool = False,
        snapshot_id: Optional[str] = None,
    ):
        self.snapshot_id = snapshot_id or str(uuid.uuid4())[:8]

        self._employees = _index_by_id(employees, "employee_id", "employee")
        self._departments = _index_by_id(departments, "department_id", "department")
        self._positions = _index_by_id(positions, "position_id", "position")
        self._projects = _index_by_id(projects, "project_id", "project")
        self._programs = _index_by_id(training_programs, "program_id", "training_program")

        self._salary_records: Tuple[SalaryRecord, ...] = tuple(salary_records)
        self._reviews: Tuple[PerformanceReview, ...] = tuple(reviews)
        self._assignments: Tuple[ProjectAssignment, ...] = tuple(assignments)
        self._training_records: Tuple[TrainingRecord, ...] = tuple(training_records)
        self._leave_requests: Tuple[LeaveRequest, ...] = tuple(leave_requests)
        self._attendance: Tuple[AttendanceRecord, ...] = tuple(attendance)

        self._salary_by_employee = _group_sorted(
            self._salary_records,
            owner=lambda r: r.employee_id,
            key=lambda r: (r.effective_from, _tiebreak(r.salary_id)),
        )
        self._reviews_by_employee = _group_sorted(
            self._reviews,
            owner=lambda r: r.employee_id,
            key=lambda r: (r.review_date, _tiebreak(r.review_id)),
        )
        self._assignments_by_employee = _group_sorted(
            self._assignments,
            owner=lambda a: a.employee_id,
            key=lambda a: (a.assigned_on, _tiebreak(a.assignment_id)),
        )
        self._assignments_by_project = _group_sorted(
            self._assignments,
            owner=lambda a: a.project_id,
            key=lambda a: (a.assigned_on, _tiebreak(a.assignment_id)),
        )
        self._training_by_employee = _group_sorted(
            self._training_records,
            owner=lambda t: t.employee_id,
            key=lambda t: (t.completion_date or date.min, _tiebreak(t.record_id)),
        )
        self._training_by_program = _group_sorted(
            self._training_records,
            owner=lambda t: t.program_id,
            key=lambda t: (t.completion_date or date.min, _tiebreak(t.record_id)),
        )
        self._leave_by_employee = _group_sorted(
            self._leave_requests,
            owner=lambda lv: lv.employee_id,
            key=lambda lv: (lv.start_date, _tiebreak(lv.leave_id)),
        )
        self._attendance_by_employee = _group_sorted(
            self._attendance,
            owner=lambda a: a.employee_id,
            key=lambda a: (a.attendance_date, _tiebreak(a.attendance_id)),
        )

        self._hierarchy = ManagerForest(
            {emp_id: emp.manager_id for emp_id, emp in self._employees.items()}
        )
        self._issues: Tuple[IntegrityIssue, ...] = tuple(self._find_integrity_issues())

        if strict and self._issues:
            raise SnapshotIntegrityError(
                f"Snapshot has {len(self._issues)} dangling references; "
                f"first: {self._issues[0].describe()}",
                issues=self._issues,
            )

        logger.info(
            f"Snapshot {self.snapshot_id} built: {len(self._employees)} employees, "
            f"{len(self._departments)} departments, {len(self._projects)} projects, "
            f"{len(self._salary_records)} salary records, {len(self._reviews)} reviews"
        )
        if self._issues:
            logger.warning(
                f"Snapshot {self.snapshot_id} has {len(self._issues)} dangling references"
            )

    # ------------------------------------------------------------------ build

    @classmethod
    def from_records(
        cls,
        records: Mapping[str, Iterable[Mapping[str, Any]]],
        *,
        strict: bool = False,
        snapshot_id: Optional[str] = None,
    ) -> "Snapshot":
        """Validate plain row dicts into entity models and build a snapshot.

        Keys of ``records`` are the collection names in ``COLLECTIONS``.
        """
        unknown = set(records) - set(COLLECTIONS)
        if unknown:
            raise ValueError(f"Unknown snapshot collections: {sorted(unknown)}")
        collections = {
            name: [model.model_validate(row) for row in records.get(name, ())]
            for name, model in COLLECTIONS.items()
        }
        return cls(**collections, strict=strict, snapshot_id=snapshot_id)

    def _find_integrity_issues(self) -> List[IntegrityIssue]:
        issues: List[IntegrityIssue] = []

        def check(collection: str, row_id: Optional[int], field: str, entity: str,
                  target: Optional[int], index: Mapping[int, Any]) -> None:
            if target is not None and target not in index:
                issues.append(IntegrityIssue(collection, row_id, field, entity, target))

        for emp in self._employees.values():
            check("employees", emp.employee_id, "department_id", "department",
                  emp.department_id, self._departments)
            check("employees", emp.employee_id, "position_id", "position",
                  emp.position_id, self._positions)
            check("employees", emp.employee_id, "manager_id", "employee",
                  emp.manager_id, self._employees)
        for dept in self._departments.values():
            check("departments", dept.department_id, "manager_id", "employee",
                  dept.manager_id, self._employees)
        for pos in self._positions.values():
            check("positions", pos.position_id, "department_id", "department",
                  pos.department_id, self._departments)
        for proj in self._projects.values():
            check("projects", proj.project_id, "manager_id", "employee",
                  proj.manager_id, self._employees)
        for rec in self._salary_records:
            check("salary_records", rec.salary_id, "employee_id", "employee",
                  rec.employee_id, self._employees)
        for rev in self._reviews:
            check("reviews", rev.review_id, "employee_id", "employee",
                  rev.employee_id, self._employees)
            check("reviews", rev.review_id, "reviewer_id", "employee",
                  rev.reviewer_id, self._employees)
        for asg in self._assignments:
            check("assignments", asg.assignment_id, "employee_id", "employee",
                  asg.employee_id, self._employees)
            check("assignments", asg.assignment_id, "project_id", "project",
                  asg.project_id, self._projects)
        for tr in self._training_records:
            check("training_records", tr.record_id, "employee_id", "employee",
                  tr.employee_id, self._employees)
            check("training_records", tr.record_id, "program_id", "training_program",
                  tr.program_id, self._programs)
        for lv in self._leave_requests:
            check("leave_requests", lv.leave_id, "employee_id", "employee",
                  lv.employee_id, self._employees)
            check("leave_requests", lv.leave_id, "approved_by", "employee",
                  lv.approved_by, self._employees)
        for att in self._attendance:
            check("attendance", att.attendance_id, "employee_id", "employee",
                  att.employee_id, self._employees)
        return issues

    # --------------------------------------------------------- primary access

    @property
    def integrity_issues(self) -> Tuple[IntegrityIssue, ...]:
        return self._issues

    @property
    def hierarchy(self) -> ManagerForest:
        return self._hierarchy

    @property
    def employees(self) -> Mapping[int, Employee]:
        return self._employees

    @property
    def departments(self) -> Mapping[int, Department]:
        return self._departments

    @property
    def positions(self) -> Mapping[int, Position]:
        return self._positions

    @property
    def projects(self) -> Mapping[int, Project]:
        return self._projects

    @property
    def training_programs(self) -> Mapping[int, TrainingProgram]:
        return self._programs

    @property
    def training_records(self) -> Tuple[TrainingRecord, ...]:
        return self._training_records

    @property
    def assignments(self) -> Tuple[ProjectAssignment, ...]:
        return self._assignments

    def counts(self) -> Dict[str, int]:
        """Row count per collection."""
        return {
            "departments": len(self._departments),
            "positions": len(self._positions),
            "employees": len(self._employees),
            "salary_records": len(self._salary_records),
            "reviews": len(self._reviews),
            "projects": len(self._projects),
            "assignments": len(self._assignments),
            "training_programs": len(self._programs),
            "training_records": len(self._training_records),
            "leave_requests": len(self._leave_requests),
            "attendance": len(self._attendance),
        }

    def employee(self, employee_id: int) -> Employee:
        try:
            return self._employees[employee_id]
        except KeyError:
            raise MissingEntityError("employee", employee_id) from None

    def department(self, department_id: int) -> Department:
        try:
            return self._departments[department_id]
        except KeyError:
            raise MissingEntityError("department", department_id) from None

    def position(self, position_id: int) -> Position:
        try:
            return self._positions[position_id]
        except KeyError:
            raise MissingEntityError("position", position_id) from None

    def project(self, project_id: int) -> Project:
        try:
            return self._projects[project_id]
        except KeyError:
            raise MissingEntityError("project", project_id) from None

    def training_program(self, program_id: int) -> TrainingProgram:
        try:
            return self._programs[program_id]
        except KeyError:
            raise MissingEntityError("training_program", program_id) from None

    def employees_at(self, as_of: date, department_id: Optional[int] = None) -> List[Employee]:
        """Employees employed on ``as_of``, sorted by id."""
        return [
            emp for emp in self._employees.values()
            if emp.is_employed_at(as_of)
            and (department_id is None or emp.department_id == department_id)
        ]

    def employees_hired_by(self, as_of: date, department_id: Optional[int] = None) -> List[Employee]:
        """Employees hired on or before ``as_of``, including former employees."""
        return [
            emp for emp in self._employees.values()
            if emp.hire_date <= as_of
            and (department_id is None or emp.department_id == department_id)
        ]

    def direct_reports_at(self, manager_id: int, as_of: date) -> List[Employee]:
        return [
            self._employees[emp_id]
            for emp_id in self._hierarchy.direct_reports(manager_id)
            if self._employees[emp_id].is_employed_at(as_of)
        ]

    # ------------------------------------------------------- salary accessors

    def salary_history(self, employee_id: int, as_of: Optional[date] = None) -> Tuple[SalaryRecord, ...]:
        """Salary records effective on or before ``as_of``, oldest first."""
        self.employee(employee_id)
        return self._salary_by_employee.get(employee_id, _EMPTY_INDEX).up_to(as_of)

    def current_salary_record(self, employee_id: int, as_of: date) -> SalaryRecord:
        """The record whose interval contains ``as_of``.

        Among covering records the latest ``effective_from`` wins. When no
        interval covers ``as_of`` the latest record started on or before it
        is used.
        """
        history = self.salary_history(employee_id, as_of)
        if not history:
            raise NoSalaryRecordError(employee_id, as_of)
        for record in reversed(history):
            if record.covers(as_of):
                return record
        return history[-1]

    def current_salary(self, employee_id: int, as_of: date) -> Decimal:
        return self.current_salary_record(employee_id, as_of).amount

    def initial_salary_record(self, employee_id: int, as_of: date) -> SalaryRecord:
        history = self.salary_history(employee_id, as_of)
        if not history:
            raise NoSalaryRecordError(employee_id, as_of)
        return history[0]

    def initial_salary(self, employee_id: int, as_of: date) -> Decimal:
        return self.initial_salary_record(employee_id, as_of).amount

    # ------------------------------------------------------- review accessors

    def reviews_for(self, employee_id: int, as_of: Optional[date] = None) -> Tuple[PerformanceReview, ...]:
        """Reviews dated on or before ``as_of``, oldest first."""
        self.employee(employee_id)
        return self._reviews_by_employee.get(employee_id, _EMPTY_INDEX).up_to(as_of)

    def latest_review(self, employee_id: int, as_of: date) -> PerformanceReview:
        reviews = self.reviews_for(employee_id, as_of)
        if not reviews:
            raise NoReviewError(employee_id, as_of)
        return reviews[-1]

    def earliest_review(self, employee_id: int, as_of: date) -> PerformanceReview:
        reviews = self.reviews_for(employee_id, as_of)
        if not reviews:
            raise NoReviewError(employee_id, as_of)
        return reviews[0]

    # ----------------------------------------------------- dependent accessors

    def assignments_for_employee(
        self, employee_id: int, as_of: Optional[date] = None
    ) -> Tuple[ProjectAssignment, ...]:
        """Assignments started on or before ``as_of`` (released ones included)."""
        self.employee(employee_id)
        return self._assignments_by_employee.get(employee_id, _EMPTY_INDEX).up_to(as_of)

    def assignments_for_project(
        self, project_id: int, as_of: Optional[date] = None
    ) -> Tuple[ProjectAssignment, ...]:
        self.project(project_id)
        return self._assignments_by_project.get(project_id, _EMPTY_INDEX).up_to(as_of)

    def training_records_for(self, employee_id: int) -> Tuple[TrainingRecord, ...]:
        self.employee(employee_id)
        return self._training_by_employee.get(employee_id, _EMPTY_INDEX).rows

    def completed_training_for(self, employee_id: int, as_of: date) -> Tuple[TrainingRecord, ...]:
        return tuple(
            record for record in self.training_records_for(employee_id)
            if record.is_completed_at(as_of)
        )

    def training_records_for_program(self, program_id: int) -> Tuple[TrainingRecord, ...]:
        self.training_program(program_id)
        return self._training_by_program.get(program_id, _EMPTY_INDEX).rows

    def leave_requests_for(self, employee_id: int, as_of: Optional[date] = None) -> Tuple[LeaveRequest, ...]:
        """Leave requests starting on or before ``as_of``."""
        self.employee(employee_id)
        return self._leave_by_employee.get(employee_id, _EMPTY_INDEX).up_to(as_of)

    def attendance_for(self, employee_id: int, as_of: Optional[date] = None) -> Tuple[AttendanceRecord, ...]:
        self.employee(employee_id)
        return self._attendance_by_employee.get(employee_id, _EMPTY_INDEX).up_to(as_of)

    def __repr__(self) -> str:
        return (
            f"Snapshot(id={self.snapshot_id!r}, employees={len(self._employees)}, "
            f"departments={len(self._departments)}, projects={len(self._projects)})"
        )
