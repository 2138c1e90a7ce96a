"""
Entity models for the relational snapshot.

Every model is frozen: a snapshot is read once and never mutated by the
metrics layer. Field names follow the snapshot store columns (see
``insight_engine.store.schema``).
"""

from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class EmployeeStatus(str, Enum):
    ACTIVE = "Active"
    ON_LEAVE = "On Leave"
    RESIGNED = "Resigned"
    TERMINATED = "Terminated"


class ProjectStatus(str, Enum):
    PLANNED = "Planned"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class TrainingStatus(str, Enum):
    ENROLLED = "Enrolled"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    DROPPED = "Dropped"


class LeaveType(str, Enum):
    SICK = "Sick"
    CASUAL = "Casual"
    EARNED = "Earned"
    MATERNITY = "Maternity"
    PATERNITY = "Paternity"
    UNPAID = "Unpaid"


class ApprovalStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    LEAVE = "Leave"
    HALF_DAY = "Half Day"


class SnapshotEntity(BaseModel):
    """Base for snapshot rows: immutable, unknown columns ignored."""

    model_config = ConfigDict(frozen=True, extra="ignore")


class Department(SnapshotEntity):
    department_id: int
    name: str
    manager_id: Optional[int] = None
    location: Optional[str] = None
    budget: Decimal = Field(default=Decimal("0"), ge=0)


class Position(SnapshotEntity):
    position_id: int
    title: str
    min_salary: Decimal = Field(default=Decimal("0"), ge=0)
    max_salary: Decimal = Field(default=Decimal("0"), ge=0)
    department_id: Optional[int] = None

    @model_validator(mode="after")
    def _check_band(self) -> "Position":
        if self.max_salary < self.min_salary:
            raise ValueError(
                f"max_salary {self.max_salary} is below min_salary {self.min_salary}"
            )
        return self


class Employee(SnapshotEntity):
    employee_id: int
    employee_code: Optional[str] = None
    first_name: str
    last_name: str
    email: Optional[str] = None
    hire_date: date
    termination_date: Optional[date] = None
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    department_id: Optional[int] = None
    position_id: Optional[int] = None
    manager_id: Optional[int] = None

    @model_validator(mode="after")
    def _check_dates(self) -> "Employee":
        if self.termination_date is not None and self.termination_date < self.hire_date:
            raise ValueError(
                f"termination_date {self.termination_date} precedes hire_date {self.hire_date}"
            )
        return self

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def is_employed_at(self, as_of: date) -> bool:
        """Hired on or before ``as_of`` and not yet terminated."""
        if self.hire_date > as_of:
            return False
        return self.termination_date is None or self.termination_date > as_of


class SalaryRecord(SnapshotEntity):
    salary_id: Optional[int] = None
    employee_id: int
    amount: Decimal = Field(ge=0)
    effective_from: date
    effective_to: Optional[date] = None
    change_reason: Optional[str] = None

    @model_validator(mode="after")
    def _check_interval(self) -> "SalaryRecord":
        if self.effective_to is not None and self.effective_to < self.effective_from:
            raise ValueError(
                f"effective_to {self.effective_to} precedes effective_from {self.effective_from}"
            )
        return self

    def covers(self, as_of: date) -> bool:
        """True when the effective interval contains ``as_of``."""
        if self.effective_from > as_of:
            return False
        return self.effective_to is None or self.effective_to >= as_of


class PerformanceReview(SnapshotEntity):
    review_id: Optional[int] = None
    employee_id: int
    reviewer_id: Optional[int] = None
    rating: float = Field(ge=1, le=5)
    review_date: date
    comments: Optional[str] = None


class Project(SnapshotEntity):
    project_id: int
    name: str
    budget: Decimal = Field(default=Decimal("0"), ge=0)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: ProjectStatus = ProjectStatus.PLANNED
    manager_id: Optional[int] = None

    @model_validator(mode="after")
    def _check_dates(self) -> "Project":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError(
                f"end_date {self.end_date} precedes start_date {self.start_date}"
            )
        return self

    def is_completed_at(self, as_of: date) -> bool:
        if self.status != ProjectStatus.COMPLETED:
            return False
        return self.end_date is None or self.end_date <= as_of


class ProjectAssignment(SnapshotEntity):
    assignment_id: Optional[int] = None
    employee_id: int
    project_id: int
    role_name: Optional[str] = None
    allocation_percent: float = Field(default=100.0, ge=0, le=100)
    assigned_on: date
    released_on: Optional[date] = None

    @model_validator(mode="after")
    def _check_dates(self) -> "ProjectAssignment":
        if self.released_on is not None and self.released_on < self.assigned_on:
            raise ValueError(
                f"released_on {self.released_on} precedes assigned_on {self.assigned_on}"
            )
        return self

    def is_active_at(self, as_of: date) -> bool:
        if self.assigned_on > as_of:
            return False
        return self.released_on is None or self.released_on > as_of


class TrainingProgram(SnapshotEntity):
    program_id: int
    name: str
    cost: Decimal = Field(default=Decimal("0"), ge=0)
    duration_hours: Optional[float] = Field(default=None, ge=0)


class TrainingRecord(SnapshotEntity):
    record_id: Optional[int] = None
    employee_id: int
    program_id: int
    status: TrainingStatus = TrainingStatus.ENROLLED
    score: Optional[float] = Field(default=None, ge=0, le=100)
    completion_date: Optional[date] = None

    def is_completed_at(self, as_of: date) -> bool:
        if self.status != TrainingStatus.COMPLETED:
            return False
        return self.completion_date is None or self.completion_date <= as_of


class LeaveRequest(SnapshotEntity):
    leave_id: Optional[int] = None
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: Optional[str] = None
    approval_status: ApprovalStatus = ApprovalStatus.PENDING
    approved_by: Optional[int] = None

    @model_validator(mode="after")
    def _check_dates(self) -> "LeaveRequest":
        if self.end_date < self.start_date:
            raise ValueError(
                f"end_date {self.end_date} precedes start_date {self.start_date}"
            )
        return self

    @property
    def days(self) -> int:
        """Calendar days, both ends inclusive."""
        return (self.end_date - self.start_date).days + 1

    @property
    def is_approved(self) -> bool:
        return self.approval_status == ApprovalStatus.APPROVED


class AttendanceRecord(SnapshotEntity):
    attendance_id: Optional[int] = None
    employee_id: int
    attendance_date: date
    status: AttendanceStatus = AttendanceStatus.PRESENT
    check_in: Optional[time] = None
    check_out: Optional[time] = None
