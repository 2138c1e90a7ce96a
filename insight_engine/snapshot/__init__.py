"""Immutable relational snapshot: entity models, indices and manager forest."""

from .hierarchy import ManagerForest
from .models import (
    ApprovalStatus,
    AttendanceRecord,
    AttendanceStatus,
    Department,
    Employee,
    EmployeeStatus,
    LeaveRequest,
    LeaveType,
    PerformanceReview,
    Position,
    Project,
    ProjectAssignment,
    ProjectStatus,
    SalaryRecord,
    SnapshotEntity,
    TrainingProgram,
    TrainingRecord,
    TrainingStatus,
)
from .snapshot import COLLECTIONS, IntegrityIssue, Snapshot

__all__ = [
    "ManagerForest",
    "Snapshot",
    "IntegrityIssue",
    "COLLECTIONS",
    "SnapshotEntity",
    "Department",
    "Position",
    "Employee",
    "EmployeeStatus",
    "SalaryRecord",
    "PerformanceReview",
    "Project",
    "ProjectStatus",
    "ProjectAssignment",
    "TrainingProgram",
    "TrainingRecord",
    "TrainingStatus",
    "LeaveRequest",
    "LeaveType",
    "ApprovalStatus",
    "AttendanceRecord",
    "AttendanceStatus",
]
