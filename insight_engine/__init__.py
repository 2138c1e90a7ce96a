"""
Workforce Insight Engine

Read-only metrics over an employee-management snapshot: per-employee
metrics, department and manager aggregates, training ROI, cross-department
collaboration and the compensation, project and attendance reports.
"""

from _version import __version__

from .config import MetricsConfig, load_metrics_config
from .engine import MetricsEngine
from .exceptions import (
    InsightError,
    MissingEntityError,
    NoReviewError,
    NoSalaryRecordError,
    SnapshotIntegrityError,
)
from .metrics import NO_REVIEW_DATA, UNDEFINED, ReportResult
from .snapshot import Snapshot

__all__ = [
    "__version__",
    "MetricsConfig",
    "load_metrics_config",
    "MetricsEngine",
    "InsightError",
    "MissingEntityError",
    "NoReviewError",
    "NoSalaryRecordError",
    "SnapshotIntegrityError",
    "NO_REVIEW_DATA",
    "UNDEFINED",
    "ReportResult",
    "Snapshot",
]
