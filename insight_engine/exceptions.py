"""
Structured exception hierarchy with metric context for Workforce Insight Engine.

All exceptions include:
- correlation_id: Trace errors across a batch of report computations
- metric_context: As-of date, metric family, offending entity
- resolution_hints: Actionable suggestions for common snapshot problems
- severity: CRITICAL, ERROR, WARNING
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence
import uuid


class ErrorSeverity(str, Enum):
    """Error severity levels for triage"""
    CRITICAL = "critical"      # Snapshot unusable as a whole
    ERROR = "error"            # Single computation aborted
    WARNING = "warning"        # Non-blocking issue, may degrade a report


class ErrorCategory(str, Enum):
    """Error categories for diagnostics and resolution routing"""
    SNAPSHOT = "snapshot"              # Missing or dangling entities, hierarchy problems
    TEMPORAL = "temporal"              # Dates later than the as-of date
    CONFIGURATION = "configuration"    # Invalid weights, thresholds, YAML
    DATA_QUALITY = "data_quality"      # Out-of-range values in source rows
    DATABASE = "database"              # Snapshot store access


class ExclusionReason(str, Enum):
    """Reason codes attached to records dropped from a batch report"""
    MISSING_ENTITY = "missing_entity"
    NO_SALARY_RECORD = "no_salary_record"
    FUTURE_DATE = "future_date"


@dataclass
class MetricContext:
    """Context describing which computation failed"""

    as_of: Optional[date] = None
    metric: Optional[str] = None
    entity_type: Optional[str] = None
    entity_id: Optional[int] = None
    snapshot_id: Optional[str] = None

    correlation_id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize context for logging"""
        data = {
            k: v for k, v in self.__dict__.items()
            if v is not None and not k.startswith('_')
        }
        if isinstance(data.get("as_of"), date):
            data["as_of"] = data["as_of"].isoformat()
        return data

    def format_summary(self) -> str:
        """Human-readable one-line summary"""
        parts = []
        if self.as_of:
            parts.append(f"as_of={self.as_of.isoformat()}")
        if self.metric:
            parts.append(f"metric={self.metric}")
        if self.entity_type:
            parts.append(f"{self.entity_type}={self.entity_id}")
        if self.correlation_id:
            parts.append(f"correlation_id={self.correlation_id}")
        return " | ".join(parts)


@dataclass
class ResolutionHint:
    """Actionable resolution guidance for common error patterns"""

    title: str
    description: str
    steps: List[str]
    documentation_url: Optional[str] = None


class InsightError(Exception):
    """
    Base exception for Workforce Insight Engine with structured context.

    All engine exceptions inherit from this class so callers can catch one
    type and still get consistent diagnostic information.
    """

    def __init__(
        self,
        message: str,
        *,
        context: Optional[MetricContext] = None,
        category: ErrorCategory = ErrorCategory.SNAPSHOT,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        resolution_hints: Optional[List[ResolutionHint]] = None,
        original_exception: Optional[Exception] = None,
        **kwargs
    ):
        super().__init__(message)
        self.message = message
        self.context = context or MetricContext()
        self.category = category
        self.severity = severity
        self.resolution_hints = resolution_hints or []
        self.original_exception = original_exception
        self.additional_data = kwargs

    def format_diagnostic_message(self) -> str:
        """
        Format a multi-line diagnostic message for logs and CLI display.

        Includes the message and severity, the metric context, resolution
        hints and the original exception when one was wrapped.
        """
        lines = [
            f"{'='*80}",
            f"ERROR: {self.message}",
            f"Severity: {self.severity.value.upper()} | Category: {self.category.value}",
            f"{'='*80}",
            "",
            "METRIC CONTEXT:",
        ]

        context_dict = self.context.to_dict()
        if context_dict:
            for key, value in context_dict.items():
                if key == 'metadata' and isinstance(value, dict):
                    for meta_key, meta_value in value.items():
                        lines.append(f"  {meta_key}: {meta_value}")
                else:
                    lines.append(f"  {key}: {value}")
        else:
            lines.append("  (no context available)")

        if self.resolution_hints:
            lines.append("")
            lines.append("RESOLUTION HINTS:")
            for i, hint in enumerate(self.resolution_hints, 1):
                lines.append(f"\n{i}. {hint.title}")
                lines.append(f"   {hint.description}")
                if hint.steps:
                    lines.append("   Steps:")
                    for step in hint.steps:
                        lines.append(f"     - {step}")
                if hint.documentation_url:
                    lines.append(f"   Docs: {hint.documentation_url}")

        if self.original_exception:
            lines.append("")
            lines.append("ORIGINAL EXCEPTION:")
            lines.append(f"  {type(self.original_exception).__name__}: {str(self.original_exception)}")

        lines.append("")
        lines.append(f"{'='*80}")

        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for structured logging"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "context": self.context.to_dict(),
            "resolution_hints": [
                {
                    "title": hint.title,
                    "description": hint.description,
                    "steps": hint.steps,
                    "documentation_url": hint.documentation_url,
                }
                for hint in self.resolution_hints
            ],
            "original_exception": str(self.original_exception) if self.original_exception else None,
            **self.additional_data
        }


# Snapshot Errors
class SnapshotError(InsightError):
    """Snapshot content errors (missing rows, broken references)"""
    def __init__(self, message: str, **kwargs):
        super().__init__(message, category=ErrorCategory.SNAPSHOT, **kwargs)


class MissingEntityError(SnapshotError):
    """A referenced row has no match in the snapshot.

    Always a precondition bug in the snapshot. Accessors raise it unchanged;
    batch reports catch it per record and record an exclusion.
    """

    reason_code = ExclusionReason.MISSING_ENTITY

    def __init__(
        self,
        entity_type: str,
        entity_id: Any,
        *,
        referenced_by: Optional[str] = None,
        message: Optional[str] = None,
        **kwargs
    ):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.referenced_by = referenced_by
        if message is None:
            message = f"{entity_type} {entity_id} not found in snapshot"
            if referenced_by:
                message = f"{message} (referenced by {referenced_by})"
        context = kwargs.pop("context", None) or MetricContext()
        context.entity_type = context.entity_type or entity_type
        if context.entity_id is None and isinstance(entity_id, int):
            context.entity_id = entity_id
        super().__init__(message, context=context, severity=ErrorSeverity.ERROR, **kwargs)


class NoSalaryRecordError(MissingEntityError):
    """Employee has no salary record effective on or before the as-of date"""

    reason_code = ExclusionReason.NO_SALARY_RECORD

    def __init__(self, employee_id: int, as_of: date, **kwargs):
        self.as_of = as_of
        super().__init__(
            "salary_record",
            employee_id,
            message=f"No salary record for employee {employee_id} on or before {as_of.isoformat()}",
            context=MetricContext(as_of=as_of, entity_type="employee", entity_id=employee_id),
            **kwargs
        )


class NoReviewError(MissingEntityError):
    """Employee has no performance review on or before the as-of date"""

    def __init__(self, employee_id: int, as_of: date, **kwargs):
        self.as_of = as_of
        super().__init__(
            "performance_review",
            employee_id,
            message=f"No performance review for employee {employee_id} on or before {as_of.isoformat()}",
            context=MetricContext(as_of=as_of, entity_type="employee", entity_id=employee_id),
            **kwargs
        )


class SnapshotIntegrityError(SnapshotError):
    """Snapshot violates a structural invariant"""
    def __init__(self, message: str, issues: Optional[Sequence[Any]] = None, **kwargs):
        self.issues = list(issues or [])
        if self.issues:
            kwargs["metadata"] = kwargs.get("metadata", {})
            kwargs["metadata"]["issue_count"] = len(self.issues)
        if "resolution_hints" not in kwargs:
            kwargs["resolution_hints"] = [
                ResolutionHint(
                    title="Repair Dangling References",
                    description="Dependent rows reference ids missing from the snapshot",
                    steps=[
                        "List the issues: insight validate --database <path>",
                        "Restore or delete the orphaned rows in the source store",
                        "Reload the snapshot",
                    ],
                )
            ]
        super().__init__(message, severity=ErrorSeverity.CRITICAL, **kwargs)


class DuplicateEntityError(SnapshotIntegrityError):
    """Two rows of one collection share a natural id"""
    def __init__(self, entity_type: str, entity_id: Any, **kwargs):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(
            f"Duplicate {entity_type} id {entity_id} in snapshot",
            resolution_hints=[],
            **kwargs
        )


class ManagerCycleError(SnapshotIntegrityError):
    """The manager relation contains a cycle"""
    def __init__(self, cycle: Sequence[int], **kwargs):
        self.cycle = list(cycle)
        path = " -> ".join(str(emp_id) for emp_id in self.cycle)
        kwargs["metadata"] = kwargs.get("metadata", {})
        kwargs["metadata"]["cycle"] = self.cycle
        if "resolution_hints" not in kwargs:
            kwargs["resolution_hints"] = [
                ResolutionHint(
                    title="Break the Management Cycle",
                    description="An employee is (indirectly) their own manager",
                    steps=[
                        f"Inspect manager_id for employees: {path}",
                        "Set the top-level manager's manager_id to NULL",
                        "Reload the snapshot",
                    ],
                )
            ]
        super().__init__(f"Manager hierarchy contains a cycle: {path}", **kwargs)


class InvalidDepartmentPairError(SnapshotError, ValueError):
    """A collaboration pair names the same department twice"""
    def __init__(self, department_id: int, **kwargs):
        self.department_id = department_id
        kwargs.setdefault(
            "context", MetricContext(entity_type="department", entity_id=department_id)
        )
        super().__init__(
            f"A department cannot collaborate with itself: {department_id}", **kwargs
        )


# Temporal Errors
class TemporalError(InsightError):
    """Temporal ordering errors"""
    def __init__(self, message: str, **kwargs):
        super().__init__(message, category=ErrorCategory.TEMPORAL, **kwargs)


class FutureDateError(TemporalError):
    """A date that must precede the as-of date lies after it"""

    reason_code = ExclusionReason.FUTURE_DATE

    def __init__(self, field_name: str, value: date, as_of: date, **kwargs):
        self.field_name = field_name
        self.value = value
        self.as_of = as_of
        message = (
            f"{field_name} {value.isoformat()} is later than as-of date {as_of.isoformat()}"
        )
        kwargs.setdefault("context", MetricContext(as_of=as_of))
        super().__init__(message, severity=ErrorSeverity.ERROR, **kwargs)


class FutureHireDateError(FutureDateError):
    """Employee hired after the as-of date"""
    def __init__(self, employee_id: int, hire_date: date, as_of: date, **kwargs):
        self.employee_id = employee_id
        super().__init__(
            "hire_date",
            hire_date,
            as_of,
            context=MetricContext(as_of=as_of, entity_type="employee", entity_id=employee_id),
            **kwargs
        )


# Configuration Errors
class ConfigurationError(InsightError):
    """Configuration-related errors"""
    def __init__(self, message: str, **kwargs):
        super().__init__(message, category=ErrorCategory.CONFIGURATION, **kwargs)


class InvalidConfigurationError(ConfigurationError):
    """Invalid configuration parameter or structure"""
    def __init__(
        self,
        message: str,
        config_path: Optional[str] = None,
        invalid_value: Optional[Any] = None,
        **kwargs
    ):
        if config_path:
            message = f"{message} (config_path: {config_path})"
        if invalid_value is not None:
            message = f"{message} (value: {invalid_value})"
        if "resolution_hints" not in kwargs:
            kwargs["resolution_hints"] = [
                ResolutionHint(
                    title="Fix Metrics Configuration",
                    description="The metrics configuration failed validation",
                    steps=[
                        "Open config/metrics_config.yaml",
                        "Check that each weight group sums to 1.0",
                        "Check INSIGHT_* environment overrides",
                    ],
                    documentation_url="config/metrics_config.yaml",
                )
            ]
        super().__init__(message, severity=ErrorSeverity.ERROR, **kwargs)


# Store Errors
class StoreError(InsightError):
    """Snapshot store access errors"""
    def __init__(self, message: str, **kwargs):
        super().__init__(message, category=ErrorCategory.DATABASE, **kwargs)


class StoreSchemaError(StoreError):
    """Snapshot store is missing a required table"""
    def __init__(self, message: str, missing_tables: Optional[List[str]] = None, **kwargs):
        if missing_tables:
            kwargs["metadata"] = kwargs.get("metadata", {})
            kwargs["metadata"]["missing_tables"] = missing_tables
        if "resolution_hints" not in kwargs:
            kwargs["resolution_hints"] = [
                ResolutionHint(
                    title="Initialize the Store",
                    description="The DuckDB file does not contain the snapshot tables",
                    steps=[
                        "Create the tables: insight init-db --database <path>",
                        "Load data, or add --sample for the demo dataset",
                    ],
                )
            ]
        super().__init__(message, severity=ErrorSeverity.CRITICAL, **kwargs)
