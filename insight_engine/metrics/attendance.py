"""Attendance and leave usage reports."""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from ..config import MetricsConfig
from ..snapshot import AttendanceStatus, Snapshot
from .models import AttendanceSummary, LeaveUsage, ReportResult
from .values import percentage

logger = logging.getLogger(__name__)


def attendance_summary(
    snapshot: Snapshot,
    as_of: date,
    employee_id: int,
    since: Optional[date] = None,
    config: Optional[MetricsConfig] = None,
) -> AttendanceSummary:
    """Present days over recorded days between ``since`` and ``as_of``."""
    config = config or MetricsConfig()
    employee = snapshot.employee(employee_id)
    records = [
        record for record in snapshot.attendance_for(employee_id, as_of)
        if since is None or record.attendance_date >= since
    ]
    present = sum(1 for record in records if record.status == AttendanceStatus.PRESENT)
    return AttendanceSummary(
        employee_id=employee_id,
        full_name=employee.full_name,
        recorded_days=len(records),
        present_days=present,
        attendance_pct=percentage(present, len(records), config.places),
    )


def attendance_report(
    snapshot: Snapshot,
    as_of: date,
    since: Optional[date] = None,
    config: Optional[MetricsConfig] = None,
) -> ReportResult[AttendanceSummary]:
    """One row per employee hired by ``as_of`` with recorded attendance."""
    if since is not None and since > as_of:
        raise ValueError(f"since {since} is later than as_of {as_of}")
    rows: List[AttendanceSummary] = []
    for employee in snapshot.employees_hired_by(as_of):
        summary = attendance_summary(snapshot, as_of, employee.employee_id, since, config)
        if summary.recorded_days:
            rows.append(summary)
    logger.info(f"Attendance report as of {as_of}: {len(rows)} employees")
    return ReportResult[AttendanceSummary](report="attendance", as_of=as_of, rows=rows)


def leave_usage_report(snapshot: Snapshot, as_of: date) -> ReportResult[LeaveUsage]:
    """Approved leave days per employee, most first."""
    rows: List[LeaveUsage] = []
    for employee in snapshot.employees_hired_by(as_of):
        approved = [
            request for request in snapshot.leave_requests_for(employee.employee_id, as_of)
            if request.is_approved
        ]
        if not approved:
            continue
        rows.append(
            LeaveUsage(
                employee_id=employee.employee_id,
                full_name=employee.full_name,
                approved_requests=len(approved),
                approved_days=sum(request.days for request in approved),
            )
        )
    rows.sort(key=lambda row: (-row.approved_days, row.employee_id))
    return ReportResult[LeaveUsage](report="leave_usage", as_of=as_of, rows=rows)


def most_leave_days(
    snapshot: Snapshot,
    as_of: date,
    limit: Optional[int] = None,
    config: Optional[MetricsConfig] = None,
) -> ReportResult[LeaveUsage]:
    """The ``limit`` employees with most approved leave days, ties at the cutoff included."""
    config = config or MetricsConfig()
    if limit is None:
        limit = config.reporting.leave_report_limit
    if limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")

    usage = leave_usage_report(snapshot, as_of).rows
    if len(usage) > limit:
        cutoff = usage[limit - 1].approved_days
        usage = [row for row in usage if row.approved_days >= cutoff]
    return ReportResult[LeaveUsage](report="most_leave_days", as_of=as_of, rows=usage)
