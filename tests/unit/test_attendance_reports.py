"""Unit tests for attendance and leave reports."""

from __future__ import annotations

from datetime import date

import pytest

from insight_engine.metrics import (
    attendance_report,
    attendance_summary,
    leave_usage_report,
    most_leave_days,
)
from insight_engine.snapshot import Snapshot
from tests.fixtures.snapshot_data import AS_OF, make_employee, make_leave


class TestAttendance:
    def test_sample_report(self, sample_snapshot, sample_as_of):
        result = attendance_report(sample_snapshot, sample_as_of)
        by_id = {row.employee_id: row.attendance_pct for row in result.rows}
        assert len(result.rows) == 8
        assert by_id[1] == 100.0
        assert by_id[3] == 0.0
        assert by_id[9] == 50.0

    def test_since_filter(self, sample_snapshot, sample_as_of):
        row = attendance_summary(sample_snapshot, sample_as_of, 9, since=date(2026, 2, 19))
        assert row.recorded_days == 1
        assert row.attendance_pct == 100.0

    def test_since_after_as_of_rejected(self, sample_snapshot, sample_as_of):
        with pytest.raises(ValueError):
            attendance_report(sample_snapshot, sample_as_of, since=date(2026, 4, 1))

    def test_before_any_record(self, sample_snapshot):
        assert attendance_report(sample_snapshot, date(2026, 1, 1)).is_empty


class TestLeave:
    def test_usage_sorted_by_days(self, sample_snapshot, sample_as_of):
        result = leave_usage_report(sample_snapshot, sample_as_of)
        assert [(row.employee_id, row.approved_days) for row in result.rows] == [
            (1, 5), (3, 3), (9, 2),
        ]

    def test_most_leave_days(self, sample_snapshot, sample_as_of):
        result = most_leave_days(sample_snapshot, sample_as_of)
        assert [row.employee_id for row in result.rows] == [1]

    def test_ties_at_cutoff_included(self):
        snapshot = Snapshot(
            employees=[make_employee(1), make_employee(2), make_employee(3)],
            leave_requests=[
                make_leave(1, date(2025, 5, 5), date(2025, 5, 7)),
                make_leave(2, date(2025, 6, 2), date(2025, 6, 4)),
                make_leave(3, date(2025, 7, 1), date(2025, 7, 1)),
            ],
        )
        result = most_leave_days(snapshot, AS_OF, limit=1)
        assert [row.employee_id for row in result.rows] == [1, 2]

    def test_limit_must_be_positive(self, sample_snapshot, sample_as_of):
        with pytest.raises(ValueError):
            most_leave_days(sample_snapshot, sample_as_of, limit=0)
