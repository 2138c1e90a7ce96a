"""Unit tests for training ROI and department collaboration."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from insight_engine.config import MetricsConfig
from insight_engine.exceptions import InsightError, InvalidDepartmentPairError, MissingEntityError
from insight_engine.metrics import (
    UNDEFINED,
    RoiCategory,
    collaboration_between,
    collaboration_report,
    normalize_pair,
    roi_category,
    training_roi,
    training_roi_report,
)
from insight_engine.snapshot import Snapshot
from tests.fixtures.snapshot_data import (
    AS_OF,
    make_assignment,
    make_department,
    make_employee,
    make_program,
    make_project,
    make_training,
)


class TestRoiCategory:
    @pytest.mark.parametrize(
        "delta,expected",
        [
            (2.0, RoiCategory.HIGH),
            (0.5, RoiCategory.POSITIVE),
            (0.1, RoiCategory.POSITIVE),
            (0.0, RoiCategory.LOW),
            (-1.0, RoiCategory.LOW),
            (UNDEFINED, RoiCategory.INSUFFICIENT_DATA),
        ],
    )
    def test_default_thresholds(self, delta, expected):
        assert roi_category(delta) == expected

    def test_configured_thresholds(self):
        config = MetricsConfig(training_roi={"high_threshold": 1.0, "positive_threshold": 0.25})
        assert roi_category(0.75, config) == RoiCategory.POSITIVE
        assert roi_category(0.2, config) == RoiCategory.LOW


class TestTrainingRoi:
    def test_rating_delta_between_first_and_latest_review(self, small_snapshot):
        row = training_roi(small_snapshot, AS_OF, 1)
        assert row.participants == 1
        assert row.average_rating_delta == 2.0
        assert row.roi_category == RoiCategory.HIGH
        assert row.completion_rate == 100.0
        assert row.average_score == 80.0
        assert row.total_cost == Decimal("1000.00")

    def test_sample_program(self, sample_snapshot, sample_as_of):
        row = training_roi(sample_snapshot, sample_as_of, 1)
        assert row.participants == 4
        assert row.completed == 3
        assert row.completion_rate == 75.0
        assert row.average_score == 90.0
        assert row.reviewed_participants == 3
        assert row.single_review_participants == 1
        assert row.average_rating_delta == 1.0
        assert row.roi_category == RoiCategory.HIGH

    def test_completed_only(self, sample_snapshot, sample_as_of):
        row = training_roi(sample_snapshot, sample_as_of, 1, completed_only=True)
        assert row.participants == 3
        assert row.completion_rate == 100.0

    def test_program_without_participants(self, sample_snapshot, sample_as_of):
        assert training_roi(sample_snapshot, sample_as_of, 4) is None
        report = training_roi_report(sample_snapshot, sample_as_of)
        assert 4 not in [row.program_id for row in report.rows]

    def test_unreviewed_participants_are_insufficient(self):
        snapshot = Snapshot(
            employees=[make_employee(1)],
            training_programs=[make_program(1)],
            training_records=[make_training(1, 1)],
        )
        row = training_roi(snapshot, AS_OF, 1)
        assert row.unreviewed_participants == 1
        assert row.average_rating_delta is UNDEFINED
        assert row.roi_category == RoiCategory.INSUFFICIENT_DATA

    def test_unknown_program_raises(self, small_snapshot):
        with pytest.raises(MissingEntityError):
            training_roi(small_snapshot, AS_OF, 9)

    def test_report_excludes_records_of_missing_employees(self):
        snapshot = Snapshot(
            employees=[make_employee(1)],
            training_programs=[make_program(1)],
            training_records=[make_training(1, 1, record_id=1), make_training(7, 1, record_id=2)],
        )
        result = training_roi_report(snapshot, AS_OF)
        assert len(result.rows) == 1
        assert [(x.entity_type, x.entity_id) for x in result.exclusions] == [("training_record", 2)]


@pytest.fixture
def collaboration_snapshot() -> Snapshot:
    """Departments 1-3; projects 1 and 2 are shared by 1 and 3, project 3 is dept 2 only."""
    return Snapshot(
        departments=[make_department(1), make_department(2), make_department(3)],
        employees=[
            make_employee(1, department_id=1),
            make_employee(2, department_id=3),
            make_employee(3, department_id=2),
            make_employee(4, department_id=3),
        ],
        projects=[
            make_project(1, budget=Decimal("1000")),
            make_project(2, budget=Decimal("500"), status="Completed", end_date=date(2024, 6, 1)),
            make_project(3),
        ],
        assignments=[
            make_assignment(1, 1),
            make_assignment(2, 1),
            make_assignment(4, 2),
            make_assignment(1, 2, released_on=date(2024, 3, 1)),
            make_assignment(3, 3),
        ],
    )


class TestCollaboration:
    def test_normalize_pair(self):
        assert normalize_pair(5, 2) == (2, 5)
        assert normalize_pair(2, 5) == (2, 5)
        with pytest.raises(InvalidDepartmentPairError) as exc_info:
            normalize_pair(3, 3)
        assert exc_info.value.context.entity_id == 3

    def test_pair_symmetry(self, collaboration_snapshot):
        forward = collaboration_between(collaboration_snapshot, AS_OF, 1, 3)
        backward = collaboration_between(collaboration_snapshot, AS_OF, 3, 1)
        assert forward == backward
        assert (forward.department_a_id, forward.department_b_id) == (1, 3)

    def test_pair_figures(self, collaboration_snapshot):
        row = collaboration_between(collaboration_snapshot, AS_OF, 1, 3)
        assert row.project_ids == [1, 2]
        assert row.participants_a == 1
        assert row.participants_b == 2
        assert row.participants == 3
        assert row.combined_budget == Decimal("1500.00")
        assert row.completion_rate == 50.0
        assert row.average_performance is UNDEFINED

    def test_no_shared_project(self, collaboration_snapshot):
        assert collaboration_between(collaboration_snapshot, AS_OF, 1, 2) is None

    def test_same_department_rejected(self, collaboration_snapshot):
        with pytest.raises(InsightError) as exc_info:
            collaboration_between(collaboration_snapshot, AS_OF, 2, 2)
        assert isinstance(exc_info.value, ValueError)
        assert "cannot collaborate with itself" in exc_info.value.message

    def test_report_pairs_unique_and_ordered(self, sample_snapshot, sample_as_of):
        result = collaboration_report(sample_snapshot, sample_as_of)
        pairs = [(row.department_a_id, row.department_b_id) for row in result.rows]
        assert pairs == [(1, 2), (2, 3), (2, 5), (3, 5)]
        assert len(set(pairs)) == len(pairs)
        assert all(a < b for a, b in pairs)

    def test_sample_pair(self, sample_snapshot, sample_as_of):
        row = collaboration_between(sample_snapshot, sample_as_of, 2, 1)
        assert row.department_a_name == "Human Resources"
        assert row.project_ids == [2]
        assert row.average_performance == 4.13
        assert row.completion_rate == 0.0

    def test_as_of_before_assignments(self, sample_snapshot):
        result = collaboration_report(sample_snapshot, date(2023, 12, 31))
        assert result.rows == []
