"""Unit tests for the MetricsEngine facade."""

from __future__ import annotations

from decimal import Decimal

import pytest

from insight_engine import MetricsEngine
from insight_engine.config import MetricsConfig
from insight_engine.metrics import RoiCategory, department_report, employee_metrics


@pytest.fixture
def engine(sample_snapshot) -> MetricsEngine:
    return MetricsEngine(sample_snapshot)


class TestMetricsEngine:
    def test_defaults_config(self, engine):
        assert isinstance(engine.config, MetricsConfig)

    def test_agrees_with_functions(self, engine, sample_snapshot, sample_as_of):
        assert engine.employee_metrics(sample_as_of, 3) == employee_metrics(
            sample_snapshot, sample_as_of, 3
        )
        assert engine.department_report(sample_as_of).rows == department_report(
            sample_snapshot, sample_as_of
        ).rows

    def test_per_employee(self, engine, sample_as_of):
        assert engine.tenure(sample_as_of, 1).years == 4
        assert engine.salary_growth_percentage(sample_as_of, 1) == 10.0
        assert engine.overall_score(sample_as_of, 1) == engine.employee_metrics(sample_as_of, 1).overall_score
        assert engine.classify(4.2, 2) == "High Performer"
        assert len(engine.employee_metrics_report(sample_as_of).rows) == 10

    def test_aggregates(self, engine, sample_as_of):
        assert engine.department_total_salary_cost(sample_as_of, 2) == Decimal("373500")
        assert engine.department_average_salary(sample_as_of, 1) == Decimal("80000.00")
        assert engine.department_metrics(sample_as_of, 3).headcount == 2
        assert engine.manager_metrics(sample_as_of, 4).direct_report_ids == [9]
        assert len(engine.manager_report(sample_as_of).rows) == 3

    def test_correlation(self, engine, sample_as_of):
        assert engine.training_roi(sample_as_of, 1).roi_category == RoiCategory.HIGH
        assert len(engine.training_roi_report(sample_as_of).rows) == 3
        assert engine.collaboration_between(sample_as_of, 3, 5).project_ids == [4]
        assert len(engine.collaboration_report(sample_as_of).rows) == 4

    def test_report_library(self, engine, sample_as_of):
        assert engine.second_highest_salary(sample_as_of).rows[0].employee_id == 1
        assert len(engine.highest_paid_by_department(sample_as_of).rows) == 5
        assert engine.department_salary_expense(sample_as_of).rows[0].department_name == "IT"
        assert engine.top_department_by_average_salary(sample_as_of).department_id == 2
        assert len(engine.employees_out_earning_manager(sample_as_of).rows) == 3
        assert engine.project_cost(sample_as_of, 2).estimated_cost == Decimal("119600.00")
        assert len(engine.project_cost_report(sample_as_of).rows) == 4
        assert len(engine.projects_over_budget(sample_as_of).rows) == 3
        assert engine.employees_on_multiple_projects(sample_as_of).rows[0].employee_id == 1
        assert len(engine.employees_without_projects(sample_as_of).rows) == 3
        assert len(engine.attendance_report(sample_as_of).rows) == 8
        assert len(engine.leave_usage_report(sample_as_of).rows) == 3
        assert engine.most_leave_days(sample_as_of, limit=2).rows[1].employee_id == 3

    def test_configured_limits(self, sample_snapshot, sample_as_of):
        config = MetricsConfig(reporting={"leave_report_limit": 3, "min_projects_for_multi_assignment": 1})
        engine = MetricsEngine(sample_snapshot, config)
        assert len(engine.most_leave_days(sample_as_of).rows) == 3
        assert len(engine.employees_on_multiple_projects(sample_as_of).rows) == 7
