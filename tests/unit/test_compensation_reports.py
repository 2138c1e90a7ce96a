"""Unit tests for the compensation reports."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from insight_engine.exceptions import ExclusionReason
from insight_engine.metrics import (
    department_salary_expense,
    employees_out_earning_manager,
    highest_paid_by_department,
    second_highest_salary,
    top_department_by_average_salary,
)
from insight_engine.snapshot import Snapshot
from tests.fixtures.snapshot_data import AS_OF, make_department, make_employee, make_salary


def _paid_snapshot(*amounts: int) -> Snapshot:
    """One employee per amount, all in department 1."""
    return Snapshot(
        departments=[make_department(1)],
        employees=[make_employee(i, department_id=1) for i in range(1, len(amounts) + 1)],
        salary_records=[
            make_salary(i, amount, date(2020, 1, 1)) for i, amount in enumerate(amounts, start=1)
        ],
    )


class TestSecondHighest:
    def test_sample(self, sample_snapshot, sample_as_of):
        result = second_highest_salary(sample_snapshot, sample_as_of)
        assert [(row.employee_id, row.salary) for row in result.rows] == [(1, Decimal("99000"))]

    def test_ties_all_reported(self):
        result = second_highest_salary(_paid_snapshot(100, 90, 90, 80), AS_OF)
        assert [row.employee_id for row in result.rows] == [2, 3]

    def test_single_distinct_salary_is_empty(self):
        assert second_highest_salary(_paid_snapshot(100, 100), AS_OF).is_empty

    def test_missing_salary_excluded(self, small_snapshot):
        result = second_highest_salary(small_snapshot, AS_OF)
        assert [row.employee_id for row in result.rows] == [2]
        assert [x.reason for x in result.exclusions] == [ExclusionReason.NO_SALARY_RECORD]


class TestDepartmentFigures:
    def test_highest_paid_per_department(self, sample_snapshot, sample_as_of):
        result = highest_paid_by_department(sample_snapshot, sample_as_of)
        assert [(row.department_id, row.employee_id) for row in result.rows] == [
            (1, 2), (2, 7), (3, 9), (4, 10), (5, 6),
        ]

    def test_highest_paid_ties(self):
        result = highest_paid_by_department(_paid_snapshot(90, 100, 100), AS_OF)
        assert [row.employee_id for row in result.rows] == [2, 3]

    def test_expense_sorted_largest_first(self, sample_snapshot, sample_as_of):
        result = department_salary_expense(sample_snapshot, sample_as_of)
        assert [(row.department_name, row.total_salary) for row in result.rows] == [
            ("IT", Decimal("373500")),
            ("Finance", Decimal("142000")),
            ("Marketing", Decimal("136400")),
            ("Operations", Decimal("85000")),
            ("Human Resources", Decimal("80000")),
        ]

    def test_top_department_by_average(self, sample_snapshot, sample_as_of):
        row = top_department_by_average_salary(sample_snapshot, sample_as_of)
        assert row.department_name == "IT"
        assert row.average_salary == Decimal("93375.00")

    def test_top_department_none_without_salaries(self):
        snapshot = Snapshot(departments=[make_department(1)], employees=[make_employee(1, department_id=1)])
        assert top_department_by_average_salary(snapshot, AS_OF) is None


class TestOutEarningManager:
    def test_sample(self, sample_snapshot, sample_as_of):
        result = employees_out_earning_manager(sample_snapshot, sample_as_of)
        assert [(row.employee_id, row.difference) for row in result.rows] == [
            (7, Decimal("5500")),
            (9, Decimal("2000")),
            (10, Decimal("6400")),
        ]

    def test_equal_pay_not_reported(self):
        snapshot = Snapshot(
            employees=[make_employee(1), make_employee(2, manager_id=1)],
            salary_records=[
                make_salary(1, 50000, date(2020, 1, 1)),
                make_salary(2, 50000, date(2020, 1, 1)),
            ],
        )
        assert employees_out_earning_manager(snapshot, AS_OF).is_empty

    def test_former_manager_salary_still_resolves(self):
        snapshot = Snapshot(
            employees=[
                make_employee(1, termination_date=date(2025, 1, 31), status="Resigned"),
                make_employee(2, manager_id=1),
            ],
            salary_records=[
                make_salary(1, 40000, date(2020, 1, 1)),
                make_salary(2, 50000, date(2020, 1, 1)),
            ],
        )
        result = employees_out_earning_manager(snapshot, AS_OF)
        assert [row.manager_salary for row in result.rows] == [Decimal("40000")]
