"""
MetricsEngine - binds one snapshot and one configuration.

Every method delegates to the module-level metric function of the same
name, so the engine and the functions always agree.

Example:
    engine = MetricsEngine(snapshot, load_metrics_config("config/metrics_config.yaml"))
    engine.employee_metrics(date(2025, 12, 31), 7)
    engine.department_report(date(2025, 12, 31))
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from . import metrics
from .config import MetricsConfig
from .metrics import (
    AttendanceSummary,
    CollaborationMetrics,
    DepartmentMetrics,
    DepartmentSalaryExpense,
    EmployeeMetrics,
    EmployeeRef,
    LeaveUsage,
    ManagerMetrics,
    ManagerPayGap,
    ProjectCost,
    ProjectLoad,
    ReportResult,
    SalaryHolder,
    Tenure,
    TrainingRoiMetrics,
)
from .metrics.values import MoneyValue, RatingValue, RatioValue
from .snapshot import Snapshot

logger = logging.getLogger(__name__)


class MetricsEngine:
    """Stateless facade over the metric families."""

    def __init__(self, snapshot: Snapshot, config: Optional[MetricsConfig] = None):
        self.snapshot = snapshot
        self.config = config or MetricsConfig()
        logger.debug(f"MetricsEngine bound to snapshot {snapshot.snapshot_id}")

    # per-employee

    def tenure(self, as_of: date, employee_id: int) -> Tenure:
        return metrics.tenure(self.snapshot, as_of, employee_id)

    def salary_growth_percentage(self, as_of: date, employee_id: int) -> RatioValue:
        return metrics.salary_growth_percentage(
            self.snapshot, as_of, employee_id, self.config.places
        )

    def overall_score(self, as_of: date, employee_id: int) -> RatioValue:
        return metrics.overall_score(self.snapshot, as_of, employee_id, self.config)

    def classify(self, average_rating: RatingValue, completed_trainings: int) -> str:
        return metrics.classify(average_rating, completed_trainings, self.config)

    def employee_metrics(self, as_of: date, employee_id: int) -> EmployeeMetrics:
        return metrics.employee_metrics(self.snapshot, as_of, employee_id, self.config)

    def employee_metrics_report(
        self,
        as_of: date,
        department_id: Optional[int] = None,
        include_former: Optional[bool] = None,
    ) -> ReportResult[EmployeeMetrics]:
        return metrics.employee_metrics_report(
            self.snapshot, as_of, department_id, include_former, self.config
        )

    # aggregates

    def department_metrics(self, as_of: date, department_id: int) -> DepartmentMetrics:
        return metrics.department_metrics(self.snapshot, as_of, department_id, self.config)

    def department_total_salary_cost(self, as_of: date, department_id: int) -> Decimal:
        return metrics.department_total_salary_cost(self.snapshot, as_of, department_id)

    def department_average_salary(self, as_of: date, department_id: int) -> MoneyValue:
        return metrics.department_average_salary(self.snapshot, as_of, department_id)

    def department_report(
        self, as_of: date, include_empty: Optional[bool] = None
    ) -> ReportResult[DepartmentMetrics]:
        return metrics.department_report(self.snapshot, as_of, include_empty, self.config)

    def manager_metrics(self, as_of: date, manager_id: int) -> ManagerMetrics:
        return metrics.manager_metrics(self.snapshot, as_of, manager_id, self.config)

    def manager_report(
        self, as_of: date, department_id: Optional[int] = None
    ) -> ReportResult[ManagerMetrics]:
        return metrics.manager_report(self.snapshot, as_of, department_id, self.config)

    # correlation

    def training_roi(
        self, as_of: date, program_id: int, completed_only: Optional[bool] = None
    ) -> Optional[TrainingRoiMetrics]:
        return metrics.training_roi(self.snapshot, as_of, program_id, completed_only, self.config)

    def training_roi_report(
        self, as_of: date, completed_only: Optional[bool] = None
    ) -> ReportResult[TrainingRoiMetrics]:
        return metrics.training_roi_report(self.snapshot, as_of, completed_only, self.config)

    def collaboration_between(
        self, as_of: date, department_a: int, department_b: int
    ) -> Optional[CollaborationMetrics]:
        return metrics.collaboration_between(
            self.snapshot, as_of, department_a, department_b, self.config
        )

    def collaboration_report(self, as_of: date) -> ReportResult[CollaborationMetrics]:
        return metrics.collaboration_report(self.snapshot, as_of, self.config)

    # compensation

    def second_highest_salary(self, as_of: date) -> ReportResult[SalaryHolder]:
        return metrics.second_highest_salary(self.snapshot, as_of)

    def highest_paid_by_department(self, as_of: date) -> ReportResult[SalaryHolder]:
        return metrics.highest_paid_by_department(self.snapshot, as_of)

    def department_salary_expense(self, as_of: date) -> ReportResult[DepartmentSalaryExpense]:
        return metrics.department_salary_expense(self.snapshot, as_of)

    def top_department_by_average_salary(self, as_of: date) -> Optional[DepartmentSalaryExpense]:
        return metrics.top_department_by_average_salary(self.snapshot, as_of)

    def employees_out_earning_manager(self, as_of: date) -> ReportResult[ManagerPayGap]:
        return metrics.employees_out_earning_manager(self.snapshot, as_of)

    # projects

    def project_cost(self, as_of: date, project_id: int) -> ProjectCost:
        return metrics.project_cost(self.snapshot, as_of, project_id, self.config)

    def project_cost_report(self, as_of: date) -> ReportResult[ProjectCost]:
        return metrics.project_cost_report(self.snapshot, as_of, config=self.config)

    def projects_over_budget(self, as_of: date) -> ReportResult[ProjectCost]:
        return metrics.projects_over_budget(self.snapshot, as_of, self.config)

    def employees_on_multiple_projects(
        self, as_of: date, min_projects: Optional[int] = None
    ) -> ReportResult[ProjectLoad]:
        return metrics.employees_on_multiple_projects(
            self.snapshot, as_of, min_projects, self.config
        )

    def employees_without_projects(self, as_of: date) -> ReportResult[EmployeeRef]:
        return metrics.employees_without_projects(self.snapshot, as_of)

    # attendance and leave

    def attendance_report(
        self, as_of: date, since: Optional[date] = None
    ) -> ReportResult[AttendanceSummary]:
        return metrics.attendance_report(self.snapshot, as_of, since, self.config)

    def leave_usage_report(self, as_of: date) -> ReportResult[LeaveUsage]:
        return metrics.leave_usage_report(self.snapshot, as_of)

    def most_leave_days(self, as_of: date, limit: Optional[int] = None) -> ReportResult[LeaveUsage]:
        return metrics.most_leave_days(self.snapshot, as_of, limit, self.config)
