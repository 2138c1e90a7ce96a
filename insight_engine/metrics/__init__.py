"""Metric families computed over a Snapshot at an as-of date."""

from .values import (
    NO_REVIEW_DATA,
    UNDEFINED,
    NoReviewData,
    UndefinedRatio,
    is_undefined,
)
from .models import (
    AttendanceSummary,
    CollaborationMetrics,
    DepartmentMetrics,
    DepartmentSalaryExpense,
    EmployeeMetrics,
    EmployeeRef,
    Exclusion,
    LeaveUsage,
    ManagerMetrics,
    ManagerPayGap,
    ProjectCost,
    ProjectLoad,
    ReportResult,
    RoiCategory,
    SalaryHolder,
    Tenure,
    TrainingRoiMetrics,
)
from .employee import (
    attendance_rate,
    classify,
    employee_metrics,
    employee_metrics_report,
    leave_summary,
    overall_score,
    performance_summary,
    project_summary,
    salary_growth_percentage,
    tenure,
    training_summary,
)
from .department import (
    department_average_salary,
    department_metrics,
    department_report,
    department_total_salary_cost,
    manager_metrics,
    manager_report,
)
from .correlation import (
    collaboration_between,
    collaboration_report,
    normalize_pair,
    roi_category,
    training_roi,
    training_roi_report,
)
from .compensation import (
    department_salary_expense,
    employees_out_earning_manager,
    highest_paid_by_department,
    second_highest_salary,
    top_department_by_average_salary,
)
from .projects import (
    employees_on_multiple_projects,
    employees_without_projects,
    project_cost,
    project_cost_report,
    projects_over_budget,
)
from .attendance import (
    attendance_report,
    attendance_summary,
    leave_usage_report,
    most_leave_days,
)

__all__ = [
    "NO_REVIEW_DATA",
    "UNDEFINED",
    "NoReviewData",
    "UndefinedRatio",
    "is_undefined",
    "AttendanceSummary",
    "CollaborationMetrics",
    "DepartmentMetrics",
    "DepartmentSalaryExpense",
    "EmployeeMetrics",
    "EmployeeRef",
    "Exclusion",
    "LeaveUsage",
    "ManagerMetrics",
    "ManagerPayGap",
    "ProjectCost",
    "ProjectLoad",
    "ReportResult",
    "RoiCategory",
    "SalaryHolder",
    "Tenure",
    "TrainingRoiMetrics",
    "attendance_rate",
    "classify",
    "employee_metrics",
    "employee_metrics_report",
    "leave_summary",
    "overall_score",
    "performance_summary",
    "project_summary",
    "salary_growth_percentage",
    "tenure",
    "training_summary",
    "department_average_salary",
    "department_metrics",
    "department_report",
    "department_total_salary_cost",
    "manager_metrics",
    "manager_report",
    "collaboration_between",
    "collaboration_report",
    "normalize_pair",
    "roi_category",
    "training_roi",
    "training_roi_report",
    "department_salary_expense",
    "employees_out_earning_manager",
    "highest_paid_by_department",
    "second_highest_salary",
    "top_department_by_average_salary",
    "employees_on_multiple_projects",
    "employees_without_projects",
    "project_cost",
    "project_cost_report",
    "projects_over_budget",
    "attendance_report",
    "attendance_summary",
    "leave_usage_report",
    "most_leave_days",
]
