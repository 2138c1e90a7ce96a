"""Report row models returned by the metric families.

Rows are frozen pydantic models. Ratio fields hold either a float or the
``UNDEFINED`` marker; rating fields hold a float or ``NO_REVIEW_DATA``.
``model_dump(mode="json")`` turns both markers into their string values.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import ExclusionReason, MissingEntityError
from .values import MoneyValue, RatingValue, RatioValue

RowT = TypeVar("RowT", bound=BaseModel)


class ReportRow(BaseModel):
    model_config = ConfigDict(frozen=True)


class Exclusion(ReportRow):
    """A record left out of a batch report, with the reason."""

    entity_type: str = Field(description="Kind of record that was excluded")
    entity_id: Optional[int] = Field(default=None, description="Id of the excluded record")
    reason: ExclusionReason = Field(description="Reason code")
    detail: str = Field(default="", description="Error message that caused the exclusion")
    scope: str = Field(default="row", description="'row' or the figures the record was dropped from")

    @classmethod
    def from_error(
        cls,
        entity_type: str,
        entity_id: Optional[int],
        error: MissingEntityError,
        scope: str = "row",
    ) -> "Exclusion":
        return cls(
            entity_type=entity_type,
            entity_id=entity_id,
            reason=error.reason_code,
            detail=error.message,
            scope=scope,
        )


class ReportResult(BaseModel, Generic[RowT]):
    """Rows of one batch report plus the records it had to leave out."""

    model_config = ConfigDict(frozen=True)

    report: str = Field(description="Report name")
    as_of: date = Field(description="As-of date the rows were computed for")
    rows: List[RowT] = Field(default_factory=list)
    exclusions: List[Exclusion] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.rows


# ---------------------------------------------------------------- employee


class Tenure(ReportRow):
    """Whole years and remaining months of service."""

    years: int = Field(ge=0)
    months: int = Field(ge=0, le=11)

    @property
    def total_months(self) -> int:
        return self.years * 12 + self.months

    @property
    def fractional_years(self) -> float:
        return self.total_months / 12


class PerformanceSummary(ReportRow):
    average_rating: RatingValue
    latest_rating: RatingValue
    review_count: int = Field(ge=0)


class TrainingSummary(ReportRow):
    completed_programs: int = Field(ge=0)
    average_score: RatioValue


class ProjectSummary(ReportRow):
    total_projects: int = Field(ge=0)
    completed_projects: int = Field(ge=0)
    active_projects: int = Field(ge=0)
    completion_rate: RatioValue


class LeaveSummary(ReportRow):
    total_requests: int = Field(ge=0)
    approved_requests: int = Field(ge=0)
    approved_days: int = Field(ge=0)
    approval_rate: RatioValue


class EmployeeMetrics(ReportRow):
    """Per-employee metric row."""

    employee_id: int
    full_name: str
    department_id: Optional[int] = None
    department_name: Optional[str] = None
    position_title: Optional[str] = None
    manager_id: Optional[int] = None
    hire_date: date
    tenure_years: int = Field(description="Whole years of service")
    tenure_months: int = Field(description="Months beyond whole years")
    initial_salary: Decimal
    current_salary: Decimal
    salary_growth_pct: RatioValue
    average_rating: RatingValue
    latest_rating: RatingValue
    review_count: int
    completed_trainings: int
    average_training_score: RatioValue
    total_projects: int
    completed_projects: int
    active_projects: int
    project_completion_rate: RatioValue
    leave_requests: int
    approved_leaves: int
    approved_leave_days: int
    leave_approval_rate: RatioValue
    attendance_rate: RatioValue
    overall_score: RatioValue = Field(description="Weighted 0-100 composite")
    classification: str


# -------------------------------------------------------------- aggregates


class TeamAggregate(ReportRow):
    """Figures shared by department and manager rows."""

    headcount: int = Field(description="Members employed at the as-of date")
    salaried_headcount: int = Field(description="Members with a current salary")
    total_salary_cost: Decimal
    average_salary: MoneyValue
    average_performance: RatioValue = Field(description="Mean of members' average ratings")
    rated_headcount: int
    total_projects: int = Field(description="Distinct projects any member was assigned to")
    completed_projects: int
    project_completion_rate: RatioValue
    training_completions: int
    average_training_score: RatioValue


class DepartmentMetrics(TeamAggregate):
    department_id: int
    department_name: str
    location: Optional[str] = None
    manager_id: Optional[int] = None
    manager_name: Optional[str] = None
    budget: Decimal
    budget_utilization_pct: RatioValue


class ManagerMetrics(TeamAggregate):
    manager_id: int
    manager_name: str
    department_id: Optional[int] = None
    direct_report_ids: List[int] = Field(default_factory=list)
    total_span: int = Field(description="All employees below the manager")
    effectiveness_score: RatioValue


# ------------------------------------------------------------- correlation


class RoiCategory(str, Enum):
    HIGH = "High"
    POSITIVE = "Positive"
    LOW = "Low"
    INSUFFICIENT_DATA = "Insufficient Data"


class TrainingRoiMetrics(ReportRow):
    program_id: int
    program_name: str
    participants: int
    completed: int
    completion_rate: RatioValue
    average_score: RatioValue
    total_cost: Decimal = Field(description="Program cost times participants")
    reviewed_participants: int = Field(description="Participants with two or more reviews")
    single_review_participants: int
    unreviewed_participants: int
    average_rating_delta: RatioValue
    roi_category: RoiCategory


class CollaborationMetrics(ReportRow):
    department_a_id: int
    department_a_name: str
    department_b_id: int
    department_b_name: str
    project_ids: List[int]
    project_count: int
    participants: int
    participants_a: int
    participants_b: int
    combined_budget: Decimal
    average_performance: RatioValue
    completion_rate: RatioValue


# ------------------------------------------------------------ compensation


class SalaryHolder(ReportRow):
    employee_id: int
    full_name: str
    department_id: Optional[int] = None
    department_name: Optional[str] = None
    salary: Decimal


class DepartmentSalaryExpense(ReportRow):
    department_id: int
    department_name: str
    salaried_headcount: int
    total_salary: Decimal
    average_salary: MoneyValue


class ManagerPayGap(ReportRow):
    employee_id: int
    employee_name: str
    employee_salary: Decimal
    manager_id: int
    manager_name: str
    manager_salary: Decimal
    difference: Decimal


# ---------------------------------------------------------------- projects


class ProjectCost(ReportRow):
    project_id: int
    project_name: str
    status: str
    budget: Decimal
    active_assignments: int
    estimated_cost: Decimal = Field(description="Sum of salary times allocation over active assignments")
    variance: Decimal = Field(description="Budget minus estimated cost")
    utilization_pct: RatioValue
    over_budget: bool


class ProjectLoad(ReportRow):
    employee_id: int
    full_name: str
    department_id: Optional[int] = None
    project_count: int
    project_ids: List[int]


class EmployeeRef(ReportRow):
    employee_id: int
    full_name: str
    department_id: Optional[int] = None
    department_name: Optional[str] = None


# -------------------------------------------------------------- attendance


class AttendanceSummary(ReportRow):
    employee_id: int
    full_name: str
    recorded_days: int
    present_days: int
    attendance_pct: RatioValue


class LeaveUsage(ReportRow):
    employee_id: int
    full_name: str
    approved_requests: int
    approved_days: int
