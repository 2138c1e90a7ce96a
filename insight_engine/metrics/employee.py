"""
Per-employee metrics: tenure, salary growth, performance, training,
project delivery, leave, attendance and the weighted overall score.

Every function takes ``(snapshot, as_of, employee_id)`` and only looks at
facts dated on or before ``as_of``. Lookups of missing rows raise
``MissingEntityError``; ``employee_metrics_report`` turns those into
exclusions.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Optional, Union

from ..config import MetricsConfig
from ..exceptions import FutureHireDateError, MissingEntityError
from ..snapshot import AttendanceStatus, Snapshot
from .models import (
    EmployeeMetrics,
    Exclusion,
    LeaveSummary,
    PerformanceSummary,
    ProjectSummary,
    ReportResult,
    Tenure,
    TrainingSummary,
)
from .values import (
    NO_REVIEW_DATA,
    UNDEFINED,
    NoReviewData,
    RatingValue,
    RatioValue,
    capped_share,
    is_undefined,
    mean,
    percentage,
    weighted_score,
)

logger = logging.getLogger(__name__)


def tenure(snapshot: Snapshot, as_of: date, employee_id: int) -> Tenure:
    """Years and months from hire to ``as_of`` (or to termination when earlier)."""
    employee = snapshot.employee(employee_id)
    if employee.hire_date > as_of:
        raise FutureHireDateError(employee_id, employee.hire_date, as_of)

    end = as_of
    if employee.termination_date is not None and employee.termination_date < as_of:
        end = employee.termination_date

    start = employee.hire_date
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        months -= 1
    years, months = divmod(max(months, 0), 12)
    return Tenure(years=years, months=months)


def salary_growth_percentage(
    snapshot: Snapshot, as_of: date, employee_id: int, places: int = 2
) -> RatioValue:
    """``(current - initial) / initial * 100``; ``UNDEFINED`` when initial is 0."""
    initial = snapshot.initial_salary(employee_id, as_of)
    current = snapshot.current_salary(employee_id, as_of)
    return percentage(current - initial, initial, places)


def performance_summary(
    snapshot: Snapshot, as_of: date, employee_id: int, places: int = 2
) -> PerformanceSummary:
    reviews = snapshot.reviews_for(employee_id, as_of)
    if not reviews:
        return PerformanceSummary(
            average_rating=NO_REVIEW_DATA, latest_rating=NO_REVIEW_DATA, review_count=0
        )
    return PerformanceSummary(
        average_rating=mean((r.rating for r in reviews), places),
        latest_rating=reviews[-1].rating,
        review_count=len(reviews),
    )


def training_summary(
    snapshot: Snapshot, as_of: date, employee_id: int, places: int = 2
) -> TrainingSummary:
    completed = snapshot.completed_training_for(employee_id, as_of)
    for record in completed:
        snapshot.training_program(record.program_id)
    return TrainingSummary(
        completed_programs=len({record.program_id for record in completed}),
        average_score=mean((r.score for r in completed if r.score is not None), places),
    )


def project_summary(
    snapshot: Snapshot, as_of: date, employee_id: int, places: int = 2
) -> ProjectSummary:
    assignments = snapshot.assignments_for_employee(employee_id, as_of)
    project_ids = {a.project_id for a in assignments}
    projects = [snapshot.project(project_id) for project_id in sorted(project_ids)]
    completed = sum(1 for project in projects if project.is_completed_at(as_of))
    active = len({a.project_id for a in assignments if a.is_active_at(as_of)})
    return ProjectSummary(
        total_projects=len(projects),
        completed_projects=completed,
        active_projects=active,
        completion_rate=percentage(completed, len(projects), places),
    )


def leave_summary(
    snapshot: Snapshot, as_of: date, employee_id: int, places: int = 2
) -> LeaveSummary:
    requests = snapshot.leave_requests_for(employee_id, as_of)
    approved = [request for request in requests if request.is_approved]
    return LeaveSummary(
        total_requests=len(requests),
        approved_requests=len(approved),
        approved_days=sum(request.days for request in approved),
        approval_rate=percentage(len(approved), len(requests), places),
    )


def attendance_rate(
    snapshot: Snapshot,
    as_of: date,
    employee_id: int,
    since: Optional[date] = None,
    places: int = 2,
) -> RatioValue:
    """Present days over recorded days, as a percentage."""
    records = [
        record for record in snapshot.attendance_for(employee_id, as_of)
        if since is None or record.attendance_date >= since
    ]
    present = sum(1 for record in records if record.status == AttendanceStatus.PRESENT)
    return percentage(present, len(records), places)


def score_components(
    performance: PerformanceSummary,
    training: TrainingSummary,
    projects: ProjectSummary,
    salary_growth: RatioValue,
    service: Tenure,
    config: MetricsConfig,
) -> Dict[str, Union[float, RatioValue, RatingValue]]:
    """Normalized 0-100 sub-scores keyed like ``OverallScoreWeights``."""
    norm = config.scoring.normalization
    components: Dict[str, Union[float, RatioValue, RatingValue]] = {}

    if is_undefined(performance.average_rating):
        components["performance"] = performance.average_rating
    else:
        components["performance"] = capped_share(
            performance.average_rating, norm.rating_scale_max
        )
    components["training"] = capped_share(training.completed_programs, norm.training_target)
    components["projects"] = projects.completion_rate
    if is_undefined(salary_growth):
        components["salary"] = UNDEFINED
    else:
        components["salary"] = capped_share(salary_growth, norm.salary_growth_cap_pct)
    components["tenure"] = capped_share(service.fractional_years, norm.tenure_cap_years)
    return components


def overall_score(
    snapshot: Snapshot,
    as_of: date,
    employee_id: int,
    config: Optional[MetricsConfig] = None,
) -> RatioValue:
    """Weighted composite of the normalized sub-scores."""
    config = config or MetricsConfig()
    places = config.places
    components = score_components(
        performance_summary(snapshot, as_of, employee_id, places),
        training_summary(snapshot, as_of, employee_id, places),
        project_summary(snapshot, as_of, employee_id, places),
        salary_growth_percentage(snapshot, as_of, employee_id, places),
        tenure(snapshot, as_of, employee_id),
        config,
    )
    return weighted_score(
        components,
        config.scoring.overall_weights.as_dict(),
        policy=config.scoring.undefined_component_policy,
        places=places,
    )


def classify(
    average_rating: RatingValue,
    completed_trainings: int,
    config: Optional[MetricsConfig] = None,
) -> str:
    """First matching classification rule, top down."""
    settings = (config or MetricsConfig()).scoring.classification
    if isinstance(average_rating, NoReviewData):
        return settings.unrated_label
    for rule in settings.rules:
        if rule.matches(average_rating, completed_trainings):
            return rule.label
    return settings.fallback_label


def employee_metrics(
    snapshot: Snapshot,
    as_of: date,
    employee_id: int,
    config: Optional[MetricsConfig] = None,
) -> EmployeeMetrics:
    """Build the full metric row for one employee."""
    config = config or MetricsConfig()
    places = config.places
    employee = snapshot.employee(employee_id)

    service = tenure(snapshot, as_of, employee_id)
    department = (
        snapshot.department(employee.department_id)
        if employee.department_id is not None else None
    )
    position = (
        snapshot.position(employee.position_id)
        if employee.position_id is not None else None
    )

    initial = snapshot.initial_salary(employee_id, as_of)
    current = snapshot.current_salary(employee_id, as_of)
    growth = percentage(current - initial, initial, places)

    performance = performance_summary(snapshot, as_of, employee_id, places)
    training = training_summary(snapshot, as_of, employee_id, places)
    projects = project_summary(snapshot, as_of, employee_id, places)
    leave = leave_summary(snapshot, as_of, employee_id, places)

    score = weighted_score(
        score_components(performance, training, projects, growth, service, config),
        config.scoring.overall_weights.as_dict(),
        policy=config.scoring.undefined_component_policy,
        places=places,
    )

    return EmployeeMetrics(
        employee_id=employee.employee_id,
        full_name=employee.full_name,
        department_id=employee.department_id,
        department_name=department.name if department else None,
        position_title=position.title if position else None,
        manager_id=employee.manager_id,
        hire_date=employee.hire_date,
        tenure_years=service.years,
        tenure_months=service.months,
        initial_salary=initial,
        current_salary=current,
        salary_growth_pct=growth,
        average_rating=performance.average_rating,
        latest_rating=performance.latest_rating,
        review_count=performance.review_count,
        completed_trainings=training.completed_programs,
        average_training_score=training.average_score,
        total_projects=projects.total_projects,
        completed_projects=projects.completed_projects,
        active_projects=projects.active_projects,
        project_completion_rate=projects.completion_rate,
        leave_requests=leave.total_requests,
        approved_leaves=leave.approved_requests,
        approved_leave_days=leave.approved_days,
        leave_approval_rate=leave.approval_rate,
        attendance_rate=attendance_rate(snapshot, as_of, employee_id, places=places),
        overall_score=score,
        classification=classify(performance.average_rating, training.completed_programs, config),
    )


def employee_metrics_report(
    snapshot: Snapshot,
    as_of: date,
    department_id: Optional[int] = None,
    include_former: Optional[bool] = None,
    config: Optional[MetricsConfig] = None,
) -> ReportResult[EmployeeMetrics]:
    """Metric rows for every employee employed at ``as_of``.

    With ``include_former`` every employee hired by ``as_of`` is covered,
    including those terminated since.
    """
    config = config or MetricsConfig()
    if include_former is None:
        include_former = config.reporting.include_former_employees

    population = (
        snapshot.employees_hired_by(as_of, department_id)
        if include_former
        else snapshot.employees_at(as_of, department_id)
    )

    rows: List[EmployeeMetrics] = []
    exclusions: List[Exclusion] = []
    for employee in population:
        try:
            rows.append(employee_metrics(snapshot, as_of, employee.employee_id, config))
        except MissingEntityError as e:
            exclusions.append(Exclusion.from_error("employee", employee.employee_id, e))

    logger.info(
        f"Employee metrics as of {as_of}: {len(rows)} rows, {len(exclusions)} exclusions"
    )
    if exclusions:
        logger.warning(
            f"Excluded employees: {[(x.entity_id, x.reason.value) for x in exclusions]}"
        )
    return ReportResult[EmployeeMetrics](
        report="employee_metrics", as_of=as_of, rows=rows, exclusions=exclusions
    )


__all__ = [
    "tenure",
    "salary_growth_percentage",
    "performance_summary",
    "training_summary",
    "project_summary",
    "leave_summary",
    "attendance_rate",
    "score_components",
    "overall_score",
    "classify",
    "employee_metrics",
    "employee_metrics_report",
]
