"""
Cross-entity correlations.

Training ROI relates program participation to the change in review ratings
between a participant's first and latest review. Collaboration pairs
departments whose employees were assigned to the same project; every
unordered pair is normalized to ``(lower_id, higher_id)`` so it is reported
once and looks the same from either side.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from itertools import combinations
from typing import Dict, List, Optional, Set, Tuple

from ..config import MetricsConfig
from ..exceptions import InvalidDepartmentPairError, MissingEntityError
from ..snapshot import Snapshot, TrainingProgram
from .employee import performance_summary
from .models import (
    CollaborationMetrics,
    Exclusion,
    ReportResult,
    RoiCategory,
    TrainingRoiMetrics,
)
from .values import (
    RatioValue,
    is_undefined,
    mean,
    percentage,
    round_money,
)

logger = logging.getLogger(__name__)

DepartmentPair = Tuple[int, int]


# ------------------------------------------------------------ training ROI


def roi_category(average_delta: RatioValue, config: Optional[MetricsConfig] = None) -> RoiCategory:
    """Map the average rating delta onto a category."""
    settings = (config or MetricsConfig()).training_roi
    if is_undefined(average_delta):
        return RoiCategory.INSUFFICIENT_DATA
    if average_delta > settings.high_threshold:
        return RoiCategory.HIGH
    if average_delta > settings.positive_threshold:
        return RoiCategory.POSITIVE
    return RoiCategory.LOW


def _program_row(
    snapshot: Snapshot,
    as_of: date,
    program: TrainingProgram,
    completed_only: bool,
    config: MetricsConfig,
    exclusions: Optional[List[Exclusion]] = None,
) -> Optional[TrainingRoiMetrics]:
    """ROI row for one program, or None without participants.

    Records pointing at missing employees raise unless ``exclusions`` is
    given, in which case they are recorded there and skipped.
    """
    places = config.places
    participants: Set[int] = set()
    completers: Set[int] = set()
    scores: List[float] = []

    for record in snapshot.training_records_for_program(program.program_id):
        try:
            employee = snapshot.employee(record.employee_id)
        except MissingEntityError as e:
            if exclusions is None:
                raise
            exclusions.append(Exclusion.from_error("training_record", record.record_id, e))
            continue
        if employee.hire_date > as_of:
            continue
        completed = record.is_completed_at(as_of)
        if completed_only and not completed:
            continue
        participants.add(employee.employee_id)
        if completed:
            completers.add(employee.employee_id)
            if record.score is not None:
                scores.append(record.score)

    if not participants:
        return None

    deltas: List[float] = []
    single = unreviewed = 0
    for employee_id in sorted(participants):
        reviews = snapshot.reviews_for(employee_id, as_of)
        if not reviews:
            unreviewed += 1
        elif len(reviews) == 1:
            single += 1
        else:
            deltas.append(reviews[-1].rating - reviews[0].rating)

    average_delta = mean(deltas, places)
    return TrainingRoiMetrics(
        program_id=program.program_id,
        program_name=program.name,
        participants=len(participants),
        completed=len(completers),
        completion_rate=percentage(len(completers), len(participants), places),
        average_score=mean(scores, places),
        total_cost=round_money(program.cost * len(participants)),
        reviewed_participants=len(deltas),
        single_review_participants=single,
        unreviewed_participants=unreviewed,
        average_rating_delta=average_delta,
        roi_category=roi_category(average_delta, config),
    )


def training_roi(
    snapshot: Snapshot,
    as_of: date,
    program_id: int,
    completed_only: Optional[bool] = None,
    config: Optional[MetricsConfig] = None,
) -> Optional[TrainingRoiMetrics]:
    """ROI row for one program; None when nobody hired by ``as_of`` took part."""
    config = config or MetricsConfig()
    if completed_only is None:
        completed_only = config.training_roi.completed_only
    program = snapshot.training_program(program_id)
    return _program_row(snapshot, as_of, program, completed_only, config)


def training_roi_report(
    snapshot: Snapshot,
    as_of: date,
    completed_only: Optional[bool] = None,
    config: Optional[MetricsConfig] = None,
) -> ReportResult[TrainingRoiMetrics]:
    config = config or MetricsConfig()
    if completed_only is None:
        completed_only = config.training_roi.completed_only

    rows: List[TrainingRoiMetrics] = []
    exclusions: List[Exclusion] = []
    for program in snapshot.training_programs.values():
        row = _program_row(snapshot, as_of, program, completed_only, config, exclusions)
        if row is not None:
            rows.append(row)

    logger.info(
        f"Training ROI as of {as_of}: {len(rows)} programs "
        f"(completed_only={completed_only}), {len(exclusions)} exclusions"
    )
    return ReportResult[TrainingRoiMetrics](
        report="training_roi", as_of=as_of, rows=rows, exclusions=exclusions
    )


# ----------------------------------------------------------- collaboration


def normalize_pair(department_a: int, department_b: int) -> DepartmentPair:
    if department_a == department_b:
        raise InvalidDepartmentPairError(department_a)
    return (department_a, department_b) if department_a < department_b else (department_b, department_a)


@dataclass
class _PairAccumulator:
    project_ids: Set[int] = field(default_factory=set)
    participants: Dict[int, Set[int]] = field(default_factory=lambda: defaultdict(set))


def _collaboration_index(
    snapshot: Snapshot,
    as_of: date,
    exclusions: Optional[List[Exclusion]] = None,
) -> Dict[DepartmentPair, _PairAccumulator]:
    """Shared projects and per-side participants for every department pair."""
    pairs: Dict[DepartmentPair, _PairAccumulator] = {}

    for project_id in snapshot.projects:
        members: Dict[int, Set[int]] = defaultdict(set)
        for assignment in snapshot.assignments_for_project(project_id, as_of):
            try:
                employee = snapshot.employee(assignment.employee_id)
                if employee.department_id is None:
                    continue
                snapshot.department(employee.department_id)
            except MissingEntityError as e:
                if exclusions is None:
                    raise
                exclusions.append(
                    Exclusion.from_error("assignment", assignment.assignment_id, e)
                )
                continue
            members[employee.department_id].add(employee.employee_id)

        for pair in combinations(sorted(members), 2):
            acc = pairs.setdefault(pair, _PairAccumulator())
            acc.project_ids.add(project_id)
            for department_id in pair:
                acc.participants[department_id] |= members[department_id]

    return pairs


def _pair_row(
    snapshot: Snapshot,
    as_of: date,
    pair: DepartmentPair,
    acc: _PairAccumulator,
    config: MetricsConfig,
) -> CollaborationMetrics:
    places = config.places
    dept_a, dept_b = (snapshot.department(d) for d in pair)
    side_a = acc.participants[pair[0]]
    side_b = acc.participants[pair[1]]
    projects = [snapshot.project(project_id) for project_id in sorted(acc.project_ids)]

    ratings = [
        summary.average_rating
        for summary in (
            performance_summary(snapshot, as_of, employee_id, places)
            for employee_id in sorted(side_a | side_b)
        )
        if not is_undefined(summary.average_rating)
    ]
    completed = sum(1 for project in projects if project.is_completed_at(as_of))

    return CollaborationMetrics(
        department_a_id=dept_a.department_id,
        department_a_name=dept_a.name,
        department_b_id=dept_b.department_id,
        department_b_name=dept_b.name,
        project_ids=[project.project_id for project in projects],
        project_count=len(projects),
        participants=len(side_a | side_b),
        participants_a=len(side_a),
        participants_b=len(side_b),
        combined_budget=round_money(sum((p.budget for p in projects), Decimal("0"))),
        average_performance=mean(ratings, places),
        completion_rate=percentage(completed, len(projects), places),
    )


def collaboration_between(
    snapshot: Snapshot,
    as_of: date,
    department_a: int,
    department_b: int,
    config: Optional[MetricsConfig] = None,
) -> Optional[CollaborationMetrics]:
    """Collaboration row for one pair, in either argument order.

    Returns None when the two departments share no project by ``as_of``.
    """
    pair = normalize_pair(department_a, department_b)
    snapshot.department(pair[0])
    snapshot.department(pair[1])
    acc = _collaboration_index(snapshot, as_of).get(pair)
    if acc is None:
        return None
    return _pair_row(snapshot, as_of, pair, acc, config or MetricsConfig())


def collaboration_report(
    snapshot: Snapshot,
    as_of: date,
    config: Optional[MetricsConfig] = None,
) -> ReportResult[CollaborationMetrics]:
    """Every department pair with at least one shared project, sorted by pair."""
    config = config or MetricsConfig()
    exclusions: List[Exclusion] = []
    index = _collaboration_index(snapshot, as_of, exclusions)

    rows: List[CollaborationMetrics] = []
    for pair in sorted(index):
        try:
            rows.append(_pair_row(snapshot, as_of, pair, index[pair], config))
        except MissingEntityError as e:
            exclusions.append(Exclusion.from_error("department_pair", None, e))

    logger.info(f"Collaboration report as of {as_of}: {len(rows)} department pairs")
    return ReportResult[CollaborationMetrics](
        report="collaboration", as_of=as_of, rows=rows, exclusions=exclusions
    )
