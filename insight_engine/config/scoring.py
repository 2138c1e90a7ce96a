"""Scoring weights, normalization constants and classification rules."""

from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

_WEIGHT_TOLERANCE = 1e-6


class _WeightGroup(BaseModel):
    """Weights of one composite score; must sum to 1."""

    @model_validator(mode="after")
    def _check_sum(self):
        total = sum(self.as_dict().values())
        if abs(total - 1.0) > _WEIGHT_TOLERANCE:
            raise ValueError(
                f"{type(self).__name__} must sum to 1.0, got {round(total, 6)}"
            )
        return self

    def as_dict(self) -> dict:
        return self.model_dump()


class OverallScoreWeights(_WeightGroup):
    """Weights of the per-employee overall score."""
    performance: float = Field(default=0.30, ge=0, le=1)
    training: float = Field(default=0.20, ge=0, le=1)
    projects: float = Field(default=0.20, ge=0, le=1)
    salary: float = Field(default=0.15, ge=0, le=1)
    tenure: float = Field(default=0.15, ge=0, le=1)


class ManagerEffectivenessWeights(_WeightGroup):
    """Weights of the manager effectiveness score."""
    performance: float = Field(default=0.40, ge=0, le=1)
    project_completion: float = Field(default=0.30, ge=0, le=1)
    training: float = Field(default=0.20, ge=0, le=1)
    team_size: float = Field(default=0.10, ge=0, le=1)


class NormalizationSettings(BaseModel):
    """Caps that map raw values onto 0-100 sub-scores."""
    rating_scale_max: float = Field(default=5.0, gt=0)
    training_target: int = Field(default=5, gt=0)
    salary_growth_cap_pct: float = Field(default=50.0, gt=0)
    tenure_cap_years: float = Field(default=10.0, gt=0)
    team_size_target: int = Field(default=5, gt=0)


class ClassificationRule(BaseModel):
    """One performance band; matches when both thresholds are met."""
    label: str
    min_rating: float = Field(ge=0, le=5)
    min_trainings: int = Field(default=0, ge=0)

    def matches(self, rating: float, trainings: int) -> bool:
        return rating >= self.min_rating and trainings >= self.min_trainings


def _default_rules() -> List[ClassificationRule]:
    return [
        ClassificationRule(label="Top Performer", min_rating=4.5, min_trainings=3),
        ClassificationRule(label="High Performer", min_rating=4.0, min_trainings=2),
        ClassificationRule(label="Solid Performer", min_rating=3.5),
        ClassificationRule(label="Meets Expectations", min_rating=3.0),
    ]


class ClassificationSettings(BaseModel):
    """Ordered rules, evaluated top down; first match wins."""
    rules: List[ClassificationRule] = Field(default_factory=_default_rules)
    fallback_label: str = "Needs Improvement"
    unrated_label: str = "Not Rated"

    @field_validator("rules")
    @classmethod
    def _check_rules(cls, rules: List[ClassificationRule]) -> List[ClassificationRule]:
        labels = [rule.label for rule in rules]
        if len(labels) != len(set(labels)):
            raise ValueError(f"Duplicate classification labels: {labels}")
        return rules


class ScoringSettings(BaseModel):
    """Composite score configuration."""
    overall_weights: OverallScoreWeights = Field(default_factory=OverallScoreWeights)
    manager_weights: ManagerEffectivenessWeights = Field(default_factory=ManagerEffectivenessWeights)
    normalization: NormalizationSettings = Field(default_factory=NormalizationSettings)
    classification: ClassificationSettings = Field(default_factory=ClassificationSettings)
    undefined_component_policy: Literal["renormalize", "undefined"] = "renormalize"
