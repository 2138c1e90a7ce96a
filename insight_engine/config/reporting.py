"""Correlation thresholds and report defaults."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class TrainingRoiSettings(BaseModel):
    """Category thresholds on the average rating delta."""
    high_threshold: float = 0.5
    positive_threshold: float = 0.0
    completed_only: bool = False

    @model_validator(mode="after")
    def _check_order(self) -> "TrainingRoiSettings":
        if self.high_threshold < self.positive_threshold:
            raise ValueError(
                f"high_threshold {self.high_threshold} is below "
                f"positive_threshold {self.positive_threshold}"
            )
        return self


class ReportingSettings(BaseModel):
    """Defaults for the batch reports."""
    include_empty_departments: bool = False
    include_former_employees: bool = False
    min_projects_for_multi_assignment: int = Field(default=2, ge=1)
    leave_report_limit: int = Field(default=1, ge=1)
    decimal_places: int = Field(default=2, ge=0, le=6)
