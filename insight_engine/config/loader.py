"""Configuration loading and the MetricsConfig model."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..exceptions import InvalidConfigurationError
from .reporting import ReportingSettings, TrainingRoiSettings
from .scoring import ScoringSettings

logger = logging.getLogger(__name__)


class MetricsConfig(BaseModel):
    """Top-level config; extra keys are allowed and ignored by the engine."""

    model_config = ConfigDict(extra="allow")

    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    training_roi: TrainingRoiSettings = Field(default_factory=TrainingRoiSettings)
    reporting: ReportingSettings = Field(default_factory=ReportingSettings)

    @property
    def places(self) -> int:
        return self.reporting.decimal_places


def _lower_keys(d: Dict[str, Any]) -> Dict[str, Any]:
    """Normalize dictionary keys to lowercase."""
    return {k.lower(): v for k, v in d.items()}


def _apply_env_overrides(cfg: Dict[str, Any], env: Dict[str, str], prefix: str) -> None:
    """Apply simple env overrides using DOUBLE-UNDERSCORE path syntax.

    Example: INSIGHT_SCORING__NORMALIZATION__TEAM_SIZE_TARGET=8 overrides
    scoring.normalization.team_size_target
    """
    plen = len(prefix)
    for key, value in env.items():
        if not key.startswith(prefix) or "__" not in key[plen:]:
            continue
        path = key[plen:].lower().split("__")
        cur: Any = cfg
        for part in path[:-1]:
            if part not in cur or not isinstance(cur[part], dict):
                cur[part] = {}
            cur = cur[part]
        # Basic type coercion for ints/bools/floats
        leaf = path[-1]
        if value.lower() in {"true", "false"}:
            cur[leaf] = value.lower() == "true"
        else:
            try:
                if "." in value:
                    cur[leaf] = float(value)
                else:
                    cur[leaf] = int(value)
            except ValueError:
                cur[leaf] = value


def load_metrics_config(
    path: Optional[Union[Path, str]] = None,
    *,
    env_overrides: bool = True,
    env: Optional[Dict[str, str]] = None,
    env_prefix: str = "INSIGHT_",
) -> MetricsConfig:
    """Load YAML config and return a typed `MetricsConfig`.

    - ``path=None`` starts from the built-in defaults
    - Optionally applies environment variable overrides
    """
    data: Dict[str, Any] = {}
    if path is not None:
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(f"Config file not found: {p}")
        with open(p, "r") as fh:
            raw = yaml.safe_load(fh) or {}
        if not isinstance(raw, dict):
            raise InvalidConfigurationError(
                "Metrics configuration must be a mapping", config_path=str(p)
            )
        data = _lower_keys(raw)

    if env_overrides:
        _apply_env_overrides(data, env if env is not None else dict(os.environ), env_prefix)

    try:
        config = MetricsConfig(**data)
    except ValidationError as e:
        raise InvalidConfigurationError(
            f"Invalid metrics configuration: {e}",
            config_path=str(path) if path is not None else None,
            original_exception=e,
        ) from e

    logger.debug(f"Metrics configuration loaded from {path or 'defaults'}")
    return config
