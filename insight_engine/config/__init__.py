"""Configuration module for Workforce Insight Engine.

Submodules:
    - paths: Project root, database and default config paths
    - scoring: Score weights, normalization caps, classification rules
    - reporting: Training ROI thresholds and report defaults
    - loader: MetricsConfig and config loading
"""

from .paths import (
    get_project_root,
    get_database_path,
    get_default_config_path,
)

from .scoring import (
    OverallScoreWeights,
    ManagerEffectivenessWeights,
    NormalizationSettings,
    ClassificationRule,
    ClassificationSettings,
    ScoringSettings,
)

from .reporting import (
    TrainingRoiSettings,
    ReportingSettings,
)

from .loader import (
    MetricsConfig,
    load_metrics_config,
    _apply_env_overrides,
    _lower_keys,
)

__all__ = [
    "get_project_root",
    "get_database_path",
    "get_default_config_path",
    "OverallScoreWeights",
    "ManagerEffectivenessWeights",
    "NormalizationSettings",
    "ClassificationRule",
    "ClassificationSettings",
    "ScoringSettings",
    "TrainingRoiSettings",
    "ReportingSettings",
    "MetricsConfig",
    "load_metrics_config",
    "_apply_env_overrides",
    "_lower_keys",
]
