"""Unit tests for metrics configuration loading and validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from insight_engine.config import (
    ClassificationSettings,
    MetricsConfig,
    OverallScoreWeights,
    TrainingRoiSettings,
    _apply_env_overrides,
    get_default_config_path,
    load_metrics_config,
)
from insight_engine.exceptions import InvalidConfigurationError


class TestDefaults:
    def test_shipped_file_matches_defaults(self):
        loaded = load_metrics_config(get_default_config_path(), env_overrides=False)
        assert loaded.model_dump() == MetricsConfig().model_dump()

    def test_default_weights_sum_to_one(self, default_config):
        assert sum(default_config.scoring.overall_weights.as_dict().values()) == pytest.approx(1.0)
        assert sum(default_config.scoring.manager_weights.as_dict().values()) == pytest.approx(1.0)

    def test_places(self, default_config):
        assert default_config.places == 2


class TestValidation:
    def test_weights_must_sum_to_one(self):
        with pytest.raises(ValidationError, match="must sum to 1.0"):
            OverallScoreWeights(performance=0.5)

    def test_thresholds_ordered(self):
        with pytest.raises(ValidationError):
            TrainingRoiSettings(high_threshold=0.1, positive_threshold=0.5)

    def test_duplicate_classification_labels(self):
        with pytest.raises(ValidationError):
            ClassificationSettings(
                rules=[
                    {"label": "Good", "min_rating": 4.0},
                    {"label": "Good", "min_rating": 3.0},
                ]
            )

    def test_unknown_policy_rejected(self):
        with pytest.raises(ValidationError):
            MetricsConfig(scoring={"undefined_component_policy": "zero"})


class TestLoading:
    def test_load_file(self, config_file):
        config = load_metrics_config(config_file, env_overrides=False)
        assert config.scoring.normalization.team_size_target == 8
        assert config.training_roi.high_threshold == 1.0
        assert config.reporting.leave_report_limit == 3
        assert config.places == 1
        # untouched sections keep their defaults
        assert config.scoring.overall_weights.as_dict() == OverallScoreWeights().as_dict()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_metrics_config(tmp_path / "nope.yaml")

    def test_non_mapping_yaml(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(InvalidConfigurationError):
            load_metrics_config(path, env_overrides=False)

    def test_invalid_values_wrapped(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("scoring:\n  overall_weights:\n    performance: 0.9\n")
        with pytest.raises(InvalidConfigurationError) as exc_info:
            load_metrics_config(path, env_overrides=False)
        assert "config_path" in exc_info.value.message
        assert exc_info.value.resolution_hints


class TestEnvOverrides:
    def test_nested_override(self, config_file):
        config = load_metrics_config(
            config_file,
            env={"INSIGHT_SCORING__NORMALIZATION__TEAM_SIZE_TARGET": "12"},
        )
        assert config.scoring.normalization.team_size_target == 12

    def test_type_coercion(self):
        cfg = {}
        _apply_env_overrides(
            cfg,
            {
                "INSIGHT_REPORTING__INCLUDE_EMPTY_DEPARTMENTS": "true",
                "INSIGHT_TRAINING_ROI__HIGH_THRESHOLD": "0.75",
                "INSIGHT_SCORING__UNDEFINED_COMPONENT_POLICY": "undefined",
            },
            "INSIGHT_",
        )
        assert cfg["reporting"]["include_empty_departments"] is True
        assert cfg["training_roi"]["high_threshold"] == 0.75
        assert cfg["scoring"]["undefined_component_policy"] == "undefined"

    def test_plain_variables_ignored(self):
        cfg = {}
        _apply_env_overrides(cfg, {"INSIGHT_DATABASE_PATH": "/tmp/x.duckdb"}, "INSIGHT_")
        assert cfg == {}

    def test_process_environment(self, monkeypatch):
        monkeypatch.setenv("INSIGHT_REPORTING__LEAVE_REPORT_LIMIT", "4")
        assert load_metrics_config().reporting.leave_report_limit == 4
