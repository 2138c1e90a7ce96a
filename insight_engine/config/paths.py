"""Path utilities for configuration management."""

from __future__ import annotations

import os
from pathlib import Path


def get_project_root() -> Path:
    """Get project root directory.

    Returns:
        Path: Absolute path to project root
    """
    # This file lives at insight_engine/config/paths.py
    return Path(__file__).resolve().parent.parent.parent


def get_database_path() -> Path:
    """Get the snapshot store path with environment variable support.

    - Uses INSIGHT_DATABASE_PATH if set
    - Defaults to 'data/workforce.duckdb'
    - Creates the parent directory if it doesn't exist

    Returns:
        Path: Absolute path to the DuckDB snapshot store
    """
    db_path = os.getenv("INSIGHT_DATABASE_PATH", "data/workforce.duckdb")
    path = Path(db_path)

    path.parent.mkdir(parents=True, exist_ok=True)

    return path.resolve()


def get_default_config_path() -> Path:
    """Path of the metrics configuration shipped with the repository."""
    return get_project_root() / "config" / "metrics_config.yaml"
