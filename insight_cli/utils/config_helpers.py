"""
Configuration helper utilities for the insight CLI

Functions to find the metrics config and snapshot store, and to parse
command line values.
"""

from __future__ import annotations

import os
from datetime import date
from pathlib import Path
from typing import Optional

import typer


def find_default_config() -> Optional[Path]:
    """Find the metrics configuration file, or None to use built-in defaults."""
    default_paths = [
        Path("config/metrics_config.yaml"),
        Path("metrics_config.yaml"),
    ]

    for config_path in default_paths:
        if config_path.exists():
            return config_path

    return None


def find_default_database() -> Path:
    """Find the default snapshot store."""
    env_path = os.getenv("INSIGHT_DATABASE_PATH")
    if env_path:
        return Path(env_path)

    default_paths = [
        Path("data/workforce.duckdb"),
        Path("workforce.duckdb"),
    ]

    for db_path in default_paths:
        if db_path.exists():
            return db_path

    # Return the standard location even if it doesn't exist
    return Path("data/workforce.duckdb")


def parse_as_of(value: Optional[str]) -> date:
    """
    Parse an ISO as-of date; today when omitted.

    Raises:
        typer.BadParameter: If the value is not YYYY-MM-DD
    """
    if not value:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Invalid date '{value}'. Use YYYY-MM-DD") from None


def default_log_dir() -> Path:
    return Path(os.getenv("INSIGHT_LOG_DIR", "logs"))
