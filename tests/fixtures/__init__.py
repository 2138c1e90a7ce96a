"""
Shared Test Fixtures for Workforce Insight Engine

This package contains reusable test fixtures organized by category:
- database.py: In-memory and on-disk snapshot store fixtures
- config.py: Metrics configuration fixtures
- snapshot_data.py: Entity builders and prebuilt snapshots
"""

from .database import (
    in_memory_db,
    populated_test_db,
    sample_db_path,
)
from .config import (
    default_config,
    strict_policy_config,
    config_file,
)
from .snapshot_data import (
    sample_as_of,
    sample_snapshot,
    small_snapshot,
)

__all__ = [
    # Database fixtures
    "in_memory_db",
    "populated_test_db",
    "sample_db_path",

    # Configuration fixtures
    "default_config",
    "strict_policy_config",
    "config_file",

    # Snapshot fixtures
    "sample_as_of",
    "sample_snapshot",
    "small_snapshot",
]
