"""
Pytest Configuration for Workforce Insight Engine Testing
=========================================================

Root conftest.py - shared fixtures live in tests/fixtures/.
"""

import gc
import os
import warnings

import pytest

# Import shared fixtures
from tests.fixtures import *


def pytest_configure(config):
    """Configure pytest with custom markers."""
    # Markers are defined in pyproject.toml
    pass


def pytest_collection_modifyitems(config, items):
    """Automatically add markers based on test location."""
    for item in items:
        # Add markers based on test file paths
        if "/unit/" in item.nodeid:
            item.add_marker(pytest.mark.unit)
            item.add_marker(pytest.mark.fast)  # Unit tests are fast by default
        elif "/integration/" in item.nodeid:
            item.add_marker(pytest.mark.integration)
            item.add_marker(pytest.mark.slow)

        # Add feature area markers
        if "cli" in item.nodeid.lower():
            item.add_marker(pytest.mark.cli)
        if "config" in item.nodeid.lower():
            item.add_marker(pytest.mark.config)

        # Add database marker for tests requiring the DuckDB store
        if "store" in item.nodeid or "database" in item.nodeid:
            item.add_marker(pytest.mark.database)


def pytest_runtest_setup(item):
    """Setup for each test run."""
    warnings.filterwarnings("ignore", category=DeprecationWarning)
    warnings.filterwarnings("ignore", category=FutureWarning)


def pytest_runtest_teardown(item):
    """Teardown after each test run."""
    gc.collect()


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch, tmp_path):
    """Keep INSIGHT_* overrides from the developer shell out of tests."""
    for key in list(os.environ):
        if key.startswith("INSIGHT_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("INSIGHT_LOG_DIR", str(tmp_path / "logs"))
