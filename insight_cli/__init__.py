"""
Workforce Insight Engine CLI Package

A Rich-based CLI over insight_engine: snapshot store commands and one
command per metric report.
"""

from .main import app
from _version import __version__, get_full_version, get_version_dict

__all__ = ["app", "__version__", "get_full_version", "get_version_dict"]
