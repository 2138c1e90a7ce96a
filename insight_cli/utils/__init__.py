"""Utility helpers for the insight CLI."""
