"""Command implementations for the insight CLI."""
