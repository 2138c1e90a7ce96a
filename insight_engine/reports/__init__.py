"""Export of report rows (csv / parquet / json) via polars."""

from .export import (
    SUPPORTED_FORMATS,
    exclusions_to_frame,
    row_to_record,
    rows_to_frame,
    summarize_frame,
    write_report,
)

__all__ = [
    "SUPPORTED_FORMATS",
    "exclusions_to_frame",
    "row_to_record",
    "rows_to_frame",
    "summarize_frame",
    "write_report",
]
