"""
Export report rows through polars.

Frames are meant for analysis, so the ``UNDEFINED`` and ``NO_REVIEW_DATA``
markers become nulls there. The JSON export serializes the ``ReportResult``
itself and keeps the explicit ``"undefined"`` markers and the exclusions.
"""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Type, Union

import polars as pl
from pydantic import BaseModel

from ..metrics.models import ReportResult
from ..metrics.values import is_undefined

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("csv", "parquet", "json")


def _cell(value: Any) -> Any:
    if is_undefined(value):
        return None
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple, set)):
        return ", ".join(str(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, default=str, sort_keys=True)
    return value


def row_to_record(row: BaseModel) -> Dict[str, Any]:
    return {key: _cell(value) for key, value in row.model_dump().items()}


def rows_to_frame(
    rows: Sequence[BaseModel], row_type: Optional[Type[BaseModel]] = None
) -> pl.DataFrame:
    """Flatten report rows into a polars DataFrame.

    With no rows the frame is empty; ``row_type`` then supplies the column
    names.
    """
    if not rows:
        columns = list(row_type.model_fields) if row_type is not None else []
        return pl.DataFrame({name: [] for name in columns})
    records = [row_to_record(row) for row in rows]
    return pl.DataFrame(records, infer_schema_length=None)


def exclusions_to_frame(result: ReportResult) -> pl.DataFrame:
    return pl.DataFrame(
        [row_to_record(x) for x in result.exclusions]
        or {"entity_type": [], "entity_id": [], "reason": [], "detail": [], "scope": []}
    )


def _resolve_format(path: Path, fmt: Optional[str]) -> str:
    fmt = (fmt or path.suffix.lstrip(".")).lower()
    if fmt not in SUPPORTED_FORMATS:
        raise ValueError(
            f"Unsupported export format '{fmt}'; expected one of {', '.join(SUPPORTED_FORMATS)}"
        )
    return fmt


def write_report(
    result: ReportResult,
    path: Union[str, Path],
    fmt: Optional[str] = None,
) -> Path:
    """Write a report to csv, parquet or json (format from the suffix by default)."""
    path = Path(path)
    fmt = _resolve_format(path, fmt)
    path.parent.mkdir(parents=True, exist_ok=True)

    if fmt == "json":
        with open(path, "w") as fh:
            json.dump(result.model_dump(mode="json"), fh, indent=2)
    else:
        frame = rows_to_frame(result.rows)
        if fmt == "csv":
            frame.write_csv(path)
        else:
            frame.write_parquet(path)

    logger.info(
        f"Exported {result.report} ({len(result.rows)} rows) to {path} as {fmt}"
    )
    return path


def summarize_frame(frame: pl.DataFrame, columns: List[str]) -> Dict[str, Optional[float]]:
    """Mean of numeric columns, ignoring nulls from undefined values."""
    summary: Dict[str, Optional[float]] = {}
    for column in columns:
        if column not in frame.columns:
            continue
        value = frame.select(pl.col(column).cast(pl.Float64).mean()).item()
        summary[column] = round(value, 2) if value is not None else None
    return summary
