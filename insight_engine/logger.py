"""
Structured JSON Logging for Workforce Insight Engine

Report runs are correlated by run id: the JSON file log carries the run id on
every line, including lines emitted by the ``insight_engine`` library
loggers while the run is open.
"""

import json
import logging
import sys
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional, Union

LIBRARY_LOGGER = "insight_engine"


def _json_default(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return str(value)


class JSONFormatter(logging.Formatter):
    """Custom formatter that outputs structured JSON logs"""

    def __init__(self, run_id: str):
        super().__init__()
        self.run_id = run_id

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON"""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "run_id": self.run_id,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            exc_info = (
                record.exc_info if isinstance(record.exc_info, tuple) else sys.exc_info()
            )
            if exc_info and exc_info[0] is not None:
                log_data["exception"] = {
                    "type": exc_info[0].__name__,
                    "message": str(exc_info[1]) if exc_info[1] else None,
                    "traceback": self.formatException(exc_info),
                }
                to_dict = getattr(exc_info[1], "to_dict", None)
                if callable(to_dict):
                    log_data["error"] = to_dict()

        if hasattr(record, "extra_data"):
            log_data.update(record.extra_data)

        return json.dumps(log_data, ensure_ascii=False, default=_json_default)


class ProductionLogger:
    """
    Run-scoped logger: JSON lines to a rotating file, readable text to the
    console.

    Args:
        run_id: Identifier for this run. Generated if not provided.
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory of ``insight.log``
        console: Also log to stderr
        capture_library: Route ``insight_engine.*`` records to the file log
    """

    def __init__(
        self,
        run_id: Optional[str] = None,
        log_level: str = "INFO",
        log_dir: Union[str, Path] = "logs",
        console: bool = True,
        capture_library: bool = True,
    ):
        self.run_id = run_id or self._generate_run_id()
        self.log_level = getattr(logging, log_level.upper())
        self.log_dir = Path(log_dir)
        self.log_file = self.log_dir / "insight.log"
        self._library_handler: Optional[logging.Handler] = None
        self._setup_logging(console, capture_library)

    def _generate_run_id(self) -> str:
        """Generate unique run ID with timestamp and UUID"""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        unique_suffix = str(uuid.uuid4())[:8]
        return f"{timestamp}-{unique_suffix}"

    def _setup_logging(self, console: bool, capture_library: bool) -> None:
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.logger = logging.getLogger(f"insight.{self.run_id}")
        self.logger.setLevel(self.log_level)

        # Prevent duplicate handlers if logger already exists
        if self.logger.handlers:
            return

        # JSON file handler with rotation (10MB, keep 10 files)
        json_handler = RotatingFileHandler(
            self.log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=10,
        )
        json_handler.setFormatter(JSONFormatter(self.run_id))
        json_handler.setLevel(self.log_level)
        self.logger.addHandler(json_handler)

        if console:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s [%(levelname)s] [%(name)s] %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
            console_handler.setLevel(self.log_level)
            self.logger.addHandler(console_handler)

        self.logger.propagate = False

        if capture_library:
            library = logging.getLogger(LIBRARY_LOGGER)
            library.setLevel(min(library.level or logging.WARNING, self.log_level))
            library.addHandler(json_handler)
            self._library_handler = json_handler

    def log_event(self, level: str, message: str, **kwargs) -> None:
        """
        Log structured event with additional context

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            message: Human-readable log message
            **kwargs: Additional structured data to include in JSON
        """
        record = self.logger.makeRecord(
            name=self.logger.name,
            level=getattr(logging, level.upper()),
            fn="",
            lno=0,
            msg=message,
            args=(),
            exc_info=None,
        )
        record.extra_data = kwargs
        self.logger.handle(record)

    def debug(self, message: str, **kwargs) -> None:
        self.log_event("DEBUG", message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        self.log_event("INFO", message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self.log_event("WARNING", message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        self.log_event("ERROR", message, **kwargs)

    def exception(self, message: str, **kwargs) -> None:
        """Log exception with traceback"""
        record = self.logger.makeRecord(
            name=self.logger.name,
            level=logging.ERROR,
            fn="",
            lno=0,
            msg=message,
            args=(),
            exc_info=sys.exc_info(),
        )
        record.extra_data = kwargs
        self.logger.handle(record)

    def log_report(self, result: Any, **kwargs) -> None:
        """Record the size of a computed ``ReportResult``."""
        level = "WARNING" if result.exclusions else "INFO"
        self.log_event(
            level,
            f"Report {result.report} computed",
            report=result.report,
            as_of=result.as_of,
            rows=len(result.rows),
            exclusions=len(result.exclusions),
            exclusion_reasons=sorted({x.reason.value for x in result.exclusions}),
            **kwargs,
        )

    def get_run_id(self) -> str:
        return self.run_id

    def close(self) -> None:
        """Close all handlers and detach from the library logger"""
        if self._library_handler is not None:
            logging.getLogger(LIBRARY_LOGGER).removeHandler(self._library_handler)
            self._library_handler = None
        for handler in self.logger.handlers[:]:
            handler.close()
            self.logger.removeHandler(handler)

    def __enter__(self) -> "ProductionLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def get_logger(
    run_id: Optional[str] = None,
    log_level: str = "INFO",
    log_dir: Union[str, Path] = "logs",
    console: bool = True,
) -> ProductionLogger:
    """
    Factory function to get a configured production logger

    Args:
        run_id: Optional run ID. Generated if not provided.
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for the rotating JSON log

    Returns:
        Configured ProductionLogger instance
    """
    return ProductionLogger(run_id=run_id, log_level=log_level, log_dir=log_dir, console=console)
