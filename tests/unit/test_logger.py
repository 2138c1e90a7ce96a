"""Unit tests for the run-scoped JSON logger."""

from __future__ import annotations

import json
import logging
import sys
from datetime import date

import pytest

from insight_engine.exceptions import NoSalaryRecordError
from insight_engine.logger import JSONFormatter, ProductionLogger, get_logger
from insight_engine.metrics import department_report


def _lines(logger: ProductionLogger):
    for handler in logger.logger.handlers:
        handler.flush()
    return [json.loads(line) for line in logger.log_file.read_text().splitlines()]


@pytest.fixture
def run_logger(tmp_path):
    logger = ProductionLogger(run_id="test-run", log_dir=tmp_path, console=False)
    yield logger
    logger.close()


class TestJSONFormatter:
    def test_basic_fields(self):
        record = logging.LogRecord("insight_engine.x", logging.INFO, __file__, 10, "hello", (), None)
        data = json.loads(JSONFormatter("r1").format(record))
        assert data["run_id"] == "r1"
        assert data["level"] == "INFO"
        assert data["logger"] == "insight_engine.x"
        assert data["message"] == "hello"

    def test_insight_error_serialized(self):
        try:
            raise NoSalaryRecordError(3, date(2025, 12, 31))
        except NoSalaryRecordError:
            record = logging.LogRecord(
                "insight", logging.ERROR, __file__, 10, "failed", (), sys.exc_info()
            )
        data = json.loads(JSONFormatter("r1").format(record))
        assert data["exception"]["type"] == "NoSalaryRecordError"
        assert data["error"]["error_type"] == "NoSalaryRecordError"
        assert data["error"]["context"]["as_of"] == "2025-12-31"


class TestProductionLogger:
    def test_generated_run_id(self, tmp_path):
        logger = get_logger(log_dir=tmp_path, console=False)
        try:
            assert len(logger.get_run_id()) > 8
        finally:
            logger.close()

    def test_structured_event(self, run_logger):
        run_logger.info("Report session opened", as_of=date(2025, 12, 31), rows=3)
        line = _lines(run_logger)[-1]
        assert line["run_id"] == "test-run"
        assert line["as_of"] == "2025-12-31"
        assert line["rows"] == 3

    def test_library_records_captured(self, run_logger):
        logging.getLogger("insight_engine.metrics.department").info("from the library")
        messages = [line["message"] for line in _lines(run_logger)]
        assert "from the library" in messages

    def test_log_report_warns_on_exclusions(self, run_logger, small_snapshot):
        result = department_report(small_snapshot, date(2025, 12, 31))
        run_logger.log_report(result)
        line = [entry for entry in _lines(run_logger) if entry.get("report")][-1]
        assert line["level"] == "WARNING"
        assert line["exclusions"] == 1
        assert line["exclusion_reasons"] == ["no_salary_record"]

    def test_close_detaches_library_handler(self, tmp_path):
        logger = ProductionLogger(run_id="closing", log_dir=tmp_path, console=False)
        handler = logger._library_handler
        logger.close()
        assert handler not in logging.getLogger("insight_engine").handlers
        assert logger.logger.handlers == []
