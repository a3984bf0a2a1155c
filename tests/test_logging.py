"""Tests for the structured log format."""

import json
import logging

from src.utils.logging import StructuredFormatter, log


class _Capture(logging.Handler):
    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records = []

    def emit(self, record):
        self.records.append(record)


def _capture():
    logger = logging.getLogger("grammar-cache.test")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    handler = _Capture()
    logger.handlers = [handler]
    return logger, handler


def test_json_line_keeps_hangul_and_drops_none_fields():
    logger, handler = _capture()
    log.info(logger, "engine", "decide_done", "Decision made",
             sentence="안녕하세요", source="cache", record_id=None)

    line = StructuredFormatter().format(handler.records[0])

    assert "안녕하세요" in line
    data = json.loads(line)
    assert data["module"] == "engine"
    assert data["action"] == "decide_done"
    assert data["msg"] == "Decision made"
    assert data["source"] == "cache"
    assert "record_id" not in data


def test_error_carries_error_fields():
    logger, handler = _capture()
    log.error(logger, "store", "load_failed", "Could not load learned records",
              error="connection refused", error_type="StoreUnavailable")

    data = json.loads(StructuredFormatter().format(handler.records[0]))
    assert data["level"] == "ERROR"
    assert data["error"] == "connection refused"
    assert data["error_type"] == "StoreUnavailable"


def test_pretty_format():
    logger, handler = _capture()
    log.warning(logger, "oracle", "oracle_timeout", "Oracle did not answer in time",
                timeout=8.0)

    line = StructuredFormatter(pretty=True).format(handler.records[0])
    assert "W [ORACLE    ] oracle_timeout: Oracle did not answer in time | timeout=8.0" in line


def test_plain_library_records_are_wrapped():
    record = logging.LogRecord("uvicorn.error", logging.INFO, __file__, 1,
                               "Started server process", None, None)
    data = json.loads(StructuredFormatter().format(record))
    assert data["module"] == "lib"
    assert data["action"] == "uvicorn.error"
    assert data["msg"] == "Started server process"
