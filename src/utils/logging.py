"""
Structured logging for grammar-cache.

Every line on stdout is one JSON object:

  {"ts":"...","level":"INFO","module":"engine","action":"decide_done",
   "msg":"Decision made","source":"cache","latency_ms":3}

Sentences are logged as-is (ensure_ascii=False), so Hangul stays readable.
LOG_FORMAT=pretty switches to a one-line human format for local runs.

USAGE
=====
from src.utils.logging import log, get_logger

MODULE = "store"
logger = get_logger()

log.info(logger, MODULE, "load_done", "Learned records loaded", records=42)
log.error(logger, MODULE, "load_failed", "Could not load learned records",
          error=str(e), error_type=type(e).__name__)

ACTION NAMING
=============
  *_start     → beginning of an operation
  *_done      → successful completion
  *_failed    → error/failure
  *_skipped   → intentionally skipped
  *_fallback  → falling back to alternative path
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from functools import partialmethod
from typing import Optional

SERVICE_LOGGER = "grammar-cache.service"

# Libraries that are too chatty below WARNING
QUIET_LOGGERS = (
    "langchain",
    "langchain_core",
    "langchain_openai",
    "openai",
    "httpx",
    "httpcore",
    "sqlalchemy",
    "asyncio",
)

_BASE_KEYS = ("ts", "level", "module", "action", "msg")


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


class StructuredFormatter(logging.Formatter):
    """One JSON object per record (or one pretty line)."""

    def __init__(self, pretty: bool = False):
        super().__init__()
        self.pretty = pretty

    def format(self, record: logging.LogRecord) -> str:
        fields = getattr(record, "fields", None)
        data = {
            "ts": _timestamp(),
            "level": record.levelname,
            "module": getattr(record, "module_name", "lib"),
            "action": getattr(record, "action", record.name),
            "msg": record.getMessage(),
        }
        if fields:
            data.update(fields)

        if self.pretty:
            return self._pretty(data)
        return json.dumps(data, default=str, ensure_ascii=False, separators=(",", ":"))

    def _pretty(self, data: dict) -> str:
        ts = data["ts"][11:23]  # HH:MM:SS.mmm
        mod = data["module"].upper()[:10].ljust(10)
        ctx = " ".join(f"{k}={v}" for k, v in data.items() if k not in _BASE_KEYS)
        line = f"{ts} {data['level'][0]} [{mod}] {data['action']}: {data['msg']}"
        return line + (f" | {ctx}" if ctx else "")


class StructuredLogger:
    """log.<level>(logger, module, action, msg, **fields)

    Fields whose value is None are dropped.
    """

    def _log(
        self,
        level: int,
        logger: logging.Logger,
        module: str,
        action: str,
        msg: str,
        **kwargs,
    ) -> None:
        if not logger.isEnabledFor(level):
            return
        extra = {
            "module_name": module,
            "action": action,
            "fields": {k: v for k, v in kwargs.items() if v is not None},
        }
        logger.log(level, msg, extra=extra)

    debug = partialmethod(_log, logging.DEBUG)
    info = partialmethod(_log, logging.INFO)
    warning = partialmethod(_log, logging.WARNING)

    def error(
        self,
        logger: logging.Logger,
        module: str,
        action: str,
        msg: str,
        error: Optional[str] = None,
        error_type: Optional[str] = None,
        **kwargs,
    ) -> None:
        self._log(logging.ERROR, logger, module, action, msg,
                  error=error, error_type=error_type, **kwargs)


log = StructuredLogger()


def get_logger() -> logging.Logger:
    """The shared service logger."""
    return logging.getLogger(SERVICE_LOGGER)


def configure_logging() -> None:
    """Send every log record to stdout through StructuredFormatter.

    Call once at startup. Reads LOG_FORMAT ("json" or "pretty") and
    LOG_LEVEL (default INFO).
    """
    pretty = os.environ.get("LOG_FORMAT", "json") == "pretty"
    level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter(pretty=pretty))
    logging.basicConfig(level=level, handlers=[handler], force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
