"""
Structured Logging — Review Context on Every Line

One logger tree under `grantcraft.`, configured through dictConfig.
Records carry review context (scheme, scores, signal id, request data)
as `extra` fields; only the names in REVIEW_FIELDS are emitted.

  json  one JSON object per line, context as top-level keys
  text  "<time> [LEVEL] logger: message | key=value ..." for terminals

Usage:
    from grantcraft.logging import get_logger
    logger = get_logger("aggregator")
    logger.info("Review complete", extra={"overall_score": 11.5, "scheme_id": "..."})
"""

from __future__ import annotations

import json
import logging
import logging.config
import os
from datetime import datetime, timezone


LOG_LEVEL = os.getenv("GRANTCRAFT_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("GRANTCRAFT_LOG_FORMAT", "json")  # "json" or "text"

ROOT_LOGGER = "grantcraft"

REVIEW_FIELDS = (
    # scoring
    "scheme_id", "overall_score", "overall_passed", "criterion_scores",
    "word_count", "section_count",
    # rubric configuration and signal failures
    "signal_id", "criterion", "weight_total",
    # requests
    "method", "path", "status_code", "duration_ms", "key_id",
    "error", "error_type",
)


def review_context(record: logging.LogRecord) -> dict:
    """The whitelisted extra fields present on a record, in REVIEW_FIELDS order."""
    return {
        key: getattr(record, key)
        for key in REVIEW_FIELDS
        if getattr(record, key, None) is not None
    }


class JSONFormatter(logging.Formatter):
    """Formats log records as JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **review_context(record),
        }
        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable format for terminals; context appended as key=value."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)-8s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = review_context(record)
        if not context:
            return line
        pairs = " ".join(f"{k}={v}" for k, v in context.items())
        # The exception block, if any, stays below the first line
        head, sep, tail = line.partition("\n")
        return f"{head} | {pairs}{sep}{tail}"


def setup_logging(fmt: str | None = None, level: str | None = None) -> logging.Logger:
    """Configure the grantcraft logger tree. Call once at app or CLI startup."""
    fmt = fmt or LOG_FORMAT
    level = (level or LOG_LEVEL).upper()

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": JSONFormatter},
            "text": {"()": TextFormatter},
        },
        "handlers": {
            # stderr keeps CLI report output on stdout clean
            "stderr": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stderr",
                "formatter": "json" if fmt == "json" else "text",
            },
        },
        "loggers": {
            ROOT_LOGGER: {"level": level, "handlers": ["stderr"]},
        },
    })

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return logging.getLogger(ROOT_LOGGER)


def get_logger(name: str) -> logging.Logger:
    """Get a named logger under the grantcraft namespace."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
