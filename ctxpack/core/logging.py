"""
ctxpack.core.logging -- Log output for the CLI and the assembler.

The assembler reports each tier's accounting as ``extra`` fields on its
log records::

    log.debug("tier done", extra={"tier": "tasks", "tokens": 150,
                                  "cap": 3200, "remaining": 7650})

``StructuredFormatter`` lifts those fields into the JSON object, so a
``--json-logs`` run can be piped straight into ``jq``.
``KeyValueFormatter`` appends them as ``key=value`` pairs for humans.
"""

from __future__ import annotations

import json
import logging
from typing import IO, Any, Dict, Optional

# Attributes every LogRecord carries; anything else came in via ``extra``.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime"}

TEXT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def record_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """The ``extra`` fields attached to *record*, in insertion order."""
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    }


class StructuredFormatter(logging.Formatter):
    """Formats log records as single-line JSON objects.

    Fixed keys are ``ts``, ``level``, ``logger``, ``msg``, ``module``,
    ``func`` and ``line``, plus ``exception`` when a traceback is
    attached.  Extra fields follow; one that would shadow a fixed key
    is dropped.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S")
            + f".{int(record.msecs):03d}Z",
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "module": record.module,
            "func": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        for key, value in record_fields(record).items():
            entry.setdefault(key, value)

        return json.dumps(entry, default=str)


class KeyValueFormatter(logging.Formatter):
    """Plain text lines with extra fields appended as ``key=value``."""

    def __init__(self, fmt: str = TEXT_FORMAT) -> None:
        super().__init__(fmt)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = record_fields(record)
        if fields:
            line += " " + " ".join(f"{k}={v}" for k, v in fields.items())
        return line


def configure_logging(
    structured: bool = False,
    level: str = "INFO",
    logger_name: str = "ctxpack",
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """Send *logger_name* records to *stream* (stderr by default).

    Any handlers already on the logger are replaced and propagation is
    switched off, so calling this twice does not duplicate lines.
    Returns the configured logger.
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter() if structured else KeyValueFormatter())
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.propagate = False
    return logger
