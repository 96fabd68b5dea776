"""Logging helpers."""

from __future__ import annotations

import json
import logging
import sys
from typing import IO, Any

_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Render log records as one JSON object per line."""

    default_time_format = "%Y-%m-%dT%H:%M:%S"
    default_msec_format = "%s.%03dZ"

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        data.update(
            (key, value) for key, value in record.__dict__.items() if key not in _RECORD_ATTRS
        )
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False, default=str)


def _build_formatter(structured: bool) -> logging.Formatter:
    return JsonFormatter() if structured else logging.Formatter(_PLAIN_FORMAT)


def _coerce_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def configure_logging(
    *,
    level: int | str = logging.WARNING,
    structured: bool | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Configure the ``curlkit`` logger tree.

    Logs go to stderr by default so that response bodies written to stdout
    stay clean. Calling this again only swaps the formatter of the installed
    handler (when ``structured`` is given) and updates the level.
    """

    root = logging.getLogger("curlkit")
    root.setLevel(_coerce_level(level))

    if root.handlers:
        if structured is not None:
            for handler in root.handlers:
                handler.setFormatter(_build_formatter(structured))
        return

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(_build_formatter(bool(structured)))
    root.addHandler(handler)
    root.propagate = False


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "JsonFormatter"]
