"""JSON-lines logging for the service and its tooling.

setup_logging() installs at most one handler and can be called again to change
the level once configuration is known.
"""
from __future__ import annotations

import json
import logging
import os
import sys
from datetime import UTC, datetime
from logging import Handler, LogRecord
from typing import Any

# Marks the handler installed here so repeat calls can find and retune it.
HANDLER_NAME = "token_gate.json"

# Attributes every LogRecord carries; anything else came in through `extra=`.
_RECORD_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
        "asctime",
    }
)

_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


class JsonFormatter(logging.Formatter):
    """Render each record as one JSON object.

    Core keys are ts/level/logger/message. Structured fields passed via
    ``logger.info("msg", extra={...})`` are merged in without clobbering the
    core keys.
    """

    def format(self, record: LogRecord) -> str:  # type: ignore[override]
        payload: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
        }

        if isinstance(record.msg, dict):
            payload.update(record.msg)
        else:
            payload["message"] = record.getMessage()

        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRS or key in payload:
                continue
            payload[key] = value

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        # default=str keeps odd extras (paths, enums) from breaking a log line
        return json.dumps(payload, ensure_ascii=False, default=str)


def _make_stream_handler(level: int) -> Handler:
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setLevel(level)
    handler.setFormatter(JsonFormatter())
    return handler


def resolve_level(level: str | int | None) -> int:
    """Map a level name such as "debug" to its numeric value (INFO if unknown).

    None means "whatever LOG_LEVEL says right now", so a value seeded from the
    settings file is seen as long as this runs after it was loaded.
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)


def setup_logging(level: str | int | None = None) -> None:
    """Install the JSON handler once and apply `level` on every call.

    main() calls this twice: first so startup errors are logged at all, then
    with Settings.log_level once the settings file has been read. Foreign
    root handlers (pytest's capture, an embedding app) are left alone.
    """
    numeric = resolve_level(level)
    root = logging.getLogger()
    root.setLevel(numeric)

    ours = [h for h in root.handlers if h.get_name() == HANDLER_NAME]
    for h in ours:
        h.setLevel(numeric)
    if not root.handlers:
        root.addHandler(_make_stream_handler(numeric))

    for name in _SERVER_LOGGERS:
        lg = logging.getLogger(name)
        lg.setLevel(numeric)
        lg.propagate = True
        for h in list(lg.handlers):
            lg.removeHandler(h)


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name if name else "token_gate")
