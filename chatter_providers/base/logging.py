"""Structured logging utilities for the chatter provider layer.

Rationale:
- One place configures the shared ``chatter`` logger (JSON to stderr).
- Adapters and the service emit single-line JSON events through
  :func:`log_event` / :func:`normalized_log_event` instead of free-form text.

Environment:
    CHATTER_LOG_LEVEL   Level name for the shared logger (default ``INFO``).

The normalized schema guarantees ``structured``, ``phase``, ``attempt``,
``error_code``, ``emitted`` and ``tokens`` keys on every event (``None``
when not applicable), so downstream filters work across adapters.
Credentials are never passed to these helpers.
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Mapping, Optional

from .log_support import JsonFormatter, LogContext

ROOT_LOGGER_NAME = "chatter"
_CONSOLE_HANDLER_ATTR = "_chatter_console_handler"
_FILE_HANDLER_ATTR = "_chatter_file_handler"
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def _parse_level(value: str | None, default: int = logging.INFO) -> int:
    """Parse a level name case-insensitively; unknown names yield ``default``."""
    if not value:
        return default
    resolved = logging.getLevelName(value.strip().upper())
    return resolved if isinstance(resolved, int) else default


def _formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(_PLAIN_FORMAT)


def _ensure_root_logger(json_mode: bool) -> logging.Logger:
    """Attach the managed stderr handler to the shared logger once."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    level = _parse_level(os.getenv("CHATTER_LOG_LEVEL"))
    logger.setLevel(level)
    managed = [h for h in logger.handlers if getattr(h, _CONSOLE_HANDLER_ATTR, False)]
    if not managed:
        handler = logging.StreamHandler(sys.stderr)
        setattr(handler, _CONSOLE_HANDLER_ATTR, True)
        logger.addHandler(handler)
        managed = [handler]
        logger.propagate = False
    for handler in managed:
        handler.setLevel(level)
        handler.setFormatter(_formatter(json_mode))
    return logger


def get_logger(name: str = ROOT_LOGGER_NAME, json_mode: bool = True) -> logging.Logger:
    """Return the shared logger or one of its children (``chatter.*``).

    Child loggers propagate to the shared logger and carry no handlers of
    their own, so every event is written exactly once.
    """
    root = _ensure_root_logger(json_mode)
    if name == ROOT_LOGGER_NAME:
        return root
    if not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logger(
    *,
    level: int | str | None = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Reconfigure the shared logger at runtime.

    ``level`` accepts numeric levels or names. When ``file_path`` is given a
    rotating file handler (10MB x 5) is attached or re-pointed; ``None``
    removes any managed file handler.
    """
    logger = _ensure_root_logger(json_mode)
    if level is not None:
        logger.setLevel(_parse_level(level, logger.level) if isinstance(level, str) else level)
        for h in logger.handlers:
            h.setLevel(logger.level)

    abs_path = os.path.abspath(os.path.expanduser(file_path)) if file_path else None
    for h in [h for h in logger.handlers if getattr(h, _FILE_HANDLER_ATTR, False)]:
        if abs_path is not None and getattr(h, "baseFilename", None) == abs_path:
            h.setFormatter(_formatter(json_mode))
            h.setLevel(logger.level)
            return logger
        logger.removeHandler(h)
        with contextlib.suppress(OSError):
            h.close()
    if abs_path is None:
        return logger

    os.makedirs(os.path.dirname(abs_path), exist_ok=True)
    fh = RotatingFileHandler(abs_path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8")
    setattr(fh, _FILE_HANDLER_ATTR, True)
    fh.setLevel(logger.level)
    fh.setFormatter(_formatter(json_mode))
    logger.addHandler(fh)
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Emit a single-line JSON payload ``{"event": ..., **ctx, **fields}``.

    ``None`` values are dropped unless ``keep_none`` is set.
    """
    payload: Dict[str, Any] = {"event": event}
    if ctx:
        payload |= ctx.to_dict()
    if keep_none:
        payload.update(fields)
    else:
        payload.update({k: v for k, v in fields.items() if v is not None})
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


REQUIRED_NORMALIZED_KEYS = (
    "structured",
    "phase",
    "attempt",
    "error_code",
    "emitted",
    "tokens",
)


def _coerce_tokens(tokens: Any) -> Any:
    if tokens is None:
        return None
    if isinstance(tokens, Mapping):
        return dict(tokens.items())
    return {"value": repr(tokens)}


def normalized_log_event(  # noqa: PLR0913
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    phase: str,
    attempt: int | None = None,
    error_code: str | None = None,
    emitted: bool | None = None,
    tokens: Any = None,
    level: int = logging.INFO,
    **extra_fields: Any,
) -> None:
    """Emit an event carrying the normalized key set.

    ``extra_fields`` never overwrite the normalized values; ``None`` extras
    are dropped.
    """
    base_fields: Dict[str, Any] = {
        "structured": True,
        "phase": phase,
        "attempt": attempt,
        "error_code": error_code,
        "emitted": emitted,
        "tokens": _coerce_tokens(tokens),
    }
    for k, v in extra_fields.items():
        if v is None or k in base_fields:
            continue
        base_fields[k] = v
    log_event(logger, event, ctx, level=level, keep_none=True, **base_fields)


__all__ = [
    "LogContext",
    "ROOT_LOGGER_NAME",
    "get_logger",
    "configure_logger",
    "log_event",
    "normalized_log_event",
    "REQUIRED_NORMALIZED_KEYS",
]
