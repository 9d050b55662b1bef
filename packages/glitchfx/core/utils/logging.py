"""Logging setup for glitchfx.

Modules log through ``logging.getLogger(__name__)``. Code that logs on behalf
of one effect or chain uses ``get_logger(__name__, effect=...)`` so every
record carries that context; ``StructuredJSONFormatter`` then emits it as a
JSON field, one object per line.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Attributes every LogRecord has; anything else was attached as context
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
}


def record_context(record: logging.LogRecord) -> dict[str, Any]:
    """Context fields attached to ``record`` via ``extra`` or a LoggerAdapter."""
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    }


class StructuredJSONFormatter(logging.Formatter):
    """Render each record as a single-line JSON object.

    Example output:
        {"timestamp": "2026-10-17T09:30:00.120000+00:00", "level": "DEBUG",
         "logger": "glitchfx.core.composition.composer",
         "message": "Effect finished: completed",
         "source": "composer:_forget:81", "context": {"effect": "glitch"}}
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "source": f"{record.module}:{record.funcName}:{record.lineno}",
            "context": record_context(record),
        }
        if record.exc_info:
            exc_type, exc, _tb = record.exc_info
            entry["error"] = {
                "type": exc_type.__name__ if exc_type else None,
                "message": str(exc) if exc else None,
                "traceback": record.exc_text or self.formatException(record.exc_info),
            }
        return json.dumps(entry, default=str)


def _build_handler(filename: str | None) -> logging.Handler:
    if filename:
        return logging.FileHandler(filename)
    return logging.StreamHandler(sys.stdout)


def configure_logging(
    level: str = "INFO",
    format_string: str | None = None,
    filename: str | None = None,
    structured: bool = False,
) -> None:
    """Install a single root handler, replacing any earlier configuration.

    Args:
        level: Level name, case-insensitive (``"debug"``, ``"WARNING"``...).
        format_string: ``logging.Formatter`` format; ignored when structured.
        filename: Log file path; stdout when None.
        structured: Emit JSON lines via ``StructuredJSONFormatter``.

    Example:
        >>> configure_logging(level="DEBUG", structured=True, filename="effects.jsonl")
    """
    handler = _build_handler(filename)
    if structured:
        handler.setFormatter(StructuredJSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))

    logging.basicConfig(level=getattr(logging, level.upper()), handlers=[handler], force=True)

    # Event loop chatter drowns out per-frame effect logs at DEBUG
    logging.getLogger("asyncio").setLevel(logging.ERROR)


def get_logger(name: str, **context: Any) -> logging.Logger | logging.LoggerAdapter:
    """Return the logger for ``name``, bound to ``context`` if any is given.

    Example:
        >>> log = get_logger("glitchfx.core.composition.chain", chain="segfault")
        >>> log.extra
        {'chain': 'segfault'}
    """
    base = logging.getLogger(name)
    if context:
        return logging.LoggerAdapter(base, context)
    return base
