"""Logging for postbench runs.

Every module logs through a child of the ``postbench`` logger. Worker
diagnostics attach ``worker_id`` and ``iteration`` through ``extra=`` so
JSON output can be filtered per worker without parsing messages.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime

ROOT_LOGGER = "postbench"

# Per-request context fields copied into JSON output when present
CONTEXT_FIELDS = ("worker_id", "iteration")

_TEXT_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s"
_TEXT_DATEFMT = "%Y-%m-%d %H:%M:%S"


class JsonLineFormatter(logging.Formatter):
    """Render each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def _make_formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return JsonLineFormatter()
    return logging.Formatter(_TEXT_FORMAT, datefmt=_TEXT_DATEFMT)


def setup_logging(
    level: int = logging.INFO,
    *,
    json_format: bool = False,
) -> logging.Logger:
    """Configure the ``postbench`` logger for a run.

    The first call installs a stderr handler. Later calls reuse it and
    only change the level and the output format, so a process running
    several benchmarks never duplicates log lines.

    Args:
        level: Logging level, e.g. ``logging.DEBUG`` for ``--verbose``.
        json_format: Emit JSON lines instead of plain text.

    Returns:
        The ``postbench`` logger.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)

    handler = next(
        (h for h in logger.handlers if type(h) is logging.StreamHandler),
        None,
    )
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        logger.addHandler(handler)

    handler.setLevel(level)
    handler.setFormatter(_make_formatter(json_format))

    # Run output goes to our handler only
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return ``postbench.<name>``, e.g. ``get_logger("engine.worker")``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
