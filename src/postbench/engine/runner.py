"""Synchronous entry point that drives a run on its own event loop."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import TYPE_CHECKING

from postbench._internal.logging import get_logger, setup_logging
from postbench.engine.dispatcher import dispatch

if TYPE_CHECKING:
    from collections.abc import Callable

    from postbench._internal.config import BenchConfig
    from postbench.metrics.models import RunResult

logger = get_logger("engine.runner")


def _uvloop_factory() -> Callable[[], asyncio.AbstractEventLoop] | None:
    """Return uvloop's event loop factory if available.

    Returns None on Windows or if uvloop is not installed, which makes
    ``asyncio.run`` use the default event loop.
    """
    if sys.platform == "win32":
        return None

    try:
        import uvloop
    except ImportError:
        logger.debug("uvloop not available, using default asyncio event loop")
        return None

    logger.debug("Using uvloop event loop")
    return uvloop.new_event_loop


def run_benchmark(
    config: BenchConfig,
    *,
    log_level: int = logging.INFO,
    json_logs: bool = False,
) -> RunResult:
    """Run a benchmark to completion and return its result.

    Blocks until every worker has joined. There is no run-level timeout.

    Args:
        config: Run configuration.
        log_level: Logging level for the ``postbench`` namespace.
        json_logs: Emit structured JSON log lines.

    Returns:
        RunResult of the completed run.

    Raises:
        SetupError: If the shared client cannot be built.
        EngineError: If any worker terminated abnormally.
    """
    setup_logging(level=log_level, json_format=json_logs)
    return asyncio.run(dispatch(config), loop_factory=_uvloop_factory())
