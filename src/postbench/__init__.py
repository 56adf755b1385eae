"""postbench: concurrent POST load generator with latency statistics."""

from __future__ import annotations

from postbench._internal.config import BenchConfig, load_body
from postbench.engine.dispatcher import Dispatcher, dispatch
from postbench.engine.runner import run_benchmark
from postbench.metrics.models import RunResult
from postbench.metrics.stats import RunStatistics
from postbench.transport.client import SharedClient

__version__ = "0.1.0"

__all__ = [
    "BenchConfig",
    "Dispatcher",
    "RunResult",
    "RunStatistics",
    "SharedClient",
    "dispatch",
    "load_body",
    "run_benchmark",
]
