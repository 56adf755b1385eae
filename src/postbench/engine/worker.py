"""Sequential request loop run by each concurrent worker."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from postbench._internal.errors import TransportError
from postbench._internal.logging import get_logger

if TYPE_CHECKING:
    from postbench._internal.config import BenchConfig
    from postbench.metrics.stats import RunStatistics
    from postbench.transport.client import SharedClient

logger = get_logger("engine.worker")


async def run_worker(
    worker_id: int,
    config: BenchConfig,
    client: SharedClient,
    stats: RunStatistics,
) -> None:
    """Issue ``config.requests_per_worker`` POST requests one after another.

    A transport failure is counted, logged and skipped; it never stops
    the loop. Any other exception escapes and fails the worker.

    Args:
        worker_id: Index of this worker, used in diagnostics.
        config: Run configuration shared by every worker.
        client: Shared connection pool.
        stats: Shared run counters.
    """
    for i in range(config.requests_per_worker):
        start_ns = time.perf_counter_ns()
        try:
            status = await client.post(config.url, config.body)
        except TransportError as exc:
            stats.record_transport_error()
            logger.warning(
                "Worker %d: request %d failed: %s",
                worker_id,
                i,
                exc,
                extra={"worker_id": worker_id, "iteration": i},
            )
            continue

        stats.record_response(time.perf_counter_ns() - start_ns, status)

    logger.debug("Worker %d finished %d requests", worker_id, config.requests_per_worker)
