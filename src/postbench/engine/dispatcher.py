"""Spawns the concurrent workers of a run and joins them."""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING

from postbench._internal.errors import EngineError
from postbench._internal.logging import get_logger
from postbench.engine.worker import run_worker
from postbench.metrics.stats import RunStatistics
from postbench.transport.client import SharedClient

if TYPE_CHECKING:
    from postbench._internal.config import BenchConfig
    from postbench.metrics.models import RunResult

logger = get_logger("engine.dispatcher")


class Dispatcher:
    """Runs ``concurrency`` workers over one shared client to completion.

    Workers live inside an ``asyncio.TaskGroup`` owned by ``run()``, so
    none of them outlives the call. A worker that raises cancels its
    siblings and turns the whole run into an ``EngineError``.

    Attributes:
        config: Run configuration.
        stats: Shared counters updated by every worker.
    """

    def __init__(
        self,
        config: BenchConfig,
        client: SharedClient,
        stats: RunStatistics | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            config: Run configuration shared by every worker.
            client: Open shared client. The dispatcher borrows it and
                does not close it.
            stats: Counters to update. A fresh instance is created when
                omitted.
        """
        self.config = config
        self.stats = stats if stats is not None else RunStatistics()
        self._client = client

    async def run(self) -> RunResult:
        """Execute every worker and return the derived statistics.

        Returns:
            RunResult computed after the last worker joined.

        Raises:
            EngineError: If any worker terminated abnormally.
        """
        config = self.config
        logger.info(
            "Starting run: url=%s, concurrency=%d, requests_per_worker=%d",
            config.url,
            config.concurrency,
            config.requests_per_worker,
        )

        start = time.perf_counter()
        try:
            async with asyncio.TaskGroup() as group:
                for worker_id in range(config.concurrency):
                    group.create_task(
                        run_worker(worker_id, config, self._client, self.stats),
                        name=f"postbench-worker-{worker_id}",
                    )
        except ExceptionGroup as eg:
            logger.error(
                "Run aborted: %d worker(s) failed",
                len(eg.exceptions),
                exc_info=eg.exceptions[0],
            )
            msg = f"Worker failed: {eg.exceptions[0]!r}"
            raise EngineError(msg) from eg
        elapsed = time.perf_counter() - start

        result = self.stats.summarize(
            elapsed,
            url=config.url,
            concurrency=config.concurrency,
            requests_per_worker=config.requests_per_worker,
        )
        logger.info(
            "Run completed: elapsed=%.3fs, total=%d, success=%d, errors=%d, rps=%.1f",
            result.elapsed_seconds,
            result.total_requests,
            result.success_count,
            result.error_count,
            result.requests_per_second,
        )
        return result


async def dispatch(config: BenchConfig) -> RunResult:
    """Open a shared client for ``config`` and run a Dispatcher over it.

    Args:
        config: Run configuration.

    Returns:
        RunResult of the completed run.

    Raises:
        SetupError: If the client cannot be built.
        EngineError: If any worker terminated abnormally.
    """
    async with SharedClient(
        pool_size=config.pool_size,
        timeout=config.request_timeout,
    ) as client:
        return await Dispatcher(config, client).run()
