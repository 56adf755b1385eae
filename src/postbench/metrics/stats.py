"""Shared run counters updated by every worker.

``RunStatistics`` is the only mutable state shared between workers.
Each public method is a single lock-guarded operation, so concurrent
updates never lose increments. There is no transaction across methods:
a snapshot taken mid-run may mix values from different instants.
"""

from __future__ import annotations

import threading

from postbench.metrics.histogram import LatencyHistogram
from postbench.metrics.models import RunResult, StatsSnapshot

_NS_PER_MS = 1_000_000


def is_success(status_code: int) -> bool:
    """Return True for a 2xx status code."""
    return 200 <= status_code < 300


class RunStatistics:
    """Aggregated counters for one benchmark run.

    Latency is recorded for every response, whatever its status, and
    never for transport failures. The average is taken over the number
    of latency samples, not over the success count.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._success_count = 0
        self._error_count = 0
        self._latency_samples = 0
        self._total_latency_ns = 0
        self._min_latency_ns: int | None = None
        self._max_latency_ns = 0
        self._histogram = LatencyHistogram()

    def record_response(self, latency_ns: int, status_code: int) -> None:
        """Record a received response.

        Adds the latency sample to the total, the extrema and the
        histogram, then classifies the status as success or error.

        Args:
            latency_ns: Time from sending the request to the full
                response, in nanoseconds.
            status_code: HTTP status code of the response.
        """
        with self._lock:
            self._latency_samples += 1
            self._total_latency_ns += latency_ns
            if self._min_latency_ns is None or latency_ns < self._min_latency_ns:
                self._min_latency_ns = latency_ns
            if latency_ns > self._max_latency_ns:
                self._max_latency_ns = latency_ns
            self._histogram.record_ns(latency_ns)

            if is_success(status_code):
                self._success_count += 1
            else:
                self._error_count += 1

    def record_transport_error(self) -> None:
        """Record a request that produced no response.

        No latency sample is taken.
        """
        with self._lock:
            self._error_count += 1

    def snapshot(self) -> StatsSnapshot:
        """Return a copy of the current counter values."""
        with self._lock:
            return StatsSnapshot(
                success_count=self._success_count,
                error_count=self._error_count,
                latency_samples=self._latency_samples,
                total_latency_ns=self._total_latency_ns,
                min_latency_ns=self._min_latency_ns,
                max_latency_ns=self._max_latency_ns,
            )

    def summarize(
        self,
        elapsed_seconds: float,
        *,
        url: str,
        concurrency: int,
        requests_per_worker: int,
    ) -> RunResult:
        """Derive the run result once every worker has joined.

        Args:
            elapsed_seconds: Wall-clock time from spawn to join.
            url: Target URL of the run.
            concurrency: Number of workers.
            requests_per_worker: Requests issued per worker.

        Returns:
            Frozen RunResult with throughput and latency in milliseconds.
        """
        snap = self.snapshot()
        with self._lock:
            p50 = self._histogram.percentile_ms(50.0)
            p90 = self._histogram.percentile_ms(90.0)
            p99 = self._histogram.percentile_ms(99.0)

        total = snap.total_requests
        rps = total / elapsed_seconds if elapsed_seconds > 0 else 0.0
        avg_ns = snap.total_latency_ns / max(1, snap.latency_samples)

        if snap.latency_samples == 0:
            latency_min: float | None = None
            latency_max: float | None = None
        else:
            latency_min = (snap.min_latency_ns or 0) / _NS_PER_MS
            latency_max = snap.max_latency_ns / _NS_PER_MS

        return RunResult(
            url=url,
            concurrency=concurrency,
            requests_per_worker=requests_per_worker,
            total_requests=total,
            success_count=snap.success_count,
            error_count=snap.error_count,
            latency_samples=snap.latency_samples,
            elapsed_seconds=elapsed_seconds,
            requests_per_second=rps,
            latency_avg=avg_ns / _NS_PER_MS,
            latency_min=latency_min,
            latency_max=latency_max,
            latency_p50=p50,
            latency_p90=p90,
            latency_p99=p99,
        )
