"""Result dataclasses for postbench."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

__all__ = [
    "RunResult",
    "StatsSnapshot",
]


@dataclass(frozen=True)
class StatsSnapshot:
    """Point-in-time copy of the shared run counters.

    Taken mid-run, fields may come from slightly different instants;
    taken after every worker joined, the snapshot is exact.

    Attributes:
        success_count: Responses with a 2xx status.
        error_count: Non-2xx responses plus transport failures.
        latency_samples: Responses that produced a latency measurement.
        total_latency_ns: Sum of every latency sample in nanoseconds.
        min_latency_ns: Smallest sample, or None before the first one.
        max_latency_ns: Largest sample, 0 before the first one.
    """

    success_count: int = 0
    error_count: int = 0
    latency_samples: int = 0
    total_latency_ns: int = 0
    min_latency_ns: int | None = None
    max_latency_ns: int = 0

    @property
    def total_requests(self) -> int:
        """Return the number of attempts counted so far."""
        return self.success_count + self.error_count


@dataclass(frozen=True)
class RunResult:
    """Derived statistics of a completed run, handed to reporting.

    Attributes:
        url: Normalized target URL.
        concurrency: Number of workers.
        requests_per_worker: Sequential requests per worker.
        total_requests: Attempts made (success + errors).
        success_count: Responses with a 2xx status.
        error_count: Non-2xx responses plus transport failures.
        latency_samples: Responses that produced a latency measurement.
        elapsed_seconds: Wall-clock time from spawning to joining workers.
        requests_per_second: Attempts divided by elapsed time.
        latency_avg: Mean latency over all samples in milliseconds.
        latency_min: Minimum latency in milliseconds, None without samples.
        latency_max: Maximum latency in milliseconds, None without samples.
        latency_p50: 50th percentile latency (ms).
        latency_p90: 90th percentile latency (ms).
        latency_p99: 99th percentile latency (ms).
    """

    url: str
    concurrency: int
    requests_per_worker: int
    total_requests: int
    success_count: int
    error_count: int
    latency_samples: int
    elapsed_seconds: float
    requests_per_second: float
    latency_avg: float
    latency_min: float | None
    latency_max: float | None
    latency_p50: float = 0.0
    latency_p90: float = 0.0
    latency_p99: float = 0.0

    @property
    def error_rate(self) -> float:
        """Return the fraction of attempts counted as errors."""
        if self.total_requests == 0:
            return 0.0
        return self.error_count / self.total_requests

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable mapping of the result."""
        data = asdict(self)
        data["error_rate"] = self.error_rate
        return data
