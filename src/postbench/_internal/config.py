"""Benchmark configuration and request body loading."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from postbench._internal.errors import ConfigError, SetupError

DEFAULT_CONCURRENCY = 100
DEFAULT_REQUESTS_PER_WORKER = 1000
DEFAULT_POOL_SIZE = 100


def normalize_url(url: str) -> str:
    """Trim surrounding whitespace and lower-case the target URL."""
    return url.strip().lower()


@dataclass(frozen=True)
class BenchConfig:
    """Immutable settings for one benchmark run.

    Shared by reference between every worker. The URL is normalized on
    construction and all counts are validated.

    Attributes:
        url: Target URL for every POST request.
        body: Request body sent with every request.
        concurrency: Number of concurrent workers.
        requests_per_worker: Sequential requests issued by each worker.
        pool_size: Maximum connections kept per destination host.
        request_timeout: Per-request timeout in seconds, or None to wait
            indefinitely.
    """

    url: str
    body: bytes = field(default=b"", repr=False)
    concurrency: int = DEFAULT_CONCURRENCY
    requests_per_worker: int = DEFAULT_REQUESTS_PER_WORKER
    pool_size: int = DEFAULT_POOL_SIZE
    request_timeout: float | None = None

    def __post_init__(self) -> None:
        url = normalize_url(self.url)
        if not url:
            msg = "url must not be empty"
            raise ConfigError(msg)
        object.__setattr__(self, "url", url)
        object.__setattr__(self, "body", bytes(self.body))

        if self.concurrency < 1:
            msg = f"concurrency must be >= 1, got: {self.concurrency}"
            raise ConfigError(msg)
        if self.requests_per_worker < 0:
            msg = f"requests_per_worker must be >= 0, got: {self.requests_per_worker}"
            raise ConfigError(msg)
        if self.pool_size < 1:
            msg = f"pool_size must be >= 1, got: {self.pool_size}"
            raise ConfigError(msg)
        if self.request_timeout is not None and self.request_timeout <= 0:
            msg = f"request_timeout must be positive, got: {self.request_timeout}"
            raise ConfigError(msg)

    @property
    def total_requests(self) -> int:
        """Return the number of attempts the run will make."""
        return self.concurrency * self.requests_per_worker


@dataclass(frozen=True)
class BenchDefaults:
    """Default values for options not given on the command line."""

    concurrency: int = DEFAULT_CONCURRENCY
    requests_per_worker: int = DEFAULT_REQUESTS_PER_WORKER
    pool_size: int = DEFAULT_POOL_SIZE
    request_timeout: float | None = None


def _int_from_env(name: str, default: int, minimum: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        msg = f"{name} must be an integer, got: {raw!r}"
        raise ConfigError(msg) from None
    if value < minimum:
        msg = f"{name} must be >= {minimum}, got: {value}"
        raise ConfigError(msg)
    return value


def load_defaults() -> BenchDefaults:
    """Load option defaults from environment variables.

    Environment variables:
        POSTBENCH_CONCURRENCY: Worker count (default: 100).
        POSTBENCH_REQUESTS_PER_WORKER: Requests per worker (default: 1000).
        POSTBENCH_POOL_SIZE: Connections per host (default: 100).
        POSTBENCH_TIMEOUT: Per-request timeout in seconds (default: none).

    Returns:
        Populated BenchDefaults instance.

    Raises:
        ConfigError: If an environment variable has an invalid value.
    """
    timeout: float | None = None
    timeout_str = os.environ.get("POSTBENCH_TIMEOUT")
    if timeout_str is not None:
        try:
            timeout = float(timeout_str)
        except ValueError:
            msg = f"POSTBENCH_TIMEOUT must be a number, got: {timeout_str!r}"
            raise ConfigError(msg) from None
        if timeout <= 0:
            msg = f"POSTBENCH_TIMEOUT must be positive, got: {timeout}"
            raise ConfigError(msg)

    return BenchDefaults(
        concurrency=_int_from_env("POSTBENCH_CONCURRENCY", DEFAULT_CONCURRENCY, 1),
        requests_per_worker=_int_from_env(
            "POSTBENCH_REQUESTS_PER_WORKER", DEFAULT_REQUESTS_PER_WORKER, 0
        ),
        pool_size=_int_from_env("POSTBENCH_POOL_SIZE", DEFAULT_POOL_SIZE, 1),
        request_timeout=timeout,
    )


def load_body(path: str | Path) -> bytes:
    """Read the request body once, before the run starts.

    Args:
        path: File holding the raw request body.

    Returns:
        The file contents as bytes.

    Raises:
        SetupError: If the file cannot be read.
    """
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        msg = f"Failed to read body file {str(path)!r}: {exc}"
        raise SetupError(msg) from exc
