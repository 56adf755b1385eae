"""Custom exception hierarchy for postbench."""

from __future__ import annotations


class PostBenchError(Exception):
    """Base exception for all postbench errors.

    Every error raised deliberately by the benchmark inherits from this
    class, so callers can catch any postbench failure with a single
    except clause.
    """


class ConfigError(PostBenchError):
    """Raised when configuration is invalid or missing.

    Examples:
        - Concurrency is zero or negative.
        - An environment override is not a number.
    """


class SetupError(PostBenchError):
    """Raised when the run cannot start.

    Examples:
        - The request body file does not exist or cannot be read.
        - The shared HTTP client cannot be constructed.
    """


class TransportError(PostBenchError):
    """Raised when a single request produced no response.

    Connection refused, DNS failure and timeouts all end up here. Workers
    count these as errors and move on to the next iteration.
    """


class EngineError(PostBenchError):
    """Raised when a worker terminates abnormally and the run is void."""
