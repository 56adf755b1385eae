"""HDR histogram wrapper for latency percentiles.

Thin wrapper around ``hdrh.histogram.HdrHistogram``. Samples arrive in
nanoseconds and are stored as integer microseconds; percentiles come back
in milliseconds.
"""

from __future__ import annotations

from hdrh.histogram import HdrHistogram  # type: ignore[import-untyped]

# Range: 1 microsecond to 1 hour (in microseconds)
_LOWEST_TRACKABLE_US = 1
_HIGHEST_TRACKABLE_US = 3_600_000_000
_SIGNIFICANT_DIGITS = 3


class LatencyHistogram:
    """Latency distribution used for percentile reporting.

    Values outside the trackable range are clamped rather than dropped,
    so the recorded count always equals the number of samples.

    Attributes:
        lowest_us: Lowest trackable value in microseconds.
        highest_us: Highest trackable value in microseconds.
    """

    def __init__(
        self,
        lowest_us: int = _LOWEST_TRACKABLE_US,
        highest_us: int = _HIGHEST_TRACKABLE_US,
        significant_digits: int = _SIGNIFICANT_DIGITS,
    ) -> None:
        self.lowest_us = lowest_us
        self.highest_us = highest_us
        self._histogram: HdrHistogram = HdrHistogram(  # type: ignore[no-any-unimported]
            lowest_us, highest_us, significant_digits
        )

    def record_ns(self, latency_ns: int) -> bool:
        """Record a latency sample given in nanoseconds.

        Args:
            latency_ns: Latency in nanoseconds.

        Returns:
            True if the value was recorded.
        """
        value_us = latency_ns // 1000
        value_us = max(self.lowest_us, min(value_us, self.highest_us))
        return bool(self._histogram.record_value(value_us))

    def percentile_ms(self, percentile: float) -> float:
        """Get the value at a given percentile.

        Args:
            percentile: Percentile to compute (0.0 to 100.0).

        Returns:
            Latency in milliseconds, or 0.0 if the histogram is empty.
        """
        if self._histogram.total_count == 0:
            return 0.0
        value_us = self._histogram.get_value_at_percentile(percentile)
        return float(value_us) / 1000.0

    @property
    def total_count(self) -> int:
        """Return the number of recorded samples."""
        return int(self._histogram.total_count)

    def reset(self) -> None:
        """Clear all recorded values."""
        self._histogram.reset()
