"""Data models for weight trend estimation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional

SECONDS_PER_DAY = 86400.0

# Average weeks per month, used for the monthly change figure
WEEKS_PER_MONTH = 4.33


# Custom exceptions


class WeightTrendError(Exception):
    """Base exception for weighttrend errors."""

    pass


class InvalidSampleError(WeightTrendError, ValueError):
    """Raised when a weight sample cannot be used by the estimator."""

    pass


class SampleFileError(WeightTrendError):
    """Raised when a sample file is missing or malformed."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


@dataclass(frozen=True)
class Sample:
    """A single weight measurement.

    The weight must already be in the caller's canonical unit; the estimator
    never converts units.
    """

    timestamp: int  # seconds since epoch
    weight: float

    def __post_init__(self) -> None:
        if isinstance(self.timestamp, bool) or not isinstance(self.timestamp, int):
            raise InvalidSampleError(
                f"timestamp must be an integer number of seconds, got {self.timestamp!r}"
            )
        if not math.isfinite(self.weight):
            raise InvalidSampleError(f"weight must be finite, got {self.weight!r}")


@dataclass(frozen=True)
class TrendPoint:
    """One (timestamp, estimate) pair in a trend series."""

    timestamp: int
    estimate: float

    def to_dict(self) -> dict[str, Any]:
        return {"timestamp": self.timestamp, "estimate": self.estimate}


@dataclass(frozen=True)
class TrendResult:
    """Outcome of a trend analysis over a full sample history.

    Attributes:
        current_weight: Filtered weight at the most recent sample
        daily_rate: Estimated rate of change (unit/day)
        weekly_rate: daily_rate × 7
        confidence: Trust score in [0, 1]
        historical_series: Filtered estimate at every sample, ascending
        future_series: Linear projection from the final state
        weight_uncertainty: sqrt of the weight variance
        rate_uncertainty: sqrt of the rate variance (unit/day)
        sample_count: Number of samples analyzed
        span_days: Days between first and last sample
    """

    current_weight: float
    daily_rate: float
    weekly_rate: float
    confidence: float
    historical_series: tuple[TrendPoint, ...]
    future_series: tuple[TrendPoint, ...]
    weight_uncertainty: float = 0.0
    rate_uncertainty: float = 0.0
    sample_count: int = 0
    span_days: float = 0.0

    @property
    def monthly_rate(self) -> float:
        """Estimated change over an average month."""
        return self.weekly_rate * WEEKS_PER_MONTH

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dictionary."""
        return {
            "current_weight": self.current_weight,
            "daily_rate": self.daily_rate,
            "weekly_rate": self.weekly_rate,
            "monthly_rate": self.monthly_rate,
            "confidence": self.confidence,
            "weight_uncertainty": self.weight_uncertainty,
            "rate_uncertainty": self.rate_uncertainty,
            "sample_count": self.sample_count,
            "span_days": self.span_days,
            "historical_series": [p.to_dict() for p in self.historical_series],
            "future_series": [p.to_dict() for p in self.future_series],
        }
