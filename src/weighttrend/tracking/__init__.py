"""Weight trend estimation module.

This module turns irregularly spaced, noisy weight samples into a smoothed
current weight, a rate of change, a forward projection and a confidence
score.

Key components:
- Two-state Kalman filter over [weight, rate] with explicit covariance
- Recency-weighted measurement noise (newer samples trusted more)
- Confidence score from sample count and time span
- Historical pass, linear projection and chart interpolation
"""

from __future__ import annotations

from weighttrend.tracking.analysis import analyze_weight_trend
from weighttrend.tracking.classify import TrendDirection, classify_weekly_rate
from weighttrend.tracking.kalman import EstimatorState, WeightKalmanFilter
from weighttrend.tracking.models import (
    InvalidSampleError,
    Sample,
    SampleFileError,
    TrendPoint,
    TrendResult,
    WeightTrendError,
)

__all__ = [
    "EstimatorState",
    "InvalidSampleError",
    "Sample",
    "SampleFileError",
    "TrendDirection",
    "TrendPoint",
    "TrendResult",
    "WeightKalmanFilter",
    "WeightTrendError",
    "analyze_weight_trend",
    "classify_weekly_rate",
]
