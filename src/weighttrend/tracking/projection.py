"""Drive the Kalman filter over a sample history and project the trend.

Three operations:
- build_historical_series: one forward pass over the sorted samples
- project_future: straight-line extrapolation from the final state
- interpolate_for_display: extra points between samples for smoother charts

Only build_historical_series touches the filter. The other two are pure
functions of their inputs and never feed back into the numeric results.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

import numpy as np

from weighttrend.tracking.kalman import EstimatorState, WeightKalmanFilter
from weighttrend.tracking.models import SECONDS_PER_DAY, Sample, TrendPoint
from weighttrend.tracking.recency import (
    DEFAULT_NOISE_HIGH,
    DEFAULT_NOISE_LOW,
    DEFAULT_RECENCY_FACTOR,
    adjusted_measurement_noise,
    recency_weight,
)

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 30.0
DEFAULT_POINT_COUNT = 30
DEFAULT_POINTS_PER_GAP = 2


def sort_samples(samples: Iterable[Sample]) -> list[Sample]:
    """Return samples in ascending timestamp order (stable for ties)."""
    return sorted(samples, key=lambda s: s.timestamp)


def build_historical_series(
    samples: Iterable[Sample],
    kalman_filter: Optional[WeightKalmanFilter] = None,
    recency_factor: float = DEFAULT_RECENCY_FACTOR,
    noise_high: float = DEFAULT_NOISE_HIGH,
    noise_low: float = DEFAULT_NOISE_LOW,
) -> tuple[tuple[TrendPoint, ...], Optional[EstimatorState]]:
    """
    Run the filter across the full history.

    The first sample initializes the state and becomes the first point of
    the series without a correction step. Every later sample is one update()
    whose measurement noise comes from its recency within the history. The
    full state, covariance included, is carried from one step to the next.

    Args:
        samples: Weight samples in any order
        kalman_filter: Filter parameters (defaults if None)
        recency_factor: Exponent passed to recency_weight()
        noise_high: Measurement noise for the oldest sample
        noise_low: Measurement noise for the newest sample

    Returns:
        Tuple of (series, final_state). For an empty history the series is
        empty and final_state is None.
    """
    if kalman_filter is None:
        kalman_filter = WeightKalmanFilter()

    ordered = sort_samples(samples)
    if not ordered:
        return (), None

    first_ts = ordered[0].timestamp
    last_ts = ordered[-1].timestamp

    state = kalman_filter.new(ordered[0].weight)
    previous_ts = first_ts
    series = [TrendPoint(first_ts, state.filtered_weight)]

    for sample in ordered[1:]:
        delta_days = (sample.timestamp - previous_ts) / SECONDS_PER_DAY
        weight = recency_weight(sample.timestamp, first_ts, last_ts, recency_factor)
        noise = adjusted_measurement_noise(weight, noise_high, noise_low)

        state = kalman_filter.update(state, sample.weight, delta_days, noise)
        series.append(TrendPoint(sample.timestamp, state.filtered_weight))
        previous_ts = sample.timestamp

    logger.debug(
        "Filtered %d samples: weight=%.3f rate=%.4f/day",
        len(series),
        state.weight,
        state.rate,
    )
    return tuple(series), state


def project_future(
    state: EstimatorState,
    anchor_timestamp: int,
    window_days: float = DEFAULT_WINDOW_DAYS,
    point_count: int = DEFAULT_POINT_COUNT,
    start_timestamp: Optional[int] = None,
) -> tuple[TrendPoint, ...]:
    """
    Extrapolate the final estimate along a straight line.

    Args:
        state: Filter state at anchor_timestamp
        anchor_timestamp: Time the state refers to (last sample)
        window_days: Length of the projection window
        point_count: Number of evenly spaced points, endpoints included
        start_timestamp: Start of the window (defaults to anchor_timestamp)

    Returns:
        Points over [start, start + window_days]. Empty when point_count
        is zero or negative; just the start point when it is 1.
    """
    if point_count <= 0:
        return ()

    start = anchor_timestamp if start_timestamp is None else start_timestamp
    end = start + max(0.0, window_days) * SECONDS_PER_DAY

    timestamps = np.linspace(start, end, num=point_count)
    points = []
    for ts in timestamps:
        ts_int = int(round(float(ts)))
        days_ahead = (ts_int - anchor_timestamp) / SECONDS_PER_DAY
        points.append(TrendPoint(ts_int, state.predict_weight(days_ahead)))
    return tuple(points)


def interpolate_for_display(
    series: Sequence[TrendPoint],
    points_per_gap: int = DEFAULT_POINTS_PER_GAP,
) -> tuple[TrendPoint, ...]:
    """
    Insert linearly interpolated points between consecutive entries.

    Only for plotting: the input series is not modified and the result
    should never be used for numeric outputs.

    Args:
        series: Ascending trend points
        points_per_gap: Points to insert between each consecutive pair

    Returns:
        New series containing the originals plus the inserted points
    """
    if points_per_gap < 0:
        raise ValueError(f"points_per_gap must be non-negative, got {points_per_gap}")
    if len(series) < 2 or points_per_gap == 0:
        return tuple(series)

    divisions = points_per_gap + 1
    result: list[TrendPoint] = []
    for left, right in zip(series, series[1:]):
        result.append(left)
        dt = right.timestamp - left.timestamp
        dv = right.estimate - left.estimate
        for step in range(1, divisions):
            fraction = step / divisions
            result.append(
                TrendPoint(
                    left.timestamp + (dt * step) // divisions,
                    left.estimate + dv * fraction,
                )
            )
    result.append(series[-1])
    return tuple(result)
