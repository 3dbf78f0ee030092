"""Assemble a TrendResult from a full sample history.

This is the entry point for callers: hand it every sample you have, get back
the filtered weight, rates, confidence and series. Nothing is cached between
calls; each call rebuilds the estimate from scratch.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Optional

from weighttrend.tracking.confidence import confidence_score, sample_variance
from weighttrend.tracking.models import SECONDS_PER_DAY, Sample, TrendResult
from weighttrend.tracking.projection import (
    build_historical_series,
    project_future,
    sort_samples,
)

if TYPE_CHECKING:
    from weighttrend.config.settings import Settings

logger = logging.getLogger(__name__)


def analyze_weight_trend(
    samples: Iterable[Sample],
    settings: Optional[Settings] = None,
    now: Optional[int] = None,
) -> Optional[TrendResult]:
    """
    Estimate the weight trend over a sample history.

    Args:
        samples: Weight samples in one unit, in any order
        settings: Filter, recency, confidence and projection parameters
            (defaults if None)
        now: Timestamp (seconds) where the future series starts. Defaults
            to the last sample, which keeps the result a pure function of
            the samples.

    Returns:
        TrendResult, or None when there are no samples
    """
    if settings is None:
        from weighttrend.config.settings import Settings

        settings = Settings()

    ordered = sort_samples(samples)
    series, state = build_historical_series(
        ordered,
        kalman_filter=settings.filter.build(),
        recency_factor=settings.recency.factor,
        noise_high=settings.recency.noise_high,
        noise_low=settings.recency.noise_low,
    )
    if state is None:
        logger.debug("No samples supplied; insufficient data for a trend")
        return None

    first_ts = ordered[0].timestamp
    last_ts = ordered[-1].timestamp
    span_days = (last_ts - first_ts) / SECONDS_PER_DAY

    variance = None
    if settings.confidence.use_consistency:
        variance = sample_variance([s.weight for s in ordered])

    confidence = confidence_score(
        sample_count=len(ordered),
        span_days=span_days,
        reference_count=settings.confidence.reference_count,
        reference_span_days=settings.confidence.reference_span_days,
        variance=variance,
        variance_normalizer=settings.confidence.variance_normalizer,
    )

    future = project_future(
        state,
        anchor_timestamp=last_ts,
        window_days=settings.projection.window_days,
        point_count=settings.projection.point_count,
        start_timestamp=now,
    )

    logger.debug(
        "Trend over %d samples / %.1f days: weekly=%.3f confidence=%.2f",
        len(ordered),
        span_days,
        state.weekly_rate,
        confidence,
    )

    return TrendResult(
        current_weight=state.filtered_weight,
        daily_rate=state.weight_rate_per_day,
        weekly_rate=state.weekly_rate,
        confidence=confidence,
        historical_series=series,
        future_series=future,
        weight_uncertainty=state.weight_uncertainty,
        rate_uncertainty=state.rate_uncertainty,
        sample_count=len(ordered),
        span_days=span_days,
    )
