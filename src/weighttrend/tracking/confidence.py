"""Confidence scoring for trend estimates.

Confidence grows with the number of samples and with the time they cover,
each normalized against a reference value and capped at 1. An optional
consistency term penalizes high weight variance.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

DEFAULT_REFERENCE_COUNT = 30
DEFAULT_REFERENCE_SPAN_DAYS = 90.0
DEFAULT_VARIANCE_NORMALIZER = 100.0


def confidence_score(
    sample_count: int,
    span_days: float,
    reference_count: int = DEFAULT_REFERENCE_COUNT,
    reference_span_days: float = DEFAULT_REFERENCE_SPAN_DAYS,
    variance: Optional[float] = None,
    variance_normalizer: float = DEFAULT_VARIANCE_NORMALIZER,
) -> float:
    """
    Score how much to trust a trend estimate.

    Args:
        sample_count: Number of samples analyzed
        span_days: Days between the first and last sample
        reference_count: Sample count that earns a full data-point score
        reference_span_days: Span that earns a full time-span score
        variance: Weight variance; when given, a consistency score
            max(0, 1 - variance / variance_normalizer) is averaged in
        variance_normalizer: Variance at which consistency reaches 0

    Returns:
        Confidence in [0, 1]. Always 0 for one sample or fewer.
    """
    if sample_count <= 1:
        return 0.0
    if reference_count <= 0 or reference_span_days <= 0:
        raise ValueError("reference_count and reference_span_days must be positive")

    data_point_score = min(1.0, sample_count / reference_count)
    time_span_score = min(1.0, max(0.0, span_days) / reference_span_days)

    if variance is None:
        score = (data_point_score + time_span_score) / 2.0
    else:
        if variance_normalizer <= 0:
            raise ValueError("variance_normalizer must be positive")
        consistency_score = max(0.0, 1.0 - variance / variance_normalizer)
        score = (data_point_score + time_span_score + consistency_score) / 3.0

    return min(1.0, max(0.0, score))


def sample_variance(weights: Sequence[float]) -> float:
    """Population variance of raw weights (0 for an empty sequence)."""
    if len(weights) == 0:
        return 0.0
    return float(np.var(np.asarray(weights, dtype=float)))
