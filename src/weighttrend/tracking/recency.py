"""Recency weighting for per-sample measurement noise.

Newer samples are trusted more: their effective measurement noise is pulled
toward a low value, while the oldest sample in the history gets the high
value. Older context still anchors the long-run trend, but the estimate
responds faster to recent changes.

    normalized_age = (last - t) / (last - first)
    weight         = (1 - normalized_age) ^ factor
    noise          = noise_high × (1 - weight) + noise_low × weight
"""

from __future__ import annotations

DEFAULT_RECENCY_FACTOR = 0.7
DEFAULT_NOISE_HIGH = 0.5
DEFAULT_NOISE_LOW = 0.1


def recency_weight(
    sample_timestamp: int,
    first_timestamp: int,
    last_timestamp: int,
    recency_factor: float = DEFAULT_RECENCY_FACTOR,
) -> float:
    """
    Weight in [0, 1] describing how recent a sample is within the history.

    Args:
        sample_timestamp: Timestamp of the sample (seconds)
        first_timestamp: Earliest timestamp in the history
        last_timestamp: Latest timestamp in the history
        recency_factor: Exponent in [0, 1]. 0 treats every sample as fully
            recent; 1 makes the weight fall off linearly with age.

    Returns:
        1.0 for the newest sample (or when all samples share one timestamp),
        falling to 0.0 for the oldest.

    Example:
        >>> recency_weight(50, 0, 100, 1.0)
        0.5
    """
    if not 0.0 <= recency_factor <= 1.0:
        raise ValueError(f"recency_factor must be in [0, 1], got {recency_factor}")

    span = last_timestamp - first_timestamp
    if span == 0:
        return 1.0

    normalized_age = (last_timestamp - sample_timestamp) / span
    base = min(1.0, max(0.0, 1.0 - normalized_age))
    return base**recency_factor


def adjusted_measurement_noise(
    weight: float,
    noise_high: float = DEFAULT_NOISE_HIGH,
    noise_low: float = DEFAULT_NOISE_LOW,
) -> float:
    """
    Blend between high and low measurement noise by recency weight.

    Args:
        weight: Recency weight from recency_weight()
        noise_high: Noise for the oldest sample
        noise_low: Noise for the newest sample

    Returns:
        Effective measurement variance for the sample
    """
    return noise_high * (1.0 - weight) + noise_low * weight
