"""Human-readable classification of trend results."""

from __future__ import annotations

from enum import Enum

from weighttrend.tracking.models import TrendResult

STABLE_THRESHOLD = 0.1  # per week
LOW_CONFIDENCE_THRESHOLD = 0.7


class TrendDirection(str, Enum):
    """Direction of the weekly weight change."""

    STABLE = "stable"
    GAINING = "gaining"
    LOSING = "losing"


def classify_weekly_rate(weekly_rate: float, threshold: float = STABLE_THRESHOLD) -> TrendDirection:
    """Classify a weekly rate as stable, gaining or losing."""
    if abs(weekly_rate) < threshold:
        return TrendDirection.STABLE
    if weekly_rate > 0:
        return TrendDirection.GAINING
    return TrendDirection.LOSING


def confidence_level(confidence: float) -> str:
    """Bucket a confidence score into a label."""
    if confidence >= 0.8:
        return "High"
    if confidence >= 0.6:
        return "Medium"
    if confidence >= 0.4:
        return "Low"
    return "Very Low"


def trend_description(result: TrendResult, threshold: float = STABLE_THRESHOLD) -> str:
    """One-line summary such as 'Losing weight (low confidence)'."""
    direction = classify_weekly_rate(result.weekly_rate, threshold)
    if direction is TrendDirection.STABLE:
        text = "Maintaining weight"
    elif direction is TrendDirection.GAINING:
        text = "Gaining weight"
    else:
        text = "Losing weight"

    if result.confidence <= LOW_CONFIDENCE_THRESHOLD:
        text += " (low confidence)"
    return text


def format_weekly_change(weekly_rate: float, unit: str = "lbs") -> str:
    """Signed weekly change, e.g. '+0.25 lbs/week'."""
    return f"{weekly_rate:+.2f} {unit}/week"


def format_trend_report(
    result: TrendResult,
    unit: str = "lbs",
    threshold: float = STABLE_THRESHOLD,
) -> str:
    """Format a trend result as text."""
    lines = [
        f"Weight Trend ({result.sample_count} samples over {result.span_days:.0f} days)",
        "=" * 45,
        f"Current trend:  {result.current_weight:.1f} ± {result.weight_uncertainty:.1f} {unit}",
        f"Weekly change:  {format_weekly_change(result.weekly_rate, unit)}",
        f"Monthly change: {result.monthly_rate:+.1f} {unit}",
        f"Confidence:     {result.confidence:.0%} ({confidence_level(result.confidence)})",
        f"Summary:        {trend_description(result, threshold)}",
    ]
    return "\n".join(lines)
