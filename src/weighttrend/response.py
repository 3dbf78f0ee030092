"""JSON envelopes for ``--json`` command output.

Every command prints the same top-level shape (success, command, data,
errors, warnings, suggestions, human_summary). The builders here turn trend
results and settings into that shape so the CLI only decides what to print.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional, Sequence

from weighttrend.tracking.classify import (
    STABLE_THRESHOLD,
    classify_weekly_rate,
    confidence_level,
    format_weekly_change,
    trend_description,
)
from weighttrend.tracking.models import TrendPoint, TrendResult

if TYPE_CHECKING:
    from weighttrend.config.settings import Settings


@dataclass
class CommandResponse:
    """Outcome of one CLI command.

    ``data`` is None when a command succeeded but had nothing to report,
    e.g. an analysis over an empty sample file.
    """

    success: bool
    command: str
    data: Optional[dict[str, Any]] = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    human_summary: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "command": self.command,
            "data": self.data,
            "errors": self.errors,
            "warnings": self.warnings,
            "suggestions": self.suggestions,
            "human_summary": self.human_summary,
            "generated_at": datetime.now().isoformat(),
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


def analysis_response(
    result: Optional[TrendResult],
    display_series: Sequence[TrendPoint] = (),
    skipped_rows: int = 0,
    unit: str = "lbs",
    threshold: float = STABLE_THRESHOLD,
) -> CommandResponse:
    """
    Build the ``analyze`` envelope.

    Args:
        result: Trend result, or None when there were no usable samples
        display_series: Interpolated series for charting
        skipped_rows: Rows the loader dropped as missing or invalid
        unit: Unit label for the summary line
        threshold: Weekly rate below which the trend is "stable"

    Returns:
        CommandResponse whose data is the result plus direction,
        confidence label and display series (None without a result)
    """
    warnings = []
    if skipped_rows:
        warnings.append(f"Skipped {skipped_rows} unusable rows")

    if result is None:
        warnings.append("Insufficient data")
        return CommandResponse(
            success=True,
            command="analyze",
            warnings=warnings,
            suggestions=["Add at least one weight sample to the file"],
            human_summary="No weight samples found",
        )

    data = result.to_dict()
    data["unit"] = unit
    data["direction"] = classify_weekly_rate(result.weekly_rate, threshold).value
    data["confidence_level"] = confidence_level(result.confidence)
    data["display_series"] = [p.to_dict() for p in display_series]

    return CommandResponse(
        success=True,
        command="analyze",
        data=data,
        warnings=warnings,
        human_summary=(
            f"{trend_description(result, threshold)}: "
            f"{format_weekly_change(result.weekly_rate, unit)}"
        ),
    )


def settings_response(settings: Settings) -> CommandResponse:
    """Build the ``config show`` envelope."""
    return CommandResponse(
        success=True,
        command="config show",
        data=settings.to_dict(),
        human_summary=(
            f"Q=diag({settings.filter.process_noise_weight}, "
            f"{settings.filter.process_noise_rate}), unit {settings.display.unit}"
        ),
    )


def error_response(
    command: str,
    error: str,
    suggestions: Optional[list[str]] = None,
) -> CommandResponse:
    """Create a failed response carrying one error message."""
    return CommandResponse(
        success=False,
        command=command,
        errors=[error],
        suggestions=suggestions or [],
        human_summary=f"Error: {error}",
    )
