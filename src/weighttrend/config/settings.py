"""Application settings and configuration management."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from weighttrend.tracking.confidence import (
    DEFAULT_REFERENCE_COUNT,
    DEFAULT_REFERENCE_SPAN_DAYS,
    DEFAULT_VARIANCE_NORMALIZER,
)
from weighttrend.tracking.kalman import (
    DEFAULT_INITIAL_RATE_VARIANCE,
    DEFAULT_INITIAL_WEIGHT_VARIANCE,
    DEFAULT_PROCESS_NOISE_RATE,
    DEFAULT_PROCESS_NOISE_WEIGHT,
    WeightKalmanFilter,
)
from weighttrend.tracking.projection import (
    DEFAULT_POINT_COUNT,
    DEFAULT_POINTS_PER_GAP,
    DEFAULT_WINDOW_DAYS,
)
from weighttrend.tracking.recency import (
    DEFAULT_NOISE_HIGH,
    DEFAULT_NOISE_LOW,
    DEFAULT_RECENCY_FACTOR,
)


OUTPUT_FORMATS = ("table", "json")


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".weighttrend"


def default_config_path() -> Path:
    """Return the default config file path."""
    return _default_config_dir() / "config.yaml"


@dataclass
class FilterConfig:
    """Kalman filter noise parameters."""

    process_noise_weight: float = DEFAULT_PROCESS_NOISE_WEIGHT
    process_noise_rate: float = DEFAULT_PROCESS_NOISE_RATE
    initial_weight_variance: float = DEFAULT_INITIAL_WEIGHT_VARIANCE
    initial_rate_variance: float = DEFAULT_INITIAL_RATE_VARIANCE

    def __post_init__(self) -> None:
        for name, value in asdict(self).items():
            if not math.isfinite(value) or value < 0:
                raise ValueError(
                    f"filter.{name} must be a finite non-negative number, got {value}"
                )

    def build(self) -> WeightKalmanFilter:
        """Create a filter from these parameters."""
        return WeightKalmanFilter(
            process_noise_weight=self.process_noise_weight,
            process_noise_rate=self.process_noise_rate,
            initial_weight_variance=self.initial_weight_variance,
            initial_rate_variance=self.initial_rate_variance,
        )


@dataclass
class RecencyConfig:
    """Recency-weighted measurement noise."""

    factor: float = DEFAULT_RECENCY_FACTOR
    noise_high: float = DEFAULT_NOISE_HIGH
    noise_low: float = DEFAULT_NOISE_LOW

    def __post_init__(self) -> None:
        if not 0.0 <= self.factor <= 1.0:
            raise ValueError(f"recency factor must be in [0, 1], got {self.factor}")
        if self.noise_high < 0 or self.noise_low < 0:
            raise ValueError("measurement noise values must be non-negative")


@dataclass
class ConfidenceConfig:
    """Reference values for confidence scoring."""

    reference_count: int = DEFAULT_REFERENCE_COUNT
    reference_span_days: float = DEFAULT_REFERENCE_SPAN_DAYS
    use_consistency: bool = False
    variance_normalizer: float = DEFAULT_VARIANCE_NORMALIZER

    def __post_init__(self) -> None:
        if self.reference_count <= 0:
            raise ValueError(f"reference_count must be positive, got {self.reference_count}")
        if self.reference_span_days <= 0:
            raise ValueError(
                f"reference_span_days must be positive, got {self.reference_span_days}"
            )
        if self.variance_normalizer <= 0:
            raise ValueError(
                f"variance_normalizer must be positive, got {self.variance_normalizer}"
            )


@dataclass
class ProjectionConfig:
    """Forward projection and chart interpolation."""

    window_days: float = DEFAULT_WINDOW_DAYS
    point_count: int = DEFAULT_POINT_COUNT
    points_per_gap: int = DEFAULT_POINTS_PER_GAP

    def __post_init__(self) -> None:
        if self.window_days < 0:
            raise ValueError(f"window_days must be non-negative, got {self.window_days}")
        if self.points_per_gap < 0:
            raise ValueError(f"points_per_gap must be non-negative, got {self.points_per_gap}")


@dataclass
class DisplayConfig:
    """Presentation defaults."""

    unit: str = "lbs"
    stable_threshold: float = 0.1  # |weekly rate| below this is "stable"
    output_format: str = "table"  # default for analyze and config show

    def __post_init__(self) -> None:
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"output_format must be one of {list(OUTPUT_FORMATS)}, got {self.output_format!r}"
            )


@dataclass
class Settings:
    """Main application settings."""

    filter: FilterConfig = field(default_factory=FilterConfig)
    recency: RecencyConfig = field(default_factory=RecencyConfig)
    confidence: ConfidenceConfig = field(default_factory=ConfidenceConfig)
    projection: ProjectionConfig = field(default_factory=ProjectionConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Settings":
        """Build settings from a parsed YAML mapping.

        Unknown keys are ignored; missing keys keep their defaults.
        """
        settings = cls()

        if "filter" in data:
            f_data = data["filter"] or {}
            settings.filter = FilterConfig(
                process_noise_weight=float(
                    f_data.get("process_noise_weight", settings.filter.process_noise_weight)
                ),
                process_noise_rate=float(
                    f_data.get("process_noise_rate", settings.filter.process_noise_rate)
                ),
                initial_weight_variance=float(
                    f_data.get("initial_weight_variance", settings.filter.initial_weight_variance)
                ),
                initial_rate_variance=float(
                    f_data.get("initial_rate_variance", settings.filter.initial_rate_variance)
                ),
            )

        if "recency" in data:
            r_data = data["recency"] or {}
            settings.recency = RecencyConfig(
                factor=float(r_data.get("factor", settings.recency.factor)),
                noise_high=float(r_data.get("noise_high", settings.recency.noise_high)),
                noise_low=float(r_data.get("noise_low", settings.recency.noise_low)),
            )

        if "confidence" in data:
            c_data = data["confidence"] or {}
            settings.confidence = ConfidenceConfig(
                reference_count=int(
                    c_data.get("reference_count", settings.confidence.reference_count)
                ),
                reference_span_days=float(
                    c_data.get("reference_span_days", settings.confidence.reference_span_days)
                ),
                use_consistency=bool(
                    c_data.get("use_consistency", settings.confidence.use_consistency)
                ),
                variance_normalizer=float(
                    c_data.get("variance_normalizer", settings.confidence.variance_normalizer)
                ),
            )

        if "projection" in data:
            p_data = data["projection"] or {}
            settings.projection = ProjectionConfig(
                window_days=float(p_data.get("window_days", settings.projection.window_days)),
                point_count=int(p_data.get("point_count", settings.projection.point_count)),
                points_per_gap=int(
                    p_data.get("points_per_gap", settings.projection.points_per_gap)
                ),
            )

        if "display" in data:
            d_data = data["display"] or {}
            settings.display = DisplayConfig(
                unit=str(d_data.get("unit", settings.display.unit)),
                stable_threshold=float(
                    d_data.get("stable_threshold", settings.display.stable_threshold)
                ),
                output_format=str(d_data.get("output_format", settings.display.output_format)),
            )

        return settings

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.weighttrend/config.yaml

        Returns:
            Settings instance
        """
        if config_path is None:
            config_path = default_config_path()

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def save(self, config_path: Optional[Path] = None) -> Path:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses ~/.weighttrend/config.yaml

        Returns:
            Path the settings were written to
        """
        if config_path is None:
            config_path = default_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

        return config_path


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings(config_path: Optional[Path] = None) -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load(config_path)
    return _settings
