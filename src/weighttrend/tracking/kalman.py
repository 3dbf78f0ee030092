"""Two-state Kalman filter for body-weight trend estimation.

The latent state is [weight, rate], where rate is the change in weight per
day. Only weight is observed. Between measurements the state evolves under a
constant-velocity model:

    weight' = weight + rate × dt
    rate'   = rate

with additive process noise Q = diag(q_weight, q_rate) per step. Each
measurement then corrects the prediction in proportion to the Kalman gain.

Filter parameters live on WeightKalmanFilter; the evolving estimate lives on
EstimatorState. Both are immutable, so a full pass over a sample history is a
chain of pure function calls and the covariance is carried forward between
steps rather than rebuilt for every measurement.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from weighttrend.tracking.linalg import Matrix2, Vector2

# Innovation covariance below this is treated as singular and the correction
# is skipped.
MIN_INNOVATION_COVARIANCE = 1e-10

DEFAULT_PROCESS_NOISE_WEIGHT = 0.01
DEFAULT_PROCESS_NOISE_RATE = 0.0001
DEFAULT_INITIAL_WEIGHT_VARIANCE = 1.0
DEFAULT_INITIAL_RATE_VARIANCE = 10.0  # rate is unobserved at the first sample

# Measurement matrix: we observe weight, not rate
_H = Vector2(1.0, 0.0)


@dataclass(frozen=True)
class EstimatorState:
    """Filter estimate at one point in time.

    Attributes:
        weight: Filtered weight
        rate: Weight change per day
        covariance: 2x2 state covariance [[var_w, cov], [cov, var_r]]
    """

    weight: float
    rate: float
    covariance: Matrix2

    @property
    def filtered_weight(self) -> float:
        return self.weight

    @property
    def weight_rate_per_day(self) -> float:
        return self.rate

    @property
    def weekly_rate(self) -> float:
        return self.rate * 7.0

    @property
    def weight_uncertainty(self) -> float:
        """Standard deviation of the weight estimate."""
        return math.sqrt(max(0.0, self.covariance.a))

    @property
    def rate_uncertainty(self) -> float:
        """Standard deviation of the rate estimate (per day)."""
        return math.sqrt(max(0.0, self.covariance.d))

    def predict_weight(self, days_ahead: float) -> float:
        """Extrapolate the weight linearly without touching the state."""
        return self.weight + self.rate * days_ahead

    def as_vector(self) -> Vector2:
        return Vector2(self.weight, self.rate)


@dataclass(frozen=True)
class WeightKalmanFilter:
    """
    Constant-velocity Kalman filter over [weight, rate].

    Attributes:
        process_noise_weight: Variance added to weight per step
        process_noise_rate: Variance added to rate per step
        initial_weight_variance: Weight uncertainty at the first sample
        initial_rate_variance: Rate uncertainty at the first sample (high,
            since a single measurement says nothing about rate)
    """

    process_noise_weight: float = DEFAULT_PROCESS_NOISE_WEIGHT
    process_noise_rate: float = DEFAULT_PROCESS_NOISE_RATE
    initial_weight_variance: float = DEFAULT_INITIAL_WEIGHT_VARIANCE
    initial_rate_variance: float = DEFAULT_INITIAL_RATE_VARIANCE

    def __post_init__(self) -> None:
        for name in (
            "process_noise_weight",
            "process_noise_rate",
            "initial_weight_variance",
            "initial_rate_variance",
        ):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be a finite non-negative number, got {value!r}")

    @property
    def process_noise(self) -> Matrix2:
        return Matrix2.diagonal(self.process_noise_weight, self.process_noise_rate)

    def new(self, initial_weight: float, initial_rate: float = 0.0) -> EstimatorState:
        """Start tracking from a first measurement."""
        return EstimatorState(
            weight=float(initial_weight),
            rate=float(initial_rate),
            covariance=Matrix2.diagonal(
                self.initial_weight_variance, self.initial_rate_variance
            ),
        )

    def reset(self, initial_weight: float, initial_rate: float = 0.0) -> EstimatorState:
        """Reinitialize exactly as new()."""
        return self.new(initial_weight, initial_rate)

    def predict(self, state: EstimatorState, delta_days: float) -> EstimatorState:
        """
        Predict step: advance the state by delta_days.

        Non-positive or non-finite gaps are treated as zero, so the
        transition is the identity and only process noise is added.

        Args:
            state: Current estimate
            delta_days: Days since the previous measurement

        Returns:
            Predicted estimate
        """
        dt = delta_days if math.isfinite(delta_days) and delta_days > 0 else 0.0

        transition = Matrix2(1.0, dt, 0.0, 1.0)
        x = transition.multiply_vector(state.as_vector())
        p = (
            transition.multiply(state.covariance)
            .multiply(transition.transpose())
            .add(self.process_noise)
        )
        return EstimatorState(weight=x.x, rate=x.y, covariance=p)

    def correct(
        self,
        state: EstimatorState,
        measurement: float,
        measurement_noise: float,
    ) -> EstimatorState:
        """
        Update step: fold one weight measurement into the estimate.

        Args:
            state: Predicted estimate
            measurement: Observed weight
            measurement_noise: Measurement variance R for this sample

        Returns:
            Corrected estimate. If the innovation covariance is effectively
            zero the state is returned unchanged.
        """
        p = state.covariance

        innovation = measurement - _H.dot(state.as_vector())
        innovation_covariance = p.a + measurement_noise
        if abs(innovation_covariance) < MIN_INNOVATION_COVARIANCE:
            return state

        # K = P Hᵀ / S
        gain = Vector2(p.a, p.c).scale(1.0 / innovation_covariance)

        weight = state.weight + gain.x * innovation
        rate = state.rate + gain.y * innovation

        # P = (I - K H) P
        covariance = (
            Matrix2.identity()
            .subtract(Matrix2.outer(gain, _H))
            .multiply(p)
            .symmetrized()
        )
        return EstimatorState(weight=weight, rate=rate, covariance=covariance)

    def update(
        self,
        state: EstimatorState,
        measurement: float,
        delta_days: float,
        measurement_noise: float,
    ) -> EstimatorState:
        """Combined predict + correct for one measurement."""
        return self.correct(self.predict(state, delta_days), measurement, measurement_noise)


def new_state(
    process_noise_weight: float,
    process_noise_rate: float,
    initial_weight: float,
    initial_rate: float = 0.0,
) -> tuple[WeightKalmanFilter, EstimatorState]:
    """Build a filter and its initial state in one call."""
    kalman_filter = WeightKalmanFilter(
        process_noise_weight=process_noise_weight,
        process_noise_rate=process_noise_rate,
    )
    return kalman_filter, kalman_filter.new(initial_weight, initial_rate)
