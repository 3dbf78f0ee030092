"""Tests for the historical pass, projection and display interpolation."""

from __future__ import annotations

import math

import numpy as np
import pytest

from weighttrend.tracking.kalman import EstimatorState, WeightKalmanFilter
from weighttrend.tracking.linalg import Matrix2
from weighttrend.tracking.models import Sample, TrendPoint
from weighttrend.tracking.projection import (
    build_historical_series,
    interpolate_for_display,
    project_future,
)

from conftest import BASE_TIMESTAMP, DAY


class TestBuildHistoricalSeries:
    """Tests for build_historical_series function."""

    def test_empty_history(self) -> None:
        series, state = build_historical_series([])
        assert series == ()
        assert state is None

    def test_single_sample(self) -> None:
        series, state = build_historical_series([Sample(BASE_TIMESTAMP, 182.3)])

        assert series == (TrendPoint(BASE_TIMESTAMP, 182.3),)
        assert state is not None
        assert state.filtered_weight == 182.3
        assert state.weight_rate_per_day == 0.0

    def test_unordered_input_is_sorted(self, make_daily_samples) -> None:
        samples = make_daily_samples([180.0, 180.2, 180.1, 180.4, 180.3])
        shuffled = [samples[3], samples[0], samples[4], samples[2], samples[1]]

        series, _ = build_historical_series(shuffled)

        timestamps = [p.timestamp for p in series]
        assert timestamps == sorted(timestamps)
        assert series == build_historical_series(samples)[0]

    def test_input_not_reordered(self, make_daily_samples) -> None:
        samples = make_daily_samples([180.0, 181.0, 182.0])
        reversed_samples = list(reversed(samples))
        build_historical_series(reversed_samples)
        assert reversed_samples == list(reversed(samples))

    def test_covariance_carried_between_steps(self, make_daily_samples) -> None:
        """Rate uncertainty keeps shrinking instead of resetting each step."""
        kf = WeightKalmanFilter()
        _, state = build_historical_series(make_daily_samples([180.0] * 30), kf)

        # One update from a fresh diag(1, 10) leaves rate std near 1
        single_step = kf.update(kf.new(180.0), 180.0, 1.0, 0.1)

        assert state is not None
        assert state.rate_uncertainty < 0.3
        assert state.rate_uncertainty < single_step.rate_uncertainty

    def test_duplicate_timestamps(self) -> None:
        samples = [
            Sample(BASE_TIMESTAMP, 180.0),
            Sample(BASE_TIMESTAMP, 180.6),
            Sample(BASE_TIMESTAMP, 179.8),
        ]

        series, state = build_historical_series(samples)

        assert len(series) == 3
        assert state is not None
        assert all(math.isfinite(p.estimate) for p in series)
        assert math.isfinite(state.rate)

    def test_final_covariance_is_psd(self, make_daily_samples) -> None:
        weights = [180.0 + 0.5 * math.sin(i) for i in range(60)]
        _, state = build_historical_series(make_daily_samples(weights))

        assert state is not None
        p = state.covariance
        assert p.is_symmetric(1e-9)
        assert np.linalg.eigvalsh(p.to_array()).min() >= -1e-9


class TestProjectFuture:
    """Tests for project_future function."""

    def _state(self) -> EstimatorState:
        return EstimatorState(180.0, -0.1, Matrix2.diagonal(0.1, 0.01))

    def test_evenly_spaced_linear_projection(self) -> None:
        points = project_future(self._state(), BASE_TIMESTAMP, window_days=30, point_count=31)

        assert len(points) == 31
        assert points[0] == TrendPoint(BASE_TIMESTAMP, 180.0)
        assert points[-1].timestamp == BASE_TIMESTAMP + 30 * DAY
        assert points[-1].estimate == pytest.approx(177.0)
        for i, point in enumerate(points):
            assert point.timestamp == BASE_TIMESTAMP + i * DAY
            assert point.estimate == pytest.approx(180.0 - 0.1 * i)

    def test_start_after_anchor(self) -> None:
        """Days ahead are measured from the state's own timestamp."""
        start = BASE_TIMESTAMP + 10 * DAY
        points = project_future(
            self._state(), BASE_TIMESTAMP, window_days=5, point_count=6, start_timestamp=start
        )

        assert points[0].timestamp == start
        assert points[0].estimate == pytest.approx(179.0)
        assert points[-1].estimate == pytest.approx(178.5)

    def test_point_count_edge_cases(self) -> None:
        assert project_future(self._state(), BASE_TIMESTAMP, point_count=0) == ()
        assert project_future(self._state(), BASE_TIMESTAMP, point_count=-3) == ()
        single = project_future(self._state(), BASE_TIMESTAMP, point_count=1)
        assert single == (TrendPoint(BASE_TIMESTAMP, 180.0),)

    def test_does_not_touch_state(self) -> None:
        state = self._state()
        project_future(state, BASE_TIMESTAMP)
        assert state == self._state()


class TestInterpolateForDisplay:
    """Tests for interpolate_for_display function."""

    def test_inserts_points_between_entries(self) -> None:
        series = (TrendPoint(0, 10.0), TrendPoint(300, 13.0))

        result = interpolate_for_display(series, points_per_gap=2)

        assert [p.timestamp for p in result] == [0, 100, 200, 300]
        assert [p.estimate for p in result] == pytest.approx([10.0, 11.0, 12.0, 13.0])

    def test_length_and_original_points_kept(self) -> None:
        series = tuple(TrendPoint(i * DAY, 180.0 + i) for i in range(5))

        result = interpolate_for_display(series, points_per_gap=3)

        assert len(result) == 5 + 4 * 3
        assert result[::4] == series

    def test_input_series_untouched(self) -> None:
        series = [TrendPoint(0, 1.0), TrendPoint(10, 2.0)]
        copy = list(series)
        interpolate_for_display(series)
        assert series == copy

    def test_zero_points_and_short_series(self) -> None:
        series = (TrendPoint(0, 1.0), TrendPoint(10, 2.0))
        assert interpolate_for_display(series, 0) == series
        assert interpolate_for_display(series[:1], 2) == series[:1]
        assert interpolate_for_display((), 2) == ()

    def test_negative_points_rejected(self) -> None:
        with pytest.raises(ValueError):
            interpolate_for_display((TrendPoint(0, 1.0),), -1)
