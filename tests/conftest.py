"""Pytest fixtures for weighttrend tests."""

from __future__ import annotations

from typing import Callable, Sequence

import pytest

from weighttrend.tracking.models import Sample

DAY = 86400
BASE_TIMESTAMP = 1_704_067_200  # 2024-01-01T00:00:00Z


def daily_samples(weights: Sequence[float], start: int = BASE_TIMESTAMP) -> list[Sample]:
    """One sample per day starting at `start`."""
    return [Sample(timestamp=start + i * DAY, weight=w) for i, w in enumerate(weights)]


@pytest.fixture
def make_daily_samples() -> Callable[..., list[Sample]]:
    """Factory for daily sample histories."""
    return daily_samples


@pytest.fixture
def scenario_a_samples() -> list[Sample]:
    """Five days of a gentle upward trend."""
    weights = [180.0, 180.5, 181.0, 181.2, 181.6]
    return [Sample(timestamp=day * DAY, weight=w) for day, w in enumerate(weights)]


@pytest.fixture
def scenario_b_samples() -> list[Sample]:
    """90 days alternating 0.3 above and below 175."""
    weights = [175.0 + (0.3 if i % 2 == 0 else -0.3) for i in range(90)]
    return daily_samples(weights)


@pytest.fixture
def sample_csv(tmp_path):
    """CSV file with a week of slowly falling weights."""
    path = tmp_path / "weights.csv"
    lines = ["timestamp,weight"]
    for i in range(14):
        lines.append(f"{BASE_TIMESTAMP + i * DAY},{185.0 - 0.1 * i:.2f}")
    path.write_text("\n".join(lines) + "\n")
    return path
