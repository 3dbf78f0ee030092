"""Weight trend estimation with a two-state Kalman filter."""

from __future__ import annotations

__version__ = "0.1.0"
