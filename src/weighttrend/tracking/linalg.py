"""Small immutable 2-vector and 2x2 matrix types for the Kalman filter.

The filter state is only two-dimensional, so the algebra is written out
explicitly rather than going through numpy for every step. This keeps each
operation bit-reproducible and free of aliasing: every method returns a new
value and never mutates its operands.

Matrix layout:
    [[a, b],
     [c, d]]
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Vector2:
    """Column vector [x, y]."""

    x: float
    y: float

    def add(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def subtract(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def scale(self, factor: float) -> Vector2:
        return Vector2(self.x * factor, self.y * factor)

    def dot(self, other: Vector2) -> float:
        return self.x * other.x + self.y * other.y

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=float)


@dataclass(frozen=True)
class Matrix2:
    """2x2 matrix stored row-major as (a, b, c, d)."""

    a: float
    b: float
    c: float
    d: float

    @classmethod
    def identity(cls) -> Matrix2:
        return cls(1.0, 0.0, 0.0, 1.0)

    @classmethod
    def zeros(cls) -> Matrix2:
        return cls(0.0, 0.0, 0.0, 0.0)

    @classmethod
    def diagonal(cls, first: float, second: float) -> Matrix2:
        return cls(first, 0.0, 0.0, second)

    @classmethod
    def outer(cls, u: Vector2, v: Vector2) -> Matrix2:
        """Outer product u · vᵀ."""
        return cls(u.x * v.x, u.x * v.y, u.y * v.x, u.y * v.y)

    @classmethod
    def from_array(cls, array: np.ndarray) -> Matrix2:
        """Build from any 2x2 array-like."""
        arr = np.asarray(array, dtype=float)
        if arr.shape != (2, 2):
            raise ValueError(f"expected a 2x2 array, got shape {arr.shape}")
        return cls(float(arr[0, 0]), float(arr[0, 1]), float(arr[1, 0]), float(arr[1, 1]))

    def add(self, other: Matrix2) -> Matrix2:
        return Matrix2(
            self.a + other.a,
            self.b + other.b,
            self.c + other.c,
            self.d + other.d,
        )

    def subtract(self, other: Matrix2) -> Matrix2:
        return Matrix2(
            self.a - other.a,
            self.b - other.b,
            self.c - other.c,
            self.d - other.d,
        )

    def scale(self, factor: float) -> Matrix2:
        return Matrix2(self.a * factor, self.b * factor, self.c * factor, self.d * factor)

    def multiply(self, other: Matrix2) -> Matrix2:
        """Matrix product self · other."""
        return Matrix2(
            self.a * other.a + self.b * other.c,
            self.a * other.b + self.b * other.d,
            self.c * other.a + self.d * other.c,
            self.c * other.b + self.d * other.d,
        )

    def multiply_vector(self, vector: Vector2) -> Vector2:
        """Matrix-vector product self · vector."""
        return Vector2(
            self.a * vector.x + self.b * vector.y,
            self.c * vector.x + self.d * vector.y,
        )

    def transpose(self) -> Matrix2:
        return Matrix2(self.a, self.c, self.b, self.d)

    def trace(self) -> float:
        return self.a + self.d

    def determinant(self) -> float:
        return self.a * self.d - self.b * self.c

    def is_symmetric(self, tolerance: float = 1e-12) -> bool:
        return abs(self.b - self.c) <= tolerance

    def symmetrized(self) -> Matrix2:
        """Return (M + Mᵀ) / 2."""
        off = 0.5 * (self.b + self.c)
        return Matrix2(self.a, off, off, self.d)

    def to_array(self) -> np.ndarray:
        return np.array([[self.a, self.b], [self.c, self.d]], dtype=float)
