"""Immutable tabulated grids: axes, 2-D value tables and fit coefficients."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .errors import InsufficientGridError

LOW_FIT_SIZE = 2
HIGH_FIT_SIZE = 3


def as_axis(values, name: str = "axis") -> np.ndarray:
    """Return a read-only float copy of *values* checked as a grid axis."""
    axis = np.array(values, dtype=float).ravel()
    if axis.size < 2:
        raise InsufficientGridError(f"{name} must contain at least 2 points (got {axis.size})")
    if not np.all(np.isfinite(axis)):
        raise ValueError(f"{name} values must be finite")
    if not np.all(np.diff(axis) > 0.0):
        raise ValueError(f"{name} must be strictly increasing")
    axis.setflags(write=False)
    return axis


def _frozen_array(values, shape: tuple[int, ...], name: str) -> np.ndarray:
    arr = np.array(values, dtype=float)
    if arr.shape != shape:
        raise ValueError(f"{name} has shape {arr.shape}, expected {shape}")
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class Grid2D:
    """Tabulated function ``f(r, c)`` on a rectangular grid."""

    rows: np.ndarray
    cols: np.ndarray
    values: np.ndarray

    def __post_init__(self) -> None:
        rows = as_axis(self.rows, "rows")
        cols = as_axis(self.cols, "cols")
        values = _frozen_array(self.values, (rows.size, cols.size), "values")
        object.__setattr__(self, "rows", rows)
        object.__setattr__(self, "cols", cols)
        object.__setattr__(self, "values", values)

    @property
    def shape(self) -> tuple[int, int]:
        return (self.rows.size, self.cols.size)

    def row_range(self) -> tuple[float, float]:
        return float(self.rows[0]), float(self.rows[-1])

    def col_range(self) -> tuple[float, float]:
        return float(self.cols[0]), float(self.cols[-1])


@dataclass(frozen=True, eq=False)
class FitParameters:
    """Per-spin coefficients of the low- and high-range analytic fits.

    ``low[i]`` holds ``(c0, c1)`` of ``exp(c0) * x**c1`` and ``high[i]``
    holds ``(c0, c1, c2)`` of ``c0 x^2 + c1 x + c2``, both at ``axis[i]``.
    """

    axis: np.ndarray
    low: np.ndarray
    high: np.ndarray

    def __post_init__(self) -> None:
        axis = as_axis(self.axis, "fit axis")
        low = _frozen_array(self.low, (axis.size, LOW_FIT_SIZE), "low-range coefficients")
        high = _frozen_array(self.high, (axis.size, HIGH_FIT_SIZE), "high-range coefficients")
        object.__setattr__(self, "axis", axis)
        object.__setattr__(self, "low", low)
        object.__setattr__(self, "high", high)
