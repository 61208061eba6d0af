"""Greybody factors from a tabulated grid with analytic fits outside it.

Each spin class owns a ``Grid2D`` over (Kerr spin ``a``, reduced energy
``x``) covering the range where the full numerical solution was
tabulated, plus ``FitParameters`` used for ``x`` below or above that
range.  Queries inside the covered ``x`` range are interpolated on the
grid; the rest go through the closed-form fits whose coefficients are
themselves interpolated in ``a``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

import numpy as np

from .catalog import SpinClass
from .errors import UnknownCategoryError
from .grids import FitParameters, Grid2D
from .interpolation import Exact, interp2d, linear, locate


def low_range_fit(coeffs, x: float) -> float:
    """Power law ``exp(c0) * x**c1``, vanishing at ``x == 0``."""
    if x <= 0.0:
        return 0.0
    c0, c1 = float(coeffs[0]), float(coeffs[1])
    return float(np.exp(c0 + c1 * np.log(x)))


def high_range_fit(coeffs, x: float) -> float:
    """Geometric-optics quadratic ``c0 x^2 + c1 x + c2``."""
    c0, c1, c2 = float(coeffs[0]), float(coeffs[1]), float(coeffs[2])
    return c0 * x * x + c1 * x + c2


def _clamp(axis: np.ndarray, value: float) -> float:
    return float(min(max(value, axis[0]), axis[-1]))


def fit_coefficients(axis: np.ndarray, table: np.ndarray, a: float) -> np.ndarray:
    """Coefficient vector at spin *a*, interpolated linearly between rows."""
    a = _clamp(axis, a)
    loc = locate(axis, a)
    i = loc.index
    if isinstance(loc, Exact):
        return np.array(table[i], dtype=float)
    return np.array(
        [linear(float(axis[i]), float(table[i, k]), float(axis[i + 1]), float(table[i + 1, k]), a) for k in range(table.shape[1])],
        dtype=float,
    )


def evaluate_hybrid(grid: Grid2D, fits: FitParameters, a: float, x: float) -> float:
    """Grid lookup inside the tabulated ``x`` range, analytic fit outside."""
    if x < 0.0:
        raise ValueError(f"x must be >= 0 (got {x})")
    x_lo, x_hi = grid.col_range()
    if x_lo <= x <= x_hi:
        return interp2d(grid.rows, grid.cols, grid.values, _clamp(grid.rows, a), x)
    if x < x_lo:
        return low_range_fit(fit_coefficients(fits.axis, fits.low, a), x)
    return high_range_fit(fit_coefficients(fits.axis, fits.high, a), x)


@dataclass(frozen=True)
class HybridEntry:
    grid: Grid2D
    fits: FitParameters


@dataclass(frozen=True)
class HybridGridFit:
    """Shared, read-only greybody lookup keyed by spin class."""

    entries: Mapping[SpinClass, HybridEntry]

    @classmethod
    def from_tables(cls, tables: Mapping[SpinClass, tuple[Grid2D, FitParameters]]) -> "HybridGridFit":
        return cls(entries={k: HybridEntry(grid=g, fits=f) for k, (g, f) in tables.items()})

    @property
    def categories(self) -> tuple[SpinClass, ...]:
        return tuple(self.entries)

    def __contains__(self, category: object) -> bool:
        return category in self.entries

    def entry(self, category: SpinClass) -> HybridEntry:
        try:
            return self.entries[category]
        except KeyError:
            raise UnknownCategoryError(f"No greybody table loaded for {category}") from None

    def query(self, category: SpinClass, a: float, x: float) -> float:
        e = self.entry(category)
        return evaluate_hybrid(e.grid, e.fits, float(a), float(x))
