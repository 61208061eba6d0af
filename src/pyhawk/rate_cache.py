"""Per-instance cache of primary emission rates.

The emission rate of every primary species is sampled once on the input
energy grid and replaced by a smooth interpolant in ``log E``, so the
integrator can evaluate it thousands of times per output bin without
touching the greybody tables again.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Hashable, Iterable, Mapping

import numpy as np
from scipy.interpolate import CubicSpline, PchipInterpolator, make_interp_spline

from .errors import UnknownCategoryError
from .grids import as_axis

RATE_INTERPOLANTS = ("pchip", "cubic", "linear")


def build_interpolant(log_e: np.ndarray, rates: np.ndarray, kind: str = "pchip"):
    """Interpolant over ``(log E, rate)`` returning NaN outside the samples."""
    if kind == "pchip":
        return PchipInterpolator(log_e, rates, extrapolate=False)
    if kind == "cubic":
        return CubicSpline(log_e, rates, extrapolate=False)
    if kind == "linear":
        spl = make_interp_spline(log_e, rates, k=1)
        spl.extrapolate = False
        return spl
    raise ValueError(f"rate interpolant must be one of: {', '.join(RATE_INTERPOLANTS)}")


@dataclass(frozen=True)
class RateCurve:
    category: Hashable
    energies: np.ndarray
    rates: np.ndarray
    threshold: float
    interpolant: Callable

    def evaluate(self, energy: float) -> float:
        energy = float(energy)
        if energy < self.threshold:
            return 0.0
        if not (self.energies[0] <= energy <= self.energies[-1]):
            return 0.0
        val = float(self.interpolant(np.log(energy)))
        if not np.isfinite(val):
            return 0.0
        return max(0.0, val)

    def evaluate_many(self, energies) -> np.ndarray:
        energies = np.atleast_1d(np.asarray(energies, dtype=float))
        out = np.zeros(energies.shape, dtype=float)
        mask = (energies >= self.threshold) & (energies >= self.energies[0]) & (energies <= self.energies[-1])
        if mask.any():
            vals = np.asarray(self.interpolant(np.log(energies[mask])), dtype=float)
            vals = np.where(np.isfinite(vals), vals, 0.0)
            out[mask] = np.maximum(vals, 0.0)
        return out


@dataclass(frozen=True)
class RateCache:
    curves: Mapping[Hashable, RateCurve]

    @classmethod
    def build(
        cls,
        categories: Iterable[Hashable],
        emission_fn: Callable[[Hashable, float], float],
        input_grid,
        kind: str = "pchip",
    ) -> "RateCache":
        energies = as_axis(input_grid, "input energy grid")
        if energies[0] <= 0.0:
            raise ValueError("input energy grid must be positive")
        log_e = np.log(energies)
        curves: dict[Hashable, RateCurve] = {}
        for cat in categories:
            rates = np.fromiter((emission_fn(cat, float(e)) for e in energies), dtype=float, count=energies.size)
            rates.setflags(write=False)
            curves[cat] = RateCurve(
                category=cat,
                energies=energies,
                rates=rates,
                threshold=max(float(getattr(cat, "rest_energy", 0.0)), 0.0),
                interpolant=build_interpolant(log_e, rates, kind),
            )
        return cls(curves=curves)

    @property
    def categories(self) -> tuple[Hashable, ...]:
        return tuple(self.curves)

    def __contains__(self, category: object) -> bool:
        return category in self.curves

    def curve(self, category: Hashable) -> RateCurve:
        try:
            return self.curves[category]
        except KeyError:
            raise UnknownCategoryError(f"No emission rate cached for {category}") from None

    def query(self, category: Hashable, energy: float) -> float:
        return self.curve(category).evaluate(energy)

    def query_many(self, category: Hashable, energies) -> np.ndarray:
        return self.curve(category).evaluate_many(energies)

    def input_range(self) -> tuple[float, float]:
        if not self.curves:
            raise ValueError("empty rate cache has no input range")
        e = next(iter(self.curves.values())).energies
        return float(e[0]), float(e[-1])
