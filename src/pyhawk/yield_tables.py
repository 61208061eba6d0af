"""Regime-switched decay / fragmentation yield tables.

A ``RegimeYieldTable`` holds, for one observed species and one energy
regime, the differential yield ``dN/dE_out`` of every emitter as a
``Grid2D`` (rows: emitter energy, columns: observed energy).  The
``RegimeRouter`` stacks the regimes of one observed species and sends an
emitter energy to the table whose regime contains it.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
import math
from typing import Hashable, Mapping, Sequence

import numpy as np

from .grids import Grid2D
from .interpolation import interp2d, interp2d_many


@dataclass(frozen=True)
class RegimeYieldTable:
    grids: Mapping[Hashable, Grid2D]
    name: str = ""

    @property
    def categories(self) -> tuple[Hashable, ...]:
        return tuple(self.grids)

    def __contains__(self, category: object) -> bool:
        return category in self.grids

    def query(self, category: Hashable, e_in: float, e_out: float) -> float:
        """Yield density at ``(e_in, e_out)``; zero when this regime has no data."""
        grid = self.grids.get(category)
        if grid is None:
            return 0.0
        r0, r1 = grid.row_range()
        c0, c1 = grid.col_range()
        if not (r0 <= e_in <= r1 and c0 <= e_out <= c1):
            return 0.0
        return interp2d(grid.rows, grid.cols, grid.values, e_in, e_out)

    def query_many(self, category: Hashable, e_in, e_out) -> np.ndarray:
        """Matrix ``[i, j]`` of yields at ``(e_in[i], e_out[j])``."""
        e_in = np.atleast_1d(np.asarray(e_in, dtype=float))
        e_out = np.atleast_1d(np.asarray(e_out, dtype=float))
        grid = self.grids.get(category)
        if grid is None:
            return np.zeros((e_in.size, e_out.size), dtype=float)
        r0, r1 = grid.row_range()
        c0, c1 = grid.col_range()
        rmask = (e_in >= r0) & (e_in <= r1)
        cmask = (e_out >= c0) & (e_out <= c1)
        out = np.zeros((e_in.size, e_out.size), dtype=float)
        if not (rmask.any() and cmask.any()):
            return out
        block = interp2d_many(grid.rows, grid.cols, grid.values, e_in[rmask], e_out[cmask])
        out[np.ix_(rmask, cmask)] = block
        return out


@dataclass(frozen=True)
class RegimeRouter:
    """``N`` yield tables separated by ``N - 1`` increasing energy thresholds."""

    tables: Sequence[RegimeYieldTable]
    boundaries: Sequence[float] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        tables = tuple(self.tables)
        boundaries = tuple(float(b) for b in self.boundaries)
        if not tables:
            raise ValueError("RegimeRouter needs at least one table")
        if len(boundaries) != len(tables) - 1:
            raise ValueError(
                f"expected {len(tables) - 1} regime thresholds for {len(tables)} tables, got {len(boundaries)}"
            )
        prev = 0.0
        for b in boundaries:
            if not math.isfinite(b) or b <= prev:
                raise ValueError("regime thresholds must be finite, positive and strictly increasing")
            prev = b
        object.__setattr__(self, "tables", tables)
        object.__setattr__(self, "boundaries", boundaries)

    @property
    def categories(self) -> tuple[Hashable, ...]:
        seen: dict[Hashable, None] = {}
        for table in self.tables:
            for cat in table.categories:
                seen.setdefault(cat, None)
        return tuple(seen)

    def regime_index(self, e_in: float) -> int:
        return bisect_right(self.boundaries, e_in)

    def regime_bounds(self, k: int) -> tuple[float, float]:
        lo = 0.0 if k == 0 else self.boundaries[k - 1]
        hi = math.inf if k == len(self.boundaries) else self.boundaries[k]
        return lo, hi

    def query(self, category: Hashable, e_in: float, e_out: float) -> float:
        return self.tables[self.regime_index(e_in)].query(category, e_in, e_out)

    def regimes_overlapping(self, e_min: float, e_max: float) -> list[tuple[int, tuple[float, float]]]:
        """Split ``[e_min, e_max] ∩ [0, inf)`` at the regime thresholds.

        Returns ``(regime_index, (lo, hi))`` pairs in increasing order; the
        sub-intervals share only their endpoints and cover the range exactly.
        """
        e_min = max(float(e_min), 0.0)
        e_max = float(e_max)
        if not e_min < e_max:
            return []
        out: list[tuple[int, tuple[float, float]]] = []
        for k in range(self.regime_index(e_min), len(self.tables)):
            lo, hi = self.regime_bounds(k)
            if lo >= e_max:
                break
            sub_lo = max(e_min, lo)
            sub_hi = min(e_max, hi)
            if sub_lo < sub_hi:
                out.append((k, (sub_lo, sub_hi)))
        return out
