"""Immutable table container shared by every black-hole instance of a run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from .catalog import Particle, SpinClass
from .grids import FitParameters, Grid2D
from .hybrid_fit import HybridGridFit
from .yield_tables import RegimeRouter, RegimeYieldTable


@dataclass(frozen=True)
class ModelTables:
    """Loaded greybody and yield tables.

    ``yields[regime][target][emitter]`` is the ``Grid2D`` of
    ``dN_target/dE_out`` for a primary ``emitter`` of energy ``E_in``.
    """

    greybody: Mapping[SpinClass, tuple[Grid2D, FitParameters]]
    regimes: tuple[str, ...]
    yields: Mapping[str, Mapping[Particle, Mapping[Particle, Grid2D]]]

    @property
    def targets(self) -> tuple[Particle, ...]:
        seen: dict[Particle, None] = {}
        for regime in self.regimes:
            for target in self.yields.get(regime, {}):
                seen.setdefault(target, None)
        return tuple(seen)

    def build_greybody(self) -> HybridGridFit:
        return HybridGridFit.from_tables(self.greybody)

    def build_router(
        self,
        target: Particle,
        thresholds: Sequence[float],
        emitters: Iterable[Particle] | None = None,
    ) -> RegimeRouter | None:
        """Router over all regimes for *target*, or ``None`` when no regime produces it."""
        keep = None if emitters is None else set(emitters)
        tables = []
        any_data = False
        for regime in self.regimes:
            grids = dict(self.yields.get(regime, {}).get(target, {}))
            if keep is not None:
                grids = {e: g for e, g in grids.items() if e in keep}
            any_data = any_data or bool(grids)
            tables.append(RegimeYieldTable(grids=grids, name=regime))
        if not any_data:
            return None
        return RegimeRouter(tables=tables, boundaries=tuple(thresholds))

    def build_routers(
        self,
        thresholds: Sequence[float],
        targets: Iterable[Particle] | None = None,
        emitters: Iterable[Particle] | None = None,
    ) -> dict[Particle, RegimeRouter]:
        emitters = None if emitters is None else tuple(emitters)
        routers: dict[Particle, RegimeRouter] = {}
        for target in (self.targets if targets is None else targets):
            router = self.build_router(target, thresholds, emitters=emitters)
            if router is not None:
                routers[target] = router
        return routers
