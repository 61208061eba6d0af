"""Top-level Hawking spectrum model."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
import time
from typing import Any

import numpy as np

from .catalog import Particle
from .config import RunConfig
from .engine import run_spectra
from .engine_core import SharedInputs
from .errors import UnknownCategoryError
from .io_routines import TableLoader
from .mass_bins import build_instances
from .model_tables import ModelTables


@dataclass
class SpectrumResult:
    """Spectra of every black-hole instance of a run.

    ``primary`` has shape ``(n_instances, n_primaries, n_input_energies)``;
    ``direct`` and ``total`` have shape ``(n_instances, n_targets,
    n_output_energies)``.  All rates are in GeV^-1 s^-1.
    """

    masses: np.ndarray
    spins: np.ndarray
    weights: np.ndarray
    input_energies: np.ndarray
    output_energies: np.ndarray
    primaries: tuple[str, ...]
    targets: tuple[str, ...]
    primary: np.ndarray
    direct: np.ndarray
    total: np.ndarray

    def secondary(self) -> np.ndarray:
        return self.total - self.direct

    def spectrum(self, target: str | Particle, instance: int = 0) -> np.ndarray:
        name = target.value if isinstance(target, Particle) else str(target)
        return self.total[instance, self.targets.index(name)]

    def distribution_total(self) -> np.ndarray:
        """Weight-summed total spectra, shape ``(n_targets, n_output_energies)``."""
        return np.tensordot(self.weights, self.total, axes=1)

    def distribution_primary(self) -> np.ndarray:
        return np.tensordot(self.weights, self.primary, axes=1)

    def as_dict(self) -> dict[str, Any]:
        return {
            "masses": self.masses,
            "spins": self.spins,
            "weights": self.weights,
            "input_energies": self.input_energies,
            "output_energies": self.output_energies,
            "primaries": self.primaries,
            "targets": self.targets,
            "primary": self.primary,
            "direct": self.direct,
            "total": self.total,
        }


@dataclass
class SpectrumModel:
    """Runs configurations against tables read from ``cfg.data_dir``.

    Tables passed in as ``tables`` are used for every run.  Tables read by
    the model are reloaded whenever a run names another data directory,
    regime list or cache setting.
    """

    loader: TableLoader | None = None
    tables: ModelTables | None = None
    _tables_source: tuple | None = field(default=None, init=False, repr=False)

    def _loader_for(self, cfg: RunConfig) -> TableLoader:
        data_dir = Path(cfg.data_dir)
        if self.loader is None:
            self.loader = TableLoader(data_dir, enable_table_cache=cfg.table_cache)
        elif self.loader.data_dir != data_dir or self.loader.enable_table_cache != cfg.table_cache:
            self.loader = replace(self.loader, data_dir=data_dir, enable_table_cache=cfg.table_cache)
        return self.loader

    def load_tables(self, cfg: RunConfig) -> ModelTables:
        loader = self._loader_for(cfg)
        self.tables = loader.load_model_tables(cfg.regimes)
        self._tables_source = (loader.data_dir, tuple(cfg.regimes), cfg.table_cache)
        return self.tables

    def _tables_for(self, cfg: RunConfig) -> ModelTables:
        if self.tables is not None and self._tables_source is None:
            return self.tables
        if self._tables_source == (Path(cfg.data_dir), tuple(cfg.regimes), cfg.table_cache):
            return self.tables
        return self.load_tables(cfg)

    def prepare(self, cfg: RunConfig) -> SharedInputs:
        """Build the read-only inputs shared by all instances of *cfg*."""
        tables = self._tables_for(cfg)
        if tuple(tables.regimes) != tuple(cfg.regimes):
            raise ValueError(f"tables cover regimes {tables.regimes}, run configures {tuple(cfg.regimes)}")
        greybody = tables.build_greybody()
        primaries = cfg.primary_particles()
        for p in primaries:
            if p.spin_class not in greybody:
                raise UnknownCategoryError(f"No greybody table for spin {p.spin_class.label} (needed by {p.value})")
        targets = cfg.target_particles()
        return SharedInputs(
            greybody=greybody,
            routers=tables.build_routers(cfg.regime_thresholds, targets=targets, emitters=primaries),
            primaries=primaries,
            targets=targets,
            input_energies=cfg.input_energies(),
            output_energies=cfg.output_energies(),
        )

    def run(self, cfg: RunConfig, *, return_results: bool = True) -> SpectrumResult | None:
        shared = self.prepare(cfg)
        instances = build_instances(cfg)
        t0 = time.perf_counter()
        payload = run_spectra(shared, cfg, instances)
        elapsed = time.perf_counter() - t0
        print(f"total runtime (wall): {elapsed:.3f} s")
        if not return_results:
            return None
        return SpectrumResult(
            primaries=tuple(p.value for p in shared.primaries),
            targets=tuple(t.value for t in shared.targets),
            **payload,
        )

    def spectra(self, data_dir: str, **options: Any) -> SpectrumResult:
        """Build a ``RunConfig`` from keyword options and run it."""
        result = self.run(RunConfig(data_dir=data_dir, **options), return_results=True)
        assert result is not None
        return result
