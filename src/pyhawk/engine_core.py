"""Shared spectrum loop used by the serial and threaded engine frontends."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
import sys
from time import perf_counter
from typing import Callable, Iterable, Iterator, Mapping, Sequence

import numpy as np

from .catalog import Particle
from .config import RunConfig
from .emission import BlackHole, EmissionModel
from .hybrid_fit import HybridGridFit
from .integrator import SpectralIntegrator
from .mass_bins import BlackHoleInstance
from .output_io import write_outputs
from .rate_cache import RateCache
from .yield_tables import RegimeRouter

MapFn = Callable[[Callable[[BlackHoleInstance], "InstanceSpectra"], Iterable[BlackHoleInstance]], Iterator["InstanceSpectra"]]


@dataclass(frozen=True)
class SharedInputs:
    """Read-only inputs shared by every instance of a run."""

    greybody: HybridGridFit
    routers: Mapping[Particle, RegimeRouter]
    primaries: tuple[Particle, ...]
    targets: tuple[Particle, ...]
    input_energies: np.ndarray
    output_energies: np.ndarray


@dataclass(frozen=True)
class InstanceSpectra:
    primary: np.ndarray
    direct: np.ndarray
    total: np.ndarray
    rates_sec: float
    secondary_sec: float


def compute_instance(shared: SharedInputs, cfg: RunConfig, instance: BlackHoleInstance) -> InstanceSpectra:
    """Primary and secondary spectra of a single black hole."""
    rates_t0 = perf_counter()
    emission = EmissionModel(shared.greybody, BlackHole(instance.mass, instance.spin))
    cache = RateCache.build(shared.primaries, emission, shared.input_energies, kind=cfg.rate_interpolant)
    primary = np.stack([cache.curve(p).rates for p in shared.primaries])
    rates_sec = perf_counter() - rates_t0

    sec_t0 = perf_counter()
    integrator = SpectralIntegrator(
        rate_cache=cache,
        routers=shared.routers,
        output_energies=shared.output_energies,
        steps=cfg.integration_steps,
    )
    n_out = integrator.output_energies.size
    direct = np.zeros((len(shared.targets), n_out), dtype=float)
    total = np.zeros((len(shared.targets), n_out), dtype=float)
    for j, target in enumerate(shared.targets):
        direct[j], total[j] = integrator.compute(target)
    return InstanceSpectra(
        primary=primary,
        direct=direct,
        total=total,
        rates_sec=rates_sec,
        secondary_sec=perf_counter() - sec_t0,
    )


class ProgressReporter:
    """Console progress bar over processed black-hole instances."""

    def __init__(self, total: int, *, show: bool, style: str) -> None:
        self.total = int(total)
        self.show = bool(show)
        style = str(style).strip().lower()
        if style not in {"auto", "single", "line", "compact", "off"}:
            style = "auto"
        if style == "auto":
            style = "single" if bool(getattr(sys.stdout, "isatty", lambda: False)()) else "line"
        self.style = style
        self.use_carriage = style == "single"
        self.progress_path = os.getenv("PYHAWK_PROGRESS_PATH", "").strip()
        self.last_step = 0
        self._last_bucket = -1

    def update(self, step: int) -> None:
        self.last_step = step
        if self.progress_path:
            try:
                with open(self.progress_path, "w", encoding="utf-8") as f:
                    f.write(str(int(step)))
            except OSError:
                pass
        if not (self.show and self.total > 0) or self.style == "off":
            return
        pct = 100.0 * step / self.total
        if self.style == "compact":
            bucket = int(pct) // 5
            if bucket == self._last_bucket and step < self.total:
                return
            self._last_bucket = bucket
        bar_w = 30
        fill = int(bar_w * step / self.total)
        bar = "#" * fill + "-" * (bar_w - fill)
        msg = f"Progress [{bar}] {pct:6.2f}% ({step}/{self.total})"
        if self.use_carriage:
            sys.stdout.write(f"\r{msg}")
            sys.stdout.flush()
        else:
            print(msg, flush=True)

    def finish(self) -> None:
        if not (self.show and self.total > 0):
            return
        if self.last_step < self.total:
            self.update(self.total)
        if self.use_carriage and self.style != "off":
            sys.stdout.write("\n")
            sys.stdout.flush()


def resolve_output_dir(cfg: RunConfig) -> Path:
    return Path(cfg.output_dir) if cfg.output_dir is not None else (Path.cwd() / "results")


def run_spectra_loop(
    shared: SharedInputs,
    cfg: RunConfig,
    instances: Sequence[BlackHoleInstance],
    *,
    map_fn: MapFn,
    frontend: str,
) -> dict[str, np.ndarray]:
    stage_sec = {"rates": 0.0, "secondary": 0.0, "output": 0.0}
    total_t0 = perf_counter()
    n_inst = len(instances)
    n_out = shared.output_energies.size
    primary = np.zeros((n_inst, len(shared.primaries), shared.input_energies.size), dtype=float)
    direct = np.zeros((n_inst, len(shared.targets), n_out), dtype=float)
    total = np.zeros((n_inst, len(shared.targets), n_out), dtype=float)

    progress = ProgressReporter(n_inst, show=cfg.show_progress, style=cfg.progress_style)
    for i, spectra in enumerate(map_fn(lambda inst: compute_instance(shared, cfg, inst), instances)):
        primary[i] = spectra.primary
        direct[i] = spectra.direct
        total[i] = spectra.total
        stage_sec["rates"] += spectra.rates_sec
        stage_sec["secondary"] += spectra.secondary_sec
        progress.update(i + 1)
    progress.finish()

    payload = {
        "masses": np.array([inst.mass for inst in instances], dtype=float),
        "spins": np.array([inst.spin for inst in instances], dtype=float),
        "weights": np.array([inst.weight for inst in instances], dtype=float),
        "input_energies": np.asarray(shared.input_energies, dtype=float),
        "output_energies": np.asarray(shared.output_energies, dtype=float),
        "primary": primary,
        "direct": direct,
        "total": total,
    }

    out_t0 = perf_counter()
    if cfg.write_output:
        write_outputs(
            resolve_output_dir(cfg),
            output_mode=cfg.output_mode,
            df_binary_format=cfg.df_binary_format,
            df_write_csv=cfg.df_write_csv,
            primaries=[p.value for p in shared.primaries],
            targets=[t.value for t in shared.targets],
            **payload,
        )
    stage_sec["output"] += perf_counter() - out_t0

    print("Hawking spectrum run complete")
    print("engine:", frontend)
    print("instances:", n_inst)
    print("primaries:", len(shared.primaries), "targets:", len(shared.targets))
    if total.size:
        print("peak total spectrum:", float(np.max(total)))
    if cfg.profile_timing:
        elapsed = perf_counter() - total_t0
        # Stage times are summed over workers, so "other" clamps at zero for threaded runs.
        known = stage_sec["rates"] + stage_sec["secondary"] + stage_sec["output"]
        other = max(0.0, elapsed - known)
        print(
            "timing profile (s): "
            f"total={elapsed:.3f}, rates={stage_sec['rates']:.3f}, secondary={stage_sec['secondary']:.3f}, "
            f"output={stage_sec['output']:.3f}, other={other:.3f}"
        )
    return payload
