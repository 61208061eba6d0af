"""Run configuration for Hawking spectrum computations."""

from __future__ import annotations

from dataclasses import dataclass
import math

import numpy as np

from .catalog import PRIMARIES, SECONDARIES, Particle, particle_names
from .constants import (
    E_MAX_DEFAULT,
    E_MIN_DEFAULT,
    E_NUMBER_DEFAULT,
    INTEGRATION_STEPS_DEFAULT,
    MASS_DEFAULT,
    OUT_E_MAX_DEFAULT,
    OUT_E_MIN_DEFAULT,
    OUT_E_NUMBER_DEFAULT,
    REGIME_THRESHOLDS_DEFAULT,
    REGIMES_DEFAULT,
    SPIN_MAX,
)
from .rate_cache import RATE_INTERPOLANTS


def _check_finite_positive(name: str, value: float) -> None:
    if not math.isfinite(float(value)) or float(value) <= 0.0:
        raise ValueError(f"{name} must be finite and > 0")


@dataclass(frozen=True)
class RunConfig:
    """Container for user-controlled spectrum parameters."""

    data_dir: str
    mass_function: str = "monochromatic"
    mass: float = MASS_DEFAULT
    mass_min: float = 1.0e14
    mass_max: float = 1.0e16
    mass_number: int = 10
    mass_sigma: float = 1.0
    powerlaw_index: float = -2.5
    spin: float = 0.0
    masses: tuple[float, ...] | None = None
    spins: tuple[float, ...] | None = None
    e_min: float = E_MIN_DEFAULT
    e_max: float = E_MAX_DEFAULT
    e_number: int = E_NUMBER_DEFAULT
    out_e_min: float = OUT_E_MIN_DEFAULT
    out_e_max: float = OUT_E_MAX_DEFAULT
    out_e_number: int = OUT_E_NUMBER_DEFAULT
    regimes: tuple[str, ...] = REGIMES_DEFAULT
    regime_thresholds: tuple[float, ...] = REGIME_THRESHOLDS_DEFAULT
    primaries: tuple[str, ...] = particle_names(PRIMARIES)
    targets: tuple[str, ...] = particle_names(SECONDARIES)
    integration_steps: int = INTEGRATION_STEPS_DEFAULT
    rate_interpolant: str = "pchip"
    workers: int = 1
    show_progress: bool = True
    progress_style: str = "auto"
    profile_timing: bool = True
    output_dir: str | None = None
    output_mode: str = "dataframe"
    write_output: bool = True
    df_binary_format: str = "pickle"
    df_write_csv: bool = False
    table_cache: bool = True

    def __post_init__(self) -> None:
        if str(self.data_dir).strip() == "":
            raise ValueError("data_dir cannot be empty")
        if self.mass_function not in {"monochromatic", "lognormal", "powerlaw"}:
            raise ValueError("mass_function must be one of: monochromatic, lognormal, powerlaw")
        _check_finite_positive("mass", self.mass)
        _check_finite_positive("mass_min", self.mass_min)
        _check_finite_positive("mass_max", self.mass_max)
        if self.mass_max <= self.mass_min:
            raise ValueError("mass_max must be > mass_min")
        if self.mass_number < 1:
            raise ValueError("mass_number must be >= 1")
        _check_finite_positive("mass_sigma", self.mass_sigma)
        if not math.isfinite(self.powerlaw_index):
            raise ValueError("powerlaw_index must be finite")
        if not (0.0 <= self.spin <= SPIN_MAX):
            raise ValueError(f"spin must be within [0, {SPIN_MAX}]")
        if self.spins is not None and self.masses is None:
            raise ValueError("spins requires masses")
        if self.masses is not None:
            if len(self.masses) < 1:
                raise ValueError("masses must contain at least 1 value")
            for m in self.masses:
                _check_finite_positive("masses", m)
            if self.spins is not None:
                if len(self.spins) != len(self.masses):
                    raise ValueError("masses and spins must have the same length")
                for a in self.spins:
                    if not (0.0 <= float(a) <= SPIN_MAX):
                        raise ValueError(f"spins must be within [0, {SPIN_MAX}]")
        _check_finite_positive("e_min", self.e_min)
        _check_finite_positive("e_max", self.e_max)
        if self.e_max <= self.e_min:
            raise ValueError("e_max must be > e_min")
        if self.e_number < 2:
            raise ValueError("e_number must be >= 2")
        _check_finite_positive("out_e_min", self.out_e_min)
        _check_finite_positive("out_e_max", self.out_e_max)
        if self.out_e_max <= self.out_e_min:
            raise ValueError("out_e_max must be > out_e_min")
        if self.out_e_number < 1:
            raise ValueError("out_e_number must be >= 1")
        if len(self.regimes) < 1:
            raise ValueError("regimes must name at least one regime")
        if len(set(self.regimes)) != len(self.regimes):
            raise ValueError("regime names must be unique")
        if len(self.regime_thresholds) != len(self.regimes) - 1:
            raise ValueError("regime_thresholds must have exactly len(regimes) - 1 values")
        prev = 0.0
        for b in self.regime_thresholds:
            if not math.isfinite(float(b)) or float(b) <= prev:
                raise ValueError("regime_thresholds must be positive and strictly increasing")
            prev = float(b)
        if len(self.primaries) < 1:
            raise ValueError("primaries must name at least one particle")
        for name in tuple(self.primaries) + tuple(self.targets):
            Particle.from_name(name)
        if self.integration_steps < 1:
            raise ValueError("integration_steps must be >= 1")
        if self.rate_interpolant not in RATE_INTERPOLANTS:
            raise ValueError(f"rate_interpolant must be one of: {', '.join(RATE_INTERPOLANTS)}")
        if self.workers < 1:
            raise ValueError("workers must be >= 1")
        if self.progress_style not in {"auto", "single", "line", "compact", "off"}:
            raise ValueError("progress_style must be one of: auto, single, line, compact, off")
        if self.output_dir is not None and str(self.output_dir).strip() == "":
            raise ValueError("output_dir cannot be empty")
        if self.output_mode not in {"legacy", "dataframe", "both"}:
            raise ValueError("output_mode must be one of: legacy, dataframe, both")
        if self.df_binary_format not in {"pickle", "parquet"}:
            raise ValueError("df_binary_format must be one of: pickle, parquet")

    def input_energies(self) -> np.ndarray:
        return np.geomspace(self.e_min, self.e_max, self.e_number)

    def output_energies(self) -> np.ndarray:
        if self.out_e_number == 1:
            return np.array([self.out_e_min], dtype=float)
        return np.geomspace(self.out_e_min, self.out_e_max, self.out_e_number)

    def primary_particles(self) -> tuple[Particle, ...]:
        return tuple(Particle.from_name(n) for n in self.primaries)

    def target_particles(self) -> tuple[Particle, ...]:
        return tuple(Particle.from_name(n) for n in self.targets)
