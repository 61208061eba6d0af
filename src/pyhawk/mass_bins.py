"""Black-hole population setup: mass distribution and per-instance weights."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .config import RunConfig


@dataclass(frozen=True)
class BlackHoleInstance:
    mass: float
    spin: float
    weight: float


@dataclass(frozen=True)
class MassFunctionParams:
    kind: str
    center: float
    sigma: float
    index: float


def _mass_function_params(cfg: RunConfig) -> MassFunctionParams:
    return MassFunctionParams(
        kind=cfg.mass_function,
        center=float(cfg.mass),
        sigma=float(cfg.mass_sigma),
        index=float(cfg.powerlaw_index),
    )


def _lognormal_dn_dlnm(params: MassFunctionParams, masses: np.ndarray) -> np.ndarray:
    z = np.log(masses / params.center) / params.sigma
    return np.exp(-0.5 * z * z)


def _powerlaw_dn_dlnm(params: MassFunctionParams, masses: np.ndarray) -> np.ndarray:
    # dn/dM ~ M^index, and dM = M dlnM on a log-spaced grid.
    return masses ** (params.index + 1.0)


def build_mass_bins(cfg: RunConfig) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Return ``(masses, spins, weights)`` for the configured population.

    Extended distributions are sampled on ``mass_number`` log-spaced
    masses in ``[mass_min, mass_max]`` with weights summing to one.
    Explicit ``masses`` lists each get unit weight.
    """
    if cfg.masses is not None:
        masses = np.asarray(cfg.masses, dtype=float)
        if cfg.spins is None:
            spins = np.full(masses.size, float(cfg.spin))
        else:
            spins = np.asarray(cfg.spins, dtype=float)
        return masses, spins, np.ones(masses.size, dtype=float)

    params = _mass_function_params(cfg)
    if params.kind == "monochromatic":
        masses = np.array([params.center], dtype=float)
        weights = np.ones(1, dtype=float)
    else:
        masses = np.geomspace(cfg.mass_min, cfg.mass_max, cfg.mass_number)
        if params.kind == "lognormal":
            weights = _lognormal_dn_dlnm(params, masses)
        elif params.kind == "powerlaw":
            weights = _powerlaw_dn_dlnm(params, masses)
        else:
            raise ValueError(f"mass function {params.kind!r} is not supported")
        norm = float(np.sum(weights))
        if not np.isfinite(norm) or norm <= 0.0:
            raise ValueError("mass function has no weight inside [mass_min, mass_max]")
        weights = weights / norm
    spins = np.full(masses.size, float(cfg.spin))
    return masses, spins, weights


def build_instances(cfg: RunConfig) -> list[BlackHoleInstance]:
    masses, spins, weights = build_mass_bins(cfg)
    return [
        BlackHoleInstance(mass=float(m), spin=float(a), weight=float(w))
        for m, a, w in zip(masses, spins, weights)
    ]
