"""Hawking emission rates of a Kerr black hole.

The rate of a species with spin ``s`` and ``g`` internal degrees of
freedom is the thermal occupation filtered by its greybody factor::

    d2N/dtdE = g * Gamma_s(a*, x) / (2 pi hbar) / (exp(E/T) - (-1)^(2s))

with ``x = G M E / (hbar c^3)``.  Superradiant modes of a spinning hole
are folded into the tabulated ``Gamma_s``.
"""

from __future__ import annotations

from dataclasses import dataclass
import math

from .catalog import Particle
from .constants import (
    HBAR_GEV_S,
    MAX_BOLTZMANN_EXPONENT,
    SPIN_MAX,
    T_SCHWARZSCHILD_GEV_G,
)
from .hybrid_fit import HybridGridFit


def hawking_temperature(mass: float, spin: float = 0.0) -> float:
    """Compute the Hawking temperature.

    Parameters
    ----------
    mass : float
        Black-hole mass in grams.
    spin : float
        Reduced Kerr parameter ``a*`` in ``[0, 1)``.

    Returns
    -------
    float
        Temperature in GeV.  Reduces to ``1/(8 pi G M)`` for ``a* = 0``.
    """
    if mass <= 0.0:
        raise ValueError("mass must be > 0")
    if not 0.0 <= spin <= SPIN_MAX:
        raise ValueError(f"spin must be within [0, {SPIN_MAX}]")
    root = math.sqrt(1.0 - spin * spin)
    return 2.0 * (T_SCHWARZSCHILD_GEV_G / mass) * root / (1.0 + root)


def reduced_energy(energy: float, mass: float) -> float:
    """Dimensionless ``x = G M E``; equals ``E / (8 pi T)`` for a Schwarzschild hole."""
    return energy * mass / (8.0 * math.pi * T_SCHWARZSCHILD_GEV_G)


def thermal_factor(energy: float, temperature: float, spin: float) -> float:
    """Occupation ``1 / (exp(E/T) - (-1)^(2s))``."""
    z = energy / temperature
    if z > MAX_BOLTZMANN_EXPONENT:
        return 0.0
    if round(2.0 * spin) % 2 == 1:
        return 1.0 / (math.exp(z) + 1.0)
    if z <= 0.0:
        return 0.0
    return 1.0 / math.expm1(z)


@dataclass(frozen=True)
class BlackHole:
    mass: float
    spin: float = 0.0

    def __post_init__(self) -> None:
        if not (self.mass > 0.0 and math.isfinite(self.mass)):
            raise ValueError("mass must be finite and > 0")
        if not 0.0 <= self.spin <= SPIN_MAX:
            raise ValueError(f"spin must be within [0, {SPIN_MAX}]")

    @property
    def temperature(self) -> float:
        return hawking_temperature(self.mass, self.spin)


@dataclass(frozen=True)
class EmissionModel:
    """Primary emission rate of one black hole, backed by shared greybody tables."""

    greybody: HybridGridFit
    black_hole: BlackHole

    def greybody_factor(self, particle: Particle, energy: float) -> float:
        x = reduced_energy(energy, self.black_hole.mass)
        return self.greybody.query(particle.spin_class, self.black_hole.spin, x)

    def rate(self, particle: Particle, energy: float) -> float:
        """``d2N/dtdE`` in GeV^-1 s^-1; zero below the rest energy."""
        if energy <= 0.0 or energy < particle.rest_energy:
            return 0.0
        occupation = thermal_factor(energy, self.black_hole.temperature, particle.spin)
        if occupation == 0.0:
            return 0.0
        gamma = self.greybody_factor(particle, energy)
        return particle.dof * gamma * occupation / (2.0 * math.pi * HBAR_GEV_S)

    __call__ = rate
