"""Particle catalog: the closed set of emitted and observed species.

Rest energies are in GeV, ``dof`` counts the internal degrees of freedom
(spin states, colours, antiparticles) that multiply the emission rate.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SpinClass(Enum):
    """Greybody tables depend on the particle spin only."""

    SCALAR = 0.0
    FERMION = 0.5
    VECTOR = 1.0
    GRAVITON = 2.0

    @property
    def label(self) -> str:
        return f"{self.value:g}"

    @classmethod
    def from_label(cls, label: str) -> "SpinClass":
        for member in cls:
            if member.label == label:
                return member
        raise ValueError(f"Unknown spin class label: {label!r}")


@dataclass(frozen=True)
class ParticleInfo:
    mass: float
    spin: float
    dof: float


class Particle(Enum):
    PHOTON = "photon"
    GLUON = "gluon"
    HIGGS = "higgs"
    W = "W"
    Z = "Z"
    NEUTRINOS = "neutrinos"
    ELECTRON = "electron"
    MUON = "muon"
    TAU = "tau"
    UP = "up"
    DOWN = "down"
    CHARM = "charm"
    STRANGE = "strange"
    TOP = "top"
    BOTTOM = "bottom"
    GRAVITON = "graviton"
    NU_E = "nu_e"
    NU_MU = "nu_mu"
    NU_TAU = "nu_tau"
    PION = "pipm"
    K0L = "K0L"
    KAON = "Kpm"
    PROTON = "proton"
    NEUTRON = "neutron"

    @property
    def info(self) -> ParticleInfo:
        return PARTICLE_INFO[self]

    @property
    def rest_energy(self) -> float:
        return PARTICLE_INFO[self].mass

    @property
    def spin(self) -> float:
        return PARTICLE_INFO[self].spin

    @property
    def dof(self) -> float:
        return PARTICLE_INFO[self].dof

    @property
    def spin_class(self) -> SpinClass:
        return SpinClass(PARTICLE_INFO[self].spin)

    @classmethod
    def from_name(cls, name: str) -> "Particle":
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Unknown particle: {name!r}") from None


PARTICLE_INFO: dict[Particle, ParticleInfo] = {
    Particle.PHOTON: ParticleInfo(mass=0.0, spin=1.0, dof=2.0),
    # effective gluon mass: no free gluons below the QCD scale
    Particle.GLUON: ParticleInfo(mass=0.65, spin=1.0, dof=16.0),
    Particle.HIGGS: ParticleInfo(mass=125.25, spin=0.0, dof=1.0),
    Particle.W: ParticleInfo(mass=80.377, spin=1.0, dof=6.0),
    Particle.Z: ParticleInfo(mass=91.1876, spin=1.0, dof=3.0),
    Particle.NEUTRINOS: ParticleInfo(mass=0.0, spin=0.5, dof=6.0),
    Particle.ELECTRON: ParticleInfo(mass=5.109989e-4, spin=0.5, dof=4.0),
    Particle.MUON: ParticleInfo(mass=0.1056584, spin=0.5, dof=4.0),
    Particle.TAU: ParticleInfo(mass=1.77686, spin=0.5, dof=4.0),
    Particle.UP: ParticleInfo(mass=2.16e-3, spin=0.5, dof=12.0),
    Particle.DOWN: ParticleInfo(mass=4.67e-3, spin=0.5, dof=12.0),
    Particle.CHARM: ParticleInfo(mass=1.27, spin=0.5, dof=12.0),
    Particle.STRANGE: ParticleInfo(mass=0.093, spin=0.5, dof=12.0),
    Particle.TOP: ParticleInfo(mass=172.69, spin=0.5, dof=12.0),
    Particle.BOTTOM: ParticleInfo(mass=4.18, spin=0.5, dof=12.0),
    Particle.GRAVITON: ParticleInfo(mass=0.0, spin=2.0, dof=2.0),
    Particle.NU_E: ParticleInfo(mass=0.0, spin=0.5, dof=2.0),
    Particle.NU_MU: ParticleInfo(mass=0.0, spin=0.5, dof=2.0),
    Particle.NU_TAU: ParticleInfo(mass=0.0, spin=0.5, dof=2.0),
    Particle.PION: ParticleInfo(mass=0.1395704, spin=0.0, dof=2.0),
    Particle.K0L: ParticleInfo(mass=0.497611, spin=0.0, dof=1.0),
    Particle.KAON: ParticleInfo(mass=0.493677, spin=0.0, dof=2.0),
    Particle.PROTON: ParticleInfo(mass=0.9382721, spin=0.5, dof=4.0),
    Particle.NEUTRON: ParticleInfo(mass=0.9395654, spin=0.5, dof=4.0),
}

PRIMARIES: tuple[Particle, ...] = (
    Particle.PHOTON,
    Particle.GLUON,
    Particle.HIGGS,
    Particle.W,
    Particle.Z,
    Particle.NEUTRINOS,
    Particle.ELECTRON,
    Particle.MUON,
    Particle.TAU,
    Particle.UP,
    Particle.DOWN,
    Particle.CHARM,
    Particle.STRANGE,
    Particle.TOP,
    Particle.BOTTOM,
    Particle.GRAVITON,
)

SECONDARIES: tuple[Particle, ...] = (
    Particle.PHOTON,
    Particle.ELECTRON,
    Particle.MUON,
    Particle.NU_E,
    Particle.NU_MU,
    Particle.NU_TAU,
    Particle.PION,
    Particle.K0L,
    Particle.KAON,
    Particle.PROTON,
    Particle.NEUTRON,
)


def parse_particles(names) -> tuple[Particle, ...]:
    return tuple(Particle.from_name(str(n)) for n in names)


def particle_names(particles) -> tuple[str, ...]:
    return tuple(p.value for p in particles)
