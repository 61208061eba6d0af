from __future__ import annotations

import math
import unittest

from pyhawk.catalog import PRIMARIES, Particle, SpinClass, parse_particles
from pyhawk.constants import HBAR_GEV_S
from pyhawk.emission import BlackHole, EmissionModel, hawking_temperature, reduced_energy, thermal_factor
from pyhawk.hybrid_fit import HybridGridFit

from synthetic_tables import geometric_greybody, greybody_tables


class TestCatalog(unittest.TestCase):
    def test_particle_properties(self) -> None:
        self.assertEqual(Particle.from_name("photon"), Particle.PHOTON)
        self.assertEqual(Particle.ELECTRON.spin_class, SpinClass.FERMION)
        self.assertEqual(Particle.GRAVITON.spin_class, SpinClass.GRAVITON)
        self.assertEqual(Particle.PION.spin_class, SpinClass.SCALAR)
        self.assertEqual(SpinClass.from_label("0.5"), SpinClass.FERMION)
        self.assertEqual(len(PRIMARIES), 16)
        self.assertEqual(parse_particles(["W", "Z"]), (Particle.W, Particle.Z))
        with self.assertRaises(ValueError):
            Particle.from_name("axion")


class TestTemperature(unittest.TestCase):
    def test_schwarzschild_temperature(self) -> None:
        self.assertAlmostEqual(hawking_temperature(1.0e13), 1.0573, places=12)
        self.assertAlmostEqual(hawking_temperature(1.0e15) * 100.0, 1.0573, places=12)

    def test_spin_cools_the_hole(self) -> None:
        self.assertLess(hawking_temperature(1.0e15, 0.9), hawking_temperature(1.0e15, 0.0))

    def test_invalid_parameters(self) -> None:
        with self.assertRaises(ValueError):
            hawking_temperature(0.0)
        with self.assertRaises(ValueError):
            hawking_temperature(1.0e15, 1.0)
        with self.assertRaises(ValueError):
            BlackHole(mass=-1.0)

    def test_reduced_energy_matches_temperature(self) -> None:
        mass = 3.0e14
        e = 0.7
        self.assertAlmostEqual(reduced_energy(e, mass), e / (8.0 * math.pi * hawking_temperature(mass)))


class TestThermalFactor(unittest.TestCase):
    def test_statistics(self) -> None:
        self.assertAlmostEqual(thermal_factor(1.0e-12, 1.0, 0.5), 0.5)
        self.assertAlmostEqual(thermal_factor(1.0, 1.0, 1.0), 1.0 / (math.e - 1.0))
        self.assertAlmostEqual(thermal_factor(1.0, 1.0, 0.5), 1.0 / (math.e + 1.0))
        self.assertEqual(thermal_factor(1.0e4, 1.0, 0.0), 0.0)


class TestEmissionModel(unittest.TestCase):
    def setUp(self) -> None:
        self.greybody = HybridGridFit.from_tables(greybody_tables())
        self.model = EmissionModel(self.greybody, BlackHole(mass=1.0e15, spin=0.0))

    def test_rate_formula(self) -> None:
        # below the tabulated x range, where the greybody is exactly 27 x^2
        e = 1.0e-3
        t = self.model.black_hole.temperature
        x = reduced_energy(e, 1.0e15)
        expected = 2.0 * float(geometric_greybody(x)) / (2.0 * math.pi * HBAR_GEV_S) / math.expm1(e / t)
        self.assertTrue(math.isclose(self.model.rate(Particle.PHOTON, e), expected, rel_tol=1.0e-9))

    def test_zero_below_rest_energy(self) -> None:
        self.assertEqual(self.model.rate(Particle.ELECTRON, 1.0e-4), 0.0)
        self.assertGreater(self.model.rate(Particle.ELECTRON, 1.0e-2), 0.0)
        self.assertEqual(self.model(Particle.PHOTON, 0.0), 0.0)

    def test_boltzmann_tail_vanishes(self) -> None:
        self.assertEqual(self.model.rate(Particle.PHOTON, 1.0e3), 0.0)


if __name__ == "__main__":
    unittest.main()
