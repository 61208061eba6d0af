from __future__ import annotations

import unittest
from unittest import mock

import numpy as np

from pyhawk.catalog import Particle
from pyhawk.config import RunConfig
from pyhawk.mass_bins import MassFunctionParams, build_instances, build_mass_bins


class TestRunConfig(unittest.TestCase):
    def test_defaults_are_valid(self) -> None:
        cfg = RunConfig(data_dir="tables")
        self.assertEqual(cfg.input_energies().size, cfg.e_number)
        self.assertEqual(cfg.input_energies()[0], cfg.e_min)
        self.assertEqual(cfg.input_energies()[-1], cfg.e_max)
        self.assertEqual(len(cfg.regime_thresholds), len(cfg.regimes) - 1)
        self.assertIn(Particle.PHOTON, cfg.target_particles())
        self.assertEqual(len(cfg.primary_particles()), 16)

    def test_single_output_energy(self) -> None:
        cfg = RunConfig(data_dir="tables", out_e_number=1, out_e_min=0.3)
        np.testing.assert_array_equal(cfg.output_energies(), [0.3])

    def test_invalid_values(self) -> None:
        bad = [
            {"data_dir": ""},
            {"mass": -1.0},
            {"spin": 1.0},
            {"e_min": 10.0, "e_max": 1.0},
            {"e_number": 1},
            {"out_e_number": 0},
            {"regime_thresholds": (5.0,)},
            {"regime_thresholds": (1.0e5, 5.0)},
            {"regimes": ("low", "low", "high")},
            {"primaries": ()},
            {"targets": ("axion",)},
            {"integration_steps": 0},
            {"rate_interpolant": "akima"},
            {"workers": 0},
            {"progress_style": "fancy"},
            {"output_mode": "hdf5"},
            {"df_binary_format": "feather"},
            {"mass_function": "critical"},
            {"masses": (1.0e15,), "spins": (0.1, 0.2)},
            {"spins": (0.1,)},
        ]
        for kwargs in bad:
            kwargs = {"data_dir": "tables", **kwargs}
            with self.subTest(kwargs=kwargs):
                with self.assertRaises(ValueError):
                    RunConfig(**kwargs)


class TestMassBins(unittest.TestCase):
    def test_monochromatic(self) -> None:
        instances = build_instances(RunConfig(data_dir="tables", mass=2.0e14, spin=0.3))
        self.assertEqual(len(instances), 1)
        self.assertEqual((instances[0].mass, instances[0].spin, instances[0].weight), (2.0e14, 0.3, 1.0))

    def test_lognormal_is_normalised_and_peaked(self) -> None:
        cfg = RunConfig(data_dir="tables", mass_function="lognormal", mass=1.0e15, mass_number=21, mass_sigma=0.5)
        masses, spins, weights = build_mass_bins(cfg)
        self.assertEqual(masses.size, 21)
        self.assertAlmostEqual(float(weights.sum()), 1.0, places=12)
        self.assertEqual(int(np.argmax(weights)), 10)
        np.testing.assert_allclose(weights, weights[::-1], rtol=1.0e-9)

    def test_powerlaw_falls_with_mass(self) -> None:
        cfg = RunConfig(data_dir="tables", mass_function="powerlaw", powerlaw_index=-2.5, mass_number=5)
        masses, _, weights = build_mass_bins(cfg)
        self.assertTrue(np.all(np.diff(weights) < 0.0))
        self.assertAlmostEqual(float(weights.sum()), 1.0, places=12)
        np.testing.assert_allclose(weights[1] / weights[0], (masses[1] / masses[0]) ** -1.5, rtol=1.0e-12)

    def test_explicit_masses(self) -> None:
        cfg = RunConfig(data_dir="tables", masses=(1.0e14, 1.0e15), spins=(0.0, 0.5))
        masses, spins, weights = build_mass_bins(cfg)
        np.testing.assert_array_equal(masses, [1.0e14, 1.0e15])
        np.testing.assert_array_equal(spins, [0.0, 0.5])
        np.testing.assert_array_equal(weights, [1.0, 1.0])

    def test_unsupported_mass_function_kind(self) -> None:
        cfg = RunConfig(data_dir="tables", mass_function="lognormal")
        params = MassFunctionParams(kind="uniform", center=1.0e15, sigma=1.0, index=-2.5)
        with mock.patch("pyhawk.mass_bins._mass_function_params", return_value=params):
            with self.assertRaises(ValueError):
                build_mass_bins(cfg)


if __name__ == "__main__":
    unittest.main()
