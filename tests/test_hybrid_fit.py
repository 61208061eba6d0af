from __future__ import annotations

import unittest

import numpy as np

from pyhawk.catalog import SpinClass
from pyhawk.errors import UnknownCategoryError
from pyhawk.grids import FitParameters, Grid2D
from pyhawk.hybrid_fit import HybridGridFit, fit_coefficients, high_range_fit, low_range_fit

from synthetic_tables import X_AXIS, geometric_greybody, greybody_tables


class TestFits(unittest.TestCase):
    def test_closed_forms(self) -> None:
        self.assertAlmostEqual(low_range_fit([np.log(3.0), 2.0], 0.5), 0.75)
        self.assertEqual(low_range_fit([1.0, 2.0], 0.0), 0.0)
        self.assertAlmostEqual(high_range_fit([2.0, -1.0, 0.5], 3.0), 15.5)

    def test_coefficients_interpolate_and_clamp_in_spin(self) -> None:
        axis = np.array([0.0, 1.0])
        table = np.array([[0.0, 1.0], [2.0, 3.0]])
        np.testing.assert_allclose(fit_coefficients(axis, table, 0.5), [1.0, 2.0])
        np.testing.assert_allclose(fit_coefficients(axis, table, 2.0), [2.0, 3.0])
        np.testing.assert_allclose(fit_coefficients(axis, table, 0.0), [0.0, 1.0])


class TestHybridGridFit(unittest.TestCase):
    def setUp(self) -> None:
        self.fit = HybridGridFit.from_tables(greybody_tables())
        self.x_lo = float(X_AXIS[0])
        self.x_hi = float(X_AXIS[-1])

    def test_grid_nodes(self) -> None:
        for x in X_AXIS:
            self.assertAlmostEqual(self.fit.query(SpinClass.VECTOR, 0.5, x), float(geometric_greybody(x)), places=10)

    def test_fit_regions(self) -> None:
        for x in (1.0e-4, 1.0e-3, 20.0, 300.0):
            np.testing.assert_allclose(self.fit.query(SpinClass.FERMION, 0.2, x), geometric_greybody(x), rtol=1.0e-12)
        self.assertEqual(self.fit.query(SpinClass.FERMION, 0.2, 0.0), 0.0)

    def test_continuous_across_grid_edges(self) -> None:
        for edge in (self.x_lo, self.x_hi):
            inside = self.fit.query(SpinClass.SCALAR, 0.0, edge)
            for outside in (edge * (1.0 - 1.0e-9), edge * (1.0 + 1.0e-9)):
                val = self.fit.query(SpinClass.SCALAR, 0.0, outside)
                np.testing.assert_allclose(val, inside, rtol=1.0e-6)

    def test_spin_outside_grid_is_clamped(self) -> None:
        x = float(X_AXIS[3])
        self.assertAlmostEqual(self.fit.query(SpinClass.VECTOR, 5.0, x), self.fit.query(SpinClass.VECTOR, 0.99, x))

    def test_negative_energy_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            self.fit.query(SpinClass.VECTOR, 0.0, -1.0)

    def test_unknown_category(self) -> None:
        tables = greybody_tables()
        only_vector = HybridGridFit.from_tables({SpinClass.VECTOR: tables[SpinClass.VECTOR]})
        self.assertIn(SpinClass.VECTOR, only_vector)
        self.assertNotIn(SpinClass.SCALAR, only_vector)
        with self.assertRaises(UnknownCategoryError):
            only_vector.query(SpinClass.SCALAR, 0.0, 1.0)

    def test_spin_dependence_on_grid(self) -> None:
        grid = Grid2D(rows=[0.0, 1.0], cols=[1.0, 2.0], values=[[1.0, 2.0], [3.0, 4.0]])
        fits = FitParameters(axis=[0.0, 1.0], low=[[0.0, 1.0], [0.0, 1.0]], high=[[0.0, 1.0, 0.0], [0.0, 1.0, 0.0]])
        fit = HybridGridFit.from_tables({SpinClass.SCALAR: (grid, fits)})
        self.assertAlmostEqual(fit.query(SpinClass.SCALAR, 0.5, 1.5), 2.5)


class TestGridContainers(unittest.TestCase):
    def test_identity_equality_and_hashing(self) -> None:
        grid = Grid2D(rows=[0.0, 1.0], cols=[1.0, 2.0], values=[[1.0, 2.0], [3.0, 4.0]])
        twin = Grid2D(rows=[0.0, 1.0], cols=[1.0, 2.0], values=[[1.0, 2.0], [3.0, 4.0]])
        fits = FitParameters(axis=[0.0, 1.0], low=[[0.0, 1.0], [0.0, 1.0]], high=[[0.0, 1.0, 0.0], [0.0, 1.0, 0.0]])
        self.assertEqual(grid, grid)
        self.assertNotEqual(grid, twin)
        self.assertEqual(len({grid, twin, fits}), 3)
        self.assertIn(fits, {fits: "spin 0"})


if __name__ == "__main__":
    unittest.main()
