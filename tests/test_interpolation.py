from __future__ import annotations

import unittest

import numpy as np

from pyhawk.errors import InsufficientGridError
from pyhawk.interpolation import (
    Bracket,
    Exact,
    bilinear,
    bilinear_weighted,
    interp1d,
    interp2d,
    interp2d_many,
    linear,
    locate,
    locate_many,
)


class TestLocate(unittest.TestCase):
    def setUp(self) -> None:
        self.axis = np.array([1.0, 2.0, 4.0, 8.0])

    def test_exact_and_bracket(self) -> None:
        self.assertEqual(locate(self.axis, 2.0), Exact(1))
        self.assertEqual(locate(self.axis, 3.0), Bracket(1))
        self.assertEqual(locate(self.axis, 1.0), Exact(0))
        self.assertEqual(locate(self.axis, 8.0), Exact(3))

    def test_out_of_range_clamps_to_nearest_bracket(self) -> None:
        self.assertEqual(locate(self.axis, 0.5), Bracket(0))
        self.assertEqual(locate(self.axis, 100.0), Bracket(2))

    def test_single_point_axis_is_rejected(self) -> None:
        with self.assertRaises(InsufficientGridError):
            locate([1.0], 1.0)
        with self.assertRaises(InsufficientGridError):
            locate_many([1.0], [1.0])

    def test_locate_many_fractions(self) -> None:
        idx, frac = locate_many(self.axis, [1.0, 3.0, 8.0])
        np.testing.assert_array_equal(idx, [0, 1, 2])
        np.testing.assert_allclose(frac, [0.0, 0.5, 1.0])


class TestLinear(unittest.TestCase):
    def test_one_dimensional_scenario(self) -> None:
        # 4 + (8 - 4) * (75 - 50) / (100 - 50)
        self.assertAlmostEqual(interp1d([10.0, 50.0, 100.0], [2.0, 4.0, 8.0], 75.0), 6.0, places=12)

    def test_node_hit_returns_sample(self) -> None:
        self.assertEqual(interp1d([10.0, 50.0, 100.0], [2.0, 4.0, 8.0], 50.0), 4.0)

    def test_degenerate_interval_returns_left_value(self) -> None:
        self.assertEqual(linear(1.0, 3.0, 1.0, 9.0, 1.0), 3.0)


class TestBilinear(unittest.TestCase):
    def test_unit_square_scenario(self) -> None:
        values = np.array([[1.0, 5.0], [3.0, 7.0]])
        self.assertAlmostEqual(interp2d([0.0, 1.0], [0.0, 1.0], values, 0.5, 0.5), 4.0, places=12)

    def test_order_independence(self) -> None:
        rng = np.random.default_rng(7)
        for _ in range(50):
            v = rng.uniform(-10.0, 10.0, size=4)
            r, c = rng.uniform(0.0, 3.0, size=2)
            a = bilinear(0.0, 3.0, 0.0, 3.0, *v, r, c, order="cols")
            b = bilinear(0.0, 3.0, 0.0, 3.0, *v, r, c, order="rows")
            self.assertAlmostEqual(a, b, places=10)

    def test_closed_form_matches_composition(self) -> None:
        v00, v01, v10, v11 = 1.0, 2.0, 5.0, -3.0
        fr, fc = 0.25, 0.6
        composed = bilinear(0.0, 1.0, 0.0, 1.0, v00, v01, v10, v11, fr, fc)
        # corner<x><y>: x runs along rows, y along columns
        closed = bilinear_weighted(v00, v10, v01, v11, fr, fc)
        self.assertAlmostEqual(composed, closed, places=12)

    def test_grid_nodes_are_reproduced_exactly(self) -> None:
        rows = np.array([0.0, 0.3, 1.0])
        cols = np.array([1.0, 10.0, 100.0, 1000.0])
        values = np.arange(12, dtype=float).reshape(3, 4) * 0.37
        for i, r in enumerate(rows):
            for j, c in enumerate(cols):
                self.assertEqual(interp2d(rows, cols, values, r, c), values[i, j])
        np.testing.assert_array_equal(interp2d_many(rows, cols, values, rows, cols), values)

    def test_row_and_column_linear_modes(self) -> None:
        rows = np.array([0.0, 1.0])
        cols = np.array([0.0, 2.0])
        values = np.array([[0.0, 2.0], [10.0, 12.0]])
        self.assertAlmostEqual(interp2d(rows, cols, values, 0.0, 1.0), 1.0)
        self.assertAlmostEqual(interp2d(rows, cols, values, 0.5, 0.0), 5.0)

    def test_batch_matches_pointwise(self) -> None:
        rows = np.array([1.0, 2.0, 5.0])
        cols = np.array([0.1, 0.2, 0.4, 0.8])
        values = np.outer(rows, cols) + np.arange(12).reshape(3, 4)
        r = np.array([1.0, 1.7, 3.3, 5.0])
        c = np.array([0.1, 0.15, 0.33, 0.8])
        expected = np.array([[interp2d(rows, cols, values, ri, cj) for cj in c] for ri in r])
        np.testing.assert_allclose(interp2d_many(rows, cols, values, r, c), expected, rtol=1.0e-12)


if __name__ == "__main__":
    unittest.main()
