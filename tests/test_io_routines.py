from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

import numpy as np

from pyhawk.catalog import Particle, SpinClass
from pyhawk.constants import REGIMES_DEFAULT
from pyhawk.errors import InsufficientGridError, LoadError
from pyhawk.io_routines import TableLoader, yield_filename

from synthetic_tables import model_tables, write_tables


class TestTableLoader(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.expected = model_tables()
        self.data_dir = write_tables(self.root / "data", self.expected)
        self.cache_dir = self.root / "cache"
        self.loader = TableLoader(self.data_dir, table_cache_dir=self.cache_dir)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def assertTablesEqual(self, got, expected) -> None:
        self.assertEqual(set(got.greybody), set(expected.greybody))
        for s, (grid, fits) in expected.greybody.items():
            g_grid, g_fits = got.greybody[s]
            np.testing.assert_array_equal(g_grid.rows, grid.rows)
            np.testing.assert_array_equal(g_grid.cols, grid.cols)
            np.testing.assert_array_equal(g_grid.values, grid.values)
            np.testing.assert_array_equal(g_fits.low, fits.low)
            np.testing.assert_array_equal(g_fits.high, fits.high)
        self.assertEqual(tuple(got.regimes), tuple(expected.regimes))
        for regime in expected.regimes:
            exp_regime = expected.yields.get(regime, {})
            self.assertEqual(set(got.yields[regime]), set(exp_regime))
            for target, by_emitter in exp_regime.items():
                self.assertEqual(set(got.yields[regime][target]), set(by_emitter))
                for emitter, grid in by_emitter.items():
                    np.testing.assert_array_equal(got.yields[regime][target][emitter].values, grid.values)
                    np.testing.assert_array_equal(got.yields[regime][target][emitter].rows, grid.rows)

    def test_load_hybrid(self) -> None:
        grid, fits = self.loader.load_hybrid(SpinClass.VECTOR)
        exp_grid, exp_fits = self.expected.greybody[SpinClass.VECTOR]
        np.testing.assert_array_equal(grid.cols, exp_grid.cols)
        np.testing.assert_array_equal(grid.values, exp_grid.values)
        np.testing.assert_array_equal(fits.axis, exp_fits.axis)

    def test_load_yield_table(self) -> None:
        by_emitter = self.loader.load_yield_table("low", Particle.PHOTON)
        self.assertEqual(set(by_emitter), {Particle.PHOTON, Particle.ELECTRON})
        self.assertEqual(self.loader.load_yield_table("high", Particle.PHOTON), {})

    def test_text_load_and_cache_round_trip(self) -> None:
        tables = self.loader.load_model_tables(REGIMES_DEFAULT)
        self.assertTablesEqual(tables, self.expected)
        cached = list(self.cache_dir.glob("model_tables_v1_*.npz"))
        self.assertEqual(len(cached), 1)
        from_cache = self.loader._load_table_cache(REGIMES_DEFAULT)
        self.assertIsNotNone(from_cache)
        self.assertTablesEqual(from_cache, self.expected)
        self.assertTablesEqual(self.loader.load_model_tables(REGIMES_DEFAULT), self.expected)

    def test_corrupt_cache_is_rebuilt(self) -> None:
        self.loader.load_model_tables(REGIMES_DEFAULT)
        (cache_file,) = self.cache_dir.glob("model_tables_v1_*.npz")
        cache_file.write_bytes(b"not an npz archive")
        self.assertIsNone(self.loader._load_table_cache(REGIMES_DEFAULT))
        self.assertTablesEqual(self.loader.load_model_tables(REGIMES_DEFAULT), self.expected)

    def test_cache_disabled(self) -> None:
        loader = TableLoader(self.data_dir, enable_table_cache=False, table_cache_dir=self.cache_dir)
        loader.load_model_tables(REGIMES_DEFAULT)
        self.assertFalse(self.cache_dir.exists())

    def test_missing_regime_directory(self) -> None:
        with self.assertRaises(LoadError):
            self.loader.load_model_tables(("low", "ultra"))

    def test_missing_greybody_file(self) -> None:
        (self.data_dir / "greybody" / "fits_spin_1.txt").unlink()
        with self.assertRaises(LoadError):
            self.loader.load_hybrid(SpinClass.VECTOR)

    def test_no_greybody_tables(self) -> None:
        for path in (self.data_dir / "greybody").glob("*.txt"):
            path.unlink()
        with self.assertRaises(LoadError):
            self.loader.parse_model_tables(REGIMES_DEFAULT)

    def test_corrupt_yield_file(self) -> None:
        path = self.data_dir / "yields" / "low" / yield_filename(Particle.ELECTRON, Particle.PHOTON)
        path.write_text("0 1 2\n1 x 3\n", encoding="ascii")
        with self.assertRaises(LoadError):
            self.loader.load_regime("low")

    def test_unknown_particle_in_file_name(self) -> None:
        (self.data_dir / "yields" / "low" / "axion__photon.txt").write_text("0 1 2\n1 1 1\n2 1 1\n", encoding="ascii")
        with self.assertRaises(LoadError):
            self.loader.load_regime("low")

    def test_degenerate_axis(self) -> None:
        path = self.data_dir / "yields" / "mid" / yield_filename(Particle.PHOTON, Particle.ELECTRON)
        path.write_text("0 1 2\n1 1 1\n", encoding="ascii")
        with self.assertRaises(InsufficientGridError):
            self.loader.load_regime("mid")


if __name__ == "__main__":
    unittest.main()
