"""Loading of greybody and yield tables from text, with a binary cache.

Directory layout under ``data_dir``::

    greybody/spin_<s>.txt          Grid2D text, rows a*, columns x
    greybody/fits_spin_<s>.txt     a*  c_low0 c_low1  c_high0 c_high1 c_high2
    yields/<regime>/<emitter>__<target>.txt
                                   Grid2D text, rows E_in, columns E_out

A Grid2D text file holds the column axis on its first line (the leading
entry is ignored) and one ``row_value v_1 ... v_n`` line per row.  Lines
starting with ``#`` are comments.  Parsing the text is slow, so the
parsed tables are cached as a single ``.npz`` keyed by a hash of the
source files.
"""

from __future__ import annotations

from dataclasses import dataclass
import hashlib
import json
import os
from pathlib import Path
from typing import Sequence
import zipfile

import numpy as np

from .catalog import Particle, SpinClass
from .errors import LoadError
from .grids import FitParameters, Grid2D
from .model_tables import ModelTables

TABLE_CACHE_VERSION = 1
GREYBODY_DIRNAME = "greybody"
YIELDS_DIRNAME = "yields"
YIELD_SEPARATOR = "__"


def grid_filename(spin_class: SpinClass) -> str:
    return f"spin_{spin_class.label}.txt"


def fits_filename(spin_class: SpinClass) -> str:
    return f"fits_spin_{spin_class.label}.txt"


def yield_filename(emitter: Particle, target: Particle) -> str:
    return f"{emitter.value}{YIELD_SEPARATOR}{target.value}.txt"


@dataclass
class TableLoader:
    data_dir: Path
    enable_table_cache: bool = True
    table_cache_dir: Path | None = None

    def __post_init__(self) -> None:
        self.data_dir = Path(self.data_dir)

    @property
    def greybody_dir(self) -> Path:
        return self.data_dir / GREYBODY_DIRNAME

    @property
    def yields_dir(self) -> Path:
        return self.data_dir / YIELDS_DIRNAME

    def _resolve_table_cache_dir(self) -> Path:
        if self.table_cache_dir is not None:
            return Path(self.table_cache_dir)
        env_dir = os.getenv("PYHAWK_TABLE_CACHE_DIR")
        if env_dir:
            return Path(env_dir).expanduser()
        return Path.home() / ".cache" / "pyhawk"

    def _read_numeric_table(self, path: Path) -> np.ndarray:
        if not path.is_file():
            raise LoadError(f"Missing table file: {path}")
        try:
            return np.loadtxt(path, ndmin=2, comments="#")
        except ValueError as exc:
            raise LoadError(f"Corrupt table file {path}: {exc}") from exc

    def _read_grid(self, path: Path) -> Grid2D:
        arr = self._read_numeric_table(path)
        if arr.shape[0] < 2 or arr.shape[1] < 2:
            raise LoadError(f"Table {path} needs a header line and at least one data row")
        # InsufficientGridError from degenerate axes propagates unchanged.
        return Grid2D(rows=arr[1:, 0], cols=arr[0, 1:], values=arr[1:, 1:])

    def available_spin_classes(self) -> list[SpinClass]:
        return [s for s in SpinClass if (self.greybody_dir / grid_filename(s)).is_file()]

    def load_fits(self, spin_class: SpinClass) -> FitParameters:
        path = self.greybody_dir / fits_filename(spin_class)
        arr = self._read_numeric_table(path)
        if arr.shape[1] != 6:
            raise LoadError(f"Fit table {path} must have 6 columns (got {arr.shape[1]})")
        return FitParameters(axis=arr[:, 0], low=arr[:, 1:3], high=arr[:, 3:6])

    def load_hybrid(self, spin_class: SpinClass) -> tuple[Grid2D, FitParameters]:
        grid = self._read_grid(self.greybody_dir / grid_filename(spin_class))
        return grid, self.load_fits(spin_class)

    def _yield_files(self, regime: str) -> list[Path]:
        regime_dir = self.yields_dir / regime
        if not regime_dir.is_dir():
            raise LoadError(f"Missing yield directory for regime {regime!r}: {regime_dir}")
        return sorted(p for p in regime_dir.glob(f"*{YIELD_SEPARATOR}*.txt") if p.is_file())

    @staticmethod
    def _parse_yield_name(path: Path) -> tuple[Particle, Particle]:
        emitter_name, _, target_name = path.stem.partition(YIELD_SEPARATOR)
        try:
            return Particle.from_name(emitter_name), Particle.from_name(target_name)
        except ValueError as exc:
            raise LoadError(f"Unrecognised yield table name {path.name}: {exc}") from exc

    def load_regime(self, regime: str) -> dict[Particle, dict[Particle, Grid2D]]:
        out: dict[Particle, dict[Particle, Grid2D]] = {}
        for path in self._yield_files(regime):
            emitter, target = self._parse_yield_name(path)
            out.setdefault(target, {})[emitter] = self._read_grid(path)
        return out

    def load_yield_table(self, regime: str, target: Particle) -> dict[Particle, Grid2D]:
        """Per-emitter yield grids producing *target* in *regime*."""
        out: dict[Particle, Grid2D] = {}
        for path in self._yield_files(regime):
            emitter, tgt = self._parse_yield_name(path)
            if tgt is target:
                out[emitter] = self._read_grid(path)
        return out

    def _table_source_files(self, regimes: Sequence[str]) -> list[Path]:
        files: list[Path] = []
        for s in self.available_spin_classes():
            files.append(self.greybody_dir / grid_filename(s))
            files.append(self.greybody_dir / fits_filename(s))
        for regime in regimes:
            files.extend(self._yield_files(regime))
        return files

    def _table_cache_token(self, regimes: Sequence[str]) -> str:
        entries: list[tuple[str, int, int]] = []
        for path in self._table_source_files(regimes):
            try:
                st = path.stat()
            except OSError as exc:
                raise LoadError(f"Missing table file: {path}") from exc
            entries.append((str(path.relative_to(self.data_dir)), int(st.st_size), int(st.st_mtime_ns)))
        payload = {
            "version": TABLE_CACHE_VERSION,
            "data_dir": str(self.data_dir.resolve()),
            "regimes": list(regimes),
            "sources": entries,
        }
        raw = json.dumps(payload, separators=(",", ":"), sort_keys=True).encode("utf-8")
        return hashlib.sha256(raw).hexdigest()[:16]

    def _table_cache_path(self, regimes: Sequence[str]) -> Path:
        token = self._table_cache_token(regimes)
        return self._resolve_table_cache_dir() / f"model_tables_v{TABLE_CACHE_VERSION}_{token}.npz"

    def _load_table_cache(self, regimes: Sequence[str]) -> ModelTables | None:
        path = self._table_cache_path(regimes)
        if not path.exists():
            return None
        try:
            with np.load(path, allow_pickle=False) as data:
                return _tables_from_arrays(dict(data.items()), tuple(regimes))
        except (OSError, ValueError, KeyError, zipfile.BadZipFile):
            return None

    def _save_table_cache(self, regimes: Sequence[str], tables: ModelTables) -> None:
        path = self._table_cache_path(regimes)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".tmp.npz")
        np.savez(tmp, **_tables_to_arrays(tables))
        tmp.replace(path)

    def parse_model_tables(self, regimes: Sequence[str]) -> ModelTables:
        greybody = {s: self.load_hybrid(s) for s in self.available_spin_classes()}
        if not greybody:
            raise LoadError(f"No greybody tables found under {self.greybody_dir}")
        yields = {regime: self.load_regime(regime) for regime in regimes}
        return ModelTables(greybody=greybody, regimes=tuple(regimes), yields=yields)

    def load_model_tables(self, regimes: Sequence[str]) -> ModelTables:
        """Load tables for *regimes*, serving repeat loads from the npz cache."""
        regimes = tuple(regimes)
        if self.enable_table_cache:
            cached = self._load_table_cache(regimes)
            if cached is not None:
                return cached

        tables = self.parse_model_tables(regimes)
        if self.enable_table_cache:
            try:
                self._save_table_cache(regimes, tables)
            except OSError:
                pass
        return tables


def _tables_to_arrays(tables: ModelTables) -> dict[str, np.ndarray]:
    payload: dict[str, np.ndarray] = {"regimes": np.array(tables.regimes, dtype=str)}
    for s, (grid, fits) in tables.greybody.items():
        payload[f"gb__{s.label}__rows"] = grid.rows
        payload[f"gb__{s.label}__cols"] = grid.cols
        payload[f"gb__{s.label}__values"] = grid.values
        payload[f"fit__{s.label}__axis"] = fits.axis
        payload[f"fit__{s.label}__low"] = fits.low
        payload[f"fit__{s.label}__high"] = fits.high
    for regime, by_target in tables.yields.items():
        for target, by_emitter in by_target.items():
            for emitter, grid in by_emitter.items():
                stem = f"y__{regime}__{emitter.value}__{target.value}"
                payload[f"{stem}__rows"] = grid.rows
                payload[f"{stem}__cols"] = grid.cols
                payload[f"{stem}__values"] = grid.values
    return payload


def _tables_from_arrays(data: dict[str, np.ndarray], regimes: tuple[str, ...]) -> ModelTables:
    if tuple(str(r) for r in data["regimes"]) != regimes:
        raise KeyError("cached regimes do not match")
    greybody: dict[SpinClass, tuple[Grid2D, FitParameters]] = {}
    yields: dict[str, dict[Particle, dict[Particle, Grid2D]]] = {r: {} for r in regimes}
    for key in data:
        if key.startswith("gb__") and key.endswith("__rows"):
            label = key[len("gb__") : -len("__rows")]
            grid = Grid2D(rows=data[key], cols=data[f"gb__{label}__cols"], values=data[f"gb__{label}__values"])
            fits = FitParameters(
                axis=data[f"fit__{label}__axis"],
                low=data[f"fit__{label}__low"],
                high=data[f"fit__{label}__high"],
            )
            greybody[SpinClass.from_label(label)] = (grid, fits)
        elif key.startswith("y__") and key.endswith("__rows"):
            stem = key[: -len("__rows")]
            head, emitter_name, target_name = stem.rsplit("__", 2)
            regime = head[len("y__") :]
            grid = Grid2D(rows=data[key], cols=data[f"{stem}__cols"], values=data[f"{stem}__values"])
            target = Particle.from_name(target_name)
            yields[regime].setdefault(target, {})[Particle.from_name(emitter_name)] = grid
    if not greybody:
        raise KeyError("cache holds no greybody tables")
    return ModelTables(greybody=greybody, regimes=regimes, yields=yields)
