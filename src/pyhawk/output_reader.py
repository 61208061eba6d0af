"""Readers for legacy/dataframe spectrum outputs.

Both formats come back as long tables indexable by column name: a pandas
``DataFrame`` for dataframe outputs and a ``dict`` of arrays for legacy
text outputs.  Legacy files only store the total secondary spectrum, so
their secondary table has no ``direct``/``secondary`` columns.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np

from .output_io import (
    INSTANCES_FILE,
    PRIMARY_DF_STEM,
    PRIMARY_FILE,
    SECONDARY_DF_STEM,
    SECONDARY_FILE,
    instance_dirname,
)


def _read_spectrum_file(path: Path) -> tuple[list[str], np.ndarray]:
    with open(path, "r", encoding="ascii") as f:
        names = f.readline().split()[1:]
    return names, np.loadtxt(path, skiprows=1, ndmin=2)


def _long_rows(instances: np.ndarray, per_file: list[tuple[list[str], np.ndarray]], value_column: str) -> dict[str, np.ndarray]:
    cols: dict[str, list[np.ndarray]] = {k: [] for k in ("instance", "mass", "spin", "weight", "particle", "energy", value_column)}
    for row, (names, data) in zip(instances, per_file):
        n_e = data.shape[0]
        n_rows = n_e * len(names)
        cols["instance"].append(np.full(n_rows, int(row[0])))
        cols["mass"].append(np.full(n_rows, row[1]))
        cols["spin"].append(np.full(n_rows, row[2]))
        cols["weight"].append(np.full(n_rows, row[3]))
        cols["particle"].append(np.repeat(np.asarray(names, dtype=str), n_e))
        cols["energy"].append(np.tile(data[:, 0], len(names)))
        cols[value_column].append(data[:, 1:].T.reshape(-1))
    return {k: (np.concatenate(v) if v else np.array([])) for k, v in cols.items()}


def _read_legacy(out_dir: Path):
    instances = np.loadtxt(out_dir / INSTANCES_FILE, skiprows=1, ndmin=2)
    primary_files = []
    secondary_files = []
    for row in instances:
        bh_dir = out_dir / instance_dirname(int(row[0]))
        primary_files.append(_read_spectrum_file(bh_dir / PRIMARY_FILE))
        secondary_files.append(_read_spectrum_file(bh_dir / SECONDARY_FILE))
    return {
        "primary": _long_rows(instances, primary_files, "rate"),
        "secondary": _long_rows(instances, secondary_files, "total"),
        "format": "legacy",
    }


def _read_dataframe(out_dir: Path, binary_format: str = "pickle"):
    try:
        import pandas as pd
    except ImportError as exc:  # pragma: no cover
        raise RuntimeError("Reading dataframe outputs requires pandas installed") from exc

    if binary_format == "pickle":
        primary = pd.read_pickle(out_dir / f"{PRIMARY_DF_STEM}.pkl")
        secondary = pd.read_pickle(out_dir / f"{SECONDARY_DF_STEM}.pkl")
    else:
        primary = pd.read_parquet(out_dir / f"{PRIMARY_DF_STEM}.parquet")
        secondary = pd.read_parquet(out_dir / f"{SECONDARY_DF_STEM}.parquet")
    return {"primary": primary, "secondary": secondary, "format": "dataframe"}


def read_outputs(output_dir: str | Path, *, prefer: str = "auto", binary_format: str = "pickle"):
    out_dir = Path(output_dir)
    if prefer == "legacy":
        return _read_legacy(out_dir)
    if prefer == "dataframe":
        return _read_dataframe(out_dir, binary_format=binary_format)

    # auto
    if (out_dir / f"{PRIMARY_DF_STEM}.pkl").exists() or (out_dir / f"{PRIMARY_DF_STEM}.parquet").exists():
        fmt = "parquet" if (out_dir / f"{PRIMARY_DF_STEM}.parquet").exists() else "pickle"
        return _read_dataframe(out_dir, binary_format=fmt)
    return _read_legacy(out_dir)
