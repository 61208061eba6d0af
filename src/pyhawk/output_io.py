"""Output writing helpers for legacy and dataframe formats."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import numpy as np

INSTANCE_COLUMNS = ["instance", "mass", "spin", "weight"]
PRIMARY_COLUMNS = INSTANCE_COLUMNS + ["particle", "energy", "rate"]
SECONDARY_COLUMNS = INSTANCE_COLUMNS + ["particle", "energy", "direct", "secondary", "total"]

INSTANCES_FILE = "BH_instances.txt"
PRIMARY_FILE = "instantaneous_primary_spectra.txt"
SECONDARY_FILE = "instantaneous_secondary_spectra.txt"
PRIMARY_DF_STEM = "primary_spectra_df"
SECONDARY_DF_STEM = "secondary_spectra_df"


def instance_dirname(index: int) -> str:
    return f"BH_{index}"


def _instance_columns(masses: np.ndarray, spins: np.ndarray, weights: np.ndarray, per_instance: int) -> dict[str, np.ndarray]:
    n_inst = masses.size
    return {
        "instance": np.repeat(np.arange(n_inst), per_instance),
        "mass": np.repeat(masses, per_instance),
        "spin": np.repeat(spins, per_instance),
        "weight": np.repeat(weights, per_instance),
    }


def build_primary_table(
    masses: np.ndarray,
    spins: np.ndarray,
    weights: np.ndarray,
    primaries: Sequence[str],
    input_energies: np.ndarray,
    primary: np.ndarray,
) -> dict[str, np.ndarray]:
    """Long table with one row per (instance, primary, input energy)."""
    n_inst, n_prim, n_e = primary.shape
    cols = _instance_columns(masses, spins, weights, n_prim * n_e)
    cols["particle"] = np.tile(np.repeat(np.asarray(primaries, dtype=str), n_e), n_inst)
    cols["energy"] = np.tile(input_energies, n_inst * n_prim)
    cols["rate"] = primary.reshape(-1)
    return cols


def build_secondary_table(
    masses: np.ndarray,
    spins: np.ndarray,
    weights: np.ndarray,
    targets: Sequence[str],
    output_energies: np.ndarray,
    direct: np.ndarray,
    total: np.ndarray,
) -> dict[str, np.ndarray]:
    """Long table with one row per (instance, target, output energy)."""
    n_inst, n_tgt, n_e = total.shape
    cols = _instance_columns(masses, spins, weights, n_tgt * n_e)
    cols["particle"] = np.tile(np.repeat(np.asarray(targets, dtype=str), n_e), n_inst)
    cols["energy"] = np.tile(output_energies, n_inst * n_tgt)
    cols["direct"] = direct.reshape(-1)
    cols["secondary"] = (total - direct).reshape(-1)
    cols["total"] = total.reshape(-1)
    return cols


def _write_spectrum_file(path: Path, energies: np.ndarray, names: Sequence[str], values: np.ndarray) -> None:
    with open(path, "w", encoding="ascii") as f:
        f.write("energy " + " ".join(names) + "\n")
        for k, e in enumerate(energies):
            f.write(" ".join(f"{v: .5e}" for v in (e, *values[:, k])) + "\n")


def _write_legacy(
    out_dir: Path,
    *,
    primaries: Sequence[str],
    targets: Sequence[str],
    masses: np.ndarray,
    spins: np.ndarray,
    weights: np.ndarray,
    input_energies: np.ndarray,
    output_energies: np.ndarray,
    primary: np.ndarray,
    total: np.ndarray,
) -> None:
    with open(out_dir / INSTANCES_FILE, "w", encoding="ascii") as f_inst:
        f_inst.write(" ".join(INSTANCE_COLUMNS) + "\n")
        for i, (m, a, w) in enumerate(zip(masses, spins, weights)):
            f_inst.write(f"{i} {m: .5e} {a: .5e} {w: .5e}\n")

    for i in range(masses.size):
        bh_dir = out_dir / instance_dirname(i)
        bh_dir.mkdir(parents=True, exist_ok=True)
        _write_spectrum_file(bh_dir / PRIMARY_FILE, input_energies, primaries, primary[i])
        _write_spectrum_file(bh_dir / SECONDARY_FILE, output_energies, targets, total[i])


def _write_dataframe(
    out_dir: Path,
    primary_table: dict[str, np.ndarray],
    secondary_table: dict[str, np.ndarray],
    *,
    binary_format: str,
    write_csv: bool,
) -> None:
    try:
        import pandas as pd
    except ImportError as exc:  # pragma: no cover
        raise RuntimeError("Dataframe output requires pandas installed") from exc

    primary_df = pd.DataFrame(primary_table, columns=PRIMARY_COLUMNS)
    secondary_df = pd.DataFrame(secondary_table, columns=SECONDARY_COLUMNS)

    if binary_format == "pickle":
        primary_df.to_pickle(out_dir / f"{PRIMARY_DF_STEM}.pkl")
        secondary_df.to_pickle(out_dir / f"{SECONDARY_DF_STEM}.pkl")
    elif binary_format == "parquet":
        primary_df.to_parquet(out_dir / f"{PRIMARY_DF_STEM}.parquet", index=False)
        secondary_df.to_parquet(out_dir / f"{SECONDARY_DF_STEM}.parquet", index=False)

    if write_csv:
        primary_df.to_csv(out_dir / f"{PRIMARY_DF_STEM}.csv", index=False)
        secondary_df.to_csv(out_dir / f"{SECONDARY_DF_STEM}.csv", index=False)


def write_outputs(
    out_dir: Path,
    *,
    output_mode: str,
    df_binary_format: str,
    df_write_csv: bool,
    primaries: Sequence[str],
    targets: Sequence[str],
    masses: np.ndarray,
    spins: np.ndarray,
    weights: np.ndarray,
    input_energies: np.ndarray,
    output_energies: np.ndarray,
    primary: np.ndarray,
    direct: np.ndarray,
    total: np.ndarray,
) -> None:
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    if output_mode in {"legacy", "both"}:
        _write_legacy(
            out_dir,
            primaries=primaries,
            targets=targets,
            masses=masses,
            spins=spins,
            weights=weights,
            input_energies=input_energies,
            output_energies=output_energies,
            primary=primary,
            total=total,
        )
    if output_mode in {"dataframe", "both"}:
        _write_dataframe(
            out_dir,
            build_primary_table(masses, spins, weights, primaries, input_energies, primary),
            build_secondary_table(masses, spins, weights, targets, output_energies, direct, total),
            binary_format=df_binary_format,
            write_csv=df_write_csv,
        )
