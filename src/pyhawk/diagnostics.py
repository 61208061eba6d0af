"""Diagnostic routines for spectrum outputs."""

from __future__ import annotations

from pathlib import Path

import numpy as np

from .output_reader import read_outputs


def _column(table, name: str) -> np.ndarray:
    col = table[name]
    if hasattr(col, "to_numpy"):
        return col.to_numpy()
    return np.asarray(col)


def diagnostics_from_tables(primary, secondary) -> dict:
    rate = _column(primary, "rate").astype(float)
    total = _column(secondary, "total").astype(float)

    checks = {
        "primary_finite": bool(np.all(np.isfinite(rate))),
        "primary_nonnegative": bool(np.all(rate >= 0.0)),
        "total_finite": bool(np.all(np.isfinite(total))),
        "total_nonnegative": bool(np.all(total >= 0.0)),
    }
    if "direct" in secondary:
        direct = _column(secondary, "direct").astype(float)
        scale = np.maximum(np.abs(direct), 1.0e-300)
        checks["total_ge_direct"] = bool(np.all(total - direct >= -1.0e-12 * scale))

    instances = _column(secondary, "instance")
    return {
        "n_instances": int(np.unique(instances).size),
        "n_primary_rows": int(rate.size),
        "n_secondary_rows": int(total.size),
        "max_primary_rate": float(np.max(rate)) if rate.size else 0.0,
        "max_total": float(np.max(total)) if total.size else 0.0,
        "checks": checks,
        "all_checks_pass": bool(all(checks.values())),
    }


def run_diagnostics(output_dir: str | Path, *, prefer: str = "auto", binary_format: str = "pickle") -> dict:
    payload = read_outputs(output_dir, prefer=prefer, binary_format=binary_format)
    diag = diagnostics_from_tables(payload["primary"], payload["secondary"])
    diag["format"] = payload["format"]
    return diag
