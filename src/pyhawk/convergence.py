"""Utilities to validate the secondary-integration step count."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, replace
import json

import numpy as np

from .config import RunConfig
from .main import SpectrumModel


@dataclass
class ConvergenceResult:
    steps_test: int
    steps_ref: int
    n_points: int
    max_rel_diff: float
    p95_rel_diff: float
    mean_rel_diff: float


def relative_differences(test: np.ndarray, ref: np.ndarray, *, floor: float = 1.0e-300) -> np.ndarray:
    """``|test - ref| / |ref|`` over entries where the reference is non-zero."""
    test = np.asarray(test, dtype=float).ravel()
    ref = np.asarray(ref, dtype=float).ravel()
    mask = np.isfinite(test) & np.isfinite(ref) & (np.abs(ref) > floor)
    return np.abs(test[mask] - ref[mask]) / np.abs(ref[mask])


def validate_integration_steps(
    cfg: RunConfig,
    *,
    steps_test: int,
    steps_ref: int = 1000,
    model: SpectrumModel | None = None,
) -> ConvergenceResult:
    if steps_test < 1 or steps_ref < 1:
        raise ValueError("step counts must be >= 1")

    model = model if model is not None else SpectrumModel()
    base = replace(cfg, write_output=False, show_progress=False, profile_timing=False)
    ref = model.run(replace(base, integration_steps=steps_ref))
    test = model.run(replace(base, integration_steps=steps_test))
    assert ref is not None and test is not None

    d = relative_differences(test.secondary(), ref.secondary())
    if d.size == 0:
        return ConvergenceResult(steps_test, steps_ref, 0, 0.0, 0.0, 0.0)
    return ConvergenceResult(
        steps_test=steps_test,
        steps_ref=steps_ref,
        n_points=int(d.size),
        max_rel_diff=float(np.max(d)),
        p95_rel_diff=float(np.percentile(d, 95.0)),
        mean_rel_diff=float(np.mean(d)),
    )


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="Compare secondary spectra at a test step count against a reference.")
    ap.add_argument("data_dir", help="Table directory")
    ap.add_argument("--steps-test", type=int, required=True, help="Step count to test")
    ap.add_argument("--steps-ref", type=int, default=1000, help="Reference step count")
    ap.add_argument("--mass", type=float, default=1.0e15)
    ap.add_argument("--spin", type=float, default=0.0)
    ap.add_argument("--out-e-number", type=int, default=50)
    args = ap.parse_args(argv)

    cfg = RunConfig(data_dir=args.data_dir, mass=args.mass, spin=args.spin, out_e_number=args.out_e_number)
    res = validate_integration_steps(cfg, steps_test=args.steps_test, steps_ref=args.steps_ref)
    print(json.dumps(res.__dict__, indent=2, sort_keys=True))


if __name__ == "__main__":
    main()
