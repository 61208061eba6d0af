"""Command-line driver for Hawking spectrum runs."""

# When executed as a script ``__package__`` is ``None``.  Use absolute
# imports so that the module can be run both as ``python -m pyhawk.driver``
# and ``python pyhawk/driver.py``.
from __future__ import annotations

import argparse
import json

from pyhawk.config import RunConfig
from pyhawk.constants import (
    E_MAX_DEFAULT,
    E_MIN_DEFAULT,
    E_NUMBER_DEFAULT,
    INTEGRATION_STEPS_DEFAULT,
    MASS_DEFAULT,
    OUT_E_MAX_DEFAULT,
    OUT_E_MIN_DEFAULT,
    OUT_E_NUMBER_DEFAULT,
)
from pyhawk.diagnostics import run_diagnostics
from pyhawk.engine_core import resolve_output_dir
from pyhawk.main import SpectrumModel
from pyhawk.plotting import create_diagnostic_plots


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="pyhawk", description="Compute Hawking primary and secondary spectra.")
    ap.add_argument("data_dir", help="Directory holding greybody/ and yields/ tables")

    pop = ap.add_argument_group("black holes")
    pop.add_argument("--mass-function", choices=["monochromatic", "lognormal", "powerlaw"], default="monochromatic")
    pop.add_argument("--mass", type=float, default=MASS_DEFAULT, help="Mass in grams (lognormal centre)")
    pop.add_argument("--mass-min", type=float, default=1.0e14)
    pop.add_argument("--mass-max", type=float, default=1.0e16)
    pop.add_argument("--mass-number", type=int, default=10)
    pop.add_argument("--mass-sigma", type=float, default=1.0)
    pop.add_argument("--powerlaw-index", type=float, default=-2.5)
    pop.add_argument("--spin", type=float, default=0.0)
    pop.add_argument("--masses", type=float, nargs="+", default=None, help="Explicit masses, overrides the mass function")
    pop.add_argument("--spins", type=float, nargs="+", default=None)

    grid = ap.add_argument_group("energy grids")
    grid.add_argument("--e-min", type=float, default=E_MIN_DEFAULT)
    grid.add_argument("--e-max", type=float, default=E_MAX_DEFAULT)
    grid.add_argument("--e-number", type=int, default=E_NUMBER_DEFAULT)
    grid.add_argument("--out-e-min", type=float, default=OUT_E_MIN_DEFAULT)
    grid.add_argument("--out-e-max", type=float, default=OUT_E_MAX_DEFAULT)
    grid.add_argument("--out-e-number", type=int, default=OUT_E_NUMBER_DEFAULT)

    num = ap.add_argument_group("numerics")
    num.add_argument("--primaries", nargs="+", default=None)
    num.add_argument("--targets", nargs="+", default=None)
    num.add_argument("--steps", type=int, default=INTEGRATION_STEPS_DEFAULT, help="Trapezoid steps per regime")
    num.add_argument("--interpolant", choices=["pchip", "cubic", "linear"], default="pchip")
    num.add_argument("--workers", type=int, default=1)

    out = ap.add_argument_group("output")
    out.add_argument("--output-dir", default=None)
    out.add_argument("--output-mode", choices=["legacy", "dataframe", "both"], default="dataframe")
    out.add_argument("--df-format", choices=["pickle", "parquet"], default="pickle")
    out.add_argument("--csv", action="store_true", help="Also write CSV copies of the dataframes")
    out.add_argument("--no-write", action="store_true")
    out.add_argument("--no-table-cache", action="store_true")
    out.add_argument("--progress-style", choices=["auto", "single", "line", "compact", "off"], default="auto")
    out.add_argument("--no-timing", action="store_true")
    out.add_argument("--diagnostics", action="store_true", help="Print output diagnostics after the run")
    out.add_argument("--plots", action="store_true", help="Write diagnostic plots after the run")
    return ap


def config_from_args(args: argparse.Namespace) -> RunConfig:
    extra = {}
    if args.primaries is not None:
        extra["primaries"] = tuple(args.primaries)
    if args.targets is not None:
        extra["targets"] = tuple(args.targets)
    return RunConfig(
        data_dir=args.data_dir,
        mass_function=args.mass_function,
        mass=args.mass,
        mass_min=args.mass_min,
        mass_max=args.mass_max,
        mass_number=args.mass_number,
        mass_sigma=args.mass_sigma,
        powerlaw_index=args.powerlaw_index,
        spin=args.spin,
        masses=tuple(args.masses) if args.masses is not None else None,
        spins=tuple(args.spins) if args.spins is not None else None,
        e_min=args.e_min,
        e_max=args.e_max,
        e_number=args.e_number,
        out_e_min=args.out_e_min,
        out_e_max=args.out_e_max,
        out_e_number=args.out_e_number,
        integration_steps=args.steps,
        rate_interpolant=args.interpolant,
        workers=args.workers,
        show_progress=args.progress_style != "off",
        progress_style=args.progress_style,
        profile_timing=not args.no_timing,
        output_dir=args.output_dir,
        output_mode=args.output_mode,
        write_output=not args.no_write,
        df_binary_format=args.df_format,
        df_write_csv=args.csv,
        table_cache=not args.no_table_cache,
        **extra,
    )


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    cfg = config_from_args(args)
    SpectrumModel().run(cfg, return_results=False)
    if cfg.write_output and args.diagnostics:
        print(json.dumps(run_diagnostics(resolve_output_dir(cfg)), indent=2, sort_keys=True))
    if cfg.write_output and args.plots:
        for name, path in create_diagnostic_plots(resolve_output_dir(cfg)).items():
            print(f"{name}: {path}")


if __name__ == "__main__":
    main()
