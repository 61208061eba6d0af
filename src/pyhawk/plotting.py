"""Diagnostic plotting utilities for Hawking spectrum outputs."""

from __future__ import annotations

from pathlib import Path

import numpy as np

from .output_io import instance_dirname
from .output_reader import read_outputs


def _column(table, name: str) -> np.ndarray:
    col = table[name]
    if hasattr(col, "to_numpy"):
        return col.to_numpy()
    return np.asarray(col)


def _plot_spectra(ax, table, instance: int, value_column: str) -> None:
    inst = _column(table, "instance").astype(int)
    particles = _column(table, "particle").astype(str)
    energy = _column(table, "energy").astype(float)
    values = _column(table, value_column).astype(float)
    sel = inst == instance
    for name in dict.fromkeys(particles[sel]):
        m = sel & (particles == name)
        y = values[m]
        if not np.any(y > 0.0):
            continue
        ax.plot(energy[m], np.where(y > 0.0, y, np.nan), lw=1.4, label=name)
    ax.set_xscale("log")
    ax.set_yscale("log")
    ax.set_xlabel("E [GeV]")
    ax.set_ylabel("d2N/dtdE [GeV^-1 s^-1]")
    ax.grid(alpha=0.3)


def create_diagnostic_plots(
    output_dir: str | Path,
    *,
    plot_dir: str | Path | None = None,
    prefer: str = "auto",
    binary_format: str = "pickle",
) -> dict[str, str]:
    """Plot primary and total secondary spectra for each black-hole instance.

    Returns mapping of plot names to file paths.
    """
    try:
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except ImportError as exc:  # pragma: no cover
        raise RuntimeError("Plotting requires matplotlib") from exc

    payload = read_outputs(output_dir, prefer=prefer, binary_format=binary_format)
    primary = payload["primary"]
    secondary = payload["secondary"]

    out = Path(plot_dir) if plot_dir is not None else (Path(output_dir) / "plots")
    out.mkdir(parents=True, exist_ok=True)

    written: dict[str, str] = {}
    for i in np.unique(_column(secondary, "instance").astype(int)):
        fig, axes = plt.subplots(1, 2, figsize=(11, 4))
        _plot_spectra(axes[0], primary, int(i), "rate")
        axes[0].set_title("Primary Spectra")
        _plot_spectra(axes[1], secondary, int(i), "total")
        axes[1].set_title("Secondary Spectra")
        for ax in axes:
            if ax.get_legend_handles_labels()[0]:
                ax.legend(frameon=False, fontsize=7, ncol=2)
        name = f"{instance_dirname(int(i))}_spectra"
        p = out / f"{name}.png"
        fig.tight_layout()
        fig.savefig(p, dpi=140)
        plt.close(fig)
        written[name] = str(p)
    return written
