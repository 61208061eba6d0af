"""Engine dispatcher for spectrum execution."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .config import RunConfig
from .engine_core import SharedInputs
from .engine_serial import run_spectra_serial
from .engine_threads import run_spectra_threads
from .mass_bins import BlackHoleInstance


def run_spectra(
    shared: SharedInputs,
    cfg: RunConfig,
    instances: Sequence[BlackHoleInstance],
) -> dict[str, np.ndarray]:
    """Dispatch spectrum execution to the serial or threaded frontend."""
    if cfg.workers > 1 and len(instances) > 1:
        return run_spectra_threads(shared, cfg, instances)
    else:
        return run_spectra_serial(shared, cfg, instances)
