"""Serial frontend for spectrum engine execution."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .config import RunConfig
from .engine_core import SharedInputs, run_spectra_loop
from .mass_bins import BlackHoleInstance


def run_spectra_serial(
    shared: SharedInputs,
    cfg: RunConfig,
    instances: Sequence[BlackHoleInstance],
) -> dict[str, np.ndarray]:
    return run_spectra_loop(shared, cfg, instances, map_fn=map, frontend="serial")
