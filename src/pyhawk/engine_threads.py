"""Thread-pool frontend for spectrum engine execution.

Instances share the immutable tables and routers; each worker builds its
own emission model, rate cache and integrator.  ``Executor.map`` yields
results in submission order, so output does not depend on scheduling.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

import numpy as np

from .config import RunConfig
from .engine_core import SharedInputs, run_spectra_loop
from .mass_bins import BlackHoleInstance


def run_spectra_threads(
    shared: SharedInputs,
    cfg: RunConfig,
    instances: Sequence[BlackHoleInstance],
) -> dict[str, np.ndarray]:
    with ThreadPoolExecutor(max_workers=cfg.workers) as pool:
        return run_spectra_loop(shared, cfg, instances, map_fn=pool.map, frontend=f"threads({cfg.workers})")
