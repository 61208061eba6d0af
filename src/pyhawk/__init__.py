"""Hawking radiation spectra of Kerr black holes from tabulated greybody and yield data."""

from . import constants
from .catalog import Particle, SpinClass
from .config import RunConfig
from .diagnostics import run_diagnostics
from .emission import BlackHole, EmissionModel, hawking_temperature
from .errors import InsufficientGridError, LoadError, UnknownCategoryError
from .grids import FitParameters, Grid2D
from .hybrid_fit import HybridGridFit
from .integrator import SpectralIntegrator
from .io_routines import TableLoader
from .main import SpectrumModel, SpectrumResult
from .model_tables import ModelTables
from .output_reader import read_outputs
from .plotting import create_diagnostic_plots
from .rate_cache import RateCache
from .yield_tables import RegimeRouter, RegimeYieldTable

__all__ = [
    "constants",
    "BlackHole",
    "EmissionModel",
    "FitParameters",
    "Grid2D",
    "HybridGridFit",
    "InsufficientGridError",
    "LoadError",
    "ModelTables",
    "Particle",
    "RateCache",
    "RegimeRouter",
    "RegimeYieldTable",
    "RunConfig",
    "SpectralIntegrator",
    "SpectrumModel",
    "SpectrumResult",
    "SpinClass",
    "TableLoader",
    "UnknownCategoryError",
    "create_diagnostic_plots",
    "hawking_temperature",
    "read_outputs",
    "run_diagnostics",
]
