"""
pymizer - Python multi-species size spectrum modelling

A Python implementation of the mizer size-based fish community model.
"""

__version__ = "0.1.0"
__author__ = "pymizer Development Team"

# Core imports
from pymizer.core.exceptions import (
    MizerError,
    ConfigurationError,
    ParamsError,
    NumericalError,
)
from pymizer.core.params import MizerParams, mizer_params
from pymizer.core.initial import get_initial_n
from pymizer.core.effort import EffortSchedule, regularize_effort
from pymizer.core.sim import MizerSim, Snapshot
from pymizer.core.project import project

__all__ = [
    # Version
    "__version__",
    "__author__",
    # Errors
    "MizerError",
    "ConfigurationError",
    "ParamsError",
    "NumericalError",
    # Parameters
    "MizerParams",
    "mizer_params",
    "get_initial_n",
    # Projection
    "EffortSchedule",
    "regularize_effort",
    "MizerSim",
    "Snapshot",
    "project",
]
