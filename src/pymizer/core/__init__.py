"""
Core module for pymizer.

Contains the model parameters, rate functions and the projection engine.
"""

from pymizer.core.exceptions import (
    MizerError,
    ConfigurationError,
    ParamsError,
    NumericalError,
)
from pymizer.core.params import MizerParams, mizer_params, beverton_holt
from pymizer.core.initial import get_initial_n
from pymizer.core.rates import Rates, compute_rates
from pymizer.core.effort import EffortSchedule, regularize_effort
from pymizer.core.solver import project_n, update_background
from pymizer.core.sim import MizerSim, Snapshot
from pymizer.core.project import project

__all__ = [
    # Errors
    "MizerError",
    "ConfigurationError",
    "ParamsError",
    "NumericalError",
    # Parameters
    "MizerParams",
    "mizer_params",
    "beverton_holt",
    "get_initial_n",
    # Rates
    "Rates",
    "compute_rates",
    # Projection
    "EffortSchedule",
    "regularize_effort",
    "project_n",
    "update_background",
    "MizerSim",
    "Snapshot",
    "project",
]
