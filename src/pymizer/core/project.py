"""
Projection of size-spectrum models through time.

project() runs the size-based model simulation: once per internal time
step it evaluates the rates from the current state, advances the species
spectra with the implicit upwind solver and the background spectrum with
the semi-chemostat solution, and stores the state every t_save.
"""

from __future__ import annotations

from typing import Callable, Optional

import numpy as np

from pymizer.core.constants import DEFAULT_DT, DEFAULT_T_MAX, DEFAULT_T_SAVE
from pymizer.core.effort import EffortSpec, regularize_effort
from pymizer.core.exceptions import ConfigurationError, NumericalError
from pymizer.core.params import MizerParams
from pymizer.core.rates import Rates, compute_rates
from pymizer.core.sim import MizerSim
from pymizer.core.solver import project_n, update_background
from pymizer.logger import get_logger

logger = get_logger(__name__)

RateFunction = Callable[[MizerParams, np.ndarray, np.ndarray, np.ndarray], Rates]
ProgressCallback = Callable[[float], None]


def _initial_state(
    params: MizerParams,
    initial_n: Optional[np.ndarray],
    initial_n_pp: Optional[np.ndarray],
):
    n = params.initial_n if initial_n is None else initial_n
    n_pp = params.initial_n_pp if initial_n_pp is None else initial_n_pp
    n = np.array(n, dtype=float)
    n_pp = np.array(n_pp, dtype=float)

    if n.ndim == 1 and params.no_sp == 1:
        n = n[None, :]
    if n.shape != (params.no_sp, params.no_w):
        raise ConfigurationError(
            f"initial_n has shape {n.shape}, expected (species x size) = "
            f"{(params.no_sp, params.no_w)}"
        )
    if n_pp.shape != (params.no_w_full,):
        raise ConfigurationError(
            f"initial_n_pp has length {n_pp.shape}, expected {params.no_w_full} "
            f"(the length of w_full)"
        )
    return n, n_pp


def project(
    params: MizerParams,
    effort: EffortSpec = 0.0,
    t_max: float = DEFAULT_T_MAX,
    dt: float = DEFAULT_DT,
    t_save: float = DEFAULT_T_SAVE,
    initial_n: Optional[np.ndarray] = None,
    initial_n_pp: Optional[np.ndarray] = None,
    progress: Optional[ProgressCallback] = None,
    rate_function: RateFunction = compute_rates,
) -> MizerSim:
    """Project the size-based model through time.

    Parameters
    ----------
    params : MizerParams
        Model parameters
    effort : float, sequence, dict, pd.Series or pd.DataFrame
        Effort of the fishing gears through time:
        - A single number: all gears fish at this constant effort
        - A vector with one value per gear (named by gear, or in the
          order of params.gear_names): constant effort per gear
        - A DataFrame indexed by time with one column per gear. The
          effort for a time is used from that time to the next listed
          time. The first time is the start of the simulation and the
          last time its end; t_max is ignored.
    t_max : float
        End time for constant effort (the simulation starts at 0)
    dt : float
        Time step of the solver
    t_save : float
        Interval between stored snapshots; must be a multiple of dt
    initial_n : np.ndarray, optional
        Initial species densities (species x size). Default
        params.initial_n.
    initial_n_pp : np.ndarray, optional
        Initial background spectrum (length of params.w_full). Default
        params.initial_n_pp.
    progress : callable, optional
        Called with the completed fraction each time a snapshot is stored
    rate_function : callable
        Computes the Rates of a step from (params, n, n_pp, effort)

    Returns
    -------
    MizerSim
        Stored snapshots. If a step fails, the exception propagates and
        nothing is returned.

    Raises
    ------
    ConfigurationError
        If the effort, the time settings or the initial state are invalid
    ParamsError
        If the parameters are incomplete
    NumericalError
        If a step produces non-finite densities

    Examples
    --------
    >>> sim = project(params, effort=0.5, t_max=20)
    >>> effort = {'Industrial': 0, 'Pelagic': 1, 'Beam': 0.5, 'Otter': 0.5}
    >>> sim = project(params, effort=effort, t_max=20)
    """
    params.validate()

    schedule = regularize_effort(params.gear_names, effort, t_max=t_max, dt=dt)
    save_idx = schedule.save_indices(t_save)
    n, n_pp = _initial_state(params, initial_n, initial_n_pp)

    # Make the MizerSim object with the right size; only every t_save is stored
    sim = MizerSim.empty(params, schedule.times[save_idx])
    sim.effort[:] = schedule.effort[save_idx]

    n_saves = len(save_idx)
    # Save point of each internal time index, -1 where nothing is stored
    save_slot = np.full(schedule.n_times, -1, dtype=int)
    save_slot[save_idx] = np.arange(n_saves)

    sim.store(0, n, n_pp)
    if progress is not None:
        progress(1.0 / n_saves)

    w_min_idx = params.w_min_idx
    t_steps = schedule.n_steps
    logger.info(
        f"Projecting {params.no_sp} species from t={schedule.times[0]:g} to "
        f"t={schedule.times[-1]:g} ({t_steps} steps of dt={dt}, {n_saves} saves)"
    )

    for i_time in range(t_steps):
        rates = rate_function(params, n, n_pp, schedule.row(i_time))

        n = project_n(n, rates.e_growth, rates.z, rates.rdd, params.dw, w_min_idx, dt)
        n_pp = update_background(n_pp, params.rr_pp, params.cc_pp, rates.m2_background, dt)

        t = schedule.times[i_time + 1]
        if not (np.all(np.isfinite(n)) and np.all(np.isfinite(n_pp))):
            raise NumericalError(
                f"Non-finite densities after step {i_time + 1} (t={t:g})",
                step=i_time + 1,
                time=float(t),
            )

        slot = save_slot[i_time + 1]
        if slot >= 0:
            sim.store(slot, n, n_pp)
            logger.debug(f"Stored snapshot {slot + 1}/{n_saves} at t={t:g}")
            if progress is not None:
                progress((slot + 1) / n_saves)

    logger.info(f"Projection finished at t={schedule.times[-1]:g}")
    return sim
