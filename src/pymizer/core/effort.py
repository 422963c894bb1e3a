"""
Fishing effort schedules for projections.

Effort can be given in three shapes:
1. A single number: every gear fishes at the same constant effort
2. A per-gear vector (dict, Series or sequence): constant through time
3. A time x gear DataFrame: effort changes at the listed times

All three are normalized once, before a projection starts, into an
EffortSchedule holding one effort row per internal time step of size dt.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Sequence, Union

import numpy as np
import pandas as pd

from pymizer.core.constants import DEFAULT_DT, DEFAULT_T_MAX, T_SAVE_TOLERANCE, TIME_GRID_SLACK
from pymizer.core.exceptions import ConfigurationError
from pymizer.logger import get_logger

logger = get_logger(__name__)

EffortSpec = Union[float, int, Sequence[float], np.ndarray, Mapping[str, float], pd.Series, pd.DataFrame]


def _time_grid(t_start: float, t_end: float, dt: float) -> np.ndarray:
    """Times from t_start to t_end (inclusive up to rounding) spaced by dt."""
    if not np.isfinite(dt) or dt <= 0:
        raise ConfigurationError(f"dt must be a positive number, got {dt}")
    if t_end < t_start:
        raise ConfigurationError(f"t_max ({t_end}) must not be smaller than the start time ({t_start})")
    n_steps = int(np.floor((t_end - t_start) / dt + TIME_GRID_SLACK))
    return t_start + np.arange(n_steps + 1) * dt


def _check_finite(values: np.ndarray) -> None:
    if not np.all(np.isfinite(values)):
        raise ConfigurationError("Effort values must be finite numbers")


def _missing_gears_message(gear_names: Sequence[str], effort_gears: Sequence[str], where: str) -> str:
    return (
        f"Gear names in the MizerParams object ({', '.join(gear_names)}) "
        f"do not match those in the effort {where} ({', '.join(map(str, effort_gears))})."
    )


@dataclass
class EffortSchedule:
    """Effort of each gear at every internal time step.

    Attributes
    ----------
    times : np.ndarray
        Time of each row, spaced by dt
    effort : np.ndarray
        Effort matrix (n_times x n_gears), columns in canonical gear order
    gear_names : list of str
        Gear names in canonical order
    dt : float
        Spacing of the time grid
    """

    times: np.ndarray
    effort: np.ndarray
    gear_names: List[str]
    dt: float

    @property
    def n_times(self) -> int:
        return len(self.times)

    @property
    def n_steps(self) -> int:
        """Number of internal time steps between the first and last row."""
        return self.n_times - 1

    def row(self, i: int) -> np.ndarray:
        """Effort in force from times[i] to times[i+1]."""
        return self.effort[i]

    def to_frame(self) -> pd.DataFrame:
        """Return the schedule as a DataFrame indexed by time."""
        frame = pd.DataFrame(self.effort, index=self.times, columns=self.gear_names)
        frame.index.name = "time"
        frame.columns.name = "gear"
        return frame

    def save_indices(self, t_save: float) -> np.ndarray:
        """Row indices at which a projection stores its state.

        Parameters
        ----------
        t_save : float
            Interval between stored snapshots; must be a positive integer
            multiple of dt

        Returns
        -------
        np.ndarray
            Every round(t_save / dt)-th row index, starting at 0

        Raises
        ------
        ConfigurationError
            If t_save is not a positive multiple of dt
        """
        dt = self.dt
        # Divisibility test needs to allow for rounding errors in t_save / dt
        if (
            not np.isfinite(t_save)
            or t_save < dt
            or not np.isclose(t_save - round(t_save / dt) * dt, 0.0, rtol=0.0, atol=T_SAVE_TOLERANCE)
        ):
            raise ConfigurationError(f"t_save ({t_save}) must be a positive multiple of dt ({dt})")
        t_skip = int(round(t_save / dt))
        return np.arange(0, self.n_times, t_skip)

    @classmethod
    def constant(
        cls,
        gear_names: Sequence[str],
        effort: float,
        t_max: float = DEFAULT_T_MAX,
        dt: float = DEFAULT_DT,
    ) -> "EffortSchedule":
        """Same constant effort for every gear, from time 0 to t_max."""
        try:
            value = float(effort)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Effort must be numeric, got {effort!r}")
        _check_finite(np.array([value]))
        times = _time_grid(0.0, float(t_max), dt)
        table = np.full((len(times), len(gear_names)), value)
        logger.debug(f"Constant effort {value} for {len(gear_names)} gears over {len(times)} time points")
        return cls(times=times, effort=table, gear_names=list(gear_names), dt=dt)

    @classmethod
    def from_vector(
        cls,
        gear_names: Sequence[str],
        effort: Union[Sequence[float], np.ndarray, Mapping[str, float], pd.Series],
        t_max: float = DEFAULT_T_MAX,
        dt: float = DEFAULT_DT,
    ) -> "EffortSchedule":
        """Constant effort per gear, from time 0 to t_max.

        Named input (dict or labelled Series) must contain every gear of the
        model and is reordered to the model's gear order. Unnamed input
        (sequence, array or Series with a default RangeIndex) must have one
        value per gear and is taken in the model's gear order.
        """
        gear_names = list(gear_names)
        # A Series without labels is positional, like a list
        if isinstance(effort, pd.Series) and isinstance(effort.index, pd.RangeIndex):
            effort = effort.to_numpy()
        if isinstance(effort, (Mapping, pd.Series)):
            named: Dict[str, float] = {str(k): v for k, v in dict(effort).items()}
            if not set(gear_names) <= set(named):
                raise ConfigurationError(_missing_gears_message(gear_names, list(named), "vector"))
            extra = [g for g in named if g not in gear_names]
            if extra:
                logger.debug(f"Ignoring effort for gears not in the model: {extra}")
            values = np.array([named[g] for g in gear_names], dtype=float)
        else:
            values = np.atleast_1d(np.asarray(effort, dtype=float))
            if values.ndim != 1:
                raise ConfigurationError("Effort vector must be one-dimensional")
            if len(values) == 1:
                values = np.repeat(values, len(gear_names))
            elif len(values) != len(gear_names):
                raise ConfigurationError(
                    f"Effort vector must be the same length as the number of fishing gears "
                    f"({len(values)} != {len(gear_names)})"
                )

        _check_finite(values)
        times = _time_grid(0.0, float(t_max), dt)
        table = np.tile(values, (len(times), 1))
        return cls(times=times, effort=table, gear_names=gear_names, dt=dt)

    @classmethod
    def from_array(
        cls,
        gear_names: Sequence[str],
        effort: pd.DataFrame,
        dt: float = DEFAULT_DT,
    ) -> "EffortSchedule":
        """Time-varying effort blown up to a dt-spaced grid.

        The effort given for a time holds until the next listed time. The
        grid runs from the first to the last listed time.

        Parameters
        ----------
        gear_names : sequence of str
            Gears of the model, in canonical order
        effort : pd.DataFrame
            Effort table with numeric, non-decreasing time index and one
            column per gear (extra columns are ignored)
        dt : float
            Time step of the grid
        """
        gear_names = list(gear_names)
        if not isinstance(effort, pd.DataFrame):
            raise ConfigurationError(
                "Time-varying effort must be a DataFrame with time as index and gears as columns"
            )
        if len(effort) == 0:
            raise ConfigurationError("The effort array must contain at least one time")

        columns = [str(c) for c in effort.columns]
        if not set(gear_names) <= set(columns):
            raise ConfigurationError(_missing_gears_message(gear_names, columns, "array"))
        effort = effort.copy()
        effort.columns = columns
        # Sort effort columns to match order in MizerParams
        effort = effort[gear_names]

        # Dates and durations would be coerced to nanoseconds
        index = effort.index
        if not (
            pd.api.types.is_numeric_dtype(index)
            or pd.api.types.is_object_dtype(index)
            or pd.api.types.is_string_dtype(index)
        ):
            raise ConfigurationError("The time index of the effort argument must be numeric.")
        time_effort = pd.to_numeric(pd.Series(effort.index), errors="coerce").to_numpy(dtype=float)
        if np.any(np.isnan(time_effort)):
            raise ConfigurationError("The time index of the effort argument must be numeric.")
        if np.any(np.diff(time_effort) < 0):
            raise ConfigurationError("The time index of the effort argument should be increasing.")

        values = effort.to_numpy(dtype=float)
        _check_finite(values)

        # Blow up effort so that rows are dt spaced
        times = _time_grid(time_effort[0], time_effort[-1], dt)
        row_idx = np.searchsorted(time_effort, times + TIME_GRID_SLACK * dt, side="right") - 1
        table = values[row_idx]
        logger.debug(
            f"Regularized effort from {len(time_effort)} listed times to {len(times)} "
            f"rows between {times[0]} and {times[-1]}"
        )
        return cls(times=times, effort=table, gear_names=gear_names, dt=dt)


def regularize_effort(
    gear_names: Sequence[str],
    effort: EffortSpec = 0.0,
    t_max: float = DEFAULT_T_MAX,
    dt: float = DEFAULT_DT,
) -> EffortSchedule:
    """Build an EffortSchedule from any supported effort specification.

    Parameters
    ----------
    gear_names : sequence of str
        Gears of the model, in canonical order
    effort : float, sequence, dict, pd.Series or pd.DataFrame
        Effort specification. A DataFrame carries its own time axis, in
        which case t_max is ignored.
    t_max : float
        End time for constant effort
    dt : float
        Time step

    Returns
    -------
    EffortSchedule

    Examples
    --------
    >>> regularize_effort(['Pelagic', 'Otter'], {'Pelagic': 1.0, 'Otter': 0.5}, t_max=10)
    >>> table = pd.DataFrame({'Pelagic': [1.0, 0.5]}, index=[2000, 2010])
    >>> regularize_effort(['Pelagic'], table, dt=0.5)
    """
    if isinstance(effort, pd.DataFrame):
        return EffortSchedule.from_array(gear_names, effort, dt=dt)
    if isinstance(effort, np.ndarray) and effort.ndim == 2:
        raise ConfigurationError(
            "The time index of the effort argument must be numeric; "
            "pass time-varying effort as a DataFrame indexed by time"
        )
    if np.isscalar(effort) or (isinstance(effort, np.ndarray) and effort.ndim == 0):
        return EffortSchedule.constant(gear_names, float(effort), t_max=t_max, dt=dt)
    return EffortSchedule.from_vector(gear_names, effort, t_max=t_max, dt=dt)
