"""
Output container for size-spectrum projections.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import numpy as np
import pandas as pd

from pymizer.core.params import MizerParams


@dataclass
class Snapshot:
    """State stored at one save point.

    Attributes
    ----------
    time : float
        Simulation time
    n : np.ndarray
        Species densities (species x size)
    n_pp : np.ndarray
        Background spectrum
    effort : np.ndarray
        Effort of each gear in force from this time
    """

    time: float
    n: np.ndarray
    n_pp: np.ndarray
    effort: np.ndarray


@dataclass
class MizerSim:
    """Results of a projection.

    Arrays are allocated once with one entry per save point and filled in
    time order by the projection.

    Attributes
    ----------
    params : MizerParams
        Parameters the projection was run with
    times : np.ndarray
        Save times (n_saves)
    n : np.ndarray
        Species densities (n_saves x species x size)
    n_pp : np.ndarray
        Background spectrum (n_saves x w_full)
    effort : np.ndarray
        Effort by gear (n_saves x gears)
    """

    params: MizerParams
    times: np.ndarray
    n: np.ndarray
    n_pp: np.ndarray
    effort: np.ndarray

    @classmethod
    def empty(cls, params: MizerParams, times: np.ndarray) -> "MizerSim":
        """Allocate a MizerSim for the given save times, filled with NaN."""
        times = np.asarray(times, dtype=float)
        n_saves = len(times)
        return cls(
            params=params,
            times=times,
            n=np.full((n_saves, params.no_sp, params.no_w), np.nan),
            n_pp=np.full((n_saves, params.no_w_full), np.nan),
            effort=np.full((n_saves, params.no_gears), np.nan),
        )

    def store(self, i: int, n: np.ndarray, n_pp: np.ndarray) -> None:
        """Store the state at save point i."""
        self.n[i] = n
        self.n_pp[i] = n_pp

    def __len__(self) -> int:
        return len(self.times)

    def __iter__(self) -> Iterator[Snapshot]:
        for i in range(len(self)):
            yield self.snapshot(i)

    def snapshot(self, i: int) -> Snapshot:
        """Return save point i as a Snapshot (arrays are copies)."""
        return Snapshot(
            time=float(self.times[i]),
            n=self.n[i].copy(),
            n_pp=self.n_pp[i].copy(),
            effort=self.effort[i].copy(),
        )

    @property
    def final_n(self) -> np.ndarray:
        return self.n[-1]

    @property
    def final_n_pp(self) -> np.ndarray:
        return self.n_pp[-1]

    def effort_frame(self) -> pd.DataFrame:
        """Effort at the save points as a DataFrame indexed by time."""
        frame = pd.DataFrame(self.effort, index=self.times, columns=self.params.gear_names)
        frame.index.name = "time"
        return frame

    def n_frame(self, i: int = -1) -> pd.DataFrame:
        """Species densities at save point i (species x size) as a DataFrame."""
        return pd.DataFrame(
            self.n[i],
            index=pd.Index(self.params.species_names, name="species"),
            columns=pd.Index(self.params.w, name="w"),
        )

    def __repr__(self) -> str:
        return (
            f"MizerSim(\n"
            f"  saves={len(self)} (t from {self.times[0]:g} to {self.times[-1]:g})\n"
            f"  species={self.params.no_sp}, size bins={self.params.no_w}\n"
            f")"
        )
