"""
Summary statistics of projection results.

All functions take a MizerSim and return a DataFrame indexed by save time
with one column per species (yield by gear has gear/species columns).
"""

from __future__ import annotations

from typing import Optional

import numpy as np
import pandas as pd

from pymizer.core.rates import get_fmort, get_fmort_gear
from pymizer.core.sim import MizerSim


def _size_mask(sim: MizerSim, min_w: Optional[float], max_w: Optional[float]) -> np.ndarray:
    w = sim.params.w
    mask = np.ones(len(w), dtype=bool)
    if min_w is not None:
        mask &= w >= min_w
    if max_w is not None:
        mask &= w <= max_w
    return mask


def _species_frame(sim: MizerSim, values: np.ndarray) -> pd.DataFrame:
    frame = pd.DataFrame(values, index=sim.times, columns=sim.params.species_names)
    frame.index.name = "time"
    frame.columns.name = "species"
    return frame


def get_biomass(
    sim: MizerSim,
    min_w: Optional[float] = None,
    max_w: Optional[float] = None,
) -> pd.DataFrame:
    """Total biomass of each species through time.

    Parameters
    ----------
    sim : MizerSim
        Projection results
    min_w, max_w : float, optional
        Only include sizes within these limits

    Returns
    -------
    pd.DataFrame
        Biomass (time x species)
    """
    mask = _size_mask(sim, min_w, max_w)
    weight = (sim.params.w * sim.params.dw * mask)[None, None, :]
    return _species_frame(sim, (sim.n * weight).sum(axis=2))


def get_abundance(
    sim: MizerSim,
    min_w: Optional[float] = None,
    max_w: Optional[float] = None,
) -> pd.DataFrame:
    """Total number of individuals of each species through time."""
    mask = _size_mask(sim, min_w, max_w)
    weight = (sim.params.dw * mask)[None, None, :]
    return _species_frame(sim, (sim.n * weight).sum(axis=2))


def get_ssb(sim: MizerSim) -> pd.DataFrame:
    """Spawning stock biomass of each species through time."""
    params = sim.params
    weight = (params.psi * (params.w * params.dw)[None, :])[None, :, :]
    return _species_frame(sim, (sim.n * weight).sum(axis=2))


def get_yield_gear(sim: MizerSim) -> pd.DataFrame:
    """Yield (catch biomass per year) by gear and species through time.

    Returns
    -------
    pd.DataFrame
        Yield with (gear, species) MultiIndex columns
    """
    params = sim.params
    ww = (params.w * params.dw)[None, :]
    rows = []
    for i in range(len(sim)):
        f_gear = get_fmort_gear(params, sim.effort[i])
        rows.append((f_gear * (sim.n[i] * ww)[None, :, :]).sum(axis=2).ravel())
    columns = pd.MultiIndex.from_product(
        [params.gear_names, params.species_names], names=["gear", "species"]
    )
    frame = pd.DataFrame(np.array(rows), index=sim.times, columns=columns)
    frame.index.name = "time"
    return frame


def get_yield(sim: MizerSim) -> pd.DataFrame:
    """Yield of each species through time, summed over gears."""
    params = sim.params
    ww = (params.w * params.dw)[None, :]
    values = np.array(
        [(get_fmort(params, sim.effort[i]) * sim.n[i] * ww).sum(axis=1) for i in range(len(sim))]
    )
    return _species_frame(sim, values)
