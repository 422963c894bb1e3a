"""
Plotting module for pymizer.

Visualization of projection results using matplotlib:
- Biomass time series
- Size spectra of the species and the background
- A combined summary figure
"""

from __future__ import annotations

from typing import List, Optional, Tuple

import numpy as np
import matplotlib.pyplot as plt

from pymizer.core.sim import MizerSim
from pymizer.core.summary import get_biomass, get_yield


def plot_biomass(
    sim: MizerSim,
    species: Optional[List[str]] = None,
    relative: bool = False,
    log_y: bool = True,
    title: str = "Biomass Time Series",
    figsize: Tuple[int, int] = (12, 6),
    legend_loc: str = 'best',
    ax: Optional[plt.Axes] = None,
) -> plt.Figure:
    """Plot biomass time series of a projection.

    Parameters
    ----------
    sim : MizerSim
        Projection results
    species : list of str, optional
        Species to plot (default: all)
    relative : bool
        If True, plot relative to initial biomass
    log_y : bool
        Use a logarithmic y axis
    title : str
        Plot title
    figsize : tuple
        Figure size
    legend_loc : str
        Legend location
    ax : Axes, optional
        Matplotlib axes

    Returns
    -------
    matplotlib.Figure
    """
    biomass = get_biomass(sim)
    if species is None:
        species = list(biomass.columns)

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    for name in species:
        y = biomass[name].to_numpy()
        if relative and y[0] > 0:
            y = y / y[0]
        ax.plot(biomass.index, y, label=name, linewidth=1.5)

    ax.set_xlabel('Time', fontsize=11)
    ylabel = 'Relative Biomass (B/B₀)' if relative else 'Biomass'
    ax.set_ylabel(ylabel, fontsize=11)
    ax.set_title(title, fontsize=12)
    if log_y:
        ax.set_yscale('log')

    if relative:
        ax.axhline(y=1, color='k', linestyle='--', alpha=0.5)

    ax.legend(loc=legend_loc, fontsize=9)
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    return fig


def plot_spectra(
    sim: MizerSim,
    time_index: int = -1,
    biomass: bool = True,
    background: bool = True,
    title: Optional[str] = None,
    figsize: Tuple[int, int] = (10, 6),
    ax: Optional[plt.Axes] = None,
) -> plt.Figure:
    """Plot the size spectra at one save point on log-log axes.

    Parameters
    ----------
    sim : MizerSim
        Projection results
    time_index : int
        Save point to plot (default: the last one)
    biomass : bool
        Plot biomass density N(w) * w instead of number density N(w)
    background : bool
        Also plot the background spectrum
    title : str, optional
        Plot title (default includes the time)
    figsize : tuple
        Figure size
    ax : Axes, optional
        Matplotlib axes

    Returns
    -------
    matplotlib.Figure
    """
    params = sim.params
    n = sim.n[time_index]
    n_pp = sim.n_pp[time_index]

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    w_power = 1 if biomass else 0
    for i, name in enumerate(params.species_names):
        y = n[i] * params.w ** w_power
        keep = y > 0
        ax.plot(params.w[keep], y[keep], label=name, linewidth=1.5)

    if background:
        y_pp = n_pp * params.w_full ** w_power
        keep = y_pp > 0
        ax.plot(params.w_full[keep], y_pp[keep], color='green', linestyle='--',
                label='Background', linewidth=1.5)

    ax.set_xscale('log')
    ax.set_yscale('log')
    ax.set_xlabel('Size (g)', fontsize=11)
    ax.set_ylabel('Biomass density' if biomass else 'Number density', fontsize=11)
    if title is None:
        title = f'Size spectra at t = {sim.times[time_index]:g}'
    ax.set_title(title, fontsize=12)
    ax.legend(fontsize=9)
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    return fig


def plot_sim_summary(
    sim: MizerSim,
    figsize: Tuple[int, int] = (14, 10),
) -> plt.Figure:
    """Create a summary figure of a projection.

    Panels: biomass, yield, final size spectra and effort.

    Parameters
    ----------
    sim : MizerSim
        Projection results
    figsize : tuple
        Figure size

    Returns
    -------
    matplotlib.Figure
    """
    fig, axes = plt.subplots(2, 2, figsize=figsize)

    plot_biomass(sim, ax=axes[0, 0])

    yields = get_yield(sim)
    for name in yields.columns:
        axes[0, 1].plot(yields.index, yields[name], label=name, linewidth=1.5)
    axes[0, 1].set_title('Yield', fontsize=12)
    axes[0, 1].set_xlabel('Time', fontsize=11)
    axes[0, 1].grid(True, alpha=0.3)

    plot_spectra(sim, ax=axes[1, 0])

    effort = sim.effort_frame()
    for gear in effort.columns:
        axes[1, 1].step(effort.index, effort[gear], where='post', label=gear)
    axes[1, 1].set_title('Fishing Effort', fontsize=12)
    axes[1, 1].set_xlabel('Time', fontsize=11)
    axes[1, 1].legend(fontsize=9)
    axes[1, 1].grid(True, alpha=0.3)

    if np.all(effort.to_numpy() == 0):
        axes[1, 1].set_ylim(-0.05, 1)

    plt.suptitle('Projection Summary', fontsize=14)
    plt.tight_layout()
    return fig
