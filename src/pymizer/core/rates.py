"""
Rate calculations for size-spectrum projections.

This module contains the functions that turn the current state (species
densities ``n`` and background spectrum ``n_pp``) into the rates driving
one time step:
- available food, feeding level and predation rates
- predation, fishing and total mortality
- energy for growth and reproduction, and recruitment

Each function accepts optional precomputed intermediate results so a
projection step can evaluate the chain once. compute_rates() does exactly
that and is the default rate function used by project().
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from pymizer.core.constants import SEX_RATIO
from pymizer.core.params import MizerParams


@dataclass
class Rates:
    """Rates computed from the state at the start of a time step.

    Attributes
    ----------
    e_growth : np.ndarray
        Growth rate g_i(w) (species x size)
    z : np.ndarray
        Total mortality rate (species x size)
    m2_background : np.ndarray
        Predation mortality on the background (along w_full)
    rdd : np.ndarray
        Recruitment entering the egg size bin of each species
    feeding_level : np.ndarray, optional
        Feeding level (species x size)
    pred_rate : np.ndarray, optional
        Predation rate (species x predator size x prey size)
    m2 : np.ndarray, optional
        Predation mortality on the species (species x size)
    e_spawning : np.ndarray, optional
        Energy allocated to reproduction (species x size)
    rdi : np.ndarray, optional
        Density-independent recruitment
    """

    e_growth: np.ndarray
    z: np.ndarray
    m2_background: np.ndarray
    rdd: np.ndarray
    feeding_level: Optional[np.ndarray] = None
    pred_rate: Optional[np.ndarray] = None
    m2: Optional[np.ndarray] = None
    e_spawning: Optional[np.ndarray] = None
    rdi: Optional[np.ndarray] = None


def get_phi_prey(params: MizerParams, n: np.ndarray, n_pp: np.ndarray) -> np.ndarray:
    """Available food E_a,i(w) for each predator species and size.

    Sums the biomass of species prey (weighted by the interaction matrix)
    and of the background spectrum through the predation kernel.
    """
    idx = params.idx_sp
    n_eff_prey = (params.interaction @ n) * (params.w * params.dw)[None, :]
    phi_species = np.einsum("ijk,ik->ij", params.pred_kernel[:, :, idx:], n_eff_prey)
    phi_background = params.pred_kernel @ (params.dw_full * params.w_full * n_pp)
    return phi_species + phi_background


def get_feeding_level(
    params: MizerParams,
    n: np.ndarray,
    n_pp: np.ndarray,
    phi_prey: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Feeding level f_i(w): encountered food relative to maximum intake."""
    if phi_prey is None:
        phi_prey = get_phi_prey(params, n, n_pp)
    encount = params.search_vol * phi_prey
    return encount / (encount + params.intake_max)


def get_pred_rate(
    params: MizerParams,
    n: np.ndarray,
    n_pp: np.ndarray,
    feeding_level: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Predation rate of each predator species and size on each prey size.

    Returns
    -------
    np.ndarray
        Array of shape (species, predator size, prey size in w_full)
    """
    if feeding_level is None:
        feeding_level = get_feeding_level(params, n, n_pp)
    n_total_in_size_bins = n * params.dw[None, :]
    weight = (1 - feeding_level) * params.search_vol * n_total_in_size_bins
    return params.pred_kernel * weight[:, :, None]


def get_m2(
    params: MizerParams,
    n: Optional[np.ndarray] = None,
    n_pp: Optional[np.ndarray] = None,
    pred_rate: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Predation mortality mu_p,i(w) on each prey species and size."""
    if pred_rate is None:
        pred_rate = get_pred_rate(params, n, n_pp)
    pred_by_species = pred_rate.sum(axis=1)[:, params.idx_sp:]
    return params.interaction.T @ pred_by_species


def get_m2_background(
    params: MizerParams,
    n: Optional[np.ndarray] = None,
    n_pp: Optional[np.ndarray] = None,
    pred_rate: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Predation mortality on the background spectrum."""
    if pred_rate is None:
        pred_rate = get_pred_rate(params, n, n_pp)
    return pred_rate.sum(axis=(0, 1))


def get_fmort_gear(params: MizerParams, effort: np.ndarray) -> np.ndarray:
    """Fishing mortality by gear, species and size.

    Parameters
    ----------
    params : MizerParams
        Model parameters
    effort : np.ndarray
        Effort of each gear, in the order of ``params.gear_names``

    Returns
    -------
    np.ndarray
        Array of shape (gear, species, size)
    """
    effort = np.asarray(effort, dtype=float)
    return effort[:, None, None] * params.catchability[:, :, None] * params.selectivity


def get_fmort(params: MizerParams, effort: np.ndarray) -> np.ndarray:
    """Total fishing mortality (species x size) summed over gears."""
    return get_fmort_gear(params, effort).sum(axis=0)


def get_z(
    params: MizerParams,
    n: np.ndarray,
    n_pp: np.ndarray,
    effort: np.ndarray,
    m2: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Total mortality: predation + background + fishing."""
    if m2 is None:
        m2 = get_m2(params, n, n_pp)
    return m2 + params.mu_b + get_fmort(params, effort)


def get_e_repro_and_growth(
    params: MizerParams,
    n: np.ndarray,
    n_pp: np.ndarray,
    feeding_level: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Energy available for growth and reproduction.

    Assimilated intake minus standard and activity metabolism. Growth
    becomes zero when there is not enough energy, so the result is never
    negative.
    """
    if feeding_level is None:
        feeding_level = get_feeding_level(params, n, n_pp)
    alpha = params.species_params["alpha"].to_numpy(dtype=float)[:, None]
    e = feeding_level * params.intake_max * alpha
    e = e - params.std_metab - params.activity
    return np.maximum(e, 0.0)


def get_e_spawning(
    params: MizerParams,
    n: np.ndarray,
    n_pp: np.ndarray,
    e: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Energy allocated to reproduction."""
    if e is None:
        e = get_e_repro_and_growth(params, n, n_pp)
    return e * params.psi


def get_e_growth(
    params: MizerParams,
    n: np.ndarray,
    n_pp: np.ndarray,
    e_spawning: Optional[np.ndarray] = None,
    e: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Growth rate g_i(w): energy not allocated to reproduction."""
    if e is None:
        e = get_e_repro_and_growth(params, n, n_pp)
    if e_spawning is None:
        e_spawning = get_e_spawning(params, n, n_pp, e=e)
    return e - e_spawning


def get_rdi(
    params: MizerParams,
    n: np.ndarray,
    n_pp: np.ndarray,
    e_spawning: Optional[np.ndarray] = None,
    sex_ratio: float = SEX_RATIO,
) -> np.ndarray:
    """Density-independent recruitment R_p,i (eggs per unit time)."""
    if e_spawning is None:
        e_spawning = get_e_spawning(params, n, n_pp)
    e_spawning_pop = (e_spawning * n) @ params.dw
    erepro = params.species_params["erepro"].to_numpy(dtype=float)
    return sex_ratio * (e_spawning_pop * erepro) / params.w[params.w_min_idx]


def get_rdd(
    params: MizerParams,
    n: np.ndarray,
    n_pp: np.ndarray,
    rdi: Optional[np.ndarray] = None,
    sex_ratio: float = SEX_RATIO,
) -> np.ndarray:
    """Density-dependent recruitment R_i from the stock-recruitment function."""
    if rdi is None:
        rdi = get_rdi(params, n, n_pp, sex_ratio=sex_ratio)
    return params.srr(rdi, params.species_params)


def compute_rates(
    params: MizerParams,
    n: np.ndarray,
    n_pp: np.ndarray,
    effort: np.ndarray,
) -> Rates:
    """Evaluate every rate needed for one projection step.

    Intermediate results are passed along so each quantity is computed
    once.

    Parameters
    ----------
    params : MizerParams
        Model parameters
    n : np.ndarray
        Species densities (species x size)
    n_pp : np.ndarray
        Background spectrum
    effort : np.ndarray
        Effort of each gear during this step

    Returns
    -------
    Rates
    """
    phi_prey = get_phi_prey(params, n, n_pp)
    feeding_level = get_feeding_level(params, n, n_pp, phi_prey=phi_prey)
    pred_rate = get_pred_rate(params, n, n_pp, feeding_level=feeding_level)
    m2 = get_m2(params, pred_rate=pred_rate)
    z = get_z(params, n, n_pp, effort, m2=m2)
    m2_background = get_m2_background(params, pred_rate=pred_rate)
    e = get_e_repro_and_growth(params, n, n_pp, feeding_level=feeding_level)
    e_spawning = get_e_spawning(params, n, n_pp, e=e)
    e_growth = get_e_growth(params, n, n_pp, e_spawning=e_spawning, e=e)
    rdi = get_rdi(params, n, n_pp, e_spawning=e_spawning)
    rdd = get_rdd(params, n, n_pp, rdi=rdi)

    return Rates(
        e_growth=e_growth,
        z=z,
        m2_background=m2_background,
        rdd=rdd,
        feeding_level=feeding_level,
        pred_rate=pred_rate,
        m2=m2,
        e_spawning=e_spawning,
        rdi=rdi,
    )
