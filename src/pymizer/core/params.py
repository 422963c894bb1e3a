"""
Parameter data structures for pymizer.

This module contains the MizerParams class, the mizer_params() constructor
that fills species defaults and precomputes the size-dependent arrays used
by the rate functions, and the default stock-recruitment relationship.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

import numpy as np
import pandas as pd

from pymizer.core.constants import (
    DEFAULT_ALPHA,
    DEFAULT_CATCHABILITY,
    DEFAULT_EREPRO,
    DEFAULT_F0,
    DEFAULT_GEAR,
    DEFAULT_H,
    DEFAULT_K,
    DEFAULT_KAPPA,
    DEFAULT_KS_FRACTION,
    DEFAULT_MIN_W,
    DEFAULT_MIN_W_PP,
    DEFAULT_N,
    DEFAULT_NO_W,
    DEFAULT_P,
    DEFAULT_Q,
    DEFAULT_R_PP,
    DEFAULT_W_PP_CUTOFF,
    DEFAULT_Z0PRE,
    MAX_W_MULTIPLIER,
    PSI_MIN_FRACTION_OF_WMAT,
    PSI_STEEPNESS,
)
from pymizer.core.exceptions import ParamsError

REQUIRED_SPECIES_COLUMNS = ["species", "w_inf", "w_mat", "beta", "sigma"]


def beverton_holt(rdi: np.ndarray, species_params: pd.DataFrame) -> np.ndarray:
    """Beverton-Holt stock-recruitment relationship.

    Parameters
    ----------
    rdi : np.ndarray
        Density-independent recruitment per species
    species_params : pd.DataFrame
        Species parameters with an ``r_max`` column

    Returns
    -------
    np.ndarray
        Density-dependent recruitment ``rdi / (1 + rdi / r_max)``
    """
    r_max = species_params["r_max"].to_numpy(dtype=float)
    return rdi / (1.0 + rdi / r_max)


@dataclass
class MizerParams:
    """Container for size-spectrum model parameters.

    Holds the size grids, species traits and all arrays that do not change
    during a projection.

    Attributes
    ----------
    species_params : pd.DataFrame
        One row per species. Required columns are species, w_inf, w_mat,
        beta and sigma; mizer_params() adds h, gamma, ks, k, z0, alpha,
        erepro, w_min, w_min_idx, r_max, gear, catchability and
        knife_edge_size.
    w : np.ndarray
        Species size grid (g), strictly increasing
    dw : np.ndarray
        Widths of the species size bins
    w_full : np.ndarray
        Extended size grid for the background spectrum; its tail is ``w``
    dw_full : np.ndarray
        Widths of the extended size bins
    interaction : np.ndarray
        Predator x prey species interaction matrix
    intake_max : np.ndarray
        Maximum intake rate (species x size)
    search_vol : np.ndarray
        Volumetric search rate (species x size)
    activity : np.ndarray
        Activity metabolism (species x size)
    std_metab : np.ndarray
        Standard metabolism (species x size)
    psi : np.ndarray
        Proportion of available energy allocated to reproduction
    mu_b : np.ndarray
        Background mortality (species x size)
    pred_kernel : np.ndarray
        Predation kernel (species x predator size x prey size in w_full)
    selectivity : np.ndarray
        Fishing selectivity (gear x species x size)
    catchability : np.ndarray
        Catchability of each species by each gear (gear x species)
    gear_names : list of str
        Canonical gear order
    rr_pp : np.ndarray
        Background regeneration rate (along w_full)
    cc_pp : np.ndarray
        Background carrying capacity (along w_full)
    initial_n : np.ndarray
        Default initial species densities (species x size)
    initial_n_pp : np.ndarray
        Default initial background spectrum
    srr : callable
        Stock-recruitment function ``srr(rdi, species_params)``
    """

    species_params: pd.DataFrame
    w: np.ndarray
    dw: np.ndarray
    w_full: np.ndarray
    dw_full: np.ndarray
    interaction: np.ndarray
    intake_max: np.ndarray
    search_vol: np.ndarray
    activity: np.ndarray
    std_metab: np.ndarray
    psi: np.ndarray
    mu_b: np.ndarray
    pred_kernel: np.ndarray
    selectivity: np.ndarray
    catchability: np.ndarray
    gear_names: List[str]
    rr_pp: np.ndarray
    cc_pp: np.ndarray
    initial_n: np.ndarray
    initial_n_pp: np.ndarray
    srr: Callable[[np.ndarray, pd.DataFrame], np.ndarray] = beverton_holt

    @property
    def species_names(self) -> List[str]:
        return [str(s) for s in self.species_params["species"]]

    @property
    def no_sp(self) -> int:
        return len(self.species_params)

    @property
    def no_w(self) -> int:
        return len(self.w)

    @property
    def no_w_full(self) -> int:
        return len(self.w_full)

    @property
    def no_gears(self) -> int:
        return len(self.gear_names)

    @property
    def idx_sp(self) -> int:
        """Offset of the species grid ``w`` inside ``w_full``."""
        return self.no_w_full - self.no_w

    @property
    def w_min_idx(self) -> np.ndarray:
        """Index of the egg size bin of each species."""
        if "w_min_idx" not in self.species_params.columns:
            raise ParamsError("w_min_idx column missing in species params")
        return self.species_params["w_min_idx"].to_numpy(dtype=int)

    def validate(self) -> bool:
        """Check that the parameters are structurally consistent.

        Returns
        -------
        bool
            True if the parameters are valid

        Raises
        ------
        ParamsError
            If a required column is missing or array shapes disagree
        """
        missing = [c for c in REQUIRED_SPECIES_COLUMNS if c not in self.species_params.columns]
        if missing:
            raise ParamsError(f"species_params is missing required columns: {missing}")

        w_min_idx = self.w_min_idx
        if np.any(w_min_idx < 0) or np.any(w_min_idx >= self.no_w):
            raise ParamsError(
                f"w_min_idx values {w_min_idx.tolist()} are outside the size grid "
                f"(0 to {self.no_w - 1})"
            )

        if self.no_w < 2 or np.any(np.diff(self.w) <= 0):
            raise ParamsError("Size grid w must be strictly increasing with at least 2 bins")
        if not np.allclose(self.w_full[self.idx_sp:], self.w):
            raise ParamsError("Size grid w must be the tail of w_full")

        sp_w = (self.no_sp, self.no_w)
        for name in ("intake_max", "search_vol", "activity", "std_metab", "psi", "mu_b"):
            shape = getattr(self, name).shape
            if shape != sp_w:
                raise ParamsError(f"{name} has shape {shape}, expected {sp_w}")

        checks = {
            "dw": (self.no_w,),
            "dw_full": (self.no_w_full,),
            "interaction": (self.no_sp, self.no_sp),
            "pred_kernel": (self.no_sp, self.no_w, self.no_w_full),
            "selectivity": (self.no_gears, self.no_sp, self.no_w),
            "catchability": (self.no_gears, self.no_sp),
            "rr_pp": (self.no_w_full,),
            "cc_pp": (self.no_w_full,),
        }
        for name, expected in checks.items():
            shape = getattr(self, name).shape
            if shape != expected:
                raise ParamsError(f"{name} has shape {shape}, expected {expected}")

        return True

    def __repr__(self) -> str:
        return (
            f"MizerParams(\n"
            f"  species={self.no_sp} ({', '.join(self.species_names)})\n"
            f"  gears={self.no_gears} ({', '.join(self.gear_names)})\n"
            f"  size bins={self.no_w} (w from {self.w[0]:.3g} to {self.w[-1]:.3g}), "
            f"background bins={self.no_w_full}\n"
            f")"
        )


def _set_default(sp: pd.DataFrame, column: str, default) -> None:
    """Fill a species_params column in place, only where it is missing."""
    if column not in sp.columns:
        sp[column] = default
        return
    missing = sp[column].isna().to_numpy()
    if missing.any():
        values = np.broadcast_to(np.asarray(default, dtype=object), (len(sp),))
        sp.loc[missing, column] = values[missing]


def mizer_params(
    species_params: pd.DataFrame,
    interaction: Optional[Union[np.ndarray, pd.DataFrame]] = None,
    no_w: int = DEFAULT_NO_W,
    min_w: float = DEFAULT_MIN_W,
    max_w: Optional[float] = None,
    min_w_pp: float = DEFAULT_MIN_W_PP,
    n: float = DEFAULT_N,
    p: float = DEFAULT_P,
    q: float = DEFAULT_Q,
    kappa: float = DEFAULT_KAPPA,
    lambda_: Optional[float] = None,
    r_pp: float = DEFAULT_R_PP,
    w_pp_cutoff: float = DEFAULT_W_PP_CUTOFF,
    f0: float = DEFAULT_F0,
    z0pre: float = DEFAULT_Z0PRE,
    z0exp: Optional[float] = None,
) -> MizerParams:
    """Create a MizerParams object for a multi-species model.

    Fills in default species traits, builds the size grids and computes the
    arrays consumed by the rate functions. The default initial state is the
    result of get_initial_n() for the species and the carrying capacity for
    the background.

    Parameters
    ----------
    species_params : pd.DataFrame
        Species traits, one row per species. Must contain species, w_inf,
        w_mat, beta and sigma.
    interaction : array-like, optional
        Predator x prey interaction matrix (default all ones)
    no_w : int
        Number of species size bins
    min_w : float
        Smallest species size
    max_w : float, optional
        Largest species size (default 1.1 times the largest w_inf)
    min_w_pp : float
        Smallest background size
    n, p, q : float
        Exponents of intake, metabolism and search volume
    kappa : float
        Background carrying capacity coefficient
    lambda_ : float, optional
        Background carrying capacity exponent (default 2 + q - n)
    r_pp : float
        Background regeneration coefficient
    w_pp_cutoff : float
        Size above which the background carrying capacity is zero
    f0 : float
        Feeding level used to derive default search volume coefficients
    z0pre : float
        Background mortality prefactor, z0 = z0pre * w_inf^z0exp
    z0exp : float, optional
        Background mortality exponent (default n - 1)

    Returns
    -------
    MizerParams

    Examples
    --------
    >>> species = pd.DataFrame({
    ...     'species': ['Sprat', 'Cod'],
    ...     'w_inf': [33.0, 40000.0],
    ...     'w_mat': [13.0, 1606.0],
    ...     'beta': [51076.0, 22.0],
    ...     'sigma': [0.8, 1.5],
    ... })
    >>> params = mizer_params(species)
    """
    sp = species_params.copy().reset_index(drop=True)
    missing = [c for c in REQUIRED_SPECIES_COLUMNS if c not in sp.columns]
    if missing:
        raise ParamsError(f"species_params is missing required columns: {missing}")
    if len(sp) == 0:
        raise ParamsError("species_params must contain at least one species")
    if no_w < 2:
        raise ParamsError("no_w must be at least 2")

    sp["species"] = sp["species"].astype(str)
    no_sp = len(sp)

    if lambda_ is None:
        lambda_ = 2 + q - n
    if z0exp is None:
        z0exp = n - 1
    if max_w is None:
        max_w = float(sp["w_inf"].max()) * MAX_W_MULTIPLIER
    if min_w >= max_w:
        raise ParamsError(f"min_w ({min_w}) must be smaller than max_w ({max_w})")
    if min_w_pp >= min_w:
        raise ParamsError(f"min_w_pp ({min_w_pp}) must be smaller than min_w ({min_w})")

    # Species size grid, log-spaced
    w = 10.0 ** np.linspace(np.log10(min_w), np.log10(max_w), no_w)
    dw = np.diff(w)
    dw = np.append(dw, dw[-1])

    # Background grid extends the species grid downwards with the same spacing
    dx = np.log10(w[1] / w[0])
    n_pp_extra = int(np.floor((np.log10(min_w) - np.log10(min_w_pp)) / dx))
    x_pp = np.log10(min_w) - dx * np.arange(n_pp_extra, 0, -1)
    w_full = np.concatenate([10.0 ** x_pp, w])
    dw_full = np.diff(w_full)
    dw_full = np.append(dw_full, dw_full[-1])

    # Species defaults
    _set_default(sp, "h", DEFAULT_H)
    sp["h"] = sp["h"].astype(float)
    _set_default(sp, "ks", DEFAULT_KS_FRACTION * sp["h"].to_numpy())
    _set_default(sp, "k", DEFAULT_K)
    _set_default(sp, "alpha", DEFAULT_ALPHA)
    _set_default(sp, "erepro", DEFAULT_EREPRO)
    _set_default(sp, "w_min", min_w)
    _set_default(sp, "r_max", np.inf)
    _set_default(sp, "gear", DEFAULT_GEAR)
    _set_default(sp, "catchability", DEFAULT_CATCHABILITY)
    _set_default(sp, "knife_edge_size", sp["w_mat"].to_numpy())
    _set_default(sp, "z0", z0pre * sp["w_inf"].to_numpy(dtype=float) ** z0exp)

    beta = sp["beta"].to_numpy(dtype=float)
    sigma = sp["sigma"].to_numpy(dtype=float)
    gamma_default = (f0 * sp["h"].to_numpy() * beta ** (2 - lambda_)) / (
        (1 - f0)
        * np.sqrt(2 * np.pi)
        * kappa
        * sigma
        * np.exp((lambda_ - 2) ** 2 * sigma**2 / 2)
    )
    _set_default(sp, "gamma", gamma_default)

    float_cols = ["w_inf", "w_mat", "beta", "sigma", "h", "gamma", "ks", "k", "z0",
                  "alpha", "erepro", "w_min", "r_max", "catchability", "knife_edge_size"]
    for col in float_cols:
        sp[col] = sp[col].astype(float)
    sp["gear"] = sp["gear"].astype(str)

    w_inf = sp["w_inf"].to_numpy()
    w_mat = sp["w_mat"].to_numpy()
    w_min = sp["w_min"].to_numpy()

    # Egg size bin: largest bin with w <= w_min
    w_min_idx = np.searchsorted(w, w_min * (1 + 1e-12), side="right") - 1
    if np.any(w_min_idx < 0):
        bad = sp.loc[w_min_idx < 0, "species"].tolist()
        raise ParamsError(f"w_min is smaller than the smallest size bin for species: {bad}")
    sp["w_min_idx"] = w_min_idx.astype(int)

    early = sp.loc[w_min >= w_mat, "species"].tolist()
    if early:
        warnings.warn(f"Species with w_min >= w_mat: {early}")

    # Physiological rates
    intake_max = sp["h"].to_numpy()[:, None] * w[None, :] ** n
    search_vol = sp["gamma"].to_numpy()[:, None] * w[None, :] ** q
    activity = sp["k"].to_numpy()[:, None] * w[None, :]
    std_metab = sp["ks"].to_numpy()[:, None] * w[None, :] ** p
    mu_b = np.repeat(sp["z0"].to_numpy()[:, None], no_w, axis=1)

    # Allocation to reproduction: maturity ogive times (w / w_inf)^(1-n)
    w_rel_mat = w[None, :] / w_mat[:, None]
    psi = (1.0 + w_rel_mat ** (-PSI_STEEPNESS)) ** -1 * (w[None, :] / w_inf[:, None]) ** (1 - n)
    psi = np.where(w[None, :] > w_inf[:, None], 1.0, psi)
    psi = np.where(w_rel_mat < PSI_MIN_FRACTION_OF_WMAT, 0.0, psi)

    # Log-normal predation kernel; prey larger than the predator are not eaten
    log_ratio = np.log(w[None, :, None] / (beta[:, None, None] * w_full[None, None, :]))
    pred_kernel = np.exp(-(log_ratio**2) / (2 * sigma[:, None, None] ** 2))
    pred_kernel = np.where(w_full[None, None, :] > w[None, :, None], 0.0, pred_kernel)

    # Fishing: one gear per species, knife-edge selectivity
    gear_names = list(dict.fromkeys(sp["gear"]))
    catchability = np.zeros((len(gear_names), no_sp))
    selectivity = np.zeros((len(gear_names), no_sp, no_w))
    for i, row in sp.iterrows():
        g = gear_names.index(row["gear"])
        catchability[g, i] = row["catchability"]
        selectivity[g, i, :] = (w >= row["knife_edge_size"]).astype(float)

    if interaction is None:
        interaction = np.ones((no_sp, no_sp))
    interaction = np.asarray(interaction, dtype=float)
    if interaction.shape != (no_sp, no_sp):
        raise ParamsError(
            f"interaction matrix has shape {interaction.shape}, expected {(no_sp, no_sp)}"
        )

    # Background spectrum
    rr_pp = r_pp * w_full ** (n - 1)
    cc_pp = kappa * w_full ** (-lambda_)
    cc_pp[w_full > w_pp_cutoff] = 0.0

    params = MizerParams(
        species_params=sp,
        w=w,
        dw=dw,
        w_full=w_full,
        dw_full=dw_full,
        interaction=interaction,
        intake_max=intake_max,
        search_vol=search_vol,
        activity=activity,
        std_metab=std_metab,
        psi=psi,
        mu_b=mu_b,
        pred_kernel=pred_kernel,
        selectivity=selectivity,
        catchability=catchability,
        gear_names=gear_names,
        rr_pp=rr_pp,
        cc_pp=cc_pp,
        initial_n=np.zeros((no_sp, no_w)),
        initial_n_pp=cc_pp.copy(),
    )

    # Local import: initial.py imports MizerParams from this module
    from pymizer.core.initial import get_initial_n

    params.initial_n = get_initial_n(params)
    return params
