"""
Numerical routines that advance the state by one time step.

- project_n: implicit upwind finite-difference step of the species size
  spectra (McKendrick-von Foerster equation), with recruitment entering
  at each species' egg size bin
- update_background: exact semi-chemostat step of the background spectrum

Upwind differencing of growth makes the implicit system lower-bidiagonal
in the size index, so it is solved by forward substitution.
"""

from typing import Tuple

import numpy as np


def upwind_coefficients(
    e_growth: np.ndarray,
    z: np.ndarray,
    dw: np.ndarray,
    dt: float,
) -> Tuple[np.ndarray, np.ndarray]:
    """Sub-diagonal and diagonal of the implicit upwind system.

    A[i, j] = -g_i(w_{j-1}) dt / dw_j
    B[i, j] = 1 + g_i(w_j) dt / dw_j + mu_i(w_j) dt

    Parameters
    ----------
    e_growth : np.ndarray
        Growth rate (species x size)
    z : np.ndarray
        Total mortality rate (species x size)
    dw : np.ndarray
        Size bin widths
    dt : float
        Time step

    Returns
    -------
    tuple of np.ndarray
        (A, B), both species x size. A[:, 0] is zero.
    """
    A = np.zeros_like(e_growth, dtype=float)
    A[:, 1:] = -e_growth[:, :-1] * dt / dw[None, 1:]
    B = 1.0 + e_growth * dt / dw[None, :] + z * dt
    return A, B


def project_n(
    n: np.ndarray,
    e_growth: np.ndarray,
    z: np.ndarray,
    rdd: np.ndarray,
    dw: np.ndarray,
    w_min_idx: np.ndarray,
    dt: float,
) -> np.ndarray:
    """Advance the species densities by one time step.

    Each species is solved independently from its egg size bin upward;
    bins below the egg size keep their current values. Negative densities
    are not clamped.

    Parameters
    ----------
    n : np.ndarray
        Current densities (species x size); not modified
    e_growth : np.ndarray
        Growth rate (species x size)
    z : np.ndarray
        Total mortality rate (species x size)
    rdd : np.ndarray
        Recruitment rate per species
    dw : np.ndarray
        Size bin widths
    w_min_idx : np.ndarray
        Egg size bin index per species
    dt : float
        Time step

    Returns
    -------
    np.ndarray
        Densities at the end of the step (species x size)
    """
    no_sp, no_w = n.shape
    w_min_idx = np.asarray(w_min_idx, dtype=int)
    A, B = upwind_coefficients(e_growth, z, dw, dt)
    S = n

    n_new = n.astype(float, copy=True)
    species = np.arange(no_sp)

    # Boundary condition upstream end (recruitment)
    n_new[species, w_min_idx] = (
        n[species, w_min_idx] + np.asarray(rdd, dtype=float) * dt / dw[w_min_idx]
    ) / B[species, w_min_idx]

    # Forward substitution; species only update bins above their egg size
    for j in range(int(w_min_idx.min()) + 1, no_w):
        active = w_min_idx < j
        n_new[active, j] = (S[active, j] - A[active, j] * n_new[active, j - 1]) / B[active, j]

    return n_new


def update_background(
    n_pp: np.ndarray,
    rr_pp: np.ndarray,
    cc_pp: np.ndarray,
    m2_background: np.ndarray,
    dt: float,
) -> np.ndarray:
    """Advance the background spectrum with the semi-chemostat model.

    Uses the exact solution of
        dN/dt = r (K - N) - mu N
    under the assumption that the predation mortality mu is constant
    during the time step.

    Parameters
    ----------
    n_pp : np.ndarray
        Current background spectrum
    rr_pp : np.ndarray
        Regeneration rate r
    cc_pp : np.ndarray
        Carrying capacity K
    m2_background : np.ndarray
        Predation mortality on the background mu
    dt : float
        Time step

    Returns
    -------
    np.ndarray
        Background spectrum at the end of the step
    """
    tmp = rr_pp * cc_pp / (rr_pp + m2_background)
    return tmp - (tmp - n_pp) * np.exp(-(rr_pp + m2_background) * dt)
