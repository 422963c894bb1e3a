"""
Initial population abundances for size-spectrum projections.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from pymizer.core.constants import INITIAL_N_KAPPA_DIVISOR, INITIAL_N_SHAPE
from pymizer.core.params import MizerParams


def get_initial_n(
    params: MizerParams,
    n0_mult: Optional[float] = None,
    a: float = INITIAL_N_SHAPE,
) -> np.ndarray:
    """Calculate initial population abundances for the species.

    The abundances are a power law that should be a reasonable guess at
    the equilibrium community spectrum:

        N(w) = n0_mult * w_inf^(2n - q - 2 + a) * w^(-n - a)

    The exponents n and q are recovered from the intake_max and search_vol
    arrays. Densities below w_min or at and above w_inf are zero.

    Parameters
    ----------
    params : MizerParams
        Model parameters
    n0_mult : float, optional
        Multiplier for the abundance. Defaults to kappa / 1000, where kappa
        is recovered from the background carrying capacity. The divisor was
        found by trial and error.
    a : float
        Shape constant of the power law

    Returns
    -------
    np.ndarray
        Species x size matrix of abundance densities

    Raises
    ------
    TypeError
        If params is not a MizerParams object
    """
    if not isinstance(params, MizerParams):
        raise TypeError("params argument must be of type MizerParams")

    sp = params.species_params
    w = params.w

    # Reverse calc n and q from the first species and first size bin
    n = np.log(params.intake_max[0, 0] / sp["h"].iloc[0]) / np.log(w[0])
    q = np.log(params.search_vol[0, 0] / sp["gamma"].iloc[0]) / np.log(w[0])

    if n0_mult is None:
        lambda_ = 2 + q - n
        kappa = params.cc_pp[0] / (params.w_full[0] ** (-lambda_))
        n0_mult = kappa / INITIAL_N_KAPPA_DIVISOR

    w_inf = sp["w_inf"].to_numpy(dtype=float)[:, None]
    w_min = sp["w_min"].to_numpy(dtype=float)[:, None]

    initial_n = n0_mult * w_inf ** (2 * n - q - 2 + a) * w[None, :] ** (-n - a)
    initial_n[w[None, :] >= w_inf] = 0.0
    initial_n[w[None, :] < w_min] = 0.0
    return initial_n
