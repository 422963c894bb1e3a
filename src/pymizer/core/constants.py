"""Numerical and biological defaults for size-spectrum modelling.

This module centralizes magic numbers used throughout pymizer so the
simulation, parameter construction and initial-state code agree on them.
"""

# ============================================================================
# PROJECTION (TIME STEPPING) DEFAULTS
# ============================================================================

DEFAULT_T_MAX = 100.0  # Years simulated when effort carries no time axis
DEFAULT_DT = 0.1  # Internal solver time step (years)
DEFAULT_T_SAVE = 1.0  # Interval between stored snapshots (years)

# Tolerance for deciding whether t_save is an integer multiple of dt
T_SAVE_TOLERANCE = 1.5e-8

# Relative slack when counting grid points between two times
TIME_GRID_SLACK = 1e-8

# ============================================================================
# REPRODUCTION
# ============================================================================

SEX_RATIO = 0.5  # Fraction of spawning energy attributed to females

# ============================================================================
# INITIAL STATE HEURISTICS
# ============================================================================

INITIAL_N_SHAPE = 0.35  # Shape constant ``a`` in the initial power law
INITIAL_N_KAPPA_DIVISOR = 1000.0  # n0_mult = kappa / divisor (empirical)

# ============================================================================
# MODEL CONSTRUCTION DEFAULTS
# ============================================================================

# Size grid
DEFAULT_NO_W = 100  # Number of size bins for the species
DEFAULT_MIN_W = 0.001  # Smallest species size (g)
DEFAULT_MIN_W_PP = 1e-10  # Smallest background size (g)
MAX_W_MULTIPLIER = 1.1  # max_w defaults to this times the largest w_inf

# Allometric exponents
DEFAULT_N = 2.0 / 3.0  # Intake / growth exponent
DEFAULT_P = 0.7  # Standard metabolism exponent
DEFAULT_Q = 0.8  # Search volume exponent

# Background spectrum
DEFAULT_KAPPA = 1e11  # Carrying capacity coefficient
DEFAULT_R_PP = 10.0  # Background regeneration coefficient
DEFAULT_W_PP_CUTOFF = 10.0  # Background carrying capacity is zero above this

# Species defaults
DEFAULT_H = 30.0  # Maximum intake coefficient
DEFAULT_KS_FRACTION = 0.2  # ks defaults to this fraction of h
DEFAULT_K = 0.0  # Activity coefficient
DEFAULT_ALPHA = 0.6  # Assimilation efficiency
DEFAULT_EREPRO = 1.0  # Reproductive efficiency
DEFAULT_F0 = 0.6  # Expected feeding level used to derive gamma
DEFAULT_Z0PRE = 0.6  # Background mortality prefactor
DEFAULT_CATCHABILITY = 1.0
DEFAULT_GEAR = "knife_edge_gear"

# Maturity ogive steepness and cut-off below which psi is forced to zero
PSI_STEEPNESS = 10.0
PSI_MIN_FRACTION_OF_WMAT = 0.1
