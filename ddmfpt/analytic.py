# Copyright 2018 Max Shinn <maxwell.shinn@yale.edu>
#           2018 Norman Lam <norman.lam@yale.edu>
#           2018 Gangyu Robert Yang
#
# This file is part of ddmfpt, and is available under the MIT license.
# Please see LICENSE.txt in the root directory for more information.

# First-passage time densities for constant drift and constant bounds.
# These map the problem onto the canonical zero-drift, unit-interval
# problem of series.py, so that each time step costs a bounded number
# of series terms instead of a pass over all earlier steps.

__all__ = ["fpt_sym_up", "fpt_asym_up", "fpt_asym_lo",
           "ddm_fpt_const", "ddm_fpt_const_asym"]

import math

from paranoid.types import Number, Positive, Positive0, Integer, Maybe, Range, Unchecked
from paranoid.decorators import accepts, returns, ensures

from . import parameters as param
from .series import fpt_sym_fast, fpt_asym_fast
from .paranoid_types import DensitySequence
from .vectors import check_grid, output_vector
from .logger import logger as _logger

@accepts(Positive0, Positive, Positive0, Number)
@returns(Number)
def fpt_sym_up(t, c1, c2, c3):
    """Upper boundary density at `t` for symmetric constant bounds.

    With drift mu and bounds +/-bound the arguments are

    - c1 = 4 * bound^2
    - c2 = mu^2 / 2
    - c3 = mu * bound

    The lower boundary density is exp(-2 * mu * bound) times this.
    """
    return math.exp(c3 - c2 * t) / c1 * fpt_sym_fast(t / c1, param.series_tol)

@accepts(Positive0, Positive, Positive0, Number, Range(0, 1))
@returns(Number)
def fpt_asym_up(t, c1, c2, c3, w):
    """Upper boundary density at `t` for constant, possibly asymmetric bounds.

    With drift mu, upper bound bu and lower bound bl the arguments are

    - c1 = (bu - bl)^2
    - c2 = mu^2 / 2
    - c3 = mu * bu
    - w = -bl / (bu - bl)
    """
    return math.exp(c3 - c2 * t) / c1 * fpt_asym_fast(t / c1, 1 - w, param.series_tol)

@accepts(Positive0, Positive, Positive0, Number, Range(0, 1))
@returns(Number)
def fpt_asym_lo(t, c1, c2, c4, w):
    """Lower boundary density at `t` for constant, possibly asymmetric bounds.

    Arguments are as for fpt_asym_up, except c4 = mu * bl.
    """
    return math.exp(c4 - c2 * t) / c1 * fpt_asym_fast(t / c1, w, param.series_tol)

@accepts(Number, Number, Number, Integer, g1=Maybe(DensitySequence), g2=Maybe(DensitySequence))
@returns(Unchecked)
@ensures("len(return[0]) == len(return[1]) == k_max")
@ensures("np.all(return[0] >= 0) and np.all(return[1] >= 0)")
def ddm_fpt_const(mu, bound, dt, k_max, g1=None, g2=None):
    """First-passage time densities for constant drift and symmetric constant bounds.

    - `mu` - the drift rate, which must be positive
    - `bound` - the bounds are at +bound and -bound, with bound > 0
    - `dt` - step size in seconds
    - `k_max` - number of steps; element k of the output is the density at (k+1)*dt
    - `g1`, `g2` - optional output vectors for the upper and lower boundary densities

    Returns (g1, g2).  The upper density is computed from the series
    expansion at every step, and the lower density is exp(-2 * mu *
    bound) times the upper one.
    """
    k_max = check_grid(dt, k_max)
    if mu <= 0:
        raise ValueError("Drift mu must be positive, got %s" % str(mu))
    if bound <= 0:
        raise ValueError("Bound must be positive, got %s" % str(bound))
    g1 = output_vector(g1, k_max, "g1")
    g2 = output_vector(g2, k_max, "g2")
    _logger.debug("Series solution for mu=%f, bound=%f over %i steps" % (mu, bound, k_max))
    c1 = 4 * bound * bound
    c2 = mu * mu / 2
    c3 = mu * bound
    c4 = math.exp(-2 * c3)
    for i in range(k_max):
        g = fpt_sym_up((i + 1) * dt, c1, c2, c3)
        g1[i] = max(g, 0)
        g2[i] = max(c4 * g, 0)
    return g1, g2

@accepts(Number, Number, Number, Number, Integer, g1=Maybe(DensitySequence), g2=Maybe(DensitySequence))
@returns(Unchecked)
@ensures("len(return[0]) == len(return[1]) == k_max")
@ensures("np.all(return[0] >= 0) and np.all(return[1] >= 0)")
def ddm_fpt_const_asym(mu, bound_up, bound_lo, dt, k_max, g1=None, g2=None):
    """First-passage time densities for constant drift and asymmetric constant bounds.

    The process starts at 0, between `bound_lo` < 0 < `bound_up`.
    Unlike ddm_fpt_const, `mu` may take any sign.  Other arguments are
    as for ddm_fpt_const.

    Both densities come from their own series, since the lower density
    is no longer a fixed multiple of the upper one.  Symmetric bounds
    with positive drift are passed on to ddm_fpt_const.
    """
    k_max = check_grid(dt, k_max)
    if not bound_lo < 0 < bound_up:
        raise ValueError("Bounds must satisfy bound_lo < 0 < bound_up, got %s and %s" % (str(bound_lo), str(bound_up)))
    if bound_up == -bound_lo and mu > 0:
        return ddm_fpt_const(mu, bound_up, dt, k_max, g1=g1, g2=g2)
    g1 = output_vector(g1, k_max, "g1")
    g2 = output_vector(g2, k_max, "g2")
    _logger.debug("Series solution for mu=%f, bounds=(%f, %f) over %i steps" % (mu, bound_lo, bound_up, k_max))
    c1 = (bound_up - bound_lo)**2
    c2 = mu * mu / 2
    c3 = mu * bound_up
    c4 = mu * bound_lo
    w = -bound_lo / (bound_up - bound_lo)
    for i in range(k_max):
        t = (i + 1) * dt
        g1[i] = max(fpt_asym_up(t, c1, c2, c3, w), 0)
        g2[i] = max(fpt_asym_lo(t, c1, c2, c4, w), 0)
    return g1, g2
