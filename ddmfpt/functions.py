# Copyright 2018 Max Shinn <maxwell.shinn@yale.edu>
#           2018 Norman Lam <norman.lam@yale.edu>
#
# This file is part of ddmfpt, and is available under the MIT license.
# Please see LICENSE.txt in the root directory for more information.

__all__ = ['solve_fpt']

import numpy as np

from paranoid.types import Positive, Positive0, Boolean, Maybe, Natural1, Unchecked
from paranoid.decorators import accepts, returns, ensures

from . import parameters as param
from .analytic import ddm_fpt_const, ddm_fpt_const_asym
from .volterra import ddm_fpt_full, ddm_fpt_full_leak, ddm_fpt, ddm_fpt_const_mu
from .normalize import mass_normalize
from .vectors import check_grid, as_sequence, bound_derivative
from .logger import logger as _logger

def _broadcast(v, k_max, name):
    """A scalar becomes a constant sequence of length k_max."""
    if np.ndim(v) == 0:
        return np.full(k_max, float(v))
    return as_sequence(v, k_max, name)

def _is_constant(v):
    return bool(np.all(v == v[0]))

@accepts(Unchecked, Unchecked, dt=Positive, k_max=Maybe(Natural1), sig2=Unchecked,
         bound_lo=Unchecked, inv_leak=Positive0, normalize=Boolean)
@returns(Unchecked)
@ensures("not normalize --> np.all(return[0] >= 0) and np.all(return[1] >= 0)")
def solve_fpt(mu, bound, dt=param.dt, k_max=None, sig2=None, bound_lo=None, inv_leak=0, normalize=False):
    """Compute first-passage time densities, choosing the fastest applicable solver.

    - `mu` - drift rate, a number or a sequence with one value per step
    - `bound` - the upper bound, a number or a sequence.  Unless
      `bound_lo` is given, the lower bound is -bound.
    - `dt` - step size in seconds
    - `k_max` - number of steps.  Defaults to the length of the
      sequence arguments, or to parameters.T_dur/dt if all are numbers.
    - `sig2` - diffusion variance, a number or a sequence.  Defaults to 1.
    - `bound_lo` - the lower bound, a number or a sequence
    - `inv_leak` - leak rate of the accumulator (one over the leak time constant)
    - `normalize` - if True, pass the result through mass_normalize

    Constant drift and bounds are solved with series expansions in
    O(k_max) time.  Anything else uses the O(k_max^2) recursion, with
    the simplest variant that can represent the model.  Boundary
    velocities are found by finite differences.

    Returns (g1, g2), the densities at the upper and lower bounds at
    times (k+1)*dt.
    """
    if k_max is None:
        lengths = [len(v) for v in (mu, bound, sig2, bound_lo) if v is not None and np.ndim(v) > 0]
        k_max = min(lengths) if lengths else int(round(param.T_dur / dt))
    k_max = check_grid(dt, k_max)
    mu = _broadcast(mu, k_max, "mu")
    b_up = _broadcast(bound, k_max, "bound")
    b_lo = -b_up if bound_lo is None else _broadcast(bound_lo, k_max, "bound_lo")
    sig2 = np.ones(k_max) if sig2 is None else _broadcast(sig2, k_max, "sig2")
    unit_variance = np.all(sig2 == 1)
    symmetric = np.all(b_lo == -b_up)
    const_mu = _is_constant(mu)
    const_bound = _is_constant(b_up) and _is_constant(b_lo)
    if inv_leak > 0:
        solver = "ddm_fpt_full_leak"
        g1, g2 = ddm_fpt_full_leak(mu, sig2, b_lo, b_up, bound_derivative(b_lo, dt), bound_derivative(b_up, dt),
                                   inv_leak, dt, k_max)
    elif unit_variance and const_mu and const_bound and symmetric and mu[0] > 0:
        solver = "ddm_fpt_const"
        g1, g2 = ddm_fpt_const(mu[0], b_up[0], dt, k_max)
    elif unit_variance and const_mu and const_bound and b_lo[0] < 0 < b_up[0]:
        solver = "ddm_fpt_const_asym"
        g1, g2 = ddm_fpt_const_asym(mu[0], b_up[0], b_lo[0], dt, k_max)
    elif unit_variance and symmetric and const_mu and mu[0] > 0:
        solver = "ddm_fpt_const_mu"
        g1, g2 = ddm_fpt_const_mu(mu[0], b_up, dt, k_max)
    elif unit_variance and symmetric:
        solver = "ddm_fpt"
        g1, g2 = ddm_fpt(mu, b_up, dt, k_max)
    else:
        solver = "ddm_fpt_full"
        g1, g2 = ddm_fpt_full(mu, sig2, b_lo, b_up, bound_derivative(b_lo, dt), bound_derivative(b_up, dt),
                              dt, k_max)
    _logger.debug("Solved with %s" % solver)
    if normalize:
        mass_normalize(g1, g2, dt)
    return g1, g2
