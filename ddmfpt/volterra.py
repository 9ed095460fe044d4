# Copyright 2018 Max Shinn <maxwell.shinn@yale.edu>
#           2018 Norman Lam <norman.lam@yale.edu>
#
# This file is part of ddmfpt, and is available under the MIT license.
# Please see LICENSE.txt in the root directory for more information.

# First-passage time densities for time-varying drift, variance and
# bounds.  The densities solve a Volterra integral equation of the
# second kind, which is discretized on the time grid and solved by
# forward substitution: the density at step k is the density of
# reaching the bound at step k from the starting point, corrected by
# the mass that already crossed either bound at an earlier step j and
# reaches the bound again at step k.  This costs O(k_max^2).
#
# References:
# Smith, P. L. (2000). Stochastic dynamic models of response time and
# accuracy: A foundational primer. Journal of Mathematical Psychology,
# 44(3), 408-463.
# Buonocore, A., Giorno, V., Nobile, A. G., & Ricciardi, L. M. (1990).
# On the two-boundary first-crossing-time problem for diffusion
# processes. Journal of Applied Probability, 27(1), 102-114.

__all__ = ["ddm_fpt_full", "ddm_fpt_full_leak", "ddm_fpt",
           "ddm_fpt_const_mu", "ddm_fpt_w"]

import numpy as np

from paranoid.types import Number, Integer, Maybe, Unchecked
from paranoid.decorators import accepts, returns, ensures

from .moments import Moments, accumulate_moments
from .paranoid_types import ParameterSequence, DensitySequence
from .vectors import check_grid, as_sequence, output_vector, bound_derivative, scratch_storage
from .logger import logger as _logger

INV_SQRT_2_PI = 1 / np.sqrt(2 * np.pi)

def _flux(diff, var, velocity, sig2):
    """Gaussian transition kernel times the boundary flux correction.

    `diff` is the distance between the boundary and the mean of the
    process, `var` the variance over the interval, `velocity` the
    boundary velocity relative to the drift, and `sig2` the current
    diffusion variance.
    """
    return np.exp(-0.5 * diff * diff / var) * (velocity - sig2 * diff / var)

def _solve_volterra(moments, sig2, b_up, b_lo, v_up, v_lo, dt, g1, g2, lower_ratio=None):
    """Fill g1 and g2 by forward substitution.

    `moments` holds the cumulative drift and variance (and the decay
    tables for a leaky accumulator), `sig2` the variance at each step,
    `b_up`/`b_lo` the bounds, and `v_up`/`v_lo` the boundary velocities
    relative to the drift.

    If `lower_ratio` is given, only g1 is solved for and g2[k] is
    g1[k]*lower_ratio[k].  The two sums over j are the only place
    where earlier steps enter, and for a fixed k they do not depend on
    each other.
    """
    cum_mu = moments.cum_mu
    cum_sig2 = moments.cum_sig2
    dt_inv_sqrt_2_pi = dt * INV_SQRT_2_PI
    for k in range(len(g1)):
        # values at step k
        sig2_k = sig2[k]
        b_up_k = b_up[k]
        b_lo_k = b_lo[k]
        cum_mu_k = cum_mu[k]
        cum_sig2_k = cum_sig2[k]
        v_up_k = v_up[k]
        v_lo_k = v_lo[k]
        norm_k = INV_SQRT_2_PI / np.sqrt(cum_sig2_k)
        # mass reaching each bound directly from the start
        g1_k = -norm_k * _flux(b_up_k - cum_mu_k, cum_sig2_k, v_up_k, sig2_k)
        g2_k = norm_k * _flux(b_lo_k - cum_mu_k, cum_sig2_k, v_lo_k, sig2_k)
        # minus mass that crossed a bound at an earlier step j
        if k > 0:
            if moments.leaky:
                disc = moments.disc[k-1::-1]
                disc2 = moments.disc2[k-1::-1]
            else:
                disc = disc2 = 1.
            cum_sig2_diff = cum_sig2_k - disc2 * cum_sig2[:k]
            norm = dt_inv_sqrt_2_pi / np.sqrt(cum_sig2_diff)
            cum_mu_diff = disc * cum_mu[:k] - cum_mu_k
            b_up_j = disc * b_up[:k]
            b_lo_j = disc * b_lo[:k]
            g1_k += np.sum(norm * (g1[:k] * _flux(b_up_k - b_up_j + cum_mu_diff, cum_sig2_diff, v_up_k, sig2_k)
                                   + g2[:k] * _flux(b_up_k - b_lo_j + cum_mu_diff, cum_sig2_diff, v_up_k, sig2_k)))
            if lower_ratio is None:
                g2_k -= np.sum(norm * (g1[:k] * _flux(b_lo_k - b_up_j + cum_mu_diff, cum_sig2_diff, v_lo_k, sig2_k)
                                       + g2[:k] * _flux(b_lo_k - b_lo_j + cum_mu_diff, cum_sig2_diff, v_lo_k, sig2_k)))
        if lower_ratio is not None:
            g2_k = g1_k * lower_ratio[k]
        # rounding can push small densities below zero
        g1[k] = max(g1_k, 0)
        g2[k] = max(g2_k, 0)
    return g1, g2

def _check_variance(sig2):
    if np.any(sig2 <= 0):
        raise ValueError("Diffusion variance sig2 must be positive at every step")

@accepts(ParameterSequence, ParameterSequence, ParameterSequence, ParameterSequence,
         ParameterSequence, ParameterSequence, Number, Integer,
         g1=Maybe(DensitySequence), g2=Maybe(DensitySequence))
@returns(Unchecked)
@ensures("len(return[0]) == len(return[1]) == k_max")
@ensures("np.all(return[0] >= 0) and np.all(return[1] >= 0)")
def ddm_fpt_full(mu, sig2, b_lo, b_up, b_lo_deriv, b_up_deriv, dt, k_max, g1=None, g2=None):
    """First-passage time densities for time-varying drift, variance and bounds.

    - `mu` - drift rate at each step
    - `sig2` - diffusion variance at each step, which must be positive
    - `b_lo`, `b_up` - lower and upper bound at each step
    - `b_lo_deriv`, `b_up_deriv` - time derivatives of the bounds (see bound_derivative)
    - `dt` - step size in seconds
    - `k_max` - number of steps; element k of the output is the density at (k+1)*dt
    - `g1`, `g2` - optional output vectors for the upper and lower boundary densities

    All sequences need at least `k_max` elements.  The process starts
    at 0.  Returns (g1, g2), which are non-negative but not normalized
    (see mass_normalize).  Raises AllocationError if scratch storage
    cannot be obtained.
    """
    k_max = check_grid(dt, k_max)
    mu = as_sequence(mu, k_max, "mu")
    sig2 = as_sequence(sig2, k_max, "sig2")
    b_lo = as_sequence(b_lo, k_max, "b_lo")
    b_up = as_sequence(b_up, k_max, "b_up")
    b_lo_deriv = as_sequence(b_lo_deriv, k_max, "b_lo_deriv")
    b_up_deriv = as_sequence(b_up_deriv, k_max, "b_up_deriv")
    _check_variance(sig2)
    g1 = output_vector(g1, k_max, "g1")
    g2 = output_vector(g2, k_max, "g2")
    _logger.debug("Solving the general recursion over %i steps" % k_max)
    with scratch_storage("the general recursion"):
        moments = accumulate_moments(mu, sig2, dt)
        return _solve_volterra(moments, sig2, b_up, b_lo, b_up_deriv - mu, b_lo_deriv - mu, dt, g1, g2)

@accepts(ParameterSequence, ParameterSequence, ParameterSequence, ParameterSequence,
         ParameterSequence, ParameterSequence, Number, Number, Integer,
         g1=Maybe(DensitySequence), g2=Maybe(DensitySequence))
@returns(Unchecked)
@ensures("len(return[0]) == len(return[1]) == k_max")
@ensures("np.all(return[0] >= 0) and np.all(return[1] >= 0)")
def ddm_fpt_full_leak(mu, sig2, b_lo, b_up, b_lo_deriv, b_up_deriv, inv_leak, dt, k_max, g1=None, g2=None):
    """First-passage time densities for a leaky accumulator.

    The accumulated evidence decays towards zero with rate `inv_leak`
    (one over the leak time constant), making it an Ornstein-Uhlenbeck
    process.  `inv_leak` must be non-negative, and 0 gives the same
    result as ddm_fpt_full.  All other arguments are as for
    ddm_fpt_full.
    """
    k_max = check_grid(dt, k_max)
    if inv_leak < 0:
        raise ValueError("The leak rate inv_leak cannot be negative, got %s" % str(inv_leak))
    mu = as_sequence(mu, k_max, "mu")
    sig2 = as_sequence(sig2, k_max, "sig2")
    b_lo = as_sequence(b_lo, k_max, "b_lo")
    b_up = as_sequence(b_up, k_max, "b_up")
    b_lo_deriv = as_sequence(b_lo_deriv, k_max, "b_lo_deriv")
    b_up_deriv = as_sequence(b_up_deriv, k_max, "b_up_deriv")
    _check_variance(sig2)
    g1 = output_vector(g1, k_max, "g1")
    g2 = output_vector(g2, k_max, "g2")
    _logger.debug("Solving the leaky recursion with inv_leak=%f over %i steps" % (inv_leak, k_max))
    with scratch_storage("the leaky recursion"):
        moments = accumulate_moments(mu, sig2, dt, inv_leak=inv_leak)
        # The leak pulls a bound at b towards zero, so relative to the
        # process the bound moves with an extra inv_leak*b
        v_up = b_up_deriv + inv_leak * b_up - mu
        v_lo = b_lo_deriv + inv_leak * b_lo - mu
        return _solve_volterra(moments, sig2, b_up, b_lo, v_up, v_lo, dt, g1, g2)

@accepts(ParameterSequence, ParameterSequence, Number, Integer,
         g1=Maybe(DensitySequence), g2=Maybe(DensitySequence))
@returns(Unchecked)
@ensures("len(return[0]) == len(return[1]) == k_max")
@ensures("np.all(return[0] >= 0) and np.all(return[1] >= 0)")
def ddm_fpt(mu, bound, dt, k_max, g1=None, g2=None):
    """First-passage time densities for time-varying drift and symmetric bounds.

    The bounds are at +bound[k] and -bound[k] and the diffusion
    variance is 1.  The bound velocity is found by finite differences
    (see bound_derivative).  Other arguments are as for ddm_fpt_full.
    """
    k_max = check_grid(dt, k_max)
    mu = as_sequence(mu, k_max, "mu")
    bound = as_sequence(bound, k_max, "bound")
    g1 = output_vector(g1, k_max, "g1")
    g2 = output_vector(g2, k_max, "g2")
    _logger.debug("Solving the recursion for symmetric bounds over %i steps" % k_max)
    with scratch_storage("the symmetric bound recursion"):
        sig2 = np.ones(k_max)
        bound_deriv = bound_derivative(bound, dt)
        moments = accumulate_moments(mu, sig2, dt)
        return _solve_volterra(moments, sig2, bound, -bound, bound_deriv - mu, -bound_deriv - mu, dt, g1, g2)

@accepts(Number, ParameterSequence, Number, Integer,
         g1=Maybe(DensitySequence), g2=Maybe(DensitySequence))
@returns(Unchecked)
@ensures("len(return[0]) == len(return[1]) == k_max")
@ensures("np.all(return[0] >= 0) and np.all(return[1] >= 0)")
def ddm_fpt_const_mu(mu, bound, dt, k_max, g1=None, g2=None):
    """First-passage time densities for constant drift and symmetric, time-varying bounds.

    `mu` is a single, positive drift rate.  Only the upper density is
    found by recursion.  The lower density at step k is exp(-2 * mu *
    bound[k]) times the upper one.  Other arguments are as for ddm_fpt.
    """
    k_max = check_grid(dt, k_max)
    if mu <= 0:
        raise ValueError("Drift mu must be positive, got %s" % str(mu))
    bound = as_sequence(bound, k_max, "bound")
    g1 = output_vector(g1, k_max, "g1")
    g2 = output_vector(g2, k_max, "g2")
    _logger.debug("Solving the recursion for constant drift over %i steps" % k_max)
    with scratch_storage("the constant drift recursion"):
        mu_seq = np.full(k_max, float(mu))
        sig2 = np.ones(k_max)
        bound_deriv = bound_derivative(bound, dt)
        moments = accumulate_moments(mu_seq, sig2, dt)
        return _solve_volterra(moments, sig2, bound, -bound, bound_deriv - mu, -bound_deriv - mu, dt,
                               g1, g2, lower_ratio=np.exp(-2 * mu * bound))

@accepts(ParameterSequence, ParameterSequence, Number, Number, Integer,
         g1=Maybe(DensitySequence), g2=Maybe(DensitySequence))
@returns(Unchecked)
@ensures("len(return[0]) == len(return[1]) == n_max")
@ensures("np.all(return[0] >= 0) and np.all(return[1] >= 0)")
def ddm_fpt_w(mu, bound, k, dt, n_max, g1=None, g2=None):
    """First-passage time densities for a proportional-rate model.

    Both the drift and the diffusion variance are tied to the momentary
    evidence strength `mu`: with a2 = mu^2, the drift at step n is
    k*a2[n] and the variance is a2[n], so that time effectively runs on
    the clock A(t), the integral of a2.  The bounds are at +bound[n]
    and -bound[n].

    - `mu` - evidence strength at each step, which must not be zero
    - `bound` - bound height at each step
    - `k` - proportionality factor (the weight of the evidence)
    - `dt` - step size in seconds
    - `n_max` - number of steps

    Only the upper density is found by recursion.  The lower density
    at step n is exp(-2 * k * bound[n]) times the upper one.
    """
    n_max = check_grid(dt, n_max)
    mu = as_sequence(mu, n_max, "mu")
    bound = as_sequence(bound, n_max, "bound")
    if np.any(mu == 0):
        raise ValueError("Evidence strength mu cannot be zero in the proportional-rate model")
    g1 = output_vector(g1, n_max, "g1")
    g2 = output_vector(g2, n_max, "g2")
    _logger.debug("Solving the proportional-rate recursion with k=%f over %i steps" % (k, n_max))
    with scratch_storage("the proportional-rate recursion"):
        a2 = mu * mu
        A = accumulate_moments(a2, a2, dt).cum_sig2
        bound_deriv = bound_derivative(bound, dt)
        moments = Moments(cum_mu=k * A, cum_sig2=A)
        return _solve_volterra(moments, a2, bound, -bound, bound_deriv - k * a2, -bound_deriv - k * a2, dt,
                               g1, g2, lower_ratio=np.exp(-2 * k * bound))
