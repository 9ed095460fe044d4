# Copyright 2018 Max Shinn <maxwell.shinn@yale.edu>
#           2018 Norman Lam <norman.lam@yale.edu>
#
# This file is part of ddmfpt, and is available under the MIT license.
# Please see LICENSE.txt in the root directory for more information.

__all__ = ["Moments", "accumulate_moments", "discount_tables"]

import numpy as np
from scipy.signal import lfilter

import paranoid.types as pt
import paranoid.decorators as pns

from .paranoid_types import ParameterSequence
from .vectors import allocate, scratch_storage

@pns.paranoidclass
class Moments:
    """Cumulative drift and variance of the accumulated evidence.

    `cum_mu[k]` and `cum_sig2[k]` are the mean and variance of the
    evidence at time (k+1)*dt when starting from zero at time 0.  For
    leaky (Ornstein-Uhlenbeck) accumulation, `disc` and `disc2` hold
    the single and double decay factors over i+1 steps,

      disc[i] = exp(-inv_leak*dt*(i+1))
      disc2[i] = exp(-2*inv_leak*dt*(i+1))

    and are None otherwise.

    These only live for the duration of a single solver call.
    """
    @staticmethod
    def _test(v):
        assert v.cum_mu in pt.NDArray(d=1, t=pt.Number)
        assert v.cum_sig2 in pt.NDArray(d=1, t=pt.Number)
        assert len(v.cum_mu) == len(v.cum_sig2)
        assert np.all(v.cum_sig2 > 0), "Cumulative variance must be positive"
        assert (v.disc is None) == (v.disc2 is None)
        if v.disc is not None:
            assert len(v.disc) == len(v.disc2) == len(v.cum_mu)
            assert np.all((v.disc > 0) & (v.disc <= 1))
            assert np.all((v.disc2 > 0) & (v.disc2 <= 1))
    @staticmethod
    def _generate():
        yield Moments(cum_mu=np.asarray([.1]), cum_sig2=np.asarray([.01]))
        yield accumulate_moments(np.linspace(0, 1, 30), np.ones(30), .01)
        yield accumulate_moments(np.ones(30), np.ones(30)*.5, .01, inv_leak=2)
    def __init__(self, cum_mu, cum_sig2, disc=None, disc2=None):
        self.cum_mu = cum_mu
        self.cum_sig2 = cum_sig2
        self.disc = disc
        self.disc2 = disc2
    def __len__(self):
        return len(self.cum_mu)
    @property
    def leaky(self):
        return self.disc is not None

@pns.accepts(pt.Positive0, pt.Positive, pt.Natural1)
@pns.returns(pt.Unchecked)
@pns.ensures("len(return[0]) == len(return[1]) == k_max")
def discount_tables(inv_leak, dt, k_max):
    """The single and double decay tables of a leaky accumulator.

    Returns (disc, disc2) as documented in Moments.  disc2[i] equals
    disc[2i+1] wherever the latter exists, so the first half of disc2
    is read off disc and only the remainder is computed.
    """
    exp_leak = np.exp(-dt * inv_leak)
    exp2_leak = np.exp(-2 * dt * inv_leak)
    with scratch_storage("the discount tables"):
        disc, disc2 = allocate(k_max, count=2)
        disc[:] = exp_leak ** np.arange(1, k_max+1)
        n_half = k_max // 2
        disc2[:n_half] = disc[1::2]
        disc2[n_half:] = exp2_leak ** np.arange(n_half+1, k_max+1)
    return disc, disc2

@pns.accepts(ParameterSequence, ParameterSequence, pt.Positive, inv_leak=pt.Positive0)
@pns.requires("len(mu) == len(sig2)")
@pns.returns(Moments)
@pns.ensures("len(return) == len(mu)")
def accumulate_moments(mu, sig2, dt, inv_leak=0):
    """Accumulate drift `mu` and variance `sig2` over the time grid.

    Without leak this is a running sum, cum_mu[k] = cum_mu[k-1] +
    dt*mu[k].  With leak rate `inv_leak` (one over the leak time
    constant) the previous value decays by exp(-dt*inv_leak) at each
    step, and the variance by the square of that.  Both recurrences
    are first-order linear filters of the inputs.

    Raises ValueError for a negative `inv_leak`, and AllocationError
    if the cumulative sequences cannot be stored.
    """
    if inv_leak < 0:
        raise ValueError("The leak rate inv_leak cannot be negative, got %s" % str(inv_leak))
    mu = np.asarray(mu, dtype='float64')
    sig2 = np.asarray(sig2, dtype='float64')
    with scratch_storage("the cumulative moments"):
        if inv_leak == 0:
            return Moments(cum_mu=np.cumsum(dt * mu), cum_sig2=np.cumsum(dt * sig2))
        exp_leak = np.exp(-dt * inv_leak)
        exp2_leak = np.exp(-2 * dt * inv_leak)
        cum_mu = lfilter([dt], [1., -exp_leak], mu)
        cum_sig2 = lfilter([dt], [1., -exp2_leak], sig2)
        disc, disc2 = discount_tables(inv_leak, dt, len(mu))
    return Moments(cum_mu=cum_mu, cum_sig2=cum_sig2, disc=disc, disc2=disc2)
