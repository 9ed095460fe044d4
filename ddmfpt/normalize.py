# Copyright 2018 Max Shinn <maxwell.shinn@yale.edu>
#           2018 Norman Lam <norman.lam@yale.edu>
#
# This file is part of ddmfpt, and is available under the MIT license.
# Please see LICENSE.txt in the root directory for more information.

__all__ = ["mass_normalize"]

import numpy as np

from paranoid.types import Positive, Maybe, Natural1, Unchecked
from paranoid.decorators import accepts, returns, requires, ensures

from . import parameters as param
from .paranoid_types import DensitySequence
from .logger import logger as _logger

@accepts(DensitySequence, DensitySequence, Positive, n=Maybe(Natural1))
@requires("len(g1) == len(g2)")
@requires("n is None or n <= len(g1)")
@returns(Unchecked)
@ensures("abs((np.sum(g1[:len(g1) if n is None else n]) + np.sum(g2[:len(g2) if n is None else n])) * dt - 1) < 1e-8")
def mass_normalize(g1, g2, dt, n=None):
    """Make the densities g1 and g2 sum to one, in place.

    Negative elements are set to zero.  Then mass is added to (or
    removed from) the last elements of `g1` and `g2` so that
    (sum(g1) + sum(g2)) * dt == 1, while keeping the fraction of mass
    at the upper boundary, sum(g1) / (sum(g1) + sum(g2)), what it was
    after removing the negative values.  Any probability that did not
    reach a bound within the time grid, and any truncation error, thus
    ends up in the final step.

    Only the first `n` elements are considered, which defaults to all
    of them.  Returns (g1, g2).
    """
    if n is None:
        n = len(g1)
    g1v = g1[:n]
    g2v = g2[:n]
    # clip negative densities
    g1v[g1v < 0] = 0
    g2v[g2v < 0] = 0
    g1_sum = np.sum(g1v)
    g2_sum = np.sum(g2v)
    if g1_sum + g2_sum <= 0:
        raise ValueError("Cannot normalize densities that are zero everywhere")
    pdfsum = (g1_sum + g2_sum) * dt
    # If it is only a small renormalization, don't bother alerting the user.
    if abs(pdfsum - 1) > param.renorm_tol and param.renorm_warnings:
        _logger.warning(("Renormalizing probability density from " + str(pdfsum) + " to 1."
            + "  Try decreasing dt or increasing the number of steps."))
    # the last step absorbs the missing mass
    p = g1_sum / (g1_sum + g2_sum)
    g1v[n-1] += p / dt - g1_sum
    g2v[n-1] += (1 - p) / dt - g2_sum
    _logger.debug("Moved %f of mass into the last step" % (1 - pdfsum))
    return g1, g2
