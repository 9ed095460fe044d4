# Copyright 2018 Max Shinn <maxwell.shinn@yale.edu>
#           2018 Norman Lam <norman.lam@yale.edu>
#
# This file is part of ddmfpt, and is available under the MIT license.
# Please see LICENSE.txt in the root directory for more information.

# Series expansions of the first-passage time density for the
# canonical problem: zero drift, unit noise, absorbing boundaries at 0
# and 1, starting point w.  All functions return the density of
# hitting the lower boundary (0) at time t.
#
# Reference:
# Navarro, D. J., & Fuss, I. G. (2009). Fast and accurate calculations
# for first-passage times in Wiener diffusion models. Journal of
# Mathematical Psychology, 53(4), 222-230.

__all__ = ["use_short_series", "fpt_asym_short", "fpt_asym_long",
           "fpt_asym_fast", "fpt_sym_series", "fpt_sym_fast"]

import math

from paranoid.types import Boolean, Number, Positive, Positive0, Range
from paranoid.decorators import accepts, returns, ensures

@accepts(Positive, Positive)
@returns(Boolean)
def use_short_series(t, tol):
    """Whether the short-time series is cheaper than the long-time one at `t`.

    Compares the number of terms each series needs to reach absolute
    accuracy `tol` (Navarro & Fuss, Eq. 13).  If either estimate is
    undefined (a negative radicand, for very large t or tol) the
    long-time series is used.
    """
    short_sq = -2 * t * math.log(2 * tol * math.sqrt(2 * math.pi * t))
    long_sq = -2 * math.log(math.pi * t * tol) / (t * math.pi**2)
    if short_sq < 0 or long_sq < 0:
        return False
    return 2 + math.sqrt(short_sq) < math.sqrt(long_sq)

@accepts(Positive, Range(0, 1), Positive)
@returns(Number)
def fpt_asym_short(t, w, tol):
    """Short-time series (Navarro & Fuss, Eq. 6).

    Sums the images of the starting point under reflection across both
    boundaries, w, w+2, w-2, w+4, w-4, ..., until both images of the
    latest pair are smaller than `tol` relative to the prefactor
    t^(-3/2)/sqrt(2 pi).
    """
    b = t**-1.5 / math.sqrt(2 * math.pi)
    tol *= b
    t2 = 2 * t
    f = w * math.exp(-w * w / t2)
    k = 1
    while True:
        # w+2k underflows long before w-2k when w > 1/2
        c_up = w + 2 * k
        c_lo = w - 2 * k
        incr_up = c_up * math.exp(-c_up * c_up / t2)
        incr_lo = c_lo * math.exp(-c_lo * c_lo / t2)
        f += incr_up + incr_lo
        if abs(incr_up) < tol and abs(incr_lo) < tol:
            return f * b
        k += 1

@accepts(Positive, Range(0, 1), Positive)
@returns(Number)
def fpt_asym_long(t, w, tol):
    """Long-time series (Navarro & Fuss, Eq. 5).

    A Fourier sine series, summed until the latest term is smaller
    than `tol`*pi.
    """
    tol *= math.pi
    f = 0.
    k = 1
    while True:
        kpi = k * math.pi
        incr = k * math.exp(-kpi * kpi * t / 2) * math.sin(kpi * w)
        f += incr
        if abs(incr) < tol:
            return f * math.pi
        k += 1

@accepts(Positive0, Range(0, 1), Positive)
@returns(Number)
@ensures("t == 0 --> return == 0")
def fpt_asym_fast(t, w, tol):
    """Lower boundary density at `t`, using the cheaper of the two series."""
    if t == 0:
        return 0.
    if use_short_series(t, tol):
        return fpt_asym_short(t, w, tol)
    return fpt_asym_long(t, w, tol)

@accepts(Positive0, Positive0, Positive, Positive)
@returns(Number)
def fpt_sym_series(t, a, b, tol):
    """Series for a process starting halfway between the boundaries.

    Both series collapse to b*(exp(-a) - 3 exp(-9a) + 5 exp(-25a) - ...)
    when w = 1/2, with a and b depending on which one is used (see
    fpt_sym_fast).  `t` only documents the time the series belongs to.
    Terms are added until one is smaller than `tol` relative to b.
    """
    tol *= b
    f = math.exp(-a)
    twok = 3
    sign = -1
    while True:
        incr = twok * math.exp(-twok * twok * a)
        f += sign * incr
        if incr < tol:
            return f * b
        twok += 2
        sign = -sign

@accepts(Positive0, Positive)
@returns(Number)
@ensures("t == 0 --> return == 0")
def fpt_sym_fast(t, tol):
    """Lower boundary density at `t` for w = 1/2, using the cheaper series."""
    if t == 0:
        return 0.
    if use_short_series(t, tol):
        return fpt_sym_series(t, 1 / (8 * t), 1 / math.sqrt(8 * math.pi * t**3), tol)
    return fpt_sym_series(t, t * math.pi**2 / 2, math.pi, tol)
