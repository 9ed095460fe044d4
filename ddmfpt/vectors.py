# Copyright 2018 Max Shinn <maxwell.shinn@yale.edu>
#           2018 Norman Lam <norman.lam@yale.edu>
#
# This file is part of ddmfpt, and is available under the MIT license.
# Please see LICENSE.txt in the root directory for more information.

# Helpers for the vectors passed in and out of the solvers: storage,
# argument checking, and resizing of parameter sequences.

__all__ = ["AllocationError", "extend_vector", "bound_derivative", "t_domain"]

import contextlib
import numpy as np

from paranoid.types import Number, Integer, Maybe, Natural0, Positive, NDArray
from paranoid.decorators import accepts, returns, requires, ensures

from .paranoid_types import ParameterSequence

class AllocationError(MemoryError):
    """Storage for a solver's scratch or output vectors could not be obtained.

    Nothing is guaranteed about the contents of any output vectors
    when this is raised.
    """
    pass

@contextlib.contextmanager
def scratch_storage(what):
    """Scope in which running out of memory is reported as an AllocationError.

    `what` names the computation for the error message.  Scratch
    vectors created inside the scope are local to it and are released
    once the scope is left, whether normally or through an exception.
    """
    try:
        yield
    except MemoryError as e:
        if isinstance(e, AllocationError):
            raise
        raise AllocationError("Could not allocate scratch storage for " + what) from e

def allocate(n, count=1):
    """Return `count` new uninitialized float64 vectors of length `n`.

    A single vector is returned when `count` is 1, otherwise a tuple.
    """
    try:
        vecs = tuple(np.empty(n, dtype='float64') for _ in range(count))
    except MemoryError as e:
        raise AllocationError("Could not allocate %i vector(s) of length %i" % (count, n)) from e
    return vecs[0] if count == 1 else vecs

def check_grid(dt, k_max):
    """Validate the time grid, returning `k_max` as an int."""
    if not np.isfinite(dt) or dt <= 0:
        raise ValueError("Step size dt must be positive, got %s" % str(dt))
    if int(k_max) != k_max or k_max <= 0:
        raise ValueError("Number of steps k_max must be a positive integer, got %s" % str(k_max))
    return int(k_max)

def as_sequence(v, k_max, name):
    """Convert `v` to a float64 vector of the first `k_max` elements.

    Raises ValueError if `v` is not one-dimensional or holds fewer
    than `k_max` elements.
    """
    a = np.asarray(v, dtype='float64')
    if a.ndim != 1:
        raise ValueError("%s must be one-dimensional, got shape %s" % (name, str(a.shape)))
    if len(a) < k_max:
        raise ValueError("%s holds %i elements but k_max is %i" % (name, len(a), k_max))
    return a[:k_max]

def output_vector(g, k_max, name):
    """Return the caller's output vector `g`, or a new one if `g` is None.

    Output vectors are written in place and never resized, so a
    supplied vector must be a float64 numpy array of exactly `k_max`
    elements.
    """
    if g is None:
        return allocate(k_max)
    if not isinstance(g, np.ndarray) or g.dtype != np.dtype('float64') or g.ndim != 1:
        raise ValueError("Output vector %s must be a one-dimensional float64 numpy array" % name)
    if len(g) != k_max:
        raise ValueError("Output vector %s has %i elements, expected %i" % (name, len(g), k_max))
    return g

@accepts(ParameterSequence, Natural0, fill_el=Number, v_size=Maybe(Natural0))
@returns(NDArray(d=1))
@ensures("len(return) == new_size")
def extend_vector(v, new_size, fill_el=0.0, v_size=None):
    """Copy `v` into a new vector of length `new_size`.

    The first min(v_size, new_size) elements are copied from `v` and
    any remaining elements are set to `fill_el`.  `v_size` defaults to
    the length of `v`; a smaller value ignores the tail of `v`.  If
    `new_size` is smaller than `v_size` the copy is truncated.

    The returned vector is a new array owned by the caller.  Raises
    AllocationError if it cannot be allocated.
    """
    v = np.asarray(v, dtype='float64')
    if v_size is None:
        v_size = len(v)
    elif v_size > len(v):
        raise ValueError("v_size (%i) exceeds the length of v (%i)" % (v_size, len(v)))
    new_v = allocate(new_size)
    n_copy = min(v_size, new_size)
    new_v[:n_copy] = v[:n_copy]
    new_v[n_copy:] = fill_el
    return new_v

@accepts(ParameterSequence, Positive)
@returns(NDArray(d=1))
@ensures("len(return) == len(bound)")
def bound_derivative(bound, dt):
    """Finite difference approximation of the boundary velocity.

    Element j is (bound[j+1] - bound[j]) / dt, and the last element
    repeats the second-to-last.  A single-step boundary has no
    measurable velocity and gives [0.].
    """
    bound = np.asarray(bound, dtype='float64')
    with scratch_storage("the boundary derivative"):
        deriv = allocate(len(bound))
        if len(bound) == 1:
            deriv[0] = 0.
            return deriv
        deriv[:-1] = np.diff(bound) / dt
        deriv[-1] = deriv[-2]
    return deriv

@accepts(Positive, Integer)
@requires("k_max > 0")
@returns(NDArray(d=1))
def t_domain(dt, k_max):
    """Times of the grid points, (k+1)*dt for k = 0 .. k_max-1."""
    return dt * np.arange(1, k_max+1, dtype='float64')
