# Copyright 2018 Max Shinn <maxwell.shinn@yale.edu>
#           2018 Norman Lam <norman.lam@yale.edu>
# 
# This file is part of ddmfpt, and is available under the MIT license.
# Please see LICENSE.txt in the root directory for more information.

import numpy as np
from paranoid import Type

class ParameterSequence(Type):
    """A one-dimensional sequence of finite reals, one value per time step"""
    def test(self, v):
        a = np.asarray(v, dtype='float64')
        assert a.ndim == 1, "Parameter sequences must be one-dimensional"
        assert len(a) > 0, "Parameter sequences cannot be empty"
        assert np.all(np.isfinite(a)), "Parameter sequences must be finite"
    def generate(self):
        yield np.asarray([1.])
        yield np.zeros(10)
        yield np.ones(100)
        yield np.linspace(.1, 2, 50)
        yield np.linspace(1, -1, 20)

class DensitySequence(Type):
    """A writable float64 vector holding first-passage time densities"""
    def test(self, v):
        assert isinstance(v, np.ndarray), "Density sequences must be numpy arrays"
        assert v.ndim == 1, "Density sequences must be one-dimensional"
        assert v.dtype == np.dtype('float64'), "Density sequences must be float64"
    def generate(self):
        yield np.zeros(1)
        yield np.zeros(100)
        yield np.ones(20)
