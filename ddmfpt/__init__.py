# Copyright 2018 Max Shinn <maxwell.shinn@yale.edu>
#           2018 Norman Lam <norman.lam@yale.edu>
# 
# This file is part of ddmfpt, and is available under the MIT license.
# Please see LICENSE.txt in the root directory for more information.

__all__ = ["ddm_fpt_full", "ddm_fpt_full_leak", "ddm_fpt", "ddm_fpt_const_mu", "ddm_fpt_w",
           "ddm_fpt_const", "ddm_fpt_const_asym",
           "mass_normalize", "extend_vector", "bound_derivative", "t_domain",
           "solve_fpt", "AllocationError", "set_log_level"]

# Check that Python3 is running
import sys
if sys.version_info.major != 3:
    raise ImportError("ddmfpt only supports Python 3")

from .volterra import ddm_fpt_full, ddm_fpt_full_leak, ddm_fpt, ddm_fpt_const_mu, ddm_fpt_w
from .analytic import ddm_fpt_const, ddm_fpt_const_asym
from .normalize import mass_normalize
from .vectors import AllocationError, extend_vector, bound_derivative, t_domain
from .functions import solve_fpt
from .logger import set_log_level

from ._version import __version__

# Some default functions for paranoid scientist
import paranoid
import math
import numpy as np
paranoid.settings.Settings.get("namespace").update({"math": math, "np": np})
# Disable paranoid for users
paranoid.settings.Settings.set(enabled=False)
