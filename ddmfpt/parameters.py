# Copyright 2018 Max Shinn <maxwell.shinn@yale.edu>
#           2018 Norman Lam <norman.lam@yale.edu>
# 
# This file is part of ddmfpt, and is available under the MIT license.
# Please see LICENSE.txt in the root directory for more information.

# Default solver parameters.  These can be overridden by user code.

# Grid.
dt = .005 # [s] Time-step.
T_dur = 2. # [s] Duration of the time grid, used when k_max is not given

# Absolute accuracy of the series expansions used by the constant
# drift/bound solvers
series_tol = 1e-29

# Display warnings when the mass normalization has to move more than
# renorm_tol of probability mass
renorm_warnings = True
renorm_tol = .01
