# Simple demonstration of ddmfpt.

import numpy as np
import ddmfpt

# Start ConstantModel
dt = .005
k_max = 400
g1, g2 = ddmfpt.ddm_fpt_const(1., 1., dt, k_max)
print("P(upper) =", np.sum(g1) * dt, " P(lower) =", np.sum(g2) * dt)
# End ConstantModel

# Start CollapsingBound
t = ddmfpt.t_domain(dt, k_max)
bound = 1.5 * np.exp(-t)
g1, g2 = ddmfpt.ddm_fpt(np.full(k_max, .5), bound, dt, k_max)
ddmfpt.mass_normalize(g1, g2, dt)
# End CollapsingBound

# Start LeakyModel
ones = np.ones(k_max)
g1, g2 = ddmfpt.ddm_fpt_full_leak(.8 * ones, ones, -ones, ones, 0 * ones, 0 * ones, 1.5, dt, k_max)
print("Mean decision time:", np.sum(t * (g1 + g2)) * dt / (np.sum(g1 + g2) * dt))
# End LeakyModel

# Start SolveFpt
g1, g2 = ddmfpt.solve_fpt(1 - .3 * t, 1., dt=dt, sig2=.8, normalize=True)
# End SolveFpt
