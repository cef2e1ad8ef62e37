"""
Reflected Ornstein-Uhlenbeck Simulator
=======================================

Monte Carlo study of the Ornstein-Uhlenbeck process reflected at zero, in
one and two dimensions: Euler-Maruyama paths, reflection policies, a
boundary local-time proxy, and convergence diagnostics against the
stationary law and the exponential autocorrelation.

Modules:
    config                  - ProcessParameters, SimulationGrid, presets, RunConfig
    models.increments       - Seeded Brownian increment source
    models.euler_maruyama   - Euler-Maruyama integrator, simulate_ou / simulate_ou_2d
    models.reflection       - Absolute-value, orthant and Skorokhod reflection
    models.local_time       - Local-time accumulators
    models.ensemble         - Independent path ensembles
    analysis.diagnostics    - Autocorrelation, densities, stationary comparison
    visualization.rou_plots - Figures

Author: Jose Orlando Bobadilla Fuentes, CQF
"""

from .config import ProcessParameters, SimulationGrid, RunConfig
from .exceptions import ROUError, InvalidParameter, InvalidInput
from .models.increments import RandomIncrementSource
from .models.euler_maruyama import (
    EulerMaruyamaIntegrator, euler_step, simulate_ou, simulate_ou_2d)
from .models.reflection import (
    AbsoluteValueReflection, OrthantReflection, SkorokhodReflection,
    reflect, simulate_reflected_ou)
from .models.local_time import accumulate_local_time, occupation_local_time
from .models.ensemble import PathEnsemble, PathEnsembleRunner, run_ensemble
from .analysis.diagnostics import (
    autocorrelation, theoretical_autocorrelation, empirical_density,
    stationary_density, reflected_stationary_density, compare_stationary)

__version__ = "1.0.0"
__author__ = "Jose Orlando Bobadilla Fuentes"
