"""
Euler-Maruyama Integrator for the Ornstein-Uhlenbeck SDE
==========================================================

Explicit first-order discretization of the (multivariate) OU process

    dX = -Theta (X - mu) dt + Sigma dW

    X[i+1] = X[i] - Theta (X[i] - mu) dt + Sigma dW[i],   dW[i] ~ N(0, dt I)

The same recursion runs on a single state (d,) or a batch (M, d), so the
ensemble runner reuses it without a per-path Python loop.

Author: Jose Orlando Bobadilla Fuentes | CQF
"""

import logging
from typing import Optional, Union

import numpy as np

from ..config import ProcessParameters, SimulationGrid
from ..exceptions import InvalidParameter
from ..utils import timeit
from .increments import RandomIncrementSource

logger = logging.getLogger(__name__)


def euler_step(x_prev: np.ndarray, theta: np.ndarray, mu: np.ndarray,
               sigma: np.ndarray, dt: float, dW: np.ndarray) -> np.ndarray:
    """
    One Euler-Maruyama step.

    x_prev and dW are (d,) or (M, d); theta and sigma are (d, d), mu is (d,).
    Row vectors are multiplied by the transposed matrices so both layouts
    share one expression.
    """
    drift = -(x_prev - mu) @ theta.T
    return x_prev + drift * dt + dW @ sigma.T


def _initial_state(x0, dim: int) -> np.ndarray:
    x = np.asarray(x0, dtype=float)
    if x.ndim == 0:
        x = x.reshape(1)
    if x.shape != (dim,):
        raise InvalidParameter(f"x0 shape {x.shape} != ({dim},)")
    if not np.all(np.isfinite(x)):
        raise InvalidParameter(f"x0 must be finite, got {x0!r}")
    return x


class EulerMaruyamaIntegrator:
    """
    Euler-Maruyama path generator for a fixed set of OU parameters.

    Output shape: (n_steps + 1, d) for one path, (M, n_steps + 1, d) for a
    batch; row 0 is x0.

    Usage:
        >>> em = EulerMaruyamaIntegrator(PAPER_1D)
        >>> path = em.integrate(1.0, SimulationGrid(T=10, n_steps=1000),
        ...                     RandomIncrementSource(seed=42))
    """

    def __init__(self, params: ProcessParameters):
        self.params = params
        if not params.is_stable:
            logger.warning("theta has eigenvalues with non-positive real part; "
                           "paths will not be stationary")

    def step(self, x_prev: np.ndarray, dt: float, dW: np.ndarray) -> np.ndarray:
        p = self.params
        return euler_step(x_prev, p.theta_matrix, p.mu_vector, p.sigma_matrix, dt, dW)

    def integrate(self, x0, grid: SimulationGrid,
                  source: RandomIncrementSource) -> np.ndarray:
        """Generate one path with a fresh increment at every step."""
        d = self.params.dim
        dt = grid.dt
        X = np.empty((grid.n_steps + 1, d))
        X[0] = _initial_state(x0, d)
        for i in range(grid.n_steps):
            X[i + 1] = self.step(X[i], dt, source.draw(dt, d))
        return X

    def integrate_batch(self, x0, grid: SimulationGrid,
                        source: RandomIncrementSource, n_paths: int,
                        terminal_only: bool = False) -> np.ndarray:
        """
        Generate n_paths independent paths in lockstep.

        Returns (n_paths, n_steps + 1, d), or (n_paths, d) terminal states
        when terminal_only is set (only the current state is kept).
        """
        if n_paths < 1:
            raise InvalidParameter(f"n_paths must be >= 1, got {n_paths}")
        d = self.params.dim
        dt = grid.dt
        x = np.broadcast_to(_initial_state(x0, d), (n_paths, d)).copy()

        if terminal_only:
            for _ in range(grid.n_steps):
                x = self.step(x, dt, source.draw(dt, d, n_paths))
            return x

        X = np.empty((n_paths, grid.n_steps + 1, d))
        X[:, 0] = x
        for i in range(grid.n_steps):
            X[:, i + 1] = self.step(X[:, i], dt, source.draw(dt, d, n_paths))
        return X


def _simulate(params: ProcessParameters, grid: SimulationGrid, x0,
              seed: Optional[int]) -> np.ndarray:
    logger.debug("Integrating dim=%d OU path: T=%s, n_steps=%d, seed=%s",
                 params.dim, grid.T, grid.n_steps, seed)
    return EulerMaruyamaIntegrator(params).integrate(
        x0, grid, RandomIncrementSource(seed))


@timeit
def simulate_ou(params: ProcessParameters, grid: SimulationGrid,
                x0: Union[float, np.ndarray] = 0.0,
                seed: Optional[int] = None) -> np.ndarray:
    """
    Simulate a 1D OU path.

    Returns a flat (n_steps + 1,) series; identical seeds give bit-identical
    paths.
    """
    if params.dim != 1:
        raise InvalidParameter(f"simulate_ou expects a 1D process, got dim={params.dim}")
    return _simulate(params, grid, x0, seed)[:, 0]


@timeit
def simulate_ou_2d(params: ProcessParameters, grid: SimulationGrid, x0,
                   seed: Optional[int] = None) -> np.ndarray:
    """Simulate a 2D OU path; returns (n_steps + 1, 2)."""
    if params.dim != 2:
        raise InvalidParameter(f"simulate_ou_2d expects a 2D process, got dim={params.dim}")
    return _simulate(params, grid, x0, seed)
