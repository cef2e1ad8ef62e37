"""
Reflection at the Zero Boundary
=================================

Three path-space policies and one reflected scheme:

    AbsoluteValueReflection  Y = |X| componentwise. Cosmetic approximation:
                             drift and diffusion are not adjusted at the
                             boundary. Kept as the reference policy of the
                             reproduced figures.
    OrthantReflection        The same absolute value applied per coordinate
                             of a 2D (or higher) state, mapping into R+^d.
    SkorokhodReflection      One-sided Skorokhod map of the signed path,
                             Y_t = X_t + L_t,  L_t = max(0, max_{s<=t} -X_s).
                             Still driven by the unreflected drift.

    simulate_reflected_ou    Projected Euler scheme: each step starts from
                             the reflected state and the push back into the
                             domain is accumulated as local time. This is
                             the comparison scheme for the approximations
                             above; it is still a discretization.

Policies are pure functions: same shape in and out, no randomness.

Author: Jose Orlando Bobadilla Fuentes | CQF
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Tuple

import numpy as np

from ..config import ProcessParameters, SimulationGrid
from ..exceptions import InvalidInput, InvalidParameter
from .euler_maruyama import EulerMaruyamaIntegrator, _initial_state
from .increments import RandomIncrementSource

logger = logging.getLogger(__name__)


def _as_path(path) -> np.ndarray:
    X = np.asarray(path, dtype=float)
    if X.ndim == 0 or X.size == 0:
        raise InvalidInput(f"path must be a non-empty array, got shape {X.shape}")
    return X


class ReflectionPolicy(ABC):
    """Maps a signed path (or ensemble) to a non-negative one of equal shape."""

    name: str = ""

    @abstractmethod
    def apply(self, path: np.ndarray) -> np.ndarray:
        pass

    def __call__(self, path) -> np.ndarray:
        return self.apply(_as_path(path))


class AbsoluteValueReflection(ReflectionPolicy):
    """
    Hard reflection Y = |X|.

    Approximation only: the reflected path is not the solution of the
    reflected SDE because the dynamics never see the boundary. For mu = 0
    the 1D OU law is symmetric, so |X_t| has the same marginal law as the
    reflected process; for mu != 0 it does not.
    """

    name = "absolute"

    def apply(self, path: np.ndarray) -> np.ndarray:
        return np.abs(path)


class OrthantReflection(AbsoluteValueReflection):
    """Componentwise |X| into the non-negative orthant; last axis is the state."""

    name = "orthant"

    def apply(self, path: np.ndarray) -> np.ndarray:
        if path.ndim < 2 or path.shape[-1] < 2:
            raise InvalidInput(
                f"orthant reflection expects (..., d) with d >= 2, got shape {path.shape}")
        return super().apply(path)


class SkorokhodReflection(ReflectionPolicy):
    """
    One-sided Skorokhod map at zero along the time axis.

    With time_axis=None the layout is inferred: (N+1,) and (N+1, d) are one
    path (time on axis 0), (M, N+1, d) is an ensemble (time on axis 1). A 2D
    array is always read as one d-dimensional path, so a stack of scalar
    paths (M, N+1) needs time_axis=1.
    """

    name = "skorokhod"

    def __init__(self, time_axis: Optional[int] = None):
        if time_axis is not None and (isinstance(time_axis, bool)
                                      or not isinstance(time_axis, (int, np.integer))):
            raise InvalidParameter(f"time_axis must be an integer, got {time_axis!r}")
        self.time_axis = time_axis

    def _time_axis(self, path: np.ndarray) -> int:
        if self.time_axis is None:
            return 1 if path.ndim == 3 else 0
        if not -path.ndim <= self.time_axis < path.ndim:
            raise InvalidInput(
                f"time_axis {self.time_axis} out of range for path of shape {path.shape}")
        return self.time_axis

    def regulator(self, path) -> np.ndarray:
        """L_t = max(0, max_{s<=t} -X_s); non-decreasing, minimal push."""
        X = _as_path(path)
        return np.maximum(np.maximum.accumulate(-X, axis=self._time_axis(X)), 0.0)

    def apply(self, path: np.ndarray) -> np.ndarray:
        # X + L >= 0 by construction; clip the rounding residue at the boundary
        return np.maximum(path + self.regulator(path), 0.0)


POLICIES = {
    AbsoluteValueReflection.name: AbsoluteValueReflection,
    OrthantReflection.name: OrthantReflection,
    SkorokhodReflection.name: SkorokhodReflection,
}


def get_policy(policy="absolute") -> ReflectionPolicy:
    if isinstance(policy, ReflectionPolicy):
        return policy
    try:
        return POLICIES[policy]()
    except (KeyError, TypeError):
        raise InvalidParameter(
            f"Unknown reflection policy {policy!r}; choose from {sorted(POLICIES)}") from None


def reflect(path, policy="absolute") -> np.ndarray:
    """Reflect a path (or ensemble) into the non-negative domain."""
    return get_policy(policy)(path)


def simulate_reflected_ou(params: ProcessParameters, grid: SimulationGrid, x0,
                          seed: Optional[int] = None) -> Tuple[np.ndarray, np.ndarray]:
    """
    Projected Euler scheme for the ROU at zero.

        Z    = Y[i] - Theta (Y[i] - mu) dt + Sigma dW
        Y[i+1] = max(Z, 0),   L[i+1] = L[i] + max(-Z, 0)

    x0 outside the domain is projected onto it; that initial jump is not
    counted, so L[0] = 0.

    Returns
    -------
    (Y, L): reflected path and cumulative push, both (n_steps + 1, d).
    """
    em = EulerMaruyamaIntegrator(params)
    source = RandomIncrementSource(seed)
    d, dt = params.dim, grid.dt

    start = _initial_state(x0, d)
    Y = np.empty((grid.n_steps + 1, d))
    L = np.zeros((grid.n_steps + 1, d))
    Y[0] = np.maximum(start, 0.0)
    for i in range(grid.n_steps):
        z = em.step(Y[i], dt, source.draw(dt, d))
        Y[i + 1] = np.maximum(z, 0.0)
        L[i + 1] = L[i] + np.maximum(-z, 0.0)

    logger.debug("Projected Euler ROU: final push %s", L[-1])
    return Y, L
