"""
Path Ensemble Runner
======================

Repeats the Euler-Maruyama integration M times with identical parameters
and grid. All members advance in lockstep from one seeded generator that
draws an (M, d) block per step, so members are independent and the whole
ensemble is reproducible from its seed.

Author: Jose Orlando Bobadilla Fuentes | CQF
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..config import ProcessParameters, SimulationGrid
from ..exceptions import InvalidParameter
from ..utils import timeit
from .euler_maruyama import EulerMaruyamaIntegrator, _initial_state
from .increments import RandomIncrementSource
from .reflection import SkorokhodReflection, get_policy

logger = logging.getLogger(__name__)


@dataclass
class PathEnsemble:
    """
    Attributes:
        times: Time grid (n_steps + 1,)
        params: Process parameters shared by every member
        grid: Simulation grid shared by every member
        seed: Seed of the generator that drove the ensemble
        paths: (M, n_steps + 1, d) full paths, or None when terminal_only
        terminal: (M, d) terminal states
        scheme: "euler" or "projected"
        reflection: Name of the post-hoc reflection policy, if any
    """
    times: np.ndarray
    params: ProcessParameters
    grid: SimulationGrid
    seed: Optional[int]
    paths: Optional[np.ndarray]
    terminal: np.ndarray
    scheme: str = "euler"
    reflection: Optional[str] = None

    @property
    def n_paths(self) -> int:
        return self.terminal.shape[0]

    def terminal_values(self, component: int = 0) -> np.ndarray:
        """Terminal values of one coordinate, shape (M,)."""
        return self.terminal[:, component]


class PathEnsembleRunner:
    """
    Usage:
        >>> runner = PathEnsembleRunner(PAPER_1D, SimulationGrid(50, 5000), x0=1.0, seed=42)
        >>> ens = runner.run(10_000, terminal_only=True)
        >>> ens.terminal_values().var()
    """

    SCHEMES = ("euler", "projected")

    def __init__(self, params: ProcessParameters, grid: SimulationGrid,
                 x0=None, seed: Optional[int] = None,
                 source: Optional[RandomIncrementSource] = None):
        self.params = params
        self.grid = grid
        self.x0 = _initial_state(params.mu_vector if x0 is None else x0, params.dim)
        self.seed = seed if source is None else source.seed
        # a supplied source is consumed across runs; a seed restarts each run
        self.source = source

    def _run_projected(self, em: EulerMaruyamaIntegrator, source: RandomIncrementSource,
                       n_paths: int, terminal_only: bool) -> np.ndarray:
        d, dt = self.params.dim, self.grid.dt
        y = np.broadcast_to(np.maximum(self.x0, 0.0), (n_paths, d)).copy()
        Y = None if terminal_only else np.empty((n_paths, self.grid.n_steps + 1, d))
        if Y is not None:
            Y[:, 0] = y
        for i in range(self.grid.n_steps):
            y = np.maximum(em.step(y, dt, source.draw(dt, d, n_paths)), 0.0)
            if Y is not None:
                Y[:, i + 1] = y
        return y if terminal_only else Y

    @timeit
    def run(self, n_paths: int, terminal_only: bool = False,
            scheme: str = "euler", reflection=None) -> PathEnsemble:
        """
        Parameters
        ----------
        n_paths       : ensemble size M (>= 1).
        terminal_only : keep only X(T); memory O(M d) instead of O(M N d).
        scheme        : "euler" (plain OU) or "projected" (projected Euler ROU).
        reflection    : optional policy name/object applied to the stored
                        output of the "euler" scheme.
        """
        if isinstance(n_paths, bool) or not isinstance(n_paths, (int, np.integer)) or n_paths < 1:
            raise InvalidParameter(f"n_paths must be a positive integer, got {n_paths!r}")
        if scheme not in self.SCHEMES:
            raise InvalidParameter(f"Unknown scheme {scheme!r}; choose from {self.SCHEMES}")
        if reflection is not None and scheme == "projected":
            raise InvalidParameter("projected paths are already reflected")

        logger.info("Running %d %s paths (dim=%d, T=%s, n_steps=%d, seed=%s)",
                    n_paths, scheme, self.params.dim, self.grid.T, self.grid.n_steps, self.seed)

        em = EulerMaruyamaIntegrator(self.params)
        source = self.source if self.source is not None else RandomIncrementSource(self.seed)
        if scheme == "projected":
            out = self._run_projected(em, source, n_paths, terminal_only)
        else:
            out = em.integrate_batch(self.x0, self.grid, source, n_paths, terminal_only)

        policy_name = None
        if reflection is not None:
            policy = get_policy(reflection)
            if terminal_only and isinstance(policy, SkorokhodReflection):
                raise InvalidParameter("Skorokhod reflection needs full paths, not terminal states")
            out = policy(out)
            policy_name = policy.name

        paths = None if terminal_only else out
        terminal = out if terminal_only else out[:, -1]
        return PathEnsemble(times=self.grid.times, params=self.params, grid=self.grid,
                            seed=self.seed, paths=paths, terminal=terminal,
                            scheme=scheme, reflection=policy_name)


def run_ensemble(params: ProcessParameters, grid: SimulationGrid, count: int,
                 terminal_only: bool = True, x0=None, seed: Optional[int] = None,
                 scheme: str = "euler", reflection=None,
                 source: Optional[RandomIncrementSource] = None) -> PathEnsemble:
    """Functional wrapper around PathEnsembleRunner.run."""
    return PathEnsembleRunner(params, grid, x0=x0, seed=seed, source=source).run(
        count, terminal_only=terminal_only, scheme=scheme, reflection=reflection)
