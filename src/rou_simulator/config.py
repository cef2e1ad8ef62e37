"""
config.py
---------
Immutable process/grid configuration and the pipeline run settings.

ProcessParameters and SimulationGrid are passed explicitly into every
simulation function; nothing here is mutated at run time. RunConfig reads
its defaults from environment variables so the pipeline can be steered
without touching code.
"""

import os
from dataclasses import dataclass
from typing import Union

import numpy as np
from scipy.linalg import solve_continuous_lyapunov

from .exceptions import InvalidParameter

ArrayLike = Union[float, np.ndarray, list, tuple]

PSD_TOL = 1e-12


def _frozen(a: np.ndarray) -> np.ndarray:
    a = np.array(a, dtype=float)
    a.setflags(write=False)
    return a


def _as_matrix(value: ArrayLike, name: str) -> np.ndarray:
    try:
        a = np.asarray(value, dtype=float)
    except (TypeError, ValueError) as exc:
        raise InvalidParameter(f"{name} must be numeric, got {value!r}") from exc
    if a.ndim == 0:
        a = a.reshape(1, 1)
    if a.ndim != 2 or a.shape[0] != a.shape[1]:
        raise InvalidParameter(f"{name} must be a scalar or square matrix, got shape {a.shape}")
    if not np.all(np.isfinite(a)):
        raise InvalidParameter(f"{name} must be finite, got {value!r}")
    return a


def _as_vector(value: ArrayLike, name: str) -> np.ndarray:
    try:
        a = np.asarray(value, dtype=float)
    except (TypeError, ValueError) as exc:
        raise InvalidParameter(f"{name} must be numeric, got {value!r}") from exc
    if a.ndim == 0:
        a = a.reshape(1)
    if a.ndim != 1:
        raise InvalidParameter(f"{name} must be a scalar or vector, got shape {a.shape}")
    if not np.all(np.isfinite(a)):
        raise InvalidParameter(f"{name} must be finite, got {value!r}")
    return a


@dataclass(frozen=True, eq=False)
class ProcessParameters:
    """
    Parameters of dX = -theta (X - mu) dt + sigma dW.

    Attributes:
        theta: Mean-reversion speed (scalar) or d x d matrix
        mu: Long-run mean (scalar) or d-vector
        sigma: Diffusion coefficient (scalar) or d x d matrix

    Scalars describe the 1D process; for d > 1 every argument must carry
    the full shape. theta with non-positive-real-part eigenvalues is
    accepted (the path is simply not stationary), see ``is_stable``.

    Example:
        >>> p = ProcessParameters(theta=0.7, mu=0.0, sigma=0.3)
        >>> round(p.stationary_variance(), 4)
        0.0643
    """
    theta: ArrayLike
    mu: ArrayLike
    sigma: ArrayLike

    def __post_init__(self):
        theta = _as_matrix(self.theta, "theta")
        sigma = _as_matrix(self.sigma, "sigma")
        mu = _as_vector(self.mu, "mu")
        d = theta.shape[0]
        if mu.shape != (d,):
            raise InvalidParameter(f"mu shape {mu.shape} != ({d},)")
        if sigma.shape != (d, d):
            raise InvalidParameter(f"sigma shape {sigma.shape} != ({d},{d})")
        cov = sigma @ sigma.T
        min_eig = np.linalg.eigvalsh(cov).min()
        if min_eig < -PSD_TOL * max(1.0, np.abs(cov).max()):
            raise InvalidParameter(
                f"sigma @ sigma.T must be positive semi-definite, min eigenvalue {min_eig:.3e}")
        object.__setattr__(self, "_theta", _frozen(theta))
        object.__setattr__(self, "_mu", _frozen(mu))
        object.__setattr__(self, "_sigma", _frozen(sigma))

    @property
    def dim(self) -> int:
        return self._mu.shape[0]

    @property
    def theta_matrix(self) -> np.ndarray:
        return self._theta

    @property
    def mu_vector(self) -> np.ndarray:
        return self._mu

    @property
    def sigma_matrix(self) -> np.ndarray:
        return self._sigma

    @property
    def is_stable(self) -> bool:
        """True when every eigenvalue of theta has positive real part."""
        return bool(np.all(np.linalg.eigvals(self._theta).real > 0))

    def _require_1d(self, what: str):
        if self.dim != 1:
            raise InvalidParameter(f"{what} is only defined for the 1D process, dim={self.dim}")

    def _require_stable(self, what: str):
        if not self.is_stable:
            raise InvalidParameter(f"{what} requires a stable theta, got {self.theta!r}")

    def stationary_covariance(self) -> np.ndarray:
        """Solve theta C + C theta^T = sigma sigma^T (continuous Lyapunov)."""
        self._require_stable("Stationary covariance")
        return solve_continuous_lyapunov(self._theta, self._sigma @ self._sigma.T)

    def stationary_mean(self) -> float:
        self._require_1d("Stationary mean")
        return float(self._mu[0])

    def stationary_variance(self) -> float:
        """sigma^2 / (2 theta) for the unconstrained 1D OU process."""
        self._require_1d("Stationary variance")
        self._require_stable("Stationary variance")
        th, s = self._theta[0, 0], self._sigma[0, 0]
        return float(s**2 / (2 * th))

    def mean_at(self, t, x0: float):
        """E[X_t | X_0 = x0] = mu + (x0 - mu) exp(-theta t)."""
        self._require_1d("mean_at")
        th, m = self._theta[0, 0], self._mu[0]
        return m + (x0 - m) * np.exp(-th * np.asarray(t, dtype=float))

    def variance_at(self, t):
        """Var[X_t | X_0] = sigma^2 / (2 theta) (1 - exp(-2 theta t))."""
        self._require_1d("variance_at")
        self._require_stable("variance_at")
        th, s = self._theta[0, 0], self._sigma[0, 0]
        return (s**2 / (2 * th)) * (1 - np.exp(-2 * th * np.asarray(t, dtype=float)))


@dataclass(frozen=True)
class SimulationGrid:
    """
    Uniform time grid 0, dt, ..., T with dt = T / n_steps.

    dt is derived and cannot be set independently.
    """
    T: float
    n_steps: int

    def __post_init__(self):
        if isinstance(self.n_steps, bool) or not isinstance(self.n_steps, (int, np.integer)):
            raise InvalidParameter(f"n_steps must be an integer, got {self.n_steps!r}")
        if self.n_steps < 1:
            raise InvalidParameter(f"n_steps must be >= 1, got {self.n_steps}")
        if isinstance(self.T, bool) or not isinstance(self.T, (int, float, np.integer, np.floating)):
            raise InvalidParameter(f"Horizon T must be a real number, got {self.T!r}")
        if not np.isfinite(self.T) or self.T <= 0:
            raise InvalidParameter(f"Horizon T must be positive, got {self.T}")

    @property
    def dt(self) -> float:
        return self.T / self.n_steps

    @property
    def times(self) -> np.ndarray:
        return np.linspace(0.0, self.T, self.n_steps + 1)


# -----------------------------------------------------------------------------
# Paper presets
# -----------------------------------------------------------------------------
PAPER_1D = ProcessParameters(theta=0.7, mu=0.0, sigma=0.3)
PAPER_1D_X0 = 1.0

PAPER_2D = ProcessParameters(
    theta=[[1.0, 0.3], [0.2, 0.8]],
    mu=[1.0, 1.5],
    sigma=[[0.5, 0.0], [0.0, 0.5]],
)
PAPER_2D_X0 = (-1.0, -2.0)


@dataclass
class RunConfig:
    """Pipeline settings for main.py; environment variables override defaults."""
    seed: int            = int(os.getenv("ROU_SEED", "42"))
    n_paths: int         = int(os.getenv("ROU_N_PATHS", "10000"))
    output_dir: str      = os.getenv("ROU_OUTPUT_DIR", "outputs/figures")
    log_level: str       = os.getenv("ROU_LOG_LEVEL", "INFO")

    # Single illustrative paths
    path_T: float        = 20.0
    path_steps: int      = 2000

    # Terminal-value ensemble
    ensemble_T: float    = 50.0
    ensemble_steps: int  = 5000

    # Long path for the autocorrelation estimate
    acf_T: float         = 2000.0
    acf_steps: int       = 200_000
    acf_max_lag_time: float = 5.0

    bins: int            = 60
