"""
Convergence Diagnostics
=========================

Compares simulated output against the closed forms of the OU process:

    autocorrelation            biased sample ACF of one long path
    theoretical_autocorrelation  rho(tau) = exp(-theta tau)
    empirical_density          histogram-based density of terminal values
    stationary_density         N(mu, sigma^2 / (2 theta)), unconstrained OU
    reflected_stationary_density  the same normal truncated to [0, inf),
                               the stationary law of the ROU at zero
    compare_stationary         moments and Kolmogorov-Smirnov vs the normal

Author: Jose Orlando Bobadilla Fuentes | CQF
"""

import logging
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np
from scipy.stats import kstest, norm, truncnorm
from statsmodels.tsa.stattools import acf

from ..config import ProcessParameters
from ..exceptions import InvalidInput

logger = logging.getLogger(__name__)


def _series(values, name: str = "series", min_len: int = 1) -> np.ndarray:
    x = np.asarray(values, dtype=float)
    if x.ndim != 1:
        raise InvalidInput(f"{name} must be one-dimensional, got shape {x.shape}")
    if x.size < min_len:
        raise InvalidInput(f"{name} needs at least {min_len} values, got {x.size}")
    if not np.all(np.isfinite(x)):
        raise InvalidInput(f"{name} contains non-finite values")
    return x


def _lag(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidInput(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidInput(f"{name} must be >= 0, got {value}")
    return int(value)


# -----------------------------------------------------------------------------
# Autocorrelation
# -----------------------------------------------------------------------------
def autocorrelation(series, max_lag: int) -> List[Tuple[int, float]]:
    """
    Sample autocorrelation for lags 0..max_lag.

    Uses the biased estimator
        rho(tau) = sum_t (x_t - m)(x_{t+tau} - m) / sum_t (x_t - m)^2
    which is statsmodels' acf with adjusted=False. Lags are in steps; multiply
    by dt to compare with exp(-theta tau).
    """
    x = _series(series, min_len=2)
    max_lag = _lag(max_lag, "max_lag")
    if max_lag >= x.size:
        raise InvalidInput(f"max_lag {max_lag} must be < series length {x.size}")
    if np.ptp(x) == 0:
        raise InvalidInput("series is constant; autocorrelation is undefined")
    rho = acf(x, nlags=max_lag, adjusted=False, fft=True)
    return [(lag, float(r)) for lag, r in enumerate(rho)]


def theoretical_autocorrelation(theta: float, lags, dt: float = 1.0) -> np.ndarray:
    """rho(tau) = exp(-theta * lag * dt) for the stationary 1D OU process."""
    return np.exp(-theta * np.asarray(lags, dtype=float) * dt)


# -----------------------------------------------------------------------------
# Densities
# -----------------------------------------------------------------------------
@dataclass
class DensitySummary:
    """Normalized histogram: density integrates to 1 over the bin edges."""
    edges: np.ndarray
    density: np.ndarray
    counts: np.ndarray
    n: int

    @property
    def centers(self) -> np.ndarray:
        return 0.5 * (self.edges[:-1] + self.edges[1:])

    @property
    def widths(self) -> np.ndarray:
        return np.diff(self.edges)


def empirical_density(values, bins: int = 50) -> DensitySummary:
    """Histogram density estimate of a sample (e.g. terminal values)."""
    x = _series(values, name="values")
    bins = _lag(bins, "bins")
    if bins < 1:
        raise InvalidInput(f"bins must be >= 1, got {bins}")
    counts, edges = np.histogram(x, bins=bins)
    widths = np.diff(edges)
    density = counts / (x.size * widths)
    return DensitySummary(edges=edges, density=density, counts=counts, n=int(x.size))


def _stationary_scale(params: ProcessParameters) -> Tuple[float, float]:
    return params.stationary_mean(), float(np.sqrt(params.stationary_variance()))


def stationary_density(params: ProcessParameters, x) -> np.ndarray:
    """Stationary N(mu, sigma^2 / (2 theta)) density of the unconstrained 1D OU."""
    m, s = _stationary_scale(params)
    return norm.pdf(np.asarray(x, dtype=float), loc=m, scale=s)


def reflected_stationary_density(params: ProcessParameters, x) -> np.ndarray:
    """
    Stationary density of the 1D OU reflected at zero: the OU normal law
    restricted to [0, inf) and renormalized. Zero for x < 0.
    """
    m, s = _stationary_scale(params)
    return truncnorm.pdf(np.asarray(x, dtype=float), (0.0 - m) / s, np.inf, loc=m, scale=s)


@dataclass
class StationaryComparison:
    n: int
    sample_mean: float
    sample_var: float
    theoretical_mean: float
    theoretical_var: float
    ks_statistic: float
    ks_pvalue: float

    @property
    def var_rel_error(self) -> float:
        return abs(self.sample_var - self.theoretical_var) / self.theoretical_var

    @property
    def mean_abs_error(self) -> float:
        return abs(self.sample_mean - self.theoretical_mean)


def compare_stationary(values, params: ProcessParameters) -> StationaryComparison:
    """Terminal-value moments and KS test against the stationary normal law."""
    x = _series(values, name="values", min_len=2)
    m, s = _stationary_scale(params)
    ks = kstest(x, "norm", args=(m, s))
    result = StationaryComparison(
        n=int(x.size), sample_mean=float(x.mean()), sample_var=float(x.var(ddof=1)),
        theoretical_mean=m, theoretical_var=s**2,
        ks_statistic=float(ks.statistic), ks_pvalue=float(ks.pvalue))
    logger.info("Stationary check: var %.5f vs %.5f (rel err %.2f%%), KS p=%.3f",
                result.sample_var, result.theoretical_var,
                100 * result.var_rel_error, result.ks_pvalue)
    return result
