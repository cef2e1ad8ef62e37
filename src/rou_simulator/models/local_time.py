"""
Boundary Local Time
=====================

    accumulate_local_time   L[i] = L[i-1] + max(0, -X[i]) dt,  L[0] = 0

X is the unreflected signed path. The sum integrates the depth of the
excursions below zero, which is a proxy for the local time at the
boundary rather than the Skorokhod local time itself (that one only grows
while the reflected path sits at zero). The proxy is what the reproduced
figures show, so it is kept as is.

    occupation_local_time   L_t ~ (1 / 2 eps) * int_0^t 1{|X_s| < eps} ds

is the occupation-density estimator, for comparison.

Author: Jose Orlando Bobadilla Fuentes | CQF
"""

import numpy as np

from ..exceptions import InvalidInput, InvalidParameter


def _validate(path, dt: float) -> np.ndarray:
    if not np.isfinite(dt) or dt <= 0:
        raise InvalidParameter(f"dt must be positive, got {dt}")
    X = np.asarray(path, dtype=float)
    if X.ndim not in (1, 2) or X.shape[0] == 0:
        raise InvalidInput(f"path must be (N+1,) or (N+1, d) and non-empty, got shape {X.shape}")
    if not np.all(np.isfinite(X)):
        raise InvalidInput("path contains non-finite values")
    return X


def _cumulate(rate: np.ndarray, dt: float) -> np.ndarray:
    L = np.zeros_like(rate)
    L[1:] = np.cumsum(rate[1:] * dt, axis=0)
    return L


def accumulate_local_time(path, dt: float) -> np.ndarray:
    """
    Negative-excursion local-time proxy.

    Parameters
    ----------
    path : (N+1,) or (N+1, d) unreflected path; each coordinate has its own
           boundary at zero.
    dt   : grid step.

    Returns
    -------
    np.ndarray of the same shape, non-decreasing along time, L[0] = 0.
    """
    X = _validate(path, dt)
    return _cumulate(np.maximum(-X, 0.0), dt)


def occupation_local_time(path, dt: float, eps: float = 0.05) -> np.ndarray:
    """Time spent within eps of zero, scaled by 1 / (2 eps)."""
    if not np.isfinite(eps) or eps <= 0:
        raise InvalidParameter(f"eps must be positive, got {eps}")
    X = _validate(path, dt)
    return _cumulate((np.abs(X) < eps) / (2 * eps), dt)
