"""
Brownian Increment Source
==========================

Independent Gaussian increments dW ~ N(0, dt) for Euler-Maruyama steps.
The generator is owned by the source, seeded explicitly, and never shared
through global state.

Author: Jose Orlando Bobadilla Fuentes | CQF
"""

from typing import List, Optional

import numpy as np

from ..exceptions import InvalidParameter


class RandomIncrementSource:
    """
    Seeded source of Brownian increments.

    Usage:
        >>> src = RandomIncrementSource(seed=42)
        >>> dW = src.draw(0.01, 2)            # shape (2,)
        >>> dW_batch = src.draw(0.01, 2, 500)  # shape (500, 2)
    """

    def __init__(self, seed: Optional[int] = None,
                 seed_sequence: Optional[np.random.SeedSequence] = None):
        self.seed = seed
        self._seq = seed_sequence if seed_sequence is not None else np.random.SeedSequence(seed)
        self._rng = np.random.default_rng(self._seq)

    def draw(self, dt: float, dim: int, size: Optional[int] = None) -> np.ndarray:
        """Return a dim-vector (or size x dim batch) of N(0, dt) draws."""
        if not np.isfinite(dt) or dt <= 0:
            raise InvalidParameter(f"dt must be positive, got {dt}")
        if dim < 1:
            raise InvalidParameter(f"dim must be >= 1, got {dim}")
        shape = (dim,) if size is None else (size, dim)
        return self._rng.normal(0.0, np.sqrt(dt), shape)

    def spawn(self, n: int) -> List["RandomIncrementSource"]:
        """Independent child sources, e.g. one per worker."""
        if n < 1:
            raise InvalidParameter(f"n must be >= 1, got {n}")
        return [RandomIncrementSource(seed_sequence=child) for child in self._seq.spawn(n)]
