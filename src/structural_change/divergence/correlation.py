"""
Correlation-based divergence.

Maps the Pearson correlation r in [-1, 1] onto [0, 1] as 0.5 - 0.5 * r, so
perfectly correlated means give 0 and anti-correlated means give 1.
"""

import numpy as np

from .base import DivergencePolicy


def is_constant(x: np.ndarray) -> bool:
    """True if no two adjacent elements differ (includes length 0 and 1)."""
    return not bool(np.any(x[1:] != x[:-1]))


class CorrelationDivergence(DivergencePolicy):
    """0.5 - 0.5 * pearson(a, b); 0.0 if either vector is constant."""

    name = "correlation"

    def compare(self, a: np.ndarray, b: np.ndarray) -> float:
        # Correlation is undefined for zero variance
        if is_constant(a) or is_constant(b):
            return 0.0

        a_shifted = a - a.mean()
        b_shifted = b - b.mean()

        above = np.sum(a_shifted * b_shifted)
        below = np.sqrt(np.sum(a_shifted**2)) * np.sqrt(np.sum(b_shifted**2))

        r = np.clip(above / below, -1.0, 1.0)
        return 0.5 - 0.5 * r
