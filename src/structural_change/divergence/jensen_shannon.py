"""
Jensen-Shannon divergence between window means.

Both vectors are treated as unnormalized histograms (e.g. chroma energies):
every element must be >= 0 and at least one must be > 0.

JS(a, b) = 0.5 * (KL(a || m) + KL(b || m)),  m = 0.5 * (a + b)

with natural logarithms and the convention 0 * log(0 / x) = 0.
"""

import numpy as np
from scipy.special import rel_entr

from .base import DivergencePolicy
from ..utils.logging import get_logger


def is_histogram(x: np.ndarray, label: str = "vector") -> bool:
    """
    Check that x is a valid, non-degenerate histogram.

    Negative elements are reported on the package logger.
    """
    if np.any(x < 0.0):
        get_logger("divergence").warning(
            f"Jensen-Shannon divergence needs non-negative values; "
            f"{label} has minimum {float(x.min()):.6g}, returning 0.0"
        )
        return False
    return bool(np.any(x > 0.0))


class JensenShannonDivergence(DivergencePolicy):
    """Jensen-Shannon divergence; 0.0 for invalid or all-zero inputs."""

    name = "jensen_shannon"

    def compare(self, a: np.ndarray, b: np.ndarray) -> float:
        if not (is_histogram(a, "left mean") and is_histogram(b, "right mean")):
            return 0.0

        # Local copies: callers keep their unnormalized vectors
        p = a / a.sum()
        q = b / b.sum()
        m = 0.5 * (p + q)

        return 0.5 * (np.sum(rel_entr(p, m)) + np.sum(rel_entr(q, m)))
