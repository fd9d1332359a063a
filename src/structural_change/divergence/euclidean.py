"""Euclidean distance between window means."""

import numpy as np
from scipy.spatial import distance

from .base import DivergencePolicy


class EuclideanDivergence(DivergencePolicy):
    """sqrt(sum((a - b)**2)); symmetric, zero iff a == b."""

    name = "euclidean"

    def compare(self, a: np.ndarray, b: np.ndarray) -> float:
        if len(a) == 0:
            return 0.0
        return distance.euclidean(a, b)
