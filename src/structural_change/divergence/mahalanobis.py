"""
Mahalanobis distance between window means.

The inverse covariance matrix is fixed at construction. Only the first
min(D, M) dimensions are compared, so a policy built for M-dimensional
features also works on shorter vectors.
"""

import numpy as np
from scipy.spatial import distance

from .base import DivergencePolicy
from .covariance import estimate_inverse_covariance


def check_inverse_covariance(inv_cov) -> np.ndarray:
    """Validate and return an inverse covariance matrix [M, M]."""
    inv_cov = np.array(inv_cov, dtype=np.float64)
    if inv_cov.ndim != 2 or inv_cov.shape[0] != inv_cov.shape[1]:
        raise ValueError(f"Inverse covariance must be a square matrix, got shape {inv_cov.shape}")
    if not np.all(np.isfinite(inv_cov)):
        raise ValueError("Inverse covariance contains non-finite values")
    return inv_cov


class MahalanobisDivergence(DivergencePolicy):
    """sqrt((a - b)^T inv_cov (a - b)) over the first min(D, M) dimensions."""

    name = "mahalanobis"

    def __init__(self, inv_cov, validate: bool = True):
        if validate:
            inv_cov = check_inverse_covariance(inv_cov)
        else:
            inv_cov = np.array(inv_cov, dtype=np.float64)
        inv_cov.setflags(write=False)
        self.inv_cov = inv_cov

    @classmethod
    def from_features(cls, features: np.ndarray, method: str = "ledoit_wolf") -> "MahalanobisDivergence":
        """Build the policy from the inverse covariance of a feature matrix [N, D]."""
        return cls(estimate_inverse_covariance(features, method=method))

    @property
    def n_dims(self) -> int:
        return self.inv_cov.shape[0]

    def compare(self, a: np.ndarray, b: np.ndarray) -> float:
        n = min(len(a), self.n_dims)
        if n == 0:
            return 0.0
        return distance.mahalanobis(a[:n], b[:n], self.inv_cov[:n, :n])

    def __repr__(self) -> str:
        return f"MahalanobisDivergence(n_dims={self.n_dims})"
