"""
Inverse covariance estimation for the Mahalanobis policy.

Chroma and timbre features are often nearly collinear, so the shrunk
Ledoit-Wolf estimate is the default; the empirical estimate is kept for
comparison with precomputed matrices.
"""

import numpy as np
from sklearn.covariance import EmpiricalCovariance, LedoitWolf

COVARIANCE_METHODS = ("empirical", "ledoit_wolf")


def estimate_inverse_covariance(
    features: np.ndarray,
    method: str = "ledoit_wolf",
) -> np.ndarray:
    """
    Estimate the inverse covariance (precision) matrix of a feature matrix.

    Args:
        features: Feature matrix [N, D]
        method: "empirical" or "ledoit_wolf"

    Returns:
        Inverse covariance matrix [D, D]
    """
    features = np.asarray(features, dtype=np.float64)
    if features.ndim != 2:
        raise ValueError(f"Expected features [N, D], got shape {features.shape}")
    if features.shape[0] < 2:
        raise ValueError(f"Need at least 2 frames to estimate a covariance, got {features.shape[0]}")

    if method == "empirical":
        estimator = EmpiricalCovariance()
    elif method == "ledoit_wolf":
        estimator = LedoitWolf()
    else:
        raise ValueError(f"Unknown covariance method: {method} (expected one of {COVARIANCE_METHODS})")

    estimator.fit(features)
    return estimator.precision_.astype(np.float64)
