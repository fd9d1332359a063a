"""Divergence policies comparing left and right window means."""

from .base import DivergencePolicy, check_pair
from .euclidean import EuclideanDivergence
from .correlation import CorrelationDivergence
from .jensen_shannon import JensenShannonDivergence
from .mahalanobis import MahalanobisDivergence
from .covariance import estimate_inverse_covariance, COVARIANCE_METHODS

DIVERGENCES = {
    "euclidean": EuclideanDivergence,
    "correlation": CorrelationDivergence,
    "jensen_shannon": JensenShannonDivergence,
    "js": JensenShannonDivergence,
    "mahalanobis": MahalanobisDivergence,
}


def get_divergence(name: str, **kwargs) -> DivergencePolicy:
    """
    Build a divergence policy by name.

    Args:
        name: One of euclidean, correlation, jensen_shannon (js), mahalanobis
        **kwargs: Constructor arguments (mahalanobis needs inv_cov)

    Returns:
        DivergencePolicy instance
    """
    key = name.lower().replace("-", "_")
    if key not in DIVERGENCES:
        raise ValueError(f"Unknown divergence: {name} (expected one of {sorted(DIVERGENCES)})")
    return DIVERGENCES[key](**kwargs)


__all__ = [
    "DivergencePolicy",
    "check_pair",
    "EuclideanDivergence",
    "CorrelationDivergence",
    "JensenShannonDivergence",
    "MahalanobisDivergence",
    "estimate_inverse_covariance",
    "COVARIANCE_METHODS",
    "DIVERGENCES",
    "get_divergence",
]
