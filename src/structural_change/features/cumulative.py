"""
Cumulative sums over frames.

cum[k] = sum of frames [0, k), with cum[0] = 0, so the mean of frames
[start, end) is (cum[end] - cum[start]) / (end - start).
"""

import numpy as np


def build_cumulative_matrix(features: np.ndarray) -> np.ndarray:
    """
    Build the cumulative matrix of a feature sequence.

    Args:
        features: Feature matrix [N, D]

    Returns:
        Cumulative matrix [N+1, D], first row all zeros
    """
    features = np.asarray(features, dtype=np.float64)
    if features.ndim != 2:
        raise ValueError(f"Expected features [N, D], got shape {features.shape}")

    n_frames, n_dims = features.shape
    cum = np.zeros((n_frames + 1, n_dims), dtype=np.float64)
    np.cumsum(features, axis=0, out=cum[1:])
    return cum


def window_sum(cum: np.ndarray, start: int, end: int) -> np.ndarray:
    """Elementwise sum of frames [start, end) [D]."""
    if not 0 <= start <= end < len(cum):
        raise ValueError(f"Invalid window [{start}, {end}) for {len(cum) - 1} frames")
    return cum[end] - cum[start]


def window_mean(cum: np.ndarray, start: int, end: int) -> np.ndarray:
    """Elementwise mean of frames [start, end) [D]."""
    size = end - start
    if size <= 0:
        raise ValueError(f"Cannot take the mean of empty window [{start}, {end})")
    return window_sum(cum, start, end) / size


def window_means(cum: np.ndarray, starts: np.ndarray, ends: np.ndarray) -> np.ndarray:
    """
    Means of many windows at once.

    Args:
        cum: Cumulative matrix [N+1, D]
        starts: Window start indices [K]
        ends: Window end indices [K] (every end > start)

    Returns:
        Window means [K, D]
    """
    sizes = (ends - starts).astype(np.float64)
    return (cum[ends] - cum[starts]) / sizes[:, None]
