"""
Whole-sequence summaries of structural change.

Mean and median per timescale over all frames, the statistics the edge
filling in the engine is designed for.
"""

from typing import Optional

import numpy as np
import pandas as pd

from ..features.windows import WindowStatus, compute_window_boundaries


def summarize_structural_change(
    matrix: np.ndarray,
    track_id: Optional[str] = None,
) -> pd.DataFrame:
    """
    Per-timescale summary statistics of a structural change matrix.

    Args:
        matrix: Structural change matrix [N, T]
        track_id: Optional identifier added as a column

    Returns:
        DataFrame with one row per timescale: timescale, half_width, mean,
        median, std, min, max, n_frames, n_normal
    """
    matrix = np.asarray(matrix, dtype=np.float64)
    if matrix.ndim != 2:
        raise ValueError(f"Expected structural change matrix [N, T], got shape {matrix.shape}")

    n_frames, n_timescales = matrix.shape
    rows = []

    for t in range(n_timescales):
        column = matrix[:, t]
        n_normal = int(compute_window_boundaries(t, n_frames).mask(WindowStatus.NORMAL).sum())
        row = {
            "timescale": t,
            "half_width": 1 << t,
            "mean": float(column.mean()) if n_frames > 0 else float("nan"),
            "median": float(np.median(column)) if n_frames > 0 else float("nan"),
            "std": float(column.std()) if n_frames > 0 else float("nan"),
            "min": float(column.min()) if n_frames > 0 else float("nan"),
            "max": float(column.max()) if n_frames > 0 else float("nan"),
            "n_frames": n_frames,
            "n_normal": n_normal,
        }
        if track_id is not None:
            row = {"track_id": track_id, **row}
        rows.append(row)

    columns = ["timescale", "half_width", "mean", "median", "std", "min", "max", "n_frames", "n_normal"]
    if track_id is not None:
        columns = ["track_id"] + columns
    return pd.DataFrame(rows, columns=columns)


def summary_vector(matrix: np.ndarray, statistic: str = "mean") -> np.ndarray:
    """
    One value per timescale ("mean" or "median"), e.g. as a track-level descriptor.

    Args:
        matrix: Structural change matrix [N, T]
        statistic: "mean" or "median"

    Returns:
        Array [T]
    """
    matrix = np.asarray(matrix, dtype=np.float64)
    if statistic == "mean":
        return matrix.mean(axis=0)
    if statistic == "median":
        return np.median(matrix, axis=0)
    raise ValueError(f"Unknown statistic: {statistic}")
