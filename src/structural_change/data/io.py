"""
I/O utilities for feature sequences and structural change output.

Feature sequences are read from .npy, .csv (Sonic Annotator style, optional
leading timestamp column) or zarr groups. Output is written as CSV with a
timestamp column, to zarr, and summary tables to parquet.
"""

from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd
import zarr

from ..features.frames import TimestampedFrame

TIMESTAMP_COLUMN = "timestamp"


def load_features_csv(
    path: str | Path,
    has_timestamps: Optional[bool] = None,
) -> tuple[np.ndarray, Optional[np.ndarray]]:
    """
    Load a feature sequence from CSV.

    Accepts files with a header row (a "timestamp" column is used as frame
    times) and header-less files as written by Sonic Annotator, where the
    first column holds the frame time.

    Args:
        path: Path to CSV file
        has_timestamps: For header-less files, whether the first column is a
            timestamp (default: True)

    Returns:
        Tuple of (features [N, D], timestamps [N] or None)
    """
    df = pd.read_csv(path, header=None)

    if len(df) > 0 and _is_header(df.iloc[0]):
        df = pd.read_csv(path)
        if TIMESTAMP_COLUMN in df.columns:
            timestamps = df[TIMESTAMP_COLUMN].to_numpy(dtype=np.float64)
            features = df.drop(columns=[TIMESTAMP_COLUMN]).to_numpy(dtype=np.float64)
            return features, timestamps
        return df.to_numpy(dtype=np.float64), None

    if has_timestamps is None:
        has_timestamps = True

    values = df.to_numpy(dtype=np.float64)
    if has_timestamps:
        return values[:, 1:], values[:, 0]
    return values, None


def _is_header(row: pd.Series) -> bool:
    """True if any cell of the row is not a number."""
    for cell in row:
        try:
            float(cell)
        except (TypeError, ValueError):
            return True
    return False


def load_features(
    path: str | Path,
    key: Optional[str] = None,
) -> tuple[np.ndarray, Optional[np.ndarray]]:
    """
    Load a feature sequence from .npy, .csv or a zarr store.

    Args:
        path: Path to feature file (or zarr store)
        key: Group name inside a zarr store

    Returns:
        Tuple of (features [N, D], timestamps [N] or None)
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".npy":
        features = np.load(path)
        if features.ndim == 1:
            features = features[:, None]
        return features.astype(np.float64), None
    if suffix == ".csv":
        return load_features_csv(path)
    if suffix == ".zarr":
        if key is None:
            raise ValueError(f"A group key is needed to read features from zarr store {path}")
        return load_features_zarr(key, path)

    raise ValueError(f"Unsupported feature file format: {path}")


def to_frames(
    features: np.ndarray,
    timestamps: Optional[np.ndarray] = None,
) -> list[TimestampedFrame]:
    """Wrap a feature matrix [N, D] and optional times [N] into frames."""
    if timestamps is not None and len(timestamps) != len(features):
        raise ValueError(
            f"Got {len(timestamps)} timestamps for {len(features)} frames"
        )
    return [
        TimestampedFrame(
            values=row,
            timestamp=None if timestamps is None else float(timestamps[i]),
        )
        for i, row in enumerate(features)
    ]


def from_frames(frames: list[TimestampedFrame]) -> tuple[np.ndarray, Optional[np.ndarray]]:
    """Inverse of to_frames; timestamps are None unless every frame has one."""
    if len(frames) == 0:
        return np.zeros((0, 0)), None
    matrix = np.vstack([f.values for f in frames])
    if all(f.has_timestamp for f in frames):
        return matrix, np.array([f.timestamp for f in frames], dtype=np.float64)
    return matrix, None


def structural_change_columns(n_timescales: int) -> list[str]:
    """Column names by half-width in frames: sc_1, sc_2, sc_4, ..."""
    return [f"sc_{1 << t}" for t in range(n_timescales)]


def save_structural_change_csv(
    matrix: np.ndarray,
    output_path: str | Path,
    timestamps: Optional[np.ndarray] = None,
) -> None:
    """
    Save a structural change matrix to CSV.

    Args:
        matrix: Structural change matrix [N, T]
        output_path: Path to output CSV file
        timestamps: Optional frame times [N], written as the first column
    """
    df = pd.DataFrame(matrix, columns=structural_change_columns(matrix.shape[1]))
    if timestamps is not None:
        df.insert(0, TIMESTAMP_COLUMN, timestamps)
    df.to_csv(output_path, index=False)


def load_structural_change_csv(path: str | Path) -> tuple[np.ndarray, Optional[np.ndarray]]:
    """Load a CSV written by save_structural_change_csv."""
    df = pd.read_csv(path)
    timestamps = None
    if TIMESTAMP_COLUMN in df.columns:
        timestamps = df.pop(TIMESTAMP_COLUMN).to_numpy(dtype=np.float64)
    return df.to_numpy(dtype=np.float64), timestamps


def save_features_zarr(
    features: np.ndarray,
    track_id: str,
    zarr_path: str | Path,
    timestamps: Optional[np.ndarray] = None,
) -> None:
    """
    Save a feature sequence for a single track to a zarr store.

    Args:
        features: Feature array [N, D]
        track_id: Track ID (used as group key)
        zarr_path: Path to zarr store
        timestamps: Optional frame timestamps in seconds [N]
    """
    store = zarr.open(str(zarr_path), mode="a")
    grp = store.create_group(track_id, overwrite=True)

    grp["x"] = np.asarray(features, dtype=np.float32)
    if timestamps is not None:
        grp["timestamps"] = np.asarray(timestamps, dtype=np.float64)

    grp.attrs["n_frames"] = int(features.shape[0])
    grp.attrs["feature_dim"] = int(features.shape[1])


def load_features_zarr(
    track_id: str,
    zarr_path: str | Path,
) -> tuple[np.ndarray, Optional[np.ndarray]]:
    """
    Load a feature sequence for a single track from a zarr store.

    Returns:
        Tuple of (features [N, D], timestamps [N] or None)
    """
    store = zarr.open(str(zarr_path), mode="r")
    grp = store[track_id]

    features = np.array(grp["x"], dtype=np.float64)
    timestamps = np.array(grp["timestamps"]) if "timestamps" in grp else None
    return features, timestamps


def save_structural_change_zarr(
    matrix: np.ndarray,
    track_id: str,
    zarr_path: str | Path,
    divergence: str,
    timestamps: Optional[np.ndarray] = None,
) -> None:
    """Save a structural change matrix [N, T] for a single track to a zarr store."""
    store = zarr.open(str(zarr_path), mode="a")
    grp = store.create_group(track_id, overwrite=True)

    grp["sc"] = np.asarray(matrix, dtype=np.float32)
    if timestamps is not None:
        grp["timestamps"] = np.asarray(timestamps, dtype=np.float64)

    grp.attrs["n_frames"] = int(matrix.shape[0])
    grp.attrs["n_timescales"] = int(matrix.shape[1])
    grp.attrs["divergence"] = divergence


def load_structural_change_zarr(
    track_id: str,
    zarr_path: str | Path,
) -> tuple[np.ndarray, Optional[np.ndarray]]:
    """
    Load a structural change matrix for a single track from a zarr store.

    Returns:
        Tuple of (matrix [N, T], timestamps [N] or None)
    """
    store = zarr.open(str(zarr_path), mode="r")
    grp = store[track_id]

    matrix = np.array(grp["sc"], dtype=np.float64)
    timestamps = np.array(grp["timestamps"]) if "timestamps" in grp else None
    return matrix, timestamps


def get_zarr_track_ids(zarr_path: str | Path) -> list[str]:
    """Get all track IDs stored in a zarr store."""
    store = zarr.open(str(zarr_path), mode="r")
    return list(store.group_keys())


def save_summary_table(summary: pd.DataFrame, output_path: str | Path) -> None:
    """Save a per-track, per-timescale summary table to parquet."""
    summary.to_parquet(str(output_path), index=False)


def load_summary_table(path: str | Path) -> pd.DataFrame:
    """Load a summary table from parquet."""
    return pd.read_parquet(str(path))


class FeatureStore:
    """
    Convenient wrapper for reading feature sequences from a zarr store.

    Caches the open store between tracks.
    """

    def __init__(self, zarr_path: str | Path):
        self.zarr_path = Path(zarr_path)
        self._store: Optional[zarr.Group] = None

    @property
    def store(self) -> zarr.Group:
        if self._store is None:
            self._store = zarr.open(str(self.zarr_path), mode="r")
        return self._store

    def get_features(self, track_id: str) -> np.ndarray:
        """Get feature array for a track [N, D]."""
        return np.array(self.store[track_id]["x"], dtype=np.float64)

    def get_timestamps(self, track_id: str) -> Optional[np.ndarray]:
        """Get frame timestamps for a track [N], or None."""
        grp = self.store[track_id]
        return np.array(grp["timestamps"]) if "timestamps" in grp else None

    def track_ids(self) -> list[str]:
        return list(self.store.group_keys())

    def __contains__(self, track_id: str) -> bool:
        return track_id in self.store
