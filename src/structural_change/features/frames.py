"""
Frame access layer.

The engine works on plain [N, D] float arrays. Anything that is passed in as a
frame only needs two capabilities:
- read/write access to its values (a 1-D float vector)
- a way to take over per-frame metadata (e.g. a timestamp) from a source frame

`VectorFrame` is the plain vector with no metadata; `TimestampedFrame` mirrors a
host plugin feature that may or may not carry a timestamp.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, Sequence, runtime_checkable

import numpy as np


@runtime_checkable
class FeatureFrame(Protocol):
    """Capability set required of any frame type used as input or output."""

    values: np.ndarray

    def adopt_metadata(self, source: Any) -> None:
        ...


@dataclass
class VectorFrame:
    """A bare feature vector without metadata."""

    values: np.ndarray = field(default_factory=lambda: np.zeros(0))

    def __post_init__(self):
        self.values = np.asarray(self.values, dtype=np.float64)

    @classmethod
    def empty(cls, n_dims: int) -> "VectorFrame":
        return cls(values=np.zeros(n_dims))

    def adopt_metadata(self, source: Any) -> None:
        pass

    def __len__(self) -> int:
        return len(self.values)


@dataclass
class TimestampedFrame:
    """
    A feature vector with an optional timestamp in seconds.

    `timestamp=None` means the frame has no timestamp.
    """

    values: np.ndarray = field(default_factory=lambda: np.zeros(0))
    timestamp: Optional[float] = None

    def __post_init__(self):
        self.values = np.asarray(self.values, dtype=np.float64)

    @classmethod
    def empty(cls, n_dims: int) -> "TimestampedFrame":
        return cls(values=np.zeros(n_dims))

    @property
    def has_timestamp(self) -> bool:
        return self.timestamp is not None

    def adopt_metadata(self, source: Any) -> None:
        """Copy the source timestamp, or mark this frame as having none."""
        if isinstance(source, TimestampedFrame) and source.has_timestamp:
            self.timestamp = float(source.timestamp)
        else:
            self.timestamp = None

    def __len__(self) -> int:
        return len(self.values)


def is_frame_object(frame: Any) -> bool:
    """True for frame objects (as opposed to raw vectors)."""
    return isinstance(frame, FeatureFrame)


def frame_values(frame: Any) -> np.ndarray:
    """Return the values of a frame object or raw vector as a 1-D float array."""
    if is_frame_object(frame):
        values = frame.values
    else:
        values = frame
    return np.asarray(values, dtype=np.float64).reshape(-1)


def adopt_metadata(dest: Any, source: Any) -> None:
    """Populate dest's metadata from source; no-op for raw vectors."""
    if is_frame_object(dest):
        dest.adopt_metadata(source)


def stack_frames(frames: Sequence[Any] | np.ndarray, validate: bool = True) -> np.ndarray:
    """
    Stack a frame sequence into a feature matrix.

    Args:
        frames: 2-D array [N, D], or sequence of frame objects / raw vectors
        validate: Check that all frames share the same dimensionality

    Returns:
        Feature matrix [N, D] (float64)
    """
    if isinstance(frames, np.ndarray):
        if frames.ndim != 2:
            raise ValueError(f"Expected a 2-D feature matrix [N, D], got shape {frames.shape}")
        return frames.astype(np.float64, copy=False)

    if len(frames) == 0:
        return np.zeros((0, 0), dtype=np.float64)

    rows = [frame_values(f) for f in frames]
    n_dims = len(rows[0])

    if validate:
        for i, row in enumerate(rows):
            if len(row) != n_dims:
                raise ValueError(
                    f"Inconsistent feature dimensionality: frame 0 has {n_dims} "
                    f"values but frame {i} has {len(row)}"
                )

    return np.vstack(rows) if n_dims > 0 else np.zeros((len(rows), 0), dtype=np.float64)
