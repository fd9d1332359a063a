"""
Window boundaries for the left/right comparison windows.

For timescale t the half-width is w = 2**t frames. For frame i:
- left window  = frames [max(0, i - w), i)
- right window = frames [i, min(N, i + w))

The boundaries only depend on (t, N), never on the feature values, so they are
computed once per timescale and reused across frames.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import NamedTuple

import numpy as np


class WindowStatus(IntEnum):
    """Edge status of a frame at one timescale."""

    NORMAL = 0
    LEFT_TRUNCATED = -1  # left window short, right window full (sequence start)
    RIGHT_TRUNCATED = -2  # right window short, left window full (sequence end)
    BOTH_TRUNCATED = -3  # neither window full (only when N < 2w)


class WindowBoundary(NamedTuple):
    """Boundaries of one frame's windows at one timescale."""

    left_start: int
    left_end: int
    right_start: int
    right_end: int
    status: WindowStatus

    @property
    def left_size(self) -> int:
        return self.left_end - self.left_start

    @property
    def right_size(self) -> int:
        return self.right_end - self.right_start


@dataclass
class WindowBoundaries:
    """Boundaries of all frames at one timescale (arrays of length N)."""

    timescale: int
    half_width: int
    left_start: np.ndarray
    left_end: np.ndarray
    right_start: np.ndarray
    right_end: np.ndarray
    status: np.ndarray

    @property
    def n_frames(self) -> int:
        return len(self.status)

    @property
    def left_size(self) -> np.ndarray:
        return self.left_end - self.left_start

    @property
    def right_size(self) -> np.ndarray:
        return self.right_end - self.right_start

    def mask(self, status: WindowStatus) -> np.ndarray:
        """Boolean mask [N] of frames with the given status."""
        return self.status == int(status)

    def __getitem__(self, i: int) -> WindowBoundary:
        return WindowBoundary(
            left_start=int(self.left_start[i]),
            left_end=int(self.left_end[i]),
            right_start=int(self.right_start[i]),
            right_end=int(self.right_end[i]),
            status=WindowStatus(int(self.status[i])),
        )

    def __len__(self) -> int:
        return self.n_frames


def half_width(timescale: int) -> int:
    """Window half-width in frames; the smallest window is one frame."""
    if timescale < 0:
        raise ValueError(f"Timescale must be >= 0, got {timescale}")
    return 1 << timescale


def classify_windows(left_size: np.ndarray, right_size: np.ndarray, width: int) -> np.ndarray:
    """
    Edge status from the two window sizes at half-width `width`.

    Args:
        left_size: Left window sizes [N]
        right_size: Right window sizes [N]
        width: Full window width w

    Returns:
        WindowStatus values [N] (int8)
    """
    left_full = np.asarray(left_size) == width
    right_full = np.asarray(right_size) == width

    status = np.full(left_full.shape, int(WindowStatus.BOTH_TRUNCATED), dtype=np.int8)
    status[left_full & ~right_full] = int(WindowStatus.RIGHT_TRUNCATED)
    status[right_full & ~left_full] = int(WindowStatus.LEFT_TRUNCATED)
    status[left_full & right_full] = int(WindowStatus.NORMAL)
    return status


def compute_window_boundaries(timescale: int, n_frames: int) -> WindowBoundaries:
    """
    Compute the window boundaries of every frame at one timescale.

    Args:
        timescale: Timescale index t (half-width 2**t)
        n_frames: Number of frames N

    Returns:
        WindowBoundaries with per-frame boundary and status arrays
    """
    if n_frames < 0:
        raise ValueError(f"n_frames must be >= 0, got {n_frames}")

    w = half_width(timescale)
    idx = np.arange(n_frames, dtype=np.int64)

    left_start = np.maximum(idx - w, 0)
    left_end = idx.copy()
    right_start = idx.copy()
    right_end = np.minimum(idx + w, n_frames)

    status = classify_windows(left_end - left_start, right_end - right_start, w)

    return WindowBoundaries(
        timescale=timescale,
        half_width=w,
        left_start=left_start,
        left_end=left_end,
        right_start=right_start,
        right_end=right_end,
        status=status,
    )


def init_window_boundaries(num_timescales: int, n_frames: int) -> list[WindowBoundaries]:
    """Window boundaries for timescales 0 .. num_timescales-1."""
    return [compute_window_boundaries(t, n_frames) for t in range(num_timescales)]
