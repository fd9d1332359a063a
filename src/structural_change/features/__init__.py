"""Frame access, window boundaries and cumulative sums."""

from .frames import (
    FeatureFrame,
    VectorFrame,
    TimestampedFrame,
    frame_values,
    adopt_metadata,
    stack_frames,
)
from .windows import (
    WindowStatus,
    WindowBoundary,
    WindowBoundaries,
    classify_windows,
    compute_window_boundaries,
    init_window_boundaries,
)
from .cumulative import (
    build_cumulative_matrix,
    window_mean,
    window_means,
)

__all__ = [
    "FeatureFrame",
    "VectorFrame",
    "TimestampedFrame",
    "frame_values",
    "adopt_metadata",
    "stack_frames",
    "WindowStatus",
    "WindowBoundary",
    "WindowBoundaries",
    "classify_windows",
    "compute_window_boundaries",
    "init_window_boundaries",
    "build_cumulative_matrix",
    "window_mean",
    "window_means",
]
