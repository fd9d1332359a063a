"""
Structural Change engine.

For each timescale t (half-width w = 2**t) and each frame i, the divergence
between the mean of frames [i - w, i) and the mean of frames [i, i + w) is
written to output[i, t].

Frames near the ends of the sequence do not have full windows. Their values
are filled in per timescale after all interior frames are done, so that mean
and median over *all* frames stay meaningful for consumers that are unaware of
edge effects:
- left-truncated (sequence start):  -mean_div
- right-truncated (sequence end):   3 * mean_div
- both windows truncated:           0.0
where mean_div is the average divergence over the timescale's normal frames
(0 if there are none).
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

import numpy as np

from ..divergence import DivergencePolicy, JensenShannonDivergence
from ..features.cumulative import build_cumulative_matrix, window_means
from ..features.frames import adopt_metadata, is_frame_object, stack_frames
from ..features.windows import WindowBoundaries, WindowStatus, init_window_boundaries
from ..utils.logging import get_logger

Divergence = Callable[[np.ndarray, np.ndarray], float]

LEFT_EDGE_SCALE = -1.0
RIGHT_EDGE_SCALE = 3.0


@dataclass
class TimescaleResult:
    """Divergences of all frames at one timescale, before and after edge filling."""

    timescale: int
    raw: np.ndarray  # [N] divergence at normal frames, NaN elsewhere
    status: np.ndarray  # [N] WindowStatus values
    mean_div: float
    n_normal: int

    def filled(self) -> np.ndarray:
        """Output column [N] with edge frames substituted."""
        return fill_edges(self.raw, self.status, self.mean_div)


def fill_edges(raw: np.ndarray, status: np.ndarray, mean_div: float) -> np.ndarray:
    """
    Replace edge frames of one timescale column.

    Args:
        raw: Divergences [N] (only normal entries are used)
        status: WindowStatus per frame [N]
        mean_div: Average divergence over normal frames

    Returns:
        Column [N] with left/right/both-truncated frames filled
    """
    out = np.where(status == int(WindowStatus.NORMAL), raw, 0.0)
    out[status == int(WindowStatus.LEFT_TRUNCATED)] = LEFT_EDGE_SCALE * mean_div
    out[status == int(WindowStatus.RIGHT_TRUNCATED)] = RIGHT_EDGE_SCALE * mean_div
    out[status == int(WindowStatus.BOTH_TRUNCATED)] = 0.0
    return out


class StructuralChange:
    """
    Multi-timescale structural change.

    Usage:
        sc = StructuralChange(num_timescales=7)
        matrix = sc.calculate(chroma)                     # [N, 7] array
        frames = sc.calculate(frames, EuclideanDivergence())  # list of frames
    """

    def __init__(self, num_timescales: int, validate: bool = True):
        if isinstance(num_timescales, bool) or not isinstance(num_timescales, (int, np.integer)):
            raise ValueError(f"num_timescales must be an integer, got {num_timescales!r}")
        if num_timescales < 0:
            raise ValueError(f"num_timescales must be >= 0, got {num_timescales}")
        self.num_timescales = int(num_timescales)
        self.validate = validate
        self._boundaries: tuple[int, list[WindowBoundaries]] | None = None

    @property
    def half_widths(self) -> list[int]:
        """Window half-widths in frames, one per timescale."""
        return [1 << t for t in range(self.num_timescales)]

    def window_boundaries(self, n_frames: int) -> list[WindowBoundaries]:
        """Window boundaries per timescale for a sequence of n_frames (last length cached)."""
        cached = self._boundaries
        if cached is not None and cached[0] == n_frames:
            return cached[1]
        tables = init_window_boundaries(self.num_timescales, n_frames)
        self._boundaries = (n_frames, tables)
        return tables

    def compute_timescale(
        self,
        cum: np.ndarray,
        boundaries: WindowBoundaries,
        divergence: Divergence,
    ) -> TimescaleResult:
        """
        Divergences of all normal frames at one timescale.

        Args:
            cum: Cumulative matrix [N+1, D]
            boundaries: Window boundaries of this timescale
            divergence: Policy comparing left and right means

        Returns:
            TimescaleResult with raw divergences and mean_div
        """
        raw = np.full(boundaries.n_frames, np.nan)
        normal = np.flatnonzero(boundaries.mask(WindowStatus.NORMAL))

        if len(normal) > 0:
            means_l = window_means(cum, boundaries.left_start[normal], boundaries.left_end[normal])
            means_r = window_means(cum, boundaries.right_start[normal], boundaries.right_end[normal])
            for k, i in enumerate(normal):
                raw[i] = divergence(means_l[k], means_r[k])

        mean_div = float(np.mean(raw[normal])) if len(normal) > 0 else 0.0

        return TimescaleResult(
            timescale=boundaries.timescale,
            raw=raw,
            status=boundaries.status,
            mean_div=mean_div,
            n_normal=len(normal),
        )

    def compute_matrix(
        self,
        features: np.ndarray,
        divergence: Optional[Divergence] = None,
    ) -> np.ndarray:
        """
        Structural change of a feature matrix.

        Args:
            features: Feature matrix [N, D]
            divergence: Divergence policy (default: Jensen-Shannon)

        Returns:
            Structural change matrix [N, num_timescales]
        """
        if divergence is None:
            divergence = JensenShannonDivergence()

        features = np.asarray(features, dtype=np.float64)
        if features.ndim != 2:
            raise ValueError(f"Expected features [N, D], got shape {features.shape}")

        n_frames = features.shape[0]
        out = np.zeros((n_frames, self.num_timescales), dtype=np.float64)
        if n_frames == 0:
            return out

        cum = build_cumulative_matrix(features)
        logger = get_logger("engine")

        for boundaries in self.window_boundaries(n_frames):
            result = self.compute_timescale(cum, boundaries, divergence)
            out[:, result.timescale] = result.filled()
            logger.debug(
                f"timescale {result.timescale} (w={boundaries.half_width}): "
                f"{result.n_normal}/{n_frames} normal frames, mean_div={result.mean_div:.6g}"
            )

        return out

    def calculate(
        self,
        frames: Sequence[Any] | np.ndarray,
        divergence: Optional[Divergence] = None,
        output_type: Optional[type] = None,
    ):
        """
        Structural change of a frame sequence.

        Args:
            frames: Feature matrix [N, D], list of raw vectors, or list of
                frame objects (VectorFrame, TimestampedFrame, ...)
            divergence: Divergence policy (default: Jensen-Shannon)
            output_type: Frame class for the output; defaults to the type of
                the input frames. Must provide `empty(n_dims)`.

        Returns:
            [N, num_timescales] array for raw inputs, otherwise a list of N
            output frames with num_timescales values each and metadata
            adopted from the corresponding input frame.
        """
        if len(frames) == 0:
            if isinstance(frames, np.ndarray) and output_type is None:
                return np.zeros((0, self.num_timescales))
            return []

        use_frames = output_type is not None or (
            not isinstance(frames, np.ndarray) and is_frame_object(frames[0])
        )

        features = stack_frames(frames, validate=self.validate)

        out_frames = []
        if use_frames:
            frame_cls = output_type or type(frames[0])
            for source in frames:
                out = frame_cls.empty(self.num_timescales)
                adopt_metadata(out, source)
                out_frames.append(out)

        matrix = self.compute_matrix(features, divergence)

        if not use_frames:
            return matrix

        for out, row in zip(out_frames, matrix):
            out.values[:] = row
        return out_frames

    def __repr__(self) -> str:
        return f"StructuralChange(num_timescales={self.num_timescales})"


def structural_change(
    features: np.ndarray,
    num_timescales: int,
    divergence: Optional[Divergence | DivergencePolicy] = None,
) -> np.ndarray:
    """Shortcut for StructuralChange(num_timescales).compute_matrix(features, divergence)."""
    return StructuralChange(num_timescales).compute_matrix(features, divergence)
