"""
Visualization utilities for structural change.

Creates the per-frame heatmap and the per-timescale summary plot.
"""

from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt


def plot_structural_change(
    matrix: np.ndarray,
    output_path: str | Path,
    timestamps: Optional[np.ndarray] = None,
    title: str = "Structural Change",
) -> None:
    """
    Plot a structural change matrix as a heatmap (time x timescale).

    Args:
        matrix: Structural change matrix [N, T]
        output_path: Path to save figure
        timestamps: Optional frame times in seconds [N] for the x axis
        title: Plot title
    """
    matrix = np.asarray(matrix, dtype=np.float64)
    n_frames, n_timescales = matrix.shape

    fig, ax = plt.subplots(figsize=(12, 4))

    if timestamps is not None and n_frames > 1:
        extent = [float(timestamps[0]), float(timestamps[-1]), -0.5, n_timescales - 0.5]
        xlabel = "Time (s)"
    else:
        extent = [0, n_frames, -0.5, n_timescales - 0.5]
        xlabel = "Frame"

    im = ax.imshow(
        matrix.T,
        aspect="auto",
        origin="lower",
        interpolation="nearest",
        extent=extent,
        cmap="magma",
    )
    ax.set_xlabel(xlabel, fontsize=12)
    ax.set_ylabel("Half-width (frames)", fontsize=12)
    ax.set_yticks(range(n_timescales))
    ax.set_yticklabels([str(1 << t) for t in range(n_timescales)])
    ax.set_title(title, fontsize=14)
    fig.colorbar(im, ax=ax, label="Divergence")

    plt.tight_layout()
    plt.savefig(output_path, dpi=150)
    plt.close()


def plot_timescale_summary(
    summary: pd.DataFrame,
    output_path: str | Path,
    title: str = "Structural Change by Timescale",
) -> None:
    """
    Plot mean and median structural change per timescale.

    Args:
        summary: Output of summarize_structural_change (optionally several
            tracks stacked; values are averaged per timescale)
        output_path: Path to save figure
        title: Plot title
    """
    per_timescale = summary.groupby("half_width")[["mean", "median"]].mean()

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.plot(per_timescale.index, per_timescale["mean"], marker="o", label="mean")
    ax.plot(per_timescale.index, per_timescale["median"], marker="s", label="median")
    ax.set_xscale("log", base=2)
    ax.set_xlabel("Half-width (frames)", fontsize=12)
    ax.set_ylabel("Structural change", fontsize=12)
    ax.set_title(title, fontsize=14)
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(output_path, dpi=150)
    plt.close()
