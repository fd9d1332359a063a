#!/usr/bin/env python3
"""
Plot structural change heatmaps and the per-timescale summary.

Reads the per-track CSVs and summary table written by
01_compute_structural_change.py.

Usage:
    uv run python scripts/02_plot_structural_change.py [--config configs/structural_change.yaml]
"""

import argparse
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tqdm import tqdm

from structural_change.analysis.plots import plot_structural_change, plot_timescale_summary
from structural_change.analysis.run_structural_change import load_config, validate_config
from structural_change.data.io import load_structural_change_csv, load_summary_table
from structural_change.utils.logging import setup_logging


def main():
    parser = argparse.ArgumentParser(description="Plot structural change")
    parser.add_argument(
        "--config",
        type=str,
        default="configs/structural_change.yaml",
        help="Path to config file",
    )
    args = parser.parse_args()

    config = validate_config(load_config(args.config))
    logger = setup_logging()

    out_dir = Path(config["output"]["out_dir"])
    figures_dir = Path(config["output"]["figures_dir"] or out_dir / "figures")
    figures_dir.mkdir(parents=True, exist_ok=True)

    csv_files = sorted(out_dir.glob("*.csv"))
    logger.info(f"Plotting {len(csv_files)} tracks to {figures_dir}")

    for path in tqdm(csv_files, desc="Plotting"):
        matrix, timestamps = load_structural_change_csv(path)
        plot_structural_change(
            matrix,
            figures_dir / f"{path.stem}.png",
            timestamps=timestamps,
            title=f"Structural Change: {path.stem}",
        )

    summary_file = config["output"]["summary_file"]
    if summary_file and Path(summary_file).exists():
        plot_timescale_summary(load_summary_table(summary_file), figures_dir / "timescale_summary.png")
        logger.info("Saved timescale summary plot")


if __name__ == "__main__":
    main()
