#!/usr/bin/env python3
"""
Compute structural change for every feature file in the configured directory.

Usage:
    uv run python scripts/01_compute_structural_change.py [--config configs/structural_change.yaml]
"""

import argparse
import logging
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from structural_change.analysis.run_structural_change import load_config, run_full_analysis
from structural_change.utils.logging import setup_logging


def main():
    parser = argparse.ArgumentParser(description="Compute structural change")
    parser.add_argument(
        "--config",
        type=str,
        default="configs/structural_change.yaml",
        help="Path to config file",
    )
    parser.add_argument(
        "--divergence",
        type=str,
        default=None,
        help="Override structural_change.divergence",
    )
    parser.add_argument(
        "--num-timescales",
        type=int,
        default=None,
        help="Override structural_change.num_timescales",
    )
    parser.add_argument("--log-file", type=str, default=None)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    config = load_config(args.config)
    sc = config.setdefault("structural_change", {})
    if args.divergence is not None:
        sc["divergence"] = args.divergence
    if args.num_timescales is not None:
        sc["num_timescales"] = args.num_timescales

    logger = setup_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        log_file=args.log_file,
    )
    logger.info("Running structural change...")

    results = run_full_analysis(config)

    summary = results["summary"]
    if len(summary) == 0:
        logger.warning("No tracks processed")
        return

    logger.info("\n" + "=" * 70)
    logger.info("MEAN STRUCTURAL CHANGE PER TIMESCALE")
    logger.info("=" * 70)
    per_timescale = summary.groupby("half_width")[["mean", "median"]].mean()
    for half_width, row in per_timescale.iterrows():
        logger.info(f"w={half_width:5d} | mean: {row['mean']:.4f} | median: {row['median']:.4f}")

    logger.info(f"\nProcessed {len(results['tracks'])} tracks, skipped {len(results['failed'])}")
    logger.info(f"Outputs saved to: {results['config']['output']['out_dir']}")


if __name__ == "__main__":
    main()
