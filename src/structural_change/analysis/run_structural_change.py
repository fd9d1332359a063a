"""
Batch orchestrator for structural change.

Loads every feature file matched by the config (a zarr store contributes one
track per group), computes the structural change matrix per track, writes one
CSV per track (optionally also a zarr group) and a per-timescale summary table.

For the Mahalanobis divergence the inverse covariance is either loaded from a
.npy file or estimated ONCE on the pooled features of all tracks, so that every
track is measured with the same metric.
"""

import copy
from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd
import yaml
from tqdm import tqdm

from ..data.io import (
    FeatureStore,
    load_features,
    save_structural_change_csv,
    save_structural_change_zarr,
    save_summary_table,
)
from ..divergence import (
    COVARIANCE_METHODS,
    DIVERGENCES,
    DivergencePolicy,
    MahalanobisDivergence,
    estimate_inverse_covariance,
    get_divergence,
)
from ..utils.logging import get_logger
from .engine import StructuralChange
from .summary import summarize_structural_change

DEFAULT_CONFIG = {
    "structural_change": {
        "num_timescales": 7,
        "divergence": "jensen_shannon",
        "validate": True,
        "covariance": {
            "method": "ledoit_wolf",
            "path": None,
        },
    },
    "input": {
        "features_dir": "data/features",
        "pattern": "*.csv",
    },
    "output": {
        "out_dir": "outputs/structural_change",
        "summary_file": "outputs/structural_change/summary.parquet",
        "zarr_path": None,
        "figures_dir": None,
    },
}


def load_config(config_path: str | Path) -> dict:
    """Load configuration from YAML file."""
    with open(config_path) as f:
        return yaml.safe_load(f) or {}


def _merge(defaults: dict, overrides: dict) -> dict:
    merged = copy.deepcopy(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def validate_config(config: dict) -> dict:
    """
    Fill in defaults and check the structural change config.

    Args:
        config: Raw config dict (as loaded from YAML)

    Returns:
        Config dict with all keys present
    """
    config = _merge(DEFAULT_CONFIG, config or {})
    sc = config["structural_change"]

    num_timescales = sc["num_timescales"]
    if isinstance(num_timescales, bool) or not isinstance(num_timescales, int) or num_timescales < 0:
        raise ValueError(f"structural_change.num_timescales must be an integer >= 0, got {num_timescales!r}")

    divergence = str(sc["divergence"]).lower().replace("-", "_")
    if divergence not in DIVERGENCES:
        raise ValueError(f"Unknown divergence: {sc['divergence']} (expected one of {sorted(DIVERGENCES)})")
    sc["divergence"] = divergence

    method = sc["covariance"]["method"]
    if method not in COVARIANCE_METHODS:
        raise ValueError(f"Unknown covariance method: {method} (expected one of {COVARIANCE_METHODS})")

    return config


def find_feature_files(input_config: dict) -> list[Path]:
    """Feature files matched by input.features_dir / input.pattern, sorted."""
    features_dir = Path(input_config["features_dir"])
    if not features_dir.exists():
        raise FileNotFoundError(f"Feature directory not found: {features_dir}")
    return sorted(features_dir.glob(input_config["pattern"]))


def load_tracks(path: Path) -> list[tuple[str, np.ndarray, Optional[np.ndarray]]]:
    """
    Load the tracks held by one feature file.

    A .zarr store holds one track per group (as written by save_features_zarr);
    any other file is a single track named after its stem.

    Returns:
        List of (track_id, features [N, D], timestamps [N] or None)
    """
    if path.suffix.lower() == ".zarr":
        store = FeatureStore(path)
        return [
            (track_id, store.get_features(track_id), store.get_timestamps(track_id))
            for track_id in sorted(store.track_ids())
        ]

    features, timestamps = load_features(path)
    return [(path.stem, features, timestamps)]


def build_divergence(
    sc_config: dict,
    features_list: Optional[list[np.ndarray]] = None,
) -> DivergencePolicy:
    """
    Build the configured divergence policy.

    Args:
        sc_config: The structural_change section of the config
        features_list: Feature matrices of all tracks (pooled for the
            Mahalanobis covariance when no covariance path is configured)

    Returns:
        DivergencePolicy instance
    """
    name = sc_config["divergence"]
    if name != "mahalanobis":
        return get_divergence(name)

    cov_config = sc_config["covariance"]
    if cov_config.get("path"):
        inv_cov = np.load(cov_config["path"])
        return MahalanobisDivergence(inv_cov, validate=sc_config["validate"])

    if not features_list:
        raise ValueError("Mahalanobis divergence needs covariance.path or input features to estimate from")

    pooled = np.vstack(features_list)
    get_logger().info(
        f"Estimating inverse covariance ({cov_config['method']}) on {len(pooled)} pooled frames"
    )
    return MahalanobisDivergence(estimate_inverse_covariance(pooled, method=cov_config["method"]))


def process_track(
    track_id: str,
    features: np.ndarray,
    engine: StructuralChange,
    divergence: DivergencePolicy,
    out_dir: Path,
    timestamps: Optional[np.ndarray] = None,
    zarr_path: Optional[Path] = None,
) -> dict:
    """
    Compute and save structural change for one track.

    Args:
        zarr_path: If given, the matrix is also written to this store under track_id

    Returns:
        Dict with track_id, the matrix, output path and summary DataFrame
    """
    matrix = engine.compute_matrix(features, divergence)

    output_path = out_dir / f"{track_id}.csv"
    save_structural_change_csv(matrix, output_path, timestamps=timestamps)
    if zarr_path is not None:
        save_structural_change_zarr(matrix, track_id, zarr_path, divergence.name, timestamps=timestamps)

    return {
        "track_id": track_id,
        "matrix": matrix,
        "timestamps": timestamps,
        "output_path": output_path,
        "summary": summarize_structural_change(matrix, track_id=track_id),
    }


def run_full_analysis(
    config: str | Path | dict,
    show_progress: bool = True,
) -> dict:
    """
    Run structural change over all configured feature files.

    Args:
        config: Path to YAML config, or config dict
        show_progress: Whether to show a progress bar

    Returns:
        Dict with:
            - tracks: list of per-track results (see process_track)
            - summary: concatenated per-track summary DataFrame
            - failed: list of (path, error message) for skipped files
            - config: the validated config
    """
    logger = get_logger()

    if not isinstance(config, dict):
        config = load_config(config)
    config = validate_config(config)

    sc_config = config["structural_change"]
    out_dir = Path(config["output"]["out_dir"])
    out_dir.mkdir(parents=True, exist_ok=True)

    engine = StructuralChange(sc_config["num_timescales"], validate=sc_config["validate"])

    files = find_feature_files(config["input"])
    logger.info(f"Found {len(files)} feature files in {config['input']['features_dir']}")

    loaded = []
    failed = []
    for path in files:
        try:
            loaded.extend(load_tracks(path))
        except Exception as e:
            logger.warning(f"Could not load features from {path}: {e}")
            failed.append((str(path), str(e)))
            continue

    divergence = build_divergence(sc_config, [f for _, f, _ in loaded if len(f) > 0])
    logger.info(
        f"Structural change: {engine.num_timescales} timescales "
        f"(half-widths {engine.half_widths}), divergence={divergence!r}"
    )

    zarr_path = config["output"].get("zarr_path")
    if zarr_path:
        zarr_path = Path(zarr_path)
        zarr_path.parent.mkdir(parents=True, exist_ok=True)
    else:
        zarr_path = None

    tracks = []
    iterator = tqdm(loaded, desc="Structural change") if show_progress else loaded
    for track_id, features, timestamps in iterator:
        try:
            tracks.append(
                process_track(track_id, features, engine, divergence, out_dir, timestamps, zarr_path=zarr_path)
            )
        except ValueError as e:
            logger.warning(f"Error processing {track_id}: {e}")
            failed.append((track_id, str(e)))
            continue

    if tracks:
        summary = pd.concat([t["summary"] for t in tracks], ignore_index=True)
    else:
        summary = pd.DataFrame()

    summary_file = config["output"].get("summary_file")
    if summary_file and len(summary) > 0:
        Path(summary_file).parent.mkdir(parents=True, exist_ok=True)
        save_summary_table(summary, summary_file)
        logger.info(f"Saved summary for {len(tracks)} tracks to {summary_file}")

    if zarr_path is not None and tracks:
        logger.info(f"Saved structural change for {len(tracks)} tracks to {zarr_path}")

    if failed:
        logger.warning(f"Skipped {len(failed)} files")

    return {
        "tracks": tracks,
        "summary": summary,
        "failed": failed,
        "config": config,
    }
