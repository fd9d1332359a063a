"""Feature and result storage."""

from .io import (
    load_features,
    load_features_csv,
    load_features_zarr,
    save_features_zarr,
    save_structural_change_csv,
    load_structural_change_csv,
    save_structural_change_zarr,
    load_structural_change_zarr,
    get_zarr_track_ids,
    save_summary_table,
    load_summary_table,
    to_frames,
    from_frames,
    FeatureStore,
)

__all__ = [
    "load_features",
    "load_features_csv",
    "load_features_zarr",
    "save_features_zarr",
    "save_structural_change_csv",
    "load_structural_change_csv",
    "save_structural_change_zarr",
    "load_structural_change_zarr",
    "get_zarr_track_ids",
    "save_summary_table",
    "load_summary_table",
    "to_frames",
    "from_frames",
    "FeatureStore",
]
