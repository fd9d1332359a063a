"""
Tests for feature and result storage.
"""

import numpy as np
import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

pytest.importorskip("pandas")
pytest.importorskip("zarr")

from structural_change.data.io import (
    FeatureStore,
    from_frames,
    get_zarr_track_ids,
    load_features,
    load_features_csv,
    load_structural_change_csv,
    load_structural_change_zarr,
    save_features_zarr,
    save_structural_change_csv,
    save_structural_change_zarr,
    to_frames,
)


class TestCsv:
    """Tests for CSV feature files."""

    def test_headerless_with_timestamps(self, tmp_path):
        """Sonic Annotator style: time, then one column per dimension."""
        path = tmp_path / "track.csv"
        path.write_text("0.0,0.1,0.9\n0.5,0.2,0.8\n1.0,0.3,0.7\n")

        features, timestamps = load_features_csv(path)

        assert features.shape == (3, 2)
        assert np.allclose(timestamps, [0.0, 0.5, 1.0])
        assert np.allclose(features[:, 0], [0.1, 0.2, 0.3])

    def test_headerless_without_timestamps(self, tmp_path):
        path = tmp_path / "track.csv"
        path.write_text("0.1,0.9\n0.2,0.8\n")

        features, timestamps = load_features_csv(path, has_timestamps=False)

        assert features.shape == (2, 2)
        assert timestamps is None

    def test_header_with_timestamp_column(self, tmp_path):
        path = tmp_path / "track.csv"
        path.write_text("timestamp,c0,c1,c2\n0.0,1,2,3\n0.1,4,5,6\n")

        features, timestamps = load_features(path)

        assert features.shape == (2, 3)
        assert np.allclose(timestamps, [0.0, 0.1])

    def test_structural_change_csv_round_trip(self, tmp_path):
        matrix = np.array([[-1.0, 0.5], [2.0, 3.0], [0.0, 1.5]])
        timestamps = np.array([0.0, 0.25, 0.5])
        path = tmp_path / "sc.csv"

        save_structural_change_csv(matrix, path, timestamps=timestamps)
        loaded, loaded_ts = load_structural_change_csv(path)

        assert np.allclose(loaded, matrix)
        assert np.allclose(loaded_ts, timestamps)
        assert path.read_text().splitlines()[0] == "timestamp,sc_1,sc_2"

    def test_columns_named_by_half_width(self, tmp_path):
        path = tmp_path / "sc.csv"
        save_structural_change_csv(np.zeros((2, 5)), path)

        assert path.read_text().splitlines()[0] == "sc_1,sc_2,sc_4,sc_8,sc_16"


class TestNpy:
    """Tests for .npy feature files."""

    def test_load_npy(self, tmp_path):
        path = tmp_path / "track.npy"
        np.save(path, np.arange(6, dtype=np.float32).reshape(3, 2))

        features, timestamps = load_features(path)

        assert features.shape == (3, 2)
        assert features.dtype == np.float64
        assert timestamps is None

    def test_unsupported_format(self, tmp_path):
        with pytest.raises(ValueError):
            load_features(tmp_path / "track.wav")


class TestZarr:
    """Tests for zarr feature stores."""

    def test_store_round_trip(self, tmp_path):
        zarr_path = tmp_path / "features.zarr"
        features = np.random.default_rng(0).random((10, 12)).astype(np.float32)
        timestamps = np.arange(10) * 0.1

        save_features_zarr(features, "track_a", zarr_path, timestamps=timestamps)
        save_features_zarr(features[:4], "track_b", zarr_path)

        store = FeatureStore(zarr_path)
        assert "track_a" in store
        assert sorted(store.track_ids()) == ["track_a", "track_b"]
        assert np.allclose(store.get_features("track_a"), features)
        assert np.allclose(store.get_timestamps("track_a"), timestamps)
        assert store.get_timestamps("track_b") is None

        loaded, loaded_ts = load_features(zarr_path, key="track_b")
        assert loaded.shape == (4, 12)
        assert loaded_ts is None

    def test_structural_change_round_trip(self, tmp_path):
        zarr_path = tmp_path / "sc.zarr"
        matrix = np.array([[-4.0 / 3.0], [0.0], [4.0], [0.0]])
        timestamps = np.array([0.0, 0.5, 1.0, 1.5])

        save_structural_change_zarr(matrix, "track_a", zarr_path, "euclidean", timestamps=timestamps)
        save_structural_change_zarr(np.zeros((3, 2)), "track_b", zarr_path, "jensen_shannon")

        assert sorted(get_zarr_track_ids(zarr_path)) == ["track_a", "track_b"]

        loaded, loaded_ts = load_structural_change_zarr("track_a", zarr_path)
        assert np.allclose(loaded, matrix)
        assert np.array_equal(loaded_ts, timestamps)

        loaded, loaded_ts = load_structural_change_zarr("track_b", zarr_path)
        assert loaded.shape == (3, 2)
        assert loaded_ts is None

        import zarr
        attrs = zarr.open(str(zarr_path), mode="r")["track_a"].attrs
        assert attrs["divergence"] == "euclidean"
        assert attrs["n_timescales"] == 1
        assert attrs["n_frames"] == 4

    def test_rewrite_replaces_group(self, tmp_path):
        zarr_path = tmp_path / "sc.zarr"
        save_structural_change_zarr(np.ones((5, 2)), "track_a", zarr_path, "euclidean", timestamps=np.arange(5.0))
        save_structural_change_zarr(np.zeros((2, 3)), "track_a", zarr_path, "correlation")

        loaded, loaded_ts = load_structural_change_zarr("track_a", zarr_path)
        assert loaded.shape == (2, 3)
        assert loaded_ts is None
        assert get_zarr_track_ids(zarr_path) == ["track_a"]


class TestFrameConversion:
    """Tests for to_frames / from_frames."""

    def test_round_trip(self):
        features = np.arange(6, dtype=np.float64).reshape(3, 2)
        frames = to_frames(features, np.array([0.0, 1.0, 2.0]))

        assert [f.timestamp for f in frames] == [0.0, 1.0, 2.0]
        matrix, timestamps = from_frames(frames)
        assert np.array_equal(matrix, features)
        assert np.array_equal(timestamps, [0.0, 1.0, 2.0])

    def test_timestamp_length_mismatch(self):
        with pytest.raises(ValueError):
            to_frames(np.zeros((3, 2)), np.zeros(2))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
