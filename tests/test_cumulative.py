"""
Tests for the cumulative sum matrix.

Verifies that window sums and means from the cumulative matrix match direct
summation over the frames.
"""

import numpy as np
import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from structural_change.features.cumulative import (
    build_cumulative_matrix,
    window_mean,
    window_means,
    window_sum,
)


class TestCumulativeMatrix:
    """Tests for build_cumulative_matrix."""

    def test_shape_and_zero_row(self):
        features = np.arange(12, dtype=np.float64).reshape(4, 3)
        cum = build_cumulative_matrix(features)

        assert cum.shape == (5, 3)
        assert np.all(cum[0] == 0)
        assert np.allclose(cum[-1], features.sum(axis=0))

    def test_window_sum_invariant(self):
        """cum[k] - cum[j] == sum(features[j:k]) for all j <= k."""
        rng = np.random.default_rng(0)
        features = rng.normal(size=(17, 5))
        cum = build_cumulative_matrix(features)

        for j in range(18):
            for k in range(j, 18):
                assert np.allclose(cum[k] - cum[j], features[j:k].sum(axis=0))

    def test_empty_sequence(self):
        cum = build_cumulative_matrix(np.zeros((0, 12)))
        assert cum.shape == (1, 12)

    def test_rejects_1d_input(self):
        with pytest.raises(ValueError):
            build_cumulative_matrix(np.ones(5))


class TestWindowMeans:
    """Tests for window mean lookups."""

    def test_window_mean(self):
        features = np.array([[1.0], [1.0], [5.0], [5.0]])
        cum = build_cumulative_matrix(features)

        assert np.allclose(window_mean(cum, 0, 2), [1.0])
        assert np.allclose(window_mean(cum, 1, 3), [3.0])
        assert np.allclose(window_sum(cum, 0, 4), [12.0])

    def test_empty_window_rejected(self):
        cum = build_cumulative_matrix(np.ones((4, 2)))
        with pytest.raises(ValueError):
            window_mean(cum, 2, 2)

    def test_vectorized_matches_scalar(self):
        rng = np.random.default_rng(1)
        features = rng.random((30, 4))
        cum = build_cumulative_matrix(features)

        starts = np.array([0, 3, 10, 22])
        ends = np.array([4, 11, 12, 30])
        means = window_means(cum, starts, ends)

        for row, s, e in zip(means, starts, ends):
            assert np.allclose(row, features[s:e].mean(axis=0))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
