"""
Tests for whole-sequence summaries.
"""

import numpy as np
import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from structural_change.analysis.engine import StructuralChange
from structural_change.analysis.summary import summarize_structural_change, summary_vector
from structural_change.divergence import EuclideanDivergence


class TestSummary:
    """Tests for summarize_structural_change."""

    def test_step_sequence(self):
        features = np.array([[1.0], [1.0], [5.0], [5.0]])
        matrix = StructuralChange(2).calculate(features, EuclideanDivergence())

        summary = summarize_structural_change(matrix, track_id="step")

        assert list(summary["timescale"]) == [0, 1]
        assert list(summary["half_width"]) == [1, 2]
        assert list(summary["n_normal"]) == [3, 1]
        assert (summary["track_id"] == "step").all()
        # Column t=0 is [-4/3, 0, 4, 0]
        assert summary.loc[0, "mean"] == pytest.approx(2.0 / 3.0)
        assert summary.loc[0, "median"] == pytest.approx(0.0)
        # Column t=1 is [-4, -4, 4, 12]
        assert summary.loc[1, "mean"] == pytest.approx(2.0)
        assert summary.loc[1, "max"] == pytest.approx(12.0)

    def test_without_track_id(self):
        summary = summarize_structural_change(np.zeros((10, 3)))
        assert "track_id" not in summary.columns
        assert len(summary) == 3

    def test_rejects_1d(self):
        with pytest.raises(ValueError):
            summarize_structural_change(np.zeros(5))


class TestSummaryVector:
    """Tests for summary_vector."""

    def test_mean_and_median(self):
        matrix = np.array([[1.0, 10.0], [2.0, 20.0], [6.0, 30.0]])

        assert np.allclose(summary_vector(matrix, "mean"), [3.0, 20.0])
        assert np.allclose(summary_vector(matrix, "median"), [2.0, 20.0])

    def test_unknown_statistic(self):
        with pytest.raises(ValueError):
            summary_vector(np.zeros((2, 2)), "mode")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
