"""Structural change computation, summaries and plots."""

from .engine import (
    StructuralChange,
    TimescaleResult,
    fill_edges,
    structural_change,
)
from .summary import summarize_structural_change, summary_vector

__all__ = [
    "StructuralChange",
    "TimescaleResult",
    "fill_edges",
    "structural_change",
    "summarize_structural_change",
    "summary_vector",
]
