"""
Common interface for divergence policies.

A divergence policy compares the left-window mean with the right-window mean
and returns one float. Policies hold no per-call state, so one instance can be
shared across timescales, runs and threads.
"""

from abc import ABC, abstractmethod

import numpy as np


class DivergencePolicy(ABC):
    """Callable (a, b) -> float comparing two equal-length vectors."""

    name: str = "divergence"

    def __call__(self, a, b) -> float:
        a, b = check_pair(a, b)
        return float(self.compare(a, b))

    @abstractmethod
    def compare(self, a: np.ndarray, b: np.ndarray) -> float:
        """Divergence between two validated 1-D vectors of equal length."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def check_pair(a, b) -> tuple[np.ndarray, np.ndarray]:
    """Convert both inputs to 1-D float arrays and check their lengths match."""
    a = np.asarray(a, dtype=np.float64).reshape(-1)
    b = np.asarray(b, dtype=np.float64).reshape(-1)
    if a.shape != b.shape:
        raise ValueError(
            f"Divergence inputs must have equal length, got {len(a)} and {len(b)}"
        )
    return a, b
