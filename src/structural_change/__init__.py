"""
Structural Change: multi-timescale novelty for audio feature sequences.

For every frame of a chroma/timbre feature sequence, compares the mean of the
frames before it with the mean of the frames after it at dyadic window sizes
(1, 2, 4, ... frames) and reports one divergence value per timescale.
"""

__version__ = "0.1.0"
