"""Repetition-structure analysis: periodicity and self-similarity."""

from .periodicity import (
    autocorrelation,
    beat_spectrogram,
    beat_spectrum,
    period_range_frames,
    pick_period,
    pick_periods,
)
from .similarity import (
    SimilarityIndexSet,
    cross_similarity,
    local_maxima,
    normalize_columns,
    self_similarity,
    similarity_indices,
)

__all__ = [
    "autocorrelation",
    "beat_spectrum",
    "beat_spectrogram",
    "pick_period",
    "pick_periods",
    "period_range_frames",
    "SimilarityIndexSet",
    "normalize_columns",
    "self_similarity",
    "cross_similarity",
    "local_maxima",
    "similarity_indices",
]
