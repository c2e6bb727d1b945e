"""Typed request models for strategy interfaces."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from repetkit.analysis.similarity import SimilarityIndexSet


@dataclass(slots=True)
class MaskRequest:
    """Input container for repeating-mask strategies.

    Parameters
    ----------
    spectrogram:
        Magnitude spectrogram ``(n_freq, n_frame)`` of one channel.
    period:
        Global repeating period in frames (fixed-period masks).
    periods:
        Per-frame repeating periods ``(n_frame,)`` (adaptive masks).
    neighbors:
        Per-frame similar-frame indices (similarity masks).
    """

    spectrogram: np.ndarray
    period: int | None = None
    periods: np.ndarray | None = None
    neighbors: SimilarityIndexSet | None = None
