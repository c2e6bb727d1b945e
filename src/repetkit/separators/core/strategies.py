"""Strategy interfaces for algorithm component injection."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from .strategy_models import MaskRequest


class MaskStrategy(ABC):
    """Builds a repeating mask from one channel's magnitude spectrogram."""

    @abstractmethod
    def repeating_spectrogram(self, request: MaskRequest) -> np.ndarray:
        """Return the estimated repeating spectrogram ``(n_freq, n_frame)``."""

    @abstractmethod
    def build(self, request: MaskRequest) -> np.ndarray:
        """Return the repeating mask ``(n_freq, n_frame)`` with values in ``(0, 1]``."""
