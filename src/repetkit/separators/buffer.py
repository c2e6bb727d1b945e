"""Fixed-capacity circular buffer of frame spectra for online REPET-SIM."""

from __future__ import annotations

import numpy as np

from repetkit.signal.stft import STFTPlan


def buffer_length(buffer_sec: float, sample_rate: int, plan: STFTPlan) -> int:
    """Return the number of frames held in ``buffer_sec`` seconds of history."""
    frames = (buffer_sec * sample_rate - plan.window_length) / plan.step_length + 1
    return max(int(round(frames)), 1)


class SimilarityBuffer:
    """Circular buffer of the most recent magnitude spectra.

    All storage is allocated once: ``capacity`` slots of per-channel
    magnitudes plus the channel-mean spectrum used for similarity. Slot
    ``frame_index % capacity`` is overwritten by each new frame.
    """

    def __init__(self, n_freq: int, capacity: int, n_channels: int = 1) -> None:
        if n_freq < 1 or capacity < 1 or n_channels < 1:
            raise ValueError(
                "n_freq, capacity, and n_channels must be positive, "
                f"got {n_freq}, {capacity}, {n_channels}"
            )
        self.n_freq = int(n_freq)
        self.capacity = int(capacity)
        self.n_channels = int(n_channels)
        self.magnitudes = np.zeros((self.n_freq, self.capacity, self.n_channels))
        self.mean_spectra = np.zeros((self.n_freq, self.capacity))
        self.frame_index = 0

    @property
    def n_filled(self) -> int:
        return min(self.frame_index, self.capacity)

    def reset(self) -> None:
        self.magnitudes.fill(0.0)
        self.mean_spectra.fill(0.0)
        self.frame_index = 0

    def push(self, magnitudes: np.ndarray) -> int:
        """Store one ``(n_freq, n_channels)`` frame and return its slot."""
        if magnitudes.shape != (self.n_freq, self.n_channels):
            raise ValueError(
                f"frame magnitudes must be shaped {(self.n_freq, self.n_channels)}, "
                f"got {magnitudes.shape}"
            )
        slot = self.frame_index % self.capacity
        self.magnitudes[:, slot, :] = magnitudes
        self.mean_spectra[:, slot] = magnitudes.mean(axis=1)
        self.frame_index += 1
        return slot

    def chronological_slots(self) -> np.ndarray:
        """Return the filled slots ordered from oldest to newest frame."""
        if self.frame_index <= self.capacity:
            return np.arange(self.frame_index)
        return (np.arange(self.capacity) + self.frame_index) % self.capacity

    def median(self, slots: np.ndarray) -> np.ndarray:
        """Return the per-bin, per-channel median over ``slots``."""
        return np.median(self.magnitudes[:, slots, :], axis=1)
