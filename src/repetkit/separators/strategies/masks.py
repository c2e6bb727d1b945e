"""Repeating-mask strategies: fixed period, adaptive period, and similarity."""

from __future__ import annotations

import math

import numpy as np

from repetkit.separators.core import MaskRequest, MaskStrategy

EPS = float(np.finfo(np.float64).eps)


def repeating_mask(
    spectrogram: np.ndarray, repeating: np.ndarray, eps: float = EPS
) -> np.ndarray:
    """
    Turn a repeating-spectrogram estimate into a soft mask.

    The estimate is first clamped to the observed energy, so that

    $$
       m_{f,t} = \\frac{\\min(V_{f,t}, R_{f,t}) + \\varepsilon}{V_{f,t} + \\varepsilon}
       \\in (0, 1]
    $$
    """
    repeating = np.minimum(spectrogram, repeating)
    return (repeating + eps) / (spectrogram + eps)


def apply_highpass(mask: np.ndarray, cutoff: int) -> np.ndarray:
    """Attribute bins ``1..cutoff`` to the background (mask of one)."""
    out = np.array(mask, dtype=np.float64, copy=True)
    out[1 : cutoff + 1] = 1.0
    return out


def mirror_mask(mask: np.ndarray) -> np.ndarray:
    """Mirror a ``(n_fft/2+1, ...)`` mask across Nyquist to cover all ``n_fft`` bins."""
    return np.concatenate([mask, mask[-2:0:-1]], axis=0)


class _MedianMaskStrategy(MaskStrategy):
    def __init__(self, eps: float = EPS) -> None:
        self.eps = float(eps)

    def build(self, request: MaskRequest) -> np.ndarray:
        spectrogram = np.asarray(request.spectrogram, dtype=np.float64)
        return repeating_mask(
            spectrogram, self.repeating_spectrogram(request), eps=self.eps
        )


class FixedPeriodMaskStrategy(_MedianMaskStrategy):
    """REPET mask from one global repeating period.

    The spectrogram is cut into ``ceil(T / p)`` segments of ``p`` frames, and
    the repeating segment is the element-wise median across segments. The last
    segment holds only ``T - (n_seg - 1) p`` valid frames; the remaining
    template columns are estimated from the complete segments only.
    """

    def repeating_spectrogram(self, request: MaskRequest) -> np.ndarray:
        if request.period is None:
            raise ValueError("FixedPeriodMaskStrategy requires a period")
        spectrogram = np.asarray(request.spectrogram, dtype=np.float64)
        n_freq, n_frames = spectrogram.shape
        period = int(request.period)
        if period < 1:
            raise ValueError(f"period must be >= 1, got {period}")

        n_segments = int(math.ceil(n_frames / period))
        n_valid = n_frames - (n_segments - 1) * period
        padded = np.zeros((n_freq, n_segments * period))
        padded[:, :n_frames] = spectrogram
        segments = padded.reshape(n_freq, n_segments, period)

        template = np.zeros((n_freq, period))
        template[:, :n_valid] = np.median(segments[:, :, :n_valid], axis=1)
        if n_valid < period and n_segments > 1:
            template[:, n_valid:] = np.median(segments[:, :-1, n_valid:], axis=1)
        return np.tile(template, (1, n_segments))[:, :n_frames]

    def template(self, spectrogram: np.ndarray, period: int) -> np.ndarray:
        """Return the repeating segment ``(n_freq, period)`` for ``spectrogram``."""
        repeating = self.repeating_spectrogram(
            MaskRequest(spectrogram=spectrogram, period=period)
        )
        return repeating[:, :period]


class AdaptivePeriodMaskStrategy(_MedianMaskStrategy):
    """Adaptive REPET mask from per-frame repeating periods.

    Frame ``t`` is estimated by the median of the ``filter_order`` frames at
    ``t + (i - ceil(filter_order / 2)) * p_t`` that fall inside the signal.
    """

    def __init__(self, filter_order: int = 5, eps: float = EPS) -> None:
        super().__init__(eps=eps)
        if filter_order < 1:
            raise ValueError(f"filter_order must be >= 1, got {filter_order}")
        self.filter_order = int(filter_order)

    def repeating_spectrogram(self, request: MaskRequest) -> np.ndarray:
        if request.periods is None:
            raise ValueError("AdaptivePeriodMaskStrategy requires per-frame periods")
        spectrogram = np.asarray(request.spectrogram, dtype=np.float64)
        n_frames = spectrogram.shape[1]
        periods = np.asarray(request.periods, dtype=np.int64)
        if periods.shape != (n_frames,):
            raise ValueError(
                f"periods must have shape ({n_frames},), got {periods.shape}"
            )

        offsets = np.arange(1, self.filter_order + 1) - int(
            math.ceil(self.filter_order / 2)
        )
        repeating = np.zeros_like(spectrogram)
        for frame_index in range(n_frames):
            indices = frame_index + offsets * periods[frame_index]
            indices = indices[(indices >= 0) & (indices < n_frames)]
            repeating[:, frame_index] = np.median(spectrogram[:, indices], axis=1)
        return repeating


class SimilarityMaskStrategy(_MedianMaskStrategy):
    """REPET-SIM mask: median over each frame's most similar frames."""

    def repeating_spectrogram(self, request: MaskRequest) -> np.ndarray:
        neighbors = request.neighbors
        if neighbors is None:
            raise ValueError("SimilarityMaskStrategy requires similarity neighbors")
        spectrogram = np.asarray(request.spectrogram, dtype=np.float64)
        n_frames = spectrogram.shape[1]
        if len(neighbors) != n_frames:
            raise ValueError(
                f"neighbors cover {len(neighbors)} frames, expected {n_frames}"
            )

        repeating = np.zeros_like(spectrogram)
        for frame_index in range(n_frames):
            repeating[:, frame_index] = np.median(
                spectrogram[:, neighbors[frame_index]], axis=1
            )
        return repeating
