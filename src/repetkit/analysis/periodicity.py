"""Beat spectrum/spectrogram estimation and repeating-period selection."""

from __future__ import annotations

import logging
import math
from typing import Callable

import numpy as np

LOGGER = logging.getLogger(__name__)


def autocorrelation(data: np.ndarray) -> np.ndarray:
    """
    Compute the unbiased autocorrelation of every column of ``data``.

    The autocorrelation is obtained from the power spectral density
    (Wiener-Khinchin) with zero-padding to ``2N`` so that the result is a
    linear, not circular, correlation:

    $$
       r_k = \\frac{1}{N-k} \\sum_{n=0}^{N-1-k} x_n x_{n+k}
    $$

    Parameters
    ----------
    data : ndarray (n_points, n_columns)
        Input data, correlated along the first axis.

    Returns
    -------
    ndarray (n_points, n_columns)
        Autocorrelation for lags ``0..n_points-1``.
    """
    data = np.asarray(data, dtype=np.float64)
    if data.ndim == 1:
        data = data[:, None]
    n_points = data.shape[0]
    psd = np.abs(np.fft.fft(data, n=2 * n_points, axis=0)) ** 2
    acf = np.real(np.fft.ifft(psd, axis=0))[:n_points]
    return acf / np.arange(n_points, 0, -1)[:, None]


def beat_spectrum(spectrogram: np.ndarray) -> np.ndarray:
    """Return the beat spectrum ``(n_frames,)`` of a ``(n_freq, n_frames)`` spectrogram.

    Every frequency bin is autocorrelated across time and the results are
    averaged over bins. Peaks indicate repetition lags.
    """
    return np.mean(autocorrelation(np.asarray(spectrogram).T), axis=1)


def beat_spectrogram(
    spectrogram: np.ndarray,
    segment_length: int,
    segment_step: int,
    *,
    progress: Callable[[str, float], None] | None = None,
) -> np.ndarray:
    """
    Compute a time-localized beat spectrogram.

    A beat spectrum is computed on the ``segment_length`` frames centered on
    every ``segment_step``-th frame and held constant for the frames in
    between.

    Parameters
    ----------
    spectrogram : ndarray (n_freq, n_frames)
        Power or magnitude spectrogram.
    segment_length : int
        Number of frames per local analysis window.
    segment_step : int
        Number of frames between two beat spectrum evaluations.

    Returns
    -------
    ndarray (segment_length, n_frames)
        One beat spectrum column per frame.
    """
    if segment_length < 1 or segment_step < 1:
        raise ValueError(
            "segment_length and segment_step must be positive, "
            f"got {segment_length} and {segment_step}"
        )
    n_freq, n_frames = spectrogram.shape
    padded = np.concatenate(
        [
            np.zeros((n_freq, int(math.ceil((segment_length - 1) / 2)))),
            spectrogram,
            np.zeros((n_freq, (segment_length - 1) // 2)),
        ],
        axis=1,
    )

    result = np.zeros((segment_length, n_frames))
    for frame_index in range(0, n_frames, segment_step):
        stop = min(frame_index + segment_step, n_frames)
        column = beat_spectrum(padded[:, frame_index : frame_index + segment_length])
        result[:, frame_index:stop] = column[:, None]
        if progress is not None:
            progress("beat_spectrogram", stop / n_frames)
    return result


def _admissible_lags(n_lags: int, period_range: tuple[int, int]) -> tuple[int, int]:
    low = max(int(period_range[0]), 1)
    high = min(int(period_range[1]), n_lags // 3)
    return low, high


def pick_period(beat: np.ndarray, period_range: tuple[int, int]) -> int:
    """
    Return the repeating period (in frames) with the strongest beat spectrum.

    The search covers lags ``[max(min, 1), min(max, n_lags // 3)]``; the
    ``// 3`` bound leaves room for at least three repetitions. Lag 0 is never
    admissible. When the range is empty the largest admissible period is
    returned instead.
    """
    beat = np.asarray(beat, dtype=np.float64)
    if beat.ndim != 1:
        raise ValueError(f"beat spectrum must be 1-D, got ndim={beat.ndim}")
    low, high = _admissible_lags(beat.shape[0], period_range)
    if high < low:
        fallback = max(1, high)
        LOGGER.debug(
            "Empty period range [%d, %d] for %d lags; using %d",
            low,
            high,
            beat.shape[0],
            fallback,
        )
        return fallback
    return int(np.argmax(beat[low : high + 1])) + low


def pick_periods(beat: np.ndarray, period_range: tuple[int, int]) -> np.ndarray:
    """Apply :func:`pick_period` to every column of a beat spectrogram."""
    beat = np.asarray(beat, dtype=np.float64)
    if beat.ndim != 2:
        raise ValueError(f"beat spectrogram must be 2-D, got ndim={beat.ndim}")
    low, high = _admissible_lags(beat.shape[0], period_range)
    if high < low:
        return np.full(beat.shape[1], max(1, high), dtype=np.int64)
    return np.argmax(beat[low : high + 1], axis=0).astype(np.int64) + low


def period_range_frames(
    period_range_sec: tuple[float, float], sample_rate: int, step_length: int
) -> tuple[int, int]:
    """Convert a period range in seconds to frames."""
    return (
        int(round(period_range_sec[0] * sample_rate / step_length)),
        int(round(period_range_sec[1] * sample_rate / step_length)),
    )
