"""Collection of utility functions shared by the REPET separators."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import math
from typing import Callable, Sequence, TypeVar

import numpy as np

from repetkit.signal.stft import STFTPlan, istft, magnitude, stft

T = TypeVar("T")
R = TypeVar("R")


def validate_sample_rate(sample_rate) -> int:
    """Return ``sample_rate`` as a positive ``int`` or raise ``ValueError``."""
    if sample_rate is None:
        raise ValueError("sample_rate must be provided")
    if isinstance(sample_rate, bool):
        raise ValueError(f"sample_rate must be an integer, got {sample_rate!r}")
    try:
        rate = float(sample_rate)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"sample_rate must be a number, got {sample_rate!r}") from exc
    if not math.isfinite(rate) or rate != int(rate):
        raise ValueError(f"sample_rate must be a finite integer, got {sample_rate!r}")
    if rate <= 0:
        raise ValueError(f"sample_rate must be positive, got {sample_rate}")
    return int(rate)


def as_channels(audio) -> tuple[np.ndarray, bool]:
    """
    Validate a sample buffer and view it as ``(n_samples, n_channels)``.

    Parameters
    ----------
    audio : array_like
        ``(n_samples,)`` or ``(n_samples, n_channels)`` samples.

    Returns
    -------
    channels : ndarray (n_samples, n_channels)
        Float64 copy of the input.
    squeeze : bool
        ``True`` if the input was 1-D and the output should be squeezed back.
    """
    data = np.array(audio, dtype=np.float64)
    if data.ndim not in {1, 2}:
        raise ValueError(
            f"audio must be shaped (n_samples,) or (n_samples, n_channels), got ndim={data.ndim}"
        )
    squeeze = data.ndim == 1
    if squeeze:
        data = data[:, None]
    if data.shape[0] == 0:
        raise ValueError("audio must contain at least one sample")
    if data.shape[1] == 0:
        raise ValueError("audio must contain at least one channel")
    if not np.all(np.isfinite(data)):
        raise ValueError("audio contains NaN or infinite samples")
    return data, squeeze


def map_channels(
    func: Callable[[T], R], items: Sequence[T], workers: int = 1
) -> list[R]:
    """Apply ``func`` to every item, optionally on a thread pool."""
    if workers <= 1 or len(items) <= 1:
        return [func(item) for item in items]
    with ThreadPoolExecutor(max_workers=min(workers, len(items))) as pool:
        return list(pool.map(func, items))


def analyze_channels(
    audio: np.ndarray, plan: STFTPlan, workers: int = 1
) -> tuple[list[np.ndarray], list[np.ndarray]]:
    """Return per-channel complex STFTs and magnitude spectrograms."""
    window = plan.window_samples
    spectra = map_channels(
        lambda channel: stft(channel, window, plan.step_length),
        [audio[:, idx] for idx in range(audio.shape[1])],
        workers,
    )
    return spectra, [magnitude(spec) for spec in spectra]


def mean_spectrogram(magnitudes: Sequence[np.ndarray]) -> np.ndarray:
    """Average magnitude spectrograms across channels."""
    return np.mean(np.stack(magnitudes, axis=0), axis=0)


def synthesize_channel(
    spectrum: np.ndarray, full_mask: np.ndarray, plan: STFTPlan, n_samples: int
) -> np.ndarray:
    """Apply a mirrored mask to one channel's STFT and return ``n_samples`` samples."""
    return istft(full_mask * spectrum, plan.window_samples, plan.step_length, n_samples)
