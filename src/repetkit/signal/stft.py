"""Shared STFT planning and construction utilities."""

from __future__ import annotations

from dataclasses import dataclass, field
import math

import numpy as np
from scipy.signal import ShortTimeFFT, get_window


@dataclass(frozen=True)
class STFTPlan:
    """STFT configuration shared across REPET separators.

    Parameters
    ----------
    window_length:
        Frame length in samples (also the FFT size).
    step_length:
        Hop between consecutive frames in samples.
    window:
        Window name understood by :func:`scipy.signal.get_window`. The window
        is built periodic (``fftbins=True``).
    """

    window_length: int
    step_length: int
    window: str = "hamming"
    _samples: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.window_length < 2:
            raise ValueError(
                f"window_length must be at least 2, got {self.window_length}"
            )
        if not 0 < self.step_length <= self.window_length:
            raise ValueError(
                "step_length must lie in (0, window_length], "
                f"got {self.step_length} for window_length={self.window_length}"
            )
        samples = get_window(self.window, self.window_length, fftbins=True)
        object.__setattr__(self, "_samples", np.asarray(samples, dtype=np.float64))

    @classmethod
    def from_sample_rate(
        cls, sample_rate: int, window_sec: float = 0.04, window: str = "hamming"
    ) -> "STFTPlan":
        """Build the default plan: a power-of-two window with 50% overlap."""
        if sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {sample_rate}")
        window_length = 2 ** int(math.ceil(math.log2(window_sec * sample_rate)))
        window_length = max(window_length, 2)
        return cls(
            window_length=window_length,
            step_length=int(round(window_length / 2)),
            window=window,
        )

    @property
    def window_samples(self) -> np.ndarray:
        """Return the analysis/synthesis window as an array."""
        return self._samples

    @property
    def window_gain(self) -> float:
        """Overlap-add gain removed by :func:`istft`."""
        return float(np.sum(self._samples[:: self.step_length]))

    @property
    def n_freq(self) -> int:
        """Number of non-mirrored frequency bins."""
        return self.window_length // 2 + 1

    def n_frames(self, n_samples: int) -> int:
        """Return the number of frames :func:`stft` produces for ``n_samples``."""
        sft = _short_time_fft(self._samples, self.step_length)
        return sft.p_max(n_samples) - sft.p_min


def build_plan(sample_rate: int, window_sec: float = 0.04) -> STFTPlan:
    """Build an :class:`STFTPlan` from a sample rate and a window duration."""
    return STFTPlan.from_sample_rate(sample_rate, window_sec)


def _short_time_fft(
    window: np.ndarray, step: int, sample_rate: float = 1.0
) -> ShortTimeFFT:
    window = np.asarray(window, dtype=np.float64)
    gain = np.sum(window[::step])
    return ShortTimeFFT(
        window,
        hop=int(step),
        fs=sample_rate,
        fft_mode="twosided",
        dual_win=np.full(window.shape[0], 1.0 / gain),
        phase_shift=None,
    )


def build_stft(plan: STFTPlan, sample_rate: int) -> ShortTimeFFT:
    """Build the :class:`scipy.signal.ShortTimeFFT` used by :func:`stft`/:func:`istft`.

    The transform is two-sided without phase shift, so every column is the
    plain FFT of one windowed frame. The dual window is the constant
    ``1 / sum(window[::step])``, which inverts overlap-add for
    constant-overlap-add windows.
    """
    return _short_time_fft(plan.window_samples, plan.step_length, sample_rate)


def stft(signal: np.ndarray, window: np.ndarray, step: int) -> np.ndarray:
    """Compute the full complex STFT ``(window_length, n_frames)`` of a 1-D signal.

    Frame ``p`` is centred on sample ``p * step``. Frames run from the first
    to the last one that overlaps the signal, so every sample is covered by
    the same number of windows. With 50% overlap this is a head padding of
    ``window_length - step`` zeros.
    """
    signal = np.asarray(signal, dtype=np.float64)
    if signal.ndim != 1:
        raise ValueError(f"signal must be 1-D, got ndim={signal.ndim}")
    sft = _short_time_fft(window, step)
    return sft.stft(signal, p0=sft.p_min, p1=sft.p_max(signal.shape[0]))


def istft(
    spectrogram: np.ndarray,
    window: np.ndarray,
    step: int,
    n_samples: int | None = None,
) -> np.ndarray:
    """Invert :func:`stft` by dual-window overlap-add.

    Returns ``n_samples`` samples, or every sample the frames cover when
    ``n_samples`` is ``None``. Reconstruction is exact when the window/step
    pair satisfies constant overlap-add.
    """
    window = np.asarray(window, dtype=np.float64)
    if spectrogram.shape[0] != window.shape[0]:
        raise ValueError(
            "spectrogram rows must match the window length: "
            f"got {spectrogram.shape[0]}, expected {window.shape[0]}"
        )
    sft = _short_time_fft(window, step)
    return np.real(sft.istft(spectrogram, k1=n_samples))


def magnitude(spectrogram: np.ndarray) -> np.ndarray:
    """Return the magnitude of the non-mirrored bins ``0..window_length/2``."""
    window_length = spectrogram.shape[0]
    return np.abs(spectrogram[: window_length // 2 + 1])


def cutoff_bin(plan: STFTPlan, sample_rate: int, cutoff_hz: float) -> int:
    """Return the highest bin index attributed to the background by the high-pass."""
    return int(math.ceil(cutoff_hz * (plan.window_length - 1) / sample_rate))
