"""Signal processing utilities."""

from .stft import STFTPlan, build_plan, build_stft, cutoff_bin, istft, magnitude, stft

__all__ = [
    "STFTPlan",
    "build_plan",
    "build_stft",
    "cutoff_bin",
    "istft",
    "magnitude",
    "stft",
]
