"""Single entry point that dispatches a sample buffer to a REPET mode."""

from __future__ import annotations

import logging

import numpy as np

from .configs import RepetConfig
from .separators import (
    BaseStreamingSeparator,
    BatchRequest,
    ProgressCallback,
    SeparationOutput,
    SeparatorRegistry,
    default_separator_registry,
)
from .separators.utils import as_channels, validate_sample_rate

LOGGER = logging.getLogger(__name__)

MODES = ("original", "extended", "adaptive", "similarity", "online")


def run_separation(
    audio: np.ndarray,
    sample_rate: int,
    *,
    mode: str = "original",
    config: RepetConfig | None = None,
    progress: ProgressCallback | None = None,
    registry: SeparatorRegistry | None = None,
    return_mask: bool = False,
) -> SeparationOutput:
    """Run one separation mode and return the full :class:`SeparationOutput`."""
    rate = validate_sample_rate(sample_rate)
    channels, _ = as_channels(audio)
    registry_obj = registry if registry is not None else default_separator_registry()
    separator = registry_obj.create(
        mode, config, sample_rate=rate, n_channels=channels.shape[1]
    )
    request = BatchRequest(sample_rate=rate, progress=progress, return_mask=return_mask)
    LOGGER.info(
        "Separating %d sample(s) x %d channel(s) at %d Hz with mode=%s",
        channels.shape[0],
        channels.shape[1],
        rate,
        registry_obj.resolve(mode),
    )
    if isinstance(separator, BaseStreamingSeparator):
        return separator.process_stream(audio, request=request)
    return separator(audio, rate, request=request)


def separate(
    audio: np.ndarray,
    sample_rate: int,
    *,
    mode: str = "original",
    config: RepetConfig | None = None,
    progress: ProgressCallback | None = None,
    registry: SeparatorRegistry | None = None,
) -> np.ndarray:
    """
    Return the repeating background of ``audio``.

    Parameters
    ----------
    audio : ndarray (n_samples,) or (n_samples, n_channels)
        Input samples.
    sample_rate : int
        Sampling rate in Hz.
    mode : str
        One of ``original``, ``extended``, ``adaptive``, ``similarity``, or
        ``online`` (aliases ``sim``, ``online_similarity``).
    config : RepetConfig, optional
        Separation options; defaults to :class:`RepetConfig`.
    progress : callable, optional
        ``(stage, fraction)`` callback.

    Returns
    -------
    ndarray
        Background signal with the same shape as ``audio``. The foreground
        is ``audio - background``.
    """
    output = run_separation(
        audio,
        sample_rate,
        mode=mode,
        config=config,
        progress=progress,
        registry=registry,
    )
    if output.estimate_time is None:
        raise ValueError(f"mode '{mode}' returned no time-domain estimate")
    return output.estimate_time
