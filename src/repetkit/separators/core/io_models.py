"""Typed data models shared by separator implementations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

import numpy as np

ProgressCallback = Callable[[str, float], None]


@dataclass(slots=True)
class BatchRequest:
    """Execution options for batch separators.

    Parameters
    ----------
    sample_rate:
        Sampling rate in Hz of the time-domain input.
    progress:
        Optional ``(stage, fraction)`` callback invoked at component
        boundaries.
    return_mask:
        If ``True``, half-spectrum masks are attached to the output.
    metadata:
        Additional method-specific options.
    """

    sample_rate: int | None = None
    progress: ProgressCallback | None = None
    return_mask: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    def report(self, stage: str, fraction: float) -> None:
        if self.progress is not None:
            self.progress(stage, float(fraction))


@dataclass(slots=True)
class StreamingSeparatorState:
    """Runtime state of a streaming similarity session.

    Parameters
    ----------
    buffer:
        Magnitude spectra of the buffered frames ``(n_freq, capacity, n_chan)``.
    mean_spectra:
        Channel-mean magnitude spectra ``(n_freq, capacity)``.
    frame_index:
        Number of frames processed in this session.
    metadata:
        Additional algorithm-specific state values.
    """

    buffer: np.ndarray | None = None
    mean_spectra: np.ndarray | None = None
    frame_index: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class SeparationOutput:
    """Unified separation result container.

    Parameters
    ----------
    estimate_time:
        Background signal with the same shape as the input.
    mask:
        Optional half-spectrum repeating masks ``(n_chan, n_freq, n_frame)``.
    state:
        Optional streaming state snapshot.
    metadata:
        Free-form method metadata (periods, plan, frame counts).
    """

    estimate_time: np.ndarray | None = None
    mask: np.ndarray | None = None
    state: StreamingSeparatorState | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.estimate_time is None and self.mask is None:
            raise ValueError("SeparationOutput requires estimate_time or mask.")

    def foreground(self, mixture: np.ndarray) -> np.ndarray:
        """Return ``mixture - background`` for callers that need the foreground."""
        if self.estimate_time is None:
            raise ValueError("foreground requires a time-domain background estimate")
        return np.asarray(mixture, dtype=np.float64) - self.estimate_time
