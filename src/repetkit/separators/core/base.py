"""Base classes for unified separator execution."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import numpy as np

from repetkit.configs import RepetConfig
from repetkit.separators.utils import as_channels, validate_sample_rate

from .io_models import BatchRequest, SeparationOutput, StreamingSeparatorState


class BaseSeparator(ABC):
    """Common top-level contract for all separators."""

    mode: str = ""

    def __init__(self, config: RepetConfig | None = None) -> None:
        self.config = config if config is not None else RepetConfig()

    def reset(self) -> None:
        """Reset internal state (override in subclasses when needed)."""

    def __call__(self, *args: Any, **kwargs: Any) -> SeparationOutput:
        """Alias for :meth:`forward` to provide a torch-like call style."""
        return self.forward(*args, **kwargs)

    def forward(self, *args: Any, **kwargs: Any) -> SeparationOutput:
        """Execute separation and return a typed output object."""
        raise NotImplementedError(
            f"{self.__class__.__name__} does not implement forward()."
        )


class BaseBatchSeparator(BaseSeparator):
    """Base class for separators that see the whole signal at once.

    Subclasses implement :meth:`separate_channels` on a validated
    ``(n_samples, n_channels)`` array; this class handles validation and
    restores the caller's input shape.
    """

    @abstractmethod
    def separate_channels(
        self, audio: np.ndarray, sample_rate: int, request: BatchRequest
    ) -> SeparationOutput:
        """Return the background of a ``(n_samples, n_channels)`` signal."""

    def forward(
        self,
        audio: np.ndarray,
        sample_rate: int | None = None,
        *,
        request: BatchRequest | None = None,
    ) -> SeparationOutput:
        """Separate ``audio`` and return a background with the input's shape."""
        request_obj = request if request is not None else BatchRequest()
        rate = sample_rate if sample_rate is not None else request_obj.sample_rate
        rate = validate_sample_rate(rate)
        channels, squeeze = as_channels(audio)

        output = self.separate_channels(channels, rate, request_obj)
        if squeeze and output.estimate_time is not None:
            output.estimate_time = output.estimate_time[:, 0]
        output.metadata.setdefault("mode", self.mode)
        return output


class BaseStreamingSeparator(BaseSeparator):
    """Base class for frame-wise streaming separators."""

    @abstractmethod
    def process_frame(self, frame: np.ndarray) -> np.ndarray:
        """Process a single frame."""

    def get_state(self) -> StreamingSeparatorState:
        """Return current separator state snapshot."""
        return StreamingSeparatorState()

    def set_state(self, state: StreamingSeparatorState) -> None:
        """Restore separator state from a snapshot."""
        del state

    def forward_streaming(
        self,
        frame: np.ndarray,
        *,
        state: StreamingSeparatorState | None = None,
    ) -> tuple[np.ndarray, StreamingSeparatorState]:
        """Process one frame and return ``(background_frame, updated_state)``."""
        if state is not None:
            self.set_state(state)
        output = self.process_frame(frame)
        return output, self.get_state()
