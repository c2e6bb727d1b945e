"""Original REPET: one global repeating period per signal."""

from __future__ import annotations

from abc import abstractmethod
import logging
from typing import Any

import numpy as np

from repetkit.analysis.periodicity import beat_spectrum, period_range_frames, pick_period
from repetkit.configs import RepetConfig
from repetkit.signal.stft import STFTPlan, cutoff_bin

from .core import (
    BaseBatchSeparator,
    BatchRequest,
    MaskRequest,
    MaskStrategy,
    SeparationOutput,
)
from .strategies import FixedPeriodMaskStrategy, apply_highpass, mirror_mask
from .utils import analyze_channels, map_channels, mean_spectrogram, synthesize_channel

LOGGER = logging.getLogger(__name__)


class MaskingSeparator(BaseBatchSeparator):
    """Shared analysis/synthesis flow of the batch REPET variants.

    Procedure
    ---------
    ```text

       input: signal x (n_samples, n_channels), sample rate fs
       X_c <- STFT of every channel c
       V_c <- |X_c| on bins 0..N/2
       estimate repetition structure from mean_c V_c
       for each channel c:
           M_c <- repeating mask of V_c
           M_c[1..cutoff] <- 1
           y_c <- ISTFT(mirror(M_c) * X_c)[:n_samples]
    ```
    """

    def __init__(
        self,
        config: RepetConfig | None = None,
        *,
        mask_strategy: MaskStrategy | None = None,
    ) -> None:
        super().__init__(config)
        self.mask_strategy = (
            mask_strategy if mask_strategy is not None else self.default_strategy()
        )

    @abstractmethod
    def default_strategy(self) -> MaskStrategy:
        """Return the mask strategy used when none is injected."""

    @abstractmethod
    def estimate(
        self,
        spectrogram: np.ndarray,
        plan: STFTPlan,
        sample_rate: int,
        request: BatchRequest,
    ) -> tuple[dict[str, Any], dict[str, Any]]:
        """Estimate repetition structure from the channel-averaged magnitudes.

        Returns ``(mask_fields, metadata)``; ``mask_fields`` are forwarded to
        :class:`MaskRequest`.
        """

    def separate_channels(
        self, audio: np.ndarray, sample_rate: int, request: BatchRequest
    ) -> SeparationOutput:
        n_samples, n_channels = audio.shape
        plan = STFTPlan.from_sample_rate(sample_rate, self.config.window_sec)
        spectra, magnitudes = analyze_channels(audio, plan, self.config.workers)
        request.report("stft", 1.0)

        mask_fields, metadata = self.estimate(
            mean_spectrogram(magnitudes), plan, sample_rate, request
        )
        request.report("estimate", 1.0)
        cutoff = cutoff_bin(plan, sample_rate, self.config.cutoff_hz)

        def _channel(channel_index: int) -> tuple[np.ndarray, np.ndarray]:
            mask = self.mask_strategy.build(
                MaskRequest(spectrogram=magnitudes[channel_index], **mask_fields)
            )
            mask = apply_highpass(mask, cutoff)
            background = synthesize_channel(
                spectra[channel_index], mirror_mask(mask), plan, n_samples
            )
            request.report("mask", (channel_index + 1) / n_channels)
            return background, mask

        results = map_channels(_channel, list(range(n_channels)), self.config.workers)
        background = np.stack([item[0] for item in results], axis=1)
        metadata.update(
            window_length=plan.window_length,
            step_length=plan.step_length,
            n_frames=int(magnitudes[0].shape[1]),
            cutoff_bin=cutoff,
        )
        LOGGER.debug("%s separated %d channel(s): %s", self.mode, n_channels, metadata)
        return SeparationOutput(
            estimate_time=background,
            mask=np.stack([item[1] for item in results]) if request.return_mask else None,
            metadata=metadata,
        )


class Repet(MaskingSeparator):
    """REPET with one global repeating period.

    The period is the beat spectrum peak of the channel-averaged power
    spectrogram within the configured period range; the repeating segment is
    the median of all period-length segments.

    Examples
    --------
    ```python

       import numpy as np
       from repetkit import Repet

       fs = 16000
       loop = np.random.default_rng(0).standard_normal(fs)
       mixture = np.tile(loop, 6)[:, None]
       out = Repet()(mixture, fs)
       background = out.estimate_time          # (n_samples, 1)
       foreground = mixture - background
    ```
    """

    mode = "original"

    def default_strategy(self) -> MaskStrategy:
        return FixedPeriodMaskStrategy()

    def estimate(
        self,
        spectrogram: np.ndarray,
        plan: STFTPlan,
        sample_rate: int,
        request: BatchRequest,
    ) -> tuple[dict[str, Any], dict[str, Any]]:
        beat = beat_spectrum(spectrogram**2)
        period_range = period_range_frames(
            self.config.period_range_sec, sample_rate, plan.step_length
        )
        period = pick_period(beat, period_range)
        LOGGER.info(
            "Repeating period: %d frames (%.3f s)",
            period,
            period * plan.step_length / sample_rate,
        )
        return {"period": period}, {"period": period, "period_range": period_range}
