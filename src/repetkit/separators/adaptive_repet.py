"""Adaptive REPET with a time-varying repeating period."""

from __future__ import annotations

import logging
from typing import Any

import numpy as np

from repetkit.analysis.periodicity import (
    beat_spectrogram,
    period_range_frames,
    pick_periods,
)
from repetkit.signal.stft import STFTPlan

from .core import BatchRequest, MaskStrategy
from .repet import MaskingSeparator
from .strategies import AdaptivePeriodMaskStrategy

LOGGER = logging.getLogger(__name__)


class AdaptiveRepet(MaskingSeparator):
    """REPET with one repeating period per frame.

    A beat spectrogram is computed on windows of ``segment_sec`` every
    ``segment_step_sec`` (both converted to frames), a period is picked for
    every frame, and each frame is estimated by a median over
    ``filter_order`` period-spaced neighbors.
    """

    mode = "adaptive"

    def default_strategy(self) -> MaskStrategy:
        return AdaptivePeriodMaskStrategy(filter_order=self.config.filter_order)

    def estimate(
        self,
        spectrogram: np.ndarray,
        plan: STFTPlan,
        sample_rate: int,
        request: BatchRequest,
    ) -> tuple[dict[str, Any], dict[str, Any]]:
        segment_length = max(
            int(round(self.config.segment_sec * sample_rate / plan.step_length)), 1
        )
        segment_step = max(
            int(round(self.config.segment_step_sec * sample_rate / plan.step_length)),
            1,
        )
        beat = beat_spectrogram(
            spectrogram**2, segment_length, segment_step, progress=request.progress
        )
        period_range = period_range_frames(
            self.config.period_range_sec, sample_rate, plan.step_length
        )
        periods = pick_periods(beat, period_range)
        LOGGER.info(
            "Repeating periods: %d..%d frames over %d frames",
            int(periods.min()),
            int(periods.max()),
            periods.shape[0],
        )
        return {"periods": periods}, {
            "periods": periods,
            "period_range": period_range,
            "segment_frames": (segment_length, segment_step),
        }
