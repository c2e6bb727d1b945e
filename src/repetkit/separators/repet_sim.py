"""REPET-SIM: repetition from the self-similarity matrix."""

from __future__ import annotations

import logging
from typing import Any

import numpy as np

from repetkit.analysis.similarity import self_similarity, similarity_indices
from repetkit.signal.stft import STFTPlan

from .core import BatchRequest, MaskStrategy
from .repet import MaskingSeparator
from .strategies import SimilarityMaskStrategy

LOGGER = logging.getLogger(__name__)


def similarity_distance_frames(
    distance_sec: float, sample_rate: int, step_length: int
) -> int:
    """Convert the minimum neighbor distance from seconds to frames."""
    return int(round(distance_sec * sample_rate / step_length))


class RepetSim(MaskingSeparator):
    """REPET generalized to non-periodic repetitions.

    Every frame is compared to all frames by cosine similarity; the frames
    at thresholded, distance-separated similarity peaks are its repeating
    neighbors and their median spectrum is its repeating estimate.
    """

    mode = "similarity"

    def default_strategy(self) -> MaskStrategy:
        return SimilarityMaskStrategy()

    def estimate(
        self,
        spectrogram: np.ndarray,
        plan: STFTPlan,
        sample_rate: int,
        request: BatchRequest,
    ) -> tuple[dict[str, Any], dict[str, Any]]:
        similarity = self_similarity(spectrogram)
        distance = similarity_distance_frames(
            self.config.similarity_distance_sec, sample_rate, plan.step_length
        )
        neighbors = similarity_indices(
            similarity,
            self.config.similarity_threshold,
            distance,
            self.config.similarity_number,
            progress=request.progress,
        )
        LOGGER.info(
            "Similarity neighbors: %.1f per frame on average",
            float(np.mean(neighbors.counts)) if len(neighbors) else 0.0,
        )
        return {"neighbors": neighbors}, {
            "similarity_distance": distance,
            "neighbor_counts": neighbors.counts,
        }
