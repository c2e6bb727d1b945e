"""Cosine self-similarity and local-maxima neighbor selection."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable, Sequence

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

LOGGER = logging.getLogger(__name__)


def normalize_columns(data: np.ndarray) -> np.ndarray:
    """L2-normalize every column; all-zero columns are left at zero."""
    data = np.asarray(data, dtype=np.float64)
    norms = np.sqrt(np.sum(data**2, axis=0, keepdims=True))
    return data / np.where(norms > 0.0, norms, 1.0)


def self_similarity(spectrogram: np.ndarray) -> np.ndarray:
    """Return the ``(n_frames, n_frames)`` cosine similarity between all frames."""
    normalized = normalize_columns(spectrogram)
    return normalized.T @ normalized


def cross_similarity(matrix: np.ndarray, query: np.ndarray) -> np.ndarray:
    """Return the cosine similarity between the columns of ``matrix`` and ``query``.

    ``query`` may be a single spectrum ``(n_freq,)``, in which case a vector of
    length ``n_columns`` is returned.
    """
    query = np.asarray(query, dtype=np.float64)
    if query.ndim == 1:
        return normalize_columns(matrix).T @ normalize_columns(query[:, None])[:, 0]
    return normalize_columns(matrix).T @ normalize_columns(query)


def local_maxima(
    vector: np.ndarray,
    min_value: float,
    min_distance: int,
    max_count: int,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Pick thresholded, distance-separated local maxima.

    An index qualifies if its value is ``>= min_value`` and strictly greater
    than every other value within ``±min_distance`` (clamped at the bounds).

    Parameters
    ----------
    vector : ndarray (n,)
        Values to search.
    min_value : float
        Minimum admissible value.
    min_distance : int
        Neighborhood half-width in samples.
    max_count : int
        Maximum number of maxima to return.

    Returns
    -------
    values : ndarray
        Maxima values sorted in descending order.
    indices : ndarray of int
        Indices of the maxima, in the same order as ``values``.
    """
    vector = np.asarray(vector, dtype=np.float64)
    if vector.ndim != 1:
        raise ValueError(f"vector must be 1-D, got ndim={vector.ndim}")
    distance = max(int(min_distance), 0)

    padded = np.pad(vector, distance, constant_values=-np.inf)
    windows = sliding_window_view(padded, 2 * distance + 1)
    neighbor_max = np.maximum(
        windows[:, :distance].max(axis=1, initial=-np.inf),
        windows[:, distance + 1 :].max(axis=1, initial=-np.inf),
    )
    candidates = np.flatnonzero((vector >= min_value) & (vector > neighbor_max))

    order = np.argsort(-vector[candidates], kind="stable")[: max(int(max_count), 0)]
    indices = candidates[order]
    return vector[indices], indices


@dataclass(frozen=True)
class SimilarityIndexSet:
    """Per-frame neighbor lists stored as one flat index arena.

    Attributes
    ----------
    indices:
        Concatenated neighbor indices of every frame.
    offsets:
        Start of each frame's neighbors in ``indices``.
    counts:
        Number of neighbors of each frame.
    """

    indices: np.ndarray
    offsets: np.ndarray
    counts: np.ndarray

    @classmethod
    def from_lists(cls, neighbors: Sequence[np.ndarray]) -> "SimilarityIndexSet":
        counts = np.array([len(item) for item in neighbors], dtype=np.int64)
        offsets = np.zeros_like(counts)
        if counts.size > 1:
            offsets[1:] = np.cumsum(counts)[:-1]
        if neighbors:
            indices = np.concatenate(
                [np.asarray(item, dtype=np.int64) for item in neighbors]
            )
        else:
            indices = np.zeros(0, dtype=np.int64)
        return cls(indices=indices, offsets=offsets, counts=counts)

    def __len__(self) -> int:
        return int(self.counts.shape[0])

    def __getitem__(self, frame_index: int) -> np.ndarray:
        start = int(self.offsets[frame_index])
        return self.indices[start : start + int(self.counts[frame_index])]


def similarity_indices(
    similarity_matrix: np.ndarray,
    threshold: float,
    distance: int,
    number: int,
    *,
    progress: Callable[[str, float], None] | None = None,
) -> SimilarityIndexSet:
    """
    Select the most similar frames of every frame.

    Column ``t`` of ``similarity_matrix`` is searched with
    :func:`local_maxima`. When no index qualifies, the frame itself is used
    so that every frame has a well-defined repeating estimate.
    """
    n_frames = similarity_matrix.shape[1]
    neighbors: list[np.ndarray] = []
    n_fallback = 0
    for frame_index in range(n_frames):
        _, maxima = local_maxima(
            similarity_matrix[:, frame_index], threshold, distance, number
        )
        if maxima.size == 0:
            maxima = np.array([frame_index], dtype=np.int64)
            n_fallback += 1
        neighbors.append(maxima)
        if progress is not None and (frame_index + 1) % 256 == 0:
            progress("similarity_indices", (frame_index + 1) / n_frames)
    if n_fallback:
        LOGGER.debug("%d/%d frames fell back to themselves", n_fallback, n_frames)
    return SimilarityIndexSet.from_lists(neighbors)
