from __future__ import annotations

import numpy as np

from repetkit.analysis import (
    SimilarityIndexSet,
    cross_similarity,
    local_maxima,
    self_similarity,
    similarity_indices,
)


def test_self_similarity_is_symmetric_cosine() -> None:
    rng = np.random.default_rng(0)
    spectrogram = rng.random((20, 12))
    similarity = self_similarity(spectrogram)

    assert similarity.shape == (12, 12)
    np.testing.assert_allclose(np.diag(similarity), 1.0)
    np.testing.assert_allclose(similarity, similarity.T)
    assert np.all(similarity <= 1.0 + 1e-12)


def test_self_similarity_zero_frame_has_zero_similarity() -> None:
    spectrogram = np.ones((4, 3))
    spectrogram[:, 1] = 0.0
    similarity = self_similarity(spectrogram)

    assert np.all(np.isfinite(similarity))
    np.testing.assert_array_equal(similarity[1], 0.0)
    np.testing.assert_array_equal(similarity[:, 1], 0.0)


def test_cross_similarity_matches_self_similarity_column() -> None:
    rng = np.random.default_rng(1)
    spectrogram = rng.random((10, 6))
    np.testing.assert_allclose(
        cross_similarity(spectrogram, spectrogram[:, 2]),
        self_similarity(spectrogram)[:, 2],
    )


def test_local_maxima_sorted_descending() -> None:
    vector = np.array([0.0, 3.0, 1.0, 5.0, 2.0, 5.5, 0.0])

    values, indices = local_maxima(vector, 0.0, 1, 10)
    np.testing.assert_array_equal(indices, [5, 3, 1])
    np.testing.assert_array_equal(values, [5.5, 5.0, 3.0])

    _, indices = local_maxima(vector, 0.0, 2, 10)
    np.testing.assert_array_equal(indices, [5])

    _, indices = local_maxima(vector, 5.2, 1, 10)
    np.testing.assert_array_equal(indices, [5])

    _, indices = local_maxima(vector, 0.0, 1, 2)
    np.testing.assert_array_equal(indices, [5, 3])


def test_local_maxima_requires_strict_peak() -> None:
    values, indices = local_maxima(np.array([1.0, 2.0, 2.0, 1.0]), 0.0, 1, 10)
    assert values.size == 0
    assert indices.size == 0


def test_local_maxima_includes_bounds() -> None:
    _, indices = local_maxima(np.array([4.0, 1.0, 0.5, 2.0]), 0.0, 1, 10)
    np.testing.assert_array_equal(indices, [0, 3])


def test_local_maxima_zero_distance_keeps_all_above_threshold() -> None:
    _, indices = local_maxima(np.array([0.1, 0.9, 0.5]), 0.4, 0, 10)
    np.testing.assert_array_equal(indices, [1, 2])


def test_similarity_index_set_flat_storage() -> None:
    neighbors = SimilarityIndexSet.from_lists(
        [np.array([0, 2]), np.array([1]), np.array([3, 0, 1])]
    )
    assert len(neighbors) == 3
    np.testing.assert_array_equal(neighbors.offsets, [0, 2, 3])
    np.testing.assert_array_equal(neighbors.counts, [2, 1, 3])
    np.testing.assert_array_equal(neighbors[2], [3, 0, 1])


def test_similarity_indices_fall_back_to_own_frame() -> None:
    neighbors = similarity_indices(np.zeros((5, 5)), 0.5, 1, 10)
    assert len(neighbors) == 5
    for frame_index in range(5):
        np.testing.assert_array_equal(neighbors[frame_index], [frame_index])


def test_similarity_indices_find_repetitions() -> None:
    rng = np.random.default_rng(2)
    pattern = rng.random((32, 8))
    spectrogram = np.tile(pattern, (1, 4))
    neighbors = similarity_indices(self_similarity(spectrogram), 0.99, 2, 100)

    # column 3 repeats at 3, 11, 19, 27
    assert set(neighbors[3].tolist()) == {3, 11, 19, 27}
