from __future__ import annotations

import numpy as np
import pytest

from repetkit import BatchRequest, Repet, RepetConfig, RepetExtended
from repetkit.separators import (
    Segment,
    crossfade_window,
    overlap_add_segments,
    plan_segments,
)


def test_short_signal_is_one_segment() -> None:
    assert plan_segments(59, 40, 20) == [Segment(0, 59)]


def test_segments_cover_signal_and_last_is_extended() -> None:
    segments = plan_segments(105, 40, 20)
    assert [(s.start, s.stop) for s in segments] == [
        (0, 40),
        (20, 60),
        (40, 80),
        (60, 105),
    ]
    assert segments[-1].length == 45


def test_plan_segments_rejects_step_longer_than_segment() -> None:
    with pytest.raises(ValueError, match="segment_step"):
        plan_segments(100, 10, 20)


@pytest.mark.parametrize("overlap", [1, 7, 20])
def test_crossfade_halves_sum_to_one(overlap: int) -> None:
    window = crossfade_window(overlap)
    assert window.shape == (2 * overlap,)
    np.testing.assert_allclose(window[:overlap] + window[overlap:], 1.0)


def test_overlap_add_of_constant_segments_is_constant() -> None:
    segments = plan_segments(105, 40, 20)
    outputs = [np.ones((segment.length, 2)) for segment in segments]
    blended = overlap_add_segments(outputs, segments, 105, 20)
    np.testing.assert_allclose(blended, 1.0)


def test_overlap_add_crossfades_between_segments() -> None:
    segments = [Segment(0, 8), Segment(4, 12)]
    outputs = [np.full((8, 1), 2.0), np.full((8, 1), 6.0)]
    blended = overlap_add_segments(outputs, segments, 12, 4)

    window = crossfade_window(4)
    np.testing.assert_allclose(blended[:4, 0], 2.0)
    np.testing.assert_allclose(blended[4:8, 0], 2.0 * window[4:] + 6.0 * window[:4])
    np.testing.assert_allclose(blended[8:, 0], 6.0)


def test_extended_short_signal_equals_original() -> None:
    rng = np.random.default_rng(0)
    audio = rng.standard_normal((3 * 8000, 2))
    extended = RepetExtended()(audio, 8000)
    original = Repet()(audio, 8000)
    np.testing.assert_allclose(extended.estimate_time, original.estimate_time)
    assert extended.metadata["segments"] == [(0, 3 * 8000)]


def test_extended_segments_long_signal() -> None:
    rng = np.random.default_rng(1)
    audio = rng.standard_normal(5 * 8000)
    config = RepetConfig(segment_sec=2.0, segment_step_sec=1.0)
    events: list[tuple[str, float]] = []
    request = BatchRequest(progress=lambda stage, fraction: events.append((stage, fraction)))
    output = RepetExtended(config)(audio, 8000, request=request)

    assert output.estimate_time.shape == audio.shape
    assert np.all(np.isfinite(output.estimate_time))
    assert output.metadata["periods"].shape == (4,)
    assert output.metadata["mode"] == "extended"
    assert [fraction for stage, fraction in events if stage == "segment"] == [
        0.25,
        0.5,
        0.75,
        1.0,
    ]
