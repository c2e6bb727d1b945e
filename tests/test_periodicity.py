from __future__ import annotations

import numpy as np
import pytest

from repetkit.analysis import (
    autocorrelation,
    beat_spectrogram,
    beat_spectrum,
    period_range_frames,
    pick_period,
    pick_periods,
)
from repetkit.signal import STFTPlan, magnitude, stft


def test_autocorrelation_matches_direct_unbiased_sum() -> None:
    rng = np.random.default_rng(0)
    data = rng.standard_normal((50, 3))
    acf = autocorrelation(data)

    n_points = data.shape[0]
    for lag in (0, 1, 7, 49):
        expected = np.sum(data[: n_points - lag] * data[lag:], axis=0) / (n_points - lag)
        np.testing.assert_allclose(acf[lag], expected, rtol=1e-10, atol=1e-12)


def test_beat_spectrum_recovers_tiled_pattern_period() -> None:
    rng = np.random.default_rng(1)
    period = 10
    pattern = rng.uniform(0.1, 1.1, size=(32, period))
    spectrogram = np.tile(pattern, (1, 5)) + 0.05 * rng.random((32, 5 * period))

    beat = beat_spectrum(spectrogram**2)
    assert beat.shape == (5 * period,)
    assert abs(pick_period(beat, (1, 100)) - period) <= 1


def test_click_train_period_in_frames() -> None:
    sample_rate = 16000
    audio = np.zeros((4 * sample_rate, 2))
    audio[::4000, 0] = 1.0
    audio[::4000, 1] = 0.5

    plan = STFTPlan.from_sample_rate(sample_rate)
    assert (plan.window_length, plan.step_length) == (1024, 512)
    magnitudes = [
        magnitude(stft(audio[:, idx], plan.window_samples, plan.step_length))
        for idx in range(2)
    ]
    mean = np.mean(np.stack(magnitudes), axis=0)

    # 4000 samples / 512 = 7.8 frames
    assert pick_period(beat_spectrum(mean**2), (2, 20)) == 8


def test_pick_period_never_returns_lag_zero() -> None:
    beat = np.zeros(30)
    beat[0] = 100.0
    beat[4] = 1.0
    assert pick_period(beat, (0, 100)) == 4


def test_pick_period_respects_third_of_signal_bound() -> None:
    beat = np.zeros(30)
    beat[5] = 1.0
    beat[15] = 2.0
    assert pick_period(beat, (1, 100)) == 5


def test_pick_period_falls_back_on_empty_range() -> None:
    assert pick_period(np.ones(30), (31, 312)) == 10
    assert pick_period(np.ones(2), (31, 312)) == 1


def test_pick_period_rejects_matrix() -> None:
    with pytest.raises(ValueError, match="1-D"):
        pick_period(np.ones((4, 4)), (1, 2))


def test_pick_periods_per_column() -> None:
    beat = np.zeros((30, 3))
    beat[3, 0] = 1.0
    beat[7, 1] = 1.0
    beat[9, 2] = 1.0
    periods = pick_periods(beat, (2, 100))
    assert periods.dtype == np.int64
    np.testing.assert_array_equal(periods, [3, 7, 9])


def test_beat_spectrogram_is_held_between_steps() -> None:
    rng = np.random.default_rng(2)
    spectrogram = rng.random((16, 40))
    beat = beat_spectrogram(spectrogram, segment_length=12, segment_step=4)

    assert beat.shape == (12, 40)
    for start in range(0, 40, 4):
        for offset in range(1, 4):
            np.testing.assert_array_equal(beat[:, start + offset], beat[:, start])


def test_beat_spectrogram_column_is_centered_beat_spectrum() -> None:
    rng = np.random.default_rng(3)
    spectrogram = rng.random((8, 30))
    beat = beat_spectrogram(spectrogram, segment_length=9, segment_step=1)
    # column t covers frames t-4..t+4
    np.testing.assert_allclose(beat[:, 10], beat_spectrum(spectrogram[:, 6:15]))


def test_beat_spectrogram_reports_progress() -> None:
    events: list[tuple[str, float]] = []
    beat_spectrogram(
        np.ones((4, 10)),
        segment_length=4,
        segment_step=5,
        progress=lambda stage, fraction: events.append((stage, fraction)),
    )
    assert events[-1] == ("beat_spectrogram", 1.0)


def test_period_range_frames() -> None:
    assert period_range_frames((1.0, 10.0), 16000, 512) == (31, 312)
