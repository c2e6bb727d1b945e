import numpy as np
import pytest

from repetkit import MODES, RepetConfig, Repet, separate


@pytest.mark.parametrize("mode", MODES)
def test_silence_gives_silent_background(mode: str) -> None:
    audio = np.zeros((12000, 2))
    background = separate(audio, 8000, mode=mode)

    assert background.shape == audio.shape
    assert np.all(np.isfinite(background))
    np.testing.assert_array_equal(background, 0.0)


@pytest.mark.parametrize("mode", MODES)
def test_signal_shorter_than_one_window(mode: str) -> None:
    rng = np.random.default_rng(0)
    audio = rng.standard_normal(100)
    background = separate(audio, 8000, mode=mode)

    assert background.shape == (100,)
    assert np.all(np.isfinite(background))


@pytest.mark.parametrize("mode", MODES)
def test_mono_and_single_column_agree(mode: str) -> None:
    rng = np.random.default_rng(1)
    audio = rng.standard_normal(8000)
    mono = separate(audio, 8000, mode=mode)
    column = separate(audio[:, None], 8000, mode=mode)

    assert mono.shape == (8000,)
    assert column.shape == (8000, 1)
    np.testing.assert_allclose(mono, column[:, 0])


@pytest.mark.parametrize(
    "sample_rate", [0, -8000, 8000.5, None, float("inf"), float("nan"), "fast"]
)
def test_invalid_sample_rate(sample_rate) -> None:
    with pytest.raises(ValueError, match="sample_rate"):
        Repet()(np.zeros(100), sample_rate)


def test_empty_audio_is_rejected() -> None:
    with pytest.raises(ValueError, match="at least one sample"):
        Repet()(np.zeros((0, 2)), 8000)


def test_three_dimensional_audio_is_rejected() -> None:
    with pytest.raises(ValueError, match="ndim=3"):
        Repet()(np.zeros((10, 2, 2)), 8000)


def test_non_finite_audio_is_rejected() -> None:
    audio = np.zeros(100)
    audio[3] = np.nan
    with pytest.raises(ValueError, match="NaN"):
        Repet()(audio, 8000)


def test_input_buffer_is_not_modified() -> None:
    rng = np.random.default_rng(2)
    audio = rng.standard_normal((4000, 2))
    original = audio.copy()
    separate(audio, 8000, mode="similarity")
    np.testing.assert_array_equal(audio, original)


def test_config_rejects_invalid_values() -> None:
    with pytest.raises(ValueError, match="period range"):
        RepetConfig(period_min_sec=5.0, period_max_sec=1.0)
    with pytest.raises(ValueError, match="filter_order"):
        RepetConfig(filter_order=0)
    with pytest.raises(ValueError, match="window_sec"):
        RepetConfig(window_sec=0.0)
