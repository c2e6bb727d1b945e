import numpy as np

from repetkit import MODES, default_separator_registry, separate


def test_modes_match_default_registry() -> None:
    assert sorted(MODES) == default_separator_registry().available()


def test_separate_returns_background_with_input_shape() -> None:
    rng = np.random.default_rng(0)
    audio = rng.standard_normal((4000, 2))
    background = separate(audio, 8000)
    assert background.shape == audio.shape
    assert background.dtype == np.float64
