from __future__ import annotations

import json
from pathlib import Path

import numpy as np
import pytest
import soundfile as sf
import yaml

from repetkit.cli import main


def test_cli_writes_background_and_foreground(tmp_path: Path) -> None:
    rng = np.random.default_rng(0)
    audio = 0.1 * rng.standard_normal((8000, 2))
    input_path = tmp_path / "mix.wav"
    sf.write(str(input_path), audio, 8000, subtype="FLOAT")

    out_dir = tmp_path / "out"
    progress_log = tmp_path / "progress.jsonl"
    main(
        [
            str(input_path),
            "--mode",
            "sim",
            "--output-dir",
            str(out_dir),
            "--progress-log",
            str(progress_log),
            "--set",
            "similarity_number=10",
        ]
    )

    background, rate = sf.read(str(out_dir / "background.wav"), always_2d=True)
    foreground, _ = sf.read(str(out_dir / "foreground.wav"), always_2d=True)
    assert rate == 8000
    assert background.shape == audio.shape
    np.testing.assert_allclose(background + foreground, audio, atol=1e-4)

    saved = yaml.safe_load((out_dir / "config.yaml").read_text(encoding="utf-8"))
    assert saved["mode"] == "similarity"
    assert saved["config"]["similarity_number"] == 10

    stages = [
        json.loads(line)["stage"]
        for line in progress_log.read_text(encoding="utf-8").splitlines()
    ]
    assert "stft" in stages


def test_cli_lists_modes(capsys: pytest.CaptureFixture[str]) -> None:
    main(["--list-modes"])
    listed = capsys.readouterr().out.split()
    assert listed == ["adaptive", "extended", "online", "original", "similarity"]


def test_cli_requires_input() -> None:
    with pytest.raises(SystemExit):
        main([])
