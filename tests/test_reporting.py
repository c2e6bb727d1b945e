from __future__ import annotations

import json
import logging
from pathlib import Path

import numpy as np
import pytest

from repetkit import ProgressRecorder, log_steps_jsonl, separate


def test_progress_recorder_writes_jsonl(tmp_path: Path) -> None:
    path = tmp_path / "logs" / "progress.jsonl"
    recorder = ProgressRecorder(path)
    rng = np.random.default_rng(0)
    separate(rng.standard_normal(8000), 8000, mode="original", progress=recorder)

    rows = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert [row["stage"] for row in rows] == ["stft", "estimate", "mask"]
    assert rows[-1]["fraction"] == 1.0
    assert all(row["elapsed_sec"] >= 0.0 for row in rows)


def test_progress_recorder_logs_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    recorder = ProgressRecorder()
    with caplog.at_level(logging.DEBUG, logger="repetkit.logging_utils"):
        recorder("frames", 0.5)
    assert "progress frames 50.0%" in caplog.text


def test_log_steps_jsonl_appends(tmp_path: Path) -> None:
    path = tmp_path / "steps.jsonl"
    log_steps_jsonl(path, [{"stage": "a"}, {"stage": "b"}])
    log_steps_jsonl(path, [{"stage": "c"}])
    lines = path.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["stage"] for line in lines] == ["a", "b", "c"]


def test_separation_logs_period(caplog: pytest.LogCaptureFixture) -> None:
    rng = np.random.default_rng(1)
    with caplog.at_level(logging.INFO, logger="repetkit"):
        separate(rng.standard_normal(8000), 8000, mode="original")
    assert "Repeating period" in caplog.text
