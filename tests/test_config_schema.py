from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from repetkit.configs import (
    RepetConfig,
    config_to_dict,
    load_config,
    load_yaml,
    parse_config,
    save_yaml,
)


def test_parse_config_applies_defaults() -> None:
    cfg = parse_config({"filter_order": 3, "cutoff_hz": 50})
    assert cfg.filter_order == 3
    assert cfg.cutoff_hz == 50
    assert cfg.window_sec == 0.04
    assert cfg.period_range_sec == (1.0, 10.0)
    assert parse_config() == RepetConfig()


def test_parse_config_rejects_unknown_key() -> None:
    with pytest.raises(Exception):
        parse_config({"unknown_field": 1})


def test_parse_config_validates_values() -> None:
    with pytest.raises(ValueError, match="segment_step_sec"):
        parse_config({"segment_sec": 2.0, "segment_step_sec": 3.0})


def test_config_is_immutable() -> None:
    cfg = RepetConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.buffer_sec = 1.0  # type: ignore[misc]


def test_load_config_merges_yaml_and_overrides(tmp_path: Path) -> None:
    path = tmp_path / "repet.yaml"
    path.write_text("buffer_sec: 4.0\nsimilarity_number: 20\n", encoding="utf-8")

    cfg = load_config(path, overrides=["similarity_number=5", "workers=2"])
    assert cfg.buffer_sec == 4.0
    assert cfg.similarity_number == 5
    assert cfg.workers == 2
    assert load_config() == RepetConfig()


def test_save_yaml_round_trip(tmp_path: Path) -> None:
    cfg = RepetConfig(cutoff_hz=80.0, filter_order=7)
    path = tmp_path / "out" / "config.yaml"
    save_yaml(path, config_to_dict(cfg))

    assert parse_config(load_yaml(path)) == cfg


def test_missing_omegaconf_names_pip_install(monkeypatch: pytest.MonkeyPatch) -> None:
    import importlib.util
    import sys

    import repetkit.configs

    monkeypatch.setitem(sys.modules, "omegaconf", None)
    spec = importlib.util.spec_from_file_location(
        "_repetkit_configs_without_omegaconf", repetkit.configs.__file__
    )
    module = importlib.util.module_from_spec(spec)
    with pytest.raises(RuntimeError, match="pip install omegaconf"):
        spec.loader.exec_module(module)
