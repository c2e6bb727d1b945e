"""Configuration schema and YAML helpers for repetkit."""

from __future__ import annotations

from dataclasses import asdict, dataclass
import importlib
from pathlib import Path
from typing import Any, Iterable, Mapping

import yaml

try:
    OmegaConf = importlib.import_module("omegaconf").OmegaConf
except ModuleNotFoundError as exc:
    raise RuntimeError(
        "repetkit requires 'omegaconf'. Install it with `pip install omegaconf`."
    ) from exc


@dataclass(frozen=True)
class RepetConfig:
    """Immutable options shared by every separation mode.

    Parameters
    ----------
    window_sec:
        Analysis window duration; rounded up to a power-of-two length.
    cutoff_hz:
        Frequency below which all energy is attributed to the background.
    period_min_sec, period_max_sec:
        Admissible repeating-period range.
    segment_sec, segment_step_sec:
        Segment length and hop. Extended mode uses them in samples and adaptive
        mode uses them in frames for its beat spectrogram.
    filter_order:
        Number of period-spaced frames in the adaptive median filter.
    similarity_threshold, similarity_distance_sec, similarity_number:
        Local-maxima selection for the similarity modes.
    buffer_sec:
        Causal history kept by the online similarity mode.
    workers:
        Thread count for per-channel fan-out (``1`` runs sequentially).
    """

    window_sec: float = 0.04
    cutoff_hz: float = 100.0
    period_min_sec: float = 1.0
    period_max_sec: float = 10.0
    segment_sec: float = 10.0
    segment_step_sec: float = 5.0
    filter_order: int = 5
    similarity_threshold: float = 0.0
    similarity_distance_sec: float = 1.0
    similarity_number: int = 100
    buffer_sec: float = 10.0
    workers: int = 1

    def __post_init__(self) -> None:
        for name in ("window_sec", "segment_sec", "segment_step_sec", "buffer_sec"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.cutoff_hz < 0:
            raise ValueError(f"cutoff_hz must be non-negative, got {self.cutoff_hz}")
        if not 0 < self.period_min_sec <= self.period_max_sec:
            raise ValueError(
                "period range must satisfy 0 < period_min_sec <= period_max_sec, "
                f"got [{self.period_min_sec}, {self.period_max_sec}]"
            )
        if self.segment_step_sec > self.segment_sec:
            raise ValueError(
                "segment_step_sec must not exceed segment_sec, "
                f"got {self.segment_step_sec} > {self.segment_sec}"
            )
        if self.similarity_distance_sec < 0:
            raise ValueError(
                "similarity_distance_sec must be non-negative, "
                f"got {self.similarity_distance_sec}"
            )
        for name in ("filter_order", "similarity_number", "workers"):
            if int(getattr(self, name)) < 1:
                raise ValueError(f"{name} must be >= 1, got {getattr(self, name)}")

    @property
    def period_range_sec(self) -> tuple[float, float]:
        return (self.period_min_sec, self.period_max_sec)


def _as_str_key_dict(value: Any, *, context: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise TypeError(f"Expected mapping in {context}, got {type(value)!r}")
    return {str(key): item for key, item in value.items()}


def parse_config(data: Mapping[str, object] | None = None) -> RepetConfig:
    """Decode a mapping into :class:`RepetConfig`, rejecting unknown keys."""
    base = OmegaConf.create(asdict(RepetConfig()))
    OmegaConf.set_struct(base, True)
    merged = OmegaConf.merge(base, OmegaConf.create(dict(data or {})))
    decoded = _as_str_key_dict(
        OmegaConf.to_container(merged, resolve=True), context="RepetConfig"
    )
    return RepetConfig(**decoded)


def load_yaml(
    path: str | Path,
    *,
    overrides: Iterable[str] | None = None,
) -> dict[str, Any]:
    """Load a YAML file into a dictionary, with optional dotlist overrides."""
    override_list = [item for item in (overrides or []) if item]
    cfg = OmegaConf.load(Path(path))
    if override_list:
        cfg = OmegaConf.merge(cfg, OmegaConf.from_dotlist(override_list))
    loaded = OmegaConf.to_container(cfg, resolve=True)
    return _as_str_key_dict(loaded, context=str(path))


def merge_overrides(
    data: dict[str, Any],
    overrides: Iterable[str] | None = None,
) -> dict[str, Any]:
    """Merge ``key=value`` dotlist overrides into an existing mapping."""
    override_list = [item for item in (overrides or []) if item]
    if not override_list:
        return dict(data)
    merged = OmegaConf.merge(
        OmegaConf.create(data), OmegaConf.from_dotlist(override_list)
    )
    container = OmegaConf.to_container(merged, resolve=True)
    return _as_str_key_dict(container, context="merged overrides")


def load_config(
    path: str | Path | None = None,
    *,
    overrides: Iterable[str] | None = None,
) -> RepetConfig:
    """Build :class:`RepetConfig` from an optional YAML file and dotlist overrides."""
    data = {} if path is None else load_yaml(path)
    return parse_config(merge_overrides(data, overrides))


def config_to_dict(config: RepetConfig) -> dict[str, Any]:
    """Convert :class:`RepetConfig` to a plain dictionary."""
    return asdict(config)


def save_yaml(path: str | Path, data: dict[str, Any]) -> None:
    """Write dictionary data to a YAML file."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(data, handle, sort_keys=False)
