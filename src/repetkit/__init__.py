"""repetkit public API."""

from .configs import RepetConfig, load_config, load_yaml, parse_config, save_yaml
from .logging_utils import JsonlLogger, ProgressRecorder, log_steps_jsonl
from .pipeline import MODES, run_separation, separate
from .separators import (
    AdaptiveRepet,
    BatchRequest,
    OnlineRepetSim,
    Repet,
    RepetExtended,
    RepetSim,
    SeparationOutput,
    SeparatorRegistry,
    StreamingSeparatorState,
    default_separator_registry,
)
from .signal import STFTPlan, istft, stft

__all__ = [
    "Repet",
    "RepetExtended",
    "AdaptiveRepet",
    "RepetSim",
    "OnlineRepetSim",
    "BatchRequest",
    "SeparationOutput",
    "StreamingSeparatorState",
    "SeparatorRegistry",
    "default_separator_registry",
    "MODES",
    "separate",
    "run_separation",
    "RepetConfig",
    "parse_config",
    "load_config",
    "load_yaml",
    "save_yaml",
    "STFTPlan",
    "stft",
    "istft",
    "JsonlLogger",
    "ProgressRecorder",
    "log_steps_jsonl",
]
