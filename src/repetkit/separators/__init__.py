"""Separator algorithms exposed by repetkit."""

from .adaptive_repet import AdaptiveRepet
from .buffer import SimilarityBuffer, buffer_length
from .core import (
    BaseBatchSeparator,
    BaseSeparator,
    BaseStreamingSeparator,
    BatchRequest,
    MaskRequest,
    MaskStrategy,
    ProgressCallback,
    RegistryError,
    SeparationOutput,
    SeparatorRegistry,
    StreamingSeparatorState,
)
from .online_repet_sim import OnlineRepetSim
from .repet import MaskingSeparator, Repet
from .repet_extended import RepetExtended
from .repet_sim import RepetSim
from .segmentation import Segment, crossfade_window, overlap_add_segments, plan_segments


def default_separator_registry() -> SeparatorRegistry:
    """Return a registry with the five REPET modes."""
    registry = SeparatorRegistry()
    registry.register("original", lambda config, sample_rate, n_channels: Repet(config))
    registry.register(
        "extended", lambda config, sample_rate, n_channels: RepetExtended(config)
    )
    registry.register(
        "adaptive", lambda config, sample_rate, n_channels: AdaptiveRepet(config)
    )
    registry.register(
        "similarity",
        lambda config, sample_rate, n_channels: RepetSim(config),
        aliases=("sim",),
    )
    registry.register(
        "online",
        lambda config, sample_rate, n_channels: OnlineRepetSim(
            sample_rate, n_channels, config
        ),
        aliases=("online_similarity", "simonline"),
    )
    return registry


__all__ = [
    "Repet",
    "RepetExtended",
    "AdaptiveRepet",
    "RepetSim",
    "OnlineRepetSim",
    "MaskingSeparator",
    "BaseSeparator",
    "BaseBatchSeparator",
    "BaseStreamingSeparator",
    "BatchRequest",
    "MaskRequest",
    "MaskStrategy",
    "ProgressCallback",
    "SeparationOutput",
    "StreamingSeparatorState",
    "SeparatorRegistry",
    "RegistryError",
    "default_separator_registry",
    "SimilarityBuffer",
    "buffer_length",
    "Segment",
    "plan_segments",
    "crossfade_window",
    "overlap_add_segments",
]
