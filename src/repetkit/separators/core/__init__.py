"""Core abstractions for reusable separator design.

This package provides shared building blocks used by both batch and online
REPET separators:

- Typed input/output containers.
- Base separator classes.
- Mask strategy interface.
- Lightweight mode registry.
"""

from .base import BaseBatchSeparator, BaseSeparator, BaseStreamingSeparator
from .io_models import (
    BatchRequest,
    ProgressCallback,
    SeparationOutput,
    StreamingSeparatorState,
)
from .registry import RegistryError, SeparatorFactory, SeparatorRegistry
from .strategies import MaskStrategy
from .strategy_models import MaskRequest

__all__ = [
    "BaseSeparator",
    "BaseBatchSeparator",
    "BaseStreamingSeparator",
    "BatchRequest",
    "ProgressCallback",
    "SeparationOutput",
    "StreamingSeparatorState",
    "SeparatorRegistry",
    "SeparatorFactory",
    "RegistryError",
    "MaskRequest",
    "MaskStrategy",
]
