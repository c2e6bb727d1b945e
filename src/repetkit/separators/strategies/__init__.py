"""Concrete strategy implementations for separator components."""

from .masks import (
    EPS,
    AdaptivePeriodMaskStrategy,
    FixedPeriodMaskStrategy,
    SimilarityMaskStrategy,
    apply_highpass,
    mirror_mask,
    repeating_mask,
)

__all__ = [
    "EPS",
    "FixedPeriodMaskStrategy",
    "AdaptivePeriodMaskStrategy",
    "SimilarityMaskStrategy",
    "repeating_mask",
    "apply_highpass",
    "mirror_mask",
]
