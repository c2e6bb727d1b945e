"""Registry utilities for separation-mode factories."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from repetkit.configs import RepetConfig

from .base import BaseSeparator


class RegistryError(RuntimeError):
    """Raised for invalid registry operations."""


SeparatorFactory = Callable[[RepetConfig, int, int], BaseSeparator]
"""``factory(config, sample_rate, n_channels)`` returning a separator."""


@dataclass
class SeparatorRegistry:
    """Simple mode-name-to-factory mapping for separators."""

    _factories: dict[str, SeparatorFactory] = field(default_factory=dict)
    _aliases: dict[str, str] = field(default_factory=dict)

    def register(
        self,
        name: str,
        factory: SeparatorFactory,
        *,
        aliases: tuple[str, ...] = (),
        overwrite: bool = False,
    ) -> None:
        if not overwrite and (name in self._factories or name in self._aliases):
            raise RegistryError(f"Separator '{name}' is already registered.")
        self._factories[name] = factory
        for alias in aliases:
            self._aliases[alias] = name

    def resolve(self, name: str) -> str:
        """Return the canonical mode name for ``name`` or one of its aliases."""
        canonical = self._aliases.get(name, name)
        if canonical not in self._factories:
            available = ", ".join(self.available()) or "<none>"
            raise RegistryError(
                f"Unknown separator '{name}'. Available separators: {available}"
            )
        return canonical

    def create(
        self,
        name: str,
        config: RepetConfig | None = None,
        *,
        sample_rate: int,
        n_channels: int = 1,
    ) -> BaseSeparator:
        factory = self._factories[self.resolve(name)]
        return factory(
            config if config is not None else RepetConfig(),
            sample_rate,
            n_channels,
        )

    def available(self) -> list[str]:
        return sorted(self._factories)
