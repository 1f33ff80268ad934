from __future__ import annotations

from typing import Mapping

from careerpilot.ai.config import ProviderConfig, load_provider_configs
from careerpilot.ai.errors import ConfigurationError
from careerpilot.core.config import Settings


class ProviderRegistry:
    def __init__(
        self,
        providers: Mapping[str, ProviderConfig],
        *,
        default: str,
        mode_overrides: Mapping[str, str] | None = None,
    ):
        self._providers = dict(providers)
        self._default = default.strip().lower()
        self._mode_overrides = {key.lower(): value.lower() for key, value in (mode_overrides or {}).items()}

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProviderRegistry":
        return cls(
            load_provider_configs(settings),
            default=settings.ai_provider,
            mode_overrides=settings.ai_mode_providers,
        )

    def names(self) -> list[str]:
        return sorted(self._providers)

    def get(self, name: str) -> ProviderConfig:
        key = name.strip().lower()
        config = self._providers.get(key)
        if config is None:
            raise ConfigurationError(f"Unsupported AI provider '{name}'", code="unknown_provider")
        if not config.available:
            raise ConfigurationError(f"AI provider '{key}' has no API key configured")
        return config

    def for_mode(self, mode: str) -> ProviderConfig:
        return self.get(self._mode_overrides.get(mode, self._default))

    def describe(self) -> list[dict[str, object]]:
        modes_by_provider: dict[str, list[str]] = {}
        for mode, name in sorted(self._mode_overrides.items()):
            modes_by_provider.setdefault(name, []).append(mode)
        return [
            {
                "name": name,
                "model": config.model,
                "available": config.available,
                "default": name == self._default,
                "modes": modes_by_provider.get(name, []),
            }
            for name, config in sorted(self._providers.items())
        ]
