"""Registry of resolved provider definitions keyed by provider id."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Optional

from authbridge.core.config import Settings
from authbridge.integrations.oauth.base import ProviderDefinition
from authbridge.integrations.oauth.exceptions import ConfigurationError, UnsupportedProviderError
from authbridge.integrations.oauth.factory import OAuth2ProviderFactory, ProviderBuilder

logger = logging.getLogger("authbridge")

# Read-only view; builders registered on the factory at runtime appear here too.
BUILTIN_PROVIDERS: Mapping[str, ProviderBuilder] = MappingProxyType(OAuth2ProviderFactory._providers)


def get_supported_providers(config: Optional[Settings] = None) -> list[str]:
    """List the built-in provider ids whose credentials are configured."""
    return OAuth2ProviderFactory.get_supported_providers(config)


class ProviderRegistry:
    """Provider definitions available to the host engine.

    Ids are unique and a registered definition is never replaced.
    """

    def __init__(self, definitions: Iterable[ProviderDefinition] = ()) -> None:
        self._definitions: Dict[str, ProviderDefinition] = {}
        for definition in definitions:
            self.register(definition)

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "ProviderRegistry":
        """Register every built-in provider whose credentials are configured."""
        registry = cls()
        for provider_name in get_supported_providers(config):
            registry.register(OAuth2ProviderFactory.create_provider(provider_name, config))
        return registry

    def register(self, definition: ProviderDefinition) -> ProviderDefinition:
        """Add a definition; an id that is already registered is rejected."""
        if definition.id in self._definitions:
            raise ConfigurationError(f"Provider '{definition.id}' is already registered")
        self._definitions[definition.id] = definition
        logger.info("Registered OAuth provider '%s'", definition.id)
        return definition

    def get(self, provider_id: str) -> ProviderDefinition:
        """Return the definition registered under ``provider_id``."""
        try:
            return self._definitions[provider_id]
        except KeyError:
            raise UnsupportedProviderError(f"Provider '{provider_id}' is not registered") from None

    def provider_ids(self) -> list[str]:
        """Registered ids in registration order."""
        return list(self._definitions)

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._definitions

    def __iter__(self) -> Iterator[ProviderDefinition]:
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)


__all__ = ["BUILTIN_PROVIDERS", "ProviderRegistry", "get_supported_providers"]
