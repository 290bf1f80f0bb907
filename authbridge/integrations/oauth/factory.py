"""Factory for creating built-in OAuth2 provider definitions from settings."""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from authbridge.core.config import Settings, settings
from authbridge.integrations.oauth.base import ProviderDefinition
from authbridge.integrations.oauth.exceptions import UnsupportedProviderError
from authbridge.integrations.oauth.providers.discord import discord
from authbridge.integrations.oauth.providers.github import github
from authbridge.integrations.oauth.providers.wechat import wechat

ProviderBuilder = Callable[..., ProviderDefinition]


class OAuth2ProviderFactory:
    """Factory for creating built-in provider definitions."""

    _providers: Dict[str, ProviderBuilder] = {
        "wechat": wechat,
        "github": github,
        "discord": discord,
    }

    @classmethod
    def create_provider(
        cls,
        provider_name: str,
        config: Optional[Settings] = None,
        **overrides: Any,
    ) -> ProviderDefinition:
        """Create a provider definition from settings plus integrator overrides."""
        config = config or settings
        if provider_name not in cls._providers:
            raise UnsupportedProviderError(f"Provider '{provider_name}' is not supported")

        if not overrides and not cls._is_provider_configured(provider_name, config):
            raise UnsupportedProviderError(
                f"Provider '{provider_name}' is not configured. "
                f"Please set the required environment variables."
            )

        options = cls._get_provider_options(provider_name, config)
        options.update(overrides)
        return cls._providers[provider_name](**options)

    @classmethod
    def _get_provider_options(cls, provider_name: str, config: Settings) -> Dict[str, Any]:
        """Get integrator options for a specific provider from settings."""
        if provider_name == "wechat":
            return {
                "client_id": config.wechat_client_id,
                "client_secret": config.wechat_client_secret,
                "redirect_uri": config.wechat_redirect_uri,
                "lang": config.wechat_lang,
            }
        elif provider_name == "github":
            return {
                "client_id": config.github_client_id,
                "client_secret": config.github_client_secret,
            }
        elif provider_name == "discord":
            return {
                "client_id": config.discord_client_id,
                "client_secret": config.discord_client_secret,
            }

        # Registered at runtime; options come from the caller.
        return {}

    @classmethod
    def register_provider(cls, provider_name: str, builder: ProviderBuilder) -> None:
        """Register a new provider builder."""
        cls._providers[provider_name] = builder

    @classmethod
    def _is_provider_configured(cls, provider_name: str, config: Optional[Settings] = None) -> bool:
        """Check if provider has required credentials configured."""
        config = config or settings
        if provider_name == "wechat":
            return bool(
                config.wechat_client_id
                and config.wechat_client_secret
                and config.wechat_redirect_uri
            )
        elif provider_name == "github":
            return bool(config.github_client_id and config.github_client_secret)
        elif provider_name == "discord":
            return bool(config.discord_client_id and config.discord_client_secret)

        return False

    @classmethod
    def get_supported_providers(cls, config: Optional[Settings] = None) -> list[str]:
        """Get list of supported provider names that are properly configured."""
        return [
            provider_name
            for provider_name in cls._providers.keys()
            if cls._is_provider_configured(provider_name, config)
        ]


__all__ = ["OAuth2ProviderFactory", "ProviderBuilder"]
