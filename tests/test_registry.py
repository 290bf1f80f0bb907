"""Tests for the provider registry."""

from __future__ import annotations

import pytest

from authbridge.core.config import Settings
from authbridge.integrations.oauth.exceptions import ConfigurationError, UnsupportedProviderError
from authbridge.integrations.oauth.providers import discord, github, wechat
from authbridge.integrations.oauth.registry import (
    BUILTIN_PROVIDERS,
    ProviderRegistry,
    get_supported_providers,
)


class TestProviderRegistry:
    """Registration and lookup of provider definitions."""

    def test_register_and_get(self, acme):
        registry = ProviderRegistry()

        registry.register(acme)

        assert registry.get("acme") is acme
        assert "acme" in registry
        assert len(registry) == 1
        assert list(registry) == [acme]

    def test_duplicate_id_is_rejected(self, acme):
        registry = ProviderRegistry([acme])

        with pytest.raises(ConfigurationError) as exc_info:
            registry.register(acme)

        assert "already registered" in str(exc_info.value)
        assert registry.get("acme") is acme

    def test_unknown_provider_raises(self):
        registry = ProviderRegistry()

        with pytest.raises(UnsupportedProviderError):
            registry.get("wechat")

    def test_provider_ids_keep_registration_order(self, acme):
        registry = ProviderRegistry(
            [github(client_id="a", client_secret="b"), acme, discord(client_id="c", client_secret="d")]
        )

        assert registry.provider_ids() == ["github", "acme", "discord"]

    def test_from_settings_registers_configured_providers(self):
        config = Settings(
            GITHUB_CLIENT_ID="gh-client",
            GITHUB_CLIENT_SECRET="gh-secret",
            WECHAT_CLIENT_ID="wx-app-id",
            WECHAT_CLIENT_SECRET="wx-app-secret",
            WECHAT_REDIRECT_URI="https://example.com/cb",
            DISCORD_CLIENT_ID="",
            DISCORD_CLIENT_SECRET="",
        )

        registry = ProviderRegistry.from_settings(config)

        assert sorted(registry.provider_ids()) == ["github", "wechat"]
        assert registry.get("wechat").option("redirect_uri") == "https://example.com/cb"

    def test_from_settings_with_nothing_configured(self):
        config = Settings(
            GITHUB_CLIENT_ID="",
            GITHUB_CLIENT_SECRET="",
            WECHAT_CLIENT_ID="",
            WECHAT_CLIENT_SECRET="",
            WECHAT_REDIRECT_URI="",
            DISCORD_CLIENT_ID="",
            DISCORD_CLIENT_SECRET="",
        )

        assert len(ProviderRegistry.from_settings(config)) == 0


class TestBuiltinProviders:
    """Built-in provider builders and configuration lookup."""

    def test_builtin_providers_map_ids_to_builders(self):
        assert BUILTIN_PROVIDERS["wechat"] is wechat
        assert BUILTIN_PROVIDERS["github"] is github
        assert BUILTIN_PROVIDERS["discord"] is discord

    def test_builtin_providers_is_read_only(self):
        with pytest.raises(TypeError):
            BUILTIN_PROVIDERS["acme"] = github

    def test_get_supported_providers_lists_configured_ids(self):
        config = Settings(
            GITHUB_CLIENT_ID="",
            GITHUB_CLIENT_SECRET="",
            WECHAT_CLIENT_ID="wx-app-id",
            WECHAT_CLIENT_SECRET="wx-app-secret",
            WECHAT_REDIRECT_URI="",
            DISCORD_CLIENT_ID="dc-client",
            DISCORD_CLIENT_SECRET="dc-secret",
        )

        # WeChat also needs a redirect URI.
        assert get_supported_providers(config) == ["discord"]
