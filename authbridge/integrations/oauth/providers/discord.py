"""Discord OAuth2 provider definition."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from authbridge.integrations.oauth.base import ProviderDefinition
from authbridge.integrations.oauth.definition import resolve_provider_definition

DISCORD_AUTHORIZATION_URL = "https://discord.com/api/oauth2/authorize"
DISCORD_TOKEN_URL = "https://discord.com/api/oauth2/token"
DISCORD_USERINFO_URL = "https://discord.com/api/users/@me"
DISCORD_CDN_URL = "https://cdn.discordapp.com"


def avatar_url(profile: Mapping[str, Any]) -> Optional[str]:
    """Return the user's avatar, falling back to Discord's default avatars."""
    user_id = profile.get("id")
    avatar = profile.get("avatar")
    if avatar:
        extension = "gif" if avatar.startswith("a_") else "png"
        return f"{DISCORD_CDN_URL}/avatars/{user_id}/{avatar}.{extension}"

    discriminator = profile.get("discriminator")
    if discriminator and discriminator != "0":
        index = int(discriminator) % 5
    elif user_id:
        # Users migrated to unique usernames
        index = (int(user_id) >> 22) % 6
    else:
        return None
    return f"{DISCORD_CDN_URL}/embed/avatars/{index}.png"


def map_profile(profile: Mapping[str, Any]) -> Dict[str, Any]:
    """Map a Discord /users/@me body, preferring the display name."""
    return {
        "id": profile.get("id"),
        "name": profile.get("global_name") or profile.get("username"),
        "email": profile.get("email"),
        "image": avatar_url(profile),
    }


def discord(**options: Any) -> ProviderDefinition:
    """Build the Discord provider; every step uses the default implementation."""
    defaults = {
        "id": "discord",
        "name": "Discord",
        "type": "oauth",
        "authorization": {
            "url": DISCORD_AUTHORIZATION_URL,
            "params": {"scope": "identify email"},
        },
        "token": DISCORD_TOKEN_URL,
        "userinfo": DISCORD_USERINFO_URL,
        "profile": map_profile,
        "display": {
            "logo": "/discord.svg",
            "bg": "#fff",
            "bg_dark": "#5865F2",
            "text": "#5865F2",
            "text_dark": "#fff",
        },
    }
    return resolve_provider_definition(options, defaults)


__all__ = ["DISCORD_AUTHORIZATION_URL", "DISCORD_TOKEN_URL", "DISCORD_USERINFO_URL", "discord"]
