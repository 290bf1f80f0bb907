"""GitHub OAuth2 provider definition."""

from __future__ import annotations

from typing import Any, Dict, Mapping

from authbridge.integrations.oauth.base import ProviderDefinition
from authbridge.integrations.oauth.definition import resolve_provider_definition

GITHUB_AUTHORIZATION_URL = "https://github.com/login/oauth/authorize"
GITHUB_TOKEN_URL = "https://github.com/login/oauth/access_token"
GITHUB_USERINFO_URL = "https://api.github.com/user"


def map_profile(profile: Mapping[str, Any]) -> Dict[str, Any]:
    """Map a GitHub /user body, falling back to the login for the name."""
    return {
        "id": profile.get("id"),
        "name": profile.get("name") or profile.get("login"),
        "email": profile.get("email"),
        "image": profile.get("avatar_url"),
    }


def github(**options: Any) -> ProviderDefinition:
    """Build the GitHub provider; every step uses the default implementation."""
    defaults = {
        "id": "github",
        "name": "GitHub",
        "type": "oauth",
        "authorization": {
            "url": GITHUB_AUTHORIZATION_URL,
            "params": {"scope": "read:user user:email"},
        },
        "token": GITHUB_TOKEN_URL,
        "userinfo": GITHUB_USERINFO_URL,
        "profile": map_profile,
        "display": {
            "logo": "/github.svg",
            "bg": "#fff",
            "bg_dark": "#000",
            "text": "#000",
            "text_dark": "#fff",
        },
    }
    return resolve_provider_definition(options, defaults)


__all__ = ["GITHUB_AUTHORIZATION_URL", "GITHUB_TOKEN_URL", "GITHUB_USERINFO_URL", "github"]
