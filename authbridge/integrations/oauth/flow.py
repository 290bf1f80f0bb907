"""Sign-in flow chaining the provider steps for the host engine."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import httpx

from authbridge.integrations.oauth.base import AuthorizationContext
from authbridge.integrations.oauth.profile import normalize_profile
from authbridge.integrations.oauth.registry import ProviderRegistry
from authbridge.integrations.oauth.resolver import (
    create_http_client,
    run_authorization_step,
    run_token_step,
    run_userinfo_step,
)
from authbridge.schemas.identity import CanonicalIdentity

logger = logging.getLogger("authbridge")


@dataclass(frozen=True)
class SignInResult:
    """Outcome of a completed callback."""

    provider_id: str
    identity: CanonicalIdentity
    tokens: Mapping[str, Any] = field(repr=False)


class OAuthFlow:
    """Runs the authorization-code flow for providers held in a registry.

    Each call is independent; the only shared state is the read-only registry
    and the HTTP client. Use as an async context manager to have the flow open
    and close its own client.
    """

    def __init__(self, registry: ProviderRegistry, client: Optional[httpx.AsyncClient] = None):
        self.registry = registry
        self._client = client
        self._owns_client = False

    async def __aenter__(self) -> "OAuthFlow":
        if self._client is None:
            self._client = create_http_client()
            self._owns_client = True
        return self

    async def __aexit__(self, exc_type, exc, traceback) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
            self._owns_client = False

    async def authorization_url(
        self,
        provider_id: str,
        redirect_uri: Optional[str] = None,
        state: Optional[str] = None,
        **params: Any,
    ) -> str:
        """Build the redirect URL starting a sign-in attempt."""
        definition = self.registry.get(provider_id)
        context = AuthorizationContext(redirect_uri=redirect_uri, state=state, params=params)
        return await run_authorization_step(definition, context)

    async def handle_callback(
        self,
        provider_id: str,
        code: str,
        redirect_uri: Optional[str] = None,
    ) -> SignInResult:
        """Exchange the code, fetch the profile and normalize it."""
        definition = self.registry.get(provider_id)
        tokens = await run_token_step(definition, code, redirect_uri=redirect_uri, client=self._client)
        raw_profile = await run_userinfo_step(definition, tokens, client=self._client)
        identity = normalize_profile(definition, raw_profile)
        logger.info("OAuth sign-in completed for provider '%s'", provider_id)
        return SignInResult(provider_id=provider_id, identity=identity, tokens=tokens)


__all__ = ["OAuthFlow", "SignInResult"]
