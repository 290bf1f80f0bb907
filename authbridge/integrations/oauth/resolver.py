"""Per-step dispatch between default OAuth2 requests and provider overrides."""

from __future__ import annotations

import inspect
import logging
from contextlib import asynccontextmanager
from types import MappingProxyType
from typing import Any, AsyncIterator, Dict, Mapping, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import httpx

from authbridge.core.config import settings
from authbridge.integrations.oauth.base import (
    AuthorizationContext,
    AuthorizationRequest,
    ProviderDefinition,
    ResolvedStep,
    StepKind,
    TokenRequest,
    UserinfoRequest,
)
from authbridge.integrations.oauth.exceptions import (
    FlowStep,
    ProfileValidationError,
    ProviderRequestError,
)

logger = logging.getLogger("authbridge")


def create_http_client() -> httpx.AsyncClient:
    """Create the HTTP client used when the host engine does not supply one."""
    return httpx.AsyncClient(
        timeout=settings.http_timeout_seconds,
        headers={"User-Agent": settings.user_agent},
    )


@asynccontextmanager
async def _client_scope(client: Optional[httpx.AsyncClient]) -> AsyncIterator[httpx.AsyncClient]:
    if client is not None:
        yield client
        return
    async with create_http_client() as owned:
        yield owned


def _merge_params(*layers: Mapping[str, Any]) -> Dict[str, str]:
    """Merge parameter layers left to right; ``None`` values drop the key."""
    merged: Dict[str, Any] = {}
    for layer in layers:
        merged.update(layer)
    return {key: str(value) for key, value in merged.items() if value is not None}


def _present(**values: Any) -> Dict[str, Any]:
    """Per-call values; an unset value never masks a static parameter."""
    return {key: value for key, value in values.items() if value is not None}


def _with_query(url: str, params: Mapping[str, str]) -> str:
    parts = urlsplit(url)
    # Repeated keys in the literal URL survive unless a merged param replaces them.
    query = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key not in params
    ]
    query.extend(params.items())
    return urlunsplit(parts._replace(query=urlencode(query)))


def _describe(exc: Exception) -> str:
    # Status errors embed the request URL, whose query may carry credentials.
    if isinstance(exc, httpx.HTTPStatusError):
        return f"HTTP {exc.response.status_code}"
    return f"{type(exc).__name__}: {exc}"


def _failure(definition: ProviderDefinition, step: FlowStep, message: str) -> ProviderRequestError:
    logger.warning("OAuth %s step failed for provider '%s': %s", step.value, definition.id, message)
    return ProviderRequestError(message, provider_id=definition.id, step=step)


async def _run_override(
    definition: ProviderDefinition,
    step: FlowStep,
    resolved: ResolvedStep,
    request: Any,
) -> Any:
    logger.debug("Provider '%s' overrides the %s step", definition.id, step.value)
    try:
        result = resolved.handler(request)
        if inspect.isawaitable(result):
            result = await result
    except ProviderRequestError as exc:
        if exc.step is None:
            exc.provider_id = definition.id
            exc.step = step
        logger.warning(
            "OAuth %s override failed for provider '%s': %s", step.value, definition.id, exc
        )
        raise
    except Exception as exc:
        raise _failure(definition, step, f"{step.value} override failed: {_describe(exc)}") from exc
    return result


async def _request_json(
    definition: ProviderDefinition,
    step: FlowStep,
    client: httpx.AsyncClient,
    method: str,
    url: str,
    **kwargs: Any,
) -> Dict[str, Any]:
    """Issue one request and return its JSON object body."""
    try:
        response = await client.request(method, url, **kwargs)
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPStatusError as exc:
        raise _failure(
            definition, step, f"{step.value} endpoint returned HTTP {exc.response.status_code}"
        ) from exc
    except httpx.HTTPError as exc:
        raise _failure(definition, step, f"{step.value} request failed: {exc}") from exc
    except ValueError as exc:
        raise _failure(definition, step, f"{step.value} response is not valid JSON") from exc

    if not isinstance(data, dict):
        raise _failure(definition, step, f"{step.value} response is not a JSON object")
    return data


def build_authorization_params(
    definition: ProviderDefinition, context: AuthorizationContext
) -> Dict[str, str]:
    """Merge base, static and per-attempt authorization parameters."""
    return _merge_params(
        {"response_type": "code", "client_id": definition.client_id},
        definition.authorization.params,
        _present(redirect_uri=context.redirect_uri, state=context.state),
        context.params,
    )


async def run_authorization_step(
    definition: ProviderDefinition,
    context: Optional[AuthorizationContext] = None,
) -> str:
    """Return the URL the user agent is redirected to.

    The default implementation issues no server-side request: the redirect URL
    carries the merged parameters to the provider. An override receives the
    URL the default would have produced and returns the final one.
    """
    context = context or AuthorizationContext()
    resolved = definition.authorization
    params = build_authorization_params(definition, context)
    url = _with_query(resolved.url, params) if resolved.url else None

    if resolved.kind is StepKind.CUSTOM:
        request = AuthorizationRequest(url=url, params=MappingProxyType(params), provider=definition)
        return await _run_override(definition, FlowStep.AUTHORIZATION, resolved, request)

    logger.debug("Provider '%s' uses the default authorization step", definition.id)
    return url


async def run_token_step(
    definition: ProviderDefinition,
    code: str,
    redirect_uri: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Any:
    """Exchange an authorization code for the provider's token payload."""
    resolved = definition.token
    params = _merge_params(
        {
            "grant_type": "authorization_code",
            "client_id": definition.client_id,
            "client_secret": definition.client_secret,
        },
        resolved.params,
        _present(code=code, redirect_uri=redirect_uri),
    )

    async with _client_scope(client) as http:
        if resolved.kind is StepKind.CUSTOM:
            request = TokenRequest(
                url=resolved.url,
                params=MappingProxyType(params),
                code=code,
                provider=definition,
                client=http,
            )
            return await _run_override(definition, FlowStep.TOKEN, resolved, request)

        logger.debug("Provider '%s' uses the default token step", definition.id)
        data = await _request_json(
            definition,
            FlowStep.TOKEN,
            http,
            "POST",
            resolved.url,
            data=params,
            headers={"Accept": "application/json"},
        )

    if "error" in data:
        description = data.get("error_description")
        message = f"token endpoint returned error: {data['error']}"
        if description:
            message = f"{message} ({description})"
        raise _failure(definition, FlowStep.TOKEN, message)
    return data


async def run_userinfo_step(
    definition: ProviderDefinition,
    tokens: Any,
    client: Optional[httpx.AsyncClient] = None,
) -> Any:
    """Fetch the raw provider profile using the token payload."""
    resolved = definition.userinfo

    async with _client_scope(client) as http:
        if resolved.kind is StepKind.CUSTOM:
            request = UserinfoRequest(
                url=resolved.url,
                params=resolved.params,
                tokens=tokens,
                provider=definition,
                client=http,
            )
            return await _run_override(definition, FlowStep.USERINFO, resolved, request)

        access_token = tokens.get("access_token") if isinstance(tokens, Mapping) else None
        if not access_token:
            raise ProfileValidationError(
                "Token payload carries no access_token for the userinfo request",
                provider_id=definition.id,
            )

        logger.debug("Provider '%s' uses the default userinfo step", definition.id)
        return await _request_json(
            definition,
            FlowStep.USERINFO,
            http,
            "GET",
            resolved.url,
            params=_merge_params(resolved.params),
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/json",
            },
        )


__all__ = [
    "build_authorization_params",
    "create_http_client",
    "run_authorization_step",
    "run_token_step",
    "run_userinfo_step",
]
