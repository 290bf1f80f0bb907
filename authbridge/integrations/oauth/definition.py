"""Assembly of provider definitions from integrator options and built-in defaults."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlsplit

import httpx

from authbridge.integrations.oauth.base import (
    EndpointDescriptor,
    ProviderDefinition,
    ResolvedStep,
)
from authbridge.integrations.oauth.exceptions import ConfigurationError, FlowStep

logger = logging.getLogger("authbridge")

OAUTH_TYPE = "oauth"

# Option keys understood by the engine; anything else is provider-owned.
SCHEMA_KEYS = frozenset(
    {
        "id",
        "name",
        "type",
        "client_id",
        "client_secret",
        "authorization",
        "token",
        "userinfo",
        "profile",
        "display",
        "required_options",
    }
)

_DESCRIPTOR_KEYS = frozenset({"url", "params", "request"})


def _missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _check_url(provider_id: str, step: FlowStep, url: str) -> None:
    try:
        urlsplit(url)
        httpx.URL(url)
    except (httpx.InvalidURL, ValueError) as exc:
        raise ConfigurationError(
            f"Provider '{provider_id}' {step.value} url is malformed: {exc}"
        ) from exc


def _coerce_endpoint(provider_id: str, step: FlowStep, value: Any) -> EndpointDescriptor:
    """Turn a literal URL or descriptor mapping into an ``EndpointDescriptor``."""
    if value is None:
        raise ConfigurationError(f"Provider '{provider_id}' has no {step.value} endpoint")

    if isinstance(value, EndpointDescriptor):
        descriptor = value
    elif isinstance(value, str):
        descriptor = EndpointDescriptor(url=value)
    elif isinstance(value, Mapping):
        unknown = set(value) - _DESCRIPTOR_KEYS
        if unknown:
            raise ConfigurationError(
                f"Provider '{provider_id}' {step.value} endpoint has unknown keys: "
                f"{', '.join(sorted(unknown))}"
            )
        params = value.get("params") or {}
        if not isinstance(params, Mapping):
            raise ConfigurationError(
                f"Provider '{provider_id}' {step.value} params must be a mapping"
            )
        descriptor = EndpointDescriptor(
            url=value.get("url"),
            params=params,
            request=value.get("request"),
        )
    else:
        raise ConfigurationError(
            f"Provider '{provider_id}' {step.value} endpoint must be a URL or a descriptor, "
            f"got {type(value).__name__}"
        )

    if descriptor.url is not None and not isinstance(descriptor.url, str):
        raise ConfigurationError(f"Provider '{provider_id}' {step.value} url must be a string")
    if descriptor.request is not None and not callable(descriptor.request):
        raise ConfigurationError(
            f"Provider '{provider_id}' {step.value} request override must be callable"
        )
    if _missing(descriptor.url) and descriptor.request is None:
        raise ConfigurationError(
            f"Provider '{provider_id}' {step.value} endpoint needs a url or a request override"
        )
    if not _missing(descriptor.url):
        _check_url(provider_id, step, descriptor.url)
    return descriptor


def _resolve_step(provider_id: str, step: FlowStep, value: Any) -> ResolvedStep:
    descriptor = _coerce_endpoint(provider_id, step, value)
    if descriptor.request is not None:
        return ResolvedStep.custom(descriptor, descriptor.request)
    return ResolvedStep.default(descriptor)


def resolve_provider_definition(
    integrator_options: Mapping[str, Any],
    builtin_defaults: Optional[Mapping[str, Any]] = None,
) -> ProviderDefinition:
    """Merge integrator options over built-in defaults into a provider definition.

    The merge is shallow: each top-level key supplied by the integrator replaces
    the default wholesale, including endpoint descriptors. Keys outside
    ``SCHEMA_KEYS`` are kept unchanged in ``extra_options``.

    Raises:
        ConfigurationError: When a required field is missing or malformed.
    """
    merged: Dict[str, Any] = dict(builtin_defaults or {})
    merged.update(integrator_options)

    provider_id = merged.get("id")
    if not isinstance(provider_id, str) or _missing(provider_id):
        raise ConfigurationError("Provider definition requires a non-empty 'id'")

    provider_type = merged.get("type", OAUTH_TYPE)
    if provider_type != OAUTH_TYPE:
        raise ConfigurationError(
            f"Provider '{provider_id}' has unsupported type '{provider_type}'"
        )

    for key in ("client_id", "client_secret"):
        value = merged.get(key)
        if _missing(value):
            raise ConfigurationError(f"Provider '{provider_id}' is missing required option '{key}'")
        if not isinstance(value, str):
            raise ConfigurationError(f"Provider '{provider_id}' option '{key}' must be a string")

    profile_mapper = merged.get("profile")
    if profile_mapper is None:
        raise ConfigurationError(f"Provider '{provider_id}' requires a profile mapper")
    if not callable(profile_mapper):
        raise ConfigurationError(f"Provider '{provider_id}' profile mapper must be callable")

    for key in merged.get("required_options") or ():
        if _missing(merged.get(key)):
            raise ConfigurationError(f"Provider '{provider_id}' is missing required option '{key}'")

    display = merged.get("display") or {}
    if not isinstance(display, Mapping):
        raise ConfigurationError(f"Provider '{provider_id}' display must be a mapping")

    definition = ProviderDefinition(
        id=provider_id,
        name=merged.get("name") or provider_id,
        type=provider_type,
        client_id=merged["client_id"],
        client_secret=merged["client_secret"],
        authorization=_resolve_step(provider_id, FlowStep.AUTHORIZATION, merged.get("authorization")),
        token=_resolve_step(provider_id, FlowStep.TOKEN, merged.get("token")),
        userinfo=_resolve_step(provider_id, FlowStep.USERINFO, merged.get("userinfo")),
        profile_mapper=profile_mapper,
        extra_options={key: value for key, value in merged.items() if key not in SCHEMA_KEYS},
        display=display,
    )

    logger.debug(
        "Resolved provider '%s' (authorization=%s, token=%s, userinfo=%s)",
        definition.id,
        definition.authorization.kind.value,
        definition.token.kind.value,
        definition.userinfo.kind.value,
    )
    return definition


__all__ = ["OAUTH_TYPE", "SCHEMA_KEYS", "resolve_provider_definition"]
