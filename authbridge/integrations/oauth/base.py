"""Core types describing OAuth2 provider definitions and flow steps."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

import httpx

# Overrides may be plain functions or coroutine functions.
StepHandler = Callable[[Any], Any]
ProfileMapper = Callable[[Mapping[str, Any]], Any]


def _frozen(mapping: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class EndpointDescriptor:
    """URL, static parameters and optional override for one flow step."""

    url: Optional[str] = None
    params: Mapping[str, Any] = field(default_factory=dict)
    request: Optional[StepHandler] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", _frozen(self.params))


class StepKind(str, Enum):
    """How a flow step is executed."""

    DEFAULT = "default"
    CUSTOM = "custom"


@dataclass(frozen=True)
class ResolvedStep:
    """A flow step tagged as default or provider override.

    Built once when the provider definition is resolved so that running a
    flow only reads ``kind``.
    """

    kind: StepKind
    endpoint: EndpointDescriptor
    handler: Optional[StepHandler] = None

    @classmethod
    def default(cls, endpoint: EndpointDescriptor) -> "ResolvedStep":
        return cls(kind=StepKind.DEFAULT, endpoint=endpoint)

    @classmethod
    def custom(cls, endpoint: EndpointDescriptor, handler: StepHandler) -> "ResolvedStep":
        return cls(kind=StepKind.CUSTOM, endpoint=endpoint, handler=handler)

    @property
    def url(self) -> Optional[str]:
        return self.endpoint.url

    @property
    def params(self) -> Mapping[str, Any]:
        return self.endpoint.params


@dataclass(frozen=True)
class ProviderDefinition:
    """Fully resolved, read-only description of one identity provider."""

    id: str
    name: str
    client_id: str
    client_secret: str = field(repr=False)
    authorization: ResolvedStep
    token: ResolvedStep
    userinfo: ResolvedStep
    profile_mapper: ProfileMapper = field(repr=False)
    type: str = "oauth"
    extra_options: Mapping[str, Any] = field(default_factory=dict)
    display: Mapping[str, Any] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "extra_options", _frozen(self.extra_options))
        object.__setattr__(self, "display", _frozen(self.display))

    def option(self, key: str, default: Any = None) -> Any:
        """Return a provider-specific option passed through unchanged."""
        return self.extra_options.get(key, default)


@dataclass(frozen=True)
class AuthorizationContext:
    """Per-attempt values supplied by the host engine for the redirect."""

    redirect_uri: Optional[str] = None
    state: Optional[str] = None
    params: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AuthorizationRequest:
    """Input handed to an authorization override."""

    url: Optional[str]
    params: Mapping[str, str]
    provider: ProviderDefinition


@dataclass(frozen=True)
class TokenRequest:
    """Input handed to a token override."""

    url: Optional[str]
    params: Mapping[str, str] = field(repr=False)
    code: str = field(repr=False)
    provider: ProviderDefinition
    client: httpx.AsyncClient = field(repr=False)


@dataclass(frozen=True)
class UserinfoRequest:
    """Input handed to a userinfo override."""

    url: Optional[str]
    params: Mapping[str, Any]
    tokens: Mapping[str, Any] = field(repr=False)
    provider: ProviderDefinition
    client: httpx.AsyncClient = field(repr=False)


__all__ = [
    "AuthorizationContext",
    "AuthorizationRequest",
    "EndpointDescriptor",
    "ProfileMapper",
    "ProviderDefinition",
    "ResolvedStep",
    "StepHandler",
    "StepKind",
    "TokenRequest",
    "UserinfoRequest",
]
