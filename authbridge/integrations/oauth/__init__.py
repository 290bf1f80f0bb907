"""OAuth2 provider definitions, step overrides and profile normalization."""

from .base import (
    AuthorizationContext,
    AuthorizationRequest,
    EndpointDescriptor,
    ProviderDefinition,
    ResolvedStep,
    StepKind,
    TokenRequest,
    UserinfoRequest,
)
from .definition import resolve_provider_definition
from .exceptions import (
    ConfigurationError,
    FlowStep,
    OAuth2Error,
    ProfileMappingError,
    ProfileValidationError,
    ProviderRequestError,
    UnsupportedProviderError,
)
from .factory import OAuth2ProviderFactory
from .flow import OAuthFlow, SignInResult
from .profile import normalize_profile
from .registry import BUILTIN_PROVIDERS, ProviderRegistry, get_supported_providers
from .resolver import run_authorization_step, run_token_step, run_userinfo_step

__all__ = [
    "BUILTIN_PROVIDERS",
    "AuthorizationContext",
    "AuthorizationRequest",
    "ConfigurationError",
    "EndpointDescriptor",
    "FlowStep",
    "OAuth2Error",
    "OAuth2ProviderFactory",
    "OAuthFlow",
    "ProfileMappingError",
    "ProfileValidationError",
    "ProviderDefinition",
    "ProviderRegistry",
    "ProviderRequestError",
    "ResolvedStep",
    "SignInResult",
    "StepKind",
    "TokenRequest",
    "UnsupportedProviderError",
    "UserinfoRequest",
    "get_supported_providers",
    "normalize_profile",
    "resolve_provider_definition",
    "run_authorization_step",
    "run_token_step",
    "run_userinfo_step",
]
