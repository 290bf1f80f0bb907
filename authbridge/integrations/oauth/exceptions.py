"""OAuth2-specific exceptions."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class FlowStep(str, Enum):
    """Steps of the authorization-code flow a provider may override."""

    AUTHORIZATION = "authorization"
    TOKEN = "token"
    USERINFO = "userinfo"


class OAuth2Error(Exception):
    """Base OAuth2 error."""

    pass


class ConfigurationError(OAuth2Error):
    """Raised when a provider definition cannot be assembled or registered."""

    pass


class UnsupportedProviderError(OAuth2Error):
    """Raised when provider is not supported."""

    pass


class ProviderRequestError(OAuth2Error):
    """Raised when a flow step's request or override fails."""

    def __init__(
        self,
        message: str,
        provider_id: Optional[str] = None,
        step: Optional[FlowStep] = None,
    ) -> None:
        super().__init__(message)
        self.provider_id = provider_id
        self.step = step

    def __str__(self) -> str:
        message = super().__str__()
        if self.step is None:
            return message
        return f"[{self.provider_id}:{self.step.value}] {message}"


class ProfileMappingError(OAuth2Error):
    """Raised when a provider's profile mapper fails."""

    def __init__(self, message: str, provider_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.provider_id = provider_id


class ProfileValidationError(OAuth2Error):
    """Raised when a mapped profile or step payload is not usable."""

    def __init__(self, message: str, provider_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.provider_id = provider_id


__all__ = [
    "FlowStep",
    "OAuth2Error",
    "ConfigurationError",
    "UnsupportedProviderError",
    "ProviderRequestError",
    "ProfileMappingError",
    "ProfileValidationError",
]
