"""Normalization of provider profiles into canonical identities."""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import ValidationError

from authbridge.integrations.oauth.base import ProviderDefinition
from authbridge.integrations.oauth.exceptions import ProfileMappingError, ProfileValidationError
from authbridge.schemas.identity import CanonicalIdentity


def normalize_profile(definition: ProviderDefinition, raw_profile: Any) -> CanonicalIdentity:
    """Run the provider's profile mapper and validate the result.

    Either a complete identity is returned or an error is raised; a record
    without a usable ``id`` is never handed back.
    """
    try:
        mapped = definition.profile_mapper(raw_profile)
    except Exception as exc:
        raise ProfileMappingError(
            f"Profile mapper for provider '{definition.id}' raised {type(exc).__name__}: {exc}",
            provider_id=definition.id,
        ) from exc

    if isinstance(mapped, CanonicalIdentity):
        return mapped
    if not isinstance(mapped, Mapping):
        raise ProfileValidationError(
            f"Profile mapper for provider '{definition.id}' returned {type(mapped).__name__}, "
            "expected a mapping",
            provider_id=definition.id,
        )

    try:
        return CanonicalIdentity.model_validate(dict(mapped))
    except ValidationError as exc:
        fields = ", ".join(".".join(str(part) for part in error["loc"]) for error in exc.errors())
        raise ProfileValidationError(
            f"Invalid identity from provider '{definition.id}' (fields: {fields})",
            provider_id=definition.id,
        ) from exc


__all__ = ["normalize_profile"]
