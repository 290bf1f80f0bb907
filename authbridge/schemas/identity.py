"""Pydantic schemas for normalized provider identities."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CanonicalIdentity(BaseModel):
    """Provider-agnostic identity produced from a provider profile.

    ``email`` is ``None`` when the provider exposes no address; an empty string
    is kept as given.
    """

    id: str = Field(..., min_length=1)
    name: Optional[str] = None
    email: Optional[str] = None
    image: Optional[str] = None

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        # Some providers (GitHub, Discord) return numeric ids.
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        if isinstance(value, str):
            value = value.strip()
        return value


__all__ = ["CanonicalIdentity"]
