"""Schema exports."""

from .identity import CanonicalIdentity

__all__ = ["CanonicalIdentity"]
