"""Provider definitions and step overrides for OAuth sign-in flows."""

__version__ = "0.1.0"
