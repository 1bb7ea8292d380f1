"""Resolvers sub-package — declared-default lookup."""

from .fallback import FallbackKeyResolver

__all__ = ["FallbackKeyResolver"]
