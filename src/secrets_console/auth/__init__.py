"""Bearer token acquisition."""

from .tokens import CachedTokenProvider, StaticTokenProvider, TokenProvider

__all__ = [
    "CachedTokenProvider",
    "StaticTokenProvider",
    "TokenProvider",
]
