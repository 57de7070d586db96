"""Exceptions raised by the secrets console.

Ordinary HTTP and network failures are never raised; they travel as
:class:`secrets_console.api.client.ApiError` values instead.
"""

from __future__ import annotations


class SecretsConsoleError(Exception):
    """Base error raised for any secrets console issue."""


class TokenAcquisitionError(SecretsConsoleError):
    """Raised when the identity provider cannot produce an access token."""


__all__ = [
    "SecretsConsoleError",
    "TokenAcquisitionError",
]
