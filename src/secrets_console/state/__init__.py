"""Client-side secret list state."""

from .store import ClientSecretView, DecryptionState, SecretListStore

__all__ = [
    "ClientSecretView",
    "DecryptionState",
    "SecretListStore",
]
