"""In-memory secret list with per-record decryption state."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import Final

from pydantic import model_validator

from ..api.schemas import Secret

logger = logging.getLogger(__name__)


class DecryptionState(StrEnum):
    """Client-side lifecycle of a secret's plaintext."""

    ENCRYPTED = "encrypted"
    DECRYPTING = "decrypting"
    DECRYPTED = "decrypted"
    DECRYPT_FAILED = "decrypt_failed"


_ALLOWED_TRANSITIONS: Final[dict[DecryptionState, frozenset[DecryptionState]]] = {
    DecryptionState.ENCRYPTED: frozenset({DecryptionState.DECRYPTING}),
    DecryptionState.DECRYPTING: frozenset(
        {
            DecryptionState.DECRYPTING,
            DecryptionState.DECRYPTED,
            DecryptionState.DECRYPT_FAILED,
        }
    ),
    DecryptionState.DECRYPTED: frozenset({DecryptionState.DECRYPTED}),
    DecryptionState.DECRYPT_FAILED: frozenset(
        {DecryptionState.DECRYPTING, DecryptionState.DECRYPTED}
    ),
}


class ClientSecretView(Secret):
    """A :class:`Secret` plus the client's decryption state for it."""

    decryption_state: DecryptionState = DecryptionState.ENCRYPTED
    decrypted_value: str | None = None

    @model_validator(mode="after")
    def _check_decrypted_value(self) -> ClientSecretView:
        if (self.decrypted_value is not None) != (
            self.decryption_state is DecryptionState.DECRYPTED
        ):
            raise ValueError("decrypted_value must be set exactly when the state is decrypted")
        return self

    @classmethod
    def from_secret(cls, secret: Secret) -> ClientSecretView:
        return cls.model_validate(secret.model_dump(include=set(Secret.model_fields)))

    def same_secret(self, secret: Secret) -> bool:
        """True when ``secret`` carries exactly the server fields of this view."""

        return all(
            getattr(self, field) == getattr(secret, field) for field in Secret.model_fields
        )

    def same_ciphertext(self, secret: Secret) -> bool:
        return (
            self.encrypted_payload == secret.encrypted_payload
            and self.revision == secret.revision
            and self.updated_at == secret.updated_at
        )

    def can_transition(self, target: DecryptionState) -> bool:
        return target in _ALLOWED_TRANSITIONS[self.decryption_state]


class SecretListStore:
    """Id-keyed collection of :class:`ClientSecretView` objects.

    Every mutation installs a fresh mapping in which only the touched id maps
    to a new object; all other entries keep their identity.
    """

    def __init__(self, secrets: Iterable[Secret] = ()) -> None:
        self._entries: dict[str, ClientSecretView] = {}
        for secret in secrets:
            self._entries[secret.id] = ClientSecretView.from_secret(secret)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, secret_id: object) -> bool:
        return secret_id in self._entries

    def __iter__(self) -> Iterator[ClientSecretView]:
        return iter(self.views())

    @property
    def entries(self) -> Mapping[str, ClientSecretView]:
        """Read-only snapshot of the current id → view mapping."""

        return MappingProxyType(self._entries)

    def get(self, secret_id: str) -> ClientSecretView | None:
        return self._entries.get(secret_id)

    def views(self) -> list[ClientSecretView]:
        return list(self._entries.values())

    def replace_all(self, secrets: Iterable[Secret], *, retain_decrypted: bool = False) -> None:
        """Make the store hold exactly ``secrets``.

        Entries whose server fields and state are unchanged keep their object.
        A decrypt still in flight stays ``decrypting``. Decrypted plaintext is
        dropped unless ``retain_decrypted`` is set and the secret is unchanged.
        """

        entries: dict[str, ClientSecretView] = {}
        for secret in secrets:
            if secret.id in entries:
                logger.warning(
                    "Duplicate secret id in list response", extra={"secret_id": secret.id}
                )
            previous = self._entries.get(secret.id)
            entries[secret.id] = self._merge(previous, secret, retain_decrypted)
        self._entries = entries

    def append(self, secret: Secret) -> bool:
        """Add a new encrypted entry; an already known id is left untouched."""

        if secret.id in self._entries:
            logger.warning("Ignoring append of known secret", extra={"secret_id": secret.id})
            return False
        self._install(secret.id, ClientSecretView.from_secret(secret))
        return True

    def apply_update(self, secret: Secret) -> bool:
        """Replace an entry's server fields after an update; the entry is re-masked."""

        if secret.id not in self._entries:
            logger.warning("Ignoring update of unknown secret", extra={"secret_id": secret.id})
            return False
        self._install(secret.id, ClientSecretView.from_secret(secret))
        return True

    def remove(self, secret_id: str) -> bool:
        if secret_id not in self._entries:
            return False
        entries = dict(self._entries)
        del entries[secret_id]
        self._entries = entries
        return True

    def mark_decrypting(self, secret_id: str) -> bool:
        return self._transition(secret_id, DecryptionState.DECRYPTING)

    def apply_decrypted(self, secret_id: str, value: str) -> bool:
        return self._transition(secret_id, DecryptionState.DECRYPTED, value)

    def mark_decrypt_failed(self, secret_id: str) -> bool:
        return self._transition(secret_id, DecryptionState.DECRYPT_FAILED)

    def _transition(
        self, secret_id: str, target: DecryptionState, value: str | None = None
    ) -> bool:
        current = self._entries.get(secret_id)
        if current is None:
            logger.info(
                "Ignoring %s for unknown secret", target.value, extra={"secret_id": secret_id}
            )
            return False
        if not current.can_transition(target):
            logger.info(
                "Ignoring %s -> %s transition",
                current.decryption_state.value,
                target.value,
                extra={"secret_id": secret_id},
            )
            return False
        if current.decryption_state is target and current.decrypted_value == value:
            return True

        self._install(
            secret_id,
            current.model_copy(update={"decryption_state": target, "decrypted_value": value}),
        )
        return True

    def _install(self, secret_id: str, view: ClientSecretView) -> None:
        entries = dict(self._entries)
        entries[secret_id] = view
        self._entries = entries

    @staticmethod
    def _merge(
        existing: ClientSecretView | None, secret: Secret, retain_decrypted: bool
    ) -> ClientSecretView:
        if existing is None:
            return ClientSecretView.from_secret(secret)

        unchanged = existing.same_secret(secret)
        state = existing.decryption_state
        if state is DecryptionState.DECRYPTING:
            if unchanged:
                return existing
            return ClientSecretView.from_secret(secret).model_copy(
                update={"decryption_state": DecryptionState.DECRYPTING}
            )
        if (
            state is DecryptionState.DECRYPTED
            and retain_decrypted
            and existing.same_ciphertext(secret)
        ):
            if unchanged:
                return existing
            return ClientSecretView.from_secret(secret).model_copy(
                update={
                    "decryption_state": DecryptionState.DECRYPTED,
                    "decrypted_value": existing.decrypted_value,
                }
            )
        if state is DecryptionState.ENCRYPTED and unchanged:
            return existing
        return ClientSecretView.from_secret(secret)


__all__ = [
    "ClientSecretView",
    "DecryptionState",
    "SecretListStore",
]
