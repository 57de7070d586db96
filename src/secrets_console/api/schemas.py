"""Pydantic schemas mirroring the secrets API wire contract."""

from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class WireModel(BaseModel):
    """Immutable base model accepting both field names and wire aliases."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class Secret(WireModel):
    """Server-authoritative secret record; the value stays encrypted."""

    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    name: str
    description: str = ""
    encrypted_payload: str = Field(
        validation_alias=AliasChoices("encrypted_payload", "encryptedPayload", "encrypted")
    )
    iv: str | None = None
    created_at: datetime = Field(validation_alias=AliasChoices("created_at", "createdAt"))
    updated_at: datetime = Field(validation_alias=AliasChoices("updated_at", "updatedAt"))
    revision: int | str | None = Field(
        default=None, validation_alias=AliasChoices("revision", "__v")
    )

    @model_validator(mode="after")
    def _check_timestamps(self) -> Secret:
        if (self.created_at.tzinfo is None) != (self.updated_at.tzinfo is None):
            raise ValueError("createdAt and updatedAt must both carry a timezone or neither")
        if self.updated_at < self.created_at:
            raise ValueError("updatedAt precedes createdAt")
        return self


class SecretListResponse(WireModel):
    """Wrapper form of ``GET /api/secrets`` responses."""

    items: list[Secret]

    def as_list(self) -> list[Secret]:
        return list(self.items)


class SecretInput(WireModel):
    """Body of create and update requests."""

    name: str
    description: str
    secret_value: str = Field(serialization_alias="secretValue")

    def to_wire(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)


class DecryptedSecret(WireModel):
    """Response of ``GET /api/secrets/{id}/decrypted``."""

    decrypted_value: str = Field(
        validation_alias=AliasChoices("decrypted_value", "decryptedValue")
    )


__all__ = [
    "DecryptedSecret",
    "Secret",
    "SecretInput",
    "SecretListResponse",
    "WireModel",
]
