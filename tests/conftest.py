import asyncio
from collections.abc import Callable
from typing import Any

import pytest

from secrets_console.api.client import ApiError, ApiResult, ErrorKind
from secrets_console.api.schemas import DecryptedSecret, Secret
from secrets_console.config import ClientConfig

BASE_URL = "https://secrets.test"


def _secret_payload(secret_id: str, **overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": secret_id,
        "name": f"name-{secret_id}",
        "description": f"description of {secret_id}",
        "encryptedPayload": f"cipher-{secret_id}",
        "createdAt": "2024-05-01T12:00:00Z",
        "updatedAt": "2024-05-01T12:00:00Z",
        "revision": 0,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def config():
    return ClientConfig(base_url=BASE_URL)


@pytest.fixture
def secret_payload() -> Callable[..., dict[str, Any]]:
    """Factory for wire-shaped secret dictionaries."""
    return _secret_payload


@pytest.fixture
def make_secret() -> Callable[..., Secret]:
    """Factory for validated Secret models."""

    def factory(secret_id: str, **overrides: Any) -> Secret:
        return Secret.model_validate(_secret_payload(secret_id, **overrides))

    return factory


class FakeGateway:
    """In-memory stand-in for SecretsGateway with controllable decrypt timing."""

    def __init__(self, secrets: list[Secret] | None = None) -> None:
        self.secrets: list[Secret] = list(secrets or [])
        self.plaintext: dict[str, str] = {}
        self.failures: dict[str, ApiError] = {}
        self.decrypt_gates: dict[str, asyncio.Event] = {}
        self.decrypt_started: dict[str, asyncio.Event] = {}
        self.calls: list[tuple[str, str]] = []
        self._next_id = 1

    def fail(self, operation: str, message: str = "boom", status_code: int | None = 500) -> None:
        self.failures[operation] = ApiError(ErrorKind.SERVER, message, status_code)

    def gate(self, secret_id: str) -> asyncio.Event:
        self.decrypt_started[secret_id] = asyncio.Event()
        self.decrypt_gates[secret_id] = asyncio.Event()
        return self.decrypt_gates[secret_id]

    async def list_secrets(self, token: str) -> ApiResult[list[Secret]]:
        self.calls.append(("list", token))
        if "list" in self.failures:
            return ApiResult(error=self.failures["list"])
        return ApiResult(data=list(self.secrets))

    async def fetch_decrypted(self, secret_id: str, token: str) -> ApiResult[DecryptedSecret]:
        self.calls.append(("decrypt", secret_id))
        if secret_id in self.decrypt_started:
            self.decrypt_started[secret_id].set()
        if secret_id in self.decrypt_gates:
            await self.decrypt_gates[secret_id].wait()
        if "decrypt" in self.failures:
            return ApiResult(error=self.failures["decrypt"])
        if secret_id not in self.plaintext:
            return ApiResult.failure(ErrorKind.SERVER, "Secret not found", 404)
        return ApiResult(data=DecryptedSecret(decrypted_value=self.plaintext[secret_id]))

    async def create_secret(
        self, name: str, description: str, secret_value: str, token: str
    ) -> ApiResult[Secret]:
        self.calls.append(("create", name))
        if "create" in self.failures:
            return ApiResult(error=self.failures["create"])
        secret_id = f"new-{self._next_id}"
        self._next_id += 1
        secret = Secret.model_validate(
            _secret_payload(
                secret_id,
                name=name,
                description=description,
                encryptedPayload=secret_value[::-1].encode().hex(),
            )
        )
        self.secrets.append(secret)
        self.plaintext[secret_id] = secret_value
        return ApiResult(data=secret)

    async def update_secret(
        self, secret_id: str, name: str, description: str, secret_value: str, token: str
    ) -> ApiResult[Secret]:
        self.calls.append(("update", secret_id))
        if "update" in self.failures:
            return ApiResult(error=self.failures["update"])
        secret = Secret.model_validate(
            _secret_payload(
                secret_id,
                name=name,
                description=description,
                encryptedPayload=f"cipher-{secret_value}",
                updatedAt="2024-06-01T12:00:00Z",
                revision=1,
            )
        )
        self.secrets = [secret if s.id == secret_id else s for s in self.secrets]
        self.plaintext[secret_id] = secret_value
        return ApiResult(data=secret)

    async def delete_secret(self, secret_id: str, token: str) -> ApiResult[str]:
        self.calls.append(("delete", secret_id))
        if "delete" in self.failures:
            return ApiResult(error=self.failures["delete"])
        self.secrets = [s for s in self.secrets if s.id != secret_id]
        return ApiResult(data=secret_id)


@pytest.fixture
def fake_gateway(make_secret):
    return FakeGateway([make_secret("a"), make_secret("b"), make_secret("c")])


@pytest.fixture
def token_provider():
    async def provide() -> str:
        return "test-token"

    return provide


@pytest.fixture
def gateway_factory():
    return FakeGateway
