"""Typed secrets operations routed through :class:`ApiClient`."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Final, TypeVar
from urllib.parse import quote

from pydantic import TypeAdapter, ValidationError

from .client import ApiClient, ApiRequest, ApiResult, ErrorKind
from .schemas import DecryptedSecret, Secret, SecretInput, SecretListResponse

SECRETS_PATH: Final[str] = "/api/secrets"

T = TypeVar("T")

_secret_list_adapter: TypeAdapter[list[Secret]] = TypeAdapter(list[Secret])

logger = logging.getLogger(__name__)


def _parse_secret_list(payload: Any) -> list[Secret]:
    if isinstance(payload, list):
        return _secret_list_adapter.validate_python(payload)
    return SecretListResponse.model_validate(payload).as_list()


class SecretsGateway:
    """Maps secret operations onto fixed methods and paths of the secrets API."""

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def list_secrets(self, token: str) -> ApiResult[list[Secret]]:
        """``GET /api/secrets``."""

        result = await self._client.call(ApiRequest(SECRETS_PATH, "GET", token))
        return self._shape(result, _parse_secret_list, "secret list")

    async def fetch_decrypted(self, secret_id: str, token: str) -> ApiResult[DecryptedSecret]:
        """``GET /api/secrets/{id}/decrypted``."""

        result = await self._client.call(
            ApiRequest(f"{self._item_path(secret_id)}/decrypted", "GET", token)
        )
        return self._shape(result, DecryptedSecret.model_validate, "decrypted secret")

    async def create_secret(
        self, name: str, description: str, secret_value: str, token: str
    ) -> ApiResult[Secret]:
        """``POST /api/secrets``."""

        body = SecretInput(name=name, description=description, secret_value=secret_value)
        result = await self._client.call(
            ApiRequest(SECRETS_PATH, "POST", token, body=body.to_wire())
        )
        return self._shape(result, Secret.model_validate, "created secret")

    async def update_secret(
        self,
        secret_id: str,
        name: str,
        description: str,
        secret_value: str,
        token: str,
    ) -> ApiResult[Secret]:
        """``PUT /api/secrets/{id}``."""

        body = SecretInput(name=name, description=description, secret_value=secret_value)
        result = await self._client.call(
            ApiRequest(self._item_path(secret_id), "PUT", token, body=body.to_wire())
        )
        return self._shape(result, Secret.model_validate, "updated secret")

    async def delete_secret(self, secret_id: str, token: str) -> ApiResult[str]:
        """``DELETE /api/secrets/{id}``; the data on success is the deleted id."""

        result = await self._client.call(ApiRequest(self._item_path(secret_id), "DELETE", token))
        if result.error is not None:
            return ApiResult(error=result.error)
        return ApiResult(data=secret_id)

    @staticmethod
    def _item_path(secret_id: str) -> str:
        return f"{SECRETS_PATH}/{quote(secret_id, safe='')}"

    @staticmethod
    def _shape(result: ApiResult[Any], parse: Callable[[Any], T], what: str) -> ApiResult[T]:
        if result.error is not None:
            return ApiResult(error=result.error)
        if result.data is None:
            return ApiResult.failure(ErrorKind.TRANSPORT, f"Empty {what} response from server")
        try:
            return ApiResult(data=parse(result.data))
        except ValidationError as exc:
            logger.warning(
                "Malformed %s response",
                what,
                extra={"validation_errors": exc.error_count()},
            )
            return ApiResult.failure(ErrorKind.TRANSPORT, f"Malformed {what} response from server")


__all__ = ["SECRETS_PATH", "SecretsGateway"]
