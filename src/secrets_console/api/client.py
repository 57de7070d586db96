"""Authenticated JSON client that reports failures as values."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Generic, TypeVar

import httpx

from ..config import ClientConfig

T = TypeVar("T")

_MESSAGE_KEYS = ("message", "error", "detail")


class ErrorKind(StrEnum):
    """Failure categories surfaced to callers."""

    TOKEN = "token"
    TRANSPORT = "transport"
    SERVER = "server"


@dataclass(frozen=True, slots=True)
class ApiError:
    """Normalized description of a failed call."""

    kind: ErrorKind
    message: str
    status_code: int | None = None

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message


@dataclass(frozen=True, slots=True)
class ApiResult(Generic[T]):
    """``{data, error}`` pair returned by every client and gateway call."""

    data: T | None = None
    error: ApiError | None = None

    @property
    def ok(self) -> bool:
        """A result only counts as successful with data and no error."""

        return self.error is None and self.data is not None

    @classmethod
    def failure(cls, kind: ErrorKind, message: str, status_code: int | None = None) -> ApiResult[T]:
        return cls(error=ApiError(kind=kind, message=message, status_code=status_code))


@dataclass(frozen=True, slots=True)
class ApiRequest:
    """Everything needed to issue one authenticated request."""

    url: str
    method: str
    token: str
    body: Mapping[str, Any] | None = None


class ApiClient:
    """Executes :class:`ApiRequest` objects against the configured server."""

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config: ClientConfig = config
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock: asyncio.Lock = asyncio.Lock()
        self._logger: logging.Logger = logging.getLogger(__name__)

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""

        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def call(self, request: ApiRequest) -> ApiResult[Any]:
        """Send ``request``; HTTP and network failures come back in ``error``."""

        try:
            client = await self._get_client()
            response = await client.request(
                request.method,
                request.url,
                json=dict(request.body) if request.body is not None else None,
                headers=self._headers_for_token(request.token),
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            message = self._server_message(exc.response)
            self._logger.warning(
                "API request rejected",
                extra=self._log_context(request, status),
            )
            return ApiResult.failure(ErrorKind.SERVER, message, status)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            self._logger.warning(
                "API request failed in transport: %s",
                exc.__class__.__name__,
                extra=self._log_context(request, None),
            )
            return ApiResult.failure(ErrorKind.TRANSPORT, str(exc) or exc.__class__.__name__)

        if not response.content:
            return ApiResult(data=None)
        try:
            return ApiResult(data=response.json())
        except ValueError:
            self._logger.warning(
                "API response body is not valid JSON",
                extra=self._log_context(request, response.status_code),
            )
            return ApiResult.failure(
                ErrorKind.TRANSPORT, "Malformed response from server", response.status_code
            )

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            async with self._client_lock:
                if self._client is None:
                    self._client = httpx.AsyncClient(
                        base_url=self.config.base_url,
                        timeout=self.config.timeout,
                        verify=self.config.verify_ssl,
                        transport=self._transport,
                    )
        return self._client

    def _headers_for_token(self, token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "content-type": "application/json",
            "Accept": "application/json",
        }

    @staticmethod
    def _server_message(response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, Mapping):
            for key in _MESSAGE_KEYS:
                value = payload.get(key)
                if isinstance(value, str) and value:
                    return value
            return response.reason_phrase or "Request failed"
        if isinstance(payload, str) and payload.strip():
            return payload.strip()
        text = response.text.strip() if response.content else ""
        if text:
            return text
        return response.reason_phrase or "Request failed"

    @staticmethod
    def _log_context(request: ApiRequest, status: int | None) -> dict[str, dict[str, Any]]:
        return {
            "request_context": {
                "method": request.method,
                "url": request.url,
                "status": status,
            }
        }


__all__ = [
    "ApiClient",
    "ApiError",
    "ApiRequest",
    "ApiResult",
    "ErrorKind",
]
