"""Page orchestration: list loading, creation and per-item decryption."""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Awaitable, Callable, Coroutine
from enum import StrEnum
from typing import Any, TypeVar, cast

from ..api.client import ApiResult, ErrorKind
from ..api.gateway import SecretsGateway
from ..api.schemas import Secret
from ..auth.tokens import TokenProvider
from ..state.store import SecretListStore
from .form import SecretFormInput, SecretFormValues

T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., Awaitable[Any]])

logger = logging.getLogger(__name__)


class PageState(StrEnum):
    """Lifecycle of the secrets page."""

    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


def _action_boundary(label: str, default: Any = None) -> Callable[[F], F]:
    """Keep unexpected exceptions from escaping a user-triggered action."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(self: PageController, *args: Any, **kwargs: Any) -> Any:
            try:
                return await func(self, *args, **kwargs)
            except Exception as exc:
                logger.exception("Unexpected failure while %s", label)
                self._record_unexpected(label, exc)
                return default

        return cast(F, wrapper)

    return decorator


class PageController:
    """Drives the secrets page on top of a gateway, a token provider and a store."""

    def __init__(
        self,
        gateway: SecretsGateway,
        token_provider: TokenProvider,
        *,
        store: SecretListStore | None = None,
        retain_decrypted_on_refresh: bool = False,
    ) -> None:
        self.gateway: SecretsGateway = gateway
        self.store: SecretListStore = store if store is not None else SecretListStore()
        self.form: SecretFormInput = SecretFormInput(on_submit=self.submit_create)
        self.state: PageState = PageState.LOADING
        self.error: str | None = None
        self.banner: str | None = None
        self.item_errors: dict[str, str] = {}
        self.retain_decrypted_on_refresh = retain_decrypted_on_refresh
        self._token_provider = token_provider
        self._tasks: set[asyncio.Task[Any]] = set()

    @_action_boundary("fetching secrets", default=False)
    async def mount(self) -> bool:
        """Load the initial list; ends in ``READY`` or ``FAILED``."""

        self.state = PageState.LOADING
        self.error = None
        result = await self._with_token(self.gateway.list_secrets)
        if not result.ok:
            self.store.replace_all([])
            self.state = PageState.FAILED
            self.error = f"Error fetching secrets: {self._describe(result)}"
            return False

        self.store.replace_all(
            cast(list[Secret], result.data), retain_decrypted=self.retain_decrypted_on_refresh
        )
        self.state = PageState.READY
        logger.info("Loaded secrets", extra={"count": len(self.store)})
        return True

    @_action_boundary("refreshing secrets", default=False)
    async def refresh(self) -> bool:
        """Re-fetch the list; a failure keeps the current entries."""

        if self.state is not PageState.READY:
            return await self.mount()

        result = await self._with_token(self.gateway.list_secrets)
        if not result.ok:
            self.banner = f"Error fetching secrets: {self._describe(result)}"
            return False

        self.store.replace_all(
            cast(list[Secret], result.data), retain_decrypted=self.retain_decrypted_on_refresh
        )
        self.item_errors = {
            secret_id: message
            for secret_id, message in self.item_errors.items()
            if secret_id in self.store
        }
        return True

    @_action_boundary("creating secret")
    async def submit_create(self, values: SecretFormValues) -> Secret | None:
        """Create a secret and append it; nothing is added before the server confirms."""

        result = await self._with_token(
            functools.partial(
                self.gateway.create_secret,
                values.name,
                values.description,
                values.secret_value,
            )
        )
        if not result.ok:
            self.banner = f"Error creating secret: {self._describe(result)}"
            return None

        secret = cast(Secret, result.data)
        self.store.append(secret)
        self.banner = None
        return secret

    @_action_boundary("updating secret")
    async def update_secret(self, secret_id: str, values: SecretFormValues) -> Secret | None:
        result = await self._with_token(
            functools.partial(
                self.gateway.update_secret,
                secret_id,
                values.name,
                values.description,
                values.secret_value,
            )
        )
        if not result.ok:
            self.banner = f"Error updating secret: {self._describe(result)}"
            return None

        secret = cast(Secret, result.data)
        self.store.apply_update(secret)
        self.item_errors.pop(secret_id, None)
        return secret

    @_action_boundary("deleting secret", default=False)
    async def delete_secret(self, secret_id: str) -> bool:
        result = await self._with_token(functools.partial(self.gateway.delete_secret, secret_id))
        if not result.ok:
            self.banner = f"Error deleting secret: {self._describe(result)}"
            return False

        self.store.remove(secret_id)
        self.item_errors.pop(secret_id, None)
        return True

    @_action_boundary("decrypting secret", default=False)
    async def decrypt(self, secret_id: str) -> bool:
        """Fetch the plaintext for one entry without touching any other entry."""

        self.store.mark_decrypting(secret_id)
        self.item_errors.pop(secret_id, None)
        try:
            result = await self._with_token(
                functools.partial(self.gateway.fetch_decrypted, secret_id)
            )
        except Exception:
            self.store.mark_decrypt_failed(secret_id)
            raise

        if not result.ok:
            message = self._describe(result)
            if self.store.mark_decrypt_failed(secret_id):
                self.item_errors[secret_id] = message
            elif secret_id in self.store:
                logger.info("Dropping stale decrypt failure", extra={"secret_id": secret_id})
                return False
            self.banner = f"Error decrypting secret: {message}"
            return False

        decrypted = result.data
        assert decrypted is not None
        if not self.store.apply_decrypted(secret_id, decrypted.decrypted_value):
            return False
        stale = self.item_errors.pop(secret_id, None)
        if stale is not None and self.banner == f"Error decrypting secret: {stale}":
            self.banner = None
        return True

    def start_mount(self) -> asyncio.Task[bool]:
        return self._spawn(self.mount())

    def start_create(self, values: SecretFormValues) -> asyncio.Task[Secret | None]:
        return self._spawn(self.submit_create(values))

    def start_decrypt(self, secret_id: str) -> asyncio.Task[bool]:
        """Schedule a decrypt; each id's request runs and resolves independently."""

        return self._spawn(self.decrypt(secret_id))

    async def wait_idle(self) -> None:
        """Wait until every task started through ``start_*`` has finished."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def _spawn(self, coro: Coroutine[Any, Any, T]) -> asyncio.Task[T]:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _with_token(
        self, operation: Callable[[str], Awaitable[ApiResult[T]]]
    ) -> ApiResult[T]:
        token = await self._acquire_token()
        if token.error is not None or token.data is None:
            return ApiResult(error=token.error)
        return await operation(token.data)

    async def _acquire_token(self) -> ApiResult[str]:
        try:
            token = await self._token_provider()
        except Exception as exc:
            logger.warning("Access token acquisition failed: %s", exc.__class__.__name__)
            return ApiResult.failure(ErrorKind.TOKEN, str(exc) or "Unable to acquire access token")
        if not token:
            return ApiResult.failure(ErrorKind.TOKEN, "Identity provider returned an empty token")
        return ApiResult(data=token)

    def _record_unexpected(self, label: str, exc: Exception) -> None:
        message = f"Unexpected error while {label}: {exc}"
        if self.state is PageState.LOADING:
            self.state = PageState.FAILED
            self.error = message
        else:
            self.banner = message

    @staticmethod
    def _describe(result: ApiResult[Any]) -> str:
        if result.error is not None:
            return str(result.error)
        return "No data returned by server"


__all__ = ["PageController", "PageState"]
