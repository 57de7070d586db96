"""Input collection for creating and editing secrets."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import BaseModel, ConfigDict


class SecretFormValues(BaseModel):
    """Values captured by :class:`SecretFormInput` at submit time."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    description: str = ""
    secret_value: str = ""


SubmitCallback = Callable[[SecretFormValues], Awaitable[Any]]


class SecretFormInput:
    """Name/description/value form that hands its values to a submit callback.

    The form owns no server state. Submitting closes and clears it before the
    callback runs, so the callback's outcome never leaves stale input behind.
    """

    def __init__(self, on_submit: SubmitCallback) -> None:
        self._on_submit = on_submit
        self.is_open: bool = False
        self.name: str = ""
        self.description: str = ""
        self.secret_value: str = ""

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        self.is_open = False

    def reset(self) -> None:
        self.name = ""
        self.description = ""
        self.secret_value = ""

    def fill(self, *, name: str, description: str, secret_value: str) -> None:
        self.name = name
        self.description = description
        self.secret_value = secret_value

    def values(self) -> SecretFormValues:
        return SecretFormValues(
            name=self.name, description=self.description, secret_value=self.secret_value
        )

    async def submit(self) -> Any:
        """Pass the current values to the callback and return its result."""

        values = self.values()
        self.close()
        self.reset()
        return await self._on_submit(values)

    def cancel(self) -> None:
        self.close()


__all__ = ["SecretFormInput", "SecretFormValues", "SubmitCallback"]
