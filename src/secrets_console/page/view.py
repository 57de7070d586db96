"""Derived view state for the secrets page and its plain-text rendering."""

from __future__ import annotations

from datetime import datetime
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

from ..state.store import ClientSecretView, DecryptionState
from .controller import PageController, PageState

LOADING_TITLE: Final[str] = "Loading secrets..."
ERROR_TITLE: Final[str] = "Error"
READY_TITLE: Final[str] = "Secrets"
EMPTY_MESSAGE: Final[str] = "No secrets available"


class SecretItemView(BaseModel):
    """One rendered list entry."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    created_at: datetime
    state: DecryptionState
    secret_label: str
    secret_text: str
    can_decrypt: bool
    error: str | None = None


class PageView(BaseModel):
    """Everything a front end needs to draw the page."""

    model_config = ConfigDict(frozen=True)

    state: PageState
    title: str
    message: str | None = None
    banner: str | None = None
    items: list[SecretItemView] = Field(default_factory=list)


def _item_view(entry: ClientSecretView, error: str | None) -> SecretItemView:
    decrypted = entry.decryption_state is DecryptionState.DECRYPTED
    return SecretItemView(
        id=entry.id,
        name=entry.name,
        description=entry.description,
        created_at=entry.created_at,
        state=entry.decryption_state,
        secret_label="Decrypted" if decrypted else "Secret",
        secret_text=(entry.decrypted_value or "") if decrypted else entry.encrypted_payload,
        can_decrypt=entry.decryption_state
        in (DecryptionState.ENCRYPTED, DecryptionState.DECRYPT_FAILED),
        error=error,
    )


def build_page_view(controller: PageController) -> PageView:
    """Project the controller and its store into a :class:`PageView`."""

    if controller.state is PageState.LOADING:
        return PageView(state=controller.state, title=LOADING_TITLE)
    if controller.state is PageState.FAILED:
        return PageView(state=controller.state, title=ERROR_TITLE, message=controller.error)

    items = [
        _item_view(entry, controller.item_errors.get(entry.id)) for entry in controller.store
    ]
    return PageView(
        state=controller.state,
        title=READY_TITLE,
        message=None if items else EMPTY_MESSAGE,
        banner=controller.banner,
        items=items,
    )


def render_text(view: PageView) -> str:
    """Render ``view`` as terminal-friendly text."""

    lines = [view.title]
    if view.banner:
        lines.append(f"! {view.banner}")
    if view.message:
        lines.append(view.message)

    for item in view.items:
        lines.append("")
        lines.append(f"Name: {item.name}")
        lines.append(f"Description: {item.description}")
        lines.append(f"Created At: {item.created_at.isoformat(sep=' ', timespec='seconds')}")
        secret_line = f"{item.secret_label}: {item.secret_text}"
        if item.state is DecryptionState.DECRYPTING:
            secret_line += " (decrypting...)"
        elif item.can_decrypt:
            secret_line += f" [decrypt {item.id}]"
        lines.append(secret_line)
        if item.error:
            lines.append(f"Error: {item.error}")

    return "\n".join(lines)


__all__ = [
    "EMPTY_MESSAGE",
    "ERROR_TITLE",
    "LOADING_TITLE",
    "PageView",
    "READY_TITLE",
    "SecretItemView",
    "build_page_view",
    "render_text",
]
