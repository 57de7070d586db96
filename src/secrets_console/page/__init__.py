"""Secrets page: orchestration, form input and derived view."""

from .controller import PageController, PageState
from .form import SecretFormInput, SecretFormValues
from .view import PageView, SecretItemView, build_page_view, render_text

__all__ = [
    "PageController",
    "PageState",
    "PageView",
    "SecretFormInput",
    "SecretFormValues",
    "SecretItemView",
    "build_page_view",
    "render_text",
]
