"""Client-side manager for encrypted secrets served by a bearer-token API."""

from .api import (
    ApiClient,
    ApiError,
    ApiRequest,
    ApiResult,
    DecryptedSecret,
    ErrorKind,
    Secret,
    SecretsGateway,
)
from .auth import CachedTokenProvider, StaticTokenProvider, TokenProvider
from .config import ClientConfig
from .exceptions import SecretsConsoleError, TokenAcquisitionError
from .page import (
    PageController,
    PageState,
    PageView,
    SecretFormInput,
    SecretFormValues,
    build_page_view,
    render_text,
)
from .state import ClientSecretView, DecryptionState, SecretListStore

__all__ = [
    "ApiClient",
    "ApiError",
    "ApiRequest",
    "ApiResult",
    "CachedTokenProvider",
    "ClientConfig",
    "ClientSecretView",
    "DecryptedSecret",
    "DecryptionState",
    "ErrorKind",
    "PageController",
    "PageState",
    "PageView",
    "Secret",
    "SecretFormInput",
    "SecretFormValues",
    "SecretListStore",
    "SecretsConsoleError",
    "SecretsGateway",
    "StaticTokenProvider",
    "TokenAcquisitionError",
    "TokenProvider",
    "build_page_view",
    "render_text",
]
