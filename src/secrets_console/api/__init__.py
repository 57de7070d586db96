"""HTTP access to the secrets API."""

from .client import ApiClient, ApiError, ApiRequest, ApiResult, ErrorKind
from .gateway import SECRETS_PATH, SecretsGateway
from .schemas import DecryptedSecret, Secret, SecretInput, SecretListResponse

__all__ = [
    "ApiClient",
    "ApiError",
    "ApiRequest",
    "ApiResult",
    "DecryptedSecret",
    "ErrorKind",
    "SECRETS_PATH",
    "Secret",
    "SecretInput",
    "SecretListResponse",
    "SecretsGateway",
]
