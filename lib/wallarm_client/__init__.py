import logging

from .body import QueryString, RawBytes, Structured
from .client import WallarmClient
from .config_types import ClientConfig, RetryPolicy, config_from_env, credentials_headers
from .context import CallContext
from .errors import (
    ApiError,
    AuthError,
    CancelledError,
    ConfigError,
    DecodeError,
    ExistingResourceError,
    ForbiddenError,
    InvalidCredentialsError,
    NetworkError,
    RateLimitedError,
    ReadError,
    ResourceNotFoundError,
    SerializationError,
    UnauthorizedError,
    UpstreamUnavailableError,
    WallarmClientError,
)
from .transport import Transport

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "WallarmClient",
    "Transport",
    "ClientConfig",
    "RetryPolicy",
    "CallContext",
    "QueryString",
    "RawBytes",
    "Structured",
    "config_from_env",
    "credentials_headers",
    "WallarmClientError",
    "ConfigError",
    "InvalidCredentialsError",
    "SerializationError",
    "NetworkError",
    "ReadError",
    "DecodeError",
    "CancelledError",
    "ResourceNotFoundError",
    "ApiError",
    "AuthError",
    "UnauthorizedError",
    "ForbiddenError",
    "UpstreamUnavailableError",
    "RateLimitedError",
    "ExistingResourceError",
]
