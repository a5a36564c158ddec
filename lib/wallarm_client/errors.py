from __future__ import annotations


class WallarmClientError(Exception):
    """Base client error."""


class ConfigError(WallarmClientError, ValueError):
    """Invalid client configuration."""


class InvalidCredentialsError(ConfigError):
    """Only part of the UUID/secret pair was supplied."""


class SerializationError(WallarmClientError):
    """Request body could not be encoded to JSON."""


class NetworkError(WallarmClientError):
    """Transport/network layer error."""

    def __init__(self, message: str, attempts: int = 1):
        super().__init__(message)
        self.attempts = attempts


class ReadError(WallarmClientError):
    """Response body could not be read."""


class DecodeError(WallarmClientError, ValueError):
    """A successful response body was not valid JSON."""

    def __init__(self, message: str, *, method: str | None = None, path: str | None = None):
        super().__init__(message)
        self.method = method
        self.path = path


class CancelledError(WallarmClientError):
    """The call context was cancelled or its deadline passed."""


class ResourceNotFoundError(WallarmClientError):
    """A lookup returned successfully but nothing matched."""


class ApiError(WallarmClientError):
    def __init__(
            self,
            status_code: int,
            message: str,
            details: str | None = None,
            *,
            method: str | None = None,
            path: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.details = details
        self.method = method
        self.path = path


class AuthError(ApiError):
    """Auth-related API error."""


class UnauthorizedError(AuthError):
    """401 from the API."""


class ForbiddenError(AuthError):
    """403 from the API."""


class UpstreamUnavailableError(ApiError):
    """Gateway or availability failure (502/503/504/522/523/524)."""


class RateLimitedError(UpstreamUnavailableError):
    """429 that survived every retry."""


class ExistingResourceError(ApiError):
    """The resource was already created earlier, e.g. directly via the API.

    Provisioning code can treat this as "already present" instead of a failure.
    """
