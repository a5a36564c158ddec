from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

import httpx

from .errors import ConfigError, InvalidCredentialsError

DEFAULT_BASE_URL = "https://api.wallarm.com"
DEFAULT_USER_AGENT = "wallarm-client/0.1.0"

ENV_API_HOST = "WALLARM_API_HOST"
ENV_API_UUID = "WALLARM_API_UUID"
ENV_API_SECRET = "WALLARM_API_SECRET"
ENV_CLIENT_ID = "WALLARM_API_CLIENT_ID"
ENV_MAX_RETRIES = "WALLARM_API_MAX_RETRIES"
ENV_MIN_BACKOFF = "WALLARM_API_MIN_BACKOFF"
ENV_MAX_BACKOFF = "WALLARM_API_MAX_BACKOFF"
ENV_TIMEOUT = "WALLARM_API_TIMEOUT"

HeaderPairs = tuple[tuple[str, str], ...]


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 3
    min_retry_delay_s: float = 1.0
    max_retry_delay_s: float = 30.0

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ConfigError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.min_retry_delay_s < 0 or self.max_retry_delay_s < 0:
            raise ConfigError("retry delays must be >= 0")
        if self.min_retry_delay_s > self.max_retry_delay_s:
            raise ConfigError(
                f"min_retry_delay_s ({self.min_retry_delay_s}) is greater than "
                f"max_retry_delay_s ({self.max_retry_delay_s})"
            )

    def backoff(self, attempt: int) -> float:
        """Seconds to wait before ``attempt`` (0-based); the first attempt never waits."""
        if attempt <= 0:
            return 0.0
        return min(self.max_retry_delay_s, self.min_retry_delay_s * (2 ** (attempt - 1)))


@dataclass(frozen=True)
class ClientConfig:
    base_url: str = DEFAULT_BASE_URL
    headers: Mapping[str, str | Sequence[str]] | HeaderPairs = ()
    user_agent: str | None = DEFAULT_USER_AGENT
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)
    logger: logging.Logger | None = None
    transport: httpx.BaseTransport | None = None
    timeout_s: float = 15.0
    client_id: int | None = None

    def __post_init__(self) -> None:
        base_url = normalize_base_url(self.base_url)
        if not base_url:
            raise ConfigError("base_url is required")
        if self.timeout_s <= 0:
            raise ConfigError(f"timeout_s must be > 0, got {self.timeout_s}")
        object.__setattr__(self, "base_url", base_url)
        object.__setattr__(self, "headers", _header_pairs(self.headers))


def _header_pairs(headers) -> HeaderPairs:
    if not headers:
        return ()
    items = headers.items() if isinstance(headers, Mapping) else headers
    pairs: list[tuple[str, str]] = []
    for name, value in items:
        if isinstance(value, str):
            pairs.append((str(name), value))
        else:
            pairs.extend((str(name), str(v)) for v in value)
    return tuple(pairs)


def normalize_base_url(raw: str | None) -> str:
    value = (raw or "").strip()
    if not value:
        return ""
    value = value.rstrip("/")
    lowered = value.lower()
    if lowered.startswith("http://") or lowered.startswith("https://"):
        return value

    host = value.split("/", 1)[0]
    host = host.split(":", 1)[0].lower()
    if host in {"localhost", "127.0.0.1", "0.0.0.0"}:
        scheme = "http://"
    else:
        scheme = "https://"
    return f"{scheme}{value}"


def credentials_headers(uuid: str | None, secret: str | None) -> dict[str, str]:
    uuid = (uuid or "").strip()
    secret = (secret or "").strip()
    if not uuid and not secret:
        return {}
    if not uuid or not secret:
        raise InvalidCredentialsError("Credentials are not set. Specify UUID and Secret")
    return {"X-WallarmAPI-UUID": uuid, "X-WallarmAPI-Secret": secret}


def _env_number(environ: Mapping[str, str], name: str, cast):
    raw = (environ.get(name) or "").strip()
    if not raw:
        return None
    try:
        return cast(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e


def config_from_env(environ: Mapping[str, str] | None = None, **overrides) -> ClientConfig:
    """Build a ClientConfig from ``WALLARM_API_*`` variables; keyword overrides win."""
    env = os.environ if environ is None else environ

    defaults = RetryPolicy()
    max_retries = _env_number(env, ENV_MAX_RETRIES, int)
    min_delay = _env_number(env, ENV_MIN_BACKOFF, float)
    max_delay = _env_number(env, ENV_MAX_BACKOFF, float)
    policy = RetryPolicy(
        max_retries=defaults.max_retries if max_retries is None else max_retries,
        min_retry_delay_s=defaults.min_retry_delay_s if min_delay is None else min_delay,
        max_retry_delay_s=defaults.max_retry_delay_s if max_delay is None else max_delay,
    )

    kwargs = {
        "base_url": env.get(ENV_API_HOST) or DEFAULT_BASE_URL,
        "headers": credentials_headers(env.get(ENV_API_UUID), env.get(ENV_API_SECRET)),
        "retry_policy": policy,
    }
    client_id = _env_number(env, ENV_CLIENT_ID, int)
    if client_id is not None:
        kwargs["client_id"] = client_id
    timeout_s = _env_number(env, ENV_TIMEOUT, float)
    if timeout_s is not None:
        kwargs["timeout_s"] = timeout_s
    kwargs.update(overrides)
    return ClientConfig(**kwargs)
