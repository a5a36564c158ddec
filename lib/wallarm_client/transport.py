from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

import httpx

from .body import coerce_body, encode_body
from .config_types import ClientConfig
from .context import CallContext
from .errors import (
    ApiError,
    ExistingResourceError,
    ForbiddenError,
    NetworkError,
    RateLimitedError,
    ReadError,
    UnauthorizedError,
    UpstreamUnavailableError,
    WallarmClientError,
)
from .logging_ import get_logger

USER_DETAILS_TAG = "userdetails"
ALREADY_EXISTS_BODY = b'{"status":400,"body":"Already exists"}'
UPSTREAM_STATUSES = frozenset({502, 503, 504, 522, 523, 524})
LOG_BODY_LIMIT = 1000

_JSON_METHODS = frozenset({"POST", "PUT"})


@dataclass(frozen=True)
class StatusRule:
    """One row of the response classification table.

    ``error`` is None for the success row. ``tags`` and ``body`` are optional
    extra conditions on the resource tag and the exact response body.
    """

    statuses: frozenset[int] | range
    error: type[ApiError] | None
    tags: frozenset[str] | None = None
    body: bytes | None = None

    def matches(self, status: int, resource_tag: str, body: bytes) -> bool:
        if status not in self.statuses:
            return False
        if self.tags is not None and resource_tag not in self.tags:
            return False
        return self.body is None or body == self.body


# Evaluated top to bottom, first match wins.
STATUS_RULES: tuple[StatusRule, ...] = (
    StatusRule(range(200, 300), None),
    StatusRule(frozenset({401}), UnauthorizedError),
    StatusRule(frozenset({403}), ForbiddenError),
    StatusRule(UPSTREAM_STATUSES, UpstreamUnavailableError),
    StatusRule(frozenset({429}), RateLimitedError),
    StatusRule(frozenset({400}), ExistingResourceError, tags=frozenset({"node", "app"}), body=ALREADY_EXISTS_BODY),
    StatusRule(frozenset({409}), ExistingResourceError, tags=frozenset({"scanner", "user"})),
)


def classify(status: int, resource_tag: str, body: bytes) -> type[ApiError] | None:
    """Map a response to None (success) or the ApiError subclass to raise."""
    for rule in STATUS_RULES:
        if rule.matches(status, resource_tag, body):
            return rule.error
    return ApiError


def is_retryable_status(status: int) -> bool:
    return status == 429 or status >= 500


def log_body(data: bytes) -> str:
    text = data.decode("utf-8", errors="replace")
    return text.replace("\n", "").replace("\t", "")[:LOG_BODY_LIMIT]


class Transport:
    def __init__(self, cfg: ClientConfig):
        self._cfg = cfg
        self._log = cfg.logger or get_logger()
        self._client = httpx.Client(
            timeout=cfg.timeout_s,
            transport=cfg.transport,
            follow_redirects=True,
        )

    @property
    def config(self) -> ClientConfig:
        return self._cfg

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _headers(self, method: str, resource_tag: str) -> httpx.Headers:
        headers = httpx.Headers(list(self._cfg.headers))
        if self._cfg.user_agent:
            headers["User-Agent"] = self._cfg.user_agent
        if method in _JSON_METHODS and "Content-Type" not in headers and resource_tag != USER_DETAILS_TAG:
            headers["Content-Type"] = "application/json"
        elif method == "GET" and "Content-Type" in headers:
            del headers["Content-Type"]
        return headers

    def _build_request(
            self,
            method: str,
            path: str,
            resource_tag: str,
            content: bytes | None,
            query: str | None,
            ctx: CallContext | None,
    ) -> httpx.Request:
        url = httpx.URL(self._cfg.base_url + path)
        if query is not None:
            url = url.copy_with(query=query.encode("ascii"))

        timeout = self._cfg.timeout_s
        remaining = ctx.remaining() if ctx is not None else None
        if remaining is not None:
            timeout = max(0.001, min(timeout, remaining))

        return self._client.build_request(
            method,
            url,
            content=content,
            headers=self._headers(method, resource_tag),
            timeout=timeout,
        )

    def _sleep(self, seconds: float, ctx: CallContext | None) -> None:
        if ctx is not None:
            ctx.sleep(seconds)
        elif seconds > 0:
            time.sleep(seconds)

    def execute(
            self,
            method: str,
            path: str,
            resource_tag: str = "",
            body: Any = None,
            *,
            ctx: CallContext | None = None,
    ) -> bytes:
        """Run one logical API call and return the raw response body.

        Transport failures, 429 and 5xx responses are retried with exponential
        backoff. Anything else ends the loop and is classified by
        ``STATUS_RULES``.
        """
        method = method.upper()
        content, query = encode_body(coerce_body(body))

        policy = self._cfg.retry_policy
        attempts = policy.max_retries + 1
        status: int | None = None
        data = b""
        failure: WallarmClientError | None = None
        cause: BaseException | None = None

        for attempt in range(attempts):
            if attempt > 0:
                delay = policy.backoff(attempt)
                self._log.info(
                    "Sleeping %.2fs before retry attempt number %d for request %s %s",
                    delay, attempt, method, path,
                )
                self._sleep(delay, ctx)
            if ctx is not None:
                ctx.check()

            request = self._build_request(method, path, resource_tag, content, query, ctx)
            try:
                response = self._client.send(request, stream=True)
            except httpx.RequestError as e:
                if ctx is not None:
                    ctx.check()
                status, data = None, b""
                failure = NetworkError(
                    f"{method} {path} failed after {attempt + 1} attempt(s): {e}",
                    attempts=attempt + 1,
                )
                cause = e
                self._log.warning(
                    "Error performing request (attempt %d/%d): %s %s : %s",
                    attempt + 1, attempts, method, path, e,
                )
                continue

            failure, cause = None, None
            status = response.status_code
            try:
                if ctx is not None and ctx.cancelled():
                    ctx.check()
                data = response.read()
            except (httpx.HTTPError, httpx.StreamError) as e:
                if not is_retryable_status(status):
                    raise ReadError(f"{method} {path}: could not read response body: {e}") from e
                status, data = None, b""
                failure = ReadError(f"{method} {path}: could not read response body: {e}")
                cause = e
                self._log.warning(
                    "Request (attempt %d/%d): %s %s got an unreadable error response: %s",
                    attempt + 1, attempts, method, path, e,
                )
                continue
            finally:
                response.close()

            if not is_retryable_status(status):
                break
            self._log.warning(
                "Request (attempt %d/%d): %s %s got an error response %d: %s",
                attempt + 1, attempts, method, path, status, log_body(data),
            )

        if failure is not None:
            raise failure from cause

        error_cls = classify(status, resource_tag, data)
        if error_cls is None:
            return data
        raise self._api_error(error_cls, method, path, status, data)

    @staticmethod
    def _api_error(error_cls: type[ApiError], method: str, path: str, status: int, data: bytes) -> ApiError:
        details = data.decode("utf-8", errors="replace")
        msg = f"{method} {path} failed with HTTP status {status}, body: {log_body(data)}"
        if error_cls is ExistingResourceError:
            msg = f"This resource has already been created earlier. {msg}"
        return error_cls(status, msg, details, method=method, path=path)
