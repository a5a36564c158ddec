from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from . import codec
from .errors import SerializationError


@dataclass(frozen=True)
class QueryString:
    """Pre-encoded query; used verbatim as the URL query, never as a body."""

    value: str


@dataclass(frozen=True)
class RawBytes:
    """Request body sent as-is."""

    value: bytes


@dataclass(frozen=True)
class Structured:
    """Value serialized to JSON with the rules in ``codec``."""

    value: Any


RequestBody = Union[QueryString, RawBytes, Structured]


def coerce_body(body: Any) -> RequestBody | None:
    if body is None or isinstance(body, (QueryString, RawBytes, Structured)):
        return body
    if isinstance(body, str):
        return QueryString(body)
    if isinstance(body, (bytes, bytearray, memoryview)):
        return RawBytes(bytes(body))
    return Structured(body)


def encode_body(body: RequestBody | None) -> tuple[bytes | None, str | None]:
    """Return ``(content, query)``; at most one of them is set."""
    if body is None:
        return None, None
    if isinstance(body, QueryString):
        try:
            body.value.encode("ascii")
        except UnicodeEncodeError as e:
            raise SerializationError("query string must be URL-encoded ASCII") from e
        return None, body.value
    if isinstance(body, RawBytes):
        return body.value, None
    return codec.dumps(body.value), None
