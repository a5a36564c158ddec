"""JSON encoding for request bodies.

Request models are plain dataclasses. Field metadata controls the wire shape:

* ``json`` - key to use instead of the attribute name
* ``omitempty`` - drop the key when the value is None, False, 0, "" or empty
* ``omitnone`` - drop the key only when the value is None, so an explicit
  False or 0 still reaches the API
* ``skip`` - never serialize the field (path parameters and the like)
* ``inline`` - merge the nested object's keys into the parent; keys declared
  on the parent win on conflict
"""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Mapping
from enum import Enum
from typing import Any

from .errors import SerializationError


def json_field(
        *,
        name: str | None = None,
        omitempty: bool = False,
        omitnone: bool = False,
        skip: bool = False,
        inline: bool = False,
        default: Any = dataclasses.MISSING,
        default_factory: Any = dataclasses.MISSING,
):
    metadata: dict[str, Any] = {}
    if name:
        metadata["json"] = name
    if omitempty:
        metadata["omitempty"] = True
    if omitnone:
        metadata["omitnone"] = True
    if skip:
        metadata["skip"] = True
    if inline:
        metadata["inline"] = True
    if default is dataclasses.MISSING and default_factory is dataclasses.MISSING:
        default = None
    return dataclasses.field(default=default, default_factory=default_factory, metadata=metadata)


def omitempty(default: Any = None, *, name: str | None = None):
    return json_field(name=name, omitempty=True, default=default)


def optional(*, name: str | None = None):
    return json_field(name=name, omitnone=True)


def is_empty(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0
    if isinstance(value, (str, bytes, list, tuple, dict, set, frozenset)):
        return len(value) == 0
    return False


def to_jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, Enum):
        return to_jsonable(value.value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _encode_dataclass(value)
    if isinstance(value, Mapping):
        out: dict[str, Any] = {}
        for key, item in value.items():
            if not isinstance(key, (str, int)) or isinstance(key, bool):
                raise SerializationError(f"unsupported mapping key type: {type(key).__name__}")
            out[str(key)] = to_jsonable(item)
        return out
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    raise SerializationError(f"cannot encode {type(value).__name__} to JSON")


def _encode_dataclass(obj: Any) -> dict[str, Any]:
    out: dict[str, Any] = {}
    inlined: list[dict[str, Any]] = []
    for f in dataclasses.fields(obj):
        meta = f.metadata
        if meta.get("skip"):
            continue
        value = getattr(obj, f.name)
        if meta.get("inline"):
            if value is None:
                continue
            encoded = to_jsonable(value)
            if not isinstance(encoded, dict):
                raise SerializationError(f"inline field {f.name!r} must encode to an object")
            inlined.append(encoded)
            continue
        if meta.get("omitempty") and is_empty(value):
            continue
        if meta.get("omitnone") and value is None:
            continue
        out[meta.get("json", f.name)] = to_jsonable(value)
    for encoded in inlined:
        for key, item in encoded.items():
            out.setdefault(key, item)
    return out


def dumps(value: Any) -> bytes:
    try:
        payload = to_jsonable(value)
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"), allow_nan=False).encode("utf-8")
    except SerializationError:
        raise
    except (TypeError, ValueError) as e:
        raise SerializationError(f"could not encode request body: {e}") from e


def loads(data: bytes) -> Any:
    if not data or not data.strip():
        return {}
    return json.loads(data)
