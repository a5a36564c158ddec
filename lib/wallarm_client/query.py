from __future__ import annotations

from collections.abc import Iterable, Sequence
from urllib.parse import urlencode

# Longest query the blacklist endpoints accept comfortably.
MAX_QUERY_LENGTH = 7000


def chunk_id_queries(
        base: Sequence[tuple[str, str]],
        key: str,
        ids: Iterable[int],
        *,
        limit: int = MAX_QUERY_LENGTH,
) -> list[str]:
    """Split ``ids`` over as few encoded queries as possible.

    Every query starts with ``base`` and repeats ``key`` once per id. A query
    grows past ``limit`` only when a single id does not fit on its own.
    An empty ``ids`` still yields one query holding just ``base``.
    """
    base_query = urlencode(list(base))
    queries: list[str] = []
    current: list[str] = []
    length = len(base_query)

    for item in ids:
        pair = urlencode([(key, str(int(item)))])
        extra = len(pair) + (1 if base_query or current else 0)
        if current and length + extra > limit:
            queries.append(_join(base_query, current))
            current = []
            length = len(base_query)
            extra = len(pair) + (1 if base_query else 0)
        current.append(pair)
        length += extra

    if current or not queries:
        queries.append(_join(base_query, current))
    return queries


def _join(base_query: str, pairs: list[str]) -> str:
    return "&".join(([base_query] if base_query else []) + pairs)
