from __future__ import annotations

from urllib.parse import parse_qsl

from wallarm_client.query import MAX_QUERY_LENGTH, chunk_id_queries

BASE = [("filter[clientid]", "7")]
KEY = "filter[id][]"


def _ids(query: str) -> list[int]:
    return [int(v) for k, v in parse_qsl(query) if k == KEY]


def test_small_id_list_fits_one_query() -> None:
    queries = chunk_id_queries(BASE, KEY, [1, 2, 3])
    assert queries == ["filter%5Bclientid%5D=7&filter%5Bid%5D%5B%5D=1&filter%5Bid%5D%5B%5D=2&filter%5Bid%5D%5B%5D=3"]


def test_empty_ids_yield_base_query_only() -> None:
    assert chunk_id_queries(BASE, KEY, []) == ["filter%5Bclientid%5D=7"]


def test_large_id_list_is_split_under_limit() -> None:
    ids = list(range(100000, 101500))
    queries = chunk_id_queries(BASE, KEY, ids)

    assert len(queries) > 1
    assert all(len(q) <= MAX_QUERY_LENGTH for q in queries)
    assert all(q.startswith("filter%5Bclientid%5D=7&") for q in queries)
    assert [i for q in queries for i in _ids(q)] == ids


def test_custom_limit() -> None:
    queries = chunk_id_queries([], "id", [10, 20, 30], limit=11)
    assert queries == ["id=10&id=20", "id=30"]
