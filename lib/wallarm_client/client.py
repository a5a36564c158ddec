from __future__ import annotations

from typing import Any
from urllib.parse import urlencode

from . import codec, models
from .body import QueryString
from .config_types import ClientConfig
from .context import CallContext
from .errors import ConfigError, DecodeError, ResourceNotFoundError
from .query import chunk_id_queries
from .transport import USER_DETAILS_TAG, Transport


class WallarmClient:
    """Resource helpers over one ``Transport``.

    Every helper takes an optional keyword-only ``ctx`` that is handed to
    ``Transport.execute`` for cancellation and deadlines.
    """

    def __init__(self, cfg: ClientConfig):
        self._cfg = cfg
        self._t = Transport(cfg)

    def __enter__(self) -> "WallarmClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._t.close()

    def request(
            self,
            method: str,
            path: str,
            resource_tag: str = "",
            body: Any = None,
            *,
            ctx: CallContext | None = None,
    ) -> bytes:
        """Raw access to the transport for endpoints without a helper."""
        return self._t.execute(method, path, resource_tag, body, ctx=ctx)

    def _request_json(
            self,
            method: str,
            path: str,
            resource_tag: str = "",
            body: Any = None,
            *,
            ctx: CallContext | None = None,
    ) -> dict[str, Any]:
        """Internal helper for endpoints that should return JSON."""
        raw = self._t.execute(method, path, resource_tag, body, ctx=ctx)
        try:
            data = codec.loads(raw)
        except ValueError as e:
            raise DecodeError(
                f"{method} {path} returned a body that is not valid JSON: {e}",
                method=method,
                path=path,
            ) from e
        if isinstance(data, dict):
            return data
        if isinstance(data, list):
            return {"items": data}
        return {"raw": data}

    def _client_id(self, client_id: int | None) -> int:
        if client_id is not None:
            return int(client_id)
        if self._cfg.client_id is not None:
            return int(self._cfg.client_id)
        raise ConfigError("client_id is required: pass it explicitly or set ClientConfig.client_id")

    # --- rules ---
    def rule_read(self, body: models.ActionRead, *, ctx: CallContext | None = None) -> dict[str, Any]:
        return self._request_json("POST", "/v1/objects/action", "rule", body, ctx=ctx)

    def rule_create(self, body: models.ActionCreate, *, ctx: CallContext | None = None) -> dict[str, Any]:
        return self._request_json("POST", "/v1/objects/hint/create", "rule", body, ctx=ctx)

    def rule_delete(self, action_id: int, *, ctx: CallContext | None = None) -> None:
        self._t.execute("DELETE", f"/v2/action/{int(action_id)}", "rule", ctx=ctx)

    # --- applications ---
    def app_read(self, body: models.AppRead, *, ctx: CallContext | None = None) -> dict[str, Any]:
        return self._request_json("POST", "/v1/objects/pool", "app", body, ctx=ctx)

    def app_create(self, body: models.AppCreate, *, ctx: CallContext | None = None) -> None:
        self._t.execute("POST", "/v1/objects/pool/create", "app", body, ctx=ctx)

    def app_delete(self, body: models.AppDelete, *, ctx: CallContext | None = None) -> None:
        self._t.execute("POST", "/v1/objects/pool/delete", "app", body, ctx=ctx)

    def app_update(self, body: models.AppUpdate, *, ctx: CallContext | None = None) -> None:
        self._t.execute("POST", "/v1/objects/pool/update", "app", body, ctx=ctx)

    # --- blacklist ---
    def blacklist_read(
            self,
            client_id: int | None = None,
            *,
            ctx: CallContext | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch every blacklist page, following ``continuation`` tokens.

        ``ctx`` is shared by all page requests.
        """
        params = [
            ("filter[clientid]", str(self._client_id(client_id))),
            ("filter[attack_delay]", "300"),
            ("limit", "1000"),
        ]
        pages: list[dict[str, Any]] = []
        seen: set[str] = set()
        continuation: str | None = None
        while True:
            page_params = params + ([("continuation", continuation)] if continuation else [])
            page = self._request_json("GET", "/v3/blacklist", "", QueryString(urlencode(page_params)), ctx=ctx)
            pages.append(page)
            body = page.get("body")
            token = body.get("continuation") if isinstance(body, dict) else None
            if token is None or str(token) in seen:
                return pages
            continuation = str(token)
            seen.add(continuation)

    def blacklist_create(self, body: models.BlacklistCreate, *, ctx: CallContext | None = None) -> None:
        self._t.execute("POST", "/v3/blacklist/bulk", "", body, ctx=ctx)

    def blacklist_delete(
            self,
            ids: list[int],
            client_id: int | None = None,
            *,
            ctx: CallContext | None = None,
    ) -> int:
        """Delete blacklist entries by id; returns the number of DELETE requests sent."""
        base = [("filter[clientid]", str(self._client_id(client_id)))]
        queries = chunk_id_queries(base, "filter[id][]", ids)
        for query in queries:
            self._t.execute("DELETE", "/v3/blacklist/all", "", QueryString(query), ctx=ctx)
        return len(queries)

    # --- client ---
    def client_update(self, body: models.ClientUpdate, *, ctx: CallContext | None = None) -> None:
        self._t.execute("POST", "/v1/objects/client/update", "client", body, ctx=ctx)

    def rules_settings_read(
            self,
            client_id: int | None = None,
            *,
            ctx: CallContext | None = None,
    ) -> dict[str, Any]:
        cid = self._client_id(client_id)
        return self._request_json("GET", f"/v2/client/{cid}/rules/settings", "rules_settings", ctx=ctx)

    def rules_settings_update(
            self,
            params: models.RuleSettingsParams,
            client_id: int | None = None,
            *,
            ctx: CallContext | None = None,
    ) -> dict[str, Any]:
        cid = self._client_id(client_id)
        return self._request_json("PUT", f"/v2/client/{cid}/rules/settings", "rules_settings", params, ctx=ctx)

    def wallarm_mode_read(
            self,
            client_id: int | None = None,
            *,
            ctx: CallContext | None = None,
    ) -> dict[str, Any]:
        cid = self._client_id(client_id)
        return self._request_json("GET", f"/v2/client/{cid}/rules/wallarm_mode", "wallarm_mode", ctx=ctx)

    def wallarm_mode_update(
            self,
            body: models.WallarmMode,
            client_id: int | None = None,
            *,
            ctx: CallContext | None = None,
    ) -> dict[str, Any]:
        cid = self._client_id(client_id)
        return self._request_json("PUT", f"/v2/client/{cid}/rules/wallarm_mode", "wallarm_mode", body, ctx=ctx)

    # --- integrations ---
    def integration_create(self, body: models.IntegrationCreate, *, ctx: CallContext | None = None) -> None:
        self._t.execute("POST", "/v2/integration", "integration", body, ctx=ctx)

    def integration_update(
            self,
            body: models.IntegrationCreate,
            integration_id: int,
            *,
            ctx: CallContext | None = None,
    ) -> None:
        self._t.execute("PUT", f"/v2/integration/{int(integration_id)}", "integration", body, ctx=ctx)

    def integration_with_api_create(
            self,
            body: models.IntegrationWithAPICreate,
            *,
            ctx: CallContext | None = None,
    ) -> None:
        self._t.execute("POST", "/v2/integration", "integration", body, ctx=ctx)

    def integration_with_api_update(
            self,
            body: models.IntegrationWithAPICreate,
            integration_id: int,
            *,
            ctx: CallContext | None = None,
    ) -> None:
        self._t.execute("PUT", f"/v2/integration/{int(integration_id)}", "integration", body, ctx=ctx)

    def email_integration_create(self, body: models.EmailIntegrationCreate, *, ctx: CallContext | None = None) -> None:
        self._t.execute("POST", "/v2/integration", "email", body, ctx=ctx)

    def email_integration_update(
            self,
            body: models.EmailIntegrationCreate,
            integration_id: int,
            *,
            ctx: CallContext | None = None,
    ) -> None:
        self._t.execute("PUT", f"/v2/integration/{int(integration_id)}", "email", body, ctx=ctx)

    def integration_read(
            self,
            name: str,
            integration_type: str,
            client_id: int | None = None,
            *,
            ctx: CallContext | None = None,
    ) -> dict[str, Any]:
        cid = self._client_id(client_id)
        query = urlencode({"clientid": cid})
        data = self._request_json("GET", "/v2/integration", "integration", QueryString(query), ctx=ctx)
        body = data.get("body") if isinstance(data.get("body"), dict) else {}
        for item in body.get("object") or []:
            if item.get("name") == name and item.get("type") == integration_type:
                return item
        raise ResourceNotFoundError(
            f"Integration '{name}' of type '{integration_type}' not found for client {cid}."
        )

    def integration_delete(self, integration_id: int, *, ctx: CallContext | None = None) -> None:
        self._t.execute("DELETE", f"/v2/integration/{int(integration_id)}", "integration", ctx=ctx)

    # --- nodes ---
    def node_create(self, body: models.NodeCreate, *, ctx: CallContext | None = None) -> dict[str, Any]:
        return self._request_json("POST", "/v2/node", "node", body, ctx=ctx)

    def node_delete(self, node_id: int, *, ctx: CallContext | None = None) -> None:
        self._t.execute("DELETE", f"/v2/node/{int(node_id)}", ctx=ctx)

    def node_read(
            self,
            node_type: str = "all",
            client_id: int | None = None,
            *,
            ctx: CallContext | None = None,
    ) -> dict[str, Any]:
        params = [
            ("order_by", "hostname"),
            ("filter[clientid][]", str(self._client_id(client_id))),
            ("limit", "1000"),
            ("offset", "0"),
        ]
        if node_type == "all":
            params.append(("filter[!type]", "fast_node"))
        else:
            params.append(("filter[type]", node_type))
        return self._request_json("GET", "/v2/node", "", QueryString(urlencode(params)), ctx=ctx)

    def node_read_by_filter(self, body: models.NodeReadByFilter, *, ctx: CallContext | None = None) -> dict[str, Any]:
        return self._request_json("POST", "/v1/objects/node", "", body, ctx=ctx)

    # --- scanner ---
    def scanner_create(self, body: models.ScannerCreate, *, ctx: CallContext | None = None) -> dict[str, Any]:
        return self._request_json("PUT", "/v2/scope/new", "scanner", body, ctx=ctx)

    def scanner_delete(
            self,
            body: models.ScannerDelete,
            resource_type: str,
            *,
            ctx: CallContext | None = None,
    ) -> None:
        self._t.execute("POST", f"/v2/scope/{resource_type}/bulk", "", body, ctx=ctx)

    def scanner_update(
            self,
            body: models.ScannerUpdate,
            resource_type: str,
            resource_id: int,
            *,
            ctx: CallContext | None = None,
    ) -> None:
        self._t.execute("POST", f"/v2/scope/{resource_type}/{int(resource_id)}", "scanner", body, ctx=ctx)

    # --- users ---
    def user_read(self, body: models.UserGet, *, ctx: CallContext | None = None) -> dict[str, Any]:
        return self._request_json("POST", "/v1/objects/user", "user", body, ctx=ctx)

    def user_create(self, body: models.UserCreate, *, ctx: CallContext | None = None) -> None:
        self._t.execute("POST", "/v1/objects/user/create", "user", body, ctx=ctx)

    def user_delete(self, body: models.UserDelete, *, ctx: CallContext | None = None) -> None:
        self._t.execute("POST", "/v1/objects/user/delete", "user", body, ctx=ctx)

    def user_update(self, body: models.UserUpdate, *, ctx: CallContext | None = None) -> None:
        self._t.execute("POST", "/v1/objects/user/update", "user", body, ctx=ctx)

    def user_details(self, *, ctx: CallContext | None = None) -> dict[str, Any]:
        return self._request_json("POST", "/v1/user", USER_DETAILS_TAG, ctx=ctx)

    # --- API specifications ---
    def api_spec_create(self, body: models.ApiSpecCreate, *, ctx: CallContext | None = None) -> dict[str, Any]:
        cid = self._client_id(body.client_id or None)
        return self._request_json("POST", f"/v4/clients/{cid}/rules/api-specs", "api_spec", body, ctx=ctx)

    def api_spec_read(
            self,
            api_spec_id: int,
            client_id: int | None = None,
            *,
            ctx: CallContext | None = None,
    ) -> dict[str, Any]:
        cid = self._client_id(client_id)
        data = self._request_json("GET", f"/v4/clients/{cid}/rules/api-specs", "api_spec", ctx=ctx)
        for item in data.get("items") or []:
            if item.get("id") == int(api_spec_id):
                return item
        raise ResourceNotFoundError(f"API spec {api_spec_id} not found for client {cid}.")

    def api_spec_delete(
            self,
            api_spec_id: int,
            client_id: int | None = None,
            *,
            ctx: CallContext | None = None,
    ) -> None:
        cid = self._client_id(client_id)
        self._t.execute("DELETE", f"/v4/clients/{cid}/rules/api-specs/{int(api_spec_id)}", "api_spec", ctx=ctx)
