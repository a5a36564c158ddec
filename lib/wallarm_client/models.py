"""Request bodies for the resource endpoints.

Field names match the API keys unless renamed through ``json_field``.
Responses are returned as decoded JSON dicts and have no models here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .codec import json_field, omitempty, optional


# --- rules ---

@dataclass
class Action:
    value: str = omitempty("")
    type: str = omitempty("")
    point: list[Any] = omitempty()


@dataclass
class ActionCreate:
    type: str
    actions: list[Action] | None = omitempty(name="action")
    clientid: int = omitempty(0)
    validated: bool = omitempty(False)
    point: list[list[str]] | None = omitempty()
    rules: list[str] | None = omitempty()
    attack_type: str = omitempty("")
    mode: str = omitempty("")
    regex: str = omitempty("")
    regex_id: int = omitempty(0)
    enabled: bool | None = optional()
    name: str = omitempty("")
    values: list[str] | None = omitempty()


@dataclass
class ActionFilter:
    clientid: list[int] = field(default_factory=list)
    hints_count: list[list[Any]] = field(default_factory=list)
    hint_type: list[str] = field(default_factory=list)


@dataclass
class ActionRead:
    filter: ActionFilter | None = None
    limit: int = 0
    offset: int = 0


# --- applications ---

@dataclass
class AppFilter:
    id: int = 0
    clientid: int = 0


@dataclass
class AppCreate:
    name: str = ""
    filter: AppFilter | None = json_field(inline=True)


@dataclass
class AppDelete:
    filter: AppFilter | None = None


@dataclass
class AppReadFilter:
    clientid: list[int] = field(default_factory=list)


@dataclass
class AppRead:
    limit: int = 0
    offset: int = 0
    filter: AppReadFilter | None = None


@dataclass
class AppUpdateFilter:
    id: int = 0
    read_filter: AppReadFilter | None = json_field(inline=True)


@dataclass
class AppUpdateFields:
    name: str = ""


@dataclass
class AppUpdate:
    filter: AppUpdateFilter | None = None
    fields: AppUpdateFields | None = None


# --- blacklist ---

@dataclass
class Bulk:
    ip: str
    expire_at: int = 0
    reason: str = ""
    poolid: int = 0
    clientid: int = 0


@dataclass
class BlacklistCreate:
    bulks: list[Bulk] = json_field(name="bulk", default_factory=list)


# --- client settings ---

@dataclass
class ClientFields:
    mode: str = omitempty("")
    scanner_mode: str = omitempty("")


@dataclass
class ClientFilter:
    id: int = 0


@dataclass
class ClientUpdate:
    filter: ClientFilter | None = None
    fields: ClientFields | None = None


@dataclass
class RuleSettingsParams:
    min_lom_format: int | None = optional()
    max_lom_format: int | None = optional()
    max_lom_size: int | None = optional()
    lom_disabled: bool | None = optional()
    lom_compilation_delay: int | None = optional()
    rules_snapshot_enabled: bool | None = optional()
    rules_snapshot_max_count: int | None = optional()
    rules_manipulation_locked: bool | None = optional()
    heavy_lom: bool | None = optional()
    data_in_s3: bool | None = optional()
    parameters_count_weight: int | None = optional()
    path_variativity_weight: int | None = optional()
    pii_weight: int | None = optional()
    request_content_weight: int | None = optional()
    open_vulns_weight: int | None = optional()
    serialized_data_weight: int | None = optional()
    risk_score_algo: str | None = optional()
    pii_fallback: bool | None = optional()


@dataclass
class WallarmMode:
    mode: str


# --- integrations ---

@dataclass
class IntegrationEvents:
    event: str
    active: bool = False


@dataclass
class IntegrationCreate:
    name: str
    type: str
    target: str = ""
    active: bool = False
    events: list[IntegrationEvents] | None = None
    clientid: int = omitempty(0)


@dataclass
class IntegrationWithAPITarget:
    token: str = omitempty("")
    api: str = omitempty("")
    url: str = omitempty("")
    http_method: str = omitempty("")
    headers: dict[str, Any] = field(default_factory=dict)
    ca_file: str = ""
    ca_verify: bool = False
    timeout: int = omitempty(0)
    open_timeout: int = omitempty(0)


@dataclass
class IntegrationWithAPICreate:
    name: str
    type: str = "web_hooks"
    target: IntegrationWithAPITarget | None = None
    active: bool = False
    events: list[IntegrationEvents] | None = None
    clientid: int = omitempty(0)


@dataclass
class EmailIntegrationCreate:
    name: str
    target: list[str] = field(default_factory=list)
    type: str = "email"
    active: bool = False
    events: list[IntegrationEvents] | None = None
    clientid: int = omitempty(0)


# --- nodes ---

@dataclass
class NodeCreate:
    hostname: str
    type: str
    clientid: int = 0


@dataclass
class NodeFilter:
    uuid: str = omitempty("")
    ip: str = omitempty("")
    hostname: str = omitempty("")


@dataclass
class NodeReadByFilter:
    filter: NodeFilter | None = None
    limit: int = 0
    offset: int = 0
    order_by: str = omitempty("")
    order_desc: bool = omitempty(False)


# --- scanner ---

@dataclass
class ScannerCreate:
    query: str
    clientid: int = 0


@dataclass
class ScannerDeleteFilter:
    query: str = ""
    clientid: int = 0
    id: list[int] = field(default_factory=list)


@dataclass
class ScannerDeleteBulk:
    filter: ScannerDeleteFilter | None = None


@dataclass
class ScannerDelete:
    bulk: list[ScannerDeleteBulk] = field(default_factory=list)


@dataclass
class ScannerUpdate:
    disabled: bool = False
    clientid: int = 0


# --- users ---

@dataclass
class UserCreate:
    email: str
    password: str
    username: str
    realname: str
    permissions: list[str] = field(default_factory=list)
    phone: str = omitempty("")
    clientid: int = omitempty(0)


@dataclass
class UserFilter:
    id: int = omitempty(0)
    clientid: int = omitempty(0)
    uuid: str = omitempty("")
    username: str = omitempty("")
    email: str = omitempty("")


@dataclass
class UserGet:
    limit: int = 0
    order_by: str = ""
    order_desc: bool = False
    filter: UserFilter | None = None


@dataclass
class UserDelete:
    filter: UserFilter | None = None


@dataclass
class NotificationChannels:
    email: bool = omitempty(False)
    sms: bool = omitempty(False)


@dataclass
class UserNotifications:
    report_daily: NotificationChannels = field(default_factory=NotificationChannels)
    report_weekly: NotificationChannels = field(default_factory=NotificationChannels)
    report_monthly: NotificationChannels = field(default_factory=NotificationChannels)
    system: NotificationChannels = field(default_factory=NotificationChannels)
    vuln: NotificationChannels = field(default_factory=NotificationChannels)


@dataclass
class UserFields:
    phone: str = omitempty("")
    realname: str = omitempty("")
    permissions: list[str] | None = omitempty()
    clientid: int = omitempty(0)
    timezone: str = omitempty("")
    job_title: str = omitempty("")
    results_per_page: int = omitempty(0)
    default_pool: str = omitempty("")
    enabled: bool = omitempty(False)
    password: str = omitempty("")
    notifications: UserNotifications | None = omitempty()


@dataclass
class UserUpdate:
    filter: UserFilter | None = omitempty()
    fields: UserFields | None = omitempty()
    limit: int = omitempty(0)
    offset: int = omitempty(0)
    order_by: str = omitempty("")
    order_desc: bool = omitempty(False)


# --- API specifications ---

@dataclass
class ApiSpecCreate:
    title: str
    client_id: int = json_field(skip=True, default=0)
    description: str = ""
    file_remote_url: str = ""
    regular_file_update: bool = False
    api_detection: bool = False
    instances: list[Any] = field(default_factory=list)
    domains: list[Any] = field(default_factory=list)
