from __future__ import annotations

import logging

import pytest

from wallarm_client import config_types
from wallarm_client.config_types import ClientConfig, RetryPolicy, config_from_env, credentials_headers
from wallarm_client.errors import ConfigError, InvalidCredentialsError
from wallarm_client.logging_ import setup_logging


def test_retry_policy_defaults() -> None:
    policy = RetryPolicy()
    assert policy.max_retries == 3
    assert policy.min_retry_delay_s == 1.0
    assert policy.max_retry_delay_s == 30.0


def test_backoff_is_capped_exponential() -> None:
    policy = RetryPolicy(max_retries=6, min_retry_delay_s=1.0, max_retry_delay_s=30.0)
    assert [policy.backoff(i) for i in range(7)] == [0.0, 1.0, 2.0, 4.0, 8.0, 16.0, 30.0]


def test_retry_policy_rejects_min_above_max() -> None:
    with pytest.raises(ConfigError):
        RetryPolicy(min_retry_delay_s=5.0, max_retry_delay_s=1.0)


def test_retry_policy_rejects_negative_retries() -> None:
    with pytest.raises(ValueError):
        RetryPolicy(max_retries=-1)


def test_client_config_normalizes_base_url() -> None:
    assert ClientConfig(base_url="api.wallarm.com/").base_url == "https://api.wallarm.com"
    assert ClientConfig(base_url="localhost:8080").base_url == "http://localhost:8080"


def test_client_config_requires_base_url() -> None:
    with pytest.raises(ConfigError):
        ClientConfig(base_url="  ")


def test_client_config_flattens_multi_valued_headers() -> None:
    cfg = ClientConfig(headers={"X-One": "1", "X-Many": ["a", "b"]})
    assert cfg.headers == (("X-One", "1"), ("X-Many", "a"), ("X-Many", "b"))


def test_client_config_is_immutable() -> None:
    cfg = ClientConfig()
    with pytest.raises(AttributeError):
        cfg.base_url = "https://other.example"  # type: ignore[misc]


def test_credentials_headers() -> None:
    assert credentials_headers(None, None) == {}
    assert credentials_headers("uuid", "secret") == {
        "X-WallarmAPI-UUID": "uuid",
        "X-WallarmAPI-Secret": "secret",
    }


def test_credentials_headers_rejects_partial_pair() -> None:
    with pytest.raises(InvalidCredentialsError):
        credentials_headers("uuid", "")


def test_config_from_env_reads_wallarm_variables() -> None:
    cfg = config_from_env(
        {
            config_types.ENV_API_HOST: "us1.api.wallarm.com",
            config_types.ENV_API_UUID: "uuid",
            config_types.ENV_API_SECRET: "secret",
            config_types.ENV_CLIENT_ID: "42",
            config_types.ENV_MAX_RETRIES: "5",
            config_types.ENV_MIN_BACKOFF: "0.5",
            config_types.ENV_MAX_BACKOFF: "4",
            config_types.ENV_TIMEOUT: "7.5",
        }
    )

    assert cfg.base_url == "https://us1.api.wallarm.com"
    assert ("X-WallarmAPI-UUID", "uuid") in cfg.headers
    assert ("X-WallarmAPI-Secret", "secret") in cfg.headers
    assert cfg.client_id == 42
    assert cfg.retry_policy == RetryPolicy(max_retries=5, min_retry_delay_s=0.5, max_retry_delay_s=4.0)
    assert cfg.timeout_s == 7.5


def test_config_from_env_defaults_and_overrides() -> None:
    cfg = config_from_env({}, user_agent="terraform-provider/1.0")
    assert cfg.base_url == config_types.DEFAULT_BASE_URL
    assert cfg.headers == ()
    assert cfg.user_agent == "terraform-provider/1.0"
    assert cfg.retry_policy == RetryPolicy()


def test_config_from_env_rejects_malformed_numbers() -> None:
    with pytest.raises(ConfigError):
        config_from_env({config_types.ENV_MAX_RETRIES: "three"})


def test_config_from_env_uses_process_environment(monkeypatch) -> None:
    monkeypatch.setenv(config_types.ENV_API_HOST, "http://127.0.0.1:9000/")
    monkeypatch.delenv(config_types.ENV_API_UUID, raising=False)
    monkeypatch.delenv(config_types.ENV_API_SECRET, raising=False)
    assert config_from_env().base_url == "http://127.0.0.1:9000"


def test_setup_logging_levels() -> None:
    root = logging.getLogger()
    root_handlers, root_level = list(root.handlers), root.level
    loggers = [logging.getLogger(name) for name in ("wallarm_client", "httpx", "httpcore")]
    saved = [lg.level for lg in loggers]
    try:
        setup_logging(verbose=True)
        assert root.handlers == root_handlers
        assert root.level == root_level
        assert logging.getLogger("wallarm_client").level == logging.INFO
        assert logging.getLogger("httpx").level == logging.DEBUG

        setup_logging(verbose=False)
        assert logging.getLogger("wallarm_client").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING
    finally:
        for lg, level in zip(loggers, saved):
            lg.setLevel(level)
