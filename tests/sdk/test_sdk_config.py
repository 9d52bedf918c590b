from __future__ import annotations

import pytest

from bascula_client_sdk import ClientConfig
from bascula_client_sdk.config import ConfigError, load_config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("BASCULA_API_BASE_URL", "BASCULA_API_BASE_URL_PLANTA", "BASCULA_SITE", "BASCULA_COMMIT_TIMEOUT_SECONDS"):
        monkeypatch.delenv(key, raising=False)


def test_load_config_requires_base_url() -> None:
    with pytest.raises(ConfigError, match="BASCULA_API_BASE_URL"):
        load_config()


def test_site_url_wins_and_api_suffix_is_dropped(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BASCULA_SITE", "Planta")
    monkeypatch.setenv("BASCULA_API_BASE_URL", "http://fallback.local")
    monkeypatch.setenv("BASCULA_API_BASE_URL_PLANTA", "http://192.168.1.20:8000/api/")

    cfg = load_config()

    assert cfg.site == "planta"
    assert cfg.api_base_url == "http://192.168.1.20:8000"


def test_base_url_must_be_http(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BASCULA_API_BASE_URL", "192.168.1.20:8000")

    with pytest.raises(ConfigError, match="http"):
        load_config()


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("BASCULA_TIMEOUT_SECONDS", "0"),
        ("BASCULA_CONNECT_TIMEOUT_SECONDS", "0"),
        ("BASCULA_READ_TIMEOUT_SECONDS", "0"),
        ("BASCULA_COMMIT_TIMEOUT_SECONDS", "-5"),
        ("BASCULA_RETRIES", "-1"),
        ("BASCULA_RETRIES", "many"),
        ("BASCULA_RETRY_BACKOFF_SECONDS", "-0.1"),
        ("BASCULA_MAX_CONNECTIONS", "0"),
    ],
)
def test_load_config_rejects_invalid_values(monkeypatch: pytest.MonkeyPatch, key: str, value: str) -> None:
    monkeypatch.setenv("BASCULA_API_BASE_URL", "https://bascula.example.com")
    monkeypatch.setenv(key, value)

    with pytest.raises(ConfigError, match=key):
        load_config()


def test_commit_timeout_cannot_be_shorter_than_reads(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BASCULA_API_BASE_URL", "https://bascula.example.com")
    monkeypatch.setenv("BASCULA_READ_TIMEOUT_SECONDS", "20")
    monkeypatch.setenv("BASCULA_COMMIT_TIMEOUT_SECONDS", "10")

    with pytest.raises(ConfigError, match="BASCULA_COMMIT_TIMEOUT_SECONDS"):
        load_config()


def test_lot_commits_get_the_longer_timeout() -> None:
    cfg = ClientConfig(api_base_url="http://bascula.local", read_timeout_seconds=8, commit_timeout_seconds=40)

    assert cfg.timeout_for("get") == (3.0, 8)
    assert cfg.timeout_for("POST") == (3.0, 40)


def test_verify_ssl_can_be_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BASCULA_API_BASE_URL", "https://bascula.example.com")
    monkeypatch.setenv("BASCULA_VERIFY_SSL", "false")

    assert load_config().verify_ssl is False
