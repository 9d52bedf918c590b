"""Connection settings for the scale backend (the Laravel app serving ``/api``)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable

from dotenv import load_dotenv

DEFAULT_SITE = "planta"
READ_METHODS = frozenset({"GET", "HEAD"})


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    api_base_url: str
    site: str = DEFAULT_SITE
    connect_timeout_seconds: float = 3.0
    read_timeout_seconds: float = 10.0
    commit_timeout_seconds: float = 30.0
    retries: int = 2
    retry_backoff_seconds: float = 0.3
    max_connections: int = 4
    verify_ssl: bool = True

    def timeout_for(self, method: str) -> tuple[float, float]:
        # guardar-lote inserts one row per record before answering.
        if method.upper() in READ_METHODS:
            return (self.connect_timeout_seconds, self.read_timeout_seconds)
        return (self.connect_timeout_seconds, self.commit_timeout_seconds)


def _number(name: str, default: str, parse: Callable[[str], float], *, above: float | None = None, at_least: float | None = None) -> float:
    raw = (os.getenv(name) or default).strip()
    try:
        value = parse(raw)
    except ValueError as exc:
        raise ConfigError(f"Invalid {name}: expected a number, got {raw!r}") from exc
    if above is not None and value <= above:
        raise ConfigError(f"Invalid {name}: expected > {above:g}, got {raw}")
    if at_least is not None and value < at_least:
        raise ConfigError(f"Invalid {name}: expected >= {at_least:g}, got {raw}")
    return value


def _base_url(site: str) -> str:
    url = (os.getenv(f"BASCULA_API_BASE_URL_{site.upper()}") or os.getenv("BASCULA_API_BASE_URL") or "").strip()
    if not url:
        raise ConfigError("Missing required config values: BASCULA_API_BASE_URL")
    if not url.startswith(("http://", "https://")):
        raise ConfigError(f"Invalid BASCULA_API_BASE_URL: expected an http(s) URL, got {url!r}")
    url = url.rstrip("/")
    # Endpoint paths already carry the /api prefix of the Laravel routes.
    if url.endswith("/api"):
        url = url[: -len("/api")]
    return url


def _flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def load_config(env_file: str | None = None) -> ClientConfig:
    """Read the backend settings of this station.

    ``BASCULA_SITE`` picks a per-site URL (``BASCULA_API_BASE_URL_<SITE>``) so
    one ``.env`` can serve the plant LAN and a test server. Lot commits get
    their own read timeout and are never retried here; only catalog reads are.
    """
    load_dotenv(env_file)

    site = (os.getenv("BASCULA_SITE") or DEFAULT_SITE).strip().lower()
    timeout = _number("BASCULA_TIMEOUT_SECONDS", "10", float, above=0)
    connect = _number("BASCULA_CONNECT_TIMEOUT_SECONDS", str(min(timeout, 3.0)), float, above=0)
    read = _number("BASCULA_READ_TIMEOUT_SECONDS", str(max(timeout, connect)), float, above=0)
    commit = _number("BASCULA_COMMIT_TIMEOUT_SECONDS", str(max(read, 30.0)), float, above=0)
    if commit < read:
        raise ConfigError(f"Invalid BASCULA_COMMIT_TIMEOUT_SECONDS: expected >= read timeout {read:g}, got {commit:g}")

    return ClientConfig(
        api_base_url=_base_url(site),
        site=site,
        connect_timeout_seconds=connect,
        read_timeout_seconds=read,
        commit_timeout_seconds=commit,
        retries=int(_number("BASCULA_RETRIES", "2", int, at_least=0)),
        retry_backoff_seconds=_number("BASCULA_RETRY_BACKOFF_SECONDS", "0.3", float, at_least=0),
        max_connections=int(_number("BASCULA_MAX_CONNECTIONS", "4", int, at_least=1)),
        verify_ssl=_flag("BASCULA_VERIFY_SSL", True),
    )
