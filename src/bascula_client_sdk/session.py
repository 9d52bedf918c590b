from __future__ import annotations

from dataclasses import dataclass

import requests

from .clients.catalog_client import CatalogClient
from .clients.lots_client import LotsClient
from .config import ClientConfig
from .http_client import HttpClient
from .tracing import TraceContext


@dataclass
class ApiSession:
    """Holds what every client shares: config, bearer token, station id, trace.

    The token is handed in by whoever authenticated the operator; this SDK
    never logs in on its own.
    """

    config: ClientConfig
    token: str | None = None
    station_id: str | None = None
    trace: TraceContext | None = None
    http_session: requests.Session | None = None

    def __post_init__(self) -> None:
        self.trace = self.trace or TraceContext()

    def _http(self) -> HttpClient:
        return HttpClient(config=self.config, trace=self.trace, session=self.http_session)

    def catalog_client(self) -> CatalogClient:
        return CatalogClient(http=self._http(), access_token=self.token, station_id=self.station_id)

    def lots_client(self) -> LotsClient:
        return LotsClient(http=self._http(), access_token=self.token, station_id=self.station_id)

    def establish(self, token: str) -> None:
        self.token = token

    def clear(self) -> None:
        self.token = None
