from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter

from .config import ClientConfig
from .error_mapper import map_error
from .exceptions import TransportError
from .tracing import TRACE_HEADER, TraceContext

logger = logging.getLogger(__name__)

JsonPayload = dict[str, Any] | list[Any] | None


@dataclass
class LastOperation:
    module: str
    operation: str
    duration_ms: int
    result: str
    trace_id: str | None


@dataclass
class HttpClient:
    config: ClientConfig
    trace: TraceContext | None = None
    session: requests.Session | None = None
    last_operation: LastOperation | None = None

    def __post_init__(self) -> None:
        if self.session is None:
            self.session = requests.Session()
            adapter = HTTPAdapter(
                pool_connections=self.config.max_connections,
                pool_maxsize=self.config.max_connections,
            )
            self.session.mount("http://", adapter)
            self.session.mount("https://", adapter)

    def _build_url(self, path: str) -> str:
        base = self.config.api_base_url.rstrip("/") + "/"
        return urljoin(base, path.lstrip("/"))

    def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        retry_mutation: bool = False,
        module: str = "unknown",
        operation: str = "unknown",
    ) -> JsonPayload:
        if self.session is None:
            raise RuntimeError("HTTP session not initialized")
        request_headers = {"Accept": "application/json"}
        if headers:
            request_headers.update(headers)
        trace_context = self.trace or TraceContext()
        request_headers[TRACE_HEADER] = trace_context.ensure()

        normalized_method = method.upper()
        url = self._build_url(path)
        # Mutations (lot commits) go out exactly once unless the caller opts in.
        can_retry = normalized_method in {"GET", "HEAD"} or retry_mutation
        attempts = self.config.retries + 1 if can_retry else 1

        started = time.monotonic()
        response: requests.Response | None = None
        for attempt in range(attempts):
            try:
                response = self.session.request(
                    method=normalized_method,
                    url=url,
                    headers=request_headers,
                    json=json_body,
                    params=params,
                    timeout=self.config.timeout_for(normalized_method),
                    verify=self.config.verify_ssl,
                )
            except requests.RequestException as exc:
                logger.warning(
                    "http_transport_error",
                    extra={"url": url, "attempt": attempt + 1, "error": type(exc).__name__},
                )
                if attempt >= attempts - 1:
                    self._record_operation(module, operation, started, "error", trace_context.trace_id)
                    raise TransportError(
                        code="TRANSPORT_ERROR",
                        message=str(exc) or "Network error",
                        details={"type": type(exc).__name__},
                        trace_id=trace_context.trace_id,
                        status_code=0,
                        raw_payload=None,
                    ) from exc
            else:
                if response.status_code < 500 or attempt >= attempts - 1:
                    break
            time.sleep(self.config.retry_backoff_seconds * (2**attempt))

        if response is None:
            raise RuntimeError("HTTP request finished without a response")

        trace_context.update_from_headers(response.headers)
        if response.ok:
            self._record_operation(module, operation, started, "success", trace_context.trace_id)
            if not response.content:
                return None
            try:
                return response.json()
            except ValueError:
                # A 2xx with a non-JSON body still counts as success.
                return None

        try:
            payload = response.json()
        except ValueError:
            payload = {"message": response.text}
        if not isinstance(payload, dict):
            payload = {"message": json.dumps(payload)}
        trace_context.update_from_payload(payload)
        self._record_operation(module, operation, started, "error", trace_context.trace_id)
        raise map_error(response.status_code, payload, trace_context.trace_id)

    def _record_operation(self, module: str, operation: str, started: float, result: str, trace_id: str | None) -> None:
        self.last_operation = LastOperation(
            module=module,
            operation=operation,
            duration_ms=int((time.monotonic() - started) * 1000),
            result=result,
            trace_id=trace_id,
        )
