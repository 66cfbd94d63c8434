"""HTTP transport executing request descriptors."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from time import perf_counter
from typing import Protocol

import httpx

from network_mashup.errors import TransportError
from network_mashup.router import CACHE_POLICY_RELOAD_IGNORING_LOCAL, RequestDescriptor

logger = logging.getLogger(__name__)

NO_CACHE_HEADERS = {"Cache-Control": "no-cache", "Pragma": "no-cache"}


@dataclass(frozen=True)
class TransportResponse:
    """Body and metadata of a completed 2xx response."""

    status_code: int
    body: bytes
    headers: dict[str, str]
    duration_ms: int = 0
    bytes_received: int | None = None

    @property
    def content_length(self) -> int | None:
        raw_value = self.headers.get("content-length")
        if raw_value is None:
            return None
        try:
            return int(raw_value)
        except ValueError:
            return None

    @property
    def received_length(self) -> int:
        """Bytes received on the wire, before any content decoding."""
        if self.bytes_received is not None:
            return self.bytes_received
        return len(self.body)


class Transport(Protocol):
    def send(self, request: RequestDescriptor) -> TransportResponse: ...

    def close(self) -> None: ...


def request_headers(request: RequestDescriptor) -> dict[str, str]:
    headers: dict[str, str] = {}
    if request.cache_policy == CACHE_POLICY_RELOAD_IGNORING_LOCAL:
        headers.update(NO_CACHE_HEADERS)
    headers.update(request.headers)
    return headers


class HttpxTransport:
    """Thin transport around one shared ``httpx.Client``."""

    def __init__(self, *, transport: httpx.BaseTransport | None = None) -> None:
        limits = httpx.Limits(max_connections=8, max_keepalive_connections=4)
        self._http = httpx.Client(limits=limits, follow_redirects=True, transport=transport)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> HttpxTransport:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def send(self, request: RequestDescriptor) -> TransportResponse:
        logger.debug("%s %s", request.method, request.url)
        started = perf_counter()
        try:
            response = self._http.request(
                request.method,
                request.url,
                headers=request_headers(request),
                content=request.body,
                timeout=request.timeout_s,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(
                f"{request.method} {request.url} failed with transport error: {exc}"
            ) from exc
        if not response.is_success:
            raise TransportError(
                f"{request.method} {request.url} failed with status {response.status_code}",
                status_code=response.status_code,
            )
        duration_ms = int((perf_counter() - started) * 1000)
        return TransportResponse(
            status_code=response.status_code,
            body=response.content,
            headers={key.lower(): value for key, value in response.headers.items()},
            duration_ms=duration_ms,
            bytes_received=response.num_bytes_downloaded,
        )
