from __future__ import annotations

import json
import threading
from collections.abc import Callable
from typing import Any

import pytest

from network_mashup.errors import TransportError
from network_mashup.router import RequestDescriptor
from network_mashup.transport import TransportResponse

Handler = Callable[[RequestDescriptor], TransportResponse]


def feed_payload(*names: str) -> dict[str, Any]:
    return {
        "feed": {
            "author": {"name": {"label": "iTunes Store"}},
            "entry": [
                {
                    "im:name": {"label": name},
                    "im:image": [
                        {"label": f"https://img.example/{name}/53.png"},
                        {"label": f"https://img.example/{name}/75.png"},
                    ],
                }
                for name in names
            ],
        }
    }


def json_response(payload: Any, status_code: int = 200) -> TransportResponse:
    return TransportResponse(
        status_code=status_code,
        body=json.dumps(payload).encode("utf-8"),
        headers={"content-type": "application/json"},
    )


class FakeTransport:
    """In-process transport routing requests by URL."""

    def __init__(self) -> None:
        self.handlers: dict[str, Handler] = {}
        self.sent: list[RequestDescriptor] = []
        self.closed = False
        self._lock = threading.Lock()

    def on(self, url: str, handler: Handler) -> None:
        self.handlers[url] = handler

    def send(self, request: RequestDescriptor) -> TransportResponse:
        with self._lock:
            self.sent.append(request)
        handler = self.handlers.get(request.url)
        if handler is None:
            raise TransportError(f"no route for {request.url}")
        return handler(request)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()
