"""Map logical feed/echo calls onto concrete HTTP request descriptors."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlencode

TOP_FREE_URL = "https://itunes.apple.com/us/rss/topfreeapplications/limit=10/json"
TOP_PAID_URL = "https://itunes.apple.com/us/rss/toppaidapplications/limit=10/json"
ECHO_URL = "http://httpbin.org/post"

REQUEST_TIMEOUT_S = 60.0
CACHE_POLICY_RELOAD_IGNORING_LOCAL = "reload-ignoring-local-cache"


@dataclass(frozen=True)
class FetchTopFree:
    """Top free applications feed."""


@dataclass(frozen=True)
class FetchTopPaid:
    """Top paid applications feed."""


@dataclass(frozen=True)
class CreatePost:
    """JSON post to the echo endpoint."""

    params: dict[str, Any]


@dataclass(frozen=True)
class CreateMultipart:
    """Pre-built multipart/form-data post to the echo endpoint."""

    content_type: str
    payload: bytes


CallDescriptor = FetchTopFree | FetchTopPaid | CreatePost | CreateMultipart


@dataclass(frozen=True)
class Endpoints:
    """URLs targeted by the router."""

    top_free_url: str = TOP_FREE_URL
    top_paid_url: str = TOP_PAID_URL
    echo_url: str = ECHO_URL


DEFAULT_ENDPOINTS = Endpoints()


@dataclass(frozen=True)
class RequestDescriptor:
    """Fully resolved HTTP request ready for a transport."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None
    cache_policy: str = CACHE_POLICY_RELOAD_IGNORING_LOCAL
    timeout_s: float = REQUEST_TIMEOUT_S


def encode_query(url: str, params: dict[str, Any] | None) -> str:
    """Append URL-encoded parameters to ``url``; unchanged when there are none."""
    if not params:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{urlencode(params, doseq=True)}"


def encode_json_body(params: dict[str, Any]) -> bytes:
    return json.dumps(params, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def build_request(
    call: CallDescriptor, endpoints: Endpoints = DEFAULT_ENDPOINTS
) -> RequestDescriptor:
    """Build the request descriptor for one call.

    The mapping is pure: the same call and endpoints always produce an equal
    descriptor. POST variants carry their own encoding; the feed fetches are
    GETs with (empty) URL-encoded parameters.
    """
    match call:
        case FetchTopFree():
            return RequestDescriptor(method="GET", url=encode_query(endpoints.top_free_url, None))
        case FetchTopPaid():
            return RequestDescriptor(method="GET", url=encode_query(endpoints.top_paid_url, None))
        case CreatePost(params=params):
            return RequestDescriptor(
                method="POST",
                url=endpoints.echo_url,
                headers={"Content-Type": "application/json"},
                body=encode_json_body(params),
            )
        case CreateMultipart(content_type=content_type, payload=payload):
            return RequestDescriptor(
                method="POST",
                url=endpoints.echo_url,
                headers={"Content-Type": content_type},
                body=payload,
            )
        case _:
            raise TypeError(f"unsupported call descriptor: {call!r}")


def image_request(url: str) -> RequestDescriptor:
    """GET descriptor for an application icon download."""
    return RequestDescriptor(method="GET", url=url)
