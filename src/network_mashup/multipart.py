"""multipart/form-data payloads for the echo endpoint."""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from typing import Any

from network_mashup.router import CreateMultipart

CRLF = b"\r\n"


@dataclass(frozen=True)
class MultipartPayload:
    """Serialized multipart body plus the boundary it was built with."""

    boundary: str
    body: bytes

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self.boundary}"

    def as_call(self) -> CreateMultipart:
        return CreateMultipart(content_type=self.content_type, payload=self.body)


def generate_boundary() -> str:
    """Return a fresh boundary token."""
    return f"Boundary-{str(uuid.uuid4()).upper()}"


def build_multipart(
    params: dict[str, Any],
    data: bytes,
    *,
    mime_type: str,
    field_name: str,
    file_name: str,
    boundary: str,
) -> MultipartPayload:
    """Serialize a JSON part followed by one binary file part.

    The boundary is written verbatim; neither the JSON text nor ``data`` is
    checked for an embedded occurrence of it.
    """
    if not boundary:
        raise ValueError("multipart boundary must be non-empty")
    delimiter = f"--{boundary}".encode()
    json_part = json.dumps(params, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    file_disposition = (
        f'Content-Disposition: form-data; name="{field_name}"; filename="{file_name}"'
    ).encode()

    lines = [
        delimiter,
        b"Content-Disposition: form-data;",
        b"Content-Type: application/json",
        b"",
        json_part,
        delimiter,
        file_disposition,
        f"Content-Type: {mime_type}".encode(),
        b"",
        data,
        delimiter + b"--",
    ]
    body = CRLF.join(lines) + CRLF
    return MultipartPayload(boundary=boundary, body=body)
