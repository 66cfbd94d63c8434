"""Error types for network-mashup."""

from __future__ import annotations


class MashupError(RuntimeError):
    """Base error for feed and echo operations."""


class TransportError(MashupError):
    """Raised when a request fails at the HTTP layer or returns a non-2xx status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class FeedDecodeError(MashupError):
    """Raised when a response body is not valid JSON."""


class CLIError(MashupError):
    """User-facing CLI error."""
