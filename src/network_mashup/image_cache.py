"""In-memory cache for downloaded application icons."""

from __future__ import annotations

import logging
import threading

logger = logging.getLogger(__name__)


class ImageCache:
    """Icon bytes keyed by request URL.

    Entries are only written when the received length matches the declared
    Content-Length, so truncated downloads are never cached. For encoded
    responses the caller passes the on-the-wire byte count as
    ``received_length``, since Content-Length describes the encoded body.
    """

    def __init__(self) -> None:
        self._entries: dict[str, bytes] = {}
        self._lock = threading.Lock()

    def store(
        self,
        url: str,
        body: bytes,
        content_length: int | None,
        *,
        received_length: int | None = None,
    ) -> bool:
        received = len(body) if received_length is None else received_length
        if content_length is None or received != content_length:
            logger.debug(
                "not caching %s: received %d bytes, declared %s", url, received, content_length
            )
            return False
        with self._lock:
            self._entries[url] = body
        logger.info("cached image %s (%d bytes)", url, len(body))
        return True

    def get(self, url: str) -> bytes | None:
        with self._lock:
            return self._entries.get(url)

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
