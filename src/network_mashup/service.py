"""Feed and echo operations composed from the router, transport and mapper."""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, NamedTuple, TypeVar

from network_mashup.errors import FeedDecodeError, TransportError
from network_mashup.image_cache import ImageCache
from network_mashup.mapper import AppRecord, decode_json, feed_author_name, map_feed
from network_mashup.multipart import build_multipart, generate_boundary
from network_mashup.router import (
    DEFAULT_ENDPOINTS,
    CallDescriptor,
    CreatePost,
    Endpoints,
    FetchTopFree,
    FetchTopPaid,
    RequestDescriptor,
    build_request,
    image_request,
)
from network_mashup.transport import Transport, TransportResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FetchResult(NamedTuple):
    success: bool
    records: list[AppRecord]


class AuthorResult(NamedTuple):
    success: bool
    name: str | None


class ImageResult(NamedTuple):
    success: bool
    body: bytes


FetchCallback = Callable[[bool, list[AppRecord]], None]
SuccessCallback = Callable[[bool], None]


class FeedService:
    """Asynchronous client for the top-apps feeds and the echo endpoint.

    Requests run on a worker pool and never block the caller. Callbacks are
    delivered on a single completion thread, one at a time, in completion
    order. There is no cancellation and no ordering between in-flight calls.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        endpoints: Endpoints = DEFAULT_ENDPOINTS,
        image_cache: ImageCache | None = None,
        max_workers: int = 4,
    ) -> None:
        self._transport = transport
        self.endpoints = endpoints
        self.image_cache = image_cache if image_cache is not None else ImageCache()
        self._io = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="mashup-io")
        self._completion = ThreadPoolExecutor(max_workers=1, thread_name_prefix="mashup-main")

    def close(self) -> None:
        self._io.shutdown(wait=True)
        self._completion.shutdown(wait=True)
        self._transport.close()

    def __enter__(self) -> FeedService:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _submit(self, work: Callable[[], T], deliver: Callable[[T], None] | None) -> Future[T]:
        outer: Future[T] = Future()

        def _complete(result: T) -> None:
            try:
                if deliver is not None:
                    deliver(result)
            except Exception as exc:
                outer.set_exception(exc)
                return
            outer.set_result(result)

        def _run() -> None:
            try:
                result = work()
            except Exception as exc:
                outer.set_exception(exc)
                return
            self._completion.submit(_complete, result)

        self._io.submit(_run)
        return outer

    def _send(self, request: RequestDescriptor) -> TransportResponse:
        return self._transport.send(request)

    def _fetch(self, call: CallDescriptor) -> FetchResult:
        request = build_request(call, self.endpoints)
        try:
            response = self._send(request)
            payload = decode_json(response.body)
        except (TransportError, FeedDecodeError) as exc:
            logger.warning("%s failed: %s", type(call).__name__, exc)
            return FetchResult(False, [])
        records = map_feed(payload)
        logger.debug(
            "%s mapped %d records in %d ms",
            type(call).__name__,
            len(records),
            response.duration_ms,
        )
        return FetchResult(True, records)

    def fetch_top_free(self, callback: FetchCallback | None = None) -> Future[FetchResult]:
        """Fetch the top free applications feed."""
        deliver = None if callback is None else (lambda result: callback(*result))
        return self._submit(lambda: self._fetch(FetchTopFree()), deliver)

    def fetch_top_paid(self, callback: FetchCallback | None = None) -> Future[FetchResult]:
        """Fetch the top paid applications feed."""
        deliver = None if callback is None else (lambda result: callback(*result))
        return self._submit(lambda: self._fetch(FetchTopPaid()), deliver)

    def fetch_feed_author(
        self,
        call: FetchTopFree | FetchTopPaid,
        callback: Callable[[bool, str | None], None] | None = None,
    ) -> Future[AuthorResult]:
        """Fetch a feed and extract only its author name."""

        def work() -> AuthorResult:
            try:
                response = self._send(build_request(call, self.endpoints))
                payload = decode_json(response.body)
            except (TransportError, FeedDecodeError) as exc:
                logger.warning("author lookup failed: %s", exc)
                return AuthorResult(False, None)
            return AuthorResult(True, feed_author_name(payload))

        deliver = None if callback is None else (lambda result: callback(*result))
        return self._submit(work, deliver)

    def _post(self, call: CallDescriptor) -> bool:
        request = build_request(call, self.endpoints)
        try:
            response = self._send(request)
        except TransportError as exc:
            logger.warning("%s failed: %s", type(call).__name__, exc)
            return False
        logger.debug(
            "%s response: %s", type(call).__name__, response.body.decode("utf-8", "replace")
        )
        return True

    def create_post(
        self, params: dict[str, Any], callback: SuccessCallback | None = None
    ) -> Future[bool]:
        """POST ``params`` as JSON to the echo endpoint."""
        call = CreatePost(params=params)
        return self._submit(lambda: self._post(call), callback)

    def create_multipart(
        self,
        params: dict[str, Any],
        data: bytes,
        *,
        mime_type: str,
        field_name: str,
        file_name: str,
        boundary: str | None = None,
        callback: SuccessCallback | None = None,
    ) -> Future[bool]:
        """POST a JSON part plus one binary part as multipart/form-data."""
        payload = build_multipart(
            params,
            data,
            mime_type=mime_type,
            field_name=field_name,
            file_name=file_name,
            boundary=boundary or generate_boundary(),
        )
        call = payload.as_call()
        return self._submit(lambda: self._post(call), callback)

    def fetch_image(
        self, url: str, callback: Callable[[bool, bytes], None] | None = None
    ) -> Future[ImageResult]:
        """Download an icon, caching it when its length matches Content-Length."""

        def work() -> ImageResult:
            try:
                response = self._send(image_request(url))
            except TransportError as exc:
                logger.warning("image fetch failed: %s", exc)
                return ImageResult(False, b"")
            self.image_cache.store(
                url,
                response.body,
                response.content_length,
                received_length=response.received_length,
            )
            return ImageResult(True, response.body)

        deliver = None if callback is None else (lambda result: callback(*result))
        return self._submit(work, deliver)
