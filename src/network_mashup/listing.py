"""Shared list of records bound to the feed view."""

from __future__ import annotations

import threading

from network_mashup.mapper import AppRecord


class FeedListing:
    """The current result list shown to the user.

    Every completed fetch replaces the list wholesale. Concurrent fetches are
    not ordered, so the last one to complete wins.
    """

    def __init__(self) -> None:
        self._records: list[AppRecord] = []
        self._lock = threading.Lock()
        self.reload_count = 0

    def apply(self, success: bool, records: list[AppRecord]) -> None:
        with self._lock:
            self._records = list(records)
            self.reload_count += 1

    @property
    def records(self) -> list[AppRecord]:
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def row(self, index: int) -> AppRecord:
        with self._lock:
            return self._records[index]

    def render_lines(self) -> list[str]:
        lines = []
        for index, record in enumerate(self.records, start=1):
            lines.append(f"{index}\t{record.name or ''}\t{record.image_url or ''}")
        return lines
