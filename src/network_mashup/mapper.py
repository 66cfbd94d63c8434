"""Project iTunes RSS feed payloads into application records."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from network_mashup.errors import FeedDecodeError
from network_mashup.json_path import lookup, lookup_list, lookup_str

NAME_PATH = ("im:name", "label")
IMAGE_PATH = ("im:image", 0, "label")
ENTRY_PATH = ("feed", "entry")
AUTHOR_PATH = ("feed", "author", "name", "label")


@dataclass(frozen=True)
class AppRecord:
    """Display name and icon URL of one feed entry."""

    name: str | None = None
    image_url: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        return {"name": self.name, "image_url": self.image_url}


def decode_json(body: bytes) -> Any:
    """Decode a response body, raising FeedDecodeError when it is not JSON."""
    try:
        return json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise FeedDecodeError(f"response body is not valid JSON: {exc}") from exc


def app_record_from_entry(entry: Any) -> AppRecord:
    # im:image lists several resolutions; the first one is always used.
    return AppRecord(
        name=lookup_str(entry, *NAME_PATH),
        image_url=lookup_str(entry, *IMAGE_PATH),
    )


def feed_entries(payload: Any) -> list[Any]:
    single = lookup(payload, *ENTRY_PATH)
    if isinstance(single, dict):
        # single-entry feeds collapse the list into one object
        return [single]
    return lookup_list(payload, *ENTRY_PATH)


def map_feed(payload: Any) -> list[AppRecord]:
    """Map a feed envelope to records, preserving entry order."""
    return [app_record_from_entry(entry) for entry in feed_entries(payload)]


def feed_author_name(payload: Any) -> str | None:
    return lookup_str(payload, *AUTHOR_PATH)
