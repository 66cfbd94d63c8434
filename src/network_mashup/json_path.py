"""Absence-tolerant navigation of decoded JSON values."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

PathSegment = str | int


def lookup(value: Any, *path: PathSegment) -> Any | None:
    """Follow ``path`` into ``value``.

    String segments index mappings and integer segments index lists. Any
    missing key, out-of-range index or type mismatch yields ``None``.
    """
    current = value
    for segment in path:
        if isinstance(segment, str):
            if not isinstance(current, Mapping):
                return None
            current = current.get(segment)
        else:
            if isinstance(current, (str, bytes)) or not isinstance(current, Sequence):
                return None
            if segment < 0 or segment >= len(current):
                return None
            current = current[segment]
        if current is None:
            return None
    return current


def lookup_str(value: Any, *path: PathSegment) -> str | None:
    found = lookup(value, *path)
    return found if isinstance(found, str) else None


def lookup_list(value: Any, *path: PathSegment) -> list[Any]:
    found = lookup(value, *path)
    return list(found) if isinstance(found, list) else []
