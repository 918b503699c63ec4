"""Data source listing and data browsing endpoints."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qs

from pubdatahub.api.responses import Response, error_response, json_response

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20

_INTEGER = re.compile(r"[+-]?\d+")


@dataclass(frozen=True)
class SourceInfo:
    """Name and description of an available data source."""

    name: str
    description: str


@dataclass(frozen=True)
class DataSourceItem:
    """One item shown when browsing a data source."""

    id: str
    title: str = ""
    url: str = ""
    author: str = ""
    points: int = 0
    comment_count: int = 0
    timestamp: str = ""
    type: str = ""

    def to_dict(self) -> dict[str, Any]:
        """JSON representation; empty fields other than the id are left out."""
        data: dict[str, Any] = {"id": self.id}
        for key in ("title", "url", "author", "points", "comment_count", "timestamp", "type"):
            value = getattr(self, key)
            if value:
                data[key] = value
        return data


@dataclass(frozen=True)
class DataPage:
    """One page of items with the pagination figures."""

    data: list[DataSourceItem] = field(default_factory=list)
    total_items: int = 0
    total_pages: int = 0
    current_page: int = 0
    items_per_page: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": [item.to_dict() for item in self.data],
            "total_items": self.total_items,
            "total_pages": self.total_pages,
            "current_page": self.current_page,
            "items_per_page": self.items_per_page,
        }


SOURCES = (
    SourceInfo(
        name="hackernews",
        description="Hacker News stories, comments, and users from the official API",
    ),
)

_SAMPLE_ROWS = (
    ("user123", 42, "2025-08-12T05:30:00Z"),
    ("user456", 28, "2025-08-12T06:15:00Z"),
    ("user789", 15, "2025-08-12T07:45:00Z"),
    ("user101", 67, "2025-08-12T08:20:00Z"),
    ("user202", 33, "2025-08-12T09:10:00Z"),
    ("user303", 54, "2025-08-12T10:30:00Z"),
    ("user404", 21, "2025-08-12T11:45:00Z"),
    ("user505", 78, "2025-08-12T12:20:00Z"),
    ("user606", 45, "2025-08-12T13:15:00Z"),
    ("user707", 39, "2025-08-12T14:30:00Z"),
    ("user808", 52, "2025-08-12T15:45:00Z"),
    ("user909", 27, "2025-08-12T16:20:00Z"),
    ("user111", 63, "2025-08-12T17:10:00Z"),
    ("user222", 38, "2025-08-12T18:30:00Z"),
    ("user333", 41, "2025-08-12T19:45:00Z"),
    ("user444", 29, "2025-08-12T20:15:00Z"),
    ("user555", 56, "2025-08-12T21:30:00Z"),
    ("user666", 34, "2025-08-12T22:45:00Z"),
    ("user777", 68, "2025-08-12T23:20:00Z"),
    ("user888", 47, "2025-08-13T00:10:00Z"),
)

SAMPLE_ITEMS = tuple(
    DataSourceItem(
        id=str(number),
        title=f"Example Story Title {number}",
        author=author,
        points=points,
        timestamp=timestamp,
        type="story",
    )
    for number, (author, points, timestamp) in enumerate(_SAMPLE_ROWS, start=1)
)


def paginate(
    items: Sequence[DataSourceItem], page: int = DEFAULT_PAGE, limit: int = DEFAULT_LIMIT
) -> DataPage:
    """Return page ``page`` of ``items``; a page past the end gives the last page."""
    if page < 1:
        raise ValueError("page must be at least 1")
    if limit < 1:
        raise ValueError("limit must be at least 1")
    items = list(items)
    total = len(items)
    total_pages = -(-total // limit)
    current = min(page, total_pages)
    start = max((current - 1) * limit, 0)
    end = min(start + limit, total)
    return DataPage(
        data=items[start:end],
        total_items=total,
        total_pages=total_pages,
        current_page=current,
        items_per_page=limit,
    )


def _positive_param(values: dict[str, list[str]], name: str, default: int) -> int:
    raw = values.get(name, [""])[0]
    if _INTEGER.fullmatch(raw):
        number = int(raw)
        if number > 0:
            return number
    return default


def handle_list_sources() -> Response:
    """GET /api/sources"""
    return json_response([{"name": s.name, "description": s.description} for s in SOURCES])


def handle_get_data(path: str, query: str = "") -> Response:
    """GET /api/sources/{source_name}/data with optional ``page`` and ``limit``."""
    remainder = path.removeprefix("/api/sources/")
    source_name = remainder.split("/", 1)[0]
    if source_name != "hackernews":
        return error_response("Unsupported data source", 404)

    values = parse_qs(query, keep_blank_values=True)
    page = _positive_param(values, "page", DEFAULT_PAGE)
    limit = _positive_param(values, "limit", DEFAULT_LIMIT)
    return json_response(paginate(SAMPLE_ITEMS, page, limit).to_dict())