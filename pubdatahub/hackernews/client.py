"""Client for the public Hacker News API."""

from __future__ import annotations

import json
import threading
import urllib.error
import urllib.request
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pubdatahub.hackernews.ratelimiter import RateLimiter, RateLimiterCancelled

BASE_URL = "https://hacker-news.firebaseio.com/v0"
DEFAULT_TIMEOUT = 30.0

_INT_FIELDS = ("id", "time", "parent", "score", "descendants")
_STR_FIELDS = ("type", "by", "text", "url", "title")
_BOOL_FIELDS = ("dead", "deleted")


class ClientError(Exception):
    """Raised when the API cannot be reached or returns unusable data."""


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class Item:
    """A story, comment, job, poll or poll option."""

    id: int = 0
    type: str = ""
    by: str = ""
    time: int = 0
    text: str = ""
    dead: bool = False
    deleted: bool = False
    parent: int = 0
    kids: list[int] = field(default_factory=list)
    url: str = ""
    score: int = 0
    title: str = ""
    descendants: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Item:
        """Build an item from decoded API JSON; unknown keys are ignored."""
        if not isinstance(data, Mapping):
            raise TypeError("item data must be a JSON object")
        values: dict[str, Any] = {}
        checks = (
            (_INT_FIELDS, _is_int, "an integer"),
            (_STR_FIELDS, lambda v: isinstance(v, str), "a string"),
            (_BOOL_FIELDS, lambda v: isinstance(v, bool), "a boolean"),
        )
        for names, valid, kind in checks:
            for name in names:
                value = data.get(name)
                if value is None:
                    continue
                if not valid(value):
                    raise ValueError(f"field {name!r} must be {kind}")
                values[name] = value
        kids = data.get("kids")
        if kids is not None:
            if not isinstance(kids, list) or not all(_is_int(kid) for kid in kids):
                raise ValueError("field 'kids' must be a list of integers")
            values["kids"] = list(kids)
        return cls(**values)


class Client:
    """Rate limited HTTP client for the Hacker News API."""

    def __init__(
        self,
        base_url: str = BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._owns_limiter = rate_limiter is None
        self._rate_limiter = rate_limiter if rate_limiter is not None else RateLimiter(10, 1.0)

    def _fetch_json(self, url: str, cancel: threading.Event | None, subject: str) -> Any:
        try:
            self._rate_limiter.wait(cancel)
        except RateLimiterCancelled as exc:
            raise ClientError(f"rate limiter error: {exc}") from exc

        request = urllib.request.Request(url, headers={"Accept": "application/json"})
        try:
            with urllib.request.urlopen(request, timeout=self._timeout) as response:
                status = response.status
                payload = response.read()
        except urllib.error.HTTPError as exc:
            raise ClientError(f"API returned status {exc.code}{subject}") from exc
        except (urllib.error.URLError, OSError) as exc:
            raise ClientError(f"failed to fetch{subject}: {exc}") from exc

        if status != 200:
            raise ClientError(f"API returned status {status}{subject}")
        try:
            return json.loads(payload)
        except ValueError as exc:
            raise ClientError(f"failed to decode response{subject}: {exc}") from exc

    def get_max_item_id(self, cancel: threading.Event | None = None) -> int:
        """Return the largest item id currently known to the API."""
        value = self._fetch_json(f"{self._base_url}/maxitem.json", cancel, " for max item ID")
        if not _is_int(value):
            raise ClientError(f"failed to decode max item ID: unexpected value {value!r}")
        return value

    def get_item(self, item_id: int, cancel: threading.Event | None = None) -> Item | None:
        """Fetch one item; None when the API reports it as missing."""
        data = self._fetch_json(
            f"{self._base_url}/item/{item_id}.json", cancel, f" for item {item_id}"
        )
        if data is None:
            return None
        try:
            return Item.from_dict(data)
        except (TypeError, ValueError) as exc:
            raise ClientError(f"failed to decode item {item_id}: {exc}") from exc

    def get_items_batch(
        self, start_id: int, end_id: int, cancel: threading.Event | None = None
    ) -> list[Item]:
        """Fetch every existing item with an id from ``start_id`` to ``end_id`` inclusive."""
        if start_id > end_id:
            raise ClientError(f"start_id ({start_id}) must be <= end_id ({end_id})")
        items: list[Item] = []
        for item_id in range(start_id, end_id + 1):
            if cancel is not None and cancel.is_set():
                raise ClientError("request cancelled")
            try:
                item = self.get_item(item_id, cancel)
            except ClientError as exc:
                raise ClientError(f"failed to get item {item_id}: {exc}") from exc
            if item is not None:
                items.append(item)
        return items

    def close(self) -> None:
        """Release the rate limiter if this client created it."""
        if self._owns_limiter:
            self._rate_limiter.close()