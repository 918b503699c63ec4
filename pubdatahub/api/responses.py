"""Plain HTTP response values produced by the API handlers."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Response:
    """Status, headers and body of an HTTP response."""

    status: int
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""


def json_response(payload: Any, status: int = 200) -> Response:
    """Encode ``payload`` as JSON followed by a newline."""
    body = (json.dumps(payload) + "\n").encode("utf-8")
    return Response(status=status, headers={"Content-Type": "application/json"}, body=body)


def text_response(text: str, status: int = 200) -> Response:
    """Return ``text`` as a plain text body."""
    return Response(status=status, headers={"Content-Type": "text/plain"}, body=text.encode("utf-8"))


def error_response(message: str, status: int) -> Response:
    """Return an error message as a plain text body ending in a newline."""
    return Response(
        status=status,
        headers={
            "Content-Type": "text/plain; charset=utf-8",
            "X-Content-Type-Options": "nosniff",
        },
        body=(message + "\n").encode("utf-8"),
    )