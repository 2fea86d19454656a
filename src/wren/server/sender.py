"""ASGI response encoding: translates a wren Response into ASGI messages."""

from typing import Any

from wren.http.response import Response


def _body_allowed(status: int, method: str) -> bool:
    """Whether the response may carry a body."""
    # RFC: 1xx, 204, and 304 responses, and responses to HEAD, have no body.
    return method != "HEAD" and not (100 <= status < 200 or status in {204, 304})


def build_messages(response: Response, *, method: str = "GET") -> tuple[dict[str, Any], ...]:
    """Encode *response* as an ``http.response.start`` and a body message.

    Raises ``UnicodeEncodeError`` if a header name or value (including
    the content type) is not latin-1 encodable.
    """
    body = response.body_bytes if _body_allowed(response.status, method) else b""

    raw_headers: list[tuple[bytes, bytes]] = [
        (b"content-type", response.content_type.encode("latin-1")),
    ]
    raw_headers.extend(
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in response.headers
    )
    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    return (
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        },
        {"type": "http.response.body", "body": body},
    )

