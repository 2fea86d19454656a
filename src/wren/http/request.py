"""Immutable HTTP request.

Frozen metadata with async body access. Path parameters live on the
per-request ``Context``, not here: the request is exactly what arrived.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qsl

from wren._internal.asgi import Receive, Scope
from wren.errors import HTTPError
from wren.http.headers import Headers, QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers, etc.) is frozen at creation.
    Body is accessed asynchronously via ``.body()``, ``.json()``, ``.form()``.
    """

    method: str
    path: str
    headers: Headers
    query: QueryParams
    http_version: str
    server: tuple[str, int] | None
    client: tuple[str, int] | None

    # Private: ASGI receive callable for body streaming
    _receive: Receive

    # Private: mutable cache for the body and parsed form
    # (dict contents are mutable even though the field reference is frozen)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def content_length(self) -> int | None:
        """The Content-Length header as int."""
        value = self.headers.get("content-length")
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None

    @property
    def remote_addr(self) -> str | None:
        """Host of the connected client as reported by the ASGI server."""
        if self.client:
            return self.client[0]
        return None

    # -- Async body access --

    async def body(self, *, max_size: int | None = None) -> bytes:
        """Read the full request body.

        The ASGI receive channel is consumed once; later calls return
        the cached bytes. With *max_size*, reading stops with
        ``HTTPError(413)`` as soon as the chunks received so far exceed it,
        so an oversized chunked upload is never buffered whole.
        """
        if "_body" not in self._cache:
            chunks: list[bytes] = []
            received = 0
            async for chunk in self.stream():
                received += len(chunk)
                if max_size is not None and received > max_size:
                    raise HTTPError(413, "request body too large")
                chunks.append(chunk)
            self._cache["_body"] = b"".join(chunks)
        body = self._cache["_body"]
        if max_size is not None and len(body) > max_size:
            raise HTTPError(413, "request body too large")
        return body

    async def stream(self) -> AsyncIterator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            chunk = message.get("body", b"")
            if chunk:
                yield chunk
            if not message.get("more_body", False):
                break

    async def json(self) -> Any:
        """Parse the body as JSON."""
        return json_module.loads(await self.body())

    async def form(self) -> dict[str, str]:
        """Parse a URL-encoded body into a dict (first value wins per key).

        Raises ``HTTPError(400)`` if the body is not valid UTF-8.
        """
        if "_form" not in self._cache:
            try:
                raw = (await self.body()).decode("utf-8")
            except UnicodeDecodeError as exc:
                raise HTTPError(400, f"invalid form body: {exc}") from exc
            result: dict[str, str] = {}
            for key, value in parse_qsl(raw, keep_blank_values=True):
                result.setdefault(key, value)
            self._cache["_form"] = result
        return self._cache["_form"]

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"].upper(),
            path=scope["path"],
            headers=Headers.from_raw(scope.get("headers", ())),
            query=QueryParams(scope.get("query_string", b"")),
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            _receive=receive,
        )
