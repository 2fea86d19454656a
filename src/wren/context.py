"""Per-request context.

Provides:
- ``Context``: path parameters, the inbound ``Request``, the outbound
  ``Response``, and a free-form store for middleware to pass values inward.
- ``context_var`` / ``get_context()``: the current ``Context`` for this task.

The dispatcher creates one ``Context`` per matched request and drops it
once the response is sent. It is never shared between requests, so none
of its state needs locking.
"""

from __future__ import annotations

import json as json_module
import time
from contextvars import ContextVar
from typing import Any

from wren.errors import HTTPError, UnsupportedMediaType
from wren.extraction import extract_dataclass
from wren.http.request import Request
from wren.http.response import APPLICATION_JSON, TEXT_HTML, TEXT_PLAIN, Response


class Context:
    """State for one request as it moves through a route's middleware chain.

    Request data::

        ctx.param("id")              # path parameter
        ctx.query("page")            # query string
        ctx.header("Authorization")
        await ctx.form("email")      # URL-encoded body field
        data = await ctx.bind(SignupForm)

    Response (each call replaces ``ctx.response``)::

        ctx.text(200, "ok")
        ctx.json(201, {"id": 7})
        ctx.html(200, "<h1>hi</h1>")

    Inter-middleware store::

        ctx.set("user", user)
        ctx.get("user")
    """

    __slots__ = ("deadline", "max_content_length", "params", "request", "response", "store")

    def __init__(
        self,
        request: Request,
        params: dict[str, str] | None = None,
        *,
        timeout: float | None = None,
        max_content_length: int | None = None,
    ) -> None:
        self.request = request
        self.params: dict[str, str] = dict(params or {})
        self.store: dict[str, Any] = {}
        self.response: Response | None = None
        self.deadline: float | None = time.monotonic() + timeout if timeout is not None else None
        self.max_content_length = max_content_length

    def __repr__(self) -> str:
        return f"<Context {self.request.method} {self.request.path} params={self.params!r}>"

    # -- Request data --

    def param(self, key: str) -> str:
        """Return a path parameter, or ``""`` if the route has no such parameter."""
        return self.params.get(key, "")

    def query(self, key: str) -> str:
        """Return the first query string value for *key*, or ``""``."""
        return self.request.query.get(key) or ""

    def header(self, key: str) -> str:
        """Return the first value of request header *key*, or ``""``."""
        return self.request.headers.get(key) or ""

    async def body(self) -> bytes:
        """Read the request body, enforcing ``max_content_length``."""
        limit = self.max_content_length
        declared = self.request.content_length
        if limit is not None and declared is not None and declared > limit:
            raise HTTPError(413, "request body too large")
        return await self.request.body(max_size=limit)

    async def form(self, key: str) -> str:
        """Return a field of a URL-encoded request body, or ``""``."""
        await self.body()
        return (await self.request.form()).get(key, "")

    async def bind(self, cls: type | None = None) -> Any:
        """Decode the request body by its Content-Type.

        ``application/json`` is parsed as JSON and
        ``application/x-www-form-urlencoded`` as a form. With *cls* (a
        dataclass) the decoded mapping populates a new instance; without
        it the decoded value is returned as is.

        Raises ``UnsupportedMediaType`` for any other content type and
        ``HTTPError(400)`` for an unparseable JSON body.
        """
        content_type = self.request.content_type or ""
        raw = await self.body()
        if "application/json" in content_type:
            try:
                data = json_module.loads(raw)
            except ValueError as exc:
                raise HTTPError(400, f"invalid JSON body: {exc}") from exc
        elif "application/x-www-form-urlencoded" in content_type:
            data = await self.request.form()
        else:
            raise UnsupportedMediaType(self.request.content_type)

        if cls is None:
            return data
        if not isinstance(data, dict):
            raise HTTPError(400, f"cannot bind {type(data).__name__} body to {cls.__name__}")
        return extract_dataclass(cls, data)

    # -- Response --

    def text(self, status: int, text: str) -> None:
        self.response = Response(body=text, status=status, content_type=TEXT_PLAIN)

    def json(self, status: int, obj: Any) -> None:
        """Serialize *obj* as the JSON response body."""
        self.response = Response(
            body=json_module.dumps(obj),
            status=status,
            content_type=APPLICATION_JSON,
        )

    def html(self, status: int, html: str) -> None:
        self.response = Response(body=html, status=status, content_type=TEXT_HTML)

    # -- Store --

    def set(self, key: str, value: Any) -> None:
        self.store[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self.store.get(key, default)

    # -- Deadline --

    def time_remaining(self) -> float | None:
        """Seconds until the advisory deadline, or ``None`` without one.

        Handlers doing long work may check this; the dispatcher never
        cancels a handler when it runs out.
        """
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())


# -- Current context --

context_var: ContextVar[Context] = ContextVar("wren_context")
"""The context of the request being handled. Set by the dispatcher."""


def get_context() -> Context:
    """Return the current request's ``Context``.

    Raises ``LookupError`` if called outside a request.
    """
    return context_var.get()
