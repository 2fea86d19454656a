"""HTTP response with chainable .with_*() transformation API.

Each transformation returns a new Response. The per-request ``Context``
holds the current one; handlers replace it through ``ctx.text()``,
``ctx.json()`` and ``ctx.html()``.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace

TEXT_PLAIN = "text/plain; charset=utf-8"
APPLICATION_JSON = "application/json"
TEXT_HTML = "text/html; charset=utf-8"


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations."""

    body: str | bytes = ""
    status: int = 200
    content_type: str = TEXT_PLAIN
    headers: tuple[tuple[str, str], ...] = ()

    def with_header(self, name: str, value: str) -> "Response":
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(
        self, headers: Mapping[str, str] | Iterable[tuple[str, str]]
    ) -> "Response":
        """Return a new Response with additional headers.

        Accepts a mapping or (name, value) pairs; pairs keep repeated names.
        """
        pairs = headers.items() if isinstance(headers, Mapping) else headers
        return replace(self, headers=(*self.headers, *pairs))

    def header(self, name: str) -> str | None:
        """Return the first header value for *name* (case-insensitive)."""
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body
