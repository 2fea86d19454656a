"""wren exception hierarchy.

Shared across the router, App, dispatcher, and middleware so every module
raises and catches the same types.

Registration-time errors (``ConfigurationError`` and its subclasses) are
raised synchronously from the registering call. Request-time errors are
always converted to a response by the dispatcher.
"""

from dataclasses import dataclass


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when app or route configuration is invalid.

    Indicates a programming mistake by the integrator, so it surfaces
    at startup rather than while serving.
    """


class InvalidPatternError(ConfigurationError):
    """A path pattern could not be compiled into a matcher."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid path pattern {pattern!r}: {reason}")


class InvalidDeclarationError(ConfigurationError):
    """A ``"METHOD /path"`` declaration string is malformed."""

    def __init__(self, declaration: str, reason: str = "") -> None:
        self.declaration = declaration
        detail = reason or "expected 'METHOD /path'"
        super().__init__(f"Invalid route declaration {declaration!r}: {detail}")


@dataclass(frozen=True, slots=True)
class HTTPError(WrenError):
    """An error that maps directly to an HTTP status code.

    Handlers and middleware may raise these; the dispatcher turns them
    into a response with the given status, detail, and headers.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NoRouteMatchedError(HTTPError):
    """404: no registered route matched the request method and path.

    Recovered by the dispatcher; never seen by middleware or handlers.
    """

    def __init__(self, detail: str = "404 page not found") -> None:
        super().__init__(status=404, detail=detail)


class UnsupportedMediaType(HTTPError):  # noqa: N818
    """415: the request body has a content type wren cannot bind."""

    def __init__(self, content_type: str | None) -> None:
        super().__init__(
            status=415,
            detail=f"unsupported content type: {content_type or ''}",
        )


class HandlerFailure(WrenError):
    """An unexpected exception escaped a route's middleware chain.

    The message is the cause's message, which becomes the body of the
    500 response.
    """

    def __init__(self, method: str, path: str, cause: BaseException) -> None:
        self.method = method
        self.path = path
        self.cause = cause
        super().__init__(str(cause))
