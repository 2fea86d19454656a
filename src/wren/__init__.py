"""wren: a minimal ASGI request router.

Matches requests by method and ``:param`` path pattern, wraps the winning
route's handler in global and route middleware, and dispatches.

Basic usage::

    from wren import App, Context

    app = App()

    @app.route("GET /users/:id")
    async def show_user(ctx: Context) -> None:
        ctx.json(200, {"id": ctx.param("id")})

    app.run()
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "BasicAuth",
    "ConfigurationError",
    "Context",
    "Group",
    "HTTPError",
    "HandlerFailure",
    "Handler",
    "InvalidDeclarationError",
    "InvalidPatternError",
    "Middleware",
    "NoRouteMatchedError",
    "RateLimit",
    "Request",
    "Response",
    "WrenError",
    "get_context",
    "methods",
    "path_prefix",
    "with_middleware",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name == "App":
        from wren.app import App

        return App

    if name == "AppConfig":
        from wren.config import AppConfig

        return AppConfig

    if name in ("Context", "get_context"):
        from wren import context as _ctx

        return getattr(_ctx, name)

    if name in ("Request", "Response"):
        from wren import http as _http

        return getattr(_http, name)

    if name in ("BasicAuth", "Handler", "Middleware", "RateLimit"):
        from wren import middleware as _mw

        return getattr(_mw, name)

    if name in ("Group", "methods", "path_prefix", "with_middleware"):
        from wren import routing as _routing

        return getattr(_routing, name)

    if name in (
        "ConfigurationError",
        "HTTPError",
        "HandlerFailure",
        "InvalidDeclarationError",
        "InvalidPatternError",
        "NoRouteMatchedError",
        "WrenError",
    ):
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
