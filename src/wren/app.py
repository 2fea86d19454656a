"""wren application class.

Mutable during setup (route registration, middleware).
Frozen at runtime when app.run() or __call__() is first invoked.
"""

import logging
import threading
from collections.abc import Sequence

from wren._internal.asgi import Receive, Scope, Send
from wren.config import AppConfig
from wren.http.request import Request
from wren.http.response import Response
from wren.middleware.protocol import Middleware
from wren.routing.builder import Group, RouteDeclarer
from wren.routing.route import Route, RouteDeclaration
from wren.routing.table import RouteTable
from wren.server.handler import dispatch, handle_request

logger = logging.getLogger("wren.server")


class App(RouteDeclarer):
    """The wren application.

    Usage::

        app = App()
        app.add_middleware(RateLimit(120))

        @app.route("GET /users/:id")
        async def show_user(ctx: Context) -> None:
            ctx.json(200, {"id": ctx.param("id")})

        with app.group("admin", path_prefix("/admin")) as admin:
            admin.use(BasicAuth("root:s3cret"))
            admin.get("/stats").handle(stats)

        app.run()

    Routes are compiled as they are registered, so a malformed pattern or
    declaration raises from the registering call. Lookup order is
    registration order; the first matching route wins.

    Thread safety:
        Setup is single-threaded. The freeze transition uses a Lock +
        double-check so exactly one thread seals the route table and
        captures the middleware, even when several ASGI workers call
        ``__call__()`` concurrently on the first request.
    """

    __slots__ = (
        "_freeze_lock",
        "_frozen",
        "_groups",
        "_middleware",
        "_middleware_list",
        "_table",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._table = RouteTable()
        self._middleware_list: list[Middleware] = []
        self._groups: list[Group] = []
        self._frozen = False
        self._freeze_lock = threading.Lock()

        # Compiled state: set during _freeze()
        self._middleware: tuple[Middleware, ...] = ()

    # -- Registration --

    def add_middleware(self, middleware: Middleware) -> None:
        """Add global middleware. The first one added runs outermost."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    def _deliver(self, declarations: Sequence[RouteDeclaration]) -> None:
        self._check_not_frozen()
        # Compile everything first so a bad pattern registers nothing
        routes = [declaration.compile() for declaration in declarations]
        for route in routes:
            self._table.register(route)

    @property
    def routes(self) -> tuple[Route, ...]:
        """Registered routes in registration (= precedence) order."""
        return self._table.routes

    @property
    def middleware(self) -> tuple[Middleware, ...]:
        """Global middleware in registration order."""
        return tuple(self._middleware_list)

    # -- Serving --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Freeze the app and serve it with pounce.

        Args:
            host: Override bind host.
            port: Override bind port.
        """
        self._ensure_frozen()
        from wren.server.dev import run_server

        run_server(self, host or self.config.host, port or self.config.port)

    async def dispatch(self, request: Request) -> Response:
        """Route *request* through the app and return the response.

        Never raises for request-time failures; they become 404 or 500
        responses.
        """
        self._ensure_frozen()
        return await dispatch(
            request,
            table=self._table,
            middleware=self._middleware,
            config=self.config,
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()
        await handle_request(
            scope,
            receive,
            send,
            table=self._table,
            middleware=self._middleware,
            config=self.config,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Freeze at startup, before the first HTTP request, and ack shutdown."""
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                try:
                    self._ensure_frozen()
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Seal the route table and capture middleware as an immutable tuple.

        MUST only be called while holding _freeze_lock.
        """
        self._table.freeze()
        self._middleware = tuple(self._middleware_list)
        self._frozen = True
        for group in self.unregistered_groups():
            logger.warning(
                "group %r was never registered; its %d declared routes are not served",
                group.name,
                len(group.declarations),
            )
        if not len(self._table):
            logger.warning("app frozen with no routes; every request will 404")
        logger.debug(
            "app frozen: %d routes, %d global middleware",
            len(self._table),
            len(self._middleware),
        )

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes and middleware before calling app.run()."
            )
            raise RuntimeError(msg)
