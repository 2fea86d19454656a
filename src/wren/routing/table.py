"""Append-only route table with first-match lookup.

Lookup is a linear scan in registration order. The first route whose
method matches and whose matcher accepts the path wins, so a route
registered earlier permanently shadows any later route with the same
method and an equivalent pattern.
"""

import logging
import threading

from wren.routing.route import Route, RouteMatch

logger = logging.getLogger("wren.routing")


class RouteTable:
    """Ordered, append-only collection of ``Route`` entries.

    Usage::

        table = RouteTable()
        table.register(RouteDeclaration("GET", "/users/:id", show).compile())
        table.freeze()
        match = table.lookup("GET", "/users/42")

    Thread safety:
        Every ``register`` publishes a new immutable tuple under a writer
        lock. ``lookup`` reads whichever tuple is current and never takes
        the lock, so readers always see a complete table.
    """

    __slots__ = ("_frozen", "_routes", "_write_lock")

    def __init__(self) -> None:
        self._routes: tuple[Route, ...] = ()
        self._frozen = False
        self._write_lock = threading.Lock()

    def register(self, route: Route) -> None:
        """Append *route*. Duplicates are allowed; the earlier one wins."""
        with self._write_lock:
            if self._frozen:
                msg = "Cannot register routes after the route table is frozen."
                raise RuntimeError(msg)
            self._routes = (*self._routes, route)
        logger.debug("registered %s %s", route.method, route.pattern)

    def freeze(self) -> None:
        """Reject any further registration."""
        with self._write_lock:
            self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def routes(self) -> tuple[Route, ...]:
        """All registered routes, in registration order."""
        return self._routes

    def __len__(self) -> int:
        return len(self._routes)

    def lookup(self, method: str, path: str) -> RouteMatch | None:
        """Return the first route matching *method* and *path*, or ``None``."""
        method = method.upper()
        for route in self._routes:
            if route.method != method:
                continue
            params = route.matcher.match(path)
            if params is not None:
                return RouteMatch(route=route, path_params=params)
        return None
