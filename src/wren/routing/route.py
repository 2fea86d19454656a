"""Route declarations, compiled routes, and match results."""

from dataclasses import dataclass

from wren.middleware.protocol import Endpoint, Middleware
from wren.routing.pattern import PathMatcher, compile_pattern


@dataclass(frozen=True, slots=True)
class RouteDeclaration:
    """A declared route that has not been compiled yet.

    Produced by ``RouteBuilder.handle()``. Group conditions transform
    sequences of these before they reach the route table.
    """

    method: str
    pattern: str
    handler: Endpoint
    middleware: tuple[Middleware, ...] = ()
    name: str | None = None

    def compile(self) -> "Route":
        """Compile the pattern and freeze the declaration into a ``Route``.

        Raises ``InvalidPatternError`` for a malformed pattern.
        """
        return Route(
            method=self.method.upper(),
            pattern=self.pattern,
            matcher=compile_pattern(self.pattern),
            handler=self.handler,
            middleware=self.middleware,
            name=self.name,
        )


@dataclass(frozen=True, slots=True)
class Route:
    """A registered route entry. Immutable, owned by the ``RouteTable``."""

    method: str
    pattern: str
    matcher: PathMatcher
    handler: Endpoint
    middleware: tuple[Middleware, ...] = ()
    name: str | None = None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route lookup."""

    route: Route
    path_params: dict[str, str]
