"""Route registration API: declaration parsing, builders, groups, conditions.

Routes are declared as ``"METHOD /path"`` strings::

    app.route("GET /users/:id").use(auth).handle(show_user)

    @app.route("POST /users").use(auth)
    async def create_user(ctx: Context) -> None: ...

Groups collect declarations and run their conditions over them once,
when the group is registered (on leaving the ``with`` block)::

    with app.group("admin", path_prefix("/admin")) as admin:
        admin.use(BasicAuth("root:secret"))
        admin.get("/stats").handle(stats)      # -> GET /admin/stats

Every registration error is raised from the call that caused it.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator, Sequence
from dataclasses import replace
from typing import Self

from wren.errors import ConfigurationError, InvalidDeclarationError
from wren.middleware.protocol import Endpoint, Middleware
from wren.routing.pattern import compile_pattern
from wren.routing.route import RouteDeclaration

logger = logging.getLogger("wren.routing")

# Registration-time transformation over a group's declarations
type Condition = Callable[[Sequence[RouteDeclaration]], list[RouteDeclaration]]

# Where a builder or group delivers finished declarations
type DeclarationSink = Callable[[Sequence[RouteDeclaration]], None]


def parse_declaration(declaration: str) -> tuple[str, str]:
    """Split ``"METHOD /path"`` on the first space into (METHOD, path).

    Raises ``InvalidDeclarationError`` if there is no space or either
    side is empty.
    """
    parts = declaration.split(" ", 1)
    if len(parts) != 2:
        raise InvalidDeclarationError(declaration, "expected 'METHOD /path', found no space")
    method, path = parts
    if not method:
        raise InvalidDeclarationError(declaration, "method is empty")
    if not path:
        raise InvalidDeclarationError(declaration, "path is empty")
    return method.upper(), path


class RouteBuilder:
    """Assembles one route declaration.

    ``use()`` accumulates middleware in attachment order; ``handle()`` is
    the terminal step that freezes a ``RouteDeclaration`` and delivers it.
    After ``handle()`` the builder is sealed.

    The builder also works as a decorator; it returns the handler unchanged.
    """

    __slots__ = ("_done", "_middleware", "_sink", "declaration", "method", "name", "pattern")

    def __init__(
        self,
        declaration: str,
        sink: DeclarationSink,
        *,
        name: str | None = None,
    ) -> None:
        self.declaration = declaration
        self.method, self.pattern = parse_declaration(declaration)
        self.name = name
        self._sink = sink
        self._middleware: list[Middleware] = []
        self._done = False

    def __repr__(self) -> str:
        return f"<RouteBuilder {self.method} {self.pattern}>"

    def use(self, *middleware: Middleware) -> Self:
        """Attach route middleware. Earlier attachments run first."""
        self._check_open()
        self._middleware.extend(middleware)
        return self

    def handle(self, handler: Endpoint) -> Self:
        """Register *handler* as the terminal handler for this route.

        Raises ``InvalidPatternError`` if the path pattern is malformed.
        """
        self._check_open()
        if not callable(handler):
            msg = f"Handler for {self.declaration!r} must be callable, got {handler!r}"
            raise ConfigurationError(msg)
        # Fail here, not later at group registration
        compile_pattern(self.pattern)
        self._done = True
        self._sink(
            [
                RouteDeclaration(
                    method=self.method,
                    pattern=self.pattern,
                    handler=handler,
                    middleware=tuple(self._middleware),
                    name=self.name,
                )
            ]
        )
        return self

    def __call__(self, handler: Endpoint) -> Endpoint:
        self.handle(handler)
        return handler

    def _check_open(self) -> None:
        if self._done:
            msg = f"Route {self.declaration!r} is already registered; declare a new route instead."
            raise ConfigurationError(msg)


class RouteDeclarer(ABC):
    """Shared declaration surface of ``App`` and ``Group``.

    Subclasses provide ``_deliver`` and a ``_groups`` list that records
    the groups started from them.
    """

    __slots__ = ()

    _groups: list["Group"]

    @abstractmethod
    def _deliver(self, declarations: Sequence[RouteDeclaration]) -> None:
        """Accept finished declarations from a builder or child group."""

    def route(self, declaration: str, *, name: str | None = None) -> RouteBuilder:
        """Start declaring a route from a ``"METHOD /path"`` string."""
        return RouteBuilder(declaration, self._deliver, name=name)

    def get(self, path: str, *, name: str | None = None) -> RouteBuilder:
        return self.route(f"GET {path}", name=name)

    def post(self, path: str, *, name: str | None = None) -> RouteBuilder:
        return self.route(f"POST {path}", name=name)

    def put(self, path: str, *, name: str | None = None) -> RouteBuilder:
        return self.route(f"PUT {path}", name=name)

    def patch(self, path: str, *, name: str | None = None) -> RouteBuilder:
        return self.route(f"PATCH {path}", name=name)

    def delete(self, path: str, *, name: str | None = None) -> RouteBuilder:
        return self.route(f"DELETE {path}", name=name)

    def group(self, name: str, *conditions: Condition) -> "Group":
        """Start a group whose routes pass through *conditions* on registration."""
        group = Group(name, self._deliver, conditions)
        self._groups.append(group)
        return group

    def unregistered_groups(self) -> Iterator["Group"]:
        """Yield every group started here, at any depth, that was never registered."""
        for group in self._groups:
            if not group.registered:
                yield group
            yield from group.unregistered_groups()


class Group(RouteDeclarer):
    """A named set of route declarations sharing registration conditions.

    Declarations are held until ``register()`` (called automatically when
    the ``with`` block exits without an exception). Conditions then run
    once, in order, and the result goes to the parent app or group.

    A group used without ``with`` must call ``register()`` itself; until
    then none of its routes exist. The app logs a warning for any such
    group still unregistered when it freezes.
    """

    __slots__ = ("_conditions", "_groups", "_pending", "_registered", "_sink", "name")

    def __init__(
        self,
        name: str,
        sink: DeclarationSink,
        conditions: Sequence[Condition] = (),
    ) -> None:
        self.name = name
        self._sink = sink
        self._conditions: list[Condition] = list(conditions)
        self._pending: list[RouteDeclaration] = []
        self._groups: list[Group] = []
        self._registered = False

    def __repr__(self) -> str:
        return f"<Group {self.name!r} routes={len(self._pending)}>"

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type: type[BaseException] | None, *args: object) -> None:
        if exc_type is None:
            self.register()

    def given(self, *conditions: Condition) -> Self:
        """Add conditions, applied after the ones already attached."""
        self._check_open()
        self._conditions.extend(conditions)
        return self

    def use(self, *middleware: Middleware) -> Self:
        """Attach group middleware, which runs outside each route's own middleware."""
        return self.given(with_middleware(*middleware))

    @property
    def registered(self) -> bool:
        return self._registered

    @property
    def declarations(self) -> tuple[RouteDeclaration, ...]:
        """Declarations collected so far, before conditions are applied."""
        return tuple(self._pending)

    def register(self) -> list[RouteDeclaration]:
        """Apply the conditions and deliver the resulting declarations.

        Returns the delivered declarations. Raises ``ConfigurationError``
        if the group was already registered or a condition returns
        something other than a list.
        """
        self._check_open()
        self._registered = True

        declarations = list(self.declarations)
        for condition in self._conditions:
            result = condition(declarations)
            if not isinstance(result, list):
                msg = (
                    f"Condition {condition!r} of group {self.name!r} must return a list "
                    f"of route declarations, got {type(result).__name__}"
                )
                raise ConfigurationError(msg)
            declarations = result

        if not declarations:
            logger.warning("group %r registered no routes", self.name)
        self._sink(declarations)
        return declarations

    def _deliver(self, declarations: Sequence[RouteDeclaration]) -> None:
        self._check_open()
        self._pending.extend(declarations)

    def _check_open(self) -> None:
        if self._registered:
            msg = f"Group {self.name!r} is already registered."
            raise ConfigurationError(msg)


# -- Conditions --


def path_prefix(prefix: str) -> Condition:
    """Prepend *prefix* to every pattern in the group.

    ``path_prefix("/api")`` turns ``/users/:id`` into ``/api/users/:id``
    and ``/`` into ``/api/``. A trailing slash on *prefix* is dropped.

    Raises ``ConfigurationError`` for a prefix that would change nothing
    (``""`` or ``"/"``) or doesn't start with ``/``.
    """
    if prefix in ("", "/"):
        msg = f"path_prefix({prefix!r}) would not change any route; use a prefix like '/api'"
        raise ConfigurationError(msg)
    if not prefix.startswith("/"):
        msg = f"path_prefix({prefix!r}) must start with '/'"
        raise ConfigurationError(msg)
    base = prefix.rstrip("/")

    def apply(declarations: Sequence[RouteDeclaration]) -> list[RouteDeclaration]:
        return [replace(d, pattern=base + d.pattern) for d in declarations]

    apply.__qualname__ = f"path_prefix({prefix!r})"
    return apply


def methods(*names: str) -> Condition:
    """Keep only the declarations whose method is one of *names*."""
    if not names:
        msg = "methods() needs at least one method name"
        raise ConfigurationError(msg)
    allowed = frozenset(n.upper() for n in names)

    def apply(declarations: Sequence[RouteDeclaration]) -> list[RouteDeclaration]:
        kept: list[RouteDeclaration] = []
        for d in declarations:
            if d.method in allowed:
                kept.append(d)
            else:
                logger.debug("group condition dropped %s %s", d.method, d.pattern)
        return kept

    apply.__qualname__ = f"methods({', '.join(sorted(allowed))})"
    return apply


def with_middleware(*middleware: Middleware) -> Condition:
    """Run *middleware* outside each declaration's own middleware."""
    if not middleware:
        msg = "with_middleware() needs at least one middleware"
        raise ConfigurationError(msg)

    def apply(declarations: Sequence[RouteDeclaration]) -> list[RouteDeclaration]:
        return [replace(d, middleware=(*middleware, *d.middleware)) for d in declarations]

    return apply
