"""Middleware chain composition.

Onion order for global middleware G1, G2 and route middleware R1, R2
around terminal T::

    G1 → G2 → R1 → R2 → T → R2 → R1 → G2 → G1

The first-registered global middleware is the outermost layer: it sees
the request first and the outcome last.
"""

import functools
import inspect
from collections.abc import Sequence

import anyio.to_thread

from wren.context import Context
from wren.middleware.protocol import Endpoint, Handler, Middleware


def as_handler(endpoint: Endpoint) -> Handler:
    """Normalize a terminal endpoint to an async handler.

    Coroutine functions are returned unchanged. Plain functions run in a
    worker thread so blocking I/O inside them doesn't stall other
    requests.
    """
    if inspect.iscoroutinefunction(endpoint) or inspect.iscoroutinefunction(
        getattr(endpoint, "__call__", None)
    ):
        return endpoint  # type: ignore[return-value]

    @functools.wraps(endpoint)
    async def run_in_thread(ctx: Context) -> None:
        await anyio.to_thread.run_sync(endpoint, ctx)

    return run_in_thread


def build_chain(
    terminal: Endpoint,
    route_middleware: Sequence[Middleware] = (),
    global_middleware: Sequence[Middleware] = (),
) -> Handler:
    """Wrap *terminal* in route middleware, then global middleware.

    Each list is applied last-to-first so its first entry ends up
    outermost within its layer.
    """
    handler = as_handler(terminal)
    for mw in reversed(route_middleware):
        handler = mw(handler)
    for mw in reversed(global_middleware):
        handler = mw(handler)
    return handler
