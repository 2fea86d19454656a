"""Handler and Middleware types.

A handler receives the per-request ``Context`` and writes its response
there. Returning means success; raising means failure::

    async def show_user(ctx: Context) -> None:
        ctx.json(200, {"id": ctx.param("id")})

A middleware wraps a handler and returns a new handler. It decides
whether and when the inner handler runs::

    def timing(next: Handler) -> Handler:
        async def handler(ctx: Context) -> None:
            start = time.monotonic()
            await next(ctx)
            ctx.response = ctx.response.with_header(
                "X-Time", f"{time.monotonic() - start:.3f}"
            )

        return handler

Not awaiting ``next`` short-circuits every layer further in. No base
class required; any callable of the right shape works.
"""

from collections.abc import Awaitable, Callable

from wren.context import Context

# A link in the middleware chain
type Handler = Callable[[Context], Awaitable[None]]

# The terminal route handler; plain functions run in a worker thread
type Endpoint = Callable[[Context], Awaitable[None] | None]

# Continuation wrapping: takes the inner handler, returns the outer one
type Middleware = Callable[[Handler], Handler]
