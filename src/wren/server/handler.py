"""ASGI handler: the dispatcher.

The only component that touches raw ASGI scopes. Converts the scope to a
``Request``, finds the first matching route, runs its middleware chain,
and sends the resulting ``Response`` back through ASGI ``send()``.
"""

from collections.abc import Sequence

from wren._internal.asgi import Receive, Scope, Send
from wren.config import AppConfig
from wren.context import Context, context_var
from wren.errors import HandlerFailure, HTTPError, NoRouteMatchedError
from wren.http.request import Request
from wren.http.response import Response
from wren.middleware.protocol import Middleware
from wren.routing.chain import build_chain
from wren.routing.table import RouteTable
from wren.server.errors import handle_http_error, handle_internal_error, not_found_response
from wren.server.sender import build_messages


async def dispatch(
    request: Request,
    *,
    table: RouteTable,
    middleware: Sequence[Middleware],
    config: AppConfig,
) -> Response:
    """Route *request* and run the winning route's chain.

    - No matching route: a 404 response; no middleware or handler runs.
    - ``HTTPError`` from the chain: a response with the error's status.
    - Any other exception: a 500 response carrying the exception message.
    - Chain returns without writing a response: an empty 200.
    """
    match = table.lookup(request.method, request.path)
    if match is None:
        return not_found_response(NoRouteMatchedError(), request)

    ctx = Context(
        request,
        match.path_params,
        timeout=config.request_timeout,
        max_content_length=config.max_content_length,
    )
    token = context_var.set(ctx)
    try:
        chain = build_chain(match.route.handler, match.route.middleware, middleware)
        await chain(ctx)
    except HTTPError as exc:
        return handle_http_error(exc, request)
    except Exception as exc:
        failure = HandlerFailure(request.method, request.path, exc)
        return handle_internal_error(failure, request, debug=config.debug)
    finally:
        context_var.reset(token)

    return ctx.response or Response()


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    table: RouteTable,
    middleware: Sequence[Middleware],
    config: AppConfig,
) -> None:
    """Process a single ASGI HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    response = await dispatch(request, table=table, middleware=middleware, config=config)
    try:
        messages = build_messages(response, method=request.method)
    except UnicodeEncodeError as exc:
        # A header the chain set cannot go on the wire
        failure = HandlerFailure(request.method, request.path, exc)
        fallback = handle_internal_error(failure, request, debug=config.debug)
        messages = build_messages(fallback, method=request.method)
    for message in messages:
        await send(message)
