"""Failure-to-response mapping for dispatched requests.

Every request-time error ends here and becomes a ``Response``; nothing
raised by a handler or middleware reaches the ASGI server.
"""

import logging

from wren.errors import HandlerFailure, HTTPError, NoRouteMatchedError
from wren.http.request import Request
from wren.http.response import Response

logger = logging.getLogger("wren.server")


def not_found_response(exc: NoRouteMatchedError, request: Request) -> Response:
    """The fixed response for a request no route matched."""
    logger.debug("404 %s %s", request.method, request.path)
    return Response(body=exc.detail, status=404)


def handle_http_error(exc: HTTPError, request: Request) -> Response:
    """Map an ``HTTPError`` raised inside a chain to its own status."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
    resp = Response(body=exc.detail or f"Error {exc.status}", status=exc.status)
    return resp.with_headers(exc.headers)


def handle_internal_error(exc: HandlerFailure, request: Request, *, debug: bool) -> Response:
    """Map an unexpected chain failure to a 500 carrying the cause's message.

    Called from the ``except`` block handling the failure, so the
    traceback is logged.
    """
    logger.exception("500 %s %s", request.method, request.path)
    body = str(exc) or type(exc.cause).__name__
    if debug:
        body = f"{type(exc.cause).__name__}: {body}"
    return Response(body=body, status=500)
