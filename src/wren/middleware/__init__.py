"""Middleware: continuation wrapping, no inheritance required.

A middleware is any callable matching:
    def mw(next: Handler) -> Handler

Built-in middleware:
    BasicAuth -- HTTP Basic authentication
    RateLimit -- Per-client fixed-window rate limiting
"""

from wren.middleware.auth import BasicAuth
from wren.middleware.protocol import Endpoint, Handler, Middleware
from wren.middleware.rate_limit import RateLimit, RateLimitConfig

__all__ = [
    "BasicAuth",
    "Endpoint",
    "Handler",
    "Middleware",
    "RateLimit",
    "RateLimitConfig",
]
