"""Per-client rate limiting middleware.

A fixed-window counter per client key, kept in memory. The counter table
is shared by every request the middleware sees, so all access to it goes
through one lock.
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from wren.context import Context
from wren.errors import ConfigurationError
from wren.middleware.protocol import Handler


@dataclass(frozen=True, slots=True)
class RateLimitConfig:
    """Configuration for ``RateLimit``."""

    requests: int = 60
    window_seconds: float = 60.0
    # Header carrying the client address behind a proxy (first hop wins)
    key_header: str | None = None


class RateLimit:
    """Allow at most ``requests`` requests per client per window.

    Usage::

        app.add_middleware(RateLimit(100))
        app.add_middleware(RateLimit(config=RateLimitConfig(requests=5, key_header="x-forwarded-for")))

    Over the limit the client gets ``429 Rate limit exceeded`` with a
    ``Retry-After`` header until its window resets.
    """

    __slots__ = ("_clock", "_lock", "_state", "config")

    def __init__(
        self,
        requests_per_minute: int | None = None,
        *,
        config: RateLimitConfig | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        if config is None:
            config = (
                RateLimitConfig(requests=requests_per_minute)
                if requests_per_minute is not None
                else RateLimitConfig()
            )
        if config.requests < 1 or config.window_seconds <= 0:
            msg = f"RateLimit needs a positive request count and window, got {config!r}"
            raise ConfigurationError(msg)
        self.config = config
        self._clock = clock or time.monotonic
        self._lock = threading.Lock()
        # key -> (requests in window, window start)
        self._state: dict[str, tuple[int, float]] = {}

    def _client_key(self, ctx: Context) -> str:
        header_name = self.config.key_header
        if header_name:
            forwarded = ctx.header(header_name).split(",")[0].strip()
            if forwarded:
                return forwarded
        return ctx.request.remote_addr or "unknown"

    def _check_and_update(self, key: str, now: float) -> tuple[bool, int]:
        """Count one request for *key*; return (allowed, retry_after_seconds)."""
        cfg = self.config
        with self._lock:
            count, window_start = self._state.get(key, (0, now))
            if now - window_start > cfg.window_seconds:
                count, window_start = 0, now

            if count >= cfg.requests:
                retry_after = max(1, int(window_start + cfg.window_seconds - now))
                return False, retry_after

            self._state[key] = (count + 1, window_start)
            return True, 0

    def __call__(self, next: Handler) -> Handler:
        async def rate_limit(ctx: Context) -> None:
            allowed, retry_after = self._check_and_update(self._client_key(ctx), self._clock())
            if not allowed:
                ctx.text(429, "Rate limit exceeded")
                assert ctx.response is not None
                ctx.response = ctx.response.with_header("Retry-After", str(retry_after))
                return
            await next(ctx)

        return rate_limit
