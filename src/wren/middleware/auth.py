"""HTTP Basic authentication middleware."""

import base64
import hmac

from wren.context import Context
from wren.errors import ConfigurationError
from wren.middleware.protocol import Handler


class BasicAuth:
    """Reject requests without the configured Basic credentials.

    Usage::

        app.route("GET /admin").use(BasicAuth("admin:s3cret")).handle(admin)

    A request with no ``Authorization: Basic ...`` header, or with the
    wrong credentials, gets ``401 Unauthorized`` and a
    ``WWW-Authenticate`` challenge; the inner handler never runs. On
    success the username is stored in the context as ``"auth_user"``.
    """

    __slots__ = ("_expected", "realm", "username")

    def __init__(self, credentials: str, *, realm: str = "Restricted") -> None:
        username, sep, _ = credentials.partition(":")
        if not sep:
            msg = "BasicAuth credentials should be in format 'username:password'"
            raise ConfigurationError(msg)
        self.username = username
        self.realm = realm
        self._expected = base64.b64encode(credentials.encode("utf-8"))

    def _reject(self, ctx: Context) -> None:
        ctx.text(401, "Unauthorized")
        assert ctx.response is not None
        ctx.response = ctx.response.with_header("WWW-Authenticate", f'Basic realm="{self.realm}"')

    def __call__(self, next: Handler) -> Handler:
        async def basic_auth(ctx: Context) -> None:
            auth = ctx.header("Authorization")
            if not auth.startswith("Basic "):
                self._reject(ctx)
                return

            provided = auth.removeprefix("Basic ").strip().encode("latin-1")
            if not hmac.compare_digest(provided, self._expected):
                self._reject(ctx)
                return

            ctx.set("auth_user", self.username)
            await next(ctx)

        return basic_auth
