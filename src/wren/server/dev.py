"""Server startup.

Starts a pounce ASGI server with the live wren App object. pounce owns
the listener and the read/write/idle timeouts; wren only dispatches.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from wren.errors import ConfigurationError

if TYPE_CHECKING:
    from wren.app import App

logger = logging.getLogger("wren.server")


def run_server(app: App, host: str, port: int) -> None:
    """Serve *app* on *host*:*port* until interrupted.

    pounce's ``run()`` takes an import string, but wren has a live
    ``App`` object, so ``pounce.Server`` is used directly with the ASGI
    callable.

    Raises ``ConfigurationError`` if pounce is not installed.
    """
    try:
        from pounce.config import ServerConfig
        from pounce.server import Server
    except ImportError as exc:
        msg = "Serving requires pounce. Install it with: pip install wren[server]"
        raise ConfigurationError(msg) from exc

    cfg = app.config
    config = ServerConfig(
        host=host,
        port=port,
        workers=cfg.workers,
        log_level=cfg.log_level,
        # pounce has one keep-alive knob; idle connections close after idle_timeout
        keep_alive_timeout=cfg.idle_timeout,
        # a request must be read and answered within read + write timeouts
        request_timeout=cfg.read_timeout + cfg.write_timeout,
    )
    logger.info("wren serving %d routes at http://%s:%d", len(app.routes), host, port)
    Server(config, app).run()
