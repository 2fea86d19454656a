"""Application configuration.

AppConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(port=3000, request_timeout=10.0)
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    workers: int = 1

    # Timeouts (seconds) handed to the ASGI server
    read_timeout: float = 15.0
    write_timeout: float = 15.0
    idle_timeout: float = 60.0

    # Advisory per-request deadline exposed as Context.deadline (None = no deadline)
    request_timeout: float | None = 30.0

    # Limits
    max_content_length: int = 16 * 1024 * 1024  # 16 MB

    # Logging
    log_level: str = "info"
