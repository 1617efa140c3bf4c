"""Server and client configuration.

Both configs are frozen dataclasses. Build a new one with
``dataclasses.replace`` to change a field.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Configuration for a ``SchemaRouter``. Immutable after creation.

    Override what you need::

        config = ServerConfig(base_path="/api", debug=True)
    """

    # Prefix every schema path is mounted under (e.g. "/api")
    base_path: str = ""

    # Include validation diagnostics in default error responses and warn
    # about unimplemented routes at startup
    debug: bool = False

    # Limits
    max_content_length: int = 1024 * 1024  # 1 MB


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Configuration for an ``HttpClient``. Immutable after creation.

    ``timeout`` is in seconds; ``None`` disables the timeout.
    """

    base_url: str = ""
    timeout: float | None = None
    headers: tuple[tuple[str, str], ...] = ()
    follow_redirects: bool = False
