"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the static file server.

=============================================================================
FIXED BY DESIGN
=============================================================================

Unlike a general-purpose server, this one has no configuration sources:
no config files, no environment variables, no network CLI flags. The
dataclass below IS the configuration.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    WHERE VALUES COME FROM                           │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Production (python -m statichttpd)                                │
    │      └── ServerConfig()            defaults below, always          │
    │                                                                      │
    │   Tests / embedding                                                 │
    │      └── ServerConfig(port=0, document_root=str(tmp_path))         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The dataclass still gives us one place to see every constant, typed
fields, and fail-fast validation.

=============================================================================
"""

from dataclasses import dataclass


@dataclass
class ServerConfig:
    """
    Configuration for the static file server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, buffer_size, accept_poll_interval

    DOCUMENT ROOT
    - document_root, index_file, default_extension

    LOGGING
    - log_level

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """
    The IP address to bind to. Loopback only: this server is for local
    static serving and is never exposed on other interfaces.
    """

    port: int = 2728
    """
    The port number to listen on.
    0 asks the OS for a free port (used by the test suite).
    """

    backlog: int = 20
    """
    Maximum number of connections the kernel queues while we are busy
    with the current one. Beyond this, connects are refused by the kernel.
    """

    buffer_size: int = 1024
    """
    Capacity of the per-connection request buffer in bytes.
    Exactly ONE recv() of up to this size is made per connection; a
    longer request line is truncated silently.
    """

    accept_poll_interval: float = 1.0
    """
    Timeout on the listening socket's accept(), in seconds.
    Lets the accept loop notice a shutdown request while idle. Client
    sockets never get a timeout.
    """

    # ─────────────────────────────────────────────────────────────────────
    # DOCUMENT ROOT
    # ─────────────────────────────────────────────────────────────────────

    document_root: str = "htdocs"
    """
    Directory files are served from, relative to the working directory.
    Prefixed to every route as-is.
    """

    index_file: str = "index.html"
    """Appended to routes that end in '/'."""

    default_extension: str = ".html"
    """Appended to resolved paths whose filename has no extension."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR)."""

    server_name: str = "statichttpd/1.0"
    """Shown in the startup banner. Never sent on the wire."""

    def validate(self) -> None:
        """
        Validate configuration values.

        Called by HTTPServer at construction, so a bad value fails
        before any socket is created.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.buffer_size < 16:
            raise ValueError("buffer_size must be >= 16")

        if self.accept_poll_interval <= 0:
            raise ValueError("accept_poll_interval must be > 0")

        if not self.document_root:
            raise ValueError("document_root must not be empty")

        if not self.default_extension.startswith("."):
            raise ValueError(f"default_extension must start with '.': {self.default_extension!r}")
