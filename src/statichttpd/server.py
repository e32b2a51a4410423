"""
=============================================================================
STATIC HTTP SERVER
=============================================================================

Ties the pieces together into a runnable server.

=============================================================================
ARCHITECTURE OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │                        ┌─────────────────┐                          │
    │                        │   HTTPServer    │                          │
    │                        │  (Orchestrator) │                          │
    │                        └────────┬────────┘                          │
    │                                 │                                    │
    │            ┌────────────────────┼────────────────────┐              │
    │            ▼                    ▼                    ▼              │
    │    ┌──────────────┐    ┌──────────────────┐  ┌──────────────────┐  │
    │    │ SocketServer │    │ StaticFileHandler│  │ShutdownController│  │
    │    │  (Acceptor)  │───►│ (Request Handler)│  │   (SIGINT)       │  │
    │    └──────────────┘    └──────────────────┘  └──────────────────┘  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
REQUEST LIFECYCLE
=============================================================================

    1. ACCEPT     SocketServer accepts one TCP connection
    2. READ       One recv() of up to 1024 bytes
    3. PARSE      Method and route from the first line
    4. RESOLVE    Route → htdocs/... path
    5. RESPOND    400 / 404 / 200 written with one sendall()
    6. CLOSE      Connection closed, buffer released
    7. REPEAT     Back to 1 - nothing happens in parallel

=============================================================================
"""

import logging
import threading
from typing import Optional, Tuple

from .config import ServerConfig
from .core import ShutdownController, SocketServer
from .exceptions import ShutdownRequested
from .handlers import StaticFileHandler


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Single-threaded static file server.

    Usage:
        server = HTTPServer()
        server.run()            # Blocks until Ctrl+C

    Embedding (e.g. tests, from a background thread):
        server = HTTPServer(ServerConfig(port=0, document_root="site"))
        thread = threading.Thread(target=server.run, daemon=True)
        thread.start()
        server.wait_until_listening()
        ...
        server.shutdown()
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Args:
            config: Server configuration. Uses the fixed defaults if omitted.
        """
        self.config = config or ServerConfig()
        self.config.validate()  # Fail-fast on invalid config

        self.controller = ShutdownController()
        self._socket_server = SocketServer(self.config, self.controller)
        self._handler = StaticFileHandler(self.config)

        self._listening = threading.Event()

    @property
    def address(self) -> Tuple[str, int]:
        """Bound (ip, port); the real port once listening."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._listening.is_set() and not self.controller.requested

    def wait_until_listening(self, timeout: Optional[float] = None) -> bool:
        """Block until the socket is bound and listening."""
        return self._listening.wait(timeout)

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self) -> None:
        """
        Start the server (blocking).

        Returns after a shutdown signal or shutdown() call, with every
        socket and buffer released.

        Raises:
            BindError, ListenError, AddressResolutionError: startup failed.
        """
        self._setup_logging()

        self._socket_server.start()
        self.controller.install_signal_handlers()
        self._listening.set()

        self._print_startup_banner()

        try:
            self._socket_server.serve_forever(self._handler.dispatch)
        except ShutdownRequested:
            logger.debug("In-flight connection interrupted by shutdown")
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._shutdown()

    def shutdown(self) -> None:
        """
        Ask a running server to stop.

        Only sets the flag; run() notices it and does the cleanup on its
        own thread.
        """
        self.controller.request_shutdown()

    def _shutdown(self):
        self.controller.restore_signal_handlers()
        self._socket_server.shutdown()

    def _print_startup_banner(self):
        print()
        print(f"  {self.config.server_name}")
        print(f"  Serving {self.config.document_root}/ on {self._socket_server.url}")
        print("  Press Ctrl+C to stop")
        print()

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("statichttpd").setLevel(level)
