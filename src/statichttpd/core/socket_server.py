"""
=============================================================================
TCP SOCKET SERVER (THE CONNECTION ACCEPTOR)
=============================================================================

Owns the listening socket and hands connections to the request handler,
one at a time.

=============================================================================
SOCKET LIFECYCLE (Server Side)
=============================================================================

    1. socket()    Create an IPv4 TCP socket
    2. setsockopt  SO_REUSEADDR, so a restart does not hit TIME_WAIT
    3. bind()      127.0.0.1:2728             ──► BindError on failure
    4. listen(20)  Kernel starts queueing     ──► ListenError on failure
    5. accept()    One client at a time
    6. close()     On shutdown

SO_REUSEPORT is deliberately NOT set: with it, a second server could bind
the same port and "address already in use" would never be reported.

=============================================================================
ONE CONNECTION AT A TIME
=============================================================================

    ┌─────────────────────────────────────────────────────────────────┐
    │                       serve_forever()                            │
    ├─────────────────────────────────────────────────────────────────┤
    │                                                                  │
    │   while no shutdown requested:                                  │
    │       │                                                          │
    │       ├──► accept()               wait for the next client      │
    │       ├──► RequestBuffer(1024)    fresh buffer                  │
    │       ├──► handler(conn, buffer)  BLOCKS until response sent    │
    │       ├──► conn.close()           always                        │
    │       └──► buffer.release()       always                        │
    │                                                                  │
    └─────────────────────────────────────────────────────────────────┘

The next accept() does not happen until the current connection is closed.
Clients that arrive meanwhile wait in the kernel's listen backlog; once the
backlog is full the kernel refuses them. A slow client stalls everyone.
That is the price of having no shared state to reason about.

A failure while handling one connection ends that iteration only. The
loop logs it and accepts the next client.

=============================================================================
"""

import socket
import logging
from typing import Callable, Optional, Tuple

from ..config import ServerConfig
from ..exceptions import AddressResolutionError, BindError, ListenError
from .connection import Connection, RequestBuffer
from .shutdown import ShutdownController


logger = logging.getLogger(__name__)


ConnectionHandler = Callable[[Connection, RequestBuffer], None]


class SocketServer:
    """
    Low-level TCP socket server.

    Usage:
        def handle(conn: Connection, buffer: RequestBuffer):
            ...

        server = SocketServer(config)
        server.start()
        server.serve_forever(handle)   # Blocks until shutdown
    """

    def __init__(self, config: ServerConfig, controller: Optional[ShutdownController] = None):
        """
        Args:
            config: Supplies host, port, backlog, buffer size and the
                    accept poll interval.
            controller: Shared with whoever installs signal handlers.
                        A private one is created if omitted.
        """
        self.config = config
        self.controller = controller or ShutdownController()

        self._socket: Optional[socket.socket] = None
        self._address: Optional[Tuple[str, int]] = None
        self._host_name: Optional[str] = None

    @property
    def is_listening(self) -> bool:
        return self._socket is not None

    @property
    def address(self) -> Tuple[str, int]:
        """
        The bound (ip, port).

        Differs from the config when port 0 was requested.
        """
        if self._address is None:
            return (self.config.host, self.config.port)
        return self._address

    @property
    def url(self) -> str:
        host = self._host_name or self.address[0]
        return f"http://{host}:{self.address[1]}/"

    def _create_socket(self) -> socket.socket:
        """Create and configure the listening socket."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        # Bounded wait in accept() so the loop can notice a shutdown
        # request while no client is connecting.
        sock.settimeout(self.config.accept_poll_interval)
        return sock

    def start(
        self,
        bind_address: Optional[str] = None,
        port: Optional[int] = None,
        backlog: Optional[int] = None,
    ) -> Tuple[str, int]:
        """
        Bind and listen.

        Args default to the config values.

        Returns:
            The bound (ip, port).

        Raises:
            BindError: bind() failed (address in use, privileged port).
            ListenError: listen() failed.
            AddressResolutionError: getnameinfo() failed on the bound address.
        """
        host = bind_address if bind_address is not None else self.config.host
        port = port if port is not None else self.config.port
        backlog = backlog if backlog is not None else self.config.backlog

        sock = self._create_socket()

        try:
            sock.bind((host, port))
        except OSError as e:
            sock.close()
            logger.error(f"Failed to bind to {host}:{port}: {e}")
            raise BindError(f"The server is not bound to {host}:{port}: {e}", host, port) from e

        try:
            sock.listen(backlog)
        except OSError as e:
            sock.close()
            logger.error(f"Failed to listen on {host}:{port}: {e}")
            raise ListenError(f"The server is not listening on {host}:{port}: {e}", host, port) from e

        self._socket = sock
        self._address = sock.getsockname()[:2]
        self.controller.attach_listener(sock)

        self._host_name = self._resolve_host_name()

        logger.info(f"Server is listening on {self.url}")
        return self._address

    def _resolve_host_name(self) -> str:
        """Reverse-resolve the bound address for the startup log ("localhost")."""
        ip, port = self._address
        try:
            host_name, _service = socket.getnameinfo((ip, port), 0)
        except OSError as e:
            self.controller.shutdown()
            self._socket = None
            logger.error(f"Could not resolve {ip}:{port}: {e}")
            raise AddressResolutionError(f"Cannot resolve {ip}:{port}: {e}", ip, port) from e
        return host_name

    def serve_forever(self, handler: ConnectionHandler) -> None:
        """
        Accept and handle connections until a shutdown is requested.

        Args:
            handler: Called with each connection and its fresh buffer.
                     Runs to completion before the next accept().
        """
        listener = self._socket
        if listener is None:
            raise RuntimeError("serve_forever() called before start()")

        while not self.controller.requested:
            try:
                client_socket, client_address = listener.accept()
            except socket.timeout:
                continue  # Poll the shutdown flag
            except OSError as e:
                if self.controller.requested or listener.fileno() == -1:
                    break  # Listener closed under us: shutting down
                logger.error(f"Accept error: {e}")
                continue

            conn = Connection(socket=client_socket, address=client_address)
            buffer = RequestBuffer(capacity=self.config.buffer_size)
            logger.debug(f"[{conn.id}] Accepted connection from {conn.client_ip}:{conn.client_port}")

            with self.controller.track(conn, buffer):
                self._handle_one(handler, conn, buffer)

    def _handle_one(self, handler: ConnectionHandler, conn: Connection, buffer: RequestBuffer) -> None:
        """Run the handler, containing any failure to this connection."""
        try:
            handler(conn, buffer)
        except OSError as e:
            logger.warning(f"[{conn.id}] Connection abandoned: {e}")
        except Exception as e:
            logger.exception(f"[{conn.id}] Handler error: {e}")

    def shutdown(self) -> None:
        """Close the listener and anything in flight. Idempotent."""
        self.controller.shutdown()
        self._socket = None
