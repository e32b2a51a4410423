"""
=============================================================================
GRACEFUL SHUTDOWN
=============================================================================

Ctrl+C must leave nothing behind: not the listening socket, not the
client socket of a request in flight, not its request buffer.

=============================================================================
WHO OWNS WHAT
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                       ShutdownController                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   listener     the listening socket     (whole process lifetime)   │
    │   connection   the active Connection    (None between requests)    │
    │   buffer       the active RequestBuffer (None between requests)    │
    │   requested    threading.Event          (set once, never cleared)  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The accept loop is the only code that opens, closes or releases these.
The signal handler only REQUESTS a shutdown.

=============================================================================
HOW A SIGNAL REACHES THE ACCEPT LOOP
=============================================================================

Python runs signal handlers in the main thread, between bytecodes, so a
handler is never in the middle of a socket call. Two cases:

    Idle (blocked in accept())
    ──────────────────────────
        SIGINT ──► flag set
                   accept() times out within accept_poll_interval
                   loop checks flag at the top of the iteration ──► exit

    Busy (blocked in recv() / sendall() for a client)
    ──────────────────────────────────────────────────
        SIGINT ──► flag set, ShutdownRequested raised
                   the blocking call unwinds
                   finally: connection closed, buffer released ──► exit

Client sockets have no timeout, so without the exception a hung client
would keep the process alive after Ctrl+C.

Either way shutdown() then closes the listener. Every release is
idempotent, so it does not matter which path got there first.

=============================================================================
"""

import signal
import socket
import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

from ..exceptions import ShutdownRequested
from .connection import Connection, RequestBuffer


logger = logging.getLogger(__name__)


DEFAULT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ShutdownController:
    """
    Holds the live resources and releases them on shutdown.

    Usage:
        controller = ShutdownController()
        controller.install_signal_handlers()
        controller.attach_listener(sock)

        while not controller.requested:
            conn = ...
            with controller.track(conn, RequestBuffer()):
                handle(conn)

        controller.shutdown()
    """

    def __init__(self):
        self.listener: Optional[socket.socket] = None
        self.connection: Optional[Connection] = None
        self.buffer: Optional[RequestBuffer] = None

        self._requested = threading.Event()
        self._released = False
        self._original_handlers: dict = {}

    @property
    def requested(self) -> bool:
        """True once a shutdown has been requested."""
        return self._requested.is_set()

    @property
    def in_flight(self) -> bool:
        """True while a connection is being handled."""
        return self.connection is not None

    # =========================================================================
    # RESOURCE TRACKING
    # =========================================================================

    def attach_listener(self, sock: socket.socket) -> None:
        self.listener = sock

    @contextmanager
    def track(self, connection: Connection, buffer: RequestBuffer) -> Iterator[None]:
        """
        Register the active connection and buffer for one iteration.

        Both are released when the block exits, however it exits.

        A signal that arrived between accept() and this call only set the
        flag, so the flag is checked once more here. Otherwise the block
        would block in recv() on a client that never sends.
        """
        self.connection = connection
        self.buffer = buffer
        try:
            if self.requested:
                raise ShutdownRequested("shutdown requested before the connection was handled")
            yield
        finally:
            self.release_connection()

    def release_connection(self) -> None:
        """Close the active connection and release its buffer, if any."""
        connection, self.connection = self.connection, None
        buffer, self.buffer = self.buffer, None

        try:
            if connection is not None:
                connection.close()
        finally:
            if buffer is not None:
                buffer.release()

    # =========================================================================
    # SHUTDOWN
    # =========================================================================

    def request_shutdown(self) -> None:
        """
        Ask the accept loop to stop. Only sets a flag.

        Safe to call from a signal handler or another thread.
        """
        self._requested.set()

    def shutdown(self) -> None:
        """
        Release every live resource. Idempotent.

        Order: client connection, request buffer, listening socket.
        """
        self.request_shutdown()
        if self._released:
            return
        self._released = True

        try:
            self.release_connection()
        finally:
            if self.listener is not None:
                try:
                    self.listener.close()
                except OSError:
                    pass  # Already closed
                self.listener = None

        logger.info("Server stopped")

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until a shutdown is requested.

        Returns:
            True if requested, False on timeout.
        """
        return self._requested.wait(timeout)

    # =========================================================================
    # SIGNALS
    # =========================================================================

    def _handle_signal(self, signum, frame):
        signal_name = signal.Signals(signum).name
        logger.info(f"Received {signal_name}. Shutting down server...")
        self.request_shutdown()

        if self.in_flight:
            raise ShutdownRequested(signal_name)

    def install_signal_handlers(self, signals: Sequence[signal.Signals] = DEFAULT_SIGNALS) -> bool:
        """
        Route the given signals to this controller.

        Signal handlers can only be installed from the main thread. When
        called from any other thread (a test running the server in the
        background, for instance) nothing is installed.

        Returns:
            True if the handlers were installed.
        """
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not in main thread, signal handlers not installed")
            return False

        for sig in signals:
            self._original_handlers[sig] = signal.signal(sig, self._handle_signal)
        return True

    def restore_signal_handlers(self) -> None:
        """
        Put back whatever handlers were installed before.

        Like installing, this only works from the main thread; elsewhere
        it is a no-op and the handlers stay in place.
        """
        if threading.current_thread() is not threading.main_thread():
            return

        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()
