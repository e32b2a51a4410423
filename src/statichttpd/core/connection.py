"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

This module wraps one accepted client socket and the request buffer that
is allocated for it.

=============================================================================
ONE CONNECTION, ONE REQUEST, ONE READ
=============================================================================

TCP is a byte stream: a request line can arrive in any number of
segments. A full HTTP server loops on recv() until it sees "\r\n\r\n".
This one deliberately does not:

    Client sends:
        GET /index.html HTTP/1.1\r\nHost: localhost\r\n\r\n

    Server:
        recv(1024) ──► whatever has arrived, up to 1024 bytes
        (no second recv, ever)

    ┌─────────────────────────────────────────────────────────────────┐
    │                       RequestBuffer                             │
    ├─────────────────────────────────────────────────────────────────┤
    │   capacity   fixed at allocation (1024 bytes by default)       │
    │   data       bytes from the single recv(), len <= capacity     │
    │                                                                  │
    │   Request longer than capacity  → silently truncated           │
    │   Request split across segments → only the first is seen      │
    └─────────────────────────────────────────────────────────────────┘

There is no keep-alive: after one response the connection is closed.

=============================================================================
CONNECTION STATE MACHINE
=============================================================================

    NEW ──────► READING ──────► PROCESSING ──────► WRITING
     │             │                 │                 │
     │             ▼                 ▼                 ▼
     └─────────────────────────► CLOSING ◄─────────────┘
                                    │
                                    ▼
                                  CLOSED

CLOSED is terminal. close() checks for it first, so however many code
paths try to close a connection, the socket is closed exactly once.

=============================================================================
"""

import socket
import time
import logging
from enum import Enum
from dataclasses import dataclass, field
import uuid


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Connection lifecycle states."""
    NEW = "new"                # Just accepted
    READING = "reading"        # Inside the single recv()
    PROCESSING = "processing"  # Parsing, resolving, reading the file
    WRITING = "writing"        # Inside sendall()
    CLOSING = "closing"
    CLOSED = "closed"


@dataclass
class RequestBuffer:
    """
    Fixed-capacity buffer for the bytes of one request.

    Allocated fresh for every accepted connection and released when the
    connection is done with. A released buffer holds no data and cannot
    be filled again.

    Attributes:
        capacity: Maximum number of bytes a single fill() stores.
        data: Bytes received so far (at most `capacity`).
        released: True once release() has been called.
    """

    capacity: int = 1024
    data: bytes = field(default=b"", repr=False)
    released: bool = False

    def __post_init__(self):
        if self.capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {self.capacity}")

    def __len__(self) -> int:
        return len(self.data)

    @property
    def is_full(self) -> bool:
        """True when the read may have been truncated."""
        return len(self.data) >= self.capacity

    def fill(self, sock: socket.socket) -> bytes:
        """
        Perform the ONE bounded read for this buffer.

        Returns:
            The bytes received (b"" if the peer closed without sending).

        Raises:
            OSError: The read failed (e.g. connection reset).
            RuntimeError: The buffer was already released.
        """
        if self.released:
            raise RuntimeError("RequestBuffer used after release")
        self.data = sock.recv(self.capacity)[:self.capacity]
        return self.data

    def release(self) -> None:
        """Drop the contents. Safe to call more than once."""
        self.data = b""
        self.released = True


@dataclass
class Connection:
    """
    Represents one accepted client connection.

    Attributes:
        socket: The client socket (blocking, no timeout).
        address: Client's (ip, port) tuple.
        id: Short identifier for log lines.
        state: Current connection state.
        created_at: Timestamp when connection was accepted.
        drain_timeout: How long close() waits for unread request bytes.
        drain_limit: Most unread bytes close() will discard.
    """

    socket: socket.socket
    address: tuple[str, int]

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    drain_timeout: float = 0.1
    drain_limit: int = 64 * 1024

    def __post_init__(self):
        # No per-request timeout: a slow client holds the server.
        self.socket.settimeout(None)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def client_port(self) -> int:
        return self.address[1]

    @property
    def closed(self) -> bool:
        return self.state == ConnectionState.CLOSED

    # =========================================================================
    # READING
    # =========================================================================

    def read_request(self, buffer: RequestBuffer) -> RequestBuffer:
        """
        Read the request into `buffer` with a single recv().

        Does not loop to fill the buffer and does not look for the end
        of the request line.

        Raises:
            OSError: The read failed. The caller abandons the connection.
        """
        self.state = ConnectionState.READING
        buffer.fill(self.socket)
        logger.debug(f"[{self.id}] Read {len(buffer)} bytes"
                     f"{' (buffer full, may be truncated)' if buffer.is_full else ''}")
        self.state = ConnectionState.PROCESSING
        return buffer

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Send the whole response.

        sendall() either sends every byte or raises. Failures are not
        retried.

        Returns:
            True if sent, False if the peer had gone away.
        """
        self.state = ConnectionState.WRITING

        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection. Idempotent.

        1. shutdown(SHUT_WR) sends FIN so the client sees end-of-body.
        2. Briefly drain request bytes we never read (anything past the
           single recv). Closing with unread data makes the kernel send
           RST, which can destroy a response the client has not read yet.
        3. close() releases the file descriptor.
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        try:
            self.socket.settimeout(self.drain_timeout)
            drained = 0
            while drained < self.drain_limit:
                chunk = self.socket.recv(4096)
                if not chunk:
                    break
                drained += len(chunk)
        except OSError:
            pass  # Timeout or reset: nothing left worth reading

        try:
            self.socket.close()
        finally:
            self.state = ConnectionState.CLOSED
            logger.debug(f"[{self.id}] Connection closed")

    # =========================================================================
    # CONTEXT MANAGER
    # =========================================================================

    def __enter__(self):
        """
        Allows:

            with conn:
                conn.read_request(buffer)
                conn.send_response(response)
            # closed here on every exit path
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
