"""
=============================================================================
CORE SERVER COMPONENTS
=============================================================================

The networking half of the server: everything that touches a socket.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         SOCKET SERVER                                │
    │  • Creates, binds and listens on the TCP socket                     │
    │  • Runs the accept() loop, ONE connection at a time                 │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    │ conn + fresh RequestBuffer
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          CONNECTION                                  │
    │  • One bounded recv(), one sendall(), one close()                   │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      SHUTDOWN CONTROLLER                             │
    │  • Knows the listener, the active connection and its buffer         │
    │  • Turns SIGINT into an orderly release of all three               │
    └─────────────────────────────────────────────────────────────────────┘

There is no thread pool. The accept loop calls the handler directly and
waits for it.

=============================================================================
"""

from .connection import Connection, ConnectionState, RequestBuffer
from .shutdown import ShutdownController
from .socket_server import SocketServer

__all__ = [
    "SocketServer",
    "Connection",
    "ConnectionState",
    "RequestBuffer",
    "ShutdownController",
]
