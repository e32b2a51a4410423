"""
=============================================================================
SERVER ERRORS
=============================================================================

Every error the server can raise, grouped by WHERE it can happen.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         ERROR TAXONOMY                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   STARTUP (fatal - process exits with status 1)                    │
    │   ─────────────────────────────────────────────                     │
    │   BindError               bind() refused (port in use, < 1024)     │
    │   ListenError             listen() refused by the kernel           │
    │   AddressResolutionError  getnameinfo() failed for the banner      │
    │                                                                      │
    │   PER REQUEST (recoverable - become a status line)                 │
    │   ─────────────────────────────────────────────────                 │
    │   MethodNotAllowed        method is not GET      → 400             │
    │   FileNotFound            resolved file missing  → 404             │
    │                                                                      │
    │   SIGNAL                                                            │
    │   ──────                                                            │
    │   ShutdownRequested       SIGINT while a connection is in flight   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Read/send failures on a client socket are plain OSError. They are contained
by the accept loop: the connection is abandoned, the loop continues.

=============================================================================
"""


class ServerError(Exception):
    """Base class for errors raised by the server."""


# =============================================================================
# STARTUP ERRORS
# =============================================================================

class StartupError(ServerError):
    """
    A socket error before the first connection is accepted.

    Carries the address the server tried to use so the CLI can report it.
    """

    def __init__(self, message: str, host: str, port: int):
        super().__init__(message)
        self.host = host
        self.port = port


class BindError(StartupError):
    """The listening socket could not be bound to (host, port)."""


class ListenError(StartupError):
    """The kernel rejected listen() on the bound socket."""


class AddressResolutionError(StartupError):
    """The bound address could not be resolved for the startup log."""


# =============================================================================
# REQUEST ERRORS
# =============================================================================

class RequestError(ServerError):
    """
    A request that is answered with an error status line.

    Like a parse error in a full HTTP server, the exception carries the
    status code to return, so the response builder never has to guess.
    """

    status_code: int = 400


class MethodNotAllowed(RequestError):
    """
    Only GET is served.

    Note: the wire status is 400 Bad Request, not 405. Clients of this
    server have always seen 400 for any other method.
    """

    status_code = 400

    def __init__(self, method: str):
        super().__init__(f"Unsupported method: {method!r}")
        self.method = method


class FileNotFound(RequestError):
    """The resolved path could not be opened for reading."""

    status_code = 404

    def __init__(self, path: str):
        super().__init__(f"File not found: {path}")
        self.path = path


# =============================================================================
# SHUTDOWN
# =============================================================================

class ShutdownRequested(BaseException):
    """
    Raised from the SIGINT handler to unwind a blocking read or send.

    Derives from BaseException (like KeyboardInterrupt) so the per-connection
    `except Exception` in the accept loop does not swallow it.
    """
