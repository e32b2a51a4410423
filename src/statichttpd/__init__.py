"""
=============================================================================
STATICHTTPD - A Minimal Single-Process Static File Server
=============================================================================

Serves files from ./htdocs over HTTP/1.1 on 127.0.0.1:2728, one
connection at a time, using nothing but the socket module.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    statichttpd/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m statichttpd)
    ├── server.py            # HTTPServer orchestrator
    ├── config.py            # ServerConfig dataclass (fixed constants)
    ├── exceptions.py        # BindError, FileNotFound, ...
    ├── core/                # Everything that touches a socket
    │   ├── socket_server.py # Listening socket + accept loop
    │   ├── connection.py    # Client connection + RequestBuffer
    │   └── shutdown.py      # SIGINT → orderly release
    ├── http/                # Pure protocol functions
    │   ├── request.py       # Request line parsing
    │   ├── routing.py       # Route → file path
    │   ├── mime_types.py    # Extension → Content-Type
    │   ├── response.py      # Response assembly + Date header
    │   └── status_codes.py  # 200 / 400 / 404
    └── handlers/
        └── static.py        # Per-connection pipeline

=============================================================================
QUICK START
=============================================================================

    $ mkdir htdocs && echo '<h1>Hello</h1>' > htdocs/index.html
    $ python -m statichttpd
    $ curl -i http://localhost:2728/

    From code:

    from statichttpd import HTTPServer, ServerConfig

    HTTPServer(ServerConfig(document_root="public")).run()

=============================================================================
WHAT IT DOES NOT DO
=============================================================================

Methods other than GET, keep-alive, pipelining, TLS, chunked encoding,
directory listings, range requests, and serving two clients at once.

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer
from .config import ServerConfig

__all__ = ["HTTPServer", "ServerConfig", "__version__"]
