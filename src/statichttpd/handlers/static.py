"""
=============================================================================
STATIC FILE HANDLER (THE REQUEST HANDLER)
=============================================================================

Turns one connection's bytes into exactly one response and leaves the
connection closed.

=============================================================================
FLOW
=============================================================================

    dispatch(conn, buffer)
        │
        ├──► read_request()        one recv() into the buffer
        ├──► parse_request_line()  "GET /about?x=1 HTTP/1.1" → GET, /about?x=1
        ├──► resolve_route()       /about?x=1 → htdocs/about.html
        ├──► build_response()      400 / 404 / 200
        ├──► send_response()       one sendall() of header + body
        └──► close()               always, exactly once

    ┌─────────────────────────────────────────────────────────────────────┐
    │  Request                       Resolved path           Response     │
    ├─────────────────────────────────────────────────────────────────────┤
    │  POST / HTTP/1.1               (not resolved)          400          │
    │  GET /missing HTTP/1.1         htdocs/missing.html     404          │
    │  GET / HTTP/1.1                htdocs/index.html       200 text/html│
    │  GET /css/site.css HTTP/1.1    htdocs/css/site.css     200 text/css │
    └─────────────────────────────────────────────────────────────────────┘

A garbled request line never gets its own error: the empty or odd route
simply resolves to a file that does not exist, and the client gets 404.
Only the method is checked explicitly.

=============================================================================
SECURITY NOTE
=============================================================================

No path traversal protection. Routes are concatenated onto the document
root literally, so "GET /../secret.html" reads "htdocs/../secret.html".
The server binds to loopback only.

=============================================================================
"""

import logging
from datetime import datetime
from typing import Optional

from ..config import ServerConfig
from ..core.connection import Connection, RequestBuffer
from ..http.request import ParsedRequest, parse_request_line
from ..http.response import HTTPResponse, build_response
from ..http.routing import resolve_route


logger = logging.getLogger(__name__)


class StaticFileHandler:
    """
    Serves files from the document root.

    Usage:
        handler = StaticFileHandler(ServerConfig())
        socket_server.serve_forever(handler.dispatch)
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        self.config = config or ServerConfig()

    def read_request(self, conn: Connection, buffer: RequestBuffer) -> RequestBuffer:
        """One bounded read. See Connection.read_request()."""
        return conn.read_request(buffer)

    def resolve(self, route: str) -> str:
        """Route → candidate path, using the configured root and defaults."""
        return resolve_route(
            route,
            document_root=self.config.document_root,
            index_file=self.config.index_file,
            default_extension=self.config.default_extension,
        )

    def handle(self, request: ParsedRequest, now: Optional[datetime] = None) -> HTTPResponse:
        """
        Build the response for an already-parsed request.

        The route is only resolved for GET; any other method is answered
        with 400 regardless of the route.
        """
        file_path = self.resolve(request.route) if request.method == "GET" else ""
        return build_response(request.method, file_path, now)

    def dispatch(self, conn: Connection, buffer: RequestBuffer) -> None:
        """
        Serve one connection start to finish.

        The connection is closed on every exit path, including a failed
        read or send.

        Raises:
            OSError: The read failed. Nothing was sent.
        """
        with conn:
            self.read_request(conn, buffer)
            request = parse_request_line(buffer)

            response = self.handle(request)
            conn.send_response(response.to_bytes())

            mime_type = response.headers.get("Content-Type", "")
            logger.info(f"{request.method} {request.route} -> {response.status.value} {mime_type}".rstrip())
