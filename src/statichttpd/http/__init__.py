"""
=============================================================================
HTTP PROTOCOL COMPONENTS
=============================================================================

The pure, socket-free half of the server: every function here takes
strings or bytes and returns strings, bytes or response objects.

    request.py       parse_request_line()   bytes  → (method, route)
    routing.py       resolve_route()        route  → "htdocs/..."
    mime_types.py    get_mime_type()        path   → "text/html"
    response.py      build_response()       method + path → HTTPResponse
    status_codes.py  HTTPStatus             200 / 400 / 404

Because none of it touches a socket, all of it is unit-testable without
a running server.

=============================================================================
"""

from .status_codes import HTTPStatus
from .mime_types import MIME_TYPES, DEFAULT_MIME_TYPE, get_mime_type
from .routing import resolve_route
from .request import ParsedRequest, parse_request_line
from .response import HTTPResponse, build_response, format_http_date

__all__ = [
    "HTTPStatus",
    "MIME_TYPES",
    "DEFAULT_MIME_TYPE",
    "get_mime_type",
    "resolve_route",
    "ParsedRequest",
    "parse_request_line",
    "HTTPResponse",
    "build_response",
    "format_http_date",
]
