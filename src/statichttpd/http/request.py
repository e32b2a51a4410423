"""
=============================================================================
REQUEST LINE PARSING
=============================================================================

Only the first line of a request means anything to this server:

    GET /about?lang=en HTTP/1.1\r\n       ← parsed
    Host: localhost:2728\r\n              ← ignored
    User-Agent: curl/8.5.0\r\n            ← ignored
    \r\n

    ┌──────────────────────────────────────────────────────────────────┐
    │   GET   /about?lang=en   HTTP/1.1                                │
    │   ───   ──────────────   ────────                                │
    │    │          │              │                                   │
    │  method     route        (ignored)                               │
    └──────────────────────────────────────────────────────────────────┘

=============================================================================
A BOUNDED, SINGLE-READ PARSER
=============================================================================

The bytes come from ONE recv() into a fixed-size RequestBuffer. There is
no loop waiting for "\r\n", so:

- A request line longer than the buffer is truncated: the route is
  whatever fit.
- A request line split across TCP segments is parsed from the first
  segment only.

Both are part of the contract, not bugs to be worked around here.

Malformed input never raises. Missing tokens come back as "", which the
handler turns into a 400 (empty method) or a 404 (empty route resolves
to a file that does not exist).

=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Union

from ..core.connection import RequestBuffer


@dataclass(frozen=True)
class ParsedRequest:
    """
    Method and route from the request line.

    Attributes:
        method: First token, e.g. "GET". Not validated.
        route: Second token, raw, may carry a query string.
    """

    method: str = ""
    route: str = ""


def parse_request_line(data: Union[RequestBuffer, bytes]) -> ParsedRequest:
    """
    Take the first two whitespace-delimited tokens of the first line.

    Tokens are split on ASCII whitespace as bytes, then decoded with
    os.fsdecode(), so the route opens exactly the file whose name has
    those bytes, UTF-8 or not.

    Args:
        data: The filled RequestBuffer (or its raw bytes).

    Returns:
        ParsedRequest with "" for any missing token.

    Examples:
        >>> parse_request_line(b"GET /index.html HTTP/1.1\\r\\n\\r\\n")
        ParsedRequest(method='GET', route='/index.html')
        >>> parse_request_line(b"")
        ParsedRequest(method='', route='')
    """
    raw = data.data if isinstance(data, RequestBuffer) else data
    first_line = raw.split(b"\n", 1)[0]

    tokens = first_line.split(None, 2)
    method = os.fsdecode(tokens[0]) if len(tokens) > 0 else ""
    route = os.fsdecode(tokens[1]) if len(tokens) > 1 else ""

    return ParsedRequest(method=method, route=route)
