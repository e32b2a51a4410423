"""
=============================================================================
HTTP RESPONSE ASSEMBLY
=============================================================================

Builds the three responses this server can send.

=============================================================================
RESPONSE SHAPES (exact bytes)
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  400 - method is not GET                                            │
    │  ───────────────────────                                            │
    │    HTTP/1.1 400 Bad Request\r\n                                     │
    │    \n                                                               │
    ├─────────────────────────────────────────────────────────────────────┤
    │  404 - resolved file could not be opened                            │
    │  ─────────────────────────────────────                              │
    │    HTTP/1.1 404 Not Found\r\n                                       │
    │    \n                                                               │
    ├─────────────────────────────────────────────────────────────────────┤
    │  200 - file found                                                   │
    │  ────────────────                                                   │
    │    HTTP/1.1 200 OK\r\n                                              │
    │    Date: Thu, 15 Jan 2026 12:30:45 GMT\r\n                          │
    │    Content-Type: text/html\r\n                                      │
    │    \n                            ← bare LF ends the header block    │
    │    <file bytes>                                                     │
    └─────────────────────────────────────────────────────────────────────┘

Every header line ends in CRLF, but the blank line that closes the header
block is a single LF. There is no Content-Length header: the connection
is closed after the body, which is how the client knows the body ended.
Existing clients of this server depend on these bytes, so to_bytes()
reproduces them exactly.

The whole response goes out as ONE buffer of exactly

    len(header bytes) + len(file bytes)

with no padding and no truncation.

=============================================================================
THE RESPONSE STATE MACHINE
=============================================================================

        build_response(method, file_path)
                    │
                    ▼
           method == "GET" ? ──── no ───► MethodNotAllowed ──► 400
                    │ yes
                    ▼
           open(file_path) ? ──── no ───► FileNotFound ──────► 404
                    │ yes
                    ▼
           read all bytes, add Date + Content-Type ──────────► 200

=============================================================================
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional

from ..exceptions import FileNotFound, MethodNotAllowed, RequestError
from .mime_types import get_mime_type
from .status_codes import HTTPStatus


logger = logging.getLogger(__name__)

HEADER_LINE_END = "\r\n"
HEADER_BLOCK_END = "\n"


@dataclass
class HTTPResponse:
    """
    Represents an HTTP response to be sent to the client.

    Built fresh for every request and never reused.
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """Example: "HTTP/1.1 200 OK" """
        return f"{self.version} {self.status.value} {self.status.phrase}"

    def header_bytes(self) -> bytes:
        """
        Serialize the status line and headers.

            HTTP/1.1 200 OK\\r\\n
            Date: ...\\r\\n
            Content-Type: ...\\r\\n
            \\n
        """
        lines = [self.status_line]
        for name, value in self.headers.items():
            lines.append(f"{name}: {value}")

        head = "".join(line + HEADER_LINE_END for line in lines) + HEADER_BLOCK_END
        return head.encode("latin-1")

    def to_bytes(self) -> bytes:
        """
        Serialize the complete response into one contiguous buffer.

        Returns:
            Header bytes followed by the body, nothing else.
        """
        return self.header_bytes() + self.body

    def __len__(self) -> int:
        """Total bytes on the wire: header length + body length."""
        return len(self.header_bytes()) + len(self.body)


# =============================================================================
# DATE HEADER
# =============================================================================

def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an RFC 1123 HTTP-date.

    Format: Day, DD Mon YYYY HH:MM:SS GMT
    Example: Thu, 15 Jan 2026 12:30:45 GMT

    Names are spelled out here rather than taken from strftime("%a %b"),
    which follows the process locale.

    Args:
        dt: Datetime to format. Naive values are taken as UTC; aware
            values are converted to UTC first.

    Returns:
        Formatted date string.
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)

    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )


def http_date_now() -> str:
    """Current UTC time as an HTTP-date."""
    return format_http_date(datetime.now(timezone.utc))


# =============================================================================
# RESPONSE CONSTRUCTORS
# =============================================================================

def error_response(error: RequestError) -> HTTPResponse:
    """Map a request error to its bodiless status-line response."""
    return HTTPResponse(status=HTTPStatus(error.status_code))


def file_response(content: bytes, mime_type: str, now: Optional[datetime] = None) -> HTTPResponse:
    """
    200 OK carrying a file.

    Header order is fixed: Date, then Content-Type.
    """
    date = format_http_date(now) if now is not None else http_date_now()
    return HTTPResponse(
        status=HTTPStatus.OK,
        headers={
            "Date": date,
            "Content-Type": mime_type,
        },
        body=content,
    )


# =============================================================================
# BUILDING A RESPONSE FOR A REQUEST
# =============================================================================

def check_method(method: str) -> None:
    """Raise MethodNotAllowed unless the method is exactly "GET"."""
    if method != "GET":
        raise MethodNotAllowed(method)


def read_file(file_path: str) -> bytes:
    """
    Read a file in full.

    Any failure to OPEN the file (missing, permission denied, a
    directory) is a FileNotFound. A failure while READING an opened file
    is an ordinary OSError and propagates.
    """
    try:
        f = open(file_path, "rb")
    except OSError as e:
        raise FileNotFound(file_path) from e

    with f:
        return f.read()


def build_response(method: str, file_path: str, now: Optional[datetime] = None) -> HTTPResponse:
    """
    Produce exactly one of the three responses.

    Args:
        method: Method token from the request line.
        file_path: Path produced by resolve_route().
        now: Time for the Date header (current UTC time if omitted).

    Returns:
        400, 404 or 200 HTTPResponse.

    Raises:
        OSError: Reading an already-opened file failed.
    """
    try:
        check_method(method)
        content = read_file(file_path)
    except RequestError as e:
        logger.debug(f"{e} -> {e.status_code}")
        return error_response(e)

    return file_response(content, get_mime_type(file_path), now)
