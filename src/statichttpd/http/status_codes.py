"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The server only ever answers with three status lines:

    ┌────────┬──────────────────────────────────────────────────────────┐
    │  200   │ OK           - File found, body follows                 │
    │  400   │ Bad Request  - Method was not GET                       │
    │  404   │ Not Found    - Resolved file could not be opened        │
    └────────┴──────────────────────────────────────────────────────────┘

    HTTP/1.1 404 Not Found
             ─── ─────────
              │      │
              │      └── Reason phrase
              └────────── Status code

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    IntEnum, so codes compare as integers:

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200
    BAD_REQUEST = 400
    NOT_FOUND = 404

    @property
    def phrase(self) -> str:
        """Reason phrase for the status line."""
        return _STATUS_PHRASES.get(self, "Unknown")


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
}
