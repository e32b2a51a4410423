"""
=============================================================================
MIME TYPE DETECTION
=============================================================================

Maps a file extension to the Content-Type reported to the client.

=============================================================================
A CLOSED TABLE
=============================================================================

    ┌────────────────────────────────────────────────────────────────────┐
    │   .html  → text/html          .jpg  → image/jpeg                   │
    │   .css   → text/css           .png  → image/png                    │
    │   .js    → application/js     .gif  → image/gif                    │
    │                                                                     │
    │   anything else (or no extension) → text/html                      │
    └────────────────────────────────────────────────────────────────────┘

Two things differ from a typical MIME database:

1. The match is CASE-SENSITIVE. "logo.PNG" is not ".png", so it falls
   back to text/html.

2. The default is text/html, not application/octet-stream. Paths without
   an extension already get ".html" appended by route resolution, so the
   default only matters for unknown extensions like ".xyz".

get_mime_type() is total: every input produces a value, never an error.

=============================================================================
"""

MIME_TYPES = {
    ".html": "text/html",
    ".css": "text/css",
    ".js": "application/js",
    ".jpg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
}

DEFAULT_MIME_TYPE = "text/html"


def get_extension(path: str) -> str:
    """
    Return the extension of the last path component, including the dot.

    A leading dot does not start an extension (".hidden" has none).
    Route resolution uses the same rule to decide when to append ".html".

    Examples:
        >>> get_extension("htdocs/css/site.css")
        '.css'
        >>> get_extension("htdocs/archive.tar.gz")
        '.gz'
        >>> get_extension("htdocs/.hidden")
        ''
    """
    filename = path.rsplit("/", 1)[-1]
    dot = filename.rfind(".")
    if dot <= 0:
        return ""
    return filename[dot:]


def get_mime_type(path: str) -> str:
    """
    Get the MIME type for a file based on its extension.

    Args:
        path: Resolved file path (e.g. "htdocs/index.html")

    Returns:
        The MIME type string, DEFAULT_MIME_TYPE when unrecognized.

    Examples:
        >>> get_mime_type("htdocs/style.css")
        'text/css'
        >>> get_mime_type("htdocs/data.xyz")
        'text/html'
    """
    return MIME_TYPES.get(get_extension(path), DEFAULT_MIME_TYPE)
