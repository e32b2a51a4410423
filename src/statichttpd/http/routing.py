"""
=============================================================================
ROUTE RESOLUTION
=============================================================================

Turns the route from the request line into a path under the document root.

=============================================================================
THE FOUR STEPS
=============================================================================

    Route                  Step 1       Step 2            Step 3 + 4
    (raw)                  drop query   directory index   prefix + extension
    ─────────────────────  ───────────  ────────────────  ──────────────────────
    /                      /            /index.html       htdocs/index.html
    /a?x=1                 /a           /a                htdocs/a.html
    /about                 /about       /about            htdocs/about.html
    /css/site.css          (same)       (same)            htdocs/css/site.css
    /docs/                 /docs/       /docs/index.html  htdocs/docs/index.html

1. Everything from the FIRST '?' onward is dropped.
2. A route ending in '/' gets the index file appended.
3. The document root is prefixed verbatim (no separator is inserted:
   routes are expected to start with '/').
4. If the filename has no extension - no '.' at all, or only a leading
   '.' - ".html" is appended.

=============================================================================
WHAT THIS DOES NOT DO
=============================================================================

resolve_route() never touches the filesystem and never normalizes the
path. A route such as "/../secret" resolves to "htdocs/../secret.html",
which the OS will happily follow out of the document root. This is the
long-standing behavior of the server and is kept as-is: it only listens
on loopback.

=============================================================================
"""

from .mime_types import get_extension


DOCUMENT_ROOT = "htdocs"
INDEX_FILE = "index.html"
DEFAULT_EXTENSION = ".html"


def strip_query(route: str) -> str:
    """
    Drop the query string.

    Examples:
        >>> strip_query("/search?q=1&page=2")
        '/search'
        >>> strip_query("/a?b?c")
        '/a'
    """
    return route.split("?", 1)[0]


def resolve_route(
    route: str,
    document_root: str = DOCUMENT_ROOT,
    index_file: str = INDEX_FILE,
    default_extension: str = DEFAULT_EXTENSION,
) -> str:
    """
    Map a request route to a candidate file path.

    Pure and total: every route maps to exactly one path, including the
    empty route produced by a malformed request line.

    Args:
        route: Raw route token from the request line (may carry a query).
        document_root: Directory prefixed to the route.
        index_file: Appended to routes ending in '/'.
        default_extension: Appended when the filename has no extension.

    Returns:
        Relative path such as "htdocs/index.html".

    Examples:
        >>> resolve_route("/")
        'htdocs/index.html'
        >>> resolve_route("/a?x=1")
        'htdocs/a.html'
        >>> resolve_route("/img/logo.png")
        'htdocs/img/logo.png'
    """
    path = strip_query(route)

    if path.endswith("/"):
        path += index_file

    file_path = document_root + path

    if not get_extension(file_path):
        file_path += default_extension

    return file_path
