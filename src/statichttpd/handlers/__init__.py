"""
Request handlers.

There is one: StaticFileHandler, which maps every GET to a file under the
document root.
"""

from .static import StaticFileHandler

__all__ = ["StaticFileHandler"]
