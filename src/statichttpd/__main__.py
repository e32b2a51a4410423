"""
=============================================================================
CLI ENTRY POINT
=============================================================================

    # Serve ./htdocs on http://localhost:2728/
    python -m statichttpd

    # Show every connection open/close
    python -m statichttpd --log-level DEBUG

The address, port, backlog and document root are fixed; there are no
flags for them.

Exit status:
    0   stopped by SIGINT / SIGTERM
    1   could not bind, listen, or resolve the server address

=============================================================================
"""

import argparse
import sys
from typing import Optional, Sequence

from . import __version__
from .config import ServerConfig
from .exceptions import StartupError
from .server import HTTPServer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="statichttpd",
        description="Serve ./htdocs over HTTP/1.1 on 127.0.0.1:2728, one connection at a time",
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"statichttpd {__version__}"
    )

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Process exit status.
    """
    args = build_parser().parse_args(argv)

    server = HTTPServer(ServerConfig(log_level=args.log_level))

    try:
        server.run()
    except StartupError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
