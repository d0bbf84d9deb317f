"""
=============================================================================
FILESERVER CLI ENTRY POINT
=============================================================================

    # Serve the current directory on port 8080
    python -m fileserver

    # Serve ./public on port 3000
    python -m fileserver 3000 --root ./public

    # Only on localhost, with verbose JSON access logs
    python -m fileserver 8000 --host 127.0.0.1 -l DEBUG --log-format json

Defaults come from FILESERVER_* environment variables (see config.py),
and explicit arguments override them.

=============================================================================
"""

import argparse
import sys
from typing import List, Optional

from . import __version__
from .config import LOG_FORMATS, LOG_LEVELS, ServerConfig
from .server import HTTPServer


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fileserver",
        description="Serve a directory over HTTP/1.x",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m fileserver                      # Serve . on port 8080
  python -m fileserver 3000                 # Custom port
  python -m fileserver --root ./public      # Custom served root
  python -m fileserver --host 127.0.0.1     # Localhost only
        """,
    )

    parser.add_argument(
        "port",
        nargs="?",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})",
    )

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host})",
    )

    parser.add_argument(
        "--root", "-r",
        default=defaults.root,
        help=f"Directory to serve (default: {defaults.root})",
    )

    parser.add_argument(
        "--log-level", "-l",
        type=str.upper,
        choices=LOG_LEVELS,
        default=defaults.log_level,
        help=f"Logging level (default: {defaults.log_level})",
    )

    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default=defaults.log_format,
        help=f"Access log format (default: {defaults.log_format})",
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"fileserver {__version__}",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point. Returns the process exit status."""
    try:
        defaults = ServerConfig.from_env()
    except ValueError as e:
        print(f"Error: invalid environment configuration: {e}", file=sys.stderr)
        return 2

    parser = build_parser(defaults)
    args = parser.parse_args(argv)

    defaults.port = args.port
    defaults.host = args.host
    defaults.root = args.root
    defaults.log_level = args.log_level
    defaults.log_format = args.log_format

    try:
        server = HTTPServer(defaults)
    except ValueError as e:
        parser.error(str(e))

    try:
        server.run()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
