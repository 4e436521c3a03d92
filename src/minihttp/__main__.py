"""
=============================================================================
MINIHTTP CLI ENTRY POINT
=============================================================================

    # Run with defaults (127.0.0.1:4221, files relative to cwd)
    python -m minihttp

    # Serve /files/ from a directory (keep the trailing slash)
    python -m minihttp --directory /tmp/data/

    # Different address, verbose logs, JSON access log
    python -m minihttp --host 0.0.0.0 --port 8080 -l DEBUG --log-format json

Every option falls back to its HTTP_* environment variable, then to the
ServerConfig default.

=============================================================================
"""

import argparse
import sys
from typing import List, Optional

from . import __version__
from .config import LOG_FORMATS, LOG_LEVELS, ServerConfig
from .server import HTTPServer


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    """Build the argument parser, using `defaults` for every option."""
    parser = argparse.ArgumentParser(
        prog="minihttp",
        description="Minimal HTTP/1.1 server with echo, user-agent and file routes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Routes:
  GET  /                 200
  GET  /user-agent       echo the User-Agent header
  GET  /echo/<text>      echo <text>
  GET  /files/<name>     read <directory><name>
  POST /files/<name>     write the request body to <directory><name>
        """,
    )

    # ─────────────────────────────────────────────────────────────────────
    # FILES
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--directory", "-d",
        default=defaults.directory,
        help="Base directory for /files/, prefixed verbatim to file names "
             "(default: $HTTP_DIRECTORY or current directory)",
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host})",
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})",
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        type=str.upper,
        choices=LOG_LEVELS,
        default=defaults.log_level.upper(),
        help=f"Logging level (default: {defaults.log_level.upper()})",
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
        version=f"minihttp {__version__}",
    )

    return parser


def main(argv: Optional[List[str]] = None):
    """
    Parse arguments, build the server and run it until interrupted.

    Exits with status 1 on invalid configuration or if the address cannot
    be bound.
    """
    try:
        defaults = ServerConfig.from_env()
    except ValueError as e:
        print(f"Error: invalid environment: {e}", file=sys.stderr)
        sys.exit(1)

    args = build_parser(defaults).parse_args(argv)

    config = ServerConfig(
        host=args.host,
        port=args.port,
        directory=args.directory,
        timeout=defaults.timeout,
        log_level=args.log_level,
        log_format=args.log_format,
    )

    try:
        server = HTTPServer(config)
        server.run()
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
