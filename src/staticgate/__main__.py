"""
=============================================================================
STATICGATE CLI ENTRY POINT
=============================================================================

Serve one directory over HTTP through the static gate.

=============================================================================
USAGE
=============================================================================

    # Serve ./public on localhost:8080
    python -m staticgate ./public

    # Directory requests ("/docs/") get docs/index.html
    python -m staticgate ./public --index index.html

    # Let browsers cache for an hour
    python -m staticgate ./public --maxage 3600

    # Serve under a prefix: GET /assets/app.js → ./public/app.js
    python -m staticgate ./public --mount /assets

    # Dot-files are refused unless asked for
    python -m staticgate ./public --hidden

Environment variables (STATIC_INDEX, STATIC_MAXAGE, STATIC_PORT, ...)
provide the defaults; command-line flags win over them.

=============================================================================
"""

import argparse
import sys
from dataclasses import replace

from . import __version__
from .config import ServerConfig, StaticOptions
from .errors import ConfigurationError
from .server import StaticServer
from .static import StaticGate


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="staticgate",
        description="Serve a directory through the static file gate",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m staticgate ./public                       # Serve ./public
  python -m staticgate ./public --index index.html    # Directory index
  python -m staticgate ./public --maxage 3600         # Cache-Control: max-age=3600
  python -m staticgate ./public --mount /assets       # Serve under /assets
        """
    )

    parser.add_argument(
        "root",
        help="Directory to serve"
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=None,
        help="Host to bind to (default: 127.0.0.1, use 0.0.0.0 for containers)"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help="Port to listen on (default: 8080)"
    )

    parser.add_argument(
        "--mount", "-m",
        default=None,
        help="URL prefix to serve the directory under (e.g. /assets)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # GATE ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--index", "-i",
        default=None,
        help="File served for directory requests (e.g. index.html)"
    )

    parser.add_argument(
        "--hidden",
        action="store_true",
        default=None,
        help="Serve dot-files and dot-directories"
    )

    parser.add_argument(
        "--maxage",
        type=int,
        default=None,
        help="Cache-Control max-age in seconds (default: 0)"
    )

    parser.add_argument(
        "--no-format",
        dest="format",
        action="store_false",
        default=None,
        help="Do not serve the index for directory paths without a trailing slash"
    )

    parser.add_argument(
        "--no-if-modified-since",
        dest="if_modified_since_support",
        action="store_false",
        default=None,
        help="Always answer 200, ignoring If-Modified-Since"
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        default=None,
        help="Access log format (default: text)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"staticgate {__version__}"
    )

    return parser


def _overrides(args: argparse.Namespace, names: tuple[str, ...]) -> dict:
    """Flags the user actually gave; None means "keep the env/default"."""
    return {
        name: getattr(args, name)
        for name in names
        if getattr(args, name) is not None
    }


def build_server(args: argparse.Namespace) -> StaticServer:
    """Translate parsed arguments into a ready-to-run StaticServer."""
    options = replace(
        StaticOptions.from_env(),
        **_overrides(args, ("index", "hidden", "maxage", "format", "if_modified_since_support")),
    )
    config = replace(
        ServerConfig.from_env(),
        **_overrides(args, ("host", "port", "mount", "log_level", "log_format")),
    )
    return StaticServer(StaticGate(args.root, options), config)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        server = build_server(args)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    try:
        server.run()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
