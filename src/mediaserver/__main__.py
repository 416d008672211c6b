"""
=============================================================================
MEDIASERVER CLI ENTRY POINT
=============================================================================

    # Serve ~/Music on port 8080, all interfaces
    MEDIA_DIR=~/Music python -m mediaserver 8080

    # Same, via the console script
    MEDIA_DIR=~/Music mediaserver 8080

    # Verbose: dump every request and response head
    MEDIA_DIR=~/Music mediaserver 8080 --log-level DEBUG

=============================================================================
STARTUP FAILURES
=============================================================================

Both inputs are required, and a missing one stops the process before any
socket is opened:

    $ mediaserver
    usage: mediaserver [-h] ... port
    mediaserver: error: the following arguments are required: port
    (exit status 2)

    $ mediaserver 8080
    error: Unable to find env variable MEDIA_DIR
    (exit status 1)

=============================================================================
"""

import argparse
from dataclasses import replace
import sys
from typing import Optional, Sequence

from . import __version__
from .config import ConfigError, LOG_LEVELS, ServerConfig
from .server import MediaServer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mediaserver",
        description="Serve a directory of media files over HTTP/1.1, with byte-range support",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  MEDIA_DIR                 Directory to serve (required)
  MEDIA_SERVER_LOG_LEVEL    Default for --log-level

Examples:
  MEDIA_DIR=./media mediaserver 8080
  MEDIA_DIR=./media mediaserver 8080 --log-level DEBUG
        """
    )

    parser.add_argument(
        "port",
        type=int,
        help="Port to listen on",
    )

    parser.add_argument(
        "--host", "-H",
        default="0.0.0.0",
        help="Address to bind (default: 0.0.0.0, all interfaces)",
    )

    parser.add_argument(
        "--log-level", "-l",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Logging level (default: $MEDIA_SERVER_LOG_LEVEL or INFO)",
    )

    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        default="text",
        help="Access log format (default: text)",
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"mediaserver {__version__}",
    )

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Parse arguments and environment, then run the server until stopped.

    Returns:
        Process exit status.
    """
    args = build_parser().parse_args(argv)

    try:
        config = ServerConfig.from_env(
            port=args.port,
            host=args.host,
            log_level=args.log_level,
        )
        config = replace(config, log_format=args.log_format)
        server = MediaServer(config)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    try:
        server.run()
    except OSError as e:
        print(f"error: Unable to create TCP listener: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
