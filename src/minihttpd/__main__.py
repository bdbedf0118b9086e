"""
=============================================================================
HTTP SERVER CLI ENTRY POINT
=============================================================================

    # Read ./httpd.conf, print banner, go to the background
    python -m minihttpd

    # Explicit config file
    python -m minihttpd /etc/minihttpd/httpd.conf

    # Stay attached to the terminal (development, process supervisors)
    python -m minihttpd --foreground httpd.conf

=============================================================================
EXIT STATUS
=============================================================================

    1   usage error, unreadable/malformed config, socket failure
    -   otherwise the server never exits on its own

=============================================================================
"""

import argparse
import logging
import sys
from dataclasses import replace

from . import __version__
from .config import DEFAULT_CONFIG_FILE, ConfigError, load_config
from .core import ServerError
from .daemon import daemonize
from .log import setup_logging
from .server import HTTPServer


logger = logging.getLogger("minihttpd")

EXIT_FAILURE = 1


class ArgumentParser(argparse.ArgumentParser):
    """argparse parser whose usage errors exit with EXIT_FAILURE, not 2."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILURE, f"{self.prog}: error: {message}\n")


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="minihttpd",
        description="Process-per-connection HTTP/1.0 static file server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Config file format:
  DocumentRoot /var/www
  Port 8080
  AccessLog access.log      (optional)

Examples:
  minihttpd                          # Use ./{DEFAULT_CONFIG_FILE}
  minihttpd /etc/minihttpd.conf      # Explicit config file
  minihttpd -f httpd.conf            # Do not daemonize
        """
    )

    parser.add_argument(
        "config",
        nargs="?",
        default=DEFAULT_CONFIG_FILE,
        help=f"Config file path (default: {DEFAULT_CONFIG_FILE})"
    )

    parser.add_argument(
        "--foreground", "-f",
        action="store_true",
        help="Stay in the foreground instead of detaching from the terminal"
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"minihttpd {__version__}"
    )

    return parser


def fatal(message: str):
    """Report a fatal error on stderr and syslog, then exit."""
    print(f"Error: {message}", file=sys.stderr)
    logger.critical(message)
    sys.exit(EXIT_FAILURE)


def main(argv=None):
    """
    Main CLI entry point.

    1. Parse arguments (zero or one config path)
    2. Load and validate the config (fatal on error)
    3. Print the startup banner
    4. Daemonize unless --foreground
    5. Run the accept loop (fatal on socket error)
    """
    args = build_parser().parse_args(argv)

    setup_logging(args.log_level or "INFO")

    try:
        config = load_config(args.config)
        if args.log_level:
            config = replace(config, log_level=args.log_level)
        server = HTTPServer(config)
    except ConfigError as e:
        fatal(str(e))

    print(f"HTTP server listening on port {config.port}...")

    if not args.foreground:
        try:
            daemonize()
        except OSError as e:
            fatal(f"Daemonize failed: {e}")

    try:
        server.run()
    except ServerError as e:
        fatal(str(e))
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")


if __name__ == "__main__":
    main()
