"""
=============================================================================
MINIHTTPD
=============================================================================

A minimal process-per-connection HTTP/1.0 static file server.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                          ARCHITECTURE                               │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   __main__        argparse CLI, banner, daemonize                   │
    │   config          DocumentRoot / Port file → ServerConfig           │
    │   server          HTTPServer: acceptor + handler                    │
    │   core/           SocketServer (fork per connection), Connection    │
    │   handlers/       StaticFileHandler (read, look up, respond)        │
    │   http/           request scan, response framing, content types     │
    │   access_log      one line per request, append-only                 │
    │   log             syslog error logging                              │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Quick start:

    from minihttpd import HTTPServer, ServerConfig

    server = HTTPServer(ServerConfig(document_root="/var/www", port=8080))
    server.run()

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig, ConfigError, load_config, parse_config
from .server import HTTPServer
from .core import SocketServer, ServerError, Connection
from .handlers import StaticFileHandler
from .access_log import AccessLog, AccessLogEntry

__all__ = [
    "__version__",

    # Configuration
    "ServerConfig",
    "ConfigError",
    "load_config",
    "parse_config",

    # Server
    "HTTPServer",
    "SocketServer",
    "ServerError",
    "Connection",

    # Handling
    "StaticFileHandler",
    "AccessLog",
    "AccessLogEntry",
]
