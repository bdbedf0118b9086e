"""
=============================================================================
HTTP SERVER
=============================================================================

Puts the pieces together:

    ServerConfig ──► HTTPServer
                        │
                        ├── SocketServer       (acceptor, forks workers)
                        └── StaticFileHandler  (runs inside each worker)
                                 └── AccessLog

=============================================================================
"""

import logging
from typing import Tuple

from .config import ServerConfig
from .access_log import AccessLog
from .core import SocketServer, Connection
from .handlers import StaticFileHandler


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Process-per-connection static file server.

    =========================================================================
    USAGE
    =========================================================================

        config = load_config("httpd.conf")
        server = HTTPServer(config)
        server.run()  # Never returns; raises ServerError on socket failure

    =========================================================================
    """

    def __init__(self, config: ServerConfig):
        """
        Args:
            config: Server configuration, validated here (fail-fast).
        """
        self.config = config
        self.config.validate()

        self._socket_server = SocketServer(config)
        self._handler = StaticFileHandler(
            document_root=config.document_root,
            access_log=AccessLog(config.access_log),
            chunk_size=config.buffer_size,
        )

    @property
    def address(self) -> Tuple[str, int]:
        return self._socket_server.address

    def bind(self) -> None:
        """Create the listening socket now instead of in run()."""
        self._socket_server.listen()

    def run(self) -> None:
        """
        Accept and serve connections forever.

        Raises:
            ServerError: If the listening socket fails (fatal).
        """
        logger.debug(f"Serving {self.config.document_root!r} on port {self.config.port}")
        self._socket_server.start(self._handle_connection)

    def _handle_connection(self, conn: Connection) -> None:
        # Runs in the forked worker
        self._handler.handle(conn)
