"""
=============================================================================
STATIC FILE HANDLER
=============================================================================

Serves one request on one connection from the document root.

=============================================================================
FLOW
=============================================================================

    ACCEPTED
       │
       ▼
    READING ──── read error ────────────────────────────► CLOSED (no response)
       │
       ▼
    PARSED / PARSE_FAILED (empty path, proceeds anyway)
       │
       ▼
    FILE_LOOKUP  document_root + path
       │
       ├── open fails ──► 404 ──► close ──► access log ──► CLOSED
       │
       ▼
    TYPE_DETECT  ".html" / ".css" / text/plain
       │
       ▼
    200 headers ──► STREAM_BODY (1024-byte chunks) ──► close ──► access log

Every path ends with the connection closed exactly once.

=============================================================================
SECURITY: PATH TRAVERSAL IS NOT BLOCKED
=============================================================================

    GET /../../etc/passwd HTTP/1.0

is opened as document_root + "/../../etc/passwd". The OS resolves "..",
so a client can read any file the server process can read. This server
is meant for trusted networks; run it as an unprivileged user with a
dedicated document root. See DESIGN.md for the rationale.

=============================================================================
"""

import logging
from typing import Optional

from ..access_log import AccessLog
from ..core.connection import Connection
from ..http.request import parse_request_line, build_file_path
from ..http.response import ok_head, NOT_FOUND_RESPONSE
from ..http.mime_types import get_content_type


logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024


class StaticFileHandler:
    """
    Handler for serving static files.

    =========================================================================
    USAGE
    =========================================================================

        handler = StaticFileHandler("/var/www", AccessLog("access.log"))

        # In the worker process, once per accepted connection:
        handler.handle(conn)

    The handler keeps no per-request state; one instance is created in
    the acceptor and inherited by every forked worker.

    =========================================================================
    """

    def __init__(
        self,
        document_root: str,
        access_log: Optional[AccessLog] = None,
        chunk_size: int = CHUNK_SIZE,
    ):
        """
        Initialize static file handler.

        Args:
            document_root: Prefix joined verbatim with each request path.
                           Not resolved, not checked for existence.
            access_log: Where to record each request. None disables it.
            chunk_size: Bytes read from the file per send.
        """
        self.document_root = document_root
        self.access_log = access_log
        self.chunk_size = chunk_size

    def handle(self, conn: Connection) -> None:
        """
        Handle one connection: read, look up, respond, close, log.

        Never raises for request-level problems; the connection is closed
        on every path, including unexpected exceptions.
        """
        with conn:
            # ─────────────────────────────────────────────────────────────
            # READ THE REQUEST (single read)
            # ─────────────────────────────────────────────────────────────
            try:
                data = conn.read_request()
            except OSError as e:
                logger.error(f"Read from {conn.client_ip} failed: {e}")
                return

            request = parse_request_line(data)
            if not request.is_get:
                logger.debug(f"No GET request line from {conn.client_ip}: {data[:64]!r}")

            path = request.resolved_path
            full_path = build_file_path(self.document_root, path)

            # ─────────────────────────────────────────────────────────────
            # FILE LOOKUP
            # ─────────────────────────────────────────────────────────────
            try:
                f = open(full_path, "rb")
            except (OSError, ValueError):
                # Missing file, directory, permission denied, NUL in the
                # document root: all 404
                conn.send(NOT_FOUND_RESPONSE)
                conn.close()
                logger.error(f"Requested file not found: {full_path}")
                self._record(conn.client_ip, path)
                return

            # ─────────────────────────────────────────────────────────────
            # SERVE THE FILE
            # ─────────────────────────────────────────────────────────────
            with f:
                conn.send(ok_head(get_content_type(path)))
                self._stream(f, conn)

        self._record(conn.client_ip, path)

    def _stream(self, f, conn: Connection) -> None:
        """
        Copy the file to the connection in fixed-size chunks.

        A failed send stops streaming: the client is gone and every
        further chunk would fail the same way.
        """
        while True:
            try:
                chunk = f.read(self.chunk_size)
            except OSError as e:
                logger.error(f"Error reading {f.name}: {e}")
                return
            if not chunk:
                return
            if not conn.send(chunk):
                return

    def _record(self, client_ip: str, path: str) -> None:
        if self.access_log is not None:
            self.access_log.record(client_ip, path)
