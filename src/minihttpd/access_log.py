"""
=============================================================================
ACCESS LOG
=============================================================================

Append-only record of every request, one line per request:

    2026-10-18 14:03:27 - 192.168.1.50 - /index.html
    ─────────┬───────── ──────┬─────── ──────┬──────
             │                │              │
      local time         client IP     resolved path ("/" → "/index.html")

=============================================================================
CONCURRENT APPENDS WITHOUT LOCKS
=============================================================================

Every worker process opens the file, writes its line, and closes it.
There is no shared handle and no lock between processes.

    Worker A ──► open("a") ──► write(line A) ──► close
    Worker B ──► open("a") ──► write(line B) ──► close

In append mode (O_APPEND) the kernel moves to end-of-file and writes
in one step, so two small whole-line writes never interleave or
overwrite each other. The line is handed to the file object as ONE
string, which the buffered writer flushes as one write() on close.
Lines from different workers may appear in any order.

=============================================================================
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime


logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class AccessLogEntry:
    """
    One access log line.

    Attributes:
        client_ip: Peer address of the connection.
        path: Requested path after the "/" → "/index.html" rewrite.
        timestamp: When the request finished (local time).
    """

    client_ip: str
    path: str
    timestamp: datetime = field(default_factory=datetime.now)

    def to_text(self) -> str:
        """Format as "<timestamp> - <client_ip> - <path>" (no newline)."""
        return f"{self.timestamp.strftime(TIMESTAMP_FORMAT)} - {self.client_ip} - {self.path}"


class AccessLog:
    """
    Appends AccessLogEntry lines to a file.

    Usage:
        access_log = AccessLog("access.log")
        access_log.record("127.0.0.1", "/index.html")
    """

    def __init__(self, path: str):
        self.path = path

    def append(self, entry: AccessLogEntry) -> bool:
        """
        Append one entry.

        A failure to open or write the file is logged as an error and
        otherwise ignored: by the time we log, the response is already
        on its way to the client.

        Returns:
            True if the line was written.
        """
        line = entry.to_text() + "\n"
        try:
            # surrogateescape writes undecodable path bytes back unchanged
            with open(self.path, "a", encoding="utf-8", errors="surrogateescape") as f:
                f.write(line)
        except OSError as e:
            logger.error(f"Unable to open log file {self.path}: {e}")
            return False
        return True

    def record(self, client_ip: str, path: str) -> bool:
        """Build an entry stamped with the current time and append it."""
        return self.append(AccessLogEntry(client_ip=client_ip, path=path))
