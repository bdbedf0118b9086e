"""
=============================================================================
CONNECTION
=============================================================================

Wraps one accepted client socket for the worker that owns it.

=============================================================================
ONE READ, ONE RESPONSE, ONE CLOSE
=============================================================================

HTTP/1.0 without keep-alive makes the lifecycle short:

    ┌─────────┐   read_request()   ┌─────────┐   send()...   ┌─────────┐
    │   NEW   │ ─────────────────► │ READING │ ────────────► │ WRITING │
    └─────────┘                    └─────────┘               └────┬────┘
         │                              │                         │
         │                              │ read error              │ close()
         │                              ▼                         ▼
         └──────────────────────────► CLOSED ◄────────────────────┘

read_request() is a SINGLE recv() of at most buffer_size bytes. TCP may
deliver a request in several segments; anything beyond the first read
is not seen. For "GET /path HTTP/1.0" this is never a problem in
practice, and it keeps the worker from waiting on a slow client for
headers it would ignore anyway.

=============================================================================
"""

import socket
import logging
import time
from enum import Enum
from dataclasses import dataclass, field


logger = logging.getLogger(__name__)

# close() reads leftover client bytes for at most this long, and at most
# this many bytes, before giving up and closing anyway
DRAIN_TIMEOUT = 0.5
MAX_DRAIN_BYTES = 64 * 1024


class ConnectionState(Enum):
    """
    Connection lifecycle states.
    """
    NEW = "new"              # Just accepted, nothing read yet
    READING = "reading"      # Reading the request
    WRITING = "writing"      # Sending the response
    CLOSED = "closed"        # Socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple as returned by accept().
        buffer_size: Maximum bytes read by read_request().
        state: Current connection state.
    """

    socket: socket.socket
    address: tuple
    buffer_size: int = 1024
    state: ConnectionState = ConnectionState.NEW

    # Count of bytes successfully written, for debug logging
    bytes_sent: int = field(default=0, repr=False)

    @property
    def client_ip(self) -> str:
        """Get the client IP address (dotted IPv4 text)."""
        return self.address[0]

    @property
    def client_port(self) -> int:
        return self.address[1]

    @property
    def closed(self) -> bool:
        return self.state == ConnectionState.CLOSED

    def read_request(self) -> bytes:
        """
        Read the request with a single recv() call.

        Returns:
            Up to buffer_size bytes. b"" if the client closed without
            sending anything.

        Raises:
            OSError: If the read itself fails. The caller decides what
                     to do with the connection (the handler drops it).
        """
        self.state = ConnectionState.READING
        return self.socket.recv(self.buffer_size)

    def send(self, data: bytes) -> bool:
        """
        Send data to the client, best-effort.

        Write failures (client went away, broken pipe) are logged at
        debug level and reported through the return value only.

        Returns:
            True if all data was sent, False otherwise.
        """
        self.state = ConnectionState.WRITING
        try:
            self.socket.sendall(data)
        except OSError as e:
            logger.debug(f"Send to {self.client_ip} failed: {e}")
            return False
        self.bytes_sent += len(data)
        return True

    def close(self):
        """
        Close the connection.

        Safe to call more than once; only the first call touches the socket.

        1. shutdown(SHUT_WR): send FIN so the client sees end of body
        2. drain: read what the client still has in flight, so close()
           does not answer with RST and discard our response. Bounded by
           DRAIN_TIMEOUT in total and MAX_DRAIN_BYTES, so a client that
           keeps sending cannot hold the worker
        3. close(): release the file descriptor
        """
        if self.state == ConnectionState.CLOSED:
            return

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        self._drain()

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"Connection from {self.client_ip} closed after {self.bytes_sent} bytes")

    def _drain(self):
        deadline = time.monotonic() + DRAIN_TIMEOUT
        drained = 0
        try:
            while drained < MAX_DRAIN_BYTES:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return
                self.socket.settimeout(remaining)
                data = self.socket.recv(self.buffer_size)
                if not data:
                    return
                drained += len(data)
        except OSError:
            pass  # socket.timeout is an OSError too

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - ensure connection is closed."""
        self.close()
        return False
