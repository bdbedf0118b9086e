"""
=============================================================================
FORKING TCP SOCKET SERVER
=============================================================================

This module implements the acceptor: it owns the listening socket,
accepts connections forever and hands each one to a freshly forked
worker process.

=============================================================================
PROCESS PER CONNECTION
=============================================================================

                    ┌───────────────────────┐
                    │   Acceptor (parent)   │ ◄── Owns listening socket
                    │   accept() loop       │     Bound to 0.0.0.0:PORT
                    └───────────┬───────────┘
                                │ fork() per connection
        ┌───────────────────────┼───────────────────────┐
        ▼                       ▼                       ▼
   ┌──────────┐           ┌──────────┐           ┌──────────┐
   │ Worker 1 │           │ Worker 2 │           │ Worker 3 │
   │ client A │           │ client B │           │ client C │
   └──────────┘           └──────────┘           └──────────┘
     exit(0)                exit(0)                exit(0)
        │                       │                       │
        └──────── SIGCHLD ──────┴───────────────────────┘
                      │
                      ▼
            waitpid(-1, WNOHANG) loop in the acceptor

Each worker has its own address space. A worker that crashes, hangs on
a slow client or leaks memory affects nobody else, and everything it
allocated is returned to the OS when it exits.

=============================================================================
FILE DESCRIPTORS AFTER fork()
=============================================================================

fork() duplicates every open descriptor. Both sides must drop the copy
they do not need:

    Parent: listen_sock ✓   client_sock ✗ (closed right after fork)
    Child:  listen_sock ✗   client_sock ✓ (closed after the response)

If the parent kept client sockets, the client would never see EOF and
the acceptor would run out of descriptors. If workers kept the
listening socket, the port could stay bound after the acceptor dies.

=============================================================================
ZOMBIE REAPING
=============================================================================

A finished child stays in the process table (a "zombie") until its
parent collects its exit status. The kernel sends SIGCHLD when a child
exits, but several exits can collapse into ONE signal, so the handler
loops until no finished child is left:

    def reap(signum, frame):
        while True:
            pid, _ = os.waitpid(-1, os.WNOHANG)   # never blocks
            if pid == 0:                          # children still running
                return

A signal arriving while the acceptor sits in accept() runs the handler;
Python then retries accept() automatically (PEP 475), so reaping never
disturbs the loop.

=============================================================================
"""

import os
import signal
import socket
import logging
from typing import Callable, Optional, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)

LISTEN_HOST = "0.0.0.0"


class ServerError(Exception):
    """
    Fatal socket error in the acceptor (create, bind, listen or accept).

    There is no retry and no fallback port: the process is expected to
    log this and exit.
    """

    def __init__(self, operation: str, error: OSError):
        super().__init__(f"{operation} failed: {error}")
        self.operation = operation
        self.error = error


def reap_children(signum=None, frame=None) -> int:
    """
    Collect every finished child process without blocking.

    Installed as the SIGCHLD handler. Also safe to call directly.

    Returns:
        Number of children reaped.
    """
    reaped = 0
    while True:
        try:
            pid, _ = os.waitpid(-1, os.WNOHANG)
        except ChildProcessError:
            return reaped  # No children at all
        if pid == 0:
            return reaped  # Remaining children are still running
        reaped += 1


class SocketServer:
    """
    Process-per-connection TCP server.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      SocketServer Internals                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    start(handler)                                                    │
    │        │                                                             │
    │        ├──► _create_socket()   socket() + SO_REUSEADDR               │
    │        ├──► bind()             0.0.0.0:PORT                          │
    │        ├──► listen()           backlog from config                   │
    │        ├──► signal(SIGCHLD)    reap_children                         │
    │        │                                                             │
    │        └──► _accept_loop()     forever                               │
    │                 └──► accept() → Connection → _dispatch()            │
    │                                                                      │
    │    _dispatch(conn)                                                   │
    │        ├── child:  close listen socket, handler(conn), _exit        │
    │        └── parent: close client socket, return                      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    Usage:
        def handle_connection(conn: Connection):
            ...  # Runs in the worker process

        server = SocketServer(config)
        server.start(handle_connection)  # Never returns normally
    """

    def __init__(self, config: ServerConfig):
        self.config = config
        self._socket: Optional[socket.socket] = None

    @property
    def address(self) -> Tuple[str, int]:
        """
        Get the bound (host, port).

        After start() this is the real port, which matters when the
        config asks for port 0.
        """
        if self._socket is not None:
            return self._socket.getsockname()
        return (LISTEN_HOST, self.config.port)

    def _create_socket(self) -> socket.socket:
        """Create the IPv4 TCP listening socket."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        # Restarting while old connections sit in TIME_WAIT must not fail
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return sock

    def listen(self) -> None:
        """
        Create, bind and listen.

        Raises:
            ServerError: On any socket failure. The socket is closed first.
        """
        try:
            self._socket = self._create_socket()
        except OSError as e:
            logger.error(f"Socket creation failed: {e}")
            raise ServerError("socket", e)

        try:
            self._socket.bind((LISTEN_HOST, self.config.port))
        except OSError as e:
            self._close_listener()
            logger.error(f"Bind failed on port {self.config.port}: {e}")
            raise ServerError("bind", e)

        try:
            self._socket.listen(self.config.backlog)
        except OSError as e:
            self._close_listener()
            logger.error(f"Listen failed: {e}")
            raise ServerError("listen", e)

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Listen and accept connections forever.

        Args:
            connection_handler: Called with each Connection INSIDE the
                                forked worker. It must not return the
                                connection to the acceptor; the worker
                                exits as soon as it returns.

        Raises:
            ServerError: If the socket cannot be set up or accept() fails.
        """
        if self._socket is None:
            self.listen()

        signal.signal(signal.SIGCHLD, reap_children)

        logger.info(f"HTTP server started on port {self.address[1]}")

        self._accept_loop(connection_handler)

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        while True:
            try:
                client_socket, client_address = self._socket.accept()
            except OSError as e:
                self._close_listener()
                logger.error(f"Accept failed: {e}")
                raise ServerError("accept", e)

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")

            conn = Connection(
                socket=client_socket,
                address=client_address,
                buffer_size=self.config.buffer_size,
            )
            self._dispatch(conn, connection_handler)

    def _dispatch(self, conn: Connection, connection_handler: Callable[[Connection], None]):
        """
        Fork a worker for the connection.

        The acceptor never waits for the worker; it only drops its own
        copy of the client socket.
        """
        try:
            pid = os.fork()
        except OSError as e:
            # Out of processes: this client is dropped, the server keeps going
            logger.error(f"Fork failed for {conn.client_ip}: {e}")
            conn.socket.close()
            return

        if pid == 0:
            self._run_worker(conn, connection_handler)

        # Parent: the worker owns the client socket now
        conn.socket.close()

    def _run_worker(self, conn: Connection, connection_handler: Callable[[Connection], None]):
        """
        Body of the forked worker. Never returns.

        os._exit() skips the parent's atexit hooks and finally blocks,
        which belong to the acceptor, not to this copy of it.
        """
        status = 0
        try:
            signal.signal(signal.SIGCHLD, signal.SIG_DFL)
            self._close_listener()
            connection_handler(conn)
        except BaseException:
            logger.exception(f"Worker {os.getpid()} failed handling {conn.client_ip}")
            status = 1
        finally:
            conn.close()
            os._exit(status)

    def _close_listener(self):
        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None
