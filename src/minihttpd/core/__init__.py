"""
=============================================================================
CORE MODULE
=============================================================================

Low-level networking: the forking acceptor and the per-worker connection.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ SOCKET SERVER (socket_server.py)                                    │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Listens on 0.0.0.0:PORT, forks one worker per accepted connection,  │
    │ reaps finished workers on SIGCHLD                                   │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ CONNECTION (connection.py)                                          │
    │ ─────────────────────────────────────────────────────────────────── │
    │ One client socket: single-read request, best-effort sends,         │
    │ idempotent close                                                    │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .connection import Connection, ConnectionState
from .socket_server import SocketServer, ServerError, reap_children

__all__ = [
    "Connection",
    "ConnectionState",
    "SocketServer",
    "ServerError",
    "reap_children",
]
