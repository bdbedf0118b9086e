"""
Detach the server from the controlling terminal.

    shell ──► python -m minihttpd
                  │
                  ├── prints banner, flushes stdout
                  │
                  fork()
                  ├── parent: _exit(0)  → shell prompt returns
                  └── child:  setsid()  → new session, no terminal
                                 │
                                 └── runs the accept loop
"""

import os
import sys
import logging


logger = logging.getLogger(__name__)


def daemonize() -> int:
    """
    Fork into the background and start a new session.

    Returns only in the child, with its pid. Buffered stdout/stderr are
    flushed first so the banner is not printed twice (once per process).

    Raises:
        OSError: If fork() or setsid() fails.
    """
    sys.stdout.flush()
    sys.stderr.flush()

    if os.fork() != 0:
        os._exit(0)

    os.setsid()
    pid = os.getpid()
    logger.debug(f"Daemonized as pid {pid}")
    return pid
