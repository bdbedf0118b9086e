"""
=============================================================================
ERROR LOGGING (SYSLOG)
=============================================================================

Routes the "minihttpd" logger to the system log.

Every module logs through logging.getLogger(__name__); nothing here is
imported by them. setup_logging() is called once at startup and decides
where those records go:

    logger.error("Bind failed ...")
        │
        ▼
    "minihttpd" logger ──► SysLogHandler ──► /dev/log (or UDP :514)
                                               │
                                               ▼
            Oct 18 14:03:27 host HTTPServer[4242]: Bind failed ...

=============================================================================
SEVERITIES
=============================================================================

    logging level      syslog priority
    ─────────────      ───────────────
    DEBUG              debug
    INFO               notice        ("HTTP server started on port ...")
    WARNING            warning
    ERROR              err           ("Requested file not found", ...)
    CRITICAL           crit          (fatal startup errors)

INFO is sent as "notice" rather than "info": a server start is worth
noticing, and the server logs nothing else at INFO.

=============================================================================
"""

import os
import logging
import logging.handlers
from typing import Optional


SYSLOG_IDENT = "HTTPServer"
SYSLOG_SOCKET = "/dev/log"

LOGGER_NAME = "minihttpd"


class ServerSysLogHandler(logging.handlers.SysLogHandler):
    """SysLogHandler that reports INFO records as NOTICE."""

    def mapPriority(self, levelName):
        if levelName == "INFO":
            return "notice"
        return super().mapPriority(levelName)


def _syslog_address() -> object:
    if os.path.exists(SYSLOG_SOCKET):
        return SYSLOG_SOCKET
    return ("localhost", logging.handlers.SYSLOG_UDP_PORT)


def setup_logging(level: str = "INFO", address: Optional[object] = None) -> logging.Logger:
    """
    Configure the "minihttpd" logger to write to syslog.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR).
        address: Syslog address. Defaults to /dev/log when present,
                 UDP localhost:514 otherwise.

    Returns:
        The configured logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Repeated calls replace the handler instead of duplicating output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    try:
        handler = ServerSysLogHandler(
            address=address or _syslog_address(),
            facility=logging.handlers.SysLogHandler.LOG_USER,
        )
    except OSError:
        # No syslog daemon listening; errors still reach the terminal
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(f"{SYSLOG_IDENT}[%(process)d]: %(message)s"))
    logger.addHandler(handler)

    return logger
