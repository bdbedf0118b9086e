"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Configuration for the HTTP server, loaded once at startup.

=============================================================================
CONFIG FILE FORMAT
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  httpd.conf                                                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   DocumentRoot /var/www                                             │
    │   Port 8080                                                         │
    │   AccessLog /var/log/minihttpd/access.log     (optional)            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

One "Key value" pair per line, separated by whitespace. Blank lines and
lines starting with '#' are ignored. DocumentRoot and Port are required.

=============================================================================
WHY FROZEN?
=============================================================================

Every worker process gets a copy of the config when it is forked.
Nothing may change it after load, so the dataclass is frozen: an
accidental assignment raises instead of silently diverging between
the acceptor and its workers.

=============================================================================
"""

from dataclasses import dataclass
from typing import Optional


DEFAULT_CONFIG_FILE = "httpd.conf"
DEFAULT_ACCESS_LOG = "access.log"


class ConfigError(Exception):
    """
    Raised when the configuration file is unreadable or malformed.

    Carries the file path and (when known) the offending line number,
    so the fatal startup message points at the exact problem.
    """

    def __init__(self, message: str, path: Optional[str] = None, line: Optional[int] = None):
        if path is not None and line is not None:
            message = f"{path}:{line}: {message}"
        elif path is not None:
            message = f"{path}: {message}"
        super().__init__(message)
        self.path = path
        self.line = line


@dataclass(frozen=True)
class ServerConfig:
    """
    Configuration for the HTTP server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    CONTENT
    - document_root: prefix joined verbatim with the request path

    NETWORK SETTINGS
    - port, backlog, buffer_size

    LOGGING
    - access_log, log_level

    =========================================================================
    """

    document_root: str
    """
    Filesystem prefix under which files are served.
    Joined with the request path as-is: "/var/www" + "/a.html".
    A trailing slash is NOT stripped ("/var/www/" + "/a.html" works too).
    """

    port: int = 8080
    """
    TCP port to listen on. 0 lets the OS pick a free port.
    """

    backlog: int = 10
    """
    Maximum number of queued connections passed to listen().
    """

    buffer_size: int = 1024
    """
    Size of the single request read and of each file chunk sent.
    """

    access_log: str = DEFAULT_ACCESS_LOG
    """
    Access log path, relative to the working directory unless absolute.
    """

    log_level: str = "INFO"

    def validate(self) -> None:
        """
        Validate configuration values.

        Called at startup so a bad port fails before the socket exists.
        """
        if not 0 <= self.port <= 65535:
            raise ConfigError(f"Invalid port: {self.port}. Must be 0-65535.")

        if not self.document_root:
            raise ConfigError("DocumentRoot must not be empty")

        if self.backlog < 0:
            raise ConfigError("backlog must be >= 0")

        if self.buffer_size < 1:
            raise ConfigError("buffer_size must be >= 1")


# Keys recognised in the config file, mapped to ServerConfig fields
_CONFIG_KEYS = {
    "DocumentRoot": "document_root",
    "Port": "port",
    "AccessLog": "access_log",
}

_REQUIRED_KEYS = ("DocumentRoot", "Port")


def parse_config(text: str, path: Optional[str] = None) -> ServerConfig:
    """
    Parse config file contents into a ServerConfig.

    Args:
        text: File contents.
        path: File name, used only in error messages.

    Returns:
        Validated ServerConfig.

    Raises:
        ConfigError: On unknown keys, missing values, a non-integer port
                     or a missing required key.
    """
    values = {}

    for lineno, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        parts = line.split(None, 1)
        if len(parts) != 2:
            raise ConfigError(f"Missing value for {parts[0]!r}", path, lineno)

        key, value = parts[0], parts[1].strip()
        if key not in _CONFIG_KEYS:
            raise ConfigError(f"Unknown key {key!r}", path, lineno)

        if key == "Port":
            try:
                values["port"] = int(value)
            except ValueError:
                raise ConfigError(f"Port must be an integer, got {value!r}", path, lineno)
        else:
            values[_CONFIG_KEYS[key]] = value

    for key in _REQUIRED_KEYS:
        if _CONFIG_KEYS[key] not in values:
            raise ConfigError(f"Missing required key {key!r}", path)

    config = ServerConfig(**values)
    try:
        config.validate()
    except ConfigError as e:
        raise ConfigError(str(e), path)
    return config


def load_config(path: str = DEFAULT_CONFIG_FILE) -> ServerConfig:
    """
    Load configuration from a file.

    Args:
        path: Config file path (default: httpd.conf in the working directory).

    Raises:
        ConfigError: If the file cannot be read or is malformed.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read config file: {e}", path)

    return parse_config(text, path)
