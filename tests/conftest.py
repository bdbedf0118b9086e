"""
pytest configuration and fixtures.
"""

import multiprocessing
import socket
import time
from pathlib import Path
from typing import Generator

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minihttpd import HTTPServer, ServerConfig
from minihttpd.core import Connection


INDEX_HTML = b"<h1>Hi</h1>"
STYLE_CSS = b"body { color: #333; }\n"
NOTES_TXT = b"plain notes\n"


@pytest.fixture
def document_root(tmp_path: Path) -> Path:
    """Document root with an index page, a stylesheet and a text file."""
    root = tmp_path / "www"
    root.mkdir()
    (root / "index.html").write_bytes(INDEX_HTML)
    (root / "style.css").write_bytes(STYLE_CSS)
    (root / "notes.txt").write_bytes(NOTES_TXT)
    (root / "sub").mkdir()
    return root


@pytest.fixture
def access_log_path(tmp_path: Path) -> Path:
    return tmp_path / "access.log"


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


@pytest.fixture
def config(document_root: Path, access_log_path: Path, free_port: int) -> ServerConfig:
    """Server configuration pointing at the test document root."""
    return ServerConfig(
        document_root=str(document_root),
        port=free_port,
        access_log=str(access_log_path),
    )


def exchange(handler, request: bytes, client_ip: str = "127.0.0.1") -> bytes:
    """
    Run handler.handle() over a socketpair and return everything it sent.

    The client half-closes after sending, so the handler's drain on
    close returns immediately.
    """
    server_sock, client_sock = socket.socketpair()
    conn = Connection(socket=server_sock, address=(client_ip, 54321))
    try:
        client_sock.sendall(request)
        client_sock.shutdown(socket.SHUT_WR)
        handler.handle(conn)
        return recv_all(client_sock)
    finally:
        client_sock.close()


def recv_all(sock: socket.socket) -> bytes:
    chunks = []
    while True:
        data = sock.recv(4096)
        if not data:
            return b"".join(chunks)
        chunks.append(data)


def split_response(raw: bytes) -> tuple:
    """Split raw response bytes into (status line, headers dict, body)."""
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.decode("iso-8859-1").split("\r\n")
    headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(": ")
        headers[name] = value
    return lines[0], headers, body


def read_log_lines(path: Path, expected: int, timeout: float = 5.0) -> list:
    """
    Wait until the access log has at least `expected` lines.

    Workers write the line AFTER closing the connection, so the client
    can finish reading before the line exists.
    """
    deadline = time.time() + timeout
    lines = []
    while time.time() < deadline:
        if path.exists():
            lines = path.read_text().splitlines()
            if len(lines) >= expected:
                return lines
        time.sleep(0.05)
    return lines


class TestServer:
    """Live forking server running in a child process."""

    __test__ = False

    def __init__(self, server: HTTPServer):
        self.server = server
        self.port = server.address[1]
        self._process = None

    def start(self):
        """
        Start the accept loop in a forked process.

        The socket is bound here first, so connections queue up even
        before the child reaches accept() and no readiness probe is needed.
        """
        self.server.bind()
        self.port = self.server.address[1]
        ctx = multiprocessing.get_context("fork")
        self._process = ctx.Process(target=self.server.run, daemon=True)
        self._process.start()
        # The child owns the listening socket now
        self.server._socket_server._close_listener()

    def request(self, raw: bytes) -> bytes:
        with socket.create_connection(("127.0.0.1", self.port), timeout=5.0) as s:
            s.sendall(raw)
            return recv_all(s)

    def get(self, path: str) -> bytes:
        return self.request(f"GET {path} HTTP/1.0\r\n\r\n".encode())

    @property
    def is_alive(self) -> bool:
        return self._process is not None and self._process.is_alive()

    def stop(self):
        if self._process is not None:
            self._process.terminate()
            self._process.join(timeout=5.0)


@pytest.fixture
def live_server(config: ServerConfig) -> Generator[TestServer, None, None]:
    """A running server on a free port, serving the test document root."""
    test_srv = TestServer(HTTPServer(config))
    test_srv.start()

    yield test_srv

    test_srv.stop()
