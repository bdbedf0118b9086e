"""
Integration tests against a running forking server.
"""

import socket
import threading
import time
from pathlib import Path

from conftest import TestServer, split_response, read_log_lines, INDEX_HTML, STYLE_CSS
from minihttpd import HTTPServer
from minihttpd.handlers import StaticFileHandler
from minihttpd.http.response import NOT_FOUND_BODY


class TestServing:
    """Requests over real TCP connections."""
    
    def test_index_page(self, live_server):
        """Test GET / HTTP/1.0 with index.html = <h1>Hi</h1>."""
        status, headers, body = split_response(live_server.request(b"GET / HTTP/1.0\r\n\r\n"))
        
        assert status == "HTTP/1.0 200 OK"
        assert headers["Content-Type"] == "text/html"
        assert body == INDEX_HTML
    
    def test_missing_file(self, live_server):
        """Test GET /missing.png HTTP/1.0."""
        status, _, body = split_response(live_server.get("/missing.png"))
        
        assert status == "HTTP/1.0 404 Not Found"
        assert body == NOT_FOUND_BODY
    
    def test_root_same_as_index(self, live_server):
        assert live_server.get("/") == live_server.get("/index.html")
    
    def test_large_file(self, live_server, document_root: Path):
        data = bytes(range(256)) * 4096  # 1 MiB
        (document_root / "big.bin").write_bytes(data)
        
        _, _, body = split_response(live_server.get("/big.bin"))
        
        assert body == data
    
    def test_many_sequential_requests(self, live_server):
        """Test that finished workers do not stop the acceptor."""
        for _ in range(30):
            assert live_server.get("/style.css").endswith(STYLE_CSS)
        
        assert live_server.is_alive


class TestConcurrency:
    """Several connections at once."""
    
    def test_simultaneous_requests_get_their_own_bodies(self, live_server, document_root: Path):
        (document_root / "a.txt").write_bytes(b"A" * 50000)
        (document_root / "b.txt").write_bytes(b"B" * 50000)
        
        results = {}
        
        def fetch(name):
            results[name] = split_response(live_server.get(f"/{name}"))[2]
        
        threads = [threading.Thread(target=fetch, args=(name,)) for name in ("a.txt", "b.txt") * 5]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10.0)
        
        assert results["a.txt"] == b"A" * 50000
        assert results["b.txt"] == b"B" * 50000
    
    def test_stalled_client_does_not_block_others(self, live_server):
        """Test fault isolation: a silent client holds only its own worker."""
        stalled = socket.create_connection(("127.0.0.1", live_server.port), timeout=5.0)
        try:
            time.sleep(0.2)  # Its worker is now blocked in recv()
            
            status, _, body = split_response(live_server.get("/"))
            
            assert status == "HTTP/1.0 200 OK"
            assert body == INDEX_HTML
        finally:
            stalled.close()
    
    def test_client_disconnect_mid_response(self, live_server, document_root: Path):
        """Test that a client vanishing during a send leaves the server healthy."""
        (document_root / "huge.bin").write_bytes(b"x" * (4 * 1024 * 1024))
        
        with socket.create_connection(("127.0.0.1", live_server.port), timeout=5.0) as s:
            s.sendall(b"GET /huge.bin HTTP/1.0\r\n\r\n")
            s.recv(1024)
        
        assert live_server.get("/").endswith(INDEX_HTML)
        assert live_server.is_alive


class TestAccessLog:
    """Access log lines written by workers."""
    
    def test_one_line_per_request(self, live_server, access_log_path: Path):
        live_server.get("/")
        live_server.get("/missing.png")
        
        lines = read_log_lines(access_log_path, 2)
        
        assert len(lines) == 2
        paths = sorted(line.rsplit(" - ", 1)[1] for line in lines)
        assert paths == ["/index.html", "/missing.png"]
        assert all(" - 127.0.0.1 - " in line for line in lines)
    
    def test_concurrent_appends_are_whole_lines(self, live_server, access_log_path: Path):
        count = 20
        threads = [
            threading.Thread(target=live_server.get, args=(f"/notes.txt?n={i}",))
            for i in range(count)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10.0)
        
        lines = read_log_lines(access_log_path, count)
        
        assert len(lines) == count
        for line in lines:
            timestamp, ip, path = line.split(" - ")
            assert len(timestamp) == len("2026-10-18 14:03:07")
            assert ip == "127.0.0.1"
            assert path.startswith("/notes.txt?n=")
        assert {line.rsplit("=", 1)[1] for line in lines} == {str(i) for i in range(count)}


class TestWorkerFailure:
    """A worker that blows up must not take the acceptor with it."""
    
    def test_next_request_served_after_worker_raises(self, config, monkeypatch):
        original_handle = StaticFileHandler.handle
        
        def handle(self, conn):
            if conn.socket.recv(64, socket.MSG_PEEK).startswith(b"GET /crash"):
                raise RuntimeError("handler bug")
            original_handle(self, conn)
        
        monkeypatch.setattr(StaticFileHandler, "handle", handle)
        server = TestServer(HTTPServer(config))
        server.start()
        
        try:
            assert server.get("/crash") == b""
            
            status, _, body = split_response(server.get("/"))
            
            assert status == "HTTP/1.0 200 OK"
            assert body == INDEX_HTML
            assert server.is_alive
        finally:
            server.stop()
