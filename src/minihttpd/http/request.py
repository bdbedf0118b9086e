"""
=============================================================================
REQUEST LINE SCANNING
=============================================================================

Extracts the requested path from the raw bytes of an HTTP request.

=============================================================================
WHAT WE LOOK AT
=============================================================================

Only the start of the request matters to a GET-only static server:

    GET /css/site.css HTTP/1.0\r\n
    ─┬─ ──────┬────── ────┬───
     │        │           │
     │        │           └── ignored
     │        └── the path: next run of non-whitespace bytes
     └── must be the literal "GET" at the very start

Headers and body are never inspected.

=============================================================================
NO 400 RESPONSES
=============================================================================

The scanner never rejects a request. A line that does not start with
"GET" (POST, garbage, an empty read) yields an EMPTY path. The handler
then looks up document_root + "" which is a directory, so the client
gets the ordinary 404 response. There is no separate Bad Request path.

The path is taken verbatim:
- no percent-decoding ("/a%20b.txt" looks for a file named "a%20b.txt")
- no query string stripping ("/a.html?x=1" looks for "a.html?x=1")
- no ".." filtering (see DESIGN.md, path traversal)
- a NUL byte ends the path ("/a.html<NUL>junk" looks for "a.html")

=============================================================================
"""

import os
import re
from dataclasses import dataclass


# "GET", optional whitespace, then the path token.
# Mirrors a scanf("GET %s") scan: the whitespace between the method and
# the path may be absent ("GET/index.html" still yields "/index.html").
# A NUL byte ends the path, as it ends a C string.
REQUEST_LINE_PATTERN = re.compile(rb"GET\s*([^\s\x00]+)")

INDEX_PATH = "/index.html"


@dataclass(frozen=True)
class RequestLine:
    """
    The parts of the request line this server uses.

    Attributes:
        method: "GET" when the scan matched, "" otherwise.
        path: Requested path, or "" when the scan failed.
    """

    method: str
    path: str

    @property
    def is_get(self) -> bool:
        return self.method == "GET"

    @property
    def resolved_path(self) -> str:
        """The path with "/" rewritten to the index page."""
        if self.path == "/":
            return INDEX_PATH
        return self.path


def parse_request_line(data: bytes) -> RequestLine:
    """
    Scan raw request bytes for "GET <path>".

    Args:
        data: Whatever a single read returned (possibly empty or truncated).

    Returns:
        RequestLine with the scanned path, or an empty one on mismatch.

    Examples:
        >>> parse_request_line(b"GET /a.html HTTP/1.0\\r\\n\\r\\n").path
        '/a.html'

        >>> parse_request_line(b"POST /a.html HTTP/1.0\\r\\n\\r\\n").path
        ''
    """
    match = REQUEST_LINE_PATTERN.match(data)
    if not match:
        return RequestLine(method="", path="")

    # fsdecode keeps undecodable bytes (surrogateescape) so the path still
    # names the same file on disk
    return RequestLine(method="GET", path=os.fsdecode(match.group(1)))


def build_file_path(document_root: str, path: str) -> str:
    """
    Join the document root and request path verbatim.

    No normalization: "/var/www" + "/../etc/passwd" is
    "/var/www/../etc/passwd", and the OS resolves the "..".
    """
    return document_root + path
