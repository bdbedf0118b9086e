"""
=============================================================================
HTTP/1.0 RESPONSE FRAMING
=============================================================================

Builds the bytes this server writes before (or instead of) a file body.

=============================================================================
THE TWO RESPONSES
=============================================================================

    FOUND:                              NOT FOUND:
    ──────                              ──────────
    HTTP/1.0 200 OK\r\n                 HTTP/1.0 404 Not Found\r\n
    Content-Type: text/html\r\n         Content-Type: text/html\r\n
    \r\n                                Content-Length: 93\r\n
    <raw file bytes...>                 \r\n
    (connection close = end of body)    <html>...404 Not Found...</html>

The 200 response has NO Content-Length. The file is streamed in chunks
and HTTP/1.0 lets the client read until the server closes the socket.
There is also no Date, no Server and no charset parameter.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from .status_codes import HTTPStatus


HTTP_VERSION = "HTTP/1.0"

NOT_FOUND_BODY = (
    b"<html><body><h1>404 Not Found</h1>"
    b"<p>The requested file could not be found.</p></body></html>"
)


@dataclass
class ResponseHead:
    """
    Status line and headers of a response, without the body.

    Headers are written in insertion order, which is what keeps the
    wire format byte-for-byte stable.
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    version: str = HTTP_VERSION

    @property
    def status_line(self) -> str:
        """
        Get the HTTP status line.

        Example: "HTTP/1.0 404 Not Found"
        """
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    def set_header(self, name: str, value: str) -> "ResponseHead":
        """Set a header, returning self for chaining."""
        self.headers[name] = value
        return self

    def to_bytes(self) -> bytes:
        """
        Serialize status line and headers, including the blank line.

            HTTP/1.0 200 OK\\r\\n
            Content-Type: text/css\\r\\n
            \\r\\n
        """
        lines = [self.status_line]
        for name, value in self.headers.items():
            lines.append(f"{name}: {value}")
        lines.append("")
        return "\r\n".join(lines).encode("iso-8859-1") + b"\r\n"


def ok_head(content_type: str) -> bytes:
    """Headers for a found file; the caller streams the body."""
    return ResponseHead(HTTPStatus.OK).set_header("Content-Type", content_type).to_bytes()


def not_found(body: Optional[bytes] = None) -> bytes:
    """
    Complete 404 response.

    Content-Length is the real byte count of the body.
    """
    if body is None:
        body = NOT_FOUND_BODY
    head = (ResponseHead(HTTPStatus.NOT_FOUND)
        .set_header("Content-Type", "text/html")
        .set_header("Content-Length", str(len(body))))
    return head.to_bytes() + body


NOT_FOUND_RESPONSE = not_found()
