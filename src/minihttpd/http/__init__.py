"""
=============================================================================
HTTP MODULE
=============================================================================

The HTTP/1.0 subset this server speaks.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ REQUEST (request.py)                                                │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Scans raw bytes for "GET <path>"                                    │
    │                                                                      │
    │ Input:   b"GET /index.html HTTP/1.0\r\n\r\n"                        │
    │ Output:  RequestLine(method="GET", path="/index.html")             │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ RESPONSE (response.py, status_codes.py)                             │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Frames the 200 header block and the complete 404 response           │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ CONTENT TYPES (mime_types.py)                                       │
    │ ─────────────────────────────────────────────────────────────────── │
    │ ".html" → text/html, ".css" → text/css, else text/plain            │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .request import RequestLine, parse_request_line, build_file_path
from .response import (
    ResponseHead,
    ok_head,
    not_found,
    NOT_FOUND_BODY,
    NOT_FOUND_RESPONSE,
)
from .status_codes import HTTPStatus
from .mime_types import get_content_type

__all__ = [
    # Request scanning
    "RequestLine",
    "parse_request_line",
    "build_file_path",

    # Response framing
    "ResponseHead",
    "ok_head",
    "not_found",
    "NOT_FOUND_BODY",
    "NOT_FOUND_RESPONSE",

    # Status codes
    "HTTPStatus",

    # Content types
    "get_content_type",
]
