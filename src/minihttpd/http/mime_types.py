"""
=============================================================================
CONTENT TYPE DETECTION
=============================================================================

Picks the Content-Type header for a served file from its request path.

=============================================================================
SUBSTRING MATCH, NOT A MIME DATABASE
=============================================================================

This server recognises two kinds of files and treats everything else
as plain text. The markers are checked IN ORDER and the first one that
appears ANYWHERE in the path wins:

    ┌─────────────────────────────────────────────────────────────────────┐
    │   Path                      Content-Type                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │   /index.html               text/html                               │
    │   /css/site.css             text/css                                │
    │   /page.html.bak            text/html    (".html" appears)          │
    │   /theme.css.html           text/html    (".html" checked first)    │
    │   /logo.png                 text/plain   (no marker: default)       │
    │   /README                   text/plain                              │
    └─────────────────────────────────────────────────────────────────────┘

No charset parameter is appended: the header carries the bare type.

=============================================================================
"""

from pathlib import Path
from typing import Union


# Ordered (marker, content type) pairs. Order matters: first match wins.
CONTENT_TYPES = (
    (".html", "text/html"),
    (".css", "text/css"),
)

DEFAULT_CONTENT_TYPE = "text/plain"


def get_content_type(path: Union[str, Path]) -> str:
    """
    Get the Content-Type header value for a request path.

    Args:
        path: Requested path (or file name).

    Returns:
        "text/html", "text/css" or "text/plain".

    Examples:
        >>> get_content_type("/index.html")
        'text/html'

        >>> get_content_type("/style.css")
        'text/css'

        >>> get_content_type("/image.png")
        'text/plain'
    """
    path = str(path)
    for marker, content_type in CONTENT_TYPES:
        if marker in path:
            return content_type
    return DEFAULT_CONTENT_TYPE
