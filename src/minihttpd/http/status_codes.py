"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The status codes this server emits, with their reason phrases.

A static file server that only understands GET needs exactly two
outcomes: the file was found, or it was not.

    HTTP/1.0 200 OK
             ─── ──
              │   │
              │   └── Reason phrase
              └────── Status code

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    This enum extends IntEnum, so status codes can be used as integers:

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200            # File found, body follows
    NOT_FOUND = 404     # File could not be opened

    @property
    def phrase(self) -> str:
        """Get the reason phrase for this status code."""
        return _STATUS_PHRASES.get(self, "Unknown")


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.NOT_FOUND: "Not Found",
}
