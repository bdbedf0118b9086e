"""
Request handlers.

StaticFileHandler serves files from the document root; it is the only
handler this server has.
"""

from .static import StaticFileHandler

__all__ = [
    "StaticFileHandler",
]
