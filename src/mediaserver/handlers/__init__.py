"""
=============================================================================
REQUEST HANDLERS
=============================================================================

The two things the server can do:

    GET /            → listing.list_media()    newline-separated file names
    GET /<name>      → media.serve_media()     whole file or a byte range

Both read the media directory fresh on every call through library.py,
which is also where the path-containment check lives.

Handlers return an HTTPResponse on success and raise a MediaServerError
subclass on failure. They never build error pages themselves.

=============================================================================
"""

from .library import list_available_files, find_media_file, read_media_file
from .listing import list_media
from .media import serve_media, decode_filename, resolve_range

__all__ = [
    "list_available_files",
    "find_media_file",
    "read_media_file",
    "list_media",
    "serve_media",
    "decode_filename",
    "resolve_range",
]
