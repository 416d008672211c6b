"""
Listing handler: GET /

Responds with the names of the files in the media directory, one per line,
as text/plain:

    HTTP/1.1 200 OK
    Content-Type: text/plain
    Content-Length: 11

    a.txt
    b.png

There is no trailing newline, and an empty directory gives an empty body.
"""

from ..http.response import HTTPResponse, ok
from .library import list_available_files


def list_media(media_dir: str) -> HTTPResponse:
    """
    Build the listing response.

    Raises:
        ServerError: If the media directory cannot be read.
    """
    names = list_available_files(media_dir)
    return ok("\n".join(names).encode("utf-8"), "text/plain")
