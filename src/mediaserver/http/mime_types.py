"""
=============================================================================
MIME TYPE ALLOW-LIST
=============================================================================

Maps a media file's extension to the Content-Type it is served with.

This is an allow-list, not a best-effort guess: an extension that is not
in the table is a request for a resource type the server does not serve,
and is rejected with 400 instead of falling back to
application/octet-stream.

    ┌───────────────┬──────────────┐
    │ Extension     │ Content-Type │
    ├───────────────┼──────────────┤
    │ .mp3          │ audio/mpeg   │
    │ .csv .txt     │ text/plain   │
    │ .jpg .jpeg    │ image/jpeg   │
    │ .png          │ image/png    │
    └───────────────┴──────────────┘

Only the final suffix counts ("mix.tar.mp3" → ".mp3") and matching is
case-insensitive ("COVER.JPG" → image/jpeg).

=============================================================================
"""

from pathlib import Path

from .errors import ClientError


MIME_TYPES = {
    # Audio
    ".mp3": "audio/mpeg",

    # Text / tabular data, served as plain text
    ".csv": "text/plain",
    ".txt": "text/plain",

    # Images
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
}


def get_content_type(filename: str) -> str:
    """
    Get the Content-Type for a media file.

    Args:
        filename: File name (or path) with extension.

    Returns:
        The MIME type string.

    Raises:
        ClientError: If the name has no extension or the extension is not
                     served.

    Examples:
        >>> get_content_type("track01.mp3")
        'audio/mpeg'
        >>> get_content_type("notes.md")
        Traceback (most recent call last):
        ...
        mediaserver.http.errors.ClientError: Invalid file extension: '.md'
    """
    extension = Path(filename).suffix.lower()
    if not extension:
        raise ClientError(f"Unable to get file type: {filename!r}")

    try:
        return MIME_TYPES[extension]
    except KeyError:
        raise ClientError(f"Invalid file extension: {extension!r}") from None

