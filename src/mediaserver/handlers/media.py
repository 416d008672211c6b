"""
=============================================================================
MEDIA HANDLER
=============================================================================

Serves GET /<percent-encoded-filename>, either whole or as one byte range.

=============================================================================
FLOW
=============================================================================

    "/my%20song.mp3"
          │
          ▼
    1. percent-decode, strip leading "/"    → "my song.mp3"   (ClientError)
          │
          ▼
    2. must appear in the directory listing                   (NotFound)
          │
          ▼
    3. extension → Content-Type                               (ClientError)
          │
          ▼
    4. read the whole file                          (NotFound / ServerError)
          │
          ├── no Range  ──► 200 OK, full body
          │
          └── Range     ──► 5. resolve + check bounds  (InvalidContentRange)
                                  │
                                  ▼
                            206 Partial Content, sliced body

=============================================================================
RANGE ARITHMETIC
=============================================================================

HTTP ranges are inclusive at both ends; Python slices exclude the stop
index. For a 5-byte file "hello":

    Range            resolved       slice              body    Content-Range
    ───────────────  ─────────────  ─────────────────  ──────  ──────────────
    bytes=1-3        (1, 3)         content[1:4]       "ell"   bytes 1-3/5
    bytes=2-         (2, 4)         content[2:5]       "llo"   bytes 2-4/5
    bytes=4-4        (4, 4)         content[4:5]       "o"     bytes 4-4/5
    bytes=1-5        end >= 5       ─                  ─       416
    bytes=5-         (5, 4) s > e   ─                  ─       416
    bytes=3-1        s > e          ─                  ─       416

Any range on an empty file resolves to (start, -1) and is therefore 416.

=============================================================================
"""

import logging
from typing import Optional
from urllib.parse import unquote

from ..http.errors import ClientError, InvalidContentRange
from ..http.mime_types import get_content_type
from ..http.request import ByteRange, HTTPRequest
from ..http.response import HTTPResponse, ok, partial_content
from .library import find_media_file, read_media_file


logger = logging.getLogger(__name__)


def decode_filename(endpoint: str) -> str:
    """
    Percent-decode an endpoint into a file name.

    Decoding is strict: a sequence like %FF that does not decode to UTF-8
    is a ClientError. "+" is left alone (this is a path, not a query).

        >>> decode_filename("/my%20song.mp3")
        'my song.mp3'
    """
    try:
        decoded = unquote(endpoint, encoding="utf-8", errors="strict")
    except UnicodeDecodeError as e:
        raise ClientError(f"Unable to decode url {endpoint!r}: {e}") from e
    return decoded.lstrip("/")


def resolve_range(byte_range: ByteRange, length: int) -> tuple[int, int]:
    """
    Turn a ByteRange into concrete inclusive (start, end) offsets.

    Args:
        byte_range: Parsed range from the request.
        length: Length of the file in bytes.

    Returns:
        (start, end), both inclusive, with 0 <= start <= end < length.

    Raises:
        InvalidContentRange: If the range cannot be satisfied.
    """
    start, end = byte_range

    if end is None:
        end = length - 1
    elif end >= length:
        raise InvalidContentRange(f"{byte_range} ends past {length} bytes")

    if start > end:
        raise InvalidContentRange(f"{byte_range} is empty for {length} bytes")

    return start, end


def serve_media(request: HTTPRequest, endpoint: str, media_dir: str) -> HTTPResponse:
    """
    Serve one file from the media directory.

    Args:
        request: The parsed request (only its range is used).
        endpoint: Raw request path, including the leading "/".
        media_dir: Directory files are served from.

    Returns:
        200 with the whole file, or 206 with the requested range.

    Raises:
        ClientError: Undecodable path or unsupported extension.
        NotFound: File not in the media directory.
        InvalidContentRange: Range outside the file.
        ServerError: The file could not be read.
    """
    filename = decode_filename(endpoint)

    path = find_media_file(media_dir, filename)
    content_type = get_content_type(filename)
    content = read_media_file(path)

    byte_range: Optional[ByteRange] = request.range
    if byte_range is None:
        return ok(content, content_type)

    length = len(content)
    start, end = resolve_range(byte_range, length)

    logger.debug(f"Serving {filename!r} bytes {start}-{end} of {length}")
    return partial_content(content[start:end + 1], content_type, start, end, length)
