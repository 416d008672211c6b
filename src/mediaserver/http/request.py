"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Turns the bytes arriving on a connection into an HTTPRequest.

=============================================================================
WHAT WE READ
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP REQUEST STRUCTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    GET /song%201.mp3 HTTP/1.1\r\n       ← start line                │
    │    ─┬─ ──────┬─────                                                 │
    │   method  endpoint  (anything after the 2nd space is ignored)       │
    │                                                                      │
    │    Host: localhost:8080\r\n             ← headers, "Name: Value"    │
    │    Range: bytes=100-199\r\n             ← parsed into a ByteRange   │
    │    \r\n                                 ← end of headers            │
    │                                                                      │
    │    (body)                               ← never read                │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PULL-BASED LINE READING
=============================================================================

The parser does not buffer the whole request. It pulls one line at a time
from a binary file-like object (socket.makefile("rb") in the server,
io.BytesIO in tests) and stops at the first empty line. Memory use is
bounded by the longest line, and a request body, if a client sends one,
stays unread in the socket.

    stream.readline() ──► "GET / HTTP/1.1"   → method, endpoint
    stream.readline() ──► "Host: x"          → headers["host"] = "x"
    stream.readline() ──► "Range: bytes=0-"  → range = ByteRange(0, None)
    stream.readline() ──► ""                 → stop

Both CRLF and bare LF line endings are accepted.

=============================================================================
FAILURE MODES
=============================================================================

All of these raise ClientError (→ 400):

    - stream ends before a start line arrives
    - start line has no method or no endpoint
    - endpoint does not begin with "/"
    - a header line without ": "
    - a Range value that is not "bytes=<digits>-<digits?>"
    - bytes that are not valid UTF-8

The caller tears the connection down after answering, so a parse that
fails half-way leaves nothing to clean up.

=============================================================================
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import BinaryIO, Mapping, NamedTuple, Optional

from .errors import ClientError


logger = logging.getLogger(__name__)


class ByteRange(NamedTuple):
    """
    A single byte range from a Range header.

    Both bounds are inclusive, as in HTTP: bytes=0-0 is one byte.
    `end` is None for an open-ended range (bytes=500-).

    Nothing here checks start <= end or the bounds against a file length;
    that needs the file, so the media handler does it.
    """

    start: int
    end: Optional[int] = None

    @property
    def is_open_ended(self) -> bool:
        return self.end is None

    def __str__(self) -> str:
        return f"bytes={self.start}-{'' if self.end is None else self.end}"


@dataclass(frozen=True)
class HTTPRequest:
    """
    A parsed request.

    Frozen: built once per connection by RequestParser and only read
    afterwards.

    Attributes:
        method:   Request method exactly as sent ("GET", "POST", ...).
        path:     Raw endpoint, still percent-encoded ("/a%20b.mp3").
        headers:  Header name (lower case) → value. A repeated header keeps
                  its last value.
        range:    Parsed Range header, or None.
    """

    method: str
    path: str
    headers: Mapping[str, str] = field(default_factory=dict)
    range: Optional[ByteRange] = None

    def get_header(self, name: str, default: str = "") -> str:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower(), default)

    def __str__(self) -> str:
        lines = [f"{self.method} {self.path}"]
        lines.extend(f"{name}: {value}" for name, value in self.headers.items())
        return "\n".join(lines)


# =============================================================================
# RANGE HEADER
# =============================================================================

RANGE_UNIT = "bytes"


def _parse_offset(text: str, which: str) -> int:
    # isdigit() alone accepts characters like "²"; keep to ASCII 0-9.
    if not text or not (text.isascii() and text.isdigit()):
        raise ClientError(f"Error parsing Range byte range: invalid {which} {text!r}")
    return int(text)


def parse_range_header(value: str) -> ByteRange:
    """
    Parse a Range header value.

    =========================================================================
    ACCEPTED FORMS
    =========================================================================

        bytes=100-199    → ByteRange(100, 199)
        bytes=100-       → ByteRange(100, None)

    Rejected (ClientError):

        bytes 100-199    (no "=")
        items=1-2        (unit is not bytes)
        bytes=100        (no "-")
        bytes=-500       (suffix ranges: start must be a number)
        bytes=0-1,5-9    (multiple ranges)

    =========================================================================

    Args:
        value: The header value, without the "Range: " prefix.

    Returns:
        The parsed ByteRange.

    Raises:
        ClientError: If the value is not a single, well-formed byte range.
    """
    unit, sep, spec = value.strip().partition("=")
    if not sep:
        raise ClientError(f"Error parsing Range header: {value!r}")

    if unit.strip().lower() != RANGE_UNIT:
        raise ClientError(f"Unsupported Range unit: {unit!r}")

    start, sep, end = spec.partition("-")
    if not sep:
        raise ClientError(f"Error parsing Range header: {value!r}")

    start = _parse_offset(start.strip(), "start")
    end = end.strip()
    if not end:
        return ByteRange(start, None)

    return ByteRange(start, _parse_offset(end, "end"))


# =============================================================================
# REQUEST PARSER
# =============================================================================

class RequestParser:
    """
    Reads a request off a line-oriented binary stream.

    Usage:
        parser = RequestParser()
        with sock.makefile("rb") as stream:
            request = parser.parse(stream)
    """

    HEADER_SEPARATOR = ": "

    def parse(self, stream: BinaryIO) -> HTTPRequest:
        """
        Parse one request.

        Args:
            stream: Binary file-like object with readline().

        Returns:
            The parsed HTTPRequest.

        Raises:
            ClientError: If the request is malformed.
        """
        # ---------------------------------------------------------------------
        # START LINE
        # ---------------------------------------------------------------------
        start_line = self._read_line(stream)
        if start_line is None:
            raise ClientError("Start line empty")

        method, path = self._parse_start_line(start_line)

        # ---------------------------------------------------------------------
        # HEADERS
        # ---------------------------------------------------------------------
        headers: dict[str, str] = {}
        byte_range: Optional[ByteRange] = None

        while True:
            line = self._read_line(stream)
            if not line:
                # Blank line or end of stream both end the header block
                break

            name, value = self._parse_header(line)
            headers[name.lower()] = value

            if name.lower() == "range":
                byte_range = parse_range_header(value)

        request = HTTPRequest(
            method=method,
            path=path,
            headers=MappingProxyType(headers),
            range=byte_range,
        )

        logger.debug(f"REQUEST:\n{request}")
        return request

    def _read_line(self, stream: BinaryIO) -> Optional[str]:
        """
        Next line without its line ending, or None at end of stream.
        """
        raw = stream.readline()
        if not raw:
            return None

        try:
            line = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ClientError(f"Error getting next line of request: {e}")

        if line.endswith("\n"):
            line = line[:-1]
            if line.endswith("\r"):
                line = line[:-1]
        return line

    def _parse_start_line(self, line: str) -> tuple[str, str]:
        """
        Split "METHOD SP ENDPOINT [SP VERSION]" on single spaces.

        Splitting on single spaces (not runs of whitespace) means
        "GET  /" yields an empty endpoint and is rejected.
        """
        tokens = line.split(" ")

        method = tokens[0]
        if not method:
            raise ClientError("No method found in request")

        if len(tokens) < 2 or not tokens[1]:
            raise ClientError("No endpoint found in request")

        path = tokens[1]
        if not path.startswith("/"):
            raise ClientError(f"Endpoint must start with '/': {path!r}")

        return method, path

    def _parse_header(self, line: str) -> tuple[str, str]:
        name, sep, value = line.partition(self.HEADER_SEPARATOR)
        if not sep or not name:
            raise ClientError(f"Error parsing header: {line!r}")
        return name, value


def parse_request(stream: BinaryIO) -> HTTPRequest:
    """Parse one request from `stream` with a default RequestParser."""
    return RequestParser().parse(stream)
