"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

Builds the exact bytes written back to the client.

=============================================================================
HTTP RESPONSE ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP RESPONSE STRUCTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  ┌─ STATUS LINE ──────────────────────────────────────────────────┐ │
    │  │    HTTP/1.1 206 Partial Content\r\n                             │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ EXTRA HEADERS (only for partial content) ─────────────────────┐ │
    │  │    Accept-Ranges: bytes\r\n                                     │ │
    │  │    Content-Range: bytes 1-3/5\r\n                               │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ MANDATORY HEADERS (always last, always present) ──────────────┐ │
    │  │    Content-Type: text/plain\r\n                                 │ │
    │  │    Content-Length: 3\r\n                                        │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ BLANK LINE ───────────────────────────────────────────────────┐ │
    │  │    \r\n                                                         │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    │  ┌─ BODY ─────────────────────────────────────────────────────────┐ │
    │  │    ell                                                          │ │
    │  └─────────────────────────────────────────────────────────────────┘ │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Content-Length is always computed from the body actually sent, so a
partial response reports the slice length and not the file size.

No Date, Server or Connection headers are added: connections are never
reused, and the header set is kept to what clients need to read the body.

=============================================================================
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from .status_codes import HTTPStatus


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HTTPResponse:
    """
    A response ready to be serialized.

    Constructed once per request and never mutated; use build_response()
    rather than calling this directly so the mandatory headers are always
    filled in.

    Attributes:
        status:  Status code (HTTPStatus member).
        headers: Ordered header mapping. Extra headers first, then
                 Content-Type and Content-Length.
        body:    Raw body bytes.
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """
        Format: HTTP-VERSION SP STATUS-CODE SP REASON-PHRASE
        Example: "HTTP/1.1 200 OK"
        """
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    @property
    def content_type(self) -> Optional[str]:
        return self.headers.get("Content-Type")

    def to_bytes(self) -> bytes:
        """
        Serialize to wire format.

        Returns:
            Status line, headers, blank line and body as one bytes object,
            ready for socket.sendall().
        """
        lines = [self.status_line]
        for name, value in self.headers.items():
            lines.append(f"{name}: {value}")
        lines.append("")

        head = "\r\n".join(lines).encode("latin-1") + b"\r\n"
        return head + self.body

    def summary(self) -> str:
        """Status line and headers, for debug logging."""
        headers = "\n".join(f"{name}: {value}" for name, value in self.headers.items())
        return f"{self.status_line}\n{headers}"


def build_response(
    status: int,
    content_type: str,
    body: bytes,
    extra_headers: Optional[Mapping[str, str]] = None,
) -> HTTPResponse:
    """
    Assemble a response with the mandatory headers in place.

    =========================================================================
    HEADER ORDER
    =========================================================================

    1. extra_headers, in their insertion order
    2. Content-Type
    3. Content-Length (len(body))

    Extra headers named Content-Type or Content-Length are ignored: those
    two always come from the arguments.

    =========================================================================

    Args:
        status: Status code. Must be a registered HTTPStatus; anything else
                is a programming error and raises ValueError.
        content_type: Value for the Content-Type header.
        body: Response body.
        extra_headers: Additional headers (e.g. Content-Range).

    Returns:
        Frozen HTTPResponse.
    """
    status = HTTPStatus(status)

    headers: dict[str, str] = {}
    for name, value in (extra_headers or {}).items():
        if name.lower() in ("content-type", "content-length"):
            continue
        headers[name] = str(value)

    headers["Content-Type"] = content_type
    headers["Content-Length"] = str(len(body))

    response = HTTPResponse(
        status=status,
        headers=MappingProxyType(headers),
        body=bytes(body),
    )

    logger.debug(f"RESPONSE:\n{response.summary()}")
    return response


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def ok(body: bytes, content_type: str) -> HTTPResponse:
    """200 OK with the given body."""
    return build_response(HTTPStatus.OK, content_type, body)


def partial_content(
    body: bytes,
    content_type: str,
    start: int,
    end: int,
    total: int,
) -> HTTPResponse:
    """
    206 Partial Content for an inclusive byte range.

    Args:
        body: The bytes from start to end, inclusive.
        content_type: MIME type of the whole resource.
        start: First byte offset (inclusive).
        end: Last byte offset (inclusive).
        total: Full resource length.
    """
    return build_response(
        HTTPStatus.PARTIAL_CONTENT,
        content_type,
        body,
        {
            "Accept-Ranges": "bytes",
            "Content-Range": f"bytes {start}-{end}/{total}",
        },
    )
