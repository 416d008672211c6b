"""
=============================================================================
HTTP PROTOCOL LAYER
=============================================================================

Everything between "bytes arrived" and "bytes to send":

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   socket stream                                                      │
    │        │                                                             │
    │        ▼                                                             │
    │   request.py      RequestParser ──► HTTPRequest (+ ByteRange)        │
    │        │                                                             │
    │        ▼                                                             │
    │   router.py       Router ──► handlers.listing / handlers.media       │
    │        │                                                             │
    │        ▼                                                             │
    │   response.py     build_response ──► HTTPResponse.to_bytes()         │
    │                                                                      │
    │   errors.py       MediaServerError ──► error_response() (4xx/5xx)    │
    │   status_codes.py HTTPStatus + reason phrases                        │
    │   mime_types.py   extension allow-list                               │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

HTTP/1.1 subset implemented:
- GET only, no request bodies
- one request per connection, no keep-alive
- single byte ranges ("bytes=A-B" and "bytes=A-"), answered with 206
- Content-Length on every response, no chunked encoding

=============================================================================
"""

from .status_codes import HTTPStatus
from .response import HTTPResponse, build_response, ok, partial_content
from .errors import (
    MediaServerError,
    ClientError,
    ServerError,
    NotFound,
    InvalidContentRange,
    InvalidMethod,
    ERROR_STATUS,
    error_response,
    render_error_page,
)
from .request import HTTPRequest, ByteRange, RequestParser, parse_request, parse_range_header
from .mime_types import get_content_type
from .router import Router

__all__ = [
    # Status codes
    "HTTPStatus",

    # Response building
    "HTTPResponse",
    "build_response",
    "ok",
    "partial_content",

    # Errors
    "MediaServerError",
    "ClientError",
    "ServerError",
    "NotFound",
    "InvalidContentRange",
    "InvalidMethod",
    "ERROR_STATUS",
    "error_response",
    "render_error_page",

    # Request parsing
    "HTTPRequest",
    "ByteRange",
    "RequestParser",
    "parse_request",
    "parse_range_header",

    # MIME types
    "get_content_type",

    # Routing
    "Router",
]
