"""
=============================================================================
HTTP STATUS CODES
=============================================================================

Status codes the media server can emit, with their registered (IANA)
reason phrases.

=============================================================================
WHERE THE PHRASE ENDS UP
=============================================================================

Every response starts with a status line:

    HTTP/1.1 206 Partial Content\r\n
             ─┬─ ───────┬───────
              │         │
              │         └── Reason phrase  (HTTPStatus.phrase)
              └──────────── Status code    (int(HTTPStatus))

Error pages reuse the same "<code> <phrase>" text for both their <title>
and <h1>, so the phrase table below is the only place that text lives.

=============================================================================
CODES IN USE
=============================================================================

    ┌────────┬──────────────────────────┬──────────────────────────────────┐
    │  Code  │ Phrase                   │ Emitted when                     │
    ├────────┼──────────────────────────┼──────────────────────────────────┤
    │  200   │ OK                       │ listing, whole-file download     │
    │  206   │ Partial Content          │ byte-range download              │
    │  400   │ Bad Request              │ malformed request / bad type     │
    │  404   │ Not Found                │ file not in the media directory  │
    │  405   │ Method Not Allowed       │ anything other than GET          │
    │  416   │ Range Not Satisfiable    │ range outside the file           │
    │  500   │ Internal Server Error    │ I/O or unexpected failure        │
    └────────┴──────────────────────────┴──────────────────────────────────┘

The remaining members are the common neighbours of those codes; they keep
lookups like HTTPStatus(304) meaningful for logging and tests.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    IntEnum, so members compare equal to plain integers:

        >>> HTTPStatus.PARTIAL_CONTENT == 206
        True
        >>> HTTPStatus(416).phrase
        'Range Not Satisfiable'
    """

    # 2xx SUCCESS
    OK = 200
    NO_CONTENT = 204
    PARTIAL_CONTENT = 206             # Range request fulfilled

    # 3xx REDIRECTION
    MOVED_PERMANENTLY = 301
    NOT_MODIFIED = 304

    # 4xx CLIENT ERRORS
    BAD_REQUEST = 400                 # Malformed request syntax
    FORBIDDEN = 403
    NOT_FOUND = 404                   # File absent from the media directory
    METHOD_NOT_ALLOWED = 405          # Only GET is served
    REQUEST_TIMEOUT = 408
    URI_TOO_LONG = 414
    UNSUPPORTED_MEDIA_TYPE = 415
    RANGE_NOT_SATISFIABLE = 416       # Range end past the end of the file
    REQUEST_HEADER_FIELDS_TOO_LARGE = 431

    # 5xx SERVER ERRORS
    INTERNAL_SERVER_ERROR = 500       # I/O failure, unexpected exception
    NOT_IMPLEMENTED = 501
    SERVICE_UNAVAILABLE = 503
    HTTP_VERSION_NOT_SUPPORTED = 505

    @property
    def phrase(self) -> str:
        """Reason phrase for the status line."""
        return _STATUS_PHRASES[self]

    @property
    def is_success(self) -> bool:
        return 200 <= self < 300

    @property
    def is_client_error(self) -> bool:
        return 400 <= self < 500

    @property
    def is_server_error(self) -> bool:
        return 500 <= self < 600

    @property
    def is_error(self) -> bool:
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.NO_CONTENT: "No Content",
    HTTPStatus.PARTIAL_CONTENT: "Partial Content",

    HTTPStatus.MOVED_PERMANENTLY: "Moved Permanently",
    HTTPStatus.NOT_MODIFIED: "Not Modified",

    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.FORBIDDEN: "Forbidden",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.REQUEST_TIMEOUT: "Request Timeout",
    HTTPStatus.URI_TOO_LONG: "URI Too Long",
    HTTPStatus.UNSUPPORTED_MEDIA_TYPE: "Unsupported Media Type",
    HTTPStatus.RANGE_NOT_SATISFIABLE: "Range Not Satisfiable",
    HTTPStatus.REQUEST_HEADER_FIELDS_TOO_LARGE: "Request Header Fields Too Large",

    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.NOT_IMPLEMENTED: "Not Implemented",
    HTTPStatus.SERVICE_UNAVAILABLE: "Service Unavailable",
    HTTPStatus.HTTP_VERSION_NOT_SUPPORTED: "HTTP Version Not Supported",
}
