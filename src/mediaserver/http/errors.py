"""
=============================================================================
ERRORS AND THE ERROR MAPPER
=============================================================================

Every failure inside the server is raised as one of five typed errors.
Nothing below the connection handler turns an error into a response; it
just raises. The connection handler catches MediaServerError and calls
error_response(), which is the only place status codes for failures are
chosen.

=============================================================================
ERROR → STATUS
=============================================================================

    ┌──────────────────────┬────────┬─────────────────────────────────────┐
    │ Error                │ Status │ Raised by                           │
    ├──────────────────────┼────────┼─────────────────────────────────────┤
    │ ClientError          │  400   │ request/range parser, media handler │
    │ InvalidMethod        │  405   │ router                              │
    │ NotFound             │  404   │ media handler                       │
    │ InvalidContentRange  │  416   │ media handler                       │
    │ ServerError          │  500   │ library (I/O), connection handler   │
    └──────────────────────┴────────┴─────────────────────────────────────┘

ERROR_STATUS holds this table. Nothing else maps errors to codes.

=============================================================================
WHAT THE CLIENT SEES
=============================================================================

Only the status and a minimal HTML page:

    <!DOCTYPE html>
    <html lang="en">
    <head><meta charset="utf-8"><title>404 Not Found</title></head>
    <body><h1>404 Not Found</h1></body>
    </html>

The `detail` carried by an error (an OSError message, the offending header
line, ...) is logged server-side and never written to the socket, so
filesystem paths and internals do not leak.

=============================================================================
"""

import logging

from .response import HTTPResponse, build_response
from .status_codes import HTTPStatus


logger = logging.getLogger(__name__)


class MediaServerError(Exception):
    """
    Base class for every failure that ends in an error response.

    Attributes:
        detail: Server-side description of what went wrong. Logged, never
                sent to the client.
    """

    def __init__(self, detail: str = ""):
        super().__init__(detail)
        self.detail = detail

    @property
    def status(self) -> HTTPStatus:
        return status_for(self)


class ClientError(MediaServerError):
    """Malformed or unsupported request."""


class ServerError(MediaServerError):
    """I/O or internal failure."""


class NotFound(MediaServerError):
    """Requested file is not in the media directory listing."""


class InvalidContentRange(MediaServerError):
    """Requested byte range cannot be satisfied for this file."""


class InvalidMethod(MediaServerError):
    """Any method other than GET."""


ERROR_STATUS = {
    ClientError: HTTPStatus.BAD_REQUEST,
    InvalidMethod: HTTPStatus.METHOD_NOT_ALLOWED,
    NotFound: HTTPStatus.NOT_FOUND,
    InvalidContentRange: HTTPStatus.RANGE_NOT_SATISFIABLE,
    ServerError: HTTPStatus.INTERNAL_SERVER_ERROR,
}


def status_for(error: MediaServerError) -> HTTPStatus:
    """
    Look up the status code for an error.

    Walks the MRO so a subclass of ClientError (say) still maps to 400.
    A MediaServerError that is none of the five is treated as a server
    error.
    """
    for cls in type(error).__mro__:
        if cls in ERROR_STATUS:
            return ERROR_STATUS[cls]
    return HTTPStatus.INTERNAL_SERVER_ERROR


def render_error_page(status: HTTPStatus) -> HTTPResponse:
    """Build the HTML error page for a status code."""
    status = HTTPStatus(status)
    error_text = f"{int(status)} {status.phrase}"

    page = (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '    <meta charset="utf-8">\n'
        f"    <title>{error_text}</title>\n"
        "</head>\n"
        "<body>\n"
        f"    <h1>{error_text}</h1>\n"
        "</body>\n"
        "</html>\n"
    )

    return build_response(status, "text/html", page.encode("utf-8"))


def error_response(error: MediaServerError) -> HTTPResponse:
    """
    Convert a typed error into its error page, logging the detail.

    Log levels:
        ServerError          → ERROR    (something on our side broke)
        ClientError          → WARNING  (the detail says what was malformed)
        everything else      → DEBUG    (404/405/416 are ordinary traffic)
    """
    status = status_for(error)
    name = type(error).__name__

    if status.is_server_error:
        logger.error(f"{name}: {error.detail or 'unknown failure'}")
    elif isinstance(error, ClientError):
        logger.warning(f"{name}: {error.detail or 'bad request'}")
    else:
        logger.debug(f"{name}: {error.detail}" if error.detail else name)

    return render_error_page(status)
