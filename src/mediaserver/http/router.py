"""
=============================================================================
URL ROUTER
=============================================================================

Dispatches a parsed request to exactly one handler.

The server has a fixed shape of two endpoints, so this is a plain dispatch
on (method, path) rather than a pattern table:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        ROUTING DECISION                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   method != "GET" ─────────────────────► InvalidMethod (405)        │
    │        │                                  path is never looked at   │
    │        ▼                                                             │
    │   path == "/" ─────────────────────────► list_media(media_dir)      │
    │        │                                                             │
    │        ▼                                                             │
    │   anything else ───────────────────────► serve_media(request,       │
    │                                              path, media_dir)        │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The media handler gets the raw path, leading "/" and percent-escapes
included; decoding is its job.

Method names are case-sensitive (RFC 9110 §9.1): "get" is not GET.

=============================================================================
"""

import logging

from ..handlers.listing import list_media
from ..handlers.media import serve_media
from .errors import InvalidMethod
from .request import HTTPRequest
from .response import HTTPResponse


logger = logging.getLogger(__name__)


class Router:
    """
    Routes requests for one media directory.

    The router holds nothing but the directory path, so a single instance
    can be shared by every worker thread.

    Usage:
        router = Router("/srv/media")
        response = router.route(request)
    """

    ALLOWED_METHODS = ("GET",)
    INDEX_PATH = "/"

    def __init__(self, media_dir: str):
        self._media_dir = media_dir

    @property
    def media_dir(self) -> str:
        return self._media_dir

    def route(self, request: HTTPRequest) -> HTTPResponse:
        """
        Dispatch `request` and return the handler's response.

        Raises:
            InvalidMethod: For any method other than GET.
            MediaServerError: Whatever the chosen handler raises.
        """
        if request.method not in self.ALLOWED_METHODS:
            raise InvalidMethod(f"Method {request.method!r} not allowed")

        if request.path == self.INDEX_PATH:
            return list_media(self._media_dir)

        return serve_media(request, request.path, self._media_dir)


def route(request: HTTPRequest, media_dir: str) -> HTTPResponse:
    """Route a single request without keeping a Router around."""
    return Router(media_dir).route(request)
