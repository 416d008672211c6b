"""
=============================================================================
ACCESS LOGGING
=============================================================================

One line per handled request, written to the "mediaserver.access" logger:

    127.0.0.1 - - [2026-10-19T09:14:03+00:00] "GET /a.txt" 206 3 0.41ms bytes=1-3

=============================================================================
WHY A SEPARATE LOGGER?
=============================================================================

Access records and diagnostics have different audiences. With a dedicated
logger name they can be routed independently:

    logging.getLogger("mediaserver.access").addHandler(file_handler)
    logging.getLogger("mediaserver.access").propagate = False

=============================================================================
FIELDS
=============================================================================

    connection_id:  Short id shared with the connection's debug lines
    client_ip:      Peer address
    method, path:   From the start line; "-" if parsing failed first
    range:          Range header as parsed, "-" if none
    status_code:    Status actually sent
    content_length: Body bytes sent
    duration_ms:    Parse → response built
    timestamp:      UTC, ISO 8601

=============================================================================
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from .http.request import HTTPRequest
from .http.response import HTTPResponse


logger = logging.getLogger("mediaserver.access")


@dataclass
class RequestLog:
    """Structured access record for one request."""

    connection_id: str
    client_ip: str
    method: str
    path: str
    range: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    @classmethod
    def create(
        cls,
        connection_id: str,
        client_ip: str,
        request: Optional[HTTPRequest],
        response: HTTPResponse,
        duration_ms: float,
    ) -> "RequestLog":
        """
        Build a record. `request` is None when the request never parsed.
        """
        return cls(
            connection_id=connection_id,
            client_ip=client_ip,
            method=request.method if request else "-",
            path=request.path if request else "-",
            range=str(request.range) if request and request.range else "-",
            status_code=int(response.status),
            content_length=len(response.body),
            duration_ms=duration_ms,
            timestamp=datetime.now(timezone.utc).isoformat(timespec="seconds"),
        )

    def to_dict(self) -> dict:
        return {
            "connection_id": self.connection_id,
            "client_ip": self.client_ip,
            "method": self.method,
            "path": self.path,
            "range": self.range,
            "status_code": self.status_code,
            "content_length": self.content_length,
            "duration_ms": round(self.duration_ms, 2),
            "timestamp": self.timestamp,
        }

    def to_text(self) -> str:
        """Apache-style line, with the range tacked on the end."""
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms {self.range}'
        )


def log_request(entry: RequestLog, log_format: str = "text") -> None:
    """
    Emit `entry` as text or JSON.

    5xx responses are logged at WARNING so they stand out; everything else
    at INFO.
    """
    level = logging.WARNING if entry.status_code >= 500 else logging.INFO

    if log_format == "json":
        logger.log(level, json.dumps(entry.to_dict()))
    else:
        logger.log(level, f"[{entry.connection_id}] {entry.to_text()}")
