"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket for its whole (short) life: one request
in, one response out, then close.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL
=============================================================================

A request can arrive in any number of recv() chunks:

    Client sends:   "GET /a.txt HTTP/1.1\r\nRange: bytes=1-3\r\n\r\n"

    Server might receive:
        recv() → "GET /a.t"
        recv() → "xt HTTP/1.1\r\nRan"
        recv() → "ge: bytes=1-3\r\n\r\n"

The request parser works line by line, so what it needs is "give me the
next line, however many recv() calls that takes". socket.makefile("rb")
provides exactly that: a buffered reader whose readline() keeps pulling
from the socket until it sees "\n" or the peer closes.

=============================================================================
CONNECTION LIFECYCLE
=============================================================================

                  NEW
                   │  accept()
                   ▼
                READING ─────── request line + headers via .stream
                   │
                   ▼
              PROCESSING ────── route, build response
                   │
                   ▼
                WRITING ─────── sendall(response bytes)
                   │
                   ▼
                CLOSING ─────── shutdown(SHUT_WR), drain, close()
                   │
                   ▼
                CLOSED

There is no keep-alive state: every connection serves exactly one request.

=============================================================================
"""

import socket
import time
import logging
import uuid
from enum import Enum
from dataclasses import dataclass, field
from typing import BinaryIO, Optional


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Where a connection is in its single request/response cycle."""
    NEW = "new"
    READING = "reading"
    PROCESSING = "processing"
    WRITING = "writing"
    CLOSING = "closing"
    CLOSED = "closed"


@dataclass
class Connection:
    """
    A client connection.

    Attributes:
        socket: The accepted client socket.
        address: Client's (ip, port) tuple.
        id: Short unique id, prefixed to every log line for this connection.
        state: Current ConnectionState.
        created_at: When the connection was accepted.
        buffer_size: Read buffer size for the line reader.
    """

    socket: socket.socket
    address: tuple

    id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)
    buffer_size: int = 8192

    _stream: Optional[BinaryIO] = field(default=None, repr=False)

    def __post_init__(self):
        # The listening socket polls with a timeout; client sockets block.
        self.socket.setblocking(True)

    @property
    def client_ip(self) -> str:
        return self.address[0] if self.address else ""

    @property
    def age(self) -> float:
        """Seconds since the connection was accepted."""
        return time.time() - self.created_at

    @property
    def stream(self) -> BinaryIO:
        """
        Buffered binary reader over the socket, for line-by-line parsing.

        Created on first access; reading from it moves the connection to
        READING.
        """
        if self._stream is None:
            self._stream = self.socket.makefile("rb", buffering=self.buffer_size)
        self.state = ConnectionState.READING
        return self._stream

    def send_response(self, data: bytes) -> None:
        """
        Write the full response.

        sendall() loops until every byte is handed to the kernel; plain
        send() may stop short on a full buffer.

        Raises:
            OSError: If the peer went away. The caller ends the worker.
        """
        self.state = ConnectionState.WRITING
        self.socket.sendall(data)

    def close(self):
        """
        Close the connection gracefully.

        1. shutdown(SHUT_WR): send FIN so the client sees end-of-response
        2. drain anything the client still sent (e.g. an ignored body);
           closing with unread data makes the kernel send RST, which can
           discard the response before the client reads it
        3. close() the reader and the socket
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Peer already gone

        try:
            self.socket.settimeout(0.5)
            while self.socket.recv(1024):
                pass
        except OSError:
            pass  # Includes socket.timeout

        if self._stream is not None:
            try:
                self._stream.close()
            except OSError:
                pass
            self._stream = None

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age:.3f}s")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
