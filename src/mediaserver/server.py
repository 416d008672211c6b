"""
=============================================================================
MEDIA SERVER
=============================================================================

Ties the pieces together: accept connections, give each one its own worker
thread, and in that worker run parse → route → respond → write-back.

=============================================================================
ARCHITECTURE OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   main thread                        worker thread (one per conn)   │
    │   ───────────                        ──────────────────────────────  │
    │                                                                      │
    │   SocketServer.start()                                               │
    │     accept() ──► Connection ──spawn──► handle_connection(conn,       │
    │     accept() ──► Connection ──spawn──►                   media_dir)  │
    │     ...                                   │                          │
    │                                           ├─ RequestParser.parse()   │
    │                                           ├─ route()                 │
    │                                           │    ├─ list_media()       │
    │                                           │    └─ serve_media()      │
    │                                           ├─ MediaServerError?       │
    │                                           │    └─ error_response()   │
    │                                           ├─ access log              │
    │                                           ├─ sendall()               │
    │                                           └─ close()                 │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
ONE WORKER PER CONNECTION
=============================================================================

Every accepted connection gets a fresh daemon thread. The only thing the
threads share is the media directory path, a str taken from the frozen
config and passed in when the thread is spawned. Each worker does its own
directory listing and file read, so there is nothing to lock.

All the blocking (reading lines, reading the file, sendall) happens inside
the worker. A stalled client only stalls its own thread.

=============================================================================
NO CONNECTION FAILS SILENTLY
=============================================================================

handle_connection() is the one place errors become responses:

    MediaServerError       → error_response(e)           (400/404/405/416/500)
    any other Exception    → logged with traceback, then
                             error_response(ServerError) (500)

Either way the client gets a well-formed response. Only a failure to
*write* that response ends the worker without one; it is logged, and it
affects that connection alone.

=============================================================================
"""

import logging
import os
import threading
import time
from typing import Optional, Tuple

from .access_log import RequestLog, log_request
from .config import ServerConfig
from .core import SocketServer, Connection, ConnectionState
from .http import (
    HTTPRequest, HTTPResponse, RequestParser,
    MediaServerError, ServerError, error_response,
)
from .http.router import route


logger = logging.getLogger(__name__)


class MediaServer:
    """
    HTTP/1.1 media server.

    Usage:
        config = ServerConfig.from_env(port=8080)
        server = MediaServer(config)
        server.run()  # Blocks until SIGINT/SIGTERM or shutdown()
    """

    def __init__(self, config: ServerConfig):
        """
        Args:
            config: Server configuration. Validated here, so a bad config
                    fails before any socket is opened.

        Raises:
            ConfigError: If the config is invalid.
        """
        config.validate()
        self.config = config

        self._socket_server = SocketServer(self.config)
        self._parser = RequestParser()
        self._running = False

    @property
    def address(self) -> Tuple[str, int]:
        """Bound (host, port); the real port once listening."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._running

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self):
        """
        Start the server (blocking).

        Raises:
            OSError: If the listening socket cannot be bound.
        """
        self._setup_logging()

        if not os.path.isdir(self.config.media_dir):
            logger.warning(
                f"Media directory {self.config.media_dir!r} is not a directory; "
                f"requests will fail until it exists"
            )

        logger.info(f"{self.config.server_name} serving {self.config.media_dir!r}")

        self._running = True
        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._running = False
            logger.info("Server stopped")

    def shutdown(self):
        """Stop accepting connections. In-flight workers finish on their own."""
        self._socket_server.shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the server is listening. True if it is."""
        return self._socket_server.wait_until_ready(timeout)

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("mediaserver").setLevel(level)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """
        Spawn a worker for a freshly accepted connection.

        Runs on the accept thread, so it only starts the thread and returns.
        """
        worker = threading.Thread(
            target=self.handle_connection,
            args=(conn, self.config.media_dir),
            name=f"conn-{conn.id}",
            daemon=True,
        )
        worker.start()

    def handle_connection(self, conn: Connection, media_dir: str) -> None:
        """
        Serve exactly one request on `conn`, then close it.

        Args:
            conn: The client connection.
            media_dir: Directory to serve from.
        """
        started = time.perf_counter()
        request: Optional[HTTPRequest] = None

        with conn:
            try:
                request = self._parser.parse(conn.stream)
                conn.state = ConnectionState.PROCESSING
                response = route(request, media_dir)
            except MediaServerError as e:
                response = error_response(e)
            except Exception as e:
                logger.exception(f"[{conn.id}] Unexpected error handling request: {e}")
                response = error_response(ServerError(f"{type(e).__name__}: {e}"))

            self._log_access(conn, request, response, started)

            try:
                conn.send_response(response.to_bytes())
            except OSError as e:
                logger.warning(f"[{conn.id}] Unable to write response: {e}")

    def _log_access(
        self,
        conn: Connection,
        request: Optional[HTTPRequest],
        response: HTTPResponse,
        started: float,
    ):
        duration_ms = (time.perf_counter() - started) * 1000
        entry = RequestLog.create(conn.id, conn.client_ip, request, response, duration_ms)
        log_request(entry, self.config.log_format)


def create_server(config: Optional[ServerConfig] = None, **overrides) -> MediaServer:
    """
    Build a MediaServer from `config`, or from the environment.

    Without a config, MEDIA_DIR is read from the environment and `port`
    must be given in `overrides`.

    Example:
        server = create_server(port=0)   # ephemeral port, MEDIA_DIR from env
    """
    if config is None:
        port = overrides.pop("port", 8080)
        config = ServerConfig.from_env(port=port, **overrides)
    return MediaServer(config)
