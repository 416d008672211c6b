"""
pytest configuration and fixtures.
"""

import io
import socket
import threading
from pathlib import Path
from typing import Callable, Generator, Optional

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from mediaserver import MediaServer, ServerConfig
from mediaserver.core import Connection


# =============================================================================
# MEDIA DIRECTORY
# =============================================================================

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + bytes(range(32))
MP3_BYTES = b"ID3\x03\x00\x00\x00" + bytes(range(256)) * 4


@pytest.fixture
def media_dir(tmp_path: Path) -> Path:
    """
    A media directory with:

        a.txt          "hello"
        b.png          small PNG-ish blob
        my song.mp3    1031 bytes
        notes.md       unsupported extension
        empty.txt      zero bytes
        albums/        subdirectory (never listed)
    """
    root = tmp_path / "media"
    root.mkdir()
    (root / "a.txt").write_bytes(b"hello")
    (root / "b.png").write_bytes(PNG_BYTES)
    (root / "my song.mp3").write_bytes(MP3_BYTES)
    (root / "notes.md").write_bytes(b"# notes\n")
    (root / "empty.txt").write_bytes(b"")

    albums = root / "albums"
    albums.mkdir()
    (albums / "hidden.mp3").write_bytes(b"not served")

    return root


@pytest.fixture
def simple_media_dir(tmp_path: Path) -> Path:
    """Exactly a.txt ("hello") and b.png."""
    root = tmp_path / "simple"
    root.mkdir()
    (root / "a.txt").write_bytes(b"hello")
    (root / "b.png").write_bytes(PNG_BYTES)
    return root


# =============================================================================
# RAW REQUESTS
# =============================================================================

def get_request(path: str, headers: Optional[dict] = None, method: str = "GET") -> bytes:
    """Build a raw request with CRLF line endings."""
    lines = [f"{method} {path} HTTP/1.1", "Host: localhost"]
    for name, value in (headers or {}).items():
        lines.append(f"{name}: {value}")
    return ("\r\n".join(lines) + "\r\n\r\n").encode("utf-8")


def split_response(raw: bytes) -> tuple[int, dict, bytes]:
    """
    Split response bytes into (status, headers, body).

    Header names keep their case; the body is everything after the first
    blank line.
    """
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.decode("latin-1").split("\r\n")
    status = int(lines[0].split(" ")[1])
    headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(": ")
        headers[name] = value
    return status, headers, body


@pytest.fixture
def sample_get_request() -> io.BytesIO:
    """Sample HTTP GET request with a Range header, as a readable stream."""
    return io.BytesIO(
        b"GET /a.txt HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Range: bytes=1-3\r\n"
        b"\r\n"
    )


@pytest.fixture
def build_request() -> Callable[..., bytes]:
    """The raw request builder, for tests that need custom headers."""
    return get_request


# =============================================================================
# ONE CONNECTION, NO LISTENER
# =============================================================================

@pytest.fixture
def exchange(media_dir: Path) -> Callable[..., tuple[int, dict, bytes]]:
    """
    Push raw request bytes through MediaServer.handle_connection() over a
    socketpair and return the parsed (status, headers, body).

    The client half is shut down for writing before the handler runs, so
    everything happens on the test thread.
    """
    server = MediaServer(ServerConfig(port=0, media_dir=str(media_dir)))

    def run(raw: bytes, root: Optional[Path] = None) -> tuple[int, dict, bytes]:
        server_sock, client_sock = socket.socketpair()
        with client_sock:
            client_sock.sendall(raw)
            client_sock.shutdown(socket.SHUT_WR)

            conn = Connection(server_sock, ("127.0.0.1", 50000))
            server.handle_connection(conn, str(root or media_dir))

            chunks = []
            while True:
                chunk = client_sock.recv(65536)
                if not chunk:
                    break
                chunks.append(chunk)

        return split_response(b"".join(chunks))

    return run


# =============================================================================
# LIVE SERVER
# =============================================================================

class TestServer:
    """Runs a MediaServer on an ephemeral port in a background thread."""

    __test__ = False

    def __init__(self, server: MediaServer):
        self.server = server
        self._thread: Optional[threading.Thread] = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def send_raw(self, data: bytes) -> bytes:
        """Send raw bytes and read until the server closes the connection."""
        with socket.create_connection(("127.0.0.1", self.port), timeout=5.0) as sock:
            sock.sendall(data)
            chunks = []
            while True:
                chunk = sock.recv(65536)
                if not chunk:
                    break
                chunks.append(chunk)
        return b"".join(chunks)

    def get(self, path: str, headers: Optional[dict] = None, method: str = "GET"):
        """Send a request and return (status, headers, body)."""
        return split_response(self.send_raw(get_request(path, headers, method)))


@pytest.fixture
def test_server(media_dir: Path) -> Generator[TestServer, None, None]:
    """A running server over the `media_dir` fixture."""
    server = MediaServer(ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        media_dir=str(media_dir),
        log_level="WARNING",
    ))

    test_srv = TestServer(server)
    test_srv.start()

    yield test_srv

    test_srv.stop()
