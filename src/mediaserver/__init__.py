"""
=============================================================================
MEDIASERVER - Minimal HTTP/1.1 Media File Server
=============================================================================

Serves the files of one directory over plain HTTP/1.1, on raw sockets:

    GET /                    newline-separated list of the files
    GET /<file>              the file (200)
    GET /<file>  + Range     a byte range of it (206, Content-Range)

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    mediaserver/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m mediaserver PORT)
    ├── server.py            # MediaServer: one worker thread per connection
    ├── config.py            # ServerConfig frozen dataclass
    ├── access_log.py        # One structured log line per request
    ├── core/                # Transport
    │   ├── socket_server.py # Bind / listen / accept loop
    │   └── connection.py    # Client socket wrapper with line reader
    ├── http/                # HTTP protocol
    │   ├── request.py       # Request + Range parsing
    │   ├── response.py      # Response building
    │   ├── router.py        # GET / vs GET /<file>
    │   ├── errors.py        # Typed errors → status codes → error pages
    │   ├── status_codes.py  # HTTPStatus enum + reason phrases
    │   └── mime_types.py    # Extension allow-list
    └── handlers/            # What the endpoints do
        ├── library.py       # Directory listing / file reads
        ├── listing.py       # GET /
        └── media.py         # GET /<file>

=============================================================================
QUICK START
=============================================================================

    $ MEDIA_DIR=~/Music mediaserver 8080

    $ curl http://localhost:8080/
    intro.mp3
    cover.png

    $ curl -H "Range: bytes=0-99" http://localhost:8080/intro.mp3 -o head.bin

From Python:

    from mediaserver import MediaServer, ServerConfig

    server = MediaServer(ServerConfig(port=8080, media_dir="/srv/media"))
    server.run()

=============================================================================
"""

__version__ = "1.0.0"

from .server import MediaServer, create_server
from .config import ServerConfig, ConfigError

__all__ = ["MediaServer", "ServerConfig", "ConfigError", "create_server", "__version__"]
