"""
=============================================================================
CORE NETWORKING COMPONENTS
=============================================================================

The transport side of the server, with no HTTP knowledge:

    socket_server.py   SocketServer  bind / listen / accept loop
    connection.py      Connection    one client socket: line reader,
                                     sendall, graceful close

How they fit together:

    SocketServer.start(handler)
        │
        └──► accept() ──► Connection(sock, addr) ──► handler(conn)
                                                        │
                                                        └──► MediaServer
                                                             starts a worker
                                                             thread for it

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState

__all__ = [
    "SocketServer",
    "Connection",
    "ConnectionState",
]
