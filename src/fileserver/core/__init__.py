"""
Networking core: the listening socket and per-client connections.

    SocketServer  - bind, listen, accept loop, graceful shutdown
    Connection    - one client socket: single read, full write, close
"""

from .connection import Connection, ConnectionState
from .socket_server import SocketServer

__all__ = [
    "Connection",
    "ConnectionState",
    "SocketServer",
]
