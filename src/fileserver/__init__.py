"""
=============================================================================
FILESERVER - Minimal HTTP/1.x Static Content Server
=============================================================================

Serves a directory tree over HTTP: one request per connection, GET only,
files served as-is, directories answered with their index file or a
generated listing.

=============================================================================
PACKAGE LAYOUT
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   __main__.py      CLI: python -m fileserver [PORT] --root DIR      │
    │   config.py        ServerConfig dataclass, env vars, validation     │
    │   server.py        HTTPServer: parse → handle → serialize           │
    │   access_log.py    Per-request log records                          │
    │                                                                      │
    │   http/            Protocol layer (no I/O)                          │
    │     headers.py       HeaderList                                     │
    │     request.py       RequestParser, HTTPRequest, parse errors       │
    │     outcomes.py      FileContent / DirectoryIndex / ... / NotFound  │
    │     response.py      ResponseBuilder, build_response, to_bytes      │
    │     status_codes.py  HTTPStatus                                      │
    │     mime_types.py    Extension → Content-Type                       │
    │                                                                      │
    │   handlers/        Filesystem side                                  │
    │     static.py        FilesystemResolver, StaticFileHandler          │
    │     listing.py       Directory listing HTML                         │
    │                                                                      │
    │   core/            Sockets                                          │
    │     socket_server.py Accept loop, signals, shutdown                 │
    │     connection.py    One client socket                              │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

__version__ = "1.0.0"

from .server import HTTPServer, create_server
from .config import ServerConfig

__all__ = ["HTTPServer", "ServerConfig", "create_server", "__version__"]
