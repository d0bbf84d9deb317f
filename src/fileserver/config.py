"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

All tunables for the file server in one dataclass.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m fileserver 3000 --root ./public                  │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── FILESERVER_PORT=3000 python -m fileserver                  │
    │                                                                      │
    │   3. Default values (in this dataclass)                             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Validation happens once, at startup. The request path code assumes the
served root exists and never checks it again.

=============================================================================
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")


@dataclass
class ServerConfig:
    """
    Configuration for the file server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK     host, port, backlog, buffer_size, timeout
    LIMITS      max_body_size, max_path_length, max_content_size
    CONTENT     root, index_files
    LOGGING     log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """Interface to bind. All interfaces by default."""

    port: int = 8080
    """TCP port to listen on."""

    backlog: int = 50
    """Pending connections the OS queues before refusing new ones."""

    buffer_size: int = 10 * 1024
    """
    Bytes read from a connection. A request is read with ONE recv() of
    this size; anything beyond it is never seen.
    """

    timeout: Optional[float] = 30.0
    """Per-connection socket timeout in seconds. None = block forever."""

    # ─────────────────────────────────────────────────────────────────────
    # LIMITS
    # ─────────────────────────────────────────────────────────────────────

    max_body_size: int = 8 * 1024
    """Request body bytes kept; the rest is dropped silently."""

    max_path_length: int = 2048
    """Longest request path accepted on the request line."""

    max_content_size: int = 10 * 1024 * 1024
    """Cap on bytes served for one file or generated listing."""

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT
    # ─────────────────────────────────────────────────────────────────────

    root: str = "."
    """Served root directory. Request paths are appended to it."""

    index_files: Tuple[str, ...] = ("index.html", "index.php")
    """Served in place of a listing, first match wins."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """DEBUG, INFO, WARNING, ERROR or CRITICAL."""

    log_format: str = "text"
    """Access log format: 'text' (one line per request) or 'json'."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        FILESERVER_HOST         Bind address (default: 0.0.0.0)
        FILESERVER_PORT         Port (default: 8080)
        FILESERVER_ROOT         Served root (default: .)
        FILESERVER_BUFFER_SIZE  Request read size (default: 10240)
        FILESERVER_TIMEOUT      Socket timeout seconds (default: 30)
        FILESERVER_LOG_LEVEL    Logging level (default: INFO)
        FILESERVER_LOG_FORMAT   text or json (default: text)
        """
        return cls(
            host=os.getenv("FILESERVER_HOST", "0.0.0.0"),
            port=int(os.getenv("FILESERVER_PORT", "8080")),
            root=os.getenv("FILESERVER_ROOT", "."),
            buffer_size=int(os.getenv("FILESERVER_BUFFER_SIZE", str(10 * 1024))),
            timeout=float(os.getenv("FILESERVER_TIMEOUT", "30")),
            log_level=os.getenv("FILESERVER_LOG_LEVEL", "INFO").upper(),
            log_format=os.getenv("FILESERVER_LOG_FORMAT", "text").lower(),
        )

    @property
    def log_level_number(self) -> int:
        return getattr(logging, self.log_level.upper(), logging.INFO)

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValueError: On the first invalid value.
        """
        if not 0 < self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 1-65535.")

        if not os.path.isdir(self.root):
            raise ValueError(f"Served root is not a directory: {self.root}")

        for name in ("backlog", "buffer_size", "max_body_size",
                     "max_path_length", "max_content_size"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if not self.index_files:
            raise ValueError("index_files must name at least one file")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"Unknown log format: {self.log_format}")
