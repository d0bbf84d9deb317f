"""
=============================================================================
CLIENT CONNECTION
=============================================================================

Wraps one accepted client socket for exactly one request/response.

=============================================================================
CONNECTION LIFECYCLE
=============================================================================

    NEW ──► READING ──► PROCESSING ──► WRITING ──► CLOSED
               │                                     ▲
               └──── zero bytes / reset / timeout ───┘

There is no keep-alive: after the response is written (or the request
turns out to be unusable) the socket is closed.

A request is read with a single recv(). Requests larger than one buffer,
or split across several TCP segments, are seen only up to what the first
read returned.

=============================================================================
"""

import logging
import socket
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Connection lifecycle states, for logging and debugging."""
    NEW = "new"
    READING = "reading"
    PROCESSING = "processing"
    WRITING = "writing"
    CLOSED = "closed"


@dataclass
class Connection:
    """
    A client connection.

    Usable as a context manager; the socket is closed on exit:

        with conn:
            raw = conn.read_request()
            if raw is not None:
                conn.send_response(response_bytes)

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short random identifier used in log lines.
        state: Current lifecycle state.
        created_at: When the connection was accepted.
    """

    socket: socket.socket
    address: tuple

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    buffer_size: int = 10 * 1024
    timeout: Optional[float] = 30.0

    def __post_init__(self):
        self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def age(self) -> float:
        """Seconds since the connection was accepted."""
        return time.time() - self.created_at

    def read_request(self) -> Optional[bytes]:
        """
        Read the request with one recv() of up to buffer_size bytes.

        Returns:
            The bytes read, or None when the peer closed without sending
            anything, reset the connection, or timed out.
        """
        self.state = ConnectionState.READING

        try:
            data = self.socket.recv(self.buffer_size)
        except socket.timeout:
            logger.debug(f"[{self.id}] Read timed out")
            return None
        except (ConnectionResetError, BrokenPipeError):
            logger.debug(f"[{self.id}] Connection reset before request")
            return None

        if not data:
            # Zero bytes: the client closed its side. Nothing to parse.
            return None

        self.state = ConnectionState.PROCESSING
        return data

    def send_response(self, data: bytes) -> bool:
        """
        Write the whole response.

        Returns:
            True if every byte was handed to the OS, False if the peer went
            away first.
        """
        self.state = ConnectionState.WRITING

        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    def close(self):
        """Shut down and close the socket. Safe to call more than once."""
        if self.state == ConnectionState.CLOSED:
            return

        try:
            self.socket.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass  # Peer already gone

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age * 1000:.1f}ms")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
