"""
=============================================================================
FILE SERVER
=============================================================================

Wires the pieces together and runs the per-connection pipeline.

=============================================================================
REQUEST PIPELINE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   Connection.read_request()      one recv(); None → just close      │
    │            │                                                         │
    │            ▼                                                         │
    │   RequestParser.parse()          HTTPParseError → close, no reply   │
    │            │                                                         │
    │            ▼                                                         │
    │   StaticFileHandler.handle()     405 / resolve → build_response     │
    │            │                                                         │
    │            ▼                                                         │
    │   HTTPResponse.to_bytes()                                            │
    │            │                                                         │
    │            ▼                                                         │
    │   Connection.send_response()     then close                          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

handle_request() runs the middle three steps on plain bytes, so the whole
protocol path can be exercised without a socket.

=============================================================================
"""

import logging
import time
from typing import Optional, Tuple

from .access_log import log_request
from .config import ServerConfig
from .core import Connection, SocketServer
from .handlers import StaticFileHandler
from .http import HTTPParseError, RequestParser, internal_error


logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class HTTPServer:
    """
    Static-content HTTP/1.x server.

    Usage:
        server = HTTPServer(ServerConfig(port=8080, root="./public"))
        server.run()  # Blocks until Ctrl+C / SIGTERM
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        self.config = config or ServerConfig()
        self.config.validate()

        self._parser = RequestParser(
            max_body_size=self.config.max_body_size,
            max_path_length=self.config.max_path_length,
        )
        self._handler = StaticFileHandler(
            self.config.root,
            index_files=self.config.index_files,
            max_content_size=self.config.max_content_size,
        )
        self._socket_server = SocketServer(self.config)

    @property
    def is_running(self) -> bool:
        return self._socket_server.is_running

    @property
    def address(self) -> Tuple[str, int]:
        return self._socket_server.address

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def run(self, setup_logging: bool = True):
        """
        Serve until shutdown() or a termination signal.

        Args:
            setup_logging: Configure the root logger from config.log_level.
                           Pass False when the caller owns logging.
        """
        if setup_logging:
            self._setup_logging()

        logger.info(
            f"Serving {self.config.root} on {self.config.host}:{self.config.port}"
        )

        try:
            self._socket_server.start(self._process_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
            self._socket_server.shutdown()

        logger.info("Server stopped")

    def shutdown(self):
        self._socket_server.shutdown()

    def wait_for_shutdown(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_for_shutdown(timeout)

    def _setup_logging(self):
        level = self.config.log_level_number
        logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
        logging.getLogger("fileserver").setLevel(level)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _process_connection(self, conn: Connection):
        """Serve exactly one request on ``conn``, then close it."""
        with conn:
            raw = conn.read_request()
            if raw is None:
                return

            response_bytes = self.handle_request(raw, conn.address, conn.id)
            if response_bytes is not None:
                conn.send_response(response_bytes)

    def handle_request(
        self,
        raw: bytes,
        client_address: Tuple[str, int] = ("", 0),
        connection_id: str = "-",
    ) -> Optional[bytes]:
        """
        Turn raw request bytes into raw response bytes.

        Returns:
            The serialized response, or None when the request line is
            unusable and the connection should be closed without a reply.
        """
        start_time = time.time()

        try:
            request = self._parser.parse(raw, client_address)
        except HTTPParseError as e:
            logger.warning(f"[{connection_id}] Dropping malformed request: {e}")
            return None

        try:
            response = self._handler.handle(request)
        except Exception as e:
            logger.exception(f"[{connection_id}] Handler error: {e}")
            response = internal_error(request.version)

        duration_ms = (time.time() - start_time) * 1000
        log_request(
            request,
            response,
            duration_ms,
            connection_id=connection_id,
            log_format=self.config.log_format,
        )

        return response.to_bytes()


def create_server(config: Optional[ServerConfig] = None) -> HTTPServer:
    """Factory mirroring ``HTTPServer(config)``; reads the environment if no config is given."""
    return HTTPServer(config or ServerConfig.from_env())
