"""
pytest configuration and fixtures.
"""

import socket
import threading
import time
from typing import Generator
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fileserver import HTTPServer, ServerConfig


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET /page.html HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: text/html\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample HTTP POST request with a form body."""
    body = b"name=John&email=john%40example.com"
    return (
        b"POST /page.html HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"Content-Type: application/x-www-form-urlencoded\r\n" +
        f"Content-Length: {len(body)}\r\n".encode() +
        b"\r\n"
    ) + body


@pytest.fixture
def served_root(tmp_path: Path) -> Path:
    """
    A populated served root.

        www/
            page.html          <h1>Hello</h1>
            style.css
            notes.txt
            README             (no extension)
            data.bin           all 256 byte values
            my file.txt
            docs/              index.html
            both/              index.html + index.php
            php/               index.php
            gallery/           a.png, b.txt, thumbs/
            empty/

    A secret.txt sits next to www/, outside the served root.
    """
    root = tmp_path / "www"
    root.mkdir()

    (root / "page.html").write_bytes(b"<h1>Hello</h1>\n")
    (root / "style.css").write_bytes(b"body { color: red; }\n")
    (root / "notes.txt").write_bytes(b"plain notes\n")
    (root / "README").write_bytes(b"readme\n")
    (root / "data.bin").write_bytes(bytes(range(256)))
    (root / "my file.txt").write_bytes(b"spaced\n")

    (root / "docs").mkdir()
    (root / "docs" / "index.html").write_bytes(b"<h1>Docs</h1>\n")

    (root / "both").mkdir()
    (root / "both" / "index.html").write_bytes(b"html index\n")
    (root / "both" / "index.php").write_bytes(b"<?php echo 1; ?>\n")

    (root / "php").mkdir()
    (root / "php" / "index.php").write_bytes(b"<?php echo 'php'; ?>\n")

    (root / "gallery").mkdir()
    (root / "gallery" / "a.png").write_bytes(b"\x89PNG\r\n\x1a\n")
    (root / "gallery" / "b.txt").write_bytes(b"b\n")
    (root / "gallery" / "thumbs").mkdir()

    (root / "empty").mkdir()

    (tmp_path / "secret.txt").write_bytes(b"top secret\n")

    return root


@pytest.fixture
def config(served_root: Path) -> ServerConfig:
    """Default test server configuration."""
    return ServerConfig(
        host="127.0.0.1",
        port=8080,
        root=str(served_root),
        timeout=5.0,
        log_level="WARNING",
    )


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


class TestServer:
    """Test server helper that runs in a background thread."""

    def __init__(self, server: HTTPServer, port: int):
        self.server = server
        self.port = port
        self._thread: threading.Thread = None

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(
            target=self.server.run,
            kwargs={"setup_logging": False},
            daemon=True
        )
        self._thread.start()

        # Wait for server to be ready
        for _ in range(50):  # 5 seconds max
            try:
                with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
                    s.connect(('127.0.0.1', self.port))
                    return
            except ConnectionRefusedError:
                time.sleep(0.1)

        raise RuntimeError("Server failed to start")

    def stop(self):
        """Stop the server."""
        self.server.shutdown()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)


@pytest.fixture
def test_server(served_root: Path, free_port: int) -> Generator[TestServer, None, None]:
    """Run a file server over ``served_root`` on a free port."""
    server = HTTPServer(ServerConfig(
        host="127.0.0.1",
        port=free_port,
        root=str(served_root),
        timeout=5.0,
        log_level="WARNING",
    ))

    test_srv = TestServer(server, free_port)
    test_srv.start()

    yield test_srv

    test_srv.stop()
