"""
Unit tests for the accept loop.
"""

import logging
import socket
import threading
import time

import pytest

from fileserver.core import SocketServer


def wait_until_running(server: SocketServer):
    for _ in range(50):  # 5 seconds max
        if server.is_running:
            return
        time.sleep(0.1)
    raise RuntimeError("Server failed to start")


@pytest.fixture
def running_server(config, free_port):
    """Start a SocketServer in a thread with a swappable handler."""
    config.port = free_port
    server = SocketServer(config)
    handled = []

    def handler(conn):
        handled.append(conn.id)
        if len(handled) == 1:
            raise ConnectionAbortedError("aborted by peer")
        with conn:
            data = conn.read_request()
            conn.send_response(b"ok:" + data)

    thread = threading.Thread(target=server.start, args=(handler,), daemon=True)
    thread.start()
    wait_until_running(server)

    yield server, handled

    server.shutdown()
    thread.join(timeout=5.0)


class TestSocketServer:
    """Tests for SocketServer."""

    def test_failing_connection_does_not_stop_server(self, running_server, caplog):
        """An exception from one connection leaves the loop accepting."""
        server, handled = running_server
        host, port = server.address

        with caplog.at_level(logging.ERROR, logger="fileserver"):
            with socket.create_connection((host, port), timeout=5) as sock:
                try:
                    assert sock.recv(1024) == b""
                except ConnectionResetError:
                    pass

            with socket.create_connection((host, port), timeout=5) as sock:
                sock.sendall(b"hi")
                assert sock.recv(1024) == b"ok:hi"

        assert len(handled) == 2
        assert server.is_running
        assert "Error handling connection" in caplog.text

    def test_address_reports_bound_port(self, running_server, free_port):
        server, _ = running_server
        assert server.address[1] == free_port

    def test_shutdown_stops_loop(self, running_server):
        server, _ = running_server

        server.shutdown()

        assert server.wait_for_shutdown(timeout=5.0)
        assert not server.is_running
