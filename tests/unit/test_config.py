"""
Unit tests for server configuration.
"""

import logging

import pytest

from fileserver.config import ServerConfig


class TestServerConfig:
    """Tests for ServerConfig."""

    def test_defaults(self):
        config = ServerConfig()

        assert config.host == "0.0.0.0"
        assert config.port == 8080
        assert config.root == "."
        assert config.buffer_size == 10240
        assert config.max_body_size == 8192
        assert config.index_files == ("index.html", "index.php")
        assert config.log_format == "text"

    def test_valid_config(self, config):
        config.validate()

    @pytest.mark.parametrize("port", [0, -1, 65536])
    def test_invalid_port(self, config, port):
        config.port = port
        with pytest.raises(ValueError, match="port"):
            config.validate()

    def test_root_must_exist(self, config, tmp_path):
        config.root = str(tmp_path / "missing")
        with pytest.raises(ValueError, match="not a directory"):
            config.validate()

    @pytest.mark.parametrize("field", ["buffer_size", "max_body_size", "max_content_size"])
    def test_sizes_must_be_positive(self, config, field):
        setattr(config, field, 0)
        with pytest.raises(ValueError, match=field):
            config.validate()

    def test_timeout_must_be_positive(self, config):
        config.timeout = 0
        with pytest.raises(ValueError):
            config.validate()

    def test_no_timeout_allowed(self, config):
        config.timeout = None
        config.validate()

    def test_index_files_required(self, config):
        config.index_files = ()
        with pytest.raises(ValueError):
            config.validate()

    def test_unknown_log_level(self, config):
        config.log_level = "LOUD"
        with pytest.raises(ValueError, match="log level"):
            config.validate()

    def test_unknown_log_format(self, config):
        config.log_format = "xml"
        with pytest.raises(ValueError, match="log format"):
            config.validate()

    def test_log_level_number(self):
        assert ServerConfig(log_level="DEBUG").log_level_number == logging.DEBUG
        assert ServerConfig(log_level="warning").log_level_number == logging.WARNING


class TestFromEnv:
    """Tests for environment configuration."""

    def test_reads_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("FILESERVER_HOST", "127.0.0.1")
        monkeypatch.setenv("FILESERVER_PORT", "9000")
        monkeypatch.setenv("FILESERVER_ROOT", str(tmp_path))
        monkeypatch.setenv("FILESERVER_TIMEOUT", "2.5")
        monkeypatch.setenv("FILESERVER_LOG_LEVEL", "debug")
        monkeypatch.setenv("FILESERVER_LOG_FORMAT", "JSON")

        config = ServerConfig.from_env()

        assert config.host == "127.0.0.1"
        assert config.port == 9000
        assert config.root == str(tmp_path)
        assert config.timeout == 2.5
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"
        config.validate()

    def test_defaults_without_environment(self, monkeypatch):
        for name in ("HOST", "PORT", "ROOT", "BUFFER_SIZE", "TIMEOUT",
                     "LOG_LEVEL", "LOG_FORMAT"):
            monkeypatch.delenv(f"FILESERVER_{name}", raising=False)

        assert ServerConfig.from_env() == ServerConfig()

    def test_bad_port_value(self, monkeypatch):
        monkeypatch.setenv("FILESERVER_PORT", "http")
        with pytest.raises(ValueError):
            ServerConfig.from_env()
