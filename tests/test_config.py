"""
Tests for Client Configuration
"""

import logging
from unittest.mock import patch

import pytest

from roomchat.config import (
    DEFAULT_LOG_FILE,
    DEFAULT_LOG_LEVEL,
    DEFAULT_SERVER_ADDRESS,
    ClientConfig,
    normalize_address,
)
from roomchat.main import configure_logging, parse_args


class TestClientConfig:
    """Tests for ClientConfig.from_env()."""

    def test_defaults(self):
        """Test defaults when no variables are set."""
        config = ClientConfig.from_env({})
        assert config.server_address == DEFAULT_SERVER_ADDRESS
        assert config.log_file == DEFAULT_LOG_FILE
        assert config.log_level == DEFAULT_LOG_LEVEL

    def test_default_server_address(self):
        """Test that the default targets a local relay."""
        assert DEFAULT_SERVER_ADDRESS == "ws://127.0.0.1:8080/"

    def test_overrides(self):
        """Test that environment variables override the defaults."""
        config = ClientConfig.from_env(
            {
                "ROOMCHAT_SERVER_ADDRESS": "ws://relay:9000/",
                "ROOMCHAT_LOG_FILE": "/tmp/chat.log",
                "ROOMCHAT_LOG_LEVEL": "debug",
            }
        )
        assert config.server_address == "ws://relay:9000/"
        assert config.log_file == "/tmp/chat.log"
        assert config.log_level == "DEBUG"

    def test_reads_os_environ(self, monkeypatch):
        """Test that os.environ is used by default."""
        monkeypatch.setenv("ROOMCHAT_SERVER_ADDRESS", "ws://other:1234/")
        assert ClientConfig.from_env().server_address == "ws://other:1234/"


@pytest.mark.parametrize(
    "address, expected",
    [
        ("127.0.0.1:8080", "ws://127.0.0.1:8080"),
        ("  relay:9000/ ", "ws://relay:9000/"),
        ("ws://relay:9000/", "ws://relay:9000/"),
        ("wss://relay.example.com/", "wss://relay.example.com/"),
    ],
)
def test_normalize_address(address, expected):
    assert normalize_address(address) == expected


class TestCommandLine:
    """Tests for the client's command line."""

    def test_no_arguments(self):
        """Test that the server address defaults to None."""
        assert parse_args([]).server_address is None

    def test_server_address_argument(self):
        """Test the --server-address option."""
        args = parse_args(["--server-address", "ws://relay:9000/"])
        assert args.server_address == "ws://relay:9000/"

    def test_configure_logging_writes_to_file(self, tmp_path):
        """Test that logging is sent to the configured file."""
        config = ClientConfig(
            log_file=str(tmp_path / "client.log"), log_level="INFO"
        )
        with patch("logging.basicConfig") as basic_config:
            configure_logging(config)

        kwargs = basic_config.call_args.kwargs
        assert kwargs["level"] == logging.INFO
        (handler,) = kwargs["handlers"]
        assert isinstance(handler, logging.FileHandler)
        assert handler.baseFilename == str(tmp_path / "client.log")
        handler.close()
