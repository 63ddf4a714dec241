"""
Client Configuration

Settings for the chat client, read from environment variables with
defaults matching a relay running locally.

Environment:
    ROOMCHAT_SERVER_ADDRESS: WebSocket URL of the relay server
    ROOMCHAT_LOG_FILE: File the client logs to
    ROOMCHAT_LOG_LEVEL: Logging level name (e.g. DEBUG, INFO)
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_SERVER_ADDRESS = "ws://127.0.0.1:8080/"
DEFAULT_LOG_FILE = "roomchat.log"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass
class ClientConfig:
    """
    Chat client settings.

    Attributes:
        server_address: WebSocket URL of the relay server
        log_file: Path of the client log file
        log_level: Logging level name
    """

    server_address: str = DEFAULT_SERVER_ADDRESS
    log_file: str = DEFAULT_LOG_FILE
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "ClientConfig":
        """
        Build the configuration from environment variables.

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            ClientConfig with defaults for unset variables
        """
        env = os.environ if environ is None else environ
        return cls(
            server_address=env.get(
                "ROOMCHAT_SERVER_ADDRESS", DEFAULT_SERVER_ADDRESS
            ),
            log_file=env.get("ROOMCHAT_LOG_FILE", DEFAULT_LOG_FILE),
            log_level=env.get("ROOMCHAT_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        )


def normalize_address(address: str) -> str:
    """Add a ws:// scheme to a bare host:port address."""
    address = address.strip()
    if "://" not in address:
        return f"ws://{address}"
    return address
