"""
Relay Server Package

This package provides the relay server the roomchat client connects to:
it assigns each connection a user id, replays the chat history to new
clients, and broadcasts every message and membership change.
"""

from .history import (
    ChatHistory,
    ChatRecord,
    FrameFormat,
    RecordKind,
    MESSAGE_MAX_CAPACITY,
)
from .server import (
    RelayClient,
    RelayServer,
    HEARTBEAT_INTERVAL,
    HEARTBEAT_TIMEOUT,
    USER_ID_MIN,
    USER_ID_MAX,
)

__all__ = [
    "ChatHistory",
    "ChatRecord",
    "FrameFormat",
    "RecordKind",
    "MESSAGE_MAX_CAPACITY",
    "RelayClient",
    "RelayServer",
    "HEARTBEAT_INTERVAL",
    "HEARTBEAT_TIMEOUT",
    "USER_ID_MIN",
    "USER_ID_MAX",
]
