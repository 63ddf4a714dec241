"""
Client Package

This package provides the client side of the relay chat room: the frame
parser, the roster tracker, the connection state machine, the websocket
transport, and the terminal user interface.

Schemas are organized in the `schemas` subpackage:
    - base: tagged-envelope serialization shared by all events
    - events: message, join, leave and malformed-frame events
"""

from .chat_client import ChatClient
from .config import ClientConfig, DEFAULT_SERVER_ADDRESS
from .connection import ConnectionService, ConnectionState, NotConnectedError
from .dispatcher import EventDispatcher
from .protocol import (
    decode_legacy_frame,
    decode_tagged_frame,
    format_frame,
    parse_frame,
)
from .roster import Roster, roster_label
from .transport import Transport, WebSocketTransport
from .schemas import (
    # Base class
    BaseEvent,
    # Events
    ChatEvent,
    MessageEvent,
    JoinEvent,
    LeaveEvent,
    MalformedEvent,
    # Membership bodies
    JOINED_BODY,
    LEFT_BODY,
)

__all__ = [
    # Service classes
    "ChatClient",
    "ConnectionService",
    "ConnectionState",
    "NotConnectedError",
    "EventDispatcher",
    "Roster",
    "roster_label",
    # Transport
    "Transport",
    "WebSocketTransport",
    # Configuration
    "ClientConfig",
    "DEFAULT_SERVER_ADDRESS",
    # Protocol
    "parse_frame",
    "decode_legacy_frame",
    "decode_tagged_frame",
    "format_frame",
    # Schemas
    "BaseEvent",
    "ChatEvent",
    "MessageEvent",
    "JoinEvent",
    "LeaveEvent",
    "MalformedEvent",
    "JOINED_BODY",
    "LEFT_BODY",
]
