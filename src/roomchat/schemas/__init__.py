"""
Schemas Package

This package contains the chat event schemas produced by the frame parser.
The base class (BaseEvent) provides the tagged-envelope serialization so
each event only declares its fields.
"""

from .base import BaseEvent
from .events import (
    ChatEvent,
    EVENT_TYPES,
    JOINED_BODY,
    JoinEvent,
    LEFT_BODY,
    LeaveEvent,
    MalformedEvent,
    MessageEvent,
)

__all__ = [
    # Base class
    "BaseEvent",
    # Events
    "ChatEvent",
    "MessageEvent",
    "JoinEvent",
    "LeaveEvent",
    "MalformedEvent",
    "EVENT_TYPES",
    # Membership bodies
    "JOINED_BODY",
    "LEFT_BODY",
]
