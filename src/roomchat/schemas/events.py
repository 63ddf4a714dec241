"""
Chat Event Definitions

This module defines the structured events produced from inbound frames:
chat messages, membership changes, and frames that could not be
attributed to a sender.

Tagged wire format:
    {
        "type": "new_message" | "member_joined" | "member_left",
        "data": {"user_id": "41", "timestamp": "08:16:37", "content": "..."}
    }
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

from .base import BaseEvent

# Body texts the relay uses to announce membership changes
JOINED_BODY = "joined in the room"
LEFT_BODY = "left the room"


@dataclass(frozen=True)
class MessageEvent(BaseEvent):
    """
    A chat message from a participant.

    Attributes:
        sender: Participant id of the author
        body: Message text
        timestamp: Time from the frame header, if present
    """

    sender: str
    body: str
    timestamp: Optional[str] = None

    @property
    def _message_type(self) -> str:
        """Return the message type for chat messages."""
        return "new_message"

    def _to_data(self) -> Dict[str, Any]:
        return {
            "user_id": self.sender,
            "content": self.body,
            "timestamp": self.timestamp,
        }

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "MessageEvent":
        """Create from tagged event data dictionary."""
        return cls(
            sender=str(data["user_id"]),
            body=data.get("content") or "",
            timestamp=data.get("timestamp"),
        )

    def render_pair(self) -> Tuple[Optional[str], str]:
        return self.sender, self.body


@dataclass(frozen=True)
class JoinEvent(BaseEvent):
    """
    A participant joined the room.

    Attributes:
        sender: Participant id of the new member
        timestamp: Time from the frame header, if present
    """

    sender: str
    timestamp: Optional[str] = None

    @property
    def _message_type(self) -> str:
        """Return the message type for member joined notifications."""
        return "member_joined"

    def _to_data(self) -> Dict[str, Any]:
        return {"user_id": self.sender, "timestamp": self.timestamp}

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "JoinEvent":
        """Create from tagged event data dictionary."""
        return cls(sender=str(data["user_id"]), timestamp=data.get("timestamp"))

    def render_pair(self) -> Tuple[Optional[str], str]:
        return self.sender, JOINED_BODY


@dataclass(frozen=True)
class LeaveEvent(BaseEvent):
    """
    A participant left the room.

    Attributes:
        sender: Participant id of the departing member
        timestamp: Time from the frame header, if present
    """

    sender: str
    timestamp: Optional[str] = None

    @property
    def _message_type(self) -> str:
        """Return the message type for member left notifications."""
        return "member_left"

    def _to_data(self) -> Dict[str, Any]:
        return {"user_id": self.sender, "timestamp": self.timestamp}

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "LeaveEvent":
        """Create from tagged event data dictionary."""
        return cls(sender=str(data["user_id"]), timestamp=data.get("timestamp"))

    def render_pair(self) -> Tuple[Optional[str], str]:
        return self.sender, LEFT_BODY


@dataclass(frozen=True)
class MalformedEvent(BaseEvent):
    """
    A frame with no extractable sender.

    Malformed frames only ever arrive from the wire, so there is no
    tagged encoding for them.

    Attributes:
        raw: The frame text exactly as received
    """

    raw: str

    def render_pair(self) -> Tuple[Optional[str], str]:
        return None, self.raw


ChatEvent = Union[MessageEvent, JoinEvent, LeaveEvent, MalformedEvent]

# Tagged wire type -> event class
EVENT_TYPES = {
    "new_message": MessageEvent,
    "member_joined": JoinEvent,
    "member_left": LeaveEvent,
}
