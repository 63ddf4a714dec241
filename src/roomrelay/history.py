"""
Chat History for the Relay

Records every frame the relay has published so newly connected clients
can be brought up to date, including the join and leave announcements
they need to rebuild the room's roster.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Deque, List

from roomchat.protocol import TIMESTAMP_FORMAT, format_frame
from roomchat.schemas import (
    JOINED_BODY,
    LEFT_BODY,
    BaseEvent,
    JoinEvent,
    LeaveEvent,
    MessageEvent,
)

logger = logging.getLogger(__name__)

# Maximum number of records kept for replay
MESSAGE_MAX_CAPACITY = 5000


class FrameFormat(str, Enum):
    """Wire format the relay publishes frames in."""

    LEGACY = "legacy"
    TAGGED = "tagged"


class RecordKind(str, Enum):
    """What a history record announces."""

    MESSAGE = "message"
    JOINED = "joined"
    LEFT = "left"


@dataclass
class ChatRecord:
    """
    One published frame.

    Attributes:
        user_id: Id of the connection the frame is attributed to
        body: Message text, or the membership announcement text
        kind: Whether this is a chat message or a membership change
        created_at: UTC time the relay recorded the frame
    """

    user_id: int
    body: str
    kind: RecordKind = RecordKind.MESSAGE
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @classmethod
    def joined(cls, user_id: int) -> "ChatRecord":
        """Record announcing that user_id joined."""
        return cls(user_id=user_id, body=JOINED_BODY, kind=RecordKind.JOINED)

    @classmethod
    def left(cls, user_id: int) -> "ChatRecord":
        """Record announcing that user_id left."""
        return cls(user_id=user_id, body=LEFT_BODY, kind=RecordKind.LEFT)

    def to_event(self) -> BaseEvent:
        """Convert to the client-side event this record announces."""
        sender = str(self.user_id)
        timestamp = self.created_at.strftime(TIMESTAMP_FORMAT)
        if self.kind is RecordKind.JOINED:
            return JoinEvent(sender=sender, timestamp=timestamp)
        if self.kind is RecordKind.LEFT:
            return LeaveEvent(sender=sender, timestamp=timestamp)
        return MessageEvent(sender=sender, body=self.body, timestamp=timestamp)

    def to_frame(self, frame_format: FrameFormat = FrameFormat.LEGACY) -> str:
        """
        Render the record as a wire frame.

        Args:
            frame_format: LEGACY text frame or TAGGED JSON envelope

        Returns:
            Frame text
        """
        if frame_format is FrameFormat.TAGGED:
            return self.to_event().to_json()
        return format_frame(self.user_id, self.created_at, self.body)


class ChatHistory:
    """
    Bounded, ordered log of published records.

    Once MESSAGE_MAX_CAPACITY is reached the oldest records are dropped.
    """

    def __init__(self, max_records: int = MESSAGE_MAX_CAPACITY):
        self.max_records = max_records
        self._records: Deque[ChatRecord] = deque(maxlen=max_records)

    def append(self, record: ChatRecord) -> None:
        """Add a record, dropping the oldest one when full."""
        if len(self._records) == self.max_records:
            logger.debug("History full, dropping oldest record")
        self._records.append(record)

    def records(self) -> List[ChatRecord]:
        """Snapshot of the records, oldest first."""
        return list(self._records)

    def clear(self) -> None:
        """Remove all records."""
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)
