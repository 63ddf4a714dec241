"""
Frame Protocol for Relay Communication

This module turns raw text frames received from the relay server into
structured chat events, and formats frames the way the relay sends them.

Frame Formats:
    Legacy (plain text, what the relay sends by default):
        [user_id:41 08:16:37]: test message

    The bodies "joined in the room" and "left the room" double as
    membership announcements in this format, so a participant who types
    either phrase verbatim is reported as joining or leaving.

    Tagged (JSON envelope with an explicit event type):
        {"type": "member_joined", "data": {"user_id": "41", ...}}

    parse_frame() tries the tagged decoder first and falls back to the
    legacy decoder for anything that is not a tagged frame.
"""

import json
import logging
import re
from datetime import datetime
from typing import Optional, Union

from .schemas import (
    EVENT_TYPES,
    JOINED_BODY,
    LEFT_BODY,
    ChatEvent,
    JoinEvent,
    LeaveEvent,
    MalformedEvent,
    MessageEvent,
)

logger = logging.getLogger(__name__)

USER_ID_PATTERN = re.compile(r"user_id:(\d+)")
TIMESTAMP_PATTERN = re.compile(r"user_id:\d+\s+(.+)$")
BODY_DELIMITER = "]: "
TIMESTAMP_FORMAT = "%H:%M:%S"


def parse_frame(raw: str) -> ChatEvent:
    """
    Parse one inbound frame into a chat event.

    Args:
        raw: One complete text frame as delivered by the transport

    Returns:
        MessageEvent, JoinEvent or LeaveEvent for attributable frames,
        MalformedEvent carrying the raw text otherwise
    """
    event = decode_tagged_frame(raw)
    if event is None:
        event = decode_legacy_frame(raw)
    if isinstance(event, MalformedEvent):
        logger.debug("Malformed frame: %r", raw)
    return event


def decode_legacy_frame(raw: str) -> ChatEvent:
    """
    Decode a plain text frame of the form ``[user_id:ID TIME]: BODY``.

    The sender is the first digit run following ``user_id:`` and the body
    is everything after the first ``]: ``. Membership changes are
    recognised by exact body text.
    """
    id_match = USER_ID_PATTERN.search(raw)
    if not id_match:
        return MalformedEvent(raw)

    head, delimiter, body = raw.partition(BODY_DELIMITER)
    if not delimiter:
        return MalformedEvent(raw)

    sender = id_match.group(1)
    timestamp_match = TIMESTAMP_PATTERN.search(head)
    timestamp = timestamp_match.group(1).strip() if timestamp_match else None

    if body == JOINED_BODY:
        return JoinEvent(sender=sender, timestamp=timestamp)
    if body == LEFT_BODY:
        return LeaveEvent(sender=sender, timestamp=timestamp)
    return MessageEvent(sender=sender, body=body, timestamp=timestamp)


def decode_tagged_frame(raw: str) -> Optional[ChatEvent]:
    """
    Decode a JSON envelope frame.

    Returns:
        The decoded event, MalformedEvent for an envelope with an unknown
        type, no sender or non-text fields, or None when raw is not a
        tagged frame at all
    """
    if not raw.lstrip().startswith("{"):
        return None

    try:
        data = json.loads(raw)
    except (ValueError, RecursionError):
        return None

    if not isinstance(data, dict) or "type" not in data:
        return None

    if not isinstance(data["type"], str):
        return MalformedEvent(raw)

    event_class = EVENT_TYPES.get(data["type"])
    if event_class is None:
        logger.debug("Unknown tagged frame type: %s", data["type"])
        return MalformedEvent(raw)

    payload = data.get("data")
    if not isinstance(payload, dict):
        return MalformedEvent(raw)

    user_id = payload.get("user_id")
    if not isinstance(user_id, (str, int)) or user_id == "":
        return MalformedEvent(raw)
    for key in ("content", "timestamp"):
        if not isinstance(payload.get(key), (str, type(None))):
            return MalformedEvent(raw)

    return event_class.from_dict(data)


def format_frame(
    user_id: Union[int, str],
    timestamp: Union[datetime, str],
    body: str,
) -> str:
    """
    Format a legacy text frame as the relay sends it.

    Args:
        user_id: Numeric participant id
        timestamp: Time of the message; datetimes are rendered HH:MM:SS
        body: Message text

    Returns:
        Frame text, e.g. ``[user_id:41 08:16:37]: hello``
    """
    if isinstance(timestamp, datetime):
        timestamp = timestamp.strftime(TIMESTAMP_FORMAT)
    return f"[user_id:{user_id} {timestamp}{BODY_DELIMITER}{body}"
