"""
Inbound Frame Dispatch

This module routes each inbound frame: parse it, apply membership changes
to the roster, then hand render-ready data to the message and roster
renderers.
"""

import logging
from typing import Callable, Optional, Sequence

from .protocol import parse_frame
from .roster import Roster
from .schemas import ChatEvent, JoinEvent, LeaveEvent

logger = logging.getLogger(__name__)

MessageRenderer = Callable[[Optional[str], str], None]
RosterRenderer = Callable[[Sequence[str]], None]


class EventDispatcher:
    """
    Applies inbound frames to the roster and forwards them for display.

    Attributes:
        roster: Roster updated by join and leave events
    """

    def __init__(
        self,
        roster: Roster,
        on_message: Optional[MessageRenderer] = None,
        on_roster: Optional[RosterRenderer] = None,
    ):
        self.roster = roster
        self.on_message = on_message
        self.on_roster = on_roster

    def dispatch(self, raw: str) -> ChatEvent:
        """
        Process one inbound frame.

        Every frame produces exactly one message render call; malformed
        frames are rendered unattributed with their raw text. Join and
        leave events additionally push the updated roster snapshot.

        Args:
            raw: Frame text as delivered by the transport

        Returns:
            The parsed event
        """
        event = parse_frame(raw)

        if isinstance(event, JoinEvent):
            self.roster.apply_join(event.sender)
            logger.info("Participant %s joined", event.sender)
        elif isinstance(event, LeaveEvent):
            self.roster.apply_leave(event.sender)
            logger.info("Participant %s left", event.sender)

        sender, body = event.render_pair()
        if self.on_message:
            self.on_message(sender, body)

        if isinstance(event, (JoinEvent, LeaveEvent)) and self.on_roster:
            self.on_roster(self.roster.current())

        return event
