"""
Chat Client for the Relay Chat Room

This module provides a ChatClient class that extends ConnectionService
with frame dispatching, roster tracking and the callback hooks the UI
layer registers as its renderers.

Architecture:
    - Extends ConnectionService for the connection lifecycle
    - Uses EventDispatcher to parse frames and update the roster
    - Provides callback hooks for UI integration
    - submit() is the input form's action and guards against sending
      while disconnected

Usage:
    client = ChatClient("ws://127.0.0.1:8080/", WebSocketTransport())
    client.set_on_message_ready(show_message)
    client.set_on_roster_changed(show_members)
    client.toggle()
"""

import logging
from typing import Callable, Optional, Sequence

from .connection import ConnectionService
from .dispatcher import EventDispatcher
from .roster import Roster
from .transport import Transport

logger = logging.getLogger(__name__)


class ChatClient(ConnectionService):
    """
    Chat client with roster synchronization.

    This class extends ConnectionService with:
    - Parsing and dispatch of inbound frames
    - Roster updates from membership announcements
    - Callbacks for UI integration

    Attributes:
        dispatcher: EventDispatcher applying frames to the roster
    """

    def __init__(
        self,
        server_address: str,
        transport: Transport,
        roster: Optional[Roster] = None,
    ):
        """
        Initialize the chat client.

        Args:
            server_address: WebSocket URL of the relay server
            transport: Transport used to open connections
            roster: Optional roster instance (a new one by default)
        """
        super().__init__(server_address, transport, roster)
        self.dispatcher = EventDispatcher(self.roster)

    def set_on_message_ready(
        self, callback: Callable[[Optional[str], str], None]
    ) -> None:
        """
        Register callback for messages ready to display.

        Args:
            callback: Function that receives (sender, body); sender is
                      None for frames that could not be attributed
        """
        self.dispatcher.on_message = callback

    def set_on_roster_changed(
        self, callback: Callable[[Sequence[str]], None]
    ) -> None:
        """
        Register callback for roster changes.

        Args:
            callback: Function that receives the member ids in join order
        """
        self.dispatcher.on_roster = callback

    def submit(self, text: str) -> bool:
        """
        Send user input to the room.

        Surrounding whitespace is stripped and empty input is dropped.

        Args:
            text: Text typed by the user

        Returns:
            True if the text was sent, False if it was empty or the
            client is not connected
        """
        message = text.strip()
        if not message:
            return False
        if not self.is_connected:
            logger.warning("Cannot send message while %s", self.state.value)
            return False

        self.send(message)
        return True

    def _on_frame(self, text: str) -> None:
        self.dispatcher.dispatch(text)

    def _enter_disconnected(self) -> None:
        had_members = len(self.roster) > 0
        super()._enter_disconnected()
        if had_members and self.dispatcher.on_roster:
            self.dispatcher.on_roster(self.roster.current())
