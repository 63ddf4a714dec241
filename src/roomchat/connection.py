"""
Connection Lifecycle for the Chat Client

This module provides the state machine that owns the client's single
logical connection to the relay server.

Architecture:
    - Three states: DISCONNECTED -> CONNECTING -> CONNECTED
    - User actions (connect/disconnect/toggle) and transport callbacks
      (opened/closed) are the only transitions
    - Each opened transport handle is tagged with a generation number;
      callbacks from a superseded generation are ignored, so a late close
      from an old connection cannot tear down a newer one
    - Every transition notifies the status listener

Usage:
    service = ConnectionService("ws://127.0.0.1:8080/", WebSocketTransport())
    service.set_on_status_changed(lambda connected: ...)
    service.toggle()
"""

import logging
from enum import Enum
from functools import partial
from typing import Any, Callable, Optional

from .roster import Roster
from .transport import Transport

logger = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    """State of the client's connection to the relay."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class NotConnectedError(ConnectionError):
    """Raised when sending while the connection is not established."""


class ConnectionService:
    """
    State machine owning the single connection to the relay server.

    At most one transport handle is live at any time. Disconnecting, by
    user action or because the transport closed, clears the roster.

    Attributes:
        server_address: WebSocket URL of the relay server
        roster: Members of the room as seen on the current connection
        state: Current ConnectionState
    """

    def __init__(
        self,
        server_address: str,
        transport: Transport,
        roster: Optional[Roster] = None,
    ):
        """
        Initialize the connection service.

        Args:
            server_address: WebSocket URL of the relay server
            transport: Transport used to open connections
            roster: Roster to clear on disconnect (a new one by default)
        """
        self.server_address = server_address
        self.roster = roster if roster is not None else Roster()
        self.state = ConnectionState.DISCONNECTED
        self._transport = transport
        self._handle: Any = None
        self._generation = 0

        self._on_status_changed: Optional[Callable[[bool], None]] = None
        self._on_state_changed: Optional[
            Callable[[ConnectionState], None]
        ] = None

        logger.info(
            "ConnectionService initialized for server: %s", server_address
        )

    @property
    def is_connected(self) -> bool:
        """Check if the connection is established."""
        return self.state is ConnectionState.CONNECTED

    @property
    def has_handle(self) -> bool:
        """Check if a transport handle is live (connecting or connected)."""
        return self._handle is not None

    @property
    def generation(self) -> int:
        """Generation number of the most recently opened handle."""
        return self._generation

    def set_on_status_changed(self, callback: Callable[[bool], None]) -> None:
        """
        Register callback for connection status changes.

        Args:
            callback: Function that receives True when connected and
                      False otherwise (connecting counts as disconnected)
        """
        self._on_status_changed = callback

    def set_on_state_changed(
        self, callback: Callable[[ConnectionState], None]
    ) -> None:
        """
        Register callback receiving every ConnectionState transition.

        Args:
            callback: Function that receives the new state
        """
        self._on_state_changed = callback

    def connect(self) -> None:
        """
        Open a new connection, closing any existing one first.
        """
        if self._handle is not None:
            self.disconnect()

        self._generation += 1
        generation = self._generation
        logger.info(
            "Connecting to %s (generation %s)", self.server_address, generation
        )
        self._set_state(ConnectionState.CONNECTING)
        self._handle = self._transport.open(
            self.server_address,
            on_open=partial(self._handle_open, generation),
            on_message=partial(self._handle_message, generation),
            on_close=partial(self._handle_close, generation),
        )

    def disconnect(self) -> None:
        """
        Close the connection and clear the roster.

        Does nothing when already disconnected.
        """
        if self._handle is None:
            return

        handle = self._handle
        self._handle = None
        # Invalidate before closing so callbacks from the old handle are stale
        self._generation += 1
        self._transport.close(handle)
        self._enter_disconnected()
        logger.info("Disconnected from %s", self.server_address)

    def toggle(self) -> None:
        """Disconnect if a connection handle exists, otherwise connect."""
        if self._handle is not None:
            self.disconnect()
        else:
            self.connect()

    def send(self, text: str) -> None:
        """
        Send a text frame verbatim.

        Raises:
            NotConnectedError: If the connection is not established
        """
        if not self.is_connected:
            raise NotConnectedError("Not connected to the relay server")
        logger.debug("Sending frame: %r", text)
        self._transport.send(self._handle, text)

    def _handle_open(self, generation: int) -> None:
        """Transport callback: the handle finished opening."""
        if self._is_stale(generation, "open"):
            return
        logger.info("Connected to %s", self.server_address)
        self._set_state(ConnectionState.CONNECTED)

    def _handle_message(self, generation: int, text: str) -> None:
        """Transport callback: an inbound frame arrived."""
        if self._is_stale(generation, "message"):
            return
        self._on_frame(text)

    def _handle_close(self, generation: int) -> None:
        """Transport callback: the connection ended on its own."""
        if self._is_stale(generation, "close"):
            return
        logger.warning("Connection to %s was closed", self.server_address)
        self._handle = None
        self._generation += 1
        self._enter_disconnected()

    def _is_stale(self, generation: int, kind: str) -> bool:
        if generation == self._generation and self._handle is not None:
            return False
        logger.debug(
            "Ignoring %s from stale generation %s (current %s)",
            kind,
            generation,
            self._generation,
        )
        return True

    def _on_frame(self, text: str) -> None:
        """
        Handle an inbound frame from the current connection.

        Subclasses override this to parse and dispatch frames.
        """
        logger.debug("Received frame: %r", text)

    def _enter_disconnected(self) -> None:
        """Shared tail of user and transport initiated disconnects."""
        self.roster.reset()
        self._set_state(ConnectionState.DISCONNECTED)

    def _set_state(self, state: ConnectionState) -> None:
        self.state = state
        if self._on_state_changed:
            self._on_state_changed(state)
        if self._on_status_changed:
            self._on_status_changed(state is ConnectionState.CONNECTED)
