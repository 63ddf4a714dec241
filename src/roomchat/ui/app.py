"""
Chat Application UI

Terminal UI for the relay chat room, built using the Textual framework.
The app registers itself as the ChatClient's status, message and roster
renderer and drives the client from the input form.
"""

import logging
from typing import List, Optional, Sequence

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, ScrollableContainer, Vertical
from textual.css.query import NoMatches
from textual.widgets import (
    Button,
    Footer,
    Header,
    Input,
    Label,
    ListItem,
    ListView,
    Static,
)

from ..chat_client import ChatClient
from ..config import DEFAULT_SERVER_ADDRESS
from ..connection import ConnectionState
from ..roster import SINGULAR_LABEL, roster_label
from ..schemas import JOINED_BODY, LEFT_BODY
from ..transport import Transport, WebSocketTransport

logger = logging.getLogger(__name__)


class MessageDisplay(Static):
    """Widget for displaying a single chat message."""

    def __init__(self, sender: Optional[str], body: str) -> None:
        """Initialize message display."""
        self.msg_sender = sender
        self.msg_body = body
        self.is_membership = body in (JOINED_BODY, LEFT_BODY)
        super().__init__(classes="membership" if self.is_membership else None)

    def compose(self) -> ComposeResult:
        """Compose the message display."""
        text = Text()
        if self.msg_sender is not None:
            text.append(f"{self.msg_sender}: ", style="bold")
        text.append(self.msg_body)
        yield Static(text, classes="message-content")


class SystemMessage(Static):
    """Widget for displaying local notices that did not come from the relay."""

    def __init__(self, message: str, message_type: str = "info") -> None:
        """Initialize system message display."""
        self.message = message
        self.message_type = message_type
        super().__init__()

    def compose(self) -> ComposeResult:
        """Compose the system message."""
        color = {
            "info": "blue",
            "warning": "yellow",
            "error": "red",
        }.get(self.message_type, "white")
        yield Static(Text(self.message, style=color), classes="system-message")


STATUS_TEXT = {
    ConnectionState.CONNECTED: Text("connected", style="green"),
    ConnectionState.CONNECTING: Text("connecting", style="yellow"),
    ConnectionState.DISCONNECTED: Text("disconnected", style="white on red"),
}


class ChatApp(App):
    """Main chat application."""

    TITLE = "roomchat"

    CSS = """
    Screen {
        layout: vertical;
    }

    #status {
        height: 1;
        padding: 0 1;
    }

    #chat-container {
        height: 1fr;
    }

    #chat-main {
        width: 3fr;
    }

    #sidebar {
        width: 1fr;
        border-left: solid $primary;
        padding: 0 1;
    }

    .sidebar-header {
        padding: 1 0;
        text-style: bold;
    }

    #member-list {
        height: 1fr;
    }

    #toggle-btn {
        margin: 1 0 0 0;
        width: 100%;
    }

    #messages-container {
        height: 1fr;
        padding: 1;
    }

    #message-input-row {
        height: 3;
        padding: 0 1;
    }

    #message-input {
        width: 1fr;
    }

    #send-btn {
        margin: 0 0 0 1;
    }

    .membership .message-content {
        color: #787878;
    }

    .system-message {
        text-align: center;
        text-style: italic;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit", show=True),
        Binding(
            "ctrl+t", "toggle_connection", "Connect/Disconnect", show=True
        ),
    ]

    def __init__(
        self,
        server_address: str = DEFAULT_SERVER_ADDRESS,
        transport: Optional[Transport] = None,
    ) -> None:
        """
        Initialize the chat application.

        Args:
            server_address: WebSocket URL of the relay server
            transport: Optional transport (a WebSocketTransport by default)
        """
        super().__init__()
        self.server_address = server_address
        self._transport = transport
        self.client: Optional[ChatClient] = None
        self.current_members: List[str] = []

    def compose(self) -> ComposeResult:
        """Compose the main application layout."""
        yield Header()
        yield Static(STATUS_TEXT[ConnectionState.DISCONNECTED], id="status")
        with Horizontal(id="chat-container"):
            with Vertical(id="chat-main"):
                yield ScrollableContainer(id="messages-container")
                with Horizontal(id="message-input-row"):
                    yield Input(
                        placeholder="Type a message...",
                        id="message-input",
                    )
                    yield Button("Send", id="send-btn", variant="primary")
            with Vertical(id="sidebar"):
                yield Static(
                    SINGULAR_LABEL,
                    id="client-list-title",
                    classes="sidebar-header",
                )
                yield ListView(id="member-list")
                yield Button("Connect", id="toggle-btn", variant="warning")
        yield Footer()

    def on_mount(self) -> None:
        """Create the client and open the initial connection."""
        self.client = ChatClient(
            self.server_address, self._transport or WebSocketTransport()
        )
        self.client.set_on_status_changed(self._render_status)
        self.client.set_on_state_changed(self._render_state)
        self.client.set_on_message_ready(self._render_message)
        self.client.set_on_roster_changed(self._render_roster)
        self.client.toggle()

    def on_unmount(self) -> None:
        """Close the connection when the app exits."""
        if self.client:
            self.client.disconnect()

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button press events."""
        button_id = event.button.id

        if button_id == "send-btn":
            self._handle_send_message()
        elif button_id == "toggle-btn":
            self.action_toggle_connection()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle input submit events (Enter key)."""
        if event.input.id == "message-input":
            self._handle_send_message()

    def action_toggle_connection(self) -> None:
        """Connect or disconnect."""
        if self.client:
            self.client.toggle()

    def _handle_send_message(self) -> None:
        """Send the typed message if connected."""
        if not self.client:
            return
        try:
            message_input = self.query_one("#message-input", Input)
        except NoMatches:
            return

        if self.client.submit(message_input.value):
            message_input.value = ""
            message_input.focus()
        elif message_input.value.strip():
            self._add_system_message("Not connected to the relay", "warning")

    def _render_status(self, connected: bool) -> None:
        """Status renderer: enable sending only while connected."""
        try:
            self.query_one("#send-btn", Button).disabled = not connected
        except NoMatches:
            pass

    def _render_state(self, state: ConnectionState) -> None:
        """Show the connection state and the matching toggle action."""
        try:
            self.query_one("#status", Static).update(STATUS_TEXT[state])
            toggle = self.query_one("#toggle-btn", Button)
            if state is ConnectionState.DISCONNECTED:
                toggle.label = "Connect"
            else:
                toggle.label = "Disconnect"
        except NoMatches:
            pass

    def _render_message(self, sender: Optional[str], body: str) -> None:
        """Message renderer callback."""
        self.call_later(self._add_chat_message, sender, body)

    def _render_roster(self, members: Sequence[str]) -> None:
        """Roster renderer callback."""
        snapshot = tuple(members)
        self.call_later(self._update_member_list, snapshot)

    def _update_member_list(self, members: Sequence[str]) -> None:
        """Rebuild the member list and its heading."""
        self.current_members = list(members)
        try:
            title = self.query_one("#client-list-title", Static)
            title.update(roster_label(members))

            member_list = self.query_one("#member-list", ListView)
            member_list.clear()
            for member in members:
                member_list.append(ListItem(Label(member)))
        except NoMatches:
            pass

    def _add_chat_message(self, sender: Optional[str], body: str) -> None:
        """Add a chat message to the display."""
        try:
            messages = self.query_one(
                "#messages-container", ScrollableContainer
            )
            messages.mount(MessageDisplay(sender, body))
            messages.scroll_end()
        except NoMatches:
            pass

    def _add_system_message(
        self, message: str, message_type: str = "info"
    ) -> None:
        """Add a system message to the display."""
        try:
            messages = self.query_one(
                "#messages-container", ScrollableContainer
            )
            messages.mount(SystemMessage(message, message_type))
            messages.scroll_end()
        except NoMatches:
            pass
