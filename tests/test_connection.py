"""
Tests for the Connection State Machine

Tests for ConnectionService driven by an in-memory transport, including:
- State transitions on connect, disconnect, toggle and transport callbacks
- At most one live transport handle
- Roster clearing on disconnect
- Ignoring callbacks from superseded connections
- Send gating
"""

import pytest

from roomchat import (
    ConnectionService,
    ConnectionState,
    NotConnectedError,
    Roster,
    Transport,
)

SERVER = "ws://127.0.0.1:8080/"


class FakeHandle:
    """Handle recorded by FakeTransport."""

    def __init__(self, address, on_open, on_message, on_close):
        self.address = address
        self.on_open = on_open
        self.on_message = on_message
        self.on_close = on_close
        self.sent = []
        self.closed = False


class FakeTransport(Transport):
    """In-memory transport; tests fire the callbacks by hand."""

    def __init__(self):
        self.handles = []

    def open(self, address, on_open, on_message, on_close):
        handle = FakeHandle(address, on_open, on_message, on_close)
        self.handles.append(handle)
        return handle

    def send(self, handle, text):
        handle.sent.append(text)

    def close(self, handle):
        handle.closed = True

    @property
    def live_handles(self):
        return [h for h in self.handles if not h.closed]


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def service(transport):
    return ConnectionService(SERVER, transport)


@pytest.fixture
def statuses(service):
    seen = []
    service.set_on_status_changed(seen.append)
    return seen


@pytest.fixture
def states(service):
    seen = []
    service.set_on_state_changed(seen.append)
    return seen


class TestInitialState:
    """Tests for a freshly created service."""

    def test_starts_disconnected(self, service):
        """Test that the service starts with no connection."""
        assert service.state is ConnectionState.DISCONNECTED
        assert not service.is_connected
        assert not service.has_handle
        assert service.roster.current() == ()

    def test_uses_given_roster(self, transport):
        """Test that a roster can be injected."""
        roster = Roster()
        service = ConnectionService(SERVER, transport, roster)
        assert service.roster is roster


class TestConnect:
    """Tests for connect() and the opened callback."""

    def test_connect_moves_to_connecting(self, service, transport, statuses):
        """Test that connect opens a handle and waits for it to open."""
        service.connect()

        assert service.state is ConnectionState.CONNECTING
        assert len(transport.handles) == 1
        assert transport.handles[0].address == SERVER
        assert statuses == [False]

    def test_open_callback_moves_to_connected(
        self, service, transport, statuses
    ):
        """Test that the transport's open callback completes the connect."""
        service.connect()
        transport.handles[0].on_open()

        assert service.state is ConnectionState.CONNECTED
        assert service.is_connected
        assert statuses == [False, True]

    def test_connect_while_connected_replaces_connection(
        self, service, transport
    ):
        """Test that reconnecting leaves exactly one live handle."""
        service.connect()
        transport.handles[0].on_open()

        service.connect()

        assert len(transport.handles) == 2
        assert transport.handles[0].closed
        assert transport.live_handles == [transport.handles[1]]
        assert service.state is ConnectionState.CONNECTING

    def test_connect_while_connecting_replaces_connection(
        self, service, transport
    ):
        """Test that connecting twice closes the pending handle."""
        service.connect()
        service.connect()

        assert transport.handles[0].closed
        assert len(transport.live_handles) == 1

    def test_reconnect_clears_roster(self, service, transport):
        """Test that the forced disconnect on reconnect clears the roster."""
        service.connect()
        transport.handles[0].on_open()
        service.roster.apply_join("7")

        service.connect()

        assert service.roster.current() == ()

    def test_each_connect_gets_new_generation(self, service):
        """Test that generations increase with every connect."""
        service.connect()
        first = service.generation
        service.connect()
        assert service.generation > first


class TestDisconnect:
    """Tests for disconnect()."""

    def test_disconnect_closes_handle(self, service, transport, states):
        """Test that disconnect closes the transport handle."""
        service.connect()
        transport.handles[0].on_open()

        service.disconnect()

        assert transport.handles[0].closed
        assert not service.has_handle
        assert service.state is ConnectionState.DISCONNECTED
        assert states == [
            ConnectionState.CONNECTING,
            ConnectionState.CONNECTED,
            ConnectionState.DISCONNECTED,
        ]

    def test_disconnect_clears_roster(self, service, transport):
        """Test that disconnect empties the roster regardless of contents."""
        service.connect()
        transport.handles[0].on_open()
        for member in ("7", "41", "3"):
            service.roster.apply_join(member)

        service.disconnect()

        assert service.roster.current() == ()

    def test_disconnect_while_connecting(self, service, transport):
        """Test that a pending connection can be abandoned."""
        service.connect()
        service.disconnect()

        assert transport.handles[0].closed
        assert service.state is ConnectionState.DISCONNECTED

    def test_disconnect_when_disconnected_is_noop(self, service, statuses):
        """Test that disconnecting twice notifies once."""
        service.disconnect()
        assert statuses == []


class TestToggle:
    """Tests for toggle()."""

    def test_toggle_connects_when_idle(self, service, transport):
        """Test that toggle opens a connection when there is none."""
        service.toggle()
        assert service.state is ConnectionState.CONNECTING
        assert len(transport.handles) == 1

    def test_toggle_disconnects_when_connected(self, service, transport):
        """Test that toggle closes an existing connection."""
        service.toggle()
        transport.handles[0].on_open()

        service.toggle()

        assert service.state is ConnectionState.DISCONNECTED
        assert transport.handles[0].closed

    def test_toggle_disconnects_when_connecting(self, service, transport):
        """Test that a pending handle counts as a connection."""
        service.toggle()
        service.toggle()

        assert service.state is ConnectionState.DISCONNECTED
        assert len(transport.handles) == 1


class TestTransportClose:
    """Tests for connections ended by the transport."""

    def test_transport_close_disconnects(self, service, transport, statuses):
        """Test that a server-side close moves to disconnected."""
        service.connect()
        transport.handles[0].on_open()
        service.roster.apply_join("7")

        transport.handles[0].on_close()

        assert service.state is ConnectionState.DISCONNECTED
        assert not service.has_handle
        assert service.roster.current() == ()
        assert statuses == [False, True, False]

    def test_disconnect_after_transport_close_is_noop(
        self, service, transport, statuses
    ):
        """Test that the disconnected path is not run twice."""
        service.connect()
        transport.handles[0].on_open()
        transport.handles[0].on_close()

        service.disconnect()
        transport.handles[0].on_close()

        assert statuses == [False, True, False]

    def test_failed_open_disconnects(self, service, transport):
        """Test that a handle that never opens ends disconnected."""
        service.connect()
        transport.handles[0].on_close()

        assert service.state is ConnectionState.DISCONNECTED

        service.toggle()
        assert len(transport.handles) == 2


class TestStaleCallbacks:
    """Tests for callbacks from superseded connections."""

    def test_stale_close_does_not_tear_down_new_connection(
        self, service, transport
    ):
        """Test that a late close from an old handle is ignored."""
        service.connect()
        old = transport.handles[0]
        old.on_open()
        service.connect()
        new = transport.handles[1]
        new.on_open()
        service.roster.apply_join("7")

        old.on_close()

        assert service.state is ConnectionState.CONNECTED
        assert service.roster.current() == ("7",)

    def test_stale_open_is_ignored(self, service, transport):
        """Test that an old handle opening late does not mark connected."""
        service.connect()
        old = transport.handles[0]
        service.connect()

        old.on_open()

        assert service.state is ConnectionState.CONNECTING

    def test_callbacks_after_disconnect_are_ignored(
        self, service, transport, states
    ):
        """Test that nothing resurrects a closed session."""
        service.connect()
        handle = transport.handles[0]
        handle.on_open()
        service.disconnect()

        handle.on_open()
        handle.on_close()

        assert service.state is ConnectionState.DISCONNECTED
        assert states[-1] is ConnectionState.DISCONNECTED
        assert len(states) == 3


class TestSend:
    """Tests for send()."""

    def test_send_when_connected(self, service, transport):
        """Test that text is sent verbatim on the live handle."""
        service.connect()
        transport.handles[0].on_open()

        service.send("  hello  ")

        assert transport.handles[0].sent == ["  hello  "]

    def test_send_when_disconnected_raises(self, service):
        """Test that sending without a connection is rejected."""
        with pytest.raises(NotConnectedError):
            service.send("hello")

    def test_send_while_connecting_raises(self, service, transport):
        """Test that sending before the handle opens is rejected."""
        service.connect()
        with pytest.raises(NotConnectedError):
            service.send("hello")
        assert transport.handles[0].sent == []

    def test_not_connected_error_is_connection_error(self):
        """Test that callers can catch the builtin ConnectionError."""
        assert issubclass(NotConnectedError, ConnectionError)
