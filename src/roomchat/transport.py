"""
Transport Layer for the Chat Client

This module provides the duplex-connection primitive the connection state
machine drives: open a handle to an address, send text on it, close it,
and get told when it opens, receives a frame, or closes.

Architecture:
    - Transport defines the contract; the state machine never touches
      sockets directly
    - WebSocketTransport implements it with the websockets library, one
      asyncio reader task per handle
    - The websocket factory is injectable (for testability)
"""

import asyncio
import logging
from typing import Any, Callable, Optional, Set

import websockets
import websockets.exceptions

logger = logging.getLogger(__name__)


class Transport:
    """
    Duplex connection primitive used by ConnectionService.

    Callbacks are invoked from the event loop that owns the transport.
    on_close fires when the peer closes or the connection fails, never as
    a result of close().
    """

    def open(
        self,
        address: str,
        on_open: Callable[[], None],
        on_message: Callable[[str], None],
        on_close: Callable[[], None],
    ) -> Any:
        """
        Start opening a connection and return its handle immediately.

        Args:
            address: Endpoint to connect to
            on_open: Called once the connection is established
            on_message: Called with each inbound text frame, in order
            on_close: Called when the connection ends without close()

        Returns:
            An opaque handle for send() and close()
        """
        raise NotImplementedError("Subclasses must implement open")

    def send(self, handle: Any, text: str) -> None:
        """Send one text frame on an open handle."""
        raise NotImplementedError("Subclasses must implement send")

    def close(self, handle: Any) -> None:
        """Close a handle. Must not fire the handle's on_close."""
        raise NotImplementedError("Subclasses must implement close")


class WebSocketHandle:
    """
    State of one websocket connection opened by WebSocketTransport.

    Attributes:
        address: WebSocket URL the handle connects to
        websocket: Open connection, None until established
        task: Reader task driving the connection
        closed: Whether close() has been requested
    """

    def __init__(self, address: str):
        self.address = address
        self.websocket = None
        self.task: Optional[asyncio.Task] = None
        self.closed = False


class WebSocketTransport(Transport):
    """
    Transport over the websockets library.

    open() must be called while an asyncio event loop is running; the
    connection is established in a background task.
    """

    def __init__(self, websocket_factory: Optional[Callable] = None):
        """
        Initialize the transport.

        Args:
            websocket_factory: Optional factory for creating WebSocket
                             connections (for dependency injection/testing)
        """
        self._websocket_factory = websocket_factory or websockets.connect
        self._pending_sends: Set[asyncio.Task] = set()

    def open(self, address, on_open, on_message, on_close) -> WebSocketHandle:
        handle = WebSocketHandle(address)
        loop = asyncio.get_running_loop()
        handle.task = loop.create_task(
            self._run(handle, on_open, on_message, on_close)
        )
        return handle

    async def _run(
        self,
        handle: WebSocketHandle,
        on_open: Callable[[], None],
        on_message: Callable[[str], None],
        on_close: Callable[[], None],
    ) -> None:
        """
        Connect, then forward frames until the connection ends.
        """
        try:
            logger.info("Connecting to %s...", handle.address)
            handle.websocket = await self._websocket_factory(handle.address)
            if handle.closed:
                await handle.websocket.close()
                return
            on_open()

            async for frame in handle.websocket:
                if isinstance(frame, bytes):
                    logger.debug("Ignoring binary frame")
                    continue
                on_message(frame)
            logger.info("Connection to %s closed", handle.address)
        except websockets.exceptions.ConnectionClosed:
            logger.warning("Connection closed by server")
        except (OSError, websockets.exceptions.WebSocketException) as e:
            logger.error("Connection to %s failed: %s", handle.address, e)
        except Exception as e:
            logger.error("Error in frame handler: %s", e)
            raise
        finally:
            if not handle.closed:
                on_close()

    def send(self, handle: WebSocketHandle, text: str) -> None:
        if handle.websocket is None or handle.closed:
            raise ConnectionError(f"Handle for {handle.address} is not open")

        task = asyncio.get_running_loop().create_task(
            handle.websocket.send(text)
        )
        self._pending_sends.add(task)
        task.add_done_callback(self._send_done)

    def _send_done(self, task: asyncio.Task) -> None:
        """Drop the finished send and log a failed write."""
        self._pending_sends.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Failed to send frame: %s", error)

    def close(self, handle: WebSocketHandle) -> None:
        if handle.closed:
            return
        handle.closed = True

        if handle.task is not None and not handle.task.done():
            handle.task.cancel()
        if handle.websocket is not None:
            task = asyncio.get_running_loop().create_task(
                handle.websocket.close()
            )
            self._pending_sends.add(task)
            task.add_done_callback(self._send_done)
        logger.info("Closed connection to %s", handle.address)
