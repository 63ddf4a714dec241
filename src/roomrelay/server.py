"""
WebSocket Relay Server

Accepts client connections, gives each one a random user id, and relays
every text frame a client sends to all connected clients, prefixed with
the sender's id and the time.

Connection lifecycle:
    1. Assign a user id and snapshot the chat history
    2. Replay the history to the new client
    3. Publish "joined in the room" on the client's behalf
    4. Publish each text frame the client sends
    5. On close, publish "left the room"
"""

import asyncio
import logging
import random
from typing import Dict, List, Optional, Tuple

import websockets
import websockets.exceptions

from .history import (
    MESSAGE_MAX_CAPACITY,
    ChatHistory,
    ChatRecord,
    FrameFormat,
)

logger = logging.getLogger(__name__)

# Keepalive constants
HEARTBEAT_INTERVAL = 1  # seconds between pings
HEARTBEAT_TIMEOUT = 15  # seconds without a pong before closing

# User ids are drawn from [USER_ID_MIN, USER_ID_MAX)
USER_ID_MIN = 1000
USER_ID_MAX = 10000


class RelayClient:
    """
    One connected client.

    Attributes:
        websocket: The client's connection
        user_id: Id frames from this client are attributed to
        outbox: Frames published while the client is connected, waiting
                to be written
    """

    def __init__(self, websocket, user_id: int):
        self.websocket = websocket
        self.user_id = user_id
        self.outbox: asyncio.Queue = asyncio.Queue(
            maxsize=MESSAGE_MAX_CAPACITY
        )


class RelayServer:
    """
    WebSocket server relaying text frames between clients of one room.
    """

    def __init__(
        self,
        host: str,
        port: int,
        frame_format: FrameFormat = FrameFormat.LEGACY,
        history: Optional[ChatHistory] = None,
    ):
        """
        Initialize the relay server.

        Args:
            host: Host address to bind to
            port: Port to listen on (0 picks a free port)
            frame_format: Wire format of published frames
            history: Optional history instance (a new one by default)
        """
        self.host = host
        self.port = port
        self.frame_format = FrameFormat(frame_format)
        self.history = history if history is not None else ChatHistory()
        self.clients: Dict[object, RelayClient] = {}
        self.server = None

    async def start(self):
        """Start the WebSocket server."""
        self.server = await websockets.serve(
            self.handle_client,
            self.host,
            self.port,
            ping_interval=HEARTBEAT_INTERVAL,
            ping_timeout=HEARTBEAT_TIMEOUT,
        )
        for sock in self.server.sockets:
            self.port = sock.getsockname()[1]
            break
        logger.info("Relay server started on ws://%s:%s", self.host, self.port)

    async def stop(self):
        """Stop the WebSocket server."""
        if self.server:
            self.server.close()
            await self.server.wait_closed()
            self.server = None
            logger.info("Relay server stopped")

    def generate_user_id(self) -> int:
        """Pick a random user id not held by a connected client."""
        in_use = {client.user_id for client in self.clients.values()}
        while True:
            user_id = random.randrange(USER_ID_MIN, USER_ID_MAX)
            if user_id not in in_use:
                return user_id

    def register(self, websocket) -> Tuple[RelayClient, List[ChatRecord]]:
        """
        Add a client and snapshot the history it needs replayed.

        Registration and snapshot happen without yielding to the event
        loop, so every record is either in the snapshot or in the
        client's outbox, never both and never neither.

        Returns:
            The new RelayClient and the records to replay
        """
        client = RelayClient(websocket, self.generate_user_id())
        backlog = self.history.records()
        self.clients[websocket] = client
        logger.info(
            "Client %s connected (%s connected)",
            client.user_id,
            len(self.clients),
        )
        return client, backlog

    def unregister(self, websocket) -> Optional[RelayClient]:
        """Remove a client, returning it if it was registered."""
        client = self.clients.pop(websocket, None)
        if client:
            logger.info(
                "Client %s disconnected (%s connected)",
                client.user_id,
                len(self.clients),
            )
        return client

    def publish(self, record: ChatRecord) -> ChatRecord:
        """
        Record a frame and queue it for every connected client.

        Args:
            record: Chat message or membership announcement

        Returns:
            The published record
        """
        self.history.append(record)
        self.broadcast(record.to_frame(self.frame_format))
        return record

    def broadcast(self, frame: str) -> None:
        """Queue a frame for every connected client."""
        for client in self.clients.values():
            try:
                client.outbox.put_nowait(frame)
            except asyncio.QueueFull:
                logger.warning(
                    "Outbox full for client %s, dropping frame", client.user_id
                )

    async def handle_client(self, websocket, path: Optional[str] = None):
        """
        Handle a client connection for its whole lifetime.

        Args:
            websocket: The client's connection
            path: Request path (unused; passed by older websockets releases)
        """
        client, backlog = self.register(websocket)
        writer = asyncio.create_task(self._write_frames(client, backlog))
        self.publish(ChatRecord.joined(client.user_id))

        try:
            async for message in websocket:
                if isinstance(message, bytes):
                    logger.debug(
                        "Ignoring binary frame from %s", client.user_id
                    )
                    continue
                self.publish(
                    ChatRecord(user_id=client.user_id, body=message)
                )
        except websockets.exceptions.ConnectionClosed:
            logger.info("Connection to client %s lost", client.user_id)
        finally:
            self.unregister(websocket)
            writer.cancel()
            try:
                await writer
            except asyncio.CancelledError:
                pass
            self.publish(ChatRecord.left(client.user_id))

    async def _write_frames(
        self, client: RelayClient, backlog: List[ChatRecord]
    ) -> None:
        """Send the history backlog, then frames as they are published."""
        try:
            for record in backlog:
                await client.websocket.send(record.to_frame(self.frame_format))
            while True:
                frame = await client.outbox.get()
                await client.websocket.send(frame)
        except websockets.exceptions.ConnectionClosed:
            logger.debug("Stopped writing to client %s", client.user_id)
