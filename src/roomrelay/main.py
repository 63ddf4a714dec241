#!/usr/bin/env python3
"""
Chat Relay Server

Relay server for the roomchat client: every text frame a client sends is
attributed to its random user id and broadcast to the whole room.
"""

import asyncio
import logging
import os
import sys

from .history import FrameFormat
from .server import RelayServer

logger = logging.getLogger(__name__)


async def run_server(host: str, port: int, frame_format: FrameFormat):
    """
    Run the relay server until cancelled.

    Args:
        host: Host address to bind to
        port: Port to listen on
        frame_format: Wire format of published frames
    """
    server = RelayServer(host, port, frame_format)
    await server.start()
    logger.info("Publishing %s frames", server.frame_format.value)

    try:
        # Wait indefinitely
        await asyncio.Event().wait()
    except asyncio.CancelledError:
        logger.info("Server shutdown requested")
    finally:
        await server.stop()


def main():
    """Main entry point for the relay server."""
    # Get configuration from environment or use defaults
    host = os.environ.get("RELAY_HOST", "127.0.0.1")
    port = int(os.environ.get("RELAY_PORT", "8080"))
    frame_format = os.environ.get(
        "RELAY_FRAME_FORMAT", FrameFormat.LEGACY.value
    )
    log_level = os.environ.get("RELAY_LOG_LEVEL", "INFO").upper()

    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        frame_format = FrameFormat(frame_format.lower())
    except ValueError:
        logger.error(
            "Invalid RELAY_FRAME_FORMAT %r (expected 'legacy' or 'tagged')",
            frame_format,
        )
        sys.exit(2)

    logger.info("Starting relay server on %s:%s", host, port)

    try:
        asyncio.run(run_server(host, port, frame_format))
    except KeyboardInterrupt:
        logger.info("Relay server interrupted")
        sys.exit(0)


if __name__ == "__main__":
    main()
