#!/usr/bin/env python3
"""
Chat Client Application

Client application for connecting to the relay chat room.
Provides a terminal-based user interface using the Textual framework.

Usage:
    roomchat
    roomchat --server-address ws://127.0.0.1:8080/
"""

import argparse
import logging
import sys

from .config import ClientConfig, normalize_address

logger = logging.getLogger(__name__)


def configure_logging(config: ClientConfig) -> None:
    """Log to a file so output does not interfere with the UI."""
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.FileHandler(config.log_file, mode="a")],
    )


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Relay chat room client")
    parser.add_argument(
        "--server-address",
        default=None,
        help="WebSocket URL of the relay server "
        "(default: $ROOMCHAT_SERVER_ADDRESS or ws://127.0.0.1:8080/)",
    )
    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point for the chat client."""
    args = parse_args(argv)
    config = ClientConfig.from_env()
    if args.server_address:
        config.server_address = args.server_address
    config.server_address = normalize_address(config.server_address)

    configure_logging(config)
    logger.info("Starting chat client for %s", config.server_address)

    try:
        from .ui import ChatApp

        app = ChatApp(server_address=config.server_address)
        app.run()
    except ImportError as e:
        print(f"Error: Could not import UI components: {e}")
        print("Make sure textual is installed: pip install textual")
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nExiting...")
        sys.exit(0)


if __name__ == "__main__":
    main()
