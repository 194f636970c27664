#!/usr/bin/env python3
"""Startup script for the game client"""

import asyncio
import logging

from .client import GameClient
from .config import config_from_env
from .constants import NOTIFY_LOG, NOTIFY_ROOM, NOTIFY_STATUS

logger = logging.getLogger(__name__)


def console_listener(event, payload):
    """Print notifications to the console."""
    if event == NOTIFY_LOG:
        print(f"💬 {payload['text']}")
    elif event == NOTIFY_STATUS:
        print(f"🔌 {payload['status']}")
    elif event == NOTIFY_ROOM and payload and payload.get("room_id"):
        print(f"🃏 room {payload['room_id']} [{payload['phase']}] hand={' '.join(payload['hand'])}")
        for rec in payload["recommendations"]:
            print(f"   ↳ {rec['label']}")


async def run(config):
    client = GameClient(config)
    client.subscribe(console_listener)
    client.connect()
    try:
        await asyncio.Event().wait()
    finally:
        logger.info("Shutting down client")
        client.disconnect()


def main():
    config = config_from_env()
    logging.basicConfig(level=config.log_level)

    print(f"🚀 Connecting to {config.server_url}")
    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        print("👋 Bye")


if __name__ == "__main__":
    main()
