"""WebSocket transport for the game client"""

import asyncio
import logging
from typing import Optional, Set, Union

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

logger = logging.getLogger(__name__)


class TransportListener:
    """Receives transport events. All methods run on the event loop thread."""

    def on_open(self):
        pass

    def on_message(self, frame: Union[str, bytes]):
        pass

    def on_error(self, error: Exception):
        pass

    def on_close(self):
        pass


class WebSocketTransport:
    """
    One full-duplex channel to the server.

    A transport is single use: once closed, a new one is created for the
    next connection attempt.
    """

    def __init__(self, address: str, listener: TransportListener, open_timeout: float = 10.0):
        self.address = address
        self.listener = listener
        self.open_timeout = open_timeout
        self.closing = False
        self._ws = None
        self._task: Optional[asyncio.Task] = None
        self._sends: Set[asyncio.Task] = set()

    @property
    def is_open(self) -> bool:
        return self._ws is not None and not self.closing

    def open(self):
        """Start connecting in the background."""
        if self._task is not None:
            return
        self._task = asyncio.ensure_future(self._run())

    async def _run(self):
        try:
            async with websockets.connect(self.address, open_timeout=self.open_timeout) as ws:
                if self.closing:
                    return
                self._ws = ws
                logger.info(f"Connected to {self.address}")
                self.listener.on_open()
                async for frame in ws:
                    try:
                        self.listener.on_message(frame)
                    except Exception as e:
                        logger.error(f"Error handling frame: {e}")
        except (OSError, asyncio.TimeoutError, WebSocketException) as e:
            if not self.closing:
                logger.error(f"Connection to {self.address} failed: {e}")
                self.listener.on_error(e)
        finally:
            self._ws = None
            if not self.closing:
                logger.info(f"Connection to {self.address} closed")
            self.listener.on_close()

    def send(self, payload: Union[str, bytes]) -> bool:
        """Queue a frame for sending. Returns False if the channel isn't open."""
        if not self.is_open:
            return False
        if isinstance(payload, (bytes, bytearray)):
            payload = payload.decode("utf-8")
        task = asyncio.ensure_future(self._send(self._ws, payload))
        self._sends.add(task)
        task.add_done_callback(self._sends.discard)
        return True

    async def _send(self, ws, payload: str):
        try:
            await ws.send(payload)
        except ConnectionClosed as e:
            logger.warning(f"Dropped outbound frame, connection closed: {e}")

    def close(self):
        """Close the channel. Safe to call more than once."""
        if self.closing:
            return
        self.closing = True
        if self._task is not None and not self._task.done():
            self._task.cancel()


def websocket_factory(open_timeout: float = 10.0):
    """Transport factory for SessionManager."""
    def factory(address: str, listener: TransportListener) -> WebSocketTransport:
        return WebSocketTransport(address, listener, open_timeout=open_timeout)
    return factory
