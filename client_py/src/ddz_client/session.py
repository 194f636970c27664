"""
Connection lifecycle: connect, exponential-backoff reconnect, room polling.

Every connection attempt gets a new generation number. Transport events and
timer callbacks carry the generation they were created under and are
ignored once a newer attempt (or an explicit disconnect) has superseded it.
"""

import asyncio
import logging
from typing import Callable, Dict, List, Optional, Union

from .config import ClientConfig, default_config
from .models import ConnectionStatus
from .transport import TransportListener, websocket_factory

logger = logging.getLogger(__name__)

EVENT_STATUS = "status"
EVENT_MESSAGE = "message"
EVENT_POLL = "poll"


class _GenerationListener(TransportListener):
    """Forwards transport events to the session, tagged with a generation."""

    def __init__(self, session: "SessionManager", generation: int):
        self.session = session
        self.generation = generation

    def on_open(self):
        self.session._handle_open(self.generation)

    def on_message(self, frame):
        self.session._handle_message(self.generation, frame)

    def on_error(self, error):
        self.session._handle_lost(self.generation, f"error: {error}")

    def on_close(self):
        self.session._handle_lost(self.generation, "closed")


class SessionManager:
    """Owns the transport and the reconnect/polling timers."""

    def __init__(
        self,
        transport_factory: Optional[Callable] = None,
        config: ClientConfig = default_config,
        loop=None,
    ):
        self.config = config
        self._transport_factory = transport_factory or websocket_factory(config.open_timeout)
        self._loop = loop
        self.status = ConnectionStatus.DISCONNECTED
        self.address: Optional[str] = None
        self.reconnect_attempts = 0
        self.last_reconnect_delay_ms: Optional[int] = None
        self.generation = 0
        self._transport = None
        self._reconnect_handle = None
        self._poll_handle = None
        self._listeners: Dict[str, List[Callable]] = {
            EVENT_STATUS: [],
            EVENT_MESSAGE: [],
            EVENT_POLL: [],
        }

    @property
    def loop(self):
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    @property
    def is_connected(self) -> bool:
        return self.status == ConnectionStatus.CONNECTED

    @property
    def reconnect_pending(self) -> bool:
        return self._reconnect_handle is not None

    @property
    def polling(self) -> bool:
        return self._poll_handle is not None

    def subscribe(self, event: str, callback: Callable):
        """Register a callback for "status", "message" or "poll"."""
        if event not in self._listeners:
            raise ValueError(f"Unknown session event: {event}")
        self._listeners[event].append(callback)

    def _emit(self, event: str, *args):
        for callback in list(self._listeners[event]):
            callback(*args)

    def _set_status(self, status: ConnectionStatus):
        if status == self.status:
            return
        logger.info(f"Session {self.status.value} -> {status.value}")
        self.status = status
        self._emit(EVENT_STATUS, status)

    # Lifecycle

    def connect(self, address: Optional[str] = None, retry: bool = False):
        """
        Open a new connection, replacing any existing one.

        Args:
            address: Server URL; defaults to the last used address
            retry: Keep the reconnect attempt counter (used by the backoff timer)
        """
        address = address or self.address or self.config.server_url
        self.address = address
        if not retry:
            self.reconnect_attempts = 0

        self._cancel_reconnect()
        self._stop_polling()
        self._teardown()

        generation = self.generation
        self._set_status(ConnectionStatus.CONNECTING)
        if generation != self.generation:
            # A status listener started another attempt
            return

        logger.info(f"Connecting to {address} (attempt {self.reconnect_attempts}, generation {generation})")
        transport = self._transport_factory(address, _GenerationListener(self, generation))
        self._transport = transport
        transport.open()

    def disconnect(self):
        """Explicitly close the connection. No reconnect is scheduled."""
        self._cancel_reconnect()
        self._stop_polling()
        self._teardown()
        self._set_status(ConnectionStatus.DISCONNECTED)

    def _teardown(self):
        # Bumping the generation first marks the old transport as explicitly
        # torn down, so its close callback is ignored.
        self.generation += 1
        transport, self._transport = self._transport, None
        if transport is not None:
            transport.close()

    def send(self, payload: Union[str, bytes]) -> bool:
        """Send a frame on the current connection. False when not connected."""
        if not self.is_connected or self._transport is None:
            logger.warning("Cannot send, not connected")
            return False
        return self._transport.send(payload)

    # Transport events

    def _is_current(self, generation: int, what: str) -> bool:
        if generation != self.generation:
            logger.debug(f"Ignoring stale {what} from generation {generation} (current {self.generation})")
            return False
        return True

    def _handle_open(self, generation: int):
        if not self._is_current(generation, "open"):
            return
        self._cancel_reconnect()
        self.reconnect_attempts = 0
        self.last_reconnect_delay_ms = None
        self._start_polling()
        self._set_status(ConnectionStatus.CONNECTED)

    def _handle_message(self, generation: int, frame):
        if not self._is_current(generation, "message"):
            return
        self._emit(EVENT_MESSAGE, frame)

    def _handle_lost(self, generation: int, reason: str):
        if not self._is_current(generation, reason):
            return
        if self.status == ConnectionStatus.DISCONNECTED and self.reconnect_pending:
            logger.debug(f"Connection already lost ({reason})")
            return
        logger.warning(f"Connection lost ({reason})")
        self._transport = None
        self._stop_polling()
        self._schedule_reconnect()
        self._set_status(ConnectionStatus.DISCONNECTED)

    # Timers

    def _schedule_reconnect(self) -> bool:
        if self._reconnect_handle is not None:
            logger.debug("Reconnect already scheduled")
            return False
        delay_ms = self.config.reconnect_delay_ms(self.reconnect_attempts)
        self.reconnect_attempts += 1
        self.last_reconnect_delay_ms = delay_ms
        logger.info(f"Reconnecting in {delay_ms} ms (attempt {self.reconnect_attempts})")
        self._reconnect_handle = self.loop.call_later(
            delay_ms / 1000.0, self._fire_reconnect, self.generation
        )
        return True

    def _fire_reconnect(self, generation: int):
        if not self._is_current(generation, "reconnect timer"):
            return
        self._reconnect_handle = None
        self.connect(self.address, retry=True)

    def _cancel_reconnect(self):
        if self._reconnect_handle is not None:
            self._reconnect_handle.cancel()
            self._reconnect_handle = None

    def _start_polling(self) -> bool:
        if self._poll_handle is not None:
            return False
        self._poll_handle = self.loop.call_later(
            self.config.room_list_poll_ms / 1000.0, self._poll_tick, self.generation
        )
        return True

    def _poll_tick(self, generation: int):
        if not self._is_current(generation, "poll tick"):
            return
        self._poll_handle = None
        if not self.is_connected:
            return
        self._emit(EVENT_POLL)
        if self.is_connected and generation == self.generation:
            self._start_polling()

    def _stop_polling(self):
        if self._poll_handle is not None:
            self._poll_handle.cancel()
            self._poll_handle = None
