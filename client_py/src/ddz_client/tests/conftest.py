"""
Shared fakes for the client tests: a manual clock loop and an in-memory transport.
"""

import orjson
import pytest

from ddz_client.client import GameClient
from ddz_client.config import create_config
from ddz_client.session import SessionManager


class FakeHandle:
    def __init__(self, when, callback, args):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeLoop:
    """Just enough of an asyncio loop: call_later plus a manual clock."""

    def __init__(self):
        self.now = 0.0
        self.handles = []

    def call_later(self, delay, callback, *args):
        handle = FakeHandle(self.now + delay, callback, args)
        self.handles.append(handle)
        return handle

    def pending(self):
        return [h for h in self.handles if not h.cancelled]

    def advance(self, seconds):
        """Move the clock forward, firing due callbacks in time order."""
        target = self.now + seconds
        while True:
            due = [h for h in self.pending() if h.when <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.when)
            self.handles.remove(handle)
            self.now = handle.when
            handle.callback(*handle.args)
        self.now = target


class FakeTransport:
    def __init__(self, address, listener):
        self.address = address
        self.listener = listener
        self.opened = False
        self.closed = False
        self.sent = []

    def open(self):
        self.opened = True

    def send(self, payload):
        self.sent.append(orjson.loads(payload))
        return True

    def close(self):
        self.closed = True

    # Drive events as the server side would
    def accept(self):
        self.listener.on_open()

    def deliver(self, message):
        if isinstance(message, dict):
            message = orjson.dumps(message)
        self.listener.on_message(message)

    def drop(self):
        self.listener.on_close()

    def fail(self, error=None):
        self.listener.on_error(error or OSError("connection refused"))
        self.listener.on_close()


class TransportRecorder:
    def __init__(self):
        self.transports = []

    def __call__(self, address, listener):
        transport = FakeTransport(address, listener)
        self.transports.append(transport)
        return transport

    @property
    def last(self):
        return self.transports[-1]


@pytest.fixture
def loop():
    return FakeLoop()


@pytest.fixture
def recorder():
    return TransportRecorder()


@pytest.fixture
def config():
    return create_config(server_url="ws://test.local/ws")


@pytest.fixture
def session(loop, recorder, config):
    return SessionManager(recorder, config=config, loop=loop)


@pytest.fixture
def client(loop, recorder, config):
    return GameClient(config, transport_factory=recorder, loop=loop)


def snapshot(room_id="ROOM_A", hand=None, counts=(17, 17, 20), turn=1,
             last_play=None, last_player=None):
    """Build a RoomState payload for three players with ids 1, 2, 3."""
    players = [
        {"id": pid, "name": f"P{pid}", "hand_count": count, "is_landlord": pid == 3}
        for pid, count in zip((1, 2, 3), counts)
    ]
    return {
        "room_id": room_id,
        "players": players,
        "turn": turn,
        "last_player": last_player,
        "last_play": last_play,
        "your_hand": list(hand or ["S3", "H3", "D5", "CK", "BJ"]),
    }
