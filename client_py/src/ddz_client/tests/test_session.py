"""
Session lifecycle tests, driven by a fake loop and in-memory transports.
"""

import pytest

from ddz_client.config import create_config
from ddz_client.models import ConnectionStatus


def test_connect_opens_transport(session, recorder):
    """Connecting opens a transport and marks the session connecting."""
    session.connect("ws://test.local/ws")
    assert session.status == ConnectionStatus.CONNECTING
    assert recorder.last.opened
    assert recorder.last.address == "ws://test.local/ws"


def test_open_starts_polling_and_resets_attempts(session, recorder, loop):
    """Opening starts the room poll and resets backoff."""
    session.connect()
    session.reconnect_attempts = 3
    recorder.last.accept()
    assert session.status == ConnectionStatus.CONNECTED
    assert session.reconnect_attempts == 0
    assert session.polling

    ticks = []
    session.subscribe("poll", lambda: ticks.append(loop.now))
    loop.advance(1.6)
    assert ticks == pytest.approx([0.5, 1.0, 1.5])


def test_reconnect_delay_sequence(session, recorder, loop):
    """Consecutive failures back off 1.5s, 3s, 6s, 12s, then stay at 12s."""
    session.connect()
    delays = []
    for _ in range(6):
        recorder.last.fail()
        assert session.status == ConnectionStatus.DISCONNECTED
        delays.append(session.last_reconnect_delay_ms)
        count = len(recorder.transports)
        loop.advance(delays[-1] / 1000.0)
        assert len(recorder.transports) == count + 1
    assert delays == [1500, 3000, 6000, 12000, 12000, 12000]


def test_reconnect_not_before_delay(session, recorder, loop):
    """No reconnect before the delay elapses."""
    session.connect()
    recorder.last.drop()
    loop.advance(1.0)
    assert len(recorder.transports) == 1
    loop.advance(0.5)
    assert len(recorder.transports) == 2
    assert session.status == ConnectionStatus.CONNECTING


def test_success_resets_backoff(session, recorder, loop):
    """A successful open restarts the backoff sequence."""
    session.connect()
    recorder.last.fail()
    loop.advance(1.5)
    recorder.last.fail()
    assert session.last_reconnect_delay_ms == 3000
    loop.advance(3.0)
    recorder.last.accept()
    recorder.last.drop()
    assert session.last_reconnect_delay_ms == 1500


def test_error_then_close_schedules_once(session, recorder, loop):
    """Error followed by close schedules a single reconnect."""
    session.connect()
    recorder.last.accept()
    recorder.last.fail()  # error followed by close
    assert session.reconnect_attempts == 1
    assert len(loop.pending()) == 1
    assert not session.polling


def test_explicit_disconnect_does_not_reconnect(session, recorder, loop):
    """Explicit disconnect never reconnects."""
    session.connect()
    transport = recorder.last
    transport.accept()
    session.disconnect()
    assert transport.closed
    assert session.status == ConnectionStatus.DISCONNECTED

    transport.drop()  # late close from the torn-down transport
    loop.advance(60)
    assert len(recorder.transports) == 1
    assert not session.reconnect_pending


def test_connect_cancels_pending_reconnect(session, recorder, loop):
    """A manual connect replaces a pending reconnect."""
    session.connect()
    recorder.last.fail()
    assert session.reconnect_pending
    session.connect("ws://other.local/ws")
    assert not session.reconnect_pending
    assert session.reconnect_attempts == 0

    loop.advance(60)
    assert len(recorder.transports) == 2
    assert recorder.last.address == "ws://other.local/ws"


def test_connect_replaces_existing_connection(session, recorder):
    """Events from a replaced transport are ignored."""
    session.connect()
    first = recorder.last
    first.accept()
    session.connect()
    assert first.closed
    assert not session.polling
    assert session.status == ConnectionStatus.CONNECTING

    first.drop()  # stale close must not affect the new attempt
    assert session.status == ConnectionStatus.CONNECTING
    assert not session.reconnect_pending

    first.accept()  # stale open is ignored too
    assert session.status == ConnectionStatus.CONNECTING


def test_stale_messages_are_ignored(session, recorder):
    """Frames from a replaced transport are dropped."""
    frames = []
    session.subscribe("message", frames.append)
    session.connect()
    first = recorder.last
    first.accept()
    session.connect()
    first.deliver({"type": "Pong"})
    assert frames == []
    recorder.last.accept()
    recorder.last.deliver({"type": "Pong"})
    assert len(frames) == 1


def test_stale_timer_callback_is_noop(session, recorder, loop):
    """A reconnect timer from an older generation does nothing."""
    session.connect()
    recorder.last.fail()
    handle = loop.pending()[0]
    session.connect()
    # Fire the cancelled callback anyway, as a late timer would
    handle.callback(*handle.args)
    assert len(recorder.transports) == 2


def test_retry_keeps_attempt_counter(session, recorder):
    """Retries keep counting attempts."""
    session.connect()
    recorder.last.fail()
    recorder.last.fail()  # second error/close of the same attempt is absorbed
    assert session.reconnect_attempts == 1
    session.connect(retry=True)
    assert session.reconnect_attempts == 1


def test_schedule_guard(session, recorder):
    """Timers are never scheduled twice."""
    session.connect()
    recorder.last.fail()
    assert not session._schedule_reconnect()
    recorder.last.accept()
    assert not session._start_polling()


def test_send_requires_connection(session, recorder):
    """Sending needs an open connection."""
    session.connect()
    assert not session.send(b'{"type":"Ping"}')
    recorder.last.accept()
    assert session.send(b'{"type":"Ping"}')
    assert recorder.last.sent == [{"type": "Ping"}]


def test_status_listener_sees_each_transition(session, recorder):
    """Status listeners see every transition."""
    seen = []
    session.subscribe("status", seen.append)
    session.connect()
    recorder.last.accept()
    recorder.last.drop()
    assert seen == [
        ConnectionStatus.CONNECTING,
        ConnectionStatus.CONNECTED,
        ConnectionStatus.DISCONNECTED,
    ]


def test_unknown_event_name(session):
    """Subscribing to an unknown event fails."""
    with pytest.raises(ValueError):
        session.subscribe("nope", lambda: None)


def test_custom_backoff(loop, recorder):
    """Backoff follows the configured base and ceiling."""
    from ddz_client.session import SessionManager

    config = create_config(reconnect_base_ms=200, reconnect_ceiling_ms=500)
    session = SessionManager(recorder, config=config, loop=loop)
    session.connect()
    delays = []
    for _ in range(4):
        recorder.last.fail()
        delays.append(session.last_reconnect_delay_ms)
        loop.advance(1)
    assert delays == [200, 400, 500, 500]


def test_stale_poll_tick_is_noop(session, recorder, loop):
    """A poll tick from a replaced connection emits nothing."""
    ticks = []
    session.subscribe("poll", lambda: ticks.append(loop.now))
    session.connect()
    recorder.last.accept()
    handle = loop.pending()[0]
    session.connect()
    recorder.last.accept()
    # Fire the old tick anyway, as a late timer would
    handle.callback(*handle.args)
    assert ticks == []
    assert session.polling
    assert len(loop.pending()) == 1
