"""
Game client: ties the session, the reconciler and the wire protocol together.

All state lives on a GameClient instance. Presentation code subscribes to
notifications and reads state; it never mutates it directly.
"""

import logging
from typing import Callable, Dict, List, Optional

from .comparator import classify_play
from .config import ClientConfig, default_config
from .constants import (
    NOTIFY_GAME_OVER, NOTIFY_INTERRUPTED, NOTIFY_LOG, NOTIFY_RECOMMENDATIONS,
    NOTIFY_RESTARTED, NOTIFY_ROOM, NOTIFY_ROOMS, NOTIFY_SELECTION, NOTIFY_STATUS,
    NOTIFY_WELCOME,
)
from .errors import INVALID_SELECTION, NOT_CONNECTED, UNKNOWN_MESSAGE, ClientError
from .events import (
    ClientMessage, ErrorMessage, GameOverMessage, GameRestartedMessage, JoinedMessage,
    PlayRejectedMessage, PongMessage, RoomCreatedMessage, RoomInterruptedMessage,
    RoomsListMessage, RoomStateMessage, ServerMessage, ServerMessageType, WelcomeMessage,
    create_room, join_room, list_rooms, parse_server_message, pass_turn, ping, play,
    restart_game,
)
from .models import ConnectionStatus
from .reconciler import RoomStateReconciler
from .serialization import room_view
from .session import EVENT_MESSAGE, EVENT_POLL, EVENT_STATUS, SessionManager

logger = logging.getLogger(__name__)

Listener = Callable[[str, Optional[dict]], None]


class GameClient:
    """Explicit client context passed to every handler."""

    def __init__(
        self,
        config: ClientConfig = default_config,
        transport_factory: Optional[Callable] = None,
        loop=None,
    ):
        self.config = config
        self.session = SessionManager(transport_factory, config=config, loop=loop)
        self.room = RoomStateReconciler(
            is_connected=lambda: self.session.is_connected,
            max_recommendations=config.max_recommendations,
        )
        self.user_name: Optional[str] = None
        self._listeners: List[Listener] = []

        self.session.subscribe(EVENT_STATUS, self._on_status)
        self.session.subscribe(EVENT_MESSAGE, self.handle_frame)
        self.session.subscribe(EVENT_POLL, self.request_room_list)

        self._handlers: Dict[ServerMessageType, Callable[[ServerMessage], None]] = {
            ServerMessageType.WELCOME: self._on_welcome,
            ServerMessageType.ROOMS_LIST: self._on_rooms_list,
            ServerMessageType.ROOM_CREATED: self._on_room_created,
            ServerMessageType.JOINED: self._on_joined,
            ServerMessageType.ROOM_STATE: self._on_room_state,
            ServerMessageType.PLAY_REJECTED: self._on_play_rejected,
            ServerMessageType.GAME_OVER: self._on_game_over,
            ServerMessageType.ROOM_INTERRUPTED: self._on_room_interrupted,
            ServerMessageType.GAME_RESTARTED: self._on_game_restarted,
            ServerMessageType.ERROR: self._on_error,
            ServerMessageType.PONG: self._on_pong,
        }

    # Notifications

    def subscribe(self, listener: Listener):
        """Register `listener(event, payload)` for state-change notifications."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, event: str, payload: Optional[dict] = None):
        for listener in list(self._listeners):
            listener(event, payload)

    def _log(self, text: str):
        self._notify(NOTIFY_LOG, {"text": text})

    # Connection

    def connect(self, address: Optional[str] = None):
        """User-initiated (re)connect."""
        self.session.connect(address or self.config.server_url)

    def disconnect(self):
        self.session.disconnect()

    def _on_status(self, status: ConnectionStatus):
        if status == ConnectionStatus.CONNECTED:
            self.room.reset()
            self._notify(NOTIFY_ROOM, room_view(self.room))
            self.request_room_list()
        self._notify(NOTIFY_STATUS, {
            "status": status.value,
            "reconnect_attempts": self.session.reconnect_attempts,
            "reconnect_delay_ms": self.session.last_reconnect_delay_ms,
        })

    # Outbound commands

    def send(self, message: ClientMessage) -> bool:
        if not self.session.is_connected:
            error = ClientError(NOT_CONNECTED, f"Not connected, dropping {message.type.value}")
            logger.warning(error.message)
            return False
        return self.session.send(message.to_wire())

    def request_room_list(self) -> bool:
        if not self.session.is_connected:
            return False
        return self.send(list_rooms())

    def create_room(self) -> bool:
        return self.send(create_room())

    def join_room(self, room_id: Optional[str] = None) -> bool:
        room_id = room_id or self.room.state.selected_room_id
        if not room_id:
            return False
        if not self.session.is_connected:
            self._log("Not connected to the server")
            return False
        self.room.select_room(room_id)
        return self.send(join_room(room_id))

    def play_cards(self, cards: List[str]) -> bool:
        """Send a play after checking the cards form a combo."""
        combo = classify_play(list(cards))
        if combo is None:
            error = ClientError(INVALID_SELECTION, f"Cards do not form a valid play: {cards}")
            logger.warning(error.message)
            self._log(error.message)
            return False
        return self.send(play(list(cards)))

    def play_selected(self) -> bool:
        return self.play_cards(self.room.selected_cards())

    def pass_turn(self) -> bool:
        return self.send(pass_turn())

    def restart_game(self) -> bool:
        return self.send(restart_game())

    def ping(self) -> bool:
        return self.send(ping())

    # Selection

    def apply_recommendation(self, index: int) -> bool:
        applied = self.room.apply_recommendation(index)
        if applied:
            self._notify(NOTIFY_SELECTION, {"cards": self.room.selected_cards()})
        return applied

    def clear_selection(self):
        self.room.clear_selection()
        self._notify(NOTIFY_SELECTION, {"cards": []})

    # Inbound messages

    def handle_frame(self, frame):
        """Decode and dispatch one inbound frame. Bad frames are dropped."""
        try:
            message = parse_server_message(frame)
        except ClientError as e:
            if e.code == UNKNOWN_MESSAGE:
                logger.debug(e.message)
            else:
                logger.warning(f"Dropping frame: {e.message}")
                self._log("Failed to parse server message")
            return
        self.handle_message(message)

    def handle_message(self, message: ServerMessage):
        handler = self._handlers.get(message.type)
        if handler is None:
            logger.debug(f"No handler for {message.type}")
            return
        handler(message)

    def _publish_room(self):
        view = room_view(self.room)
        self._notify(NOTIFY_ROOM, view)
        self._notify(NOTIFY_RECOMMENDATIONS, {"recommendations": view["recommendations"]})

    def _on_welcome(self, message: WelcomeMessage):
        data = message.data
        self.room.apply_welcome(data.user_id, data.user_name)
        self.user_name = self.room.name_of(data.user_id)
        self._log(f"Welcome, {self.user_name}")
        self._notify(NOTIFY_WELCOME, {"user_id": data.user_id, "user_name": self.user_name})

    def _on_rooms_list(self, message: RoomsListMessage):
        self.room.apply_rooms_list(message.data.rooms)
        self._notify(NOTIFY_ROOMS, {"count": len(self.room.state.room_list)})

    def _on_room_created(self, message: RoomCreatedMessage):
        self._log(f"Room created: {message.data.room_id}")
        self.request_room_list()

    def _on_joined(self, message: JoinedMessage):
        self.room.apply_joined(message.data)
        self._log(f"Joined room {message.data.room_id}")
        self._publish_room()
        self.request_room_list()

    def _on_room_state(self, message: RoomStateMessage):
        self.room.apply_snapshot(message.data)
        self._publish_room()

    def _on_play_rejected(self, message: PlayRejectedMessage):
        self._log(f"Play rejected: {message.data.reason}")

    def _on_game_over(self, message: GameOverMessage):
        data = message.data
        if not self.room.apply_terminal_event(data.room_id, data.winner_id):
            self._log(f"Ignored stale game over for {data.room_id}")
            return
        self._log(f"Game over, winner: {self.room.name_of(data.winner_id)}")
        self._notify(NOTIFY_GAME_OVER, {"room_id": data.room_id, "winner_id": data.winner_id})
        self._publish_room()

    def _on_room_interrupted(self, message: RoomInterruptedMessage):
        data = message.data
        if not self.room.apply_interruption(data.room_id, data.leaver_id, data.player_count):
            return
        self._log(f"{self.room.name_of(data.leaver_id)} left the room, waiting for players")
        self._notify(NOTIFY_INTERRUPTED, {"room_id": data.room_id, "leaver_id": data.leaver_id})
        self._publish_room()
        self.request_room_list()

    def _on_game_restarted(self, message: GameRestartedMessage):
        if not self.room.apply_restart(message.data.room_id):
            return
        self._log(f"Room {message.data.room_id} started a new round")
        self._notify(NOTIFY_RESTARTED, {"room_id": message.data.room_id})
        self._publish_room()

    def _on_error(self, message: ErrorMessage):
        logger.warning(f"Server error: {message.data.message}")
        self._log(f"Server error: {message.data.message}")

    def _on_pong(self, message: PongMessage):
        pass
