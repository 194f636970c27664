"""
Local room state, reconciled from authoritative server events.

Snapshots replace the room wholesale. Terminal and interruption events are
scoped to a room id and are discarded when they don't match the joined room,
which guards against reordered or cross-room messages on a shared channel.
"""

import logging
from typing import Callable, Iterable, List, Optional

from .cards import canonical_order, rank_value
from .constants import (
    MAX_RECOMMEND, PHASE_IDLE, PHASE_INTERRUPTED, PHASE_STARTED, PHASE_TERMINAL, SEATS,
)
from .events import JoinedData, PlayViewData, RoomSnapshotData, RoomSummaryData
from .models import (
    ActionState, Combo, PlayerInfo, PlayRecord, RoomState, RoomSummary, TerminalState,
)
from .recommend import recommend

logger = logging.getLogger(__name__)


def play_record_from_view(view: Optional[PlayViewData], player_id: Optional[int]) -> Optional[PlayRecord]:
    """Convert the server's last-play view into a PlayRecord."""
    if view is None:
        return None
    combo = Combo(kind=view.kind, main_rank=rank_value(view.main_rank), size=view.size)
    return PlayRecord(combo=combo, player_id=player_id)


class RoomStateReconciler:
    """Applies inbound room events to a RoomState and keeps recommendations fresh."""

    def __init__(self, is_connected: Callable[[], bool] = lambda: False, max_recommendations: int = MAX_RECOMMEND):
        self.state = RoomState()
        self.user_id: Optional[int] = None
        self.is_connected = is_connected
        self.max_recommendations = max_recommendations

    # Derived state

    @property
    def is_game_over(self) -> bool:
        terminal = self.state.terminal
        return terminal is not None and terminal.winner_id is not None

    @property
    def phase(self) -> str:
        """IDLE, STARTED, TERMINAL or INTERRUPTED for the joined room."""
        if self.state.room_id is None:
            return PHASE_IDLE
        if self.is_game_over:
            return PHASE_TERMINAL
        if self.state.interrupted:
            return PHASE_INTERRUPTED
        if self.state.started:
            return PHASE_STARTED
        return PHASE_IDLE

    @property
    def is_my_turn(self) -> bool:
        return self.user_id is not None and self.state.turn == self.user_id

    def name_of(self, player_id: Optional[int]) -> str:
        if player_id is None:
            return "player"
        return self.state.player_names.get(player_id) or f"Player_{str(player_id)[-4:]}"

    def remember_name(self, player_id: Optional[int], name: Optional[str]):
        if player_id is None:
            return
        self.state.player_names[player_id] = name or f"Player_{str(player_id)[-4:]}"

    def available_actions(self) -> ActionState:
        state = self.state
        connected = self.is_connected()
        selected = next(
            (room for room in state.room_list if room.room_id == state.selected_room_id),
            None,
        )
        my_turn = connected and state.started and not self.is_game_over and self.is_my_turn
        return ActionState(
            can_play=my_turn,
            can_pass=my_turn,
            can_restart=self.is_game_over and connected and state.room_id is not None,
            can_create_room=connected,
            can_join=bool(
                connected and selected is not None and selected.can_join
                and state.selected_room_id != state.room_id
            ),
            can_refresh_rooms=connected,
            can_clear=bool(state.hand) and not self.is_game_over,
        )

    # Recommendations and selection

    def refresh_recommendations(self) -> List[Combo]:
        self.state.recommendations = recommend(
            self.state.hand,
            self.state.last_play,
            self.user_id,
            self.is_game_over,
            limit=self.max_recommendations,
        )
        return self.state.recommendations

    def select(self, codes: Iterable[str]):
        """Replace the selection with the given codes that are in hand."""
        hand = set(self.state.hand)
        self.state.selection = {code for code in codes if code in hand}

    def toggle(self, code: str):
        if code in self.state.selection:
            self.state.selection.discard(code)
        elif code in self.state.hand:
            self.state.selection.add(code)

    def apply_recommendation(self, index: int) -> bool:
        recs = self.state.recommendations
        if not 0 <= index < len(recs):
            return False
        self.select(recs[index].codes)
        return True

    def clear_selection(self):
        self.state.selection = set()

    def selected_cards(self) -> List[str]:
        return [code for code in self.state.hand if code in self.state.selection]

    # Event application

    def reset(self):
        """Forget the joined room; used on each fresh connection."""
        state = self.state
        state.room_id = None
        state.selected_room_id = None
        state.started = False
        state.interrupted = False
        state.player_count = 0
        state.players = []
        state.hand = []
        state.turn = None
        state.last_play = None
        state.terminal = None
        state.selection = set()
        state.recommendations = []

    def apply_welcome(self, user_id: int, user_name: Optional[str]):
        self.user_id = user_id
        self.remember_name(user_id, user_name)

    def apply_rooms_list(self, rooms: List[RoomSummaryData]):
        state = self.state
        state.room_list = [
            RoomSummary(
                room_id=room.room_id,
                player_count=room.player_count,
                started=room.started,
                can_join=room.can_join,
            )
            for room in rooms
        ]
        listed = {room.room_id for room in state.room_list}
        if state.selected_room_id and state.selected_room_id not in listed:
            state.selected_room_id = state.room_id
        if not state.selected_room_id and state.room_list:
            state.selected_room_id = state.room_list[0].room_id

    def select_room(self, room_id: Optional[str]):
        self.state.selected_room_id = room_id

    def apply_joined(self, joined: JoinedData):
        state = self.state
        state.room_id = joined.room_id
        state.selected_room_id = joined.room_id
        state.player_count = joined.player_count
        state.started = joined.started
        state.interrupted = False
        state.terminal = None
        self.remember_name(joined.you, joined.you_name)
        logger.info(f"Joined room {joined.room_id} ({joined.player_count}/{SEATS})")
        self.refresh_recommendations()

    def apply_snapshot(self, snapshot: RoomSnapshotData):
        """
        Replace the room with an authoritative snapshot.

        A terminal state recorded for this room is dropped when nobody in the
        snapshot has run out of cards: a new round is under way even though
        the restart notice was missed.
        """
        state = self.state
        if state.room_id is not None and snapshot.room_id != state.room_id:
            logger.info(f"Switching room {state.room_id} -> {snapshot.room_id} from snapshot")
            state.terminal = None
            state.selection = set()

        state.room_id = snapshot.room_id
        state.selected_room_id = snapshot.room_id
        state.players = [
            PlayerInfo(
                id=player.id,
                name=player.name,
                hand_count=player.hand_count,
                is_landlord=player.is_landlord,
            )
            for player in snapshot.players
        ]
        state.player_count = len(state.players)
        state.hand = canonical_order(dict.fromkeys(snapshot.your_hand))
        state.turn = snapshot.turn
        state.last_play = play_record_from_view(snapshot.last_play, snapshot.last_player)
        state.started = True
        state.interrupted = False
        state.selection &= set(state.hand)
        for player in state.players:
            self.remember_name(player.id, player.name)

        someone_out = any(player.hand_count == 0 for player in state.players)
        if not someone_out and state.terminal is not None and state.terminal.room_id == state.room_id:
            logger.info(f"Clearing stale game over for room {state.room_id}")
            state.terminal = None

        self.refresh_recommendations()

    def apply_terminal_event(self, room_id: Optional[str], winner_id: Optional[int]) -> bool:
        """Record the round winner. Returns False if the event was discarded."""
        state = self.state
        if not room_id or state.room_id is None or room_id != state.room_id or not state.started:
            logger.info(f"Ignoring game over for room {room_id or 'unknown-room'}")
            return False
        state.terminal = TerminalState(room_id=room_id, winner_id=winner_id)
        state.started = False
        logger.info(f"Game over in room {room_id}, winner {self.name_of(winner_id)}")
        self.refresh_recommendations()
        return True

    def _is_interrupted_state(self, player_count: int) -> bool:
        state = self.state
        return (
            state.interrupted
            and not state.started
            and state.player_count == player_count
            and state.turn is None
            and state.last_play is None
            and not state.hand
            and state.terminal is None
            and not state.selection
            and not state.recommendations
        )

    def apply_interruption(self, room_id: Optional[str], leaver_id: Optional[int], remaining_player_count: int) -> bool:
        """
        Clear the round after a player left. Returns False when discarded or
        when the room is already in the cleared state.
        """
        state = self.state
        if not room_id or state.room_id is None or room_id != state.room_id:
            logger.info(f"Ignoring interruption for room {room_id or 'unknown-room'}")
            return False
        if self._is_interrupted_state(remaining_player_count):
            logger.debug(f"Room {room_id} already interrupted")
            return False

        state.started = False
        state.interrupted = True
        state.player_count = remaining_player_count
        state.turn = None
        state.last_play = None
        state.hand = []
        state.terminal = None
        state.selection = set()
        state.recommendations = []
        logger.info(f"Player {self.name_of(leaver_id)} left room {room_id}, round ended")
        return True

    def apply_restart(self, room_id: Optional[str]) -> bool:
        """Clear the terminal state and selection so a new round can start."""
        state = self.state
        if not room_id or room_id != state.room_id:
            logger.info(f"Ignoring restart for room {room_id or 'unknown-room'}")
            return False
        state.terminal = None
        state.selection = set()
        logger.info(f"Room {room_id} restarted")
        self.refresh_recommendations()
        return True
