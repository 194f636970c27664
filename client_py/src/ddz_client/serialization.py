"""
Plain-dict views of client state for presentation subscribers.
"""

from typing import Any, Dict, List, Optional

from .cards import rank_label
from .constants import KIND_LABEL
from .models import Combo, PlayRecord
from .reconciler import RoomStateReconciler


def format_play(record: Optional[PlayRecord]) -> str:
    """Human readable description of a last play."""
    if record is None:
        return "no play yet"
    combo = record.combo
    kind = KIND_LABEL.get(combo.kind, combo.kind)
    size = f" x{combo.size}" if combo.size else ""
    return f"{kind} {rank_label(combo.main_rank)}{size}"


def recommendation_label(combo: Combo) -> str:
    kind = KIND_LABEL.get(combo.kind, combo.kind)
    return f"{kind}({rank_label(combo.main_rank)}) {' '.join(combo.codes)}"


def serialize_combo(combo: Combo) -> Dict[str, Any]:
    return {
        "kind": combo.kind,
        "main_rank": combo.main_rank,
        "size": combo.size,
        "cards": list(combo.codes),
        "label": recommendation_label(combo),
    }


def room_view(room: RoomStateReconciler) -> Dict[str, Any]:
    """
    Snapshot of the local room for rendering.

    Args:
        room: Reconciler whose state is being viewed

    Returns:
        JSON-safe dictionary; mutating it has no effect on client state
    """
    state = room.state
    last_player = state.last_play.player_id if state.last_play else None
    actions = room.available_actions()
    players: List[Dict[str, Any]] = [
        {
            "id": player.id,
            "name": room.name_of(player.id),
            "hand_count": player.hand_count,
            "is_landlord": player.is_landlord,
            "is_turn": player.id == state.turn,
            "is_you": player.id == room.user_id,
        }
        for player in state.players
    ]
    return {
        "room_id": state.room_id,
        "selected_room_id": state.selected_room_id,
        "phase": room.phase,
        "player_count": state.player_count,
        "players": players,
        "hand": list(state.hand),
        "selection": room.selected_cards(),
        "turn": state.turn,
        "your_turn": room.is_my_turn,
        "last_play": format_play(state.last_play),
        "last_player": room.name_of(last_player) if last_player is not None else None,
        "winner": room.name_of(state.terminal.winner_id) if room.is_game_over else None,
        "recommendations": [serialize_combo(combo) for combo in state.recommendations],
        "actions": {
            "play": actions.can_play,
            "pass": actions.can_pass,
            "restart": actions.can_restart,
            "create_room": actions.can_create_room,
            "join": actions.can_join,
            "refresh_rooms": actions.can_refresh_rooms,
            "clear": actions.can_clear,
        },
    }
