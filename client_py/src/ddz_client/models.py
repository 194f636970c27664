"""Client models and data structures"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple


@dataclass(frozen=True)
class Card:
    code: str
    suit: str  # S|H|D|C, or J for jokers
    rank: int

    @property
    def is_joker(self) -> bool:
        return self.suit == 'J'


@dataclass(frozen=True)
class Combo:
    kind: str
    main_rank: int
    size: int
    codes: Tuple[str, ...] = ()

    def key(self) -> Tuple[str, ...]:
        """Identity of the combo by its exact card set."""
        return tuple(sorted(self.codes))


@dataclass(frozen=True)
class PlayRecord:
    combo: Combo
    player_id: Optional[int] = None


@dataclass
class PlayerInfo:
    id: int
    name: str
    hand_count: int = 0
    is_landlord: bool = False


@dataclass
class RoomSummary:
    room_id: str
    player_count: int = 0
    started: bool = False
    can_join: bool = False


@dataclass
class TerminalState:
    room_id: str
    winner_id: Optional[int] = None


@dataclass
class RoomState:
    room_id: Optional[str] = None
    selected_room_id: Optional[str] = None
    started: bool = False
    interrupted: bool = False
    player_count: int = 0
    players: List[PlayerInfo] = field(default_factory=list)
    hand: List[str] = field(default_factory=list)  # card codes, canonical order
    turn: Optional[int] = None
    last_play: Optional[PlayRecord] = None
    terminal: Optional[TerminalState] = None
    selection: Set[str] = field(default_factory=set)
    recommendations: List[Combo] = field(default_factory=list)
    room_list: List[RoomSummary] = field(default_factory=list)
    player_names: Dict[int, str] = field(default_factory=dict)


class ConnectionStatus(str, Enum):
    """Connection lifecycle states."""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


@dataclass
class ActionState:
    can_play: bool = False
    can_pass: bool = False
    can_restart: bool = False
    can_create_room: bool = False
    can_join: bool = False
    can_refresh_rooms: bool = False
    can_clear: bool = False
