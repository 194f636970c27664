"""
Wire message models and parsing.

Messages are JSON objects tagged by "type", with the payload under "data".
Kinds without a payload omit "data".
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

import orjson
from pydantic import BaseModel, Field, ValidationError, field_validator

from .cards import rank_value
from .constants import ALL_KINDS
from .errors import MALFORMED_MESSAGE, UNKNOWN_MESSAGE, raise_error


class ServerMessageType(str, Enum):
    """Inbound message types."""
    WELCOME = "Welcome"
    ROOMS_LIST = "RoomsList"
    ROOM_CREATED = "RoomCreated"
    JOINED = "Joined"
    ROOM_STATE = "RoomState"
    PLAY_REJECTED = "PlayRejected"
    GAME_OVER = "GameOver"
    ROOM_INTERRUPTED = "RoomInterrupted"
    GAME_RESTARTED = "GameRestarted"
    ERROR = "Error"
    PONG = "Pong"


class ClientMessageType(str, Enum):
    """Outbound message types."""
    LIST_ROOMS = "ListRooms"
    CREATE_ROOM = "CreateRoom"
    JOIN_ROOM = "JoinRoom"
    PLAY = "Play"
    PASS = "Pass"
    RESTART_GAME = "RestartGame"
    PING = "Ping"


# Inbound payloads
class WelcomeData(BaseModel):
    user_id: int
    user_name: str = ""


class RoomSummaryData(BaseModel):
    room_id: str
    player_count: int = 0
    started: bool = False
    can_join: bool = False


class RoomsListData(BaseModel):
    rooms: List[RoomSummaryData] = Field(default_factory=list)


class RoomCreatedData(BaseModel):
    room_id: str


class JoinedData(BaseModel):
    room_id: str
    you: int
    you_name: str = ""
    player_count: int = 0
    started: bool = False


class PlayerInfoData(BaseModel):
    id: int
    name: str = ""
    hand_count: int = 0
    is_landlord: bool = False


class PlayViewData(BaseModel):
    """The last accepted play as the server describes it."""
    kind: str
    main_rank: Union[str, int]
    size: int = 0

    @field_validator('kind')
    @classmethod
    def validate_kind(cls, v):
        if v not in ALL_KINDS:
            raise ValueError(f'Unknown play kind: {v}')
        return v

    @field_validator('main_rank')
    @classmethod
    def validate_main_rank(cls, v):
        if rank_value(v) is None:
            raise ValueError(f'Unknown rank: {v}')
        return v


class RoomSnapshotData(BaseModel):
    room_id: str
    players: List[PlayerInfoData] = Field(default_factory=list)
    turn: Optional[int] = None
    last_player: Optional[int] = None
    last_play: Optional[PlayViewData] = None
    your_hand: List[str] = Field(default_factory=list)


class PlayRejectedData(BaseModel):
    reason: str = ""


class GameOverData(BaseModel):
    room_id: str
    winner_id: Optional[int] = None


class RoomInterruptedData(BaseModel):
    room_id: str
    leaver_id: Optional[int] = None
    player_count: int = 0


class GameRestartedData(BaseModel):
    room_id: str


class ErrorData(BaseModel):
    message: str = ""


# Inbound envelopes
class ServerMessage(BaseModel):
    """Base inbound message."""
    type: ServerMessageType


class WelcomeMessage(ServerMessage):
    type: ServerMessageType = ServerMessageType.WELCOME
    data: WelcomeData


class RoomsListMessage(ServerMessage):
    type: ServerMessageType = ServerMessageType.ROOMS_LIST
    data: RoomsListData


class RoomCreatedMessage(ServerMessage):
    type: ServerMessageType = ServerMessageType.ROOM_CREATED
    data: RoomCreatedData


class JoinedMessage(ServerMessage):
    type: ServerMessageType = ServerMessageType.JOINED
    data: JoinedData


class RoomStateMessage(ServerMessage):
    type: ServerMessageType = ServerMessageType.ROOM_STATE
    data: RoomSnapshotData


class PlayRejectedMessage(ServerMessage):
    type: ServerMessageType = ServerMessageType.PLAY_REJECTED
    data: PlayRejectedData


class GameOverMessage(ServerMessage):
    type: ServerMessageType = ServerMessageType.GAME_OVER
    data: GameOverData


class RoomInterruptedMessage(ServerMessage):
    type: ServerMessageType = ServerMessageType.ROOM_INTERRUPTED
    data: RoomInterruptedData


class GameRestartedMessage(ServerMessage):
    type: ServerMessageType = ServerMessageType.GAME_RESTARTED
    data: GameRestartedData


class ErrorMessage(ServerMessage):
    type: ServerMessageType = ServerMessageType.ERROR
    data: ErrorData


class PongMessage(ServerMessage):
    type: ServerMessageType = ServerMessageType.PONG


SERVER_MESSAGE_MAP = {
    ServerMessageType.WELCOME: WelcomeMessage,
    ServerMessageType.ROOMS_LIST: RoomsListMessage,
    ServerMessageType.ROOM_CREATED: RoomCreatedMessage,
    ServerMessageType.JOINED: JoinedMessage,
    ServerMessageType.ROOM_STATE: RoomStateMessage,
    ServerMessageType.PLAY_REJECTED: PlayRejectedMessage,
    ServerMessageType.GAME_OVER: GameOverMessage,
    ServerMessageType.ROOM_INTERRUPTED: RoomInterruptedMessage,
    ServerMessageType.GAME_RESTARTED: GameRestartedMessage,
    ServerMessageType.ERROR: ErrorMessage,
    ServerMessageType.PONG: PongMessage,
}


def parse_server_message(raw: Union[str, bytes, Dict[str, Any]]) -> ServerMessage:
    """
    Parse a raw frame into the matching message model.

    Args:
        raw: Text/bytes frame from the socket, or an already decoded dict

    Returns:
        Parsed message model

    Raises:
        ClientError: MALFORMED_MESSAGE if the frame cannot be decoded or
            validated, UNKNOWN_MESSAGE if the type is not recognised
    """
    if isinstance(raw, (str, bytes, bytearray)):
        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            raise_error(MALFORMED_MESSAGE, f"Undecodable frame: {e}")
    else:
        data = raw

    if not isinstance(data, dict):
        raise_error(MALFORMED_MESSAGE, "Message is not an object")

    message_type = data.get("type")
    if not message_type:
        raise_error(MALFORMED_MESSAGE, "Missing message type")

    try:
        message_type = ServerMessageType(message_type)
    except ValueError:
        raise_error(UNKNOWN_MESSAGE, f"Unknown message type: {message_type}")

    message_class = SERVER_MESSAGE_MAP[message_type]
    try:
        return message_class.model_validate(data)
    except ValidationError as e:
        raise_error(MALFORMED_MESSAGE, f"Invalid {message_type.value} data: {e}")


# Outbound commands
class ClientMessage(BaseModel):
    """Outbound command."""
    type: ClientMessageType
    data: Optional[Dict[str, Any]] = None

    def to_wire(self) -> bytes:
        return orjson.dumps(self.model_dump(mode="json", exclude_none=True))


def list_rooms() -> ClientMessage:
    return ClientMessage(type=ClientMessageType.LIST_ROOMS)


def create_room() -> ClientMessage:
    return ClientMessage(type=ClientMessageType.CREATE_ROOM)


def join_room(room_id: str) -> ClientMessage:
    return ClientMessage(type=ClientMessageType.JOIN_ROOM, data={"room_id": room_id})


def play(cards: List[str]) -> ClientMessage:
    return ClientMessage(type=ClientMessageType.PLAY, data={"cards": list(cards)})


def pass_turn() -> ClientMessage:
    return ClientMessage(type=ClientMessageType.PASS)


def restart_game() -> ClientMessage:
    return ClientMessage(type=ClientMessageType.RESTART_GAME)


def ping() -> ClientMessage:
    return ClientMessage(type=ClientMessageType.PING)
