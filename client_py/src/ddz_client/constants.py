"""Game constants and card tables"""

from typing import Dict, List

SUITS = ['S', 'H', 'D', 'C']
JOKER_SUIT = 'J'

BLACK_JOKER = 'BJ'
RED_JOKER = 'RJ'

# Rank values; "2" sits above the ace with a gap so it never chains
RANK_TWO = 16
RANK_BLACK_JOKER = 17
RANK_RED_JOKER = 18
CHAIN_MIN_RANK = 3
CHAIN_MAX_RANK = 14

NORMAL_ORDER = ['3', '4', '5', '6', '7', '8', '9', '10', 'J', 'Q', 'K', 'A', '2']

RANK_VALUE: Dict[str, int] = {
    "3": 3,
    "4": 4,
    "5": 5,
    "6": 6,
    "7": 7,
    "8": 8,
    "9": 9,
    "10": 10,
    "J": 11,
    "Q": 12,
    "K": 13,
    "A": 14,
    "2": RANK_TWO,
    "BJ": RANK_BLACK_JOKER,
    "RJ": RANK_RED_JOKER,
    # Long names used by the server for main_rank
    "Three": 3,
    "Four": 4,
    "Five": 5,
    "Six": 6,
    "Seven": 7,
    "Eight": 8,
    "Nine": 9,
    "Ten": 10,
    "Jack": 11,
    "Queen": 12,
    "King": 13,
    "Ace": 14,
    "Two": RANK_TWO,
    "BlackJoker": RANK_BLACK_JOKER,
    "RedJoker": RANK_RED_JOKER,
}

RANK_LABEL: Dict[int, str] = {
    3: "3",
    4: "4",
    5: "5",
    6: "6",
    7: "7",
    8: "8",
    9: "9",
    10: "10",
    11: "J",
    12: "Q",
    13: "K",
    14: "A",
    RANK_TWO: "2",
    RANK_BLACK_JOKER: "BJ",
    RANK_RED_JOKER: "RJ",
}

# Display tie-break only, higher sorts first
SUIT_ORDER: Dict[str, int] = {
    'C': 1,
    'D': 2,
    'H': 3,
    'S': 4,
    'J': 5,
}

# Combo kinds, spelled as the server spells them
KIND_SINGLE = "Single"
KIND_PAIR = "Pair"
KIND_TRIPLE = "Triple"
KIND_TRIPLE_SINGLE = "TripleSingle"
KIND_TRIPLE_PAIR = "TriplePair"
KIND_STRAIGHT = "Straight"
KIND_DOUBLE_STRAIGHT = "DoubleStraight"
KIND_AIRPLANE = "Airplane"
KIND_FOUR_TWO_SINGLE = "FourTwoSingle"
KIND_FOUR_TWO_PAIR = "FourTwoPair"
KIND_BOMB = "Bomb"
KIND_ROCKET = "Rocket"

ALL_KINDS: List[str] = [
    KIND_SINGLE, KIND_PAIR, KIND_TRIPLE, KIND_TRIPLE_SINGLE, KIND_TRIPLE_PAIR,
    KIND_STRAIGHT, KIND_DOUBLE_STRAIGHT, KIND_AIRPLANE,
    KIND_FOUR_TWO_SINGLE, KIND_FOUR_TWO_PAIR, KIND_BOMB, KIND_ROCKET,
]

# Cards per rank for each chain kind
CHAIN_WIDTH: Dict[str, int] = {
    KIND_STRAIGHT: 1,
    KIND_DOUBLE_STRAIGHT: 2,
    KIND_AIRPLANE: 3,
}

KIND_LABEL: Dict[str, str] = {
    KIND_SINGLE: "single",
    KIND_PAIR: "pair",
    KIND_TRIPLE: "triple",
    KIND_TRIPLE_SINGLE: "triple with single",
    KIND_TRIPLE_PAIR: "triple with pair",
    KIND_STRAIGHT: "straight",
    KIND_DOUBLE_STRAIGHT: "double straight",
    KIND_AIRPLANE: "airplane",
    KIND_FOUR_TWO_SINGLE: "four with two singles",
    KIND_FOUR_TWO_PAIR: "four with two pairs",
    KIND_BOMB: "bomb",
    KIND_ROCKET: "rocket",
}

SEATS = 3
MAX_RECOMMEND = 5

# Room phases (local view)
PHASE_IDLE = 'idle'
PHASE_STARTED = 'started'
PHASE_TERMINAL = 'terminal'
PHASE_INTERRUPTED = 'interrupted'

# Notification names emitted by the client
NOTIFY_STATUS = 'status'
NOTIFY_WELCOME = 'welcome'
NOTIFY_ROOMS = 'rooms'
NOTIFY_ROOM = 'room'
NOTIFY_GAME_OVER = 'game_over'
NOTIFY_INTERRUPTED = 'interrupted'
NOTIFY_RESTARTED = 'restarted'
NOTIFY_RECOMMENDATIONS = 'recommendations'
NOTIFY_SELECTION = 'selection'
NOTIFY_LOG = 'log'
