"""
Card code parsing and canonical ordering.
"""

from typing import Iterable, List, Optional

from .constants import (
    BLACK_JOKER, JOKER_SUIT, NORMAL_ORDER, RANK_BLACK_JOKER, RANK_LABEL,
    RANK_RED_JOKER, RANK_VALUE, RED_JOKER, SUIT_ORDER, SUITS,
)
from .errors import INVALID_CARD, ClientError, raise_error
from .models import Card


def create_deck() -> List[str]:
    """Full 54-card deck as codes."""
    deck = []
    for suit in SUITS:
        for rank in NORMAL_ORDER:
            deck.append(f"{suit}{rank}")
    deck.extend([BLACK_JOKER, RED_JOKER])
    return deck


def parse_card(code: str) -> Card:
    """
    Parse a card code such as "S3", "H10", "DA" or "BJ".

    Raises:
        ClientError: If the suit or rank token is unknown
    """
    if code == BLACK_JOKER:
        return Card(code=code, suit=JOKER_SUIT, rank=RANK_BLACK_JOKER)
    if code == RED_JOKER:
        return Card(code=code, suit=JOKER_SUIT, rank=RANK_RED_JOKER)

    if not isinstance(code, str) or len(code) < 2:
        raise_error(INVALID_CARD, f"Invalid card code: {code!r}")

    suit, rank_token = code[0], code[1:]
    if suit not in SUITS or rank_token not in NORMAL_ORDER:
        raise_error(INVALID_CARD, f"Invalid card code: {code!r}")

    return Card(code=code, suit=suit, rank=RANK_VALUE[rank_token])


def try_parse_card(code: str) -> Optional[Card]:
    """Parse a card code, returning None instead of raising."""
    try:
        return parse_card(code)
    except ClientError:
        return None


def rank_value(token) -> Optional[int]:
    """Get the rank value for a short ("A") or long ("Ace") token."""
    if token is None:
        return None
    if isinstance(token, int):
        return token if token in RANK_LABEL else None
    return RANK_VALUE.get(str(token))


def rank_label(value: int) -> str:
    return RANK_LABEL.get(value, str(value))


def _sort_key(code: str):
    card = try_parse_card(code)
    if card is None:
        # Unknown codes sink to the end, ordered by text
        return (1, 0, 0, code)
    return (0, -card.rank, -SUIT_ORDER[card.suit], code)


def canonical_order(codes: Iterable[str]) -> List[str]:
    """
    Sort card codes for display: highest rank first, then S, H, D, C.

    Ordering never affects legality.
    """
    return sorted(codes, key=_sort_key)
