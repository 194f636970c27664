"""
Combo classification and comparison.
"""

from collections import Counter
from typing import Dict, Iterable, List, Optional

from .cards import try_parse_card
from .constants import (
    CHAIN_MAX_RANK, CHAIN_MIN_RANK, CHAIN_WIDTH, KIND_AIRPLANE, KIND_BOMB,
    KIND_DOUBLE_STRAIGHT, KIND_FOUR_TWO_PAIR, KIND_FOUR_TWO_SINGLE, KIND_PAIR,
    KIND_ROCKET, KIND_SINGLE, KIND_STRAIGHT, KIND_TRIPLE, KIND_TRIPLE_PAIR,
    KIND_TRIPLE_SINGLE, RANK_BLACK_JOKER, RANK_RED_JOKER,
)
from .models import Combo


def group_by_rank(codes: Iterable[str]) -> Dict[int, List[str]]:
    """
    Group card codes by rank value, dropping codes that do not parse.

    Codes keep their input order inside each group. A repeated code counts
    once.
    """
    groups: Dict[int, List[str]] = {}
    for code in dict.fromkeys(codes):
        card = try_parse_card(code)
        if card is None:
            continue
        groups.setdefault(card.rank, []).append(card.code)
    return groups


def is_chain_rank(rank: int) -> bool:
    """Check if a rank can take part in a straight, double straight or airplane."""
    return CHAIN_MIN_RANK <= rank <= CHAIN_MAX_RANK


def is_consecutive(ranks: List[int]) -> bool:
    return all(b == a + 1 for a, b in zip(ranks, ranks[1:]))


def windows(ranks: List[int], size: int) -> List[List[int]]:
    """Every run of `size` consecutive values in a sorted rank list."""
    if size <= 0:
        return []
    result = []
    for i in range(len(ranks) - size + 1):
        window = ranks[i:i + size]
        if is_consecutive(window):
            result.append(window)
    return result


def classify_play(codes: List[str]) -> Optional[Combo]:
    """
    Classify a selection of cards into a combo.

    Args:
        codes: Card codes being played

    Returns:
        The combo, or None if the cards do not form a legal play
    """
    if not codes:
        return None

    cards = [try_parse_card(code) for code in codes]
    if any(card is None for card in cards) or len(set(codes)) != len(codes):
        return None

    ranks = sorted(card.rank for card in cards)
    counts = Counter(ranks)
    unique = len(counts)
    length = len(codes)
    as_tuple = tuple(codes)

    if length == 2 and RANK_BLACK_JOKER in counts and RANK_RED_JOKER in counts:
        return Combo(KIND_ROCKET, RANK_RED_JOKER, 2, as_tuple)

    if length == 4 and unique == 1:
        return Combo(KIND_BOMB, ranks[0], 4, as_tuple)

    if length == 1:
        return Combo(KIND_SINGLE, ranks[0], 1, as_tuple)

    if length == 2 and unique == 1:
        return Combo(KIND_PAIR, ranks[0], 2, as_tuple)

    if length == 3 and unique == 1:
        return Combo(KIND_TRIPLE, ranks[0], 3, as_tuple)

    triple_rank = _rank_with_count(counts, 3)
    if length == 4 and unique == 2 and triple_rank is not None:
        return Combo(KIND_TRIPLE_SINGLE, triple_rank, 4, as_tuple)

    if length == 5 and unique == 2 and triple_rank is not None:
        return Combo(KIND_TRIPLE_PAIR, triple_rank, 5, as_tuple)

    four_rank = _rank_with_count(counts, 4)
    if length == 6 and unique == 3 and four_rank is not None:
        return Combo(KIND_FOUR_TWO_SINGLE, four_rank, 6, as_tuple)

    if length == 8 and unique == 3 and four_rank is not None:
        pair_count = sum(1 for count in counts.values() if count == 2)
        if pair_count == 2:
            return Combo(KIND_FOUR_TWO_PAIR, four_rank, 8, as_tuple)

    distinct = sorted(counts)
    chain_ok = all(is_chain_rank(rank) for rank in distinct) and is_consecutive(distinct)

    if chain_ok and all(count == 1 for count in counts.values()) and length >= 5:
        return Combo(KIND_STRAIGHT, distinct[-1], length, as_tuple)

    if chain_ok and all(count == 2 for count in counts.values()) and length >= 6:
        return Combo(KIND_DOUBLE_STRAIGHT, distinct[-1], len(distinct), as_tuple)

    if chain_ok and all(count == 3 for count in counts.values()) and length >= 6:
        return Combo(KIND_AIRPLANE, distinct[-1], len(distinct), as_tuple)

    return None


def _rank_with_count(counts: Counter, wanted: int) -> Optional[int]:
    for rank in sorted(counts):
        if counts[rank] == wanted:
            return rank
    return None


def beat(prev: Optional[Combo], candidate: Optional[Combo]) -> bool:
    """
    Check if `candidate` legally beats `prev`.

    The rocket beats anything but itself; a bomb beats any ordinary kind;
    otherwise kinds must match, chains must match in size, and the main rank
    must be strictly higher.
    """
    if prev is None or candidate is None:
        return False
    if prev.kind == KIND_ROCKET:
        return False
    if candidate.kind == KIND_ROCKET:
        return True
    if candidate.kind == KIND_BOMB and prev.kind != KIND_BOMB:
        return True
    if prev.kind == KIND_BOMB and candidate.kind != KIND_BOMB:
        return False
    if prev.kind != candidate.kind:
        return False
    if prev.kind == KIND_BOMB:
        return candidate.main_rank > prev.main_rank
    return prev.size == candidate.size and candidate.main_rank > prev.main_rank


def chain_width(kind: str) -> int:
    """Cards per rank for a chain kind, 0 for other kinds."""
    return CHAIN_WIDTH.get(kind, 0)
