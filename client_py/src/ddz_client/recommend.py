"""
Move recommendations: which combos in a hand can answer the last play.
"""

import logging
from typing import Dict, List, Optional, Sequence

from .comparator import beat, chain_width, group_by_rank, is_chain_rank, windows
from .constants import (
    CHAIN_WIDTH, KIND_BOMB, KIND_FOUR_TWO_PAIR, KIND_FOUR_TWO_SINGLE, KIND_PAIR,
    KIND_ROCKET, KIND_SINGLE, KIND_TRIPLE, KIND_TRIPLE_PAIR, KIND_TRIPLE_SINGLE,
    MAX_RECOMMEND, RANK_BLACK_JOKER, RANK_RED_JOKER,
)
from .models import Combo, PlayRecord

logger = logging.getLogger(__name__)


class CandidatePool:
    """Ordered, deduplicated collection of candidate combos."""

    def __init__(self):
        self._combos: List[Combo] = []
        self._seen = set()

    def add(self, combo: Optional[Combo]) -> None:
        if combo is None or not combo.codes:
            return
        key = combo.key()
        if key in self._seen:
            return
        self._seen.add(key)
        self._combos.append(combo)

    def extend(self, combos: Sequence[Combo]) -> None:
        for combo in combos:
            self.add(combo)

    def __iter__(self):
        return iter(self._combos)

    def __len__(self):
        return len(self._combos)


class HandIndex:
    """A hand grouped by rank, with generators for each combo kind."""

    def __init__(self, hand: Sequence[str]):
        self.groups: Dict[int, List[str]] = group_by_rank(hand)
        self.ranks: List[int] = sorted(self.groups)

    def _of_size(self, kind: str, width: int, exact: bool = False) -> List[Combo]:
        combos = []
        for rank in self.ranks:
            group = self.groups[rank]
            matches = len(group) == width if exact else len(group) >= width
            if matches:
                combos.append(Combo(kind, rank, width, tuple(group[:width])))
        return combos

    def singles(self) -> List[Combo]:
        return self._of_size(KIND_SINGLE, 1)

    def pairs(self) -> List[Combo]:
        return self._of_size(KIND_PAIR, 2)

    def triples(self) -> List[Combo]:
        return self._of_size(KIND_TRIPLE, 3)

    def bombs(self) -> List[Combo]:
        return self._of_size(KIND_BOMB, 4, exact=True)

    def rocket(self) -> List[Combo]:
        if RANK_BLACK_JOKER in self.groups and RANK_RED_JOKER in self.groups:
            codes = (self.groups[RANK_BLACK_JOKER][0], self.groups[RANK_RED_JOKER][0])
            return [Combo(KIND_ROCKET, RANK_RED_JOKER, 2, codes)]
        return []

    def _kickers(self, exclude: int, width: int, count: int) -> Optional[List[str]]:
        """Lowest `count` groups of `width` cards from ranks other than `exclude`."""
        picked: List[str] = []
        used = 0
        for rank in self.ranks:
            if used == count:
                break
            if rank == exclude or len(self.groups[rank]) < width:
                continue
            picked.extend(self.groups[rank][:width])
            used += 1
        return picked if used == count else None

    def _with_attachments(self, kind: str, base: int, width: int, count: int) -> List[Combo]:
        combos = []
        for rank in self.ranks:
            group = self.groups[rank]
            if len(group) < base:
                continue
            kickers = self._kickers(rank, width, count)
            if kickers is None:
                continue
            codes = tuple(group[:base]) + tuple(kickers)
            combos.append(Combo(kind, rank, len(codes), codes))
        return combos

    def triple_singles(self) -> List[Combo]:
        return self._with_attachments(KIND_TRIPLE_SINGLE, 3, 1, 1)

    def triple_pairs(self) -> List[Combo]:
        return self._with_attachments(KIND_TRIPLE_PAIR, 3, 2, 1)

    def four_two_singles(self) -> List[Combo]:
        return self._with_attachments(KIND_FOUR_TWO_SINGLE, 4, 1, 2)

    def four_two_pairs(self) -> List[Combo]:
        return self._with_attachments(KIND_FOUR_TWO_PAIR, 4, 2, 2)

    def chains(self, kind: str, length: int) -> List[Combo]:
        """
        Every chain of `kind` spanning exactly `length` consecutive ranks.

        The main rank of each chain is its highest rank; size is the rank count.
        """
        width = chain_width(kind)
        if not width:
            return []
        eligible = [
            rank for rank in self.ranks
            if is_chain_rank(rank) and len(self.groups[rank]) >= width
        ]
        combos = []
        for window in windows(eligible, length):
            codes = []
            for rank in window:
                codes.extend(self.groups[rank][:width])
            combos.append(Combo(kind, window[-1], length, tuple(codes)))
        return combos

    def of_kind(self, kind: str, size: int) -> List[Combo]:
        """Candidates of the same kind as a previous play."""
        if kind in CHAIN_WIDTH:
            return self.chains(kind, size)
        generators = {
            KIND_SINGLE: self.singles,
            KIND_PAIR: self.pairs,
            KIND_TRIPLE: self.triples,
            KIND_TRIPLE_SINGLE: self.triple_singles,
            KIND_TRIPLE_PAIR: self.triple_pairs,
            KIND_FOUR_TWO_SINGLE: self.four_two_singles,
            KIND_FOUR_TWO_PAIR: self.four_two_pairs,
            KIND_BOMB: self.bombs,
            KIND_ROCKET: self.rocket,
        }
        generator = generators.get(kind)
        if generator is None:
            logger.debug(f"No candidate generator for kind {kind}")
            return []
        return generator()


def _priority(prev_kind: str, kind: str) -> int:
    if kind == prev_kind:
        return 0
    if kind == KIND_BOMB:
        return 1
    if kind == KIND_ROCKET:
        return 2
    return 3


def recommend(
    hand: Sequence[str],
    last_play: Optional[PlayRecord],
    self_id: Optional[int],
    is_game_over: bool = False,
    limit: int = MAX_RECOMMEND,
) -> List[Combo]:
    """
    Recommend plays from `hand` that answer `last_play`.

    Args:
        hand: Card codes held by the local player; invalid codes are ignored
        last_play: The last accepted play, or None when nothing is on the table
        self_id: Local player id; a last play by this player means we lead
        is_game_over: Whether the round has ended
        limit: Maximum number of recommendations

    Returns:
        Up to `limit` combos, deduplicated by card set, in a stable order
    """
    if is_game_over or not hand:
        return []

    index = HandIndex(hand)
    pool = CandidatePool()

    leading = last_play is None or (self_id is not None and last_play.player_id == self_id)
    if leading:
        pool.extend(index.singles())
        pool.extend(index.pairs())
        pool.extend(index.triples())
        return list(pool)[:limit]

    prev = last_play.combo
    pool.extend(index.of_kind(prev.kind, prev.size))
    if prev.kind != KIND_ROCKET:
        pool.extend(index.bombs())
        pool.extend(index.rocket())

    survivors = [combo for combo in pool if beat(prev, combo)]
    survivors.sort(key=lambda combo: (_priority(prev.kind, combo.kind), combo.main_rank))
    return survivors[:limit]
