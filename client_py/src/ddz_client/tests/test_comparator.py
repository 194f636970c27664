"""
Combo classification and beat rules.
"""

import pytest

from ddz_client.comparator import beat, classify_play, windows
from ddz_client.models import Combo


def combo(kind, rank, size):
    return Combo(kind, rank, size)


@pytest.mark.parametrize("codes,kind,main_rank,size", [
    (["S3"], "Single", 3, 1),
    (["S5", "H5"], "Pair", 5, 2),
    (["S9", "H9", "D9"], "Triple", 9, 3),
    (["S9", "H9", "D9", "C4"], "TripleSingle", 9, 4),
    (["S9", "H9", "D9", "C4", "D4"], "TriplePair", 9, 5),
    (["SK", "HK", "DK", "CK"], "Bomb", 13, 4),
    (["BJ", "RJ"], "Rocket", 18, 2),
    (["S3", "H4", "D5", "C6", "S7"], "Straight", 7, 5),
    (["S3", "H3", "D4", "C4", "S5", "H5"], "DoubleStraight", 5, 3),
    (["S3", "H3", "D3", "C4", "S4", "H4"], "Airplane", 4, 2),
    (["S8", "H8", "D8", "C8", "S3", "H5"], "FourTwoSingle", 8, 6),
    (["S8", "H8", "D8", "C8", "S3", "H3", "D5", "C5"], "FourTwoPair", 8, 8),
])
def test_classify_play(codes, kind, main_rank, size):
    """Test classification of each combo kind."""
    result = classify_play(codes)
    assert result is not None
    assert (result.kind, result.main_rank, result.size) == (kind, main_rank, size)


@pytest.mark.parametrize("codes", [
    [],
    ["S3", "H4"],
    ["SJ", "SQ", "SK", "SA", "S2"],  # 2 never chains
    ["S3", "H4", "D5", "C6"],  # too short
    ["S3", "XX"],
    ["S3", "S3"],
])
def test_classify_rejects(codes):
    """Selections that are not a combo classify as None."""
    assert classify_play(codes) is None


def test_rocket_beats_everything_but_rocket():
    """The rocket beats every other play."""
    rocket = combo("Rocket", 18, 2)
    for prev in [combo("Single", 16, 1), combo("Bomb", 14, 4), combo("Straight", 14, 8)]:
        assert beat(prev, rocket)
    assert not beat(rocket, rocket)
    assert not beat(rocket, combo("Bomb", 16, 4))


def test_bomb_beats_ordinary_kinds():
    """A bomb beats any ordinary kind."""
    bomb = combo("Bomb", 3, 4)
    assert beat(combo("Pair", 16, 2), bomb)
    assert beat(combo("Airplane", 14, 3), bomb)
    assert not beat(combo("Rocket", 18, 2), bomb)


def test_bomb_against_bomb_by_rank():
    """Bombs compare by rank."""
    assert beat(combo("Bomb", 5, 4), combo("Bomb", 9, 4))
    assert not beat(combo("Bomb", 9, 4), combo("Bomb", 5, 4))


def test_ordinary_plays_never_beat_bombs():
    """Ordinary plays never beat a bomb."""
    assert not beat(combo("Bomb", 3, 4), combo("Single", 18, 1))


def test_same_kind_needs_higher_rank_and_equal_size():
    """Same kind needs a higher rank and the same size."""
    assert beat(combo("Single", 10, 1), combo("Single", 11, 1))
    assert not beat(combo("Single", 10, 1), combo("Single", 10, 1))
    assert beat(combo("Straight", 7, 5), combo("Straight", 8, 5))
    assert not beat(combo("Straight", 7, 5), combo("Straight", 9, 6))


def test_different_ordinary_kinds_never_beat():
    """Different ordinary kinds don't compare."""
    assert not beat(combo("Single", 3, 1), combo("Pair", 14, 2))
    assert not beat(combo("TripleSingle", 3, 4), combo("Triple", 14, 3))


def test_missing_operands():
    """Missing plays never beat."""
    assert not beat(None, combo("Single", 3, 1))
    assert not beat(combo("Single", 3, 1), None)


def test_windows():
    """Test consecutive rank windows."""
    assert windows([3, 4, 5, 7, 8, 9, 10], 3) == [[3, 4, 5], [7, 8, 9], [8, 9, 10]]
    assert windows([3, 4], 3) == []
    assert windows([3, 4], 0) == []
