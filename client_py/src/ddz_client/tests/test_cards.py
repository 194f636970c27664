"""
Card parsing and ordering tests.
"""

import pytest

from ddz_client.cards import (
    canonical_order, create_deck, parse_card, rank_label, rank_value, try_parse_card,
)
from ddz_client.errors import INVALID_CARD, ClientError


def test_parse_numeric_and_face_cards():
    """Suit comes first, then the rank token."""
    card = parse_card("H10")
    assert card.suit == "H"
    assert card.rank == 10
    assert not card.is_joker

    assert parse_card("SA").rank == 14
    assert parse_card("DJ").rank == 11
    assert parse_card("C3").rank == 3


def test_two_ranks_above_ace():
    assert parse_card("S2").rank > parse_card("SA").rank


def test_jokers():
    black = parse_card("BJ")
    red = parse_card("RJ")
    assert black.is_joker and red.is_joker
    assert red.rank > black.rank > parse_card("S2").rank


@pytest.mark.parametrize("code", ["", "X3", "S1", "S11", "H", "3S", "JOKER", "sA"])
def test_unknown_tokens_rejected(code):
    with pytest.raises(ClientError) as exc:
        parse_card(code)
    assert exc.value.code == INVALID_CARD
    assert try_parse_card(code) is None


def test_deck():
    deck = create_deck()
    assert len(deck) == 54
    assert len(set(deck)) == 54
    assert all(try_parse_card(code) is not None for code in deck)


def test_canonical_order_rank_then_suit():
    ordered = canonical_order(["C3", "S3", "RJ", "HA", "D3", "H3", "BJ", "C2"])
    assert ordered == ["RJ", "BJ", "C2", "HA", "S3", "H3", "D3", "C3"]


def test_canonical_order_puts_unknown_codes_last():
    assert canonical_order(["??", "S3", "AA"]) == ["S3", "??", "AA"]


def test_rank_value_tokens():
    assert rank_value("3") == 3
    assert rank_value("Three") == 3
    assert rank_value("A") == rank_value("Ace") == 14
    assert rank_value("Two") == 16
    assert rank_value("BlackJoker") == 17
    assert rank_value("RedJoker") == 18
    assert rank_value("Eleven") is None
    assert rank_value(None) is None
    assert rank_label(16) == "2"
    assert rank_label(11) == "J"
