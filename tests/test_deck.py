"""Tests for cards, the 52-card deck and CardPile."""
import random

import pytest

from cribbage.deck import (
    DECK_SIZE,
    Card,
    CardPile,
    Rank,
    Suit,
    make_deck_52,
    parse_cards,
    random_card,
)


def test_deck_52_distinct():
    deck = make_deck_52()
    assert len(deck) == DECK_SIZE
    assert len(set(deck)) == DECK_SIZE
    assert sorted(c.card_id for c in deck) == list(range(1, 53))


def test_card_values():
    assert Card(Rank.ACE, Suit.CLUB).value == 1
    assert Card(Rank.TEN, Suit.CLUB).value == 10
    assert Card(Rank.KING, Suit.CLUB).value == 10
    assert Card(Rank.KING, Suit.CLUB).rank_value == 13
    assert Card(Rank.JACK, Suit.HEART).is_jack()
    assert not Card(Rank.QUEEN, Suit.HEART).is_jack()


def test_card_accepts_ints_and_orders_by_rank_then_suit():
    assert Card(5, 2) == Card(Rank.FIVE, Suit.HEART)
    assert Card(Rank.TWO, Suit.SPADE) < Card(Rank.THREE, Suit.CLUB)
    assert Card(Rank.FIVE, Suit.CLUB) < Card(Rank.FIVE, Suit.SPADE)


def test_card_parse():
    assert Card.parse("5H") == Card(Rank.FIVE, Suit.HEART)
    assert Card.parse("10s") == Card(Rank.TEN, Suit.SPADE)
    assert Card.parse("TS") == Card(Rank.TEN, Suit.SPADE)
    assert Card.parse("JD") == Card(Rank.JACK, Suit.DIAMOND)
    assert Card.parse("A♣") == Card(Rank.ACE, Suit.CLUB)
    assert parse_cards(["KC", "QD"]) == [Card(Rank.KING, Suit.CLUB), Card(Rank.QUEEN, Suit.DIAMOND)]
    for bad in ["", "5", "1H", "5X", "14S"]:
        with pytest.raises(ValueError):
            Card.parse(bad)


def test_card_str_round_trips_through_parse():
    for card in make_deck_52():
        assert Card.parse(str(card)) == card


def test_random_card_is_reproducible():
    a = [random_card(random.Random(3)) for _ in range(3)]
    b = [random_card(random.Random(3)) for _ in range(3)]
    assert a == b


def test_pile_add_remove_semantics():
    pile = CardPile()
    c = Card.parse("5H")
    assert pile.is_empty()
    assert pile.add(c) is True
    assert pile.add(c) is False
    assert len(pile) == 1
    assert c in pile
    assert pile.remove(c) is True
    assert pile.remove(c) is False
    assert pile.is_empty()


def test_pile_draw_and_retain():
    pile = CardPile(parse_cards(["AC", "2C", "3C", "4C"]))
    assert pile.draw() == Card.parse("AC")
    assert pile.draw(2) == Card.parse("4C")
    with pytest.raises(IndexError):
        pile.draw(5)
    pile.retain([Card.parse("3C")])
    assert pile.cards() == [Card.parse("3C")]
    pile.clear()
    with pytest.raises(IndexError):
        pile.draw()


def test_pile_shuffle_sort_and_equality():
    pile = CardPile.full_deck()
    pile.shuffle(random.Random(1))
    assert pile != CardPile(parse_cards(["AC"]))
    assert pile == CardPile.full_deck()
    pile.sort()
    assert pile.cards() == sorted(make_deck_52())


def test_pile_copy_is_independent():
    pile = CardPile(parse_cards(["AC", "2C"]))
    other = pile.copy()
    other.remove(Card.parse("AC"))
    assert len(pile) == 2
    assert len(other) == 1


def test_pile_draw_random():
    rng = random.Random(0)
    pile = CardPile.full_deck()
    seen = {pile.draw_random(rng) for _ in range(10)}
    assert len(seen) == 10
    assert len(pile) == DECK_SIZE - 10
    assert not seen & set(pile)
