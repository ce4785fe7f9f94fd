"""Expected-value discard selection."""
import pytest

from cribbage.deck import parse_cards
from cribbage.discard import (
    crib_flush_probability,
    evaluate_discards,
    expected_crib_value,
    expected_value,
    select_keep,
)
from cribbage.errors import InvalidArgumentError


def test_keeps_dominant_fives_and_jack():
    hand = parse_cards("5H 5D 5C JH 9S 4C".split())
    for is_dealer in (True, False):
        choice = select_keep(hand, is_dealer=is_dealer)
        assert set(choice.keep) == set(parse_cards("5H 5D 5C JH".split()))
        assert set(choice.discard) == set(parse_cards("9S 4C".split()))


def test_three_player_hand_discards_one():
    hand = parse_cards("5H 5D 5C JH KS".split())
    choice = select_keep(hand, is_dealer=False)
    assert len(choice.keep) == 4
    assert len(choice.discard) == 1
    assert set(choice.keep) | set(choice.discard) == set(hand)


def test_evaluate_discards_lists_every_keep_best_first():
    six = parse_cards("AC 3D 6H 8S 10C QD".split())
    choices = evaluate_discards(six, is_dealer=True)
    assert len(choices) == 15
    values = [ch.expected for ch in choices]
    assert values == sorted(values, reverse=True)
    assert choices[0].expected == select_keep(six, is_dealer=True).expected

    five = parse_cards("AC 3D 6H 8S 10C".split())
    assert len(evaluate_discards(five, is_dealer=False)) == 5


def test_dealer_values_crib_positively():
    hand = parse_cards("5H 5D 9S 4C 2H KS".split())
    keep = parse_cards("9S 4C 2H KS".split())
    assert expected_value(keep, hand, is_dealer=True) > expected_value(keep, hand, is_dealer=False)


def test_expected_crib_value_rewards_fives():
    counts = [0] + [4] * 13
    pool = 46
    fives = expected_crib_value(parse_cards("5H 5D".split()), 13, counts, pool)
    junk = expected_crib_value(parse_cards("AH 9D".split()), 13, counts, pool)
    assert fives > junk > 0


def test_crib_flush_probability():
    hand = parse_cards("2H 7H 9S 4C JD KS".split())
    discards = parse_cards("2H 7H".split())
    expected = (11 / 46) * (10 / 45) * (9 / 44)
    assert crib_flush_probability(discards, hand) == pytest.approx(expected)
    assert crib_flush_probability(parse_cards("2H 9S".split()), hand) == 0.0


@pytest.mark.parametrize("text", ["5H 5D 5C JH", "AC 2C 3C 4C 5C 6C 7C", "5H 5H 5C JH 9S 4C"])
def test_rejects_malformed_hands(text):
    with pytest.raises(InvalidArgumentError):
        select_keep(parse_cards(text.split()), is_dealer=True)


def test_expected_value_ignores_which_suit_is_held():
    clubs = parse_cards("JC 5H 5D KS 3C 8S".split())
    spades = parse_cards("JS 5H 5D KC 3S 8C".split())
    for is_dealer in (True, False):
        a = expected_value(parse_cards("JC 5H 5D KS".split()), clubs, is_dealer)
        b = expected_value(parse_cards("JS 5H 5D KC".split()), spades, is_dealer)
        assert a == pytest.approx(b)

    club_flush = parse_cards("2C 4C 6C 8C 9H KD".split())
    spade_flush = parse_cards("2S 4S 6S 8S 9H KD".split())
    assert expected_value(club_flush[:4], club_flush, True) == pytest.approx(
        expected_value(spade_flush[:4], spade_flush, True)
    )


def test_flush_and_nobs_weighted_by_starter_suit():
    hand = parse_cards("2C 4C 6C 8C 9H KD".split())
    off_suit = parse_cards("2C 4C 6C 8D 9H KC".split())
    # Same ranks kept and discarded, so only the flush term differs
    flush_gap = expected_value(hand[:4], hand, True) - expected_value(off_suit[:4], off_suit, True)
    assert flush_gap == pytest.approx(4 + 9 / 46)

    with_jack = parse_cards("JC 2H 7S 9D KD QH".split())
    jack_off = parse_cards("JC 2H 7S 9D KC QH".split())
    # One more club held leaves one fewer club starter for nobs
    gap = expected_value(with_jack[:4], with_jack, False) - expected_value(jack_off[:4], jack_off, False)
    assert gap == pytest.approx(12 / 46 - 11 / 46)
