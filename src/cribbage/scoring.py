"""
Show scoring: a 4-card hand (or crib) plus the starter card.
Fifteens (2 each), runs, pairs, flush, and nobs (jack of the starter's suit).
"""
from __future__ import annotations

from collections import Counter
from typing import NamedTuple, Sequence

from .deck import Card, Rank
from .errors import InvalidArgumentError

HAND_SIZE = 4
FIFTEEN = 15
POINTS_PER_FIFTEEN = 2


class HandScore(NamedTuple):
    """Breakdown of a counted hand; ``total`` is the sum of the other fields."""
    total: int
    fifteens: int
    runs: int
    pairs: int
    flush: int
    nobs: int


def _check(hand: Sequence[Card], starter: Card | None) -> None:
    if len(hand) != HAND_SIZE:
        raise InvalidArgumentError(f"Hand must have {HAND_SIZE} cards, got {len(hand)}")
    if starter is None:
        raise InvalidArgumentError("No starter card")


def _combos(values: Sequence[int], idx: int, so_far: int) -> int:
    """Number of subsets of values[idx:] that bring so_far to exactly 15."""
    if so_far == FIFTEEN:
        return 1
    if idx == len(values) or so_far > FIFTEEN:
        return 0
    return _combos(values, idx + 1, so_far + values[idx]) + _combos(values, idx + 1, so_far)


def count_fifteens(hand: Sequence[Card], starter: Card) -> int:
    _check(hand, starter)
    values = [c.value for c in hand] + [starter.value]
    return POINTS_PER_FIFTEEN * _combos(values, 0, 0)


def count_runs(hand: Sequence[Card], starter: Card) -> int:
    """
    Each maximal chain of consecutive rank values (length >= 3) scores
    length × product of the multiplicity of each rank in the chain,
    e.g. 7-7-8-9 scores 2 runs of 3 = 6.
    """
    _check(hand, starter)
    occurrences = Counter(c.rank_value for c in list(hand) + [starter])
    total = 0
    run_length = 0
    multiplier = 1
    prev = -1
    for value in sorted(occurrences):
        if value == prev + 1:
            run_length += 1
        else:
            if run_length >= 3:
                total += run_length * multiplier
            run_length = 1
            multiplier = 1
        multiplier *= occurrences[value]
        prev = value
    if run_length >= 3:
        total += run_length * multiplier
    return total


def count_pairs(hand: Sequence[Card], starter: Card) -> int:
    """k cards of one rank score k*(k-1): 2, 6 or 12."""
    _check(hand, starter)
    occurrences = Counter(c.rank_value for c in list(hand) + [starter])
    return sum(k * (k - 1) for k in occurrences.values())


def count_flush(hand: Sequence[Card], starter: Card, is_crib: bool = False) -> int:
    """
    Four hand cards of one suit score 4, or 5 with a matching starter.
    A crib only scores a flush when all five cards match.
    """
    _check(hand, starter)
    suit = hand[0].suit
    if any(c.suit != suit for c in hand[1:]):
        return 0
    if starter.suit == suit:
        return 5
    return 0 if is_crib else 4


def count_nobs(hand: Sequence[Card], starter: Card) -> int:
    _check(hand, starter)
    return int(any(c.rank == Rank.JACK and c.suit == starter.suit for c in hand))


def score_hand(hand: Sequence[Card], starter: Card, is_crib: bool = False) -> HandScore:
    """Full show count for a hand (or the crib when ``is_crib``)."""
    hand = list(hand)
    fifteens = count_fifteens(hand, starter)
    runs = count_runs(hand, starter)
    pairs = count_pairs(hand, starter)
    flush = count_flush(hand, starter, is_crib=is_crib)
    nobs = count_nobs(hand, starter)
    return HandScore(
        total=fifteens + runs + pairs + flush + nobs,
        fifteens=fifteens,
        runs=runs,
        pairs=pairs,
        flush=flush,
        nobs=nobs,
    )


# Totals no hand + starter can produce.
IMPOSSIBLE_TOTALS = frozenset({19, 25, 26, 27})
MAX_HAND_SCORE = 29
