"""
Discard selection: choose the 4 cards to keep from a 5- or 6-card deal.

Every 4-card subset is reached by an include/exclude recursion over the dealt
cards. Each candidate gets an expected value:

- hand: fifteens, pairs and runs of the kept cards averaged over the 13
  starter ranks, each rank weighted by how many of its cards are still
  unseen, plus flush and nobs weighted by the chance the starter has the
  needed suit;
- crib: expected fifteens, pairs and runs of the crib over the unknown crib
  cards' ranks, plus the chance of a five-card flush when the known discards
  share a suit. Added for the dealer, subtracted otherwise.

The best candidate wins; ties keep the first found (include before exclude).
"""
from __future__ import annotations

import logging
from functools import lru_cache
from math import factorial
from typing import Dict, FrozenSet, Iterator, List, NamedTuple, Sequence, Tuple

from .deck import CARDS_PER_RANK, CARDS_PER_SUIT, DECK_SIZE, Card, Rank, Suit
from .errors import InvalidArgumentError
from .scoring import count_fifteens, count_pairs, count_runs

logger = logging.getLogger(__name__)

KEEP_SIZE = 4
CRIB_SIZE = 4
HAND_FLUSH_POINTS = 4
CRIB_FLUSH_POINTS = 5


class DiscardChoice(NamedTuple):
    keep: List[Card]
    discard: List[Card]
    expected: float


def _rank_counts(hand: Sequence[Card]) -> List[int]:
    """Unseen cards per rank value (index 1..13) given the dealt hand."""
    counts = [0] + [CARDS_PER_RANK] * CARDS_PER_SUIT
    for card in hand:
        counts[card.rank_value] -= 1
    return counts


@lru_cache(maxsize=None)
def _rank_points(ranks: Tuple[int, ...], starter_rank: int) -> int:
    """Fifteens + pairs + runs for four ranks and a starter rank (suits irrelevant)."""
    crib = [Card(Rank(r), Suit(i % len(Suit))) for i, r in enumerate(ranks)]
    starter = Card(Rank(starter_rank), Suit.SPADE)
    return (
        count_fifteens(crib, starter)
        + count_pairs(crib, starter)
        + count_runs(crib, starter)
    )


def _rank_multisets(size: int, lowest: int = 1) -> Iterator[Tuple[int, ...]]:
    if size == 0:
        yield ()
        return
    for r in range(lowest, CARDS_PER_SUIT + 1):
        for rest in _rank_multisets(size - 1, r):
            yield (r,) + rest


def _multiset_probability(ranks: Tuple[int, ...], counts: Sequence[int], pool: int) -> float:
    """Chance that ``len(ranks)`` cards drawn from the pool have exactly these ranks."""
    n = len(ranks)
    numerator = factorial(n)
    for r in set(ranks):
        m = ranks.count(r)
        numerator //= factorial(m)
        for k in range(m):
            numerator *= max(counts[r] - k, 0)
    if numerator == 0:
        return 0.0
    denominator = 1
    for k in range(n):
        denominator *= pool - k
    return numerator / denominator


def expected_crib_value(
    discards: Sequence[Card],
    starter_rank: int,
    counts: Sequence[int],
    pool: int,
) -> float:
    """
    Expected fifteens/pairs/runs of a crib holding ``discards`` once the
    remaining crib cards are drawn from ``pool`` unseen cards (``counts`` per
    rank, starter already removed).
    """
    known = tuple(c.rank_value for c in discards)
    missing = CRIB_SIZE - len(known)
    expected = 0.0
    for ranks in _rank_multisets(missing):
        p = _multiset_probability(ranks, counts, pool)
        if p == 0.0:
            continue
        expected += p * _rank_points(tuple(sorted(known + ranks)), starter_rank)
    return expected


def _suit_probability(suit: Suit, hand: Sequence[Card]) -> float:
    """Chance the starter is of ``suit`` given the dealt hand."""
    available = CARDS_PER_SUIT - sum(1 for c in hand if c.suit == suit)
    return available / (DECK_SIZE - len(hand))


def crib_flush_probability(discards: Sequence[Card], hand: Sequence[Card]) -> float:
    """Chance the rest of the crib and the starter all match the discards' suit."""
    suits = {c.suit for c in discards}
    if len(suits) != 1:
        return 0.0
    suit = suits.pop()
    available = CARDS_PER_SUIT - sum(1 for c in hand if c.suit == suit)
    unseen = DECK_SIZE - len(hand)
    needed = CRIB_SIZE - len(discards) + 1
    p = 1.0
    for k in range(needed):
        p *= max(available - k, 0) / (unseen - k)
    return p


def expected_value(keep: Sequence[Card], hand: Sequence[Card], is_dealer: bool) -> float:
    """Approximate expected points of keeping ``keep`` out of the dealt ``hand``."""
    discards = [c for c in hand if c not in keep]
    counts = _rank_counts(hand)
    unseen = DECK_SIZE - len(hand)
    sign = 1.0 if is_dealer else -1.0

    kept_ranks = tuple(sorted(c.rank_value for c in keep))

    expected = 0.0
    for rank_value in range(1, CARDS_PER_SUIT + 1):
        if counts[rank_value] == 0:
            continue
        p_starter = counts[rank_value] / unseen
        hand_points = _rank_points(kept_ranks, rank_value)
        counts[rank_value] -= 1
        crib = expected_crib_value(discards, rank_value, counts, unseen - 1)
        counts[rank_value] += 1
        expected += p_starter * (hand_points + sign * crib)

    suits = {c.suit for c in keep}
    if len(suits) == 1:
        expected += HAND_FLUSH_POINTS + _suit_probability(suits.pop(), hand)
    for card in keep:
        if card.is_jack():
            expected += _suit_probability(card.suit, hand)
    expected += sign * CRIB_FLUSH_POINTS * crib_flush_probability(discards, hand)
    return expected


def _maximize(
    hand: Sequence[Card],
    is_dealer: bool,
    so_far: List[Card],
    idx: int,
    saved: Dict[FrozenSet[Card], float],
) -> FrozenSet[Card] | None:
    if len(so_far) == KEEP_SIZE:
        key = frozenset(so_far)
        if key not in saved:
            saved[key] = expected_value(so_far, hand, is_dealer)
        return key
    # Out of cards, or too few left to reach four
    if idx == len(hand) or len(so_far) + (len(hand) - idx) < KEEP_SIZE:
        return None

    so_far.append(hand[idx])
    include = _maximize(hand, is_dealer, so_far, idx + 1, saved)
    so_far.pop()
    exclude = _maximize(hand, is_dealer, so_far, idx + 1, saved)

    if include is None:
        return exclude
    if exclude is None:
        return include
    return include if saved[include] >= saved[exclude] else exclude


def _check_hand(hand: Sequence[Card]) -> None:
    if len(hand) not in (5, 6):
        raise InvalidArgumentError(f"Discard selection needs 5 or 6 cards, got {len(hand)}")
    if len(set(hand)) != len(hand):
        raise InvalidArgumentError("Hand contains duplicate cards")


def evaluate_discards(hand: Sequence[Card], is_dealer: bool) -> List[DiscardChoice]:
    """Every 4-card keep with its expected value, best first (ties in search order)."""
    _check_hand(hand)
    hand = list(hand)
    saved: Dict[FrozenSet[Card], float] = {}
    _maximize(hand, is_dealer, [], 0, saved)
    choices = [
        DiscardChoice(
            keep=[c for c in hand if c in key],
            discard=[c for c in hand if c not in key],
            expected=ev,
        )
        for key, ev in saved.items()
    ]
    choices.sort(key=lambda ch: -ch.expected)
    return choices


def select_keep(hand: Sequence[Card], is_dealer: bool) -> DiscardChoice:
    """Best 4 cards to keep from a 5- or 6-card hand."""
    _check_hand(hand)
    hand = list(hand)
    saved: Dict[FrozenSet[Card], float] = {}
    best = _maximize(hand, is_dealer, [], 0, saved)
    assert best is not None
    choice = DiscardChoice(
        keep=[c for c in hand if c in best],
        discard=[c for c in hand if c not in best],
        expected=saved[best],
    )
    logger.debug(
        "Keep %s, discard %s (expected %.2f, %d candidates)",
        choice.keep, choice.discard, choice.expected, len(saved),
    )
    return choice


__all__ = [
    "DiscardChoice",
    "evaluate_discards",
    "expected_value",
    "expected_crib_value",
    "crib_flush_probability",
    "select_keep",
]
