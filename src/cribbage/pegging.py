"""
Pegging: points scored as each card is played, read from the play stack.
The stack is ordered most-recent first and holds only the cards played since
the count was last reset.
"""
from __future__ import annotations

from typing import NamedTuple, Sequence

from .deck import Card

FIFTEEN = 15
MAX_COUNT = 31
SPECIAL_COUNT_POINTS = 2


class PlayScore(NamedTuple):
    """Points earned by one play. ``special`` covers 15/31 bonuses and the go point."""
    total: int
    runs: int
    pairs: int
    special: int


def peg_pairs(stack: Sequence[Card]) -> int:
    """Pairs / pair royal / double pair royal made by the top card: 2, 6 or 12."""
    if not stack:
        return 0
    top_rank = stack[0].rank
    occurrences = 0
    for card in stack:
        if card.rank != top_rank:
            break
        occurrences += 1
    return occurrences * (occurrences - 1)


def _is_run(cards: Sequence[Card]) -> bool:
    values = sorted(c.rank_value for c in cards)
    return all(b == a + 1 for a, b in zip(values, values[1:]))


def peg_runs(stack: Sequence[Card]) -> int:
    """Length of the longest run formed by the N most recent cards (N >= 3), else 0."""
    longest = 0
    for n in range(3, len(stack) + 1):
        if _is_run(stack[:n]):
            longest = n
    return longest


def count_bonus(count: int) -> int:
    """2 points for making the count exactly 15 or 31."""
    return SPECIAL_COUNT_POINTS if count in (FIFTEEN, MAX_COUNT) else 0
