"""
Standard 52-card deck for cribbage: 4 suits × 13 ranks.
Count value: A=1, 2..10 face value, J/Q/K=10. Rank value (for runs): A=1 .. K=13.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Iterator


class Suit(IntEnum):
    """Club, Diamond, Heart, Spade. Order used for tie-break after rank."""
    CLUB = 0
    DIAMOND = 1
    HEART = 2
    SPADE = 3


class Rank(IntEnum):
    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13


CARDS_PER_SUIT = 13
CARDS_PER_RANK = 4
DECK_SIZE = 52

_RANK_CHARS = {1: "A", 11: "J", 12: "Q", 13: "K"}
_SUIT_CHARS = "CDHS"
_SUIT_SYMBOLS = "♣♦♥♠"


@dataclass(frozen=True, order=True)
class Card:
    """
    A single playing card. Field order gives the total order: rank first, then suit.
    """

    rank: Rank
    suit: Suit

    def __post_init__(self) -> None:
        # Accept plain ints so callers can write Card(5, 2)
        object.__setattr__(self, "rank", Rank(self.rank))
        object.__setattr__(self, "suit", Suit(self.suit))

    @property
    def value(self) -> int:
        """Value toward the running count and fifteens (faces count 10)."""
        return min(int(self.rank), 10)

    @property
    def rank_value(self) -> int:
        """Sequencing value for runs: A=1 .. K=13."""
        return int(self.rank)

    @property
    def card_id(self) -> int:
        """Unique id in [1, 52]."""
        return int(self.suit) * CARDS_PER_SUIT + self.rank_value

    def is_jack(self) -> bool:
        return self.rank == Rank.JACK

    @classmethod
    def parse(cls, text: str) -> Card:
        """
        Parse a short card string such as "5H", "10S", "JD", "AC" or "T♠".
        Rank is A, 2-10 (or T), J, Q, K; suit is one of C/D/H/S or ♣♦♥♠.
        """
        s = text.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Cannot parse card: {text!r}")
        rank_part, suit_part = s[:-1], s[-1]
        if suit_part in _SUIT_CHARS:
            suit = Suit(_SUIT_CHARS.index(suit_part))
        elif suit_part in _SUIT_SYMBOLS:
            suit = Suit(_SUIT_SYMBOLS.index(suit_part))
        else:
            raise ValueError(f"Unknown suit in card: {text!r}")
        lookup = {v: k for k, v in _RANK_CHARS.items()}
        lookup["T"] = 10
        if rank_part in lookup:
            rank = lookup[rank_part]
        elif rank_part.isdigit() and 2 <= int(rank_part) <= 10:
            rank = int(rank_part)
        else:
            raise ValueError(f"Unknown rank in card: {text!r}")
        return cls(Rank(rank), suit)

    def __str__(self) -> str:
        r = _RANK_CHARS.get(int(self.rank)) or str(int(self.rank))
        return f"{r}{_SUIT_SYMBOLS[self.suit]}"

    def __repr__(self) -> str:
        return str(self)


def make_deck_52() -> list[Card]:
    """Build an unshuffled 52-card deck, suit by suit."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


def random_card(rng: random.Random | None = None) -> Card:
    """A random card that is not bound to any pile."""
    rng = rng or random.Random()
    return Card(Rank(rng.randint(1, CARDS_PER_SUIT)), Suit(rng.randrange(CARDS_PER_RANK)))


def parse_cards(texts: Iterable[str]) -> list[Card]:
    return [Card.parse(t) for t in texts]


class CardPile:
    """
    Mutable, duplicate-free collection of cards.

    Insertion order is kept so piles can be dealt from the top and sorted for
    display; equality between two piles ignores order. Used for the draw pile,
    player hands, the crib and each player's played cards.
    """

    def __init__(self, cards: Iterable[Card] = ()) -> None:
        self._cards: list[Card] = []
        for c in cards:
            self.add(c)

    @classmethod
    def full_deck(cls) -> CardPile:
        return cls(make_deck_52())

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(list(self._cards))

    def __contains__(self, card: object) -> bool:
        return card in self._cards

    def __getitem__(self, idx: int) -> Card:
        return self._cards[idx]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CardPile):
            return NotImplemented
        return set(self._cards) == set(other._cards)

    def __repr__(self) -> str:
        return f"CardPile({self._cards!r})"

    def is_empty(self) -> bool:
        return not self._cards

    def add(self, card: Card) -> bool:
        """Add a card; returns False (and changes nothing) if it is already present."""
        if card in self._cards:
            return False
        self._cards.append(card)
        return True

    def remove(self, card: Card) -> bool:
        """Remove a card; returns False if it was not present."""
        if card not in self._cards:
            return False
        self._cards.remove(card)
        return True

    def clear(self) -> None:
        self._cards.clear()

    def retain(self, keep: Iterable[Card]) -> None:
        keep_set = set(keep)
        self._cards = [c for c in self._cards if c in keep_set]

    def sort(self) -> None:
        self._cards.sort()

    def shuffle(self, rng: random.Random) -> None:
        rng.shuffle(self._cards)

    def draw(self, offset: int = 0) -> Card:
        """Remove and return the card at ``offset`` (0 = top)."""
        if not self._cards:
            raise IndexError("Cannot draw from an empty pile")
        if not 0 <= offset < len(self._cards):
            raise IndexError(f"Card offset {offset} out of range for pile of {len(self._cards)}")
        return self._cards.pop(offset)

    def draw_random(self, rng: random.Random) -> Card:
        return self.draw(rng.randrange(len(self._cards)) if self._cards else 0)

    def cards(self) -> list[Card]:
        """Copy of the cards in pile order."""
        return list(self._cards)

    def copy(self) -> CardPile:
        return CardPile(self._cards)
