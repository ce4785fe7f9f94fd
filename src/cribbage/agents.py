"""
Players and the generic player interface.

A ``Player`` makes the two decisions cribbage asks of it:
- which cards to send to the crib after the deal;
- which card to play on its turn during the play.

``RandomPlayer`` picks uniformly among legal choices. ``SmartPlayer`` keeps the
four cards with the best expected value and plays by Monte Carlo tree search.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import List, Protocol

from .deck import Card
from .discard import KEEP_SIZE, select_keep
from .errors import IllegalStateError
from .game import CribbageGame
from .mcts import MCTSAgent, MCTSConfig

logger = logging.getLogger(__name__)


class Player(Protocol):
    """Decision maker seated at a ``CribbageGame``."""

    def select_discards(self, game: CribbageGame, pid: int) -> List[Card]:
        """Cards from ``pid``'s dealt hand to send to the crib."""

    def select_play(self, game: CribbageGame, pid: int) -> Card:
        """
        A card ``pid`` can legally play now. Only called on ``pid``'s turn
        while it holds at least one playable card.
        """


def _discard_count(game: CribbageGame, pid: int) -> int:
    n = len(game.hands[pid]) - KEEP_SIZE
    if n <= 0:
        raise IllegalStateError(f"Player {pid} has nothing left to discard")
    return n


@dataclass
class RandomPlayer:
    """
    Baseline player: random discards, random legal plays.

    Usage:
        player = RandomPlayer(seed=42)
        card = player.select_play(game, pid)
    """

    seed: int | None = None

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    def select_discards(self, game: CribbageGame, pid: int) -> List[Card]:
        hand = game.get_hand(pid)
        return self._rng.sample(hand, _discard_count(game, pid))

    def select_play(self, game: CribbageGame, pid: int) -> Card:
        legal = game.legal_cards(pid)
        if not legal:
            raise IllegalStateError(f"Player {pid} has no playable card")
        return self._rng.choice(legal)


@dataclass
class SmartPlayer:
    """
    Expected-value discards and MCTS plays.

    The player remembers what it sent to the crib so the search never deals
    those cards to an opponent.
    """

    seed: int | None = None
    mcts: MCTSConfig = field(default_factory=MCTSConfig)

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)
        self._discards: List[Card] = []

    def select_discards(self, game: CribbageGame, pid: int) -> List[Card]:
        _discard_count(game, pid)
        choice = select_keep(game.get_hand(pid), is_dealer=game.dealer == pid)
        self._discards = list(choice.discard)
        logger.debug("Player %d discards %s", pid, choice.discard)
        return list(choice.discard)

    def select_play(self, game: CribbageGame, pid: int) -> Card:
        known = [c for c in self._discards if c in game.crib]
        agent = MCTSAgent(game, pid, config=self.mcts, rng=self._rng, known_cards=known)
        return agent.select_card()


__all__ = ["Player", "RandomPlayer", "SmartPlayer"]
