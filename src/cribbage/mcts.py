"""
Monte Carlo tree search for choosing a card during the play.

Opponents' cards are hidden, so each iteration first deals them a plausible
hand from the cards this player has not seen (a determinization). The tree
is shared across determinizations: our own moves are keyed by card, an
opponent's moves by rank, since the suit of an opponent card never changes
pegging. Each iteration:

1. select: walk down by UCT among the children legal in this determinization;
2. expand: add a child for every legal move not yet in the tree and step
   into one of them (unvisited children have infinite UCT value);
3. rollout: uniformly random legal plays until the round (or game) ends;
4. backpropagate: the point differential for our player since the root,
   counted positive at our nodes and negated at opponents' nodes.
"""
from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Dict, Hashable, Iterable, List, Sequence

from .deck import Card
from .errors import IllegalStateError, InvalidArgumentError
from .game import CribbageGame

logger = logging.getLogger(__name__)


@dataclass
class MCTSConfig:
    """Search budget and selection policy."""

    iterations: int = 1000
    exploration: float = 1.0
    select_by: str = "visits"  # "visits" | "value"

    def __post_init__(self) -> None:
        if self.iterations < 1:
            raise InvalidArgumentError("iterations must be at least 1")
        if self.select_by not in ("visits", "value"):
            raise InvalidArgumentError(f"Unknown select_by: {self.select_by!r}")


class MCTSNode:
    """One move in the search tree: the card played and who played it."""

    def __init__(
        self,
        parent: MCTSNode | None = None,
        card: Card | None = None,
        pid: int | None = None,
    ) -> None:
        self.parent = parent
        self.card = card
        self.pid = pid
        self.points_earned = 0.0
        self.rollouts = 0
        self.children: Dict[Hashable, MCTSNode] = {}

    def add_child(self, key: Hashable, card: Card, pid: int) -> MCTSNode:
        child = MCTSNode(parent=self, card=card, pid=pid)
        self.children[key] = child
        return child

    def mean_value(self) -> float:
        return self.points_earned / self.rollouts if self.rollouts else 0.0

    def uct_value(self, exploration: float) -> float:
        if self.rollouts == 0:
            # Unvisited: always worth a rollout unless we are only exploiting
            return math.inf if exploration != 0 else 0.0
        parent_rollouts = self.parent.rollouts if self.parent is not None else self.rollouts
        return self.mean_value() + exploration * math.sqrt(
            math.log(max(parent_rollouts, 1)) / self.rollouts
        )

    def __repr__(self) -> str:
        return (
            f"MCTSNode(card={self.card}, pid={self.pid}, "
            f"points={self.points_earned:.1f}, rollouts={self.rollouts})"
        )


def _best(nodes: Sequence[MCTSNode], key, rng: random.Random) -> MCTSNode:
    """Highest-scoring node; ties broken uniformly at random."""
    best_value = -math.inf
    selections: List[MCTSNode] = []
    for node in nodes:
        value = key(node)
        if value > best_value:
            best_value = value
            selections = [node]
        elif value == best_value:
            selections.append(node)
    return rng.choice(selections)


def choose_high_value_child(
    nodes: Sequence[MCTSNode], exploration: float, rng: random.Random
) -> MCTSNode:
    return _best(nodes, lambda n: n.uct_value(exploration), rng)


def choose_most_visited_child(nodes: Sequence[MCTSNode], rng: random.Random) -> MCTSNode:
    return _best(nodes, lambda n: n.rollouts, rng)


def choose_best_value_child(nodes: Sequence[MCTSNode], rng: random.Random) -> MCTSNode:
    return _best(nodes, lambda n: n.uct_value(0.0) if n.rollouts else -math.inf, rng)


def settle(sim: CribbageGame) -> None:
    """Reset the count while nobody can play and the round is still going."""
    while not sim.round_over() and not sim.move_possible():
        sim.reset_count()


class MCTSAgent:
    """
    Chooses a card for ``pid`` in the live ``game``. The game is never
    mutated: every iteration runs on an independent clone.

    ``known_cards`` are extra cards this player knows are out of play (its own
    discards in the crib); they are never dealt to simulated opponents.
    """

    def __init__(
        self,
        game: CribbageGame,
        pid: int,
        config: MCTSConfig | None = None,
        rng: random.Random | None = None,
        known_cards: Iterable[Card] = (),
    ) -> None:
        self.game = game
        self.pid = pid
        self.config = config or MCTSConfig()
        self.rng = rng or random.Random()
        self.known_cards = set(known_cards)
        self.root = MCTSNode(card=game.last_played_card(), pid=game.last_to_play)

    def select_card(self) -> Card:
        if self.game.game_over():
            raise IllegalStateError("Game is over")
        if self.game.next_to_play != self.pid:
            raise IllegalStateError(f"Not player {self.pid}'s turn")
        legal = self.game.legal_cards(self.pid)
        if not legal:
            raise IllegalStateError(f"Player {self.pid} has no playable card")
        if len(legal) == 1:
            return legal[0]

        self.search()
        options = list(self.root.children.values())
        if self.config.select_by == "visits":
            best = choose_most_visited_child(options, self.rng)
        else:
            best = choose_best_value_child(options, self.rng)
        for child in options:
            logger.debug("  %s", child)
        logger.debug("Player %d chooses %s after %d iterations", self.pid, best.card, self.root.rollouts)
        assert best.card is not None
        return best.card

    def search(self) -> None:
        for _ in range(self.config.iterations):
            sim = self._determinize()
            start = sim.scores()
            path = self._select_and_expand(sim)
            self._rollout(sim)
            self._backpropagate(path, self._differential(start, sim.scores()))

    # ------------------------------------------------------------------

    def _determinize(self) -> CribbageGame:
        """Clone the game and deal opponents random cards we have not seen."""
        sim = self.game.clone(rng=self.rng)
        sim.conceal(self.pid)
        pool = [c for c in sim.draw_pile if c not in self.known_cards]
        self.rng.shuffle(pool)
        for opp in range(sim.num_players):
            if opp == self.pid:
                continue
            for _ in range(len(self.game.hands[opp])):
                sim.add_card_to_hand(opp, pool.pop())
        return sim

    def _key(self, actor: int, card: Card) -> Hashable:
        return card if actor == self.pid else card.rank_value

    def _select_and_expand(self, sim: CribbageGame) -> List[MCTSNode]:
        node = self.root
        path = [node]
        while not sim.round_over():
            actor = sim.next_to_play
            assert actor is not None
            moves = {self._key(actor, c): c for c in sim.legal_cards(actor)}
            expanded = False
            for key, card in moves.items():
                if key not in node.children:
                    node.add_child(key, card, actor)
                    expanded = True
            child = choose_high_value_child(
                [node.children[k] for k in moves], self.config.exploration, self.rng
            )
            key = self._key(actor, child.card)
            sim.play_card(actor, moves[key])
            settle(sim)
            node = child
            path.append(node)
            if expanded or node.rollouts == 0:
                break
        return path

    def _rollout(self, sim: CribbageGame) -> None:
        settle(sim)
        while not sim.round_over():
            actor = sim.next_to_play
            assert actor is not None
            sim.play_card(actor, self.rng.choice(sim.legal_cards(actor)))
            settle(sim)

    def _differential(self, start: Sequence[int], end: Sequence[int]) -> float:
        gains = [e - s for s, e in zip(start, end)]
        return float(gains[self.pid] - sum(g for i, g in enumerate(gains) if i != self.pid))

    def _backpropagate(self, path: Sequence[MCTSNode], diff: float) -> None:
        for node in path:
            node.rollouts += 1
            node.points_earned += diff if node.pid == self.pid else -diff


__all__ = [
    "MCTSConfig",
    "MCTSNode",
    "MCTSAgent",
    "choose_high_value_child",
    "choose_most_visited_child",
    "choose_best_value_child",
    "settle",
]
