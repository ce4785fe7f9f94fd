"""
Full games: cut for deal, then deal / discard / play / show rounds until
someone pegs out at 121.

Players are anything satisfying ``agents.Player``. The show is counted in
cribbage order (left of the dealer first, dealer last, then the crib) and
stops the moment a player reaches the winning score.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import List, Sequence

from .agents import Player
from .errors import InvalidArgumentError
from .game import CribbageGame
from .mcts import settle

logger = logging.getLogger(__name__)

MAX_ROUNDS = 500


@dataclass
class MatchResult:
    """Final scores of one game and who won it."""

    scores: List[int]
    winner: int | None
    rounds: int
    first_dealer: int
    round_scores: List[List[int]] = field(default_factory=list)  # cumulative, after each round


def cut_for_deal(game: CribbageGame) -> int:
    """
    Every player cuts a card; lowest rank deals. Tied low cuts cut again.
    Sets and returns the dealer.
    """
    contenders = list(range(game.num_players))
    while True:
        cuts = {pid: game.draw_card_for_dealer() for pid in contenders}
        low = min(c.rank_value for c in cuts.values())
        contenders = [pid for pid, c in cuts.items() if c.rank_value == low]
        logger.debug("Cuts: %s", {pid: str(c) for pid, c in cuts.items()})
        if len(contenders) == 1:
            game.set_dealer(contenders[0])
            return contenders[0]


def show_order(game: CribbageGame) -> List[int]:
    """Players in counting order: left of the dealer first, dealer last."""
    assert game.dealer is not None
    n = game.num_players
    return [(game.dealer + step) % n for step in range(1, n + 1)]


def play_round(game: CribbageGame, players: Sequence[Player]) -> None:
    """Deal, discard, cut the starter, play and show one round."""
    game.deal_hands()
    for pid in show_order(game):
        for card in players[pid].select_discards(game, pid):
            game.send_card_to_crib(pid, card)

    starter = game.pick_starter_card()
    logger.debug("Starter %s, scores %s", starter, game.scores())
    if game.game_over():
        return

    settle(game)
    while not game.round_over():
        pid = game.next_to_play
        assert pid is not None
        card = players[pid].select_play(game, pid)
        score = game.play_card(pid, card)
        if score.total:
            logger.debug("Player %d plays %s for %d (count %d)", pid, card, score.total, game.count)
        settle(game)
    if game.game_over():
        return

    for pid in show_order(game):
        result = game.count_hand(pid)
        logger.debug("Player %d shows %s", pid, result)
        if game.game_over():
            return
    game.count_crib()


def play_match(
    players: Sequence[Player],
    rng: random.Random | None = None,
    dealer: int | None = None,
    max_rounds: int = MAX_ROUNDS,
) -> MatchResult:
    """
    Play one game to 121 with one player per seat. ``dealer`` fixes the first
    dealer instead of cutting for it.
    """
    if len(players) not in (2, 3):
        raise InvalidArgumentError(f"Cribbage needs 2 or 3 players, got {len(players)}")
    game = CribbageGame(num_players=len(players), rng=rng)
    if dealer is None:
        first = cut_for_deal(game)
    else:
        game.set_dealer(dealer)
        first = dealer

    history: List[List[int]] = []
    rounds = 0
    while not game.game_over() and rounds < max_rounds:
        play_round(game, players)
        rounds += 1
        history.append(game.scores())
        if not game.game_over():
            game.clear_round_state()

    winner = next((pid for pid in range(game.num_players) if game.is_winner(pid)), None)
    logger.info("Game over after %d rounds: scores %s, winner %s", rounds, game.scores(), winner)
    return MatchResult(
        scores=game.scores(),
        winner=winner,
        rounds=rounds,
        first_dealer=first,
        round_scores=history,
    )


__all__ = ["MatchResult", "cut_for_deal", "show_order", "play_round", "play_match"]
