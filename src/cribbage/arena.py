"""
Smart-versus-random evaluation.

One ``SmartPlayer`` sits with random players for a number of games, moving one
seat to the left every game so it deals first equally often. Results are the
smart player's point differential per game (its score minus the mean of the
others) and its win count, summarised with numpy.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import List

import numpy as np

from .agents import Player, RandomPlayer, SmartPlayer
from .errors import InvalidArgumentError
from .match import play_match
from .mcts import MCTSConfig

logger = logging.getLogger(__name__)


@dataclass
class ArenaConfig:
    num_games: int = 20
    num_players: int = 2
    seed: int = 0
    mcts_iterations: int = 200

    def __post_init__(self) -> None:
        if self.num_games < 1:
            raise InvalidArgumentError("num_games must be at least 1")
        if self.num_players not in (2, 3):
            raise InvalidArgumentError("num_players must be 2 or 3")


@dataclass
class ArenaResult:
    differentials: np.ndarray
    wins: int
    seats: List[int] = field(default_factory=list)

    @property
    def games(self) -> int:
        return int(self.differentials.size)

    @property
    def mean(self) -> float:
        return float(np.mean(self.differentials))

    @property
    def std(self) -> float:
        return float(np.std(self.differentials, ddof=1)) if self.games > 1 else 0.0

    @property
    def stderr(self) -> float:
        return self.std / float(np.sqrt(self.games))

    @property
    def win_rate(self) -> float:
        return self.wins / self.games

    def summary(self) -> str:
        return (
            f"games={self.games} wins={self.wins} win_rate={self.win_rate:.3f} "
            f"diff_mean={self.mean:.2f} diff_std={self.std:.2f} stderr={self.stderr:.2f}"
        )


def run_arena(cfg: ArenaConfig) -> ArenaResult:
    rng = random.Random(cfg.seed)
    mcts = MCTSConfig(iterations=cfg.mcts_iterations)
    differentials: List[float] = []
    seats: List[int] = []
    wins = 0

    for g in range(cfg.num_games):
        seat = g % cfg.num_players
        players: List[Player] = [
            SmartPlayer(seed=rng.randrange(2**31), mcts=mcts)
            if pid == seat
            else RandomPlayer(seed=rng.randrange(2**31))
            for pid in range(cfg.num_players)
        ]
        result = play_match(players, rng=random.Random(rng.randrange(2**31)), dealer=0)
        scores = np.asarray(result.scores, dtype=float)
        others = np.delete(scores, seat)
        diff = float(scores[seat] - others.mean())
        differentials.append(diff)
        seats.append(seat)
        if result.winner == seat:
            wins += 1
        logger.info("Game %d: smart seat %d, scores %s, diff %+.1f", g + 1, seat, result.scores, diff)

    arena = ArenaResult(differentials=np.asarray(differentials, dtype=float), wins=wins, seats=seats)
    logger.info("Arena: %s", arena.summary())
    return arena


__all__ = ["ArenaConfig", "ArenaResult", "run_arena"]
