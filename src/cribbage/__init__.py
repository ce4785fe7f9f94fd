"""Cribbage engine: rules, scoring, pegging and computer players for 2 or 3 players."""

__version__ = "0.1.0"

from .deck import Card, CardPile, Rank, Suit, make_deck_52, parse_cards, random_card
from .errors import CribbageError, IllegalStateError, InvalidArgumentError
from .scoring import HandScore, score_hand
from .pegging import PlayScore, peg_pairs, peg_runs
from .game import CribbageGame, Phase, WINNING_SCORE
from .discard import DiscardChoice, evaluate_discards, select_keep
from .mcts import MCTSAgent, MCTSConfig
from .agents import Player, RandomPlayer, SmartPlayer
from .match import MatchResult, play_match
from .arena import ArenaConfig, ArenaResult, run_arena
