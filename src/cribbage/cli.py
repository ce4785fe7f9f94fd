"""
Command-line interface for the cribbage engine.

Usage examples (after installing in editable mode):

    python -m cribbage.cli score 5H 5D 5C JS --starter 5S
    python -m cribbage.cli discard 5H 5D 5C JH 9S 4C --dealer
    python -m cribbage.cli simulate --games 10 --iterations 200 --seed 1
"""
from __future__ import annotations

import argparse
import logging
import os
from typing import Optional

from .arena import ArenaConfig, run_arena
from .deck import Card, parse_cards
from .discard import evaluate_discards
from .errors import CribbageError
from .scoring import score_hand


def _fmt(cards: list[Card]) -> str:
    return " ".join(str(c) for c in cards)


def _add_score_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "score",
        help="Score a four-card hand with a starter.",
    )
    parser.add_argument(
        "cards",
        nargs=4,
        help='The four hand cards, e.g. "5H" "10S" "JD" "AC".',
    )
    parser.add_argument(
        "--starter",
        type=str,
        required=True,
        help="The starter card.",
    )
    parser.add_argument(
        "--crib",
        action="store_true",
        help="Score as the crib (a flush needs all five cards).",
    )
    parser.set_defaults(func=_cmd_score)


def _cmd_score(args: argparse.Namespace) -> None:
    hand = parse_cards(args.cards)
    starter = Card.parse(args.starter)
    result = score_hand(hand, starter, is_crib=args.crib)
    print(f"{_fmt(hand)} | {starter}")
    print(
        f"fifteens={result.fifteens} runs={result.runs} pairs={result.pairs} "
        f"flush={result.flush} nobs={result.nobs}"
    )
    print(f"total={result.total}")


def _add_discard_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "discard",
        help="Suggest which cards to keep from a 5- or 6-card deal.",
    )
    parser.add_argument(
        "cards",
        nargs="+",
        help="The dealt cards (5 or 6).",
    )
    parser.add_argument(
        "--dealer",
        action="store_true",
        help="The crib is yours.",
    )
    parser.add_argument(
        "--top",
        type=int,
        default=5,
        help="How many candidate keeps to list.",
    )
    parser.set_defaults(func=_cmd_discard)


def _cmd_discard(args: argparse.Namespace) -> None:
    hand = parse_cards(args.cards)
    choices = evaluate_discards(hand, is_dealer=args.dealer)
    for rank, choice in enumerate(choices[: args.top], start=1):
        print(
            f"{rank}. keep {_fmt(choice.keep)}  discard {_fmt(choice.discard)}  "
            f"expected={choice.expected:.2f}"
        )


def _add_simulate_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser(
        "simulate",
        help="Play a smart player against random players and report statistics.",
    )
    parser.add_argument(
        "--games",
        type=int,
        default=20,
        help="Number of games to play.",
    )
    parser.add_argument(
        "--players",
        type=int,
        choices=[2, 3],
        default=2,
        help="Players per game.",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=200,
        help="MCTS iterations per play decision.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed for reproducibility.",
    )
    parser.set_defaults(func=_cmd_simulate)


def _cmd_simulate(args: argparse.Namespace) -> None:
    cfg = ArenaConfig(
        num_games=args.games,
        num_players=args.players,
        seed=args.seed,
        mcts_iterations=args.iterations,
    )
    result = run_arena(cfg)
    print(result.summary())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cribbage", description="Cribbage engine CLI.")
    parser.add_argument(
        "--log-level",
        type=str,
        default=os.environ.get("CRIBBAGE_LOG_LEVEL", "WARNING"),
        help="Logging level (DEBUG, INFO, WARNING, ...). Defaults to $CRIBBAGE_LOG_LEVEL.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_score_parser(subparsers)
    _add_discard_parser(subparsers)
    _add_simulate_parser(subparsers)
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        args.func(args)
    except (CribbageError, ValueError) as exc:
        parser.exit(2, f"error: {exc}\n")


if __name__ == "__main__":
    main()
