"""Full games driven by the match runner."""
import random

import pytest

from cribbage.agents import RandomPlayer, SmartPlayer
from cribbage.errors import InvalidArgumentError
from cribbage.game import CribbageGame, WINNING_SCORE
from cribbage.match import cut_for_deal, play_match, show_order
from cribbage.mcts import MCTSConfig


def test_cut_for_deal_picks_a_dealer():
    game = CribbageGame(num_players=3, rng=random.Random(0))
    dealer = cut_for_deal(game)
    assert dealer in (0, 1, 2)
    assert game.dealer == dealer
    assert game.next_to_play == (dealer + 1) % 3


def test_show_order_ends_with_dealer():
    game = CribbageGame(num_players=3)
    game.set_dealer(1)
    assert show_order(game) == [2, 0, 1]


def test_random_game_two_players():
    result = play_match([RandomPlayer(seed=1), RandomPlayer(seed=2)], rng=random.Random(3))
    assert result.winner in (0, 1)
    assert result.scores[result.winner] == WINNING_SCORE
    assert result.scores[1 - result.winner] < WINNING_SCORE
    assert result.rounds == len(result.round_scores) > 0
    assert result.round_scores[-1] == result.scores


def test_random_game_three_players():
    players = [RandomPlayer(seed=s) for s in range(3)]
    result = play_match(players, rng=random.Random(4), dealer=2)
    assert result.first_dealer == 2
    assert sum(1 for s in result.scores if s == WINNING_SCORE) == 1
    assert result.scores[result.winner] == WINNING_SCORE


def test_scores_never_decrease_between_rounds():
    result = play_match([RandomPlayer(seed=5), RandomPlayer(seed=6)], rng=random.Random(7))
    for before, after in zip(result.round_scores, result.round_scores[1:]):
        assert all(a >= b for a, b in zip(after, before))


def test_seeded_games_repeat():
    a = play_match([RandomPlayer(seed=8), RandomPlayer(seed=9)], rng=random.Random(10))
    b = play_match([RandomPlayer(seed=8), RandomPlayer(seed=9)], rng=random.Random(10))
    assert a == b


def test_wrong_player_count():
    with pytest.raises(InvalidArgumentError):
        play_match([RandomPlayer(seed=0)])
    with pytest.raises(InvalidArgumentError):
        play_match([RandomPlayer(seed=s) for s in range(4)])


def test_smart_player_finishes_a_game():
    players = [SmartPlayer(seed=0, mcts=MCTSConfig(iterations=20)), RandomPlayer(seed=1)]
    result = play_match(players, rng=random.Random(11), dealer=0)
    assert result.winner is not None
    assert max(result.scores) == WINNING_SCORE
