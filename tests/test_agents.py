"""Random and smart players."""
import random

import pytest

from cribbage.agents import Player, RandomPlayer, SmartPlayer
from cribbage.deck import Card
from cribbage.discard import select_keep
from cribbage.errors import IllegalStateError
from cribbage.game import CribbageGame
from cribbage.mcts import MCTSConfig


def _dealt(num_players: int = 2, seed: int = 0) -> CribbageGame:
    game = CribbageGame(num_players=num_players, rng=random.Random(seed))
    game.set_dealer(0)
    game.deal_hands()
    return game


def test_players_satisfy_protocol():
    players: list[Player] = [RandomPlayer(seed=0), SmartPlayer(seed=0)]
    for p in players:
        assert callable(p.select_discards)
        assert callable(p.select_play)


def test_random_player_discards_from_hand():
    game = _dealt()
    player = RandomPlayer(seed=1)
    discards = player.select_discards(game, 1)
    assert len(discards) == 2
    assert set(discards) <= set(game.get_hand(1))


def test_random_player_three_player_discards_one():
    game = _dealt(num_players=3)
    discards = RandomPlayer(seed=2).select_discards(game, 2)
    assert len(discards) == 1


def test_random_player_seeded_is_reproducible():
    game = _dealt(seed=4)
    a = RandomPlayer(seed=7).select_discards(game, 1)
    b = RandomPlayer(seed=7).select_discards(game, 1)
    assert a == b


def test_random_player_refuses_after_discarding():
    game = _dealt()
    for card in game.get_hand(1)[:2]:
        game.send_card_to_crib(1, card)
    with pytest.raises(IllegalStateError):
        RandomPlayer(seed=0).select_discards(game, 1)


def test_random_player_plays_legal_card():
    game = CribbageGame(rng=random.Random(0))
    game.set_dealer(1)
    for text in ["KS", "QS", "5S"]:
        game.add_card_to_hand(0, Card.parse(text))
    card = RandomPlayer(seed=3).select_play(game, 0)
    assert card in game.legal_cards(0)


def test_random_player_without_legal_card():
    game = CribbageGame(rng=random.Random(0))
    game.set_dealer(1)
    with pytest.raises(IllegalStateError):
        RandomPlayer(seed=3).select_play(game, 0)


def test_smart_player_discards_best_keep():
    game = _dealt(seed=5)
    hand = game.get_hand(1)
    discards = SmartPlayer(seed=0).select_discards(game, 1)
    assert set(discards) == set(select_keep(hand, is_dealer=False).discard)


def test_smart_player_plays_through_a_round():
    game = _dealt(seed=6)
    smart = SmartPlayer(seed=1, mcts=MCTSConfig(iterations=30))
    rand = RandomPlayer(seed=2)
    players = [rand, smart]
    for pid, player in enumerate(players):
        for card in player.select_discards(game, pid):
            game.send_card_to_crib(pid, card)
    game.pick_starter_card()
    while not game.round_over():
        if not game.move_possible():
            game.reset_count()
            continue
        pid = game.next_to_play
        card = players[pid].select_play(game, pid)
        assert card in game.legal_cards(pid)
        game.play_card(pid, card)
    assert game.round_over()
