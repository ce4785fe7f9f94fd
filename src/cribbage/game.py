"""
Cribbage game state machine for 2 or 3 players.

One round: deal → discard to the crib → cut the starter → play (pegging) →
show (hands, then crib). The caller drives the phases in order and decides who
acts; this class enforces legality and keeps the score. Every operation
validates fully before mutating, so a failed call leaves the state unchanged.
"""
from __future__ import annotations

import copy
import logging
import random
from enum import Enum

from .deck import Card, CardPile, Rank
from .errors import IllegalStateError, InvalidArgumentError
from .pegging import MAX_COUNT, PlayScore, count_bonus, peg_pairs, peg_runs
from .scoring import HandScore, score_hand

logger = logging.getLogger(__name__)

WINNING_SCORE = 121
HAND_SIZE = 4
CRIB_SIZE = 4
TWO_PLAYER_START_SIZE = 6
THREE_PLAYER_START_SIZE = 5
HEELS_POINTS = 2
GO_POINTS = 1


class Phase(Enum):
    SETUP = "setup"            # no dealer yet, or dealer chosen but nothing dealt
    DEALT = "dealt"            # hands dealt, crib filling
    READY = "ready"            # crib full, starter cut
    IN_PLAY = "in_play"        # pegging under way
    SHOW = "show"              # every card played; hands and crib to count
    ROUND_DONE = "round_done"  # round cleared, dealer rotated
    GAME_OVER = "game_over"


class CribbageGame:
    """
    Mutable state of one game: draw pile, hands, crib, played piles, running
    count, play stack (most recent card first), turn pointers and scores.

    Hands hold only unplayed cards. Once played, a card moves to the owner's
    played pile, so draw pile, hands, crib, played piles and starter always
    partition the 52 cards.
    """

    def __init__(self, num_players: int = 2, rng: random.Random | None = None) -> None:
        if num_players not in (2, 3):
            raise InvalidArgumentError("Must have either 2 or 3 players")
        self.num_players = num_players
        self.rng = rng or random.Random()
        self.draw_pile = CardPile.full_deck()
        self.hands: list[CardPile] = [CardPile() for _ in range(num_players)]
        self.played: list[CardPile] = [CardPile() for _ in range(num_players)]
        self.crib = CardPile()
        self.play_stack: list[Card] = []
        self.count = 0
        self._scores = [0] * num_players
        self.dealer: int | None = None
        self.next_to_play: int | None = None
        self.last_to_play: int | None = None
        self.starter_card: Card | None = None
        self._phase = Phase.SETUP

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def phase(self) -> Phase:
        return Phase.GAME_OVER if self.game_over() else self._phase

    @property
    def start_size(self) -> int:
        return TWO_PLAYER_START_SIZE if self.num_players == 2 else THREE_PLAYER_START_SIZE

    def scores(self) -> list[int]:
        return list(self._scores)

    def player_score(self, pid: int) -> int:
        self._check_pid(pid)
        return self._scores[pid]

    def get_hand(self, pid: int) -> list[Card]:
        """Unplayed cards held by ``pid`` (a copy)."""
        self._check_pid(pid)
        return self.hands[pid].cards()

    def all_hands(self) -> list[list[Card]]:
        return [h.cards() for h in self.hands]

    def played_cards(self, pid: int) -> list[Card]:
        self._check_pid(pid)
        return self.played[pid].cards()

    def kept_cards(self, pid: int) -> list[Card]:
        """The player's four cards for the round: unplayed plus already played."""
        self._check_pid(pid)
        return self.hands[pid].cards() + self.played[pid].cards()

    def get_crib(self) -> list[Card]:
        return self.crib.cards()

    def last_played_card(self) -> Card | None:
        return self.play_stack[0] if self.play_stack else None

    def seen_cards(self) -> set[Card]:
        """Cards visible to every player: all played cards and the starter."""
        seen = {c for pile in self.played for c in pile}
        if self.starter_card is not None:
            seen.add(self.starter_card)
        return seen

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def draw_card_for_dealer(self) -> Card:
        """Draw a random card from the pile; the caller uses these to choose a dealer."""
        if self.draw_pile.is_empty():
            raise IllegalStateError("Draw pile is empty")
        return self.draw_pile.draw_random(self.rng)

    def set_dealer(self, pid: int) -> None:
        self._check_pid(pid)
        self.dealer = pid
        self.next_to_play = (pid + 1) % self.num_players

    # ------------------------------------------------------------------
    # Deal and discard
    # ------------------------------------------------------------------

    def deal_hands(self) -> list[list[Card]]:
        """
        Reshuffle all 52 cards and deal 6 each (2 players) or 5 each plus one
        to the crib (3 players), starting left of the dealer.
        """
        self._check_not_over()
        if self.dealer is None:
            raise IllegalStateError("Dealer not decided")
        if any(not h.is_empty() for h in self.hands) or any(not p.is_empty() for p in self.played):
            raise IllegalStateError("Players still have cards in their hands")
        if not self.crib.is_empty():
            raise IllegalStateError("Crib still contains cards")

        self.draw_pile = CardPile.full_deck()
        self.draw_pile.shuffle(self.rng)
        self.starter_card = None
        for _ in range(self.start_size):
            for j in range(1, self.num_players + 1):
                self.hands[(self.dealer + j) % self.num_players].add(self.draw_pile.draw())
        if self.num_players == 3:
            self.crib.add(self.draw_pile.draw())
        for hand in self.hands:
            hand.sort()

        self.next_to_play = (self.dealer + 1) % self.num_players
        self._phase = Phase.DEALT
        logger.debug("Dealer %d dealt %s", self.dealer, self.all_hands())
        return self.all_hands()

    def add_card_to_hand(self, pid: int, card: Card) -> None:
        """
        Put a specific card from the draw pile into a player's hand. Used to set
        up positions by hand and by simulations; ``deal_hands`` does not need it.
        """
        self._check_pid(pid)
        if card is None:
            raise InvalidArgumentError("Card is null")
        if len(self.hands[pid]) + len(self.played[pid]) >= HAND_SIZE:
            raise IllegalStateError(f"Player {pid}'s hand is full")
        if card not in self.draw_pile:
            raise InvalidArgumentError(f"{card} is not available in the draw pile")
        self.draw_pile.remove(card)
        self.hands[pid].add(card)

    def clear_hand(self, pid: int) -> None:
        """Return a player's unplayed cards to the draw pile."""
        self._check_pid(pid)
        for card in self.hands[pid]:
            self.draw_pile.add(card)
        self.hands[pid].clear()

    def conceal(self, viewer: int) -> None:
        """
        Return every card ``viewer`` cannot see (other players' unplayed cards
        and the crib) to the draw pile. Only meant for simulation copies.
        """
        self._check_pid(viewer)
        for pid in range(self.num_players):
            if pid != viewer:
                self.clear_hand(pid)
        for card in self.crib:
            self.draw_pile.add(card)
        self.crib.clear()

    def send_card_to_crib(self, pid: int, card: Card) -> None:
        self._check_pid(pid)
        if card is None:
            raise InvalidArgumentError("Card is null")
        if card not in self.hands[pid]:
            raise InvalidArgumentError(f"Player {pid} does not have {card}")
        self._check_not_over()
        if len(self.crib) >= CRIB_SIZE:
            raise IllegalStateError("Crib is full")
        if len(self.hands[pid]) <= HAND_SIZE:
            raise IllegalStateError(f"Player {pid} has already discarded")
        self.hands[pid].remove(card)
        self.crib.add(card)

    def pick_starter_card(self) -> Card:
        """Cut the starter. A jack gives the dealer 2 points (heels)."""
        self._check_not_over()
        if self.dealer is None:
            raise IllegalStateError("Dealer not decided")
        if self.starter_card is not None:
            raise IllegalStateError("Starter card already drawn")
        if any(len(self.kept_cards(p)) != HAND_SIZE for p in range(self.num_players)):
            raise IllegalStateError("Not all hands have been finalized")
        if len(self.crib) != CRIB_SIZE:
            raise IllegalStateError("Crib does not have four cards")

        self.starter_card = self.draw_pile.draw_random(self.rng)
        if self.starter_card.rank == Rank.JACK:
            logger.debug("Starter %s: heels for dealer %d", self.starter_card, self.dealer)
            self._add_points(self.dealer, HEELS_POINTS)
        self._phase = Phase.READY
        return self.starter_card

    # ------------------------------------------------------------------
    # Play (pegging)
    # ------------------------------------------------------------------

    def card_already_played(self, card: Card) -> bool:
        return any(card in pile for pile in self.played)

    def max_count_exceeded(self, card: Card) -> bool:
        return self.count + card.value > MAX_COUNT

    def can_play_card(self, card: Card) -> bool:
        """Not yet played this round and does not push the count past 31."""
        return not self.max_count_exceeded(card) and not self.card_already_played(card)

    def legal_cards(self, pid: int) -> list[Card]:
        self._check_pid(pid)
        return [c for c in self.hands[pid] if self.can_play_card(c)]

    def has_playable_card(self, pid: int) -> bool:
        self._check_pid(pid)
        return any(self.count + c.value <= MAX_COUNT for c in self.hands[pid])

    def move_possible(self) -> bool:
        return any(self.has_playable_card(p) for p in range(self.num_players))

    def count_is_31(self) -> bool:
        return self.count == MAX_COUNT

    def play_card(self, pid: int, card: Card) -> PlayScore:
        """
        Play ``card`` for ``pid`` and peg the points it makes: pairs, runs,
        2 for 15 or 31, plus 1 for the go when nobody can follow and the count
        is not 31. Turn passes to the next player holding a playable card.
        """
        self._check_pid(pid)
        if card is None:
            raise InvalidArgumentError("Card is null")
        self._check_not_over()
        if self.starter_card is None:
            raise IllegalStateError("The starter has not been cut; discards come first")
        if pid != self.next_to_play:
            raise IllegalStateError(f"Not player {pid}'s turn")
        if self.card_already_played(card):
            raise IllegalStateError(f"{card} has already been played")
        if self.max_count_exceeded(card):
            raise IllegalStateError(f"{card} would take the count past {MAX_COUNT}")
        if card not in self.hands[pid]:
            raise InvalidArgumentError(f"Player {pid} does not have {card} in their hand")

        self.count += card.value
        self.play_stack.insert(0, card)
        self.hands[pid].remove(card)
        self.played[pid].add(card)
        self.last_to_play = pid
        self._phase = Phase.IN_PLAY

        pairs = peg_pairs(self.play_stack)
        runs = peg_runs(self.play_stack)
        special = count_bonus(self.count)
        self._add_points(pid, pairs + runs + special)
        if not self.move_possible() and not self.count_is_31():
            self._add_points(pid, GO_POINTS)
            special += GO_POINTS
        self._determine_next_player()

        if self.round_over():
            self._phase = Phase.SHOW
        result = PlayScore(total=pairs + runs + special, runs=runs, pairs=pairs, special=special)
        logger.debug("Player %d plays %s (count %d): %s", pid, card, self.count, result)
        return result

    def reset_count(self) -> None:
        """Start a new count after a 31 or a go."""
        if self.move_possible():
            raise IllegalStateError("Cards can still be played on this count")
        self.count = 0
        self.play_stack.clear()
        self._determine_next_player()

    def set_next_player(self, pid: int) -> None:
        """Override whose turn it is. Normal games never need this."""
        self._check_pid(pid)
        self.next_to_play = pid

    def round_over(self) -> bool:
        if self.game_over():
            return True
        return all(h.is_empty() for h in self.hands) and any(not p.is_empty() for p in self.played)

    def _determine_next_player(self) -> None:
        if self.next_to_play is None:
            return
        for step in range(1, self.num_players):
            candidate = (self.next_to_play + step) % self.num_players
            if self.has_playable_card(candidate):
                self.next_to_play = candidate
                return

    # ------------------------------------------------------------------
    # Show
    # ------------------------------------------------------------------

    def count_hand(self, pid: int, add_to_score: bool = True) -> HandScore:
        self._check_pid(pid)
        if self.starter_card is None:
            raise IllegalStateError("No starter card")
        cards = self.kept_cards(pid)
        if len(cards) != HAND_SIZE:
            raise IllegalStateError(f"Player {pid} does not hold {HAND_SIZE} cards")
        result = score_hand(cards, self.starter_card)
        if add_to_score:
            self._add_points(pid, result.total)
        logger.debug("Player %d shows %s + %s: %s", pid, cards, self.starter_card, result)
        return result

    def count_crib(self, add_to_score: bool = True) -> HandScore:
        """Count the crib with the starter; points go to the dealer."""
        if self.dealer is None:
            raise IllegalStateError("Dealer not decided")
        if len(self.crib) != CRIB_SIZE:
            raise IllegalStateError("Crib does not have four cards")
        if self.starter_card is None:
            raise IllegalStateError("No starter card")
        result = score_hand(self.crib.cards(), self.starter_card, is_crib=True)
        if add_to_score:
            self._add_points(self.dealer, result.total)
        logger.debug("Dealer %d crib %s: %s", self.dealer, self.crib.cards(), result)
        return result

    # ------------------------------------------------------------------
    # Scores and round transitions
    # ------------------------------------------------------------------

    def _add_points(self, pid: int, points: int) -> None:
        self._scores[pid] = min(WINNING_SCORE, self._scores[pid] + points)

    def is_winner(self, pid: int) -> bool:
        self._check_pid(pid)
        return self._scores[pid] >= WINNING_SCORE

    def game_over(self) -> bool:
        return any(s >= WINNING_SCORE for s in self._scores)

    def clear_round_state(self) -> None:
        """Gather every card back into the draw pile and pass the deal to the left."""
        if self.dealer is None:
            raise IllegalStateError("Must set dealer first")
        self.count = 0
        self.play_stack.clear()
        for pile in [*self.hands, *self.played, self.crib]:
            pile.clear()
        self.draw_pile = CardPile.full_deck()
        self.starter_card = None
        self.last_to_play = None
        self.dealer = (self.dealer + 1) % self.num_players
        self.next_to_play = (self.dealer + 1) % self.num_players
        self._phase = Phase.ROUND_DONE

    def clone(self, rng: random.Random | None = None) -> CribbageGame:
        """
        Independent deep copy for simulation. Cards are immutable and shared;
        every container is copied. Without ``rng`` the copy gets a snapshot of
        this game's generator.
        """
        other = CribbageGame.__new__(CribbageGame)
        other.num_players = self.num_players
        other.rng = rng if rng is not None else copy.deepcopy(self.rng)
        other.draw_pile = self.draw_pile.copy()
        other.hands = [h.copy() for h in self.hands]
        other.played = [p.copy() for p in self.played]
        other.crib = self.crib.copy()
        other.play_stack = list(self.play_stack)
        other.count = self.count
        other._scores = list(self._scores)
        other.dealer = self.dealer
        other.next_to_play = self.next_to_play
        other.last_to_play = self.last_to_play
        other.starter_card = self.starter_card
        other._phase = self._phase
        return other

    # ------------------------------------------------------------------

    def _check_pid(self, pid: int) -> None:
        if not isinstance(pid, int) or not 0 <= pid < self.num_players:
            raise InvalidArgumentError(
                f"Invalid player ID of {pid}; must be between 0 and {self.num_players} exclusive"
            )

    def _check_not_over(self) -> None:
        if self.game_over():
            raise IllegalStateError("Game is over")


__all__ = [
    "CribbageGame",
    "Phase",
    "WINNING_SCORE",
    "HAND_SIZE",
    "CRIB_SIZE",
]
