"""
Texas Hold'em Table - State Machine Implementation.

This module implements the rules engine for one No-Limit Hold'em table.
It handles:
- Seating and the dealer button
- Antes, blinds and heads-up special rules
- Player actions (fold, check, call, raise, all-in) and their legality
- Betting-round completion and street advancement
- Showdown and settlement with main and side pots
- Hand history and the event stream for drivers

The table is a single owned state object: callers must serialize
``start_hand`` and ``apply_action`` for a given instance. Nothing here
blocks; any waiting on an action provider happens outside, between
``legal_actions`` and ``apply_action``.
"""

from __future__ import annotations
import logging
import random
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from pokerarena.core.actions import ActionRecord, ActionResult, LegalActions
from pokerarena.core.card import Card, Deck, format_cards
from pokerarena.core.errors import (
    IllegalAction, InsufficientCards, InsufficientPlayers, SeatingError,
)
from pokerarena.core.hand import rank_many
from pokerarena.core.history import (
    ActionApplied, HandEnded, HandHistory, HandStarted, PlayerSnapshot,
    PotResult, StreetDealt, TableEvent,
)
from pokerarena.core.player import Player
from pokerarena.core.rules import (
    ActionType, BETTING_STAGES, HOLE_CARDS, NEXT_STREET, Stage, TableConfig,
    calculate_side_pots, get_blind_positions, next_eligible_seat, split_pot,
)


logger = logging.getLogger(__name__)

Listener = Callable[[TableEvent], None]


class Table:
    """
    A No-Limit Texas Hold'em table.

    Usage:
        table = Table(small_blind=5, big_blind=10, seed=42)
        table.add_player("p1", "Alice", 500)
        table.add_player("p2", "Bob", 500)
        table.start_hand()

        while table.is_hand_running():
            legal = table.legal_actions()
            action = provider.act(table.get_view(legal.player_id), legal.player_id, legal)
            table.apply_action(legal.player_id, action.action_type, action.amount)

        history = table.hand_history[-1]
    """

    def __init__(
        self,
        config: Optional[TableConfig] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        **settings: int,
    ):
        """
        Initialize an empty table.

        Args:
            config: Blind structure and seat limit
            rng: Random source used to draw a fresh seed for every hand
            seed: Seed for a private random source (ignored if rng is given)
            **settings: TableConfig fields, used when config is None
        """
        self.config = config or TableConfig(**settings)
        self._rng = rng or random.Random(seed)

        self.players: List[Player] = []

        # Hand state
        self.deck: Optional[Deck] = None
        self.community_cards: List[Card] = []
        self.stage = Stage.IDLE
        self.hand_number = 0
        self.hand_seed = 0

        # Position tracking
        self.dealer_seat: Optional[int] = None
        self.small_blind_seat: Optional[int] = None
        self.big_blind_seat: Optional[int] = None
        self.current_seat: Optional[int] = None

        # Betting state
        self.pot = 0
        self.current_bet = 0  # Highest street bet
        self.min_raise = self.config.big_blind  # Smallest full raise increment
        self.last_aggressor: Optional[int] = None

        # Settled pots of the last hand
        self.side_pots: List[PotResult] = []

        self.action_log: List[ActionRecord] = []
        self.hand_history: List[HandHistory] = []

        self._blinds: Dict[str, Any] = {}
        self._listeners: List[Listener] = []

    # Properties -------------------------------------------------------

    @property
    def small_blind(self) -> int:
        return self.config.small_blind

    @property
    def big_blind(self) -> int:
        return self.config.big_blind

    @property
    def ante(self) -> int:
        return self.config.ante

    @property
    def num_players(self) -> int:
        """Number of players seated."""
        return len(self.players)

    @property
    def current_player(self) -> Optional[Player]:
        """The player whose turn it is to act."""
        if not self.is_hand_running() or self.current_seat is None:
            return None
        return self.players[self.current_seat]

    @property
    def total_chips(self) -> int:
        """Chips on the table: every stack plus the pot."""
        return sum(p.stack for p in self.players) + self.pot

    def is_hand_running(self) -> bool:
        """Check if a hand is currently in progress."""
        return self.stage not in (Stage.IDLE, Stage.COMPLETE)

    def get_player(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    # Events -----------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        """Register a callback invoked synchronously with every TableEvent."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self._listeners.remove(listener)

    def _emit(self, event: TableEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    # Seating ----------------------------------------------------------

    def add_player(self, player_id: str, name: Optional[str] = None, stack: int = 0) -> Player:
        """
        Seat a new player in the next free seat.

        Raises:
            SeatingError: Table full, hand in progress, duplicate id or a
                negative stack.
        """
        if self.is_hand_running():
            raise SeatingError("Cannot add a player during a hand")
        if len(self.players) >= self.config.max_players:
            raise SeatingError(f"Table is full ({self.config.max_players} seats)")
        if self.get_player(player_id) is not None:
            raise SeatingError(f"Player {player_id} is already seated")
        if stack < 0:
            raise SeatingError("Stack cannot be negative")

        player = Player(player_id=player_id, name=name or player_id, stack=stack,
                        seat=len(self.players))
        self.players.append(player)
        logger.info(f"Seated {player.name} ({player_id}) at seat {player.seat} with {stack}")
        return player

    def remove_player(self, player_id: str) -> Player:
        """
        Remove a player between hands.

        Raises:
            SeatingError: Hand in progress or unknown player.
        """
        if self.is_hand_running():
            raise SeatingError("Cannot remove a player during a hand")
        player = self.get_player(player_id)
        if player is None:
            raise SeatingError(f"Player {player_id} is not seated")

        idx = self.players.index(player)
        self.players.pop(idx)
        for seat, p in enumerate(self.players):
            p.seat = seat

        # Keep the button where it was relative to the remaining seats
        if self.dealer_seat is not None:
            if not self.players:
                self.dealer_seat = None
            elif idx < self.dealer_seat:
                self.dealer_seat -= 1
            elif idx == self.dealer_seat:
                self.dealer_seat = (idx - 1) % len(self.players)
        return player

    # Hand lifecycle ---------------------------------------------------

    def start_hand(self, deck: Optional[Sequence[Card]] = None) -> HandStarted:
        """
        Start a new hand.

        Args:
            deck: Optional pre-arranged card order (top first) instead of a
                freshly shuffled deck

        Returns:
            The HandStarted event (also sent to subscribers)

        Raises:
            IllegalAction: A hand is already in progress.
            InsufficientPlayers: Fewer than 2 players have chips.
            InsufficientCards: The supplied deck cannot cover a full hand.
        """
        if self.is_hand_running():
            raise IllegalAction("A hand is already in progress")
        funded = [p for p in self.players if p.stack > 0]
        if len(funded) < 2:
            raise InsufficientPlayers(
                f"Need at least 2 players with chips, have {len(funded)}"
            )
        new_deck = None
        if deck is not None:
            # Hole cards, then a burn before each street
            needed = HOLE_CARDS * len(funded) + sum(count + 1 for _, count in NEXT_STREET.values())
            if len(deck) < needed:
                raise InsufficientCards(f"Deck has {len(deck)} cards, a hand needs {needed}")
            new_deck = Deck(cards=deck)

        self.hand_number += 1
        self.hand_seed = self._rng.getrandbits(32)
        logger.info(f"Starting hand #{self.hand_number} (seed {self.hand_seed})")

        # Reset for new hand
        if new_deck is None:
            new_deck = Deck(rng=random.Random(self.hand_seed))
        self.deck = new_deck
        self.community_cards = []
        self.pot = 0
        self.side_pots = []
        self.current_bet = 0
        self.min_raise = self.big_blind
        self.action_log = []

        for player in self.players:
            player.reset_for_new_hand()

        self._move_dealer_button()
        antes = self._post_antes()
        self._post_blinds()
        self._blinds["antes"] = antes
        self._deal_hole_cards()

        self.stage = Stage.PREFLOP
        self.last_aggressor = self.big_blind_seat

        event = HandStarted(
            hand_number=self.hand_number,
            dealer_seat=self.dealer_seat,
            players=[
                {
                    "id": p.player_id,
                    "name": p.name,
                    "seat": p.seat,
                    "stack": p.stack,
                    "hole_cards": format_cards(p.hole_cards),
                }
                for p in self.players if p.is_active
            ],
            small_blind=dict(self._blinds["small_blind"]),
            big_blind=dict(self._blinds["big_blind"]),
            antes=dict(antes),
            pot=self.pot,
        )
        self._emit(event)

        if self._is_betting_round_complete():
            # Blinds put everyone but at most one player all-in
            self._end_betting_round()
        else:
            self.current_seat = self._next_to_act(self.big_blind_seat)
        return event

    def _move_dealer_button(self) -> None:
        """Move the button to the next active seat (first active seat on hand one)."""
        start = -1 if self.dealer_seat is None else self.dealer_seat
        self.dealer_seat = next_eligible_seat(self.players, start, lambda p: p.is_active)

        active_seats = [i for i, p in enumerate(self.players) if p.is_active]
        self.small_blind_seat, self.big_blind_seat = get_blind_positions(
            active_seats, self.dealer_seat
        )

    def _post_antes(self) -> Dict[str, int]:
        """Antes go to the pot but not toward the street bet."""
        antes: Dict[str, int] = {}
        if self.ante <= 0:
            return antes
        for player in self.players:
            if player.is_active:
                paid = player.commit(self.ante, to_street=False)
                self.pot += paid
                antes[player.player_id] = paid
        return antes

    def _post_blinds(self) -> None:
        """Post small and big blinds, each capped at the poster's stack."""
        sb_player = self.players[self.small_blind_seat]
        bb_player = self.players[self.big_blind_seat]

        sb_amount = sb_player.commit(self.small_blind)
        bb_amount = bb_player.commit(self.big_blind)
        self.pot += sb_amount + bb_amount

        self.current_bet = max(p.current_bet for p in self.players)
        self._blinds = {
            "small_blind": {"player_id": sb_player.player_id, "amount": sb_amount},
            "big_blind": {"player_id": bb_player.player_id, "amount": bb_amount},
        }
        logger.debug(f"Blinds posted: SB={sb_amount} BB={bb_amount}")

    def _deal_hole_cards(self) -> None:
        """Deal 2 hole cards to each active player, one at a time from left of the button."""
        order = [p for p in self._seats_from_button() if p.is_active]
        for _ in range(HOLE_CARDS):
            for player in order:
                player.hole_cards.append(self.deck.deal_one())

    def _seats_from_button(self) -> List[Player]:
        """Players in clockwise order, starting left of the button."""
        start = self.dealer_seat + 1
        return self.players[start:] + self.players[:start]

    # Legality ---------------------------------------------------------

    def legal_actions(self, player_id: Optional[str] = None) -> LegalActions:
        """
        Legal actions for the player to act.

        Raises:
            IllegalAction: No hand in progress, or player_id is not the actor.
        """
        player = self._require_actor(player_id)
        owed = max(self.current_bet - player.current_bet, 0)

        actions = [ActionType.FOLD]
        actions.append(ActionType.CHECK if owed == 0 else ActionType.CALL)

        min_raise = max_raise = 0
        # A short all-in does not re-open raising for players who already acted
        reopened = not player.has_acted
        if player.stack > owed and reopened:
            actions.append(ActionType.RAISE)
            max_raise = player.stack - owed
            min_raise = min(self.min_raise, max_raise)
        if player.stack > 0 and (reopened or player.stack <= owed):
            actions.append(ActionType.ALL_IN)

        return LegalActions(
            player_id=player.player_id,
            actions=actions,
            to_call=min(owed, player.stack),
            min_raise=min_raise,
            max_raise=max_raise,
            stack=player.stack,
            pot=self.pot,
        )

    def _require_actor(self, player_id: Optional[str]) -> Player:
        if self.stage not in BETTING_STAGES:
            raise IllegalAction("No hand in progress")
        actor = self.current_player
        if actor is None:
            raise IllegalAction("No player to act")
        if player_id is not None and actor.player_id != player_id:
            raise IllegalAction(f"Not {player_id}'s turn (waiting on {actor.player_id})")
        return actor

    # Actions ----------------------------------------------------------

    def apply_action(
        self,
        player_id: str,
        action_type: Union[ActionType, str],
        amount: int = 0,
    ) -> ActionResult:
        """
        Apply the current actor's action.

        Args:
            player_id: Must be the player whose turn it is
            action_type: FOLD, CHECK, CALL, RAISE or ALL_IN
            amount: RAISE increment above the call (ignored otherwise)

        Returns:
            ActionResult with the logged record and the resulting stage

        Raises:
            IllegalAction: The action is not legal right now. Nothing is
                mutated in that case.
        """
        player = self._require_actor(player_id)
        if not isinstance(action_type, ActionType):
            try:
                action_type = ActionType(str(action_type).upper())
            except ValueError:
                raise IllegalAction(f"Unknown action: {action_type}") from None
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise IllegalAction(f"Amount must be a whole number of chips, got {amount!r}")

        seat = self.current_seat
        stage = self.stage
        committed = self._execute_action(player, seat, action_type, amount)

        record = ActionRecord(player.player_id, action_type, committed, stage)
        self.action_log.append(record)
        pot_after = self.pot
        logger.debug(f"[{stage.name}] {player.player_id}: {action_type.value} {committed}")
        self._emit(ActionApplied(
            player_id=player.player_id,
            action=action_type.value,
            amount=committed,
            pot=pot_after,
            stage=stage.name,
        ))

        self._advance()

        return ActionResult(
            record=record,
            pot=pot_after,
            stage=self.stage,
            hand_complete=self.stage == Stage.COMPLETE,
            message=f"{player.name}: {action_type.value}" + (f" {committed}" if committed else ""),
        )

    def _execute_action(
        self,
        player: Player,
        seat: int,
        action_type: ActionType,
        amount: int,
    ) -> int:
        """Validate, then apply. Returns the chips committed."""
        owed = self.current_bet - player.current_bet

        if action_type == ActionType.FOLD:
            player.fold()
            return 0

        if action_type == ActionType.CHECK:
            if owed > 0:
                raise IllegalAction(f"Cannot check, must call {owed}")
            player.has_acted = True
            return 0

        if action_type == ActionType.CALL:
            if owed <= 0:
                raise IllegalAction("Nothing to call, use CHECK")
            committed = player.commit(owed)

        elif action_type == ActionType.RAISE:
            if player.stack <= owed:
                raise IllegalAction("Not enough chips to raise, use CALL or ALL_IN")
            if player.has_acted:
                raise IllegalAction("Betting was not re-opened by a full raise, use CALL or FOLD")
            if amount <= 0:
                raise IllegalAction(f"Raise increment must be positive, got {amount}")
            total = owed + amount
            if total > player.stack:
                raise IllegalAction(
                    f"Cannot commit {total}, only {player.stack} in stack"
                )
            if amount < self.min_raise and total < player.stack:
                raise IllegalAction(f"Minimum raise is {self.min_raise}, got {amount}")
            committed = player.commit(total)
            self._register_bet(player, seat)

        elif action_type == ActionType.ALL_IN:
            if player.stack == 0:
                raise IllegalAction("No chips left to go all-in")
            if player.has_acted and player.stack > owed:
                raise IllegalAction("Betting was not re-opened by a full raise, use CALL or FOLD")
            committed = player.commit(player.stack)
            self._register_bet(player, seat)

        else:
            raise IllegalAction(f"Unknown action: {action_type}")

        self.pot += committed
        player.has_acted = True
        return committed

    def _register_bet(self, player: Player, seat: int) -> None:
        """Update the table bet after a raise or all-in."""
        if player.current_bet <= self.current_bet:
            return  # Call for less or equal

        increment = player.current_bet - self.current_bet
        if increment >= self.min_raise:
            # Full raise re-opens the action
            self.min_raise = increment
            self.last_aggressor = seat
            for other in self.players:
                if other is not player:
                    other.has_acted = False
        self.current_bet = player.current_bet

    # Flow -------------------------------------------------------------

    def _advance(self) -> None:
        """Close the hand, close the street or pass the turn."""
        in_hand = [p for p in self.players if p.is_in_hand]
        if len(in_hand) == 1:
            self._award_uncontested(in_hand[0])
            return

        if self._is_betting_round_complete():
            self._end_betting_round()
            return

        self.current_seat = self._next_to_act(self.current_seat)

    def _needs_to_act(self, player: Player) -> bool:
        return player.can_act and (
            not player.has_acted or player.current_bet < self.current_bet
        )

    def _next_to_act(self, from_seat: int) -> Optional[int]:
        return next_eligible_seat(self.players, from_seat, self._needs_to_act)

    def _is_betting_round_complete(self) -> bool:
        """
        Every player who can still act has acted since the last full raise
        and matched the bet. A lone player able to act who owes nothing has
        nobody left to bet against.
        """
        actors = [p for p in self.players if p.can_act]
        if not actors:
            return True
        if len(actors) == 1 and actors[0].current_bet >= self.current_bet:
            return True
        return not any(self._needs_to_act(p) for p in actors)

    def _end_betting_round(self) -> None:
        """Advance to the next street, run the board out, or go to showdown."""
        if self.stage == Stage.RIVER:
            self._showdown()
            return

        actors = [p for p in self.players if p.can_act]
        if len(actors) <= 1:
            # No more betting possible
            while self.stage != Stage.RIVER:
                self._deal_next_street()
            self._showdown()
            return

        self._deal_next_street()
        self.current_seat = next_eligible_seat(
            self.players, self.dealer_seat, lambda p: p.can_act
        )

    def _deal_next_street(self) -> None:
        """Reset street betting, burn one card and deal the next street."""
        next_stage, count = NEXT_STREET[self.stage]

        for player in self.players:
            player.reset_for_new_street()
        self.current_bet = 0
        self.min_raise = self.big_blind
        self.last_aggressor = None

        self.deck.burn()
        new_cards = self.deck.deal(count)
        self.community_cards.extend(new_cards)
        self.stage = next_stage

        logger.debug(f"{next_stage.name}: {' '.join(format_cards(self.community_cards))}")
        self._emit(StreetDealt(
            stage=next_stage.name,
            new_cards=format_cards(new_cards),
            community_cards=format_cards(self.community_cards),
            pot=self.pot,
        ))

    # Settlement -------------------------------------------------------

    def _award_uncontested(self, winner: Player) -> None:
        """Everybody else folded: the last player takes the whole pot."""
        pot = self.pot
        pots = [PotResult(amount=pot, eligible=[winner.player_id], winners=[winner.player_id])]
        self._settle(
            winners=[winner.player_id],
            pots=pots,
            payouts={winner.player_id: pot},
            evaluated=None,
        )

    def _showdown(self) -> None:
        """Evaluate every live hand and settle each pot."""
        self.stage = Stage.SHOWDOWN
        self.current_seat = None

        live = [p for p in self.players if p.is_in_hand]
        position = {p.player_id: i for i, p in enumerate(self._seats_from_button())}
        ranked = rank_many([(p.player_id, p.hole_cards) for p in live], self.community_cards)
        evaluations = dict(ranked.ranked)

        contributions = {p.player_id: p.total_bet for p in self.players if p.total_bet > 0}
        tiers = calculate_side_pots(contributions, [p.player_id for p in live])

        pots: List[PotResult] = []
        payouts: Dict[str, int] = {}
        winners: List[str] = []
        for amount, eligible in tiers:
            best = max(evaluations[pid] for pid in eligible)
            pot_winners = [pid for pid in eligible if evaluations[pid] == best]
            pots.append(PotResult(amount=amount, eligible=eligible, winners=pot_winners))
            # Odd chip to the first winner left of the button
            for pid, won in split_pot(amount, sorted(pot_winners, key=position.get)).items():
                payouts[pid] = payouts.get(pid, 0) + won
            if len(eligible) > 1:
                winners.extend(pid for pid in pot_winners if pid not in winners)

        seat_of = {p.player_id: p.seat for p in self.players}
        winners.sort(key=seat_of.get)

        evaluated = [
            {"player_id": pid, **evaluation.to_dict()}
            for pid, evaluation in ranked.ranked
        ]
        self._settle(winners=winners, pots=pots, payouts=payouts, evaluated=evaluated)

    def _settle(
        self,
        winners: List[str],
        pots: List[PotResult],
        payouts: Dict[str, int],
        evaluated: Optional[List[Dict[str, Any]]],
    ) -> None:
        """Pay out, record the hand history and complete the hand."""
        final_pot = self.pot
        for pid, amount in payouts.items():
            self.get_player(pid).stack += amount

        history = HandHistory(
            hand_number=self.hand_number,
            seed=self.hand_seed,
            dealer_seat=self.dealer_seat,
            blinds={
                "small_blind": dict(self._blinds["small_blind"]),
                "big_blind": dict(self._blinds["big_blind"]),
                "antes": dict(self._blinds["antes"]),
            },
            winners=list(winners),
            pot=final_pot,
            pots=pots,
            payouts=dict(payouts),
            community_cards=format_cards(self.community_cards),
            players=[
                PlayerSnapshot(
                    player_id=p.player_id,
                    name=p.name,
                    seat=p.seat,
                    stack=p.stack,
                    hole_cards=format_cards(p.hole_cards),
                    folded=p.is_folded,
                    total_bet=p.total_bet,
                )
                for p in self.players
            ],
            evaluated=evaluated,
            actions=list(self.action_log),
        )
        self.hand_history.append(history)
        self.side_pots = pots

        self.pot = 0
        self.current_bet = 0
        self.current_seat = None
        self.last_aggressor = None
        for player in self.players:
            player.current_bet = 0
        self.stage = Stage.COMPLETE

        logger.info(
            f"Hand #{self.hand_number} complete: pot {final_pot} to {', '.join(winners)}"
        )
        self._emit(HandEnded(history=history))

    # Views ------------------------------------------------------------

    def get_view(self, viewer_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Redacted table state for one viewer.

        Other players' hole cards are replaced with placeholders until the
        showdown; from then on every dealt hand is shown.
        """
        reveal = self.stage in (Stage.SHOWDOWN, Stage.COMPLETE)
        current = self.current_player
        return {
            "hand_number": self.hand_number,
            "stage": self.stage.name,
            "pot": self.pot,
            "current_bet": self.current_bet,
            "min_raise": self.min_raise,
            "small_blind": self.small_blind,
            "big_blind": self.big_blind,
            "ante": self.ante,
            "community_cards": format_cards(self.community_cards),
            "dealer_seat": self.dealer_seat,
            "small_blind_seat": self.small_blind_seat,
            "big_blind_seat": self.big_blind_seat,
            "current_player": current.player_id if current else None,
            "viewer": viewer_id,
            "players": [
                p.to_dict(hide_cards=not (reveal or p.player_id == viewer_id))
                for p in self.players
            ],
        }

    def __repr__(self) -> str:
        return (
            f"Table(players={self.num_players}, hand={self.hand_number}, "
            f"stage={self.stage.name}, pot={self.pot})"
        )
