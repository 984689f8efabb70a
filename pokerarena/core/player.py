"""
Player class for Texas Hold'em.

Manages player state including:
- Stack (chip count)
- Hole cards
- Current bet in the street and total committed in the hand
- Player state (active, folded, all-in, out)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List

from pokerarena.core.card import Card, HIDDEN_CARD, format_cards
from pokerarena.core.rules import PlayerState


@dataclass
class Player:
    """
    A player seated at the table.

    Attributes:
        player_id: Unique identifier for the player
        name: Display name
        stack: Current chip count
        seat: Seat position at the table (0-indexed)
        hole_cards: The player's private cards (0 or 2)
        current_bet: Amount bet in the current street
        total_bet: Total amount committed in the current hand
        state: Current player state
        has_acted: Acted since the last full raise on this street
    """
    player_id: str
    name: str
    stack: int
    seat: int = 0
    hole_cards: List[Card] = field(default_factory=list)
    current_bet: int = 0
    total_bet: int = 0
    state: PlayerState = PlayerState.OUT
    has_acted: bool = False

    def reset_for_new_hand(self) -> None:
        """Reset per-hand fields; players without chips sit the hand out."""
        self.hole_cards = []
        self.current_bet = 0
        self.total_bet = 0
        self.has_acted = False
        self.state = PlayerState.ACTIVE if self.stack > 0 else PlayerState.OUT

    def reset_for_new_street(self) -> None:
        self.current_bet = 0
        self.has_acted = False

    def commit(self, amount: int, to_street: bool = True) -> int:
        """
        Move chips from the stack into the pot.

        Args:
            amount: Chips requested (capped at the stack)
            to_street: Count the chips toward the street bet (antes don't)

        Returns:
            Actual amount committed
        """
        actual = min(max(amount, 0), self.stack)
        self.stack -= actual
        self.total_bet += actual
        if to_street:
            self.current_bet += actual
        if self.stack == 0 and self.state == PlayerState.ACTIVE:
            self.state = PlayerState.ALL_IN
        return actual

    def fold(self) -> None:
        self.state = PlayerState.FOLDED

    @property
    def is_active(self) -> bool:
        """Dealt into the current hand."""
        return self.state != PlayerState.OUT

    @property
    def is_folded(self) -> bool:
        return self.state == PlayerState.FOLDED

    @property
    def is_all_in(self) -> bool:
        return self.state == PlayerState.ALL_IN

    @property
    def is_in_hand(self) -> bool:
        """Still contesting the pot (not folded, not out)."""
        return self.state in (PlayerState.ACTIVE, PlayerState.ALL_IN)

    @property
    def can_act(self) -> bool:
        """Can still take betting actions this hand."""
        return self.state == PlayerState.ACTIVE and self.stack > 0

    def to_dict(self, hide_cards: bool = True) -> Dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        Args:
            hide_cards: Replace dealt hole cards with placeholders
        """
        if not self.hole_cards:
            cards: List[str] = []
        elif hide_cards:
            cards = [HIDDEN_CARD] * len(self.hole_cards)
        else:
            cards = format_cards(self.hole_cards)

        return {
            "id": self.player_id,
            "name": self.name,
            "seat": self.seat,
            "stack": self.stack,
            "current_bet": self.current_bet,
            "total_bet": self.total_bet,
            "state": self.state.name,
            "folded": self.is_folded,
            "all_in": self.is_all_in,
            "active": self.is_active,
            "hole_cards": cards,
        }

    def __repr__(self) -> str:
        return (
            f"Player({self.player_id}, stack={self.stack}, "
            f"bet={self.current_bet}, state={self.state.name})"
        )

    def __str__(self) -> str:
        cards_str = " ".join(str(c) for c in self.hole_cards) if self.hole_cards else "??"
        return f"Player {self.name} [{cards_str}] ${self.stack}"
