"""
Hand-history records and the driver-facing event stream.

A ``HandHistory`` is appended to the table for every settled hand and is the
only artifact meant to be persisted; its ``to_dict()`` shape is kept stable
for audit and replay. Events are lightweight notifications the table sends to
its subscribers while a hand runs.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional

from pokerarena.core.actions import ActionRecord


@dataclass
class PlayerSnapshot:
    """A player's terminal state for one hand."""
    player_id: str
    name: str
    seat: int
    stack: int
    hole_cards: List[str]
    folded: bool
    total_bet: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.player_id,
            "name": self.name,
            "seat": self.seat,
            "stack": self.stack,
            "hole_cards": list(self.hole_cards),
            "folded": self.folded,
            "total_bet": self.total_bet,
        }


@dataclass
class PotResult:
    """One settled pot (main or side) and who took it."""
    amount: int
    eligible: List[str]
    winners: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "amount": self.amount,
            "eligible": list(self.eligible),
            "winners": list(self.winners),
        }


@dataclass
class HandHistory:
    """Immutable settlement record of one completed hand."""
    hand_number: int
    seed: int
    dealer_seat: int
    blinds: Dict[str, Any]
    winners: List[str]
    pot: int
    pots: List[PotResult]
    payouts: Dict[str, int]
    community_cards: List[str]
    players: List[PlayerSnapshot]
    evaluated: Optional[List[Dict[str, Any]]]
    actions: List[ActionRecord]

    @property
    def showdown(self) -> bool:
        return self.evaluated is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hand_number": self.hand_number,
            "seed": self.seed,
            "dealer_seat": self.dealer_seat,
            "blinds": dict(self.blinds),
            "winners": list(self.winners),
            "pot": self.pot,
            "pots": [p.to_dict() for p in self.pots],
            "payouts": dict(self.payouts),
            "community_cards": list(self.community_cards),
            "players": [p.to_dict() for p in self.players],
            "evaluated": [dict(e) for e in self.evaluated] if self.evaluated is not None else None,
            "actions": [a.to_dict() for a in self.actions],
        }


# ============= Events =============

@dataclass
class TableEvent:
    """Base class for table notifications."""
    event: ClassVar[str] = "event"

    def to_dict(self) -> Dict[str, Any]:
        raise NotImplementedError


@dataclass
class HandStarted(TableEvent):
    event: ClassVar[str] = "hand_start"
    hand_number: int
    dealer_seat: int
    players: List[Dict[str, Any]]
    small_blind: Dict[str, Any]
    big_blind: Dict[str, Any]
    antes: Dict[str, int]
    pot: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hand_number": self.hand_number,
            "dealer_seat": self.dealer_seat,
            "players": self.players,
            "small_blind": self.small_blind,
            "big_blind": self.big_blind,
            "antes": self.antes,
            "pot": self.pot,
        }


@dataclass
class StreetDealt(TableEvent):
    event: ClassVar[str] = "street"
    stage: str
    new_cards: List[str]
    community_cards: List[str]
    pot: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stage": self.stage,
            "new_cards": self.new_cards,
            "community_cards": self.community_cards,
            "pot": self.pot,
        }


@dataclass
class ActionApplied(TableEvent):
    event: ClassVar[str] = "action"
    player_id: str
    action: str
    amount: int
    pot: int
    stage: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "action": self.action,
            "amount": self.amount,
            "pot": self.pot,
            "stage": self.stage,
        }


@dataclass
class HandEnded(TableEvent):
    event: ClassVar[str] = "hand_end"
    history: HandHistory = field(repr=False)

    def to_dict(self) -> Dict[str, Any]:
        return self.history.to_dict()
