"""
Action and result types exchanged between the table and action providers.

``LegalActions`` is what a provider receives before deciding; ``Action`` is
what it hands back. RAISE amounts are always the increment above the call,
never the total bet.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Union

from pokerarena.core.rules import ActionType, Stage


@dataclass(frozen=True)
class Action:
    """A chosen action: kind plus amount (RAISE increment, 0 otherwise)."""
    action_type: ActionType
    amount: int = 0

    @classmethod
    def parse(cls, data: Union[Action, Mapping[str, Any]]) -> Action:
        """
        Build an action from a provider's response.

        Accepts an Action or a dict like {"action": "RAISE", "amount": 40}
        ("type" is accepted in place of "action").

        Raises:
            ValueError: Unknown action type or a non-integer amount.
        """
        if isinstance(data, Action):
            return data
        kind = data.get("action", data.get("type"))
        if isinstance(kind, ActionType):
            action_type = kind
        else:
            action_type = ActionType(str(kind).upper())
        amount = data.get("amount") or 0
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise ValueError(f"Amount must be an integer, got {amount!r}")
        return cls(action_type, amount)

    def to_dict(self) -> Dict[str, Any]:
        return {"action": self.action_type.value, "amount": self.amount}


@dataclass
class LegalActions:
    """
    What the acting player may do right now.

    Attributes:
        player_id: The acting player
        actions: Legal action types
        to_call: Chips needed to call (capped at the stack)
        min_raise: Smallest legal RAISE increment (smaller only when all-in)
        max_raise: Largest RAISE increment (the rest of the stack after calling)
        stack: The player's remaining stack
        pot: Chips in the pot
    """
    player_id: str
    actions: List[ActionType]
    to_call: int = 0
    min_raise: int = 0
    max_raise: int = 0
    stack: int = 0
    pot: int = 0

    def allows(self, action_type: ActionType) -> bool:
        return action_type in self.actions

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "actions": [a.value for a in self.actions],
            "to_call": self.to_call,
            "min_raise": self.min_raise,
            "max_raise": self.max_raise,
            "stack": self.stack,
            "pot": self.pot,
        }


@dataclass(frozen=True)
class ActionRecord:
    """One entry of the hand's action log."""
    player_id: str
    action_type: ActionType
    amount: int  # Chips committed by this action
    stage: Stage

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "action": self.action_type.value,
            "amount": self.amount,
            "stage": self.stage.name,
        }


@dataclass
class ActionResult:
    """Outcome of an applied action."""
    record: ActionRecord
    pot: int
    stage: Stage
    hand_complete: bool = False
    message: str = field(default="")

    @property
    def action_type(self) -> ActionType:
        return self.record.action_type

    @property
    def amount(self) -> int:
        return self.record.amount
