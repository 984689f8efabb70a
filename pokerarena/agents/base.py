"""
Base Agent Interface for PokerArena.

This module defines the action-provider capability: anything that can look
at a redacted table view plus the legal-actions descriptor and answer with an
action. The table never asks an agent anything itself; the match runner does,
and coerces a missing or invalid answer into a legal fallback.

Usage:
    class MyAgent(BaseAgent):
        def act(self, view, player_id, legal_actions):
            if legal_actions.allows(ActionType.CHECK):
                return Action(ActionType.CHECK)
            return {"action": "CALL"}
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional, Union

from pokerarena.core.actions import Action, LegalActions
from pokerarena.core.errors import PokerError


class AgentError(PokerError):
    """An agent could not produce an action."""


AgentResponse = Union[Action, Mapping[str, Any]]


class BaseAgent(ABC):
    """
    Abstract base class for poker agents.

    ``act`` may be a plain method or ``async def``; the match runner awaits
    coroutine agents and runs plain ones in a worker thread so both can be
    held to a decision timeout.

    Attributes:
        player_id: Unique identifier for this agent's seat
        name: Human-readable name
    """

    def __init__(self, player_id: str, name: Optional[str] = None):
        self.player_id = player_id
        self.name = name or f"Agent-{player_id}"

    @abstractmethod
    def act(
        self,
        view: Dict[str, Any],
        player_id: str,
        legal_actions: LegalActions,
    ) -> AgentResponse:
        """
        Choose an action.

        Args:
            view: Table state redacted for this player (see Table.get_view)
            player_id: The acting player's id
            legal_actions: What is legal right now. RAISE amounts are the
                increment above the call, within [min_raise, max_raise].

        Returns:
            An Action, or a dict like {"action": "RAISE", "amount": 40}
        """

    def observe(self, event: str, data: Dict[str, Any]) -> None:
        """
        Called with every table event of the match (hand_start, street,
        action, hand_end). Override to keep notes or memory between turns.
        """

    def reset(self) -> None:
        """Reset internal state before a new match."""

    def on_hand_start(self, hand_number: int) -> None:
        """Called when a new hand starts."""

    def on_hand_end(self, history: Dict[str, Any]) -> None:
        """Called with the hand-history record when a hand ends."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.player_id}, {self.name})"
