"""
Text-protocol agent for language-model players.

A ``TextAgent`` turns the redacted table view into a plain-text prompt,
hands it to ``complete`` (implemented by a subclass that talks to a model),
and parses the reply, which must be one of:

    FOLD | CHECK | CALL | RAISE <amount> | ALL_IN

RAISE amounts are the increment above the call. Replies are retried up to
``max_retries`` times; raise sizes are clamped into the legal range.
"""

import logging
import re
from abc import abstractmethod
from typing import Any, Dict, List, Optional

from pokerarena.agents.base import AgentError, BaseAgent
from pokerarena.core.actions import Action, LegalActions
from pokerarena.core.rules import ActionType


logger = logging.getLogger(__name__)

_RAISE_RE = re.compile(r"\bRAISE\s+(\d+)")
_KEYWORDS = (ActionType.ALL_IN, ActionType.FOLD, ActionType.CHECK, ActionType.CALL)


class TextAgent(BaseAgent):
    """
    Base class for agents that answer in text.

    Subclasses implement ``complete(prompt) -> str``.
    """

    def __init__(self, player_id: str, name: Optional[str] = None, max_retries: int = 3):
        super().__init__(player_id, name)
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self.max_retries = max_retries

    @abstractmethod
    def complete(self, prompt: str) -> str:
        """Send the prompt to the model and return its raw reply."""

    def act(
        self,
        view: Dict[str, Any],
        player_id: str,
        legal_actions: LegalActions,
    ) -> Action:
        prompt = self.format_prompt(view, player_id, legal_actions)
        last_error: Optional[Exception] = None

        for attempt in range(1, self.max_retries + 1):
            try:
                reply = self.complete(prompt)
                return self.parse_action(reply, legal_actions)
            except (AgentError, ValueError) as e:
                last_error = e
                logger.warning(f"{self.name}: attempt {attempt} failed: {e}")

        raise AgentError(
            f"{self.name} gave no usable action after {self.max_retries} attempts"
        ) from last_error

    def format_prompt(
        self,
        view: Dict[str, Any],
        player_id: str,
        legal_actions: LegalActions,
    ) -> str:
        """Render the view as the prompt sent to the model."""
        me = next(p for p in view["players"] if p["id"] == player_id)
        opponents = [
            f"{p['name']}: {p['stack']} chips, bet {p['current_bet']}"
            + (" (ALL-IN)" if p["all_in"] else "")
            for p in view["players"]
            if p["id"] != player_id and p["active"] and not p["folded"]
        ]
        board = " ".join(view["community_cards"]) or "(none yet)"
        options = self._describe_options(legal_actions)

        return "\n".join([
            "You are playing No-Limit Texas Hold'em poker.",
            "",
            "=== YOUR CARDS ===",
            " ".join(me["hole_cards"]),
            "",
            "=== COMMUNITY CARDS ===",
            board,
            "",
            "=== GAME STATE ===",
            f"Stage: {view['stage']}",
            f"Pot: {view['pot']}",
            f"To call: {legal_actions.to_call}",
            f"Your chips: {me['stack']}",
            f"Your current bet: {me['current_bet']}",
            f"Your position: {self.describe_position(view, player_id)}",
            "",
            "=== OPPONENTS ===",
            *opponents,
            "",
            "=== ACTION REQUIRED ===",
            "Respond with EXACTLY one of:",
            *options,
            "Respond with ONLY the action, nothing else.",
        ])

    @staticmethod
    def _describe_options(legal_actions: LegalActions) -> List[str]:
        lines = []
        for action_type in legal_actions.actions:
            if action_type == ActionType.RAISE:
                lines.append(
                    f"- RAISE <amount> (amount above the call, "
                    f"{legal_actions.min_raise}-{legal_actions.max_raise})"
                )
            elif action_type == ActionType.CALL:
                lines.append(f"- CALL ({legal_actions.to_call})")
            else:
                lines.append(f"- {action_type.value}")
        return lines

    @staticmethod
    def describe_position(view: Dict[str, Any], player_id: str) -> str:
        """Name the seat relative to the button."""
        seats = [p for p in view["players"] if p["active"]]
        seat_ids = [p["id"] for p in seats]
        if player_id not in seat_ids or view["dealer_seat"] is None:
            return "Unknown"
        if view["players"][view["dealer_seat"]]["id"] == player_id:
            return "Dealer (Button)"
        if view["small_blind_seat"] is not None and \
                view["players"][view["small_blind_seat"]]["id"] == player_id:
            return "Small Blind"
        if view["big_blind_seat"] is not None and \
                view["players"][view["big_blind_seat"]]["id"] == player_id:
            return "Big Blind"
        return "Middle Position"

    def parse_action(self, reply: str, legal_actions: LegalActions) -> Action:
        """
        Parse a reply into a legal action.

        Raises:
            AgentError: The reply names no legal action.
        """
        text = reply.strip().upper().replace("ALL-IN", "ALL_IN").replace("ALL IN", "ALL_IN")

        match = _RAISE_RE.search(text)
        if match and legal_actions.allows(ActionType.RAISE):
            amount = int(match.group(1))
            if amount >= legal_actions.max_raise:
                return Action(ActionType.ALL_IN)
            return Action(ActionType.RAISE, max(amount, legal_actions.min_raise))

        for action_type in _KEYWORDS:
            if re.search(rf"\b{action_type.value}\b", text) and legal_actions.allows(action_type):
                return Action(action_type)

        raise AgentError(f"Could not parse action from: {reply!r}")
