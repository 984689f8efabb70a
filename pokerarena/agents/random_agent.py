"""
Baseline agents.

Simple rule-based providers, useful for testing the engine and as baselines
for evaluating stronger agents.
"""

import random
from typing import Any, Dict, Optional

from pokerarena.agents.base import BaseAgent
from pokerarena.core.actions import Action, LegalActions
from pokerarena.core.rules import ActionType


class RandomAgent(BaseAgent):
    """
    An agent that selects random legal actions.

    The agent has configurable tendencies:
    - fold_probability: How likely to fold when facing a bet
    - raise_probability: How likely to raise vs call/check
    """

    def __init__(
        self,
        player_id: str,
        name: Optional[str] = None,
        fold_probability: float = 0.1,
        raise_probability: float = 0.3,
        seed: Optional[int] = None,
    ):
        """
        Args:
            player_id: Unique identifier
            name: Optional name
            fold_probability: Probability of folding (0-1)
            raise_probability: Probability of raising (0-1)
            seed: Seed for the agent's own random source
        """
        super().__init__(player_id, name or f"Random-{player_id}")
        self.fold_probability = fold_probability
        self.raise_probability = raise_probability
        self._rng = random.Random(seed)

    def act(
        self,
        view: Dict[str, Any],
        player_id: str,
        legal_actions: LegalActions,
    ) -> Action:
        roll = self._rng.random()

        # Never fold for free
        if legal_actions.allows(ActionType.CALL) and roll < self.fold_probability:
            return Action(ActionType.FOLD)

        if legal_actions.allows(ActionType.RAISE) and \
                roll < self.fold_probability + self.raise_probability:
            low, high = legal_actions.min_raise, legal_actions.max_raise
            # Bias towards smaller raises
            amount = min(self._rng.randint(low, high), self._rng.randint(low, high))
            return Action(ActionType.RAISE, amount)

        if legal_actions.allows(ActionType.CHECK):
            return Action(ActionType.CHECK)
        if legal_actions.allows(ActionType.CALL):
            return Action(ActionType.CALL)
        return Action(ActionType.FOLD)


class CallAgent(BaseAgent):
    """An agent that always checks or calls."""

    def __init__(self, player_id: str, name: Optional[str] = None):
        super().__init__(player_id, name or f"Caller-{player_id}")

    def act(self, view, player_id, legal_actions):
        if legal_actions.allows(ActionType.CHECK):
            return Action(ActionType.CHECK)
        if legal_actions.allows(ActionType.CALL):
            return Action(ActionType.CALL)
        return Action(ActionType.FOLD)


class AggressiveAgent(BaseAgent):
    """An agent that raises whenever it can, otherwise calls."""

    def __init__(
        self,
        player_id: str,
        name: Optional[str] = None,
        raise_multiplier: float = 2.0,
    ):
        """
        Args:
            player_id: Unique identifier
            name: Optional name
            raise_multiplier: Raise size as a multiple of the minimum raise
        """
        super().__init__(player_id, name or f"Aggro-{player_id}")
        self.raise_multiplier = raise_multiplier

    def act(self, view, player_id, legal_actions):
        if legal_actions.allows(ActionType.RAISE):
            amount = int(legal_actions.min_raise * self.raise_multiplier)
            amount = max(legal_actions.min_raise, min(amount, legal_actions.max_raise))
            return Action(ActionType.RAISE, amount)
        if legal_actions.allows(ActionType.CHECK):
            return Action(ActionType.CHECK)
        if legal_actions.allows(ActionType.CALL):
            return Action(ActionType.CALL)
        return Action(ActionType.FOLD)


class FoldAgent(BaseAgent):
    """Checks when free, folds to any bet."""

    def __init__(self, player_id: str, name: Optional[str] = None):
        super().__init__(player_id, name or f"Folder-{player_id}")

    def act(self, view, player_id, legal_actions):
        if legal_actions.allows(ActionType.CHECK):
            return Action(ActionType.CHECK)
        return Action(ActionType.FOLD)


BUILTIN_AGENTS = {
    "random": RandomAgent,
    "call": CallAgent,
    "aggressive": AggressiveAgent,
    "fold": FoldAgent,
}


def create_agent(kind: str, player_id: str, name: Optional[str] = None) -> BaseAgent:
    """
    Build one of the baseline agents by name.

    Raises:
        KeyError: Unknown agent kind.
    """
    try:
        agent_cls = BUILTIN_AGENTS[kind]
    except KeyError:
        raise KeyError(f"Unknown agent kind: {kind}") from None
    return agent_cls(player_id, name)
