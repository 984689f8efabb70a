"""
Fallback policy for agent decisions.

The table never substitutes actions on its own. The match runner uses these
helpers to turn whatever an agent returned (or failed to return) into an
action that is legal right now.
"""

from typing import Any, Callable, Optional, Tuple

from pokerarena.core.actions import Action, LegalActions
from pokerarena.core.rules import ActionType

FallbackPolicy = Callable[[LegalActions], Action]


def check_or_fold(legal_actions: LegalActions) -> Action:
    """Check if that is free, otherwise fold."""
    if legal_actions.allows(ActionType.CHECK):
        return Action(ActionType.CHECK)
    return Action(ActionType.FOLD)


def check_or_call(legal_actions: LegalActions) -> Action:
    """Check if possible, otherwise call."""
    if legal_actions.allows(ActionType.CHECK):
        return Action(ActionType.CHECK)
    if legal_actions.allows(ActionType.CALL):
        return Action(ActionType.CALL)
    return Action(ActionType.FOLD)


def coerce_action(
    response: Any,
    legal_actions: LegalActions,
    fallback: FallbackPolicy = check_or_fold,
) -> Tuple[Action, Optional[str]]:
    """
    Turn an agent response into a legal action.

    Returns:
        Tuple of (action, reason) where reason is None when the response was
        used as given and a short explanation when it had to be changed.
    """
    if response is None:
        return fallback(legal_actions), "no action returned"
    try:
        action = Action.parse(response)
    except (AttributeError, TypeError, ValueError) as e:
        return fallback(legal_actions), f"unreadable action: {e}"

    kind = action.action_type

    if kind == ActionType.CALL and legal_actions.allows(ActionType.CHECK):
        return Action(ActionType.CHECK), "nothing to call"

    if kind == ActionType.RAISE and legal_actions.allows(ActionType.RAISE):
        if action.amount >= legal_actions.max_raise:
            if action.amount > legal_actions.max_raise:
                return Action(ActionType.ALL_IN), "raise above stack"
            return Action(ActionType.ALL_IN), None
        if action.amount < legal_actions.min_raise:
            return Action(ActionType.RAISE, legal_actions.min_raise), "raise below minimum"
        return action, None

    if not legal_actions.allows(kind):
        return fallback(legal_actions), f"{kind.value} is not legal"

    if kind != ActionType.RAISE and action.amount:
        return Action(kind), None
    return action, None
