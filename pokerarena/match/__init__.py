"""
PokerArena Match - Multi-hand orchestration

Runs agents against each other at one table with decision timeouts and a
fallback policy for failed or illegal answers.
"""

from pokerarena.match.policy import FallbackPolicy, check_or_call, check_or_fold, coerce_action
from pokerarena.match.runner import Arena, MatchConfig, MatchResult, run_match_sync

__all__ = [
    "Arena",
    "MatchConfig",
    "MatchResult",
    "run_match_sync",
    "FallbackPolicy",
    "check_or_fold",
    "check_or_call",
    "coerce_action",
]
