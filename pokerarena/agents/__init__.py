"""
PokerArena Agents - Action Provider Framework

This module provides the base agent interface, baseline agents and a
text-protocol base for language-model players.
"""

from pokerarena.agents.base import AgentError, BaseAgent
from pokerarena.agents.random_agent import (
    AggressiveAgent, BUILTIN_AGENTS, CallAgent, FoldAgent, RandomAgent, create_agent,
)
from pokerarena.agents.text_agent import TextAgent

__all__ = [
    "AgentError",
    "BaseAgent",
    "RandomAgent",
    "CallAgent",
    "AggressiveAgent",
    "FoldAgent",
    "BUILTIN_AGENTS",
    "create_agent",
    "TextAgent",
]
