"""
PokerArena - No-Limit Texas Hold'em referee for autonomous agents

A Texas Hold'em engine for running matches between decision-making agents:
- Pure Python rules engine and hand evaluator (no external poker dependencies)
- Agent interface with baseline and text-protocol agents
- Async match runner with decision timeouts and fallback actions
- FastAPI + WebSocket server for watching matches

Usage:
    from pokerarena.core import Table, evaluate_hand
    from pokerarena.agents import BaseAgent, RandomAgent
    from pokerarena.match import Arena, MatchConfig
"""

__version__ = "0.1.0"

from pokerarena.core.card import Card, Deck
from pokerarena.core.player import Player
from pokerarena.core.table import Table
from pokerarena.core.hand import HandRank, evaluate_hand

__all__ = [
    "Card",
    "Deck",
    "Player",
    "Table",
    "HandRank",
    "evaluate_hand",
    "__version__",
]
