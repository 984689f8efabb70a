"""
PokerArena Core - Pure Python Texas Hold'em Rules Engine

This module contains all game logic without any network dependencies.
"""

from pokerarena.core.errors import (
    PokerError, IllegalAction, InsufficientCards, InvalidCardNotation,
    InsufficientPlayers, SeatingError,
)
from pokerarena.core.card import (
    Card, Deck, Rank, Suit, build_deck, shuffle_deck, deal,
    parse_card, parse_cards, format_card,
)
from pokerarena.core.hand import (
    HandRank, HandEvaluation, RankedHands, evaluate_hand, score_five,
    compare_hands, rank_many,
)
from pokerarena.core.rules import ActionType, PlayerState, Stage, TableConfig, next_eligible_seat
from pokerarena.core.actions import Action, ActionRecord, ActionResult, LegalActions
from pokerarena.core.history import (
    HandHistory, TableEvent, HandStarted, StreetDealt, ActionApplied, HandEnded,
)
from pokerarena.core.player import Player
from pokerarena.core.table import Table

__all__ = [
    "PokerError",
    "IllegalAction",
    "InsufficientCards",
    "InvalidCardNotation",
    "InsufficientPlayers",
    "SeatingError",
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "build_deck",
    "shuffle_deck",
    "deal",
    "parse_card",
    "parse_cards",
    "format_card",
    "HandRank",
    "HandEvaluation",
    "RankedHands",
    "evaluate_hand",
    "score_five",
    "compare_hands",
    "rank_many",
    "ActionType",
    "PlayerState",
    "Stage",
    "TableConfig",
    "next_eligible_seat",
    "Action",
    "ActionRecord",
    "ActionResult",
    "LegalActions",
    "HandHistory",
    "TableEvent",
    "HandStarted",
    "StreetDealt",
    "ActionApplied",
    "HandEnded",
    "Player",
    "Table",
]
