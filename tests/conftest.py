"""
Pytest configuration and shared fixtures for PokerArena tests.
"""

from typing import List, Sequence

import pytest
from pokerarena.core.card import Card, build_deck, parse_cards
from pokerarena.core.player import Player
from pokerarena.core.table import Table


def make_deck(holes: Sequence[str], board: str = "") -> List[Card]:
    """
    Arrange a deck so a hand deals known cards.

    Args:
        holes: Hole cards per player in dealing order, i.e. starting with the
            first active seat left of the button ("AsKd" or "As Kd")
        board: Up to 5 community cards, flop first

    Burn cards and the rest of the deck are filled from the remaining cards.
    """
    hands = [parse_cards(h) for h in holes]
    board_cards = parse_cards(board)
    used = [c for hand in hands for c in hand] + board_cards
    rest = [c for c in build_deck() if c not in used]

    order = [hand[0] for hand in hands] + [hand[1] for hand in hands]
    burns, rest = rest[:3], rest[3:]
    order += [burns[0]] + board_cards[:3]
    order += [burns[1]] + board_cards[3:4]
    order += [burns[2]] + board_cards[4:5]
    return order + rest


@pytest.fixture
def stacked_deck():
    """Factory for pre-arranged decks (see make_deck)."""
    return make_deck


@pytest.fixture
def sample_player():
    """Create a sample player with 1000 chips."""
    return Player(player_id="test_player", name="Tester", stack=1000, seat=0)


@pytest.fixture
def heads_up_table():
    """Two players with 1000 chips each, blinds 10/20."""
    table = Table(small_blind=10, big_blind=20, seed=42)
    table.add_player("p0", "Alice", 1000)
    table.add_player("p1", "Bob", 1000)
    return table


@pytest.fixture
def three_player_table():
    """Three players with 500 chips each, blinds 5/10."""
    table = Table(small_blind=5, big_blind=10, seed=7)
    for i, name in enumerate(["Alice", "Bob", "Carol"]):
        table.add_player(f"p{i}", name, 500)
    return table


@pytest.fixture
def six_player_table():
    """Six players with 1000 chips each, blinds 10/20."""
    table = Table(small_blind=10, big_blind=20, seed=1)
    for i in range(6):
        table.add_player(f"p{i}", f"Player {i}", 1000)
    return table


@pytest.fixture
def royal_flush_cards():
    """Royal flush in spades."""
    return parse_cards("As Ks Qs Js Ts")


@pytest.fixture
def wheel_cards():
    """A-2-3-4-5 straight."""
    return parse_cards("Ah 2c 3d 4s 5h")
