"""
Cards and the deck for Texas Hold'em.

Cards are immutable values written in 2-character notation (rank char + suit
char, e.g. "As", "Td", "2c"). The deck is handled functionally: build the
canonical 52 cards, shuffle into a new list with an injected random source,
and deal from the front, getting back the dealt cards and the remainder.

The ``Deck`` class is a small stateful wrapper around those functions that the
table uses for the duration of one hand.
"""

from __future__ import annotations
import random
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Sequence, Tuple

from pokerarena.core.errors import InsufficientCards, InvalidCardNotation


class Suit(IntEnum):
    """Card suits, in canonical deck order."""
    HEARTS = 0    # ♥
    DIAMONDS = 1  # ♦
    CLUBS = 2     # ♣
    SPADES = 3    # ♠


class Rank(IntEnum):
    """Card ranks from 2 (lowest) to Ace (highest)."""
    TWO = 0
    THREE = 1
    FOUR = 2
    FIVE = 3
    SIX = 4
    SEVEN = 5
    EIGHT = 6
    NINE = 7
    TEN = 8
    JACK = 9
    QUEEN = 10
    KING = 11
    ACE = 12


SUIT_SYMBOLS = {
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
    Suit.SPADES: "♠",
}

SUIT_CHARS = {
    Suit.HEARTS: "h",
    Suit.DIAMONDS: "d",
    Suit.CLUBS: "c",
    Suit.SPADES: "s",
}

RANK_CHARS = {
    Rank.TWO: "2",
    Rank.THREE: "3",
    Rank.FOUR: "4",
    Rank.FIVE: "5",
    Rank.SIX: "6",
    Rank.SEVEN: "7",
    Rank.EIGHT: "8",
    Rank.NINE: "9",
    Rank.TEN: "T",
    Rank.JACK: "J",
    Rank.QUEEN: "Q",
    Rank.KING: "K",
    Rank.ACE: "A",
}

# Reverse mappings
CHAR_TO_RANK = {v: k for k, v in RANK_CHARS.items()}
CHAR_TO_SUIT = {v: k for k, v in SUIT_CHARS.items()}

HIDDEN_CARD = "??"
DECK_SIZE = 52


@dataclass(frozen=True)
class Card:
    """
    A playing card.

    Cards can be created from:
    - Rank and Suit enums: Card(Rank.ACE, Suit.SPADES)
    - 2-character notation: Card.from_string("As") or Card.from_string("aS")
    """
    rank: Rank
    suit: Suit

    def __post_init__(self) -> None:
        object.__setattr__(self, "rank", Rank(self.rank))
        object.__setattr__(self, "suit", Suit(self.suit))

    @classmethod
    def from_string(cls, s: str) -> Card:
        """Create a card from 2-character notation (case-insensitive)."""
        return parse_card(s)

    def __str__(self) -> str:
        return f"{RANK_CHARS[self.rank]}{SUIT_CHARS[self.suit]}"

    def __repr__(self) -> str:
        return f"Card({self})"

    @property
    def pretty_str(self) -> str:
        """Pretty string like 'A♠'."""
        return f"{RANK_CHARS[self.rank]}{SUIT_SYMBOLS[self.suit]}"


def parse_card(text: str) -> Card:
    """
    Parse a card from its 2-character notation.

    Raises:
        InvalidCardNotation: On a wrong length or an unknown rank/suit.
    """
    if not isinstance(text, str):
        raise InvalidCardNotation(f"Invalid card: {text!r}")
    s = text.strip()
    if len(s) != 2:
        raise InvalidCardNotation(f"Invalid card: {text!r}")

    rank = CHAR_TO_RANK.get(s[0].upper())
    suit = CHAR_TO_SUIT.get(s[1].lower())
    if rank is None:
        raise InvalidCardNotation(f"Invalid rank in card {text!r}")
    if suit is None:
        raise InvalidCardNotation(f"Invalid suit in card {text!r}")
    return Card(rank, suit)


def format_card(card: Card) -> str:
    """Return the 2-character notation of a card."""
    return str(card)


def format_cards(cards: Sequence[Card]) -> List[str]:
    """Notation for a list of cards."""
    return [format_card(c) for c in cards]


def parse_cards(cards_str: str) -> List[Card]:
    """
    Parse multiple cards from a string.

    Accepts "As Kh Td" (space-separated) or "AsKhTd" (2 chars each).
    """
    cards_str = cards_str.strip()
    if not cards_str:
        return []
    if " " in cards_str:
        return [parse_card(s) for s in cards_str.split()]
    if len(cards_str) % 2:
        raise InvalidCardNotation(f"Cannot split into cards: {cards_str!r}")
    return [parse_card(cards_str[i:i + 2]) for i in range(0, len(cards_str), 2)]


def build_deck() -> List[Card]:
    """Return the 52 cards in canonical order (suit-major, 2..A per suit)."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


def shuffle_deck(deck: Sequence[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """
    Return a uniformly shuffled copy of ``deck``.

    ``random.Random.shuffle`` is a Fisher-Yates shuffle; the input is left
    untouched.
    """
    shuffled = list(deck)
    (rng or random.Random()).shuffle(shuffled)
    return shuffled


def deal(deck: Sequence[Card], n: int) -> Tuple[List[Card], List[Card]]:
    """
    Take the first ``n`` cards of ``deck``.

    Returns:
        Tuple of (dealt cards, remaining deck)

    Raises:
        InsufficientCards: If fewer than ``n`` cards remain.
    """
    if n < 0:
        raise ValueError(f"Cannot deal a negative number of cards: {n}")
    if n > len(deck):
        raise InsufficientCards(f"Cannot deal {n} cards, only {len(deck)} remain")
    return list(deck[:n]), list(deck[n:])


class Deck:
    """
    A deck consumed strictly from the front for the duration of one hand.

    Usage:
        deck = Deck(rng=random.Random(7))
        hole_cards = deck.deal(2)
        deck.burn()
        flop = deck.deal(3)
    """

    def __init__(
        self,
        cards: Optional[Sequence[Card]] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            cards: Explicit card order (used as-is, not shuffled)
            rng: Random source for shuffling a fresh 52-card deck
        """
        if cards is not None:
            if len(set(cards)) != len(cards):
                raise ValueError("Deck contains duplicate cards")
            self._cards: List[Card] = list(cards)
        else:
            self._cards = shuffle_deck(build_deck(), rng)
        self._dealt: List[Card] = []

    def deal(self, n: int = 1) -> List[Card]:
        """Deal n cards from the top of the deck."""
        dealt, self._cards = deal(self._cards, n)
        self._dealt.extend(dealt)
        return dealt

    def deal_one(self) -> Card:
        """Deal a single card."""
        return self.deal(1)[0]

    def burn(self) -> Card:
        """Burn (discard) the top card."""
        return self.deal_one()

    @property
    def remaining(self) -> int:
        """Number of cards remaining in the deck."""
        return len(self._cards)

    @property
    def cards(self) -> List[Card]:
        """Undealt cards, top first."""
        return self._cards.copy()

    @property
    def dealt_cards(self) -> List[Card]:
        """Cards that have been dealt or burned, in order."""
        return self._dealt.copy()

    def __len__(self) -> int:
        return len(self._cards)

    def __repr__(self) -> str:
        return f"Deck({self.remaining} cards remaining)"
