"""
Hand Evaluation for Texas Hold'em.

Evaluates 2 hole cards plus up to 5 community cards by scoring every 5-card
subset and keeping the strongest. A hand's strength is the pair
``(category, key)``: the category is one of the ten ``HandRank`` values and
the key is a tuple of ranks that breaks ties inside a category. Comparing two
strengths lexicographically gives the usual poker ordering.

Hand Rankings (best to worst):
1. Royal Flush: A♠ K♠ Q♠ J♠ T♠
2. Straight Flush: 5 consecutive cards of same suit
3. Four of a Kind: 4 cards of same rank
4. Full House: 3 of a kind + pair
5. Flush: 5 cards of same suit
6. Straight: 5 consecutive cards
7. Three of a Kind: 3 cards of same rank
8. Two Pair: 2 different pairs
9. One Pair: 2 cards of same rank
10. High Card: No made hand

Note: Ace can be low in A-2-3-4-5 straight (wheel), which counts as 5-high.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from enum import IntEnum
from functools import total_ordering
from itertools import combinations
from typing import Any, Dict, Hashable, List, Optional, Sequence, Tuple

from pokerarena.core.card import Card, Rank, format_cards
from pokerarena.core.errors import InsufficientCards


class HandRank(IntEnum):
    """Hand categories, higher value = better hand."""
    ROYAL_FLUSH = 10
    STRAIGHT_FLUSH = 9
    FOUR_OF_A_KIND = 8
    FULL_HOUSE = 7
    FLUSH = 6
    STRAIGHT = 5
    THREE_OF_A_KIND = 4
    TWO_PAIR = 3
    ONE_PAIR = 2
    HIGH_CARD = 1


HAND_RANK_NAMES = {
    HandRank.ROYAL_FLUSH: "Royal Flush",
    HandRank.STRAIGHT_FLUSH: "Straight Flush",
    HandRank.FOUR_OF_A_KIND: "Four of a Kind",
    HandRank.FULL_HOUSE: "Full House",
    HandRank.FLUSH: "Flush",
    HandRank.STRAIGHT: "Straight",
    HandRank.THREE_OF_A_KIND: "Three of a Kind",
    HandRank.TWO_PAIR: "Two Pair",
    HandRank.ONE_PAIR: "One Pair",
    HandRank.HIGH_CARD: "High Card",
}

# Multiplicity pattern -> category, for hands that are not straights/flushes
_PATTERNS = {
    (4, 1): HandRank.FOUR_OF_A_KIND,
    (3, 2): HandRank.FULL_HOUSE,
    (3, 1, 1): HandRank.THREE_OF_A_KIND,
    (2, 2, 1): HandRank.TWO_PAIR,
    (2, 1, 1, 1): HandRank.ONE_PAIR,
    (1, 1, 1, 1, 1): HandRank.HIGH_CARD,
}

WHEEL = (Rank.ACE, Rank.FIVE, Rank.FOUR, Rank.THREE, Rank.TWO)

Score = Tuple[HandRank, Tuple[Rank, ...]]


@total_ordering
@dataclass(frozen=True)
class HandEvaluation:
    """
    The best 5-card hand found for a player.

    Attributes:
        category: Hand category
        key: Tie-break ranks, compared lexicographically
        cards: The 5 cards making the hand, strongest group first
    """
    category: HandRank
    key: Tuple[Rank, ...]
    cards: Tuple[Card, ...] = field(compare=False)

    @property
    def strength(self) -> Score:
        return self.category, self.key

    @property
    def name(self) -> str:
        return HAND_RANK_NAMES[self.category]

    @property
    def description(self) -> str:
        return get_hand_description(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HandEvaluation):
            return NotImplemented
        return self.strength == other.strength

    def __lt__(self, other: HandEvaluation) -> bool:
        return self.strength < other.strength

    def __hash__(self) -> int:
        return hash(self.strength)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rank": int(self.category),
            "name": self.name,
            "description": self.description,
            "cards": format_cards(self.cards),
        }


@dataclass
class RankedHands:
    """Result of ranking several players' hands against one board."""
    ranked: List[Tuple[Hashable, HandEvaluation]]
    winners: List[Hashable]

    @property
    def best(self) -> HandEvaluation:
        return self.ranked[0][1]

    def evaluation_of(self, player_id: Hashable) -> Optional[HandEvaluation]:
        for pid, evaluation in self.ranked:
            if pid == player_id:
                return evaluation
        return None


def score_five(cards: Sequence[Card]) -> Score:
    """
    Classify exactly 5 cards.

    Returns:
        Tuple of (category, tie-break key)
    """
    if len(cards) < 5:
        raise InsufficientCards(f"Need exactly 5 cards, got {len(cards)}")
    if len(cards) > 5:
        raise ValueError(f"Need exactly 5 cards, got {len(cards)}")

    ranks = sorted((c.rank for c in cards), reverse=True)
    is_flush = len({c.suit for c in cards}) == 1
    straight_high = _straight_high(ranks)

    if straight_high is not None and is_flush:
        if straight_high == Rank.ACE:
            return HandRank.ROYAL_FLUSH, (straight_high,)
        return HandRank.STRAIGHT_FLUSH, (straight_high,)

    rank_counts = Counter(ranks)
    # Each distinct rank once, by (count desc, rank desc)
    grouped = tuple(sorted(rank_counts, key=lambda r: (rank_counts[r], r), reverse=True))
    pattern = tuple(rank_counts[r] for r in grouped)
    category = _PATTERNS[pattern]

    if category in (HandRank.FOUR_OF_A_KIND, HandRank.FULL_HOUSE):
        return category, grouped
    if is_flush:
        return HandRank.FLUSH, tuple(ranks)
    if straight_high is not None:
        return HandRank.STRAIGHT, (straight_high,)
    return category, grouped


def _straight_high(ranks: List[Rank]) -> Optional[Rank]:
    """High card of a straight for 5 ranks sorted descending, or None."""
    if len(set(ranks)) != 5:
        return None
    if ranks[0] - ranks[4] == 4:
        return ranks[0]
    if tuple(ranks) == WHEEL:
        return Rank.FIVE
    return None


def evaluate_hand(
    hole_cards: Sequence[Card],
    community_cards: Sequence[Card] = (),
) -> HandEvaluation:
    """
    Find the best 5-card hand out of hole + community cards.

    Raises:
        InsufficientCards: If fewer than 5 cards are given in total.
    """
    all_cards = list(hole_cards) + list(community_cards)
    if len(all_cards) < 5:
        raise InsufficientCards(f"Need at least 5 cards to evaluate, got {len(all_cards)}")

    best_score: Optional[Score] = None
    best_cards: Tuple[Card, ...] = ()
    for combo in combinations(all_cards, 5):
        score = score_five(combo)
        if best_score is None or score > best_score:
            best_score = score
            best_cards = combo

    category, key = best_score
    return HandEvaluation(category, key, _order_cards(best_cards, category))


def _order_cards(cards: Sequence[Card], category: HandRank) -> Tuple[Card, ...]:
    """Order the winning cards for display: groups first, wheel ace last."""
    counts = Counter(c.rank for c in cards)
    ordered = sorted(cards, key=lambda c: (counts[c.rank], c.rank), reverse=True)
    if category in (HandRank.STRAIGHT, HandRank.STRAIGHT_FLUSH) and \
            {c.rank for c in cards} == set(WHEEL):
        ordered = ordered[1:] + ordered[:1]
    return tuple(ordered)


def compare_hands(a: HandEvaluation, b: HandEvaluation) -> int:
    """
    Compare two evaluated hands.

    Returns:
        1 if a wins, -1 if b wins, 0 if tie
    """
    if a.strength > b.strength:
        return 1
    if a.strength < b.strength:
        return -1
    return 0


def rank_many(
    entries: Sequence[Tuple[Hashable, Sequence[Card]]],
    community_cards: Sequence[Card],
) -> RankedHands:
    """
    Evaluate several players against the same board.

    Args:
        entries: (player_id, hole_cards) pairs, in seating order
        community_cards: The shared board

    Returns:
        RankedHands with every evaluation sorted best first (ties keep the
        input order) and the ids of all players tied for the best hand.
    """
    if not entries:
        raise ValueError("No hands to rank")

    evaluated = [(pid, evaluate_hand(hole, community_cards)) for pid, hole in entries]
    ranked = sorted(evaluated, key=lambda item: item[1].strength, reverse=True)
    top = ranked[0][1]
    winners = [pid for pid, evaluation in ranked if compare_hands(evaluation, top) == 0]
    return RankedHands(ranked=ranked, winners=winners)


def get_hand_description(evaluation: HandEvaluation) -> str:
    """Get a human-readable description of an evaluated hand."""
    category = evaluation.category
    key = evaluation.key

    if category == HandRank.ROYAL_FLUSH:
        return "Royal Flush"
    elif category == HandRank.STRAIGHT_FLUSH:
        return f"Straight Flush, {_rank_name(key[0])} high"
    elif category == HandRank.FOUR_OF_A_KIND:
        return f"Four of a Kind, {_plural(key[0])}"
    elif category == HandRank.FULL_HOUSE:
        return f"Full House, {_plural(key[0])} full of {_plural(key[1])}"
    elif category == HandRank.FLUSH:
        return f"Flush, {_rank_name(key[0])} high"
    elif category == HandRank.STRAIGHT:
        if key[0] == Rank.FIVE:
            return "Straight, Five high (Wheel)"
        return f"Straight, {_rank_name(key[0])} high"
    elif category == HandRank.THREE_OF_A_KIND:
        return f"Three of a Kind, {_plural(key[0])}"
    elif category == HandRank.TWO_PAIR:
        return f"Two Pair, {_plural(key[0])} and {_plural(key[1])}"
    elif category == HandRank.ONE_PAIR:
        return f"Pair of {_plural(key[0])}"
    return f"High Card, {_rank_name(key[0])}"


_RANK_NAMES = {
    Rank.TWO: "Two", Rank.THREE: "Three", Rank.FOUR: "Four",
    Rank.FIVE: "Five", Rank.SIX: "Six", Rank.SEVEN: "Seven",
    Rank.EIGHT: "Eight", Rank.NINE: "Nine", Rank.TEN: "Ten",
    Rank.JACK: "Jack", Rank.QUEEN: "Queen", Rank.KING: "King",
    Rank.ACE: "Ace",
}


def _rank_name(rank: Rank) -> str:
    return _RANK_NAMES[rank]


def _plural(rank: Rank) -> str:
    return "Sixes" if rank == Rank.SIX else f"{_RANK_NAMES[rank]}s"
