"""
Texas Hold'em Rules and Constants.

Key rules applied by the table:

1. Heads-up (2 players): Dealer posts small blind, non-dealer posts big blind.
   Preflop: Dealer acts first. Postflop: Non-dealer acts first.

2. Minimum raise: A raise must add at least the size of the last full raise
   (the big blind at the start of every street).

3. All-in less than a full raise: the bet goes up, but the minimum raise and
   the last aggressor stay as they were.

4. Side pots: When players are all-in for different amounts, the pot is split
   into tiers, each contested only by the players who paid into it.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Dict, List, Optional, Sequence, Tuple, TypeVar


class Stage(Enum):
    """Stages of a Texas Hold'em hand."""
    IDLE = auto()         # No hand dealt yet
    PREFLOP = auto()      # After hole cards dealt, before flop
    FLOP = auto()         # After 3 community cards
    TURN = auto()         # After 4th community card
    RIVER = auto()        # After 5th community card
    SHOWDOWN = auto()     # Determine winner
    COMPLETE = auto()     # Hand is settled


BETTING_STAGES = (Stage.PREFLOP, Stage.FLOP, Stage.TURN, Stage.RIVER)


class ActionType(Enum):
    """Possible player actions."""
    FOLD = "FOLD"
    CHECK = "CHECK"
    CALL = "CALL"
    RAISE = "RAISE"
    ALL_IN = "ALL_IN"


class PlayerState(Enum):
    """Player states during a hand."""
    ACTIVE = auto()       # Still in the hand, can act
    FOLDED = auto()       # Has folded
    ALL_IN = auto()       # All-in, no more actions
    OUT = auto()          # No chips at hand start, not dealt in


# Default game settings
DEFAULT_SMALL_BLIND = 10
DEFAULT_BIG_BLIND = 20
DEFAULT_ANTE = 0
DEFAULT_BUY_IN = 1000
DEFAULT_MAX_PLAYERS = 9
MIN_PLAYERS = 2
MAX_PLAYERS = 10

# Cards per phase
HOLE_CARDS = 2
FLOP_CARDS = 3
TURN_CARDS = 1
RIVER_CARDS = 1

# Next street and the number of community cards it deals
NEXT_STREET = {
    Stage.PREFLOP: (Stage.FLOP, FLOP_CARDS),
    Stage.FLOP: (Stage.TURN, TURN_CARDS),
    Stage.TURN: (Stage.RIVER, RIVER_CARDS),
}


@dataclass
class TableConfig:
    """Blind structure and seating limits for a table."""
    small_blind: int = DEFAULT_SMALL_BLIND
    big_blind: int = DEFAULT_BIG_BLIND
    ante: int = DEFAULT_ANTE
    max_players: int = DEFAULT_MAX_PLAYERS

    def __post_init__(self) -> None:
        if self.small_blind < 0 or self.big_blind <= 0 or self.ante < 0:
            raise ValueError("Blinds must be positive and ante non-negative")
        if self.small_blind > self.big_blind:
            raise ValueError("Small blind cannot exceed big blind")
        if not MIN_PLAYERS <= self.max_players <= MAX_PLAYERS:
            raise ValueError(f"max_players must be {MIN_PLAYERS}-{MAX_PLAYERS}")


T = TypeVar("T")


def next_eligible_seat(
    seats: Sequence[T],
    from_index: int,
    predicate: Callable[[T], bool],
) -> Optional[int]:
    """
    Walk the seating order clockwise, starting after ``from_index``.

    Returns the first index whose seat satisfies ``predicate``, wrapping
    around, or None after a full lap without a match (``from_index`` itself
    is checked last).
    """
    n = len(seats)
    for step in range(1, n + 1):
        idx = (from_index + step) % n
        if predicate(seats[idx]):
            return idx
    return None


def get_blind_positions(active_seats: Sequence[int], dealer_seat: int) -> Tuple[int, int]:
    """
    Calculate small blind and big blind seats.

    In heads-up play the dealer posts the small blind.

    Args:
        active_seats: Seat indexes dealt into the hand, in seating order
        dealer_seat: Seat holding the button (must be active)

    Returns:
        Tuple of (small_blind_seat, big_blind_seat)
    """
    if len(active_seats) < MIN_PLAYERS:
        raise ValueError("Need at least 2 players")

    pos = active_seats.index(dealer_seat)
    n = len(active_seats)
    if n == 2:
        return dealer_seat, active_seats[(pos + 1) % n]
    return active_seats[(pos + 1) % n], active_seats[(pos + 2) % n]


def calculate_side_pots(
    contributions: Dict[str, int],
    live_players: Sequence[str],
) -> List[Tuple[int, List[str]]]:
    """
    Split the chips committed this hand into main and side pots.

    Tiers are cut at each distinct contribution level of a live (non-folded)
    player. Folded players' chips fill the tiers they reached but they are
    never eligible. Chips above the highest live level (possible only when
    a folded player put in more) join the last tier.

    Args:
        contributions: Chips committed this hand per player id
        live_players: Ids still in the hand, in seating order

    Returns:
        List of (amount, eligible player ids) from main pot upwards
    """
    levels = sorted({contributions.get(pid, 0) for pid in live_players} - {0})
    pots: List[Tuple[int, List[str]]] = []
    prev = 0
    for level in levels:
        amount = sum(
            min(committed, level) - min(committed, prev)
            for committed in contributions.values()
        )
        eligible = [pid for pid in live_players if contributions.get(pid, 0) >= level]
        pots.append((amount, eligible))
        prev = level

    leftover = sum(max(committed - prev, 0) for committed in contributions.values())
    if leftover:
        if pots:
            amount, eligible = pots[-1]
            pots[-1] = (amount + leftover, eligible)
        else:
            pots.append((leftover, list(live_players)))
    return pots


def split_pot(amount: int, winners: Sequence[str]) -> Dict[str, int]:
    """
    Divide a pot evenly by integer division.

    The remainder goes to the first winner listed; callers order winners
    starting left of the button.
    """
    share, remainder = divmod(amount, len(winners))
    payouts = {pid: share for pid in winners}
    payouts[winners[0]] += remainder
    return payouts
