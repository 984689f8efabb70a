"""
Exception taxonomy for the poker engine.

Every failure raised by the core is local and synchronous: the operation is
rejected before any table state is mutated, so the caller can inspect the
error and retry with a corrected input.
"""


class PokerError(Exception):
    """Base class for all engine errors."""


class IllegalAction(PokerError, ValueError):
    """An action violates the current legality (wrong turn, under-raise, ...)."""


class InsufficientCards(PokerError, ValueError):
    """Not enough cards to deal or to evaluate a hand."""


class InvalidCardNotation(PokerError, ValueError):
    """Card text could not be parsed."""


class InsufficientPlayers(PokerError):
    """Fewer than two players with chips when starting a hand."""


class SeatingError(PokerError):
    """A player cannot be seated or removed right now."""
