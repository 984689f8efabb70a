"""
Tests for the pure rule helpers: seat walking, blind positions and pot math.
"""

import pytest
from pokerarena.core.rules import (
    TableConfig, calculate_side_pots, get_blind_positions, next_eligible_seat,
    split_pot,
)


class TestNextEligibleSeat:
    """Tests for the clockwise seat walker."""

    def test_next_seat(self):
        assert next_eligible_seat([True, True, True], 0, bool) == 1

    def test_wraps_around(self):
        assert next_eligible_seat([True, True, True], 2, bool) == 0

    def test_skips_ineligible(self):
        seats = [True, False, False, True]
        assert next_eligible_seat(seats, 0, bool) == 3

    def test_from_index_checked_last(self):
        """Only the starting seat qualifies: found after a full lap."""
        seats = [False, True, False]
        assert next_eligible_seat(seats, 1, bool) == 1

    def test_none_eligible(self):
        assert next_eligible_seat([False, False, False], 0, bool) is None

    def test_start_before_first_seat(self):
        assert next_eligible_seat([True, True], -1, bool) == 0


class TestBlindPositions:
    """Tests for blind seat calculation."""

    def test_heads_up_dealer_posts_small_blind(self):
        assert get_blind_positions([0, 1], 0) == (0, 1)
        assert get_blind_positions([0, 1], 1) == (1, 0)

    def test_three_handed(self):
        assert get_blind_positions([0, 1, 2], 0) == (1, 2)
        assert get_blind_positions([0, 1, 2], 2) == (0, 1)

    def test_skips_empty_seats(self):
        assert get_blind_positions([0, 2, 5], 5) == (0, 2)

    def test_needs_two_players(self):
        with pytest.raises(ValueError):
            get_blind_positions([3], 3)


class TestSidePots:
    """Tests for main/side pot tiers."""

    def test_equal_contributions_single_pot(self):
        pots = calculate_side_pots({"a": 100, "b": 100, "c": 100}, ["a", "b", "c"])
        assert pots == [(300, ["a", "b", "c"])]

    def test_short_all_in_creates_side_pot(self):
        """A(100) all-in, B and C put in 500: main 300, side 800."""
        pots = calculate_side_pots({"a": 100, "b": 500, "c": 500}, ["a", "b", "c"])
        assert pots == [(300, ["a", "b", "c"]), (800, ["b", "c"])]

    def test_three_levels(self):
        pots = calculate_side_pots({"a": 50, "b": 150, "c": 300, "d": 300}, ["a", "b", "c", "d"])
        assert pots == [
            (200, ["a", "b", "c", "d"]),
            (300, ["b", "c", "d"]),
            (300, ["c", "d"]),
        ]

    def test_folded_chips_fill_tiers(self):
        """A folded player's chips count, but they are never eligible."""
        pots = calculate_side_pots({"a": 100, "b": 60, "c": 100}, ["a", "c"])
        assert pots == [(260, ["a", "c"])]

    def test_folded_player_put_in_more(self):
        pots = calculate_side_pots({"a": 40, "b": 100}, ["a"])
        assert pots == [(140, ["a"])]

    def test_uncalled_excess_is_own_tier(self):
        pots = calculate_side_pots({"a": 5, "b": 10}, ["a", "b"])
        assert pots == [(10, ["a", "b"]), (5, ["b"])]

    def test_chips_conserved(self):
        contributions = {"a": 35, "b": 120, "c": 77, "d": 120, "e": 10}
        pots = calculate_side_pots(contributions, ["a", "b", "c", "d"])
        assert sum(amount for amount, _ in pots) == sum(contributions.values())


class TestSplitPot:
    """Tests for dividing a pot between winners."""

    def test_single_winner(self):
        assert split_pot(300, ["a"]) == {"a": 300}

    def test_even_split(self):
        assert split_pot(300, ["a", "b"]) == {"a": 150, "b": 150}

    def test_odd_chip_to_first(self):
        assert split_pot(25, ["b", "a"]) == {"b": 13, "a": 12}
        assert split_pot(100, ["a", "b", "c"]) == {"a": 34, "b": 33, "c": 33}


class TestTableConfig:
    """Tests for table configuration validation."""

    def test_defaults(self):
        config = TableConfig()
        assert config.small_blind == 10
        assert config.big_blind == 20
        assert config.ante == 0

    @pytest.mark.parametrize("kwargs", [
        {"big_blind": 0},
        {"small_blind": 30, "big_blind": 20},
        {"ante": -1},
        {"max_players": 1},
        {"max_players": 11},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            TableConfig(**kwargs)
