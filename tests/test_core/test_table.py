"""
Tests for the Table state machine: hand flow, legality, settlement and views.
"""

import pytest
from pokerarena.core.card import HIDDEN_CARD
from pokerarena.core.errors import IllegalAction, InsufficientCards, InsufficientPlayers, SeatingError
from pokerarena.core.hand import HandRank
from pokerarena.core.rules import ActionType, PlayerState, Stage
from pokerarena.core.table import Table


def check_down(table: Table) -> None:
    """Check (or call) every remaining decision until the hand ends."""
    while table.is_hand_running():
        legal = table.legal_actions()
        action = ActionType.CHECK if legal.allows(ActionType.CHECK) else ActionType.CALL
        table.apply_action(legal.player_id, action)


class TestStartHand:
    """Tests for starting a hand."""

    def test_heads_up_blinds(self, heads_up_table):
        """Dealer posts the small blind and acts first preflop."""
        table = heads_up_table
        table.start_hand()

        assert table.stage == Stage.PREFLOP
        assert table.pot == 30
        assert table.current_bet == 20
        assert table.dealer_seat == 0
        assert table.small_blind_seat == 0
        assert table.big_blind_seat == 1
        assert table.current_player.player_id == "p0"
        assert table.players[0].current_bet == 10
        assert table.players[1].current_bet == 20

    def test_hole_cards_dealt(self, heads_up_table):
        heads_up_table.start_hand()
        for player in heads_up_table.players:
            assert len(player.hole_cards) == 2
        assert heads_up_table.deck.remaining == 48

    def test_blind_capped_at_stack(self, heads_up_table):
        table = heads_up_table
        table.players[1].stack = 15
        table.start_hand()

        assert table.pot == 25
        assert table.players[1].is_all_in
        assert table.legal_actions("p0").to_call == 5

    def test_three_player_positions(self, three_player_table):
        table = three_player_table
        table.start_hand()

        assert table.dealer_seat == 0
        assert table.small_blind_seat == 1
        assert table.big_blind_seat == 2
        assert table.pot == 15
        # First to act is left of the big blind
        assert table.current_player.player_id == "p0"

    def test_button_moves_each_hand(self, heads_up_table):
        table = heads_up_table
        table.start_hand()
        table.apply_action("p0", ActionType.FOLD)

        table.start_hand()
        assert table.hand_number == 2
        assert table.dealer_seat == 1
        assert table.small_blind_seat == 1
        assert table.current_player.player_id == "p1"

    def test_start_while_running(self, heads_up_table):
        heads_up_table.start_hand()
        with pytest.raises(IllegalAction):
            heads_up_table.start_hand()

    def test_short_deck_rejected_before_dealing(self, heads_up_table, stacked_deck):
        table = heads_up_table
        deck = stacked_deck(["AhAd", "KhKd"], "2c 7s 9d Jc 3h")
        with pytest.raises(InsufficientCards):
            table.start_hand(deck[:8])

        assert table.hand_number == 0
        assert table.stage == Stage.IDLE
        assert table.dealer_seat is None
        assert [p.stack for p in table.players] == [1000, 1000]

        # Four hole cards, three burns and the board
        table.start_hand(deck[:12])
        check_down(table)
        assert table.hand_history[-1].community_cards == ["2c", "7s", "9d", "Jc", "3h"]

    def test_not_enough_players(self):
        table = Table()
        table.add_player("p0", stack=1000)
        with pytest.raises(InsufficientPlayers):
            table.start_hand()

        table.add_player("p1", stack=0)
        with pytest.raises(InsufficientPlayers):
            table.start_hand()

    def test_busted_player_sits_out(self, three_player_table):
        table = three_player_table
        table.players[1].stack = 0
        table.start_hand()

        assert table.players[1].state == PlayerState.OUT
        assert table.players[1].hole_cards == []
        assert table.small_blind_seat == 0
        assert table.big_blind_seat == 2
        assert table.current_player.player_id == "p0"


class TestBettingRound:
    """Tests for betting flow and street transitions."""

    def test_round_trip_to_flop(self, three_player_table):
        """Three players at 500, blinds 5/10: call, call, check."""
        table = three_player_table
        table.start_hand()

        table.apply_action("p0", ActionType.CALL)
        table.apply_action("p1", ActionType.CALL)
        table.apply_action("p2", ActionType.CHECK)

        assert table.pot == 30
        assert table.stage == Stage.FLOP
        assert len(table.community_cards) == 3
        assert all(p.current_bet == 0 for p in table.players)
        assert table.current_bet == 0

    def test_big_blind_option(self, three_player_table):
        table = three_player_table
        table.start_hand()
        table.apply_action("p0", ActionType.CALL)
        table.apply_action("p1", ActionType.CALL)

        legal = table.legal_actions()
        assert legal.player_id == "p2"
        assert legal.allows(ActionType.CHECK)
        assert legal.allows(ActionType.RAISE)
        assert not legal.allows(ActionType.CALL)

    def test_postflop_first_actor_left_of_button(self, three_player_table):
        table = three_player_table
        table.start_hand()
        table.apply_action("p0", ActionType.CALL)
        table.apply_action("p1", ActionType.CALL)
        table.apply_action("p2", ActionType.CHECK)

        assert table.current_player.player_id == "p1"

    def test_heads_up_big_blind_acts_first_postflop(self, heads_up_table):
        table = heads_up_table
        table.start_hand()
        table.apply_action("p0", ActionType.CALL)
        table.apply_action("p1", ActionType.CHECK)

        assert table.stage == Stage.FLOP
        assert table.current_player.player_id == "p1"

    def test_streets_in_order(self, heads_up_table):
        table = heads_up_table
        table.start_hand()
        table.apply_action("p0", ActionType.CALL)
        table.apply_action("p1", ActionType.CHECK)

        for stage, cards in [(Stage.TURN, 4), (Stage.RIVER, 5)]:
            table.apply_action("p1", ActionType.CHECK)
            table.apply_action("p0", ActionType.CHECK)
            assert table.stage == stage
            assert len(table.community_cards) == cards

        table.apply_action("p1", ActionType.CHECK)
        table.apply_action("p0", ActionType.CHECK)
        assert table.stage == Stage.COMPLETE
        assert table.hand_history[-1].showdown

    def test_raise_sets_bet_and_min_raise(self, heads_up_table):
        table = heads_up_table
        table.start_hand()
        result = table.apply_action("p0", ActionType.RAISE, 40)

        assert result.amount == 50
        assert table.current_bet == 60
        assert table.min_raise == 40
        assert table.pot == 80

        legal = table.legal_actions()
        assert legal.player_id == "p1"
        assert legal.to_call == 40
        assert legal.min_raise == 40
        assert legal.max_raise == 940

    def test_reraise_gives_action_back(self, heads_up_table):
        table = heads_up_table
        table.start_hand()
        table.apply_action("p0", ActionType.RAISE, 40)
        table.apply_action("p1", ActionType.RAISE, 40)

        assert table.current_bet == 100
        assert table.current_player.player_id == "p0"
        assert table.legal_actions().to_call == 40

    def test_action_result(self, heads_up_table):
        heads_up_table.start_hand()
        result = heads_up_table.apply_action("p0", ActionType.CALL)

        assert result.action_type == ActionType.CALL
        assert result.amount == 10
        assert result.pot == 40
        assert not result.hand_complete
        assert result.message == "Alice: CALL 10"

    def test_action_accepts_strings(self, heads_up_table):
        heads_up_table.start_hand()
        heads_up_table.apply_action("p0", "call")
        assert heads_up_table.current_player.player_id == "p1"

    def test_action_log(self, heads_up_table):
        table = heads_up_table
        table.start_hand()
        table.apply_action("p0", ActionType.CALL)
        table.apply_action("p1", ActionType.CHECK)

        assert [(r.player_id, r.action_type, r.stage) for r in table.action_log] == [
            ("p0", ActionType.CALL, Stage.PREFLOP),
            ("p1", ActionType.CHECK, Stage.PREFLOP),
        ]


class TestIllegalActions:
    """Illegal actions are rejected without changing state."""

    def test_wrong_turn(self, heads_up_table):
        heads_up_table.start_hand()
        with pytest.raises(IllegalAction):
            heads_up_table.apply_action("p1", ActionType.CHECK)

    def test_check_when_owing(self, heads_up_table):
        heads_up_table.start_hand()
        with pytest.raises(IllegalAction):
            heads_up_table.apply_action("p0", ActionType.CHECK)

    def test_call_with_nothing_owed(self, heads_up_table):
        heads_up_table.start_hand()
        heads_up_table.apply_action("p0", ActionType.CALL)
        with pytest.raises(IllegalAction):
            heads_up_table.apply_action("p1", ActionType.CALL)

    def test_raise_below_minimum(self, heads_up_table):
        table = heads_up_table
        table.start_hand()
        with pytest.raises(IllegalAction):
            table.apply_action("p0", ActionType.RAISE, 10)

        assert table.pot == 30
        assert table.players[0].stack == 990
        assert table.current_player.player_id == "p0"
        assert table.action_log == []

    def test_raise_beyond_stack(self, heads_up_table):
        heads_up_table.start_hand()
        with pytest.raises(IllegalAction):
            heads_up_table.apply_action("p0", ActionType.RAISE, 2000)

    def test_zero_raise(self, heads_up_table):
        heads_up_table.start_hand()
        with pytest.raises(IllegalAction):
            heads_up_table.apply_action("p0", ActionType.RAISE, 0)

    def test_amount_must_be_integer(self, heads_up_table):
        table = heads_up_table
        table.start_hand()
        for amount in (20.5, "40", True):
            with pytest.raises(IllegalAction):
                table.apply_action("p0", ActionType.RAISE, amount)

        assert table.pot == 30
        assert table.players[0].stack == 990
        assert table.action_log == []

    def test_unknown_action(self, heads_up_table):
        heads_up_table.start_hand()
        with pytest.raises(IllegalAction):
            heads_up_table.apply_action("p0", "BET", 40)

    def test_no_hand_in_progress(self, heads_up_table):
        with pytest.raises(IllegalAction):
            heads_up_table.legal_actions()
        with pytest.raises(IllegalAction):
            heads_up_table.apply_action("p0", ActionType.CHECK)

    def test_illegal_action_is_value_error(self, heads_up_table):
        heads_up_table.start_hand()
        with pytest.raises(ValueError):
            heads_up_table.apply_action("p0", ActionType.CHECK)


class TestFoldToOne:
    """Folding down to one player ends the hand at once."""

    def test_preflop_fold(self, heads_up_table):
        table = heads_up_table
        table.start_hand()
        result = table.apply_action("p0", ActionType.FOLD)

        assert result.hand_complete
        assert table.stage == Stage.COMPLETE
        assert table.players[0].stack == 990
        assert table.players[1].stack == 1010
        assert table.community_cards == []

        history = table.hand_history[-1]
        assert history.winners == ["p1"]
        assert history.payouts == {"p1": 30}
        assert history.evaluated is None
        assert not history.showdown

    def test_fold_on_flop(self, three_player_table):
        table = three_player_table
        table.start_hand()
        table.apply_action("p0", ActionType.CALL)
        table.apply_action("p1", ActionType.CALL)
        table.apply_action("p2", ActionType.CHECK)

        table.apply_action("p1", ActionType.RAISE, 20)
        table.apply_action("p2", ActionType.FOLD)
        table.apply_action("p0", ActionType.FOLD)

        assert table.stage == Stage.COMPLETE
        assert len(table.community_cards) == 3
        assert [p.stack for p in table.players] == [490, 520, 490]
        assert table.hand_history[-1].pot == 50


class TestShowdown:
    """Tests for showdown settlement."""

    def test_best_hand_wins(self, heads_up_table, stacked_deck):
        table = heads_up_table
        # Dealing starts left of the button: p1 first
        table.start_hand(stacked_deck(["KdKc", "AsAh"], "2c 7d 9h Js 3s"))
        check_down(table)

        assert table.players[0].stack == 1020
        assert table.players[1].stack == 980

        history = table.hand_history[-1]
        assert history.winners == ["p0"]
        assert history.community_cards == ["2c", "7d", "9h", "Js", "3s"]
        assert history.evaluated[0]["player_id"] == "p0"
        assert history.evaluated[0]["rank"] == int(HandRank.ONE_PAIR)
        assert [p.to_dict() for p in history.pots] == [
            {"amount": 40, "eligible": ["p0", "p1"], "winners": ["p0"]}
        ]

    def test_chopped_pot(self, heads_up_table, stacked_deck):
        table = heads_up_table
        table.start_hand(stacked_deck(["2c3d", "2d3c"], "As Ks Qs Js Ts"))
        check_down(table)

        assert [p.stack for p in table.players] == [1000, 1000]
        assert table.hand_history[-1].winners == ["p0", "p1"]

    def test_odd_chip_to_first_seat(self, stacked_deck):
        table = Table(small_blind=5, big_blind=10, ante=1)
        for i in range(3):
            table.add_player(f"p{i}", stack=500)
        table.start_hand(stacked_deck(["2c3d", "2d3c", "4h5h"], "As Ks Qs Js Ts"))

        table.apply_action("p0", ActionType.FOLD)
        check_down(table)

        # 23 chips split between p1 and p2
        assert [p.stack for p in table.players] == [499, 501, 500]

    def test_odd_chip_left_of_button(self, stacked_deck):
        table = Table(small_blind=5, big_blind=10, ante=1)
        for i in range(3):
            table.add_player(f"p{i}", stack=500)
        table.start_hand()
        table.apply_action("p0", ActionType.FOLD)
        table.apply_action("p1", ActionType.FOLD)

        # Hand 2: p1 on the button, p2 small blind, p0 big blind
        before = [p.stack for p in table.players]
        table.start_hand(stacked_deck(["2c3d", "2d3c", "4h5h"], "As Ks Qs Js Ts"))
        assert table.dealer_seat == 1

        table.apply_action("p1", ActionType.FOLD)
        check_down(table)

        # 23 chips chopped, p2 sits first after the button
        after = [p.stack for p in table.players]
        assert [a - b for a, b in zip(after, before)] == [0, -1, 1]
        assert table.hand_history[-1].pots[0].winners == ["p0", "p2"]

    def test_side_pot_settlement(self, stacked_deck):
        """Short stack wins the main pot, second best takes the side pot."""
        table = Table(small_blind=10, big_blind=20)
        table.add_player("p0", stack=100)
        table.add_player("p1", stack=300)
        table.add_player("p2", stack=300)
        table.start_hand(stacked_deck(["KhKd", "QhQd", "AhAd"], "2c 7s 9d Jc 3h"))

        table.apply_action("p0", ActionType.ALL_IN)
        table.apply_action("p1", ActionType.CALL)
        table.apply_action("p2", ActionType.CALL)
        table.apply_action("p1", ActionType.ALL_IN)
        table.apply_action("p2", ActionType.CALL)

        assert table.stage == Stage.COMPLETE
        assert [p.stack for p in table.players] == [300, 400, 0]

        history = table.hand_history[-1]
        assert [(p.amount, p.eligible, p.winners) for p in history.pots] == [
            (300, ["p0", "p1", "p2"], ["p0"]),
            (400, ["p1", "p2"], ["p1"]),
        ]
        assert history.winners == ["p0", "p1"]

    def test_chips_conserved(self, six_player_table):
        table = six_player_table
        total = table.total_chips
        for _ in range(5):
            table.start_hand()
            check_down(table)
            assert table.total_chips == total
            assert sum(p.stack for p in table.players) == total


class TestViews:
    """Tests for redacted views and hand history."""

    def test_other_cards_hidden(self, heads_up_table):
        table = heads_up_table
        table.start_hand()
        view = table.get_view("p0")

        assert view["players"][0]["hole_cards"] == [str(c) for c in table.players[0].hole_cards]
        assert view["players"][1]["hole_cards"] == [HIDDEN_CARD, HIDDEN_CARD]
        assert view["stage"] == "PREFLOP"
        assert view["current_player"] == "p0"
        assert view["pot"] == 30

    def test_spectator_sees_no_cards(self, heads_up_table):
        heads_up_table.start_hand()
        view = heads_up_table.get_view()
        assert all(p["hole_cards"] == [HIDDEN_CARD, HIDDEN_CARD] for p in view["players"])

    def test_cards_revealed_after_showdown(self, heads_up_table, stacked_deck):
        table = heads_up_table
        table.start_hand(stacked_deck(["KdKc", "AsAh"], "2c 7d 9h Js 3s"))
        check_down(table)

        view = table.get_view("p0")
        assert view["players"][1]["hole_cards"] == ["Kd", "Kc"]

    def test_history_to_dict(self, heads_up_table):
        table = heads_up_table
        table.start_hand()
        table.apply_action("p0", ActionType.FOLD)

        data = table.hand_history[-1].to_dict()
        assert data["hand_number"] == 1
        assert data["seed"] == table.hand_seed
        assert data["winners"] == ["p1"]
        assert data["blinds"]["small_blind"] == {"player_id": "p0", "amount": 10}
        assert data["blinds"]["big_blind"] == {"player_id": "p1", "amount": 20}
        assert data["actions"] == [
            {"player_id": "p0", "action": "FOLD", "amount": 0, "stage": "PREFLOP"}
        ]
        assert data["players"][0]["folded"] is True


class TestReproducibility:
    """Seeded tables deal identical hands."""

    def test_same_seed_same_cards(self):
        tables = []
        for _ in range(2):
            table = Table(seed=42)
            table.add_player("a", stack=1000)
            table.add_player("b", stack=1000)
            table.start_hand()
            tables.append(table)

        first, second = tables
        assert first.hand_seed == second.hand_seed
        for p, q in zip(first.players, second.players):
            assert p.hole_cards == q.hole_cards
        assert first.deck.cards == second.deck.cards

    def test_no_duplicate_cards(self, six_player_table):
        table = six_player_table
        table.start_hand()
        check_down(table)

        seen = [c for p in table.players for c in p.hole_cards] + table.community_cards
        assert len(seen) == len(set(seen))
        everything = table.deck.dealt_cards + table.deck.cards
        assert len(everything) == 52
        assert len(set(everything)) == 52


class TestSeating:
    """Tests for adding and removing players."""

    def test_duplicate_id(self, heads_up_table):
        with pytest.raises(SeatingError):
            heads_up_table.add_player("p0", stack=100)

    def test_table_full(self):
        table = Table(max_players=2)
        table.add_player("a", stack=100)
        table.add_player("b", stack=100)
        with pytest.raises(SeatingError):
            table.add_player("c", stack=100)

    def test_no_seating_during_hand(self, heads_up_table):
        heads_up_table.start_hand()
        with pytest.raises(SeatingError):
            heads_up_table.add_player("p2", stack=100)
        with pytest.raises(SeatingError):
            heads_up_table.remove_player("p0")

    def test_negative_stack(self):
        with pytest.raises(SeatingError):
            Table().add_player("a", stack=-1)

    def test_remove_unknown(self, heads_up_table):
        with pytest.raises(SeatingError):
            heads_up_table.remove_player("nobody")

    def test_remove_renumbers_seats(self, three_player_table):
        table = three_player_table
        table.remove_player("p1")
        assert [(p.player_id, p.seat) for p in table.players] == [("p0", 0), ("p2", 1)]


class TestEvents:
    """Tests for the table event stream."""

    def test_fold_events(self, heads_up_table):
        events = []
        heads_up_table.subscribe(events.append)
        heads_up_table.start_hand()
        heads_up_table.apply_action("p0", ActionType.FOLD)

        assert [e.event for e in events] == ["hand_start", "action", "hand_end"]
        assert events[1].to_dict()["action"] == "FOLD"
        assert events[2].to_dict()["winners"] == ["p1"]

    def test_street_events(self, heads_up_table):
        events = []
        heads_up_table.subscribe(events.append)
        heads_up_table.start_hand()
        check_down(heads_up_table)

        streets = [e.to_dict() for e in events if e.event == "street"]
        assert [s["stage"] for s in streets] == ["FLOP", "TURN", "RIVER"]
        assert [len(s["new_cards"]) for s in streets] == [3, 1, 1]

    def test_unsubscribe(self, heads_up_table):
        events = []
        heads_up_table.subscribe(events.append)
        heads_up_table.unsubscribe(events.append)
        heads_up_table.start_hand()
        assert events == []
