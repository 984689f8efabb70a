"""
Tests for the text-protocol agent base.
"""

import pytest
from pokerarena.agents import AgentError, TextAgent
from pokerarena.core.actions import Action, LegalActions
from pokerarena.core.rules import ActionType


class ScriptedAgent(TextAgent):
    """Replies with canned text, one reply per call."""

    def __init__(self, replies, **kwargs):
        super().__init__("p0", "Scripted", **kwargs)
        self.replies = list(replies)
        self.prompts = []

    def complete(self, prompt):
        self.prompts.append(prompt)
        return self.replies.pop(0)


@pytest.fixture
def facing_bet(heads_up_table):
    heads_up_table.start_hand()
    return heads_up_table.get_view("p0"), heads_up_table.legal_actions("p0")


class TestParseAction:
    """Tests for reading a model reply."""

    LEGAL = LegalActions(
        player_id="p0",
        actions=[ActionType.FOLD, ActionType.CALL, ActionType.RAISE, ActionType.ALL_IN],
        to_call=10, min_raise=20, max_raise=980, stack=990, pot=30,
    )

    def parse(self, reply):
        return ScriptedAgent([]).parse_action(reply, self.LEGAL)

    def test_plain_keywords(self):
        assert self.parse("CALL") == Action(ActionType.CALL)
        assert self.parse("fold") == Action(ActionType.FOLD)

    def test_all_in_spellings(self):
        for reply in ["ALL_IN", "all-in", "All in"]:
            assert self.parse(reply) == Action(ActionType.ALL_IN)

    def test_raise_amount(self):
        assert self.parse("I will RAISE 100") == Action(ActionType.RAISE, 100)

    def test_raise_clamped_to_minimum(self):
        assert self.parse("raise 5") == Action(ActionType.RAISE, 20)

    def test_raise_over_stack_goes_all_in(self):
        assert self.parse("RAISE 5000") == Action(ActionType.ALL_IN)

    def test_illegal_keyword(self):
        with pytest.raises(AgentError):
            self.parse("CHECK")

    def test_nonsense(self):
        with pytest.raises(AgentError):
            self.parse("banana")


class TestTextAgentAct:
    """Tests for prompting and retries."""

    def test_prompt_contents(self, facing_bet):
        view, legal = facing_bet
        agent = ScriptedAgent(["CALL"])
        agent.act(view, "p0", legal)

        prompt = agent.prompts[0]
        own_cards = " ".join(view["players"][0]["hole_cards"])
        assert own_cards in prompt
        assert "Stage: PREFLOP" in prompt
        assert "To call: 10" in prompt
        assert "Dealer (Button)" in prompt
        assert "- CALL (10)" in prompt
        assert "??" not in prompt

    def test_retries_until_valid(self, facing_bet):
        view, legal = facing_bet
        agent = ScriptedAgent(["hmm", "let me think", "CALL"])
        assert agent.act(view, "p0", legal) == Action(ActionType.CALL)
        assert len(agent.prompts) == 3

    def test_gives_up(self, facing_bet):
        view, legal = facing_bet
        agent = ScriptedAgent(["hmm", "no idea"], max_retries=2)
        with pytest.raises(AgentError):
            agent.act(view, "p0", legal)

    def test_invalid_retry_count(self):
        with pytest.raises(ValueError):
            ScriptedAgent([], max_retries=0)

    def test_position_names(self, three_player_table):
        three_player_table.start_hand()
        view = three_player_table.get_view()
        assert TextAgent.describe_position(view, "p0") == "Dealer (Button)"
        assert TextAgent.describe_position(view, "p1") == "Small Blind"
        assert TextAgent.describe_position(view, "p2") == "Big Blind"
        assert TextAgent.describe_position(view, "nobody") == "Unknown"
