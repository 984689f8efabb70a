"""
Match runner: drives many hands between agents at one table.

The Arena owns the table for the length of a match. For every turn it asks
the acting agent for a decision under a timeout, coerces the answer into a
legal action through the fallback policy, applies it, and re-emits the
table's events to registered handlers (which may be coroutines, e.g. a
WebSocket broadcast).

Usage:
    arena = Arena(MatchConfig(hands_per_match=50, seed=7))
    arena.on("hand_end", lambda data: print(data["winners"]))
    result = asyncio.run(arena.run_match([RandomAgent("a"), CallAgent("b")]))
"""

from __future__ import annotations
import asyncio
import inspect
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from pokerarena.agents.base import BaseAgent
from pokerarena.core.actions import Action, LegalActions
from pokerarena.core.errors import IllegalAction
from pokerarena.core.history import HandHistory, TableEvent
from pokerarena.core.rules import (
    DEFAULT_ANTE, DEFAULT_BIG_BLIND, DEFAULT_BUY_IN, DEFAULT_SMALL_BLIND,
    MAX_PLAYERS, MIN_PLAYERS, TableConfig,
)
from pokerarena.core.table import Table
from pokerarena.match.policy import FallbackPolicy, check_or_fold, coerce_action


logger = logging.getLogger(__name__)

Handler = Callable[[Dict[str, Any]], Any]

# Table events agents get to observe (hand_start carries every hole card)
OBSERVABLE_EVENTS = ("street", "action", "hand_end")


@dataclass
class MatchConfig:
    """Settings for one match."""
    starting_stack: int = DEFAULT_BUY_IN
    small_blind: int = DEFAULT_SMALL_BLIND
    big_blind: int = DEFAULT_BIG_BLIND
    ante: int = DEFAULT_ANTE
    hands_per_match: int = 100
    decision_timeout: Optional[float] = 30.0  # Seconds, None = wait forever
    delay_between_actions: float = 0.0
    seed: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class MatchResult:
    """Outcome of a match."""
    hands_played: int
    final_stacks: Dict[str, int]
    winner: Optional[str]
    histories: List[HandHistory] = field(default_factory=list)
    fallbacks: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hands_played": self.hands_played,
            "final_stacks": dict(self.final_stacks),
            "winner": self.winner,
            "fallbacks": self.fallbacks,
        }


class Arena:
    """
    Runs matches between agents and emits progress events.

    Events: hand_start, street, action, hand_end, agent_error, match_end.
    """

    EVENTS = ("hand_start", "street", "action", "hand_end", "agent_error", "match_end")

    def __init__(
        self,
        config: Optional[MatchConfig] = None,
        fallback: FallbackPolicy = check_or_fold,
    ):
        """
        Args:
            config: Match settings
            fallback: Policy used when an agent times out, fails or answers
                with something illegal
        """
        self.config = config or MatchConfig()
        self.fallback = fallback
        self.table: Optional[Table] = None
        self._handlers: Dict[str, List[Handler]] = {name: [] for name in self.EVENTS}
        self._pending: List[TableEvent] = []
        self._fallbacks = 0

    def on(self, event: str, handler: Handler) -> None:
        """Register a handler (plain function or coroutine function) for an event."""
        if event not in self._handlers:
            raise ValueError(f"Unknown event: {event}")
        self._handlers[event].append(handler)

    async def _dispatch(self, event: str, data: Dict[str, Any]) -> None:
        for handler in self._handlers[event]:
            result = handler(data)
            if inspect.isawaitable(result):
                await result

    async def _flush(self, agents: Sequence[BaseAgent]) -> None:
        """Forward queued table events to handlers and agents."""
        while self._pending:
            event = self._pending.pop(0)
            data = event.to_dict()
            if event.event in OBSERVABLE_EVENTS:
                for agent in agents:
                    agent.observe(event.event, data)
            await self._dispatch(event.event, data)

    # Match ------------------------------------------------------------

    def table_config(self, num_players: int) -> TableConfig:
        """
        Table settings for a match with ``num_players`` seats.

        Raises:
            ValueError: Invalid blinds, ante or seat count.
        """
        return TableConfig(
            small_blind=self.config.small_blind,
            big_blind=self.config.big_blind,
            ante=self.config.ante,
            max_players=max(num_players, MIN_PLAYERS),
        )

    async def run_match(self, agents: Sequence[BaseAgent]) -> MatchResult:
        """
        Play up to ``hands_per_match`` hands.

        Stops early once fewer than two players have chips.

        Raises:
            ValueError: Fewer than 2 or more than 10 agents.
            SeatingError: Two agents share a player id.
        """
        if not MIN_PLAYERS <= len(agents) <= MAX_PLAYERS:
            raise ValueError(f"A match needs {MIN_PLAYERS}-{MAX_PLAYERS} agents, got {len(agents)}")

        config = self.config
        table = Table(self.table_config(len(agents)), seed=config.seed)
        for agent in agents:
            agent.reset()
            table.add_player(agent.player_id, agent.name, config.starting_stack)
        table.subscribe(self._pending.append)
        self.table = table
        self._pending.clear()
        self._fallbacks = 0

        by_id = {agent.player_id: agent for agent in agents}
        logger.info(
            f"Match started: {', '.join(a.name for a in agents)} "
            f"({config.hands_per_match} hands, blinds {config.small_blind}/{config.big_blind})"
        )

        histories: List[HandHistory] = []
        for _ in range(config.hands_per_match):
            if sum(1 for p in table.players if p.stack > 0) < 2:
                break
            histories.append(await self.play_hand(table, by_id))

        final_stacks = {p.player_id: p.stack for p in table.players}
        ranked = sorted(table.players, key=lambda p: p.stack, reverse=True)
        result = MatchResult(
            hands_played=len(histories),
            final_stacks=final_stacks,
            winner=ranked[0].player_id if ranked else None,
            histories=histories,
            fallbacks=self._fallbacks,
        )
        logger.info(f"Match complete after {result.hands_played} hands, winner {result.winner}")
        await self._dispatch("match_end", result.to_dict())
        return result

    async def play_hand(self, table: Table, agents: Dict[str, BaseAgent]) -> HandHistory:
        """Play one hand to completion and return its history."""
        table.start_hand()
        for agent in agents.values():
            agent.on_hand_start(table.hand_number)
        await self._flush(list(agents.values()))

        while table.is_hand_running():
            legal = table.legal_actions()
            agent = agents[legal.player_id]
            action = await self.decide(agent, table.get_view(legal.player_id), legal)

            try:
                table.apply_action(legal.player_id, action.action_type, action.amount)
            except IllegalAction as e:
                logger.warning(f"{agent.name}: {e}; applying fallback")
                self._fallbacks += 1
                action = self.fallback(legal)
                table.apply_action(legal.player_id, action.action_type, action.amount)

            await self._flush(list(agents.values()))
            if self.config.delay_between_actions > 0:
                await asyncio.sleep(self.config.delay_between_actions)

        history = table.hand_history[-1]
        for agent in agents.values():
            agent.on_hand_end(history.to_dict())
        return history

    async def decide(self, agent: BaseAgent, view: Dict[str, Any], legal: LegalActions) -> Action:
        """
        Ask an agent for its action, enforcing the decision timeout.

        Any failure (timeout, exception, unreadable or illegal answer) is
        replaced by a legal action and reported as an agent_error event.
        """
        response: Any = None
        problem: Optional[str] = None
        try:
            if inspect.iscoroutinefunction(agent.act):
                pending = agent.act(view, legal.player_id, legal)
            else:
                pending = asyncio.to_thread(agent.act, view, legal.player_id, legal)
            response = await asyncio.wait_for(pending, timeout=self.config.decision_timeout)
        except asyncio.TimeoutError:
            problem = f"timed out after {self.config.decision_timeout}s"
        except Exception as e:
            problem = f"{type(e).__name__}: {e}"

        action, reason = coerce_action(response, legal, self.fallback)
        problem = problem or reason
        if problem:
            self._fallbacks += 1
            logger.warning(f"{agent.name}: {problem}; playing {action.action_type.value}")
            await self._dispatch("agent_error", {
                "player_id": legal.player_id,
                "error": problem,
                "action": action.to_dict(),
            })
        return action


def run_match_sync(
    agents: Sequence[BaseAgent],
    config: Optional[MatchConfig] = None,
    fallback: FallbackPolicy = check_or_fold,
) -> MatchResult:
    """Run a match to completion from synchronous code."""
    return asyncio.run(Arena(config, fallback).run_match(agents))
