"""
HTTP API Routes for PokerArena.

These routes start matches between built-in agents and query their progress.
Live events are pushed over the WebSocket.
"""

from dataclasses import dataclass
from functools import partial
from typing import Any, Dict, List, Optional
import logging

from fastapi import APIRouter, BackgroundTasks, HTTPException

from pokerarena.agents import BUILTIN_AGENTS, BaseAgent, create_agent
from pokerarena.match.runner import Arena, MatchResult
from pokerarena.server.schemas import (
    AgentInfoSchema, MatchStatusSchema, StartMatchRequest, StartMatchResponse,
)
from pokerarena.server.websocket import manager


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@dataclass
class MatchState:
    """The single match this server runs at a time."""
    arena: Optional[Arena] = None
    result: Optional[MatchResult] = None
    running: bool = False
    error: Optional[str] = None


_match = MatchState()


def reset_match_state() -> None:
    """Forget the last match."""
    global _match
    _match = MatchState()


async def _run_match(arena: Arena, agents: List[BaseAgent]) -> None:
    try:
        _match.result = await arena.run_match(agents)
    except Exception as e:
        logger.error(f"Match failed: {e}")
        _match.error = str(e)
    finally:
        _match.running = False


@router.get("/agents")
async def list_agents() -> List[AgentInfoSchema]:
    """Built-in agent kinds that can be seated."""
    return [
        AgentInfoSchema(kind=kind, description=(agent_cls.__doc__ or "").strip().splitlines()[0])
        for kind, agent_cls in BUILTIN_AGENTS.items()
    ]


@router.post("/match/start")
async def start_match(req: StartMatchRequest, background_tasks: BackgroundTasks) -> StartMatchResponse:
    """
    Start a match between built-in agents.

    The match runs as a background task; follow it over /ws or poll
    /api/match/status.
    """
    if _match.running:
        raise HTTPException(status_code=400, detail="A match is already running")
    if len(req.agents) < 2:
        raise HTTPException(status_code=400, detail="A match needs at least 2 agents")
    unknown = [kind for kind in req.agents if kind not in BUILTIN_AGENTS]
    if unknown:
        raise HTTPException(status_code=400, detail=f"Unknown agent kind: {', '.join(unknown)}")

    agents = [
        create_agent(kind, f"p{seat + 1}", f"{kind.title()}-{seat + 1}")
        for seat, kind in enumerate(req.agents)
    ]

    try:
        arena = Arena(req.config.to_config())
        # Validate table settings before handing off to the background task
        arena.table_config(len(agents))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    for event in Arena.EVENTS:
        arena.on(event, partial(manager.broadcast, event))

    _match.arena = arena
    _match.result = None
    _match.error = None
    _match.running = True
    background_tasks.add_task(_run_match, arena, agents)
    logger.info(f"Starting match: {', '.join(a.name for a in agents)}")

    return StartMatchResponse(
        success=True,
        message=f"Match started with {len(agents)} agents",
        players=[agent.player_id for agent in agents],
    )


@router.get("/match/status")
async def match_status() -> MatchStatusSchema:
    """Progress of the current match, or the result of the last one."""
    arena = _match.arena
    if arena is None:
        return MatchStatusSchema(running=False)

    table = arena.table
    status = MatchStatusSchema(
        running=_match.running,
        hands_per_match=arena.config.hands_per_match,
        error=_match.error,
    )
    if table is not None:
        status.hands_played = len(table.hand_history)
        status.hand_number = table.hand_number
        status.stage = table.stage.name
        status.stacks = {p.player_id: p.stack for p in table.players}
    if _match.result is not None:
        status.winner = _match.result.winner
        status.fallbacks = _match.result.fallbacks
    return status


def _histories() -> List[Dict[str, Any]]:
    arena = _match.arena
    if arena is None or arena.table is None:
        return []
    return [history.to_dict() for history in arena.table.hand_history]


@router.get("/match/history")
async def match_history() -> List[Dict[str, Any]]:
    """Hand histories of the current or last match."""
    return _histories()


@router.get("/match/history/{hand_number}")
async def hand_history(hand_number: int) -> Dict[str, Any]:
    """One hand history by hand number."""
    for history in _histories():
        if history["hand_number"] == hand_number:
            return history
    raise HTTPException(status_code=404, detail=f"Hand #{hand_number} not found")
