"""
Pydantic schemas for API request/response validation.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from pokerarena.core.rules import DEFAULT_ANTE, DEFAULT_BIG_BLIND, DEFAULT_BUY_IN, DEFAULT_SMALL_BLIND
from pokerarena.match.runner import MatchConfig


# ============= Request Schemas =============

class MatchConfigSchema(BaseModel):
    """Settings for a match started over HTTP."""
    starting_stack: int = Field(gt=0, default=DEFAULT_BUY_IN)
    small_blind: int = Field(gt=0, default=DEFAULT_SMALL_BLIND)
    big_blind: int = Field(gt=0, default=DEFAULT_BIG_BLIND)
    ante: int = Field(ge=0, default=DEFAULT_ANTE)
    hands_per_match: int = Field(ge=1, le=10000, default=100)
    decision_timeout: Optional[float] = Field(gt=0, default=30.0, description="Seconds per decision")
    delay_between_actions: float = Field(ge=0, le=10, default=0.0)
    seed: Optional[int] = None

    def to_config(self) -> MatchConfig:
        return MatchConfig(**self.model_dump())


class StartMatchRequest(BaseModel):
    """Request to start a match between built-in agents."""
    agents: List[str] = Field(..., description="Agent kinds, one per seat: random, call, aggressive, fold")
    config: MatchConfigSchema = Field(default_factory=MatchConfigSchema)


# ============= Response Schemas =============

class AgentInfoSchema(BaseModel):
    """A built-in agent kind."""
    kind: str
    description: str


class StartMatchResponse(BaseModel):
    """Result of starting a match."""
    success: bool
    message: str
    players: List[str]


class MatchStatusSchema(BaseModel):
    """Progress of the current or last match."""
    running: bool
    hands_played: int = 0
    hands_per_match: Optional[int] = None
    hand_number: int = 0
    stage: Optional[str] = None
    stacks: Dict[str, int] = {}
    winner: Optional[str] = None
    fallbacks: int = 0
    error: Optional[str] = None


class ErrorSchema(BaseModel):
    """Error response."""
    error: str
    detail: Optional[str] = None


# ============= WebSocket Message Schemas =============

class WSEventMessage(BaseModel):
    """Arena event pushed to WebSocket clients."""
    event: str
    data: Dict[str, Any] = {}
