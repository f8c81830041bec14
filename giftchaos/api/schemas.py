"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a table display (web page,
phone, TV) and the engine. Every view carries the raw message keys and
params alongside the rendered text, so a client may re-render in
another language without another round trip.

Error Codes:
- INVALID_SETUP: Player names or pile size rejected at start
- ILLEGAL_ROLL: Roll not allowed right now (phase, budget, in flight, face)
- CORRUPT_SNAPSHOT: Saved game could not be restored; a fresh one was started
- VALIDATION_ERROR: Request body failed validation
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class PhaseName(str, Enum):
    """Game phases."""
    SETUP = "setup"
    WARMUP = "warmup"
    ENDGAME = "endgame"
    ENDED = "ended"


class ErrorCode(str, Enum):
    """Structured error codes."""
    INVALID_SETUP = "INVALID_SETUP"
    ILLEGAL_ROLL = "ILLEGAL_ROLL"
    CORRUPT_SNAPSHOT = "CORRUPT_SNAPSHOT"
    VALIDATION_ERROR = "VALIDATION_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class GiftInfo(BaseModel):
    """A gift as seen on the table."""
    gift_id: str
    locked: bool = False


class PlayerInfo(BaseModel):
    """Player information for display."""
    player_id: str
    name: str
    seat: int
    is_current_turn: bool = False
    rolls_left: int = 0
    warmup_rolls_taken: int = 0
    gift_count: int = 0
    locked_count: int = 0
    gifts: list[GiftInfo] = Field(default_factory=list)


class LogEntryInfo(BaseModel):
    """One rendered log line."""
    entry_id: str
    key: str
    params: dict[str, Any] = Field(default_factory=dict)
    text: str
    detail: Optional[str] = None


class NarrativeInfo(BaseModel):
    """Rendered description of what the last action did."""
    key: str
    params: dict[str, Any] = Field(default_factory=dict)
    text: str


class OutcomeInfo(BaseModel):
    """The last roll."""
    face: int = Field(..., ge=1, le=6)
    phase: PhaseName
    title: str
    description: str
    title_key: str
    description_key: str
    actor_id: Optional[str] = None
    narrative: Optional[NarrativeInfo] = None


class RevealInfo(BaseModel):
    """
    Cosmetic reveal sequence.

    The outcome is already decided; a client cycles through `items`
    and stops on `final_index`.
    """
    label: str
    label_key: str
    items: list[str] = Field(default_factory=list)
    final_index: int = 0


class ActionInfo(BaseModel):
    """One row of an action table."""
    face: int = Field(..., ge=1, le=6)
    name: str
    title: str
    description: str
    available: Optional[bool] = Field(
        None, description="Whether the current player may roll this face (active phase only)"
    )


# =============================================================================
# Request Models
# =============================================================================

class SetupRequest(BaseModel):
    """Edit the setup draft before starting."""
    names: Optional[list[str]] = Field(None, description="Player names in seating order")
    pile_size: Optional[int] = Field(None, ge=0, description="Gifts in the pile")


class StartGameRequest(BaseModel):
    """Request to start the warm-up."""
    names: list[str] = Field(..., description="Player names, at least two")
    pile_size: int = Field(..., description="Gifts in the pile, at least one")
    shuffle_order: bool = Field(False, description="Draw a random seating order")


class RollRequest(BaseModel):
    """Request to roll for the current player."""
    forced_face: Optional[int] = Field(None, ge=1, le=6, description="Debug: force a face")
    override_budget: bool = Field(False, description="Debug: ignore budget and eligibility")


class ForcePhaseRequest(BaseModel):
    """Debug-only phase jump."""
    phase: PhaseName


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class GameStateResponse(BaseModel):
    """Complete game state for display."""
    phase: PhaseName
    phase_label: str
    lang: str
    players: list[PlayerInfo] = Field(default_factory=list)
    pile: int = 0
    total_gifts: int = 0
    current_player_id: Optional[str] = None
    total_rolls_left: int = 0
    available_faces: list[int] = Field(default_factory=list)
    roll_in_flight: bool = False
    last_outcome: Optional[OutcomeInfo] = None
    log: list[LogEntryInfo] = Field(default_factory=list)
    pending_names: list[str] = Field(default_factory=list)
    pending_pile: int = 0
    api_version: str = "v1"


class RollPlanResponse(BaseModel):
    """A decided roll waiting to be committed."""
    actor_id: str
    phase: PhaseName
    face: int = Field(..., ge=1, le=6)
    title: str
    description: str
    available_faces: list[int] = Field(default_factory=list)
    face_pool: list[int] = Field(default_factory=list, description="Weighted faces, for a die animation")
    reveal: Optional[RevealInfo] = None
    api_version: str = "v1"


class RollResponse(BaseModel):
    """Result of a committed roll."""
    outcome: OutcomeInfo
    log_entries: list[LogEntryInfo] = Field(default_factory=list)
    reveal: Optional[RevealInfo] = None
    phase_changed: bool = False
    game_state: GameStateResponse
    api_version: str = "v1"


class ActionTableResponse(BaseModel):
    """The six faces of a phase."""
    phase: PhaseName
    phase_label: str
    actions: list[ActionInfo] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
