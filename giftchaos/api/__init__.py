"""
API Module - Table display interface.

Exposes the engine via REST API. A display:
1. Edits the setup draft and starts the game
2. Plans a roll and animates the face and target reveal
3. Commits the roll and renders the new state and log
4. Resets when the game is over

There is one game per process; it is persisted after every change.
"""

from .schemas import (
    # Requests
    SetupRequest,
    StartGameRequest,
    RollRequest,
    ForcePhaseRequest,
    # Responses
    GameStateResponse,
    RollPlanResponse,
    RollResponse,
    ActionTableResponse,
    ErrorResponse,
    HealthResponse,
    # Shared
    PlayerInfo,
    GiftInfo,
    LogEntryInfo,
    OutcomeInfo,
    RevealInfo,
    # Enums
    ErrorCode,
    PhaseName,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "SetupRequest",
    "StartGameRequest",
    "RollRequest",
    "ForcePhaseRequest",
    # Responses
    "GameStateResponse",
    "RollPlanResponse",
    "RollResponse",
    "ActionTableResponse",
    "ErrorResponse",
    "HealthResponse",
    # Shared
    "PlayerInfo",
    "GiftInfo",
    "LogEntryInfo",
    "OutcomeInfo",
    "RevealInfo",
    # Enums
    "ErrorCode",
    "PhaseName",
    # Service
    "APIService",
    "create_app",
]
