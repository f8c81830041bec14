"""
FastAPI Application - REST API for the table display.

Endpoints:
    GET    /api/v1/health               Health check
    GET    /api/v1/game                 Current game state
    POST   /api/v1/game/setup           Edit the setup draft
    POST   /api/v1/game/start           Start the warm-up
    POST   /api/v1/game/roll            Roll (plan and commit in one call)
    POST   /api/v1/game/roll/plan       Decide the next roll, apply nothing
    POST   /api/v1/game/roll/commit     Apply the decided roll
    POST   /api/v1/game/reset           Back to setup
    POST   /api/v1/game/debug/phase     Debug: jump to a phase
    GET    /api/v1/game/tables/{phase}  Action table for a phase

Two-phase roll flow:
    1. POST /roll/plan returns the face, the weighted face pool and the
       target reveal. Nothing has changed yet.
    2. The client animates the die and the reveal as long as it likes.
    3. POST /roll/commit applies exactly that plan.

Every endpoint takes `?lang=en|sv` for rendered text.
All responses are JSON with explicit Pydantic schemas.
"""

from contextlib import asynccontextmanager
from typing import Annotated, Optional, Union
import logging
import random

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import Settings
from ..session import GameSession, SnapshotStore
from .service import APIService
from .schemas import (
    # Request models
    SetupRequest,
    StartGameRequest,
    RollRequest,
    ForcePhaseRequest,
    # Response models
    GameStateResponse,
    RollPlanResponse,
    RollResponse,
    ActionTableResponse,
    ErrorResponse,
    HealthResponse,
    # Enums
    ErrorCode,
    PhaseName,
)

logger = logging.getLogger(__name__)

_STATUS_CODES = {
    ErrorCode.INVALID_SETUP: 400,
    ErrorCode.ILLEGAL_ROLL: 409,
    ErrorCode.CORRUPT_SNAPSHOT: 500,
    ErrorCode.VALIDATION_ERROR: 400,
}

Lang = Annotated[Optional[str], Query(description="Display language: en or sv")]


def build_service(settings: Settings) -> APIService:
    """Service backed by the snapshot file from settings."""
    rng = random.Random(settings.seed) if settings.seed is not None else None
    session = GameSession(store=SnapshotStore(settings.state_file), rng=rng)
    return APIService(session=session, lang=settings.lang)


def create_app(service: Optional[APIService] = None, settings: Optional[Settings] = None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (built from settings if not provided)
        settings: Optional Settings (read from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    settings = settings or Settings.from_env()
    api_service = service or build_service(settings)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        error = api_service.load()
        if error is not None:
            logger.warning("Started a fresh game: %s", error.error)
        yield

    app = FastAPI(
        title="Gift Chaos API",
        description="""
Gift exchange dice game - a warm-up of grabbing and passing gifts,
then an endgame of freezing, swapping and rotating them.

## Error Codes

| Code | Description |
|------|-------------|
| `INVALID_SETUP` | Fewer than two players, or pile size not positive |
| `ILLEGAL_ROLL` | Wrong phase, no rolls left, roll in flight, or face not available |
| `CORRUPT_SNAPSHOT` | Saved game could not be restored |
| `VALIDATION_ERROR` | Request could not be processed |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=_STATUS_CODES.get(error.error_code, 400),
            content=error.model_dump(mode="json"),
        )

    def respond(response):
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/game",
        response_model=GameStateResponse,
        tags=["Game"],
        summary="Get the current game state",
    )
    async def get_game(lang: Lang = None) -> GameStateResponse:
        """Everything a table display needs to render."""
        return api_service.get_game_state(lang)

    @app.post(
        "/api/v1/game/setup",
        response_model=GameStateResponse,
        responses={400: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Edit the setup draft",
    )
    async def update_setup(
        request: SetupRequest,
        lang: Lang = None,
    ) -> Union[GameStateResponse, JSONResponse]:
        """
        Save player names and pile size before starting.

        Sending names without a pile size resets the pile to two gifts
        per player.
        """
        return respond(api_service.update_setup(request, lang))

    @app.post(
        "/api/v1/game/start",
        response_model=GameStateResponse,
        responses={400: {"model": ErrorResponse, "description": "Invalid setup"}},
        tags=["Game"],
        summary="Start the warm-up",
    )
    async def start_game(
        request: StartGameRequest,
        lang: Lang = None,
    ) -> Union[GameStateResponse, JSONResponse]:
        """Seat the players and put the pile on the table."""
        return respond(api_service.start_game(request, lang))

    @app.post(
        "/api/v1/game/roll",
        response_model=RollResponse,
        responses={409: {"model": ErrorResponse, "description": "Roll not allowed"}},
        tags=["Rolling"],
        summary="Roll for the current player",
    )
    async def roll(
        request: RollRequest,
        lang: Lang = None,
    ) -> Union[RollResponse, JSONResponse]:
        """Draw a face and apply it in one step."""
        return respond(api_service.roll(request, lang))

    @app.post(
        "/api/v1/game/roll/plan",
        response_model=RollPlanResponse,
        responses={409: {"model": ErrorResponse, "description": "Roll not allowed"}},
        tags=["Rolling"],
        summary="Decide the next roll",
    )
    async def plan_roll(
        request: RollRequest,
        lang: Lang = None,
    ) -> Union[RollPlanResponse, JSONResponse]:
        """
        Draw the face and targets without applying them.

        Only one roll may be in flight; a second plan is rejected until
        the first is committed or the game is reset.
        """
        return respond(api_service.plan_roll(request, lang))

    @app.post(
        "/api/v1/game/roll/commit",
        response_model=RollResponse,
        responses={409: {"model": ErrorResponse, "description": "No roll in flight"}},
        tags=["Rolling"],
        summary="Apply the decided roll",
    )
    async def commit_roll(lang: Lang = None) -> Union[RollResponse, JSONResponse]:
        """Apply exactly the plan returned by /roll/plan."""
        return respond(api_service.commit_roll(lang))

    @app.post(
        "/api/v1/game/reset",
        response_model=GameStateResponse,
        tags=["Game"],
        summary="Back to setup",
    )
    async def reset_game(lang: Lang = None) -> GameStateResponse:
        """Discard the game and any roll in flight. The setup draft is kept."""
        return api_service.reset_game(lang)

    @app.post(
        "/api/v1/game/debug/phase",
        response_model=GameStateResponse,
        responses={400: {"model": ErrorResponse, "description": "No table seated"}},
        tags=["Debug"],
        summary="Jump to a phase",
    )
    async def force_phase(
        request: ForcePhaseRequest,
        lang: Lang = None,
    ) -> Union[GameStateResponse, JSONResponse]:
        """Debug only. Skips every eligibility and completion check."""
        return respond(api_service.force_phase(request, lang))

    @app.get(
        "/api/v1/game/tables/{phase}",
        response_model=ActionTableResponse,
        responses={400: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Get a phase's action table",
    )
    async def get_action_table(
        phase: PhaseName,
        lang: Lang = None,
    ) -> Union[ActionTableResponse, JSONResponse]:
        """The six faces of warm-up or endgame, with titles and descriptions."""
        return respond(api_service.get_action_table(phase, lang))

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="giftchaos",
            version=__version__,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Gift Chaos API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/api/v1/health",
        }

    return app


# For running directly: uvicorn giftchaos.api.app:app
app = create_app()
