"""
Tests for API layer.

Tests:
- API service methods
- Two-phase roll via the service
- Error responses
- Localized views
- OpenAPI schema generation
"""

import random

import pytest
from pydantic import ValidationError

from ..api.schemas import (
    SetupRequest,
    StartGameRequest,
    RollRequest,
    ForcePhaseRequest,
    GameStateResponse,
    RollPlanResponse,
    RollResponse,
    ActionTableResponse,
    ErrorResponse,
    ErrorCode,
    PhaseName,
)
from ..api.service import APIService
from ..api.app import create_app
from ..config import Settings
from ..session import GameSession, SnapshotStore


@pytest.fixture
def service():
    """API service over an in-memory seeded session."""
    return APIService(session=GameSession(rng=random.Random(5)))


@pytest.fixture
def started(service):
    service.start_game(StartGameRequest(names=["Ada", "Bo", "Cy"], pile_size=6))
    return service


class TestAPIService:
    """Tests for APIService."""

    def test_initial_state(self, service):
        response = service.get_game_state()

        assert isinstance(response, GameStateResponse)
        assert response.phase == PhaseName.SETUP
        assert response.players == []
        assert response.current_player_id is None

    def test_start_game(self, service):
        response = service.start_game(StartGameRequest(names=["Ada", "Bo"], pile_size=4))

        assert isinstance(response, GameStateResponse)
        assert response.phase == PhaseName.WARMUP
        assert response.pile == 4
        assert response.total_gifts == 4
        assert [p.name for p in response.players] == ["Ada", "Bo"]
        assert response.players[0].is_current_turn
        assert response.current_player_id == response.players[0].player_id
        assert response.available_faces == [1, 2]
        assert response.log[0].text.startswith("Warm-up begins")

    def test_invalid_setup(self, service):
        response = service.start_game(StartGameRequest(names=["Ada"], pile_size=4))

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.INVALID_SETUP
        assert service.get_game_state().phase == PhaseName.SETUP

    def test_roll(self, started):
        response = started.roll(RollRequest(forced_face=1))

        assert isinstance(response, RollResponse)
        assert response.outcome.face == 1
        assert response.outcome.title == "Double Grab"
        assert response.outcome.narrative.text == "Ada takes 2 gift(s) from the pile 🎁"
        assert response.game_state.players[0].gift_count == 2
        assert response.game_state.pile == 4
        assert response.log_entries[0].key == "log.warmup.1"

    def test_illegal_roll(self, started):
        response = started.roll(RollRequest(forced_face=5))

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.ILLEGAL_ROLL
        assert response.details == {"reason": "ineligible_face"}

    def test_roll_in_setup(self, service):
        response = service.roll(RollRequest())

        assert isinstance(response, ErrorResponse)
        assert response.details["reason"] == "phase"

    def test_plan_then_commit(self, started):
        started.roll(RollRequest(forced_face=1))

        plan = started.plan_roll(RollRequest(forced_face=4))
        assert isinstance(plan, RollPlanResponse)
        assert plan.face == 4
        assert plan.reveal.items == ["Ada"]
        assert plan.reveal.final_index == 0
        assert started.get_game_state().roll_in_flight

        second = started.plan_roll(RollRequest())
        assert isinstance(second, ErrorResponse)
        assert second.details["reason"] == "in_flight"

        result = started.commit_roll()
        assert isinstance(result, RollResponse)
        assert result.outcome.face == 4
        assert result.game_state.players[1].gift_count == 1
        assert not result.game_state.roll_in_flight

    def test_commit_without_plan(self, started):
        response = started.commit_roll()
        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.ILLEGAL_ROLL

    def test_setup_draft(self, service):
        response = service.update_setup(SetupRequest(names=["Ada", "Bo", "Cy"]))

        assert response.pending_names == ["Ada", "Bo", "Cy"]
        assert response.pending_pile == 6

    def test_setup_rejected_in_play(self, started):
        response = started.update_setup(SetupRequest(pile_size=3))
        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.INVALID_SETUP

    def test_reset(self, started):
        response = started.reset_game()

        assert response.phase == PhaseName.SETUP
        assert response.pending_names == ["Ada", "Bo", "Cy"]

    def test_force_phase(self, started):
        response = started.force_phase(ForcePhaseRequest(phase=PhaseName.ENDGAME))

        assert response.phase == PhaseName.ENDGAME
        assert all(p.rolls_left == 3 for p in response.players)
        assert response.log[0].key == "log.debug.phase"

    def test_force_phase_before_start(self, service):
        response = service.force_phase(ForcePhaseRequest(phase=PhaseName.ENDGAME))

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.INVALID_SETUP
        assert service.get_game_state().phase == PhaseName.SETUP

    def test_swedish_view(self, started):
        started.roll(RollRequest(forced_face=2))
        response = started.get_game_state(lang="sv")

        assert response.lang == "sv"
        assert response.phase_label == "Fas 1: Warm up"
        assert response.last_outcome.title == "Ta ett paket"
        assert response.log[0].text == "Ada tar 1 från högen."

    def test_full_game_through_service(self, started):
        for _ in range(2000):
            state = started.get_game_state()
            if state.phase == PhaseName.ENDED:
                break
            response = started.roll(RollRequest())
            assert isinstance(response, RollResponse)

        state = started.get_game_state()
        assert state.phase == PhaseName.ENDED
        assert sum(p.gift_count for p in state.players) == 6
        assert state.available_faces == []


class TestActionTables:
    """Tests for the action table view."""

    def test_warmup_table(self, service):
        response = service.get_action_table(PhaseName.WARMUP)

        assert isinstance(response, ActionTableResponse)
        assert [a.face for a in response.actions] == [1, 2, 3, 4, 5, 6]
        assert response.actions[3].title == "The Grinch Tax"
        assert all(a.available is None for a in response.actions)

    def test_live_availability(self, started):
        response = started.get_action_table(PhaseName.WARMUP, lang="sv")

        assert response.actions[0].title == "Dubbelt Upp!"
        assert [a.available for a in response.actions] == [True, True, False, False, False, False]

    def test_no_table_for_setup(self, service):
        response = service.get_action_table(PhaseName.SETUP)
        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.VALIDATION_ERROR


class TestCorruptSnapshotLoad:
    """Tests for loading a damaged save."""

    def test_load_reports_corruption(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("[]", encoding="utf-8")
        service = APIService(session=GameSession(store=SnapshotStore(path)))

        error = service.load()

        assert isinstance(error, ErrorResponse)
        assert error.error_code == ErrorCode.CORRUPT_SNAPSHOT
        assert service.get_game_state().phase == PhaseName.SETUP

    def test_clean_load(self, tmp_path):
        service = APIService(session=GameSession(store=SnapshotStore(tmp_path / "state.json")))
        assert service.load() is None


class TestSchemas:
    """Tests for request validation."""

    def test_forced_face_range(self):
        with pytest.raises(ValidationError):
            RollRequest(forced_face=7)

    def test_unknown_phase(self):
        with pytest.raises(ValidationError):
            ForcePhaseRequest(phase="overtime")

    def test_error_codes(self):
        for code in ("INVALID_SETUP", "ILLEGAL_ROLL", "CORRUPT_SNAPSHOT", "VALIDATION_ERROR"):
            assert ErrorCode[code].value == code

    def test_error_response_dump(self):
        data = ErrorResponse(error="nope", error_code=ErrorCode.ILLEGAL_ROLL).model_dump(mode="json")
        assert data["error_code"] == "ILLEGAL_ROLL"
        assert data["api_version"] == "v1"


class TestOpenAPISchema:
    """Tests for OpenAPI schema generation."""

    @pytest.fixture
    def app(self, tmp_path):
        settings = Settings(state_file=tmp_path / "state.json")
        return create_app(settings=settings)

    def test_openapi_schema_generates(self, app):
        from fastapi.openapi.utils import get_openapi

        schema = get_openapi(title=app.title, version=app.version, routes=app.routes)

        assert "paths" in schema
        assert "schemas" in schema["components"]

    def test_response_models_in_schema(self, app):
        from fastapi.openapi.utils import get_openapi

        schema = get_openapi(title=app.title, version=app.version, routes=app.routes)
        schemas = schema["components"]["schemas"]

        for name in (
            "GameStateResponse",
            "RollPlanResponse",
            "RollResponse",
            "ActionTableResponse",
            "ErrorResponse",
            "HealthResponse",
        ):
            assert name in schemas, f"Missing schema: {name}"

    def test_endpoints(self, app):
        from fastapi.openapi.utils import get_openapi

        paths = get_openapi(title=app.title, version=app.version, routes=app.routes)["paths"]

        assert "get" in paths["/api/v1/game"]
        assert "get" in paths["/api/v1/health"]
        assert "get" in paths["/api/v1/game/tables/{phase}"]
        for path in (
            "/api/v1/game/setup",
            "/api/v1/game/start",
            "/api/v1/game/roll",
            "/api/v1/game/roll/plan",
            "/api/v1/game/roll/commit",
            "/api/v1/game/reset",
            "/api/v1/game/debug/phase",
        ):
            assert "post" in paths[path], path
            assert "200" in paths[path]["post"]["responses"]
        assert "400" in paths["/api/v1/game/debug/phase"]["post"]["responses"]

    def test_module_level_app(self):
        from ..api.app import app

        assert app.title == "Gift Chaos API"
