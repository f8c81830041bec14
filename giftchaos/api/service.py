"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to GameSession calls
2. Turns rejected operations into ErrorResponse
3. Renders keys into text for the requested language
4. Formats state for display

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional

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
    # Shared
    PlayerInfo,
    GiftInfo,
    LogEntryInfo,
    NarrativeInfo,
    OutcomeInfo,
    RevealInfo,
    ActionInfo,
    # Enums
    PhaseName,
    ErrorCode,
)
from ..engine_core.state import GamePhase, LogEntry, RollOutcome, SessionState
from ..engine_core.tables import FACES, available_faces, get_phase_table
from ..engine_core.targets import Reveal
from ..engine_core.action import ActionResult, RollPlan
from ..session import GameSession
from .. import i18n


@dataclass
class APIService:
    """
    API service for the table display.

    Usage:
        service = APIService(session=GameSession(store=SnapshotStore(path)))
        service.load()

        service.start_game(StartGameRequest(names=["Ada", "Bo"], pile_size=4))
        plan = service.plan_roll(RollRequest())
        result = service.commit_roll()
    """
    session: GameSession = field(default_factory=GameSession)
    lang: str = i18n.DEFAULT_LANG

    def load(self) -> Optional[ErrorResponse]:
        """
        Restore the saved game.

        Returns an ErrorResponse if the snapshot was corrupt; the
        session has already fallen back to a fresh setup state.
        """
        self.session.load()
        error = self.session.load_error
        if error is None:
            return None
        return ErrorResponse(
            error=str(error),
            error_code=ErrorCode.CORRUPT_SNAPSHOT,
            details={"errors": error.errors},
        )

    # =========================================================================
    # Operations
    # =========================================================================

    def get_game_state(self, lang: Optional[str] = None) -> GameStateResponse:
        return self._build_game_state(self.session.state, lang)

    def update_setup(
        self,
        request: SetupRequest,
        lang: Optional[str] = None,
    ) -> GameStateResponse | ErrorResponse:
        result = self.session.update_setup(request.names, request.pile_size)
        if not result.success:
            return self._error(result)
        return self._build_game_state(result.new_state, lang)

    def start_game(
        self,
        request: StartGameRequest,
        lang: Optional[str] = None,
    ) -> GameStateResponse | ErrorResponse:
        result = self.session.start_game(request.names, request.pile_size, request.shuffle_order)
        if not result.success:
            return self._error(result)
        return self._build_game_state(result.new_state, lang)

    def roll(
        self,
        request: RollRequest,
        lang: Optional[str] = None,
    ) -> RollResponse | ErrorResponse:
        """Plan and commit in one call."""
        result = self.session.roll(request.forced_face, request.override_budget)
        if not result.success:
            return self._error(result)
        return self._roll_response(result, lang)

    def plan_roll(
        self,
        request: RollRequest,
        lang: Optional[str] = None,
    ) -> RollPlanResponse | ErrorResponse:
        """
        Decide the next roll without applying it.

        The client can animate the returned face pool and reveal, then
        call commit_roll to apply exactly this outcome.
        """
        result = self.session.begin_roll(request.forced_face, request.override_budget)
        if not result.success:
            return self._error(result)
        return self._plan_response(result.plan, lang)

    def commit_roll(self, lang: Optional[str] = None) -> RollResponse | ErrorResponse:
        result = self.session.commit_roll()
        if not result.success:
            return self._error(result)
        return self._roll_response(result, lang)

    def reset_game(self, lang: Optional[str] = None) -> GameStateResponse:
        result = self.session.reset_game()
        return self._build_game_state(result.new_state, lang)

    def force_phase(
        self,
        request: ForcePhaseRequest,
        lang: Optional[str] = None,
    ) -> GameStateResponse | ErrorResponse:
        result = self.session.force_phase(GamePhase(request.phase.value))
        if not result.success:
            return self._error(result)
        return self._build_game_state(result.new_state, lang)

    def get_action_table(
        self,
        phase: PhaseName,
        lang: Optional[str] = None,
    ) -> ActionTableResponse | ErrorResponse:
        """
        The six faces of a rolling phase.

        When the game is currently in that phase, each action also
        says whether the current player may roll it.
        """
        game_phase = GamePhase(phase.value)
        if not game_phase.is_active:
            return ErrorResponse(
                error=f"Phase {phase.value} has no action table",
                error_code=ErrorCode.VALIDATION_ERROR,
                details={"phase": phase.value},
            )

        state = self.session.state
        live = state.phase == game_phase and bool(state.roster)
        open_faces = (
            available_faces(state.phase, state.current_player_index, state.roster, state.pile)
            if live else []
        )
        lang = self._lang(lang)
        table = get_phase_table(game_phase)
        return ActionTableResponse(
            phase=phase,
            phase_label=i18n.render(f"phase.{phase.value}", lang=lang),
            actions=[
                ActionInfo(
                    face=face,
                    name=table[face].name,
                    title=i18n.render(table[face].title_key, lang=lang),
                    description=i18n.render(table[face].description_key, lang=lang),
                    available=(face in open_faces) if live else None,
                )
                for face in FACES
            ],
        )

    # =========================================================================
    # Conversion Helpers
    # =========================================================================

    def _lang(self, lang: Optional[str]) -> str:
        return i18n.normalize_lang(lang or self.lang)

    def _error(self, result: ActionResult) -> ErrorResponse:
        return ErrorResponse(
            error=result.error or "Request rejected",
            error_code=ErrorCode(result.error_code),
            details={"reason": result.reason} if result.reason else None,
        )

    def _build_game_state(
        self,
        state: SessionState,
        lang: Optional[str] = None,
    ) -> GameStateResponse:
        lang = self._lang(lang)
        current = state.current_player
        faces: list[int] = []
        if state.phase.is_active and current is not None and state.budget_for(current.id) > 0:
            faces = available_faces(state.phase, state.current_player_index, state.roster, state.pile)

        return GameStateResponse(
            phase=PhaseName(state.phase.value),
            phase_label=i18n.render(f"phase.{state.phase.value}", lang=lang),
            lang=lang,
            players=[
                PlayerInfo(
                    player_id=p.id,
                    name=p.name,
                    seat=idx,
                    is_current_turn=state.phase.is_active and idx == state.current_player_index,
                    rolls_left=state.budget_for(p.id),
                    warmup_rolls_taken=state.warmup_rolls_taken.get(p.id, 0),
                    gift_count=p.gift_count,
                    locked_count=len(p.locked),
                    gifts=[GiftInfo(gift_id=g.id, locked=g.locked) for g in p.gifts],
                )
                for idx, p in enumerate(state.roster)
            ],
            pile=state.pile,
            total_gifts=state.total_gifts,
            current_player_id=current.id if current and state.phase.is_active else None,
            total_rolls_left=state.total_budget,
            available_faces=faces,
            roll_in_flight=self.session.roll_in_flight,
            last_outcome=self._outcome_info(state.last_outcome, lang),
            log=[self._log_entry_info(e, lang) for e in state.log],
            pending_names=list(state.pending_names),
            pending_pile=state.pending_pile,
        )

    def _log_entry_info(self, entry: LogEntry, lang: str) -> LogEntryInfo:
        return LogEntryInfo(
            entry_id=entry.id,
            key=entry.key,
            params=dict(entry.params),
            text=i18n.render(entry.key, entry.params, lang),
            detail=entry.detail,
        )

    def _outcome_info(self, outcome: Optional[RollOutcome], lang: str) -> Optional[OutcomeInfo]:
        if outcome is None:
            return None
        narrative = None
        if outcome.narrative is not None:
            narrative = NarrativeInfo(
                key=outcome.narrative.key,
                params=dict(outcome.narrative.params),
                text=i18n.render(outcome.narrative.key, outcome.narrative.params, lang),
            )
        return OutcomeInfo(
            face=outcome.face,
            phase=PhaseName(outcome.phase.value),
            title=i18n.render(outcome.title_key, lang=lang),
            description=i18n.render(outcome.description_key, lang=lang),
            title_key=outcome.title_key,
            description_key=outcome.description_key,
            actor_id=outcome.actor_id,
            narrative=narrative,
        )

    def _reveal_info(self, reveal: Optional[Reveal], lang: str) -> Optional[RevealInfo]:
        if reveal is None:
            return None
        items = list(reveal.items)
        if reveal.label_key == "ui.reveal.direction":
            items = [i18n.render(f"dir.{item}", lang=lang) for item in items]
        return RevealInfo(
            label=i18n.render(reveal.label_key, lang=lang),
            label_key=reveal.label_key,
            items=items,
            final_index=reveal.final_index,
        )

    def _plan_response(self, plan: RollPlan, lang: Optional[str]) -> RollPlanResponse:
        lang = self._lang(lang)
        action = get_phase_table(plan.phase)[plan.face]
        return RollPlanResponse(
            actor_id=plan.actor_id,
            phase=PhaseName(plan.phase.value),
            face=plan.face,
            title=i18n.render(action.title_key, lang=lang),
            description=i18n.render(action.description_key, lang=lang),
            available_faces=list(plan.available_faces),
            face_pool=list(plan.face_pool),
            reveal=self._reveal_info(plan.reveal, lang),
        )

    def _roll_response(self, result: ActionResult, lang: Optional[str]) -> RollResponse:
        lang = self._lang(lang)
        return RollResponse(
            outcome=self._outcome_info(result.outcome, lang),
            log_entries=[self._log_entry_info(e, lang) for e in result.log_entries],
            reveal=self._reveal_info(result.plan.reveal if result.plan else None, lang),
            phase_changed=result.phase_changed,
            game_state=self._build_game_state(result.new_state, lang),
        )
