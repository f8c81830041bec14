"""
Game Session - Lifecycle of the one game this process hosts.

LIFECYCLE:
1. Process starts -> load the saved snapshot (fresh setup if none)
2. Every operation goes through the TurnEngine (sole writer)
3. Every accepted transition is persisted immediately
4. A corrupt snapshot is logged and replaced by a fresh setup state

Rejected operations come back as ActionResult.failure with the state
untouched; nothing is persisted for them.
"""

from __future__ import annotations
from typing import Sequence
import logging
import random

from ..engine_core.state import GamePhase, SessionState
from ..engine_core.engine import TurnEngine, initial_state
from ..engine_core.action import ActionResult
from ..engine_core.errors import InvalidSetup, IllegalRoll, CorruptSnapshot
from .store import SnapshotStore

logger = logging.getLogger(__name__)


class GameSession:
    """
    The process-wide game.

    Owns the TurnEngine and, optionally, a SnapshotStore. Without a
    store the game lives in memory only.
    """

    def __init__(
        self,
        store: SnapshotStore | None = None,
        rng: random.Random | None = None,
    ):
        self.store = store
        self.engine = TurnEngine(rng=rng)
        self.load_error: CorruptSnapshot | None = None

    @property
    def state(self) -> SessionState:
        return self.engine.state

    @property
    def roll_in_flight(self) -> bool:
        return self.engine.roll_in_flight

    def load(self) -> SessionState:
        """
        Restore the saved game.

        A corrupt snapshot is discarded in favour of a fresh setup
        state; the error is kept on load_error for the caller.
        """
        self.load_error = None
        if self.store is None:
            return self.engine.state
        try:
            state = self.store.load()
        except CorruptSnapshot as e:
            logger.warning("Discarding corrupt snapshot at %s: %s", self.store.path, e.errors)
            self.load_error = e
            state = initial_state()
            self.store.save(state)
        if state is not None:
            self.engine.load(state)
        return self.engine.state

    def _persist(self) -> None:
        if self.store is not None:
            self.store.save(self.engine.state)

    def update_setup(
        self,
        names: Sequence[str] | None = None,
        pile: int | None = None,
    ) -> ActionResult:
        try:
            state = self.engine.update_setup(names, pile)
        except InvalidSetup as e:
            return ActionResult.failure(str(e), error_code=e.error_code)
        self._persist()
        return ActionResult.success_with_state(state)

    def start_game(
        self,
        names: Sequence[str],
        pile_size: int,
        shuffle_order: bool = False,
    ) -> ActionResult:
        try:
            state = self.engine.start_game(names, pile_size, shuffle_order)
        except InvalidSetup as e:
            logger.warning("Start rejected: %s", e)
            return ActionResult.failure(str(e), error_code=e.error_code)
        self._persist()
        return ActionResult.success_with_state(state, phase_changed=True)

    def begin_roll(
        self,
        forced_face: int | None = None,
        override_budget: bool = False,
    ) -> ActionResult:
        """Draw the next roll; the state does not change until commit_roll."""
        try:
            plan = self.engine.begin_roll(forced_face, override_budget)
        except IllegalRoll as e:
            logger.warning("Roll rejected (%s): %s", e.reason, e)
            return ActionResult.failure(str(e), error_code=e.error_code, reason=e.reason)
        return ActionResult.success_with_state(self.engine.state, plan=plan)

    def commit_roll(self) -> ActionResult:
        try:
            result = self.engine.commit_roll()
        except IllegalRoll as e:
            logger.warning("Commit rejected (%s): %s", e.reason, e)
            return ActionResult.failure(str(e), error_code=e.error_code, reason=e.reason)
        self._persist()
        return result

    def roll(
        self,
        forced_face: int | None = None,
        override_budget: bool = False,
    ) -> ActionResult:
        begun = self.begin_roll(forced_face, override_budget)
        if not begun.success:
            return begun
        return self.commit_roll()

    def reset_game(self) -> ActionResult:
        state = self.engine.reset_game()
        self._persist()
        return ActionResult.success_with_state(state, phase_changed=True)

    def force_phase(self, phase: GamePhase) -> ActionResult:
        """Debug-only phase jump."""
        try:
            state = self.engine.force_phase(phase)
        except InvalidSetup as e:
            logger.warning("Phase jump rejected: %s", e)
            return ActionResult.failure(str(e), error_code=e.error_code)
        self._persist()
        return ActionResult.success_with_state(state, phase_changed=True)
