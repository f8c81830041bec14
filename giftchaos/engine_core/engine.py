"""
Turn Engine - Phase/turn state machine.

    setup -> warmup -> endgame -> ended

The module-level functions are pure: (state, request) -> new state,
raising InvalidSetup / IllegalRoll on rejection without touching the
input. TurnEngine wraps them as the single writer of a live game and
enforces that only one roll is in flight.

Warm-up completion: when every budget is spent, the warm-up ends if
the pile is empty and everyone has taken WARMUP_ROLLS rolls. Otherwise
a non-empty pile buys everyone one more roll, and an empty pile tops
up stragglers to the minimum.

The endgame ends when every budget is spent, or earlier once no
unlocked gift is left anywhere.
"""

from __future__ import annotations
from typing import Sequence
import logging
import random

from .state import GamePhase, Player, SessionState, LogEntry, RollOutcome, new_id
from .tables import (
    WARMUP_ROLLS,
    ENDGAME_ROLLS,
    available_faces,
    face_weight,
    get_phase_table,
    default_pile_size,
)
from .selector import build_pool, select_weighted, select_uniform, get_rng
from .targets import preselect_targets
from .resolver import resolve_warmup, resolve_endgame
from .action import RollPlan, ActionResult
from .errors import InvalidSetup, IllegalRoll

logger = logging.getLogger(__name__)

MIN_PLAYERS = 2


# =============================================================================
# Setup
# =============================================================================

def initial_state(
    pending_names: Sequence[str] | None = None,
    pending_pile: int = 0,
) -> SessionState:
    """The setup state: no roster, nothing rolled."""
    return SessionState(
        phase=GamePhase.SETUP,
        pending_names=list(pending_names or []),
        pending_pile=pending_pile,
    )


def clean_names(names: Sequence[str]) -> list[str]:
    """Trim names and drop blanks."""
    return [n.strip() for n in names if n and n.strip()]


def draw_seating_order(names: Sequence[str], rng: random.Random | None = None) -> list[str]:
    """Pick a random first player and shuffle everyone else behind them."""
    rng = get_rng(rng)
    rest = list(names)
    first = select_uniform(rest, rng)
    if first is None:
        return rest
    rest.remove(first)
    rng.shuffle(rest)
    return [first] + rest


def update_setup(
    state: SessionState,
    names: Sequence[str] | None = None,
    pile: int | None = None,
) -> SessionState:
    """
    Edit the setup draft.

    Changing the names without a pile resets the pile to the default
    for that many players.
    """
    if state.phase != GamePhase.SETUP:
        raise InvalidSetup(f"Setup cannot be edited during {state.phase.value}")
    new_names = list(names) if names is not None else state.pending_names
    if pile is None:
        pile = default_pile_size(len(new_names)) if names is not None else state.pending_pile
    if pile < 0:
        raise InvalidSetup("Pile size cannot be negative")
    return state._copy_with(pending_names=new_names, pending_pile=pile)


def start_game(
    names: Sequence[str],
    pile_size: int,
    state: SessionState | None = None,
    shuffle_order: bool = False,
    rng: random.Random | None = None,
) -> SessionState:
    """
    Start the warm-up from a setup state.

    Raises InvalidSetup for fewer than two named players, a
    non-positive pile, or a game that is already running.
    """
    state = state or initial_state()
    if state.phase != GamePhase.SETUP:
        raise InvalidSetup(f"A game is already in {state.phase.value}; reset first")

    cleaned = clean_names(names)
    if len(cleaned) < MIN_PLAYERS:
        raise InvalidSetup(f"At least {MIN_PLAYERS} players are required, got {len(cleaned)}")
    if isinstance(pile_size, bool) or not isinstance(pile_size, int) or pile_size <= 0:
        raise InvalidSetup(f"Pile size must be a positive integer, got {pile_size!r}")

    seating = draw_seating_order(cleaned, rng) if shuffle_order else cleaned
    roster = [Player(id=new_id(), name=name) for name in seating]

    logger.info("Game started with %d players and %d gifts", len(roster), pile_size)
    return SessionState(
        phase=GamePhase.WARMUP,
        roster=roster,
        pile=pile_size,
        current_player_index=0,
        roll_budget={p.id: WARMUP_ROLLS for p in roster},
        warmup_rolls_taken={p.id: 0 for p in roster},
        log=[LogEntry(
            key="log.phase.warmup",
            params={"players": len(roster), "pile": pile_size, "rolls": WARMUP_ROLLS},
        )],
        last_outcome=None,
        pending_names=cleaned,
        pending_pile=pile_size,
    )


def reset_game(state: SessionState | None = None) -> SessionState:
    """Back to setup, keeping the last setup draft so it can be reused."""
    if state is None:
        return initial_state()
    logger.info("Game reset from %s", state.phase.value)
    return initial_state(state.pending_names, state.pending_pile)


# =============================================================================
# Rolling
# =============================================================================

def check_can_roll(
    state: SessionState,
    forced_face: int | None = None,
    override_budget: bool = False,
) -> list[int]:
    """
    Validate a roll request and return the faces available to the actor.

    Raises IllegalRoll if the phase forbids rolling, the actor has no
    budget left, no face is available, or a forced face is ineligible.
    The budget and eligibility checks are skipped under override.
    """
    if not state.phase.is_active:
        raise IllegalRoll(IllegalRoll.PHASE, f"Cannot roll during {state.phase.value}")

    actor = state.current_player
    if actor is None:
        raise IllegalRoll(IllegalRoll.PHASE, "No players at the table")
    if not override_budget and state.budget_for(actor.id) <= 0:
        raise IllegalRoll(IllegalRoll.BUDGET, f"{actor.name} has no rolls left")

    faces = available_faces(state.phase, state.current_player_index, state.roster, state.pile)

    if forced_face is not None:
        if forced_face not in get_phase_table(state.phase):
            raise IllegalRoll(IllegalRoll.INELIGIBLE_FACE, f"Face must be 1-6, got {forced_face}")
        if not override_budget and forced_face not in faces:
            raise IllegalRoll(
                IllegalRoll.INELIGIBLE_FACE,
                f"Face {forced_face} is not available to {actor.name}",
            )
    elif not faces:
        raise IllegalRoll(IllegalRoll.NO_FACES, f"No face is available to {actor.name}")

    return faces


def face_pool(state: SessionState, faces: Sequence[int]) -> list[int]:
    """Weight-expanded pool of faces for the die draw."""
    actor = state.current_player
    return build_pool(list(faces), lambda f: face_weight(state.phase, f, actor, state.pile))


def plan_roll(
    state: SessionState,
    forced_face: int | None = None,
    override_budget: bool = False,
    rng: random.Random | None = None,
) -> RollPlan:
    """
    Decide a roll without applying it: draw the face, then its targets.
    """
    faces = check_can_roll(state, forced_face, override_budget)
    actor = state.current_player
    pool = face_pool(state, faces)

    if forced_face is not None:
        face = forced_face
    else:
        face = select_weighted(
            list(faces),
            lambda f: face_weight(state.phase, f, actor, state.pile),
            rng,
        )

    targets = preselect_targets(state.phase, face, state.roster, state.current_player_index, rng)
    logger.debug("%s rolls %d in %s", actor.name, face, state.phase.value)

    return RollPlan(
        phase=state.phase,
        actor_index=state.current_player_index,
        actor_id=actor.id,
        face=face,
        available_faces=list(faces),
        face_pool=pool,
        targets=targets,
        override_budget=override_budget,
        forced=forced_face is not None,
    )


def _warmup_budgets(
    roster: list[Player],
    pile: int,
    budgets: dict[str, int],
    taken: dict[str, int],
) -> tuple[GamePhase, dict[str, int]]:
    """Apply the warm-up completion rule once every budget is spent."""
    if sum(budgets.values()) > 0:
        return GamePhase.WARMUP, budgets

    everyone_done = all(taken.get(p.id, 0) >= WARMUP_ROLLS for p in roster)
    if pile <= 0 and everyone_done:
        return GamePhase.ENDGAME, {p.id: ENDGAME_ROLLS for p in roster}
    if pile > 0:
        # Mini-round to keep draining the pile
        return GamePhase.WARMUP, {p.id: 1 for p in roster}
    return GamePhase.WARMUP, {
        p.id: max(0, WARMUP_ROLLS - taken.get(p.id, 0)) for p in roster
    }


def next_player_index(
    roster: list[Player],
    budgets: dict[str, int],
    after: int,
    phase: GamePhase,
) -> int:
    """First seat after `after`, cyclically, with rolls left."""
    if phase == GamePhase.ENDED or not roster:
        return 0
    count = len(roster)
    for step in range(1, count + 1):
        idx = (after + step) % count
        if budgets.get(roster[idx].id, 0) > 0:
            return idx
    return after


def apply_plan(
    state: SessionState,
    plan: RollPlan,
    rng: random.Random | None = None,
) -> ActionResult:
    """
    Resolve a plan against the state it was drawn from.

    Resolves the face, charges the actor's budget, applies the phase
    completion rules and advances the turn.
    """
    if plan.phase != state.phase or plan.actor_index != state.current_player_index:
        raise IllegalRoll(IllegalRoll.PHASE, "Roll plan no longer matches the game state")
    actor = state.current_player
    if actor is None or actor.id != plan.actor_id:
        raise IllegalRoll(IllegalRoll.PHASE, "Roll plan no longer matches the game state")

    resolve = resolve_warmup if state.phase == GamePhase.WARMUP else resolve_endgame
    resolution = resolve(
        plan.face, state.roster, state.pile, plan.actor_index, plan.targets, rng,
    )

    budgets = dict(state.roll_budget)
    taken = dict(state.warmup_rolls_taken)
    if not plan.override_budget:
        budgets[actor.id] = max(0, budgets.get(actor.id, 0) - 1)
        if state.phase == GamePhase.WARMUP:
            taken[actor.id] = taken.get(actor.id, 0) + 1

    entries = list(resolution.log_entries)
    next_phase = state.phase
    if state.phase == GamePhase.WARMUP:
        next_phase, budgets = _warmup_budgets(resolution.roster, resolution.pile, budgets, taken)
        if next_phase == GamePhase.ENDGAME:
            entries.insert(0, LogEntry(key="log.phase.endgame", params={"rolls": ENDGAME_ROLLS}))
    elif sum(budgets.values()) == 0 or not any(p.has_unlocked for p in resolution.roster):
        # A fully frozen table leaves no face to roll
        next_phase = GamePhase.ENDED
        budgets = {p.id: 0 for p in resolution.roster}
        entries.insert(0, LogEntry(key="log.phase.ended"))

    if next_phase != state.phase:
        logger.info("Phase %s -> %s", state.phase.value, next_phase.value)

    table = get_phase_table(state.phase)
    outcome = RollOutcome(
        face=plan.face,
        phase=state.phase,
        title_key=table[plan.face].title_key,
        description_key=table[plan.face].description_key,
        actor_id=actor.id,
        narrative=resolution.narrative,
    )

    new_state = state._copy_with(
        phase=next_phase,
        roster=resolution.roster,
        pile=resolution.pile,
        current_player_index=next_player_index(
            resolution.roster, budgets, plan.actor_index, next_phase,
        ),
        roll_budget=budgets,
        warmup_rolls_taken=taken,
        last_outcome=outcome,
    ).with_log(entries)

    return ActionResult.success_with_state(
        new_state,
        outcome=outcome,
        log_entries=entries,
        plan=plan,
        phase_changed=next_phase != state.phase,
    )


def roll(
    state: SessionState,
    forced_face: int | None = None,
    override_budget: bool = False,
    rng: random.Random | None = None,
) -> ActionResult:
    """Plan and apply a roll in one step."""
    plan = plan_roll(state, forced_face, override_budget, rng)
    return apply_plan(state, plan, rng)


def force_phase(state: SessionState, phase: GamePhase) -> SessionState:
    """
    Debug-only jump to any phase, with that phase's budgets.

    No eligibility checks; not part of the normal progression. Raises
    InvalidSetup when a playing phase is requested without a seated
    table.
    """
    if phase == GamePhase.SETUP:
        logger.warning("Forcing phase %s -> %s", state.phase.value, phase.value)
        return reset_game(state)

    roster = state.roster
    if len(roster) < MIN_PLAYERS:
        raise InvalidSetup(
            f"Cannot force {phase.value} with {len(roster)} seated players; start a game first"
        )
    logger.warning("Forcing phase %s -> %s", state.phase.value, phase.value)
    entry = LogEntry(key="log.debug.phase", params={"phase": phase.value})
    if phase == GamePhase.WARMUP:
        return state._copy_with(
            phase=phase,
            roll_budget={p.id: WARMUP_ROLLS for p in roster},
            warmup_rolls_taken={p.id: 0 for p in roster},
            current_player_index=0,
        ).with_log([entry])
    if phase == GamePhase.ENDGAME:
        return state._copy_with(
            phase=phase,
            roll_budget={p.id: ENDGAME_ROLLS for p in roster},
            current_player_index=0,
        ).with_log([entry])
    return state._copy_with(
        phase=phase,
        roll_budget={p.id: 0 for p in roster},
        current_player_index=0,
    ).with_log([entry])


# =============================================================================
# Stateful engine
# =============================================================================

class TurnEngine:
    """
    The single writer of a live game.

    Holds the current SessionState and at most one pending RollPlan.
    Rejections raise without changing anything.

    Usage:
        engine = TurnEngine(rng=random.Random(7))
        engine.start_game(["Ada", "Bo"], pile_size=4)

        plan = engine.begin_roll()     # face and targets decided here
        animate(plan.face_pool, plan.face, plan.reveal)
        result = engine.commit_roll()  # exactly that plan is applied
    """

    def __init__(
        self,
        state: SessionState | None = None,
        rng: random.Random | None = None,
    ):
        self._state = state or initial_state()
        self._pending: RollPlan | None = None
        self.rng = rng or random.Random()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def pending_roll(self) -> RollPlan | None:
        return self._pending

    @property
    def roll_in_flight(self) -> bool:
        return self._pending is not None

    def can_roll(self) -> bool:
        if self.roll_in_flight:
            return False
        try:
            check_can_roll(self._state)
        except IllegalRoll:
            return False
        return True

    def load(self, state: SessionState) -> SessionState:
        """Replace the whole state, e.g. from a snapshot."""
        self._pending = None
        self._state = state
        return self._state

    def update_setup(
        self,
        names: Sequence[str] | None = None,
        pile: int | None = None,
    ) -> SessionState:
        self._state = update_setup(self._state, names, pile)
        return self._state

    def start_game(
        self,
        names: Sequence[str],
        pile_size: int,
        shuffle_order: bool = False,
    ) -> SessionState:
        self._state = start_game(names, pile_size, self._state, shuffle_order, self.rng)
        self._pending = None
        return self._state

    def begin_roll(
        self,
        forced_face: int | None = None,
        override_budget: bool = False,
    ) -> RollPlan:
        """Decide the next roll and hold it until commit_roll."""
        if self._pending is not None:
            raise IllegalRoll(IllegalRoll.IN_FLIGHT, "A roll is already in flight")
        self._pending = plan_roll(self._state, forced_face, override_budget, self.rng)
        return self._pending

    def commit_roll(self) -> ActionResult:
        """Apply the pending plan."""
        plan = self._pending
        if plan is None:
            raise IllegalRoll(IllegalRoll.PHASE, "No roll in flight")
        try:
            result = apply_plan(self._state, plan, self.rng)
        finally:
            self._pending = None
        self._state = result.new_state
        return result

    def roll(
        self,
        forced_face: int | None = None,
        override_budget: bool = False,
    ) -> ActionResult:
        self.begin_roll(forced_face, override_budget)
        return self.commit_roll()

    def reset_game(self) -> SessionState:
        """Unconditionally back to setup; any roll in flight is dropped."""
        self._pending = None
        self._state = reset_game(self._state)
        return self._state

    def force_phase(self, phase: GamePhase) -> SessionState:
        state = force_phase(self._state, phase)
        self._pending = None
        self._state = state
        return self._state
