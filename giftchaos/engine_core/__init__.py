"""
Engine Core - Gift exchange turn engine.

The engine:
1. Holds the SessionState (roster, pile, budgets, log)
2. Decides which faces the current player may roll
3. Draws faces and targets through the weighted selector
4. Resolves faces with pure resolver functions
5. Advances turns and phases
"""

from .state import (
    GamePhase,
    Direction,
    Gift,
    Player,
    LogEntry,
    Narrative,
    RollOutcome,
    SessionState,
    LOG_CAPACITY,
)
from .tables import (
    WARMUP_ROLLS,
    ENDGAME_ROLLS,
    GIFTS_PER_PLAYER,
    ActionDefinition,
    WARMUP_TABLE,
    ENDGAME_TABLE,
    get_phase_table,
    available_faces,
    default_pile_size,
)
from .selector import select_weighted
from .targets import TargetSelection, Reveal, preselect_targets
from .resolver import Resolution, resolve_warmup, resolve_endgame
from .action import RollPlan, ActionResult
from .engine import TurnEngine, initial_state, start_game, reset_game, force_phase
from .serialization import serialize, deserialize
from .errors import GiftChaosError, InvalidSetup, IllegalRoll, NoEligibleTarget, CorruptSnapshot

__all__ = [
    "GamePhase",
    "Direction",
    "Gift",
    "Player",
    "LogEntry",
    "Narrative",
    "RollOutcome",
    "SessionState",
    "LOG_CAPACITY",
    "WARMUP_ROLLS",
    "ENDGAME_ROLLS",
    "GIFTS_PER_PLAYER",
    "ActionDefinition",
    "WARMUP_TABLE",
    "ENDGAME_TABLE",
    "get_phase_table",
    "available_faces",
    "default_pile_size",
    "select_weighted",
    "TargetSelection",
    "Reveal",
    "preselect_targets",
    "Resolution",
    "resolve_warmup",
    "resolve_endgame",
    "RollPlan",
    "ActionResult",
    "TurnEngine",
    "initial_state",
    "start_game",
    "reset_game",
    "force_phase",
    "serialize",
    "deserialize",
    "GiftChaosError",
    "InvalidSetup",
    "IllegalRoll",
    "NoEligibleTarget",
    "CorruptSnapshot",
]
