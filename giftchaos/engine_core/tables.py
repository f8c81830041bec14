"""
Action Tables - Per-phase catalogs of die faces.

Each phase has exactly six actions indexed by face 1-6. An action
carries its localization keys and an eligibility predicate
(actor_index, roster, pile) -> bool. A face is available iff its
predicate is absent or true.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable

from .state import GamePhase, Player

WARMUP_ROLLS = 3
ENDGAME_ROLLS = 3
GIFTS_PER_PLAYER = 2
FACES = (1, 2, 3, 4, 5, 6)

Requirement = Callable[[int, list[Player], int], bool]


@dataclass(frozen=True)
class ActionDefinition:
    """One row of an action table."""
    phase: GamePhase
    face: int
    name: str
    requires: Requirement | None = None

    @property
    def title_key(self) -> str:
        return f"actions.{self.phase.value}.{self.face}.title"

    @property
    def description_key(self) -> str:
        return f"actions.{self.phase.value}.{self.face}.desc"

    def is_available(self, actor_index: int, roster: list[Player], pile: int) -> bool:
        return self.requires is None or self.requires(actor_index, roster, pile)


def _others(actor_index: int, roster: list[Player]) -> list[Player]:
    return [p for idx, p in enumerate(roster) if idx != actor_index]


def _other_has_unlocked(actor_index: int, roster: list[Player], _pile: int) -> bool:
    return any(p.has_unlocked for p in _others(actor_index, roster))


def _actor_has_unlocked(actor_index: int, roster: list[Player], _pile: int) -> bool:
    return roster[actor_index].has_unlocked


def _anyone_has_gifts(_actor_index: int, roster: list[Player], _pile: int) -> bool:
    return any(p.has_gifts for p in roster)


WARMUP_TABLE: dict[int, ActionDefinition] = {
    1: ActionDefinition(
        GamePhase.WARMUP, 1, "double_grab",
        requires=lambda _i, _r, pile: pile >= 2,
    ),
    2: ActionDefinition(
        GamePhase.WARMUP, 2, "single_grab",
        requires=lambda _i, _r, pile: pile >= 1,
    ),
    3: ActionDefinition(
        GamePhase.WARMUP, 3, "forced_tribute",
        requires=lambda i, roster, _pile: roster[i].has_gifts,
    ),
    4: ActionDefinition(GamePhase.WARMUP, 4, "grinch_tax", requires=_other_has_unlocked),
    5: ActionDefinition(GamePhase.WARMUP, 5, "tiny_toss_right", requires=_anyone_has_gifts),
    6: ActionDefinition(GamePhase.WARMUP, 6, "mega_move_left", requires=_anyone_has_gifts),
}

ENDGAME_TABLE: dict[int, ActionDefinition] = {
    1: ActionDefinition(GamePhase.ENDGAME, 1, "ice_lock", requires=_actor_has_unlocked),
    2: ActionDefinition(GamePhase.ENDGAME, 2, "full_flip", requires=_other_has_unlocked),
    3: ActionDefinition(
        GamePhase.ENDGAME, 3, "trash_trade",
        requires=lambda i, roster, pile: (
            _actor_has_unlocked(i, roster, pile) and _other_has_unlocked(i, roster, pile)
        ),
    ),
    4: ActionDefinition(
        GamePhase.ENDGAME, 4, "joker_swap",
        requires=lambda _i, roster, _pile: sum(1 for p in roster if p.has_unlocked) >= 2,
    ),
    5: ActionDefinition(GamePhase.ENDGAME, 5, "santas_hand", requires=_actor_has_unlocked),
    6: ActionDefinition(
        GamePhase.ENDGAME, 6, "twist_of_fate",
        requires=lambda _i, roster, _pile: any(p.has_unlocked for p in roster),
    ),
}


def get_phase_table(phase: GamePhase) -> dict[int, ActionDefinition]:
    """Action table for a rolling phase."""
    if phase == GamePhase.WARMUP:
        return WARMUP_TABLE
    if phase == GamePhase.ENDGAME:
        return ENDGAME_TABLE
    raise ValueError(f"No action table for phase: {phase.value}")


def available_faces(
    phase: GamePhase,
    actor_index: int,
    roster: list[Player],
    pile: int,
) -> list[int]:
    """Faces the actor may roll right now, in face order."""
    table = get_phase_table(phase)
    return [
        face for face in FACES
        if table[face].is_available(actor_index, roster, pile)
    ]


def is_face_available(
    phase: GamePhase,
    face: int,
    actor_index: int,
    roster: list[Player],
    pile: int,
) -> bool:
    if face not in FACES:
        return False
    return get_phase_table(phase)[face].is_available(actor_index, roster, pile)


def face_weight(phase: GamePhase, face: int, actor: Player, pile: int) -> int:
    """
    Weight of a face in the die draw.

    Warm-up grabs favour drawing from the pile, most of all a Double
    Grab for an empty-handed actor. Twist of Fate comes up more often
    in the endgame when the actor holds nothing.
    """
    if phase == GamePhase.WARMUP and face in (1, 2):
        weight = 3 if face == 1 and not actor.has_gifts else 1
        if pile > 0:
            weight += 1
        return weight
    if phase == GamePhase.ENDGAME and face == 6:
        return 1 if actor.has_gifts else 3
    return 1


def default_pile_size(player_count: int) -> int:
    return max(0, player_count * GIFTS_PER_PLAYER)
