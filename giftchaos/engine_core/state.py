"""
Game State - The serializable snapshot the turn engine operates on.

Design principles:
- Immutable-friendly: engine operations return new state
- Serializable: plain fields only, see serialization.py
- Ownership: every gift lives with exactly one player or in the pile
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
from copy import deepcopy
from enum import Enum
import uuid


class GamePhase(Enum):
    """Game phases, in the only order normal play visits them."""
    SETUP = "setup"
    WARMUP = "warmup"
    ENDGAME = "endgame"
    ENDED = "ended"

    @property
    def order(self) -> int:
        return _PHASE_ORDER.index(self)

    @property
    def is_active(self) -> bool:
        """Rolling is only possible in warm-up and endgame."""
        return self in (GamePhase.WARMUP, GamePhase.ENDGAME)


_PHASE_ORDER = [GamePhase.SETUP, GamePhase.WARMUP, GamePhase.ENDGAME, GamePhase.ENDED]


class Direction(Enum):
    """Rotation direction for Twist of Fate."""
    LEFT = "left"
    RIGHT = "right"


def new_id() -> str:
    """Opaque unique token for gifts, players and log entries."""
    return uuid.uuid4().hex[:12]


@dataclass(frozen=True)
class Gift:
    """
    A gift token.

    Frozen so a gift can be shared between roster copies; locking
    produces a new instance with the same id.
    """
    id: str
    locked: bool = False

    def lock(self) -> Gift:
        return Gift(id=self.id, locked=True)


@dataclass
class Player:
    """
    A seat at the table.

    Gift order is insertion order and stands in for gift size:
    the first unlocked gift is the "smallest", the last the "largest".
    """
    id: str
    name: str
    gifts: list[Gift] = field(default_factory=list)

    @property
    def gift_count(self) -> int:
        return len(self.gifts)

    @property
    def unlocked(self) -> list[Gift]:
        return [g for g in self.gifts if not g.locked]

    @property
    def locked(self) -> list[Gift]:
        return [g for g in self.gifts if g.locked]

    @property
    def unlocked_count(self) -> int:
        return sum(1 for g in self.gifts if not g.locked)

    @property
    def has_gifts(self) -> bool:
        return len(self.gifts) > 0

    @property
    def has_unlocked(self) -> bool:
        return any(not g.locked for g in self.gifts)

    def copy(self) -> Player:
        """Shallow copy with its own gift list."""
        return Player(id=self.id, name=self.name, gifts=list(self.gifts))


def clone_roster(roster: list[Player]) -> list[Player]:
    """Copy a roster so a resolver can rearrange gifts without touching its input."""
    return [p.copy() for p in roster]


@dataclass
class LogEntry:
    """
    One line of the game log.

    The engine only records a message key and its parameters;
    rendering is the localization layer's job (see i18n.py).
    """
    key: str
    params: dict[str, Any] = field(default_factory=dict)
    detail: str | None = None
    id: str = field(default_factory=new_id)


@dataclass
class Narrative:
    """Structured descriptor of a successful action, for display."""
    key: str
    params: dict[str, Any] = field(default_factory=dict)


@dataclass
class RollOutcome:
    """What was rolled last: the face, its table keys and what happened."""
    face: int
    phase: GamePhase
    title_key: str
    description_key: str
    actor_id: str | None = None
    narrative: Narrative | None = None


LOG_CAPACITY = 60


@dataclass
class SessionState:
    """
    Complete game state at a point in time.

    This is the unit of persistence and the only thing the
    presentation layer needs to render the table.
    """
    phase: GamePhase = GamePhase.SETUP
    roster: list[Player] = field(default_factory=list)
    pile: int = 0
    current_player_index: int = 0

    # Per-phase roll budget and warm-up progress, keyed by player id
    roll_budget: dict[str, int] = field(default_factory=dict)
    warmup_rolls_taken: dict[str, int] = field(default_factory=dict)

    # Newest first, bounded to LOG_CAPACITY
    log: list[LogEntry] = field(default_factory=list)
    last_outcome: RollOutcome | None = None

    # Setup draft, kept so an interrupted setup can resume
    pending_names: list[str] = field(default_factory=list)
    pending_pile: int = 0

    @property
    def current_player(self) -> Player | None:
        if not self.roster:
            return None
        return self.roster[self.current_player_index]

    @property
    def num_players(self) -> int:
        return len(self.roster)

    @property
    def total_gifts(self) -> int:
        """Pile plus everything held; constant for the life of a game."""
        return self.pile + sum(p.gift_count for p in self.roster)

    @property
    def total_budget(self) -> int:
        return sum(self.roll_budget.values())

    def budget_for(self, player_id: str) -> int:
        return self.roll_budget.get(player_id, 0)

    def with_log(self, entries: list[LogEntry]) -> SessionState:
        """Return new state with entries (already newest first) prepended."""
        return self._copy_with(log=(list(entries) + self.log)[:LOG_CAPACITY])

    def _copy_with(self, **kwargs) -> SessionState:
        """Create a copy with some fields replaced."""
        return SessionState(
            phase=kwargs.get("phase", self.phase),
            roster=kwargs.get("roster", self.roster),
            pile=kwargs.get("pile", self.pile),
            current_player_index=kwargs.get("current_player_index", self.current_player_index),
            roll_budget=kwargs.get("roll_budget", self.roll_budget),
            warmup_rolls_taken=kwargs.get("warmup_rolls_taken", self.warmup_rolls_taken),
            log=kwargs.get("log", self.log),
            last_outcome=kwargs.get("last_outcome", self.last_outcome),
            pending_names=kwargs.get("pending_names", self.pending_names),
            pending_pile=kwargs.get("pending_pile", self.pending_pile),
        )

    def clone(self) -> SessionState:
        """Deep copy the state."""
        return deepcopy(self)
