"""
Action System - Roll plans and results.

A roll happens in two steps:
1. A RollPlan is drawn: face and targets, decided eagerly, once
2. The plan is committed: the resolver applies exactly that plan

Everything between the two steps (spinning dice, cycling names) is
presentation replaying an outcome that is already known.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from .state import GamePhase, LogEntry, RollOutcome
from .targets import TargetSelection, Reveal


@dataclass
class RollPlan:
    """
    A decided-but-not-applied roll.

    Contains:
    - Who rolls, in which phase, against which pile
    - The face and the pool it was drawn from (for the die animation)
    - Pre-selected targets with their reveal sequence
    """
    phase: GamePhase
    actor_index: int
    actor_id: str
    face: int
    available_faces: list[int] = field(default_factory=list)
    face_pool: list[int] = field(default_factory=list)
    targets: TargetSelection = field(default_factory=TargetSelection)
    override_budget: bool = False
    forced: bool = False

    @property
    def reveal(self) -> Reveal | None:
        return self.targets.reveal


@dataclass
class ActionResult:
    """
    Result of an engine operation at the session seam.

    Contains:
    - Whether the operation succeeded
    - New state (if succeeded)
    - Error and error code (if rejected; state is unchanged)
    - What happened, for the presentation layer
    """
    success: bool
    new_state: Any | None = None  # SessionState
    error: str | None = None
    error_code: str | None = None
    reason: str | None = None

    outcome: RollOutcome | None = None
    plan: RollPlan | None = None
    log_entries: list[LogEntry] = field(default_factory=list)
    phase_changed: bool = False

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str | None = None,
        reason: str | None = None,
    ) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code, reason=reason)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        outcome: RollOutcome | None = None,
        log_entries: list[LogEntry] | None = None,
        plan: RollPlan | None = None,
        phase_changed: bool = False,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            outcome=outcome,
            plan=plan,
            log_entries=log_entries or [],
            phase_changed=phase_changed,
        )
