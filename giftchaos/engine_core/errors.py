"""
Engine Errors - Exception taxonomy for the turn engine.

- InvalidSetup:     bad player count or pile size at start
- IllegalRoll:      roll rejected (wrong phase, in flight, no budget, ineligible face)
- NoEligibleTarget: an action's precondition failed at resolution time;
                    recovered locally as a no-op log entry
- CorruptSnapshot:  a persisted record could not be turned back into state
"""

from __future__ import annotations
from typing import Any


class GiftChaosError(Exception):
    """Base exception for all engine errors."""
    error_code = "GIFT_CHAOS_ERROR"


class InvalidSetup(GiftChaosError):
    """Raised when a game cannot be started with the given setup."""
    error_code = "INVALID_SETUP"


class IllegalRoll(GiftChaosError):
    """Raised when a roll is requested that the current state does not allow."""
    error_code = "ILLEGAL_ROLL"

    PHASE = "phase"
    IN_FLIGHT = "in_flight"
    BUDGET = "budget"
    INELIGIBLE_FACE = "ineligible_face"
    NO_FACES = "no_faces"

    def __init__(self, reason: str, message: str):
        self.reason = reason
        super().__init__(message)


class NoEligibleTarget(GiftChaosError):
    """
    Raised inside a resolver branch when the action has nothing to act on.

    Carries the log key and params for the no-op entry the resolver
    records instead of propagating the error.
    """
    error_code = "NO_ELIGIBLE_TARGET"

    def __init__(self, key: str, params: dict[str, Any] | None = None):
        self.key = key
        self.params = params or {}
        super().__init__(f"No eligible target: {key}")


class CorruptSnapshot(GiftChaosError):
    """Raised when a snapshot record is structurally invalid."""
    error_code = "CORRUPT_SNAPSHOT"

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Snapshot is corrupt with {len(errors)} error(s)")
