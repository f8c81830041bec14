"""
Snapshot Serialization - SessionState <-> plain data record.

The record is JSON-compatible and validated with pydantic on the way
back in; anything structurally wrong surfaces as CorruptSnapshot so
the caller can fall back to a fresh setup state.
"""

from __future__ import annotations
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError, model_validator

from .state import (
    GamePhase,
    Gift,
    Player,
    LogEntry,
    Narrative,
    RollOutcome,
    SessionState,
    LOG_CAPACITY,
)
from .errors import CorruptSnapshot

SNAPSHOT_VERSION = 1


class GiftRecord(BaseModel):
    id: str = Field(min_length=1)
    locked: bool = False


class PlayerRecord(BaseModel):
    id: str = Field(min_length=1)
    name: str
    gifts: list[GiftRecord] = Field(default_factory=list)


class LogEntryRecord(BaseModel):
    id: str
    key: str
    params: dict[str, Any] = Field(default_factory=dict)
    detail: Optional[str] = None


class NarrativeRecord(BaseModel):
    key: str
    params: dict[str, Any] = Field(default_factory=dict)


class RollOutcomeRecord(BaseModel):
    face: int = Field(ge=1, le=6)
    phase: GamePhase
    title_key: str
    description_key: str
    actor_id: Optional[str] = None
    narrative: Optional[NarrativeRecord] = None


class SnapshotRecord(BaseModel):
    """The persisted shape of a SessionState."""
    version: int = SNAPSHOT_VERSION
    phase: GamePhase
    roster: list[PlayerRecord] = Field(default_factory=list)
    pile: int = Field(0, ge=0)
    current_player_index: int = Field(0, ge=0)
    roll_budget: dict[str, int] = Field(default_factory=dict)
    warmup_rolls_taken: dict[str, int] = Field(default_factory=dict)
    log: list[LogEntryRecord] = Field(default_factory=list)
    last_outcome: Optional[RollOutcomeRecord] = None
    pending_names: list[str] = Field(default_factory=list)
    pending_pile: int = Field(0, ge=0)

    @model_validator(mode="after")
    def check_consistency(self) -> SnapshotRecord:
        player_ids = [p.id for p in self.roster]
        if len(set(player_ids)) != len(player_ids):
            raise ValueError("duplicate player ids")

        gift_ids = [g.id for p in self.roster for g in p.gifts]
        if len(set(gift_ids)) != len(gift_ids):
            raise ValueError("a gift is held by more than one player")

        if self.roster and self.current_player_index >= len(self.roster):
            raise ValueError("current_player_index is outside the roster")

        for name, mapping in (
            ("roll_budget", self.roll_budget),
            ("warmup_rolls_taken", self.warmup_rolls_taken),
        ):
            unknown = set(mapping) - set(player_ids)
            if unknown:
                raise ValueError(f"{name} refers to unknown players: {sorted(unknown)}")
            if any(v < 0 for v in mapping.values()):
                raise ValueError(f"{name} has negative values")

        if self.phase != GamePhase.SETUP and len(self.roster) < 2:
            raise ValueError(f"{self.phase.value} needs at least two players")
        return self


def serialize(state: SessionState) -> dict[str, Any]:
    """Turn a state into a JSON-compatible record."""
    outcome = state.last_outcome
    record = SnapshotRecord(
        phase=state.phase,
        roster=[
            PlayerRecord(
                id=p.id,
                name=p.name,
                gifts=[GiftRecord(id=g.id, locked=g.locked) for g in p.gifts],
            )
            for p in state.roster
        ],
        pile=state.pile,
        current_player_index=state.current_player_index,
        roll_budget=dict(state.roll_budget),
        warmup_rolls_taken=dict(state.warmup_rolls_taken),
        log=[
            LogEntryRecord(id=e.id, key=e.key, params=dict(e.params), detail=e.detail)
            for e in state.log[:LOG_CAPACITY]
        ],
        last_outcome=RollOutcomeRecord(
            face=outcome.face,
            phase=outcome.phase,
            title_key=outcome.title_key,
            description_key=outcome.description_key,
            actor_id=outcome.actor_id,
            narrative=NarrativeRecord(
                key=outcome.narrative.key,
                params=dict(outcome.narrative.params),
            ) if outcome.narrative else None,
        ) if outcome else None,
        pending_names=list(state.pending_names),
        pending_pile=state.pending_pile,
    )
    return record.model_dump(mode="json")


def deserialize(record: Any) -> SessionState:
    """
    Rebuild a state from a record produced by serialize().

    Raises CorruptSnapshot if the record is not a valid snapshot.
    """
    try:
        snapshot = SnapshotRecord.model_validate(record)
    except ValidationError as e:
        raise CorruptSnapshot([
            f"{'.'.join(str(part) for part in err['loc']) or 'record'}: {err['msg']}"
            for err in e.errors()
        ]) from e

    if snapshot.version > SNAPSHOT_VERSION:
        raise CorruptSnapshot([f"unsupported snapshot version {snapshot.version}"])

    outcome = snapshot.last_outcome
    return SessionState(
        phase=snapshot.phase,
        roster=[
            Player(
                id=p.id,
                name=p.name,
                gifts=[Gift(id=g.id, locked=g.locked) for g in p.gifts],
            )
            for p in snapshot.roster
        ],
        pile=snapshot.pile,
        current_player_index=snapshot.current_player_index,
        roll_budget=dict(snapshot.roll_budget),
        warmup_rolls_taken=dict(snapshot.warmup_rolls_taken),
        log=[
            LogEntry(key=e.key, params=dict(e.params), detail=e.detail, id=e.id)
            for e in snapshot.log[:LOG_CAPACITY]
        ],
        last_outcome=RollOutcome(
            face=outcome.face,
            phase=outcome.phase,
            title_key=outcome.title_key,
            description_key=outcome.description_key,
            actor_id=outcome.actor_id,
            narrative=Narrative(
                key=outcome.narrative.key,
                params=dict(outcome.narrative.params),
            ) if outcome.narrative else None,
        ) if outcome else None,
        pending_names=list(snapshot.pending_names),
        pending_pile=snapshot.pending_pile,
    )
