"""
Pytest fixtures for Gift Chaos tests.
"""

import random

import pytest

from ..engine_core.state import GamePhase, Gift, Player, SessionState, new_id
from ..engine_core.engine import TurnEngine
from ..engine_core.tables import WARMUP_ROLLS, ENDGAME_ROLLS
from ..session import GameSession, SnapshotStore


def make_player(name: str, unlocked: int = 0, locked: int = 0) -> Player:
    """A player holding `unlocked` free gifts followed by `locked` frozen ones."""
    gifts = [Gift(id=f"{name}-u{i}") for i in range(unlocked)]
    gifts += [Gift(id=f"{name}-l{i}", locked=True) for i in range(locked)]
    return Player(id=new_id(), name=name, gifts=gifts)


@pytest.fixture
def rng() -> random.Random:
    """Seeded generator so draws are reproducible."""
    return random.Random(1234)


@pytest.fixture
def player_factory():
    """Build players with a given number of unlocked/locked gifts."""
    return make_player


@pytest.fixture
def warmup_state() -> SessionState:
    """Fresh 3-player warm-up with 6 gifts in the pile."""
    roster = [make_player("Ada"), make_player("Bo"), make_player("Cy")]
    return SessionState(
        phase=GamePhase.WARMUP,
        roster=roster,
        pile=6,
        roll_budget={p.id: WARMUP_ROLLS for p in roster},
        warmup_rolls_taken={p.id: 0 for p in roster},
    )


@pytest.fixture
def endgame_state() -> SessionState:
    """3-player endgame where everyone holds two unlocked gifts."""
    roster = [make_player("Ada", 2), make_player("Bo", 2), make_player("Cy", 2)]
    return SessionState(
        phase=GamePhase.ENDGAME,
        roster=roster,
        pile=0,
        roll_budget={p.id: ENDGAME_ROLLS for p in roster},
        warmup_rolls_taken={p.id: WARMUP_ROLLS for p in roster},
    )


@pytest.fixture
def engine(rng) -> TurnEngine:
    """Engine in setup with a seeded generator."""
    return TurnEngine(rng=rng)


@pytest.fixture
def store(tmp_path) -> SnapshotStore:
    """Snapshot store in a temporary directory."""
    return SnapshotStore(tmp_path / "state.json")


@pytest.fixture
def session(store, rng) -> GameSession:
    """Persisted session with a seeded generator."""
    game = GameSession(store=store, rng=rng)
    game.load()
    return game
