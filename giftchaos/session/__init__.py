"""
Session Module - The single hosted game and its persistence.

A session represents the running game:
- Loaded from the snapshot store at start
- Mutated only through the TurnEngine
- Saved after every accepted transition
"""

from .manager import GameSession
from .store import SnapshotStore

__all__ = [
    "GameSession",
    "SnapshotStore",
]
