"""
Snapshot Store - Keeps the single running game on local disk.

The store:
- Holds one JSON snapshot (one game per process)
- Writes atomically (temp file + replace)
- Reports unreadable or invalid files as CorruptSnapshot
"""

from __future__ import annotations
from pathlib import Path
import json
import os

from ..engine_core.state import SessionState
from ..engine_core.serialization import serialize, deserialize
from ..engine_core.errors import CorruptSnapshot


class SnapshotStore:
    """
    File-based persistence for a SessionState.

    Usage:
        store = SnapshotStore("~/.giftchaos/state.json")

        state = store.load()   # None if nothing saved yet
        store.save(state)
    """

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> SessionState | None:
        """
        Load the saved state.

        Returns None if nothing is saved. Raises CorruptSnapshot if the
        file is not valid JSON or not a valid snapshot.
        """
        if not self.path.exists():
            return None

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                record = json.load(f)
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CorruptSnapshot([f"unreadable snapshot file: {e}"]) from e

        return deserialize(record)

    def save(self, state: SessionState) -> None:
        """Write the state, replacing any previous snapshot."""
        record = serialize(state)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(record, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        finally:
            tmp_path.unlink(missing_ok=True)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
