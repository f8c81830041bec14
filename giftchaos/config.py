"""
Configuration - Environment-driven settings.

    GIFTCHAOS_STATE_FILE   snapshot location (default ~/.giftchaos/state.json)
    GIFTCHAOS_LANG         display language, en or sv (default en)
    GIFTCHAOS_LOG_LEVEL    logging level name (default INFO)
    GIFTCHAOS_LOG_FILE     optional JSON-lines log file
    GIFTCHAOS_SEED         optional seed for reproducible games
    ALLOWED_ORIGINS        comma-separated CORS origins (default *)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
import os


def _default_state_file() -> Path:
    return Path.home() / ".giftchaos" / "state.json"


def _parse_seed(raw: str | None) -> int | None:
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"GIFTCHAOS_SEED must be an integer, got {raw!r}") from None


@dataclass
class Settings:
    state_file: Path = field(default_factory=_default_state_file)
    lang: str = "en"
    log_level: str = "INFO"
    log_file: str | None = None
    seed: int | None = None
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> Settings:
        state_file = os.getenv("GIFTCHAOS_STATE_FILE")
        seed = os.getenv("GIFTCHAOS_SEED")
        return cls(
            state_file=Path(state_file).expanduser() if state_file else _default_state_file(),
            lang=os.getenv("GIFTCHAOS_LANG", "en"),
            log_level=os.getenv("GIFTCHAOS_LOG_LEVEL", "INFO").upper(),
            log_file=os.getenv("GIFTCHAOS_LOG_FILE") or None,
            seed=_parse_seed(seed),
            allowed_origins=os.getenv("ALLOWED_ORIGINS", "*").split(","),
        )
