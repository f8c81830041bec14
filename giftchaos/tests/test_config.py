"""
Tests for environment configuration.
"""

from pathlib import Path

import pytest

from ..config import Settings


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "GIFTCHAOS_STATE_FILE",
        "GIFTCHAOS_LANG",
        "GIFTCHAOS_LOG_LEVEL",
        "GIFTCHAOS_LOG_FILE",
        "GIFTCHAOS_SEED",
        "ALLOWED_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    """Tests for Settings.from_env."""

    def test_defaults(self, clean_env):
        settings = Settings.from_env()

        assert settings.state_file == Path.home() / ".giftchaos" / "state.json"
        assert settings.lang == "en"
        assert settings.log_level == "INFO"
        assert settings.log_file is None
        assert settings.seed is None
        assert settings.allowed_origins == ["*"]

    def test_overrides(self, clean_env, tmp_path):
        clean_env.setenv("GIFTCHAOS_STATE_FILE", str(tmp_path / "game.json"))
        clean_env.setenv("GIFTCHAOS_LANG", "sv")
        clean_env.setenv("GIFTCHAOS_LOG_LEVEL", "debug")
        clean_env.setenv("GIFTCHAOS_SEED", "42")
        clean_env.setenv("ALLOWED_ORIGINS", "http://a,http://b")

        settings = Settings.from_env()

        assert settings.state_file == tmp_path / "game.json"
        assert settings.lang == "sv"
        assert settings.log_level == "DEBUG"
        assert settings.seed == 42
        assert settings.allowed_origins == ["http://a", "http://b"]

    def test_blank_seed_is_unset(self, clean_env):
        clean_env.setenv("GIFTCHAOS_SEED", "  ")
        assert Settings.from_env().seed is None

    def test_bad_seed_names_the_variable(self, clean_env):
        clean_env.setenv("GIFTCHAOS_SEED", "lucky")

        with pytest.raises(ValueError, match="GIFTCHAOS_SEED must be an integer, got 'lucky'"):
            Settings.from_env()
