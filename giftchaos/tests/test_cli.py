"""
Tests for the command-line interface and logging setup.
"""

import json
import logging
import sys

import pytest

from ..cli import main
from ..logging_config import setup_logging, JSONFormatter
from ..engine_core.engine import start_game
from ..session import SnapshotStore


@pytest.fixture
def state_file(tmp_path, monkeypatch):
    path = tmp_path / "state.json"
    monkeypatch.setenv("GIFTCHAOS_STATE_FILE", str(path))
    monkeypatch.delenv("GIFTCHAOS_LOG_FILE", raising=False)
    monkeypatch.delenv("GIFTCHAOS_SEED", raising=False)
    return path


class TestPlay:
    """Tests for the play command."""

    def test_plays_to_the_end(self, state_file, capsys):
        code = main(["--log-level", "WARNING", "play", "--players", "Ada", "Bo", "--seed", "3"])

        out = capsys.readouterr().out
        assert code == 0
        assert out.startswith("Warm-up begins: 2 players, 4 gifts")
        assert "Game over" in out

    def test_swedish(self, state_file, capsys):
        code = main(["play", "--players", "Ada", "Bo", "Cy", "--seed", "1", "--lang", "sv"])

        out = capsys.readouterr().out
        assert code == 0
        assert "Spelet är slut" in out

    def test_invalid_setup(self, state_file, capsys):
        code = main(["play", "--players", "Ada"])

        assert code == 1
        assert capsys.readouterr().out.startswith("Error:")

    def test_roll_limit(self, state_file, capsys):
        code = main(["play", "--players", "Ada", "Bo", "--seed", "3", "--max-rolls", "1"])

        assert code == 1
        assert "Stopped after 1 rolls in warmup" in capsys.readouterr().out

    def test_no_command(self, state_file):
        assert main([]) == 1

    def test_bad_seed_in_environment(self, state_file, monkeypatch, capsys):
        monkeypatch.setenv("GIFTCHAOS_SEED", "lucky")

        assert main(["play", "--players", "Ada", "Bo"]) == 2
        assert "GIFTCHAOS_SEED must be an integer" in capsys.readouterr().out


class TestSavedGame:
    """Tests for the state and reset commands."""

    def test_no_saved_game(self, state_file, capsys):
        assert main(["state"]) == 0
        assert "No saved game" in capsys.readouterr().out

    def test_show_saved_game(self, state_file, capsys):
        SnapshotStore(state_file).save(start_game(["Ada", "Bo"], 4))

        assert main(["state"]) == 0
        out = capsys.readouterr().out
        assert "Pile: 4" in out
        assert "▶ Ada" in out

    def test_corrupt_saved_game(self, state_file, capsys):
        state_file.write_text('{"phase": "nope"}', encoding="utf-8")

        assert main(["state"]) == 1
        assert "is corrupt" in capsys.readouterr().out

    def test_reset(self, state_file):
        SnapshotStore(state_file).save(start_game(["Ada", "Bo"], 4))

        assert main(["reset"]) == 0
        assert not state_file.exists()


class TestLogging:
    """Tests for logging setup."""

    def test_json_file(self, tmp_path):
        log_file = tmp_path / "logs" / "giftchaos.jsonl"
        setup_logging("INFO", str(log_file))

        logging.getLogger("giftchaos.test").info("hello %s", "table")
        for handler in logging.getLogger("giftchaos").handlers:
            handler.flush()

        record = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
        assert record["message"] == "hello table"
        assert record["level"] == "INFO"
        assert record["logger"] == "giftchaos.test"

    def test_unknown_level_falls_back(self):
        setup_logging("CHATTY")
        assert logging.getLogger("giftchaos").level == logging.INFO

    def test_formatter_includes_exception(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.getLogger("x").makeRecord(
                "x", logging.ERROR, __file__, 1, "failed", None, sys.exc_info(),
            )
        data = json.loads(JSONFormatter().format(record))
        assert "ValueError: boom" in data["exception"]
