"""
Logging setup - terminal output plus an optional JSON-lines file.

Modules log through logging.getLogger(__name__), which all hang off
the package logger configured here.
"""

from __future__ import annotations
from datetime import datetime, timezone
from pathlib import Path
import json
import logging
import sys

logger = logging.getLogger("giftchaos")


class JSONFormatter(logging.Formatter):
    """JSON formatter for file output."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


def setup_logging(level: int | str = logging.INFO, log_file: str | None = None) -> None:
    """
    Configure the package logger.

    Parameters
    ----------
    level : int or str
        Logging level, as a number or a name like "DEBUG".
    log_file : str, optional
        Path of a JSON-lines log file. Terminal only when omitted.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    pkg_logger = logging.getLogger("giftchaos")
    pkg_logger.setLevel(level)
    pkg_logger.handlers.clear()

    terminal_handler = logging.StreamHandler(sys.stderr)
    terminal_handler.setLevel(level)
    terminal_handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s │ %(levelname)s │ %(name)s │ %(message)s",
        datefmt="%H:%M:%S",
    ))
    pkg_logger.addHandler(terminal_handler)

    if log_file:
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
            file_handler.setLevel(level)
            file_handler.setFormatter(JSONFormatter())
            pkg_logger.addHandler(file_handler)
        except OSError as e:
            pkg_logger.warning("Could not create log file: %s", e)

    pkg_logger.propagate = False
