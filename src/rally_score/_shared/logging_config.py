# Area: Shared
"""
rally_score._shared.logging_config — Log output setup
=====================================================

The core only emits records on `rally_score.*` loggers. Applications
(and the CLI) call setup_logging() once to get:

- stderr: colored, one line per record, `[match_id]` prefixed when the
  record carries a match_id extra
- optional file: one JSON object per line for log shipping

stdout is left alone so CLI output stays machine-readable.
"""

from __future__ import annotations
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

PACKAGE_LOGGER = "rally_score"

TERMINAL_FORMAT = "%(asctime)s │ %(levelname)s │ %(name)s │ %(message)s"
TERMINAL_DATEFMT = "%H:%M:%S"


class TerminalFormatter(logging.Formatter):
    """Colors the level name; never mutates the record for other handlers."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        plain_level = record.levelname
        plain_msg = record.msg
        color = self.LEVEL_COLORS.get(record.levelno, "")
        record.levelname = f"{color}{plain_level}{self.RESET}" if color else plain_level
        match_id = getattr(record, "match_id", None)
        if match_id is not None:
            record.msg = f"[{match_id}] {plain_msg}"
        try:
            return super().format(record)
        finally:
            record.levelname = plain_level
            record.msg = plain_msg


class JSONFormatter(logging.Formatter):
    """One JSON object per record, timestamped from the record itself."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        match_id = getattr(record, "match_id", None)
        if match_id is not None:
            entry["match_id"] = match_id
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def _terminal_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(TerminalFormatter(fmt=TERMINAL_FORMAT, datefmt=TERMINAL_DATEFMT))
    return handler


def _file_handler(log_file_path: str, level: int) -> logging.Handler:
    path = Path(log_file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging(
    log_file_path: Optional[str] = "rally_score.log",
    level: int = logging.INFO,
) -> None:
    """
    Route `rally_score` log records to stderr and, optionally, a JSON file.

    Calling it again replaces the previous handlers.

    Parameters
    ----------
    log_file_path : str or None
        JSON-lines log file. None logs to stderr only.
    level : int
        Minimum level for both outputs.
    """
    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
        handler.close()

    pkg_logger.setLevel(level)
    pkg_logger.addHandler(_terminal_handler(level))

    if log_file_path:
        try:
            pkg_logger.addHandler(_file_handler(log_file_path, level))
        except OSError as e:
            pkg_logger.warning(f"Could not open log file {log_file_path}: {e}")

    # Keep records off the root logger
    pkg_logger.propagate = False
