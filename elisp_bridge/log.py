"""Logging setup for programs that use elisp_bridge.

Library modules only ever call ``logging.getLogger(__name__)``; an
application that wants to see what Emacs reports calls :func:`setup_logging`
once at startup.
"""

from __future__ import annotations

import logging
import os
import sys

from yachalk import chalk

LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
DEFAULT_LEVEL = logging.WARNING


class ChalkFormatter(logging.Formatter):
    """Colour each record by severity."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        level = record.levelno
        if level >= logging.ERROR:
            return chalk.red(message)
        if level >= logging.WARNING:
            return chalk.yellow(message)
        if level >= logging.INFO:
            return chalk.green(message)
        return chalk.gray(message)


def resolve_env_log_level() -> int | None:
    """Level named by ELISP_BRIDGE_LOG_LEVEL ("DEBUG", "info", "10"...), if any."""
    val = os.environ.get("ELISP_BRIDGE_LOG_LEVEL")
    if not val:
        return None
    v = val.strip().upper()
    if v.isdigit():
        return int(v)
    level = logging.getLevelName(v)
    return level if isinstance(level, int) else None


def setup_logging(level: int | None = None) -> None:
    if level is None:
        level = resolve_env_log_level() or DEFAULT_LEVEL

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ChalkFormatter(LOG_FORMAT))
    root_logger.addHandler(handler)
