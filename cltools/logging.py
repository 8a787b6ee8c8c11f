"""Logging utilities for cl commands."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_LOGGER_NAME = "cltools"

ACTION = logging.INFO + 5
logging.addLevelName(ACTION, "ACTION")

_MARKERS = {
    logging.DEBUG: "..",
    logging.INFO: "::",
    ACTION: ">>",
    logging.WARNING: "**",
    logging.ERROR: "!!",
    logging.CRITICAL: "!!",
}


class MarkerFormatter(logging.Formatter):
    """Prefix console lines with the marker for their level."""

    def format(self, record: logging.LogRecord) -> str:
        marker = _MARKERS.get(record.levelno, "..")
        return f"{marker} {super().format(record)}"


class _ConsoleFilter(logging.Filter):
    """Route INFO and ACTION records to stdout and everything else to stderr."""

    def __init__(self, *, stdout: bool) -> None:
        super().__init__()
        self.stdout = stdout

    def filter(self, record: logging.LogRecord) -> bool:
        on_stdout = logging.INFO <= record.levelno < logging.WARNING
        return on_stdout == self.stdout


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the cltools hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def log_action(logger: logging.Logger, message: str, *args: object) -> None:
    """Announce a user-facing step (rendered with the ``>>`` marker)."""
    logger.log(ACTION, message, *args)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the cltools logger: actions and info on stdout, the rest on stderr."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI is invoked multiple times.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    formatter = MarkerFormatter("%(message)s")

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(logging.INFO)
    stdout_handler.addFilter(_ConsoleFilter(stdout=True))
    stdout_handler.setFormatter(formatter)
    logger.addHandler(stdout_handler)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(level)
    stderr_handler.addFilter(_ConsoleFilter(stdout=False))
    stderr_handler.setFormatter(formatter)
    logger.addHandler(stderr_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["ACTION", "MarkerFormatter", "configure_logging", "get_logger", "log_action"]
