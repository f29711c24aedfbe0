"""Logging utilities for hookdocs commands.

Every module logs through ``get_logger(<component>)``; the console shows the
component next to the tool name (``[hookdocs:sync] INFO Cloning ...``) so
output from the sync, generate and enhance stages can be told apart when a
command runs several of them.
"""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "hookdocs"
CONSOLE_FORMAT = "[%(component)s] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the hookdocs hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


class ComponentFormatter(logging.Formatter):
    """Formatter exposing ``%(component)s``: ``hookdocs`` or ``hookdocs:<name>``."""

    def format(self, record: logging.LogRecord) -> str:
        prefix = f"{_LOGGER_NAME}."
        if record.name.startswith(prefix):
            record.component = f"{_LOGGER_NAME}:{record.name[len(prefix):]}"
        else:
            record.component = _LOGGER_NAME
        return super().format(record)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the hookdocs logger with console output and optional file sink."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI runs more than once per process.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(ComponentFormatter(CONSOLE_FORMAT))
    logger.addHandler(stream_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


__all__ = ["ComponentFormatter", "configure_logging", "get_logger"]
