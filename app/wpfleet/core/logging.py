"""Logging configuration for wpfleet.

Console records go through Rich on stderr; every record is also written
to a durable plain-text log so per-operation output survives the run.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.logging import RichHandler

from wpfleet.utils.formatting import err_console

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"

# Marks handlers installed here so reconfiguring leaves foreign handlers alone
_OWNED_ATTR = "_wpfleet_handler"


def configure_logging(*, debug: bool = False, log_file: Path | None = None) -> Path | None:
    """Configure the root logger for a CLI invocation.

    Args:
        debug: Lower the console and file threshold to DEBUG.
        log_file: Durable log file. None disables file logging.

    Returns:
        The log file actually in use, or None if file logging is off
        or the file could not be opened.
    """
    level = logging.DEBUG if debug else logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in list(root_logger.handlers):
        if getattr(handler, _OWNED_ATTR, False):
            root_logger.removeHandler(handler)
            handler.close()

    console_handler = RichHandler(
        console=err_console,
        show_path=debug,
        rich_tracebacks=debug,
        markup=False,
    )
    console_handler.setLevel(level)
    setattr(console_handler, _OWNED_ATTR, True)
    root_logger.addHandler(console_handler)

    if log_file is None:
        return None

    try:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError as e:
        root_logger.warning("Log file %s unavailable, logging to console only: %s", log_file, e)
        return None

    file_handler.setLevel(level)
    setattr(file_handler, _OWNED_ATTR, True)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
    root_logger.addHandler(file_handler)
    return log_path
