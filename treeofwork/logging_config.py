"""Diagnostic file logging.

Logging stays silent unless ``DEBUG`` is set; then trace lines go to a log
file for the duration of the session. Nothing is ever written to the terminal,
which is owned by the TUI while the session runs.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from platformdirs import user_log_dir

from .errors import SetupError

APP_NAME = "tree-of-work"
DEBUG_ENV_VAR = "DEBUG"
LOG_FILE_ENV_VAR = "TOW_LOG_FILE"
LOG_FILENAME = "debug.log"
DEFAULT_LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / LOG_FILENAME
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s:%(lineno)d - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
PACKAGE_LOGGER = "treeofwork"


def debug_log_path(environ: dict[str, str] | None = None) -> Path | None:
    """Return the log file to write, or ``None`` when diagnostics are off.

    ``TOW_LOG_FILE`` overrides the per-user log directory.
    """
    env = os.environ if environ is None else environ
    if not env.get(DEBUG_ENV_VAR):
        return None
    override = env.get(LOG_FILE_ENV_VAR)
    return Path(override) if override else DEFAULT_LOG_PATH


def setup_logging(log_file: Path, level: int = logging.DEBUG) -> logging.FileHandler:
    """Attach a file handler to the package logger.

    Raises ``SetupError`` when the file cannot be opened. The returned handler
    should be passed to ``teardown_logging`` when the session ends.
    """
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError as exc:
        raise SetupError(f"cannot open log file {log_file}: {exc}") from exc
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)
    package_logger.addHandler(handler)
    package_logger.debug("diagnostic logging enabled, writing to %s", log_file)
    return handler


def teardown_logging(handler: logging.Handler) -> None:
    """Detach and close a handler installed by ``setup_logging``."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.removeHandler(handler)
    handler.close()
