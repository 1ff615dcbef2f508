"""Logging bootstrap for the ``prowl`` command and for editors embedding the engine."""

from __future__ import annotations

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from ..services.settings import ProwlSettings

__all__ = ["PACKAGE_LOGGER", "setup_logging", "get_log_path"]

PACKAGE_LOGGER = "prowl"
LOG_FILE_NAME = "prowl.log"
_DEFAULT_LOG_DIR = Path.home() / ".prowl" / "logs"
_LOG_DIR_ENV = "PROWL_LOG_DIR"
_FILE_HANDLER = "prowl-file"
_CONSOLE_HANDLER = "prowl-console"
_MAX_BYTES = 256_000
_BACKUP_COUNT = 1

_LOG_PATH: Path | None = None


def setup_logging(
    settings: "ProwlSettings | None" = None,
    *,
    debug: bool | None = None,
    log_dir: Path | str | None = None,
    console: bool = False,
    force: bool = False,
) -> Path:
    """Attach prowl's handlers to the ``prowl`` package logger.

    The level is DEBUG when ``debug`` is true, or when it is left unset and
    ``settings.debug_logging`` is on; WARNING otherwise. Only the package
    logger is touched, so the host editor keeps control of the root logger.
    Repeated calls just adjust the level unless ``force`` is given.
    """

    global _LOG_PATH
    if debug is None:
        debug = bool(settings is not None and settings.debug_logging)
    level = logging.DEBUG if debug else logging.WARNING
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    if _LOG_PATH is not None and not force:
        return _LOG_PATH

    _remove_own_handlers(logger)
    target_dir = Path(log_dir or os.environ.get(_LOG_DIR_ENV) or _DEFAULT_LOG_DIR).expanduser()
    target_dir.mkdir(parents=True, exist_ok=True)
    log_path = target_dir / LOG_FILE_NAME

    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    file_handler = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=_MAX_BYTES, backupCount=_BACKUP_COUNT, encoding="utf-8"
    )
    file_handler.set_name(_FILE_HANDLER)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.set_name(_CONSOLE_HANDLER)
        console_handler.setFormatter(logging.Formatter("prowl: %(levelname)s %(message)s"))
        logger.addHandler(console_handler)

    _LOG_PATH = log_path
    logger.debug("Logging to %s (level=%s)", log_path, logging.getLevelName(level))
    return log_path


def get_log_path() -> Path | None:
    """Return the file the package logger writes to, once configured."""

    return _LOG_PATH


def _remove_own_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        if handler.get_name() in (_FILE_HANDLER, _CONSOLE_HANDLER):
            logger.removeHandler(handler)
            handler.close()
