"""Structured logging helpers for attrtext consumers.

The library itself only creates module loggers; hosts call
:func:`setup_logging` (or :func:`configure_from_settings`) once at startup.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..services.settings import EngineSettings

__all__ = ["configure_from_settings", "get_log_path", "get_logger", "setup_logging"]

_PACKAGE_LOGGER = "attrtext"
_DEFAULT_LOG_DIR = Path.home() / ".attrtext" / "logs"
_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_QUIET_LOGGERS: tuple[str, ...] = ("ruamel", "ruamel.yaml")
_CONFIGURED = False
_LOG_PATH: Path | None = None


def setup_logging(
    level: int = logging.INFO,
    *,
    log_dir: Path | str | None = None,
    to_file: bool = True,
    console: bool = True,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
    force: bool = False,
) -> Path | None:
    """Attach rotating file and/or console handlers to the ``attrtext`` logger.

    Returns the log file path when file logging is enabled. Repeated calls are
    no-ops unless ``force`` is set.
    """

    global _CONFIGURED, _LOG_PATH
    if _CONFIGURED and not force:
        return _LOG_PATH

    package_logger = logging.getLogger(_PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(fmt=_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    log_path: Path | None = None
    if to_file:
        target_dir = _resolve_log_dir(log_dir)
        target_dir.mkdir(parents=True, exist_ok=True)
        log_path = target_dir / "attrtext.log"
        file_handler = logging.handlers.RotatingFileHandler(
            log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
        package_logger.addHandler(_prepare(file_handler, level, formatter))
    if console:
        package_logger.addHandler(_prepare(logging.StreamHandler(), level, formatter))

    package_logger.setLevel(level)
    package_logger.propagate = not (to_file or console)
    _quiet_dependencies(level)

    _CONFIGURED = True
    _LOG_PATH = log_path
    package_logger.debug("Logging configured (level=%s, file=%s)", logging.getLevelName(level), log_path)
    return log_path


def configure_from_settings(
    settings: "EngineSettings",
    *,
    log_dir: Path | str | None = None,
    to_file: bool = True,
    force: bool = False,
) -> Path | None:
    """Apply the log level carried by ``settings``."""

    return setup_logging(settings.effective_log_level, log_dir=log_dir, to_file=to_file, force=force)


def get_logger(name: str) -> logging.Logger:
    """Return a module-specific logger."""

    return logging.getLogger(name)


def get_log_path() -> Path | None:
    """Return the currently configured log file if available."""

    return _LOG_PATH


def _prepare(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _resolve_log_dir(log_dir: Path | str | None) -> Path:
    env_override = os.environ.get("ATTRTEXT_LOG_DIR")
    return Path(log_dir or env_override or _DEFAULT_LOG_DIR).expanduser()


def _quiet_dependencies(package_level: int) -> None:
    quiet_level = max(logging.WARNING, package_level)
    for logger_name in _QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(quiet_level)
