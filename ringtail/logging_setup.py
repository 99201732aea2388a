from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TextIO

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s %(message)s'


def parse_level(raw: str | int | None, fallback: int = logging.INFO) -> int:
    """Accept a level name ('debug', 'WARNING') or number; unknown -> fallback."""
    if raw is None:
        return fallback
    try:
        return int(raw)
    except (TypeError, ValueError):
        level = logging.getLevelName(str(raw).strip().upper())
        return level if isinstance(level, int) else fallback


def _set_handler_level_safely(handler: logging.Handler, level: int) -> None:
    try:
        handler.setLevel(level)
    except Exception:
        logging.debug('Could not set handler level', exc_info=True)


def _add_file_handler(root: logging.Logger, path_s: str, level: int) -> None:
    try:
        p = Path(path_s)
        p.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(str(p), maxBytes=10 * 1024 * 1024, backupCount=5)
        fh.setLevel(level)
        fh.setFormatter(logging.Formatter(LOG_FORMAT))
        if not any(
            isinstance(h, RotatingFileHandler)
            and getattr(h, 'baseFilename', '') == fh.baseFilename
            for h in root.handlers
        ):
            root.addHandler(fh)
        else:
            fh.close()
    except OSError:
        logging.warning('Could not set up file logging at %s', path_s, exc_info=True)


def _add_stream_handler(root: logging.Logger, stream: TextIO, level: int) -> None:
    for h in root.handlers:
        if isinstance(h, logging.StreamHandler) and getattr(h, 'stream', None) is stream:
            return
    sh = logging.StreamHandler(stream)
    sh.setLevel(level)
    sh.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(sh)


def configure_logging(
    service: str,
    level_env: str,
    file_env: str | None = None,
    default: str | int = 'INFO',
    stream: TextIO | None = None,
) -> int:
    """Configure the root logger for ``service`` from environment variables.

    ``level_env`` names the variable holding the level; ``file_env`` the one
    holding an optional log file path (rotated at 10 MiB, 5 backups). When
    ``stream`` is given, records are also written there.

    Returns the effective level.
    """
    raw = (os.environ.get(level_env) or str(default)).strip()
    level = parse_level(raw)
    root = logging.getLogger()
    root.setLevel(level)
    for h in list(root.handlers):
        _set_handler_level_safely(h, level)
    path_s = os.environ.get(file_env) if file_env else None
    if path_s:
        _add_file_handler(root, path_s, level)
    if stream is not None:
        _add_stream_handler(root, stream, level)
    logging.getLogger('ringtail').debug(
        '%s logging initialized (level=%s file=%s)',
        service,
        logging.getLevelName(level),
        path_s or 'none',
    )
    return level


def set_logger_level(level_s: str | int) -> None:
    level = parse_level(level_s)
    root = logging.getLogger()
    root.setLevel(level)
    for h in list(root.handlers):
        _set_handler_level_safely(h, level)
    root.info('Log level changed to %s', level_s)


__all__ = ['configure_logging', 'parse_level', 'set_logger_level']
