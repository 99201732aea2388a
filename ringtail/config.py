from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .errors import InvalidArgumentError


def _convert(key: str, raw: str, conv: type[int] | type[float]) -> int | float:
    try:
        return conv(raw)
    except ValueError:
        raise InvalidArgumentError(f'{key} must be a number, got {raw!r}') from None


def _opt_int(e: Mapping[str, str], key: str) -> int | None:
    raw = e.get(key)
    if raw is None or not raw.strip():
        return None
    return int(_convert(key, raw, int))


def _opt_float(e: Mapping[str, str], key: str) -> float | None:
    raw = e.get(key)
    if raw is None or not raw.strip():
        return None
    return float(_convert(key, raw, float))


@dataclass(frozen=True)
class Config:
    # Core
    root: str
    default_lines: int
    max_lines: int
    block_size: int | None
    scan_timeout: float | None

    # Logging
    api_log_file: str | None
    api_log_level: str
    cli_log_level: str


def load_config(env: Mapping[str, str] | None = None) -> Config:
    """Build settings from ``env`` (default: the process environment).

    A non-numeric value for a numeric setting raises InvalidArgumentError.
    """
    e = os.environ if env is None else env
    return Config(
        root=os.path.abspath(e.get('RINGTAIL_ROOT') or os.getcwd()),
        default_lines=int(_convert('RINGTAIL_DEFAULT_LINES', e.get('RINGTAIL_DEFAULT_LINES', '10'), int)),
        max_lines=int(_convert('RINGTAIL_MAX_LINES', e.get('RINGTAIL_MAX_LINES', '8000'), int)),
        # Unset means use the filesystem's preferred block size.
        block_size=_opt_int(e, 'RINGTAIL_BLOCK_SIZE'),
        scan_timeout=_opt_float(e, 'RINGTAIL_SCAN_TIMEOUT'),
        api_log_file=e.get('API_LOG_FILE'),
        api_log_level=e.get('API_LOG_LEVEL', 'INFO'),
        cli_log_level=e.get('CLI_LOG_LEVEL', 'WARNING'),
    )


__all__ = ['Config', 'load_config']
