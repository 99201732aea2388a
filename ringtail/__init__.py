"""ringtail Python package.

- Exposes the tail engine at the top level: ``ringtail.tail(path, lines)``.
- Provides `__version__` for packaging/diagnostics.

Usage examples:
    from ringtail import tail, __version__
    from ringtail import commands, web
"""

from __future__ import annotations

import importlib as _importlib
from importlib.metadata import PackageNotFoundError as _NotFound
from importlib.metadata import version as _ver
from typing import Any as _Any

from .errors import TailError
from .services.tail_engine import DEFAULT_LINES, tail, tail_text

try:
    __version__ = _ver('ringtail')
except _NotFound:  # editable/dev without installed metadata
    __version__ = '0.0.0'

__all__ = ['DEFAULT_LINES', 'TailError', '__version__', 'commands', 'tail', 'tail_text', 'web']


def __getattr__(name: str) -> _Any:  # PEP 562 lazy import of submodules
    if name in ('commands', 'web'):
        return _importlib.import_module(f'.{name}', __name__)
    raise AttributeError(f'module {__name__!r} has no attribute {name!r}')
