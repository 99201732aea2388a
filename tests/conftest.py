"""Shared pytest fixtures.

Tests touching logging restore the root logger afterwards; ``make_file``
writes byte content into the per-test temp directory.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from logging import Logger
from pathlib import Path

import pytest


def _is_pytest_handler(h: logging.Handler) -> bool:
    return type(h).__module__.startswith('_pytest')


@pytest.fixture(autouse=True)
def _restore_root_logger() -> None:
    root: Logger = logging.getLogger()
    old_level = root.level
    old_handlers = list(root.handlers)
    try:
        yield
    finally:
        root.setLevel(old_level)
        # pytest swaps its own capture handlers per phase; leave those alone.
        for h in list(root.handlers):
            if h not in old_handlers and not _is_pytest_handler(h):
                root.removeHandler(h)
                h.close()
        for h in old_handlers:
            if h not in root.handlers and not _is_pytest_handler(h):
                root.addHandler(h)


@pytest.fixture
def make_file(tmp_path: Path) -> Callable[..., Path]:
    def _make(content: bytes | str, name: str = 'data.txt') -> Path:
        p = tmp_path / name
        p.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            content = content.encode('utf-8')
        p.write_bytes(content)
        return p

    return _make


@pytest.fixture
def numbered_file(make_file: Callable[..., Path]) -> Path:
    """A file with 20 lines: 'line 1' .. 'line 20', newline terminated."""
    return make_file(''.join(f'line {i}\n' for i in range(1, 21)), 'numbered.txt')
