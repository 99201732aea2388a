"""File-system primitives consumed by the tail engine.

Three operations only: stat a regular file, stream its bytes forward from an
offset, and read an exact byte range. OS errors are translated into the
``ringtail.errors`` taxonomy and tagged with the phase they occurred in.
"""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Iterator
from dataclasses import dataclass

from ..errors import (
    NotAFileError,
    NotFoundError,
    PermissionDeniedError,
    TailError,
    TailIOError,
)

DEFAULT_BLOCK_SIZE = 64 * 1024

log = logging.getLogger('ringtail.fs')


@dataclass(frozen=True)
class FileStat:
    size: int
    block_size: int


def translate_os_error(exc: OSError, path: str, phase: str | None = None) -> TailError:
    """Map an ``OSError`` onto the matching ``TailError`` subclass."""
    reason = exc.strerror or str(exc)
    if isinstance(exc, FileNotFoundError):
        return NotFoundError(f'{path}: no such file', path=path, phase=phase)
    if isinstance(exc, PermissionError):
        return PermissionDeniedError(f'{path}: permission denied', path=path, phase=phase)
    if isinstance(exc, IsADirectoryError):
        return NotAFileError(f'{path}: is a directory', path=path, phase=phase)
    return TailIOError(f'{path}: {reason}', path=path, phase=phase)


def stat_file(path: str, block_size: int | None = None, phase: str | None = None) -> FileStat:
    try:
        st = os.stat(path)
    except OSError as exc:
        raise translate_os_error(exc, path, phase) from exc
    if stat.S_ISDIR(st.st_mode):
        raise NotAFileError(f'{path}: is a directory', path=path, phase=phase)
    if not stat.S_ISREG(st.st_mode):
        raise NotAFileError(f'{path}: not a regular file', path=path, phase=phase)
    if block_size is None or block_size <= 0:
        block_size = getattr(st, 'st_blksize', 0) or DEFAULT_BLOCK_SIZE
    return FileStat(size=st.st_size, block_size=int(block_size))


def stream_from(
    path: str,
    start: int = 0,
    block_size: int = DEFAULT_BLOCK_SIZE,
    limit: int | None = None,
    phase: str | None = None,
) -> Iterator[bytes]:
    """Yield the file's bytes in order, ``block_size`` at a time.

    Stops at end of file, or once ``limit`` bytes have been produced. The file
    is closed when the generator finishes or is closed early by the consumer.
    """
    if block_size <= 0:
        block_size = DEFAULT_BLOCK_SIZE
    remaining = limit
    try:
        with open(path, 'rb') as f:
            if start:
                f.seek(start)
            while remaining is None or remaining > 0:
                want = block_size if remaining is None else min(block_size, remaining)
                chunk = f.read(want)
                if not chunk:
                    return
                if remaining is not None:
                    remaining -= len(chunk)
                yield chunk
    except OSError as exc:
        log.debug('Stream read failed path=%s start=%s: %s', path, start, exc)
        raise translate_os_error(exc, path, phase) from exc


def read_range(path: str, offset: int, length: int, phase: str | None = None) -> bytes:
    """Return exactly ``length`` bytes starting at ``offset``."""
    if length <= 0:
        return b''
    try:
        with open(path, 'rb') as f:
            f.seek(offset)
            parts: list[bytes] = []
            got = 0
            while got < length:
                chunk = f.read(length - got)
                if not chunk:
                    break
                parts.append(chunk)
                got += len(chunk)
    except OSError as exc:
        log.debug('Range read failed path=%s offset=%s length=%s: %s', path, offset, length, exc)
        raise translate_os_error(exc, path, phase) from exc
    if got != length:
        raise TailIOError(
            f'{path}: short read ({got} of {length} bytes at offset {offset})',
            path=path,
            phase=phase,
        )
    return b''.join(parts)


__all__ = [
    'DEFAULT_BLOCK_SIZE',
    'FileStat',
    'read_range',
    'stat_file',
    'stream_from',
    'translate_os_error',
]
