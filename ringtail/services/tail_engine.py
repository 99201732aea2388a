"""Tail engine: the last N lines of a file in bounded memory.

The work happens in three phases:

1. scan: stream the file forward once, recording the offsets of the most
   recent N+1 newline bytes in a fixed-size ring. Memory is O(N) whatever the
   file size.
2. locate: the ring slot about to be overwritten holds the (N+1)-th-from-last
   newline; the answer starts one byte after it. When the file lacks a
   trailing newline its last line is unterminated, so the N-th-from-last
   newline is used instead. An unset slot means the file has at most N lines
   and the answer starts at offset 0.
3. extract: a single positioned read of ``size - start`` bytes.

A line is a run of bytes ending in ``\\n``, or the final run up to end of file
when the file has no trailing newline.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from ..errors import PHASE_EXTRACT, PHASE_SCAN, InvalidArgumentError, ScanTimeoutError
from .file_access import read_range, stat_file, stream_from

DEFAULT_LINES = 10
NEWLINE = b'\n'

log = logging.getLogger('ringtail.tail')


class NewlineRing:
    """Fixed-capacity circular record of newline offsets.

    Slots never written hold ``None``; written slots hold a file offset >= 0.
    """

    __slots__ = ('capacity', '_slots')

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError('capacity must be positive')
        self.capacity = capacity
        self._slots: list[int | None] = [None] * capacity

    def __len__(self) -> int:
        return self.capacity

    def __getitem__(self, index: int) -> int | None:
        return self._slots[index]

    def record(self, index: int, offset: int) -> int:
        """Store ``offset`` at ``index``; return the next write index."""
        self._slots[index] = offset
        return (index + 1) % self.capacity

    def ordered(self, index: int) -> list[int]:
        """Written offsets, oldest first, given the current write index.

        Introspection helper for debugging; the tail path only reads single
        slots through ``boundary``.
        """
        rotated = self._slots[index:] + self._slots[:index]
        return [o for o in rotated if o is not None]


@dataclass
class ScanCursor:
    offset: int = 0
    index: int = 0
    trailing_newline: bool = False

    def feed(self, chunk: bytes, ring: NewlineRing) -> None:
        pos = chunk.find(NEWLINE)
        while pos != -1:
            self.index = ring.record(self.index, self.offset + pos)
            pos = chunk.find(NEWLINE, pos + 1)
        if chunk:
            self.trailing_newline = chunk.endswith(NEWLINE)
        self.offset += len(chunk)


@dataclass(frozen=True)
class TailResult:
    path: str
    start: int
    size: int

    @property
    def length(self) -> int:
        return self.size - self.start


def validate_lines(lines: Any) -> int:
    if isinstance(lines, bool) or not isinstance(lines, int) or lines < 1:
        raise InvalidArgumentError(f'line count must be a positive integer, got {lines!r}')
    return lines


def parse_lines(raw: Any, default: int = DEFAULT_LINES) -> int:
    """Coerce a user-supplied line count (str or int); ``None``/'' -> default."""
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return validate_lines(default)
    if isinstance(raw, str):
        try:
            raw = int(raw.strip())
        except ValueError:
            raise InvalidArgumentError(f'invalid number of lines: {raw!r}') from None
    return validate_lines(raw)


def boundary(ring: NewlineRing, cursor: ScanCursor) -> int:
    """Start offset of the last (capacity - 1) lines.

    With a trailing newline the answer follows the oldest retained newline,
    the slot about to be overwritten. Without one, the unterminated last line
    counts too, so the boundary is one newline later.
    """
    if cursor.trailing_newline:
        slot = cursor.index
    else:
        slot = (cursor.index + 1) % ring.capacity
    newline_at = ring[slot]
    if newline_at is None:
        return 0
    return newline_at + 1


def scan(chunks: Iterable[bytes], lines: int) -> tuple[NewlineRing, ScanCursor]:
    validate_lines(lines)
    ring = NewlineRing(lines + 1)
    cursor = ScanCursor()
    for chunk in chunks:
        cursor.feed(chunk, ring)
    return ring, cursor


def locate_start(chunks: Iterable[bytes], lines: int) -> int:
    """Offset where the last ``lines`` lines of the byte stream begin."""
    ring, cursor = scan(chunks, lines)
    return boundary(ring, cursor)


def _with_deadline(chunks: Iterator[bytes], deadline: float, path: str) -> Iterator[bytes]:
    expires = time.monotonic() + deadline
    try:
        for chunk in chunks:
            if time.monotonic() > expires:
                raise ScanTimeoutError(
                    f'{path}: scan exceeded {deadline:g}s',
                    path=path,
                    phase=PHASE_SCAN,
                )
            yield chunk
    finally:
        close = getattr(chunks, 'close', None)
        if close is not None:
            close()


def plan_tail(
    path: str,
    lines: int = DEFAULT_LINES,
    block_size: int | None = None,
    deadline: float | None = None,
) -> TailResult:
    """Run the scan and locate phases; return the byte range to extract."""
    validate_lines(lines)
    st = stat_file(path, block_size, phase=PHASE_SCAN)
    if st.size == 0:
        return TailResult(path=path, start=0, size=0)
    # Bounded by the size seen at stat time so scan and extract agree.
    chunks: Iterator[bytes] = stream_from(
        path, 0, st.block_size, limit=st.size, phase=PHASE_SCAN
    )
    # A file never has more lines than bytes; keeps the ring small for huge N.
    ring_lines = min(lines, st.size + 1)
    if deadline is not None and deadline > 0:
        chunks = _with_deadline(chunks, deadline, path)
    try:
        start = locate_start(chunks, ring_lines)
    finally:
        chunks.close()  # type: ignore[attr-defined]
    log.debug(
        'Scan done path=%s size=%s block=%s lines=%s start=%s',
        path,
        st.size,
        st.block_size,
        lines,
        start,
    )
    return TailResult(path=path, start=start, size=st.size)


def tail(
    path: str,
    lines: int = DEFAULT_LINES,
    block_size: int | None = None,
    deadline: float | None = None,
) -> bytes:
    """Return the last ``lines`` lines of ``path`` as bytes.

    Files with fewer lines are returned whole; an empty file gives ``b''``.

    Raises:
        InvalidArgumentError: ``lines`` is not a positive integer.
        NotFoundError, PermissionDeniedError, NotAFileError: bad path.
        TailIOError: read failure, tagged with phase ``scan`` or ``extract``.
    """
    result = plan_tail(path, lines, block_size=block_size, deadline=deadline)
    if result.length == 0:
        return b''
    return read_range(path, result.start, result.length, phase=PHASE_EXTRACT)


def tail_text(
    path: str,
    lines: int = DEFAULT_LINES,
    encoding: str = 'utf-8',
    **kwargs: Any,
) -> str:
    """``tail`` decoded as text, replacing undecodable bytes."""
    return tail(path, lines, **kwargs).decode(encoding, errors='replace')


__all__ = [
    'DEFAULT_LINES',
    'NewlineRing',
    'ScanCursor',
    'TailResult',
    'boundary',
    'locate_start',
    'parse_lines',
    'plan_tail',
    'scan',
    'tail',
    'tail_text',
    'validate_lines',
]
