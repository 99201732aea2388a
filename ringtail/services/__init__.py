"""Core services: file access primitives, the tail engine, directory listing."""

from __future__ import annotations

from .dir_list import list_dir
from .file_access import FileStat, read_range, stat_file, stream_from
from .tail_engine import TailResult, locate_start, plan_tail, tail, tail_text

__all__ = [
    'FileStat',
    'TailResult',
    'list_dir',
    'locate_start',
    'plan_tail',
    'read_range',
    'stat_file',
    'stream_from',
    'tail',
    'tail_text',
]
