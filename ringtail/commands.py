"""Command dispatcher.

Command names map to handler functions through ``COMMANDS``, built once at
import. Each handler receives the argument strings and a ``CommandContext``
and returns the bytes to write to the caller's sink.

Usage:
  tail [-n NUM | -NUM] <file>   last NUM lines (default 10)
  ls [dir]                      directory entries, one per line
  pwd                           working directory
"""

from __future__ import annotations

import logging
import os
import shlex
from collections.abc import Callable
from dataclasses import dataclass

from .errors import InvalidArgumentError, UnknownCommandError
from .services.dir_list import list_dir
from .services.tail_engine import DEFAULT_LINES, parse_lines, tail

log = logging.getLogger('ringtail.commands')


@dataclass(frozen=True)
class CommandContext:
    cwd: str
    default_lines: int = DEFAULT_LINES
    block_size: int | None = None
    scan_timeout: float | None = None

    def resolve(self, path: str) -> str:
        return os.path.normpath(os.path.join(self.cwd, path))


@dataclass(frozen=True)
class CommandResult:
    command: str
    output: bytes

    def text(self, encoding: str = 'utf-8') -> str:
        return self.output.decode(encoding, errors='replace')


Handler = Callable[[list[str], CommandContext], bytes]


def _parse_tail_args(args: list[str], default_lines: int) -> tuple[str, int]:
    raw_lines: str | None = None
    paths: list[str] = []
    it = iter(args)
    for a in it:
        if a in ('-n', '--lines'):
            raw_lines = next(it, None)
            if raw_lines is None:
                raise InvalidArgumentError(f'option {a} requires an argument')
        elif a.startswith('--lines='):
            raw_lines = a.split('=', 1)[1]
        elif a.startswith('-n') and len(a) > 2:
            raw_lines = a[2:]
        elif a.startswith('-') and a[1:].isdigit():
            raw_lines = a[1:]
        elif a.startswith('-') and a != '-':
            raise InvalidArgumentError(f'unknown option: {a}')
        else:
            paths.append(a)
    if not paths:
        raise InvalidArgumentError('missing file operand')
    if len(paths) > 1:
        raise InvalidArgumentError(f'extra operand: {paths[1]}')
    return paths[0], parse_lines(raw_lines, default_lines)


def cmd_tail(args: list[str], ctx: CommandContext) -> bytes:
    path, lines = _parse_tail_args(args, ctx.default_lines)
    return tail(
        ctx.resolve(path),
        lines,
        block_size=ctx.block_size,
        deadline=ctx.scan_timeout,
    )


def cmd_ls(args: list[str], ctx: CommandContext) -> bytes:
    show_hidden = False
    targets: list[str] = []
    for a in args:
        if a in ('-a', '--all'):
            show_hidden = True
        elif a.startswith('-'):
            raise InvalidArgumentError(f'unknown option: {a}')
        else:
            targets.append(a)
    if len(targets) > 1:
        raise InvalidArgumentError(f'extra operand: {targets[1]}')
    path = ctx.resolve(targets[0]) if targets else ctx.cwd
    names = list_dir(path, show_hidden=show_hidden)
    return ''.join(f'{n}\n' for n in names).encode('utf-8')


def cmd_pwd(args: list[str], ctx: CommandContext) -> bytes:
    if args:
        raise InvalidArgumentError('pwd takes no arguments')
    return f'{ctx.cwd}\n'.encode('utf-8')


COMMANDS: dict[str, Handler] = {
    'tail': cmd_tail,
    'ls': cmd_ls,
    'pwd': cmd_pwd,
}


def resolve(name: str) -> Handler:
    handler = COMMANDS.get(name)
    if handler is None:
        raise UnknownCommandError(name)
    return handler


def dispatch(name: str, args: list[str], ctx: CommandContext) -> CommandResult:
    handler = resolve(name)
    log.debug('Dispatch command=%s args=%s cwd=%s', name, args, ctx.cwd)
    return CommandResult(command=name, output=handler(list(args), ctx))


def split_command_line(line: str) -> tuple[str, list[str]]:
    try:
        parts = shlex.split(line)
    except ValueError as exc:
        raise InvalidArgumentError(f'cannot parse command line: {exc}') from exc
    if not parts:
        raise InvalidArgumentError('empty command line')
    return parts[0], parts[1:]


def run_line(line: str, ctx: CommandContext) -> CommandResult:
    name, args = split_command_line(line)
    return dispatch(name, args, ctx)


__all__ = [
    'COMMANDS',
    'CommandContext',
    'CommandResult',
    'dispatch',
    'resolve',
    'run_line',
    'split_command_line',
]
