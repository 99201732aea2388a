"""
cli.py: command line entry point.

  ringtail tail [-n NUM] <file>   - Show the last NUM lines (default 10)
  ringtail ls [dir]               - List directory entries
  ringtail pwd                    - Print the working directory
"""

from __future__ import annotations

import argparse
import logging
import sys

from .commands import COMMANDS, CommandContext, dispatch
from .config import load_config
from .errors import InvalidArgumentError, TailError, UnknownCommandError
from .logging_setup import configure_logging, set_logger_level

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='ringtail',
        description='Print the last lines of files in bounded memory.',
        usage='ringtail [--log-level LEVEL] [--cwd DIR] <command> [args...]',
    )
    parser.add_argument('--log-level', help='Logging level (default from CLI_LOG_LEVEL).')
    parser.add_argument('--cwd', help='Directory relative paths resolve against.')
    parser.add_argument('command', help=f'One of: {", ".join(sorted(COMMANDS))}.')
    parser.add_argument('args', nargs=argparse.REMAINDER, help='Command arguments.')
    return parser


def _write(data: bytes) -> None:
    out = getattr(sys.stdout, 'buffer', None)
    if out is not None:
        sys.stdout.flush()
        out.write(data)
        out.flush()
    else:
        sys.stdout.write(data.decode('utf-8', errors='replace'))
        sys.stdout.flush()


def main(args_list: list[str] | None = None) -> int:
    if args_list is None:
        args_list = sys.argv[1:]

    args = build_parser().parse_args(args_list)

    configure_logging(
        service='cli',
        level_env='CLI_LOG_LEVEL',
        default='WARNING',
        stream=sys.stderr,
    )
    if args.log_level:
        set_logger_level(args.log_level)

    try:
        cfg = load_config()
    except InvalidArgumentError as exc:
        print(f'ringtail: {exc}', file=sys.stderr)
        return EXIT_USAGE
    ctx = CommandContext(
        cwd=args.cwd or cfg.root,
        default_lines=cfg.default_lines,
        block_size=cfg.block_size,
        scan_timeout=cfg.scan_timeout,
    )

    try:
        result = dispatch(args.command, args.args, ctx)
    except (InvalidArgumentError, UnknownCommandError) as exc:
        print(f'ringtail: {args.command}: {exc}', file=sys.stderr)
        return EXIT_USAGE
    except TailError as exc:
        logging.getLogger('ringtail').debug('Command failed', exc_info=True)
        print(f'ringtail: {args.command}: {exc}', file=sys.stderr)
        return EXIT_FAILURE

    _write(result.output)
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
