from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, cast

from flask import Blueprint, Response, current_app, jsonify, request
from flask.typing import ResponseReturnValue

from ..commands import CommandContext, dispatch, split_command_line
from ..config import Config
from ..errors import PHASE_EXTRACT, InvalidArgumentError, PathOutsideRootError
from ..services.dir_list import list_dir
from ..services.file_access import read_range
from ..services.tail_engine import parse_lines, plan_tail
from .auth import login_required

bp = Blueprint('files', __name__)

CFG_SETTINGS = 'ringtail'
KEY_PATH = 'path'


def settings() -> Config:
    return cast(Config, current_app.config[CFG_SETTINGS])


def resolve_under_root(rel_path: str, root: str) -> str:
    """Resolve ``rel_path`` against ``root``, rejecting anything outside it.

    Absolute paths are accepted only when they already point under ``root``.
    """
    root_abs = Path(root).resolve()
    raw = (rel_path or '').strip()
    target = (root_abs / raw).resolve() if raw else root_abs
    if target != root_abs and not target.is_relative_to(root_abs):
        raise PathOutsideRootError(f'{rel_path}: outside of served root', path=rel_path)
    return str(target)


def _lines_arg(cfg: Config) -> int:
    lines = parse_lines(request.args.get('lines'), cfg.default_lines)
    return min(lines, cfg.max_lines)


def _require_path() -> str:
    raw = (request.args.get(KEY_PATH) or '').strip()
    if not raw:
        raise InvalidArgumentError('path is required')
    return raw


def _tail_bytes(raw_path: str, lines: int, cfg: Config) -> tuple[str, int, int, bytes]:
    path = resolve_under_root(raw_path, cfg.root)
    plan = plan_tail(path, lines, block_size=cfg.block_size, deadline=cfg.scan_timeout)
    data = read_range(path, plan.start, plan.length, phase=PHASE_EXTRACT) if plan.length else b''
    return path, plan.start, plan.size, data


@bp.route('/tail', methods=['GET'])
@login_required
def tail_json() -> ResponseReturnValue:
    """Return the last N lines of a file under the served root.

    Query params:
      - path: file path relative to the root (required)
      - lines: positive integer (default RINGTAIL_DEFAULT_LINES), capped at
        RINGTAIL_MAX_LINES

    Response JSON: { path, lines, start, size, content }
    """
    cfg = settings()
    raw_path = _require_path()
    lines = _lines_arg(cfg)
    logging.getLogger('api').debug('Tail request path=%s lines=%s', raw_path, lines)
    path, start, size, data = _tail_bytes(raw_path, lines, cfg)
    return jsonify(
        {
            KEY_PATH: path,
            'lines': lines,
            'start': start,
            'size': size,
            'content': data.decode('utf-8', errors='replace'),
        }
    )


@bp.route('/tail/raw', methods=['GET'])
@login_required
def tail_raw() -> ResponseReturnValue:
    """Same as /tail but the body is the raw bytes as text/plain."""
    cfg = settings()
    raw_path = _require_path()
    lines = _lines_arg(cfg)
    _, start, size, data = _tail_bytes(raw_path, lines, cfg)
    resp = Response(data, mimetype='text/plain')
    resp.headers['X-Tail-Start'] = str(start)
    resp.headers['X-Tail-Size'] = str(size)
    return resp


@bp.route('/ls', methods=['GET'])
@login_required
def ls() -> ResponseReturnValue:
    """List a directory under the served root (default: the root itself)."""
    cfg = settings()
    path = resolve_under_root(request.args.get(KEY_PATH) or '', cfg.root)
    show_hidden = (request.args.get('all') or '').strip().lower() in ('1', 'true', 'yes')
    entries = list_dir(path, show_hidden=show_hidden)
    logging.getLogger('api').debug('List request path=%s entries=%s', path, len(entries))
    return jsonify({KEY_PATH: path, 'entries': entries})


@bp.route('/pwd', methods=['GET'])
@login_required
def pwd() -> ResponseReturnValue:
    return jsonify({'cwd': settings().root})


def _command_request(data: dict[str, Any]) -> tuple[str, list[str]]:
    line = data.get('line')
    if isinstance(line, str) and line.strip():
        return split_command_line(line)
    name = str(data.get('command') or '').strip()
    if not name:
        raise InvalidArgumentError('command or line is required')
    args = data.get('args') or []
    if not isinstance(args, list):
        raise InvalidArgumentError('args must be a list of strings')
    return name, [str(a) for a in args]


def _confine_args(name: str, args: list[str], root: str) -> list[str]:
    # Operands are checked against the root before the handler sees them.
    out: list[str] = []
    expect_value = False
    for a in args:
        if expect_value:
            expect_value = False
            out.append(a)
            continue
        if a.startswith('-'):
            expect_value = name == 'tail' and a in ('-n', '--lines')
            out.append(a)
            continue
        resolve_under_root(a, root)
        out.append(a)
    return out


@bp.route('/commands', methods=['POST'])
@login_required
def run_command() -> ResponseReturnValue:
    """Dispatch a command (tail|ls|pwd) with the served root as working dir.

    Body JSON: { command: str, args: [str] } or { line: "tail -n 5 app.log" }

    Response JSON: { command, output }
    """
    cfg = settings()
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise InvalidArgumentError('request body must be a JSON object')
    name, args = _command_request(data)
    args = _confine_args(name, args, cfg.root)
    ctx = CommandContext(
        cwd=cfg.root,
        default_lines=cfg.default_lines,
        block_size=cfg.block_size,
        scan_timeout=cfg.scan_timeout,
    )
    logging.getLogger('api').debug('Command request command=%s args=%s', name, args)
    result = dispatch(name, args, ctx)
    return jsonify({'command': result.command, 'output': result.text()})


__all__ = ['bp', 'resolve_under_root']
