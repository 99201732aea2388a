from __future__ import annotations

import logging
import time
from contextlib import suppress
from typing import Any, Final

from flask import Flask, g, jsonify, request
from flask.typing import ResponseReturnValue

from ..config import Config, load_config
from ..errors import (
    InvalidArgumentError,
    NotADirectoryPathError,
    NotAFileError,
    NotFoundError,
    PathOutsideRootError,
    PermissionDeniedError,
    ScanTimeoutError,
    TailError,
    UnknownCommandError,
)
from ..logging_setup import configure_logging
from .routes_files import CFG_SETTINGS

_STATUS_BY_ERROR: Final[tuple[tuple[type[TailError], int], ...]] = (
    (NotFoundError, 404),
    (PermissionDeniedError, 403),
    (NotAFileError, 400),
    (NotADirectoryPathError, 400),
    (InvalidArgumentError, 400),
    (UnknownCommandError, 400),
    (PathOutsideRootError, 400),
    (ScanTimeoutError, 504),
)


def status_for(exc: TailError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(exc, cls):
            return status
    return 500


def _install_request_logging_hooks(app: Flask) -> None:
    @app.before_request
    def _log_request_start() -> None:
        g.request_start_time = time.time()
        qs = request.query_string.decode('utf-8', errors='replace') if request.query_string else ''
        logging.getLogger('api').info(
            'API %s %s%s from=%s',
            request.method,
            request.path,
            f'?{qs}' if qs else '',
            request.remote_addr,
        )

    @app.after_request
    def _log_request_end(response):
        start = getattr(g, 'request_start_time', None)
        dur_ms = (time.time() - start) * 1000.0 if start else 0.0
        logging.getLogger('api').info(
            'API done %s %s status=%s duration=%.1fms',
            request.method,
            request.path,
            response.status_code,
            dur_ms,
        )
        return response

    @app.teardown_request
    def _log_request_teardown(exc):  # pragma: no cover - integration behavior
        if exc is not None:
            logging.getLogger('api').exception(
                'API error on %s %s: %s',
                request.method,
                request.path,
                exc,
            )


def _install_error_handlers(app: Flask) -> None:
    @app.errorhandler(TailError)
    def _handle_tail_error(exc: TailError) -> ResponseReturnValue:
        status = status_for(exc)
        log = logging.getLogger('api')
        if status >= 500:
            log.warning('Request failed on %s: %s', request.path, exc, exc_info=exc)
        else:
            log.debug('Request rejected on %s: %s (%s)', request.path, exc, exc.kind)
        return jsonify(exc.to_dict()), status


def _register_blueprints(app: Flask) -> None:
    from .routes_files import bp as files_bp

    app.register_blueprint(files_bp)


def create_app(config: Any | None = None) -> Flask:
    """Create and configure the Flask API application.

    Features:
      - Initializes logging for the API process using
        logging_setup.configure_logging (level/file via env).
      - Stores the ringtail ``Config`` (served root, line limits, block size,
        scan timeout) in app.config; pass ``{'ringtail': Config(...)}`` to
        override the environment.
      - Registers the files blueprint (tail, ls, pwd, commands).
      - Maps ``TailError`` subclasses to JSON error responses.
      - Installs simple request/response logging hooks for observability.

    Args:
        config: Optional dict with overrides for Flask app.config.

    Returns:
        A configured Flask application instance.
    """
    app = Flask(__name__)

    if isinstance(config, dict):
        with suppress(Exception):
            app.config.update(config)

    if not isinstance(app.config.get(CFG_SETTINGS), Config):
        app.config[CFG_SETTINGS] = load_config()

    configure_logging(
        service='api',
        level_env='API_LOG_LEVEL',
        file_env='API_LOG_FILE',
        default='INFO',
    )

    _install_request_logging_hooks(app)
    _install_error_handlers(app)
    _register_blueprints(app)

    logging.getLogger('api').debug('Serving root %s', app.config[CFG_SETTINGS].root)
    return app
