"""Development server for the ringtail HTTP API.

Serves files under RINGTAIL_ROOT on RINGTAIL_HOST:RINGTAIL_PORT
(default 127.0.0.1:8087). Use a real WSGI server in production.
"""

from __future__ import annotations

import os

from .app_factory import create_app

DEFAULT_HOST = '127.0.0.1'
DEFAULT_PORT = 8087


def main() -> None:  # pragma: no cover - dev helper
    app = create_app()
    host = os.environ.get('RINGTAIL_HOST', DEFAULT_HOST)
    port = int(os.environ.get('RINGTAIL_PORT', str(DEFAULT_PORT)))
    app.logger.info('Serving %s on %s:%s', app.config['ringtail'].root, host, port)
    app.run(host=host, port=port)


if __name__ == '__main__':  # pragma: no cover - dev helper
    main()
