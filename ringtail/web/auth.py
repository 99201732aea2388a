from __future__ import annotations

import hmac
import os
from functools import wraps
from typing import Any, Callable

from flask import jsonify, request

BEARER_PREFIX = 'Bearer '


def _is_auth_required() -> bool:
    """Return True if API auth should be enforced.

    Default: disabled (False). Enable by setting API_AUTH_REQUIRED=1 and
    API_TOKEN=<secret> for the API process; requests must then send
    ``Authorization: Bearer <secret>``.
    """
    return os.environ.get('API_AUTH_REQUIRED', '0') == '1'


def _expected_token() -> str:
    return os.environ.get('API_TOKEN', '')


def request_token() -> str:
    header = request.headers.get('Authorization', '')
    if not header.startswith(BEARER_PREFIX):
        return ''
    return header[len(BEARER_PREFIX) :].strip()


def is_authorized() -> bool:
    if not _is_auth_required():
        return True
    expected = _expected_token()
    # An unset token never authorizes, even an empty header.
    if not expected:
        return False
    return hmac.compare_digest(request_token().encode('utf-8'), expected.encode('utf-8'))


def login_required(fn: Callable[..., Any]) -> Callable[..., Any]:
    @wraps(fn)
    def _wrapped(*args: Any, **kwargs: Any):
        if not is_authorized():
            return jsonify({'error': 'unauthorized'}), 401
        return fn(*args, **kwargs)

    return _wrapped


__all__ = ['is_authorized', 'login_required', 'request_token']
