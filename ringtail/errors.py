"""Error taxonomy shared by the tail engine, the lister and the dispatcher.

Every failure raised by ringtail derives from ``TailError`` so callers (CLI,
web layer) can report and continue with a single ``except`` clause.
"""

from __future__ import annotations

PHASE_SCAN = 'scan'
PHASE_EXTRACT = 'extract'


class TailError(Exception):
    kind = 'error'

    def __init__(self, message: str, *, path: str | None = None, phase: str | None = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.phase = phase

    def to_dict(self) -> dict[str, str]:
        d = {'error': self.message, 'kind': self.kind}
        if self.phase:
            d['phase'] = self.phase
        return d


class NotFoundError(TailError):
    kind = 'not_found'


class PermissionDeniedError(TailError):
    kind = 'permission_denied'


class NotAFileError(TailError):
    kind = 'not_a_file'


class NotADirectoryPathError(TailError):
    kind = 'not_a_directory'


class TailIOError(TailError):
    kind = 'io_error'


class ScanTimeoutError(TailIOError):
    kind = 'timeout'


class InvalidArgumentError(TailError):
    kind = 'invalid_argument'


class UnknownCommandError(TailError):
    kind = 'unknown_command'

    def __init__(self, name: str):
        super().__init__(f'unknown command: {name}')
        self.name = name


class PathOutsideRootError(TailError):
    kind = 'path_outside_root'


__all__ = [
    'PHASE_EXTRACT',
    'PHASE_SCAN',
    'InvalidArgumentError',
    'NotADirectoryPathError',
    'NotAFileError',
    'NotFoundError',
    'PathOutsideRootError',
    'PermissionDeniedError',
    'ScanTimeoutError',
    'TailError',
    'TailIOError',
    'UnknownCommandError',
]
