from __future__ import annotations

import logging
import os

from ..errors import NotADirectoryPathError, NotFoundError, PermissionDeniedError, TailIOError

log = logging.getLogger('ringtail.fs')


def list_dir(path: str, show_hidden: bool = False) -> list[str]:
    """Return the sorted entry names of directory ``path``.

    Dot entries are skipped unless ``show_hidden`` is set.
    """
    try:
        names = os.listdir(path)
    except FileNotFoundError as exc:
        raise NotFoundError(f'{path}: no such file or directory', path=path) from exc
    except NotADirectoryError as exc:
        raise NotADirectoryPathError(f'{path}: not a directory', path=path) from exc
    except PermissionError as exc:
        raise PermissionDeniedError(f'{path}: permission denied', path=path) from exc
    except OSError as exc:
        log.debug('Listing failed path=%s: %s', path, exc)
        raise TailIOError(f'{path}: {exc.strerror or exc}', path=path) from exc
    if not show_hidden:
        names = [n for n in names if not n.startswith('.')]
    return sorted(names)


__all__ = ['list_dir']
