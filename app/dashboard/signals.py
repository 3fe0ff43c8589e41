"""
Cache invalidation and navigation signals raised after a successful mutation.

revalidate_path() announces that rendered output for a path is stale. The app
keeps no view cache of its own (each gunicorn worker would hold a private
copy), so read endpoints always query the database; anything that does cache
responses downstream (a CDN purge hook, a test) connects to `path_revalidated`.

navigate() ends the current action by raising an HTTPException that carries
the redirect response, so no code after it runs. Flask returns that response
as-is when the exception reaches the dispatcher.
"""
from __future__ import annotations

import logging
from typing import NoReturn

from blinker import Namespace
from flask import abort, current_app, has_app_context, redirect

logger = logging.getLogger(__name__)

_signals = Namespace()

path_revalidated = _signals.signal("path-revalidated")


def revalidate_path(path: str) -> None:
    sender = current_app._get_current_object() if has_app_context() else None  # type: ignore[attr-defined]
    logger.debug("Revalidating cached views for %s", path)
    path_revalidated.send(sender, path=path)


def navigate(location: str, code: int = 303) -> NoReturn:
    abort(redirect(location, code=code))
