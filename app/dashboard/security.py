"""
CSRF tokens for session-authenticated form posts.

The token lives in the signed session cookie. Unsafe requests echo it back in
the X-CSRF-Token header, a csrf_token form field, or a csrf_token JSON key.
"""
import secrets

from flask import Request, session

CSRF_FIELD = "csrf_token"
CSRF_HEADER = "X-CSRF-Token"


def ensure_csrf_token() -> str:
    """Ensure a CSRF token exists in the session and return it."""
    token = session.get(CSRF_FIELD)
    if not token:
        token = secrets.token_urlsafe(32)
        session[CSRF_FIELD] = token
    return token


def validate_csrf(req: Request) -> bool:
    token = req.headers.get(CSRF_HEADER) or req.form.get(CSRF_FIELD)
    if not token and req.is_json:
        body = req.get_json(silent=True)
        if isinstance(body, dict):
            token = body.get(CSRF_FIELD)

    expected = session.get(CSRF_FIELD)
    return bool(token and expected and secrets.compare_digest(str(token), str(expected)))
