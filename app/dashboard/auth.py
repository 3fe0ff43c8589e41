from __future__ import annotations

import enum
import logging
import uuid
from collections.abc import Callable, Mapping
from functools import wraps
from typing import Any

from flask import Blueprint, current_app, flash, g, get_flashed_messages, redirect, request, session, url_for
from sqlalchemy import func, select
from werkzeug.security import check_password_hash

from app.dashboard.constants import DASHBOARD_PATH, MIN_PASSWORD_LENGTH
from app.dashboard.db import PersistenceError, session_scope
from app.dashboard.models import User
from app.dashboard.security import ensure_csrf_token
from app.dashboard.utils import is_local_path, is_valid_email

bp = Blueprint("auth", __name__)
logger = logging.getLogger(__name__)


class AuthErrorKind(enum.Enum):
    CREDENTIALS_SIGNIN = "CredentialsSignin"  # unknown email or wrong password
    CALLBACK = "CallbackRouteError"  # the sign-in flow itself failed


_AUTH_ERROR_MESSAGES: dict[AuthErrorKind, str] = {
    AuthErrorKind.CREDENTIALS_SIGNIN: "Invalid credentials.",
    AuthErrorKind.CALLBACK: "Something went wrong.",
}


class AuthError(Exception):
    """Sign-in failure tagged with its kind; callers branch on .kind, not on subclasses."""

    def __init__(self, kind: AuthErrorKind, detail: str | None = None) -> None:
        super().__init__(detail or kind.value)
        self.kind = kind


def auth_error_message(err: AuthError) -> str:
    return _AUTH_ERROR_MESSAGES[err.kind]


# ---------- Credential store ----------
def get_user(email: str) -> User | None:
    # Stored emails may carry any case; logins arrive lower-cased.
    with session_scope() as s:
        stmt = select(User).where(func.lower(User.email) == email.lower()).order_by(User.id).limit(1)
        return s.execute(stmt).scalar_one_or_none()


def get_user_by_id(user_id: str) -> User | None:
    with session_scope() as s:
        return s.get(User, user_id)


# ---------- Authenticator ----------
def authorize(credentials: Mapping[str, Any]) -> User | None:
    """
    Returns the matching user, or None. Bad shape, unknown email and wrong
    password all decline the same way so the response never says which.
    """
    email = credentials.get("email")
    password = credentials.get("password")
    if not isinstance(email, str) or not isinstance(password, str):
        logger.info("Invalid credentials")
        return None
    email = email.strip().lower()
    if not is_valid_email(email) or len(password) < MIN_PASSWORD_LENGTH:
        logger.info("Invalid credentials")
        return None

    user = get_user(email)
    if user is not None and check_password_hash(user.password, password):
        return user

    logger.info("Invalid credentials")
    return None


def sign_in(credentials: Mapping[str, Any]) -> User:
    try:
        user = authorize(credentials)
    except PersistenceError as e:
        logger.exception("Failed to fetch user")
        raise AuthError(AuthErrorKind.CALLBACK, "Failed to fetch user.") from e
    if user is None:
        raise AuthError(AuthErrorKind.CREDENTIALS_SIGNIN)

    session.clear()
    session["user_id"] = user.id
    session.permanent = True
    # Fresh token for the new session
    ensure_csrf_token()
    return user


def authenticate(credentials: Mapping[str, Any]) -> str | None:
    """
    Login form action. Returns None once the user is signed in, otherwise the
    message to show. Errors that are not AuthError propagate.
    """
    try:
        sign_in(credentials)
    except AuthError as e:
        return auth_error_message(e)
    return None


# ---------- Request wiring ----------
def load_current_user() -> None:
    """
    Loads g.current_user from the signed session cookie.
    Also assigns a simple per-request request_id (for log correlation).
    """
    if not getattr(g, "request_id", None):
        g.request_id = uuid.uuid4().hex
    if request.path.startswith(("/static/", "/health", "/healthz")):
        g.current_user = None
        return

    user_id = session.get("user_id")
    if not user_id:
        g.current_user = None
        return

    try:
        user = get_user_by_id(str(user_id))
    except PersistenceError as e:
        current_app.logger.error("load_current_user DB error (clearing session): %s", e)
        user = None
    if user is None:
        session.pop("user_id", None)
    g.current_user = user


def login_required(fn: Callable[..., Any]) -> Callable[..., Any]:
    @wraps(fn)
    def wrapped(*args: Any, **kwargs: Any):
        if getattr(g, "current_user", None) is None:
            nxt = request.full_path or request.path
            # Avoid trailing '?' from full_path when there is no query string.
            if nxt.endswith("?"):
                nxt = nxt[:-1]
            return redirect(url_for("auth.login_get", next=nxt))
        return fn(*args, **kwargs)

    return wrapped


@bp.get("/login")
def login_get():
    if getattr(g, "current_user", None) is not None:
        return redirect(DASHBOARD_PATH)
    nxt = (request.args.get("next") or "").strip()
    messages = [{"category": c, "message": m} for c, m in get_flashed_messages(with_categories=True)]
    return {"next": nxt, "messages": messages, "csrf_token": ensure_csrf_token()}


@bp.post("/login")
def login_post():
    nxt = (request.form.get("redirectTo") or request.form.get("next") or "").strip()
    try:
        message = authenticate(request.form)
    except Exception:
        current_app.logger.exception("Login POST crashed (request_id=%s)", getattr(g, "request_id", None))
        raise

    if message:
        flash(message, "danger")
        return redirect(url_for("auth.login_get", next=nxt or None))

    if is_local_path(nxt):
        return redirect(nxt)
    return redirect(DASHBOARD_PATH)


@bp.route("/logout", methods=["GET", "POST"])
def logout():
    session.pop("user_id", None)
    return redirect(url_for("auth.login_get"))
