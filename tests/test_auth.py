"""Tests for credential checks, sign-in error classification and the login routes."""
import pytest
from werkzeug.security import generate_password_hash

from app.dashboard import auth, create_app
from app.dashboard.auth import AuthError, AuthErrorKind, auth_error_message, authenticate, authorize
from app.dashboard.db import PersistenceError, session_scope
from app.dashboard.models import Base, User


@pytest.fixture()
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.setenv("ENV", "test")

    app = create_app()
    engine = app.extensions["sqlalchemy_engine"]
    Base.metadata.create_all(bind=engine)

    with session_scope(app) as s:
        s.add(User(id="user-1", name="User", email="user@nextmail.com", password=generate_password_hash("123456")))

    return app


@pytest.fixture()
def lookups(monkeypatch):
    """Records every credential-store lookup while still doing the real one."""
    calls = []
    real_get_user = auth.get_user

    def _spy(email):
        calls.append(email)
        return real_get_user(email)

    monkeypatch.setattr(auth, "get_user", _spy)
    return calls


# ---------- authorize ----------
def test_valid_credentials_return_user(app, lookups):
    with app.app_context():
        user = authorize({"email": "user@nextmail.com", "password": "123456"})
    assert user is not None
    assert user.id == "user-1"
    assert lookups == ["user@nextmail.com"]


def test_email_is_normalized_before_lookup(app, lookups):
    with app.app_context():
        user = authorize({"email": "  USER@nextmail.com ", "password": "123456"})
    assert user is not None
    assert lookups == ["user@nextmail.com"]


def test_mixed_case_stored_email_can_sign_in(app, lookups):
    with session_scope(app) as s:
        s.add(User(id="user-2", name="Mixed", email="Mixed.Case@NextMail.com", password=generate_password_hash("654321")))

    with app.app_context():
        user = authorize({"email": "mixed.case@nextmail.com", "password": "654321"})
        assert user is not None
        assert user.id == "user-2"
        assert authorize({"email": "MIXED.case@nextmail.com", "password": "654321"}).id == "user-2"


@pytest.mark.parametrize(
    "credentials",
    [
        {"email": "a@b.com", "password": "short"},
        {"email": "not-an-email", "password": "123456"},
        {"email": "", "password": "123456"},
        {"email": "user@nextmail.com"},
        {"password": "123456"},
        {"email": ["user@nextmail.com"], "password": "123456"},
        {},
    ],
)
def test_bad_shape_declines_before_lookup(app, lookups, credentials):
    with app.app_context():
        assert authorize(credentials) is None
    assert lookups == []


def test_wrong_password_declines(app):
    with app.app_context():
        assert authorize({"email": "user@nextmail.com", "password": "1234567"}) is None


def test_unknown_email_declines(app):
    with app.app_context():
        assert authorize({"email": "nobody@nextmail.com", "password": "123456"}) is None


# ---------- authenticate (form action) ----------
def test_authenticate_success_signs_in(app):
    with app.test_request_context("/auth/login", method="POST"):
        from flask import session

        assert authenticate({"email": "user@nextmail.com", "password": "123456"}) is None
        assert session["user_id"] == "user-1"


@pytest.mark.parametrize(
    "credentials",
    [
        {"email": "user@nextmail.com", "password": "wrong-password"},
        {"email": "nobody@nextmail.com", "password": "123456"},
        {"email": "a@b.com", "password": "short"},
    ],
)
def test_declines_share_one_message(app, credentials):
    with app.test_request_context("/auth/login", method="POST"):
        from flask import session

        assert authenticate(credentials) == "Invalid credentials."
        assert "user_id" not in session


def test_store_failure_is_something_went_wrong(app, monkeypatch):
    def _broken(email):
        raise PersistenceError("connection refused")

    monkeypatch.setattr(auth, "get_user", _broken)
    with app.test_request_context("/auth/login", method="POST"):
        assert authenticate({"email": "user@nextmail.com", "password": "123456"}) == "Something went wrong."


def test_unclassified_errors_propagate(app, monkeypatch):
    def _broken(email):
        raise ValueError("boom")

    monkeypatch.setattr(auth, "get_user", _broken)
    with app.test_request_context("/auth/login", method="POST"):
        with pytest.raises(ValueError):
            authenticate({"email": "user@nextmail.com", "password": "123456"})


def test_every_error_kind_has_a_message():
    for kind in AuthErrorKind:
        assert auth_error_message(AuthError(kind))
    assert auth_error_message(AuthError(AuthErrorKind.CREDENTIALS_SIGNIN)) == "Invalid credentials."
    assert auth_error_message(AuthError(AuthErrorKind.CALLBACK)) == "Something went wrong."


# ---------- routes ----------
def test_login_failure_flashes_and_redirects(app):
    client = app.test_client()
    r = client.post("/auth/login", data={"email": "user@nextmail.com", "password": "wrong-password"})
    assert r.status_code == 302
    assert "/auth/login" in r.headers["Location"]

    r = client.get("/auth/login")
    assert r.status_code == 200
    assert r.json["messages"] == [{"category": "danger", "message": "Invalid credentials."}]
    assert r.json["csrf_token"]

    r = client.get("/dashboard")
    assert r.status_code == 302


def test_login_honors_local_redirect_only(app):
    client = app.test_client()
    r = client.post(
        "/auth/login",
        data={"email": "user@nextmail.com", "password": "123456", "redirectTo": "/dashboard/customers"},
    )
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/dashboard/customers")

    client = app.test_client()
    r = client.post(
        "/auth/login",
        data={"email": "user@nextmail.com", "password": "123456", "redirectTo": "//evil.example.com/"},
    )
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/dashboard")


def test_protected_route_sends_next_to_login(app):
    r = app.test_client().get("/dashboard/invoices?query=amy")
    assert r.status_code == 302
    assert "next=" in r.headers["Location"]


def test_signed_in_user_skips_login_page_and_can_logout(app):
    client = app.test_client()
    client.post("/auth/login", data={"email": "user@nextmail.com", "password": "123456"})

    r = client.get("/auth/login")
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/dashboard")

    r = client.post("/auth/logout")
    assert r.status_code == 302

    r = client.get("/dashboard")
    assert r.status_code == 302
    assert "/auth/login" in r.headers["Location"]


def test_session_for_deleted_user_is_cleared(app):
    client = app.test_client()
    client.post("/auth/login", data={"email": "user@nextmail.com", "password": "123456"})

    with session_scope(app) as s:
        s.delete(s.get(User, "user-1"))

    r = client.get("/dashboard")
    assert r.status_code == 302
    with client.session_transaction() as sess:
        assert "user_id" not in sess
