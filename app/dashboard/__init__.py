import logging
import os
from datetime import timedelta

from flask import Flask, g, request
from dotenv import load_dotenv

from app.dashboard.config import load_config
from app.dashboard.db import init_db
from app.dashboard.auth import bp as auth_bp, load_current_user
from app.dashboard.data import DataError
from app.dashboard.routes import bp as routes_bp
from app.dashboard.security import ensure_csrf_token, validate_csrf
from app.dashboard.modules.overview.admin import bp as overview_bp
from app.dashboard.modules.invoices.admin import bp as invoices_bp
from app.dashboard.modules.customers.admin import bp as customers_bp


def create_app() -> Flask:
    load_dotenv()
    app = Flask(__name__)
    app.config.from_mapping(load_config())
    app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(hours=8)
    app.config["SESSION_REFRESH_EACH_REQUEST"] = True
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # Production guardrails (fail fast with clear logs)
    env = (app.config.get("ENV") or "").strip().lower()
    if env in ("prod", "production"):
        if not app.config.get("DATABASE_URL") or str(app.config["DATABASE_URL"]).strip() == "":
            raise RuntimeError("DATABASE_URL is required in production.")
        if str(app.config["DATABASE_URL"]).startswith("sqlite"):
            raise RuntimeError("DATABASE_URL must be Postgres in production (not sqlite).")
        if not app.config.get("SECRET_KEY") or str(app.config["SECRET_KEY"]) in ("", "change-me"):
            raise RuntimeError("SECRET_KEY must be set to a strong value in production (not default).")

    init_db(app)

    def _dispose_engine_on_fork() -> None:
        if hasattr(os, "register_at_fork"):
            def _after_fork_child():
                engine = app.extensions.get("sqlalchemy_engine")
                if engine:
                    engine.dispose(close=False)
                    app.logger.info("Disposed DB engine after fork (pid=%s)", os.getpid())

            os.register_at_fork(after_in_child=_after_fork_child)

    _dispose_engine_on_fork()

    app.register_blueprint(routes_bp)
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(overview_bp, url_prefix="/dashboard")
    app.register_blueprint(invoices_bp, url_prefix="/dashboard")
    app.register_blueprint(customers_bp, url_prefix="/dashboard")

    @app.before_request
    def _load_user_wrapper():
        if request.path.startswith(("/static/", "/health", "/healthz")):
            g.current_user = None
            return None
        return load_current_user()

    @app.before_request
    def _csrf_guard():
        if request.path.startswith(("/static/", "/health", "/healthz")):
            return None
        ensure_csrf_token()
        if request.method in ("POST", "PUT", "PATCH", "DELETE"):
            # Login/logout are exempt
            if (request.endpoint or "").startswith("auth."):
                return None
            if not validate_csrf(request):
                return {"error": "CSRF token missing or invalid."}, 400
        return None

    @app.errorhandler(DataError)
    def _err_data(e: DataError):  # type: ignore[no-redef]
        # Message is already user-safe; the cause was logged where it was caught.
        return {"error": str(e)}, 500

    @app.errorhandler(404)
    def _err_404(e):  # type: ignore[no-redef]
        return {"error": "Not found."}, 404

    @app.errorhandler(500)
    def _err_500(e):  # type: ignore[no-redef]
        rid = getattr(g, "request_id", None)
        app.logger.exception("Unhandled 500 (request_id=%s)", rid)
        return {"error": "Something went wrong."}, 500

    logging.getLogger(__name__).info("create_app() complete; app ready to serve")

    return app
