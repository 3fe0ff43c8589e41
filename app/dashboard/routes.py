from flask import Blueprint, redirect

from app.dashboard.constants import DASHBOARD_PATH

bp = Blueprint("routes", __name__)


@bp.get("/")
def index():
    return redirect(DASHBOARD_PATH)


@bp.get("/health")
def health():
    """Health check endpoint. Returns JSON."""
    return {"ok": True}


@bp.get("/healthz")
def healthz():
    """
    Fast health check for container probes. No DB access, minimal overhead.
    """
    return "ok", 200
