from __future__ import annotations

from flask import Blueprint, request

from app.dashboard.auth import login_required
from app.dashboard.data import fetch_filtered_customers

bp = Blueprint("customers", __name__)


@bp.get("/customers")
@login_required
def customers_list():
    query = (request.args.get("query") or "").strip()
    return {"query": query, "customers": fetch_filtered_customers(query)}
