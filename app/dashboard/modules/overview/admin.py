from __future__ import annotations

from dataclasses import asdict

from flask import Blueprint

from app.dashboard.auth import login_required
from app.dashboard.data import fetch_card_data, fetch_latest_invoices, fetch_revenue
from app.dashboard.modules.overview.service import revenue_chart_axis

bp = Blueprint("overview", __name__)


@bp.get("")
@login_required
def index():
    revenue = fetch_revenue()
    y_axis_labels, top_label = revenue_chart_axis(revenue)
    return {
        "cards": asdict(fetch_card_data()),
        "revenue": revenue,
        "revenue_axis": {"labels": y_axis_labels, "top": top_label},
        "latest_invoices": fetch_latest_invoices(),
    }
