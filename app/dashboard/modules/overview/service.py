from __future__ import annotations

import math
from typing import Any

from sqlalchemy import select

from app.dashboard.db import session_scope
from app.dashboard.models import Revenue


def fetch_revenue() -> list[dict[str, Any]]:
    with session_scope() as s:
        rows = s.execute(select(Revenue.month, Revenue.revenue).order_by(Revenue.id.asc())).all()
    return [{"month": r.month, "revenue": r.revenue} for r in rows]


def revenue_chart_axis(revenue: list[dict[str, Any]]) -> tuple[list[str], int]:
    """
    Y-axis labels for the revenue chart, top to bottom, in $1K steps.
    The top label is the highest month rounded up to the next thousand.
    """
    highest = max((int(r["revenue"]) for r in revenue), default=0)
    top = math.ceil(highest / 1000) * 1000
    labels = [f"${step // 1000}K" for step in range(top, 0, -1000)]
    labels.append("$0")
    return labels, top
