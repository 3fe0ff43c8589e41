from __future__ import annotations

from typing import Any

from sqlalchemy import case, func, or_, select

from app.dashboard.db import session_scope
from app.dashboard.modules.customers.models import Customer
from app.dashboard.modules.invoices.models import Invoice
from app.dashboard.utils import format_currency


def list_customers() -> list[dict[str, str]]:
    """Id/name pairs for the invoice form's customer picker."""
    with session_scope() as s:
        rows = s.execute(select(Customer.id, Customer.name).order_by(Customer.name.asc())).all()
    return [{"id": r.id, "name": r.name} for r in rows]


def list_filtered_customers(query: str) -> list[dict[str, Any]]:
    like = f"%{query}%"
    stmt = (
        select(
            Customer.id,
            Customer.name,
            Customer.email,
            Customer.image_url,
            func.count(Invoice.id).label("total_invoices"),
            func.coalesce(func.sum(case((Invoice.status == "pending", Invoice.amount), else_=0)), 0).label("total_pending"),
            func.coalesce(func.sum(case((Invoice.status == "paid", Invoice.amount), else_=0)), 0).label("total_paid"),
        )
        .outerjoin(Invoice, Customer.id == Invoice.customer_id)
        .where(or_(Customer.name.ilike(like), Customer.email.ilike(like)))
        .group_by(Customer.id, Customer.name, Customer.email, Customer.image_url)
        .order_by(Customer.name.asc())
    )
    with session_scope() as s:
        rows = s.execute(stmt).all()
    return [
        {
            "id": r.id,
            "name": r.name,
            "email": r.email,
            "image_url": r.image_url,
            "total_invoices": int(r.total_invoices),
            "total_pending": format_currency(int(r.total_pending)),
            "total_paid": format_currency(int(r.total_paid)),
        }
        for r in rows
    ]
