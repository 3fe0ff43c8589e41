"""
Invoice persistence.

Every function here is one round trip on its own pooled session (session_scope):
committed on success, rolled back and released on failure. Database failures
surface as PersistenceError; callers decide what to log and what to show.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Any

from sqlalchemy import String, case, cast, delete, func, or_, select, update

from app.dashboard.constants import ITEMS_PER_PAGE, LATEST_INVOICES_LIMIT
from app.dashboard.db import session_scope
from app.dashboard.modules.customers.models import Customer
from app.dashboard.modules.invoices.models import Invoice
from app.dashboard.utils import cents_to_dollars, format_currency

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CardTotals:
    number_of_invoices: int
    number_of_customers: int
    total_paid_invoices: str
    total_pending_invoices: str


def _matches(query: str):
    """Case-insensitive substring match on any of the five searchable columns."""
    like = f"%{query}%"
    return or_(
        Customer.name.ilike(like),
        Customer.email.ilike(like),
        cast(Invoice.amount, String).ilike(like),
        cast(Invoice.date, String).ilike(like),
        Invoice.status.ilike(like),
    )


def create_invoice(*, customer_id: str, amount_cents: int, status: str, invoice_date: date) -> str:
    with session_scope() as s:
        inv = Invoice(customer_id=customer_id, amount=amount_cents, status=status, date=invoice_date)
        s.add(inv)
        s.flush()
        logger.info("Invoice created id=%s customer_id=%s", inv.id, customer_id)
        return inv.id


def update_invoice(invoice_id: str, *, customer_id: str, amount_cents: int, status: str) -> None:
    # Single UPDATE; an unknown id simply matches no rows.
    with session_scope() as s:
        s.execute(
            update(Invoice)
            .where(Invoice.id == invoice_id)
            .values(customer_id=customer_id, amount=amount_cents, status=status)
        )


def delete_invoice(invoice_id: str) -> None:
    with session_scope() as s:
        s.execute(delete(Invoice).where(Invoice.id == invoice_id))


def get_invoice_by_id(invoice_id: str) -> dict[str, Any] | None:
    with session_scope() as s:
        row = s.execute(
            select(Invoice.id, Invoice.customer_id, Invoice.amount, Invoice.status).where(Invoice.id == invoice_id)
        ).one_or_none()
    if row is None:
        return None
    return {
        "id": row.id,
        "customer_id": row.customer_id,
        "amount": cents_to_dollars(row.amount),
        "status": row.status,
    }


def list_filtered_invoices(query: str, page: int) -> list[dict[str, Any]]:
    offset = (max(page, 1) - 1) * ITEMS_PER_PAGE
    stmt = (
        select(
            Invoice.id,
            Invoice.amount,
            Invoice.date,
            Invoice.status,
            Customer.name,
            Customer.email,
            Customer.image_url,
        )
        .join(Customer, Invoice.customer_id == Customer.id)
        .where(_matches(query))
        .order_by(Invoice.date.desc())
        .limit(ITEMS_PER_PAGE)
        .offset(offset)
    )
    with session_scope() as s:
        rows = s.execute(stmt).all()
    return [
        {
            "id": r.id,
            "amount": r.amount,
            "date": r.date.isoformat(),
            "status": r.status,
            "name": r.name,
            "email": r.email,
            "image_url": r.image_url,
        }
        for r in rows
    ]


def count_invoice_pages(query: str) -> int:
    stmt = (
        select(func.count(Invoice.id))
        .select_from(Invoice)
        .join(Customer, Invoice.customer_id == Customer.id)
        .where(_matches(query))
    )
    with session_scope() as s:
        total = s.execute(stmt).scalar_one()
    return math.ceil(int(total) / ITEMS_PER_PAGE)


def fetch_card_totals() -> CardTotals:
    """
    Counts and status sums for the dashboard cards.
    One SELECT of scalar subqueries, so all four figures come from the same snapshot.
    """
    invoice_count = select(func.count(Invoice.id)).scalar_subquery()
    customer_count = select(func.count(Customer.id)).scalar_subquery()
    paid_sum = select(
        func.coalesce(func.sum(case((Invoice.status == "paid", Invoice.amount), else_=0)), 0)
    ).scalar_subquery()
    pending_sum = select(
        func.coalesce(func.sum(case((Invoice.status == "pending", Invoice.amount), else_=0)), 0)
    ).scalar_subquery()

    with session_scope() as s:
        row = s.execute(
            select(
                invoice_count.label("invoices"),
                customer_count.label("customers"),
                paid_sum.label("paid"),
                pending_sum.label("pending"),
            )
        ).one()
    return CardTotals(
        number_of_invoices=int(row.invoices or 0),
        number_of_customers=int(row.customers or 0),
        total_paid_invoices=format_currency(int(row.paid or 0)),
        total_pending_invoices=format_currency(int(row.pending or 0)),
    )


def latest_invoices(limit: int = LATEST_INVOICES_LIMIT) -> list[dict[str, Any]]:
    stmt = (
        select(Invoice.id, Invoice.amount, Customer.name, Customer.image_url, Customer.email)
        .join(Customer, Invoice.customer_id == Customer.id)
        .order_by(Invoice.date.desc())
        .limit(limit)
    )
    with session_scope() as s:
        rows = s.execute(stmt).all()
    return [
        {
            "id": r.id,
            "amount": format_currency(r.amount),
            "name": r.name,
            "image_url": r.image_url,
            "email": r.email,
        }
        for r in rows
    ]
