from __future__ import annotations

from flask import Blueprint, abort, request

from app.dashboard.auth import login_required
from app.dashboard.data import fetch_customers, fetch_filtered_invoices, fetch_invoice_by_id, fetch_invoices_pages
from app.dashboard.modules.invoices import actions
from app.dashboard.modules.invoices.actions import FormState
from app.dashboard.security import ensure_csrf_token
from app.dashboard.utils import parse_page

bp = Blueprint("invoices", __name__)


def _form_state_response(state: FormState):
    # Field errors are the user's to fix; anything else is ours.
    return state.to_dict(), (422 if state.errors else 500)


# ---------- List ----------
@bp.get("/invoices")
@login_required
def invoices_list():
    query = (request.args.get("query") or "").strip()
    page = parse_page(request.args.get("page"))

    return {
        "query": query,
        "page": page,
        "invoices": fetch_filtered_invoices(query, page),
        "total_pages": fetch_invoices_pages(query),
        "csrf_token": ensure_csrf_token(),
    }


# ---------- Create ----------
@bp.get("/invoices/create")
@login_required
def invoice_create_get():
    return {"customers": fetch_customers(), "csrf_token": ensure_csrf_token()}


@bp.post("/invoices/create")
@login_required
def invoice_create_post():
    # Redirects on success (raised from the action); only failures return here.
    state = actions.create_invoice(request.form)
    return _form_state_response(state)


# ---------- Edit ----------
@bp.get("/invoices/<invoice_id>/edit")
@login_required
def invoice_edit_get(invoice_id: str):
    invoice = fetch_invoice_by_id(invoice_id)
    if invoice is None:
        abort(404)
    return {"invoice": invoice, "customers": fetch_customers(), "csrf_token": ensure_csrf_token()}


@bp.post("/invoices/<invoice_id>/edit")
@login_required
def invoice_edit_post(invoice_id: str):
    state = actions.update_invoice(invoice_id, request.form)
    return _form_state_response(state)


# ---------- Delete ----------
@bp.post("/invoices/<invoice_id>/delete")
@login_required
def invoice_delete_post(invoice_id: str):
    state = actions.delete_invoice(invoice_id)
    if state is not None:
        return _form_state_response(state)
    return {"ok": True}
