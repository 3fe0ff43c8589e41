"""
Invoice form actions: validate -> persist -> revalidate cached views -> navigate.

create/update end with navigate(), which raises; a returned FormState always
means the action did NOT complete and carries what to show the user.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone

from app.dashboard.constants import INVOICES_PATH
from app.dashboard.db import PersistenceError
from app.dashboard.modules.invoices import repository
from app.dashboard.modules.invoices.validation import validate_invoice_payload
from app.dashboard.signals import navigate, revalidate_path
from app.dashboard.utils import dollars_to_cents

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormState:
    message: str
    errors: dict[str, list[str]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"message": self.message, "errors": self.errors}


def _form_fields(form: Mapping[str, object]) -> dict[str, object]:
    # date is server-owned; never read it from the form.
    return {
        "customerId": form.get("customerId"),
        "amount": form.get("amount"),
        "status": form.get("status"),
    }


def create_invoice(form: Mapping[str, object]) -> FormState:
    fields, errors = validate_invoice_payload(_form_fields(form))
    if fields is None:
        return FormState(message="Missing Fields. Failed to Create Invoice.", errors=errors)

    amount_cents = dollars_to_cents(fields.amount)
    invoice_date = datetime.now(timezone.utc).date()

    try:
        repository.create_invoice(
            customer_id=fields.customer_id,
            amount_cents=amount_cents,
            status=fields.status,
            invoice_date=invoice_date,
        )
    except PersistenceError:
        logger.exception("Failed to create invoice (customer_id=%s)", fields.customer_id)
        return FormState(message="Database Error: Failed to Create Invoice.")

    revalidate_path(INVOICES_PATH)
    navigate(INVOICES_PATH)


def update_invoice(invoice_id: str, form: Mapping[str, object]) -> FormState:
    fields, errors = validate_invoice_payload(_form_fields(form))
    if fields is None:
        return FormState(message="Missing Fields. Failed to Update Invoice.", errors=errors)

    try:
        repository.update_invoice(
            invoice_id,
            customer_id=fields.customer_id,
            amount_cents=dollars_to_cents(fields.amount),
            status=fields.status,
        )
    except PersistenceError:
        logger.exception("Failed to update invoice id=%s", invoice_id)
        return FormState(message="Database Error: Failed to Update Invoice.")

    revalidate_path(INVOICES_PATH)
    navigate(INVOICES_PATH)


def delete_invoice(invoice_id: str) -> FormState | None:
    try:
        repository.delete_invoice(invoice_id)
    except PersistenceError:
        logger.exception("Failed to delete invoice id=%s", invoice_id)
        return FormState(message="Database Error: Failed to Delete Invoice.")

    revalidate_path(INVOICES_PATH)
    return None
