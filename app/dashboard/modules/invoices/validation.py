from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal

from app.dashboard.constants import INVOICE_STATUSES, MAX_AMOUNT_CENTS
from app.dashboard.utils import cents_to_dollars, dollars_to_cents, to_decimal

CUSTOMER_MESSAGE = "Please select a customer."
AMOUNT_MESSAGE = "Please enter an amount greater than $0."
STATUS_MESSAGE = "Please select an invoice status."

_MAX_AMOUNT = cents_to_dollars(MAX_AMOUNT_CENTS)


@dataclass(frozen=True)
class InvoiceFields:
    customer_id: str
    amount: Decimal  # dollars; converted to cents by the caller
    status: str


def _non_empty_str(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def validate_invoice_payload(
    payload: Mapping[str, object],
    *,
    full: bool = False,
) -> tuple[InvoiceFields | None, dict[str, list[str]]]:
    """
    Check raw form fields (customerId, amount, status; plus id and date when full=True).

    Bad input is an expected outcome, not an exception: returns (None, errors) where
    errors maps each failing field to its messages, or (fields, {}) on success.
    """
    errors: dict[str, list[str]] = {}

    customer_id = _non_empty_str(payload.get("customerId"))
    if customer_id is None:
        errors.setdefault("customerId", []).append(CUSTOMER_MESSAGE)

    amount = to_decimal(payload.get("amount"))
    # Must be a whole cent or more once rounded, and fit the cents column.
    if amount is None or amount <= 0 or amount > _MAX_AMOUNT or dollars_to_cents(amount) < 1:
        errors.setdefault("amount", []).append(AMOUNT_MESSAGE)

    status = payload.get("status")
    if not isinstance(status, str) or status not in INVOICE_STATUSES:
        errors.setdefault("status", []).append(STATUS_MESSAGE)

    if full:
        if _non_empty_str(payload.get("id")) is None:
            errors.setdefault("id", []).append("Invoice id is required.")
        if _non_empty_str(payload.get("date")) is None:
            errors.setdefault("date", []).append("Invoice date is required.")

    if errors:
        return None, errors
    return InvoiceFields(customer_id=customer_id, amount=amount, status=status), {}  # type: ignore[arg-type]
