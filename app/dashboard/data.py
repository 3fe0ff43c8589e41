"""
Read paths used by the dashboard views.

Each fetch_* wraps one repository call: a PersistenceError is logged here with
its cause and replaced by a DataError whose message is safe to show.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from collections.abc import Generator
from typing import Any

from app.dashboard.db import PersistenceError
from app.dashboard.modules.customers import repository as customers
from app.dashboard.modules.invoices import repository as invoices
from app.dashboard.modules.invoices.repository import CardTotals
from app.dashboard.modules.overview import service as overview

logger = logging.getLogger(__name__)


class DataError(RuntimeError):
    pass


@contextmanager
def _guard(message: str) -> Generator[None, None, None]:
    try:
        yield
    except PersistenceError as e:
        logger.exception("Database Error: %s", message)
        raise DataError(message) from e


def fetch_revenue() -> list[dict[str, Any]]:
    with _guard("Failed to fetch revenue data."):
        return overview.fetch_revenue()


def fetch_latest_invoices() -> list[dict[str, Any]]:
    with _guard("Failed to fetch the latest invoices."):
        return invoices.latest_invoices()


def fetch_card_data() -> CardTotals:
    with _guard("Failed to fetch card data."):
        return invoices.fetch_card_totals()


def fetch_filtered_invoices(query: str, page: int) -> list[dict[str, Any]]:
    with _guard("Failed to fetch invoices."):
        return invoices.list_filtered_invoices(query, page)


def fetch_invoices_pages(query: str) -> int:
    with _guard("Failed to fetch total number of invoices."):
        return invoices.count_invoice_pages(query)


def fetch_invoice_by_id(invoice_id: str) -> dict[str, Any] | None:
    with _guard("Failed to fetch invoice."):
        return invoices.get_invoice_by_id(invoice_id)


def fetch_customers() -> list[dict[str, str]]:
    with _guard("Failed to fetch all customers."):
        return customers.list_customers()


def fetch_filtered_customers(query: str) -> list[dict[str, Any]]:
    with _guard("Failed to fetch customer table."):
        return customers.list_filtered_customers(query)
