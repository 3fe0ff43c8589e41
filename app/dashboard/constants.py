"""
Central constants for the dashboard application.
"""
from __future__ import annotations

# Invoice statuses accepted by the form and persisted verbatim
INVOICE_STATUSES = ("pending", "paid")

# Invoices table page size
ITEMS_PER_PAGE = 6

# Rows shown in the "latest invoices" card
LATEST_INVOICES_LIMIT = 5

# Dashboard paths (cache keys and redirect targets)
DASHBOARD_PATH = "/dashboard"
INVOICES_PATH = "/dashboard/invoices"
CUSTOMERS_PATH = "/dashboard/customers"

# Credentials shape
MIN_PASSWORD_LENGTH = 6

# Largest invoice amount the cents column (32-bit INTEGER) can hold
MAX_AMOUNT_CENTS = 2_147_483_647
