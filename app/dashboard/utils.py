from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

_CENT = Decimal("0.01")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s.]+$")


def to_decimal(raw: object) -> Decimal | None:
    """Coerce form input ("42.50", 42.5, 42) to Decimal. Returns None when it isn't a finite number."""
    if raw is None or isinstance(raw, bool):
        return None
    text = str(raw).strip()
    if not text:
        return None
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def dollars_to_cents(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def cents_to_dollars(cents: int) -> Decimal:
    return Decimal(int(cents)) / 100


def format_currency(cents: int | None) -> str:
    """
    Render integer cents as US dollars, e.g. 123456 -> "$1,234.56".
    None (an empty SUM) renders as "$0.00".
    """
    dollars = cents_to_dollars(cents or 0).quantize(_CENT, rounding=ROUND_HALF_UP)
    sign = "-" if dollars < 0 else ""
    return f"{sign}${abs(dollars):,.2f}"


def is_valid_email(value: str) -> bool:
    if not value or len(value) > 320:
        return False
    if ".." in value:
        return False
    return bool(_EMAIL_RE.match(value))


def is_local_path(nxt: str) -> bool:
    """Only allow local redirect targets (avoid open redirects)."""
    return nxt.startswith("/") and not nxt.startswith("//")


def parse_page(raw: str | None) -> int:
    try:
        page = int((raw or "").strip() or "1")
    except ValueError:
        return 1
    return max(page, 1)
