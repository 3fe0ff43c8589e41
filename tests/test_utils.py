"""Unit tests for money formatting, coercion helpers and the revenue chart axis."""
from decimal import Decimal

import pytest

from app.dashboard.config import load_settings
from app.dashboard.modules.overview.service import revenue_chart_axis
from app.dashboard.utils import (
    cents_to_dollars,
    dollars_to_cents,
    format_currency,
    is_local_path,
    is_valid_email,
    parse_page,
    to_decimal,
)


class TestFormatCurrency:
    def test_formats_cents_as_dollars(self):
        assert format_currency(123456) == "$1,234.56"
        assert format_currency(4250) == "$42.50"
        assert format_currency(1) == "$0.01"
        assert format_currency(100000000) == "$1,000,000.00"

    def test_empty_sum_is_zero(self):
        assert format_currency(0) == "$0.00"
        assert format_currency(None) == "$0.00"

    def test_negative(self):
        assert format_currency(-250) == "-$2.50"


class TestCentsConversion:
    @pytest.mark.parametrize(
        "dollars, cents",
        [
            ("42.50", 4250),
            ("0.01", 1),
            ("0.005", 1),  # half up
            ("0.004", 0),
            ("19.999", 2000),
            ("1234567.89", 123456789),
        ],
    )
    def test_dollars_to_cents(self, dollars, cents):
        assert dollars_to_cents(Decimal(dollars)) == cents

    def test_cents_to_dollars_is_exact(self):
        assert cents_to_dollars(4250) == Decimal("42.5")
        assert cents_to_dollars(1) == Decimal("0.01")
        assert dollars_to_cents(cents_to_dollars(987654)) == 987654


class TestToDecimal:
    @pytest.mark.parametrize("raw", [None, "", "  ", "abc", "1,000", "NaN", "Infinity", "-inf", True, False])
    def test_rejects(self, raw):
        assert to_decimal(raw) is None

    @pytest.mark.parametrize("raw, expected", [("42.50", Decimal("42.50")), (" 7 ", Decimal("7")), ("1e3", Decimal("1000")), (3, Decimal("3"))])
    def test_accepts(self, raw, expected):
        assert to_decimal(raw) == expected


class TestEmailAndPaths:
    @pytest.mark.parametrize("email", ["a@b.com", "user@nextmail.com", "first.last+tag@sub.example.org"])
    def test_valid_emails(self, email):
        assert is_valid_email(email)

    @pytest.mark.parametrize("email", ["", "plain", "a@b", "a@@b.com", "a b@c.com", "a@b..com", "@b.com", "a@b.com."])
    def test_invalid_emails(self, email):
        assert not is_valid_email(email)

    def test_local_paths(self):
        assert is_local_path("/dashboard")
        assert not is_local_path("//evil.example.com")
        assert not is_local_path("https://evil.example.com")
        assert not is_local_path("")

    @pytest.mark.parametrize("raw, page", [(None, 1), ("", 1), ("3", 3), ("0", 1), ("-2", 1), ("x", 1)])
    def test_parse_page(self, raw, page):
        assert parse_page(raw) == page


class TestRevenueAxis:
    def test_rounds_top_up_to_next_thousand(self):
        labels, top = revenue_chart_axis([{"month": "Jan", "revenue": 2000}, {"month": "Dec", "revenue": 4800}])
        assert top == 5000
        assert labels == ["$5K", "$4K", "$3K", "$2K", "$1K", "$0"]

    def test_exact_thousand(self):
        labels, top = revenue_chart_axis([{"month": "Jan", "revenue": 3000}])
        assert top == 3000
        assert labels == ["$3K", "$2K", "$1K", "$0"]

    def test_empty(self):
        assert revenue_chart_axis([]) == (["$0"], 0)


class TestSettings:
    def test_postgres_urls_use_psycopg(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgres://u:p@db:5432/app")
        assert load_settings().database_url == "postgresql+psycopg://u:p@db:5432/app"

    def test_defaults(self, monkeypatch):
        for k in ("DATABASE_URL", "SECRET_KEY", "ENV", "LOG_LEVEL"):
            monkeypatch.delenv(k, raising=False)
        s = load_settings()
        assert s.database_url == "sqlite:///dashboard.db"
        assert s.env == "development"
        assert s.log_level == "INFO"
