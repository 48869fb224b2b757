#!/usr/bin/env python3
"""Tests for display formatting helpers."""

from ledger.formatters import (
    format_change,
    format_consumption,
    format_currency,
    format_km,
    format_liters,
    truncate,
)


class TestFormatCurrency:
    """Tests for format_currency."""

    def test_formats_number(self):
        assert format_currency(75.5) == "$75.50"
        assert format_currency(0) == "$0.00"
        assert format_currency(1234567.891) == "$1,234,567.89"

    def test_none_returns_dash(self):
        assert format_currency(None) == "-"

    def test_non_numeric_returns_dash(self):
        assert format_currency("abc") == "-"
        assert format_currency(float("nan")) == "-"

    def test_rounds_half_up(self):
        assert format_currency(0.125) == "$0.13"
        assert format_currency(0.1 + 0.2) == "$0.30"

    def test_negative(self):
        assert format_currency(-1234.5) == "-$1,234.50"

    def test_pt_br(self):
        assert format_currency(1234.5, "pt-BR") == "R$ 1.234,50"

    def test_unknown_locale_uses_default(self):
        assert format_currency(10, "xx-XX") == "$10.00"


class TestFormatUnits:
    """Tests for km, liters and consumption formatting."""

    def test_format_km(self):
        assert format_km(12345) == "12,345 km"
        assert format_km(None) == "-"

    def test_format_liters(self):
        assert format_liters(40) == "40.00 L"
        assert format_liters(None) == "-"

    def test_format_consumption(self):
        assert format_consumption(20.0) == "20.0 km/l"
        assert format_consumption(12.345) == "12.3 km/l"

    def test_zero_consumption_is_not_available(self):
        assert format_consumption(0) == "N/A"
        assert format_consumption(None) == "N/A"


class TestFormatChange:
    """Tests for format_change."""

    def test_positive_has_plus(self):
        assert format_change(12.5) == "+12.5%"

    def test_zero(self):
        assert format_change(0) == "+0.0%"

    def test_negative(self):
        assert format_change(-33.3) == "-33.3%"


class TestTruncate:
    """Tests for truncate."""

    def test_short_text_unchanged(self):
        assert truncate("hello", 10) == "hello"

    def test_long_text_truncated(self):
        assert truncate("hello world this is long", 10) == "hello w..."

    def test_none_returns_dash(self):
        assert truncate(None) == "-"
