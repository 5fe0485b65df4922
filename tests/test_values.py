"""
Tests for the tolerant cell value parsers.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from trade_import.data.values import (
    clean_symbol,
    normalize_text,
    parse_csv_line,
    parse_date,
    parse_number,
    split_lines,
)


class TestSplitLines:
    """Tests for line splitting."""

    def test_mixed_line_endings(self):
        assert split_lines("a\r\nb\nc\rd") == ["a", "b", "c", "d"]

    def test_blank_lines_dropped(self):
        assert split_lines("a\n\n   \nb\n") == ["a", "b"]

    def test_byte_order_mark_removed(self):
        lines = split_lines("\ufeffAction,Ticker\nbuy,AAPL")
        assert lines[0] == "Action,Ticker"


class TestParseCsvLine:
    """Tests for the quote-aware tokenizer."""

    def test_plain_fields_are_trimmed(self):
        assert parse_csv_line(" a , b ,c") == ["a", "b", "c"]

    def test_comma_inside_quotes(self):
        assert parse_csv_line('AAPL,"2024-01-15, 10:30:00",10') == [
            "AAPL", "2024-01-15, 10:30:00", "10",
        ]

    def test_escaped_quote(self):
        assert parse_csv_line('"He said ""buy""",x') == ['He said "buy"', "x"]

    def test_trailing_empty_field(self):
        assert parse_csv_line("a,b,") == ["a", "b", ""]


class TestParseNumber:
    """Tests for locale-tolerant number parsing."""

    def test_plain_decimal(self):
        assert parse_number("150.25") == Decimal("150.25")

    def test_precision_preserved(self):
        assert parse_number("0.123456789") == Decimal("0.123456789")

    def test_thousands_separator(self):
        assert parse_number("1,234.56") == Decimal("1234.56")

    def test_european_format(self):
        assert parse_number("1.234,56") == Decimal("1234.56")

    def test_european_single_decimal(self):
        assert parse_number("12,5") == Decimal("12.5")

    def test_parenthesized_negative(self):
        assert parse_number("(100.00)") == Decimal("-100.00")

    def test_parenthesized_european_negative(self):
        assert parse_number("(1.234,56)") == Decimal("-1234.56")

    def test_currency_symbols_and_spaces(self):
        assert parse_number("$ 1,500.00") == Decimal("1500.00")
        assert parse_number("€12,50") == Decimal("12.50")

    def test_negative_sign(self):
        assert parse_number("-5") == Decimal("-5")

    def test_zero_is_not_none(self):
        assert parse_number("0") == Decimal("0")

    @pytest.mark.parametrize("value", [None, "", "   ", "-", "abc", "NaN", "inf"])
    def test_unparsable_returns_none(self, value):
        assert parse_number(value) is None


class TestParseDate:
    """Tests for multi-format date parsing."""

    def test_iso_date(self):
        assert parse_date("2024-01-15") == datetime(2024, 1, 15)

    def test_iso_datetime(self):
        assert parse_date("2024-01-15 14:30:05") == datetime(2024, 1, 15, 14, 30, 5)

    def test_iso_utc_is_made_naive(self):
        assert parse_date("2024-01-15T14:30:00Z") == datetime(2024, 1, 15, 14, 30)

    def test_offset_converted_to_utc(self):
        assert parse_date("2024-01-15T16:30:00+02:00") == datetime(2024, 1, 15, 14, 30)

    def test_day_month_year(self):
        assert parse_date("15/01/2024") == datetime(2024, 1, 15)
        assert parse_date("15.01.2024") == datetime(2024, 1, 15)

    def test_day_month_year_with_time(self):
        assert parse_date("15/01/2024 09:05") == datetime(2024, 1, 15, 9, 5)

    def test_year_month_day_slashes(self):
        assert parse_date("2024/01/15") == datetime(2024, 1, 15)

    def test_ibkr_comma_time(self):
        assert parse_date("2024-01-15, 10:30:00") == datetime(2024, 1, 15, 10, 30)

    def test_textual_month(self):
        assert parse_date("Sep 3, 2025") == datetime(2025, 9, 3)
        assert parse_date("3 September 2025") == datetime(2025, 9, 3)

    def test_fallback_to_now(self, fixed_now):
        assert parse_date("not a date", now=fixed_now) == fixed_now
        assert parse_date("", now=fixed_now) == fixed_now
        assert parse_date(None, now=fixed_now) == fixed_now

    def test_impossible_calendar_date_falls_back(self, fixed_now):
        assert parse_date("31/02/2024", now=fixed_now) == fixed_now

    def test_month_day_year_when_day_first_impossible(self, fixed_now):
        assert parse_date("01/15/2024", now=fixed_now) == datetime(2024, 1, 15)
        assert parse_date("12/31/2024 16:00", now=fixed_now) == datetime(2024, 12, 31, 16, 0)

    def test_ambiguous_slash_date_is_day_first(self):
        assert parse_date("03/04/2024") == datetime(2024, 4, 3)


class TestCleanSymbol:
    """Tests for symbol cleanup."""

    def test_uppercases(self):
        assert clean_symbol(" aapl ") == "AAPL"

    def test_strips_legal_suffix(self):
        assert clean_symbol("Apple Inc.") == "APPLE"
        assert clean_symbol("Microsoft Corp") == "MICROSOFT"
        assert clean_symbol("Vodafone Group PLC") == "VODAFONE GROUP"

    def test_strips_suffix_after_comma(self):
        assert clean_symbol("Tesla, Inc.") == "TESLA"

    def test_strips_class_suffix(self):
        assert clean_symbol("Berkshire Hathaway Class B") == "BERKSHIRE HATHAWAY"

    def test_strips_exchange_prefix(self):
        assert clean_symbol("NASDAQ:AAPL") == "AAPL"
        assert clean_symbol("lse:vod") == "VOD"

    def test_suffix_requires_separator(self):
        assert clean_symbol("COINC") == "COINC"

    def test_empty(self):
        assert clean_symbol(None) == ""
        assert clean_symbol("") == ""


def test_normalize_text():
    assert normalize_text("  No.  of   Shares ") == "no. of shares"
