"""Tests for date parsing utilities."""

from datetime import date

import click
import pytest

from habitlog.utils.dates import parse_date, parse_date_arg, parse_month

TODAY = date(2025, 1, 15)


class TestParseDate:
    """Tests for parse_date."""

    def test_empty_is_today(self):
        """None and empty strings mean today."""
        assert parse_date(None, TODAY) == TODAY
        assert parse_date("", TODAY) == TODAY

    @pytest.mark.parametrize("text,expected", [
        ("today", date(2025, 1, 15)),
        ("yesterday", date(2025, 1, 14)),
        ("y", date(2025, 1, 14)),
        ("tomorrow", date(2025, 1, 16)),
        ("+3", date(2025, 1, 18)),
        ("-20", date(2024, 12, 26)),
        ("2024-02-29", date(2024, 2, 29)),
        ("03-01", date(2025, 3, 1)),
    ])
    def test_formats(self, text, expected):
        """Keywords, offsets and ISO dates."""
        assert parse_date(text, TODAY) == expected

    def test_natural_language(self):
        """Falls back to dateutil."""
        assert parse_date("March 3 2024", TODAY) == date(2024, 3, 3)

    def test_invalid(self):
        """Garbage returns None."""
        assert parse_date("not a date", TODAY) is None


class TestParseArgs:
    """Tests for CLI argument parsing."""

    def test_parse_date_arg_invalid(self):
        """Invalid dates raise BadParameter."""
        with pytest.raises(click.BadParameter):
            parse_date_arg("not a date")

    def test_parse_month(self):
        """YYYY-MM gives year and month."""
        assert parse_month("2024-02", TODAY) == (2024, 2)

    def test_parse_month_default(self):
        """No argument is the current month."""
        assert parse_month(None, TODAY) == (2025, 1)

    def test_parse_month_invalid(self):
        """Bad months raise BadParameter."""
        with pytest.raises(click.BadParameter):
            parse_month("2024/02")
