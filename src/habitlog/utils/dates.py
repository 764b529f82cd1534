"""Date utilities for habitlog"""

from datetime import date, datetime, timedelta
from typing import Optional, Tuple

import click
from dateutil import parser as date_parser


def parse_date(date_str: Optional[str], today: Optional[date] = None) -> Optional[date]:
    """Parse a date string into a date object.

    Supports: today, yesterday, tomorrow, +N, -N, YYYY-MM-DD, MM-DD and
    anything dateutil understands. Returns None when nothing matches.
    """
    today = today or date.today()
    if not date_str:
        return today

    date_str = date_str.strip().lower()

    if date_str in ("today", "now", "t"):
        return today
    if date_str in ("yesterday", "y"):
        return today - timedelta(days=1)
    if date_str in ("tomorrow", "tom"):
        return today + timedelta(days=1)

    # Relative days: +N, -N
    if date_str.startswith("+") or date_str.startswith("-"):
        try:
            return today + timedelta(days=int(date_str))
        except ValueError:
            pass

    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError:
        pass

    # MM-DD (assume current year)
    try:
        parsed = datetime.strptime(date_str, "%m-%d")
        return parsed.replace(year=today.year).date()
    except ValueError:
        pass

    try:
        return date_parser.parse(date_str, default=datetime.combine(today, datetime.min.time())).date()
    except (ValueError, OverflowError):
        return None


def parse_date_arg(date_arg: Optional[str]) -> date:
    """Parse a CLI date argument.

    Raises:
        click.BadParameter: If the date can't be parsed
    """
    parsed = parse_date(date_arg)
    if parsed is None:
        raise click.BadParameter(f"Invalid date format: {date_arg}")
    return parsed


def parse_month(month_arg: Optional[str], today: Optional[date] = None) -> Tuple[int, int]:
    """Parse YYYY-MM into (year, month), defaulting to the current month."""
    today = today or date.today()
    if not month_arg:
        return today.year, today.month
    try:
        parsed = datetime.strptime(month_arg, "%Y-%m")
    except ValueError:
        raise click.BadParameter(f"Invalid month format: {month_arg} (use YYYY-MM)")
    return parsed.year, parsed.month
