"""Utility functions for habitlog"""

from .dates import parse_date, parse_date_arg, parse_month

__all__ = [
    "parse_date",
    "parse_date_arg",
    "parse_month",
]
